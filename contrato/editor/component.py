"""Contract editor component.

Composes the inline edit surface with the pricing and completion
aggregates. All state it displays is owned by the host: FormData and the
capsule selection come in through ``update`` and go out through the
``on_form_change`` and ``on_capsule_selection_change`` callbacks.
"""

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from contrato.editor.aggregator import completion_percentage, format_price, missing_fields, total_price
from contrato.editor.models import Capsule, ClauseNumbering, SignerConfig
from contrato.editor.placeholders import filter_variables
from contrato.editor.surface import FormChangeCallback, InlineEditSurface
from contrato.editor.validators import validation_errors
from contrato.strategies.renderers.inline import InlineRenderer

logger = logging.getLogger(__name__)

SelectionChangeCallback = Callable[[list[int]], None]

_PROPS = (
    "template",
    "variables",
    "form_data",
    "capsules",
    "selected_capsule_ids",
    "base_price",
    "clause_numbering",
    "signers",
)


class ContractEditor:
    """The editing view of one contract."""

    def __init__(
        self,
        template: str,
        variables: Sequence[str],
        form_data: Mapping[str, str],
        on_form_change: FormChangeCallback,
        on_capsule_selection_change: SelectionChangeCallback,
        capsules: Sequence[Capsule] = (),
        selected_capsule_ids: Iterable[int] = (),
        base_price: float = 0,
        clause_numbering: Sequence[ClauseNumbering] = (),
        signers: Sequence[SignerConfig] = (),
        renderer: InlineRenderer | None = None,
    ) -> None:
        self.template = template
        self.variables = list(variables)
        self.form_data = dict(form_data)
        self.capsules = list(capsules)
        self.selected_capsule_ids = list(selected_capsule_ids)
        self.base_price = base_price
        self.clause_numbering = list(clause_numbering)
        self.signers = list(signers)
        self._on_capsule_selection_change = on_capsule_selection_change
        self._derived: dict[str, Any] = {}

        self.surface = InlineEditSurface(on_form_change=on_form_change, renderer=renderer)
        self._sync_surface()

    def update(self, **props: Any) -> bool:
        """Apply new props from the host.

        Returns:
            True if the editable tree was rebuilt.
        """
        unknown = set(props) - set(_PROPS)
        if unknown:
            raise TypeError(f"Unknown editor props: {sorted(unknown)}")

        for name, value in props.items():
            if name == "form_data":
                value = dict(value)
            elif name not in ("template", "base_price"):
                value = list(value)
            setattr(self, name, value)

        self._derived.clear()
        return self._sync_surface()

    def _sync_surface(self) -> bool:
        return self.surface.sync(
            self.template,
            self.variables,
            self.form_data,
            selected_capsule_ids=self.selected_capsule_ids,
            capsules=self.capsules,
            clause_numbering=self.clause_numbering,
            signers=self.signers,
        )

    def _memo(self, key: str, compute: Callable[[], Any]) -> Any:
        if key not in self._derived:
            self._derived[key] = compute()
        return self._derived[key]

    # =========================================================================
    # User actions
    # =========================================================================

    def toggle_capsule(self, capsule_id: int) -> list[int]:
        """Propose the selection with ``capsule_id`` flipped.

        Any field being edited is committed first, so the host has the
        latest FormData before the document is rebuilt.
        """
        self.surface.commit_active()

        if capsule_id in self.selected_capsule_ids:
            next_ids = [cid for cid in self.selected_capsule_ids if cid != capsule_id]
        else:
            next_ids = [*self.selected_capsule_ids, capsule_id]

        logger.info(f"Capsule {capsule_id} toggled; selection is now {next_ids}")
        self._on_capsule_selection_change(next_ids)
        return next_ids

    # =========================================================================
    # Derived values
    # =========================================================================

    @property
    def total_price(self) -> float:
        return self._memo(
            "total_price",
            lambda: total_price(self.base_price, self.capsules, self.selected_capsule_ids),
        )

    @property
    def formatted_total(self) -> str:
        return format_price(self.total_price)

    @property
    def completion_percentage(self) -> int:
        return self._memo(
            "completion_percentage",
            lambda: completion_percentage(self.variables, self.form_data),
        )

    @property
    def missing_fields(self) -> list[str]:
        return self._memo("missing_fields", lambda: missing_fields(self.variables, self.form_data))

    @property
    def validation_errors(self) -> dict[str, str]:
        return self._memo(
            "validation_errors",
            lambda: validation_errors(self.variables, self.form_data),
        )

    @property
    def has_validation_errors(self) -> bool:
        return bool(self.validation_errors)

    def search(self, term: str) -> list[str]:
        return filter_variables(self.variables, term)

    @property
    def html(self) -> str:
        return self.surface.to_html()

    @property
    def has_content(self) -> bool:
        return self.surface.has_content
