"""Editor session: the host side of one contract being edited.

The session owns FormData and the capsule selection, receives the editor's
proposed changes through callbacks, applies them, and only then pushes the
new state back into the editor. Drafts are auto-saved after each committed
change when a contract id and a store are configured.
"""

import logging
import uuid
from collections.abc import Iterable, Mapping
from typing import Any

from contrato.editor.autosave import AutoSaver
from contrato.editor.component import ContractEditor
from contrato.editor.models import TemplatePayload
from contrato.editor.placeholders import extract_variables, token_names
from contrato.editor.surface import PlaceholderNode
from contrato.interfaces.contract_store import BaseContractStore, DraftSaveResult
from contrato.strategies.renderers.inline import InlineRenderer

logger = logging.getLogger(__name__)


class EditorSession:
    """One editing session over a fetched template.

    Args:
        template: The template and its capsule catalog.
        contract_id: Backend contract id; enables draft saving.
        form_data: Initial FormData, e.g. a resumed draft.
        selected_capsule_ids: Initially selected capsules.
        store: Contract store used for draft saving.
        autosave_delay: Debounce delay for auto-save, in seconds.
        renderer: Renderer for the editable view.
    """

    def __init__(
        self,
        template: TemplatePayload,
        *,
        contract_id: str | None = None,
        form_data: Mapping[str, str] | None = None,
        selected_capsule_ids: Iterable[int] = (),
        store: BaseContractStore | None = None,
        autosave_delay: float = 3.0,
        renderer: InlineRenderer | None = None,
        session_id: str | None = None,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex
        self.template = template
        self.contract_id = contract_id
        self.form_data: dict[str, str] = dict(form_data or {})
        self.selected_capsule_ids: list[int] = list(dict.fromkeys(selected_capsule_ids))
        self._store = store

        self._autosaver: AutoSaver | None = None
        if store is not None and contract_id:
            self._autosaver = AutoSaver(store, delay=autosave_delay)
            self._autosaver.schedule(contract_id, self.form_data)

        self.editor = ContractEditor(
            template=template.template_content,
            variables=self.variables,
            form_data=self.form_data,
            on_form_change=self._handle_form_change,
            on_capsule_selection_change=self._handle_selection_change,
            capsules=template.capsules,
            selected_capsule_ids=self.selected_capsule_ids,
            base_price=template.base_price,
            clause_numbering=template.clause_numbering,
            signers=template.signers_config,
            renderer=renderer,
        )
        logger.info(
            f"Editor session {self.session_id} opened for template '{template.slug}' "
            f"({len(self.variables)} variables, {len(template.capsules)} capsules)"
        )

    # =========================================================================
    # State owned by the session
    # =========================================================================

    @property
    def variables(self) -> list[str]:
        """Variables of the template plus those of selected capsules' clause text."""
        variables = extract_variables(
            self.template.template_content,
            self.template.capsules,
            self.selected_capsule_ids,
        )
        selected = set(self.selected_capsule_ids)
        for capsule in self.template.capsules:
            if capsule.id not in selected or not capsule.legal_text:
                continue
            for name in token_names(capsule.legal_text):
                if name not in variables:
                    variables.append(name)
        return variables

    def _handle_form_change(self, next_form_data: dict[str, str]) -> None:
        self.form_data = dict(next_form_data)
        self.editor.update(form_data=self.form_data)
        if self._autosaver is not None:
            self._autosaver.schedule(self.contract_id, self.form_data)

    def _handle_selection_change(self, next_ids: list[int]) -> None:
        self.selected_capsule_ids = list(next_ids)
        self.editor.update(
            selected_capsule_ids=self.selected_capsule_ids,
            variables=self.variables,
        )

    # =========================================================================
    # User actions
    # =========================================================================

    def focus(self, node_id: str) -> PlaceholderNode:
        return self.editor.surface.focus(node_id)

    def input(self, node_id: str, text: str) -> PlaceholderNode:
        return self.editor.surface.input(node_id, text)

    def blur(self, node_id: str) -> PlaceholderNode:
        return self.editor.surface.blur(node_id)

    def toggle_capsule(self, capsule_id: int) -> list[int]:
        return self.editor.toggle_capsule(capsule_id)

    def can_continue_to_payment(self) -> bool:
        """All fields filled and valid, counting the field being edited."""
        self.editor.surface.commit_active()
        return not self.editor.missing_fields and not self.editor.has_validation_errors

    async def save(self) -> DraftSaveResult | None:
        """Commit the field being edited and save the draft immediately."""
        self.editor.surface.commit_active()
        if self._store is None or not self.contract_id:
            return None
        if self._autosaver is not None:
            self._autosaver.cancel()
        return await self._store.save_draft(self.contract_id, self.form_data)

    # =========================================================================
    # Views
    # =========================================================================

    @property
    def total_price(self) -> float:
        return self.editor.total_price

    @property
    def completion_percentage(self) -> int:
        return self.editor.completion_percentage

    def missing_fields(self) -> list[str]:
        return self.editor.missing_fields

    def state(self) -> dict[str, Any]:
        """Serializable snapshot of the session."""
        return {
            "session_id": self.session_id,
            "contract_id": self.contract_id,
            "html": self.editor.html,
            "has_content": self.editor.has_content,
            "read_only": self.editor.surface.is_read_only,
            "nodes": [node.to_dict() for node in self.editor.surface.nodes],
            "active_field": self.editor.surface.active_field,
            "variables": self.editor.variables,
            "form_data": dict(self.form_data),
            "selected_capsule_ids": list(self.selected_capsule_ids),
            "total_price": self.total_price,
            "formatted_total": self.editor.formatted_total,
            "completion_percentage": self.completion_percentage,
            "missing_fields": self.missing_fields(),
            "validation_errors": self.editor.validation_errors,
        }
