"""Abstract base class for contract rendering strategies.

The Strategy Pattern allows the editable view and the read-only
review view to share one substitution pipeline.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from contrato.editor.models import Capsule, ClauseNumbering, SignerConfig


@dataclass(frozen=True)
class RenderResult:
    """Output of a render pass.

    Attributes:
        html: The merged document. Empty when there is no content.
        has_content: False when the template was empty, so the host can
            show a "no content" state instead of a blank document.
    """

    html: str
    has_content: bool

    @classmethod
    def empty(cls) -> "RenderResult":
        return cls(html="", has_content=False)


class BaseTemplateRenderer(ABC):
    """Abstract base class for template rendering strategies.

    Example:
        ```python
        renderer = InlineRenderer()
        result = renderer.render(
            "Arrendador: {{ nombre_arrendador }}",
            ["nombre_arrendador"],
            {"nombre_arrendador": "Ana Pérez"},
        )
        ```
    """

    @abstractmethod
    def render(
        self,
        template: str,
        variables: Sequence[str],
        form_data: Mapping[str, str],
        active_field: str | None = None,
        selected_capsule_ids: Iterable[int] = (),
        capsules: Sequence[Capsule] = (),
        clause_numbering: Sequence[ClauseNumbering] = (),
        signers: Sequence[SignerConfig] = (),
    ) -> RenderResult:
        """Merge template, variable values and selected capsules into HTML.

        Args:
            template: Template text with ``{{ variable }}`` placeholders.
            variables: Variable names to substitute, in substitution order.
            form_data: Current variable values; missing keys count as empty.
            active_field: Variable currently focused for editing, if any.
            selected_capsule_ids: Ids of the selected optional clauses.
            capsules: The capsule catalog, in catalog order.
            clause_numbering: Optional numbered clause markers.
            signers: Optional signing parties for the signatures section.

        Returns:
            RenderResult with the merged HTML.
        """

    @abstractmethod
    def placeholder_html(self, variable: str, value: str, is_active: bool) -> str:
        """Return the markup that replaces one ``{{ variable }}`` token."""
