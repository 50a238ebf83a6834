"""Read-only renderer strategy used for the review step."""

from contrato.editor.placeholders import escape_value, placeholder_label
from contrato.strategies.renderers.substitution import SubstitutionRenderer


class PreviewRenderer(SubstitutionRenderer):
    """Renders values as plain highlighted spans, without edit hooks."""

    def placeholder_html(self, variable: str, value: str, is_active: bool) -> str:
        if value.strip():
            return f'<span class="filled-variable">{escape_value(value)}</span>'
        return f'<span class="empty-variable">{escape_value(placeholder_label(variable))}</span>'
