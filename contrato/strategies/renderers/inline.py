"""Editable renderer strategy.

Placeholders become ``contenteditable`` spans that the inline edit
surface binds to. Markup produced here is parsed back by ``PLACEHOLDER_RE``,
so the two must stay in step.
"""

import re

from contrato.editor.placeholders import escape_value, placeholder_label
from contrato.strategies.renderers.substitution import SubstitutionRenderer

FILLED_CLASS = "filled"
EMPTY_CLASS = "empty"
ACTIVE_CLASS = "active"

PLACEHOLDER_RE = re.compile(
    r'<span class="variable (?P<state>filled|empty)(?P<active> active)?" '
    r'data-variable="(?P<variable>[^"]*)" contenteditable="true">(?P<text>[^<]*)</span>'
)


def placeholder_span(variable: str, text: str, state: str, is_active: bool) -> str:
    """Serialize one editable placeholder."""
    classes = f"variable {state}"
    if is_active:
        classes += f" {ACTIVE_CLASS}"
    return (
        f'<span class="{classes}" data-variable="{escape_value(variable, quote=True)}" '
        f'contenteditable="true">{escape_value(text)}</span>'
    )


class InlineRenderer(SubstitutionRenderer):
    """Renders placeholders as editable spans with filled/empty/active classes."""

    def placeholder_html(self, variable: str, value: str, is_active: bool) -> str:
        if value.strip():
            return placeholder_span(variable, value, FILLED_CLASS, is_active)
        return placeholder_span(variable, placeholder_label(variable), EMPTY_CLASS, is_active)
