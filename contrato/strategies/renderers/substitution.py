"""Regex substitution pipeline shared by the renderer strategies."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from html import escape

from contrato.editor.models import Capsule, ClauseNumbering, SignerConfig
from contrato.editor.placeholders import (
    SIGNATURE_BLOCK_PATTERN,
    capsule_block_pattern,
    clause_numbers,
    numbering_pattern,
    placeholder_pattern,
)
from contrato.interfaces.renderer import BaseTemplateRenderer, RenderResult

logger = logging.getLogger(__name__)

DEFAULT_CLAUSES_HEADING = "CLÁUSULAS ADICIONALES"


class SubstitutionRenderer(BaseTemplateRenderer):
    """Renders templates by regex substitution, one variable at a time.

    Each variable in the list replaces all of its tokens before the next
    variable is processed. A name repeated later in the list finds nothing
    left to replace. Tokens for names not in the list are left verbatim.
    """

    def __init__(self, clauses_heading: str = DEFAULT_CLAUSES_HEADING) -> None:
        self._clauses_heading = clauses_heading

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
        if not template or not template.strip():
            return RenderResult.empty()

        selected = set(selected_capsule_ids)

        result = self._resolve_capsule_blocks(template, capsules, selected)
        result = self._apply_numbering(result, clause_numbering, capsules, selected)
        result = self.substitute(result, variables, form_data, active_field)
        result = SIGNATURE_BLOCK_PATTERN.sub("", result)

        if selected:
            result += self._clauses_section(capsules, selected, variables, form_data, active_field)
        if signers:
            result += self._signatures_section(signers, form_data, active_field)

        logger.debug(
            f"Rendered template ({len(template)} chars) with {len(variables)} variables "
            f"and {len(selected)} selected capsules"
        )
        return RenderResult(html=result, has_content=True)

    def substitute(
        self,
        text: str,
        variables: Sequence[str],
        form_data: Mapping[str, str],
        active_field: str | None,
    ) -> str:
        """Replace every token of each listed variable, in list order."""
        for variable in variables:
            if not variable:
                continue
            markup = self.placeholder_html(
                variable, form_data.get(variable) or "", variable == active_field
            )
            text = placeholder_pattern(variable).sub(lambda _match: markup, text)
        return text

    def _resolve_capsule_blocks(
        self, text: str, capsules: Sequence[Capsule], selected: set[int]
    ) -> str:
        for capsule in capsules:
            if not capsule.title:
                continue
            pattern = capsule_block_pattern(capsule.title)
            if capsule.id in selected:
                text = pattern.sub(lambda match: f"\n{match.group(1)}\n", text)
            else:
                text = pattern.sub("", text)
        return text

    def _apply_numbering(
        self,
        text: str,
        clause_numbering: Sequence[ClauseNumbering],
        capsules: Sequence[Capsule],
        selected: set[int],
    ) -> str:
        numbers = clause_numbers(clause_numbering, capsules, selected)
        for clause in clause_numbering:
            number = numbers.get(clause.order)
            if not number:
                continue
            heading = f"<strong>{number}:</strong> {clause.title}"
            text = numbering_pattern(clause.title).sub(lambda _match: heading, text)
        return text

    def _clauses_section(
        self,
        capsules: Sequence[Capsule],
        selected: set[int],
        variables: Sequence[str],
        form_data: Mapping[str, str],
        active_field: str | None,
    ) -> str:
        clauses = []
        for capsule in capsules:
            if capsule.id not in selected:
                continue
            text = self.substitute(capsule.legal_text or "", variables, form_data, active_field)
            if text.strip():
                clauses.append(text)

        if not clauses:
            return ""

        body = "\n\n".join(clauses)
        return (
            '\n\n<div class="additional-clauses">'
            f"<h2>{escape(self._clauses_heading)}</h2>\n{body}\n</div>"
        )

    def _signatures_section(
        self,
        signers: Sequence[SignerConfig],
        form_data: Mapping[str, str],
        active_field: str | None,
    ) -> str:
        def field(variable: str) -> str:
            return self.placeholder_html(
                variable, form_data.get(variable) or "", variable == active_field
            )

        blocks = []
        for signer in sorted(signers, key=lambda s: s.signature_order):
            blocks.append(
                '<div class="signature-block">'
                f"<h3>{escape(signer.display_name)}</h3>"
                f"<p><strong>Nombre:</strong> {field(signer.name_variable)}</p>"
                f"<p><strong>RUT:</strong> {field(signer.rut_variable)}</p>"
                f"<p><strong>Email:</strong> {field(signer.email_variable)}</p>"
                "</div>"
            )
        return '\n\n<div class="signatures-section"><h2>Firmas</h2>\n' + "\n".join(blocks) + "</div>"
