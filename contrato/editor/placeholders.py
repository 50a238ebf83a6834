"""Placeholder syntax shared by the renderers and the editor.

Templates reference variables as ``{{ name }}`` (optionally ``{{ name : hint }}``),
embed optional clauses as ``[CAPSULA: title] ... [/CAPSULA]``, number clauses with
``NUMERACIÓN: title`` markers and wrap signature blocks in ``[FIRMA: ...] ... [/FIRMA]``.
"""

import re
from collections.abc import Iterable, Sequence
from html import escape

from contrato.editor.models import Capsule, ClauseNumbering

TOKEN_PATTERN = re.compile(r"\{\{([^}:]+)(?::([^}]*))?\}\}")

SIGNATURE_BLOCK_PATTERN = re.compile(
    r"\[\s*FIRMA\s*:[^\]]+\]([\s\S]*?)\[\s*/\s*FIRMA\s*\]", re.IGNORECASE
)

NUMBERING_PREFIX = "NUMERACI"

ORDINALS = [
    "PRIMERA", "SEGUNDA", "TERCERA", "CUARTA", "QUINTA",
    "SEXTA", "SÉPTIMA", "OCTAVA", "NOVENA", "DÉCIMA",
    "UNDÉCIMA", "DUODÉCIMA", "DECIMOTERCERA", "DECIMOCUARTA", "DECIMOQUINTA",
]


def format_variable_name(variable: str) -> str:
    """Turn ``nombre_arrendador`` into ``Nombre Arrendador``."""
    if not variable:
        return ""
    words = variable.replace("_", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


def placeholder_label(variable: str) -> str:
    """Text shown inside an empty placeholder."""
    return f"[{format_variable_name(variable)}]"


def escape_value(text: str, quote: bool = False) -> str:
    """HTML-escape ``text`` and encode braces, so inserted text never forms a token."""
    return escape(text, quote=quote).replace("{", "&#123;").replace("}", "&#125;")


def placeholder_pattern(variable: str) -> re.Pattern[str]:
    """Match every ``{{ variable }}`` token, with or without a ``: hint`` suffix.

    Matching is case-sensitive on the variable name.
    """
    return re.compile(r"\{\{\s*" + re.escape(variable) + r"(?:\s*:\s*[^}]*)?\s*\}\}")


def capsule_block_pattern(title: str) -> re.Pattern[str]:
    """Match an inline ``[CAPSULA: title] ... [/CAPSULA]`` block; group 1 is its body."""
    return re.compile(
        r"\[\s*CAPSULA\s*:\s*" + re.escape(title) + r"[^\]]*\]([\s\S]*?)\[\s*/\s*CAPSULA\s*\]",
        re.IGNORECASE,
    )


def numbering_pattern(title: str) -> re.Pattern[str]:
    """Match a ``NUMERACIÓN: title`` marker, accent optional."""
    return re.compile(r"NUMERACI[OÓ]N\s*:\s*" + re.escape(title), re.IGNORECASE)


def token_names(text: str) -> Iterable[str]:
    """Variable names of every token in ``text``, skipping numbering markers."""
    for match in TOKEN_PATTERN.finditer(text):
        name = match.group(1).strip()
        if name and not name.upper().startswith(NUMBERING_PREFIX):
            yield name


def extract_variables(
    template: str,
    capsules: Sequence[Capsule] = (),
    selected_capsule_ids: Iterable[int] = (),
) -> list[str]:
    """Return distinct variable names in order of first appearance.

    Variables that only occur inside inline blocks of unselected capsules
    are left out.
    """
    if not template:
        return []

    selected = set(selected_capsule_ids)
    visible = template
    for capsule in capsules:
        if capsule.id in selected or not capsule.title:
            continue
        visible = capsule_block_pattern(capsule.title).sub("", visible)

    ordered: list[str] = []
    for name in token_names(visible):
        if name not in ordered:
            ordered.append(name)
    return ordered


def clause_numbers(
    clause_numbering: Sequence[ClauseNumbering],
    capsules: Sequence[Capsule],
    selected_capsule_ids: Iterable[int],
) -> dict[int, str]:
    """Map clause order to its ordinal, skipping clauses of unselected capsules."""
    if not clause_numbering:
        return {}

    selected = set(selected_capsule_ids)
    selected_slugs = {capsule.slug for capsule in capsules if capsule.id in selected}

    numbers: dict[int, str] = {}
    current = 1
    for clause in clause_numbering:
        if clause.is_in_capsule and clause.capsule_slug and clause.capsule_slug not in selected_slugs:
            continue
        numbers[clause.order] = (
            ORDINALS[current - 1] if current <= len(ORDINALS) else f"CLÁUSULA {current}"
        )
        current += 1
    return numbers


def filter_variables(variables: Iterable[str], term: str) -> list[str]:
    """Filter variable names by search term against the raw name or its label."""
    valid = [variable for variable in variables if variable]
    if not term:
        return valid
    needle = term.lower()
    return [
        variable
        for variable in valid
        if needle in variable.lower() or needle in format_variable_name(variable).lower()
    ]
