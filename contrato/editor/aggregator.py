"""Pricing and completion aggregates derived from the editor state."""

import math
from collections.abc import Iterable, Mapping, Sequence

from contrato.editor.models import Capsule


def total_price(
    base_price: float,
    capsules: Sequence[Capsule],
    selected_capsule_ids: Iterable[int],
) -> float:
    """Base price plus the price of every selected capsule."""
    selected = set(selected_capsule_ids)
    return base_price + sum(capsule.price for capsule in capsules if capsule.id in selected)


def completion_percentage(variables: Iterable[str], form_data: Mapping[str, str]) -> int:
    """Share of named variables with a non-blank value, rounded half up.

    Returns 0 when there are no named variables.
    """
    names = [variable for variable in variables if variable]
    if not names:
        return 0
    filled = sum(1 for name in names if (form_data.get(name) or "").strip())
    return math.floor(100 * filled / len(names) + 0.5)


def missing_fields(variables: Iterable[str], form_data: Mapping[str, str]) -> list[str]:
    """Named variables whose value is blank, in order."""
    return [
        variable
        for variable in variables
        if variable and not (form_data.get(variable) or "").strip()
    ]


def format_price(amount: float | int | None, symbol: str = "$", thousands_separator: str = ".") -> str:
    """Format a CLP amount without decimals, e.g. ``$12.000``.

    Anything that is not a finite number is shown as zero.
    """
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not math.isfinite(amount):
        amount = 0
    rounded = math.floor(abs(amount) + 0.5)
    digits = f"{rounded:,}".replace(",", thousands_separator)
    sign = "-" if amount < 0 and rounded else ""
    return f"{sign}{symbol}{digits}"
