"""Human-readable display values per criterion type."""

from __future__ import annotations

from src.comparison.config import settings
from src.comparison.models import CriterionType, RawValue
from src.comparison.scoring.normalization import coerce_boolean, coerce_number


def _format_number(number: float) -> str:
    if float(number).is_integer():
        return f"{int(number):,}"
    return f"{number:,.2f}".rstrip("0").rstrip(".")


def format_display_value(value: RawValue | None, criterion_type: CriterionType) -> str:
    """Render a raw value the way the comparison table shows it.

    Values that cannot be interpreted for their type fall back to ``str``.
    """
    if value is None:
        return ""

    if criterion_type is CriterionType.PRICE:
        number = coerce_number(value)
        if number is None:
            return str(value)
        return f"{settings.display.currency_symbol}{_format_number(number)}"

    if criterion_type is CriterionType.PERCENTAGE:
        number = coerce_number(value)
        if number is None:
            return str(value)
        return f"{_format_number(number)}%"

    if criterion_type is CriterionType.BOOLEAN:
        flag = coerce_boolean(value)
        if flag is None:
            return str(value)
        return settings.display.true_label if flag else settings.display.false_label

    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
