"""Editor operations on a comparative.

Every operation takes a snapshot and returns a new one, already recomputed,
so callers never hold stale scores.  Field validation happens when the
criterion or item is built (pydantic ``ValidationError``); unknown ids and
bad positions raise ``ComparativeEditError``.
"""

from __future__ import annotations

import logging
from typing import Any

from src.comparison.engine import recompute
from src.comparison.formatting import format_display_value
from src.comparison.models import (
    Comparative,
    ComparativeEditError,
    CriteriaTemplate,
    Criterion,
    CriterionValue,
    Item,
    RawValue,
    ScoringMethod,
    new_id,
)
from src.comparison.templates import apply_template
from src.comparison.weights import redistribute_weights

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _criterion(comparative: Comparative, criterion_id: str) -> Criterion:
    for c in comparative.criteria:
        if c.id == criterion_id:
            return c
    raise ComparativeEditError(f"unknown criterion {criterion_id!r}")


def _item(comparative: Comparative, item_id: str) -> Item:
    for i in comparative.items:
        if i.id == item_id:
            return i
    raise ComparativeEditError(f"unknown item {item_id!r}")


def _moved(entries: list, from_index: int, to_index: int) -> list:
    if not (0 <= from_index < len(entries) and 0 <= to_index < len(entries)):
        raise ComparativeEditError(
            f"cannot move position {from_index} to {to_index} "
            f"in a list of {len(entries)}"
        )
    entries = list(entries)
    entries.insert(to_index, entries.pop(from_index))
    return [entry.model_copy(update={"order": position}) for position, entry in enumerate(entries)]


def _with(comparative: Comparative, **updates: Any) -> Comparative:
    return recompute(Comparative.model_validate({**comparative.model_dump(), **updates}))


# ---------------------------------------------------------------------------
# Criteria
# ---------------------------------------------------------------------------

def add_criterion(comparative: Comparative, **fields: Any) -> Comparative:
    fields.setdefault("order", len(comparative.criteria))
    criterion = Criterion(**fields)
    logger.debug("Adding criterion %s (%s)", criterion.id, criterion.type.value)
    return _with(
        comparative,
        criteria=[c.model_dump() for c in comparative.criteria] + [criterion.model_dump()],
    )


def update_criterion(comparative: Comparative, criterion_id: str, **updates: Any) -> Comparative:
    current = _criterion(comparative, criterion_id)
    updates.pop("id", None)
    replacement = Criterion.model_validate({**current.model_dump(), **updates})
    return _with(
        comparative,
        criteria=[
            (replacement if c.id == criterion_id else c).model_dump()
            for c in comparative.criteria
        ],
    )


def remove_criterion(comparative: Comparative, criterion_id: str) -> Comparative:
    _criterion(comparative, criterion_id)
    items = []
    for item in comparative.items:
        data = item.model_dump()
        data["values"].pop(criterion_id, None)
        items.append(data)
    return _with(
        comparative,
        criteria=[c.model_dump() for c in comparative.criteria if c.id != criterion_id],
        items=items,
    )


def move_criterion(comparative: Comparative, from_index: int, to_index: int) -> Comparative:
    """Drag-reorder by display position; ``order`` is renumbered 0..N-1."""
    moved = _moved(comparative.sorted_criteria(), from_index, to_index)
    return _with(comparative, criteria=[c.model_dump() for c in moved])


def distribute_weights(comparative: Comparative) -> Comparative:
    redistributed = redistribute_weights(comparative.criteria)
    return _with(comparative, criteria=[c.model_dump() for c in redistributed])


def apply_template_to(
    comparative: Comparative, template: CriteriaTemplate,
) -> Comparative:
    """Replace the criteria with a copy of ``template``'s; item values stay."""
    criteria = apply_template(template)
    logger.info("Comparative %s: applied template %r", comparative.id, template.name)
    return _with(comparative, criteria=[c.model_dump() for c in criteria])


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

def add_item(comparative: Comparative, name: str, **fields: Any) -> Comparative:
    fields.setdefault("id", new_id("item"))
    fields.setdefault("order", len(comparative.items))
    item = Item(name=name, **fields)
    return _with(
        comparative,
        items=[i.model_dump() for i in comparative.items] + [item.model_dump()],
    )


def remove_item(comparative: Comparative, item_id: str) -> Comparative:
    _item(comparative, item_id)
    return _with(
        comparative,
        items=[i.model_dump() for i in comparative.items if i.id != item_id],
    )


def move_item(comparative: Comparative, from_index: int, to_index: int) -> Comparative:
    """Reorder by manual position; scores are unaffected, tie-breaks may change."""
    ordered = sorted(comparative.items, key=lambda i: i.order)
    moved = _moved(ordered, from_index, to_index)
    return _with(comparative, items=[i.model_dump() for i in moved])


def set_item_value(
    comparative: Comparative,
    item_id: str,
    criterion_id: str,
    value: RawValue | None,
) -> Comparative:
    """Set (or with ``None`` clear) one cell of the comparison table."""
    criterion = _criterion(comparative, criterion_id)
    _item(comparative, item_id)
    items = []
    for item in comparative.items:
        data = item.model_dump()
        if item.id == item_id:
            if value is None:
                data["values"].pop(criterion_id, None)
            else:
                data["values"][criterion_id] = CriterionValue(
                    criterion_id=criterion_id,
                    value=value,
                    display_value=format_display_value(value, criterion.type),
                ).model_dump()
        items.append(data)
    return _with(comparative, items=items)


# ---------------------------------------------------------------------------
# Comparative settings
# ---------------------------------------------------------------------------

def set_scoring_method(comparative: Comparative, method: ScoringMethod | str) -> Comparative:
    return _with(comparative, scoring_method=ScoringMethod(method))


def set_highlight_winner(comparative: Comparative, highlight: bool) -> Comparative:
    return _with(comparative, highlight_winner=highlight)


def set_winner(comparative: Comparative, item_id: str | None) -> Comparative:
    """Pick the winner by hand.

    Only sticks while ``highlight_winner`` is off; otherwise the recompute
    puts the rank-1 item back.
    """
    if item_id is not None:
        _item(comparative, item_id)
    return _with(comparative, winner_id=item_id)
