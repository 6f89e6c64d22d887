"""Aggregation — combine per-criterion normalized scores into one composite."""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from src.comparison.config import settings
from src.comparison.models import Criterion, DegenerateInputWarning, ScoringMethod

logger = logging.getLogger(__name__)

# criterion id -> item id -> normalized score
NormalizedTable = Mapping[str, Mapping[str, float]]


def eligible_criteria(criteria: Sequence[Criterion]) -> list[Criterion]:
    """Visible criteria whose type carries an ordering, in ``order``."""
    return sorted((c for c in criteria if c.is_scored), key=lambda c: c.order)


def _weighted_average(
    criteria: list[Criterion], table: NormalizedTable, item_ids: Sequence[str],
) -> dict[str, float]:
    if sum(c.weight for c in criteria) == 0:
        return {item_id: 0.0 for item_id in item_ids}
    return {
        item_id: sum(table[c.id].get(item_id, 0.0) * c.weight for c in criteria)
        / settings.weight_total
        for item_id in item_ids
    }


def _simple_average(
    criteria: list[Criterion], table: NormalizedTable, item_ids: Sequence[str],
) -> dict[str, float]:
    n = len(criteria)
    if n == 0:
        return {item_id: 0.0 for item_id in item_ids}
    return {
        item_id: sum(table[c.id].get(item_id, 0.0) for c in criteria) / n
        for item_id in item_ids
    }


def _sum(
    criteria: list[Criterion], table: NormalizedTable, item_ids: Sequence[str],
) -> dict[str, float]:
    return {
        item_id: sum(table[c.id].get(item_id, 0.0) for c in criteria)
        for item_id in item_ids
    }


def aggregate(
    method: ScoringMethod,
    criteria: Sequence[Criterion],
    table: NormalizedTable,
    item_ids: Sequence[str],
) -> dict[str, float]:
    """Composite score per item id.

    Only visible, scored criteria contribute.  ``table`` must hold an entry
    for each of them; items absent from an entry count as 0.
    """
    if method is ScoringMethod.NONE:
        return {item_id: 0.0 for item_id in item_ids}

    scored = eligible_criteria(criteria)
    if method is ScoringMethod.WEIGHTED_AVERAGE:
        scores = _weighted_average(scored, table, item_ids)
    elif method is ScoringMethod.SIMPLE_AVERAGE:
        scores = _simple_average(scored, table, item_ids)
    else:
        scores = _sum(scored, table, item_ids)

    logger.debug(
        "Aggregated %d items over %d criteria (%s)",
        len(item_ids), len(scored), method.value,
    )
    return scores


def detect_degenerate_input(
    method: ScoringMethod, criteria: Sequence[Criterion],
) -> list[DegenerateInputWarning]:
    """Non-fatal conditions the caller should surface next to the scores."""
    if method is ScoringMethod.NONE:
        return []

    warnings: list[DegenerateInputWarning] = []
    scored = eligible_criteria(criteria)
    if not scored:
        warnings.append(DegenerateInputWarning(
            kind="no_eligible_criteria",
            message="No visible criterion can be scored; every item scores 0.",
        ))

    if method is ScoringMethod.WEIGHTED_AVERAGE:
        total = sum(c.weight for c in criteria if c.is_visible)
        if scored and sum(c.weight for c in scored) == 0:
            warnings.append(DegenerateInputWarning(
                kind="weight_sum",
                message="Scored criteria all have weight 0; every item scores 0.",
            ))
        elif total != settings.weight_total:
            warnings.append(DegenerateInputWarning(
                kind="weight_sum",
                message=(
                    f"Visible criteria weights sum to {total}, "
                    f"expected {settings.weight_total}."
                ),
            ))
    return warnings
