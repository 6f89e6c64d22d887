"""Weight management — equal redistribution and weight-sum status."""

from __future__ import annotations

import logging
from typing import Sequence

from src.comparison.config import settings
from src.comparison.models import Criterion, ScoringMethod, WeightStatus

logger = logging.getLogger(__name__)


def total_visible_weight(criteria: Sequence[Criterion]) -> int:
    return sum(c.weight for c in criteria if c.is_visible)


def redistribute_weights(criteria: Sequence[Criterion]) -> list[Criterion]:
    """Spread the weight total evenly over the visible criteria.

    Every visible criterion gets ``floor(total / n)``; the first
    ``total % n`` of them in ``order`` get one extra point.  Invisible
    criteria drop to 0.  The list comes back in its input order.
    """
    visible = sorted((c for c in criteria if c.is_visible), key=lambda c: c.order)
    new_weights: dict[str, int] = {}
    if visible:
        base, remainder = divmod(settings.weight_total, len(visible))
        for position, criterion in enumerate(visible):
            new_weights[criterion.id] = base + (1 if position < remainder else 0)

    logger.debug(
        "Redistributed %d across %d visible of %d criteria",
        settings.weight_total, len(visible), len(criteria),
    )
    return [
        c.model_copy(update={"weight": new_weights.get(c.id, 0)})
        for c in criteria
    ]


def weight_status(
    criteria: Sequence[Criterion], method: ScoringMethod,
) -> WeightStatus:
    """What the editor's weight banner shows."""
    return WeightStatus(
        total=total_visible_weight(criteria),
        expected=settings.weight_total,
        applies=method is ScoringMethod.WEIGHTED_AVERAGE,
    )
