"""Ranking and winner resolution.

Standard competition ranking ("1224"): items whose scores differ by no more
than ``settings.tie_epsilon`` share a rank, and the next distinct item's rank
skips past the whole tie group.  Within a group, display order falls back to
ascending ``order`` (then id, so the result is fully deterministic).
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from src.comparison.config import settings
from src.comparison.models import Item, ScoringMethod

logger = logging.getLogger(__name__)


def _manual_key(item: Item) -> tuple[int, str]:
    return item.order, item.id


def _tie_groups(items: Sequence[Item], scores: Mapping[str, float]) -> list[list[Item]]:
    by_score = sorted(items, key=lambda i: (-scores.get(i.id, 0.0), i.order, i.id))
    groups: list[list[Item]] = []
    leader = 0.0
    for item in by_score:
        score = scores.get(item.id, 0.0)
        if groups and abs(leader - score) <= settings.tie_epsilon:
            groups[-1].append(item)
        else:
            groups.append([item])
            leader = score
    return [sorted(group, key=_manual_key) for group in groups]


def rank_items(
    items: Sequence[Item],
    scores: Mapping[str, float],
    method: ScoringMethod,
) -> list[Item]:
    """Return copies of ``items`` with ``score`` and ``rank`` set, best first."""
    if method is ScoringMethod.NONE:
        ordered = sorted(items, key=_manual_key)
        return [
            item.model_copy(deep=True, update={"score": 0.0, "rank": position})
            for position, item in enumerate(ordered, 1)
        ]

    ranked: list[Item] = []
    for group in _tie_groups(items, scores):
        rank = len(ranked) + 1
        for item in group:
            ranked.append(item.model_copy(deep=True, update={
                "score": scores.get(item.id, 0.0),
                "rank": rank,
            }))
    return ranked


def resolve_winner(
    ranked: Sequence[Item],
    highlight_winner: bool,
    current_winner_id: str | None,
) -> str | None:
    """The winner id after a recompute.

    With ``highlight_winner`` the first ranked item always wins; otherwise
    the caller's last explicit choice is kept as-is.
    """
    if not highlight_winner:
        return current_winner_id
    if not ranked:
        return None
    winner = ranked[0]
    logger.debug("Winner resolved to %s (score %.2f)", winner.id, winner.score)
    return winner.id
