"""Top-level orchestrator — one recompute pass over a comparative snapshot.

Pipeline:
  1. Normalize every criterion's values onto 0–100     (per type)
  2. Refresh each stored value's display string and normalized score
  3. Aggregate visible, scored criteria per item       (scoring method)
  4. Rank items, ties sharing a rank                   (competition ranking)
  5. Resolve the winner and flag it on the items
  6. Report degenerate input alongside the result

The pass is a pure function of the snapshot: nothing is retained between
calls, and running it on its own output changes nothing.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from src.comparison.formatting import format_display_value
from src.comparison.models import Comparative, Item, ScoreResult
from src.comparison.scoring.aggregation import aggregate, detect_degenerate_input
from src.comparison.scoring.normalization import normalize
from src.comparison.scoring.ranking import rank_items, resolve_winner

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent.parent / "data"


def load_sample_comparative() -> Comparative:
    path = DATA_DIR / "sample_comparative.json"
    with open(path) as f:
        raw = json.load(f)
    return Comparative(**raw)


def load_comparative_from_json(data: dict) -> Comparative:
    return Comparative(**data)


def _refresh_values(comparative: Comparative, table: dict[str, dict[str, float]]) -> list[Item]:
    by_id = {c.id: c for c in comparative.criteria}
    refreshed: list[Item] = []
    for item in comparative.items:
        values = {}
        for criterion_id, entry in item.values.items():
            criterion = by_id.get(criterion_id)
            if criterion is None:
                values[criterion_id] = entry.model_copy()
                continue
            values[criterion_id] = entry.model_copy(update={
                "display_value": format_display_value(entry.value, criterion.type),
                "normalized_score": table[criterion_id][item.id],
            })
        refreshed.append(item.model_copy(update={"values": values}))
    return refreshed


def compute_scores(comparative: Comparative) -> ScoreResult:
    """Score, rank and pick the winner for ``comparative``.

    Never raises for a validated snapshot; degenerate situations come back
    as ``warnings`` on the result.
    """
    criteria = comparative.sorted_criteria()
    table = {c.id: normalize(c, comparative.items) for c in criteria}
    items = _refresh_values(comparative, table)

    item_ids = [item.id for item in items]
    scores = aggregate(comparative.scoring_method, criteria, table, item_ids)
    ranked = rank_items(items, scores, comparative.scoring_method)

    winner_id = resolve_winner(ranked, comparative.highlight_winner, comparative.winner_id)
    ranked = [
        item.model_copy(update={"is_winner": winner_id is not None and item.id == winner_id})
        for item in ranked
    ]

    warnings = detect_degenerate_input(comparative.scoring_method, criteria)
    for warning in warnings:
        logger.warning("Comparative %s: %s", comparative.id, warning.message)

    logger.info(
        "Scored comparative %s: %d items, %d criteria (%s), winner=%s",
        comparative.id, len(ranked), len(criteria),
        comparative.scoring_method.value, winner_id,
    )
    return ScoreResult(items=ranked, winner_id=winner_id, warnings=warnings)


def recompute(comparative: Comparative) -> Comparative:
    """Return ``comparative`` with its items and winner replaced by a fresh pass."""
    result = compute_scores(comparative)
    return comparative.model_copy(update={
        "items": result.items,
        "winner_id": result.winner_id,
    })
