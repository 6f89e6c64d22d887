"""Normalization — one criterion's raw values onto a 0–100 scale.

Each criterion type has its own normalizer.  Numeric-family criteria are
range-normalized against the values observed across every item of the
comparative; booleans and ratings map onto fixed scales; text and select
criteria are display-only and score 0.

Items without a usable value score 0 and are left out of the observed
range so they never distort the other items.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Callable, Sequence

import numpy as np

from src.comparison.config import settings
from src.comparison.models import Criterion, CriterionType, Item, RawValue

logger = logging.getLogger(__name__)

_NUMBER_NOISE_RE = re.compile(r"[\s_$€£%]")
_THOUSANDS_RE = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d+)?$")
_DECIMAL_COMMA_RE = re.compile(r"^[+-]?\d*,\d+$")

_TRUE_WORDS = frozenset({"true", "yes", "y", "oui", "1"})
_FALSE_WORDS = frozenset({"false", "no", "n", "non", "0"})


# ---------------------------------------------------------------------------
# Raw value coercion
# ---------------------------------------------------------------------------

def coerce_number(raw: RawValue | None) -> float | None:
    """Interpret a raw value as a finite number, or ``None`` when it isn't one."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        number = float(raw)
    else:
        cleaned = _NUMBER_NOISE_RE.sub("", raw)
        if _THOUSANDS_RE.match(cleaned):
            cleaned = cleaned.replace(",", "")
        elif _DECIMAL_COMMA_RE.match(cleaned):
            cleaned = cleaned.replace(",", ".")
        elif "," in cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def coerce_boolean(raw: RawValue | None) -> bool | None:
    if raw is None:
        return None
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return raw != 0
    word = raw.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    return None


def _raw_value(item: Item, criterion_id: str) -> RawValue | None:
    entry = item.values.get(criterion_id)
    return entry.value if entry is not None else None


def _clamp(score: float) -> float:
    return min(max(score, 0.0), settings.score_scale)


def _directed(score: float, criterion: Criterion) -> float:
    return score if criterion.higher_is_better else settings.score_scale - score


# ---------------------------------------------------------------------------
# Per-type normalizers
# ---------------------------------------------------------------------------

def _normalize_boolean(criterion: Criterion, items: Sequence[Item]) -> dict[str, float]:
    scores: dict[str, float] = {}
    for item in items:
        flag = coerce_boolean(_raw_value(item, criterion.id))
        if flag is None:
            scores[item.id] = 0.0
            continue
        scores[item.id] = _directed(settings.score_scale if flag else 0.0, criterion)
    return scores


def _normalize_rating(criterion: Criterion, items: Sequence[Item]) -> dict[str, float]:
    lo = settings.rating_scale.minimum
    hi = settings.rating_scale.maximum
    scores: dict[str, float] = {}
    for item in items:
        rating = coerce_number(_raw_value(item, criterion.id))
        if rating is None:
            scores[item.id] = 0.0
            continue
        rating = min(max(rating, lo), hi)
        scaled = (rating - lo) / (hi - lo) * settings.score_scale
        scores[item.id] = _directed(scaled, criterion)
    return scores


def _normalize_range(criterion: Criterion, items: Sequence[Item]) -> dict[str, float]:
    scores = {item.id: 0.0 for item in items}
    present: list[tuple[str, float]] = []
    for item in items:
        number = coerce_number(_raw_value(item, criterion.id))
        if number is not None:
            present.append((item.id, number))
    if not present:
        return scores

    observed = np.array([number for _, number in present], dtype=float)
    lo, hi = float(observed.min()), float(observed.max())
    if hi == lo:
        # Nothing to discriminate on: nobody is penalized.
        for item_id, _ in present:
            scores[item_id] = settings.score_scale
        logger.debug(
            "Criterion %s: all %d values equal (%.4g), scoring %.0f",
            criterion.id, len(present), lo, settings.score_scale,
        )
        return scores

    scaled = (observed - lo) / (hi - lo) * settings.score_scale
    if not criterion.higher_is_better:
        scaled = settings.score_scale - scaled
    for (item_id, _), value in zip(present, scaled):
        scores[item_id] = float(value)
    logger.debug(
        "Criterion %s: range [%.4g, %.4g] over %d/%d items",
        criterion.id, lo, hi, len(present), len(items),
    )
    return scores


def _normalize_display_only(criterion: Criterion, items: Sequence[Item]) -> dict[str, float]:
    return {item.id: 0.0 for item in items}


_NORMALIZERS: dict[CriterionType, Callable[[Criterion, Sequence[Item]], dict[str, float]]] = {
    CriterionType.BOOLEAN: _normalize_boolean,
    CriterionType.RATING: _normalize_rating,
    CriterionType.NUMERIC: _normalize_range,
    CriterionType.PRICE: _normalize_range,
    CriterionType.PERCENTAGE: _normalize_range,
    CriterionType.TEXT: _normalize_display_only,
    CriterionType.SELECT: _normalize_display_only,
}


def normalize(criterion: Criterion, items: Sequence[Item]) -> dict[str, float]:
    """Map every item id to its 0–100 normalized score for ``criterion``.

    Direction (``higher_is_better``) is already applied.  Missing or
    unparsable values score 0.
    """
    normalizer = _NORMALIZERS[criterion.type]
    return {item_id: _clamp(score) for item_id, score in normalizer(criterion, items).items()}
