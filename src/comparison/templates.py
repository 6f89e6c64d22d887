"""Criteria templates — copy a saved criteria configuration onto a comparative.

Templates are snapshots, never live references: applying or saving one
always produces criteria with fresh ids.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Sequence

from src.comparison.engine import DATA_DIR
from src.comparison.models import CriteriaTemplate, Criterion, new_id

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_PATH = DATA_DIR / "criteria_templates.json"


def _fresh_id(taken: set[str]) -> str:
    candidate = new_id("criterion")
    while candidate in taken:
        candidate = new_id("criterion")
    taken.add(candidate)
    return candidate


def _clone(criteria: Sequence[Criterion]) -> list[Criterion]:
    taken = {c.id for c in criteria}
    return [
        Criterion(
            id=_fresh_id(taken),
            name=c.name,
            type=c.type,
            weight=c.weight,
            higher_is_better=c.higher_is_better,
            order=position,
            is_visible=c.is_visible,
            min=c.min,
            max=c.max,
        )
        for position, c in enumerate(criteria)
    ]


def apply_template(template: CriteriaTemplate | Sequence[Criterion]) -> list[Criterion]:
    """Deep-clone a template's criteria for use on a comparative.

    ``order`` is re-derived from list position; everything else but the id
    is preserved.  Item values are not touched here.
    """
    criteria = template.criteria if isinstance(template, CriteriaTemplate) else template
    cloned = _clone(criteria)
    logger.info("Applied template with %d criteria", len(cloned))
    return cloned


def save_as_template(
    criteria: Sequence[Criterion], name: str, description: str = "",
) -> CriteriaTemplate:
    """Snapshot the current criteria, in display order, as a named template."""
    name = name.strip()
    if not name:
        raise ValueError("template name must not be blank")
    ordered = sorted(criteria, key=lambda c: c.order)
    return CriteriaTemplate(name=name, description=description, criteria=_clone(ordered))


def load_templates(path: Path = DEFAULT_TEMPLATES_PATH) -> dict[str, CriteriaTemplate]:
    """Read a JSON list of templates, keyed by template name."""
    with open(path) as f:
        raw = json.load(f)
    templates = [CriteriaTemplate(**t) for t in raw]
    logger.info("Loaded %d criteria templates from %s", len(templates), path)
    return {t.name: t for t in templates}
