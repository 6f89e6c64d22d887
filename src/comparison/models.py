"""Pydantic v2 data models — the data contracts flowing through the system."""

from __future__ import annotations

import re
import uuid
from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, Field, model_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class CriterionType(str, Enum):
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    RATING = "rating"
    TEXT = "text"
    PRICE = "price"
    PERCENTAGE = "percentage"
    SELECT = "select"


class ScoringMethod(str, Enum):
    WEIGHTED_AVERAGE = "weighted_average"
    SIMPLE_AVERAGE = "simple_average"
    SUM = "sum"
    NONE = "none"


# Range-normalized against the values observed across items.
NUMERIC_FAMILY: frozenset[CriterionType] = frozenset({
    CriterionType.NUMERIC,
    CriterionType.PRICE,
    CriterionType.PERCENTAGE,
})

# Shown in the table but never scored.
DISPLAY_ONLY: frozenset[CriterionType] = frozenset({
    CriterionType.TEXT,
    CriterionType.SELECT,
})

RawValue = Union[bool, int, float, str]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ComparativeEditError(ValueError):
    """An editor operation referenced an unknown criterion/item or position."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _slugify(name: str) -> str:
    slug = name.lower().strip()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"[\s]+", "-", slug)
    return slug


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


# ---------------------------------------------------------------------------
# Criteria and values
# ---------------------------------------------------------------------------

class Criterion(BaseModel):
    id: str = Field(default_factory=lambda: new_id("criterion"))
    name: str = ""
    type: CriterionType = CriterionType.RATING
    weight: int = Field(default=0, ge=0, le=100)
    higher_is_better: bool = True
    order: int = 0
    is_visible: bool = True
    min: float | None = None
    max: float | None = None

    model_config = {"validate_assignment": True}

    @model_validator(mode="after")
    def _check_bounds(self) -> Criterion:
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(
                f"criterion {self.id!r}: min ({self.min}) exceeds max ({self.max})"
            )
        return self

    @property
    def is_scored(self) -> bool:
        return self.is_visible and self.type not in DISPLAY_ONLY


class CriterionValue(BaseModel):
    criterion_id: str = ""
    value: RawValue | None = None
    display_value: str = ""
    normalized_score: float = Field(default=0.0, ge=0.0, le=100.0)


class Item(BaseModel):
    id: str | None = None
    name: str
    slug: str | None = None
    order: int = 0
    is_highlighted: bool = False
    values: dict[str, CriterionValue] = Field(default_factory=dict)
    score: float = 0.0
    rank: int = 0
    is_winner: bool = False
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _normalize_fields(self) -> Item:
        if not self.slug:
            self.slug = _slugify(self.name)
        if not self.id:
            self.id = self.slug or new_id("item")
        for key, entry in self.values.items():
            if not entry.criterion_id:
                entry.criterion_id = key
            elif entry.criterion_id != key:
                raise ValueError(
                    f"item {self.id!r}: value keyed {key!r} "
                    f"belongs to criterion {entry.criterion_id!r}"
                )
        return self


class Comparative(BaseModel):
    id: str = Field(default_factory=lambda: new_id("comparative"))
    title: str = ""
    criteria: list[Criterion] = Field(default_factory=list)
    items: list[Item] = Field(default_factory=list)
    scoring_method: ScoringMethod = ScoringMethod.WEIGHTED_AVERAGE
    highlight_winner: bool = True
    show_scores: bool = True
    winner_id: str | None = None
    version: int = 0

    @model_validator(mode="after")
    def _check_unique_ids(self) -> Comparative:
        for label, ids in (
            ("criterion", [c.id for c in self.criteria]),
            ("item", [i.id for i in self.items]),
        ):
            seen: set[str] = set()
            for entity_id in ids:
                if entity_id in seen:
                    raise ValueError(f"duplicate {label} id {entity_id!r}")
                seen.add(entity_id)
        return self

    def sorted_criteria(self) -> list[Criterion]:
        return sorted(self.criteria, key=lambda c: c.order)


# ---------------------------------------------------------------------------
# Scoring / output types
# ---------------------------------------------------------------------------

class DegenerateInputWarning(BaseModel):
    kind: Literal["weight_sum", "no_eligible_criteria"]
    message: str


class ScoreResult(BaseModel):
    items: list[Item] = Field(default_factory=list)
    winner_id: str | None = None
    warnings: list[DegenerateInputWarning] = Field(default_factory=list)


class WeightStatus(BaseModel):
    total: int
    expected: int = 100
    applies: bool = True

    @property
    def is_valid(self) -> bool:
        return not self.applies or self.total == self.expected


class CriteriaTemplate(BaseModel):
    id: str = Field(default_factory=lambda: new_id("template"))
    name: str
    description: str = ""
    criteria: list[Criterion] = Field(default_factory=list)
