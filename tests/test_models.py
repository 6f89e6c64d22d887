"""Tests for data contract validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from src.comparison.models import Comparative, Criterion, CriterionType, Item, WeightStatus


class TestCriterion:
    def test_all_seven_types_accepted(self):
        for ctype in ["numeric", "boolean", "rating", "text", "price", "percentage", "select"]:
            assert Criterion(type=ctype).type is CriterionType(ctype)

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            Criterion(type="color")

    def test_weight_bounds(self):
        with pytest.raises(ValidationError):
            Criterion(weight=-1)
        with pytest.raises(ValidationError):
            Criterion(weight=101)

    def test_weight_checked_on_assignment(self):
        criterion = Criterion(weight=10)
        with pytest.raises(ValidationError):
            criterion.weight = 200

    def test_bounds_order(self):
        with pytest.raises(ValidationError):
            Criterion(type="numeric", min=10, max=1)

    def test_generated_ids_unique(self):
        assert Criterion().id != Criterion().id

    def test_is_scored(self):
        assert Criterion(type="price").is_scored
        assert not Criterion(type="select").is_scored
        assert not Criterion(type="rating", is_visible=False).is_scored


class TestItem:
    def test_slug_and_id_from_name(self):
        item = Item(name="Acme Pro 2!")
        assert item.slug == "acme-pro-2"
        assert item.id == "acme-pro-2"

    def test_value_keys_fill_criterion_id(self):
        item = Item(name="A", values={"price": {"value": 10}})
        assert item.values["price"].criterion_id == "price"

    def test_mismatched_value_key(self):
        with pytest.raises(ValidationError):
            Item(name="A", values={"price": {"criterion_id": "rating", "value": 10}})

    def test_raw_value_types_preserved(self):
        item = Item(name="A", values={"a": {"value": True}, "b": {"value": 3}, "c": {"value": "x"}})
        assert item.values["a"].value is True
        assert item.values["b"].value == 3
        assert item.values["c"].value == "x"


class TestComparative:
    def test_duplicate_criterion_ids(self):
        with pytest.raises(ValidationError):
            Comparative(criteria=[{"id": "x"}, {"id": "x"}])

    def test_duplicate_item_ids(self):
        with pytest.raises(ValidationError):
            Comparative(items=[{"name": "Same"}, {"name": "Same"}])

    def test_defaults(self):
        comparative = Comparative()
        assert comparative.scoring_method.value == "weighted_average"
        assert comparative.highlight_winner
        assert comparative.winner_id is None


class TestWeightStatus:
    def test_validity(self):
        assert WeightStatus(total=100).is_valid
        assert not WeightStatus(total=90).is_valid
        assert WeightStatus(total=90, applies=False).is_valid
