"""Tests for CardFilters validation and emptiness."""

import pytest

from cardbrowser.domain.models.filters import CardFilters
from cardbrowser.errors import FilterValidationError


class TestCardFilters:
    def test_default_is_empty(self):
        assert CardFilters().is_empty is True

    def test_blank_strings_count_as_empty(self):
        filters = CardFilters(name="   ", color="")
        assert filters.name is None
        assert filters.is_empty is True

    def test_any_field_makes_it_non_empty(self):
        assert CardFilters(name="Luffy").is_empty is False
        assert CardFilters(power=5000).is_empty is False

    def test_zero_counts_as_empty(self):
        assert CardFilters(cost=0).is_empty is True

    def test_strips_text(self):
        assert CardFilters(name="  Luffy ").name == "Luffy"

    def test_numeric_strings_are_coerced(self):
        assert CardFilters(cost="4").cost == 4

    def test_rejects_non_integer(self):
        with pytest.raises(FilterValidationError):
            CardFilters(cost="four")

    def test_rejects_negative(self):
        with pytest.raises(FilterValidationError):
            CardFilters(power=-1000)

    def test_rejects_bool(self):
        with pytest.raises(FilterValidationError):
            CardFilters(counter=True)

    def test_to_query_params_skips_unset(self):
        params = CardFilters(name="Luffy", cost=3).to_query_params()
        assert params == {"name": "Luffy", "cost": "3"}


class TestFromMapping:
    def test_none_and_empty(self):
        assert CardFilters.from_mapping(None) == CardFilters()
        assert CardFilters.from_mapping({}) == CardFilters()

    def test_all_falsy_values_are_empty(self):
        filters = CardFilters.from_mapping({"name": "", "color": None, "rarity": ""})
        assert filters.is_empty is True

    def test_aliases(self):
        filters = CardFilters.from_mapping({"type": "Leader", "set": "OP01", "trait": "Straw Hat Crew"})
        assert filters.card_type == "Leader"
        assert filters.set_code == "OP01"
        assert filters.family == "Straw Hat Crew"

    def test_unknown_key_rejected(self):
        with pytest.raises(FilterValidationError, match="bounty"):
            CardFilters.from_mapping({"bounty": "3B"})
