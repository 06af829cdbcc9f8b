"""Weighted sampler tests."""
import math

import pytest
from hypothesis import given, strategies as st

from fairspin.errors import ConfigError
from fairspin.logic.bias import effective_distribution
from fairspin.logic.sampler import sample
from fairspin.logic.validator import validate_table
from tests.conftest import make_outcomes


@pytest.fixture
def three_way():
    table = validate_table(make_outcomes(("a", 2, 0), ("b", 5, 0), ("c", 3, 4)))
    # lose 70% split 2:5 between a and b, win 30% on c
    return effective_distribution(table, 30)


class TestInverseCdf:
    def test_first_bucket(self, three_way):
        assert sample(three_way, 0.0).id == "a"

    def test_bucket_edges_are_exclusive_on_the_right(self, three_way):
        # a covers [0, 0.2), b covers [0.2, 0.7), c covers [0.7, 1)
        assert sample(three_way, 0.19999).id == "a"
        assert sample(three_way, 0.2).id == "b"
        assert sample(three_way, 0.69999).id == "b"
        assert sample(three_way, 0.7).id == "c"

    def test_same_u_same_outcome(self, three_way):
        picks = {sample(three_way, 0.42).id for _ in range(50)}
        assert picks == {"b"}

    def test_zero_probability_outcome_never_drawn(self, basic_table):
        dist = effective_distribution(basic_table, 0)
        for u in (0.0, 0.5, 0.999999, 1.0, 5.0):
            assert sample(dist, u).id == "lose"

    def test_zero_probability_first_entry_skipped_for_negative_u(self):
        table = validate_table(make_outcomes(("win", 1, 3), ("lose", 1, 0)))
        dist = effective_distribution(table, 0)
        assert sample(dist, -0.5).id == "lose"

    def test_empty_distribution(self):
        with pytest.raises(ConfigError):
            sample((), 0.5)


class TestFallback:
    @pytest.mark.parametrize("u", [0.999999999999, 1.0, 1.5, math.inf, math.nan])
    def test_top_of_range_returns_last_outcome(self, three_way, u):
        assert sample(three_way, u).id == "c"

    def test_rounding_shortfall_returns_last(self):
        table = validate_table(make_outcomes(("a", 1, 0), ("b", 1, 2)))
        # Distribution that sums slightly below 1
        outcomes = table.outcomes
        short = ((outcomes[0], 0.5), (outcomes[1], 0.5 - 1e-12))
        assert sample(short, 1 - 1e-13).id == "b"

    def test_skips_zero_probability_last_outcome(self, basic_table):
        # win is listed last but carries no mass at rate 0
        dist = effective_distribution(basic_table, 0)
        assert basic_table.outcomes[-1].id == "win"
        assert sample(dist, 1.0).id == "lose"

    @given(u=st.floats(allow_nan=True, allow_infinity=True))
    def test_always_returns_an_outcome(self, u):
        table = validate_table(make_outcomes(("a", 1, 0), ("b", 2, 0), ("c", 1, 9)))
        dist = effective_distribution(table, 25)
        assert sample(dist, u).id in {"a", "b", "c"}
