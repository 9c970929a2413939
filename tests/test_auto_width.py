"""Tests for the automatic stripe-width search."""
import pytest

from lenticular.core.auto_width import reduced_steps, search_stripe_widths
from lenticular.core.config import PrintConfig
from lenticular.core.exceptions import InvalidInputError, SearchExhaustedError
from lenticular.core.planner import plan


class TestReducedSteps:

    def test_divides_by_gcd(self):
        assert reduced_steps([4, 6, 8]) == (2, 3, 4)

    def test_coprime_widths_unchanged(self):
        assert reduced_steps([3, 2]) == (3, 2)


class TestSearchStripeWidths:

    def test_uniform_widths_grow_until_source_height(self, baseline_100, one_inch_print):
        result = search_stripe_widths(baseline_100, [1, 1], one_inch_print)
        assert result.stripe_widths == (10, 10)
        assert result.iterations == 10
        assert result.output_info.height == 100
        assert result.output_info.width == 200

    def test_preserves_ratio(self, baseline_100, one_inch_print):
        result = search_stripe_widths(baseline_100, [2, 4], one_inch_print)
        assert result.stripe_widths == (5, 10)
        assert result.iterations == 4
        assert result.stripe_widths[1] == 2 * result.stripe_widths[0]
        assert result.output_info.height >= baseline_100.height

    def test_result_matches_plain_plan(self, baseline_100, one_inch_print):
        result = search_stripe_widths(baseline_100, [3, 2], one_inch_print)
        assert result.output_info == plan(baseline_100, result.stripe_widths, one_inch_print)
        a, b = result.stripe_widths
        assert a * 2 == b * 3

    def test_already_tall_enough_returns_first_plan(self, baseline_100):
        params = PrintConfig(lpi=100, physical_width_cm=2.54)
        result = search_stripe_widths(baseline_100, [1, 1], params)
        assert result.stripe_widths == (1, 1)
        assert result.iterations == 1

    def test_does_not_mutate_input(self, baseline_100, one_inch_print):
        widths = [1, 1]
        search_stripe_widths(baseline_100, widths, one_inch_print)
        assert widths == [1, 1]

    def test_exhausted(self, baseline_100, one_inch_print):
        with pytest.raises(SearchExhaustedError) as exc_info:
            search_stripe_widths(baseline_100, [1, 1], one_inch_print, max_iterations=3)
        assert exc_info.value.iterations == 3
        assert exc_info.value.last_widths == [4, 4]

    def test_invalid_widths(self, baseline_100, one_inch_print):
        with pytest.raises(InvalidInputError):
            search_stripe_widths(baseline_100, [0, 2], one_inch_print)
