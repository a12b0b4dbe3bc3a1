# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for the condition grammar
"""

import pytest

from nodeflow.condition_evaluator import evaluate_condition


class TestLiterals:
    """Boolean literals"""

    @pytest.mark.parametrize("text", ["true", "TRUE", "  True  "])
    def test_true_any_case(self, text):
        assert evaluate_condition(text) is True

    def test_false(self):
        assert evaluate_condition("False") is False


class TestComparisons:
    """String equality and numeric ordering"""

    def test_equal_strings_trimmed(self):
        assert evaluate_condition(" abc ==abc") is True

    def test_unequal_strings(self):
        assert evaluate_condition("a==b") is False

    def test_not_equal(self):
        assert evaluate_condition("a != b") is True

    def test_greater_than(self):
        assert evaluate_condition("3>2") is True

    def test_less_than_floats(self):
        assert evaluate_condition("1.5 < 0.5") is False

    def test_non_numeric_ordering_is_false(self):
        assert evaluate_condition("b > a") is False


class TestUnparsable:
    """Anything else evaluates to False without raising"""

    @pytest.mark.parametrize("text", ["", "hello", "a == b == c", "1 > 2 > 3", ">"])
    def test_unparsable_is_false(self, text):
        assert evaluate_condition(text) is False
