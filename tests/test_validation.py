"""Tests for trainready.validation -- shared input guards."""

import math

import pytest

from trainready.errors import DomainViolationError
from trainready.validation import check_finite, check_non_negative, check_positive, check_range


class TestChecks:
    def test_none_is_accepted(self):
        check_finite("x", None)
        check_non_negative("x", None)
        check_positive("x", None)
        check_range("x", None, 0.0, 1.0)

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite(self, value):
        with pytest.raises(DomainViolationError):
            check_finite("x", value)

    def test_non_negative(self):
        check_non_negative("x", 0.0)
        with pytest.raises(DomainViolationError):
            check_non_negative("x", -0.1)

    def test_positive(self):
        check_positive("x", 0.1)
        with pytest.raises(DomainViolationError, match="x must be > 0"):
            check_positive("x", 0.0)

    def test_range_inclusive(self):
        check_range("x", 0.0, 0.0, 100.0)
        check_range("x", 100.0, 0.0, 100.0)
        with pytest.raises(DomainViolationError, match="0-100"):
            check_range("x", 100.5, 0.0, 100.0)
