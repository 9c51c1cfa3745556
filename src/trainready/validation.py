"""Input guards shared by the records and the scoring engines.

Each check accepts ``None`` (a missing signal) and raises
:class:`DomainViolationError` for anything physically impossible.
"""

from __future__ import annotations

import math

from trainready.errors import DomainViolationError


def check_finite(name: str, value: float | None) -> None:
    if value is not None and not math.isfinite(value):
        raise DomainViolationError(f"{name} must be finite, got {value!r}")


def check_non_negative(name: str, value: float | None) -> None:
    check_finite(name, value)
    if value is not None and value < 0:
        raise DomainViolationError(f"{name} must be >= 0, got {value!r}")


def check_positive(name: str, value: float | None) -> None:
    check_finite(name, value)
    if value is not None and value <= 0:
        raise DomainViolationError(f"{name} must be > 0, got {value!r}")


def check_range(name: str, value: float | None, low: float, high: float) -> None:
    """Inclusive range check."""
    check_finite(name, value)
    if value is not None and not low <= value <= high:
        raise DomainViolationError(f"{name} must be within {low:g}-{high:g}, got {value!r}")
