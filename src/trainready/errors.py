"""Exception types raised by trainready."""


class TrainReadyError(Exception):
    """Base class for all trainready errors."""


class DomainViolationError(TrainReadyError, ValueError):
    """An input is physically impossible (negative duration, NaN HR, ...).

    These indicate an upstream data-integrity problem and are never
    clamped or swallowed by the engines.
    """
