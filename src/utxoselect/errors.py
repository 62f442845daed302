"""
Error taxonomy for coin selection.

Every algorithm reports its own failure kind; the selector aggregates them.
"""

from __future__ import annotations

from collections.abc import Mapping


class SelectionError(Exception):
    """Base class for all coin selection failures."""

    def __init__(self, message: str, failures: Mapping[str, SelectionError] | None = None):
        super().__init__(message)
        self.failures: dict[str, SelectionError] = dict(failures or {})


class InsufficientFundsError(SelectionError):
    """The effective value of every candidate coin cannot cover target plus fees."""

    def __init__(
        self,
        message: str = "Insufficient funds",
        required: int | None = None,
        available: int | None = None,
        failures: Mapping[str, SelectionError] | None = None,
    ):
        super().__init__(message, failures)
        self.required = required
        self.available = available


class NoMatchFoundError(SelectionError):
    """
    Funds suffice but no selection met the change constraints within the search bound.

    Callers may retry with relaxed change bounds or a higher iteration cap.
    """


class InvalidOptionsError(SelectionError, ValueError):
    """Selection options were rejected before any search began."""
