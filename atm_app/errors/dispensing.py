"""
Dispensing error classifications.

Raised by the cash dispenser when a withdrawal cannot be served from the
note inventory. The inventory is unchanged whenever one of these is raised.
"""

from typing import Optional

from .base import ATMError


class DispensingError(ATMError):
    """Base class for cash dispensing failures."""


class InsufficientFunds(DispensingError):
    """Total value in the machine is below the requested amount."""

    def __init__(self, message: str, requested: Optional[int] = None,
                 available: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.requested = requested
        self.available = available


class NoFeasiblePlan(DispensingError):
    """The requested amount cannot be formed exactly from the notes in stock."""

    def __init__(self, message: str, requested: Optional[int] = None,
                 remaining: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.requested = requested
        self.remaining = remaining
