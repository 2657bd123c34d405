"""
Error classification for the ATM transaction core.

This module provides the exception hierarchy for usage errors, session
outcomes, dispensing failures and remote account service failures. No error
in this hierarchy is fatal to the process.
"""

from .base import ATMError
from .session import (
    SessionError,
    IllegalSessionTransition,
    AuthenticationFailed,
    CardRejected,
    InvalidInput,
    DeviceError,
)
from .dispensing import (
    DispensingError,
    InsufficientFunds,
    NoFeasiblePlan,
)
from .bank import RemoteServiceFailure

__all__ = [
    "ATMError",
    # Session Errors
    "SessionError",
    "IllegalSessionTransition",
    "AuthenticationFailed",
    "CardRejected",
    "InvalidInput",
    "DeviceError",
    # Dispensing Errors
    "DispensingError",
    "InsufficientFunds",
    "NoFeasiblePlan",
    # Bank Errors
    "RemoteServiceFailure",
]
