"""
Session-level error classifications.

Usage errors (illegal transitions, malformed input) are raised before any
side effect. Outcome errors (failed authentication, rejected card) describe
what happened after the session has already settled into its next state.
"""

from typing import Any, Optional

from .base import ATMError


class SessionError(ATMError):
    """Base class for errors raised by the session state machine."""


class IllegalSessionTransition(SessionError):
    """Operation is not valid in the current session state."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_intent: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_intent = attempted_intent
        self.recoverable = False


class AuthenticationFailed(SessionError):
    """Wrong PIN for the inserted card."""

    def __init__(self, message: str, attempts: int = 0,
                 max_attempts: int = 3, **kwargs):
        super().__init__(message, **kwargs)
        self.attempts = attempts
        self.max_attempts = max_attempts

    @property
    def attempts_remaining(self) -> int:
        return max(self.max_attempts - self.attempts, 0)


class CardRejected(SessionError):
    """Card could not be accepted and was ejected."""

    def __init__(self, message: str, reason: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.reason = reason


class InvalidInput(SessionError):
    """Malformed caller input, rejected before any remote call."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.recoverable = False


class DeviceError(SessionError):
    """A device port was driven out of sequence."""

    def __init__(self, message: str, device: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.device = device
