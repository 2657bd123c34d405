"""Root of the ATM error hierarchy."""

from typing import Optional, Dict, Any


class ATMError(Exception):
    """Base class for every error raised by the ATM core."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.recoverable = True
