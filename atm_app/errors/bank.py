"""Remote account service error classifications."""

from typing import Optional

from .base import ATMError


class RemoteServiceFailure(ATMError):
    """Bank call returned FAILURE or raised."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 transaction_id: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.transaction_id = transaction_id
