"""
Session data models.

The closed set of session states and caller intents, the per-session context
and the result record returned by every handled intent.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from ..errors import ATMError
from ..models.banking import Account, Card


class SessionState(str, Enum):
    """Session states; exactly one is active at a time."""
    IDLE = "idle"
    HAS_CARD = "has_card"
    OPERATION_SELECTION = "operation_selection"
    WITHDRAWAL = "withdrawal"
    BALANCE_INQUIRY = "balance_inquiry"
    PIN_CHANGE = "pin_change"
    MINI_STATEMENT = "mini_statement"
    DEPOSIT = "deposit"


class Intent(str, Enum):
    """Caller intents dispatched to the active state."""
    INSERT_CARD = "insert_card"
    AUTHENTICATE = "authenticate"
    SELECT_OPERATION = "select_operation"
    PERFORM_TRANSACTION = "perform_transaction"
    CANCEL = "cancel"
    EJECT = "eject"


@dataclass
class SessionContext:
    """Card, bound account and counters for one session."""
    card: Card
    started_at: datetime
    account: Optional[Account] = None
    pin_attempts: int = 0
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    @property
    def is_authenticated(self) -> bool:
        return self.account is not None


@dataclass(frozen=True)
class SessionResult:
    """Outcome of a handled intent."""
    success: bool
    message: str
    state: Optional[SessionState] = None
    error: Optional[ATMError] = None
    payload: dict[str, Any] = field(default_factory=dict)
