"""
Banking data models for the ATM core.

This module defines immutable data structures for the card read from the
card reader, the account bound to a session and the transactions sent to the
remote account service.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import Optional

from ..errors import InvalidInput
from ..utils.masking import mask_account_number, mask_card_number
from ..utils.time import generate_transaction_id


class TransactionType(str, Enum):
    """Operations a session can perform."""
    WITHDRAWAL = "withdrawal"
    DEPOSIT = "deposit"
    BALANCE_INQUIRY = "balance_inquiry"
    PIN_CHANGE = "pin_change"
    MINI_STATEMENT = "mini_statement"


class TransactionStatus(str, Enum):
    """Settlement status of a transaction."""
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class Bank:
    """Issuing bank reference."""
    bank_id: str
    name: str


@dataclass(frozen=True)
class Card:
    """Card details as read from the card reader."""
    card_number: str
    expiry_date: date
    bank: Bank

    def is_expired(self, today: date) -> bool:
        """Card is usable through its expiry date."""
        return self.expiry_date < today

    @property
    def has_readable_expiry(self) -> bool:
        """Expiry is a calendar date; a datetime or missing value is unreadable."""
        return isinstance(self.expiry_date, date) and not isinstance(self.expiry_date, datetime)

    @property
    def masked_number(self) -> str:
        return mask_card_number(self.card_number)

    def __repr__(self) -> str:
        expires = self.expiry_date.isoformat() if self.has_readable_expiry else None
        return f"Card({self.masked_number}, expires={expires})"


@dataclass(frozen=True)
class Account:
    """Account bound to a session after authentication."""
    account_number: str
    bank: Bank

    @property
    def masked_number(self) -> str:
        return mask_account_number(self.account_number)

    def __repr__(self) -> str:
        return f"Account({self.masked_number})"


@dataclass(frozen=True)
class Transaction:
    """A single attempt sent to the account service."""

    transaction_id: str
    account: Account
    type: TransactionType
    amount: float
    timestamp: datetime
    status: TransactionStatus = TransactionStatus.PENDING

    @classmethod
    def create(cls, account: Account, tx_type: TransactionType,
               amount: float, now: datetime) -> "Transaction":
        """Create a pending transaction with a fresh time-derived id."""
        return cls(
            transaction_id=generate_transaction_id(now),
            account=account,
            type=tx_type,
            amount=amount,
            timestamp=now,
        )

    @property
    def is_settled(self) -> bool:
        return self.status != TransactionStatus.PENDING

    def settle(self, status: TransactionStatus) -> "Transaction":
        """Return the settled copy; a transaction settles exactly once."""
        if self.is_settled:
            raise InvalidInput(
                f"Transaction {self.transaction_id} already settled as {self.status.value}",
                field="status",
                value=status
            )
        if status == TransactionStatus.PENDING:
            raise InvalidInput(
                "Cannot settle a transaction to pending",
                field="status",
                value=status
            )
        return replace(self, status=status)

    def summary(self, masked: bool = True) -> dict:
        account: Optional[str] = self.account.masked_number if masked else self.account.account_number
        return {
            "transaction_id": self.transaction_id,
            "account": account,
            "type": self.type.value,
            "amount": self.amount,
            "status": self.status.value,
        }


def validate_pin(pin: object, length: int = 4, field: str = "pin") -> str:
    """PINs are exactly ``length`` ASCII digits."""
    if not isinstance(pin, str) or len(pin) != length or not (pin.isascii() and pin.isdigit()):
        raise InvalidInput(
            f"PIN must be exactly {length} digits",
            field=field,
            value="<redacted>"
        )
    return pin
