"""Account service contract shared by the remote bank and its proxy."""

from abc import ABC, abstractmethod

from ..models.banking import Account, Card, Transaction, TransactionStatus


class AccountService(ABC):
    """In-process contract of the remote banking backend."""

    @abstractmethod
    def authenticate(self, card: Card, pin: str) -> bool:
        """Check the PIN for a card."""
        pass

    @abstractmethod
    def lookup_account(self, card: Card) -> Account:
        """Resolve the account linked to an authenticated card."""
        pass

    @abstractmethod
    def get_account_balance(self, account: Account) -> float:
        """Current balance of an account."""
        pass

    @abstractmethod
    def execute_transaction(self, transaction: Transaction) -> TransactionStatus:
        """Execute a pending transaction and report SUCCESS or FAILURE."""
        pass

    @abstractmethod
    def get_mini_statement(self, account: Account) -> list[Transaction]:
        """Most recent settled transactions, newest first."""
        pass

    @abstractmethod
    def change_pin(self, card: Card, old_pin: str, new_pin: str) -> bool:
        """Replace the PIN for a card if the old one matches."""
        pass
