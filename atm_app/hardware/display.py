"""Screen and receipt printer ports."""

from typing import Optional

import structlog

from ..errors import DeviceError
from ..models.banking import Account, Transaction
from ..utils.time import format_timestamp

logger = structlog.get_logger(__name__)

MENU_OPTIONS = (
    "Cash Withdrawal",
    "Balance Inquiry",
    "PIN Change",
    "Mini Statement",
    "Cash Deposit",
)


class Screen:
    """Output sink that records every message shown."""

    def __init__(self):
        self.messages: list[str] = []

    def display_message(self, message: str) -> None:
        self.messages.append(message)
        logger.debug("Screen message", message=message)

    @property
    def last_message(self) -> Optional[str]:
        return self.messages[-1] if self.messages else None

    def display_welcome(self) -> None:
        self.display_message("Welcome. Please insert your card")

    def display_pin_prompt(self) -> None:
        self.display_message("Please enter your PIN")

    def display_options(self) -> None:
        lines = [f"{i}. {option}" for i, option in enumerate(MENU_OPTIONS, start=1)]
        self.display_message("Select an option: " + " | ".join(lines))

    def display_balance(self, balance: float) -> None:
        self.display_message(f"Your current balance is: ${balance:.2f}")

    def display_transaction_success(self) -> None:
        self.display_message("Transaction completed successfully")

    def display_transaction_failed(self, reason: str) -> None:
        self.display_message(f"Transaction failed: {reason}")


class Printer:
    """Receipt printer that renders slips to text."""

    def __init__(self, paper_available: bool = True):
        self.paper_available = paper_available
        self.printed: list[str] = []

    def _emit(self, text: str) -> str:
        if not self.paper_available:
            raise DeviceError("No paper available for printing", device="printer")
        self.printed.append(text)
        logger.debug("Slip printed", lines=text.count("\n") + 1)
        return text

    def print_receipt(self, transaction: Transaction) -> str:
        lines = [
            "========== RECEIPT ==========",
            f"Transaction ID: {transaction.transaction_id}",
            f"Date: {format_timestamp(transaction.timestamp)}",
            f"Account: {transaction.account.masked_number}",
            f"Type: {transaction.type.value}",
            f"Amount: ${transaction.amount:.2f}",
            f"Status: {transaction.status.value}",
            f"Bank: {transaction.account.bank.name}",
            "=============================",
        ]
        return self._emit("\n".join(lines))

    def print_mini_statement(self, transactions: list[Transaction], account: Account) -> str:
        lines = [
            "======== MINI STATEMENT ========",
            f"Account: {account.masked_number}",
            "================================",
        ]
        if not transactions:
            lines.append("No recent transactions found")
        for tx in transactions:
            lines.append(
                f"{format_timestamp(tx.timestamp)} | {tx.type.value} | "
                f"${tx.amount:.2f} | {tx.status.value}"
            )
        lines.append("================================")
        return self._emit("\n".join(lines))
