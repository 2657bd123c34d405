"""
Simulated remote account service.

Stands in for the banking backend: authenticates PINs, keeps a per-account
ledger, executes transactions and serves mini statements. Every call blocks
for a random latency and transactions are declined at a configurable rate,
so callers see the same non-deterministic outcomes as against a real bank.
"""

import hashlib
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

import structlog

from ..config.defaults import RemoteParams
from ..models.banking import (
    Account,
    Bank,
    Card,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from .service import AccountService

logger = structlog.get_logger(__name__)


@dataclass
class LedgerAccount:
    """Balance and settled history of one account."""
    account: Account
    balance: float
    history: list[Transaction] = field(default_factory=list)


class SimulatedRemoteAccountService(AccountService):
    """In-memory bank with random latency and random declines."""

    def __init__(
        self,
        params: Optional[RemoteParams] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.params = params or RemoteParams()
        self.rng = rng or random.Random(self.params.seed)
        self.sleep = sleep
        self.bank = Bank(bank_id=self._bank_id(self.params.bank_name), name=self.params.bank_name)
        self.logger = logger.bind(bank=self.bank.name)

        self._pins: dict[str, str] = {}
        self._accounts: dict[str, str] = {}
        self._ledgers: dict[str, LedgerAccount] = {}

        self.logger.info("Remote account service initialized")

    @staticmethod
    def _bank_id(name: str) -> str:
        letters = "".join(ch for ch in name.upper() if ch.isalpha())
        return f"{letters[:4]}001"

    def register_card(self, card: Card, pin: str, account_number: Optional[str] = None,
                      balance: Optional[float] = None) -> Account:
        """Provision a card with a PIN and optionally a fixed account and balance."""
        self._pins[card.card_number] = pin
        if account_number is not None:
            self._accounts[card.card_number] = account_number
        account = self._account_for(card)
        if balance is not None:
            self._ledger(account).balance = balance
        return account

    def _simulate_latency(self) -> None:
        low, high = self.params.min_latency_ms, self.params.max_latency_ms
        if high <= 0:
            return
        self.sleep(self.rng.uniform(low, high) / 1000.0)

    def _account_for(self, card: Card) -> Account:
        account_number = self._accounts.get(card.card_number)
        if account_number is None:
            digest = hashlib.sha256(card.card_number.encode("utf-8")).hexdigest()
            account_number = str(int(digest, 16))[:12]
            self._accounts[card.card_number] = account_number
        return Account(account_number=account_number, bank=card.bank)

    def _ledger(self, account: Account) -> LedgerAccount:
        ledger = self._ledgers.get(account.account_number)
        if ledger is None:
            opening = self.rng.uniform(self.params.min_opening_balance,
                                       self.params.max_opening_balance)
            ledger = LedgerAccount(account=account, balance=round(opening, 2))
            self._ledgers[account.account_number] = ledger
        return ledger

    def authenticate(self, card: Card, pin: str) -> bool:
        self._simulate_latency()
        expected = self._pins.get(card.card_number, self.params.default_pin)
        authenticated = pin == expected
        self.logger.debug("Authentication processed", card=card.masked_number,
                          authenticated=authenticated)
        return authenticated

    def lookup_account(self, card: Card) -> Account:
        self._simulate_latency()
        return self._account_for(card)

    def get_account_balance(self, account: Account) -> float:
        self._simulate_latency()
        return self._ledger(account).balance

    def execute_transaction(self, transaction: Transaction) -> TransactionStatus:
        self._simulate_latency()
        ledger = self._ledger(transaction.account)

        if self.rng.random() < self.params.failure_rate:
            status = TransactionStatus.FAILURE
        elif transaction.type == TransactionType.WITHDRAWAL:
            if ledger.balance >= transaction.amount:
                ledger.balance = round(ledger.balance - transaction.amount, 2)
                status = TransactionStatus.SUCCESS
            else:
                status = TransactionStatus.FAILURE
        elif transaction.type == TransactionType.DEPOSIT:
            ledger.balance = round(ledger.balance + transaction.amount, 2)
            status = TransactionStatus.SUCCESS
        else:
            status = TransactionStatus.SUCCESS

        ledger.history.append(transaction.settle(status))
        self.logger.debug(
            "Transaction processed",
            transaction_id=transaction.transaction_id,
            type=transaction.type.value,
            status=status.value
        )
        return status

    def get_mini_statement(self, account: Account) -> list[Transaction]:
        self._simulate_latency()
        history = self._ledger(account).history
        return list(reversed(history[-self.params.statement_size:]))

    def change_pin(self, card: Card, old_pin: str, new_pin: str) -> bool:
        self._simulate_latency()
        expected = self._pins.get(card.card_number, self.params.default_pin)
        if old_pin != expected or not new_pin:
            return False
        self._pins[card.card_number] = new_pin
        return True
