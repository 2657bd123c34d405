"""
Account service proxy.

Implements the account service contract in front of the remote bank and adds
three concerns transparently:

- Logging: a masked request event and a response event with latency for
  every call
- Validation: malformed PINs, cards, accounts and transactions are rejected
  locally with InvalidInput and never reach the remote service
- Caching: the balance of the last queried account is served from a
  single-entry cache within its TTL; any executed transaction clears it
"""

import time
from typing import Any, Callable, Optional

from ..config.defaults import ProxyParams
from ..errors import InvalidInput, RemoteServiceFailure
from ..logging.config import get_proxy_logger, log_service_call
from ..models.banking import (
    Account,
    Card,
    Transaction,
    TransactionStatus,
    TransactionType,
    validate_pin,
)
from ..utils.time import Clock
from .cache import BalanceCache
from .service import AccountService

proxy_logger = get_proxy_logger(__name__)

_AMOUNT_TYPES = (TransactionType.WITHDRAWAL, TransactionType.DEPOSIT)


class AccountServiceProxy(AccountService):
    """Logging, validating and caching front for an AccountService."""

    def __init__(
        self,
        remote: AccountService,
        params: Optional[ProxyParams] = None,
        pin_length: int = 4,
        clock: Optional[Clock] = None
    ):
        self.remote = remote
        self.params = params or ProxyParams()
        self.pin_length = pin_length
        self.cache = BalanceCache(ttl_seconds=self.params.balance_cache_ttl_seconds, clock=clock)
        self.logger = proxy_logger

    # -- validation -------------------------------------------------------

    def validate_pin(self, pin: Any, field: str = "pin") -> None:
        validate_pin(pin, self.pin_length, field=field)

    @staticmethod
    def _require_card(card: Optional[Card]) -> None:
        if card is None or not card.card_number:
            raise InvalidInput("Card is required", field="card", value=card)

    @staticmethod
    def _require_account(account: Optional[Account]) -> None:
        if account is None or not account.account_number:
            raise InvalidInput("Account is required", field="account", value=account)

    def _validate_transaction(self, transaction: Optional[Transaction]) -> None:
        if transaction is None:
            raise InvalidInput("Transaction is required", field="transaction", value=None)
        self._require_account(transaction.account)
        if transaction.status != TransactionStatus.PENDING:
            raise InvalidInput(
                "Only pending transactions can be executed",
                field="status",
                value=transaction.status.value
            )
        if transaction.type in _AMOUNT_TYPES and not transaction.amount > 0:
            raise InvalidInput(
                "Transaction amount must be positive",
                field="amount",
                value=transaction.amount
            )

    # -- call plumbing ----------------------------------------------------

    def _call(
        self,
        operation: str,
        validate: Callable[[], None],
        delegate: Callable[[], Any],
        describe: Callable[[Any], str],
        **details: Any
    ) -> Any:
        """Log, validate and delegate one call to the remote service."""
        log_service_call(self.logger, operation, "request", **details)

        try:
            validate()
        except InvalidInput as e:
            log_service_call(self.logger, operation, "response", outcome="INVALID_INPUT",
                             field=e.field, **details)
            raise

        start = time.perf_counter()
        try:
            result = delegate()
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start) * 1000
            log_service_call(self.logger, operation, "response", outcome="ERROR",
                             elapsed_ms=elapsed_ms, error=str(e),
                             error_type=type(e).__name__, **details)
            if isinstance(e, RemoteServiceFailure):
                raise
            raise RemoteServiceFailure(
                f"{operation} failed: {e}",
                operation=operation,
                transaction_id=details.get("transaction_id")
            ) from e

        elapsed_ms = (time.perf_counter() - start) * 1000
        log_service_call(self.logger, operation, "response", outcome=describe(result),
                         elapsed_ms=elapsed_ms, **details)
        return result

    # -- contract ---------------------------------------------------------

    def authenticate(self, card: Card, pin: str) -> bool:
        def validate() -> None:
            self._require_card(card)
            self.validate_pin(pin)

        return self._call(
            "AUTHENTICATE",
            validate,
            lambda: self.remote.authenticate(card, pin),
            lambda ok: "SUCCESS" if ok else "FAILED",
            card=card.masked_number if card else "****",
        )

    def lookup_account(self, card: Card) -> Account:
        return self._call(
            "ACCOUNT_LOOKUP",
            lambda: self._require_card(card),
            lambda: self.remote.lookup_account(card),
            lambda account: f"SUCCESS {account.masked_number}",
            card=card.masked_number if card else "****",
        )

    def get_account_balance(self, account: Account) -> float:
        if account is not None and account.account_number:
            cached = self.cache.get(account.account_number)
            if cached is not None:
                log_service_call(self.logger, "BALANCE_INQUIRY", "request",
                                 account=account.masked_number)
                log_service_call(self.logger, "BALANCE_INQUIRY", "response",
                                 outcome="SUCCESS (CACHED)", elapsed_ms=0.0,
                                 account=account.masked_number)
                return cached

        balance = self._call(
            "BALANCE_INQUIRY",
            lambda: self._require_account(account),
            lambda: self.remote.get_account_balance(account),
            lambda _: "SUCCESS",
            account=account.masked_number if account else "****",
        )
        self.cache.put(account.account_number, balance)
        return balance

    def execute_transaction(self, transaction: Transaction) -> TransactionStatus:
        # Cleared on every call, whatever account the transaction targets.
        self.cache.invalidate()

        return self._call(
            "TRANSACTION",
            lambda: self._validate_transaction(transaction),
            lambda: self.remote.execute_transaction(transaction),
            lambda status: status.value.upper(),
            transaction_id=transaction.transaction_id if transaction else None,
            type=transaction.type.value if transaction else None,
            amount=transaction.amount if transaction else None,
            account=transaction.account.masked_number if transaction and transaction.account else "****",
        )

    def get_mini_statement(self, account: Account) -> list[Transaction]:
        return self._call(
            "MINI_STATEMENT",
            lambda: self._require_account(account),
            lambda: self.remote.get_mini_statement(account),
            lambda entries: f"SUCCESS - {len(entries)} transactions",
            account=account.masked_number if account else "****",
        )

    def change_pin(self, card: Card, old_pin: str, new_pin: str) -> bool:
        def validate() -> None:
            self._require_card(card)
            self.validate_pin(old_pin, field="old_pin")
            self.validate_pin(new_pin, field="new_pin")

        return self._call(
            "PIN_CHANGE",
            validate,
            lambda: self.remote.change_pin(card, old_pin, new_pin),
            lambda ok: "SUCCESS" if ok else "FAILED",
            card=card.masked_number if card else "****",
        )
