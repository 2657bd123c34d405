"""
Per-state intent handlers and the closed transition table.

Each session state lists the intents it accepts in ``TRANSITIONS``. An intent
missing from a state's row is illegal there and the machine rejects it before
any side effect. Handlers receive the machine and the intent's arguments and
return a SessionResult; they change state only through the machine.
"""

from typing import TYPE_CHECKING, Any, Callable, Optional

from ..errors import (
    AuthenticationFailed,
    CardRejected,
    DeviceError,
    DispensingError,
    IllegalSessionTransition,
    InsufficientFunds,
    InvalidInput,
    NoFeasiblePlan,
    RemoteServiceFailure,
)
from ..models.banking import (
    Card,
    Transaction,
    TransactionStatus,
    TransactionType,
    validate_pin,
)
from .models import Intent, SessionResult, SessionState

if TYPE_CHECKING:
    from .machine import SessionStateMachine

Handler = Callable[..., SessionResult]


def _positive_number(params: dict, key: str, integral: bool = False) -> Any:
    """Read a positive amount from transaction params."""
    value = params.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not value > 0:
        raise InvalidInput(f"{key} must be a positive number", field=key, value=value)
    if integral:
        if isinstance(value, float) and not value.is_integer():
            raise InvalidInput(f"{key} must be a whole amount", field=key, value=value)
        return int(value)
    return value


def _print_receipt(machine: "SessionStateMachine", transaction: Transaction) -> Optional[str]:
    try:
        return machine.printer.print_receipt(transaction)
    except DeviceError as e:
        machine.logger.warning("Receipt not printed", reason=str(e),
                               transaction_id=transaction.transaction_id)
        return None


# -- IDLE ------------------------------------------------------------------

def _idle_insert_card(machine: "SessionStateMachine", card: Optional[Card]) -> SessionResult:
    if card is None:
        raise InvalidInput("Card is required", field="card", value=None)

    machine.card_reader.insert_card(card)

    reason = None
    rejection = "invalid"
    try:
        if not card.card_number or not card.has_readable_expiry:
            reason = "Invalid card. Please try again."
        elif card.is_expired(machine.clock.now().date()):
            reason = "Card has expired. Please contact your bank."
            rejection = "expired"
    except Exception:
        # The reader must never keep a card the machine did not accept.
        machine.card_reader.eject_card()
        raise

    if reason is not None:
        machine.screen.display_message(reason)
        machine.card_reader.eject_card()
        machine.logger.info("Card rejected", card=card.masked_number, reason=reason)
        return SessionResult(
            success=False,
            message=reason,
            error=CardRejected(reason, reason=rejection)
        )

    machine.begin_session(card)
    machine.transition(SessionState.HAS_CARD, Intent.INSERT_CARD.value,
                       context={"card": card.masked_number})
    return SessionResult(success=True, message="Card accepted")


def _no_card(intent: Intent) -> Handler:
    def handler(machine: "SessionStateMachine") -> SessionResult:
        machine.screen.display_message("Please insert your card first")
        raise IllegalSessionTransition(
            "No card inserted",
            current_state=SessionState.IDLE.value,
            attempted_intent=intent.value
        )
    return handler


# -- HAS_CARD --------------------------------------------------------------

def _has_card_authenticate(machine: "SessionStateMachine", pin: str) -> SessionResult:
    ctx = machine.require_context()
    service = machine.account_service
    validate_pin(pin, machine.params.pin_length)

    try:
        authenticated = service.authenticate(ctx.card, pin)
    except RemoteServiceFailure as e:
        return machine.failure("Unable to verify PIN at this time", e)

    if authenticated:
        try:
            ctx.account = service.lookup_account(ctx.card)
        except RemoteServiceFailure as e:
            return machine.failure("Unable to load account at this time", e)

        machine.screen.display_message("Authentication successful")
        machine.transition(SessionState.OPERATION_SELECTION, Intent.AUTHENTICATE.value,
                           context={"account": ctx.account.masked_number,
                                    "pin_attempts": ctx.pin_attempts + 1})
        return SessionResult(success=True, message="Authentication successful")

    ctx.pin_attempts += 1
    max_attempts = machine.params.max_pin_attempts
    error = AuthenticationFailed(
        f"Invalid PIN (attempt {ctx.pin_attempts} of {max_attempts})",
        attempts=ctx.pin_attempts,
        max_attempts=max_attempts
    )

    if ctx.pin_attempts >= max_attempts:
        message = "Maximum PIN attempts exceeded. Card ejected."
        machine.screen.display_message(message)
        machine.end_session("max_pin_attempts")
        return SessionResult(success=False, message=message, error=error)

    message = f"Invalid PIN. Attempts remaining: {error.attempts_remaining}"
    machine.screen.display_message(message)
    machine.screen.display_pin_prompt()
    return SessionResult(success=False, message=message, error=error)


# -- shared ----------------------------------------------------------------

def _end_session(trigger: str) -> Handler:
    def handler(machine: "SessionStateMachine") -> SessionResult:
        machine.end_session(trigger)
        return SessionResult(success=True, message="Card ejected")
    handler.__name__ = f"_end_session_{trigger}"
    return handler


# -- OPERATION_SELECTION ---------------------------------------------------

_OPERATION_STATES = {
    TransactionType.WITHDRAWAL: SessionState.WITHDRAWAL,
    TransactionType.BALANCE_INQUIRY: SessionState.BALANCE_INQUIRY,
    TransactionType.PIN_CHANGE: SessionState.PIN_CHANGE,
    TransactionType.MINI_STATEMENT: SessionState.MINI_STATEMENT,
    TransactionType.DEPOSIT: SessionState.DEPOSIT,
}

_PROMPTS = {
    TransactionType.WITHDRAWAL: "Enter withdrawal amount",
    TransactionType.PIN_CHANGE: "Enter your current and new PIN",
    TransactionType.DEPOSIT: "Please insert cash into the deposit slot",
}


def _select_operation(machine: "SessionStateMachine", operation: Any) -> SessionResult:
    op = machine.coerce_operation(operation)

    if op == TransactionType.DEPOSIT:
        machine.deposit_slot.open_slot()

    machine.transition(_OPERATION_STATES[op], Intent.SELECT_OPERATION.value,
                       context={"operation": op.value})

    if op in (TransactionType.BALANCE_INQUIRY, TransactionType.MINI_STATEMENT):
        # Nothing more to collect from the user: run straight away.
        return machine.perform_transaction({})

    machine.screen.display_message(_PROMPTS[op])
    return SessionResult(success=True, message=_PROMPTS[op])


# -- WITHDRAWAL ------------------------------------------------------------

def _withdraw(machine: "SessionStateMachine", params: dict) -> SessionResult:
    amount = _positive_number(params, "amount", integral=True)
    ctx = machine.require_context()
    dispenser = machine.dispenser

    def operation() -> SessionResult:
        if not dispenser.has_sufficient_cash(amount):
            return machine.failure(
                "Insufficient cash in ATM",
                InsufficientFunds(
                    f"Insufficient cash available for {amount}",
                    requested=amount,
                    available=dispenser.total_cash_available()
                )
            )

        try:
            dispenser.plan_for(amount)
        except NoFeasiblePlan as e:
            return machine.failure("Cannot dispense the requested amount with available notes", e)

        transaction = Transaction.create(ctx.account, TransactionType.WITHDRAWAL,
                                         amount, machine.clock.now())
        try:
            status = machine.account_service.execute_transaction(transaction)
        except RemoteServiceFailure as e:
            return machine.failure("Unable to reach bank", e,
                                   transaction=transaction.settle(TransactionStatus.FAILURE))

        transaction = transaction.settle(status)
        if status != TransactionStatus.SUCCESS:
            return machine.failure(
                "Transaction declined by bank",
                RemoteServiceFailure(
                    f"Withdrawal {transaction.transaction_id} declined",
                    operation="TRANSACTION",
                    transaction_id=transaction.transaction_id
                ),
                transaction=transaction
            )

        try:
            plan = dispenser.dispense_cash(amount)
        except DispensingError as e:
            machine.logger.error(
                "Bank debited but cash not dispensed",
                session_id=machine.session_id,
                transaction_id=transaction.transaction_id,
                amount=amount
            )
            return machine.failure("Unable to dispense cash", e, transaction=transaction)

        machine.screen.display_transaction_success()
        receipt = _print_receipt(machine, transaction)
        return SessionResult(
            success=True,
            message=f"Please take your cash: ${amount}",
            payload={"transaction": transaction, "plan": plan, "receipt": receipt}
        )

    return machine.run_operation("withdrawal_complete", operation)


# -- BALANCE_INQUIRY -------------------------------------------------------

def _balance_inquiry(machine: "SessionStateMachine", params: dict) -> SessionResult:
    ctx = machine.require_context()

    def operation() -> SessionResult:
        try:
            balance = machine.account_service.get_account_balance(ctx.account)
        except RemoteServiceFailure as e:
            return machine.failure("Unable to retrieve balance", e)

        machine.screen.display_balance(balance)
        return SessionResult(
            success=True,
            message=f"Balance: ${balance:.2f}",
            payload={"balance": balance}
        )

    return machine.run_operation("balance_inquiry_complete", operation)


# -- PIN_CHANGE ------------------------------------------------------------

def _change_pin(machine: "SessionStateMachine", params: dict) -> SessionResult:
    ctx = machine.require_context()
    old_pin = validate_pin(params.get("old_pin"), machine.params.pin_length, field="old_pin")
    new_pin = validate_pin(params.get("new_pin"), machine.params.pin_length, field="new_pin")

    def operation() -> SessionResult:
        try:
            changed = machine.account_service.change_pin(ctx.card, old_pin, new_pin)
        except RemoteServiceFailure as e:
            return machine.failure("Unable to change PIN at this time", e)

        if not changed:
            return machine.failure(
                "PIN change failed. Please verify your current PIN.",
                RemoteServiceFailure("PIN change rejected", operation="PIN_CHANGE")
            )

        machine.screen.display_message("PIN changed successfully")
        return SessionResult(success=True, message="PIN changed successfully")

    return machine.run_operation("pin_change_complete", operation)


# -- MINI_STATEMENT --------------------------------------------------------

def _mini_statement(machine: "SessionStateMachine", params: dict) -> SessionResult:
    ctx = machine.require_context()

    def operation() -> SessionResult:
        try:
            transactions = machine.account_service.get_mini_statement(ctx.account)
        except RemoteServiceFailure as e:
            return machine.failure("Unable to retrieve mini statement", e)

        try:
            slip = machine.printer.print_mini_statement(transactions, ctx.account)
        except DeviceError as e:
            return machine.failure("Unable to print mini statement", e,
                                   transactions=transactions)

        machine.screen.display_message("Mini statement printed successfully")
        return SessionResult(
            success=True,
            message=f"{len(transactions)} recent transactions",
            payload={"transactions": transactions, "slip": slip}
        )

    return machine.run_operation("mini_statement_complete", operation)


# -- DEPOSIT ---------------------------------------------------------------

def _deposit(machine: "SessionStateMachine", params: dict) -> SessionResult:
    ctx = machine.require_context()
    inserted = _positive_number(params, "amount") if "amount" in params else None
    slot = machine.deposit_slot

    def operation() -> SessionResult:
        if slot.is_deposit_timed_out():
            return machine.failure("Deposit timed out")

        if inserted is not None:
            slot.accept_cash(inserted)

        amount = slot.get_deposit_amount()
        if amount <= 0:
            return machine.failure("No cash detected")

        transaction = Transaction.create(ctx.account, TransactionType.DEPOSIT,
                                         amount, machine.clock.now())
        try:
            status = machine.account_service.execute_transaction(transaction)
        except RemoteServiceFailure as e:
            return machine.failure("Deposit processing error", e,
                                   transaction=transaction.settle(TransactionStatus.FAILURE))

        transaction = transaction.settle(status)
        if status != TransactionStatus.SUCCESS:
            return machine.failure(
                "Deposit transaction failed",
                RemoteServiceFailure(
                    f"Deposit {transaction.transaction_id} declined",
                    operation="TRANSACTION",
                    transaction_id=transaction.transaction_id
                ),
                transaction=transaction
            )

        machine.screen.display_message(f"Cash deposited successfully: ${amount:.2f}")
        receipt = _print_receipt(machine, transaction)
        return SessionResult(
            success=True,
            message=f"Deposited ${amount:.2f}",
            payload={"transaction": transaction, "receipt": receipt}
        )

    return machine.run_operation("deposit_complete", operation)


def _close_deposit_slot(machine: "SessionStateMachine") -> None:
    """Exit action of DEPOSIT: the slot is closed and drained on every path out."""
    slot = machine.deposit_slot
    try:
        if slot.is_open():
            slot.close_slot()
    finally:
        slot.reset_deposit()


# -- tables ----------------------------------------------------------------

_CANCEL = _end_session(Intent.CANCEL.value)
_EJECT = _end_session(Intent.EJECT.value)

TRANSITIONS: dict[SessionState, dict[Intent, Handler]] = {
    SessionState.IDLE: {
        Intent.INSERT_CARD: _idle_insert_card,
        Intent.CANCEL: _no_card(Intent.CANCEL),
        Intent.EJECT: _no_card(Intent.EJECT),
    },
    SessionState.HAS_CARD: {
        Intent.AUTHENTICATE: _has_card_authenticate,
        Intent.CANCEL: _CANCEL,
        Intent.EJECT: _EJECT,
    },
    SessionState.OPERATION_SELECTION: {
        Intent.SELECT_OPERATION: _select_operation,
        Intent.CANCEL: _CANCEL,
        Intent.EJECT: _EJECT,
    },
    SessionState.WITHDRAWAL: {
        Intent.PERFORM_TRANSACTION: _withdraw,
        Intent.CANCEL: _CANCEL,
        Intent.EJECT: _EJECT,
    },
    SessionState.BALANCE_INQUIRY: {
        Intent.PERFORM_TRANSACTION: _balance_inquiry,
        Intent.CANCEL: _CANCEL,
        Intent.EJECT: _EJECT,
    },
    SessionState.PIN_CHANGE: {
        Intent.PERFORM_TRANSACTION: _change_pin,
        Intent.CANCEL: _CANCEL,
        Intent.EJECT: _EJECT,
    },
    SessionState.MINI_STATEMENT: {
        Intent.PERFORM_TRANSACTION: _mini_statement,
        Intent.CANCEL: _CANCEL,
        Intent.EJECT: _EJECT,
    },
    SessionState.DEPOSIT: {
        Intent.PERFORM_TRANSACTION: _deposit,
        Intent.CANCEL: _CANCEL,
        Intent.EJECT: _EJECT,
    },
}

ENTRY_ACTIONS: dict[SessionState, Callable[["SessionStateMachine"], None]] = {
    SessionState.IDLE: lambda machine: machine.screen.display_welcome(),
    SessionState.HAS_CARD: lambda machine: machine.screen.display_pin_prompt(),
    SessionState.OPERATION_SELECTION: lambda machine: machine.screen.display_options(),
}

EXIT_ACTIONS: dict[SessionState, Callable[["SessionStateMachine"], None]] = {
    SessionState.DEPOSIT: _close_deposit_slot,
}
