"""
Session state machine.

Holds the active state and the session context, dispatches caller intents
through the closed transition table in ``states`` and performs every state
change through ``transition`` so that exit cleanup and logging always run.

The machine is not thread-safe: callers serialize access to one instance.
"""

from dataclasses import replace
from typing import Any, Callable, Mapping, Optional

from ..bank.service import AccountService
from ..config.defaults import SessionParams
from ..dispensing.dispenser import CashDispenser
from ..errors import IllegalSessionTransition, InvalidInput
from ..hardware.card_reader import CardReader
from ..hardware.deposit_slot import DepositSlot
from ..hardware.display import Printer, Screen
from ..logging.config import get_session_logger, log_state_transition
from ..models.banking import Card, TransactionType
from ..utils.time import Clock, get_clock
from .models import Intent, SessionContext, SessionResult, SessionState
from .states import ENTRY_ACTIONS, EXIT_ACTIONS, TRANSITIONS

session_logger = get_session_logger(__name__)


class SessionStateMachine:
    """Orchestrates one ATM session at a time."""

    def __init__(
        self,
        account_service: AccountService,
        dispenser: CashDispenser,
        card_reader: Optional[CardReader] = None,
        deposit_slot: Optional[DepositSlot] = None,
        screen: Optional[Screen] = None,
        printer: Optional[Printer] = None,
        params: Optional[SessionParams] = None,
        clock: Optional[Clock] = None
    ):
        self.account_service = account_service
        self.dispenser = dispenser
        self.clock = get_clock(clock)
        self.card_reader = card_reader or CardReader()
        self.deposit_slot = deposit_slot or DepositSlot(clock=self.clock)
        self.screen = screen or Screen()
        self.printer = printer or Printer()
        self.params = params or SessionParams()
        self.logger = session_logger

        self._state = SessionState.IDLE
        self._context: Optional[SessionContext] = None

        self.screen.display_welcome()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def context(self) -> Optional[SessionContext]:
        return self._context

    # -- public operations ------------------------------------------------

    def insert_card(self, card: Optional[Card]) -> SessionResult:
        return self._dispatch(Intent.INSERT_CARD, card)

    def authenticate(self, pin: str) -> SessionResult:
        return self._dispatch(Intent.AUTHENTICATE, pin)

    def select_operation(self, operation: TransactionType) -> SessionResult:
        return self._dispatch(Intent.SELECT_OPERATION, operation)

    def perform_transaction(self, params: Optional[Mapping[str, Any]] = None) -> SessionResult:
        return self._dispatch(Intent.PERFORM_TRANSACTION, dict(params or {}))

    def cancel(self) -> SessionResult:
        return self._dispatch(Intent.CANCEL)

    def eject(self) -> SessionResult:
        return self._dispatch(Intent.EJECT)

    # -- machinery used by state handlers ---------------------------------

    def _dispatch(self, intent: Intent, *args: Any) -> SessionResult:
        handler = TRANSITIONS[self._state].get(intent)
        if handler is None:
            self.logger.warning(
                "Intent not supported in current state",
                session_id=self.session_id,
                state=self._state.value,
                intent=intent.value
            )
            raise IllegalSessionTransition(
                f"{intent.value} is not supported in state {self._state.value}",
                current_state=self._state.value,
                attempted_intent=intent.value
            )

        result = handler(self, *args)
        if result.state is None:
            result = replace(result, state=self._state)
        return result

    @property
    def session_id(self) -> Optional[str]:
        return self._context.session_id if self._context else None

    def require_context(self) -> SessionContext:
        if self._context is None:
            raise IllegalSessionTransition(
                "No active session",
                current_state=self._state.value
            )
        return self._context

    def begin_session(self, card: Card) -> SessionContext:
        self._context = SessionContext(card=card, started_at=self.clock.now())
        return self._context

    def transition(self, to_state: SessionState, trigger: str,
                   context: Optional[dict] = None) -> None:
        """Leave the current state (running its exit action) and enter another."""
        from_state = self._state
        if from_state == to_state:
            return

        exit_action = EXIT_ACTIONS.get(from_state)
        try:
            if exit_action is not None:
                exit_action(self)
        finally:
            self._state = to_state
            log_state_transition(
                self.logger,
                session_id=self.session_id,
                from_state=from_state.value,
                to_state=to_state.value,
                trigger=trigger,
                context=context
            )

        entry_action = ENTRY_ACTIONS.get(to_state)
        if entry_action is not None:
            entry_action(self)

    def end_session(self, trigger: str) -> None:
        """Eject the card, drop the session context and return to IDLE."""
        try:
            self.transition(SessionState.IDLE, trigger)
        finally:
            if self.card_reader.is_card_inserted():
                self.card_reader.eject_card()
            self._context = None

    def run_operation(self, trigger: str, operation: Callable[[], SessionResult]) -> SessionResult:
        """Run an operation state's work and return to OPERATION_SELECTION on every path."""
        try:
            result = operation()
        finally:
            self.transition(SessionState.OPERATION_SELECTION, trigger)
        return replace(result, state=self._state)

    def failure(self, message: str, error: Optional[Exception] = None,
                **payload: Any) -> SessionResult:
        self.screen.display_transaction_failed(message)
        self.logger.info(
            "Operation failed",
            session_id=self.session_id,
            state=self._state.value,
            reason=message,
            error_type=type(error).__name__ if error else None
        )
        return SessionResult(success=False, message=message, error=error, payload=payload)

    def coerce_operation(self, operation: Any) -> TransactionType:
        try:
            return TransactionType(operation)
        except ValueError:
            raise InvalidInput(
                f"Unknown operation: {operation}",
                field="operation",
                value=operation
            ) from None
