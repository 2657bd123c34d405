"""
Error classification tests for the ATM core.

Covers the hierarchy, the attributes each error carries and which errors are
flagged as caller mistakes rather than recoverable outcomes.
"""

import pytest

from atm_app.errors import (
    ATMError,
    AuthenticationFailed,
    CardRejected,
    DeviceError,
    DispensingError,
    IllegalSessionTransition,
    InsufficientFunds,
    InvalidInput,
    NoFeasiblePlan,
    RemoteServiceFailure,
    SessionError,
)


class TestErrorClassification:
    """Test error classification system."""

    def test_base_error(self):
        """Test the root of the hierarchy."""
        error = ATMError("base error")
        assert error.message == "base error"
        assert error.context == {}
        assert error.recoverable is True

    def test_context_preserved(self):
        """Test that extra context travels with the error."""
        error = DispensingError("short", context={"short_lines": {100: 2}})
        assert error.context == {"short_lines": {100: 2}}

    @pytest.mark.parametrize("error_cls", [
        IllegalSessionTransition, AuthenticationFailed, CardRejected, InvalidInput, DeviceError,
    ])
    def test_session_errors(self, error_cls):
        """Test that session errors share a base."""
        assert issubclass(error_cls, SessionError)
        assert issubclass(error_cls, ATMError)

    @pytest.mark.parametrize("error_cls", [InsufficientFunds, NoFeasiblePlan])
    def test_dispensing_errors(self, error_cls):
        """Test that dispensing errors share a base."""
        assert issubclass(error_cls, DispensingError)

    def test_usage_errors_not_recoverable(self):
        """Test that caller mistakes are flagged as such."""
        assert IllegalSessionTransition("bad").recoverable is False
        assert InvalidInput("bad").recoverable is False
        assert AuthenticationFailed("wrong pin").recoverable is True
        assert RemoteServiceFailure("down").recoverable is True


class TestErrorAttributes:
    """Test the fields each error exposes."""

    def test_illegal_transition(self):
        """Test state and intent on an illegal transition."""
        error = IllegalSessionTransition("nope", current_state="idle", attempted_intent="eject")
        assert error.current_state == "idle"
        assert error.attempted_intent == "eject"

    def test_authentication_failed_remaining(self):
        """Test that remaining attempts never go negative."""
        assert AuthenticationFailed("x", attempts=1, max_attempts=3).attempts_remaining == 2
        assert AuthenticationFailed("x", attempts=4, max_attempts=3).attempts_remaining == 0

    def test_insufficient_funds(self):
        """Test requested and available amounts."""
        error = InsufficientFunds("short", requested=500, available=300)
        assert (error.requested, error.available) == (500, 300)

    def test_remote_failure(self):
        """Test the operation and transaction id on a remote failure."""
        error = RemoteServiceFailure("declined", operation="TRANSACTION", transaction_id="TXN1-0001")
        assert error.operation == "TRANSACTION"
        assert error.transaction_id == "TXN1-0001"
        assert str(error) == "declined"
