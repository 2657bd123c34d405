"""
Centralized logging configuration for the ATM core.

This module provides standardized logging configuration using structlog
for all components. Session transitions and account service calls go through
the helpers here so that every event carries the same field names and no raw
card or account number reaches a log line.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_session_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for session state machine events.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for state transitions
    """
    return get_logger(name).bind(
        subsystem="session_machine",
        audit_trail=True
    )


def get_proxy_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for account service proxy traffic.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for request/response logging
    """
    return get_logger(name).bind(
        subsystem="account_proxy",
        audit_trail=True
    )


def log_state_transition(
    logger: FilteringBoundLogger,
    session_id: Optional[str],
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a session state transition with standardized format.

    Args:
        logger: Structlog logger instance
        session_id: Id of the session transitioning (None once cleared)
        from_state: Current state
        to_state: Target state
        trigger: Intent or event that caused the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        session_id=session_id,
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("State transition")


def log_service_call(
    logger: FilteringBoundLogger,
    operation: str,
    phase: str,
    outcome: Optional[str] = None,
    elapsed_ms: Optional[float] = None,
    **details: Any
) -> None:
    """
    Log one side of an account service call.

    Args:
        logger: Structlog logger instance
        operation: Service operation name (AUTHENTICATE, BALANCE_INQUIRY, ...)
        phase: "request" or "response"
        outcome: Result summary for responses
        elapsed_ms: Call latency for responses
        details: Already-masked identifying fields
    """
    bound_logger = logger.bind(operation=operation, phase=phase, **details)

    if phase == "request":
        bound_logger.info("Service request")
        return

    bound_logger = bound_logger.bind(outcome=outcome)
    if elapsed_ms is not None:
        bound_logger = bound_logger.bind(elapsed_ms=round(elapsed_ms, 3))

    if outcome in ("FAILED", "FAILURE", "ERROR", "INVALID_INPUT"):
        bound_logger.warning("Service response")
    else:
        bound_logger.info("Service response")
