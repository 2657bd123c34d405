"""
Cash dispensing strategies.

A strategy is a plain function ``(amount, available) -> plan or None``. The
plan maps denomination to note count and sums exactly to the amount; None
means the amount cannot be formed from the available notes. Strategies never
mutate ``available`` and never plan more notes than are in stock.
"""

from collections.abc import Mapping
from typing import Callable, Optional

import structlog

from ..config.defaults import DispenserParams
from ..errors import InvalidInput

logger = structlog.get_logger(__name__)

DispensingPlan = dict[int, int]
DispensingStrategy = Callable[[int, Mapping[int, int]], Optional[DispensingPlan]]


def _check_amount(amount: int) -> None:
    if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
        raise InvalidInput("Amount must be a positive integer", field="amount", value=amount)


def _greedy_descending(
    remaining: int,
    available: Mapping[int, int],
    plan: DispensingPlan
) -> int:
    """Largest-first fill of ``remaining`` into ``plan``; returns what is left."""
    for denomination in sorted(available, reverse=True):
        if remaining == 0:
            break
        still_available = available[denomination] - plan.get(denomination, 0)
        if denomination > remaining or still_available <= 0:
            continue

        take = min(remaining // denomination, still_available)
        if take > 0:
            plan[denomination] = plan.get(denomination, 0) + take
            remaining -= take * denomination

    return remaining


def minimal_notes(amount: int, available: Mapping[int, int]) -> Optional[DispensingPlan]:
    """
    Greedy, largest denomination first.

    Gives the fewest notes for canonical denominations. For arbitrary
    denomination sets greedy can miss an exact combination; that case is
    reported as infeasible rather than returned as a partial plan.

    Args:
        amount: Amount to dispense
        available: Denomination to count in stock

    Returns:
        Plan summing exactly to amount, or None
    """
    _check_amount(amount)

    plan: DispensingPlan = {}
    remaining = _greedy_descending(amount, available, plan)

    if remaining > 0:
        logger.info(
            "Cannot dispense exact amount",
            strategy="minimal_notes",
            amount=amount,
            remaining=remaining
        )
        return None

    logger.debug("Dispensing plan calculated", strategy="minimal_notes", amount=amount, plan=plan)
    return plan


def make_balanced_small_notes(
    small_max_denomination: int = 20,
    small_limit: int = 10,
    medium_max_denomination: int = 50,
    medium_limit: int = 5
) -> DispensingStrategy:
    """
    Build a small-notes-first strategy with the given caps.

    Pass 1 walks denominations ascending and takes at most ``note_cap`` notes
    of each. Pass 2 finishes any remainder largest-first from the stock left
    after pass 1. A remainder left after pass 2 means the amount is infeasible.
    """

    def note_cap(denomination: int, amount: int) -> int:
        """Max notes of ``denomination`` pass 1 may take for ``amount``."""
        if denomination <= small_max_denomination:
            return min(small_limit, amount // denomination // 2)
        if denomination <= medium_max_denomination:
            return min(medium_limit, amount // denomination)
        return amount // denomination

    def balanced_small_notes(amount: int, available: Mapping[int, int]) -> Optional[DispensingPlan]:
        _check_amount(amount)

        plan: DispensingPlan = {}
        remaining = amount

        for denomination in sorted(available):
            if remaining == 0:
                break
            if denomination > remaining or available[denomination] <= 0:
                continue

            take = min(remaining // denomination, available[denomination],
                       note_cap(denomination, amount))
            if take > 0:
                plan[denomination] = take
                remaining -= take * denomination

        if remaining > 0:
            logger.debug(
                "Small-note pass left a remainder, using larger denominations",
                strategy="balanced_small_notes",
                amount=amount,
                remaining=remaining
            )
            remaining = _greedy_descending(remaining, available, plan)

        if remaining > 0:
            logger.info(
                "Cannot dispense exact amount",
                strategy="balanced_small_notes",
                amount=amount,
                remaining=remaining
            )
            return None

        logger.debug("Dispensing plan calculated", strategy="balanced_small_notes",
                     amount=amount, plan=plan)
        return plan

    balanced_small_notes.note_cap = note_cap  # type: ignore[attr-defined]
    return balanced_small_notes


balanced_small_notes = make_balanced_small_notes()


def get_strategy(name: str, params: Optional[DispenserParams] = None) -> DispensingStrategy:
    """Resolve a configured strategy name to a strategy function."""
    if name == "minimal_notes":
        return minimal_notes
    if name == "balanced_small_notes":
        if params is None:
            return balanced_small_notes
        return make_balanced_small_notes(
            small_max_denomination=params.small_note_max_denomination,
            small_limit=params.small_note_limit,
            medium_max_denomination=params.medium_note_max_denomination,
            medium_limit=params.medium_note_limit,
        )
    raise InvalidInput(f"Unknown dispensing strategy: {name}", field="strategy", value=name)


def plan_value(plan: Mapping[int, int]) -> int:
    """Total value of a plan."""
    return sum(denomination * count for denomination, count in plan.items())
