"""Masking helpers for card and account identifiers in logs."""

from typing import Optional


def mask_card_number(card_number: Optional[str]) -> str:
    """Show only the first and last four digits of a card number."""
    if not card_number or len(card_number) < 8:
        return "****"
    return f"{card_number[:4]}****{card_number[-4:]}"


def mask_account_number(account_number: Optional[str]) -> str:
    """Show only the last four digits of an account number."""
    if not account_number or len(account_number) < 6:
        return "****"
    return f"****{account_number[-4:]}"
