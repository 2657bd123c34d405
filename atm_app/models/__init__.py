"""
Domain models module.

Immutable records for cards, accounts and transactions shared across the
session machine, the dispenser and the account service.
"""
