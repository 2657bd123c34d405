"""
Cash dispensing module.

Note inventory, pluggable dispensing strategies and the cash dispenser that
applies a strategy's plan to the inventory as a single atomic debit.
"""
