"""
ATM App - Cash Machine Transaction Core

A self-service cash machine simulator core. Sequences card insertion, PIN
authentication, operation selection and transaction execution through a
session state machine backed by a pluggable note dispensing engine and a
caching proxy over a remote account service.
"""

__version__ = "0.1.0"
__author__ = "ATM Team"
