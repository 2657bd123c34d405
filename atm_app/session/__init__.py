"""
Session state machine module.

Sequences card insertion, PIN authentication, operation selection and
transaction execution. Handles IDLE → HAS_CARD → OPERATION_SELECTION → one
operation state → OPERATION_SELECTION, with cancel/eject back to IDLE.
"""
