"""
Utility functions module.

Shared helpers for time handling and identifier masking.

Time Semantics:
- Every component that reasons about elapsed time takes an injectable clock
- Wall-clock time is only read through SystemClock
- Tests drive expiry windows by advancing a manual clock, never by sleeping
"""
