"""Test helpers for strategy-engine.

- Assertions: state-intact and error-payload assertion helpers
"""

from .assertions import assert_error_kind, assert_rejected, assert_unchanged

__all__ = [
    "assert_unchanged",
    "assert_rejected",
    "assert_error_kind",
]
