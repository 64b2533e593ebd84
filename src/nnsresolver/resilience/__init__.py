"""
Resilience layer for nnsresolver.

Provides retry helpers for RPC transport calls.
"""

from .retry import execute_with_retry, is_transient_error, transient_retrying

__all__ = [
    "execute_with_retry",
    "is_transient_error",
    "transient_retrying",
]
