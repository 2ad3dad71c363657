"""Idempotency guard for at-most-once delivery.

Usage:

    from infrastructure.idempotency import GuardDecision, IdempotencyGuard

    guard = IdempotencyGuard(store, clock)
    decision = guard.try_begin(record_id)
    if decision is GuardDecision.PERMITTED:
        ...
"""

from infrastructure.idempotency.guard import (
    GuardDecision,
    IdempotencyGuard,
    NullIdempotencyGuard,
)

__all__ = [
    "GuardDecision",
    "IdempotencyGuard",
    "NullIdempotencyGuard",
]
