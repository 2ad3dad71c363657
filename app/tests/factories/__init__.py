"""Test data factories for deterministic test data generation."""

from tests.factories.dispatch import (
    FIXED_NOW,
    TEST_API_KEY,
    FakeGateway,
    FixedClock,
    make_stream_record,
)

__all__ = [
    "FIXED_NOW",
    "TEST_API_KEY",
    "FakeGateway",
    "FixedClock",
    "make_stream_record",
]
