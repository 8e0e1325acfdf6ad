"""Core primitives shared across player layers."""

from .progress import (
    BrokerPublisher,
    CallbackPublisher,
    NullPublisher,
    ProgressBroker,
    ProgressPublisher,
)

__all__ = [
    "ProgressBroker",
    "ProgressPublisher",
    "NullPublisher",
    "BrokerPublisher",
    "CallbackPublisher",
]
