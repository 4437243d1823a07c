"""Error handling for balanceline."""

from balanceline.errors.classify import classify_exception, describe_exception
from balanceline.errors.types import (
    REJECTED_STATUS_CODES,
    BalancelineError,
    ErrorCategory,
    MissingPayload,
    NotConfigured,
    ParseFailure,
    TransportFailure,
    UpstreamRejected,
)

__all__ = [
    # Core types
    "ErrorCategory",
    "BalancelineError",
    "NotConfigured",
    "TransportFailure",
    "UpstreamRejected",
    "MissingPayload",
    "ParseFailure",
    "REJECTED_STATUS_CODES",
    # Classification functions
    "classify_exception",
    "describe_exception",
]
