"""Error types and classifications."""

from __future__ import annotations

from enum import StrEnum


class ErrorCategory(StrEnum):
    """Error categories for fallback and diagnostics."""

    NOT_CONFIGURED = "not_configured"
    TRANSPORT = "transport"
    UPSTREAM_REJECTED = "upstream_rejected"
    MISSING_PAYLOAD = "missing_payload"
    PARSE = "parse"
    PERSISTENCE = "persistence"
    UNKNOWN = "unknown"


class BalancelineError(Exception):
    """Base class for errors raised while resolving a balance."""

    category: ErrorCategory = ErrorCategory.UNKNOWN


class NotConfigured(BalancelineError):
    """No API key or base URL could be discovered."""

    category = ErrorCategory.NOT_CONFIGURED


class TransportFailure(BalancelineError):
    """Connection failure, timeout, or unexpected HTTP status."""

    category = ErrorCategory.TRANSPORT


class UpstreamRejected(BalancelineError):
    """The relay reported a logical failure (bad credential, success=false)."""

    category = ErrorCategory.UPSTREAM_REJECTED


class MissingPayload(BalancelineError):
    """The relay reported success but sent no data body."""

    category = ErrorCategory.MISSING_PAYLOAD


class ParseFailure(BalancelineError):
    """The response body was not valid JSON or did not match the schema."""

    category = ErrorCategory.PARSE


# HTTP statuses the relay uses to say the credential is wrong.
REJECTED_STATUS_CODES = frozenset({401, 403})
