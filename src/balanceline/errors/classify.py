"""Exception classification for fetch attempt records."""

from __future__ import annotations

import asyncio
import json

import httpx
import msgspec

from balanceline.errors.types import REJECTED_STATUS_CODES
from balanceline.errors.types import BalancelineError
from balanceline.errors.types import ErrorCategory


def classify_exception(e: BaseException) -> ErrorCategory:
    """Map any exception raised during a fetch to an error category."""
    if isinstance(e, BalancelineError):
        return e.category

    # Network errors - httpx specific
    if isinstance(e, (httpx.TimeoutException, httpx.TransportError)):
        return ErrorCategory.TRANSPORT

    if isinstance(e, httpx.HTTPStatusError):
        if e.response.status_code in REJECTED_STATUS_CODES:
            return ErrorCategory.UPSTREAM_REJECTED
        return ErrorCategory.TRANSPORT

    if isinstance(e, asyncio.TimeoutError):
        return ErrorCategory.TRANSPORT

    # Parse errors
    if isinstance(e, (msgspec.DecodeError, json.JSONDecodeError)):
        return ErrorCategory.PARSE

    if isinstance(e, (KeyError, ValueError, TypeError)):
        return ErrorCategory.PARSE

    # File errors
    if isinstance(e, OSError):
        return ErrorCategory.PERSISTENCE

    return ErrorCategory.UNKNOWN


def describe_exception(e: BaseException) -> str:
    """Return a one-line message for an exception, never empty."""
    if isinstance(e, asyncio.TimeoutError):
        return "Fetch timed out"
    if isinstance(e, httpx.TimeoutException):
        return "Request timed out"
    if isinstance(e, httpx.ConnectError):
        return "Failed to connect to server"
    message = str(e).strip()
    return message or type(e).__name__
