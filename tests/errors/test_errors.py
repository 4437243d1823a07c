"""Tests for error types and exception classification."""

from __future__ import annotations

import asyncio
import json

import httpx
import msgspec
import pytest

from balanceline.errors import classify_exception
from balanceline.errors import describe_exception
from balanceline.errors.types import BalancelineError
from balanceline.errors.types import ErrorCategory
from balanceline.errors.types import MissingPayload
from balanceline.errors.types import NotConfigured
from balanceline.errors.types import ParseFailure
from balanceline.errors.types import TransportFailure
from balanceline.errors.types import UpstreamRejected


def _status_error(status_code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://relay.example.com/v1/dashboard/billing/usage")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError("error", request=request, response=response)


class TestErrorTypes:
    """Tests for the balanceline exception hierarchy."""

    @pytest.mark.parametrize(
        "error_type,category",
        [
            (NotConfigured, ErrorCategory.NOT_CONFIGURED),
            (TransportFailure, ErrorCategory.TRANSPORT),
            (UpstreamRejected, ErrorCategory.UPSTREAM_REJECTED),
            (MissingPayload, ErrorCategory.MISSING_PAYLOAD),
            (ParseFailure, ErrorCategory.PARSE),
        ],
    )
    def test_category(self, error_type, category):
        """Each error type carries its category."""
        error = error_type("boom")

        assert isinstance(error, BalancelineError)
        assert error.category == category

    def test_categories_are_strings(self):
        """Categories serialize as plain strings."""
        assert ErrorCategory.UPSTREAM_REJECTED == "upstream_rejected"


class TestClassifyException:
    """Tests for classify_exception."""

    def test_balanceline_errors_keep_their_category(self):
        """Typed errors are not reclassified."""
        assert classify_exception(MissingPayload("x")) == ErrorCategory.MISSING_PAYLOAD

    @pytest.mark.parametrize(
        "error",
        [
            httpx.ConnectError("refused"),
            httpx.ReadTimeout("slow"),
            asyncio.TimeoutError(),
        ],
    )
    def test_transport(self, error):
        """Connection problems and timeouts are transport failures."""
        assert classify_exception(error) == ErrorCategory.TRANSPORT

    @pytest.mark.parametrize("status_code", [401, 403])
    def test_rejected_status(self, status_code):
        """Credential rejections are upstream rejections."""
        assert classify_exception(_status_error(status_code)) == ErrorCategory.UPSTREAM_REJECTED

    def test_other_status(self):
        """Server errors are transport failures."""
        assert classify_exception(_status_error(502)) == ErrorCategory.TRANSPORT

    @pytest.mark.parametrize(
        "error",
        [
            msgspec.DecodeError("bad"),
            json.JSONDecodeError("bad", "doc", 0),
            KeyError("quota"),
            ValueError("bad"),
            TypeError("bad"),
        ],
    )
    def test_parse(self, error):
        """Decode and shape errors are parse failures."""
        assert classify_exception(error) == ErrorCategory.PARSE

    def test_os_error(self):
        """File errors are persistence failures."""
        assert classify_exception(PermissionError("denied")) == ErrorCategory.PERSISTENCE

    def test_unknown(self):
        """Anything else is unknown."""
        assert classify_exception(RuntimeError("?")) == ErrorCategory.UNKNOWN


class TestDescribeException:
    """Tests for describe_exception."""

    def test_fetch_timeout(self):
        """asyncio timeouts name the fetch bound."""
        assert describe_exception(asyncio.TimeoutError()) == "Fetch timed out"

    def test_request_timeout(self):
        """httpx timeouts name the request."""
        assert describe_exception(httpx.ReadTimeout("slow")) == "Request timed out"

    def test_connect_error(self):
        """Connection failures get a readable message."""
        assert describe_exception(httpx.ConnectError("refused")) == "Failed to connect to server"

    def test_message(self):
        """Other exceptions use their message."""
        assert describe_exception(TransportFailure("HTTP 502")) == "HTTP 502"

    def test_empty_message_uses_type(self):
        """An empty message falls back to the type name."""
        assert describe_exception(RuntimeError()) == "RuntimeError"
