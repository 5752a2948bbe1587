"""Tests for the per-request logging context."""

import pytest
import structlog

from fanhub.core.logging import (
    clear_request_context,
    get_request_id,
    set_request_context,
    set_user_context,
)


@pytest.mark.unit
class TestRequestContext:
    def teardown_method(self) -> None:
        clear_request_context()

    def test_request_and_user_bound(self) -> None:
        set_request_context("req-1")
        set_user_context(7)
        assert get_request_id() == "req-1"
        assert structlog.contextvars.get_contextvars() == {"request_id": "req-1", "user_id": 7}

    def test_new_request_drops_previous_user(self) -> None:
        set_request_context("req-1", user_id=7)
        set_request_context("req-2")
        assert structlog.contextvars.get_contextvars() == {"request_id": "req-2"}

    def test_cleared_outside_request(self) -> None:
        set_request_context("req-1")
        clear_request_context()
        assert get_request_id() is None
