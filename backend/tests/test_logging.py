"""
Tests for the structlog setup and request/actor context binding.
"""

import logging

import structlog

from housebooking.core.config import get_settings
from housebooking.core.logging import (
    NOISY_LOGGERS,
    add_service_context,
    bind_actor,
    bind_request,
    setup_logging,
)


def test_setup_logging_is_idempotent():
    setup_logging()
    handlers = list(logging.getLogger().handlers)
    setup_logging()
    assert logging.getLogger().handlers == handlers
    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_request_context_replaces_previous_request():
    bind_request("first", "GET", "/api/Bookings")
    bind_actor("user-1")
    bind_request("second", "POST", "/api/Bookings")

    context = structlog.contextvars.get_contextvars()
    assert context == {"request_id": "second", "method": "POST", "path": "/api/Bookings"}
    structlog.contextvars.clear_contextvars()


def test_actor_bound_only_when_known():
    structlog.contextvars.clear_contextvars()
    bind_actor(None)
    assert "user_id" not in structlog.contextvars.get_contextvars()
    bind_actor("user-1")
    assert structlog.contextvars.get_contextvars()["user_id"] == "user-1"
    structlog.contextvars.clear_contextvars()


def test_service_context_does_not_override_event_fields():
    settings = get_settings()
    event = add_service_context(None, "info", {"event": "booking_created", "environment": "custom"})
    assert event["service"] == settings.APP_NAME
    assert event["environment"] == "custom"
