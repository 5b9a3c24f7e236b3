"""Shared cross-cutting helpers: request context and telemetry. No business logic."""

from app.shared.context import (
    get_correlation_id,
    get_request_id,
    set_correlation_id,
    set_request_id,
)

__all__ = [
    "get_correlation_id",
    "get_request_id",
    "set_correlation_id",
    "set_request_id",
]
