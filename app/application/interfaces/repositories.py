"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
Snapshots are plain dicts so cached and freshly loaded rows look the same.
"""

from __future__ import annotations

from typing import Any, Protocol


class ITenantRepository(Protocol):
    """Protocol for tenant snapshot lookups."""

    async def get_snapshot(self, key: int | str) -> dict[str, Any] | None:
        """Return tenant columns by numeric id or tenant code, or None."""

    async def invalidate(self, key: int | str) -> None:
        """Drop any cached snapshot stored under key."""


class IAppSettingRepository(Protocol):
    """Protocol for app-settings snapshot lookups."""

    async def list_snapshot(self, tenant_code: str | None) -> list[dict[str, Any]]:
        """Return tenant rows plus global rows (tenant_id, setting_key, setting_value)."""

    async def invalidate_all(self) -> None:
        """Drop every cached settings snapshot."""
