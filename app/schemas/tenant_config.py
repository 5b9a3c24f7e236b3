"""Tenant configuration API schemas.

Unlimited phase ceilings (math.inf internally) are rendered as null.
"""

import math
from typing import Any

from pydantic import BaseModel, Field

from app.application.dtos.tenant_config import PhaseAccess, TenantConfigResult, TenantTheme


def phase_or_none(value: float) -> int | None:
    """Return an int phase, or None when unlimited."""
    return int(value) if math.isfinite(value) else None


class ThemeResponse(BaseModel):
    primary_color: str
    secondary_color: str
    primary_hsl: str | None = None
    secondary_hsl: str | None = None
    gradient: str
    glow: str
    hero_text_color: str

    @classmethod
    def from_theme(cls, theme: TenantTheme) -> "ThemeResponse":
        return cls(
            primary_color=theme.primary_color,
            secondary_color=theme.secondary_color,
            primary_hsl=theme.primary_hsl,
            secondary_hsl=theme.secondary_hsl,
            gradient=theme.gradient,
            glow=theme.glow,
            hero_text_color=theme.hero_text_color,
        )


class PhaseAccessResponse(BaseModel):
    max_phase: int | None = Field(default=None, description="Phase ceiling; null when unlimited")
    label: str | None = None
    is_restricted: bool = False

    @classmethod
    def from_phase_access(cls, access: PhaseAccess) -> "PhaseAccessResponse":
        return cls(
            max_phase=phase_or_none(access.max_phase),
            label=access.label,
            is_restricted=access.is_restricted,
        )


class TenantConfigResponse(BaseModel):
    """Response for GET /tenant-config."""

    tenant_key: int | str | None = None
    tenant_config: dict[str, Any]
    feature_flags: dict[str, Any]
    role: str
    permissions: dict[str, bool] = Field(..., description="camelCase capability flags")
    theme: ThemeResponse
    phase_access: PhaseAccessResponse
    module_phase_limit: int | None = Field(
        default=None, description="Phase limit for navigation; null when unlimited"
    )

    @classmethod
    def from_result(cls, result: TenantConfigResult) -> "TenantConfigResponse":
        return cls(
            tenant_key=result.tenant_key,
            tenant_config=result.tenant_config,
            feature_flags=result.feature_flags,
            role=result.permissions.role,
            permissions=result.permissions.capabilities(),
            theme=ThemeResponse.from_theme(result.theme),
            phase_access=PhaseAccessResponse.from_phase_access(result.phase_access),
            module_phase_limit=phase_or_none(result.module_phase_limit),
        )


class PageAccessResponse(BaseModel):
    """Response for GET /pages/{page_name}/access when access is granted."""

    page_name: str
    required_phase: int
    max_phase: int | None = Field(default=None, description="Null when unlimited")
    allowed: bool = True
