"""Roles API: catalogue of detailed roles with display metadata and capabilities."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import CurrentUser, get_current_user
from app.application.services.permission_resolver import (
    ROLE_CAPABILITIES,
    get_role_color,
    get_role_display_name,
    resolve_permissions,
)
from app.schemas.role import RoleResponse

router = APIRouter()


@router.get("", response_model=list[RoleResponse])
async def list_roles(
    _: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[RoleResponse]:
    """List every known detailed role."""
    return [
        RoleResponse(
            code=code,
            display_name=get_role_display_name(code),
            color=get_role_color(code),
            capabilities=resolve_permissions({"detailed_role": code}).capabilities(),
        )
        for code in ROLE_CAPABILITIES
    ]
