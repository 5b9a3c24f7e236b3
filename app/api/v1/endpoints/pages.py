"""Page access API: phase guard for a named page."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import CurrentUser, get_current_user
from app.application.services.phase_access import (
    can_access_page,
    get_page_phase_requirement,
    resolve_module_phase_limit,
    resolve_phase_access,
)
from app.domain.exceptions import PageAccessDeniedException
from app.schemas.tenant_config import PageAccessResponse, phase_or_none

router = APIRouter()


@router.get("/{page_name}/access", response_model=PageAccessResponse)
async def check_page_access(
    page_name: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    max_phase: Annotated[int | None, Query(ge=1, le=6)] = None,
) -> PageAccessResponse:
    """Return 200 when the user's phase limit (or max_phase) covers the page; 403 otherwise."""
    limit: float = (
        max_phase
        if max_phase is not None
        else resolve_module_phase_limit(current_user, resolve_phase_access(current_user))
    )
    required = get_page_phase_requirement(page_name)
    if not can_access_page(page_name, limit):
        raise PageAccessDeniedException(page_name, required, limit)
    return PageAccessResponse(
        page_name=page_name,
        required_phase=required,
        max_phase=phase_or_none(limit),
    )
