"""Role catalogue API schemas."""

from pydantic import BaseModel, Field


class RoleResponse(BaseModel):
    """One detailed role with its display metadata and capability flags."""

    code: str
    display_name: str
    color: str = Field(..., description="Badge CSS classes")
    capabilities: dict[str, bool]
