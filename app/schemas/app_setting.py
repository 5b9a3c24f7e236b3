"""App settings API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class AppSettingUpsert(BaseModel):
    """Request body for PUT /app-settings/{setting_key}.

    is_global writes the tenant_id NULL row (requires canManageTenants).
    """

    setting_value: str = Field(..., max_length=4000)
    setting_category: str | None = Field(default=None, max_length=64)
    description: str | None = Field(default=None, max_length=500)
    is_global: bool = False


class AppSettingResponse(BaseModel):
    """App setting row."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: str | None
    setting_key: str
    setting_value: str | None
    setting_category: str | None = None
    description: str | None = None
    phase: int | None = None
