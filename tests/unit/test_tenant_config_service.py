"""Tests for TenantConfigService with in-memory repositories."""

import math
from typing import Any

import pytest

from app.application.services.tenant_config_service import (
    DEFAULT_TENANT_CONFIG,
    TenantConfigService,
    resolve_tenant_key,
)


class FakeTenantRepo:
    def __init__(self, tenants: list[dict[str, Any]]) -> None:
        self.tenants = tenants
        self.invalidated: list[int | str] = []

    async def get_snapshot(self, key: int | str) -> dict[str, Any] | None:
        field = "id" if isinstance(key, int) else "tenant_id"
        return next((dict(t) for t in self.tenants if t.get(field) == key), None)

    async def invalidate(self, key: int | str) -> None:
        self.invalidated.append(key)


class FakeAppSettingRepo:
    def __init__(self, rows: list[dict[str, Any]]) -> None:
        self.rows = rows
        self.scopes: list[str | None] = []
        self.invalidated_all = 0

    async def list_snapshot(self, tenant_code: str | None) -> list[dict[str, Any]]:
        self.scopes.append(tenant_code)
        return [r for r in self.rows if r["tenant_id"] in (None, tenant_code)]

    async def invalidate_all(self) -> None:
        self.invalidated_all += 1


ACME = {
    "id": 7,
    "tenant_id": "TNT-007",
    "name": "Acme Metals",
    "display_name": "Acme",
    "region": "Midwest",
    "branding_primary_color": "f97316",
    "branding_secondary_color": "not-a-color",
    "features_json": '{"dark_mode": "true", "enable_po_module": true}',
    "api_keys_json": '{"quickbooks": "qb-secret"}',
}


@pytest.fixture
def tenant_repo() -> FakeTenantRepo:
    return FakeTenantRepo([ACME])


@pytest.fixture
def settings_repo() -> FakeAppSettingRepo:
    return FakeAppSettingRepo(
        [
            {"tenant_id": None, "setting_key": "enable_qc_module", "setting_value": "true"},
            {"tenant_id": "TNT-007", "setting_key": "enable_po_module", "setting_value": "false"},
            {"tenant_id": "TNT-999", "setting_key": "enable_ai_insights", "setting_value": "true"},
        ]
    )


@pytest.fixture
def service(tenant_repo, settings_repo) -> TenantConfigService:
    return TenantConfigService(tenant_repo, settings_repo)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, None), ("", None), ("  ", None), (3, 3), ("12", 12), (4.0, 4), ("TNT-001", "TNT-001"), (" tnt ", "tnt")],
)
def test_resolve_tenant_key(raw, expected) -> None:
    assert resolve_tenant_key(raw) == expected


async def test_resolve_by_tenant_code(service, settings_repo) -> None:
    result = await service.resolve({"email": "a@acme.test", "tenant_id": "TNT-007", "detailed_role": "admin"})
    assert result.tenant_key == "TNT-007"
    assert settings_repo.scopes == ["TNT-007"]
    config = result.tenant_config
    assert config["display_name"] == "Acme"
    assert config["branding_primary_color"] == "#F97316"
    assert config["branding_secondary_color"] == "#005247"
    assert config["features"]["enable_po_module"] is False
    assert config["features"]["po_module_enabled"] is False
    assert config["features"]["qc_module_enabled"] is True
    assert "ai_insights_enabled" not in config["features"]
    assert result.feature_flags["dark_mode"] is True
    assert result.permissions.role == "admin"
    assert result.theme.primary_color == "#F97316"
    assert result.module_phase_limit == math.inf


async def test_resolve_by_numeric_id_scopes_settings_by_code(service, settings_repo) -> None:
    result = await service.resolve({"tenant_id": "7"})
    assert result.tenant_key == 7
    assert settings_repo.scopes == ["TNT-007"]
    assert result.tenant_config["name"] == "Acme Metals"


async def test_missing_tenant_falls_back_to_defaults(service, caplog) -> None:
    result = await service.resolve({"tenant_id": "TNT-404"})
    assert result.tenant_config["name"] == DEFAULT_TENANT_CONFIG["name"]
    assert result.tenant_config["branding_primary_color"] == "#007A6E"
    assert "TNT-404" in caplog.text


async def test_anonymous_user(service, settings_repo) -> None:
    result = await service.resolve(None)
    assert result.user is None
    assert result.tenant_key is None
    assert result.permissions.role == "none"
    assert settings_repo.scopes == [None]
    assert result.feature_flags == {"enable_qc_module": True, "qc_module_enabled": True}


async def test_phase_limit_gates_features(service) -> None:
    result = await service.resolve({"tenant_id": "TNT-007", "phase_limit": "PHASE III"})
    assert result.phase_access.max_phase == 3
    assert result.phase_access.label == "PHASE III"
    assert result.module_phase_limit == 3
    assert result.feature_flags["enable_qc_module"] is False
    assert result.feature_flags["qc_module_enabled"] is False
    assert result.tenant_config["features"]["qc_module_enabled"] is False


async def test_exempt_feature_survives_gating(service) -> None:
    user = {
        "tenant_id": "TNT-007",
        "phase_limit": "PHASE III",
        "ui_overrides": {"phaseExemptFeatures": ["qc_module_enabled"]},
    }
    result = await service.resolve(user)
    assert result.feature_flags["enable_qc_module"] is False
    assert result.feature_flags["qc_module_enabled"] is True


async def test_user_feature_overrides_apply_before_gating(service) -> None:
    user = {
        "tenant_id": "TNT-007",
        "feature_overrides": {"enable_po_module": True, "beta_banner": "on"},
    }
    result = await service.resolve(user)
    assert result.feature_flags["enable_po_module"] is True
    assert result.feature_flags["beta_banner"] == "on"
    assert result.tenant_config["features"]["beta_banner"] == "on"


async def test_tenant_scope(service) -> None:
    assert await service.tenant_scope({"tenant_id": 7}) == "TNT-007"
    assert await service.tenant_scope({"tenant_id": "TNT-404"}) == "TNT-404"
    assert await service.tenant_scope({"tenant_id": 404}) is None


async def test_refresh_invalidates_tenant_and_settings(service, tenant_repo, settings_repo) -> None:
    await service.refresh("TNT-007")
    await service.refresh()
    assert tenant_repo.invalidated == ["TNT-007"]
    assert settings_repo.invalidated_all == 2


async def test_api_keys_hidden_without_manage_tenants(service) -> None:
    admin = await service.resolve({"tenant_id": "TNT-007", "detailed_role": "admin"})
    assert "api_keys_json" not in admin.tenant_config

    superadmin = await service.resolve({"tenant_id": "TNT-007", "detailed_role": "superadmin"})
    assert superadmin.tenant_config["api_keys_json"] == '{"quickbooks": "qb-secret"}'
