"""Database bootstrap tests against temporary SQLite databases."""

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.config import Settings
from app.domain.exceptions import BootstrapException
from app.infrastructure.persistence.bootstrap import (
    DEFAULT_TENANT_CODE,
    SECOND_TENANT_CODE,
    TENANT_COLUMNS,
    USER_COLUMNS,
    bootstrap_database,
)
from app.infrastructure.security.password import verify_password


async def _scalar(engine: AsyncEngine, sql: str, **params):
    async with engine.connect() as conn:
        return await conn.scalar(text(sql), params)


async def _execute(engine: AsyncEngine, sql: str, **params) -> None:
    async with engine.begin() as conn:
        await conn.execute(text(sql), params)


async def _columns(engine: AsyncEngine, table: str) -> set[str]:
    async with engine.connect() as conn:
        rows = await conn.execute(text(f"PRAGMA table_info({table})"))
        return {row[1] for row in rows}


async def test_empty_store_is_fully_created(engine: AsyncEngine, settings: Settings) -> None:
    report = await bootstrap_database(engine, settings)
    assert set(report.tables_created) == {"users", "tenants", "shiftlog", "appsettings"}
    assert report.tenants_seeded == [DEFAULT_TENANT_CODE, SECOND_TENANT_CODE]
    assert report.users_seeded == ["admin@recims.com", "admin@clnenv.com"]
    tenant_columns = await _columns(engine, "tenants")
    assert {name for name, _ in TENANT_COLUMNS} <= tenant_columns
    assert {name for name, _ in USER_COLUMNS} <= await _columns(engine, "users")


async def test_second_run_changes_nothing(engine: AsyncEngine, settings: Settings) -> None:
    await bootstrap_database(engine, settings)
    report = await bootstrap_database(engine, settings)
    assert report.changed is False
    assert await _scalar(engine, "SELECT COUNT(*) FROM tenants WHERE id = 1") == 1
    assert (
        await _scalar(engine, "SELECT COUNT(*) FROM tenants WHERE tenant_id = :code", code=SECOND_TENANT_CODE)
        == 1
    )
    assert await _scalar(engine, "SELECT COUNT(*) FROM tenants") == 2
    assert await _scalar(engine, "SELECT COUNT(*) FROM users") == 2


async def test_backfill_fills_default_tenant(bootstrapped_engine: AsyncEngine) -> None:
    async with bootstrapped_engine.connect() as conn:
        row = (
            await conn.execute(
                text(
                    "SELECT tenant_id, display_name, region, status, code, tenant_code, "
                    "base_subdomain, default_currency, country_code, unit_system, "
                    "features_json, default_load_types_json, branding_primary_color, "
                    "created_date FROM tenants WHERE id = 1"
                )
            )
        ).one()
    assert row.tenant_id == "TNT-001"
    assert row.display_name == "Default Tenant"
    assert row.region == "Global"
    assert row.status == "ACTIVE"
    assert row.code == "defaulttenant"
    assert row.tenant_code == "defaulttenant"
    assert row.base_subdomain == "defaulttenant"
    assert row.default_currency == "USD"
    assert row.country_code == "US"
    assert row.unit_system == "METRIC"
    assert row.features_json == "{}"
    assert row.default_load_types_json == "[]"
    assert row.branding_primary_color == "#007A6E"
    assert row.created_date is not None


async def test_second_tenant_seed_values(bootstrapped_engine: AsyncEngine) -> None:
    async with bootstrapped_engine.connect() as conn:
        row = (
            await conn.execute(
                text(
                    "SELECT name, display_name, region, branding_primary_color, "
                    "branding_secondary_color, code FROM tenants WHERE tenant_id = 'TNT-002'"
                )
            )
        ).one()
    assert row.name == "Connecticut Metals"
    assert row.display_name == "CT Metals"
    assert row.region == "Northeast"
    assert row.branding_primary_color == "#F97316"
    assert row.branding_secondary_color == "#F43F5E"
    assert row.code == "connecticutmetals"


async def test_super_admin_role_is_reset(bootstrapped_engine: AsyncEngine, settings: Settings) -> None:
    await _execute(
        bootstrapped_engine,
        "UPDATE users SET role = 'user' WHERE email = 'admin@recims.com'",
    )
    await bootstrap_database(bootstrapped_engine, settings)
    assert (
        await _scalar(bootstrapped_engine, "SELECT role FROM users WHERE email = 'admin@recims.com'")
        == "super_admin"
    )
    assert (
        await _scalar(bootstrapped_engine, "SELECT tenant_id FROM users WHERE email = 'admin@recims.com'")
        == "TNT-001"
    )


async def test_super_admin_numeric_tenant_is_corrected(
    bootstrapped_engine: AsyncEngine, settings: Settings
) -> None:
    await _execute(
        bootstrapped_engine,
        "UPDATE users SET tenant_id = '1' WHERE email = 'admin@recims.com'",
    )
    await bootstrap_database(bootstrapped_engine, settings)
    assert (
        await _scalar(bootstrapped_engine, "SELECT tenant_id FROM users WHERE email = 'admin@recims.com'")
        == "TNT-001"
    )


async def test_restricted_admin_keeps_phase_limit(
    bootstrapped_engine: AsyncEngine, settings: Settings
) -> None:
    await _execute(
        bootstrapped_engine,
        "UPDATE users SET phase_limit = 'PHASE V', role = 'user', tenant_id = 'TNT-001' "
        "WHERE email = 'admin@clnenv.com'",
    )
    await bootstrap_database(bootstrapped_engine, settings)
    async with bootstrapped_engine.connect() as conn:
        row = (
            await conn.execute(
                text("SELECT phase_limit, role, tenant_id FROM users WHERE email = 'admin@clnenv.com'")
            )
        ).one()
    assert row.phase_limit == "PHASE V"
    assert row.role == "phase3_admin"
    assert row.tenant_id == "TNT-002"


async def test_restricted_admin_gets_no_detailed_role(
    bootstrapped_engine: AsyncEngine, settings: Settings
) -> None:
    await bootstrap_database(bootstrapped_engine, settings)
    assert (
        await _scalar(
            bootstrapped_engine, "SELECT detailed_role FROM users WHERE email = 'admin@clnenv.com'"
        )
        is None
    )


async def test_restricted_admin_null_phase_limit_is_filled(
    bootstrapped_engine: AsyncEngine, settings: Settings
) -> None:
    await _execute(
        bootstrapped_engine,
        "UPDATE users SET phase_limit = NULL WHERE email = 'admin@clnenv.com'",
    )
    await bootstrap_database(bootstrapped_engine, settings)
    assert (
        await _scalar(bootstrapped_engine, "SELECT phase_limit FROM users WHERE email = 'admin@clnenv.com'")
        == "PHASE III"
    )


async def test_seeded_passwords_are_bcrypt_hashes(bootstrapped_engine: AsyncEngine) -> None:
    stored = await _scalar(
        bootstrapped_engine, "SELECT password FROM users WHERE email = 'admin@recims.com'"
    )
    assert stored.startswith("$2")
    assert verify_password("admin123", stored)


async def test_restricted_admin_from_environment(
    engine: AsyncEngine, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("CLNENV_USER_EMAIL", "Ops@Example.COM")
    monkeypatch.setenv("CLNENV_USER_NAME", "Ops Admin")
    custom = Settings()
    report = await bootstrap_database(engine, custom)
    assert "ops@example.com" in report.users_seeded
    assert (
        await _scalar(engine, "SELECT full_name FROM users WHERE email = 'ops@example.com'")
        == "Ops Admin"
    )


async def test_legacy_tables_gain_columns(engine: AsyncEngine, settings: Settings) -> None:
    await _execute(
        engine,
        "CREATE TABLE tenants (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL, "
        "status TEXT DEFAULT 'active', created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP)",
    )
    await _execute(engine, "INSERT INTO tenants (id, name) VALUES (5, 'Acme Corp')")
    await _execute(
        engine,
        "CREATE TABLE users (id INTEGER PRIMARY KEY AUTOINCREMENT, email TEXT UNIQUE NOT NULL, "
        "password TEXT NOT NULL, full_name TEXT, tenant_id TEXT, role TEXT DEFAULT 'user', "
        "created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP, updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP)",
    )

    report = await bootstrap_database(engine, settings)

    assert "tenants" not in report.tables_created
    assert "users" not in report.tables_created
    assert "tenants.region" in report.columns_added
    assert "users.phase_limit" in report.columns_added
    async with engine.connect() as conn:
        row = (
            await conn.execute(
                text("SELECT tenant_id, status, code, region FROM tenants WHERE id = 5")
            )
        ).one()
    assert row.tenant_id == "TNT-005"
    assert row.status == "ACTIVE"
    assert row.code == "acmecorp"
    assert row.region == "Global"
    assert await _scalar(engine, "SELECT COUNT(*) FROM tenants") == 3


async def test_existing_columns_are_not_re_added(engine: AsyncEngine, settings: Settings) -> None:
    await _execute(
        engine,
        "CREATE TABLE tenants (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL, "
        "status TEXT, created_at TIMESTAMP, region TEXT, tenant_id TEXT)",
    )
    report = await bootstrap_database(engine, settings)
    assert "tenants.region" not in report.columns_added
    assert "tenants.tenant_id" not in report.columns_added
    assert "tenants.display_name" in report.columns_added


async def test_database_error_aborts_with_step(engine: AsyncEngine, settings: Settings) -> None:
    await _execute(engine, "CREATE TABLE tenants (id INTEGER PRIMARY KEY, label TEXT)")
    with pytest.raises(BootstrapException) as exc_info:
        await bootstrap_database(engine, settings)
    assert exc_info.value.details["step"] == "seed_tenant:default"
    assert exc_info.value.error_code == "BOOTSTRAP_ERROR"
    assert isinstance(exc_info.value.__cause__, Exception)


async def test_failed_column_alteration_is_fatal(engine: AsyncEngine, settings: Settings) -> None:
    await _execute(engine, "CREATE VIEW tenants AS SELECT 1 AS id, 'Legacy' AS name")
    with pytest.raises(BootstrapException) as exc_info:
        await bootstrap_database(engine, settings)
    assert exc_info.value.details["step"].startswith("add_column:tenants.")

    assert await _scalar(engine, "SELECT count(*) FROM tenants") == 1
    users_exists = await _scalar(
        engine, "SELECT count(*) FROM sqlite_master WHERE type = 'table' AND name = 'users'"
    )
    if users_exists:
        assert await _scalar(engine, "SELECT count(*) FROM users") == 0
