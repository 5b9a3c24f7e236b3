"""Startup schema evolution and default seeding for the legacy tables.

bootstrap_database() is safe to run on every start against an empty,
partially migrated or fully migrated database (SQLite or PostgreSQL):

1. create the base tables (users, tenants, shiftlog, appsettings) if missing;
2. add every missing tenants/users column after an introspection check;
3. insert tenant id 1 ("Default Tenant") unless present;
4. insert tenant TNT-002 ("Connecticut Metals") unless present;
5. backfill NULL tenant columns with COALESCE defaults;
6. insert the super admin, then pin its role and tenant code;
7. insert the restricted second-tenant admin, then pin its tenant and role
   while only filling phase_limit when it is NULL.

Seed rows are written with single conditional statements (ON CONFLICT DO
NOTHING or INSERT ... SELECT ... WHERE NOT EXISTS), so concurrent starts do
not duplicate them. The super admin's role is reset on every run; the
restricted admin keeps a non-null phase_limit. Any database error aborts
startup with BootstrapException.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import (
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    Table,
    TableClause,
    Text,
    case,
    cast,
    column,
    func,
    inspect,
    literal,
    select,
    table,
    text,
    update,
)
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
from sqlalchemy.types import TypeEngine

from app.application.services.phase_access import format_phase_label
from app.application.services.theme_service import DEFAULT_PRIMARY, DEFAULT_SECONDARY
from app.core.config import Settings
from app.domain.enums import AccountRole, DetailedRole, TenantStatus
from app.domain.exceptions import BootstrapException
from app.infrastructure.security.password import get_password_hash

logger = logging.getLogger(__name__)

DEFAULT_TENANT_ID = 1
DEFAULT_TENANT_NAME = "Default Tenant"
DEFAULT_TENANT_CODE = "TNT-001"

SECOND_TENANT_CODE = "TNT-002"
SECOND_TENANT = {
    "name": "Connecticut Metals",
    "tenant_id": SECOND_TENANT_CODE,
    "display_name": "CT Metals",
    "region": "Northeast",
    "status": TenantStatus.ACTIVE.value,
    "branding_primary_color": "#F97316",
    "branding_secondary_color": "#F43F5E",
}

SUPER_ADMIN_NAME = "Admin User"
RESTRICTED_ADMIN_PHASE = 3
RESTRICTED_ADMIN_PHASE_LIMIT = format_phase_label(RESTRICTED_ADMIN_PHASE)

TENANT_COLUMNS: tuple[tuple[str, TypeEngine[Any]], ...] = (
    ("tenant_id", Text()),
    ("display_name", Text()),
    ("region", Text()),
    ("code", Text()),
    ("base_subdomain", Text()),
    ("tenant_code", Text()),
    ("business_type", Text()),
    ("primary_contact_name", Text()),
    ("primary_contact_email", Text()),
    ("primary_contact_phone", Text()),
    ("default_currency", Text()),
    ("country_code", Text()),
    ("phone_number_format", Text()),
    ("unit_system", Text()),
    ("timezone", Text()),
    ("date_format", Text()),
    ("number_format_json", Text()),
    ("branding_primary_color", Text()),
    ("branding_secondary_color", Text()),
    ("branding_logo_url", Text()),
    ("address_line1", Text()),
    ("address_line2", Text()),
    ("city", Text()),
    ("state_province", Text()),
    ("postal_code", Text()),
    ("address_country_code", Text()),
    ("website", Text()),
    ("description", Text()),
    ("default_load_types_json", Text()),
    ("features_json", Text()),
    ("api_keys_json", Text()),
    ("created_date", DateTime()),
    ("updated_date", DateTime()),
)

USER_COLUMNS: tuple[tuple[str, TypeEngine[Any]], ...] = (
    ("phase_limit", Text()),
    ("detailed_role", Text()),
)

# Legacy shapes, created only when the table is missing. Later columns are
# added by TENANT_COLUMNS / USER_COLUMNS so old databases converge on the
# same schema as new ones.
_legacy = MetaData()

_legacy_users = Table(
    "users",
    _legacy,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", Text, unique=True, nullable=False),
    Column("password", Text, nullable=False),
    Column("full_name", Text),
    Column("tenant_id", Text),
    Column("role", Text, server_default=AccountRole.USER.value),
    Column("created_at", DateTime, server_default=func.now()),
    Column("updated_at", DateTime, server_default=func.now()),
)

_legacy_tenants = Table(
    "tenants",
    _legacy,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("status", Text, server_default="active"),
    Column("created_at", DateTime, server_default=func.now()),
)

_legacy_shiftlog = Table(
    "shiftlog",
    _legacy,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("operator_email", Text),
    Column("operator_name", Text),
    Column("tenant_id", Text),
    Column("shift_start", DateTime),
    Column("shift_end", DateTime),
    Column("status", Text, server_default="active"),
    Column("shipments_processed", Integer, server_default="0"),
    Column("materials_classified", Integer, server_default="0"),
    Column("bins_assigned", Integer, server_default="0"),
    Column("created_date", DateTime, server_default=func.now()),
    Column("updated_date", DateTime, server_default=func.now()),
)

_legacy_appsettings = Table(
    "appsettings",
    _legacy,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tenant_id", Text),
    Column("setting_key", Text, nullable=False),
    Column("setting_value", Text),
    Column("setting_category", Text, server_default="features"),
    Column("description", Text),
    Column("phase", Integer),
    Column("created_date", DateTime, server_default=func.now()),
    Column("updated_date", DateTime, server_default=func.now()),
    Index("ux_appsettings_tenant_key", "tenant_id", "setting_key", unique=True),
)


def _full_table(
    legacy: Table, added: tuple[tuple[str, TypeEngine[Any]], ...]
) -> TableClause:
    """Column-only view of a table after evolution (no ORM defaults or onupdate)."""
    return table(
        legacy.name,
        *(column(c.name, c.type) for c in legacy.columns),
        *(column(name, column_type) for name, column_type in added),
    )


tenants = _full_table(_legacy_tenants, TENANT_COLUMNS)
users = _full_table(_legacy_users, USER_COLUMNS)


@dataclass
class BootstrapReport:
    """What a bootstrap run changed. Empty lists mean the store was already current."""

    tables_created: list[str] = field(default_factory=list)
    columns_added: list[str] = field(default_factory=list)
    tenants_seeded: list[str] = field(default_factory=list)
    users_seeded: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(
            self.tables_created
            or self.columns_added
            or self.tenants_seeded
            or self.users_seeded
        )


@contextmanager
def _step(name: str) -> Iterator[None]:
    """Convert database errors raised inside the block into BootstrapException."""
    try:
        yield
    except SQLAlchemyError as exc:
        reason = str(getattr(exc, "orig", None) or exc)
        logger.error("Bootstrap step %s failed: %s", name, reason)
        raise BootstrapException(name, reason) from exc


def _insert_for(conn: AsyncConnection):
    """Return the dialect insert() that supports on_conflict_do_nothing()."""
    name = conn.dialect.name
    if name == "sqlite":
        return sqlite.insert
    if name == "postgresql":
        return postgresql.insert
    raise BootstrapException("dialect", f"unsupported database dialect: {name}")


def _tenant_code_expression(conn: AsyncConnection) -> Any:
    """SQL for 'TNT-' + id zero-padded to three digits (wider ids unpadded)."""
    if conn.dialect.name == "sqlite":
        return func.printf("TNT-%03d", tenants.c.id)
    id_text = cast(tenants.c.id, Text)
    return literal("TNT-") + case(
        (tenants.c.id < 1000, func.lpad(id_text, 3, "0")),
        else_=id_text,
    )


async def _create_base_tables(conn: AsyncConnection, report: BootstrapReport) -> None:
    def create(sync_conn: Connection) -> list[str]:
        existing = set(inspect(sync_conn).get_table_names())
        _legacy.create_all(sync_conn, checkfirst=True)
        return [t.name for t in _legacy.sorted_tables if t.name not in existing]

    with _step("create_tables"):
        report.tables_created.extend(await conn.run_sync(create))


async def _ensure_columns(
    conn: AsyncConnection,
    table_name: str,
    columns: tuple[tuple[str, TypeEngine[Any]], ...],
    report: BootstrapReport,
) -> None:
    """Add each column the table does not have yet. Existing columns are skipped."""
    with _step(f"inspect:{table_name}"):
        existing = await conn.run_sync(
            lambda sync_conn: {c["name"] for c in inspect(sync_conn).get_columns(table_name)}
        )
    preparer = conn.dialect.identifier_preparer
    if_not_exists = "IF NOT EXISTS " if conn.dialect.name == "postgresql" else ""
    for name, column_type in columns:
        if name in existing:
            continue
        ddl = (
            f"ALTER TABLE {preparer.quote(table_name)} ADD COLUMN {if_not_exists}"
            f"{preparer.quote(name)} {column_type.compile(dialect=conn.dialect)}"
        )
        with _step(f"add_column:{table_name}.{name}"):
            await conn.execute(text(ddl))
        report.columns_added.append(f"{table_name}.{name}")


async def _seed_default_tenant(conn: AsyncConnection, report: BootstrapReport) -> None:
    insert = _insert_for(conn)
    stmt = (
        insert(tenants)
        .values(id=DEFAULT_TENANT_ID, name=DEFAULT_TENANT_NAME)
        .on_conflict_do_nothing(index_elements=["id"])
    )
    with _step("seed_tenant:default"):
        result = await conn.execute(stmt)
        if conn.dialect.name == "postgresql":
            # Explicit ids do not advance the serial sequence.
            max_id = select(func.coalesce(func.max(tenants.c.id), 1)).scalar_subquery()
            await conn.execute(
                select(func.setval(func.pg_get_serial_sequence("tenants", "id"), max_id))
            )
    if result.rowcount:
        report.tenants_seeded.append(DEFAULT_TENANT_CODE)


async def _seed_second_tenant(conn: AsyncConnection, report: BootstrapReport) -> None:
    already = (
        select(tenants.c.id)
        .where(tenants.c.tenant_id == SECOND_TENANT_CODE)
        .correlate(None)
        .exists()
    )
    names = list(SECOND_TENANT)
    rows = select(
        *(literal(SECOND_TENANT[name], Text) for name in names),
        func.now(),
        func.now(),
    ).where(~already)
    stmt = tenants.insert().from_select([*names, "created_date", "updated_date"], rows)
    with _step(f"seed_tenant:{SECOND_TENANT_CODE}"):
        result = await conn.execute(stmt)
    if result.rowcount:
        report.tenants_seeded.append(SECOND_TENANT_CODE)


async def _backfill_tenants(conn: AsyncConnection) -> None:
    t = tenants.c
    name_slug = func.lower(func.replace(t.name, " ", ""))
    stmt = update(tenants).values(
        tenant_id=func.coalesce(t.tenant_id, _tenant_code_expression(conn)),
        display_name=func.coalesce(t.display_name, t.name),
        region=func.coalesce(t.region, "Global"),
        status=func.coalesce(func.upper(t.status), TenantStatus.ACTIVE.value),
        code=func.coalesce(t.code, name_slug),
        tenant_code=func.coalesce(t.tenant_code, t.code, name_slug),
        base_subdomain=func.coalesce(t.base_subdomain, name_slug),
        business_type=func.coalesce(t.business_type, "general_manufacturing"),
        default_currency=func.coalesce(t.default_currency, "USD"),
        country_code=func.coalesce(t.country_code, "US"),
        phone_number_format=func.coalesce(t.phone_number_format, "+1 (XXX) XXX-XXXX"),
        unit_system=func.coalesce(t.unit_system, "METRIC"),
        timezone=func.coalesce(t.timezone, "America/New_York"),
        date_format=func.coalesce(t.date_format, "YYYY-MM-DD"),
        number_format_json=func.coalesce(
            t.number_format_json, '{"decimal": ".", "thousand": ","}'
        ),
        branding_primary_color=func.coalesce(t.branding_primary_color, DEFAULT_PRIMARY),
        branding_secondary_color=func.coalesce(
            t.branding_secondary_color, DEFAULT_SECONDARY
        ),
        address_country_code=func.coalesce(t.address_country_code, t.country_code, "US"),
        default_load_types_json=func.coalesce(t.default_load_types_json, "[]"),
        features_json=func.coalesce(t.features_json, "{}"),
        api_keys_json=func.coalesce(t.api_keys_json, "{}"),
        created_date=func.coalesce(t.created_date, func.now()),
        updated_date=func.coalesce(t.updated_date, func.now()),
    )
    with _step("backfill_tenants"):
        await conn.execute(stmt)


async def _user_exists(conn: AsyncConnection, email: str, step: str) -> bool:
    with _step(step):
        found = await conn.scalar(select(users.c.id).where(users.c.email == email))
    return found is not None


async def _seed_user(
    conn: AsyncConnection,
    step: str,
    values: dict[str, Any],
    password: str,
) -> bool:
    """Insert the user unless the email exists. Returns True when a row was added.

    The lookup only avoids hashing on every start; the insert itself is
    conditional on the unique email.
    """
    if await _user_exists(conn, values["email"], step):
        return False
    hashed = await asyncio.to_thread(get_password_hash, password)
    stmt = (
        _insert_for(conn)(users)
        .values(**values, password=hashed)
        .on_conflict_do_nothing(index_elements=["email"])
    )
    with _step(step):
        result = await conn.execute(stmt)
    return bool(result.rowcount)


async def _seed_super_admin(
    conn: AsyncConnection, settings: Settings, report: BootstrapReport
) -> None:
    email = settings.default_admin_email.lower()
    step = "seed_user:super_admin"
    inserted = await _seed_user(
        conn,
        step,
        {
            "email": email,
            "full_name": SUPER_ADMIN_NAME,
            "tenant_id": DEFAULT_TENANT_CODE,
            "role": AccountRole.SUPER_ADMIN.value,
            "detailed_role": DetailedRole.SUPERADMIN.value,
        },
        settings.default_admin_password.get_secret_value(),
    )
    if inserted:
        report.users_seeded.append(email)
    with _step(step):
        await conn.execute(
            update(users)
            .where(users.c.email == email)
            .values(
                role=AccountRole.SUPER_ADMIN.value,
                tenant_id=func.coalesce(users.c.tenant_id, DEFAULT_TENANT_CODE),
                detailed_role=func.coalesce(
                    users.c.detailed_role, DetailedRole.SUPERADMIN.value
                ),
            )
        )
        # Rows written before tenant codes existed point at the numeric id.
        await conn.execute(
            update(users)
            .where(users.c.email == email, users.c.tenant_id == str(DEFAULT_TENANT_ID))
            .values(tenant_id=DEFAULT_TENANT_CODE)
        )


async def _seed_restricted_admin(
    conn: AsyncConnection, settings: Settings, report: BootstrapReport
) -> None:
    email = settings.restricted_admin_email
    step = "seed_user:restricted_admin"
    inserted = await _seed_user(
        conn,
        step,
        {
            "email": email,
            "full_name": settings.clnenv_user_name,
            "tenant_id": SECOND_TENANT_CODE,
            "role": AccountRole.PHASE3_ADMIN.value,
            "phase_limit": RESTRICTED_ADMIN_PHASE_LIMIT,
        },
        settings.clnenv_user_password.get_secret_value(),
    )
    if inserted:
        report.users_seeded.append(email)
        return
    with _step(step):
        await conn.execute(
            update(users)
            .where(users.c.email == email)
            .values(
                tenant_id=SECOND_TENANT_CODE,
                role=AccountRole.PHASE3_ADMIN.value,
                phase_limit=func.coalesce(users.c.phase_limit, RESTRICTED_ADMIN_PHASE_LIMIT),
            )
        )


async def bootstrap_database(engine: AsyncEngine, settings: Settings) -> BootstrapReport:
    """Create, evolve and seed the schema in one transaction.

    Args:
        engine: Async engine for the target database (sqlite or postgresql).
        settings: Provides the seed account credentials.

    Returns:
        BootstrapReport of what changed.

    Raises:
        BootstrapException: On any database error; the transaction is rolled back.
    """
    report = BootstrapReport()
    with _step("transaction"):
        async with engine.begin() as conn:
            await _create_base_tables(conn, report)
            await _ensure_columns(conn, "tenants", TENANT_COLUMNS, report)
            await _ensure_columns(conn, "users", USER_COLUMNS, report)
            await _seed_default_tenant(conn, report)
            await _seed_second_tenant(conn, report)
            await _backfill_tenants(conn)
            await _seed_super_admin(conn, settings, report)
            await _seed_restricted_admin(conn, settings, report)
    if report.changed:
        logger.info(
            "Database bootstrap applied: tables=%s columns=%d tenants=%s users=%s",
            report.tables_created,
            len(report.columns_added),
            report.tenants_seeded,
            report.users_seeded,
        )
    else:
        logger.info("Database bootstrap: schema and seed data already current")
    return report
