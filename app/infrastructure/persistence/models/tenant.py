"""Tenant ORM model: the post-bootstrap shape of the tenants table."""

from datetime import datetime

from sqlalchemy import DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.domain.enums import TenantStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import AuditDateMixin, IntegerIdMixin


class Tenant(IntegerIdMixin, AuditDateMixin, Base):
    """Tenant (customer organization). Table: tenants.

    id is the numeric key; tenant_id is the external code (TNT-###) that
    users.tenant_id and appsettings.tenant_id reference. Everything but name
    is nullable because rows predate most columns; bootstrap backfills them.
    """

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str | None] = mapped_column(Text, default=TenantStatus.ACTIVE.value)
    created_at: Mapped[datetime | None] = mapped_column(DateTime, server_default=func.now())

    tenant_id: Mapped[str | None] = mapped_column(Text)
    display_name: Mapped[str | None] = mapped_column(Text)
    region: Mapped[str | None] = mapped_column(Text)
    code: Mapped[str | None] = mapped_column(Text)
    base_subdomain: Mapped[str | None] = mapped_column(Text)
    tenant_code: Mapped[str | None] = mapped_column(Text)
    business_type: Mapped[str | None] = mapped_column(Text)
    primary_contact_name: Mapped[str | None] = mapped_column(Text)
    primary_contact_email: Mapped[str | None] = mapped_column(Text)
    primary_contact_phone: Mapped[str | None] = mapped_column(Text)
    default_currency: Mapped[str | None] = mapped_column(Text)
    country_code: Mapped[str | None] = mapped_column(Text)
    phone_number_format: Mapped[str | None] = mapped_column(Text)
    unit_system: Mapped[str | None] = mapped_column(Text)
    timezone: Mapped[str | None] = mapped_column(Text)
    date_format: Mapped[str | None] = mapped_column(Text)
    number_format_json: Mapped[str | None] = mapped_column(Text)
    branding_primary_color: Mapped[str | None] = mapped_column(Text)
    branding_secondary_color: Mapped[str | None] = mapped_column(Text)
    branding_logo_url: Mapped[str | None] = mapped_column(Text)
    address_line1: Mapped[str | None] = mapped_column(Text)
    address_line2: Mapped[str | None] = mapped_column(Text)
    city: Mapped[str | None] = mapped_column(Text)
    state_province: Mapped[str | None] = mapped_column(Text)
    postal_code: Mapped[str | None] = mapped_column(Text)
    address_country_code: Mapped[str | None] = mapped_column(Text)
    website: Mapped[str | None] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text)
    default_load_types_json: Mapped[str | None] = mapped_column(Text)
    features_json: Mapped[str | None] = mapped_column(Text)
    api_keys_json: Mapped[str | None] = mapped_column(Text)
