"""AppSetting ORM model: legacy key/value settings, including enable_* toggles."""

from sqlalchemy import Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import AuditDateMixin, IntegerIdMixin


class AppSetting(IntegerIdMixin, AuditDateMixin, Base):
    """Setting row. Table: appsettings. tenant_id NULL means global.

    Unique (tenant_id, setting_key).
    """

    __tablename__ = "appsettings"

    tenant_id: Mapped[str | None] = mapped_column(Text)
    setting_key: Mapped[str] = mapped_column(Text, nullable=False)
    setting_value: Mapped[str | None] = mapped_column(Text)
    setting_category: Mapped[str | None] = mapped_column(Text, default="features")
    description: Mapped[str | None] = mapped_column(Text)
    phase: Mapped[int | None] = mapped_column(Integer)

    __table_args__ = (
        Index("ux_appsettings_tenant_key", "tenant_id", "setting_key", unique=True),
    )
