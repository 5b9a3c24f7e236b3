"""User ORM model (users table). tenant_id holds the tenant code, not tenants.id."""

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import AccountRole
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import IntegerIdMixin, TimestampMixin


class User(IntegerIdMixin, TimestampMixin, Base):
    """User model. Table: users. Unique email.

    role is the coarse account role; detailed_role drives capability
    resolution; phase_limit is a persisted phase label such as 'PHASE III'.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    full_name: Mapped[str | None] = mapped_column(Text)
    tenant_id: Mapped[str | None] = mapped_column(Text)
    role: Mapped[str | None] = mapped_column(Text, default=AccountRole.USER.value)
    detailed_role: Mapped[str | None] = mapped_column(Text)
    phase_limit: Mapped[str | None] = mapped_column(Text)
