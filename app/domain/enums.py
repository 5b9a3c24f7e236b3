"""Domain enumerations for the RecIMS application.

Enums represent fixed sets of domain values (e.g. tenant status, roles).
"""

from enum import Enum


class TenantStatus(str, Enum):
    """Tenant lifecycle status. Stored uppercase after bootstrap backfill."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [status.value for status in cls]


class DetailedRole(str, Enum):
    """Fine-grained role used for capability resolution (users.detailed_role)."""

    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    MANAGER = "manager"
    WAREHOUSE_STAFF = "warehouse_staff"
    SALES_REPRESENTATIVE = "sales_representative"
    QUALITY_CONTROL = "quality_control"

    @classmethod
    def values(cls) -> list[str]:
        """Return all role values as strings."""
        return [role.value for role in cls]


class AccountRole(str, Enum):
    """Coarse account role (users.role) pinned on the seeded accounts."""

    SUPER_ADMIN = "super_admin"
    PHASE3_ADMIN = "phase3_admin"
    ADMIN = "admin"
    USER = "user"
