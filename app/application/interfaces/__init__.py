"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure.
"""

from app.application.interfaces.repositories import (
    IAppSettingRepository,
    ITenantRepository,
)
from app.application.interfaces.services import IPermissionResolver

__all__ = [
    "IAppSettingRepository",
    "IPermissionResolver",
    "ITenantRepository",
]
