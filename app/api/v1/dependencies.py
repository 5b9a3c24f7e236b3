"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, repositories, the tenant
configuration service and bearer-token authentication. Routes depend only
on these dependencies, not on infrastructure directly.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.tenant_config import Permissions
from app.application.services.permission_resolver import resolve_permissions
from app.application.services.tenant_config_service import TenantConfigService
from app.core.config import get_settings
from app.domain.exceptions import AuthenticationException, AuthorizationException
from app.infrastructure.cache.redis_cache import CacheService
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import (
    AppSettingRepository,
    TenantRepository,
    UserRepository,
    to_snapshot,
)
from app.infrastructure.security.jwt import token_subject, verify_token

CurrentUser = dict[str, Any]

_http_bearer = HTTPBearer(auto_error=False)


def get_cache(request: Request) -> CacheService | None:
    """Redis cache from app state (None when Redis is disabled)."""
    return getattr(request.app.state, "cache", None)


async def get_user_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserRepository:
    return UserRepository(db)


async def get_tenant_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
    cache: Annotated[CacheService | None, Depends(get_cache)],
) -> TenantRepository:
    """Tenant repository with snapshot cache (read path)."""
    return TenantRepository(db, cache, cache_ttl=get_settings().cache_ttl_tenants)


async def get_app_setting_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
    cache: Annotated[CacheService | None, Depends(get_cache)],
) -> AppSettingRepository:
    """AppSetting repository with snapshot cache (read path)."""
    return AppSettingRepository(db, cache, cache_ttl=get_settings().cache_ttl_app_settings)


async def get_app_setting_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    cache: Annotated[CacheService | None, Depends(get_cache)],
) -> AppSettingRepository:
    """AppSetting repository for PUT (commit on success, invalidates snapshots)."""
    return AppSettingRepository(db, cache, cache_ttl=get_settings().cache_ttl_app_settings)


async def get_tenant_config_service(
    tenant_repo: Annotated[TenantRepository, Depends(get_tenant_repo)],
    app_setting_repo: Annotated[AppSettingRepository, Depends(get_app_setting_repo)],
) -> TenantConfigService:
    """TenantConfigService over the cached repositories (composition root)."""
    return TenantConfigService(tenant_repo, app_setting_repo)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    user_repo: Annotated[UserRepository, Depends(get_user_repo)],
) -> CurrentUser:
    """Return the bearer user as a plain dict (password removed); raise 401 otherwise.

    The token's numeric sub/id claim is a users.id; any other subject, or the
    email claim, is looked up by email.
    """
    if not credentials:
        raise AuthenticationException("Not authenticated")
    try:
        payload = verify_token(credentials.credentials)
    except ValueError as e:
        raise AuthenticationException(str(e)) from e

    subject = token_subject(payload)
    if isinstance(subject, int):
        user = await user_repo.get_by_id(subject)
    else:
        email = payload.get("email") or subject
        user = await user_repo.get_by_email(str(email))
    if user is None:
        raise AuthenticationException("User not found")

    snapshot = to_snapshot(user)
    snapshot.pop("password", None)
    return snapshot


def get_current_permissions(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> Permissions:
    return resolve_permissions(current_user)


def require_capability(capability: str):
    """Dependency factory: require bearer auth and the named capability (e.g. 'canManageSettings')."""

    async def _require(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
        permissions: Annotated[Permissions, Depends(get_current_permissions)],
    ) -> CurrentUser:
        if not permissions.capabilities().get(capability, False):
            raise AuthorizationException(capability)
        return current_user

    return _require
