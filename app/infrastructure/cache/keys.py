"""Cache key builders. Single place for key format.

Key components (tenant ids, codes) must not contain CACHE_KEY_SEP to avoid
ambiguous or colliding keys.
"""

from app.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PREFIX_APP_SETTINGS,
    CACHE_PREFIX_TENANT,
    GLOBAL_SCOPE,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value contains the cache key separator.

    Args:
        value: String component used in a cache key.
        name: Name of the component (for error message).

    Raises:
        ValueError: If value contains CACHE_KEY_SEP.
    """
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def tenant_key(tenant_key_value: int | str) -> str:
    """Cache key for a tenant snapshot, by numeric id or by tenant code."""
    if isinstance(tenant_key_value, int):
        return f"{CACHE_PREFIX_TENANT}{CACHE_KEY_SEP}id{CACHE_KEY_SEP}{tenant_key_value}"
    _validate_key_component(tenant_key_value, "tenant_code")
    return f"{CACHE_PREFIX_TENANT}{CACHE_KEY_SEP}code{CACHE_KEY_SEP}{tenant_key_value}"


def app_settings_key(tenant_code: str | None) -> str:
    """Cache key for the settings rows visible to a tenant (its rows plus global rows)."""
    scope = tenant_code or GLOBAL_SCOPE
    _validate_key_component(scope, "tenant_code")
    return f"{CACHE_PREFIX_APP_SETTINGS}{CACHE_KEY_SEP}{scope}"


def app_settings_pattern() -> str:
    """Glob matching every app-settings snapshot key."""
    return f"{CACHE_PREFIX_APP_SETTINGS}{CACHE_KEY_SEP}*"
