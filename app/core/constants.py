"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure. Used by the cache key
builders and the tenant configuration service.
"""

# Cache key prefixes (used with :id / :code / :tenant_id)
CACHE_PREFIX_TENANT = "tenant"
CACHE_PREFIX_APP_SETTINGS = "appsettings"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Key segment for settings rows with tenant_id IS NULL
GLOBAL_SCOPE = "global"
