"""Feature-flag merge engine.

Merges tenant JSON features with legacy ``enable_*`` app-settings toggles:

1. parse the raw tenant features (JSON string, mapping or nothing) into a dict;
2. coerce "true"/"false" strings to booleans;
3. overlay the toggles, which always win on key collisions;
4. copy each present toggle onto its alias keys;
5. apply the declared OR-merges (photo uploads);
6. keep only strict booleans as the exported flag set.

Nothing in here raises on bad tenant data.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any

from app.application.dtos.tenant_config import FeatureState
from app.application.services.phase_access import FEATURE_PHASE_MAP

logger = logging.getLogger(__name__)

TOGGLE_PREFIX = "enable_"

FEATURE_ALIAS_MAP: dict[str, tuple[str, ...]] = {
    "enable_po_module": ("po_module_enabled",),
    "enable_qc_module": ("qc_module_enabled",),
    "enable_inventory_module": ("inventory_module_enabled",),
    "enable_bin_capacity_management": (
        "bin_capacity_enabled",
        "bin_capacity_management_enabled",
    ),
    "enable_stock_transfer": ("stock_transfer_enabled",),
    "enable_ai_insights": ("ai_insights_enabled",),
    "enable_kpi_dashboard": ("kpi_dashboard_enabled",),
    "enable_photo_upload_inbound": ("photo_upload_enabled",),
    "enable_photo_upload_classification": ("photo_upload_enabled",),
    "enable_email_automation": ("email_automation_enabled",),
    "enable_picking_list": ("picking_list_enabled",),
    "enable_scale_integration": ("scale_integration_enabled",),
    "enable_offline_mode": ("offline_mode_enabled",),
    "enable_product_images": ("product_images_enabled",),
}

# Applied in order after alias expansion; each target is the OR of its
# sources whenever at least one source toggle is present.
FEATURE_OR_MERGES: dict[str, tuple[str, ...]] = {
    "photo_upload_enabled": (
        "enable_photo_upload_inbound",
        "enable_photo_upload_classification",
    ),
}


def parse_tenant_features(raw: str | Mapping[str, Any] | None) -> dict[str, Any]:
    """Parse and normalize raw tenant features into a plain dict.

    Falsy input gives {}. Strings are decoded as JSON; malformed JSON is
    logged and gives {}. Anything that is not an object (e.g. a list) gives {}.
    "true"/"false" string values (any case) become booleans.
    """
    if not raw:
        return {}
    parsed: Any = raw
    if isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except ValueError as exc:
            logger.warning("Failed to parse tenant features JSON: %s", exc)
            return {}
    if not isinstance(parsed, Mapping):
        return {}
    normalized: dict[str, Any] = {}
    for key, value in parsed.items():
        if isinstance(value, str) and value.lower() in ("true", "false"):
            normalized[key] = value.lower() == "true"
        else:
            normalized[key] = value
    return normalized


def _setting_field(setting: Any, name: str) -> Any:
    if isinstance(setting, Mapping):
        return setting.get(name)
    return getattr(setting, name, None)


def build_feature_toggles(app_settings: Iterable[Any] | None) -> dict[str, bool]:
    """Map every enable_* setting to (setting_value == 'true'). Exact match only."""
    toggles: dict[str, bool] = {}
    for setting in app_settings or ():
        key = _setting_field(setting, "setting_key")
        if isinstance(key, str) and key.startswith(TOGGLE_PREFIX):
            toggles[key] = _setting_field(setting, "setting_value") == "true"
    return toggles


def derive_feature_state(
    raw_features: str | Mapping[str, Any] | None,
    app_settings: Iterable[Any] | None,
) -> FeatureState:
    """Merge tenant features with app-settings toggles.

    Accepts setting rows as mappings or objects with setting_key and
    setting_value attributes (ORM rows).
    """
    toggles = build_feature_toggles(app_settings)
    merged = parse_tenant_features(raw_features)
    merged.update(toggles)

    for toggle_key, aliases in FEATURE_ALIAS_MAP.items():
        if toggle_key not in toggles:
            continue
        for alias in aliases:
            merged[alias] = toggles[toggle_key]

    for target, sources in FEATURE_OR_MERGES.items():
        if any(source in toggles for source in sources):
            merged[target] = any(toggles.get(source, False) for source in sources)

    flags = {key: value for key, value in merged.items() if isinstance(value, bool)}
    return FeatureState(merged_features=merged, feature_flags=flags)


def apply_feature_overrides(
    features: Mapping[str, Any], overrides: Mapping[str, Any] | None
) -> dict[str, Any]:
    """Return features with the user's feature_overrides laid over them."""
    result = dict(features)
    if isinstance(overrides, Mapping):
        result.update(overrides)
    return result


def limit_features_by_phase(
    features: Mapping[str, Any],
    max_phase: float | None,
    exceptions: Iterable[str] = (),
) -> dict[str, Any]:
    """Switch off features whose phase exceeds max_phase.

    A gated key that is present is set to False together with any of its
    aliases that are present. Keys listed in exceptions keep their value.
    No-op when max_phase is None or not finite.
    """
    result = dict(features)
    if max_phase is None or not math.isfinite(max_phase):
        return result
    exempt = {str(key) for key in exceptions}

    def disable(key: str) -> None:
        if key not in exempt and key in result:
            result[key] = False

    for key, phase in FEATURE_PHASE_MAP.items():
        if phase > max_phase and key in result:
            disable(key)
            for alias in FEATURE_ALIAS_MAP.get(key, ()):
                disable(alias)
    return result
