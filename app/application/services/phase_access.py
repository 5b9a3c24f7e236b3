"""Phase gating: page requirements, user phase ceilings and phase labels.

A phase (1-6) is a coarse subscription tier. Pages declare the minimum phase
they need; users carry an optional ceiling. Everything here is a pure lookup
and never raises.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from app.application.dtos.tenant_config import PhaseAccess

PHASE_LABELS: tuple[str, ...] = ("I", "II", "III", "IV", "V", "VI")

PAGE_PHASE_REQUIREMENTS: dict[str, int] = {
    "QualityControl": 4,
    "ManageQCCriteria": 5,
    "InventoryManagement": 3,
    "AddToInventory": 3,
    "InventoryAdjustment": 3,
    "InventorySorting": 3,
    "InventoryByLocation": 3,
    "InventoryBySKU": 3,
    "StockTransfer": 3,
    "Reports": 5,
    "AdvancedAnalytics": 5,
    "SalesDashboard": 4,
    "ComplianceAnalytics": 4,
    "AIInsights": 6,
    "AIInsightsModule": 6,
    "EmailTemplates": 4,
    "ManageProductSKUs": 5,
    "ManageMaterialCategories": 4,
    "MobileQC": 4,
    "QBOSetup": 5,
    "SuperAdmin": 4,
    "TenantConsole": 4,
    "ManageTenantCategories": 4,
    "CreateTenant": 4,
    "ViewTenant": 4,
    "EditTenant": 4,
    "TenantUsers": 4,
    "CrossTenantDashboard": 4,
}

# Phase at which each legacy feature toggle becomes available.
FEATURE_PHASE_MAP: dict[str, int] = {
    "enable_po_module": 3,
    "enable_qc_module": 4,
    "enable_inventory_module": 3,
    "enable_bin_capacity_management": 3,
    "enable_ai_insights": 6,
    "enable_kpi_dashboard": 5,
    "enable_photo_upload_inbound": 2,
    "enable_photo_upload_classification": 2,
    "enable_stock_transfer": 4,
    "enable_email_automation": 4,
    "enable_picking_list": 3,
    "enable_scale_integration": 4,
    "enable_offline_mode": 3,
    "enable_product_images": 5,
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite(value: Any) -> bool:
    return _is_number(value) and math.isfinite(value)


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def get_page_phase_requirement(page_name: str | None, fallback: int = 1) -> int:
    """Return the minimum phase for page_name; unknown or empty names get fallback."""
    if not page_name:
        return fallback
    return PAGE_PHASE_REQUIREMENTS.get(page_name, fallback)


def can_access_page(page_name: str | None, max_phase: float = math.inf) -> bool:
    """Return True when max_phase is unlimited or covers the page's requirement."""
    required = get_page_phase_requirement(page_name)
    if not _is_finite(max_phase):
        return True
    return required <= max_phase


def clamp_phase(value: float) -> float:
    """Floor and clamp a finite phase into 1..6; non-finite values pass through."""
    if not _is_finite(value):
        return value
    return min(max(math.floor(value), 1), len(PHASE_LABELS))


def format_phase_label(phase: float | None) -> str | None:
    """Return e.g. 'PHASE III' for 3, or None when phase is not finite."""
    if not _is_finite(phase):
        return None
    clamped = int(clamp_phase(phase)) or 1
    return f"PHASE {PHASE_LABELS[clamped - 1]}"


def parse_phase_label(label: Any) -> int | None:
    """Inverse of format_phase_label; also accepts bare numerals ('3', 'Phase 3').

    Used for the persisted users.phase_limit marker. Returns None when the
    value does not name a phase.
    """
    if _is_finite(label):
        return int(clamp_phase(label))
    if not isinstance(label, str):
        return None
    text = label.strip().upper()
    if text.startswith("PHASE"):
        text = text[len("PHASE"):].strip()
    if text.isdigit():
        return int(clamp_phase(int(text)))
    if text in PHASE_LABELS:
        return PHASE_LABELS.index(text) + 1
    return None


def _coerce_phase(value: Any) -> float | None:
    """Number(value) for numeric strings and numbers; None when absent or not numeric."""
    if _is_number(value):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return float(value)
        except ValueError:
            return None
    return None


def manual_phase_limit(user: Mapping[str, Any] | None) -> int | None:
    """Return the clamped ui_overrides.maxAllowedPhase override, if any."""
    overrides = _as_mapping((user or {}).get("ui_overrides"))
    value = _coerce_phase(overrides.get("maxAllowedPhase"))
    if value is None or not math.isfinite(value):
        return None
    return int(clamp_phase(value))


def phase_exempt_features(user: Mapping[str, Any] | None) -> list[str]:
    """Return ui_overrides.phaseExemptFeatures as strings ([] when not a list)."""
    overrides = _as_mapping((user or {}).get("ui_overrides"))
    exempt = overrides.get("phaseExemptFeatures")
    if not isinstance(exempt, list):
        return []
    return [str(key) for key in exempt]


def resolve_phase_access(user: Mapping[str, Any] | None) -> PhaseAccess:
    """Derive the user's phase ceiling.

    Precedence: ui_overrides.disablePhaseRestriction lifts the ceiling;
    otherwise phase_access.maxPhase, then restrictions.maxPhase, then the
    persisted phase_limit label. Absent or non-finite values mean unrestricted.
    """
    user = user or {}
    overrides = _as_mapping(user.get("ui_overrides"))
    if overrides.get("disablePhaseRestriction"):
        return PhaseAccess(
            max_phase=math.inf,
            label=overrides.get("accessLevelLabel") or None,
            is_restricted=False,
        )
    phase_access = _as_mapping(user.get("phase_access"))
    restrictions = _as_mapping(user.get("restrictions"))
    direct = phase_access.get("maxPhase")
    restricted = restrictions.get("maxPhase")
    if _is_number(direct):
        candidate = direct
    elif _is_number(restricted):
        candidate = restricted
    else:
        candidate = parse_phase_label(user.get("phase_limit"))
    if not _is_finite(candidate):
        return PhaseAccess()
    clamped = clamp_phase(candidate)
    return PhaseAccess(
        max_phase=clamped,
        label=phase_access.get("label") or format_phase_label(clamped),
        is_restricted=True,
    )


def resolve_gating_phase(
    user: Mapping[str, Any] | None, phase_access: PhaseAccess
) -> float | None:
    """Return the phase used to switch features off, or None for no gating.

    When the restriction is disabled only an explicit maxAllowedPhase gates.
    """
    overrides = _as_mapping((user or {}).get("ui_overrides"))
    if overrides.get("disablePhaseRestriction"):
        return manual_phase_limit(user)
    if not _is_finite(phase_access.max_phase):
        return None
    return phase_access.max_phase


def resolve_module_phase_limit(
    user: Mapping[str, Any] | None, phase_access: PhaseAccess
) -> float:
    """Return the phase limit shown on navigation; math.inf when unrestricted."""
    manual = manual_phase_limit(user)
    if manual is not None:
        return manual
    if _is_finite(phase_access.max_phase):
        return phase_access.max_phase
    return math.inf
