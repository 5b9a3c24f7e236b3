"""Tests for page phase requirements, phase labels and user phase ceilings."""

import math

import pytest

from app.application.services.phase_access import (
    can_access_page,
    clamp_phase,
    format_phase_label,
    get_page_phase_requirement,
    manual_phase_limit,
    parse_phase_label,
    phase_exempt_features,
    resolve_gating_phase,
    resolve_module_phase_limit,
    resolve_phase_access,
)


def test_unknown_page_is_always_accessible() -> None:
    assert can_access_page("UnknownPage", 1) is True
    assert get_page_phase_requirement("UnknownPage") == 1
    assert get_page_phase_requirement("UnknownPage", fallback=3) == 3
    assert get_page_phase_requirement(None) == 1


def test_quality_control_requires_phase_four() -> None:
    assert can_access_page("QualityControl", 3) is False
    assert can_access_page("QualityControl", 4) is True
    assert can_access_page("QualityControl", math.inf) is True
    assert can_access_page("QualityControl") is True


def test_nan_phase_is_unlimited() -> None:
    assert can_access_page("AIInsights", math.nan) is True


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0, 1), (1, 1), (3.7, 3), (6, 6), (42, 6), (-5, 1)],
)
def test_clamp_phase(value: float, expected: int) -> None:
    assert clamp_phase(value) == expected


def test_clamp_phase_passes_infinity_through() -> None:
    assert clamp_phase(math.inf) == math.inf


def test_format_and_parse_phase_label() -> None:
    assert format_phase_label(3) == "PHASE III"
    assert format_phase_label(9) == "PHASE VI"
    assert format_phase_label(math.inf) is None
    assert parse_phase_label("PHASE III") == 3
    assert parse_phase_label("phase iv") == 4
    assert parse_phase_label("II") == 2
    assert parse_phase_label("Phase 5") == 5
    assert parse_phase_label(2) == 2
    assert parse_phase_label("unlimited") is None
    assert parse_phase_label(None) is None


def test_resolve_phase_access_unrestricted_by_default() -> None:
    access = resolve_phase_access({"email": "a@b.c"})
    assert access.max_phase == math.inf
    assert access.is_restricted is False
    assert resolve_phase_access(None).is_restricted is False


def test_resolve_phase_access_from_phase_limit_column() -> None:
    access = resolve_phase_access({"phase_limit": "PHASE III"})
    assert access.max_phase == 3
    assert access.label == "PHASE III"
    assert access.is_restricted is True


def test_resolve_phase_access_precedence() -> None:
    user = {
        "phase_access": {"maxPhase": 2, "label": "Starter"},
        "restrictions": {"maxPhase": 5},
        "phase_limit": "PHASE IV",
    }
    access = resolve_phase_access(user)
    assert access.max_phase == 2
    assert access.label == "Starter"
    user.pop("phase_access")
    assert resolve_phase_access(user).max_phase == 5


def test_disable_phase_restriction_lifts_ceiling() -> None:
    user = {
        "phase_limit": "PHASE II",
        "ui_overrides": {"disablePhaseRestriction": True, "accessLevelLabel": "Full"},
    }
    access = resolve_phase_access(user)
    assert access.max_phase == math.inf
    assert access.label == "Full"
    assert access.is_restricted is False
    assert resolve_gating_phase(user, access) is None


def test_manual_limit_gates_even_when_restriction_disabled() -> None:
    user = {"ui_overrides": {"disablePhaseRestriction": True, "maxAllowedPhase": "4"}}
    access = resolve_phase_access(user)
    assert manual_phase_limit(user) == 4
    assert resolve_gating_phase(user, access) == 4
    assert resolve_module_phase_limit(user, access) == 4


def test_module_phase_limit() -> None:
    restricted = {"phase_limit": "PHASE III"}
    assert resolve_module_phase_limit(restricted, resolve_phase_access(restricted)) == 3
    assert resolve_module_phase_limit({}, resolve_phase_access({})) == math.inf


def test_phase_exempt_features() -> None:
    assert phase_exempt_features({"ui_overrides": {"phaseExemptFeatures": ["a", 1]}}) == ["a", "1"]
    assert phase_exempt_features({"ui_overrides": {"phaseExemptFeatures": "a"}}) == []
    assert phase_exempt_features(None) == []
