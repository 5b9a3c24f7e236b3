"""Tenant theme palette: hex validation, alpha blending, gradients and contrast.

Pure functions; invalid input never raises and falls back to the brand defaults.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from app.application.dtos.tenant_config import TenantTheme, ThemePalette

HEX_PATTERN = re.compile(r"^#?([0-9a-f]{6})$", re.IGNORECASE)

DEFAULT_PRIMARY = "#007A6E"
DEFAULT_SECONDARY = "#005247"
DEFAULT_GLOW = "rgba(0, 122, 110, 0.35)"
DEFAULT_HERO_TEXT = "#0F172A"

HERO_TEXT_LIGHT = "#FFFFFF"
HERO_TEXT_DARK = "#0F172A"
# Average relative luminance above which the hero banner switches to dark text.
HERO_TEXT_LUMINANCE_THRESHOLD = 0.6
GLOW_ALPHA = 0.35


def _gradient(primary: str, secondary: str) -> str:
    return f"linear-gradient(120deg, {primary}, {secondary})"


def normalize_hex(value: Any, fallback: str) -> str:
    """Return value as uppercase #RRGGBB, or fallback when it is not a 6-digit hex."""
    if not value or not isinstance(value, str):
        return fallback
    match = HEX_PATTERN.match(value.strip())
    if not match:
        return fallback
    return f"#{match.group(1).upper()}"


def _channels(hex_color: str) -> tuple[int, int, int]:
    digits = hex_color.lstrip("#")
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def with_alpha(color: Any, alpha: float | None = 1) -> str:
    """Return an rgba() string for color with alpha clamped to [0, 1].

    Invalid colors fall back to the default primary.
    """
    safe_alpha = min(1, max(0, 1 if alpha is None else alpha))
    r, g, b = _channels(normalize_hex(color, DEFAULT_PRIMARY))
    return f"rgba({r}, {g}, {b}, {safe_alpha})"


def get_theme_palette(theme: Mapping[str, Any] | None) -> ThemePalette:
    """Resolve a theme override object into a complete palette.

    Colors are validated independently; glow and gradient are taken as given
    when present, otherwise the default glow and a 120deg gradient between the
    resolved primary and secondary colors are used.
    """
    theme = theme or {}
    primary = normalize_hex(theme.get("primaryColor"), DEFAULT_PRIMARY)
    secondary = normalize_hex(theme.get("secondaryColor"), DEFAULT_SECONDARY)
    hero_text = normalize_hex(theme.get("heroTextColor"), DEFAULT_HERO_TEXT)
    glow = theme.get("glow")
    gradient = theme.get("gradient")
    return ThemePalette(
        primary_color=primary,
        secondary_color=secondary,
        glow=DEFAULT_GLOW if glow is None else glow,
        gradient=_gradient(primary, secondary) if gradient is None else gradient,
        hero_text_color=hero_text,
    )


DEFAULT_THEME_COLORS = get_theme_palette(None)


def hex_to_hsl_string(hex_color: str) -> str | None:
    """Return 'H S% L%' (CSS custom property format) or None for invalid input."""
    if not isinstance(hex_color, str) or not HEX_PATTERN.match(hex_color):
        return None
    r, g, b = (c / 255 for c in _channels(hex_color))
    high = max(r, g, b)
    low = min(r, g, b)
    lightness = (high + low) / 2
    if high == low:
        hue = 0.0
        saturation = 0.0
    else:
        d = high - low
        if high == r:
            hue = (g - b) / d + (6 if g < b else 0)
        elif high == g:
            hue = (b - r) / d + 2
        else:
            hue = (r - g) / d + 4
        hue /= 6
        saturation = d / (1 - abs(2 * lightness - 1))
    return f"{round(hue * 360)} {round(saturation * 100)}% {round(lightness * 100)}%"


def _srgb_to_linear(value: int) -> float:
    ratio = value / 255
    if ratio <= 0.03928:
        return ratio / 12.92
    return ((ratio + 0.055) / 1.055) ** 2.4


def relative_luminance(hex_color: str) -> float:
    """WCAG relative luminance of a hex color; 0 for invalid input."""
    if not isinstance(hex_color, str) or not HEX_PATTERN.match(hex_color):
        return 0.0
    r, g, b = (_srgb_to_linear(c) for c in _channels(hex_color))
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def derive_hero_text_color(primary_color: str, secondary_color: str) -> str:
    """Pick dark or light hero text from the average luminance of the brand colors."""
    average = (relative_luminance(primary_color) + relative_luminance(secondary_color)) / 2
    return HERO_TEXT_DARK if average > HERO_TEXT_LUMINANCE_THRESHOLD else HERO_TEXT_LIGHT


def derive_tenant_theme(primary_color: str | None, secondary_color: str | None) -> TenantTheme:
    """Build the tenant theme (CSS variables) from the tenant brand colors."""
    primary = primary_color or DEFAULT_PRIMARY
    secondary = secondary_color or DEFAULT_SECONDARY
    return TenantTheme(
        primary_color=primary,
        secondary_color=secondary,
        primary_hsl=hex_to_hsl_string(primary),
        secondary_hsl=hex_to_hsl_string(secondary),
        gradient=_gradient(primary, secondary),
        glow=with_alpha(primary, GLOW_ALPHA),
        hero_text_color=derive_hero_text_color(primary, secondary),
    )
