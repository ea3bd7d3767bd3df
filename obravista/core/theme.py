"""Presentation theme settings, fixed at startup."""

from __future__ import annotations

from dataclasses import dataclass

from obravista.core.exceptions import ConfigurationError

SUPPORTED_THEMES = frozenset({"light"})


@dataclass(frozen=True)
class ThemeConfig:
    """Immutable theme value handed to the presentation layer.

    There is no setter or toggle: the theme is chosen once when configuration
    is built and every consumer reads the same value.
    """

    mode: str = "light"

    @property
    def css_class(self) -> str:
        return self.mode


def build_theme(mode: str | None = None) -> ThemeConfig:
    """Build the theme from an optional configured mode."""
    resolved = (mode or "light").strip().lower()
    if resolved not in SUPPORTED_THEMES:
        raise ConfigurationError(
            f"THEME must be one of {', '.join(sorted(SUPPORTED_THEMES))}; got {resolved!r}."
        )
    return ThemeConfig(mode=resolved)
