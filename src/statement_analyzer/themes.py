"""Colour palettes for the chart, ratio cards and recommendation badge.

Pure lookup tables keyed by theme; renderers never branch on the theme name.
"""

from __future__ import annotations

from statement_analyzer.models import Recommendation, Theme

CHART_THEMES: dict[Theme, dict[str, str]] = {
    Theme.DARK: {
        "text": "#e2e8f0",
        "subtle": "#4a5568",
        "accent": "#FFC107",
        "bar_positive": "#007A7A",
        "bar_negative": "#E53E3E",
    },
    Theme.LIGHT: {
        "text": "#1a202c",
        "subtle": "#cbd5e0",
        "accent": "#D97706",
        "bar_positive": "#047857",
        "bar_negative": "#DC2626",
    },
}

CARD_THEMES: dict[Theme, dict[str, str]] = {
    Theme.DARK: {
        "card": "#1a1e27",
        "border": "#4a5568",
        "name": "#e5e7eb",
        "value": "#FFC107",
        "interpretation": "#9ca3af",
    },
    Theme.LIGHT: {
        "card": "#f9fafb",
        "border": "#e5e7eb",
        "name": "#1f2937",
        "value": "#2563eb",
        "interpretation": "#4b5563",
    },
}

# (background, text)
RECOMMENDATION_COLORS: dict[Recommendation, tuple[str, str]] = {
    Recommendation.BUY: ("#22c55e", "#ffffff"),
    Recommendation.HOLD: ("#eab308", "#000000"),
    Recommendation.SELL: ("#ef4444", "#ffffff"),
    Recommendation.NA: ("#6b7280", "#ffffff"),
}


def chart_palette(theme: Theme | str) -> dict[str, str]:
    """Chart colours for a theme; raises ValueError for an unknown name."""
    return CHART_THEMES[Theme(theme)]


def card_palette(theme: Theme | str) -> dict[str, str]:
    return CARD_THEMES[Theme(theme)]


def recommendation_colors(recommendation: Recommendation | str) -> tuple[str, str]:
    try:
        return RECOMMENDATION_COLORS[Recommendation(recommendation)]
    except ValueError:
        return RECOMMENDATION_COLORS[Recommendation.NA]
