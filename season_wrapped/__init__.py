"""Season Wrapped.

Turns a league pool player's match history into a multi-dimensional season
report and a narrative "season wrapped" recap, including a heuristic
archetype classification of how the player performs.

Example:
    >>> from season_wrapped import compute_wrapped
    >>> from season_wrapped.data import JsonProviderClient
    >>> slides = compute_wrapped("12345", JsonProviderClient("data/provider"))
    >>> print(slides[0].total_games)
"""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "Season Wrapped Team"

# Public API exports
from season_wrapped.config import Settings, get_settings
from season_wrapped.pipeline import (
    build_season_report,
    compute_season_report,
    compute_wrapped,
    compute_wrapped_for_season,
    compute_wrapped_for_year,
)

__all__ = [
    "Settings",
    "__author__",
    "__version__",
    "build_season_report",
    "compute_season_report",
    "compute_wrapped",
    "compute_wrapped_for_season",
    "compute_wrapped_for_year",
    "get_settings",
]
