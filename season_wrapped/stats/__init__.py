"""Season statistics.

Submodules:
    aggregation: Per-dimension win/loss buckets, rankings and the season report
    archetypes: Archetype scoring heuristics

Example:
    >>> from season_wrapped.stats import build_report, rank_archetypes
    >>> report = build_report(records, total_teams=2)
    >>> top = rank_archetypes(records)
"""

from __future__ import annotations

from season_wrapped.stats.aggregation import (
    DIMENSIONS,
    Bucket,
    LocationRecord,
    OpponentMatchup,
    OpponentRecord,
    PositionRecord,
    SeasonReport,
    SkillProgression,
    TeamRecord,
    aggregate_dimension,
    aggregate_records,
    best_and_worst,
    build_report,
    longest_win_streak,
    skill_progression,
    sort_by_date,
    top_and_bottom,
    win_percentage,
)
from season_wrapped.stats.archetypes import (
    CATALOG,
    Archetype,
    ArchetypeScore,
    rank_archetypes,
    score_archetypes,
)

__all__: list[str] = [
    # Aggregation
    "DIMENSIONS",
    "Bucket",
    "LocationRecord",
    "OpponentMatchup",
    "OpponentRecord",
    "PositionRecord",
    "SeasonReport",
    "SkillProgression",
    "TeamRecord",
    "aggregate_dimension",
    "aggregate_records",
    "best_and_worst",
    "build_report",
    "longest_win_streak",
    "skill_progression",
    "sort_by_date",
    "top_and_bottom",
    "win_percentage",
    # Archetypes
    "CATALOG",
    "Archetype",
    "ArchetypeScore",
    "rank_archetypes",
    "score_archetypes",
]
