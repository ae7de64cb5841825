"""Output generation for season wrapped.

Submodules:
    slides: Slide variants of the recap
    composer: Highlight selection and slide assembly

Example:
    >>> from season_wrapped.output import compose_slides
    >>> slides = compose_slides(records, teams)
    >>> payload = [slide.to_dict() for slide in slides]
"""

from __future__ import annotations

from season_wrapped.output.composer import compose_slides, fun_stat, select_highlights
from season_wrapped.output.slides import (
    ArchetypeSlide,
    BreakdownSlide,
    RecordSummarySlide,
    RivalsSlide,
    Slide,
    SummarySlide,
    TeamBreakdownSlide,
    WelcomeSlide,
)

__all__: list[str] = [
    # Composer
    "compose_slides",
    "fun_stat",
    "select_highlights",
    # Slides
    "ArchetypeSlide",
    "BreakdownSlide",
    "RecordSummarySlide",
    "RivalsSlide",
    "Slide",
    "SummarySlide",
    "TeamBreakdownSlide",
    "WelcomeSlide",
]
