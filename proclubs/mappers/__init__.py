from .clubs_mapper import (
    build_club_info,
    build_club_search_results,
    build_clubs_info,
    build_clubs_overall_stats,
    build_custom_kit,
    build_playoff_achievements,
)
from .comparison_mapper import build_member_comparison_dataframe, summarize_comparison
from .matches_mapper import build_matches, merge_matches
from .members_mapper import build_members_career_roster, build_members_stats_roster

__all__ = [
    "build_custom_kit",
    "build_club_info",
    "build_clubs_info",
    "build_club_search_results",
    "build_clubs_overall_stats",
    "build_playoff_achievements",
    "build_members_stats_roster",
    "build_members_career_roster",
    "build_matches",
    "merge_matches",
    "build_member_comparison_dataframe",
    "summarize_comparison",
]
