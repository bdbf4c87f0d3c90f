from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from proclubs.domain.models import (
    DEFAULT_CUSTOM_KIT,
    ClubInfo,
    ClubOverallStats,
    ClubSearchResult,
    CustomKit,
    Platform,
    PlayoffAchievement,
)
from proclubs.mappers.coercion import as_dict, as_int, as_records, as_str


RECENT_MATCH_SLOTS = 10


def _kit_colors(raw: dict[str, Any], prefix: str) -> tuple[str, ...]:
    colors = [as_str(raw.get(f"{prefix}{index}")) for index in range(1, 5)]
    return tuple(color for color in colors if color)


def build_custom_kit(raw: Any) -> CustomKit:
    kit = as_dict(raw, what="customKit")
    if not kit:
        return DEFAULT_CUSTOM_KIT
    return CustomKit(
        stadium_name=as_str(kit.get("stadName")),
        kit_id=as_str(kit.get("kitId")),
        custom_kit_id=as_str(kit.get("customKitId")),
        custom_away_kit_id=as_str(kit.get("customAwayKitId")),
        custom_third_kit_id=as_str(kit.get("customThirdKitId")),
        custom_keeper_kit_id=as_str(kit.get("customKeeperKitId")),
        selected_kit_type=as_str(kit.get("selectedKitType")),
        crest_asset_id=as_str(kit.get("crestAssetId")),
        crest_color=as_str(kit.get("crestColor")),
        kit_colors=_kit_colors(kit, "kitColor"),
        away_kit_colors=_kit_colors(kit, "kitAColor"),
        third_kit_colors=_kit_colors(kit, "kitThrdColor"),
    )


def build_club_info(raw: Any, *, platform: Platform, club_id: str | None = None) -> ClubInfo:
    info = as_dict(raw, what="clubInfo")
    resolved_id = as_str(info.get("clubId")) or as_str(club_id)
    return ClubInfo(
        club_id=resolved_id,
        name=as_str(info.get("name")),
        platform=platform,
        region_id=as_int(info.get("regionId")),
        team_id=as_int(info.get("teamId")),
        custom_kit=build_custom_kit(info.get("customKit")),
    )


def build_clubs_info(payload: Any, *, platform: Platform) -> Mapping[str, ClubInfo]:
    clubs = as_dict(payload, what="clubs info response")
    infos: dict[str, ClubInfo] = {}
    for key, raw in clubs.items():
        info = build_club_info(raw, platform=platform, club_id=str(key))
        infos[str(key)] = info
    return MappingProxyType(infos)


def build_club_search_result(raw: dict[str, Any], *, platform: Platform) -> ClubSearchResult:
    club_id = as_str(raw.get("clubId"))
    club_info = build_club_info(raw.get("clubInfo"), platform=platform, club_id=club_id)
    club_name = as_str(raw.get("clubName")) or club_info.name
    return ClubSearchResult(
        club_id=club_id or club_info.club_id,
        club_name=club_name,
        platform=platform,
        club_info=club_info,
        wins=as_int(raw.get("wins")),
        losses=as_int(raw.get("losses")),
        ties=as_int(raw.get("ties")),
        games_played=as_int(raw.get("gamesPlayed")),
        games_played_playoff=as_int(raw.get("gamesPlayedPlayoff")),
        goals=as_int(raw.get("goals")),
        goals_against=as_int(raw.get("goalsAgainst")),
        clean_sheets=as_int(raw.get("cleanSheets")),
        points=as_int(raw.get("points")),
        reputation_tier=as_int(raw.get("reputationtier")),
        promotions=as_int(raw.get("promotions")),
        relegations=as_int(raw.get("relegations")),
        best_division=as_int(raw.get("bestDivision")),
        current_division=as_int(raw.get("currentDivision")),
    )


def build_club_search_results(payload: Any, *, platform: Platform) -> tuple[ClubSearchResult, ...]:
    rows = as_records(payload, what="club search response")
    return tuple(build_club_search_result(row, platform=platform) for row in rows)


def build_club_overall_stats(raw: dict[str, Any], *, platform: Platform) -> ClubOverallStats:
    last_results = (as_str(raw.get(f"lastMatch{slot}")) for slot in range(RECENT_MATCH_SLOTS))
    last_opponents = (as_str(raw.get(f"lastOpponent{slot}")) for slot in range(RECENT_MATCH_SLOTS))
    return ClubOverallStats(
        club_id=as_str(raw.get("clubId")),
        platform=platform,
        games_played=as_int(raw.get("gamesPlayed")),
        games_played_playoff=as_int(raw.get("gamesPlayedPlayoff")),
        wins=as_int(raw.get("wins")),
        losses=as_int(raw.get("losses")),
        ties=as_int(raw.get("ties")),
        goals=as_int(raw.get("goals")),
        goals_against=as_int(raw.get("goalsAgainst")),
        promotions=as_int(raw.get("promotions")),
        relegations=as_int(raw.get("relegations")),
        best_division=as_int(raw.get("bestDivision")),
        best_finish_group=as_int(raw.get("bestFinishGroup")),
        skill_rating=as_int(raw.get("skillRating")),
        reputation_tier=as_int(raw.get("reputationtier")),
        win_streak=as_int(raw.get("wstreak")),
        unbeaten_streak=as_int(raw.get("unbeatenstreak")),
        league_appearances=as_int(raw.get("leagueAppearances")),
        # "-1" marks an unused slot for clubs with fewer than ten matches.
        last_results=tuple(result for result in last_results if result and result != "-1"),
        last_opponents=tuple(opponent for opponent in last_opponents if opponent and opponent != "-1"),
    )


def build_clubs_overall_stats(payload: Any, *, platform: Platform) -> tuple[ClubOverallStats, ...]:
    rows = as_records(payload, what="overall stats response")
    return tuple(build_club_overall_stats(row, platform=platform) for row in rows)


def build_playoff_achievements(payload: Any) -> tuple[PlayoffAchievement, ...]:
    rows = as_records(payload, what="playoff achievements response")
    return tuple(
        PlayoffAchievement(
            season_id=as_str(row.get("seasonId")),
            season_name=as_str(row.get("seasonName")),
            best_division=as_int(row.get("bestDivision")),
            best_finish_group=as_int(row.get("bestFinishGroup")),
        )
        for row in rows
    )
