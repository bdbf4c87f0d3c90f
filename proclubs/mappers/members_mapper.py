from __future__ import annotations

from typing import Any, Callable, TypeVar

from proclubs.domain.models import (
    ClubRoster,
    FavoritePosition,
    MemberCareerStats,
    MemberStats,
    Platform,
    PositionCount,
)
from proclubs.mappers.coercion import as_dict, as_float, as_int, as_records, as_str


M = TypeVar("M")

PREV_GOALS_SLOTS = 10


def favorite_position(value: Any) -> FavoritePosition:
    try:
        return FavoritePosition(as_str(value).lower())
    except ValueError:
        return FavoritePosition.unknown


def build_position_count(raw: Any) -> PositionCount:
    counts = as_dict(raw, what="positionCount")
    return PositionCount(
        goalkeeper=as_int(counts.get("goalkeeper")),
        defender=as_int(counts.get("defender")),
        midfielder=as_int(counts.get("midfielder")),
        forward=as_int(counts.get("forward")),
    )


def _prev_goals(raw: dict[str, Any]) -> tuple[int, ...]:
    keys = ["prevGoals", *(f"prevGoals{slot}" for slot in range(1, PREV_GOALS_SLOTS + 1))]
    return tuple(as_int(raw.get(key)) for key in keys if key in raw)


def build_member_stats(raw: dict[str, Any]) -> MemberStats:
    return MemberStats(
        name=as_str(raw.get("name")),
        games_played=as_int(raw.get("gamesPlayed")),
        win_rate=as_float(raw.get("winRate")),
        goals=as_int(raw.get("goals")),
        assists=as_int(raw.get("assists")),
        clean_sheets_def=as_int(raw.get("cleanSheetsDef")),
        clean_sheets_gk=as_int(raw.get("cleanSheetsGK")),
        shot_success_rate=as_float(raw.get("shotSuccessRate")),
        passes_made=as_int(raw.get("passesMade")),
        pass_success_rate=as_float(raw.get("passSuccessRate")),
        rating_ave=as_float(raw.get("ratingAve")),
        tackles_made=as_int(raw.get("tacklesMade")),
        tackle_success_rate=as_float(raw.get("tackleSuccessRate")),
        man_of_the_match=as_int(raw.get("manOfTheMatch")),
        red_cards=as_int(raw.get("redCards")),
        pro_name=as_str(raw.get("proName")),
        pro_pos=as_str(raw.get("proPos")),
        pro_style=as_str(raw.get("proStyle")),
        pro_height=as_int(raw.get("proHeight")),
        pro_nationality=as_str(raw.get("proNationality")),
        pro_overall=as_int(raw.get("proOverall")),
        prev_goals=_prev_goals(raw),
        favorite_position=favorite_position(raw.get("favoritePosition")),
    )


def build_member_career_stats(raw: dict[str, Any]) -> MemberCareerStats:
    return MemberCareerStats(
        name=as_str(raw.get("name")),
        games_played=as_int(raw.get("gamesPlayed")),
        goals=as_int(raw.get("goals")),
        assists=as_int(raw.get("assists")),
        man_of_the_match=as_int(raw.get("manOfTheMatch")),
        rating_ave=as_float(raw.get("ratingAve")),
        prev_goals=as_int(raw.get("prevGoals")),
        pro_pos=as_str(raw.get("proPos")),
        favorite_position=favorite_position(raw.get("favoritePosition")),
    )


def build_roster(
    payload: Any,
    *,
    club_id: str,
    platform: Platform,
    member_builder: Callable[[dict[str, Any]], M],
) -> ClubRoster[M]:
    body = as_dict(payload, what="members response")
    members = as_records(body.get("members"), what="members")
    return ClubRoster(
        club_id=club_id,
        platform=platform,
        members=tuple(member_builder(member) for member in members),
        position_count=build_position_count(body.get("positionCount")),
    )


def build_members_stats_roster(payload: Any, *, club_id: str, platform: Platform) -> ClubRoster[MemberStats]:
    return build_roster(payload, club_id=club_id, platform=platform, member_builder=build_member_stats)


def build_members_career_roster(
    payload: Any,
    *,
    club_id: str,
    platform: Platform,
) -> ClubRoster[MemberCareerStats]:
    return build_roster(payload, club_id=club_id, platform=platform, member_builder=build_member_career_stats)
