from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable

from proclubs.domain.models import Match, MatchAggregateData, MatchClubData, MatchPlayerData, MatchType, Platform
from proclubs.mappers.clubs_mapper import build_club_info
from proclubs.mappers.coercion import as_dict, as_flag, as_float, as_int, as_records, as_str
from proclubs.mappers.members_mapper import favorite_position


def build_match_player(raw: Any) -> MatchPlayerData:
    player = as_dict(raw, what="match player")
    return MatchPlayerData(
        player_name=as_str(player.get("playername")),
        pos=favorite_position(player.get("pos")),
        rating=as_float(player.get("rating")),
        goals=as_int(player.get("goals")),
        assists=as_int(player.get("assists")),
        shots=as_int(player.get("shots")),
        passes_made=as_int(player.get("passesmade")),
        pass_attempts=as_int(player.get("passattempts")),
        tackles_made=as_int(player.get("tacklesmade")),
        tackle_attempts=as_int(player.get("tackleattempts")),
        red_cards=as_int(player.get("redcards")),
        goals_conceded=as_int(player.get("goalsconceded")),
        man_of_the_match=as_flag(player.get("mom")),
    )


def build_match_club(club_id: str, raw: Any, *, platform: Platform) -> MatchClubData:
    club = as_dict(raw, what="match club")
    details = None
    if club.get("details"):
        details = build_club_info(club["details"], platform=platform, club_id=club_id)
    return MatchClubData(
        club_id=club_id,
        name=details.name if details else "",
        goals=as_int(club.get("goals")),
        goals_against=as_int(club.get("goalsAgainst")),
        result=as_str(club.get("result")),
        wins=as_int(club.get("wins")),
        losses=as_int(club.get("losses")),
        ties=as_int(club.get("ties")),
        winner_by_dnf=as_flag(club.get("winnerByDnf")),
        score=as_int(club.get("score")),
        season_id=as_str(club.get("season_id")),
        details=details,
    )


def build_match_aggregate(raw: Any) -> MatchAggregateData:
    totals = as_dict(raw, what="match aggregate")
    return MatchAggregateData(
        goals=as_int(totals.get("goals")),
        assists=as_int(totals.get("assists")),
        goals_conceded=as_int(totals.get("goalsconceded")),
        man_of_the_match=as_int(totals.get("mom")),
        shots=as_int(totals.get("shots")),
        passes_made=as_int(totals.get("passesmade")),
        pass_attempts=as_int(totals.get("passattempts")),
        tackles_made=as_int(totals.get("tacklesmade")),
        tackle_attempts=as_int(totals.get("tackleattempts")),
        red_cards=as_int(totals.get("redcards")),
        rating=as_float(totals.get("rating")),
    )


def build_match(raw: dict[str, Any], *, platform: Platform, match_type: MatchType | None = None) -> Match:
    clubs = {
        str(club_id): build_match_club(str(club_id), club, platform=platform)
        for club_id, club in as_dict(raw.get("clubs"), what="match clubs").items()
    }
    players = {
        str(club_id): MappingProxyType(
            {
                str(member_id): build_match_player(line)
                for member_id, line in as_dict(lines, what="match club players").items()
            }
        )
        for club_id, lines in as_dict(raw.get("players"), what="match players").items()
    }
    aggregate = {
        str(club_id): build_match_aggregate(totals)
        for club_id, totals in as_dict(raw.get("aggregate"), what="match aggregate").items()
    }
    match_id = as_str(raw.get("matchId"))
    if not match_id:
        raise ValueError("Match payload without matchId")
    return Match(
        match_id=match_id,
        timestamp=as_int(raw.get("timestamp")),
        platform=platform,
        match_type=match_type,
        clubs=MappingProxyType(clubs),
        players=MappingProxyType(players),
        aggregate=MappingProxyType(aggregate),
    )


def build_matches(payload: Any, *, platform: Platform, match_type: MatchType | None = None) -> tuple[Match, ...]:
    rows = as_records(payload, what="matches response")
    return tuple(build_match(row, platform=platform, match_type=match_type) for row in rows)


def merge_matches(groups: Iterable[Iterable[Match]]) -> tuple[Match, ...]:
    """Flatten match lists from several categories, newest first."""
    merged = [match for group in groups for match in group]
    merged.sort(key=lambda match: match.timestamp, reverse=True)
    return tuple(merged)
