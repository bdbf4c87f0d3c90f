from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Generic, Mapping, TypeVar, Union


T = TypeVar("T")

_EMPTY_MAPPING: Mapping[str, Any] = MappingProxyType({})


class Platform(str, Enum):
    gen5 = "common-gen5"
    gen4 = "common-gen4"
    switch = "nx"

    @property
    def display_name(self) -> str:
        return _PLATFORM_DISPLAY_NAMES[self]


_PLATFORM_DISPLAY_NAMES = {
    Platform.gen5: "PlayStation 5 / Xbox Series X|S / PC",
    Platform.gen4: "PlayStation 4 / Xbox One",
    Platform.switch: "Nintendo Switch",
}


class MatchCategory(str, Enum):
    league = "league"
    playoff = "playoff"
    friendly = "friendly"


class MatchType(str, Enum):
    league = "leagueMatch"
    playoff = "playoffMatch"
    friendly = "friendlyMatch"

    @property
    def category(self) -> MatchCategory:
        return MatchCategory(self.name)

    @property
    def display_name(self) -> str:
        return f"{self.name.capitalize()} matches"


class FavoritePosition(str, Enum):
    goalkeeper = "goalkeeper"
    defender = "defender"
    midfielder = "midfielder"
    forward = "forward"
    unknown = "unknown"


def parse_platform(value: str | Platform | None) -> Platform | None:
    if isinstance(value, Platform):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Platform(value.strip())
    except ValueError:
        return None


def parse_match_type(value: str | MatchType | None) -> MatchType | None:
    if isinstance(value, MatchType):
        return value
    if not isinstance(value, str):
        return None
    try:
        return MatchType(value.strip())
    except ValueError:
        return None


# Clubs


@dataclass(frozen=True)
class CustomKit:
    stadium_name: str = ""
    kit_id: str = ""
    custom_kit_id: str = ""
    custom_away_kit_id: str = ""
    custom_third_kit_id: str = ""
    custom_keeper_kit_id: str = ""
    selected_kit_type: str = ""
    crest_asset_id: str = ""
    crest_color: str = ""
    kit_colors: tuple[str, ...] = ()
    away_kit_colors: tuple[str, ...] = ()
    third_kit_colors: tuple[str, ...] = ()

    @property
    def uses_custom_crest(self) -> bool:
        return self.selected_kit_type == "1"


DEFAULT_CUSTOM_KIT = CustomKit()


@dataclass(frozen=True)
class ClubInfo:
    club_id: str
    name: str
    platform: Platform
    region_id: int = 0
    team_id: int = 0
    custom_kit: CustomKit = DEFAULT_CUSTOM_KIT


@dataclass(frozen=True)
class ClubSearchResult:
    club_id: str
    club_name: str
    platform: Platform
    club_info: ClubInfo
    wins: int = 0
    losses: int = 0
    ties: int = 0
    games_played: int = 0
    games_played_playoff: int = 0
    goals: int = 0
    goals_against: int = 0
    clean_sheets: int = 0
    points: int = 0
    reputation_tier: int = 0
    promotions: int = 0
    relegations: int = 0
    best_division: int = 0
    current_division: int = 0

    @property
    def division(self) -> int:
        return self.current_division or self.best_division


@dataclass(frozen=True)
class ClubOverallStats:
    club_id: str
    platform: Platform
    games_played: int = 0
    games_played_playoff: int = 0
    wins: int = 0
    losses: int = 0
    ties: int = 0
    goals: int = 0
    goals_against: int = 0
    promotions: int = 0
    relegations: int = 0
    best_division: int = 0
    best_finish_group: int = 0
    skill_rating: int = 0
    reputation_tier: int = 0
    win_streak: int = 0
    unbeaten_streak: int = 0
    league_appearances: int = 0
    last_results: tuple[str, ...] = ()
    last_opponents: tuple[str, ...] = ()

    @property
    def win_rate(self) -> int:
        if self.games_played == 0:
            return 0
        return round(self.wins / self.games_played * 100)


@dataclass(frozen=True)
class PlayoffAchievement:
    season_id: str
    season_name: str
    best_division: int = 0
    best_finish_group: int = 0


# Members


@dataclass(frozen=True)
class PositionCount:
    goalkeeper: int = 0
    defender: int = 0
    midfielder: int = 0
    forward: int = 0


@dataclass(frozen=True)
class MemberStats:
    name: str
    games_played: int = 0
    win_rate: float = 0.0
    goals: int = 0
    assists: int = 0
    clean_sheets_def: int = 0
    clean_sheets_gk: int = 0
    shot_success_rate: float = 0.0
    passes_made: int = 0
    pass_success_rate: float = 0.0
    rating_ave: float = 0.0
    tackles_made: int = 0
    tackle_success_rate: float = 0.0
    man_of_the_match: int = 0
    red_cards: int = 0
    pro_name: str = ""
    pro_pos: str = ""
    pro_style: str = ""
    pro_height: int = 0
    pro_nationality: str = ""
    pro_overall: int = 0
    prev_goals: tuple[int, ...] = ()
    favorite_position: FavoritePosition = FavoritePosition.unknown


@dataclass(frozen=True)
class MemberCareerStats:
    name: str
    games_played: int = 0
    goals: int = 0
    assists: int = 0
    man_of_the_match: int = 0
    rating_ave: float = 0.0
    prev_goals: int = 0
    pro_pos: str = ""
    favorite_position: FavoritePosition = FavoritePosition.unknown


@dataclass(frozen=True)
class ClubRoster(Generic[T]):
    """Members in vendor order; presentation may re-sort its own copy."""

    club_id: str
    platform: Platform
    members: tuple[T, ...] = ()
    position_count: PositionCount = PositionCount()


# Matches


@dataclass(frozen=True)
class MatchPlayerData:
    player_name: str
    pos: FavoritePosition = FavoritePosition.unknown
    rating: float = 0.0
    goals: int = 0
    assists: int = 0
    shots: int = 0
    passes_made: int = 0
    pass_attempts: int = 0
    tackles_made: int = 0
    tackle_attempts: int = 0
    red_cards: int = 0
    goals_conceded: int = 0
    man_of_the_match: bool = False


@dataclass(frozen=True)
class MatchClubData:
    club_id: str
    name: str = ""
    goals: int = 0
    goals_against: int = 0
    result: str = ""
    wins: int = 0
    losses: int = 0
    ties: int = 0
    winner_by_dnf: bool = False
    score: int = 0
    season_id: str = ""
    details: ClubInfo | None = None


@dataclass(frozen=True)
class MatchAggregateData:
    """Team totals the vendor sums over a club's player lines."""

    goals: int = 0
    assists: int = 0
    goals_conceded: int = 0
    man_of_the_match: int = 0
    shots: int = 0
    passes_made: int = 0
    pass_attempts: int = 0
    tackles_made: int = 0
    tackle_attempts: int = 0
    red_cards: int = 0
    rating: float = 0.0

    @property
    def pass_accuracy(self) -> int:
        if self.pass_attempts == 0:
            return 0
        return round(self.passes_made / self.pass_attempts * 100)


@dataclass(frozen=True)
class Match:
    match_id: str
    timestamp: int
    platform: Platform
    match_type: MatchType | None = None
    clubs: Mapping[str, MatchClubData] = field(default_factory=lambda: _EMPTY_MAPPING)
    players: Mapping[str, Mapping[str, MatchPlayerData]] = field(default_factory=lambda: _EMPTY_MAPPING)
    aggregate: Mapping[str, MatchAggregateData] = field(default_factory=lambda: _EMPTY_MAPPING)

    @property
    def category(self) -> MatchCategory | None:
        return self.match_type.category if self.match_type else None

    def opponent_of(self, club_id: str) -> MatchClubData | None:
        for other_id, club in self.clubs.items():
            if other_id != club_id:
                return club
        return None

    def result_for(self, club_id: str) -> str:
        own = self.clubs.get(club_id)
        opponent = self.opponent_of(club_id)
        own_goals = own.goals if own else 0
        their_goals = opponent.goals if opponent else 0
        if own_goals > their_goals:
            return "win"
        if own_goals < their_goals:
            return "loss"
        return "draw"


# Favourites are persisted by the presentation layer; this is only their shape.


@dataclass(frozen=True)
class FavoriteClub:
    club_id: str
    name: str
    platform: Platform
    crest_asset_id: str | None = None
    team_id: int | None = None
    selected_kit_type: str | None = None

    @classmethod
    def from_search_result(cls, club: ClubSearchResult) -> "FavoriteClub":
        kit = club.club_info.custom_kit
        return cls(
            club_id=club.club_id,
            name=club.club_name,
            platform=club.platform,
            crest_asset_id=kit.crest_asset_id or None,
            team_id=club.club_info.team_id or None,
            selected_kit_type=kit.selected_kit_type or None,
        )


# Results


class ApiErrorKind(str, Enum):
    invalid_input = "InvalidInput"
    vendor_error = "VendorError"
    rate_limited = "RateLimited"
    parse_error = "ParseError"
    transport_error = "TransportError"


@dataclass(frozen=True)
class ApiError:
    kind: ApiErrorKind
    message: str
    status: int | None = None
    details: str | None = None

    ok = False


@dataclass(frozen=True)
class ApiSuccess(Generic[T]):
    data: T
    not_found: bool = False

    ok = True


ApiResult = Union[ApiSuccess[T], ApiError]
