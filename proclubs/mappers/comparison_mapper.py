from __future__ import annotations

import pandas as pd

from proclubs.domain.models import MemberStats


COMPARISON_COLUMNS = ["category", "value_a", "value_b", "percent_a", "percent_b", "winner"]


def _per_match(total: int, games_played: int) -> float:
    return total / games_played if games_played > 0 else 0.0


def _derived_stats(member: MemberStats) -> dict[str, float]:
    contributions = member.goals + member.assists
    return {
        "rating_ave": member.rating_ave,
        "games_played": member.games_played,
        "win_rate": member.win_rate,
        "goals": member.goals,
        "goals_per_match": _per_match(member.goals, member.games_played),
        "assists": member.assists,
        "assists_per_match": _per_match(member.assists, member.games_played),
        "contributions": contributions,
        "man_of_the_match": member.man_of_the_match,
    }


def _winner(value_a: float, value_b: float) -> str:
    if value_a == value_b:
        return "draw"
    return "a" if value_a > value_b else "b"


def build_member_comparison_dataframe(member_a: MemberStats, member_b: MemberStats) -> pd.DataFrame:
    stats_a = _derived_stats(member_a)
    stats_b = _derived_stats(member_b)
    rows = []
    for category, value_a in stats_a.items():
        value_b = stats_b[category]
        total = value_a + value_b
        rows.append(
            {
                "category": category,
                "value_a": float(value_a),
                "value_b": float(value_b),
                # Even split when neither member has recorded anything.
                "percent_a": 50.0 if total == 0 else value_a / total * 100,
                "percent_b": 50.0 if total == 0 else value_b / total * 100,
                "winner": _winner(value_a, value_b),
            }
        )
    return pd.DataFrame(rows, columns=COMPARISON_COLUMNS)


def summarize_comparison(df: pd.DataFrame) -> dict[str, int]:
    counts = df["winner"].value_counts()
    return {
        "wins_a": int(counts.get("a", 0)),
        "wins_b": int(counts.get("b", 0)),
        "draws": int(counts.get("draw", 0)),
    }
