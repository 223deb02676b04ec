"""League standings and leaderboard movement."""

import logging
import math
from collections import defaultdict
from dataclasses import replace
from functools import cmp_to_key
from typing import Dict, List, Mapping, Optional, Sequence

from .models import MatchupResult, StandingsRow, Team

logger = logging.getLogger('fairway.standings')


def _average_handicap(handicaps: Sequence[float]) -> int:
    if not handicaps:
        return 0
    return math.floor(sum(handicaps) / len(handicaps))


def rank_teams(
    teams: Sequence[Team],
    results: Sequence[MatchupResult],
    bonus_points: Optional[Mapping[int, float]] = None,
) -> List[StandingsRow]:
    """
    Rank teams by their match play results.

    Tiebreakers, in order:
        1. Total points (match points plus any bonus points, e.g. byes)
        2. Wins
        3. Head-to-head points between the two teams (more is better)
        4. Net differential (opponent net minus own net, summed)

    Args:
        teams: Teams in the standings
        results: Completed matchups
        bonus_points: Extra points per team_id outside matchups

    Returns:
        StandingsRow list, best first, ranks starting at 1
    """
    bonus_points = bonus_points or {}
    known = {team.team_id for team in teams}

    rows: Dict[int, StandingsRow] = {
        team.team_id: StandingsRow(
            team_id=team.team_id,
            team_name=team.name,
            rank=0,
            points=bonus_points.get(team.team_id, 0.0),
        )
        for team in teams
    }
    handicaps: Dict[int, List[float]] = defaultdict(list)
    head_to_head: Dict[int, Dict[int, float]] = defaultdict(lambda: defaultdict(float))

    for r in results:
        sides = (
            (r.team_a_id, r.team_b_id, r.team_a_points, r.team_b_points, r.team_a_net, r.team_b_net,
             r.team_a_handicap, r.team_a_is_sub),
            (r.team_b_id, r.team_a_id, r.team_b_points, r.team_a_points, r.team_b_net, r.team_a_net,
             r.team_b_handicap, r.team_b_is_sub),
        )
        for team_id, opponent_id, points, opponent_points, net, opponent_net, handicap, is_sub in sides:
            if team_id not in known:
                continue
            row = rows[team_id]
            row.points += points
            if points > opponent_points:
                row.wins += 1
            elif points < opponent_points:
                row.losses += 1
            else:
                row.ties += 1
            row.net_differential += opponent_net - net
            head_to_head[team_id][opponent_id] += points
            if not is_sub:
                handicaps[team_id].append(handicap)

    for team_id, row in rows.items():
        row.handicap = _average_handicap(handicaps[team_id])

    def compare(a: StandingsRow, b: StandingsRow) -> int:
        if a.points != b.points:
            return -1 if a.points > b.points else 1
        if a.wins != b.wins:
            return b.wins - a.wins

        a_vs_b = head_to_head[a.team_id].get(b.team_id, 0)
        b_vs_a = head_to_head[b.team_id].get(a.team_id, 0)
        if a_vs_b != b_vs_a:
            return -1 if a_vs_b > b_vs_a else 1

        if a.net_differential != b.net_differential:
            return -1 if a.net_differential > b.net_differential else 1
        return 0

    ranked = sorted(rows.values(), key=cmp_to_key(compare))
    for index, row in enumerate(ranked):
        row.rank = index + 1
    return ranked


def calculate_standings_at_week(
    teams: Sequence[Team],
    results: Sequence[MatchupResult],
    up_to_week: int,
    bonus_points: Optional[Mapping[int, float]] = None,
) -> List[StandingsRow]:
    """Standings as they stood after ``up_to_week``."""
    return rank_teams(
        teams,
        [r for r in results if r.week_number <= up_to_week],
        bonus_points,
    )


def leaderboard_with_movement(
    teams: Sequence[Team],
    results: Sequence[MatchupResult],
    bonus_points: Optional[Mapping[int, float]] = None,
) -> List[StandingsRow]:
    """
    Current standings with movement since the previous week played.

    ``rank_change`` (positive = moved up) and ``handicap_change`` are only
    filled in for teams that played in the previous week; teams new to
    the league show no movement.
    """
    if not results:
        return [
            StandingsRow(team_id=team.team_id, team_name=team.name, rank=index + 1)
            for index, team in enumerate(teams)
        ]

    weeks = sorted({r.week_number for r in results}, reverse=True)
    current_week = weeks[0]
    previous_week = weeks[1] if len(weeks) > 1 else None

    current = calculate_standings_at_week(teams, results, current_week, bonus_points)
    if previous_week is None:
        return current

    previous = {
        row.team_id: row
        for row in calculate_standings_at_week(teams, results, previous_week, bonus_points)
    }
    played_previous_week = {
        team_id
        for r in results if r.week_number == previous_week
        for team_id in (r.team_a_id, r.team_b_id)
    }

    leaderboard = []
    for row in current:
        before = previous.get(row.team_id)
        if before is None:
            leaderboard.append(row)
            continue

        moved = row.team_id in played_previous_week
        leaderboard.append(replace(
            row,
            previous_rank=before.rank,
            previous_handicap=before.handicap,
            rank_change=before.rank - row.rank if moved else None,
            handicap_change=row.handicap - before.handicap if moved else None,
        ))
    return leaderboard
