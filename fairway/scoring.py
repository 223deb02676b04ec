"""Scoring functions for match play, stroke play and bye weeks."""

import logging
import math
from typing import Dict, List, Optional, Sequence

from .constants import (
    MATCH_TIE_POINTS,
    MATCH_TOTAL_POINTS,
    MATCH_WINNER_BASE,
    MATCH_WINNER_MAX,
    POINT_SCALE_BASES,
    POINT_SCALE_PRESETS,
    TIE_EPSILON,
    ByePointsMode,
    MatchupStatus,
    PointScalePreset,
    TieMode,
)
from .models import MatchPoints, MatchupResult, ScheduledMatchup, StrokePlayEntry, StrokePlayResult
from .schemas import ScoringConfig, StrokePlayBonusConfig
from .utils import round_half_up

logger = logging.getLogger('fairway.scoring')


def calculate_net_score(gross_score: float, handicap: float) -> float:
    """
    Net score = gross - handicap, to one decimal.

    Example:
        >>> calculate_net_score(42, 4.7)
        37.3
    """
    difference = gross_score - handicap
    if not math.isfinite(difference):
        logger.warning(f'Non-finite net score (gross={gross_score}, handicap={handicap}); using 0')
        return 0.0
    return round_half_up(difference, 1)


def are_scores_tied(score_a: float, score_b: float) -> bool:
    """Net scores within TIE_EPSILON of each other count as a tie."""
    return abs(score_a - score_b) < TIE_EPSILON


def suggest_points(team_a_net: float, team_b_net: float) -> MatchPoints:
    """
    Suggest the 20-point match play split for two net scores.

    Scoring:
        - Tie: 10 / 10
        - Winner gets 11 + margin (rounded up), capped at 16
        - Loser gets the rest of the 20

    Margins of 1 -> 12/8, 2 -> 13/7, 3 -> 14/6, 4 -> 15/5, 5+ -> 16/4.

    Args:
        team_a_net: Team A net score
        team_b_net: Team B net score

    Returns:
        MatchPoints (always sums to 20)
    """
    if not (math.isfinite(team_a_net) and math.isfinite(team_b_net)):
        logger.warning(f'Non-finite net score ({team_a_net}, {team_b_net}); scoring as a tie')
        return MatchPoints(MATCH_TIE_POINTS, MATCH_TIE_POINTS)

    if are_scores_tied(team_a_net, team_b_net):
        return MatchPoints(MATCH_TIE_POINTS, MATCH_TIE_POINTS)

    # Nets carry one decimal, so 32.7 vs 29.7 is a 3-stroke margin
    margin = math.ceil(round_half_up(abs(team_a_net - team_b_net), 1))
    winner_points = min(MATCH_WINNER_BASE + margin, MATCH_WINNER_MAX)
    loser_points = MATCH_TOTAL_POINTS - winner_points

    # Lower net wins
    if team_a_net < team_b_net:
        return MatchPoints(winner_points, loser_points)
    return MatchPoints(loser_points, winner_points)


def _finishing_key(entry: StrokePlayEntry) -> tuple[bool, float]:
    # Non-finite nets sort after every real score
    if math.isfinite(entry.net_score):
        return False, entry.net_score
    return True, 0.0


def calculate_stroke_play_points(
    entries: Sequence[StrokePlayEntry],
    point_scale: Sequence[float],
    tie_mode: TieMode | str = TieMode.SPLIT,
    bonus_config: Optional[StrokePlayBonusConfig] = None,
) -> List[StrokePlayResult]:
    """
    Rank a stroke play field by net score and award position points.

    Tied teams (within TIE_EPSILON of the previous team in the group) share
    the position of the first team in the group. With 'split' they share
    the average of the scale values the group spans; with 'same' each gets
    the value at the group's leading position.

    Args:
        entries: One entry per team
        point_scale: Points per position, best first. Padded with zeros on a
                     copy if more teams are playing than the scale covers.
        tie_mode: 'split' or 'same'
        bonus_config: Show-up / beat-handicap / DNP settings

    Returns:
        Playing teams in finishing order (non-finite nets last, with a
        warning), then DNP teams in input order
    """
    tie_mode = TieMode(tie_mode)
    if bonus_config is None:
        bonus_config = StrokePlayBonusConfig()

    playing = [entry for entry in entries if not entry.is_dnp]
    for entry in playing:
        if not math.isfinite(entry.net_score):
            logger.warning(f'Non-finite net score for team {entry.team_id}; ranking last')

    playing.sort(key=_finishing_key)
    dnp = [entry for entry in entries if entry.is_dnp]

    scale = list(point_scale)
    if len(scale) < len(playing):
        logger.warning(
            f'Point scale has {len(scale)} entries but {len(playing)} teams are playing; padding with zeros'
        )
        scale.extend([0] * (len(playing) - len(scale)))

    results: List[StrokePlayResult] = []
    i = 0
    while i < len(playing):
        group_end = i + 1
        while (
            group_end < len(playing)
            and are_scores_tied(playing[group_end - 1].net_score, playing[group_end].net_score)
        ):
            group_end += 1

        group = playing[i:group_end]
        if tie_mode == TieMode.SPLIT:
            points = sum(scale[i:group_end]) / len(group)
        else:
            points = scale[i]

        for entry in group:
            bonus = bonus_config.show_up_bonus
            if entry.net_score < bonus_config.base_score:
                bonus += bonus_config.beat_handicap_bonus
            results.append(StrokePlayResult(
                team_id=entry.team_id,
                position=i + 1,
                points=points,
                bonus_points=bonus,
            ))
        i = group_end

    for entry in dnp:
        results.append(StrokePlayResult(
            team_id=entry.team_id,
            position=0,
            points=bonus_config.dnp_points + bonus_config.dnp_penalty,
            bonus_points=0,
        ))

    return results


def generate_point_scale(preset: PointScalePreset | str, team_count: int) -> List[int]:
    """
    Generate a stroke play point scale for a field of ``team_count`` teams.

    Scales:
        - linear: N, N-1, ... 1
        - weighted: 15, 12, 10, 8, 6, 5, 4, 3, 2, 1, then 1s
        - pga_style: 25, 20, 16, 13, 10, 8, 6, 4, 3, 2, 1, then 1s

    'custom' and unrecognized presets fall back to linear.
    """
    if team_count <= 0:
        return []

    try:
        preset = PointScalePreset(preset)
    except ValueError:
        preset = PointScalePreset.LINEAR

    base = POINT_SCALE_BASES.get(preset)
    if base is None:
        return list(range(team_count, 0, -1))

    if team_count <= len(base):
        return base[:team_count]
    return base + [1] * (team_count - len(base))


def get_point_scale_presets() -> List[Dict[str, str]]:
    """Point scale presets for display (id, name, description)."""
    return [dict(preset) for preset in POINT_SCALE_PRESETS]


def resolve_point_scale(config: ScoringConfig, playing_count: int) -> List[float]:
    """The league's custom point scale if it has one, else its preset scale."""
    if config.point_scale:
        return list(config.point_scale)
    return generate_point_scale(config.point_preset, playing_count)


def calculate_bye_points(
    mode: ByePointsMode | str,
    team_id: int,
    week_number: int,
    results: Sequence[MatchupResult],
    flat_points: float = 10,
) -> float:
    """
    Points awarded to a team sitting out a week on a bye.

    Modes:
        - zero: nothing
        - flat: ``flat_points``
        - league_average: average points per team in that week's matchups
        - team_average: the team's own average points per matchup, all season

    Averages are rounded to one decimal; with no matchups to average the
    team gets 0.
    """
    mode = ByePointsMode(mode)

    if mode == ByePointsMode.ZERO:
        return 0
    if mode == ByePointsMode.FLAT:
        return flat_points

    if mode == ByePointsMode.LEAGUE_AVERAGE:
        week_results = [r for r in results if r.week_number == week_number]
        if not week_results:
            return 0
        total = sum(r.team_a_points + r.team_b_points for r in week_results)
        return round_half_up(total / (len(week_results) * 2), 1)

    team_points = [
        r.team_a_points if r.team_a_id == team_id else r.team_b_points
        for r in results
        if team_id in (r.team_a_id, r.team_b_id)
    ]
    if not team_points:
        return 0
    return round_half_up(sum(team_points) / len(team_points), 1)


def calculate_bye_week_points(
    schedule: Sequence[ScheduledMatchup],
    week_number: int,
    results: Sequence[MatchupResult],
    mode: ByePointsMode | str,
    flat_points: float = 10,
) -> Dict[int, float]:
    """
    Bye points for every team with a scheduled (not yet processed) bye in a week.

    Returns:
        Dict of team_id -> points
    """
    return {
        entry.team_a_id: calculate_bye_points(mode, entry.team_a_id, week_number, results, flat_points)
        for entry in schedule
        if entry.week_number == week_number
        and entry.is_bye
        and entry.status == MatchupStatus.SCHEDULED
    }
