"""Week scoring engine that ties handicaps, net scores and points together."""

import logging
import math
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .config import DEFAULT_HANDICAP_SETTINGS
from .constants import MATCH_TOTAL_POINTS, ScoringType
from .handicap import calculate_handicap
from .history import get_team_previous_scores
from .models import (
    MatchPoints,
    MatchupResult,
    ScoreRecord,
    StrokePlayEntry,
    StrokePlayResult,
    WeeklyScoreInput,
    WeeklyScorePreviewEntry,
)
from .schemas import HandicapSettings, ScoringConfig
from .scoring import (
    calculate_net_score,
    calculate_stroke_play_points,
    resolve_point_scale,
    suggest_points,
)

logger = logging.getLogger('fairway.scorer')


def score_matchup(
    team_a_gross: float,
    team_b_gross: float,
    team_a_handicap: float,
    team_b_handicap: float,
) -> Tuple[float, float, MatchPoints]:
    """
    Net scores and suggested points for one match play pairing.

    Returns:
        Tuple of (team_a_net, team_b_net, points)
    """
    team_a_net = calculate_net_score(team_a_gross, team_a_handicap)
    team_b_net = calculate_net_score(team_b_gross, team_b_handicap)
    return team_a_net, team_b_net, suggest_points(team_a_net, team_b_net)


def forfeit_result(week_number: int, winning_team_id: int, forfeiting_team_id: int) -> MatchupResult:
    """A forfeit: the winner takes all 20 points, no scores are recorded."""
    if winning_team_id == forfeiting_team_id:
        raise ValueError('Winning team and forfeiting team must be different')
    return MatchupResult(
        week_number=week_number,
        team_a_id=winning_team_id,
        team_b_id=forfeiting_team_id,
        team_a_points=MATCH_TOTAL_POINTS,
        team_b_points=0,
        team_a_net=0,
        team_b_net=0,
        is_forfeit=True,
    )


class WeekScorer:
    """Scores one league week from admin input and the league's score history."""

    def __init__(
        self,
        week_number: int,
        settings: Optional[HandicapSettings] = None,
        score_records: Sequence[ScoreRecord] = (),
        scoring_type: ScoringType | str = ScoringType.MATCH_PLAY,
        team_names: Optional[Mapping[int, str]] = None,
    ):
        self.week_number = week_number
        self.settings = settings or DEFAULT_HANDICAP_SETTINGS
        self.score_records = list(score_records)
        self.scoring_type = ScoringType(scoring_type)
        self.team_names = dict(team_names or {})

    @property
    def is_week_one(self) -> bool:
        return self.week_number == 1

    def team_name(self, team_id: int) -> str:
        return self.team_names.get(team_id, f'Team {team_id}')

    def cap_manual_handicap(self, value: float) -> float:
        """Clamp an admin-entered handicap to the league's min/max."""
        if self.settings.max_handicap is not None and value > self.settings.max_handicap:
            value = self.settings.max_handicap
        if self.settings.min_handicap is not None and value < self.settings.min_handicap:
            value = self.settings.min_handicap
        return value

    def calculated_handicap(self, team_id: int) -> float:
        """Handicap from the team's scores in earlier weeks."""
        scores = get_team_previous_scores(
            self.score_records, team_id, self.scoring_type, before_week=self.week_number,
        )
        return calculate_handicap(scores, self.settings, self.week_number)

    def handicap_for(self, score_input: WeeklyScoreInput) -> float:
        """
        Handicap a team plays off this week.

        Week one has no history, so the manual handicap (or the league
        default) is used. Substitutes with a manual handicap use it in any
        week. Otherwise a manual handicap overrides the calculated one.
        Manual values are clamped to the league caps.
        """
        manual = score_input.manual_handicap
        if self.is_week_one or (score_input.is_sub and manual is not None):
            handicap = self.cap_manual_handicap(
                manual if manual is not None else self.settings.default_handicap
            )
        elif manual is not None:
            handicap = self.cap_manual_handicap(manual)
        else:
            handicap = self.calculated_handicap(score_input.team_id)

        if not math.isfinite(handicap):
            logger.warning(
                f'Non-finite handicap for team {score_input.team_id}; '
                f'using default {self.settings.default_handicap}'
            )
            handicap = self.settings.default_handicap
        return handicap

    def preview_matchup(self, team_a: WeeklyScoreInput, team_b: WeeklyScoreInput) -> MatchupResult:
        """Handicaps, nets and suggested points for a match play pairing."""
        team_a_handicap = self.handicap_for(team_a)
        team_b_handicap = self.handicap_for(team_b)
        team_a_net, team_b_net, points = score_matchup(
            team_a.gross_score, team_b.gross_score, team_a_handicap, team_b_handicap,
        )
        return MatchupResult(
            week_number=self.week_number,
            team_a_id=team_a.team_id,
            team_b_id=team_b.team_id,
            team_a_points=points.team_a_points,
            team_b_points=points.team_b_points,
            team_a_net=team_a_net,
            team_b_net=team_b_net,
            team_a_handicap=team_a_handicap,
            team_b_handicap=team_b_handicap,
            team_a_is_sub=team_a.is_sub,
            team_b_is_sub=team_b.is_sub,
            team_a_gross=team_a.gross_score,
            team_b_gross=team_b.gross_score,
        )

    def preview_stroke_play(
        self,
        inputs: Sequence[WeeklyScoreInput],
        scoring_config: Optional[ScoringConfig] = None,
    ) -> List[WeeklyScorePreviewEntry]:
        """
        Preview a stroke play week: handicaps, nets, positions and points.

        Returns:
            Entries ordered by finishing position, DNP teams last
        """
        scoring_config = scoring_config or ScoringConfig(scoring_type=ScoringType.STROKE_PLAY)

        entries: List[WeeklyScorePreviewEntry] = []
        for score_input in inputs:
            if score_input.is_dnp:
                entries.append(WeeklyScorePreviewEntry(
                    team_id=score_input.team_id,
                    team_name=self.team_name(score_input.team_id),
                    gross_score=0,
                    handicap=0,
                    net_score=0,
                    is_sub=score_input.is_sub,
                    is_dnp=True,
                ))
                continue

            handicap = self.handicap_for(score_input)
            entries.append(WeeklyScorePreviewEntry(
                team_id=score_input.team_id,
                team_name=self.team_name(score_input.team_id),
                gross_score=score_input.gross_score,
                handicap=handicap,
                net_score=calculate_net_score(score_input.gross_score, handicap),
                is_sub=score_input.is_sub,
            ))

        playing_count = sum(1 for entry in entries if not entry.is_dnp)
        point_scale = resolve_point_scale(scoring_config, playing_count)
        results = calculate_stroke_play_points(
            [
                StrokePlayEntry(entry.team_id, entry.net_score, entry.gross_score, entry.is_dnp)
                for entry in entries
            ],
            point_scale,
            scoring_config.tie_mode,
            scoring_config.bonus_config(self.settings.base_score),
        )

        by_team: Dict[int, StrokePlayResult] = {result.team_id: result for result in results}
        for entry in entries:
            result = by_team.get(entry.team_id)
            if result is not None:
                entry.position = result.position
                entry.points = result.points
                entry.bonus_points = result.bonus_points

        return sorted(entries, key=lambda entry: (entry.is_dnp, entry.position))


def preview_stroke_play_week(
    week_number: int,
    inputs: Sequence[WeeklyScoreInput],
    score_records: Sequence[ScoreRecord] = (),
    settings: Optional[HandicapSettings] = None,
    scoring_config: Optional[ScoringConfig] = None,
    scoring_type: ScoringType | str = ScoringType.STROKE_PLAY,
    team_names: Optional[Mapping[int, str]] = None,
) -> List[WeeklyScorePreviewEntry]:
    """
    Preview a full stroke play week.

    Example:
        entries = preview_stroke_play_week(3, inputs, records, settings, config)
        for entry in entries:
            print(f"{entry.position}. {entry.team_name}: {entry.total_points}")
    """
    scorer = WeekScorer(week_number, settings, score_records, scoring_type, team_names)
    return scorer.preview_stroke_play(inputs, scoring_config)
