"""Tests for the week scorer: handicap choice, match play and stroke play previews."""

import logging
import math

import pytest

from fairway.models import MatchPoints, WeeklyScoreInput
from fairway.schemas import ScoringConfig
from fairway.scorer import WeekScorer, forfeit_result, preview_stroke_play_week, score_matchup


@pytest.fixture
def scorer(score_records, default_settings):
    return WeekScorer(3, default_settings, score_records, team_names={1: 'Birdie Brigade'})


class TestScoreMatchup:
    """Tests for net scores and points of a single pairing."""

    def test_nets_and_points(self):
        """Test 45 - 5 = 40 beats 44 - 2 = 42 by two strokes."""
        assert score_matchup(45, 44, 5, 2) == (40, 42, MatchPoints(13, 7))

    def test_forfeit(self):
        """Test a forfeit gives the winner all 20 points."""
        result = forfeit_result(4, 2, 3)
        assert (result.team_a_id, result.team_a_points) == (2, 20)
        assert (result.team_b_id, result.team_b_points) == (3, 0)
        assert result.is_forfeit

    def test_forfeit_same_team(self):
        """Test a team cannot forfeit to itself."""
        with pytest.raises(ValueError):
            forfeit_result(4, 2, 2)


class TestHandicapChoice:
    """Tests for which handicap a team plays off."""

    def test_calculated_from_earlier_weeks(self, scorer):
        """Test weeks 1 and 2 (40, 42) give a handicap of 5."""
        assert scorer.calculated_handicap(1) == 5
        assert scorer.handicap_for(WeeklyScoreInput(1, 45)) == 5

    def test_manual_override_capped(self, scorer):
        """Test a manual handicap overrides and is clamped to the maximum."""
        assert scorer.handicap_for(WeeklyScoreInput(1, 45, manual_handicap=3)) == 3
        assert scorer.handicap_for(WeeklyScoreInput(1, 45, manual_handicap=12)) == 9

    def test_manual_clamped_to_minimum(self, score_records, make_settings):
        """Test the minimum cap applies to manual values too."""
        scorer = WeekScorer(3, make_settings(min_handicap=0), score_records)
        assert scorer.cap_manual_handicap(-4) == 0

    def test_week_one_uses_default(self, make_settings):
        """Test week one falls back to the league default without a manual value."""
        scorer = WeekScorer(1, make_settings(default_handicap=2))
        assert scorer.is_week_one
        assert scorer.handicap_for(WeeklyScoreInput(1, 45)) == 2
        assert scorer.handicap_for(WeeklyScoreInput(1, 45, manual_handicap=4)) == 4

    def test_sub_with_manual(self, scorer):
        """Test a substitute with a manual handicap plays off it."""
        assert scorer.handicap_for(WeeklyScoreInput(1, 45, is_sub=True, manual_handicap=7)) == 7

    def test_non_finite_manual(self, scorer, caplog):
        """Test a NaN manual handicap falls back to the default with a warning."""
        with caplog.at_level(logging.WARNING, logger='fairway.scorer'):
            handicap = scorer.handicap_for(WeeklyScoreInput(1, 45, manual_handicap=math.nan))
        assert handicap == 0
        assert 'Non-finite handicap for team 1' in caplog.text


class TestPreviewMatchup:
    """Tests for the match play preview."""

    def test_preview(self, scorer):
        """Test team 2's 48 gives 11.7 -> 11, capped at 9, so 46 nets 37 and wins by 3."""
        result = scorer.preview_matchup(WeeklyScoreInput(1, 45), WeeklyScoreInput(2, 46))
        assert result.week_number == 3
        assert (result.team_a_handicap, result.team_b_handicap) == (5, 9)
        assert (result.team_a_net, result.team_b_net) == (40, 37)
        assert (result.team_a_points, result.team_b_points) == (6, 14)
        assert (result.team_a_gross, result.team_b_gross) == (45, 46)


class TestPreviewStrokePlay:
    """Tests for the stroke play preview."""

    def inputs(self):
        return [
            WeeklyScoreInput(1, 45),
            WeeklyScoreInput(2, 44),
            WeeklyScoreInput(3, 0, is_dnp=True),
            WeeklyScoreInput(4, 41, manual_handicap=2),
        ]

    def test_positions_and_points(self, score_records, default_settings):
        """Test nets 39, 40, 44 take the linear scale 3, 2, 1 and the DNP comes last."""
        config = ScoringConfig(scoring_type='stroke_play', show_up_bonus=1)
        entries = preview_stroke_play_week(
            4, self.inputs(), score_records, default_settings, config, team_names={1: 'Birdie Brigade'},
        )

        assert [e.team_id for e in entries] == [4, 1, 2, 3]
        assert [e.net_score for e in entries] == [39, 40, 44, 0]
        assert [e.position for e in entries] == [1, 2, 3, 0]
        assert [e.total_points for e in entries] == [4, 3, 2, 0]
        assert entries[1].team_name == 'Birdie Brigade'
        assert entries[0].team_name == 'Team 4'
        assert entries[-1].is_dnp

    def test_default_config(self, score_records):
        """Test the linear scale is used when no config is given."""
        entries = WeekScorer(4, score_records=score_records, scoring_type='stroke_play').preview_stroke_play(
            self.inputs(),
        )
        assert [e.points for e in entries] == [3, 2, 1, 0]

    def test_weekly_history_for_handicap(self, score_records, default_settings):
        """Test stroke play handicaps come from weekly scores (44, 39 -> 5)."""
        entries = preview_stroke_play_week(4, [WeeklyScoreInput(1, 45)], score_records, default_settings)
        assert entries[0].handicap == 5
