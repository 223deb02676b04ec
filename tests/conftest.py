"""Shared fixtures for the league engine tests."""

import pytest

from fairway.config import DEFAULT_HANDICAP_SETTINGS, build_handicap_settings
from fairway.models import ScoreRecord, Team


@pytest.fixture
def default_settings():
    return DEFAULT_HANDICAP_SETTINGS


@pytest.fixture
def make_settings():
    """Factory for settings with a few fields overridden."""
    def _make(**overrides):
        return build_handicap_settings(**overrides)
    return _make


@pytest.fixture
def teams():
    return [
        Team(1, 'Birdie Brigade'),
        Team(2, 'Sand Trappers'),
        Team(3, 'Bogey Boys'),
        Team(4, 'Fore Play'),
    ]


@pytest.fixture
def score_records():
    """Two weeks of match play and stroke play scores for teams 1 and 2."""
    return [
        ScoreRecord(team_id=1, week_number=2, gross_score=42, source='matchup'),
        ScoreRecord(team_id=1, week_number=1, gross_score=40, source='matchup'),
        ScoreRecord(team_id=1, week_number=1, gross_score=44, source='weekly'),
        ScoreRecord(team_id=1, week_number=3, gross_score=39, source='weekly'),
        ScoreRecord(team_id=1, week_number=4, gross_score=50, source='matchup', is_sub=True),
        ScoreRecord(team_id=1, week_number=5, gross_score=0, source='weekly', is_dnp=True),
        ScoreRecord(team_id=2, week_number=1, gross_score=48, source='matchup'),
    ]
