"""Data models for the Fairway league engine."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .constants import MatchupStatus


@dataclass(frozen=True)
class Team:
    team_id: int
    name: str


@dataclass(frozen=True)
class MatchPoints:
    """Match play points for the two sides of a matchup (always sum to 20)."""
    team_a_points: int
    team_b_points: int


@dataclass(frozen=True)
class StrokePlayEntry:
    """One team's result for a stroke play week."""
    team_id: int
    net_score: float
    gross_score: float
    is_dnp: bool = False


@dataclass
class StrokePlayResult:
    """Position and points awarded to one stroke play entry."""
    team_id: int
    position: int  # 0 for DNP
    points: float
    bonus_points: float = 0.0

    @property
    def total_points(self) -> float:
        return self.points + self.bonus_points


@dataclass(frozen=True)
class ScheduledMatch:
    """A proposed pairing. ``team_b_id`` of None is a bye for ``team_a_id``."""
    team_a_id: int
    team_b_id: Optional[int]

    @property
    def is_bye(self) -> bool:
        return self.team_b_id is None


@dataclass
class ScheduleRound:
    week_number: int
    matches: List[ScheduledMatch] = field(default_factory=list)


@dataclass
class ScheduleResult:
    rounds: List[ScheduleRound]
    truncated: bool
    full_rounds_needed: int


@dataclass
class ScheduleValidation:
    valid: bool
    errors: List[str]
    bye_distribution: Dict[int, int]
    matches_per_team: Dict[int, int]


@dataclass(frozen=True)
class ScheduledMatchup:
    """A schedule entry as persisted by the league's store."""
    week_number: int
    team_a_id: int
    team_b_id: Optional[int]
    status: MatchupStatus = MatchupStatus.SCHEDULED
    course_side: Optional[str] = None

    @property
    def is_bye(self) -> bool:
        return self.team_b_id is None

    def involves(self, team_id: int) -> bool:
        return self.team_a_id == team_id or self.team_b_id == team_id


@dataclass(frozen=True)
class ScoreRecord:
    """A submitted gross score, from a matchup or a stroke play week."""
    team_id: int
    week_number: int
    gross_score: float
    source: str = 'matchup'  # 'matchup' or 'weekly'
    is_sub: bool = False
    is_dnp: bool = False


@dataclass(frozen=True)
class MatchupResult:
    """A completed match play result, used for standings and history."""
    week_number: int
    team_a_id: int
    team_b_id: int
    team_a_points: float
    team_b_points: float
    team_a_net: float
    team_b_net: float
    team_a_handicap: float = 0
    team_b_handicap: float = 0
    team_a_is_sub: bool = False
    team_b_is_sub: bool = False
    team_a_gross: float = 0
    team_b_gross: float = 0
    is_forfeit: bool = False


@dataclass
class HandicapHistoryEntry:
    team_id: int
    team_name: str
    weekly_handicaps: List[Dict[str, float]] = field(default_factory=list)
    # weekly_handicaps = [{'week': 1, 'handicap': 4}, ...]
    current_handicap: Optional[float] = None


@dataclass
class StandingsRow:
    team_id: int
    team_name: str
    rank: int
    points: float = 0.0
    wins: int = 0
    losses: int = 0
    ties: int = 0
    handicap: int = 0
    net_differential: float = 0.0
    previous_rank: Optional[int] = None
    previous_handicap: Optional[int] = None
    rank_change: Optional[int] = None  # positive = moved up
    handicap_change: Optional[int] = None


@dataclass(frozen=True)
class WeeklyScoreInput:
    """Admin input for one team in a stroke play week."""
    team_id: int
    gross_score: float
    is_sub: bool = False
    is_dnp: bool = False
    manual_handicap: Optional[float] = None


@dataclass
class WeeklyScorePreviewEntry:
    team_id: int
    team_name: str
    gross_score: float
    handicap: float
    net_score: float
    position: int = 0
    points: float = 0.0
    bonus_points: float = 0.0
    is_sub: bool = False
    is_dnp: bool = False

    @property
    def total_points(self) -> float:
        return self.points + self.bonus_points
