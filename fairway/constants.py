"""Constants and enumerations for the Fairway league engine."""

from enum import Enum


class Rounding(str, Enum):
    """How a raw handicap is turned into a whole number."""

    FLOOR = 'floor'
    ROUND = 'round'
    CEIL = 'ceil'


class ScoreSelection(str, Enum):
    """Which scores from a team's history feed the handicap."""

    ALL = 'all'
    LAST_N = 'last_n'
    BEST_OF_LAST = 'best_of_last'


class TieMode(str, Enum):
    """Stroke play: how tied teams share position points."""

    SPLIT = 'split'
    SAME = 'same'


class ScoringType(str, Enum):
    MATCH_PLAY = 'match_play'
    STROKE_PLAY = 'stroke_play'
    HYBRID = 'hybrid'


class PointScalePreset(str, Enum):
    LINEAR = 'linear'
    WEIGHTED = 'weighted'
    PGA_STYLE = 'pga_style'
    CUSTOM = 'custom'


class ByePointsMode(str, Enum):
    ZERO = 'zero'
    FLAT = 'flat'
    LEAGUE_AVERAGE = 'league_average'
    TEAM_AVERAGE = 'team_average'


class AddTeamStrategy(str, Enum):
    """Mid-season team addition strategies."""

    START_FROM_HERE = 'start_from_here'
    FILL_BYES = 'fill_byes'
    PRO_RATE = 'pro_rate'
    CATCH_UP = 'catch_up'


class RemoveTeamAction(str, Enum):
    """Mid-season team removal strategies."""

    BYE_OPPONENTS = 'bye_opponents'
    REGENERATE = 'regenerate'


class MatchupStatus(str, Enum):
    SCHEDULED = 'scheduled'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


class ScheduleType(str, Enum):
    SINGLE_ROUND_ROBIN = 'single_round_robin'
    DOUBLE_ROUND_ROBIN = 'double_round_robin'


class PlayMode(str, Enum):
    FULL_18 = 'full_18'
    NINE_HOLE_ALTERNATING = 'nine_hole_alternating'
    NINE_HOLE_FRONT = 'nine_hole_front'
    NINE_HOLE_BACK = 'nine_hole_back'


class CourseSide(str, Enum):
    FRONT = 'front'
    BACK = 'back'


# Net scores closer than this are a tie (net scores carry one decimal)
TIE_EPSILON = 0.05

# Match play: points split between the two teams every matchup
MATCH_TOTAL_POINTS = 20
MATCH_TIE_POINTS = 10
MATCH_WINNER_BASE = 11
MATCH_WINNER_MAX = 16

# Stroke play point scale bases; scales longer than the base pad with 1s
POINT_SCALE_BASES = {
    PointScalePreset.WEIGHTED: [15, 12, 10, 8, 6, 5, 4, 3, 2, 1],
    PointScalePreset.PGA_STYLE: [25, 20, 16, 13, 10, 8, 6, 4, 3, 2, 1],
}

POINT_SCALE_PRESETS = [
    {
        'id': PointScalePreset.LINEAR.value,
        'name': 'Linear',
        'description': 'Equal gaps between positions (8, 7, 6, 5...)',
    },
    {
        'id': PointScalePreset.WEIGHTED.value,
        'name': 'Weighted',
        'description': 'Rewards top finishes more (15, 12, 10, 8...)',
    },
    {
        'id': PointScalePreset.PGA_STYLE.value,
        'name': 'PGA-Style',
        'description': 'Large gaps at the top like pro tours (25, 20, 16...)',
    },
    {
        'id': PointScalePreset.CUSTOM.value,
        'name': 'Custom',
        'description': 'Define your own point values per position',
    },
]

# Admin-boundary limits for handicap settings
MAX_COMBINED_DROPS = 20
