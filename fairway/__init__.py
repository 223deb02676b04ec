from .models import (
    Team,
    MatchPoints,
    MatchupResult,
    ScheduledMatch,
    ScheduledMatchup,
    ScheduleRound,
    ScheduleResult,
    ScoreRecord,
    StandingsRow,
    StrokePlayEntry,
    StrokePlayResult,
    WeeklyScoreInput,
    WeeklyScorePreviewEntry,
)
from .schemas import HandicapSettings, ScheduleConfig, ScoringConfig, StrokePlayBonusConfig
from .config import (
    DEFAULT_HANDICAP_SETTINGS,
    HANDICAP_PRESETS,
    apply_preset,
    build_handicap_settings,
    league_to_handicap_settings,
    load_league_config,
)
from .handicap import (
    calculate_handicap,
    calculate_trend_adjustment,
    calculate_weighted_average,
    cap_exceptional_scores,
    describe_calculation,
    select_scores,
)
from .scoring import (
    are_scores_tied,
    calculate_bye_points,
    calculate_bye_week_points,
    calculate_net_score,
    calculate_stroke_play_points,
    generate_point_scale,
    get_point_scale_presets,
    suggest_points,
)
from .schedule import (
    ScheduleError,
    add_team_to_schedule,
    generate_double_round_robin,
    generate_schedule_for_weeks,
    generate_single_round_robin,
    get_course_side_for_week,
    remove_team_from_schedule,
    rounds_to_matchups,
    validate_schedule,
)
from .history import build_handicap_history, get_team_handicap_for_week, get_team_previous_scores
from .scorer import WeekScorer, forfeit_result, preview_stroke_play_week, score_matchup
from .standings import calculate_standings_at_week, leaderboard_with_movement, rank_teams

__all__ = [
    # Models
    'Team',
    'MatchPoints',
    'MatchupResult',
    'ScheduledMatch',
    'ScheduledMatchup',
    'ScheduleRound',
    'ScheduleResult',
    'ScoreRecord',
    'StandingsRow',
    'StrokePlayEntry',
    'StrokePlayResult',
    'WeeklyScoreInput',
    'WeeklyScorePreviewEntry',
    # Settings
    'HandicapSettings',
    'ScheduleConfig',
    'ScoringConfig',
    'StrokePlayBonusConfig',
    'DEFAULT_HANDICAP_SETTINGS',
    'HANDICAP_PRESETS',
    'apply_preset',
    'build_handicap_settings',
    'league_to_handicap_settings',
    'load_league_config',
    # Handicaps
    'calculate_handicap',
    'calculate_trend_adjustment',
    'calculate_weighted_average',
    'cap_exceptional_scores',
    'describe_calculation',
    'select_scores',
    # Points
    'are_scores_tied',
    'calculate_bye_points',
    'calculate_bye_week_points',
    'calculate_net_score',
    'calculate_stroke_play_points',
    'generate_point_scale',
    'get_point_scale_presets',
    'suggest_points',
    # Schedule
    'ScheduleError',
    'add_team_to_schedule',
    'generate_double_round_robin',
    'generate_schedule_for_weeks',
    'generate_single_round_robin',
    'get_course_side_for_week',
    'remove_team_from_schedule',
    'rounds_to_matchups',
    'validate_schedule',
    # History and standings
    'build_handicap_history',
    'get_team_handicap_for_week',
    'get_team_previous_scores',
    'WeekScorer',
    'forfeit_result',
    'preview_stroke_play_week',
    'score_matchup',
    'calculate_standings_at_week',
    'leaderboard_with_movement',
    'rank_teams',
]
