"""Validation functions for league settings and submitted scores.

These run at the admin boundary, before anything is saved. The calculation
modules tolerate bad settings with a fallback; these checks tell the admin
about them up front.
"""

import math
from typing import Sequence

from .constants import MAX_COMBINED_DROPS, PointScalePreset, ScoreSelection
from .models import WeeklyScoreInput
from .schemas import HandicapSettings, ScoringConfig

# field: (minimum, maximum)
HANDICAP_FIELD_RANGES = {
    'base_score': (0, 200),
    'multiplier': (0, 5),
    'default_handicap': (-50, 100),
    'max_handicap': (0, 200),
    'min_handicap': (-50, 100),
    'score_count': (1, 100),
    'best_of': (1, 100),
    'last_of': (1, 100),
    'drop_highest': (0, 50),
    'drop_lowest': (0, 50),
    'weight_recent': (0, 10),
    'weight_decay': (0, 2),
    'exceptional_cap': (0, 200),
    'prov_weeks': (0, 52),
    'prov_multiplier': (0, 5),
    'freeze_week': (1, 52),
    'trend_weight': (0, 1),
}


def validate_handicap_settings(settings: HandicapSettings) -> list[str]:
    """
    Validate handicap settings before they are saved for a league.

    Checks:
    - Every numeric field within its allowed range
    - Combined drop count at most 20
    - Maximum handicap not below minimum
    - best_of/last_of present for best-of-last selection, best_of <= last_of
    - score_count present for last-N selection

    Args:
        settings: Settings to check

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    for field, (minimum, maximum) in HANDICAP_FIELD_RANGES.items():
        value = getattr(settings, field)
        if value is None:
            continue
        if not math.isfinite(value):
            errors.append(f'{field} must be a finite number')
        elif not minimum <= value <= maximum:
            errors.append(f'{field} must be between {minimum} and {maximum} (got {value})')

    if settings.drop_highest + settings.drop_lowest > MAX_COMBINED_DROPS:
        errors.append(f'Combined drop count cannot exceed {MAX_COMBINED_DROPS}')

    if (
        settings.max_handicap is not None
        and settings.min_handicap is not None
        and settings.max_handicap < settings.min_handicap
    ):
        errors.append('Maximum handicap must be greater than or equal to minimum handicap')

    if settings.score_selection == ScoreSelection.BEST_OF_LAST:
        if settings.best_of is None or settings.last_of is None:
            errors.append('Best-of and last-of counts are required when using best-of-last selection')
        elif settings.best_of > settings.last_of:
            errors.append('Best-of count must be less than or equal to last-of count')

    if settings.score_selection == ScoreSelection.LAST_N and settings.score_count is None:
        errors.append('Score count is required when using last-N selection')

    if settings.cap_exceptional and settings.exceptional_cap is None:
        errors.append('Exceptional cap is required when capping exceptional scores')

    return errors


def validate_point_scale(scale: Sequence[float]) -> list[str]:
    """
    Check a custom stroke play point scale.

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    if not scale:
        errors.append('Point scale must have at least one position')
        return errors

    for position, points in enumerate(scale, start=1):
        if not math.isfinite(points) or points < 0:
            errors.append(f'Position {position} has invalid points: {points}')

    for position, (previous, current) in enumerate(zip(scale, scale[1:]), start=2):
        if current > previous:
            errors.append(
                f'Point scale must be in descending order (position {position} has {current} > {previous})'
            )

    return errors


def validate_scoring_config(config: ScoringConfig) -> list[str]:
    """
    Validate a league's scoring configuration.

    Checks:
    - Custom preset has a point scale
    - Point scales are non-negative and descending

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    if config.point_preset == PointScalePreset.CUSTOM and not config.point_scale:
        errors.append('A custom point preset needs a point scale')

    if config.point_scale:
        errors.extend(validate_point_scale(config.point_scale))

    if config.hybrid_field_point_scale:
        errors.extend(
            f'Hybrid field scale: {error}'
            for error in validate_point_scale(config.hybrid_field_point_scale)
        )

    return errors


def validate_weekly_inputs(inputs: Sequence[WeeklyScoreInput]) -> list[str]:
    """
    Validate a week of stroke play score entries.

    Checks:
    - Each team entered once
    - Gross scores are finite and not negative (DNP entries are skipped)

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []
    seen = set()

    for score_input in inputs:
        if score_input.team_id in seen:
            errors.append(f'Team {score_input.team_id} entered more than once')
        seen.add(score_input.team_id)

        if score_input.is_dnp:
            continue
        if not math.isfinite(score_input.gross_score) or score_input.gross_score < 0:
            errors.append(f'Team {score_input.team_id} has invalid gross score: {score_input.gross_score}')

    return errors
