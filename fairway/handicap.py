"""Handicap calculation.

A handicap is derived from a team's chronological gross score history:

    1. No scores -> default handicap
    2. Freeze week: keep only the first ``freeze_week`` entries once the
       season is past it (positions are calendar weeks, so this happens
       before anything is filtered out)
    3. Drop invalid scores (negative, NaN, infinite)
    4. Cap exceptional scores, then select which scores count
    5. Nothing selected -> default handicap
    6. Simple or recency-weighted average
    7. raw = (average - base_score) * multiplier
    8. raw -= trend adjustment (improving teams go down)
    9. Provisional weeks: raw *= prov_multiplier
   10. Round (floor / round / ceil)
   11. Clamp to min/max (skipped with a warning if max < min)
   12. Anything non-finite -> default handicap

Every function here is pure. Score histories are never mutated; degenerate
input is absorbed into a documented fallback and reported as a warning on
the ``fairway.handicap`` logger.
"""

import logging
import math
from typing import Optional, Sequence

from .config import DEFAULT_HANDICAP_SETTINGS
from .constants import Rounding, ScoreSelection
from .schemas import HandicapSettings

logger = logging.getLogger('fairway.handicap')


def _is_valid_score(score) -> bool:
    if isinstance(score, bool):
        return False
    return isinstance(score, (int, float)) and math.isfinite(score) and score >= 0


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def _round_handicap(value: float, method: Rounding) -> int:
    if method == Rounding.CEIL:
        return math.ceil(value)
    if method == Rounding.ROUND:
        # Half-up, so 4.5 -> 5 and -4.5 -> -4
        return math.floor(value + 0.5)
    return math.floor(value)


def _freeze_applies(settings: HandicapSettings, week_number: Optional[int]) -> bool:
    freeze_week = settings.freeze_week
    return (
        week_number is not None
        and freeze_week is not None
        and freeze_week > 0
        and week_number > freeze_week
    )


def _is_provisional(settings: HandicapSettings, week_number: Optional[int]) -> bool:
    return week_number is not None and 1 <= week_number <= settings.prov_weeks


def _caps_conflict(settings: HandicapSettings) -> bool:
    return (
        settings.max_handicap is not None
        and settings.min_handicap is not None
        and settings.max_handicap < settings.min_handicap
    )


def select_scores(scores: Sequence[float], settings: HandicapSettings) -> list[float]:
    """
    Select which scores feed the handicap.

    Works on (position, value) pairs so that value-based choices (best of,
    drop highest/lowest) can be made without losing chronological order:
    survivors are always returned oldest first. Equal values are decided by
    position, earliest first.

    Args:
        scores: Chronological gross scores (oldest first)
        settings: Handicap settings

    Returns:
        The selected scores, in their original chronological order
    """
    if not scores:
        return []

    selected = list(enumerate(scores))

    if settings.score_selection == ScoreSelection.LAST_N:
        count = settings.score_count
        if count is not None:
            if count <= 0:
                selected = []
            elif count < len(selected):
                selected = selected[-count:]

    elif settings.score_selection == ScoreSelection.BEST_OF_LAST:
        best_of = settings.best_of
        last_of = settings.last_of
        if best_of is not None and last_of is not None:
            if last_of <= 0:
                window = []
            else:
                window = selected[-last_of:]

            if best_of > last_of:
                logger.warning(
                    f'best_of ({best_of}) > last_of ({last_of}); using best {last_of} of last {last_of}'
                )
                best_of = last_of
            best_of = max(best_of, 0)

            best = sorted(window, key=lambda pair: (pair[1], pair[0]))[:best_of]
            selected = sorted(best)

    drop_highest = max(settings.drop_highest, 0)
    drop_lowest = max(settings.drop_lowest, 0)
    if drop_highest or drop_lowest:
        if drop_highest + drop_lowest >= len(selected):
            return []

        if drop_highest:
            highest = sorted(selected, key=lambda pair: (-pair[1], pair[0]))[:drop_highest]
            dropped = {position for position, _ in highest}
            selected = [pair for pair in selected if pair[0] not in dropped]

        if drop_lowest:
            lowest = sorted(selected, key=lambda pair: (pair[1], pair[0]))[:drop_lowest]
            dropped = {position for position, _ in lowest}
            selected = [pair for pair in selected if pair[0] not in dropped]

    return [value for _, value in selected]


def cap_exceptional_scores(scores: Sequence[float], settings: HandicapSettings) -> list[float]:
    """Lower any score above the exceptional cap to the cap. Never raises a score."""
    if not settings.cap_exceptional or settings.exceptional_cap is None:
        return list(scores)
    cap = settings.exceptional_cap
    return [min(score, cap) for score in scores]


def calculate_weighted_average(scores: Sequence[float], settings: HandicapSettings) -> float:
    """
    Average the scores, optionally weighting recent rounds more heavily.

    With weighting on, the score at position i of L (0 = oldest) gets weight
    ``weight_recent * weight_decay ** (L - 1 - i)``, so the newest score has
    exponent 0.

    Returns:
        The average, or 0.0 for no scores
    """
    if not scores:
        return 0.0

    if len(scores) == 1 or not settings.use_weighting:
        return _mean(scores)

    last = len(scores) - 1
    weights = [
        settings.weight_recent * settings.weight_decay ** (last - i)
        for i in range(len(scores))
    ]
    total_weight = sum(weights)
    if total_weight == 0 or not math.isfinite(total_weight):
        return _mean(scores)

    return sum(score * weight for score, weight in zip(scores, weights)) / total_weight


def calculate_trend_adjustment(scores: Sequence[float], settings: HandicapSettings) -> float:
    """
    Momentum adjustment: (older half average - newer half average) * trend_weight.

    Positive means the team is improving. For odd lengths the middle score
    belongs to neither half.
    """
    if not settings.use_trend or len(scores) < 3:
        return 0.0

    midpoint = len(scores) // 2
    older = scores[:midpoint]
    newer = scores[len(scores) - midpoint:]

    trend = _mean(older) - _mean(newer)
    return trend * settings.trend_weight


def calculate_handicap(
    scores: Sequence[float],
    settings: Optional[HandicapSettings] = None,
    week_number: Optional[int] = None,
) -> int | float:
    """
    Calculate a team's handicap from its score history.

    Args:
        scores: Chronological gross scores (oldest first). Callers must not
                reorder them: positions stand for calendar weeks.
        settings: Handicap settings (default: DEFAULT_HANDICAP_SETTINGS)
        week_number: Week the handicap is for. Enables the freeze week and
                     provisional period rules.

    Returns:
        A whole-number handicap, or ``settings.default_handicap`` when there
        is nothing usable to compute from

    Example:
        >>> calculate_handicap([40, 42, 38])
        4
    """
    if settings is None:
        settings = DEFAULT_HANDICAP_SETTINGS
    default = settings.default_handicap

    if not scores:
        return default

    working = list(scores)
    if _freeze_applies(settings, week_number):
        working = working[:settings.freeze_week]
        if not working:
            return default

    working = [score for score in working if _is_valid_score(score)]
    if not working:
        return default

    selected = select_scores(cap_exceptional_scores(working, settings), settings)
    if not selected:
        return default

    average = calculate_weighted_average(selected, settings)
    raw = (average - settings.base_score) * settings.multiplier
    if not math.isfinite(raw):
        logger.warning(f'Non-finite raw handicap ({raw}); using default handicap {default}')
        return default

    raw -= calculate_trend_adjustment(selected, settings)

    if _is_provisional(settings, week_number):
        raw *= settings.prov_multiplier

    if not math.isfinite(raw):
        logger.warning(f'Non-finite adjusted handicap ({raw}); using default handicap {default}')
        return default

    handicap: float = _round_handicap(raw, settings.rounding)

    if _caps_conflict(settings):
        logger.warning(
            f'max_handicap ({settings.max_handicap}) < min_handicap ({settings.min_handicap}); '
            'skipping handicap caps'
        )
    else:
        if settings.max_handicap is not None and handicap > settings.max_handicap:
            handicap = settings.max_handicap
        if settings.min_handicap is not None and handicap < settings.min_handicap:
            handicap = settings.min_handicap

    if not math.isfinite(handicap):
        logger.warning(f'Non-finite handicap ({handicap}); using default handicap {default}')
        return default

    if isinstance(handicap, float) and handicap.is_integer():
        return int(handicap)
    return handicap


def describe_calculation(
    scores: Sequence[float],
    settings: HandicapSettings,
    handicap: float,
    week_number: Optional[int] = None,
) -> list[str]:
    """
    Explain, step by step, how a handicap was reached.

    Follows the same order as calculate_handicap so the explanation never
    contradicts the number shown next to it.

    Args:
        scores: Chronological gross scores
        settings: Handicap settings used
        handicap: The handicap that was calculated (shown in the last line)
        week_number: Week the handicap is for

    Returns:
        List of human-readable steps
    """
    if not scores:
        return [f'No scores available. Using default handicap: {settings.default_handicap}']

    steps: list[str] = []
    working = list(scores)

    if _freeze_applies(settings, week_number):
        working = working[:settings.freeze_week]
        steps.append(
            f'Freeze week {settings.freeze_week}: only the first {settings.freeze_week} '
            f'weeks count ({len(working)} scores)'
        )

    valid = [score for score in working if _is_valid_score(score)]
    if len(valid) < len(working):
        steps.append(f'Filtered out {len(working) - len(valid)} invalid score(s)')
    if not valid:
        steps.append(f'No valid scores. Using default handicap: {settings.default_handicap}')
        return steps

    capped = cap_exceptional_scores(valid, settings)
    changed = sum(1 for before, after in zip(valid, capped) if after != before)
    if changed:
        steps.append(
            f'Capped exceptional scores at {_fmt(settings.exceptional_cap)} ({changed} score(s) affected)'
        )

    selected = select_scores(capped, settings)
    if settings.score_selection == ScoreSelection.LAST_N and settings.score_count is not None:
        steps.append(f'Using last {settings.score_count} scores: {_fmt_list(selected)}')
    elif (
        settings.score_selection == ScoreSelection.BEST_OF_LAST
        and settings.best_of is not None
        and settings.last_of is not None
    ):
        steps.append(
            f'Using best {settings.best_of} of last {settings.last_of} scores: {_fmt_list(selected)}'
        )
    else:
        steps.append(f'Using all {len(capped)} scores')

    if settings.drop_highest or settings.drop_lowest:
        steps.append(
            f'Dropped {settings.drop_highest} highest and {settings.drop_lowest} lowest score(s)'
        )

    if not selected:
        steps.append(f'No scores selected. Using default handicap: {settings.default_handicap}')
        return steps

    average = calculate_weighted_average(selected, settings)
    if settings.use_weighting and len(selected) > 1:
        steps.append(
            f'Weighted average (recent weight {_fmt(settings.weight_recent)}, '
            f'decay {_fmt(settings.weight_decay)}): {average:.2f}'
        )
    else:
        steps.append(f'Simple average: {average:.2f}')

    raw = (average - settings.base_score) * settings.multiplier
    steps.append(
        f'Formula: ({average:.2f} - {_fmt(settings.base_score)}) x {_fmt(settings.multiplier)} = {raw:.2f}'
    )
    if not math.isfinite(raw):
        steps.append(f'Result is not a number. Using default handicap: {settings.default_handicap}')
        return steps

    adjustment = calculate_trend_adjustment(selected, settings)
    if adjustment:
        raw -= adjustment
        direction = 'improving' if adjustment > 0 else 'declining'
        steps.append(f'Trend adjustment ({direction}): -{adjustment:.2f} = {raw:.2f}')

    if _is_provisional(settings, week_number):
        raw *= settings.prov_multiplier
        steps.append(
            f'Provisional period (week {week_number} of {settings.prov_weeks}): '
            f'x {_fmt(settings.prov_multiplier)} = {raw:.2f}'
        )

    if not math.isfinite(raw):
        steps.append(f'Result is not a number. Using default handicap: {settings.default_handicap}')
        return steps

    rounded = _round_handicap(raw, settings.rounding)
    steps.append(f'Rounded ({settings.rounding.value}): {rounded}')

    if _caps_conflict(settings):
        steps.append('Maximum is below minimum; caps not applied')
    else:
        if settings.max_handicap is not None and rounded > settings.max_handicap:
            steps.append(f'Capped at maximum: {_fmt(settings.max_handicap)}')
        elif settings.min_handicap is not None and rounded < settings.min_handicap:
            steps.append(f'Capped at minimum: {_fmt(settings.min_handicap)}')

    steps.append(f'Handicap: {_fmt(handicap)}')
    return steps


def _fmt(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _fmt_list(values: Sequence[float]) -> str:
    return '[' + ', '.join(_fmt(v) for v in values) + ']'
