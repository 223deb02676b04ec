"""Score and handicap history built from submitted results."""

import logging
from typing import Dict, List, Optional, Sequence

from .constants import ScoringType
from .handicap import calculate_handicap
from .models import HandicapHistoryEntry, MatchupResult, ScoreRecord, Team
from .schemas import HandicapSettings

logger = logging.getLogger('fairway.history')

# Which score sources feed the handicap for each scoring type
_SOURCES = {
    ScoringType.MATCH_PLAY: ('matchup',),
    ScoringType.STROKE_PLAY: ('weekly',),
    ScoringType.HYBRID: ('matchup', 'weekly'),
}


def get_team_previous_scores(
    records: Sequence[ScoreRecord],
    team_id: int,
    scoring_type: ScoringType | str,
    before_week: Optional[int] = None,
) -> List[float]:
    """
    Gross scores that count toward a team's handicap, oldest week first.

    Substitute rounds and DNPs are left out. In hybrid leagues a team can
    have both a matchup and a weekly score for the same week; the weekly
    score is used.

    Args:
        records: Submitted scores for the league
        team_id: Team to collect scores for
        scoring_type: League scoring type
        before_week: Only weeks strictly before this one (default: all)

    Returns:
        Chronological gross scores

    Raises:
        ValueError: Unknown scoring type
    """
    try:
        scoring_type = ScoringType(scoring_type)
    except ValueError:
        raise ValueError(f'Unknown scoring type: {scoring_type!r}') from None

    sources = _SOURCES[scoring_type]
    by_week: Dict[int, ScoreRecord] = {}

    for record in records:
        if (
            record.team_id != team_id
            or record.source not in sources
            or record.is_sub
            or record.is_dnp
        ):
            continue
        if before_week is not None and record.week_number >= before_week:
            continue

        existing = by_week.get(record.week_number)
        if existing is None or (existing.source == 'matchup' and record.source == 'weekly'):
            by_week[record.week_number] = record

    return [by_week[week].gross_score for week in sorted(by_week)]


def get_team_handicap_for_week(
    records: Sequence[ScoreRecord],
    team_id: int,
    week_number: int,
    settings: HandicapSettings,
    scoring_type: ScoringType | str = ScoringType.MATCH_PLAY,
) -> float:
    """Handicap a team plays off in ``week_number``, from the weeks before it."""
    scores = get_team_previous_scores(records, team_id, scoring_type, before_week=week_number)
    return calculate_handicap(scores, settings, week_number)


def build_handicap_history(
    teams: Sequence[Team],
    results: Sequence[MatchupResult],
) -> List[HandicapHistoryEntry]:
    """
    Week-by-week handicaps each team played off.

    Substitute weeks are shown but do not count as the team's current
    handicap, which is its most recent non-substitute handicap.
    """
    weeks = sorted({result.week_number for result in results})
    history = []

    for team in teams:
        weekly_handicaps = []
        current_handicap = None

        for week in weeks:
            result = next(
                (r for r in results if r.week_number == week and team.team_id in (r.team_a_id, r.team_b_id)),
                None,
            )
            if result is None:
                continue

            if result.team_a_id == team.team_id:
                handicap, is_sub = result.team_a_handicap, result.team_a_is_sub
            else:
                handicap, is_sub = result.team_b_handicap, result.team_b_is_sub

            weekly_handicaps.append({'week': week, 'handicap': handicap})
            if not is_sub:
                current_handicap = handicap

        history.append(HandicapHistoryEntry(
            team_id=team.team_id,
            team_name=team.name,
            weekly_handicaps=weekly_handicaps,
            current_handicap=current_handicap,
        ))

    logger.debug(f'Built handicap history for {len(history)} teams over {len(weeks)} weeks')
    return history
