"""Round-robin schedule generation and mid-season schedule changes.

Generation uses the circle method: the first team stays fixed and the rest
rotate one seat per week. Odd fields get a bye placeholder, so each team
sits out exactly once per cycle.

Generators only propose rounds. Functions that change an existing schedule
take the persisted entries and return a new list; completed entries and
weeks before the current week are never touched.
"""

import logging
from collections import Counter
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from .constants import AddTeamStrategy, CourseSide, MatchupStatus, PlayMode, RemoveTeamAction
from .models import (
    ScheduledMatch,
    ScheduledMatchup,
    ScheduleResult,
    ScheduleRound,
    ScheduleValidation,
)

logger = logging.getLogger('fairway.schedule')

_REPLACEABLE_STATUSES = (MatchupStatus.SCHEDULED, MatchupStatus.CANCELLED)


class ScheduleError(ValueError):
    """A schedule change that cannot be carried out."""


def _pair(team_a: Optional[int], team_b: Optional[int]) -> ScheduledMatch:
    if team_a is None:
        return ScheduledMatch(team_b, None)
    return ScheduledMatch(team_a, team_b)


def generate_single_round_robin(team_ids: Sequence[int], start_week: int = 1) -> List[ScheduleRound]:
    """
    Generate a single round robin.

    Even N gives N-1 weeks; odd N gives N weeks with one bye per week.

    Args:
        team_ids: Teams to schedule
        start_week: Week number of the first round (default: 1)

    Returns:
        List of rounds, or [] for fewer than 2 teams
    """
    if len(team_ids) < 2:
        return []

    participants: List[Optional[int]] = list(team_ids)
    if len(participants) % 2:
        participants.append(None)
    n = len(participants)

    fixed = participants[0]
    rotating = participants[1:]
    rounds = []

    for round_index in range(n - 1):
        matches = [_pair(fixed, rotating[-1])]
        for i in range((n - 2) // 2):
            matches.append(_pair(rotating[i], rotating[-2 - i]))

        rounds.append(ScheduleRound(week_number=start_week + round_index, matches=matches))
        rotating.insert(0, rotating.pop())

    return rounds


def generate_double_round_robin(team_ids: Sequence[int], start_week: int = 1) -> List[ScheduleRound]:
    """
    Generate a double round robin: every pair meets twice.

    The second cycle repeats the first with home and away swapped, rotated
    by half a cycle so a pairing is never repeated in back-to-back weeks
    across the boundary.
    """
    first_half = generate_single_round_robin(team_ids, start_week)
    if not first_half:
        return []

    second_start = start_week + len(first_half)
    swapped = [
        [m if m.is_bye else ScheduledMatch(m.team_b_id, m.team_a_id) for m in round_.matches]
        for round_ in first_half
    ]

    shift = len(swapped) // 2
    second_half = [
        ScheduleRound(
            week_number=second_start + i,
            matches=swapped[(i + shift) % len(swapped)],
        )
        for i in range(len(swapped))
    ]

    return first_half + second_half


def generate_schedule_for_weeks(
    team_ids: Sequence[int],
    total_weeks: int,
    double_round_robin: bool = False,
    start_week: int = 1,
) -> ScheduleResult:
    """
    Generate a schedule that fits in ``total_weeks``.

    If the full round robin needs more weeks than are available it is cut
    short and ``truncated`` is set; ``full_rounds_needed`` says how many
    weeks the full schedule would take.
    """
    if len(team_ids) < 2 or total_weeks < 1:
        return ScheduleResult(rounds=[], truncated=False, full_rounds_needed=0)

    if double_round_robin:
        full_schedule = generate_double_round_robin(team_ids, start_week)
    else:
        full_schedule = generate_single_round_robin(team_ids, start_week)

    if len(full_schedule) <= total_weeks:
        return ScheduleResult(rounds=full_schedule, truncated=False, full_rounds_needed=len(full_schedule))

    logger.info(f'Schedule truncated to {total_weeks} of {len(full_schedule)} weeks')
    return ScheduleResult(
        rounds=full_schedule[:total_weeks],
        truncated=True,
        full_rounds_needed=len(full_schedule),
    )


def validate_schedule(rounds: Sequence[ScheduleRound], team_ids: Sequence[int]) -> ScheduleValidation:
    """
    Check a schedule for correctness and balance.

    Errors reported:
        - A match references a team not in ``team_ids``
        - A team appears twice in one week
        - A team has neither a match nor a bye in a week
        - Byes differ by more than one between teams (odd fields only)
    """
    known = set(team_ids)
    errors: List[str] = []
    matches_per_team: Dict[int, int] = {team_id: 0 for team_id in team_ids}
    bye_distribution: Dict[int, int] = {team_id: 0 for team_id in team_ids}

    for round_ in rounds:
        week = round_.week_number
        seen = set()

        for match in round_.matches:
            if match.team_a_id not in known:
                errors.append(f'Week {week}: Unknown team {match.team_a_id}')
                continue
            if match.team_a_id in seen:
                errors.append(f'Week {week}: Team {match.team_a_id} appears twice')
            seen.add(match.team_a_id)

            if match.is_bye:
                bye_distribution[match.team_a_id] += 1
                continue

            if match.team_b_id not in known:
                errors.append(f'Week {week}: Unknown team {match.team_b_id}')
                continue
            if match.team_b_id in seen:
                errors.append(f'Week {week}: Team {match.team_b_id} appears twice')
            seen.add(match.team_b_id)

            matches_per_team[match.team_a_id] += 1
            matches_per_team[match.team_b_id] += 1

        for team_id in team_ids:
            if team_id not in seen:
                errors.append(f'Week {week}: Team {team_id} has no match or bye')

    if len(team_ids) % 2 and bye_distribution:
        most = max(bye_distribution.values())
        fewest = min(bye_distribution.values())
        if most - fewest > 1:
            errors.append(f'Unbalanced byes: range is {fewest}-{most} (should differ by at most 1)')

    return ScheduleValidation(
        valid=not errors,
        errors=errors,
        bye_distribution=bye_distribution,
        matches_per_team=matches_per_team,
    )


def calculate_bye_distribution(rounds: Sequence[ScheduleRound]) -> Dict[int, int]:
    """Count byes per team. Teams without a bye are not listed."""
    return dict(Counter(
        match.team_a_id
        for round_ in rounds
        for match in round_.matches
        if match.is_bye
    ))


def get_course_side_for_week(
    week_number: int,
    play_mode: PlayMode | str,
    first_week_side: CourseSide | str = CourseSide.FRONT,
) -> Optional[CourseSide]:
    """
    Which nine is played in a given week.

    Returns None for full 18-hole leagues. Alternating leagues play
    ``first_week_side`` in odd weeks and the other side in even weeks.
    """
    play_mode = PlayMode(play_mode)
    first_week_side = CourseSide(first_week_side)

    if play_mode == PlayMode.NINE_HOLE_FRONT:
        return CourseSide.FRONT
    if play_mode == PlayMode.NINE_HOLE_BACK:
        return CourseSide.BACK
    if play_mode == PlayMode.NINE_HOLE_ALTERNATING:
        other_side = CourseSide.BACK if first_week_side == CourseSide.FRONT else CourseSide.FRONT
        return first_week_side if week_number % 2 == 1 else other_side
    return None


def is_hole_in_play(hole_number: int, course_side: Optional[CourseSide | str]) -> bool:
    """Front is holes 1-9, back is 10-18, no side means every hole."""
    if not course_side:
        return True
    if CourseSide(course_side) == CourseSide.FRONT:
        return 1 <= hole_number <= 9
    return 10 <= hole_number <= 18


def expected_hole_count(course_holes: int, course_side: Optional[CourseSide | str]) -> int:
    """Holes a complete scorecard needs for the week."""
    return 9 if course_side else course_holes


def rounds_to_matchups(
    rounds: Sequence[ScheduleRound],
    play_mode: PlayMode | str = PlayMode.FULL_18,
    first_week_side: CourseSide | str = CourseSide.FRONT,
) -> List[ScheduledMatchup]:
    """Turn generated rounds into scheduled entries, tagged with the week's course side."""
    matchups = []
    for round_ in rounds:
        course_side = get_course_side_for_week(round_.week_number, play_mode, first_week_side)
        for match in round_.matches:
            matchups.append(ScheduledMatchup(
                week_number=round_.week_number,
                team_a_id=match.team_a_id,
                team_b_id=match.team_b_id,
                course_side=course_side.value if course_side else None,
            ))
    return matchups


def _is_replaceable(entry: ScheduledMatchup, current_week: int) -> bool:
    return entry.week_number >= current_week and entry.status in _REPLACEABLE_STATUSES


def _is_open_bye(entry: ScheduledMatchup, current_week: int) -> bool:
    return entry.week_number >= current_week and entry.is_bye and entry.status == MatchupStatus.SCHEDULED


def _regenerate_future(
    matchups: Sequence[ScheduledMatchup],
    team_ids: Sequence[int],
    current_week: int,
    max_week: int,
    double_round_robin: bool,
    play_mode: PlayMode | str,
    first_week_side: CourseSide | str,
) -> List[ScheduledMatchup]:
    remaining_weeks = max_week - current_week + 1
    if len(team_ids) >= 2 and remaining_weeks > 0:
        rounds = generate_schedule_for_weeks(team_ids, remaining_weeks, double_round_robin, current_week).rounds
    else:
        logger.warning(
            f'Cannot regenerate schedule for {len(team_ids)} team(s) over {remaining_weeks} week(s); '
            'future weeks cleared'
        )
        rounds = []

    kept = [entry for entry in matchups if not _is_replaceable(entry, current_week)]
    return kept + rounds_to_matchups(rounds, play_mode, first_week_side)


def add_team_to_schedule(
    matchups: Sequence[ScheduledMatchup],
    team_id: int,
    all_team_ids: Sequence[int],
    strategy: AddTeamStrategy | str,
    current_week: int,
    double_round_robin: bool = False,
    play_mode: PlayMode | str = PlayMode.FULL_18,
    first_week_side: CourseSide | str = CourseSide.FRONT,
) -> List[ScheduledMatchup]:
    """
    Add a team to a season already in progress.

    Strategies:
        - fill_byes: the new team takes every future scheduled bye slot.
          Only possible while the schedule has byes.
        - start_from_here / pro_rate / catch_up: regenerate weeks
          ``current_week`` through the last scheduled week for the full
          roster. Scheduled and cancelled entries in those weeks are
          replaced; completed entries and earlier weeks are kept.
          For pro_rate the caller should also turn on
          ``ScoringConfig.pro_rate``.

    Args:
        matchups: Current schedule entries
        team_id: The team joining
        all_team_ids: Full roster, including the new team
        strategy: An AddTeamStrategy value
        current_week: First week that may change
        double_round_robin: Regenerate as a double round robin

    Returns:
        The new schedule

    Raises:
        ScheduleError: No bye slots to fill, or no weeks left to regenerate
        ValueError: Unknown strategy
    """
    strategy = AddTeamStrategy(strategy)

    if strategy == AddTeamStrategy.FILL_BYES:
        open_byes = sum(1 for entry in matchups if _is_open_bye(entry, current_week))
        if not open_byes:
            raise ScheduleError('No bye slots available to fill.')

        logger.info(f'Team {team_id} fills {open_byes} bye slot(s)')
        return [
            replace(entry, team_b_id=team_id) if _is_open_bye(entry, current_week) else entry
            for entry in matchups
        ]

    team_ids = list(all_team_ids)
    if team_id not in team_ids:
        team_ids.append(team_id)

    if matchups:
        max_week = max(entry.week_number for entry in matchups)
    else:
        max_week = current_week + len(team_ids) - 1

    if max_week - current_week + 1 <= 0:
        raise ScheduleError('No remaining weeks in the schedule to modify.')

    logger.info(f'Regenerating weeks {current_week}-{max_week} for {len(team_ids)} teams ({strategy.value})')
    return _regenerate_future(
        matchups, team_ids, current_week, max_week, double_round_robin, play_mode, first_week_side,
    )


def remove_team_from_schedule(
    matchups: Sequence[ScheduledMatchup],
    team_id: int,
    remaining_team_ids: Sequence[int],
    action: RemoveTeamAction | str,
    current_week: int,
    double_round_robin: bool = False,
    play_mode: PlayMode | str = PlayMode.FULL_18,
    first_week_side: CourseSide | str = CourseSide.FRONT,
) -> List[ScheduledMatchup]:
    """
    Remove a team from a season already in progress.

    Actions:
        - bye_opponents: each future scheduled match of the removed team
          becomes a bye for its opponent; its own future byes are cancelled.
        - regenerate: rebuild weeks ``current_week`` onward for the
          remaining roster.

    Raises:
        ScheduleError: Unknown action
    """
    try:
        action = RemoveTeamAction(action)
    except ValueError:
        raise ScheduleError(f'Invalid action: {action}. Must be "bye_opponents" or "regenerate".') from None

    if action == RemoveTeamAction.REGENERATE:
        team_ids = [tid for tid in remaining_team_ids if tid != team_id]
        max_week = max((entry.week_number for entry in matchups), default=current_week)
        logger.info(f'Regenerating weeks {current_week}-{max_week} without team {team_id}')
        return _regenerate_future(
            matchups, team_ids, current_week, max_week, double_round_robin, play_mode, first_week_side,
        )

    updated = []
    for entry in matchups:
        if (
            entry.week_number < current_week
            or entry.status != MatchupStatus.SCHEDULED
            or not entry.involves(team_id)
        ):
            updated.append(entry)
        elif entry.team_a_id == team_id and entry.team_b_id is not None:
            # Opponent moves to team A with a bye
            updated.append(replace(entry, team_a_id=entry.team_b_id, team_b_id=None))
        elif entry.team_b_id == team_id:
            updated.append(replace(entry, team_b_id=None))
        else:
            updated.append(replace(entry, status=MatchupStatus.CANCELLED))
    return updated
