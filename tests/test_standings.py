"""Tests for standings tiebreakers and leaderboard movement."""

from fairway.models import MatchupResult, Team
from fairway.standings import calculate_standings_at_week, leaderboard_with_movement, rank_teams


def game(week, team_a, team_b, points_a, points_b, net_a=40, net_b=40, hcp_a=0, hcp_b=0, a_is_sub=False):
    return MatchupResult(
        week_number=week,
        team_a_id=team_a,
        team_b_id=team_b,
        team_a_points=points_a,
        team_b_points=points_b,
        team_a_net=net_a,
        team_b_net=net_b,
        team_a_handicap=hcp_a,
        team_b_handicap=hcp_b,
        team_a_is_sub=a_is_sub,
    )


def order(rows):
    return [row.team_id for row in rows]


class TestRankTeams:
    """Tests for points, record and tiebreakers."""

    def test_record(self, teams):
        """Test points, wins, losses and ties are tallied for both sides."""
        rows = rank_teams(teams, [game(1, 1, 2, 15, 5), game(1, 3, 4, 10, 10)])
        by_team = {row.team_id: row for row in rows}
        assert (by_team[1].points, by_team[1].wins, by_team[1].losses) == (15, 1, 0)
        assert (by_team[2].points, by_team[2].losses) == (5, 1)
        assert by_team[3].ties == 1 and by_team[4].ties == 1
        assert [row.rank for row in rows] == [1, 2, 3, 4]

    def test_head_to_head(self, teams):
        """Test equal points and wins fall to head to head."""
        results = [
            game(1, 3, 1, 15, 5),
            game(1, 2, 4, 10, 0),
            game(2, 1, 2, 15, 5),
            game(2, 3, 4, 5, 15),
        ]
        assert order(rank_teams(teams, results)) == [3, 1, 2, 4]

    def test_net_differential(self, teams):
        """Test net differential decides when head to head is level."""
        results = [
            game(1, 1, 3, 10, 10, net_a=38, net_b=38),
            game(1, 2, 4, 10, 10, net_a=36, net_b=40),
        ]
        rows = rank_teams(teams, results)
        assert order(rows) == [2, 1, 3, 4]
        assert rows[0].net_differential == 4
        assert rows[-1].net_differential == -4

    def test_handicap_is_floor_of_non_sub_mean(self, teams):
        """Test handicaps average over non-sub weeks, rounded down."""
        results = [
            game(1, 1, 2, 10, 10, hcp_a=4),
            game(2, 1, 2, 10, 10, hcp_a=5),
            game(3, 1, 2, 10, 10, hcp_a=12, a_is_sub=True),
        ]
        rows = {row.team_id: row for row in rank_teams(teams, results)}
        assert rows[1].handicap == 4
        assert rows[3].handicap == 0

    def test_bonus_points(self, teams):
        """Test bonus points count toward the total."""
        rows = rank_teams(teams, [game(1, 1, 2, 12, 8)], bonus_points={4: 20})
        assert rows[0].team_id == 4
        assert rows[0].points == 20

    def test_unknown_teams_ignored(self, teams):
        """Test results for teams not in the list are skipped."""
        rows = rank_teams(teams[:2], [game(1, 1, 9, 16, 4)])
        assert order(rows) == [1, 2]

    def test_standings_at_week(self, teams):
        """Test later weeks are ignored."""
        results = [game(1, 1, 2, 16, 4), game(2, 2, 1, 16, 4), game(3, 2, 1, 16, 4)]
        assert order(calculate_standings_at_week(teams, results, 1))[0] == 1
        assert order(calculate_standings_at_week(teams, results, 3))[0] == 2


class TestLeaderboard:
    """Tests for movement since the previous week."""

    def test_no_results(self, teams):
        """Test an empty season ranks teams in list order."""
        rows = leaderboard_with_movement(teams, [])
        assert order(rows) == [1, 2, 3, 4]
        assert all(row.points == 0 and row.previous_rank is None for row in rows)

    def test_single_week(self, teams):
        """Test one week played shows no movement."""
        rows = leaderboard_with_movement(teams, [game(1, 1, 2, 16, 4), game(1, 3, 4, 12, 8)])
        assert order(rows) == [1, 3, 4, 2]
        assert all(row.rank_change is None and row.previous_rank is None for row in rows)

    def test_rank_and_handicap_change(self, teams):
        """Test movement between the last two weeks played."""
        results = [
            game(1, 1, 2, 16, 4, hcp_a=4),
            game(1, 3, 4, 12, 8),
            game(2, 2, 3, 16, 4),
            game(2, 4, 1, 16, 4, hcp_b=6),
        ]
        rows = leaderboard_with_movement(teams, results)
        assert order(rows) == [4, 1, 2, 3]

        by_team = {row.team_id: row for row in rows}
        assert by_team[4].previous_rank == 3
        assert by_team[4].rank_change == 2
        assert by_team[1].rank_change == -1
        assert by_team[2].rank_change == 1
        assert by_team[3].rank_change == -2
        assert by_team[1].previous_handicap == 4
        assert by_team[1].handicap == 5
        assert by_team[1].handicap_change == 1

    def test_no_movement_for_teams_absent_last_week(self, teams):
        """Test teams that did not play the previous week show no change."""
        results = [
            game(1, 1, 2, 16, 4),
            game(2, 1, 2, 12, 8),
            game(2, 3, 4, 12, 8),
        ]
        rows = {row.team_id: row for row in leaderboard_with_movement(teams, results)}
        assert rows[1].rank_change == 0
        assert rows[3].previous_rank is not None
        assert rows[3].rank_change is None
        assert rows[3].handicap_change is None

    def test_team_added_mid_season(self):
        """Test a team only in the current list still gets a row."""
        teams = [Team(1, 'A'), Team(2, 'B'), Team(5, 'New')]
        rows = leaderboard_with_movement(teams, [game(1, 1, 2, 16, 4), game(2, 5, 1, 12, 8)])
        assert order(rows) == [1, 5, 2]
        assert next(row for row in rows if row.team_id == 5).rank_change is None
