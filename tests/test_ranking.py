from itertools import permutations

from scoreboard.models import ProblemStatus, Team, problem_letters
from scoreboard.ranking import better, compare_teams, sort_key


def make_team(name: str, solves: list[tuple[int, int]], unsolved_wrong: int = 0) -> Team:
    """Build a team whose i-th problem is solved at solves[i] = (time, wrong attempts)."""
    team = Team(name=name)
    team.init_problems(len(solves) + 1)
    for letter, (time, wrong) in zip(problem_letters(len(solves)), solves):
        team.problems[letter] = ProblemStatus(solved=True, solve_time=time, wrong_attempts=wrong)
    team.problems[problem_letters(len(solves) + 1)[-1]].wrong_attempts = unsolved_wrong
    team.invalidate()
    return team


def test_fewer_wrong_attempts_ranks_first():
    # A: solved at 10 after one wrong attempt, B: solved at 5 cleanly
    a = make_team("A", [(10, 1)])
    b = make_team("B", [(5, 0)])
    assert a.penalty == 30
    assert b.penalty == 5
    assert better(b, a)
    assert not better(a, b)


def test_more_solved_beats_lower_penalty():
    many = make_team("zeta", [(200, 3), (250, 0)])
    few = make_team("alpha", [(1, 0)])
    assert better(many, few)


def test_penalty_only_counts_solved_problems():
    team = make_team("t", [(30, 2), (70, 0)], unsolved_wrong=5)
    assert team.solved_count == 2
    assert team.penalty == 30 + 20 * 2 + 70
    assert team.solve_times_desc == (70, 30)


def test_solve_times_break_penalty_ties():
    early_late = make_team("a", [(10, 0), (90, 0)])
    even = make_team("b", [(40, 1), (40, 0)])
    assert early_late.penalty == even.penalty == 100
    # Latest solve is compared first: 40 < 90
    assert better(even, early_late)


def test_name_is_the_last_tie_break():
    b = make_team("b", [(40, 1), (40, 0)])
    c = make_team("c", [(40, 0), (40, 1)])
    assert compare_teams(b, c) < 0
    assert compare_teams(c, b) > 0


def test_comparator_is_a_strict_total_order():
    teams = [
        make_team("a", [(10, 0), (90, 0)]),
        make_team("b", [(40, 1), (40, 0)]),
        make_team("c", [(40, 0), (40, 1)]),
    ]
    for x in teams:
        assert compare_teams(x, x) == 0
        assert not better(x, x)
    for x, y in permutations(teams, 2):
        # Antisymmetry
        assert better(x, y) != better(y, x)
    for x, y, z in permutations(teams, 3):
        if better(x, y) and better(y, z):
            assert better(x, z)

    assert [t.name for t in sorted(teams, key=sort_key)] == ["b", "c", "a"]


def test_metrics_are_cached_until_invalidated():
    team = make_team("t", [(10, 0)])
    assert team.solved_count == 1
    team.problems["B"].solved = True
    team.problems["B"].solve_time = 20
    assert team.solved_count == 1
    team.invalidate()
    assert team.solved_count == 2
    assert team.penalty == 30
