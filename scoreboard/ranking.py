from functools import cmp_to_key

from scoreboard.models import Team


def compare_teams(a: Team, b: Team) -> int:
    """
    Negative if `a` ranks above `b`, positive if below, zero only for the same name.

    Criteria, in order: more problems solved, less penalty, smaller solve times (compared from the latest
    solve backwards), and finally the team name.
    """
    ma, mb = a.metrics, b.metrics
    if ma.solved_count != mb.solved_count:
        return -1 if ma.solved_count > mb.solved_count else 1
    if ma.penalty != mb.penalty:
        return -1 if ma.penalty < mb.penalty else 1
    # Only the overlapping prefix is compared
    for ta, tb in zip(ma.solve_times_desc, mb.solve_times_desc):
        if ta != tb:
            return -1 if ta < tb else 1
    if a.name != b.name:
        return -1 if a.name < b.name else 1
    return 0


def better(a: Team, b: Team) -> bool:
    return compare_teams(a, b) < 0


sort_key = cmp_to_key(compare_teams)
