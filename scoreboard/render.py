from scoreboard.engine import ProblemCell, RankChange, StandingRow
from scoreboard.models import Submission


def problem_cell(cell: ProblemCell) -> str:
    if cell.frozen:
        if cell.wrong_attempts == 0:
            return f"0/{cell.frozen_count}"
        return f"-{cell.wrong_attempts}/{cell.frozen_count}"
    if cell.solved:
        return "+" if cell.wrong_attempts == 0 else f"+{cell.wrong_attempts}"
    return "." if cell.wrong_attempts == 0 else f"-{cell.wrong_attempts}"


def standing_row(row: StandingRow) -> str:
    return " ".join(
        [row.name, str(row.rank), str(row.solved_count), str(row.penalty), *(problem_cell(c) for c in row.cells)]
    )


def scoreboard(rows: list[StandingRow]) -> list[str]:
    return [standing_row(row) for row in rows]


def rank_change(change: RankChange) -> str:
    return f"{change.team} {change.displaced} {change.solved_count} {change.penalty}"


def submission(team: str, sub: Submission) -> str:
    return f"{team} {sub.problem} {sub.status} {sub.time}"
