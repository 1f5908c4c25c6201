from collections.abc import Callable

import pytest

from scoreboard.engine import ContestEngine
from scoreboard.models import Submission


def submit(engine: ContestEngine, team: str, problem: str, status: str, time: int) -> Submission:
    sub = Submission.model_validate({"problem": problem, "status": status, "time": time})
    return engine.submit(team, sub)


@pytest.fixture
def make_contest() -> Callable[..., ContestEngine]:
    def make(teams: list[str], problems: int = 3, duration: int = 300) -> ContestEngine:
        engine = ContestEngine(penalty_per_wrong=20, max_problems=26)
        for name in teams:
            engine.add_team(name)
        engine.start(duration, problems)
        return engine

    return make
