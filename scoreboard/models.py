from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, StringConstraints

# Statuses seen in practice; any status other than Accepted counts as a wrong attempt
ACCEPTED = "Accepted"
WRONG_ANSWER = "Wrong_Answer"
RUNTIME_ERROR = "Runtime_Error"
TIME_LIMIT_EXCEED = "Time_Limit_Exceed"

ProblemLetter = Annotated[str, StringConstraints(pattern=r"^[A-Z]$")]


def problem_letters(count: int) -> list[str]:
    return [chr(ord("A") + i) for i in range(count)]


class Submission(BaseModel):
    model_config = ConfigDict(frozen=True)

    problem: ProblemLetter
    status: Annotated[str, StringConstraints(min_length=1)]
    time: Annotated[int, Field(ge=0)]
    seq: int = 0
    "Arrival order within the run, assigned when recorded."

    @property
    def accepted(self) -> bool:
        return self.status == ACCEPTED


class ProblemStatus(BaseModel):
    solved: bool = False
    solve_time: int = 0
    "Only meaningful once solved."
    wrong_attempts: int = 0
    "Failed attempts whose outcome is visible on the scoreboard."
    settled_submissions: list[Submission] = Field(default_factory=list)
    frozen_submissions: list[Submission] = Field(default_factory=list)

    @property
    def frozen_count(self) -> int:
        return len(self.frozen_submissions)

    def settle(self, sub: Submission) -> bool:
        """
        Apply a visible submission.
        Returns whether solved/wrong_attempts changed, ie. whether the team metrics are stale.
        """
        self.settled_submissions.append(sub)
        if self.solved:
            return False
        if sub.accepted:
            self.solved = True
            self.solve_time = sub.time
        else:
            self.wrong_attempts += 1
        return True

    def defer(self, sub: Submission):
        self.frozen_submissions.append(sub)

    def resolve_frozen(self) -> bool:
        """
        Replay the frozen submissions in order, moving them into the settled log.
        Returns True only if the problem became solved.
        """
        was_solved = self.solved
        frozen, self.frozen_submissions = self.frozen_submissions, []
        for sub in frozen:
            self.settle(sub)
        return self.solved and not was_solved


class TeamMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    solved_count: int
    penalty: int
    solve_times_desc: tuple[int, ...]


class Team(BaseModel):
    name: str
    problems: dict[str, ProblemStatus] = {}
    penalty_per_wrong: int = 20

    _metrics: TeamMetrics | None = PrivateAttr(default=None)

    def init_problems(self, count: int):
        self.problems = {letter: ProblemStatus() for letter in problem_letters(count)}
        self.invalidate()

    def invalidate(self):
        self._metrics = None

    @property
    def metrics(self) -> TeamMetrics:
        if self._metrics is None:
            solved = [ps for ps in self.problems.values() if ps.solved]
            self._metrics = TeamMetrics(
                solved_count=len(solved),
                penalty=sum(ps.solve_time + self.penalty_per_wrong * ps.wrong_attempts for ps in solved),
                solve_times_desc=tuple(sorted((ps.solve_time for ps in solved), reverse=True)),
            )
        return self._metrics

    @property
    def solved_count(self) -> int:
        return self.metrics.solved_count

    @property
    def penalty(self) -> int:
        return self.metrics.penalty

    @property
    def solve_times_desc(self) -> tuple[int, ...]:
        return self.metrics.solve_times_desc

    def frozen_letters(self) -> list[str]:
        return sorted(letter for letter, ps in self.problems.items() if ps.frozen_count > 0)
