import logging

from pydantic import BaseModel

from scoreboard.errors import DuplicateEntity, NotFound, PreconditionViolation
from scoreboard.models import Submission, Team, problem_letters
from scoreboard.ranking import better, sort_key
from scoreboard.settings import config
from scoreboard.standings import Standings

log = logging.getLogger("engine")


class ContestState(BaseModel):
    started: bool = False
    frozen: bool = False
    ended: bool = False
    problem_count: int = 0
    duration: int = 0


class ProblemCell(BaseModel):
    frozen: bool
    "Unsolved with outcomes withheld by the freeze."
    solved: bool
    wrong_attempts: int
    frozen_count: int


class StandingRow(BaseModel):
    name: str
    rank: int
    solved_count: int
    penalty: int
    cells: list[ProblemCell]


class RankChange(BaseModel):
    team: str
    displaced: str
    "The team that now sits directly below `team`."
    solved_count: int
    penalty: int


class ScrollResult(BaseModel):
    before: list[StandingRow]
    changes: list[RankChange]
    after: list[StandingRow]


class RankQuery(BaseModel):
    team: str
    rank: int
    provisional: bool
    "Set while frozen, since frozen outcomes are not reflected yet."


class ContestEngine:
    """
    Owns every team record, the scoreboard and the contest state for a single run.

    Every operation validates before mutating anything, so an operation that raises a `ContestError` leaves
    the contest exactly as it found it.
    """

    def __init__(self, penalty_per_wrong: int | None = None, max_problems: int | None = None):
        self.penalty_per_wrong = config.penalty_per_wrong if penalty_per_wrong is None else penalty_per_wrong
        self.max_problems = config.max_problems if max_problems is None else max_problems
        self.state = ContestState()
        self.teams: dict[str, Team] = {}
        self.standings = Standings()
        self._seq = 0

    def team(self, name: str) -> Team:
        team = self.teams.get(name, None)
        if team is None:
            raise NotFound("cannot find the team")
        return team

    def _better(self, a: str, b: str) -> bool:
        return better(self.teams[a], self.teams[b])

    def add_team(self, name: str) -> Team:
        if self.state.started:
            raise PreconditionViolation("competition has started")
        if name in self.teams:
            raise DuplicateEntity("duplicated team name")
        team = Team(name=name, penalty_per_wrong=self.penalty_per_wrong)
        self.teams[name] = team
        # Before the first flush teams are listed by name
        self.standings.rebuild(sorted(self.teams))
        log.info("registered team %s", name)
        return team

    def start(self, duration: int, problem_count: int):
        if self.state.started:
            raise PreconditionViolation("competition has started")
        if not 1 <= problem_count <= self.max_problems:
            raise PreconditionViolation(f"problem count must be between 1 and {self.max_problems}")
        if duration < 0:
            raise PreconditionViolation("duration must be non-negative")
        for team in self.teams.values():
            team.init_problems(problem_count)
        self.state.started = True
        self.state.duration = duration
        self.state.problem_count = problem_count
        log.info("contest started with %s teams, %s problems, duration %s", len(self.teams), problem_count, duration)

    def submit(self, team_name: str, submission: Submission) -> Submission | None:
        if not self.state.started:
            # No problem statuses exist yet, and starting begins from a clean slate
            log.debug("ignoring submission by %s before the contest started", team_name)
            return None
        team = self.team(team_name)
        ps = team.problems.get(submission.problem, None)
        if ps is None:
            raise NotFound("cannot find the problem")

        self._seq += 1
        submission = submission.model_copy(update={"seq": self._seq})
        if submission.time > self.state.duration:
            log.debug("submission by %s at %s is past the contest duration", team_name, submission.time)

        if ps.solved or self.state.ended:
            # Kept for queries only, no ranking effect
            ps.settled_submissions.append(submission)
        elif self.state.frozen:
            ps.defer(submission)
        elif ps.settle(submission):
            team.invalidate()
        return submission

    def flush(self):
        self.standings.rebuild(team.name for team in sorted(self.teams.values(), key=sort_key))
        log.info("scoreboard flushed")

    def freeze(self):
        if self.state.frozen:
            raise PreconditionViolation("scoreboard has been frozen")
        self.state.frozen = True
        log.info("scoreboard frozen")

    def _next_frozen(self) -> tuple[Team, str] | None:
        for name in self.standings.scan_from_bottom():
            team = self.teams[name]
            letters = team.frozen_letters()
            if letters:
                return team, letters[0]
        return None

    def scroll(self) -> ScrollResult:
        if not self.state.frozen:
            raise PreconditionViolation("scoreboard has not been frozen")
        log.info("scrolling scoreboard")

        self.flush()
        before = self.standings_rows()

        changes: list[RankChange] = []
        while (target := self._next_frozen()) is not None:
            team, letter = target
            became_solved = team.problems[letter].resolve_frozen()
            team.invalidate()
            if not became_solved:
                log.debug("resolved %s of %s without a solve", letter, team.name)
                continue

            old = self.standings.position(team.name)
            new = self.standings.promote(team.name, self._better)
            log.debug("resolved %s of %s, moved from %s to %s", letter, team.name, old + 1, new + 1)
            if new < old:
                changes.append(
                    RankChange(
                        team=team.name,
                        displaced=self.standings[new + 1],
                        solved_count=team.solved_count,
                        penalty=team.penalty,
                    )
                )

        self.state.frozen = False
        log.info("scroll finished with %s rank changes", len(changes))
        return ScrollResult(before=before, changes=changes, after=self.standings_rows())

    def query_ranking(self, team_name: str) -> RankQuery:
        self.team(team_name)
        return RankQuery(team=team_name, rank=self.standings.rank(team_name), provisional=self.state.frozen)

    def query_submission(
        self, team_name: str, problem: str | None = None, status: str | None = None
    ) -> Submission | None:
        """
        Latest settled submission of a team matching both filters, `None` meaning "any".
        Frozen submissions are not visible until scrolled.
        Ties on time go to the one recorded last.
        """
        team = self.team(team_name)
        found: Submission | None = None
        for ps in team.problems.values():
            for sub in ps.settled_submissions:
                if problem is not None and sub.problem != problem:
                    continue
                if status is not None and sub.status != status:
                    continue
                if found is None or (sub.time, sub.seq) > (found.time, found.seq):
                    found = sub
        return found

    def end(self):
        self.state.ended = True
        log.info("contest ended")

    def standings_rows(self) -> list[StandingRow]:
        letters = problem_letters(self.state.problem_count)
        rows: list[StandingRow] = []
        for pos, name in enumerate(self.standings):
            team = self.teams[name]
            cells: list[ProblemCell] = []
            for letter in letters:
                ps = team.problems[letter]
                cells.append(
                    ProblemCell(
                        frozen=self.state.frozen and not ps.solved and ps.frozen_count > 0,
                        solved=ps.solved,
                        wrong_attempts=ps.wrong_attempts,
                        frozen_count=ps.frozen_count,
                    )
                )
            rows.append(
                StandingRow(
                    name=name,
                    rank=pos + 1,
                    solved_count=team.solved_count,
                    penalty=team.penalty,
                    cells=cells,
                )
            )
        return rows
