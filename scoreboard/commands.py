import logging
import re
from collections.abc import Callable, Iterable, Iterator
from typing import ClassVar

from pydantic import BaseModel, ValidationError

from scoreboard import render
from scoreboard.engine import ContestEngine
from scoreboard.errors import ContestError
from scoreboard.models import Submission

log = logging.getLogger("scoreboard")

MATCH_ALL = "ALL"


class Command(BaseModel):
    action: ClassVar[str] = ""
    "Prefix of the error message when the engine rejects the command."

    def execute(self, engine: ContestEngine) -> list[str]:
        raise NotImplementedError


CommandParser = Callable[[re.Match[str]], Command]


class AddTeamCmd(Command):
    action: ClassVar[str] = "Add"
    name: str

    @staticmethod
    def parse(mat: re.Match[str]) -> Command:
        return AddTeamCmd(name=mat[1])

    def execute(self, engine: ContestEngine) -> list[str]:
        engine.add_team(self.name)
        return ["[Info]Add successfully."]


class StartCmd(Command):
    action: ClassVar[str] = "Start"
    duration: int
    problem_count: int

    @staticmethod
    def parse(mat: re.Match[str]) -> Command:
        return StartCmd(duration=int(mat[1]), problem_count=int(mat[2]))

    def execute(self, engine: ContestEngine) -> list[str]:
        engine.start(self.duration, self.problem_count)
        return ["[Info]Competition starts."]


class SubmitCmd(Command):
    action: ClassVar[str] = "Submit"
    team: str
    submission: Submission

    @staticmethod
    def parse(mat: re.Match[str]) -> Command:
        sub = Submission.model_validate({"problem": mat[1], "status": mat[3], "time": int(mat[4])})
        return SubmitCmd(team=mat[2], submission=sub)

    def execute(self, engine: ContestEngine) -> list[str]:
        engine.submit(self.team, self.submission)
        return []


class FlushCmd(Command):
    @staticmethod
    def parse(mat: re.Match[str]) -> Command:
        return FlushCmd()

    def execute(self, engine: ContestEngine) -> list[str]:
        engine.flush()
        return ["[Info]Flush scoreboard."]


class FreezeCmd(Command):
    action: ClassVar[str] = "Freeze"

    @staticmethod
    def parse(mat: re.Match[str]) -> Command:
        return FreezeCmd()

    def execute(self, engine: ContestEngine) -> list[str]:
        engine.freeze()
        return ["[Info]Freeze scoreboard."]


class ScrollCmd(Command):
    action: ClassVar[str] = "Scroll"

    @staticmethod
    def parse(mat: re.Match[str]) -> Command:
        return ScrollCmd()

    def execute(self, engine: ContestEngine) -> list[str]:
        result = engine.scroll()
        out = ["[Info]Scroll scoreboard."]
        out += render.scoreboard(result.before)
        out += [render.rank_change(change) for change in result.changes]
        out += render.scoreboard(result.after)
        return out


class QueryRankingCmd(Command):
    action: ClassVar[str] = "Query ranking"
    team: str

    @staticmethod
    def parse(mat: re.Match[str]) -> Command:
        return QueryRankingCmd(team=mat[1])

    def execute(self, engine: ContestEngine) -> list[str]:
        query = engine.query_ranking(self.team)
        out = ["[Info]Complete query ranking."]
        if query.provisional:
            out.append("[Warning]Scoreboard is frozen. The ranking may be inaccurate until it were scrolled.")
        out.append(f"{query.team} NOW AT RANKING {query.rank}")
        return out


class QuerySubmissionCmd(Command):
    action: ClassVar[str] = "Query submission"
    team: str
    problem: str | None
    status: str | None

    @staticmethod
    def parse(mat: re.Match[str]) -> Command:
        return QuerySubmissionCmd(
            team=mat[1],
            problem=None if mat[2] == MATCH_ALL else mat[2],
            status=None if mat[3] == MATCH_ALL else mat[3],
        )

    def execute(self, engine: ContestEngine) -> list[str]:
        sub = engine.query_submission(self.team, self.problem, self.status)
        out = ["[Info]Complete query submission."]
        if sub is None:
            out.append("Cannot find any submission.")
        else:
            out.append(render.submission(self.team, sub))
        return out


class EndCmd(Command):
    @staticmethod
    def parse(mat: re.Match[str]) -> Command:
        return EndCmd()

    def execute(self, engine: ContestEngine) -> list[str]:
        engine.end()
        return ["[Info]Competition ends."]


COMMANDS: dict[re.Pattern[str], CommandParser] = {
    re.compile(r"ADDTEAM (\S+)"): AddTeamCmd.parse,
    re.compile(r"START DURATION (\d+) PROBLEM (\d+)"): StartCmd.parse,
    re.compile(r"SUBMIT (\S+) BY (\S+) WITH (\S+) AT (\d+)"): SubmitCmd.parse,
    re.compile(r"FLUSH"): FlushCmd.parse,
    re.compile(r"FREEZE"): FreezeCmd.parse,
    re.compile(r"SCROLL"): ScrollCmd.parse,
    re.compile(r"QUERY_RANKING (\S+)"): QueryRankingCmd.parse,
    re.compile(r"QUERY_SUBMISSION (\S+) WHERE PROBLEM=(\S+) AND STATUS=(\S+)"): QuerySubmissionCmd.parse,
    re.compile(r"END"): EndCmd.parse,
}


def parse_line(raw_line: str) -> Command | None:
    """
    Parse a single protocol line.
    Returns None, after logging why, for blank, unrecognized or invalid lines.
    """
    line = " ".join(raw_line.split())
    if not line:
        return None
    for pat, parser in COMMANDS.items():
        mat = pat.fullmatch(line)
        if mat:
            try:
                return parser(mat)
            except ValidationError as e:
                log.warning("invalid command '%s': %s", line, e)
                return None
    log.warning("unrecognized command '%s', skipping", line)
    return None


def execute(engine: ContestEngine, cmd: Command) -> list[str]:
    try:
        return cmd.execute(engine)
    except ContestError as e:
        log.info("%s rejected (%s): %s", type(cmd).__name__, e.kind, e.reason)
        return [f"[Error]{cmd.action} failed: {e.reason}."]


def run_lines(lines: Iterable[str], engine: ContestEngine | None = None) -> Iterator[str]:
    "Process commands until END or the end of input, yielding output lines."
    if engine is None:
        engine = ContestEngine()
    for raw_line in lines:
        cmd = parse_line(raw_line)
        if cmd is None:
            continue
        yield from execute(engine, cmd)
        if isinstance(cmd, EndCmd):
            break
