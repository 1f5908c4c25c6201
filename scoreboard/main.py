import logging
import sys
from typing import TextIO

from scoreboard import commands
from scoreboard.engine import ContestEngine
from scoreboard.settings import config


def setup_logging():
    # Protocol output goes to stdout, so logs must stay on stderr
    logging.basicConfig(
        stream=sys.stderr,
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run(stdin: TextIO, stdout: TextIO):
    engine = ContestEngine()
    for line in commands.run_lines(stdin, engine):
        stdout.write(line)
        stdout.write("\n")
    stdout.flush()


def main():
    setup_logging()
    run(sys.stdin, sys.stdout)


if __name__ == "__main__":
    main()
