import logging
import os
from typing import TypeVar

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "SCOREBOARD_"


class ConfigVars(BaseModel):
    penalty_per_wrong: int = Field(default=20, ge=0)
    max_problems: int = Field(default=26, ge=1, le=26)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, level: str) -> str:
        level = level.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {level}")
        return level


T = TypeVar("T", bound=BaseModel)


def load_config(model: type[T], environ: dict[str, str] | None = None) -> T:
    if environ is None:
        load_dotenv(dotenv_path="./config/.env", override=True)
        environ = dict(os.environ)

    mapped_env_vars = {
        key[len(ENV_PREFIX) :].lower(): val
        for key, val in environ.items()
        if key.startswith(ENV_PREFIX)
    }

    return model.model_validate(mapped_env_vars)


config: ConfigVars = load_config(ConfigVars)
