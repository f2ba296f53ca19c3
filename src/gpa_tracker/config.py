"""Runtime configuration read from the environment.

Every setting has a default so the tracker runs with no environment at all:

    GPA_TRACKER_DB         path of the SQLite file (~/.gpa_tracker/tracker.db)
    GPA_TRACKER_USER       profile id that owns the records ("local")
    GPA_TRACKER_LOG_LEVEL  logging level name ("WARNING")
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from rich.logging import RichHandler

APP_DIR = Path.home() / ".gpa_tracker"
DEFAULT_DB_PATH = str(APP_DIR / "tracker.db")
DEFAULT_USER_ID = "local"
DEFAULT_LOG_LEVEL = "WARNING"

ENV_DB_PATH = "GPA_TRACKER_DB"
ENV_USER_ID = "GPA_TRACKER_USER"
ENV_LOG_LEVEL = "GPA_TRACKER_LOG_LEVEL"

LOGGER_NAME = "gpa_tracker"


@dataclass(frozen=True)
class Config:
    db_path: str = DEFAULT_DB_PATH
    user_id: str = DEFAULT_USER_ID
    log_level: str = DEFAULT_LOG_LEVEL


def load_config(environ=None) -> Config:
    env = os.environ if environ is None else environ
    return Config(
        db_path=env.get(ENV_DB_PATH) or DEFAULT_DB_PATH,
        user_id=(env.get(ENV_USER_ID) or DEFAULT_USER_ID).strip(),
        log_level=(env.get(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper(),
    )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """Route the package logger through rich. Safe to call more than once."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(show_path=False, markup=False))
    logger.propagate = False
    return logger
