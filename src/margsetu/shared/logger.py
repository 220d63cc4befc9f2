import logging
import re
import sys
from datetime import datetime
from pathlib import Path

from colorama import Fore, Style, init

from margsetu.shared.config import Config, load_config

config: Config = load_config()

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")

CONSOLE_FORMAT = (
    f"{Style.BRIGHT}%(levelname)-8s "
    f"{Style.DIM}%(name)-26s %(funcName)-22s "
    f"{Style.RESET_ALL}%(message)s"
)
FILE_FORMAT = _ANSI_ESCAPE.sub("", "%(asctime)s " + CONSOLE_FORMAT)

LEVEL_COLORS = {
    logging.DEBUG: Fore.CYAN,
    logging.INFO: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.MAGENTA,
}


class ColorFormatter(logging.Formatter):
    def format(self, record):
        color = LEVEL_COLORS.get(record.levelno, Fore.WHITE)
        return f"{color}{super().format(record)}{Style.RESET_ALL}"


def log_file_path(log_dir: str | Path) -> Path:
    """One file per day, shared by every module."""
    return Path(log_dir) / f"margsetu-{datetime.now():%Y-%m-%d}.log"


class Logger:
    """Module logger writing to the daily log file and a coloured console.

    Key material must never be passed to these loggers; ciphertext only as a
    short prefix at DEBUG.
    """

    def __init__(self, name, log_dir=config.paths.logs, level=config.logging.level):
        init()

        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

        # Repeated Logger(__name__) calls must not stack handlers
        if self.logger.handlers:
            return

        Path(log_dir).mkdir(parents=True, exist_ok=True)
        self.logger.addHandler(self.__file_handler(log_dir))
        self.logger.addHandler(self.__console_handler())

    @staticmethod
    def __file_handler(log_dir) -> logging.Handler:
        handler = logging.FileHandler(log_file_path(log_dir), encoding="utf-8")
        handler.setFormatter(logging.Formatter(FILE_FORMAT))
        return handler

    @staticmethod
    def __console_handler() -> logging.Handler:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(ColorFormatter(CONSOLE_FORMAT))
        return handler

    def get_logger(self):
        return self.logger
