# SPDX-License-Identifier: MIT

import logging
import sys
from pathlib import Path
from typing import Optional

from taskflow import configuration

LOG_FILE_NAME = "taskflow.log"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the terminal readable while commands render their own output:
    - taskflow logs only at WARNING and above
    - third-party logs (httpx, supabase) only at ERROR and above
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "taskflow" or record.name.startswith("taskflow."):
            return record.levelno >= logging.WARNING
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: Optional[Path] = None,
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure the root logger with a filtered stderr handler and a file handler.

    Call this once before the first command runs.
    """
    log_dir = log_dir if log_dir is not None else configuration.LOG_PATH
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_dir / LOG_FILE_NAME), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
