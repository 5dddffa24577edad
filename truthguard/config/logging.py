from __future__ import annotations

import logging
import sys

FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

# Marks handlers installed here so repeat calls only adjust their level.
_HANDLER_FLAG = "_truthguard_handler"


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level {level!r}")
    return value


def setup_logging(
    level: int | str = logging.INFO,
    log_file: str = "truthguard.log",
    logger: logging.Logger | None = None,
) -> logging.Logger:
    """Attach file and stream handlers to *logger* (the root logger by default).

    Calling it again re-applies *level* to the logger and to the handlers it
    installed earlier instead of adding duplicates.
    """
    level = _resolve_level(level)
    logger = logger or logging.getLogger()
    logger.setLevel(level)

    installed = [h for h in logger.handlers if getattr(h, _HANDLER_FLAG, False)]
    if installed:
        for handler in installed:
            handler.setLevel(level)
        return logger

    formatter = logging.Formatter(FORMAT)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    stream = sys.stderr if sys.platform == "win32" else sys.stdout
    stream_handler = logging.StreamHandler(stream)

    for handler in (file_handler, stream_handler):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_FLAG, True)
        logger.addHandler(handler)

    logging.getLogger("werkzeug").setLevel(max(level, logging.WARNING))

    return logger
