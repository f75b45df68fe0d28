from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


# PUBLIC_INTERFACE
def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a single stream handler to the package logger and set its level.
    Calling it again only updates the level.
    """
    logger = logging.getLogger("todo_api")
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        # Unknown level names fall back to INFO
        numeric_level = logging.INFO
    logger.setLevel(numeric_level)
    if not any(h.get_name() == "todo_api" for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.set_name("todo_api")
        logger.addHandler(handler)
    return logger
