import logging
import sys
from typing import Optional


# Top-level packages whose module loggers this configures
PACKAGES = ("animation", "core", "hydraulics", "visualization")


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Attach console (stderr) and optional file handlers to the package loggers.

    stdout is left alone so the CLI can stream frame JSON through it.
    """
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for name in PACKAGES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # avoid duplicate output when called twice
        if logger.hasHandlers():
            logger.handlers.clear()
        for handler in handlers:
            logger.addHandler(handler)
        logger.propagate = False

    logging.getLogger("core").info("Logging initialized.")
