"""
Logging Configuration
Opt-in logging setup for applications (and the demo) embedding the engine.
The package itself only creates module loggers and never installs handlers on import.
"""
import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "scattertransition"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level '{level}'.")
    return resolved


def setup_logging(level: int | str = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the 'scattertransition' logger.

    Args:
        level: Logging level, as number (logging.DEBUG) or name ("DEBUG"),
               e.g. config.LOG_LEVEL.
        log_file: Optional path to save logs to a file (overwritten on every run).
    """
    level = _resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Replace handlers of an earlier call instead of logging twice
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info("Logging initialized.")
