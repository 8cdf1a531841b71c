import logging
import os
import sys

ENV_VAR = 'JSONFS_LOG'
DEFAULT_LEVEL = 'warn'
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'

TRACE = 5
logging.addLevelName(TRACE, 'TRACE')

LEVELS = {
    'off': logging.CRITICAL + 10,
    'error': logging.ERROR,
    'warn': logging.WARNING,
    'info': logging.INFO,
    'debug': logging.DEBUG,
    'trace': TRACE,
}


def level_from_env(environ=None):
    """Return (level name, unrecognised value or None) for JSONFS_LOG."""
    environ = os.environ if environ is None else environ
    value = environ.get(ENV_VAR)
    if value is None or not value.strip():
        return DEFAULT_LEVEL, None
    name = value.strip().lower()
    if name not in LEVELS:
        return DEFAULT_LEVEL, value
    return name, None


def configure_logging(level=None, stream=None):
    """Point the jsonfs loggers at stderr and return the package logger."""
    bad = None
    if level is None:
        level, bad = level_from_env()

    logger = logging.getLogger('jsonfs')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(LEVELS[level])
    logger.propagate = False

    if bad is not None:
        logger.warning('Ignoring unknown %s value %r, using %r', ENV_VAR, bad, DEFAULT_LEVEL)
    return logger
