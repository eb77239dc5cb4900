"""Package logger."""

import logging

logger = logging.getLogger('projectile_motion')
logger.addHandler(logging.NullHandler())


def enable_console_logging(level=logging.INFO):
    """Attach a stream handler to the package logger (used by main.py)."""
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler):
            handler.setLevel(level)
            break
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)-7s %(name)s: %(message)s'))
        handler.setLevel(level)
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
