import logging
import sys

from solestyle.config import settings


def setup_logging(level: str = None) -> logging.Logger:
    """
    Configure the ``solestyle`` logger tree once: a stdout handler with a
    bracketed prefix. Calling it again only adjusts the level.
    """
    log = logging.getLogger("solestyle")
    log.setLevel((level or settings.LOG_LEVEL).upper())
    if not log.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(
            logging.Formatter("[%(levelname)s] %(name)s: %(message)s")
        )
        log.addHandler(h)
    return log
