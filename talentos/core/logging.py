"""
Logging setup - one stdout handler for the whole app.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once. Safe to call more than once."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if any(getattr(h, "_talentos", False) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._talentos = True
    root.addHandler(handler)

    # SQL echo is controlled by Settings.debug, keep the noisy loggers quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
