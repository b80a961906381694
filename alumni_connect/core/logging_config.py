"""
Logging setup. Modules log through logging.getLogger(__name__);
this only installs the root handler once at startup.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())

    # Re-running create_app (tests) must not stack handlers
    for handler in root.handlers:
        if getattr(handler, "_alumni_connect", False):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._alumni_connect = True
    root.addHandler(handler)

    # pymongo's heartbeat chatter is noisy at INFO
    logging.getLogger("pymongo").setLevel(logging.WARNING)
