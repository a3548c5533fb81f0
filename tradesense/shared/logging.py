"""
Process-wide logging setup.

One line per record: ``time | level | logger | message``. Modules log
through ``logging.getLogger(__name__)`` and never format secrets, signer
keys or raw provider bodies into messages.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Client libraries that log every request or RPC call at INFO/DEBUG.
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "web3", "sqlalchemy.engine")


def configure_logging(level: str = "INFO") -> None:
    """Install the root handler on stdout; safe to call more than once.

    Args:
        level: Level name for the service's own loggers. Unknown names
            fall back to INFO.
    """
    root_level = logging.getLevelName(level.upper())
    if not isinstance(root_level, int):
        root_level = logging.INFO

    logging.basicConfig(
        level=root_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(root_level, logging.WARNING))
