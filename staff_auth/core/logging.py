# staff-auth/staff_auth/core/logging.py
import logging
import sys

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=_FORMAT, stream=sys.stdout)
    for noisy in ("sqlalchemy.engine", "passlib", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def redact_url(url: str) -> str:
    """Render a store URL with its password masked, safe for log output."""
    try:
        return make_url(url).render_as_string(hide_password=True)
    except ArgumentError:
        return "<unparseable database url>"
