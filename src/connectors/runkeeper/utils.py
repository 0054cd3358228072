"""
Runkeeper Connector Utilities
-----------------------------
Helper functions for logging, environment loading and error reports.
"""
import logging
import pprint
from datetime import timezone, tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from .errors import ServiceError, TransportError


def setup_logging(level: str = "INFO") -> None:
    """Configure logging format and level."""
    fmt = "%(asctime)s %(levelname)s: %(message)s"
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=fmt,
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def load_env(dotenv_path: Path) -> None:
    """Load environment variables from .env file."""
    from dotenv import load_dotenv

    if dotenv_path.exists():
        load_dotenv(dotenv_path)
        logging.debug(f"Loaded .env from {dotenv_path}")
    else:
        logging.debug(f".env file not found at {dotenv_path}")


def log_failure(log: Any, what: str, client: Any, error: Exception) -> None:
    """
    Log a failed Health Graph request with first-failure data capture.

    Args:
        log: Run logger
        what: Human readable name of the request (e.g. 'fitness activities')
        client: The API client, used for its redacted parameters
        error: The TransportError or ServiceError raised by the client
    """
    log.error(f"❌ Error fetching {what} from Runkeeper: {error}")
    diagnostics = client.diagnostics() if hasattr(client, "diagnostics") else {}
    log.error("FFDC: Runkeeper client params: ")
    log.error(" " + pprint.pformat(diagnostics, depth=1))

    reply: Any = None
    if isinstance(error, ServiceError):
        reply = {
            "status_code": error.status_code,
            "request": error.request,
            "response": error.response_text,
        }
    elif isinstance(error, TransportError):
        reply = {"request": error.request}
    log.error(f"FFDC: Runkeeper reply for {what} request: ")
    log.error(" " + pprint.pformat(reply, depth=3))


def get_timezone(name: str) -> tzinfo:
    """Resolve a timezone name, falling back to UTC."""
    try:
        return ZoneInfo(name)
    except Exception:
        logging.warning(f"Invalid timezone {name}, falling back to UTC")
        return timezone.utc
