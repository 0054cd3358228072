"""
Bootstrap resolver: discovers the user's resource URIs via the /user call.

The URIs returned by /user can change and applications are required to use
them instead of the defaults.
See https://runkeeper.com/developer/healthgraph/users
"""
from typing import Dict, Mapping

from .config import USER_MEDIA_TYPE, USER_URI
from .errors import BootstrapError, ServiceError, TransportError
from .session import RunContext
from .utils import log_failure


def extract_uris(reply: Mapping, known_keys) -> Dict[str, str]:
    """
    Pick the non-empty URI fields we know about from a /user reply.

    Raises:
        ServiceError: A known field holds something other than a string.
    """
    uris = {key: reply[key] for key in known_keys if reply.get(key)}
    malformed = sorted(key for key, uri in uris.items() if not isinstance(uri, str))
    if malformed:
        raise ServiceError(
            f"Malformed /user reply: non-string URI for {', '.join(malformed)}",
            request={"method": "GET", "uri": USER_URI, "accept": USER_MEDIA_TYPE},
            response_text=repr(reply),
        )
    return uris


def bootstrap(run: RunContext) -> Dict[str, str]:
    """
    Refresh the run's endpoint registry from the /user call.

    Args:
        run: Run context whose registry is updated in place

    Returns:
        The registry entries that changed.

    Raises:
        BootstrapError: The call failed, returned something other than an
            object, or a URI field is not a string. The registry is left
            exactly as it was.
    """
    log = run.log
    log.info("Fetching Runkeeper URIs.")

    try:
        reply = run.client.call("GET", USER_MEDIA_TYPE, USER_URI)
    except (TransportError, ServiceError) as e:
        log_failure(log, "user", run.client, e)
        raise BootstrapError(f"Could not fetch Runkeeper URIs: {e}") from e

    if reply is None:
        log.info("Runkeeper returned no URIs, keeping defaults.")
        return {}

    if not isinstance(reply, Mapping):
        error = ServiceError(
            f"Unexpected /user reply of type {type(reply).__name__}",
            request={"method": "GET", "uri": USER_URI, "accept": USER_MEDIA_TYPE},
            response_text=repr(reply),
        )
        log_failure(log, "user", run.client, error)
        raise BootstrapError(f"Could not fetch Runkeeper URIs: {error}") from error

    try:
        uris = extract_uris(reply, run.registry.keys)
    except ServiceError as e:
        log_failure(log, "user", run.client, e)
        raise BootstrapError(f"Could not fetch Runkeeper URIs: {e}") from e

    changed = run.registry.update_many(uris)
    log.debug(f"Runkeeper URIs: {run.registry.as_dict()}")
    log.info(f"Fetched Runkeeper URIs ({len(changed)} updated).")
    return changed
