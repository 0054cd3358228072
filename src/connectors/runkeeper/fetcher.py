"""
Runkeeper Resource Fetcher
--------------------------
Walks Health Graph feeds page by page, following the 'next' cursor, and
forwards every page to a record sink as soon as it arrives.
"""
from typing import Any, Optional

from .base import FetchOutcome, RecordSink
from .catalog import ResourceSpec
from .errors import ServiceError, TransportError
from .session import RunContext
from .utils import log_failure


def _next_cursor(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        return body.get("next") or None
    return None


def _page_items(body: Any) -> list:
    if isinstance(body, dict):
        return body.get("items") or []
    return []


def fetch_paginated(
    run: RunContext,
    spec: ResourceSpec,
    sink: RecordSink,
    uri: Optional[str] = None,
) -> FetchOutcome:
    """
    Fetch every page of a feed resource.

    Each page's items are pushed to the sink before the next cursor is
    looked at, so pages already delivered are kept if a later page fails.
    A body without items and without a cursor ends the feed as an empty
    success.

    Args:
        run: Run context (client, registry, logger)
        spec: The resource to fetch
        sink: Receives each non-empty page of items
        uri: Start URI (default: the registry URI for the resource)

    Returns:
        FetchOutcome carrying the first TransportError/ServiceError, if any.
    """
    log = run.log
    outcome = FetchOutcome(resource=spec.resource.value)
    uri = uri or run.registry.resolve(spec.uri_key)

    log.info(f"Fetching {spec.noun} feed.")
    while uri:
        try:
            body = run.client.call("GET", spec.media_type, uri)
        except (TransportError, ServiceError) as e:
            log_failure(log, f"{spec.noun} feed", run.client, e)
            outcome.error = e
            return outcome

        outcome.pages += 1
        items = _page_items(body)
        if items:
            log.info(f"Fetched {len(items)} {spec.noun}(s).")
            sink.push(items)
            outcome.items += len(items)

        uri = _next_cursor(body)
        if uri:
            log.debug(f"Following next page of {spec.noun} feed: {uri}")

    log.info(f"✅ {spec.label}: {outcome.items} item(s) in {outcome.pages} page(s)")
    return outcome


def fetch_single(run: RunContext, spec: ResourceSpec, sink: RecordSink) -> FetchOutcome:
    """
    Fetch a resource that comes back in one response (settings, profile, ...).

    The body is forwarded unchanged, even an empty object or list.
    """
    log = run.log
    outcome = FetchOutcome(resource=spec.resource.value)
    uri = run.registry.resolve(spec.uri_key)

    log.info(f"Fetching {spec.noun}.")
    try:
        body = run.client.call("GET", spec.media_type, uri)
    except (TransportError, ServiceError) as e:
        log_failure(log, spec.noun, run.client, e)
        outcome.error = e
        return outcome

    outcome.pages = 1
    if body is not None:
        if isinstance(body, list):
            log.info(f"Fetched {len(body)} {spec.noun}.")
            outcome.items = len(body)
        else:
            log.info(f"Fetched {spec.noun}.")
            outcome.items = 1
        sink.push(body)
    return outcome


def fetch_resource(run: RunContext, spec: ResourceSpec, sink: RecordSink) -> FetchOutcome:
    """Fetch a resource with the strategy its spec calls for."""
    if spec.paginated:
        return fetch_paginated(run, spec, sink)
    return fetch_single(run, spec, sink)
