"""
Resource dispatcher: maps a data set name to its fetch routine.
"""
import dataclasses
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from .base import FetchOutcome, RecordSink
from .catalog import RESOURCE_SPECS, ResourceType
from .fetcher import fetch_paginated, fetch_single
from .session import RunContext

FetchRoutine = Callable[[RunContext, RecordSink], FetchOutcome]
DoneCallback = Callable[[Optional[Exception]], Any]


def _build_routines() -> Dict[ResourceType, FetchRoutine]:
    routines = {}
    for rt, spec in RESOURCE_SPECS.items():
        fetch = fetch_paginated if spec.paginated else fetch_single
        routines[rt] = partial(fetch, spec=spec)

    missing = [rt.value for rt in ResourceType if rt not in routines]
    if missing:
        raise RuntimeError(f"No fetch routine for resource types: {missing}")
    return routines


FETCH_ROUTINES: Dict[ResourceType, FetchRoutine] = _build_routines()


def supported_resource_types() -> List[str]:
    return [rt.value for rt in FETCH_ROUTINES]


def run_routine(run: RunContext, resource: ResourceType, sink: RecordSink) -> FetchOutcome:
    """
    Run the fetch routine for a resource type.

    Unexpected exceptions (a failing sink, for instance) end the fetch as a
    failed outcome instead of escaping.
    """
    routine = FETCH_ROUTINES[resource]
    try:
        return routine(run, sink=sink)
    except Exception as e:
        run.log.error(f"❌ Fetching {resource.value} failed: {e}")
        return FetchOutcome(resource=resource.value, error=e)


def dispatch(
    name: Optional[str],
    sink: RecordSink,
    log: Any,
    run: RunContext,
    done: DoneCallback,
) -> Optional[FetchOutcome]:
    """
    Fetch one data set and signal completion exactly once.

    An unknown name is logged and completed as an empty success so that
    sibling data sets of an 'all data sets' run keep going.

    Args:
        name: Data set name
        sink: Receives the fetched records
        log: Run logger, also used by the fetch routine
        run: Run context for this pipe run
        done: Called with the error, or with None on success

    Returns:
        The FetchOutcome, or None for an unknown name.
    """
    resource = ResourceType.from_name(name)
    if resource is None:
        log.error(f"This runkeeper connector cannot process data set {name}")
        done(None)
        return None

    if log is not run.log:
        run = dataclasses.replace(run, log=log)

    outcome = run_routine(run, resource, sink)
    done(outcome.error)
    return outcome
