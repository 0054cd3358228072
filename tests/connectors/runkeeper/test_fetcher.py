from unittest.mock import MagicMock

import pytest

from src.connectors.runkeeper.base import CollectingSink
from src.connectors.runkeeper.catalog import RESOURCE_SPECS, ResourceType
from src.connectors.runkeeper.errors import ServiceError, TransportError
from src.connectors.runkeeper.fetcher import fetch_paginated, fetch_resource, fetch_single

FITNESS = RESOURCE_SPECS[ResourceType.FITNESS_ACTIVITIES]
SETTINGS = RESOURCE_SPECS[ResourceType.SETTINGS]
RECORDS = RESOURCE_SPECS[ResourceType.RECORDS]

PAGE_2 = "/fitnessActivities?page=1&pageSize=3"


def activities(*ids):
    return [{"uri": f"/fitnessActivities/{i}", "type": "Running"} for i in ids]


def test_pages_are_forwarded_in_order(make_run):
    run = make_run(
        {
            "/fitnessActivities": {"size": 5, "items": activities(1, 2, 3), "next": PAGE_2},
            PAGE_2: {"size": 5, "items": activities(4, 5)},
        }
    )
    sink = MagicMock()

    outcome = fetch_paginated(run, FITNESS, sink)

    assert [len(call.args[0]) for call in sink.push.call_args_list] == [3, 2]
    assert outcome.success
    assert outcome.error is None
    assert outcome.pages == 2
    assert outcome.items == 5


def test_sink_receives_concatenation_of_pages(make_run):
    pages = [activities(1, 2, 3), activities(4, 5), activities(6)]
    run = make_run(
        {
            "/fitnessActivities": {"items": pages[0], "next": "/p2"},
            "/p2": {"items": pages[1], "next": "/p3"},
            "/p3": {"items": pages[2]},
        }
    )
    sink = CollectingSink()

    fetch_paginated(run, FITNESS, sink)

    assert sink.records == pages[0] + pages[1] + pages[2]
    assert sink.calls == 3
    assert [call[2] for call in run.client.calls] == ["/fitnessActivities", "/p2", "/p3"]


def test_feed_media_type_is_sent(make_run):
    run = make_run({"/fitnessActivities": {"items": []}})

    fetch_paginated(run, FITNESS, CollectingSink())

    assert run.client.calls == [
        ("GET", "application/vnd.com.runkeeper.FitnessActivityFeed+json", "/fitnessActivities")
    ]


def test_first_page_failure_pushes_nothing(make_run):
    error = ServiceError("GET /fitnessActivities returned HTTP 500", status_code=500)
    run = make_run({"/fitnessActivities": error})
    sink = MagicMock()

    outcome = fetch_paginated(run, FITNESS, sink)

    assert outcome.error is error
    assert not outcome.success
    sink.push.assert_not_called()
    assert len(run.client.calls) == 1
    assert run.log.error.called


def test_later_page_failure_keeps_delivered_pages(make_run):
    error = TransportError("connection reset")
    run = make_run(
        {
            "/fitnessActivities": {"items": activities(1, 2, 3), "next": PAGE_2},
            PAGE_2: error,
        }
    )
    sink = CollectingSink()

    outcome = fetch_paginated(run, FITNESS, sink)

    assert sink.records == activities(1, 2, 3)
    assert outcome.error is error
    assert outcome.items == 3
    assert len(run.client.calls) == 2


@pytest.mark.parametrize("body", [None, {}, {"size": 0}, {"items": []}, [1, 2]])
def test_body_without_items_or_cursor_is_empty_success(make_run, body):
    run = make_run({"/fitnessActivities": body})
    sink = MagicMock()

    outcome = fetch_paginated(run, FITNESS, sink)

    assert outcome.success
    assert outcome.items == 0
    sink.push.assert_not_called()


def test_cursor_is_followed_even_without_items(make_run):
    run = make_run(
        {
            "/fitnessActivities": {"items": [], "next": PAGE_2},
            PAGE_2: {"items": activities(9)},
        }
    )
    sink = CollectingSink()

    fetch_paginated(run, FITNESS, sink)

    assert sink.records == activities(9)
    assert sink.calls == 1


def test_explicit_start_uri(make_run):
    run = make_run({PAGE_2: {"items": activities(4)}})

    outcome = fetch_paginated(run, FITNESS, CollectingSink(), uri=PAGE_2)

    assert outcome.items == 1
    assert run.client.calls[0][2] == PAGE_2


def test_single_object_is_forwarded_whole(make_run):
    settings = {"facebook_connected": False, "distance_units": "km"}
    run = make_run({"/settings": settings})
    sink = MagicMock()

    outcome = fetch_single(run, SETTINGS, sink)

    sink.push.assert_called_once_with(settings)
    assert outcome.success
    assert outcome.items == 1
    assert run.client.calls[0][1] == "application/vnd.com.runkeeper.Settings+json"


def test_single_list_body_is_forwarded_whole(make_run):
    records = [{"activity_type": "Running", "stats": []}, {"activity_type": "Cycling", "stats": []}]
    run = make_run({"/records": records})
    sink = CollectingSink()

    outcome = fetch_resource(run, RECORDS, sink)

    assert sink.calls == 1
    assert sink.records == records
    assert outcome.items == 2


def test_single_empty_body_completes_without_push(make_run):
    run = make_run({"/settings": None})
    sink = MagicMock()

    outcome = fetch_single(run, SETTINGS, sink)

    assert outcome.success
    sink.push.assert_not_called()


@pytest.mark.parametrize("body", [{}, []])
def test_single_empty_object_or_list_is_forwarded(make_run, body):
    run = make_run({"/settings": body})
    sink = MagicMock()

    outcome = fetch_single(run, SETTINGS, sink)

    sink.push.assert_called_once_with(body)
    assert outcome.success


def test_single_failure_is_reported(make_run):
    error = ServiceError("GET /settings returned HTTP 401", status_code=401)
    run = make_run({"/settings": error})
    sink = MagicMock()

    outcome = fetch_single(run, SETTINGS, sink)

    assert outcome.error is error
    sink.push.assert_not_called()
