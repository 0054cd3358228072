from unittest.mock import MagicMock

import pytest

from src.connectors.runkeeper.base import CollectingSink
from src.connectors.runkeeper.catalog import ResourceType
from src.connectors.runkeeper.dispatcher import (
    FETCH_ROUTINES,
    dispatch,
    supported_resource_types,
)
from src.connectors.runkeeper.errors import ServiceError


def test_every_resource_type_has_a_routine():
    assert set(FETCH_ROUTINES) == set(ResourceType)
    assert len(supported_resource_types()) == 13


@pytest.mark.parametrize("name", ["steps", "", None])
def test_unknown_data_set_is_an_empty_success(make_run, run_log, name):
    run = make_run()
    sink = MagicMock()
    done = MagicMock()

    outcome = dispatch(name, sink, run_log, run, done)

    assert outcome is None
    done.assert_called_once_with(None)
    sink.push.assert_not_called()
    assert run.client.calls == []
    run_log.error.assert_called_once()


def test_success_signals_done_once_without_error(make_run, run_log):
    run = make_run({"/team": {"items": [{"name": "Jane"}]}})
    sink = CollectingSink()
    done = MagicMock()

    outcome = dispatch("friends", sink, run_log, run, done)

    done.assert_called_once_with(None)
    assert outcome.items == 1
    assert run.client.calls == [("GET", "application/vnd.com.runkeeper.TeamFeed+json", "/team")]


def test_failure_signals_done_once_with_error(make_run, run_log):
    error = ServiceError("GET /diabetes returned HTTP 500", status_code=500)
    run = make_run({"/diabetes": error})
    done = MagicMock()

    dispatch("diabetes_measurements", CollectingSink(), run_log, run, done)

    done.assert_called_once_with(error)


def test_failing_sink_signals_done_once_with_error(make_run, run_log):
    run = make_run({"/profile": {"name": "Jane"}})
    sink = MagicMock()
    sink.push.side_effect = IOError("pipeline unavailable")
    done = MagicMock()

    outcome = dispatch("profile", sink, run_log, run, done)

    done.assert_called_once()
    assert isinstance(done.call_args[0][0], IOError)
    assert not outcome.success


@pytest.mark.parametrize(
    "name, uri, media_type",
    [
        ("weight_measurements", "/weight", "WeightSetFeed"),
        ("sleep_measurements", "/sleep", "SleepSetFeed"),
        ("nutritional_measurements", "/nutrition", "NutritionSetFeed"),
        ("change_log", "/changeLog", "ChangeLog"),
    ],
)
def test_data_set_names_map_to_resource_uris(make_run, run_log, name, uri, media_type):
    run = make_run({uri: None})

    dispatch(name, CollectingSink(), run_log, run, MagicMock())

    assert run.client.calls == [
        ("GET", f"application/vnd.com.runkeeper.{media_type}+json", uri)
    ]


def test_fetch_messages_go_to_the_given_log(make_run, run_log):
    run = make_run({"/sleep": {"items": [{"total_sleep": 480}]}})
    other_log = MagicMock()
    done = MagicMock()

    dispatch("sleep_measurements", CollectingSink(), other_log, run, done)

    other_log.info.assert_any_call("Fetching sleep measurement feed.")
    run_log.info.assert_not_called()
    assert run.log is run_log
    done.assert_called_once_with(None)
