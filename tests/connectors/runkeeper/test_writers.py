import json
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from src.connectors.runkeeper.base import FetchResult
from src.connectors.runkeeper.writers import GCSWriter, LocalWriter, parse_gcs_path, to_jsonl


def make_result(data, success=True, error=None):
    return FetchResult(
        service="runkeeper",
        data_type="fitness_activities",
        data=data,
        timestamp=datetime(2024, 1, 2, 3, 4),
        success=success,
        error=error,
    )


def test_to_jsonl():
    assert to_jsonl([]) == ""
    content = to_jsonl([{"a": 1}, {"b": "é"}])
    assert content == '{"a": 1}\n{"b": "é"}\n'


def test_local_writer_writes_jsonl(tmp_path):
    writer = LocalWriter(tmp_path / "out")
    result = make_result([{"uri": "/a/1"}, {"uri": "/a/2"}])

    path = writer.write(result)

    assert path.endswith("2024_01_02_03_04_runkeeper_fitness_activities.jsonl")
    lines = (tmp_path / "out" / result.filename).read_text(encoding="utf-8").splitlines()
    assert [json.loads(line) for line in lines] == result.data


def test_local_writer_skips_empty_result(tmp_path):
    assert LocalWriter(tmp_path).write(make_result([])) is None
    assert list(tmp_path.iterdir()) == []


def test_partial_result_is_written(tmp_path):
    result = make_result([{"uri": "/a/1"}], success=False, error="HTTP 502")
    assert LocalWriter(tmp_path).write(result) is not None


@pytest.mark.parametrize(
    "path, expected",
    [
        ("gs://bucket/runkeeper/landing/", ("bucket", "runkeeper/landing/")),
        ("gs://bucket/runkeeper", ("bucket", "runkeeper/")),
        ("gs://bucket", ("bucket", "")),
    ],
)
def test_parse_gcs_path(path, expected):
    assert parse_gcs_path(path) == expected


@pytest.mark.parametrize("path", ["s3://bucket/x", "gs:///x"])
def test_parse_gcs_path_rejects_invalid(path):
    with pytest.raises(ValueError):
        parse_gcs_path(path)


def test_gcs_writer_uploads(tmp_path):
    client = MagicMock()
    blob = client.bucket.return_value.blob.return_value
    writer = GCSWriter(
        "gs://bucket/runkeeper/", keep_local=True, local_dir=tmp_path, client=client
    )
    result = make_result([{"uri": "/a/1"}])

    uri = writer.write(result)

    assert uri == f"gs://bucket/runkeeper/{result.filename}"
    client.bucket.assert_called_once_with("bucket")
    blob.upload_from_string.assert_called_once_with(
        '{"uri": "/a/1"}\n', content_type="application/x-ndjson"
    )
    assert (tmp_path / result.filename).exists()
