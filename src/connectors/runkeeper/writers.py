"""
Output writers for fetched Runkeeper data sets.
Each data set is written as one JSONL file, locally or directly to GCS.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from google.cloud import storage

from .base import FetchResult

logger = logging.getLogger(__name__)


def to_jsonl(data: List[Dict[str, Any]]) -> str:
    """Convert list of dicts to JSONL string."""
    lines = [json.dumps(item, default=str, ensure_ascii=False) for item in data]
    return "\n".join(lines) + "\n" if lines else ""


def parse_gcs_path(path: str) -> Tuple[str, str]:
    """
    Parse gs://bucket/prefix into (bucket, prefix).

    Raises:
        ValueError: If path is not a valid GCS path.
    """
    if not path.startswith("gs://"):
        raise ValueError(f"Invalid GCS path: {path}. Must start with gs://")

    bucket, _, prefix = path[5:].partition("/")
    if not bucket:
        raise ValueError(f"Invalid GCS path: {path}. Bucket name is empty.")

    if prefix:
        prefix = prefix.rstrip("/") + "/"
    return bucket, prefix


class ResultWriter(ABC):
    """Writes a FetchResult somewhere and returns where it went."""

    def write(self, result: FetchResult) -> Optional[str]:
        """
        Write a fetch result.

        Results of failed fetches are still written when they carry records,
        since those pages were delivered before the failure.

        Returns:
            Location of the written file, or None if there was nothing to write.
        """
        if not result.data:
            logger.warning(f"No data to write for {result.service}/{result.data_type}")
            return None
        if not result.success:
            logger.warning(
                f"⚠️ {result.data_type} failed after {result.item_count} items, writing partial data"
            )
        return self._write(result.filename, to_jsonl(result.data), result)

    @abstractmethod
    def _write(self, filename: str, content: str, result: FetchResult) -> str:
        pass


class GCSWriter(ResultWriter):
    """Uploads fetch results to Google Cloud Storage."""

    def __init__(
        self,
        destination: str,
        keep_local: bool = False,
        local_dir: Optional[Path] = None,
        client: Optional[storage.Client] = None,
    ):
        """
        Initialize GCS writer.

        Args:
            destination: GCS path like gs://bucket/path/
            keep_local: If True, also save a local copy
            local_dir: Directory for local copies (required if keep_local is True)
            client: Storage client (default: storage.Client())
        """
        self.destination = destination
        self.keep_local = keep_local
        self.local_dir = local_dir
        self._bucket_name, self._prefix = parse_gcs_path(destination)
        self._client = client or storage.Client()
        self._bucket = self._client.bucket(self._bucket_name)

    def _write(self, filename: str, content: str, result: FetchResult) -> str:
        blob_name = f"{self._prefix}{filename}"
        blob = self._bucket.blob(blob_name)
        blob.upload_from_string(content, content_type="application/x-ndjson")

        gcs_uri = f"gs://{self._bucket_name}/{blob_name}"
        logger.info(f"Uploaded {filename} to {gcs_uri} ({result.item_count} items)")

        if self.keep_local and self.local_dir:
            self.local_dir.mkdir(parents=True, exist_ok=True)
            local_path = self.local_dir / filename
            local_path.write_text(content, encoding="utf-8")
            logger.info(f"Saved local copy to {local_path}")

        return gcs_uri


class LocalWriter(ResultWriter):
    """Writes fetch results to the local filesystem."""

    def __init__(self, output_dir: Path):
        self.output_dir = output_dir
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def _write(self, filename: str, content: str, result: FetchResult) -> str:
        output_path = self.output_dir / filename
        output_path.write_text(content, encoding="utf-8")
        logger.info(f"📁 Saved {filename} ({result.item_count} items)")
        return str(output_path)
