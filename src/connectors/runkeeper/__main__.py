#!/usr/bin/env python3
"""
Runkeeper Connector Entry Point
-------------------------------
Fetch Runkeeper Health Graph data sets and write them as JSONL, locally or to GCS.

Usage:
    # Fetch every data set to a local directory
    python -m src.connectors.runkeeper --datasets all --output-dir ./output

    # Fetch some data sets and upload to GCS
    python -m src.connectors.runkeeper --datasets fitness_activities,sleep_measurements --destination gs://bucket/runkeeper/landing/

    # List available data sets
    python -m src.connectors.runkeeper --list-datasets
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Add project root to path to ensure imports work when run as script
sys.path.append(str(Path(__file__).parent.parent.parent.parent))

from src.connectors.runkeeper.catalog import get_data_set_list
from src.connectors.runkeeper.config import DEFAULT_TIMEZONE
from src.connectors.runkeeper.connector import RunkeeperConnector
from src.connectors.runkeeper.dispatcher import supported_resource_types
from src.connectors.runkeeper.errors import RunkeeperError
from src.connectors.runkeeper.session import SessionContext
from src.connectors.runkeeper.utils import get_timezone, load_env, setup_logging
from src.connectors.runkeeper.writers import GCSWriter, LocalWriter


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Fetch Runkeeper data sets and write them as JSONL.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--datasets",
        default="all",
        help="Comma-separated list of data sets to fetch, or 'all'",
    )
    parser.add_argument(
        "--list-datasets",
        action="store_true",
        help="List available data sets and exit",
    )
    parser.add_argument(
        "--destination",
        help="GCS folder path for direct upload (e.g., gs://bucket/path/)",
    )
    parser.add_argument(
        "-o", "--output-dir",
        type=Path,
        help="Local directory for output (alternative to --destination)",
    )
    parser.add_argument(
        "--keep-local",
        action="store_true",
        help="Keep local copy when uploading to GCS",
    )
    parser.add_argument(
        "--local-dir",
        type=Path,
        default=None,
        help="Local directory for copies when using --keep-local",
    )
    parser.add_argument(
        "-e", "--env",
        type=Path,
        default=Path(__file__).parent.parent.parent.parent / ".env",
        help="Path to the .env file",
    )
    parser.add_argument(
        "--timezone",
        default=DEFAULT_TIMEZONE,
        help="Timezone for output file timestamps",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level",
    )
    return parser.parse_args(argv)


def list_data_sets() -> None:
    """Print the data sets the connector can fetch."""
    print("\nAvailable Runkeeper data sets:\n")
    for descriptor in get_data_set_list(include_all=False):
        print(f"  - {descriptor.name:<30} {descriptor.label}")
    print()


def parse_data_sets(value: str) -> List[str]:
    """Turn the --datasets value into a list of names. 'all' expands to every data set."""
    names = [name.strip() for name in value.split(",") if name.strip()]
    if not names or "all" in names:
        return supported_resource_types()
    return names


def build_pipe() -> dict:
    """Build a data pipe configuration from RUNKEEPER_* environment variables."""
    session = SessionContext.from_env()
    return {
        "clientId": session.client_id,
        "clientSecret": session.client_secret,
        "oAuth": {"accessToken": session.access_token},
        "apiDomain": session.api_domain,
    }


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    if args.list_datasets:
        list_data_sets()
        return

    if not args.destination and not args.output_dir:
        logging.error("Either --destination (GCS) or --output-dir (local) is required.")
        sys.exit(1)

    try:
        load_env(args.env)
        pipe = build_pipe()
        data_sets = parse_data_sets(args.datasets)

        if args.destination:
            local_dir = args.local_dir if args.keep_local else None
            writer = GCSWriter(args.destination, keep_local=args.keep_local, local_dir=local_dir)
        else:
            writer = LocalWriter(args.output_dir)

        connector = RunkeeperConnector()
        logging.info(f"Data sets to fetch: {data_sets}")

        success_count = 0
        error_count = 0
        with connector.connect(pipe) as run:
            for result in connector.fetch_all(run, data_sets, tz=get_timezone(args.timezone)):
                writer.write(result)
                if result.success:
                    success_count += 1
                    logging.info(f"[{result.service}] {result.data_type}: {result.item_count} items")
                else:
                    error_count += 1
                    logging.error(f"[{result.service}] {result.data_type} failed: {result.error}")

        logging.info(f"Completed: {success_count} successful, {error_count} failed")
        if error_count > 0:
            sys.exit(1)

    except KeyboardInterrupt:
        logging.info("Script interrupted by user")
        sys.exit(130)
    except RunkeeperError as e:
        logging.error(f"❌ {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
