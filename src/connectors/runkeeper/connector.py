"""
Runkeeper connector for the data pipe.

Retrieves JSON records from the Runkeeper Health Graph API and pushes them
through the pipeline, one data set (resource type) at a time.
"""

import logging
from datetime import datetime, tzinfo
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, MutableMapping, Optional

from .base import CollectingSink, FetchResult, PipelineSink
from .bootstrap import bootstrap
from .catalog import get_data_set_list
from .client import HealthGraphClient
from .config import (
    CONNECTOR_ID,
    CONNECTOR_NAME,
    DEFAULT_TIMEOUT_SECONDS,
    RECREATE_TARGET_DB,
    USE_CUSTOM_TABLES,
)
from .dispatcher import dispatch, supported_resource_types
from .errors import BootstrapError, RunkeeperError
from .registry import EndpointRegistry
from .session import RunContext, SessionContext

logger = logging.getLogger(__name__)


class RunkeeperConnector:
    """Connector that moves a user's Runkeeper data into the pipeline."""

    connector_id = CONNECTOR_ID
    name = CONNECTOR_NAME
    options = {
        "recreate_target_db": RECREATE_TARGET_DB,
        "use_custom_tables": USE_CUSTOM_TABLES,
    }

    def __init__(
        self,
        client_factory: Callable[[SessionContext], Any] = HealthGraphClient,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self._client_factory = client_factory
        self.timeout = timeout

    def get_table_prefix(self) -> str:
        """Prefix for the staging databases holding this connector's data."""
        return self.connector_id

    # ------------------------------------------------------------------
    # Pipe configuration
    # ------------------------------------------------------------------

    def get_data_set_list(self, pipe: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        """
        Attach the data sets the user can choose from to the pipe.

        'All data sets' comes first, the others are sorted by label.
        """
        pipe["tables"] = [descriptor.to_dict() for descriptor in get_data_set_list()]
        return pipe

    def auth_callback_post_processing(
        self, profile: Mapping[str, Any], pipe: MutableMapping[str, Any]
    ) -> MutableMapping[str, Any]:
        """
        Store the tokens obtained by the OAuth flow and list the data sets.

        Args:
            profile: Output of the authentication library, carrying
                oauth_access_token and oauth_refresh_token
            pipe: Data pipe configuration, updated in place
        """
        pipe["oAuth"] = {
            "accessToken": profile.get("oauth_access_token"),
            "refreshToken": profile.get("oauth_refresh_token"),
        }
        self.get_data_set_list(pipe)
        logger.debug(f"OAuth post processing completed for data pipe {pipe.get('_id')}")
        return pipe

    # ------------------------------------------------------------------
    # Pipe run
    # ------------------------------------------------------------------

    def connect(self, pipe: Mapping[str, Any], pipe_run_log: Any = None) -> RunContext:
        """
        Start a run: build the session and resolve the user's resource URIs.

        Args:
            pipe: Data pipe configuration with clientId, clientSecret, oAuth.accessToken
            pipe_run_log: Logger dedicated to this run (default: module logger)

        Returns:
            A RunContext owned by this run.

        Raises:
            BootstrapError: The /user call failed.
            ConfigurationError: The pipe has no access token.
        """
        log = pipe_run_log or logger
        session = SessionContext.from_pipe(pipe)
        client = self._client_factory(session, timeout=self.timeout)
        run = RunContext(session=session, registry=EndpointRegistry(), client=client, log=log)
        try:
            bootstrap(run)
        except BootstrapError:
            run.close()
            raise
        return run

    def do_connect_step(
        self,
        done: Callable[[Optional[Exception]], Any],
        pipe_run_log: Any,
        pipe: Optional[Mapping[str, Any]],
    ) -> Optional[RunContext]:
        """
        Callback flavour of connect(): done(err) is called exactly once.

        Returns:
            The RunContext, or None if there is no pipe or the connection failed.
        """
        if not pipe:
            done(None)
            return None

        try:
            run = self.connect(pipe, pipe_run_log)
        except RunkeeperError as e:
            done(e)
            return None

        done(None)
        return run

    def fetch_records(
        self,
        data_set: Mapping[str, Any],
        push_record_fn: Callable[[Any], Any],
        done: Callable[[Optional[Exception]], Any],
        pipe_run_log: Any,
        run: Optional[RunContext],
    ) -> None:
        """
        Fetch one data set and push its records through the pipeline.

        When 'All data sets' is selected the host calls this once per data set.

        Args:
            data_set: {'name': data set name}
            push_record_fn: Receives each page of records
            done: Called once with the error, or None on success
            pipe_run_log: Logger dedicated to this run
            run: RunContext returned by connect()
        """
        log = pipe_run_log or logger
        name = data_set.get("name")

        if run is None:
            log.error(f"Cannot fetch data set {name}: Runkeeper URIs were not resolved.")
            done(BootstrapError("Runkeeper connection was not established for this run"))
            return

        log.info(f"Fetching data set {name} from runkeeper.")
        dispatch(name, PipelineSink(push_record_fn), log, run, done)

    def fetch_all(
        self,
        run: RunContext,
        data_sets: Optional[Iterable[str]] = None,
        tz: Optional[tzinfo] = None,
    ) -> Iterator[FetchResult]:
        """
        Fetch several data sets, yielding one result each.

        Records delivered before a failure are kept in the failed result.

        Args:
            run: RunContext returned by connect()
            data_sets: Data set names (default: every supported data set)
            tz: Timezone for result timestamps (default: local time)

        Yields:
            FetchResult for each data set.
        """
        names: List[str] = list(data_sets) if data_sets is not None else supported_resource_types()
        for name in names:
            sink = CollectingSink()
            errors: Dict[str, Optional[Exception]] = {}
            timestamp = datetime.now(tz=tz)

            self.fetch_records({"name": name}, sink.push, lambda err: errors.update(err=err), run.log, run)

            error = errors.get("err")
            yield FetchResult(
                service=self.connector_id,
                data_type=name,
                data=sink.records,
                timestamp=timestamp,
                success=error is None,
                error=str(error) if error else None,
            )
