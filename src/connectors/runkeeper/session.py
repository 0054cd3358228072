"""
Session and run context for a single data pipe run.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .config import API_DOMAIN, API_DOMAIN_ENV_VAR, REQUIRED_ENV_VARS
from .errors import ConfigurationError
from .registry import EndpointRegistry


@dataclass(frozen=True)
class SessionContext:
    """Credentials and API domain used by every call of a run."""

    client_id: str
    client_secret: str
    access_token: str
    api_domain: str = API_DOMAIN

    def __post_init__(self):
        if not self.access_token:
            raise ConfigurationError("Missing Runkeeper access token")

    def __repr__(self) -> str:
        return (
            f"SessionContext(client_id={self.client_id!r}, client_secret='***', "
            f"access_token='***', api_domain={self.api_domain!r})"
        )

    @classmethod
    def from_pipe(cls, pipe: Mapping[str, Any]) -> "SessionContext":
        """
        Build the session from a data pipe configuration.

        Args:
            pipe: Mapping with clientId, clientSecret and oAuth.accessToken.
        """
        oauth = pipe.get("oAuth") or {}
        return cls(
            client_id=pipe.get("clientId", ""),
            client_secret=pipe.get("clientSecret", ""),
            access_token=oauth.get("accessToken", ""),
            api_domain=pipe.get("apiDomain") or API_DOMAIN,
        )

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "SessionContext":
        """Build the session from RUNKEEPER_* environment variables."""
        env = os.environ if env is None else env
        missing = [var for var in REQUIRED_ENV_VARS if not env.get(var)]
        if missing:
            raise ConfigurationError(
                f"Missing Runkeeper credentials: {', '.join(missing)}"
            )
        return cls(
            client_id=env["RUNKEEPER_CLIENT_ID"],
            client_secret=env["RUNKEEPER_CLIENT_SECRET"],
            access_token=env["RUNKEEPER_ACCESS_TOKEN"],
            api_domain=env.get(API_DOMAIN_ENV_VAR) or API_DOMAIN,
        )


@dataclass
class RunContext:
    """
    Everything a fetch routine needs, owned by exactly one run.

    The registry is written once by the bootstrap call and only read
    afterwards. Never share a RunContext between runs.
    """

    session: SessionContext
    registry: EndpointRegistry
    client: Any
    log: Any = field(default_factory=lambda: logging.getLogger("src.connectors.runkeeper"))

    def close(self) -> None:
        close = getattr(self.client, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "RunContext":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def diagnostics(self) -> Dict[str, Any]:
        """Redacted run parameters for error reports."""
        return {
            "client_id": self.session.client_id,
            "api_domain": self.session.api_domain,
            "uris": self.registry.as_dict(),
        }
