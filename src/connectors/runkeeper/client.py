"""
Runkeeper Health Graph API Client
---------------------------------
Issues authenticated GET requests against the Health Graph API with
per-resource media type negotiation.

API Documentation: https://runkeeper.com/developer/healthgraph/overview
"""
from typing import Any, Dict, Optional

import requests
from oauthlib.oauth2.rfc6749.errors import OAuth2Error
from requests_oauthlib import OAuth2Session

from .config import DEFAULT_TIMEOUT_SECONDS
from .errors import ServiceError, TransportError
from .session import SessionContext


class HealthGraphClient:
    """
    Thin REST client for the Health Graph API.

    The access token is attached as a bearer credential to every call. The
    client never logs, retries or refreshes tokens: failures are raised as
    TransportError or ServiceError for the caller to handle.
    """

    def __init__(
        self,
        session: SessionContext,
        http: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """
        Initialize the client.

        Args:
            session: Credentials and API domain for this run
            http: Pre-configured HTTP session (default: OAuth2Session with the access token)
            timeout: Per-request timeout in seconds
        """
        self.session = session
        self.timeout = timeout
        self._http = http or OAuth2Session(
            client_id=session.client_id,
            token={"access_token": session.access_token, "token_type": "Bearer"},
        )

    @property
    def base_url(self) -> str:
        return f"https://{self.session.api_domain}"

    def build_url(self, uri: str) -> str:
        """Join a resource path with the API domain. Absolute URLs are kept as-is."""
        if uri.startswith("http://") or uri.startswith("https://"):
            return uri
        if not uri.startswith("/"):
            uri = "/" + uri
        return f"{self.base_url}{uri}"

    def call(self, method: str, media_type: str, uri: str) -> Any:
        """
        Call the Health Graph API.

        Args:
            method: HTTP method, e.g. GET
            media_type: Versioned media type sent in the Accept header
            uri: Resource path or absolute next-page URL

        Returns:
            Parsed JSON body, or None for an empty response.

        Raises:
            TransportError: The request did not reach the API.
            ServiceError: Non-2xx status or a body that is not JSON.
        """
        url = self.build_url(uri)
        request = {"method": method, "url": url, "accept": media_type}

        try:
            response = self._http.request(
                method,
                url,
                headers={"Accept": media_type},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}", request=request) from e
        except OAuth2Error as e:
            # Raised before sending, e.g. for a plain http:// cursor
            raise TransportError(f"{method} {url} was refused: {e}", request=request) from e

        if not 200 <= response.status_code < 300:
            raise ServiceError(
                f"{method} {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
                request=request,
                response_text=response.text,
            )

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise ServiceError(
                f"{method} {url} returned an unreadable body: {e}",
                status_code=response.status_code,
                request=request,
                response_text=response.text,
            ) from e

    def diagnostics(self) -> Dict[str, Any]:
        """Client parameters for error reports, with secrets masked."""
        return {
            "client_id": self.session.client_id,
            "client_secret": "***" if self.session.client_secret else "",
            "access_token": "***" if self.session.access_token else "",
            "api_domain": self.session.api_domain,
            "timeout": self.timeout,
        }

    def close(self) -> None:
        self._http.close()
