"""
Endpoint Registry
-----------------
Per-run map of Health Graph resource URIs, seeded with the defaults from
resources.yaml and refreshed by the /user bootstrap call.
"""
import logging
from typing import Dict, Mapping, Optional

from .config import DEFAULT_URIS
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class EndpointRegistry:
    """Resource URI lookup. Entries can be overwritten but never removed."""

    def __init__(self, defaults: Optional[Mapping[str, str]] = None):
        self._uris: Dict[str, str] = dict(DEFAULT_URIS if defaults is None else defaults)

    def __contains__(self, key: str) -> bool:
        return key in self._uris

    def __repr__(self) -> str:
        return f"EndpointRegistry({self._uris!r})"

    @property
    def keys(self):
        return list(self._uris.keys())

    def resolve(self, key: str) -> str:
        """Return the current URI for a resource key."""
        try:
            return self._uris[key]
        except KeyError:
            raise ConfigurationError(f"Unknown Runkeeper URI key: {key}") from None

    def update(self, key: str, uri: Optional[str]) -> bool:
        """
        Overwrite the URI for a known key.

        Empty or missing values are ignored so that absent fields in a /user
        reply never erase a known-good default.

        Returns:
            True if the registry changed.
        """
        if key not in self._uris:
            raise ConfigurationError(f"Unknown Runkeeper URI key: {key}")
        if not uri:
            return False
        if self._uris[key] == uri:
            return False
        logger.debug(f"URI for {key} updated: {self._uris[key]} -> {uri}")
        self._uris[key] = uri
        return True

    def update_many(self, uris: Mapping[str, Optional[str]]) -> Dict[str, str]:
        """
        Apply several updates at once.

        All keys are validated before anything is written, so a bad key
        leaves the registry untouched.

        Returns:
            The entries that actually changed.
        """
        unknown = [key for key in uris if key not in self._uris]
        if unknown:
            raise ConfigurationError(f"Unknown Runkeeper URI keys: {', '.join(unknown)}")

        changed = {}
        for key, uri in uris.items():
            if self.update(key, uri):
                changed[key] = uri
        return changed

    def as_dict(self) -> Dict[str, str]:
        return dict(self._uris)

    def copy(self) -> "EndpointRegistry":
        return EndpointRegistry(self._uris)
