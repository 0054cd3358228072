"""Runkeeper Health Graph connector."""

from .base import CollectingSink, FetchOutcome, FetchResult, PipelineSink, RecordSink
from .catalog import ResourceDescriptor, ResourceType, get_data_set_list
from .client import HealthGraphClient
from .connector import RunkeeperConnector
from .dispatcher import dispatch, supported_resource_types
from .errors import (
    BootstrapError,
    ConfigurationError,
    RunkeeperError,
    ServiceError,
    TransportError,
)
from .registry import EndpointRegistry
from .session import RunContext, SessionContext

__all__ = [
    "BootstrapError",
    "CollectingSink",
    "ConfigurationError",
    "EndpointRegistry",
    "FetchOutcome",
    "FetchResult",
    "HealthGraphClient",
    "PipelineSink",
    "RecordSink",
    "ResourceDescriptor",
    "ResourceType",
    "RunContext",
    "RunkeeperConnector",
    "RunkeeperError",
    "ServiceError",
    "SessionContext",
    "TransportError",
    "dispatch",
    "get_data_set_list",
    "supported_resource_types",
]
