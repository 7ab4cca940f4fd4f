"""Client for the graph REST API of an ArangoDB-style document/graph server."""

from .config import ConnectionSettings, LoggingSettings, configure_logging, load_settings
from .domain.exceptions import (
    ArangoGraphError,
    InvalidOption,
    NotFoundError,
    ProtocolViolation,
    RevisionConflict,
    ServerError,
    TransportError,
    UnsupportedOperation,
)
from .domain.models import (
    Document,
    Edge,
    Graph,
    OperationOptions,
    ReadOptions,
    UpdatePolicy,
    Vertex,
)
from .services import GraphHandler, HttpConnection

__version__ = "0.1.0"

__all__ = [
    "ArangoGraphError",
    "ConnectionSettings",
    "Document",
    "Edge",
    "Graph",
    "GraphHandler",
    "HttpConnection",
    "InvalidOption",
    "LoggingSettings",
    "NotFoundError",
    "OperationOptions",
    "ProtocolViolation",
    "ReadOptions",
    "RevisionConflict",
    "ServerError",
    "TransportError",
    "UnsupportedOperation",
    "UpdatePolicy",
    "Vertex",
    "configure_logging",
    "load_settings",
]
