"""Exceptions raised by the graph client."""

from typing import Any, Optional


class ArangoGraphError(Exception):
    """Base exception for graph client errors."""

    pass


class TransportError(ArangoGraphError):
    """Indicates an error during the request itself (network, timeout, etc.)."""

    pass


class ServerError(ArangoGraphError):
    """The server answered with an error status or an error envelope."""

    def __init__(
        self,
        status_code: int,
        message: Optional[str] = None,
        error_num: Optional[int] = None,
        response_content: Any = None,
    ) -> None:
        self.status_code = status_code
        self.error_num = error_num
        self.response_content = response_content
        self.message = message or f"Server returned HTTP {status_code}"
        super().__init__(self.message)


class NotFoundError(ServerError):
    """The graph, vertex or edge does not exist."""


class RevisionConflict(ServerError):
    """The stored revision does not match the one supplied with the request."""


class ProtocolViolation(ArangoGraphError):
    """The server response disagrees with what the client sent or expects."""


class InvalidOption(ArangoGraphError, ValueError):
    """An operation option has a value outside its allowed set."""


class UnsupportedOperation(ArangoGraphError, AttributeError):
    """A generic document operation was requested on a graph handle."""

    def __init__(self, name: str, hint: Optional[str] = None) -> None:
        self.name = name
        message = f"Graphs don't support {name}()."
        if hint:
            message = f"{message} Please use {hint}."
        super().__init__(message)
