from typing import Any, Dict, Optional

import httpx
from loguru import logger

from arango_graph.config import ConnectionSettings
from arango_graph.domain.exceptions import (
    NotFoundError,
    ProtocolViolation,
    RevisionConflict,
    ServerError,
    TransportError,
)
from arango_graph.domain.utils import build_url, encode_params

# errorNum the server reports for a revision mismatch
ERROR_ARANGO_CONFLICT = 1200


def error_from_response(response: httpx.Response) -> ServerError:
    """Build the typed error matching a failed server response."""
    error_num: Optional[int] = None
    message: Optional[str] = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error_num = body.get("errorNum")
        message = body.get("errorMessage")

    if message is None:
        message = f"Server returned HTTP {response.status_code}"

    if response.status_code == 412 or error_num == ERROR_ARANGO_CONFLICT:
        error_cls = RevisionConflict
    elif response.status_code == 404:
        error_cls = NotFoundError
    else:
        error_cls = ServerError
    return error_cls(
        status_code=response.status_code,
        message=message,
        error_num=error_num,
        response_content=response.text,
    )


class HttpConnection:
    """
    A synchronous HTTP connection to the database server using httpx.
    Manages an httpx.Client instance and exposes the connection-level defaults.
    """

    def __init__(
        self,
        settings: Optional[ConnectionSettings] = None,
        default_headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initializes the connection from settings.

        Args:
            settings: Endpoint, credentials, timeouts and operation defaults.
                Defaults to ``ConnectionSettings()`` (environment / ``.env``).
            default_headers: Additional headers to include with every request.
            transport: Optional httpx transport, mainly for tests.
        """
        self.settings = settings or ConnectionSettings()
        self.base_url = self.settings.endpoint.rstrip("/")

        headers = {
            "User-Agent": "arango-graph/0.1",
            "Accept": "application/json",
        }
        if default_headers:
            headers.update(default_headers)

        auth = None
        if self.settings.username and self.settings.password is not None:
            auth = httpx.BasicAuth(self.settings.username, self.settings.password)

        self.client = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            auth=auth,
            timeout=httpx.Timeout(self.settings.timeout, connect=self.settings.connect_timeout),
            transport=transport,
        )
        logger.debug(f"HttpConnection initialized for base URL: {self.base_url}")

    def get_option(self, name: str) -> Any:
        """Return a connection-level default, e.g. ``wait_for_sync``."""
        return getattr(self.settings, name)

    @property
    def path_prefix(self) -> str:
        if self.settings.database:
            return build_url("/_db", self.settings.database)
        return ""

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Any = None,
    ) -> httpx.Response:
        """
        Sends an HTTP request and validates the response status.

        Args:
            method: HTTP verb.
            path: Server path, e.g. ``/_api/graph/social``.
            params: Optional query parameters; booleans are sent as ``true``/``false``.
            json_data: Optional body, encoded as JSON.

        Returns:
            The HTTP response object if the request is successful.

        Raises:
            ServerError: If the server responds with an error status (4xx or 5xx).
            TransportError: If a network or request-related error occurs.
        """
        url = f"{self.path_prefix}/{path.lstrip('/')}"
        encoded = encode_params(params) if params else None
        logger.debug(f"{method} request to {self.base_url}{url} with params: {encoded}")
        try:
            response = self.client.request(method, url, params=encoded, json=json_data)
        except httpx.RequestError as e:
            logger.error(f"Request error for {self.base_url}{url}: {str(e)}")
            raise TransportError(f"Request error for {self.base_url}{url}: {str(e)}") from e

        if response.is_error:
            logger.error(f"HTTP error {response.status_code} for {response.request.url}: {response.text[:200]}")
            raise error_from_response(response)
        logger.debug(f"{method} request to {self.base_url}{url} successful with status: {response.status_code}")
        return response

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return self.request("GET", path, params=params)

    def post(self, path: str, json_data: Any = None, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return self.request("POST", path, params=params, json_data=json_data)

    def put(self, path: str, json_data: Any = None, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return self.request("PUT", path, params=params, json_data=json_data)

    def patch(self, path: str, json_data: Any = None, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return self.request("PATCH", path, params=params, json_data=json_data)

    def delete(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return self.request("DELETE", path, params=params)

    def get_json(self, response: httpx.Response) -> Dict[str, Any]:
        """
        Decodes a response envelope.

        Empty bodies decode to ``{}``. A body flagged with ``"error": true`` is
        treated as a failure even when the status code is 2xx.

        Raises:
            ProtocolViolation: If the body is not a JSON object.
            ServerError: If the envelope reports an error.
        """
        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"Failed to decode JSON from {response.request.url}: {e}")
            raise ProtocolViolation(f"Got an invalid response from the server: {e}") from e
        if not isinstance(body, dict):
            raise ProtocolViolation("Got an invalid response from the server: expected a JSON object")
        if body.get("error") is True:
            logger.error(f"Error envelope with HTTP {response.status_code} for {response.request.url}: {response.text[:200]}")
            raise error_from_response(response)
        return body

    def close(self):
        """
        Closes the underlying HTTP client.

        This method should be called to release network resources when the connection is no longer needed.
        """
        logger.debug(f"Closing HttpConnection for base URL: {self.base_url}")
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
