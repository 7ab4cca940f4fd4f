"""Pytest configuration and shared fixtures for the test suite."""

import itertools
import json
from typing import Any, Optional
from urllib.parse import parse_qs, unquote

import httpx
import pytest

from arango_graph.config import ConnectionSettings
from arango_graph.services.connection import HttpConnection
from arango_graph.services.graph_handler import GraphHandler


def _error(status: int, error_num: int, message: str) -> httpx.Response:
    return httpx.Response(
        status,
        json={"error": True, "code": status, "errorNum": error_num, "errorMessage": message},
    )


class FakeGraphServer:
    """In-memory stand-in for the server's /_api/graph endpoints.

    Used as the handler of an ``httpx.MockTransport``. Every request is
    recorded in ``requests``.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.graphs: dict[str, dict[str, Any]] = {}
        self.documents: dict[tuple[str, str], dict[str, dict[str, Any]]] = {}
        self._revisions = itertools.count(1000)
        self._keys = itertools.count(1)

    def _next_rev(self) -> str:
        return str(next(self._revisions))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        raw_path, _, raw_query = request.url.raw_path.decode().partition("?")
        segments = [unquote(s) for s in raw_path.strip("/").split("/")]
        if segments and segments[0] == "_db":
            segments = segments[2:]
        query = {k: v[0] for k, v in parse_qs(raw_query).items()}
        body = json.loads(request.content) if request.content else None

        if segments[:2] != ["_api", "graph"]:
            return _error(404, 404, "unknown path")
        rest = segments[2:]
        if not rest:
            return self._create_graph(query)
        graph_name = rest[0]
        if graph_name not in self.graphs:
            return _error(404, 1924, "graph not found")
        if len(rest) == 1:
            if request.method == "GET":
                return httpx.Response(200, json={"graph": self.graphs[graph_name], "error": False, "code": 200})
            if request.method == "DELETE":
                del self.graphs[graph_name]
                return httpx.Response(200, json={"deleted": True, "error": False, "code": 200})
        kind = rest[1]
        element_id = rest[2] if len(rest) > 2 else None
        return self._element(request.method, graph_name, kind, element_id, query, body)

    def _create_graph(self, query: dict[str, str]) -> httpx.Response:
        name = query["_key"]
        if name in self.graphs:
            return _error(409, 1925, "graph already exists")
        graph = {
            "_id": f"_graphs/{name}",
            "_key": name,
            "_rev": self._next_rev(),
            "vertices": query["vertices"],
            "edges": query["edges"],
        }
        self.graphs[name] = graph
        self.documents[(name, "vertex")] = {}
        self.documents[(name, "edge")] = {}
        return httpx.Response(201, json={"graph": graph, "error": False, "code": 201})

    def _collection(self, graph_name: str, kind: str) -> str:
        return self.graphs[graph_name]["vertices" if kind == "vertex" else "edges"]

    def _conflict(self, stored: dict[str, Any], query: dict[str, str]) -> bool:
        return (
            "rev" in query
            and query.get("policy") != "last"
            and query["rev"] != stored["_rev"]
        )

    def _element(
        self,
        method: str,
        graph_name: str,
        kind: str,
        element_id: Optional[str],
        query: dict[str, str],
        body: Any,
    ) -> httpx.Response:
        store = self.documents[(graph_name, kind)]
        collection = self._collection(graph_name, kind)

        if method == "POST":
            key = body.get("_key") or str(next(self._keys))
            document = {**body, "_id": f"{collection}/{key}", "_key": key, "_rev": self._next_rev()}
            store[key] = document
            identity = {k: document[k] for k in ("_id", "_key", "_rev")}
            return httpx.Response(202, json={kind: identity, "error": False, "code": 202})

        key = element_id.split("/", 1)[-1]
        if key not in store:
            return _error(404, 1202, "document not found")
        stored = store[key]

        if method == "GET":
            return httpx.Response(200, json={kind: stored, "error": False, "code": 200})
        if self._conflict(stored, query):
            return _error(412, 1200, "precondition failed")
        if method == "DELETE":
            del store[key]
            return httpx.Response(202, json={"deleted": True, "error": False, "code": 202})

        body = {k: v for k, v in body.items() if k not in ("_id", "_key", "_rev")}
        if method == "PUT":
            kept = {k: stored[k] for k in ("_from", "_to") if k in stored}
            document = {**kept, **body}
        else:
            document = {**stored, **body}
            if query.get("keepNull") == "false":
                document = {k: v for k, v in document.items() if v is not None}
        document.update({"_id": stored["_id"], "_key": key, "_rev": self._next_rev()})
        store[key] = document
        identity = {k: document[k] for k in ("_id", "_key", "_rev")}
        return httpx.Response(202, json={kind: identity, "error": False, "code": 202})


@pytest.fixture
def fake_server() -> FakeGraphServer:
    return FakeGraphServer()


@pytest.fixture
def settings() -> ConnectionSettings:
    return ConnectionSettings(endpoint="http://arango.test:8529")


@pytest.fixture
def connection(fake_server, settings):
    conn = HttpConnection(settings, transport=httpx.MockTransport(fake_server))
    yield conn
    conn.close()


@pytest.fixture
def handler(connection) -> GraphHandler:
    return GraphHandler(connection)
