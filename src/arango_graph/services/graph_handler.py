"""Graph operations on top of an :class:`HttpConnection`."""

from collections.abc import Mapping
from typing import Any, Optional, Union

from loguru import logger

from ..domain.exceptions import ProtocolViolation, UnsupportedOperation
from ..domain.models import (
    ENTRY_ID,
    ENTRY_KEY,
    ENTRY_REV,
    Edge,
    Graph,
    OperationKind,
    ReadOptions,
    Vertex,
    resolve_operation_params,
)
from ..domain.models.options import OptionsArg
from ..domain.utils import build_url
from .connection import HttpConnection

URL_GRAPH = "/_api/graph"
URLPART_VERTEX = "vertex"
URLPART_EDGE = "edge"

ENTRY_GRAPH = "graph"
ENTRY_VERTEX = "vertex"
ENTRY_EDGE = "edge"

OPTION_VERTICES = "vertices"
OPTION_EDGES = "edges"

ReadOptionsArg = Union[ReadOptions, Mapping[str, Any], None]

# Generic document-handler operations that have no meaning on a graph,
# mapped to the graph methods to use instead.
_DOCUMENT_OPERATIONS: dict[str, Optional[str]] = {
    "add": "save_vertex() or save_edge()",
    "save": "save_vertex() or save_edge()",
    "get": "get_vertex() or get_edge()",
    "get_by_id": "get_vertex()",
    "get_all_ids": None,
    "get_by_example": None,
    "update": "update_vertex() or update_edge()",
    "replace": "replace_vertex() or replace_edge()",
    "update_by_id": "update_vertex() or update_edge()",
    "replace_by_id": "replace_vertex() or replace_edge()",
    "delete": "remove_vertex() or remove_edge()",
    "remove": "remove_vertex() or remove_edge()",
    "delete_by_id": "remove_vertex() or remove_edge()",
    "remove_by_id": "remove_vertex() or remove_edge()",
}
_DOCUMENT_OPERATIONS.update(
    {
        "getById": _DOCUMENT_OPERATIONS["get_by_id"],
        "getAllIds": None,
        "getByExample": None,
        "updateById": _DOCUMENT_OPERATIONS["update_by_id"],
        "replaceById": _DOCUMENT_OPERATIONS["replace_by_id"],
        "deleteById": _DOCUMENT_OPERATIONS["delete_by_id"],
        "removeById": _DOCUMENT_OPERATIONS["remove_by_id"],
    }
)


def _unwrap(body: Mapping[str, Any], entry: str) -> dict[str, Any]:
    value = body.get(entry)
    if not isinstance(value, dict):
        raise ProtocolViolation(
            f"Got an invalid response from the server: missing '{entry}' entry"
        )
    return value


class GraphHandler:
    """
    Manages graphs and their vertices and edges by issuing the matching
    HTTP requests to the server.

    The handler only exposes graph operations. Generic document operations
    (``add``, ``get``, ``update``, ``delete``...) are not available and raise
    :class:`UnsupportedOperation` when looked up.
    """

    def __init__(self, connection: HttpConnection):
        self.connection = connection

    def __getattr__(self, name: str) -> Any:
        if name in _DOCUMENT_OPERATIONS:
            raise UnsupportedOperation(name, _DOCUMENT_OPERATIONS[name])
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def _element_url(self, graph_name: str, part: str, element_id: Any = None) -> str:
        if element_id is None:
            return build_url(URL_GRAPH, graph_name, part)
        return build_url(URL_GRAPH, graph_name, part, element_id)

    # ------------------------------------------------------------------
    # Graphs
    # ------------------------------------------------------------------
    def create_graph(self, graph: Graph) -> dict[str, Any]:
        """
        Create a graph from the given descriptor.

        The server-assigned id and revision are copied into ``graph``.

        Returns:
            The created graph's attributes.

        Raises:
            ServerError: If the graph cannot be created (duplicate name,
                invalid collection names...).
            ProtocolViolation: If the server does not return the graph id.
        """
        params = {
            ENTRY_KEY: graph.key,
            OPTION_VERTICES: graph.vertices,
            OPTION_EDGES: graph.edges,
        }
        response = self.connection.post(URL_GRAPH, json_data=params, params=params)
        entry = _unwrap(self.connection.get_json(response), ENTRY_GRAPH)

        if ENTRY_ID not in entry:
            raise ProtocolViolation("Got an invalid response from the server: missing _id")
        graph.internal_id = entry[ENTRY_ID]
        graph.revision = entry.get(ENTRY_REV)
        logger.info(f"Created graph '{graph.key}' ({graph.vertices} / {graph.edges})")
        return graph.get_all()

    def drop_graph(self, graph_name: str) -> bool:
        """Drop a graph together with its vertex and edge collections."""
        response = self.connection.delete(build_url(URL_GRAPH, graph_name))
        self.connection.get_json(response)
        logger.info(f"Dropped graph '{graph_name}'")
        return True

    def properties(self, graph_name: str) -> dict[str, Any]:
        """Return the graph's attributes as stored on the server."""
        response = self.connection.get(build_url(URL_GRAPH, graph_name))
        return _unwrap(self.connection.get_json(response), ENTRY_GRAPH)

    # ------------------------------------------------------------------
    # Vertices
    # ------------------------------------------------------------------
    def save_vertex(self, graph_name: str, vertex: Vertex) -> Optional[str]:
        """
        Save a vertex to a graph.

        Returns:
            The key of the created vertex.

        Raises:
            ProtocolViolation: If the id returned by the server does not
                match the vertex key.
        """
        response = self.connection.post(
            self._element_url(graph_name, URLPART_VERTEX), json_data=vertex.to_body()
        )
        entry = _unwrap(self.connection.get_json(response), ENTRY_VERTEX)
        vertex.apply_server_identity(entry)
        logger.debug(f"Saved vertex {vertex.internal_id} in graph '{graph_name}'")
        return vertex.key

    def get_vertex(
        self, graph_name: str, vertex_id: Any, options: ReadOptionsArg = None
    ) -> Vertex:
        """Fetch a single vertex.

        ``options`` accepts ``include_internals``, ``ignore_hidden_attributes``
        and ``hidden_attributes``; they control what ``get_all()`` exposes on
        the returned record.
        """
        response = self.connection.get(self._element_url(graph_name, URLPART_VERTEX, vertex_id))
        entry = _unwrap(self.connection.get_json(response), ENTRY_VERTEX)
        return Vertex.from_server(entry, options)

    def replace_vertex(
        self,
        graph_name: str,
        vertex_id: Any,
        vertex: Vertex,
        options: OptionsArg = None,
    ) -> bool:
        """
        Replace an existing vertex.

        If the vertex carries a revision, the server only replaces the stored
        vertex when its revision matches (depending on the policy).

        Raises:
            InvalidOption: If the policy is invalid; nothing is sent.
            RevisionConflict: If the revision check fails on the server.
            ProtocolViolation: If the returned id does not match the vertex.
        """
        params = resolve_operation_params(
            options, self.connection, OperationKind.REPLACE, revision=vertex.revision
        )
        response = self.connection.put(
            self._element_url(graph_name, URLPART_VERTEX, vertex_id),
            json_data=vertex.to_body(),
            params=params,
        )
        entry = _unwrap(self.connection.get_json(response), ENTRY_VERTEX)
        vertex.apply_server_identity(entry)
        return True

    def update_vertex(
        self,
        graph_name: str,
        vertex_id: Any,
        vertex: Vertex,
        options: OptionsArg = None,
    ) -> bool:
        """
        Partially update an existing vertex with the attributes of ``vertex``.

        ``keepNull`` (default true) tells the server whether null attributes
        are stored as null or remove the attribute.
        """
        params = resolve_operation_params(
            options,
            self.connection,
            OperationKind.UPDATE,
            revision=vertex.revision,
            keep_null=True,
        )
        response = self.connection.patch(
            self._element_url(graph_name, URLPART_VERTEX, vertex_id),
            json_data=vertex.to_body(),
            params=params,
        )
        self.connection.get_json(response)
        return True

    def remove_vertex(
        self,
        graph_name: str,
        vertex_id: Any,
        revision: Optional[str] = None,
        options: OptionsArg = None,
    ) -> bool:
        """Remove a vertex, optionally only if it still has ``revision``."""
        params = resolve_operation_params(
            options, self.connection, OperationKind.DELETE, revision=revision
        )
        response = self.connection.delete(
            self._element_url(graph_name, URLPART_VERTEX, vertex_id), params=params
        )
        self.connection.get_json(response)
        return True

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------
    def save_edge(
        self,
        graph_name: str,
        from_: str,
        to: str,
        label: Optional[str],
        edge: Edge,
    ) -> Optional[str]:
        """
        Save an edge between two vertices.

        ``from_`` and ``to`` are collection-qualified vertex ids. A non-null
        ``label`` is stored in the reserved ``$label`` attribute.

        Returns:
            The key of the created edge.
        """
        if label is not None:
            edge.set_label(label)
        edge.from_ = from_
        edge.to = to

        response = self.connection.post(
            self._element_url(graph_name, URLPART_EDGE), json_data=edge.to_body()
        )
        entry = _unwrap(self.connection.get_json(response), ENTRY_EDGE)
        edge.apply_server_identity(entry)
        logger.debug(f"Saved edge {edge.internal_id} ({from_} -> {to}) in graph '{graph_name}'")
        return edge.key

    def get_edge(
        self, graph_name: str, edge_id: Any, options: ReadOptionsArg = None
    ) -> Edge:
        """Fetch a single edge. See :meth:`get_vertex` for ``options``."""
        response = self.connection.get(self._element_url(graph_name, URLPART_EDGE, edge_id))
        entry = _unwrap(self.connection.get_json(response), ENTRY_EDGE)
        return Edge.from_server(entry, options)

    def replace_edge(
        self,
        graph_name: str,
        edge_id: Any,
        label: Optional[str],
        edge: Edge,
        options: OptionsArg = None,
    ) -> bool:
        """Replace an existing edge. Same revision semantics as :meth:`replace_vertex`."""
        params = resolve_operation_params(
            options, self.connection, OperationKind.REPLACE, revision=edge.revision
        )
        if label is not None:
            edge.set_label(label)

        response = self.connection.put(
            self._element_url(graph_name, URLPART_EDGE, edge_id),
            json_data=edge.to_body(),
            params=params,
        )
        entry = _unwrap(self.connection.get_json(response), ENTRY_EDGE)
        edge.apply_server_identity(entry)
        return True

    def update_edge(
        self,
        graph_name: str,
        edge_id: Any,
        label: Optional[str],
        edge: Edge,
        options: OptionsArg = None,
    ) -> bool:
        """Partially update an existing edge. See :meth:`update_vertex`."""
        params = resolve_operation_params(
            options,
            self.connection,
            OperationKind.UPDATE,
            revision=edge.revision,
            keep_null=True,
        )
        if label is not None:
            edge.set_label(label)

        response = self.connection.patch(
            self._element_url(graph_name, URLPART_EDGE, edge_id),
            json_data=edge.to_body(),
            params=params,
        )
        self.connection.get_json(response)
        return True

    def remove_edge(
        self,
        graph_name: str,
        edge_id: Any,
        revision: Optional[str] = None,
        options: OptionsArg = None,
    ) -> bool:
        params = resolve_operation_params(
            options, self.connection, OperationKind.DELETE, revision=revision
        )
        response = self.connection.delete(
            self._element_url(graph_name, URLPART_EDGE, edge_id), params=params
        )
        self.connection.get_json(response)
        return True
