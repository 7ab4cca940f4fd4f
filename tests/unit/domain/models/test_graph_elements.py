import pytest

from arango_graph.domain.exceptions import ProtocolViolation
from arango_graph.domain.models import (
    Edge,
    Graph,
    ReadOptions,
    Vertex,
    split_document_id,
)


def test_graph_get_all_omits_unset_identity():
    graph = Graph(key="g", vertices="v", edges="e")
    assert graph.get_all() == {"_key": "g", "vertices": "v", "edges": "e"}


def test_graph_accepts_server_field_names():
    graph = Graph.model_validate(
        {"_key": "g", "vertices": "v", "edges": "e", "_id": "_graphs/g", "_rev": "7"}
    )
    assert graph.internal_id == "_graphs/g"
    assert graph.revision == "7"


@pytest.mark.parametrize(
    "document_id,expected",
    [
        ("people/alice", ("people", "alice")),
        ("people/a/b", ("people", "a/b")),
    ],
)
def test_split_document_id(document_id, expected):
    assert split_document_id(document_id) == expected


@pytest.mark.parametrize("document_id", [None, "", "alice", "/alice", "people/", 12])
def test_split_document_id_rejects_malformed(document_id):
    with pytest.raises(ProtocolViolation):
        split_document_id(document_id)


class TestDocument:
    def test_from_server_separates_internal_fields(self):
        vertex = Vertex.from_server(
            {"_id": "people/alice", "_key": "alice", "_rev": "3", "name": "Alice"}
        )
        assert vertex.internal_id == "people/alice"
        assert vertex.key == "alice"
        assert vertex.revision == "3"
        assert vertex.attributes == {"name": "Alice"}
        assert vertex.get_all() == {"name": "Alice"}

    def test_get_all_with_internals_and_hidden_attributes(self):
        options = ReadOptions(include_internals=True, hidden_attributes=["password"])
        vertex = Vertex.from_server(
            {"_id": "users/1", "_key": "1", "_rev": "9", "name": "n", "password": "p"},
            options,
        )
        assert vertex.get_all() == {"name": "n", "_id": "users/1", "_key": "1", "_rev": "9"}
        assert vertex.get_all(include_internals=False) == {"name": "n"}

    def test_ignore_hidden_attributes_exposes_everything(self):
        vertex = Vertex.from_server(
            {"name": "n", "password": "p"},
            {"hidden_attributes": ["password"], "ignore_hidden_attributes": True},
        )
        assert vertex.get_all() == {"name": "n", "password": "p"}

    def test_set_and_get_route_reserved_names(self):
        vertex = Vertex()
        vertex.set("_key", "k")
        vertex.set("_rev", "1")
        vertex.set("color", "red")
        assert vertex.key == "k"
        assert vertex.get("_rev") == "1"
        assert vertex.get("color") == "red"
        assert vertex.get("missing", "default") == "default"
        assert vertex.attributes == {"color": "red"}

    def test_to_body_includes_key_when_set(self):
        assert Vertex(attributes={"a": 1}).to_body() == {"a": 1}
        assert Vertex(key="k", revision="2", attributes={"a": 1}).to_body() == {"a": 1, "_key": "k"}


class TestApplyServerIdentity:
    def test_adopts_server_key_when_unset(self):
        vertex = Vertex()
        vertex.apply_server_identity({"_id": "people/42", "_rev": "5"})
        assert (vertex.internal_id, vertex.key, vertex.revision) == ("people/42", "42", "5")

    def test_matching_key_is_accepted(self):
        vertex = Vertex(key="alice")
        vertex.apply_server_identity({"_id": "people/alice", "_key": "alice", "_rev": "5"})
        assert vertex.revision == "5"

    def test_mismatched_key_raises(self):
        vertex = Vertex(key="alice")
        with pytest.raises(ProtocolViolation):
            vertex.apply_server_identity({"_id": "people/bob", "_rev": "5"})

    def test_other_collection_with_same_key_is_accepted(self):
        vertex = Vertex(internal_id="people/alice", key="alice", revision="4")
        vertex.apply_server_identity({"_id": "users/alice", "_rev": "5"})
        assert (vertex.internal_id, vertex.key, vertex.revision) == ("users/alice", "alice", "5")

    def test_missing_id_raises(self):
        with pytest.raises(ProtocolViolation):
            Vertex(key="a").apply_server_identity({"_rev": "5"})


class TestEdge:
    def test_from_server_reads_endpoints(self):
        edge = Edge.from_server(
            {"_id": "rel/1", "_key": "1", "_rev": "2", "_from": "v/a", "_to": "v/b", "$label": "knows"}
        )
        assert (edge.from_, edge.to) == ("v/a", "v/b")
        assert edge.label == "knows"
        assert edge.attributes == {"$label": "knows"}

    def test_to_body_forces_endpoints(self):
        edge = Edge(key="e", from_="v/a", to="v/b")
        edge.set_label("knows")
        assert edge.to_body() == {"$label": "knows", "_key": "e", "_from": "v/a", "_to": "v/b"}

    def test_internals_include_endpoints(self):
        edge = Edge(from_="v/a", to="v/b")
        assert edge.get_all(include_internals=True) == {"_from": "v/a", "_to": "v/b"}
        edge.set("_from", "v/c")
        assert edge.get("_from") == "v/c"
