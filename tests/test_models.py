"""Tests for the snapshot models."""

import pytest
from pydantic import ValidationError

from treecheck import Edge, GraphSnapshot, Vertex


class TestVertex:

    def test_defaults(self):
        vertex = Vertex(id=1)
        assert vertex.value is None
        assert vertex.x is None and vertex.y is None
        assert vertex.red is False

    def test_val_alias(self):
        assert Vertex.model_validate({"id": 1, "val": 7}).value == 7

    def test_value_wins_over_val(self):
        vertex = Vertex.model_validate({"id": 1, "value": 3, "val": 7})
        assert vertex.value == 3

    def test_label_prefers_value(self):
        assert Vertex(id=1, value=42).label == "42"
        assert Vertex(id="a").label == "a"

    def test_ids_keep_their_type(self):
        assert Vertex(id=1).id == 1
        assert Vertex(id="1").id == "1"


class TestEdge:

    def test_generated_id(self):
        edge = Edge(source=1, target=2)
        assert isinstance(edge.id, str)
        assert edge.id.startswith("e")
        assert Edge(source=1, target=2).id != edge.id

    def test_from_to(self):
        edge = Edge.model_validate({"from": 1, "to": 2})
        assert (edge.source, edge.target) == (1, 2)

    def test_resolved_endpoints(self):
        edge = Edge.model_validate({"source": {"id": 1, "x": 5}, "target": {"id": 2, "index": 0}})
        assert (edge.source, edge.target) == (1, 2)

    def test_endpoints_unordered(self):
        assert Edge(source=1, target=2).endpoints() == Edge(source=2, target=1).endpoints()

    def test_missing_target(self):
        with pytest.raises(ValidationError):
            Edge.model_validate({"source": 1})


class TestGraphSnapshot:

    def test_canvas_names(self):
        snapshot = GraphSnapshot.model_validate({
            "vertices": [{"id": 1}, {"id": 2}],
            "links": [{"source": 1, "target": 2}],
            "rootId": 1,
        })
        assert len(snapshot.edges) == 1
        assert snapshot.root_id == 1

    def test_duplicate_vertex_id(self):
        with pytest.raises(ValueError, match="Duplicate vertex id"):
            GraphSnapshot(vertices=[Vertex(id=1), Vertex(id=1)])

    def test_dangling_source(self):
        with pytest.raises(ValueError, match="non-existent source"):
            GraphSnapshot(vertices=[Vertex(id=1)], edges=[Edge(source=9, target=1)])

    def test_int_and_str_ids_are_distinct(self):
        with pytest.raises(ValueError):
            GraphSnapshot(vertices=[Vertex(id=1)], edges=[Edge(source="1", target=1)])

    def test_capture_copies(self):
        vertex = Vertex(id=1, x=0.0, y=0.0)
        snapshot = GraphSnapshot.capture([vertex], [], 1)
        snapshot.vertices[0].x = 99.0
        assert vertex.x == 0.0

    def test_capture_accepts_mixed_input(self):
        snapshot = GraphSnapshot.capture([Vertex(id=1), {"id": 2}], [{"from": 1, "to": 2}])
        assert snapshot.vertex_ids() == [1, 2]
        assert snapshot.edges[0].target == 2

    def test_vertex_map_order(self):
        snapshot = GraphSnapshot.capture([{"id": 3}, {"id": 1}, {"id": 2}], [])
        assert list(snapshot.vertex_map()) == [3, 1, 2]

    def test_to_json_dict(self):
        snapshot = GraphSnapshot.capture([{"id": 1, "value": 5}], [], 1)
        data = snapshot.to_json_dict()
        assert data["root_id"] == 1
        assert data["edges"] == []
        assert data["vertices"][0]["value"] == 5
