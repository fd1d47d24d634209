"""
Graph snapshot models: vertices, edges and the designated root.

Edges use `source` and `target`, the names the D3 canvas uses. The
spellings `from`/`to` are accepted as well, and endpoints that a force
simulation resolved to vertex objects are reduced back to their ids.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union
from pydantic import BaseModel, Field, model_validator
import uuid


VertexId = Union[int, str]


def generate_edge_id() -> str:
    """Generate a unique edge ID."""
    return f"e{uuid.uuid4().hex[:8]}"


class Vertex(BaseModel):
    """A vertex on the canvas."""
    id: VertexId
    value: Optional[Union[int, float]] = None  # BST key, also drives the rendered radius
    x: Optional[float] = None
    y: Optional[float] = None
    red: bool = False  # Cosmetic, ignored by validators

    @model_validator(mode='before')
    @classmethod
    def convert_short_value(cls, data: Any) -> Any:
        """Accept the short `val` key for the BST key."""
        if isinstance(data, Mapping) and 'val' in data and 'value' not in data:
            data = dict(data)
            data['value'] = data.pop('val')
        return data

    @property
    def label(self) -> str:
        """Text shown for this vertex in diagnostics (its value when it has one)."""
        return str(self.value) if self.value is not None else str(self.id)


class Edge(BaseModel):
    """
    A link between two vertices.

    Also accepts `from`/`to` as input spellings of `source`/`target`.
    """
    id: Union[int, str] = Field(default_factory=generate_edge_id)
    source: VertexId
    target: VertexId

    @model_validator(mode='before')
    @classmethod
    def normalize_endpoints(cls, data: Any) -> Any:
        """Map `from`/`to` onto source/target and resolved endpoints onto ids."""
        if isinstance(data, Mapping):
            data = dict(data)
            # Handle 'from' -> 'source' (from is a Python keyword)
            if 'from' in data and 'source' not in data:
                data['source'] = data.pop('from')
            if 'to' in data and 'target' not in data:
                data['target'] = data.pop('to')
            # d3.forceLink replaces ids with the vertex objects themselves
            for key in ('source', 'target'):
                endpoint = data.get(key)
                if isinstance(endpoint, Mapping) and 'id' in endpoint:
                    data[key] = endpoint['id']
        return data

    def endpoints(self) -> frozenset:
        """The unordered pair of vertex ids this edge joins."""
        return frozenset((self.source, self.target))


class GraphSnapshot(BaseModel):
    """
    Vertices, edges and the designated root for one validation pass.

    A snapshot is built fresh (by copy) before each call and thrown away
    afterwards. Vertex ids must be unique and every edge must join known
    vertices; anything else is a caller bug and fails construction.
    """
    vertices: list[Vertex] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)
    root_id: Optional[VertexId] = None

    @model_validator(mode='before')
    @classmethod
    def accept_links(cls, data: Any) -> Any:
        """Accept the canvas naming (`links`, `rootId`) as well."""
        if isinstance(data, Mapping):
            data = dict(data)
            if 'links' in data and 'edges' not in data:
                data['edges'] = data.pop('links')
            if 'rootId' in data and 'root_id' not in data:
                data['root_id'] = data.pop('rootId')
        return data

    @model_validator(mode='after')
    def check_references(self) -> "GraphSnapshot":
        """Reject duplicate vertex ids and edges pointing outside the snapshot."""
        seen: set = set()
        for vertex in self.vertices:
            if vertex.id in seen:
                raise ValueError(f"Duplicate vertex id: {vertex.id!r}")
            seen.add(vertex.id)

        for edge in self.edges:
            if edge.source not in seen:
                raise ValueError(f"Edge {edge.id!r} references non-existent source vertex: {edge.source!r}")
            if edge.target not in seen:
                raise ValueError(f"Edge {edge.id!r} references non-existent target vertex: {edge.target!r}")
        return self

    @classmethod
    def capture(
        cls,
        vertices: Iterable[Union[Vertex, Mapping]],
        edges: Iterable[Union[Edge, Mapping]],
        root_id: Optional[VertexId] = None,
    ) -> "GraphSnapshot":
        """Copy caller-owned vertices and edges into a fresh snapshot."""
        return cls(
            vertices=[_copy(Vertex, v) for v in vertices],
            edges=[_copy(Edge, e) for e in edges],
            root_id=root_id,
        )

    def vertex_map(self) -> dict[VertexId, Vertex]:
        """Index vertices by id, in vertex order."""
        return {v.id: v for v in self.vertices}

    def vertex_ids(self) -> list[VertexId]:
        return [v.id for v in self.vertices]

    def to_json_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "vertices": [v.model_dump() for v in self.vertices],
            "edges": [e.model_dump() for e in self.edges],
            "root_id": self.root_id,
        }


def _copy(model: type[BaseModel], item: Union[BaseModel, Mapping]) -> Any:
    if isinstance(item, model):
        return item.model_copy()
    if isinstance(item, BaseModel):
        return model.model_validate(item.model_dump())
    return model.model_validate(item)
