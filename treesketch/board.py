"""
Puzzle Board - the live graph a single user edits.

This module implements:
- Single board state (one puzzle open at a time)
- O(1) vertex/link lookups via index dictionaries
- The canvas gestures: link, cut, drag (with the root drop zone), toggle colour
- Validation of the current state in tree or BST mode

The board owns the live vertex and link lists. Validators only ever see a
copy taken at the moment of the check.
"""

import logging
from enum import Enum
from typing import Optional, Union

from treecheck import GraphSnapshot, Verdict, Vertex, Edge, validate_bst, validate_tree
from treecheck.models import VertexId
from treecheck.verdict import verdict_summary

from .config import Settings, settings as default_settings
from .layout import bst_layout, clamp
from .puzzle import IdGenerator, new_puzzle

logger = logging.getLogger(__name__)


class BoardMode(str, Enum):
    """Which validator checks the board."""
    TREE = "tree"
    BST = "bst"


class PuzzleBoard:
    """
    Manages the live puzzle: vertices, links and the chosen root.

    Lookups are keyed by the string form of the id so that ids arriving in
    URL paths resolve to the same vertex as ids in JSON bodies.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or default_settings
        self._vertices: list[Vertex] = []
        self._edges: list[Edge] = []
        self._root_id: Optional[VertexId] = None
        self._mode = BoardMode.BST
        self._ids = IdGenerator()

        # O(1) lookup indexes
        self._vertex_index: dict[str, Vertex] = {}  # str(vertex_id) -> Vertex
        self._edge_index: dict[str, Edge] = {}      # str(edge_id) -> Edge

    # --- Index Management ---

    def _rebuild_indexes(self):
        """Rebuild all indexes from the current board state."""
        self._vertex_index = {str(v.id): v for v in self._vertices}
        self._edge_index = {str(e.id): e for e in self._edges}

    # --- Properties ---

    @property
    def vertices(self) -> list[Vertex]:
        return self._vertices

    @property
    def edges(self) -> list[Edge]:
        return self._edges

    @property
    def root_id(self) -> Optional[VertexId]:
        return self._root_id

    @property
    def mode(self) -> BoardMode:
        return self._mode

    @property
    def settings(self) -> Settings:
        return self._settings

    # --- Board Operations ---

    def new_puzzle(
        self,
        size: Optional[int] = None,
        seed: Optional[int] = None,
        mode: Union[BoardMode, str] = BoardMode.BST,
    ) -> GraphSnapshot:
        """Deal a fresh puzzle and forget the previous one."""
        graph = new_puzzle(
            size=size or self._settings.puzzle_size,
            seed=seed,
            width=self._settings.canvas_width,
            height=self._settings.canvas_height,
        )
        self.load(graph, mode=mode)
        logger.info("New %s puzzle with %d nodes", self._mode.value, len(self._vertices))
        return graph

    def load(self, graph: GraphSnapshot, mode: Union[BoardMode, str, None] = None):
        """Replace the board contents with a copy of `graph`."""
        if mode is not None:
            self._mode = BoardMode(mode)
        copy = GraphSnapshot.capture(graph.vertices, graph.edges, graph.root_id)
        self._vertices = copy.vertices
        self._edges = copy.edges
        self._root_id = copy.root_id
        self._ids = IdGenerator()
        self._ids.reserve(i for i in [*copy.vertex_ids(), *(e.id for e in copy.edges)] if isinstance(i, int))
        self._rebuild_indexes()

    def set_mode(self, mode: Union[BoardMode, str]):
        self._mode = BoardMode(mode)

    # --- Vertex Operations ---

    def get_vertex(self, vertex_id: VertexId) -> Optional[Vertex]:
        """Get a vertex by ID (O(1) lookup)."""
        return self._vertex_index.get(str(vertex_id))

    def _require_vertex(self, vertex_id: VertexId) -> Vertex:
        vertex = self.get_vertex(vertex_id)
        if vertex is None:
            raise KeyError(vertex_id)
        return vertex

    def move_vertex(self, vertex_id: VertexId, x: float, y: float) -> Vertex:
        """
        Finish a drag: place the vertex, then apply the root drop zone.

        A vertex dropped inside the zone snaps to its centre and becomes the
        root. Dragging the current root out of the zone unsets it.

        Raises:
            KeyError: If the vertex does not exist
        """
        vertex = self._require_vertex(vertex_id)
        vertex.x = clamp(x, 0, self._settings.canvas_width)
        vertex.y = clamp(y, 0, self._settings.canvas_height)

        zone = self._settings.root_zone
        if zone.contains(vertex.x, vertex.y):
            vertex.x, vertex.y = zone.cx, zone.cy
            self._root_id = vertex.id
            logger.info("New root node is %s", vertex.id)
        elif self._root_id == vertex.id:
            self._root_id = None
            logger.info("Root node unset")

        return vertex

    def toggle_red(self, vertex_id: VertexId) -> Vertex:
        """Flip the cosmetic colour flag of a vertex."""
        vertex = self._require_vertex(vertex_id)
        vertex.red = not vertex.red
        return vertex

    def set_root(self, vertex_id: Optional[VertexId]) -> Optional[VertexId]:
        """Choose the root directly, or clear it with None."""
        if vertex_id is None:
            self._root_id = None
            logger.info("Root node unset")
        else:
            self._root_id = self._require_vertex(vertex_id).id
            logger.info("New root node is %s", self._root_id)
        return self._root_id

    # --- Link Operations ---

    def get_edge(self, edge_id: VertexId) -> Optional[Edge]:
        """Get a link by ID (O(1) lookup)."""
        return self._edge_index.get(str(edge_id))

    def link_exists(self, source_id: VertexId, target_id: VertexId) -> bool:
        """Check for a link between two vertices in either direction."""
        pair = {source_id, target_id}
        return any({e.source, e.target} == pair for e in self._edges)

    def add_link(self, source_id: VertexId, target_id: VertexId) -> Optional[Edge]:
        """
        Link two vertices.

        Returns:
            The new link, or None if the vertices are already linked

        Raises:
            KeyError: If either vertex does not exist
            ValueError: If source and target are the same vertex
        """
        source = self._require_vertex(source_id)
        target = self._require_vertex(target_id)
        if source.id == target.id:
            raise ValueError("Cannot link a node to itself")

        if self.link_exists(source.id, target.id):
            logger.info("Link already exists: %s -> %s. Cancelled.", source.id, target.id)
            return None

        edge = Edge(id=self._ids.gen(), source=source.id, target=target.id)
        self._edges.append(edge)
        self._edge_index[str(edge.id)] = edge
        return edge

    def cut_link(self, edge_id: VertexId) -> bool:
        """Remove a link. Returns False if there is no such link."""
        edge = self._edge_index.pop(str(edge_id), None)
        if edge is None:
            return False
        self._edges = [e for e in self._edges if e is not edge]
        return True

    # --- Solving ---

    def solve(self) -> bool:
        """
        Arrange the board as a solved BST, with the root in the drop zone.

        Uses the current links as parent -> child. Returns False if there is
        nothing to arrange, or the links are not a rooted tree of valued nodes.
        """
        if not self._vertices or any(v.value is None for v in self._vertices):
            return False

        root_id = self._root_id
        if root_id is None:
            targets = {e.target for e in self._edges}
            root_id = next((v.id for v in self._vertices if v.id not in targets), None)
            if root_id is None:
                return False

        verdict = validate_tree(self._vertices, self._edges, root_id)
        if not verdict.valid:
            logger.info("Cannot solve: %s", verdict.message)
            return False

        bst_layout(self._vertices, self._edges, root_id, width=self._settings.canvas_width)
        root = self._require_vertex(root_id)
        zone = self._settings.root_zone
        dx, dy = zone.cx - root.x, zone.cy - root.y
        for vertex in self._vertices:
            vertex.x += dx
            vertex.y += dy
        self._root_id = root_id
        return True

    # --- Validation ---

    def snapshot(self) -> GraphSnapshot:
        """Copy of the current state, safe to hand to a validator."""
        return GraphSnapshot.capture(self._vertices, self._edges, self._root_id)

    def validate(self) -> Verdict:
        """Check the board with the validator for its mode."""
        snapshot = self.snapshot()
        validate = validate_bst if self._mode is BoardMode.BST else validate_tree
        return validate(snapshot.vertices, snapshot.edges, snapshot.root_id)

    def get_state(self) -> dict:
        """Get the board state plus the current verdict for the frontend."""
        verdict = self.validate()
        return {
            "mode": self._mode.value,
            "graph": self.snapshot().to_json_dict(),
            "root_zone": {
                "cx": self._settings.root_zone.cx,
                "cy": self._settings.root_zone.cy,
                "r": self._settings.root_zone.r,
            },
            "node_radius": self._settings.node_radius,
            "verdict": verdict.to_dict(),
            "guide": verdict_summary(verdict),
        }


# Global instance
board = PuzzleBoard()
