"""
Binary-search-tree validation for graphs drawn on a plane.

Links are undirected. A child sits strictly below its parent, to its left
or to its right; the tree shape is whatever the layout says it is.
"""

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Optional, Union

from .models import Edge, GraphSnapshot, Vertex, VertexId
from .traversal import Walk
from .verdict import BST_MESSAGES, LINK_MESSAGES, ReasonCode, Verdict, Violation

logger = logging.getLogger(__name__)

Adjacency = dict[VertexId, dict[VertexId, None]]


class GeometricChildren:
    """
    Child selection by position: candidates are linked vertices below the parent.

    Remembers the inferred left and right child of every expanded vertex
    for the ordering pass.
    """

    def __init__(self, vertices: dict[VertexId, Vertex], adjacency: Adjacency):
        self.vertices = vertices
        self.adjacency = adjacency
        self.left: dict[VertexId, VertexId] = {}
        self.right: dict[VertexId, VertexId] = {}

    def __call__(self, parent_id: VertexId) -> list[VertexId]:
        parent = self.vertices[parent_id]
        candidates = [
            self.vertices[vid] for vid in self.adjacency[parent_id]
            if self.vertices[vid].y > parent.y
        ]

        left = [c for c in candidates if c.x < parent.x]
        right = [c for c in candidates if c.x > parent.x]
        centre = [c for c in candidates if c.x == parent.x]

        if centre:
            raise Violation(Verdict.fail(
                ReasonCode.GEOMETRY_VIOLATION,
                [parent.id, centre[0].id],
                child=centre[0].label,
            ))
        for side, group in (("left", left), ("right", right)):
            if len(group) > 1:
                raise Violation(Verdict.fail(
                    ReasonCode.TOO_MANY_CHILDREN,
                    [parent.id, *(c.id for c in group)],
                    parent=parent.label,
                    side=side,
                ))

        chosen = []
        if left:
            self.left[parent.id] = left[0].id
            chosen.append(left[0].id)
        if right:
            self.right[parent.id] = right[0].id
            chosen.append(right[0].id)
        return chosen


def validate_bst(
    vertices: Iterable[Union[Vertex, Mapping]],
    edges: Iterable[Union[Edge, Mapping]],
    root_id: Optional[VertexId] = None,
) -> Verdict:
    """
    Check whether the drawing is a binary search tree rooted at `root_id`.

    Raises:
        ValueError: On malformed input (duplicate vertex ids, unknown
            endpoints, vertices without value or position)
    """
    snapshot = GraphSnapshot.capture(vertices, edges, root_id)
    verdict = check_bst(snapshot)
    if not verdict.valid:
        logger.debug("BST check failed: %s %s", verdict.reason_code.value, list(verdict.offending_ids))
    return verdict


def check_bst(snapshot: GraphSnapshot) -> Verdict:
    for vertex in snapshot.vertices:
        for field in ("value", "x", "y"):
            if getattr(vertex, field) is None:
                raise ValueError(f"Vertex {vertex.id!r} has no {field}")

    if not snapshot.vertices:
        return Verdict.ok("Empty graph is a valid BST.")

    if snapshot.root_id is None:
        if len(snapshot.vertices) == 1 and not snapshot.edges:
            return Verdict.ok("Single node is a valid BST.")
        return Verdict.fail(
            ReasonCode.NO_ROOT_PROVIDED, snapshot.vertex_ids(), overrides=BST_MESSAGES
        )

    root_id = snapshot.root_id
    vertices = snapshot.vertex_map()
    if root_id not in vertices:
        return Verdict.fail(ReasonCode.ROOT_NODE_NOT_FOUND, [root_id], root=root_id)

    owners: dict = {}
    for vertex in snapshot.vertices:
        if vertex.value in owners:
            return Verdict.fail(
                ReasonCode.DUPLICATE_VALUES,
                [owners[vertex.value].id, vertex.id],
                value=vertex.label,
            )
        owners[vertex.value] = vertex

    # Symmetric, in edge-list order; repeated links collapse here
    adjacency: Adjacency = {vid: {} for vid in vertices}
    for edge in snapshot.edges:
        adjacency[edge.source][edge.target] = None
        adjacency[edge.target][edge.source] = None

    children = GeometricChildren(vertices, adjacency)
    walk = Walk(children, breadth_first=True, label=lambda vid: vertices[vid].label)
    try:
        walk.run(root_id)
    except Violation as violation:
        return violation.verdict

    unreached = walk.unreached(snapshot.vertex_ids())
    if unreached:
        return Verdict.fail(ReasonCode.DISCONNECTED_NODES, unreached, overrides=BST_MESSAGES)

    violation = _check_ordering(root_id, vertices, children, adjacency)
    if violation is not None:
        return violation

    return _check_links(snapshot, vertices, walk.parents)


def _check_ordering(
    root_id: VertexId,
    vertices: dict[VertexId, Vertex],
    children: GeometricChildren,
    adjacency: Adjacency,
) -> Optional[Verdict]:
    """Min/max-bound check over the inferred tree, pre-order, left before right."""
    # Bounds are carried as (value, label) so messages can name the ancestor
    stack = [(root_id, (-math.inf, None), (math.inf, None))]

    while stack:
        vid, low, high = stack.pop()
        vertex = vertices[vid]

        if vertex.value <= low[0]:
            return Verdict.fail(
                ReasonCode.NOT_A_BST, [vid],
                node=vertex.label, relation="larger than", bound=low[1],
            )
        if vertex.value >= high[0]:
            return Verdict.fail(
                ReasonCode.NOT_A_BST, [vid],
                node=vertex.label, relation="smaller than", bound=high[1],
            )

        left = children.left.get(vid)
        right = children.right.get(vid)
        for child in (left, right):
            if child is not None and child not in adjacency[vid]:
                return Verdict.fail(
                    ReasonCode.ADJACENCY_VIOLATION, [vid, child],
                    child=vertices[child].label, parent=vertex.label,
                )

        bound = (vertex.value, vertex.label)
        if right is not None:
            stack.append((right, bound, high))
        if left is not None:
            stack.append((left, low, bound))

    return None


def _check_links(
    snapshot: GraphSnapshot,
    vertices: dict[VertexId, Vertex],
    parents: dict[VertexId, VertexId],
) -> Verdict:
    """Every link must be exactly one inferred parent/child link."""
    tree_links = {frozenset((parent, child)) for child, parent in parents.items()}
    seen: set[frozenset] = set()
    for edge in snapshot.edges:
        pair = edge.endpoints()
        if pair in seen:
            kind = "repeated"
        elif pair not in tree_links:
            kind = "level"
        else:
            seen.add(pair)
            continue
        return Verdict.fail(
            ReasonCode.GEOMETRY_VIOLATION,
            [edge.source, edge.target],
            message=LINK_MESSAGES[kind].format(
                a=vertices[edge.source].label, b=vertices[edge.target].label
            ),
        )
    return Verdict.ok()
