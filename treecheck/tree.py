"""
Rooted-tree validation.

Edges are directed (source is the parent, target the child). Checks run in
a fixed order and the first failure wins:
1. empty graph is valid
2. a root is required unless the graph is a single bare vertex
3. the root must be one of the vertices
4. no vertex may have two parents
5. no cycle reachable from the root
6. every vertex reachable from the root
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Optional, Union

from .models import Edge, GraphSnapshot, Vertex, VertexId
from .traversal import Walk
from .verdict import ReasonCode, Verdict, Violation

logger = logging.getLogger(__name__)


def validate_tree(
    vertices: Iterable[Union[Vertex, Mapping]],
    edges: Iterable[Union[Edge, Mapping]],
    root_id: Optional[VertexId] = None,
) -> Verdict:
    """
    Check whether the directed graph is a tree rooted at `root_id`.

    Raises:
        ValueError: On malformed input (duplicate vertex ids, unknown endpoints)
    """
    snapshot = GraphSnapshot.capture(vertices, edges, root_id)
    verdict = check_tree(snapshot)
    if not verdict.valid:
        logger.debug("Tree check failed: %s %s", verdict.reason_code.value, list(verdict.offending_ids))
    return verdict


def check_tree(snapshot: GraphSnapshot) -> Verdict:
    """Validate an already-captured snapshot."""
    if not snapshot.vertices:
        return Verdict.ok()

    if snapshot.root_id is None:
        if len(snapshot.vertices) == 1 and not snapshot.edges:
            return Verdict.ok()
        return Verdict.fail(ReasonCode.NO_ROOT_PROVIDED, snapshot.vertex_ids())

    root_id = snapshot.root_id
    children: dict[VertexId, list[VertexId]] = {vid: [] for vid in snapshot.vertex_ids()}
    if root_id not in children:
        return Verdict.fail(ReasonCode.ROOT_NODE_NOT_FOUND, [root_id], root=root_id)

    walk = Walk(children.__getitem__)
    try:
        # Parents are claimed while the adjacency is built, before any walking
        for edge in snapshot.edges:
            children[edge.source].append(edge.target)
            walk.claim(edge.source, edge.target)
        walk.run(root_id)
    except Violation as violation:
        return violation.verdict

    unreached = walk.unreached(snapshot.vertex_ids())
    if unreached:
        return Verdict.fail(ReasonCode.DISCONNECTED_NODES, unreached)

    return Verdict.ok()
