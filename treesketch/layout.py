"""
Layout algorithms for puzzle vertices.

Provides the placements the canvas needs around the validators:
- Force: force-directed scatter used when a new puzzle is dealt
- BST: the solved arrangement (in-order left to right, depth top to bottom)

All layout functions modify vertices in-place and return the modified list.
The validators never call into this module.
"""

import math
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from treecheck.models import Edge, Vertex, VertexId


# Default layout parameters
DEFAULT_LINK_DISTANCE = 200
DEFAULT_SPACING_Y = 100
DEFAULT_START_Y = 100
DEFAULT_MARGIN = 30


def clamp(value: float, low: float, high: float) -> float:
    """Clamp `value` into [low, high]."""
    return low if value < low else high if value > high else value


def force_layout(
    vertices: list["Vertex"],
    edges: list["Edge"],
    width: float,
    height: float,
    iterations: int = 300,
    repulsion: float = 30000,
    attraction: float = 0.05,
    link_distance: float = DEFAULT_LINK_DISTANCE,
    damping: float = 0.1,
    min_distance: float = 30,
    margin: float = DEFAULT_MARGIN,
) -> list["Vertex"]:
    """
    Scatter vertices using a force-directed layout.

    Simulates physical forces:
    - All vertices repel each other (like charged particles)
    - Linked vertices are pulled toward `link_distance` apart (like springs)
    - The layout is re-centred on the canvas after every step

    The start is a circle, so the result depends only on the input order.

    Args:
        vertices: Vertices to arrange
        edges: Links (linked vertices attract)
        width: Canvas width
        height: Canvas height
        iterations: Number of simulation steps
        repulsion: Strength of repulsion between all vertices
        attraction: Spring stiffness along links
        link_distance: Rest length of a link
        damping: Factor applied to every displacement
        min_distance: Minimum distance used when computing forces
        margin: Distance kept from the canvas border

    Returns:
        The same list of vertices (modified in-place)
    """
    if not vertices:
        return vertices

    center_x, center_y = width / 2, height / 2

    if len(vertices) == 1:
        vertices[0].x, vertices[0].y = center_x, center_y
        return vertices

    # Initialize with circular layout for better starting positions
    radius = min(width, height) / 3
    for i, vertex in enumerate(vertices):
        angle = 2 * math.pi * i / len(vertices)
        vertex.x = center_x + radius * math.cos(angle)
        vertex.y = center_y + radius * math.sin(angle)

    index = {v.id: v for v in vertices}

    for _ in range(iterations):
        forces: dict = {v.id: [0.0, 0.0] for v in vertices}

        # Repulsion between all vertex pairs
        for i, v1 in enumerate(vertices):
            for v2 in vertices[i + 1:]:
                dx = v1.x - v2.x
                dy = v1.y - v2.y
                dist = max(min_distance, math.hypot(dx, dy))

                # Coulomb's law: F = k / r^2
                force = repulsion / (dist * dist)
                fx = force * dx / dist
                fy = force * dy / dist

                forces[v1.id][0] += fx
                forces[v1.id][1] += fy
                forces[v2.id][0] -= fx
                forces[v2.id][1] -= fy

        # Springs along links (Hooke's law around the rest length)
        for edge in edges:
            source = index.get(edge.source)
            target = index.get(edge.target)
            if source is None or target is None:
                continue

            dx = target.x - source.x
            dy = target.y - source.y
            dist = max(min_distance, math.hypot(dx, dy))

            force = (dist - link_distance) * attraction
            fx = force * dx / dist
            fy = force * dy / dist

            forces[source.id][0] += fx
            forces[source.id][1] += fy
            forces[target.id][0] -= fx
            forces[target.id][1] -= fy

        for vertex in vertices:
            fx, fy = forces[vertex.id]
            vertex.x += fx * damping
            vertex.y += fy * damping

        # Keep the centre of mass on the canvas centre
        shift_x = center_x - sum(v.x for v in vertices) / len(vertices)
        shift_y = center_y - sum(v.y for v in vertices) / len(vertices)
        for vertex in vertices:
            vertex.x += shift_x
            vertex.y += shift_y

    for vertex in vertices:
        vertex.x = clamp(vertex.x, margin, width - margin)
        vertex.y = clamp(vertex.y, margin, height - margin)

    return vertices


def bst_layout(
    vertices: list["Vertex"],
    edges: list["Edge"],
    root_id: "VertexId",
    width: float,
    spacing_y: float = DEFAULT_SPACING_Y,
    start_y: float = DEFAULT_START_Y,
) -> list["Vertex"]:
    """
    Arrange vertices as a solved binary search tree.

    Links are followed from parent (source) to child (target); the child
    with the smaller value goes left. Vertices are spread across the canvas
    by in-order rank and stacked by depth, so every child sits below its
    parent on the correct side.

    Args:
        vertices: Vertices to arrange
        edges: Parent -> child links
        root_id: Root of the tree
        width: Canvas width
        spacing_y: Vertical distance between levels
        start_y: Y coordinate of the root

    Returns:
        The same list of vertices (modified in-place)

    Raises:
        ValueError: If the root is unknown, or the links revisit a vertex
    """
    index = {v.id: v for v in vertices}
    if root_id not in index:
        raise ValueError(f"Unknown root vertex: {root_id!r}")

    # Build adjacency list (parent -> children)
    children: dict = {v.id: [] for v in vertices}
    for edge in edges:
        if edge.source in children and edge.target in index:
            children[edge.source].append(edge.target)

    left: dict = {}
    right: dict = {}
    for parent_id, kids in children.items():
        parent = index[parent_id]
        for kid in kids:
            if index[kid].value < parent.value:
                left[parent_id] = kid
            else:
                right[parent_id] = kid

    # In-order walk with an explicit stack, tracking depth
    order: list = []
    depth: dict = {root_id: 0}
    stack: list = []
    seen: set = set()
    current: Optional["VertexId"] = root_id
    while stack or current is not None:
        while current is not None:
            if current in seen:
                raise ValueError(f"Links are not a tree: {current!r} is reached twice")
            seen.add(current)
            stack.append(current)
            child = left.get(current)
            if child is not None:
                depth[child] = depth[current] + 1
            current = child
        current = stack.pop()
        order.append(current)
        child = right.get(current)
        if child is not None:
            depth[child] = depth[current] + 1
        current = child

    spacing_x = width / (len(order) + 1)
    for rank, vid in enumerate(order, start=1):
        vertex = index[vid]
        vertex.x = rank * spacing_x
        vertex.y = start_y + depth[vid] * spacing_y

    return vertices
