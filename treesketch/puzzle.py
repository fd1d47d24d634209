"""
Puzzle generation.

A puzzle is a binary search tree built from shuffled values, flattened into
vertices and parent -> child links, and scattered by the force layout so the
user has to drag it back into shape. No root is chosen; picking one is part
of the puzzle.
"""

import random
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from treecheck.models import Edge, GraphSnapshot, Vertex

from .layout import force_layout


class IdGenerator:
    """Random integer ids, unique for the lifetime of the generator."""

    def __init__(self, rng: Optional[random.Random] = None, limit: int = 10000, max_tries: int = 1000):
        self._rng = rng or random.Random()
        self._limit = limit
        self._max_tries = max_tries
        self._existing: set[int] = set()

    def gen(self) -> int:
        for _ in range(self._max_tries):
            value = self._rng.randrange(self._limit)
            if value not in self._existing:
                self._existing.add(value)
                return value
        raise RuntimeError("Could not generate unique id")

    def reserve(self, ids: Iterable[int]):
        """Mark ids already on the board as taken."""
        self._existing.update(ids)


@dataclass
class TreeNode:
    """Node of the BST the puzzle is generated from."""
    id: int
    value: int
    left: Optional["TreeNode"] = None
    right: Optional["TreeNode"] = None


def build_bst(values: Iterable[int], ids: IdGenerator) -> Optional[TreeNode]:
    """Insert `values` in order into an empty BST. Duplicates are ignored."""
    root: Optional[TreeNode] = None
    for value in values:
        if root is None:
            root = TreeNode(ids.gen(), value)
            continue
        node = root
        while True:
            if value < node.value:
                if node.left is None:
                    node.left = TreeNode(ids.gen(), value)
                    break
                node = node.left
            elif value > node.value:
                if node.right is None:
                    node.right = TreeNode(ids.gen(), value)
                    break
                node = node.right
            else:
                break
    return root


def traverse(root: Optional[TreeNode]) -> Iterator[TreeNode]:
    """Pre-order, left subtree before right."""
    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        yield node
        if node.right is not None:
            stack.append(node.right)
        if node.left is not None:
            stack.append(node.left)


def make_graph(values: Iterable[int], ids: Optional[IdGenerator] = None) -> GraphSnapshot:
    """Build the BST for `values` and flatten it into vertices and links."""
    ids = ids or IdGenerator()
    root = build_bst(values, ids)

    vertices: list[Vertex] = []
    edges: list[Edge] = []
    for node in traverse(root):
        vertices.append(Vertex(id=node.id, value=node.value))
        for child in (node.left, node.right):
            if child is not None:
                edges.append(Edge(id=ids.gen(), source=node.id, target=child.id))

    return GraphSnapshot(vertices=vertices, edges=edges)


def new_puzzle(
    size: int = 10,
    seed: Optional[int] = None,
    width: float = 1200,
    height: float = 800,
) -> GraphSnapshot:
    """
    Deal a new puzzle.

    Args:
        size: Number of vertices (values 0..size-1)
        seed: Seed for shuffling and ids; same seed, same puzzle
        width: Canvas width for the initial scatter
        height: Canvas height for the initial scatter

    Returns:
        A GraphSnapshot with positions set and no root
    """
    if size < 1:
        raise ValueError("Puzzle size must be at least 1")

    rng = random.Random(seed)
    values = list(range(size))
    rng.shuffle(values)

    graph = make_graph(values, IdGenerator(rng))
    force_layout(graph.vertices, graph.edges, width, height)
    return graph
