"""
Reachability walk shared by the tree and BST validators.

Both validators grow a tree outward from the root and then ask which
vertices were never reached. They differ only in how a vertex's children
are chosen, which is injected as a callable:
- Rooted trees follow directed edges, depth first, watching the active path for cycles
- BSTs infer children from geometry, breadth first, claiming a parent for each child
"""

from collections import deque
from typing import Callable, Iterable, Sequence

from .models import VertexId
from .verdict import ReasonCode, Verdict, Violation


ChildSelector = Callable[[VertexId], Sequence[VertexId]]

_EXHAUSTED = object()


class Walk:
    """
    Walks the tree reachable from a root.

    Rule violations found while walking are raised as `Violation` and must
    be turned back into verdicts by the calling validator.
    """

    def __init__(
        self,
        select_children: ChildSelector,
        breadth_first: bool = False,
        label: Callable[[VertexId], str] = str,
    ):
        self.select_children = select_children
        self.breadth_first = breadth_first
        self.label = label
        # Insertion-ordered so diagnostics come out in a stable order
        self.visited: dict[VertexId, None] = {}
        self.parents: dict[VertexId, VertexId] = {}

    def claim(self, parent_id: VertexId, child_id: VertexId):
        """Record `parent_id` as the only parent of `child_id`."""
        if child_id in self.parents:
            existing = self.parents[child_id]
            raise Violation(Verdict.fail(
                ReasonCode.MULTIPLE_PARENTS,
                [existing, parent_id, child_id],
                child=self.label(child_id),
            ))
        self.parents[child_id] = parent_id

    def run(self, root_id: VertexId) -> "Walk":
        if self.breadth_first:
            self._run_breadth_first(root_id)
        else:
            self._run_depth_first(root_id)
        return self

    def _run_depth_first(self, root_id: VertexId):
        # path mirrors the stack of child iterators
        self.visited[root_id] = None
        path = [root_id]
        on_path = {root_id}
        stack = [iter(self.select_children(root_id))]

        while stack:
            child = next(stack[-1], _EXHAUSTED)
            if child is _EXHAUSTED:
                stack.pop()
                on_path.discard(path.pop())
                continue

            if child in on_path:
                raise Violation(Verdict.fail(
                    ReasonCode.CYCLE_DETECTED,
                    [*path, child],
                ))
            if child in self.visited:
                continue

            self.visited[child] = None
            path.append(child)
            on_path.add(child)
            stack.append(iter(self.select_children(child)))

    def _run_breadth_first(self, root_id: VertexId):
        self.visited[root_id] = None
        queue = deque([root_id])

        while queue:
            parent_id = queue.popleft()
            for child_id in self.select_children(parent_id):
                self.claim(parent_id, child_id)
                self.visited[child_id] = None
                queue.append(child_id)

    def unreached(self, vertex_ids: Iterable[VertexId]) -> list[VertexId]:
        """Vertices the walk never visited, in the order given."""
        return [vid for vid in vertex_ids if vid not in self.visited]
