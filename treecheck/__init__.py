"""
TreeCheck - structural validators for hand-drawn trees.

This package is the single source of truth for deciding whether a drawing
is a rooted tree or a binary search tree. It is used by the TreeSketch
service and CLI but imports nothing from them.
"""

from .models import (
    VertexId,
    Vertex,
    Edge,
    GraphSnapshot,
)

from .verdict import ReasonCode, Verdict, MESSAGES, BST_MESSAGES, verdict_summary
from .tree import validate_tree
from .bst import validate_bst

__all__ = [
    # Models
    "VertexId",
    "Vertex",
    "Edge",
    "GraphSnapshot",
    # Diagnostics
    "ReasonCode",
    "Verdict",
    "MESSAGES",
    "BST_MESSAGES",
    "verdict_summary",
    # Validators
    "validate_tree",
    "validate_bst",
]
