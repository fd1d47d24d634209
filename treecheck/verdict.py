"""
Verdicts - the shared result shape of both validators.

A verdict is either valid, or carries exactly one reason code (the first
rule violated under the validator's check order), a message, and the ids of
the offending vertices.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Optional

from .models import VertexId


class ReasonCode(str, Enum):
    """Closed set of rule violations. Names are stable across versions."""
    NO_ROOT_PROVIDED = "NO_ROOT_PROVIDED"
    ROOT_NODE_NOT_FOUND = "ROOT_NODE_NOT_FOUND"
    MULTIPLE_PARENTS = "MULTIPLE_PARENTS"
    CYCLE_DETECTED = "CYCLE_DETECTED"
    DISCONNECTED_NODES = "DISCONNECTED_NODES"
    NOT_A_BST = "NOT_A_BST"
    GEOMETRY_VIOLATION = "GEOMETRY_VIOLATION"
    ADJACENCY_VIOLATION = "ADJACENCY_VIOLATION"
    TOO_MANY_CHILDREN = "TOO_MANY_CHILDREN"
    DUPLICATE_VALUES = "DUPLICATE_VALUES"


# Placeholders are filled from the same data that picks the offending ids
MESSAGES: dict[ReasonCode, str] = {
    ReasonCode.NO_ROOT_PROVIDED: "Please specify a root node.",
    ReasonCode.ROOT_NODE_NOT_FOUND: "Root node {root} is not part of the graph.",
    ReasonCode.MULTIPLE_PARENTS: "Node {child} has too many parents.",
    ReasonCode.CYCLE_DETECTED: "A tree should not have any cycles.",
    ReasonCode.DISCONNECTED_NODES: "A tree must be connected.",
    ReasonCode.NOT_A_BST: "Node {node} should be {relation} {bound}.",
    ReasonCode.GEOMETRY_VIOLATION: "Is node {child} a left or right child?",
    ReasonCode.ADJACENCY_VIOLATION: "Node {child} is not adjacent to its parent {parent}.",
    ReasonCode.TOO_MANY_CHILDREN: "Node {parent} has too many {side} children.",
    ReasonCode.DUPLICATE_VALUES: "Value {value} is used by more than one node.",
}

# Puzzle-mode wording: the user arranges nodes rather than drawing arrows.
BST_MESSAGES: dict[ReasonCode, str] = {
    ReasonCode.NO_ROOT_PROVIDED: "Choose a root node by moving it into the dashed circle.",
    ReasonCode.DISCONNECTED_NODES: (
        "Parent nodes should point to child nodes. "
        "Child nodes should not point to parent nodes."
    ),
}

# BST links that are not a parent/child link
LINK_MESSAGES = {
    "level": "Nodes {a} and {b} are at the same height, so neither can be the parent.",
    "repeated": "Nodes {a} and {b} are linked more than once.",
}


def render_message(
    code: ReasonCode,
    overrides: Optional[Mapping[ReasonCode, str]] = None,
    **params,
) -> str:
    template = (overrides or {}).get(code, MESSAGES[code])
    return template.format(**params)


@dataclass(frozen=True)
class Verdict:
    """Outcome of one validation call."""
    valid: bool
    reason_code: Optional[ReasonCode] = None
    message: Optional[str] = None
    offending_ids: tuple[VertexId, ...] = ()

    @classmethod
    def ok(cls, message: Optional[str] = None) -> "Verdict":
        return cls(valid=True, message=message)

    @classmethod
    def fail(
        cls,
        code: ReasonCode,
        offending_ids: Iterable[VertexId],
        message: Optional[str] = None,
        overrides: Optional[Mapping[ReasonCode, str]] = None,
        **params,
    ) -> "Verdict":
        if message is None:
            message = render_message(code, overrides, **params)
        return cls(
            valid=False,
            reason_code=code,
            message=message,
            offending_ids=tuple(offending_ids),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "valid": self.valid,
            "reason_code": self.reason_code.value if self.reason_code else None,
            "message": self.message,
            "offending_ids": list(self.offending_ids),
        }


class Violation(Exception):
    """Carries a failing verdict out of a walk; never escapes a validator."""

    def __init__(self, verdict: Verdict):
        super().__init__(verdict.message)
        self.verdict = verdict


def verdict_summary(verdict: Verdict) -> dict:
    """Guide text and the vertices to highlight next to the canvas."""
    if verdict.valid:
        return {
            "valid": True,
            "guide": verdict.message or "Looks like a tree!",
            "highlight": [],
        }
    return {
        "valid": False,
        "guide": verdict.message,
        "reason_code": verdict.reason_code.value,
        "highlight": list(dict.fromkeys(verdict.offending_ids)),
    }
