#!/usr/bin/env python3
"""TreeSketch CLI - validate drawings, deal puzzles, run the service."""

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from treecheck import GraphSnapshot, validate_bst, validate_tree, verdict_summary

from .config import settings
from .layout import bst_layout
from .puzzle import new_puzzle

logger = logging.getLogger(__name__)

VALIDATORS = {
    "tree": validate_tree,
    "bst": validate_bst,
}


def _json_out(data, code=0):
    print(json.dumps(data))
    sys.exit(code)


def _parse_root(value):
    """Root ids on the command line are ints when they look like ints."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return value


def _load_snapshot(path):
    """Read a snapshot from a JSON file, or stdin for '-'."""
    if path == "-":
        data = json.load(sys.stdin)
    else:
        with open(path) as f:
            data = json.load(f)
    return GraphSnapshot.model_validate(data)


# ── Commands ─────────────────────────────────────────────────────────────────

def cmd_validate(args):
    try:
        snapshot = _load_snapshot(args.file)
    except FileNotFoundError:
        _json_out({"status": "error", "error": f"File not found: {args.file}"}, 2)
    except json.JSONDecodeError as e:
        _json_out({"status": "error", "error": f"Invalid JSON: {e}"}, 2)
    except ValidationError as e:
        _json_out({"status": "error", "error": f"Invalid graph: {e.errors()[0]['msg']}"}, 2)

    root_id = _parse_root(args.root) if args.root is not None else snapshot.root_id
    logger.debug("Validating %d vertices, %d edges as %s", len(snapshot.vertices), len(snapshot.edges), args.mode)

    try:
        verdict = VALIDATORS[args.mode](snapshot.vertices, snapshot.edges, root_id)
    except ValueError as e:
        _json_out({"status": "error", "error": str(e)}, 2)

    _json_out(
        {"status": "ok", "verdict": verdict.to_dict(), "guide": verdict_summary(verdict)},
        0 if verdict.valid else 1,
    )


def cmd_puzzle(args):
    try:
        graph = new_puzzle(
            size=args.size,
            seed=args.seed,
            width=settings.canvas_width,
            height=settings.canvas_height,
        )
    except ValueError as e:
        _json_out({"status": "error", "error": str(e)}, 2)

    if args.solved:
        targets = {e.target for e in graph.edges}
        root = next(v for v in graph.vertices if v.id not in targets)
        bst_layout(graph.vertices, graph.edges, root.id, width=settings.canvas_width)
        graph.root_id = root.id

    _json_out(graph.to_json_dict())


def cmd_serve(args):
    import uvicorn

    logger.info("Starting TreeSketch on http://%s:%d", args.host, args.port)
    uvicorn.run("treesketch.main:app", host=args.host, port=args.port)


# ── Parser ───────────────────────────────────────────────────────────────────

def build_parser():
    parser = argparse.ArgumentParser(prog="treesketch", description="Hand-drawn tree and BST checker")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("validate", help="Validate a graph snapshot stored as JSON")
    p.add_argument("file", help="Path to the JSON snapshot, or '-' for stdin")
    p.add_argument("--mode", choices=sorted(VALIDATORS), default="tree", help="Which validator to run")
    p.add_argument("--root", default=None, help="Root vertex id (overrides root_id in the file)")
    p.set_defaults(func=cmd_validate)

    p = sub.add_parser("puzzle", help="Deal a BST puzzle and print it as JSON")
    p.add_argument("--size", type=int, default=settings.puzzle_size, help="Number of nodes")
    p.add_argument("--seed", type=int, default=None, help="Random seed")
    p.add_argument("--solved", action="store_true", help="Lay the puzzle out already solved")
    p.set_defaults(func=cmd_puzzle)

    p = sub.add_parser("serve", help="Run the HTTP service")
    p.add_argument("--host", default=settings.host)
    p.add_argument("--port", type=int, default=settings.port)
    p.set_defaults(func=cmd_serve)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    args.func(args)


if __name__ == "__main__":
    main()
