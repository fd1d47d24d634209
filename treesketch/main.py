"""
TreeSketch Backend - FastAPI Application

This is the main entry point for the TreeSketch service.
It provides:
- Stateless validation endpoints (tree and BST mode)
- REST API for the single puzzle board (deal, link, cut, drag, root)
- Static file serving for the canvas page
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse, HTMLResponse
from pydantic import BaseModel, Field, ValidationError

from treecheck import ReasonCode, Verdict, validate_bst, validate_tree, verdict_summary
from treecheck.models import Vertex, Edge, VertexId

from .board import BoardMode, board
from .config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler for startup/shutdown tasks."""
    logging.getLogger("treesketch").setLevel(settings.log_level)
    if not board.vertices:
        board.new_puzzle()
    logger.info("Serving static files from %s", settings.static_dir)
    yield


# --- FastAPI App ---

app = FastAPI(
    title="TreeSketch API",
    description="Validate hand-drawn trees and binary search trees",
    version="1.0.0",
    lifespan=lifespan
)


# --- Request Models ---

class ValidateRequest(BaseModel):
    """A graph snapshot to validate."""
    vertices: list[Vertex] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)
    root_id: Optional[VertexId] = None


class NewPuzzleRequest(BaseModel):
    size: Optional[int] = Field(default=None, ge=1, le=100)
    seed: Optional[int] = None
    mode: BoardMode = BoardMode.BST


class CreateLinkRequest(BaseModel):
    source: VertexId
    target: VertexId


class MoveVertexRequest(BaseModel):
    x: float
    y: float


class SetRootRequest(BaseModel):
    root_id: Optional[VertexId] = None


def _run(validate, request: ValidateRequest) -> dict:
    try:
        verdict: Verdict = validate(request.vertices, request.edges, request.root_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=_error_detail(e))
    return {"success": True, "verdict": verdict.to_dict(), "guide": verdict_summary(verdict)}


def _error_detail(error: ValueError) -> str:
    if isinstance(error, ValidationError):
        return "; ".join(err["msg"] for err in error.errors())
    return str(error)


# --- Health Check ---

@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/api/reason-codes")
async def get_reason_codes():
    """Get the closed set of reason codes."""
    return {"reason_codes": [code.value for code in ReasonCode]}


# --- Validation ---

@app.post("/api/validate/tree")
async def validate_tree_endpoint(request: ValidateRequest):
    """Check a directed graph for being a rooted tree."""
    return _run(validate_tree, request)


@app.post("/api/validate/bst")
async def validate_bst_endpoint(request: ValidateRequest):
    """Check a drawing for being a binary search tree."""
    return _run(validate_bst, request)


# --- Board State ---

@app.get("/api/board")
async def get_board():
    """Get the board state and its current verdict."""
    try:
        return board.get_state()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=_error_detail(e))


@app.post("/api/board/new")
async def new_board(request: NewPuzzleRequest):
    """Deal a new puzzle."""
    board.new_puzzle(size=request.size, seed=request.seed, mode=request.mode)
    return {"success": True, "board": board.get_state()}


@app.post("/api/board/solve")
async def solve_board():
    """Arrange the board as a solved BST."""
    if not board.solve():
        raise HTTPException(status_code=400, detail="The links do not form a tree to arrange")
    return {"success": True, "board": board.get_state()}


@app.put("/api/board/root")
async def set_root(request: SetRootRequest):
    """Choose or clear the root."""
    try:
        root_id = board.set_root(request.root_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Vertex not found")
    return {"success": True, "root_id": root_id, "verdict": board.validate().to_dict()}


# --- Vertex Operations ---

@app.patch("/api/board/vertices/{vertex_id}")
async def move_vertex(vertex_id: str, request: MoveVertexRequest):
    """Drop a dragged vertex at a new position."""
    try:
        vertex = board.move_vertex(vertex_id, request.x, request.y)
    except KeyError:
        raise HTTPException(status_code=404, detail="Vertex not found")
    return {
        "success": True,
        "vertex": vertex.model_dump(),
        "root_id": board.root_id,
        "verdict": board.validate().to_dict(),
    }


@app.post("/api/board/vertices/{vertex_id}/toggle-red")
async def toggle_red(vertex_id: str):
    """Toggle the colour of a vertex."""
    try:
        vertex = board.toggle_red(vertex_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Vertex not found")
    return {"success": True, "vertex": vertex.model_dump()}


# --- Link Operations ---

@app.post("/api/board/links")
async def create_link(request: CreateLinkRequest):
    """Link two vertices."""
    try:
        edge = board.add_link(request.source, request.target)
    except KeyError:
        raise HTTPException(status_code=404, detail="Vertex not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if edge is None:
        return {"success": False, "message": "Link already exists"}
    return {"success": True, "edge": edge.model_dump(), "verdict": board.validate().to_dict()}


@app.delete("/api/board/links/{edge_id}")
async def cut_link(edge_id: str):
    """Cut a link."""
    if board.cut_link(edge_id):
        return {"success": True, "verdict": board.validate().to_dict()}
    raise HTTPException(status_code=404, detail="Link not found")


# --- Static File Serving ---
# Registered last so the API routes win

@app.get("/")
async def serve_root():
    """Serve the canvas page."""
    index_path = settings.static_dir / "index.html"
    if index_path.exists():
        return FileResponse(index_path)
    return HTMLResponse("<h1>TreeSketch API</h1><p>No page found. Set TREESKETCH_STATIC_DIR to the directory holding index.html.</p>")


@app.get("/{path:path}")
async def serve_static(path: str):
    """Serve files from the static directory."""
    if path.startswith("api/"):
        raise HTTPException(status_code=404, detail="Not found")

    static_dir = settings.static_dir.resolve()
    file_path = (static_dir / path).resolve()
    if static_dir in file_path.parents and file_path.is_file():
        return FileResponse(file_path)
    raise HTTPException(status_code=404, detail="Not found")


# --- Run with uvicorn ---

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
