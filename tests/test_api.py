"""HTTP API tests using FastAPI's TestClient."""

import pytest
from fastapi.testclient import TestClient

from treecheck import GraphSnapshot
from treesketch.board import board
from treesketch.main import app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def loaded_board():
    board.load(GraphSnapshot.model_validate({
        "vertices": [
            {"id": 1, "value": 10, "x": 600, "y": 100},
            {"id": 2, "value": 5, "x": 500, "y": 200},
            {"id": 3, "value": 15, "x": 700, "y": 200},
        ],
        "edges": [
            {"id": "a", "source": 1, "target": 2},
            {"id": "b", "source": 1, "target": 3},
        ],
    }), mode="bst")
    return board


class TestMeta:

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_reason_codes(self, client):
        codes = client.get("/api/reason-codes").json()["reason_codes"]
        assert len(codes) == 10
        assert "GEOMETRY_VIOLATION" in codes


class TestValidateEndpoints:

    def test_valid_tree(self, client):
        response = client.post("/api/validate/tree", json={
            "vertices": [{"id": 1}, {"id": 2}],
            "edges": [{"source": 1, "target": 2}],
            "root_id": 1,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["verdict"]["valid"] is True
        assert data["guide"]["highlight"] == []

    def test_cycle(self, client):
        response = client.post("/api/validate/tree", json={
            "vertices": [{"id": 1}, {"id": 2}],
            "edges": [{"from": 1, "to": 2}, {"from": 2, "to": 1}],
            "root_id": 1,
        })
        verdict = response.json()["verdict"]
        assert verdict["reason_code"] == "CYCLE_DETECTED"
        assert verdict["offending_ids"] == [1, 2, 1]

    def test_bst_with_short_value_keys(self, client):
        response = client.post("/api/validate/bst", json={
            "vertices": [
                {"id": 1, "val": 5, "x": 100, "y": 50},
                {"id": 2, "val": 3, "x": 50, "y": 150},
                {"id": 3, "val": 8, "x": 150, "y": 150},
            ],
            "edges": [{"source": 1, "target": 2}, {"source": 1, "target": 3}],
            "root_id": 1,
        })
        assert response.json()["verdict"]["valid"] is True

    def test_dangling_edge_is_bad_request(self, client):
        response = client.post("/api/validate/tree", json={
            "vertices": [{"id": 1}],
            "edges": [{"source": 1, "target": 2}],
            "root_id": 1,
        })
        assert response.status_code == 400
        assert "non-existent target" in response.json()["detail"]

    def test_bst_missing_position_is_bad_request(self, client):
        response = client.post("/api/validate/bst", json={
            "vertices": [{"id": 1, "value": 4}],
            "edges": [],
        })
        assert response.status_code == 400
        assert "has no x" in response.json()["detail"]

    def test_malformed_body(self, client):
        response = client.post("/api/validate/tree", json={"vertices": [{"value": 1}]})
        assert response.status_code == 422


class TestBoardEndpoints:

    def test_get_board(self, client, loaded_board):
        data = client.get("/api/board").json()
        assert data["mode"] == "bst"
        assert data["verdict"]["reason_code"] == "NO_ROOT_PROVIDED"
        assert len(data["graph"]["edges"]) == 2

    def test_new_board(self, client):
        response = client.post("/api/board/new", json={"size": 4, "seed": 2, "mode": "tree"})
        data = response.json()
        assert data["success"] is True
        assert data["board"]["mode"] == "tree"
        assert len(data["board"]["graph"]["vertices"]) == 4

    def test_new_board_rejects_size(self, client):
        assert client.post("/api/board/new", json={"size": 0}).status_code == 422

    def test_drop_into_root_zone(self, client, loaded_board):
        response = client.patch("/api/board/vertices/1", json={"x": 605, "y": 95})
        data = response.json()
        assert data["root_id"] == 1
        assert data["vertex"]["x"] == 600
        assert data["verdict"]["valid"] is True

    def test_move_unknown_vertex(self, client, loaded_board):
        assert client.patch("/api/board/vertices/77", json={"x": 1, "y": 1}).status_code == 404

    def test_set_and_clear_root(self, client, loaded_board):
        data = client.put("/api/board/root", json={"root_id": 1}).json()
        assert data["root_id"] == 1
        assert data["verdict"]["valid"] is True
        data = client.put("/api/board/root", json={"root_id": None}).json()
        assert data["root_id"] is None
        assert client.put("/api/board/root", json={"root_id": 9}).status_code == 404

    def test_toggle_red(self, client, loaded_board):
        data = client.post("/api/board/vertices/2/toggle-red").json()
        assert data["vertex"]["red"] is True

    def test_add_and_cut_link(self, client, loaded_board):
        loaded_board.set_root(1)
        data = client.post("/api/board/links", json={"source": 2, "target": 3}).json()
        assert data["success"] is True
        assert data["verdict"]["reason_code"] == "GEOMETRY_VIOLATION"

        response = client.delete(f"/api/board/links/{data['edge']['id']}")
        assert response.json()["verdict"]["valid"] is True

    def test_duplicate_link(self, client, loaded_board):
        data = client.post("/api/board/links", json={"source": 3, "target": 1}).json()
        assert data == {"success": False, "message": "Link already exists"}

    def test_link_errors(self, client, loaded_board):
        assert client.post("/api/board/links", json={"source": 1, "target": 1}).status_code == 400
        assert client.post("/api/board/links", json={"source": 1, "target": 8}).status_code == 404

    def test_cut_unknown_link(self, client, loaded_board):
        assert client.delete("/api/board/links/zzz").status_code == 404

    def test_solve(self, client):
        client.post("/api/board/new", json={"size": 6, "seed": 5})
        data = client.post("/api/board/solve").json()
        assert data["board"]["verdict"]["valid"] is True
        assert data["board"]["graph"]["root_id"] is not None

    def test_solve_empty(self, client):
        board.load(GraphSnapshot())
        assert client.post("/api/board/solve").status_code == 400

    def test_solve_links_not_a_tree(self, client, loaded_board):
        loaded_board.add_link(3, 2)
        loaded_board.set_root(1)
        response = client.post("/api/board/solve")
        assert response.status_code == 400
        assert "tree" in response.json()["detail"]


class TestStatic:

    def test_root_page(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "TreeSketch" in response.text

    def test_missing_file(self, client):
        assert client.get("/nope.js").status_code == 404

    def test_unknown_api_path(self, client):
        assert client.get("/api/unknown").status_code == 404
