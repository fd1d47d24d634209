"""CLI tests: JSON on stdout, verdict in the exit status."""

import io
import json

import pytest

from treecheck import validate_bst
from treesketch.cli import main


def run(argv, capsys):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code, json.loads(capsys.readouterr().out)


@pytest.fixture
def write_graph(tmp_path):
    def write(data, name="graph.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return str(path)
    return write


class TestValidate:

    def test_valid_tree(self, write_graph, capsys):
        path = write_graph({
            "vertices": [{"id": 1}, {"id": 2}],
            "edges": [{"source": 1, "target": 2}],
            "root_id": 1,
        })
        code, out = run(["validate", path], capsys)
        assert code == 0
        assert out["status"] == "ok"
        assert out["verdict"]["valid"] is True

    def test_invalid_tree_exits_one(self, write_graph, capsys):
        path = write_graph({"vertices": [{"id": 1}, {"id": 2}], "links": [], "rootId": 1})
        code, out = run(["validate", path], capsys)
        assert code == 1
        assert out["verdict"]["reason_code"] == "DISCONNECTED_NODES"
        assert out["guide"]["highlight"] == [2]

    def test_root_override(self, write_graph, capsys):
        path = write_graph({
            "vertices": [{"id": 1}, {"id": 2}],
            "edges": [{"source": 1, "target": 2}],
            "root_id": 2,
        })
        code, _ = run(["validate", path, "--root", "1"], capsys)
        assert code == 0

    def test_string_root(self, write_graph, capsys):
        path = write_graph({"vertices": [{"id": "a"}, {"id": "b"}], "edges": [{"source": "a", "target": "b"}]})
        code, _ = run(["validate", path, "--root", "a"], capsys)
        assert code == 0

    def test_bst_mode(self, write_graph, capsys):
        path = write_graph({
            "vertices": [
                {"id": 1, "value": 10, "x": 200, "y": 50},
                {"id": 2, "value": 5, "x": 200, "y": 150},
            ],
            "edges": [{"source": 1, "target": 2}],
            "root_id": 1,
        })
        code, out = run(["validate", path, "--mode", "bst"], capsys)
        assert code == 1
        assert out["verdict"]["reason_code"] == "GEOMETRY_VIOLATION"

    def test_stdin(self, monkeypatch, capsys):
        data = {"vertices": [{"id": 1}], "edges": [], "root_id": 1}
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(data)))
        code, out = run(["validate", "-"], capsys)
        assert code == 0

    def test_missing_file(self, tmp_path, capsys):
        code, out = run(["validate", str(tmp_path / "absent.json")], capsys)
        assert code == 2
        assert out["status"] == "error"
        assert "File not found" in out["error"]

    def test_invalid_json(self, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        code, out = run(["validate", str(path)], capsys)
        assert code == 2
        assert "Invalid JSON" in out["error"]

    def test_dangling_edge(self, write_graph, capsys):
        path = write_graph({"vertices": [{"id": 1}], "edges": [{"source": 1, "target": 5}]})
        code, out = run(["validate", path], capsys)
        assert code == 2
        assert "Invalid graph" in out["error"]

    def test_bst_missing_value(self, write_graph, capsys):
        path = write_graph({"vertices": [{"id": 1, "x": 0, "y": 0}], "edges": []})
        code, out = run(["validate", path, "--mode", "bst"], capsys)
        assert code == 2
        assert "has no value" in out["error"]


class TestPuzzle:

    def test_puzzle(self, capsys):
        code, out = run(["puzzle", "--size", "5", "--seed", "1"], capsys)
        assert code == 0
        assert len(out["vertices"]) == 5
        assert len(out["edges"]) == 4
        assert out["root_id"] is None

    def test_solved_puzzle_validates(self, capsys):
        _, out = run(["puzzle", "--size", "7", "--seed", "3", "--solved"], capsys)
        assert out["root_id"] is not None
        verdict = validate_bst(out["vertices"], out["edges"], out["root_id"])
        assert verdict.valid is True

    def test_bad_size(self, capsys):
        code, out = run(["puzzle", "--size", "0"], capsys)
        assert code == 2
        assert out["status"] == "error"


class TestParser:

    def test_command_required(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 2

    def test_unknown_mode(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["validate", "x.json", "--mode", "graph"])
        assert exc.value.code == 2
