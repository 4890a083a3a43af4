import os

import pytest

import app as app_module
from config import CFG
from progress import snapshot


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(CFG, "TABLE_OUT", str(tmp_path / "table.txt"))
    monkeypatch.setattr(CFG, "LAYOUT_HTML", str(tmp_path / "layout_view.html"))
    monkeypatch.setattr(CFG, "ISOLATE", False)
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as c:
        yield c


def test_finalize_solver_progress_respects_ok_flag(monkeypatch):
    calls = {"status": [], "done": []}

    def fake_set_status(value):
        calls["status"].append(value)

    def fake_set_done(ok=None, *, reason=None, message=None):
        calls["done"].append((ok, reason, message))

    monkeypatch.setattr(app_module, "set_status", fake_set_status)
    monkeypatch.setattr(app_module, "set_done", fake_set_done)

    app_module._finalize_solver_progress(True, "All good")
    assert calls["done"][-1] == (True, "All good", None)

    app_module._finalize_solver_progress(False, "error happened")
    assert calls["done"][-1] == (False, "error happened", None)
    assert calls["status"] == []


def test_index_renders_form(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert b'action="/solve"' in resp.data


def test_solve_form_post_finds_tour_and_writes_outputs(client, tmp_path):
    resp = client.post(
        "/solve",
        data={"cols": "5", "rows": "5", "start_x": "0", "start_y": "0", "moves": "knight", "prune": "1"},
    )
    assert resp.status_code == 200
    assert b"Tour found" in resp.data
    assert app_module.LAST_RESULT["ok"] is True
    assert app_module.LAST_RESULT["W"] == 5

    table_file = tmp_path / "table.txt"
    assert table_file.exists()
    assert table_file.read_text(encoding="utf-8").startswith("    1")
    assert (tmp_path / "layout_view.html").exists()

    download = client.get("/download/table")
    assert download.status_code == 200
    assert b"Calculation completed after" in download.data

    progress = client.get("/progress3")
    assert progress.headers["Cache-Control"] == "no-store, max-age=0"
    snap = progress.get_json()
    assert snap["status"] == "Solved"
    assert snap["ok"] is True
    assert snap["done"] is True
    assert snap["result_url"].endswith("/result/latest")


def test_solve_json_post_without_tour(client):
    resp = client.post("/solve", json={"width": 3, "height": 3, "x": 1, "y": 1, "engine": "iterative"})
    assert resp.status_code == 200
    assert b"No path found." in resp.data
    assert app_module.LAST_RESULT["ok"] is False
    assert app_module.LAST_RESULT["engine"] == "iterative"
    assert snapshot()["status"] == "Error"


def test_solve_rejects_bad_input(client):
    resp = client.post("/solve", data={"cols": "-4", "rows": "5"})
    assert resp.status_code == 200
    assert b"Bad request" in resp.data
    assert app_module.LAST_RESULT["table_filename"] == ""
    snap = snapshot()
    assert snap["ok"] is False
    assert "non-negative" in snap["message"]


def test_solve_rejects_flat_board_with_huge_side(client):
    resp = client.post("/solve", data={"cols": "0", "rows": "30000000"})
    assert resp.status_code == 200
    assert b"Bad request" in resp.data
    assert app_module.LAST_RESULT["H"] == 0
    assert "board side of 30000000 cells" in snapshot()["message"]


def test_result_latest_renders(client):
    client.post("/solve", data={"cols": "1", "rows": "1"})
    resp = client.get("/result/latest")
    assert resp.status_code == 200
    assert b"Tour found" in resp.data
