import pytest

from config import CFG
from models import KNIGHT_MOVES, Dimensions, Position
from tour_request import fmt_moves, parse_moves, parse_tour_request


@pytest.mark.parametrize("raw", [None, "", "   ", "knight", "KNIGHT", ["knight"]])
def test_parse_moves_defaults_to_knight(raw):
    assert parse_moves(raw) == KNIGHT_MOVES


@pytest.mark.parametrize(
    "raw",
    [
        "1,2;2,1;-1,-2",
        "(1, 2) (2, 1) (-1, -2)",
        "(1,2),(2,1),(-1,-2)",
        "1 2\n2 1\n-1 -2",
        "1,2 | 2,1 | -1,-2",
        [(1, 2), (2, 1), (-1, -2)],
        [[1, 2], [2, 1], [-1, -2]],
    ],
)
def test_parse_moves_accepts_several_shapes(raw):
    assert parse_moves(raw) == ((1, 2), (2, 1), (-1, -2))


def test_parse_moves_keeps_order():
    assert parse_moves("2,1;1,2") == ((2, 1), (1, 2))


@pytest.mark.parametrize("raw", ["bishop", "1;2", "1,2;x,y", [(1, 2, 3)], [1, 2]])
def test_parse_moves_rejects_garbage(raw):
    with pytest.raises(ValueError):
        parse_moves(raw)


def test_fmt_moves_round_trips_through_parser():
    text = fmt_moves(KNIGHT_MOVES)
    assert parse_moves(text) == KNIGHT_MOVES


def test_parse_tour_request_from_form_lists():
    req, err = parse_tour_request(
        {"cols": ["6"], "rows": ["5"], "start_x": ["2"], "start_y": ["3"], "moves": ["1,2;2,1"]}
    )
    assert err is None
    assert req.dims == Dimensions(6, 5)
    assert req.start == Position(2, 3)
    assert req.moves == ((1, 2), (2, 1))
    assert req.label == "6 × 5 from (2, 3)"


def test_parse_tour_request_from_json():
    req, err = parse_tour_request(
        {"width": 0, "height": 4, "x": 0, "y": 0, "moves": [[1, 2], [2, 1]]}
    )
    assert err is None
    assert req.dims == Dimensions(0, 4)
    assert req.moves == ((1, 2), (2, 1))


def test_parse_tour_request_uses_configured_defaults(monkeypatch):
    monkeypatch.setattr(CFG, "COLS", 7)
    monkeypatch.setattr(CFG, "ROWS", 3)
    monkeypatch.setattr(CFG, "START_X", 1)
    monkeypatch.setattr(CFG, "START_Y", 2)
    monkeypatch.setattr(CFG, "MOVES", "knight")
    req, err = parse_tour_request({})
    assert err is None
    assert req.dims == Dimensions(7, 3)
    assert req.start == Position(1, 2)
    assert req.moves == KNIGHT_MOVES


def test_parse_tour_request_allows_out_of_bounds_start():
    req, err = parse_tour_request({"cols": "5", "rows": "5", "start_x": "-3", "start_y": "9"})
    assert err is None
    assert req.start == Position(-3, 9)


@pytest.mark.parametrize(
    "form, fragment",
    [
        ({"cols": "-1", "rows": "5"}, "non-negative"),
        ({"cols": "abc", "rows": "5"}, "width"),
        ({"cols": "2.5", "rows": "5"}, "width"),
        ({"cols": "5", "rows": "5", "start_x": "one"}, "start x"),
        ({"cols": "5", "rows": "5", "moves": "1;2"}, "cannot read move"),
    ],
)
def test_parse_tour_request_errors(form, fragment):
    req, err = parse_tour_request(form)
    assert req is None
    assert fragment in err


def test_parse_tour_request_caps_board_size(monkeypatch):
    monkeypatch.setattr(CFG, "MAX_CELLS", 100)
    req, err = parse_tour_request({"cols": "11", "rows": "10"})
    assert req is None
    assert "exceeds" in err


@pytest.mark.parametrize("cols, rows", [("0", "30000000"), ("101", "0")])
def test_parse_tour_request_caps_each_side(monkeypatch, cols, rows):
    monkeypatch.setattr(CFG, "MAX_CELLS", 100)
    req, err = parse_tour_request({"cols": cols, "rows": rows})
    assert req is None
    assert "board side of" in err
    assert "100-cell limit" in err


def test_parse_tour_request_allows_flat_board_within_limit(monkeypatch):
    monkeypatch.setattr(CFG, "MAX_CELLS", 100)
    req, err = parse_tour_request({"cols": "0", "rows": "100"})
    assert err is None
    assert (req.dims.width, req.dims.height) == (0, 100)
