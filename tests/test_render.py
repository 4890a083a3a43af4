from render import format_table, render_result, tour_path


def test_format_table_matches_fixed_width_layout():
    assert format_table([[1, 12], [123, 4]]) == "    1   12\n  123    4"
    assert format_table([]) == ""


def test_tour_path_orders_cells_by_label():
    table = [[1, 0, 3], [0, 0, 0], [0, 2, 0]]
    assert tour_path(table) == [(0, 0), (1, 2), (2, 0)]


def test_render_result_draws_labels_and_path():
    table = [[1, 0, 3], [0, 0, 0], [0, 2, 0]]
    svg, legend = render_result(table)
    assert svg.startswith("<svg")
    assert "<polyline" in svg
    assert ">3</text>" in svg
    assert "start (0, 0)" in legend
    assert "end (2, 0) after 3 cells" in legend


def test_render_result_handles_empty_tables():
    svg, legend = render_result([[0, 0], [0, 0]])
    assert "<polyline" not in svg
    assert legend == ""

    svg, legend = render_result([])
    assert svg.startswith("<svg")
    assert legend == ""
