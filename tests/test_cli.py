import cli


def test_cli_prints_table_and_iterations(capsys):
    code = cli.main(["--cols", "5", "--rows", "5", "--start-x", "0", "--start-y", "0"])
    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert len(out) == 6
    assert out[0].startswith("    1")
    assert all(len(line) == 25 for line in out[:5])
    assert out[-1].startswith("Calculation completed after ")
    assert out[-1].endswith(" iterations.")


def test_cli_reports_missing_path(capsys):
    code = cli.main(["--cols", "3", "--rows", "3", "--no-check", "--engine", "iterative"])
    out = capsys.readouterr().out.splitlines()
    assert code == 1
    assert out[0] == "No path found."
    assert out[1].startswith("Calculation completed after ")


def test_cli_node_limit(capsys):
    code = cli.main(["--cols", "5", "--rows", "5", "--node-limit", "10"])
    out = capsys.readouterr().out.splitlines()
    assert code == 1
    assert out == [
        "Stopped before solution (node limit).",
        "Calculation completed after 11 iterations.",
    ]


def test_cli_rejects_bad_input(capsys):
    assert cli.main(["--cols", "-2", "--rows", "3"]) == 2
    assert cli.main(["--moves", "1;2"]) == 2
    err = capsys.readouterr().err
    assert "non-negative" in err
    assert "Bad move set" in err


def test_cli_custom_moves(capsys):
    code = cli.main(["--cols", "4", "--rows", "1", "--moves", "1,0;-1,0"])
    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert out[0] == "    1    2    3    4"


def test_cli_no_isolate_overrides_config(monkeypatch, capsys):
    monkeypatch.setattr(cli.CFG, "ISOLATE", True)
    seen = []
    real_solve = cli.solve_tour

    def fake_solve(request, **kwargs):
        seen.append(kwargs["isolate"])
        kwargs["isolate"] = False
        return real_solve(request, **kwargs)

    monkeypatch.setattr(cli, "solve_tour", fake_solve)
    assert cli.main(["--cols", "1", "--rows", "1", "--no-isolate"]) == 0
    assert cli.main(["--cols", "1", "--rows", "1"]) == 0
    assert seen == [False, True]
    capsys.readouterr()
