import io
import json

import pytest

from pytc.cli import main


@pytest.fixture
def write_file(tmp_path):
    def _write(name: str, content: str) -> str:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


def test_clean_file_exits_zero(write_file, capsys):
    path = write_file("ok.py", "x: int = 5\n")

    exit_code = main(["check", path])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Success: no issues found in 1 file(s)" in out


def test_type_error_exits_one_and_prints_diagnostic(write_file, capsys):
    path = write_file("bad.py", 'x: int = "hello"\n')

    exit_code = main(["check", path])

    out = capsys.readouterr().out
    assert exit_code == 1
    assert f"{path}:1:10: TypeError: Incompatible types in assignment to 'x': expected 'int', found 'str'." in out
    assert "Found 1 error(s) in 1 of 1 file(s)" in out


def test_check_is_the_default_command(write_file, capsys):
    path = write_file("bad.py", "never_bound\n")

    exit_code = main([path])

    assert exit_code == 1
    assert "UndefinedName" in capsys.readouterr().out


def test_several_files_are_summarised(write_file, capsys):
    good = write_file("good.py", "x: int = 5\n")
    bad = write_file("bad.py", "a: str = 1\nb: int = 'x'\n")

    exit_code = main(["check", good, bad])

    assert exit_code == 1
    assert "Found 2 error(s) in 1 of 2 file(s)" in capsys.readouterr().out


def test_missing_file_is_reported_on_stderr(tmp_path, capsys):
    exit_code = main(["check", str(tmp_path / "missing.py")])

    captured = capsys.readouterr()
    assert exit_code == 1
    assert "ERROR: Could not read file" in captured.err


def test_syntax_error_is_a_parse_error_diagnostic(write_file, capsys):
    path = write_file("broken.py", "def broken(:\n")

    exit_code = main(["check", path])

    assert exit_code == 1
    assert f"{path}:1:" in capsys.readouterr().out


def test_options_change_checker_behaviour(write_file, capsys):
    path = write_file(
        "order.py",
        "def first() -> int:\n    second()\ndef second() -> int:\n    return 1\n",
    )

    assert main(["check", path]) == 1
    assert main(["check", "--hoist-functions", path]) == 0
    assert main(["check", "--no-undefined-names", path]) == 0


def test_dump_symbols_writes_artifact(write_file, tmp_path, capsys):
    path = write_file("main.py", "x: int = 5\n")

    exit_code = main(["check", "--dump-symbols", path])

    assert exit_code == 0
    data = json.loads((tmp_path / "main.check.json").read_text(encoding="utf-8"))
    assert data["symbol_table"]["scopes"][0]["symbols"]["x"]["type"] == "int"


def test_reads_source_from_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO('y: str = 1\n'))

    exit_code = main(["check", "-"])

    assert exit_code == 1
    assert "<stdin>:1:10: TypeError" in capsys.readouterr().out


def test_parse_prints_syntax_tree_as_json(write_file, capsys):
    path = write_file("tree.py", "x: int = 5\n")

    exit_code = main(["parse", path])

    assert exit_code == 0
    tree = json.loads(capsys.readouterr().out)
    assert tree["file_path"] == path
    assert tree["body"][0]["statement_type"] == "ann_assign"


def test_parse_of_invalid_file_prints_error(write_file, capsys):
    path = write_file("broken.py", "def broken(:\n")

    exit_code = main(["parse", path])

    assert exit_code == 1
    assert "--- ERROR ---" in capsys.readouterr().err


def test_no_arguments_prints_help(capsys):
    assert main([]) == 2
    assert "usage: pytc" in capsys.readouterr().out


@pytest.mark.parametrize(
    "options",
    [
        pytest.param(["--no-color"], id="no_color"),
        pytest.param(["--hoist-functions"], id="hoist_functions"),
        pytest.param(["-v", "--no-undefined-names"], id="top_level_then_check_option"),
    ],
)
def test_shorthand_accepts_check_options_before_the_file(options, write_file, capsys):
    path = write_file("ok.py", "x: int = 5\n")

    exit_code = main(options + [path])

    assert exit_code == 0
    assert "Success: no issues found in 1 file(s)" in capsys.readouterr().out
