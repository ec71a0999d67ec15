import json

import pytest

from pytc.config.config import CheckerConfig
from pytc.exceptions import ErrorCode, PytcError
from pytc.parser.core.classes import Module
from pytc.pipeline import CheckPipeline, CheckResult, check_file, check_source
from pytc.type_checker.core.diagnostics import DiagnosticKind


def test_check_file_without_errors(tmp_path):
    path = tmp_path / "ok.py"
    path.write_text("x: int = 5\ny: str = 'hello'\n", encoding="utf-8")

    result = check_file(str(path))

    assert isinstance(result, CheckResult)
    assert result.ok
    assert result.file_path == str(path)
    assert result.symbol_table.lookup("x") is not None


def test_diagnostics_carry_the_checked_file_path(tmp_path):
    path = tmp_path / "bad.py"
    path.write_text('x: int = "hello"\n', encoding="utf-8")

    result = check_file(str(path))

    assert [d.file_path for d in result.diagnostics] == [str(path)]


def test_missing_file_raises_io_error(tmp_path):
    missing = str(tmp_path / "missing.py")

    with pytest.raises(PytcError) as exc_info:
        check_file(missing)

    assert exc_info.value.code == ErrorCode.FILE_UNREADABLE
    assert missing in exc_info.value.core_message


def test_undecodable_file_raises_io_error(tmp_path):
    path = tmp_path / "latin1.py"
    path.write_bytes(b"x: str = '\xff\xfe'\n")

    with pytest.raises(PytcError) as exc_info:
        check_file(str(path))

    assert exc_info.value.code == ErrorCode.FILE_UNREADABLE


def test_syntax_error_becomes_the_only_diagnostic():
    result = check_source("x: int = 5\ndef broken(:\n", file_path="broken.py")

    assert result.symbol_table is None
    assert len(result.diagnostics) == 1
    diagnostic = result.diagnostics[0]
    assert diagnostic.kind == DiagnosticKind.PARSE_ERROR
    assert diagnostic.file_path == "broken.py"
    assert diagnostic.line == 2
    assert not result.ok


def test_source_without_path_uses_stdin_name():
    result = check_source("missing\n")

    assert result.file_path == "<stdin>"
    assert result.diagnostics[0].file_path == "<stdin>"


def test_config_is_passed_to_the_checker():
    result = check_source("missing\n", config=CheckerConfig(report_undefined_names=False))

    assert result.ok


def test_pipeline_can_stop_after_parsing():
    pipeline = CheckPipeline("x: int = 'a'\n", "main.py", stop_after_stage="ast")

    module = pipeline.run()

    assert isinstance(module, Module)
    assert list(pipeline.artifacts) == ["ast"]


def test_dumped_check_artifact(tmp_path, capsys):
    path = tmp_path / "main.py"
    path.write_text('x: int = "a"\n', encoding="utf-8")

    check_file(str(path), dump_stages=["check"])

    artifact_path = tmp_path / "main.check.json"
    assert "Saving artifact 'check'" in capsys.readouterr().out
    data = json.loads(artifact_path.read_text(encoding="utf-8"))
    assert data["file_path"] == str(path)
    assert data["diagnostics"][0]["kind"] == "TypeError"
    root = data["symbol_table"]["scopes"][0]
    assert root["symbols"]["x"]["type"] == "int"
    assert root["symbols"]["print"]["type"] == "(Any) -> None"


def test_results_are_the_same_on_every_run():
    source = "def f(a: int) -> str:\n    b: str = a\nmissing\n"

    first, second = check_source(source), check_source(source)

    assert first.diagnostics == second.diagnostics
    assert first.to_dict() == second.to_dict()


@pytest.mark.parametrize(
    "options",
    [
        pytest.param({"dump_stages": ["bytecode"]}, id="dump"),
        pytest.param({"stop_after_stage": "optimize"}, id="stop"),
    ],
)
def test_unknown_stage_names_are_rejected(options):
    with pytest.raises(ValueError, match="Unknown pipeline stage"):
        CheckPipeline("x = 1\n", "main.py", **options)


def test_byte_order_mark_is_not_a_syntax_error(tmp_path):
    path = tmp_path / "bom.py"
    path.write_bytes("\ufeffx: int = 5\n".encode("utf-8"))

    result = check_file(str(path))

    assert result.ok
    assert result.symbol_table.lookup("x") is not None


def test_coding_line_is_honoured(tmp_path):
    path = tmp_path / "latin1.py"
    path.write_bytes("# -*- coding: latin-1 -*-\nname: str = 'caf\xe9'\nn: int = name\n".encode("latin-1"))

    result = check_file(str(path))

    assert [(d.kind, d.line) for d in result.diagnostics] == [(DiagnosticKind.TYPE_ERROR, 3)]


def test_unknown_coding_line_raises_io_error(tmp_path):
    path = tmp_path / "bogus.py"
    path.write_text("# -*- coding: not-a-codec -*-\nx = 1\n", encoding="utf-8")

    with pytest.raises(PytcError) as exc_info:
        check_file(str(path))

    assert exc_info.value.code == ErrorCode.FILE_UNREADABLE


def test_default_dump_stages_are_not_shared():
    first = CheckPipeline("x = 1\n", "a.py")
    first.dump_stages.append("check")

    second = CheckPipeline("x = 1\n", "b.py")

    assert second.dump_stages == []
