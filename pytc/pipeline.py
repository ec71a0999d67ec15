import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pytc.config.config import PIPELINE_STAGES, STDIN_FILE_PATH, CheckerConfig
from pytc.parser.core.parser import parse_python, read_source
from pytc.type_checker.core.checker import check_module
from pytc.type_checker.core.diagnostics import Diagnostic, DiagnosticCollector
from pytc.type_checker.core.symbol_table import SymbolTable

from .exceptions import ErrorCode, InternalCheckerError, PytcError
from .utils import CheckerArtifactEncoder

logger = logging.getLogger("pytc.pipeline")


@dataclass
class CheckResult:
    """
    The outcome of checking one file. `symbol_table` is None when the file
    could not be parsed; success is judged solely by `diagnostics` being empty.
    """

    file_path: str
    symbol_table: Optional[SymbolTable]
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file_path": self.file_path,
            "symbol_table": self.symbol_table.to_dict() if self.symbol_table else None,
            "diagnostics": [d.model_dump(mode="json") for d in self.diagnostics],
        }


class CheckPipeline:
    """
    Orchestrates the checking of one source file from text to diagnostics.
    This class manages the flow of data between the parsing and checking
    stages and can save each stage's artifact as JSON.
    """

    def __init__(
        self,
        source_content: str,
        file_path: Optional[str],
        config: Optional[CheckerConfig] = None,
        dump_stages: Optional[List[str]] = None,
        stop_after_stage: Optional[str] = None,
    ):
        self.source_content = source_content
        self.file_path = file_path or STDIN_FILE_PATH
        self.config = config or CheckerConfig()
        self.dump_stages = dump_stages or []
        self.stop_after_stage = stop_after_stage

        requested = list(self.dump_stages) + ([stop_after_stage] if stop_after_stage else [])
        unknown = [stage for stage in requested if stage not in PIPELINE_STAGES]
        if unknown:
            raise ValueError(f"Unknown pipeline stage(s): {', '.join(unknown)}. Expected one of: {', '.join(PIPELINE_STAGES)}.")

        self.artifacts: Dict[str, Any] = {}
        self.results: List[Any] = []

    def run(self) -> Any:
        """
        Executes the pipeline stage by stage. The artifact of each stage is
        the input of the next. A syntax error is raised as a PytcError.
        """
        try:
            # --- Stage 1: Parsing ---
            self._run_stage("ast", parse_python, self.source_content, self.file_path)
            if self.stop_after_stage == "ast":
                return self.results[-1]

            # --- Stage 2: Type Checking ---
            symbol_table, diagnostics = check_module(self.results[-1], self.config)
            self._store("check", CheckResult(file_path=self.file_path, symbol_table=symbol_table, diagnostics=diagnostics))
            return self.results[-1]

        except PytcError:
            raise
        except Exception as e:
            logger.exception("Unexpected failure while checking %s", self.file_path)
            raise InternalCheckerError(f"An unexpected internal error occurred: {e}") from e

    def _run_stage(self, name: str, func, *args, **kwargs) -> Any:
        """Runs a single function as a stage, storing and returning its result."""
        return self._store(name, func(*args, **kwargs))

    def _store(self, name: str, result: Any) -> Any:
        self.artifacts[name] = result
        self.results.append(result)
        if name in self.dump_stages:
            self.save_artifact(name, result)
        return result

    def save_artifact(self, name: str, data: Any):
        """Saves an intermediate artifact next to the source file as `<file>.<stage>.json`."""
        if self.file_path == STDIN_FILE_PATH:
            base_name = "stdin_output"
        else:
            base_name = os.path.splitext(self.file_path)[0]

        output_path = f"{base_name}.{name}.json"

        print(f"--- Saving artifact '{name}' to {output_path} ---")

        try:
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=False, cls=CheckerArtifactEncoder)
        except OSError as e:
            logger.error("Could not save artifact '%s': %s", name, e)


def check_source(
    source_content: str,
    file_path: Optional[str] = None,
    config: Optional[CheckerConfig] = None,
    dump_stages: Optional[List[str]] = None,
) -> CheckResult:
    """
    Checks source text. A syntax error short-circuits checking and is returned
    as the only diagnostic, with no symbol table.
    """
    pipeline = CheckPipeline(source_content, file_path, config, dump_stages)
    try:
        return pipeline.run()
    except PytcError as e:
        if e.code != ErrorCode.SYNTAX_ERROR:
            raise
        collector = DiagnosticCollector(pipeline.file_path)
        collector.add(Diagnostic.from_error(e))
        return CheckResult(file_path=pipeline.file_path, symbol_table=None, diagnostics=collector.diagnostics)


def check_file(file_path: str, config: Optional[CheckerConfig] = None, dump_stages: Optional[List[str]] = None) -> CheckResult:
    """
    Checks one file. An unreadable file raises a PytcError (FILE_UNREADABLE):
    it is the run's overall failure, not a diagnostic.
    """
    source = read_source(file_path)
    return check_source(source, file_path=file_path, config=config, dump_stages=dump_stages)
