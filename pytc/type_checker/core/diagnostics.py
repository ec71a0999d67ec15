"""
Structured diagnostics and the collector that accumulates them during a run.
"""

from enum import Enum
from typing import Iterator, List, Optional

from pydantic import BaseModel

from pytc.exceptions import ErrorCode, PytcError
from pytc.parser.core.classes import Span


class DiagnosticKind(str, Enum):
    PARSE_ERROR = "ParseError"
    TYPE_ERROR = "TypeError"
    UNDEFINED_NAME = "UndefinedName"
    IO_ERROR = "IOError"


KIND_BY_CODE = {
    ErrorCode.SYNTAX_ERROR: DiagnosticKind.PARSE_ERROR,
    ErrorCode.FILE_UNREADABLE: DiagnosticKind.IO_ERROR,
    ErrorCode.TYPE_MISMATCH: DiagnosticKind.TYPE_ERROR,
    ErrorCode.UNDEFINED_NAME: DiagnosticKind.UNDEFINED_NAME,
}


class Diagnostic(BaseModel):
    """One detected problem, independent of how it is displayed."""

    kind: DiagnosticKind
    code: str
    file_path: str
    line: int
    column: int
    message: str
    end_line: Optional[int] = None
    end_column: Optional[int] = None

    @classmethod
    def from_error(cls, error: PytcError) -> "Diagnostic":
        line, column = (error.span.s_line, error.span.s_col) if error.span else (1, 1)
        return cls(
            kind=KIND_BY_CODE[error.code],
            code=error.code.name,
            file_path=error.file_path or "<unknown>",
            line=line,
            column=column,
            message=error.core_message,
            end_line=error.span.e_line if error.span else None,
            end_column=error.span.e_col if error.span else None,
        )

    def __str__(self) -> str:
        return f"{self.file_path}:{self.line}:{self.column}: {self.kind.value}: {self.message}"


class DiagnosticCollector:
    """
    Accumulates diagnostics in the order they are reported. Nothing is
    deduplicated, capped or reordered.
    """

    def __init__(self, file_path: str):
        self.file_path = file_path
        self._diagnostics: List[Diagnostic] = []

    def report(self, code: ErrorCode, span: Optional[Span], **details) -> Diagnostic:
        diagnostic = Diagnostic(
            kind=KIND_BY_CODE[code],
            code=code.name,
            file_path=(span.file_path if span and span.file_path else self.file_path),
            line=span.s_line if span else 1,
            column=span.s_col if span else 1,
            message=code.value.format(**details),
            end_line=span.e_line if span else None,
            end_column=span.e_col if span else None,
        )
        self._diagnostics.append(diagnostic)
        return diagnostic

    def add(self, diagnostic: Diagnostic):
        self._diagnostics.append(diagnostic)

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self._diagnostics)

    def has_errors(self) -> bool:
        return bool(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)
