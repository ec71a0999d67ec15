"""
Custom exception types and error codes for the pytc type checker.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from pytc.parser.core.classes import Span


class ErrorCode(Enum):

    # --- Fatal Errors (stop checking the file) ---
    SYNTAX_ERROR = "Syntax Error: {details}"
    FILE_UNREADABLE = "Could not read file '{path}': {details}"

    # --- Recoverable Errors (recorded, checking continues) ---
    TYPE_MISMATCH = "Incompatible types in assignment to '{name}': expected '{expected}', found '{found}'."
    UNDEFINED_NAME = "Name '{name}' is not defined."


class PytcError(Exception):
    def __init__(
        self,
        code: ErrorCode,
        span: Optional["Span"] = None,
        file_path: Optional[str] = None,
        **kwargs,
    ):
        self.code = code
        self.span = span
        self.file_path = span.file_path if span and span.file_path else file_path
        self.details = kwargs

        # The format string (e.g., "Name '{name}' is not defined.") is populated
        # with any extra data it needs from kwargs.
        self.core_message = code.value.format(**kwargs)

        location_prefix = ""
        if span:
            location_prefix = f"Error in '{self.file_path}' (Line: {span.s_line}, Column: {span.s_col}):\n"
        elif self.file_path:
            location_prefix = f"Error in '{self.file_path}': "

        self.message = location_prefix + self.core_message

        super().__init__(self.message)


class InternalCheckerError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
