"""
Utility functions for the pytc type checker, including terminal coloring,
diagnostic formatting and a JSON artifact serializer.
"""

import json
from enum import Enum

from pydantic import BaseModel


class TerminalColors:
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


class CheckerArtifactEncoder(json.JSONEncoder):
    def default(self, o):
        if isinstance(o, BaseModel):
            return o.model_dump(mode="json")
        if hasattr(o, "to_dict"):
            return o.to_dict()
        if isinstance(o, Enum):
            return o.value
        if isinstance(o, set):
            return list(o)
        return super().default(o)


def format_diagnostic(diagnostic, use_color: bool = True) -> str:
    """Renders a diagnostic as `path:line:col: Kind: message`."""
    location = f"{diagnostic.file_path}:{diagnostic.line}:{diagnostic.column}"
    kind = diagnostic.kind.value
    if not use_color:
        return f"{location}: {kind}: {diagnostic.message}"
    return f"{TerminalColors.BOLD}{location}{TerminalColors.RESET}: {TerminalColors.RED}{kind}{TerminalColors.RESET}: {diagnostic.message}"


def paint(text: str, color: str, use_color: bool = True) -> str:
    return f"{color}{text}{TerminalColors.RESET}" if use_color else text
