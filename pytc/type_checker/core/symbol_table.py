"""
Defines the symbol table: a tree of lexical scopes stored in an append-only
arena, each scope referring to its parent by index.

Name lookup walks from a scope up through its ancestors, which collapses
Python's Local -> Enclosing -> Global -> Built-in order into a single chain
(built-ins live in the root scope).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pytc.exceptions import InternalCheckerError
from pytc.parser.core.classes import Span

from .types import CheckerType, render_type

logger = logging.getLogger("pytc.symbol_table")


class SymbolKind(str, Enum):
    VARIABLE = "Variable"
    FUNCTION = "Function"
    PARAMETER = "Parameter"


class ScopeKind(str, Enum):
    MODULE = "Module"
    FUNCTION = "Function"


@dataclass
class Location:
    """Represents a location in a source file."""

    file_path: str
    line: int
    column: int

    @classmethod
    def from_span(cls, span: Span, file_path: str) -> "Location":
        return cls(span.file_path or file_path, span.s_line, span.s_col)


@dataclass
class Symbol:
    """A named binding. `type` is None when nothing is known about it."""

    name: str
    kind: SymbolKind
    location: Location
    type: Optional[CheckerType] = None


@dataclass
class Scope:
    """Represents a lexical scope containing symbols."""

    id: int
    kind: ScopeKind
    parent: Optional[int] = None
    # Name of the function whose body this scope is, None for the module.
    name: Optional[str] = None
    symbols: Dict[str, Symbol] = field(default_factory=dict)
    children: List[int] = field(default_factory=list)


class SymbolTable:
    ROOT = 0

    def __init__(self):
        self._scopes: List[Scope] = [Scope(id=self.ROOT, kind=ScopeKind.MODULE)]
        self._current = self.ROOT

    @property
    def root(self) -> int:
        return self.ROOT

    @property
    def current(self) -> int:
        return self._current

    @property
    def scopes(self) -> List[Scope]:
        return list(self._scopes)

    def scope(self, scope_id: int) -> Scope:
        if not 0 <= scope_id < len(self._scopes):
            raise InternalCheckerError(f"Unknown scope id {scope_id}.")
        return self._scopes[scope_id]

    def children(self, scope_id: int) -> List[Scope]:
        return [self._scopes[child] for child in self.scope(scope_id).children]

    def enter_scope(self, kind: ScopeKind, name: Optional[str] = None) -> int:
        """Creates a child of the current scope, makes it current and returns its id."""
        parent = self._current
        scope = Scope(id=len(self._scopes), kind=kind, parent=parent, name=name)
        self._scopes.append(scope)
        self._scopes[parent].children.append(scope.id)
        self._current = scope.id
        logger.debug("Entered scope", extra={"scope_id": scope.id, "parent": parent, "scope_name": name})
        return scope.id

    def exit_scope(self) -> int:
        """Makes the parent of the current scope current. Exiting the root does nothing."""
        parent = self._scopes[self._current].parent
        if parent is None:
            logger.warning("exit_scope() called on the module scope; ignoring")
            return self._current
        logger.debug("Exited scope", extra={"scope_id": self._current, "parent": parent})
        self._current = parent
        return parent

    def insert(self, symbol: Symbol, scope: Optional[int] = None):
        """Binds the symbol in `scope` (default: current), replacing any binding of the same name there."""
        target = self.scope(self._current if scope is None else scope)
        target.symbols[symbol.name] = symbol

    def lookup_local(self, name: str, scope: Optional[int] = None) -> Optional[Symbol]:
        return self.scope(self._current if scope is None else scope).symbols.get(name)

    def lookup(self, name: str, scope: Optional[int] = None) -> Optional[Symbol]:
        scope_id: Optional[int] = self._current if scope is None else scope
        while scope_id is not None:
            current = self.scope(scope_id)
            if name in current.symbols:
                return current.symbols[name]
            scope_id = current.parent
        return None

    def to_dict(self) -> Dict[str, Any]:
        """A JSON-friendly view of the whole scope tree, used for artifacts."""
        return {
            "scopes": [
                {
                    "id": scope.id,
                    "kind": scope.kind.value,
                    "name": scope.name,
                    "parent": scope.parent,
                    "children": list(scope.children),
                    "symbols": {
                        name: {
                            "kind": symbol.kind.value,
                            "type": render_type(symbol.type) if symbol.type is not None else None,
                            "location": {"file_path": symbol.location.file_path, "line": symbol.location.line, "column": symbol.location.column},
                        }
                        for name, symbol in scope.symbols.items()
                    },
                }
                for scope in self._scopes
            ]
        }
