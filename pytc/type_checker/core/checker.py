import logging
from typing import List, Optional, Tuple

from pytc.config.config import CheckerConfig
from pytc.exceptions import ErrorCode, InternalCheckerError
from pytc.parser.core.classes import *

from .builtins import seed_builtins
from .diagnostics import Diagnostic, DiagnosticCollector
from .symbol_table import Location, ScopeKind, Symbol, SymbolKind, SymbolTable
from .types import BOOL, FLOAT, INT, NONE, STR, UNKNOWN, CheckerType, FunctionType, is_compatible, render_type, resolve_annotation

logger = logging.getLogger("pytc.checker")

_CONSTANT_TYPES = {"int": INT, "str": STR, "bool": BOOL, "float": FLOAT, "None": NONE}


class TypeChecker:
    """
    Performs the type checking of a single module in one pass, in file order.

    Only function definitions, annotated assignments, plain assignments and
    bare expression statements are modelled; every other statement is skipped
    without walking its body. The scope being checked is passed explicitly
    through every recursive call, and the symbol table's own cursor is
    advanced and retracted around each function body so it is back at the
    root when checking returns.

    Problems are recorded as diagnostics and never interrupt the traversal.
    """

    def __init__(self, module: Module, config: Optional[CheckerConfig] = None):
        self.module = module
        self.file_path = module.file_path
        self.config = config or CheckerConfig()
        self.symbol_table = SymbolTable()
        self.diagnostics = DiagnosticCollector(self.file_path)

    def check(self) -> Tuple[SymbolTable, List[Diagnostic]]:
        # Every run starts from a fresh table so checking is repeatable.
        self.symbol_table = SymbolTable()
        self.diagnostics = DiagnosticCollector(self.file_path)
        seed_builtins(self.symbol_table)

        self._check_block(self.module.body, self.symbol_table.root)

        if self.symbol_table.current != self.symbol_table.root:
            raise InternalCheckerError(f"Scope cursor left at scope {self.symbol_table.current} after checking '{self.file_path}'.")

        logger.debug("Checked module", extra={"file_path": self.file_path, "diagnostic_count": len(self.diagnostics)})
        return self.symbol_table, self.diagnostics.diagnostics

    # --- Helpers ---
    def _bind(self, name: str, kind: SymbolKind, symbol_type: CheckerType, span: Span, scope: int):
        location = Location.from_span(span, self.file_path)
        self.symbol_table.insert(Symbol(name=name, kind=kind, location=location, type=symbol_type), scope=scope)

    def _resolve(self, annotation: Optional[TypeAnnotation]) -> CheckerType:
        if annotation is None:
            return UNKNOWN
        return resolve_annotation(annotation.name) or UNKNOWN

    def _function_type(self, node: FunctionDef) -> FunctionType:
        params = tuple(self._resolve(p.annotation) for p in node.params if not p.variadic)
        return FunctionType(params=params, returns=self._resolve(node.returns))

    # --- Statements ---
    def _check_block(self, statements: List[Statement], scope: int):
        if self.config.hoist_function_signatures:
            for stmt in statements:
                if isinstance(stmt, FunctionDef):
                    self._bind(stmt.name, SymbolKind.FUNCTION, self._function_type(stmt), stmt.span, scope)

        for stmt in statements:
            self._check_statement(stmt, scope)

    def _check_statement(self, stmt: Statement, scope: int):
        if isinstance(stmt, FunctionDef):
            self._check_function_def(stmt, scope)
        elif isinstance(stmt, AnnAssign):
            self._check_ann_assign(stmt, scope)
        elif isinstance(stmt, Assign):
            self._check_assign(stmt, scope)
        elif isinstance(stmt, ExprStatement):
            self._infer(stmt.value, scope)
        elif isinstance(stmt, UnsupportedStatement):
            logger.debug("Skipping unmodelled statement", extra={"statement_kind": stmt.kind, "source_line": stmt.span.s_line})
        else:
            raise InternalCheckerError(f"Unhandled statement node '{type(stmt).__name__}'.")

    def _check_function_def(self, node: FunctionDef, scope: int):
        # The name is bound in the enclosing scope before the body is checked,
        # so the function can call itself.
        self._bind(node.name, SymbolKind.FUNCTION, self._function_type(node), node.span, scope)

        if self.symbol_table.current != scope:
            raise InternalCheckerError(f"Function '{node.name}' checked outside its enclosing scope.")

        body_scope = self.symbol_table.enter_scope(ScopeKind.FUNCTION, name=node.name)
        try:
            for param in node.params:
                param_type = UNKNOWN if param.variadic else self._resolve(param.annotation)
                self._bind(param.name, SymbolKind.PARAMETER, param_type, param.span, body_scope)
            self._check_block(node.body, body_scope)
        finally:
            self.symbol_table.exit_scope()

    def _check_ann_assign(self, node: AnnAssign, scope: int):
        declared = self._resolve(node.annotation)

        if node.value is not None:
            found = self._infer(node.value, scope)
            if not is_compatible(found, declared):
                self.diagnostics.report(
                    ErrorCode.TYPE_MISMATCH,
                    node.value.span,
                    name=node.target.id,
                    expected=render_type(declared),
                    found=render_type(found),
                )

        # Later uses trust the annotation, even after a reported mismatch.
        self._bind(node.target.id, SymbolKind.VARIABLE, declared, node.target.span, scope)

    def _check_assign(self, node: Assign, scope: int):
        value_type = self._infer(node.value, scope)
        for target in node.targets:
            self._bind(target.id, SymbolKind.VARIABLE, value_type, target.span, scope)
        for target in node.unpacked_targets:
            self._bind(target.id, SymbolKind.VARIABLE, UNKNOWN, target.span, scope)

    # --- Expressions ---
    def _infer(self, expr: Expression, scope: int) -> CheckerType:
        """Infers the type of an expression. Never fails: the fallback is Unknown."""
        if isinstance(expr, Constant):
            return _CONSTANT_TYPES.get(expr.kind, UNKNOWN)

        if isinstance(expr, Name):
            symbol = self.symbol_table.lookup(expr.id, scope)
            if symbol is None:
                if self.config.report_undefined_names:
                    self.diagnostics.report(ErrorCode.UNDEFINED_NAME, expr.span, name=expr.id)
                return UNKNOWN
            return symbol.type or UNKNOWN

        if isinstance(expr, BinOp):
            left = self._infer(expr.left, scope)
            right = self._infer(expr.right, scope)
            if left == INT and right == INT:
                return INT
            if left == STR or right == STR:
                return STR
            return UNKNOWN

        if isinstance(expr, Call):
            callee = self._infer(expr.func, scope)
            # Arguments are inferred only to surface nested diagnostics;
            # arity and argument types are not checked against the callee.
            for arg in expr.args:
                self._infer(arg, scope)
            for keyword in expr.keywords:
                self._infer(keyword.value, scope)
            if isinstance(expr.func, Name) and isinstance(callee, FunctionType):
                return callee.returns
            return UNKNOWN

        if isinstance(expr, UnsupportedExpression):
            return UNKNOWN

        raise InternalCheckerError(f"Unhandled expression node '{type(expr).__name__}'.")


def check_module(module: Module, config: Optional[CheckerConfig] = None) -> Tuple[SymbolTable, List[Diagnostic]]:
    """High-level entry point for checking an already parsed module."""
    return TypeChecker(module, config).check()
