import ast
import re
import tokenize
from typing import List, Optional

from pytc.config.config import BINARY_OPERATOR_MAP, STDIN_FILE_PATH
from pytc.exceptions import ErrorCode, PytcError

from .classes import *

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class PythonTransformer:
    """
    Transforms the tree produced by Python's own `ast` module into the checker's
    syntax tree models.
    Each method named after an `ast` node class is called whenever that node is
    encountered; statements and expressions without a method become
    `UnsupportedStatement` / `UnsupportedExpression` placeholders.
    """

    def __init__(self, source: str, file_path: str):
        self.file_path = file_path
        self._lines = _LINE_BREAK.split(source)

    # --- Helper methods for creating spans ---
    def _char_column(self, line: int, byte_offset: int) -> int:
        """`ast` reports UTF-8 byte offsets; diagnostics use 1-based character columns."""
        if 1 <= line <= len(self._lines):
            prefix = self._lines[line - 1].encode("utf-8")[:byte_offset]
            return len(prefix.decode("utf-8", errors="ignore")) + 1
        return byte_offset + 1

    def _create_span(self, node: ast.AST) -> Span:
        s_line = node.lineno
        e_line = getattr(node, "end_lineno", None) or s_line
        s_col = self._char_column(s_line, node.col_offset)
        end_offset = getattr(node, "end_col_offset", None)
        e_col = self._char_column(e_line, end_offset) if end_offset is not None else s_col
        return Span(s_line=s_line, s_col=s_col, e_line=e_line, e_col=e_col, file_path=self.file_path)

    # --- Dispatch ---
    def transform(self, tree: ast.Module) -> Module:
        body = self._block(tree.body)
        if body:
            span = Span(s_line=body[0].span.s_line, s_col=body[0].span.s_col, e_line=body[-1].span.e_line, e_col=body[-1].span.e_col, file_path=self.file_path)
        else:
            span = Span(s_line=1, s_col=1, e_line=1, e_col=1, file_path=self.file_path)
        return Module(file_path=self.file_path, body=body, span=span)

    def _block(self, statements: List[ast.stmt]) -> List[Statement]:
        return [self.statement(stmt) for stmt in statements]

    def statement(self, node: ast.stmt) -> Statement:
        method = getattr(self, type(node).__name__, None)
        result = method(node) if method else None
        if result is None:
            return UnsupportedStatement(kind=type(node).__name__, span=self._create_span(node))
        return result

    def expression(self, node: ast.expr) -> Expression:
        method = getattr(self, type(node).__name__, None)
        if method is None:
            return UnsupportedExpression(kind=type(node).__name__, span=self._create_span(node))
        return method(node)

    # --- Annotations ---
    def _dotted_name(self, node: ast.expr) -> Optional[str]:
        if isinstance(node, ast.Name):
            return node.id
        if isinstance(node, ast.Attribute):
            base = self._dotted_name(node.value)
            return f"{base}.{node.attr}" if base else None
        return None

    def annotation(self, node: Optional[ast.expr]) -> Optional[TypeAnnotation]:
        if node is None:
            return None
        name = None
        if isinstance(node, ast.Constant):
            if node.value is None:
                name = "None"
            elif isinstance(node.value, str):
                # Forward reference written as a string, e.g. `x: "int"`.
                name = node.value.strip()
        else:
            name = self._dotted_name(node)
        return TypeAnnotation(name=name, span=self._create_span(node))

    def _parameter(self, arg: ast.arg, variadic: bool = False) -> Parameter:
        return Parameter(name=arg.arg, annotation=self.annotation(arg.annotation), variadic=variadic, span=self._create_span(arg))

    # --- Statement Transformations ---
    def FunctionDef(self, node: ast.FunctionDef):
        arguments = node.args
        params = [self._parameter(a) for a in arguments.posonlyargs + arguments.args]
        if arguments.vararg:
            params.append(self._parameter(arguments.vararg, variadic=True))
        params.extend(self._parameter(a) for a in arguments.kwonlyargs)
        if arguments.kwarg:
            params.append(self._parameter(arguments.kwarg, variadic=True))

        return FunctionDef(
            name=node.name,
            params=params,
            returns=self.annotation(node.returns),
            body=self._block(node.body),
            docstring=ast.get_docstring(node),
            span=self._create_span(node),
        )

    def AnnAssign(self, node: ast.AnnAssign):
        # Annotated attribute or subscript targets (`self.x: int = 1`) bind no name.
        if not isinstance(node.target, ast.Name):
            return None
        return AnnAssign(
            target=self.Name(node.target),
            annotation=self.annotation(node.annotation),
            value=self.expression(node.value) if node.value is not None else None,
            span=self._create_span(node),
        )

    def _collect_unpacked(self, node: ast.expr, names: List[Name]):
        if isinstance(node, ast.Name):
            names.append(self.Name(node))
        elif isinstance(node, ast.Starred):
            self._collect_unpacked(node.value, names)
        elif isinstance(node, (ast.Tuple, ast.List)):
            for element in node.elts:
                self._collect_unpacked(element, names)

    def Assign(self, node: ast.Assign):
        targets, unpacked = [], []
        for target in node.targets:
            if isinstance(target, ast.Name):
                targets.append(self.Name(target))
            else:
                self._collect_unpacked(target, unpacked)
        return Assign(targets=targets, unpacked_targets=unpacked, value=self.expression(node.value), span=self._create_span(node))

    def Expr(self, node: ast.Expr):
        return ExprStatement(value=self.expression(node.value), span=self._create_span(node))

    # --- Expression Transformations ---
    def Name(self, node: ast.Name):
        return Name(id=node.id, span=self._create_span(node))

    def Constant(self, node: ast.Constant):
        value = node.value
        # bool is a subclass of int, so it has to be tested first.
        if isinstance(value, bool):
            kind = "bool"
        elif isinstance(value, int):
            kind = "int"
        elif isinstance(value, float):
            kind = "float"
        elif isinstance(value, str):
            kind = "str"
        elif value is None:
            kind = "None"
        else:
            kind, value = "other", repr(value)
        return Constant(kind=kind, value=value, span=self._create_span(node))

    def BinOp(self, node: ast.BinOp):
        op_name = type(node.op).__name__
        return BinOp(
            left=self.expression(node.left),
            op=BINARY_OPERATOR_MAP.get(op_name, op_name),
            right=self.expression(node.right),
            span=self._create_span(node),
        )

    def Call(self, node: ast.Call):
        keywords = [Keyword(arg=kw.arg, value=self.expression(kw.value), span=self._create_span(kw)) for kw in node.keywords]
        return Call(
            func=self.expression(node.func),
            args=[self.expression(arg) for arg in node.args],
            keywords=keywords,
            span=self._create_span(node),
        )


def _translate_syntax_error(err: SyntaxError, file_path: str) -> PytcError:
    """Translates the interpreter's SyntaxError into a PytcError with a 1-based location."""
    s_line = err.lineno or 1
    s_col = err.offset or 1
    e_line = getattr(err, "end_lineno", None) or s_line
    e_col = getattr(err, "end_offset", None) or s_col
    span = Span(s_line=s_line, s_col=max(s_col, 1), e_line=e_line, e_col=max(e_col, 1), file_path=file_path)
    return PytcError(code=ErrorCode.SYNTAX_ERROR, span=span, details=err.msg)


def parse_python(source: str, file_path: str = STDIN_FILE_PATH) -> Module:
    """Parses Python source and transforms it into the checker's syntax tree."""
    try:
        tree = ast.parse(source, filename=file_path)
    except SyntaxError as e:
        raise _translate_syntax_error(e, file_path) from e
    except ValueError as e:
        # Older interpreters reject NUL bytes with a ValueError instead of a SyntaxError.
        span = Span(s_line=1, s_col=1, e_line=1, e_col=1, file_path=file_path)
        raise PytcError(code=ErrorCode.SYNTAX_ERROR, span=span, details=str(e)) from e

    return PythonTransformer(source, file_path).transform(tree)


def read_source(file_path: str) -> str:
    """
    Reads a source file the way the interpreter does: a UTF-8 byte-order mark
    and a PEP 263 coding line are honoured, UTF-8 otherwise. Unreadable files
    raise a FILE_UNREADABLE PytcError.
    """
    try:
        with tokenize.open(file_path) as f:
            return f.read()
    except (OSError, UnicodeDecodeError, SyntaxError) as e:
        # tokenize.open reports an unknown or conflicting coding line as a SyntaxError.
        if isinstance(e, OSError) and e.strerror:
            detail = e.strerror
        elif isinstance(e, SyntaxError):
            detail = e.msg
        else:
            detail = str(e)
        raise PytcError(code=ErrorCode.FILE_UNREADABLE, file_path=file_path, path=file_path, details=detail) from e


def parse_file(file_path: str) -> Module:
    return parse_python(read_source(file_path), file_path=file_path)
