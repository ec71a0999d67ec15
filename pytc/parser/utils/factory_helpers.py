from typing import List, Optional

from pytc.parser.core.classes import *


def get_span(s_line: int = 1, s_col: int = 1, e_line: int = 1, e_col: int = 1, file_path: Optional[str] = "test.py"):
    return Span(s_line=s_line, s_col=s_col, e_line=e_line, e_col=e_col, file_path=file_path)


def get_name(id: str, span: Optional[Span] = None):
    return Name(span=span or get_span(), id=id)


def get_int(value: int):
    return Constant(span=get_span(), kind="int", value=value)


def get_str(value: str):
    return Constant(span=get_span(), kind="str", value=value)


def get_bool(value: bool):
    return Constant(span=get_span(), kind="bool", value=value)


def get_float(value: float):
    return Constant(span=get_span(), kind="float", value=value)


def get_none():
    return Constant(span=get_span(), kind="None", value=None)


def get_binop(left: Expression, op: str, right: Expression):
    return BinOp(span=get_span(), left=left, op=op, right=right)


def get_call(func: str, args: Optional[List[Expression]] = None):
    return Call(span=get_span(), func=get_name(func), args=args or [])


def get_annotation(name: Optional[str]):
    return TypeAnnotation(span=get_span(), name=name)


def get_param(name: str, annotation: Optional[str] = None, variadic: bool = False):
    return Parameter(span=get_span(), name=name, annotation=get_annotation(annotation) if annotation else None, variadic=variadic)


def get_ann_assign(target: str, annotation: Optional[str], value: Optional[Expression] = None):
    return AnnAssign(span=get_span(), target=get_name(target), annotation=get_annotation(annotation), value=value)


def get_assign(targets: List[str], value: Expression):
    return Assign(span=get_span(), targets=[get_name(t) for t in targets], value=value)


def get_expr_statement(value: Expression):
    return ExprStatement(span=get_span(), value=value)


def get_function_def(name: str, params: List[Parameter], returns: Optional[str], body: List[Statement]):
    return FunctionDef(span=get_span(), name=name, params=params, returns=get_annotation(returns) if returns else None, body=body)


def get_module(body: List[Statement], file_path: str = "test.py"):
    return Module(span=get_span(), file_path=file_path, body=body)
