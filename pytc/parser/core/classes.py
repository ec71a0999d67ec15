"""
Defines the formal data structures (contracts) for the syntax tree consumed by
the type checker.

Each node is a pydantic model and carries a `Span` object tracking its
location in the source code, enabling precise diagnostics in later stages.
Only the statement and expression forms the checker reasons about get a
dedicated model; everything else is kept as an `Unsupported*` placeholder so
the checker can skip it knowingly.
"""

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field

# --- Core Data Structures ---


class Span(BaseModel):
    """Represents a location in the source code. Lines and columns are 1-based."""

    s_line: int
    s_col: int
    e_line: int
    e_col: int
    file_path: Optional[str] = None


class ASTNode(BaseModel):
    """A base class for all syntax tree nodes, ensuring they have a span."""

    span: Span


# --- Expressions ---

ConstantKind = Literal["int", "str", "bool", "float", "None", "other"]


class Name(ASTNode):
    expression_type: Literal["name"] = "name"
    id: str


class Constant(ASTNode):
    expression_type: Literal["constant"] = "constant"
    kind: ConstantKind
    # Literals without a checker type (bytes, complex, ...) keep their repr().
    value: Any = None


class BinOp(ASTNode):
    expression_type: Literal["binop"] = "binop"
    left: "Expression"
    op: str
    right: "Expression"


class Keyword(ASTNode):
    arg: Optional[str] = None
    value: "Expression"


class Call(ASTNode):
    expression_type: Literal["call"] = "call"
    func: "Expression"
    args: List["Expression"] = []
    keywords: List[Keyword] = []


class UnsupportedExpression(ASTNode):
    """Any expression form the checker does not model (attribute access, lambdas, ...)."""

    expression_type: Literal["unsupported"] = "unsupported"
    kind: str


Expression = Annotated[
    Union[Name, Constant, BinOp, Call, UnsupportedExpression],
    Field(discriminator="expression_type"),
]


# --- Annotations ---


class TypeAnnotation(ASTNode):
    # Dotted or plain name of the annotation, None when it is not a name at all
    # (e.g. `list[int]`).
    name: Optional[str] = None


class Parameter(ASTNode):
    name: str
    annotation: Optional[TypeAnnotation] = None
    # True for `*args` and `**kwargs`.
    variadic: bool = False


# --- Statements ---


class FunctionDef(ASTNode):
    statement_type: Literal["function_def"] = "function_def"
    name: str
    params: List[Parameter]
    returns: Optional[TypeAnnotation] = None
    body: List["Statement"]
    docstring: Optional[str] = None


class AnnAssign(ASTNode):
    statement_type: Literal["ann_assign"] = "ann_assign"
    target: Name
    annotation: TypeAnnotation
    value: Optional[Expression] = None


class Assign(ASTNode):
    statement_type: Literal["assign"] = "assign"
    targets: List[Name]
    # Names bound through tuple/list unpacking (`a, b = ...`).
    unpacked_targets: List[Name] = []
    value: Expression


class ExprStatement(ASTNode):
    statement_type: Literal["expr"] = "expr"
    value: Expression


class UnsupportedStatement(ASTNode):
    """A statement the checker does not walk (control flow, classes, imports, ...)."""

    statement_type: Literal["unsupported"] = "unsupported"
    kind: str


Statement = Annotated[
    Union[FunctionDef, AnnAssign, Assign, ExprStatement, UnsupportedStatement],
    Field(discriminator="statement_type"),
]


# --- Top-level Structures ---


class Module(ASTNode):
    """The root of the syntax tree, representing a single source file."""

    file_path: str
    body: List[Statement]


for _model in (BinOp, Keyword, Call, FunctionDef, AnnAssign, Assign, ExprStatement, Module):
    _model.model_rebuild()

# A generic type hint for any node in the tree
Node = Union[ASTNode, Module]
