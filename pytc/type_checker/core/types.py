"""
Defines the closed set of type values understood by the checker, the
compatibility relation between them and the resolution of annotation names.

Unknown and Any form the gradual-typing escape hatch: they are compatible
with every other type in both directions, so missing information never
cascades into further errors.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from pytc.config.config import ANNOTATION_NAMES


@dataclass(frozen=True)
class PrimitiveType:
    """One of the built-in scalar types: int, str, bool, float or None."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class FunctionType:
    params: Tuple["CheckerType", ...]
    returns: "CheckerType"

    def __str__(self) -> str:
        return f"({', '.join(str(p) for p in self.params)}) -> {self.returns}"


@dataclass(frozen=True)
class UnknownType:
    """The type of anything the checker could not work out."""

    def __str__(self) -> str:
        return "Unknown"


@dataclass(frozen=True)
class AnyType:
    """The explicit `Any` annotation."""

    def __str__(self) -> str:
        return "Any"


CheckerType = Union[PrimitiveType, FunctionType, UnknownType, AnyType]

INT = PrimitiveType("int")
STR = PrimitiveType("str")
BOOL = PrimitiveType("bool")
FLOAT = PrimitiveType("float")
NONE = PrimitiveType("None")
UNKNOWN = UnknownType()
ANY = AnyType()

_TYPES_BY_NAME = {
    "int": INT,
    "str": STR,
    "bool": BOOL,
    "float": FLOAT,
    "None": NONE,
    "Any": ANY,
}


def is_gradual(t: CheckerType) -> bool:
    return isinstance(t, (UnknownType, AnyType))


def is_compatible(a: CheckerType, b: CheckerType) -> bool:
    """
    Decides whether a value of type `a` may be used where `b` is expected.
    There is no subtyping and no numeric widening: `int` is not accepted
    where a `float` is expected.
    """
    if is_gradual(a) or is_gradual(b):
        return True
    if isinstance(a, FunctionType) and isinstance(b, FunctionType):
        if len(a.params) != len(b.params):
            return False
        return all(is_compatible(x, y) for x, y in zip(a.params, b.params)) and is_compatible(a.returns, b.returns)
    return a == b


def resolve_annotation(name: Optional[str]) -> Optional[CheckerType]:
    """
    Maps an annotation name to a type value. Returns None for anything outside
    the fixed set of known names; callers fall back to UNKNOWN.
    """
    if name is None:
        return None
    canonical = ANNOTATION_NAMES.get(name)
    if canonical is None:
        return None
    return _TYPES_BY_NAME[canonical]


def type_from_name(name: str) -> CheckerType:
    """Resolves one of the canonical type names used in the built-in signature table."""
    return _TYPES_BY_NAME.get(name, UNKNOWN)


def render_type(t: Optional[CheckerType]) -> str:
    return str(t if t is not None else UNKNOWN)
