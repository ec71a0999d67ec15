from typing import Dict

from pytc.config.config import BUILTIN_SIGNATURES, BUILTINS_FILE_PATH

from .symbol_table import Location, Symbol, SymbolKind, SymbolTable
from .types import FunctionType, type_from_name


def builtin_function_types() -> Dict[str, FunctionType]:
    return {
        name: FunctionType(
            params=tuple(type_from_name(t) for t in sig["arg_types"]),
            returns=type_from_name(sig["return_type"]),
        )
        for name, sig in BUILTIN_SIGNATURES.items()
    }


def seed_builtins(symbol_table: SymbolTable):
    """Binds every built-in into the root scope. Must run before user code is walked."""
    location = Location(BUILTINS_FILE_PATH, 0, 0)
    for name, func_type in builtin_function_types().items():
        symbol_table.insert(Symbol(name=name, kind=SymbolKind.FUNCTION, location=location, type=func_type), scope=symbol_table.root)
