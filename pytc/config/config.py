"""
Static configuration data for the pytc type checker.
This includes the annotation names the checker understands, the built-in
function signatures seeded into every module scope, operator names and the
per-run checker options.
"""

from pydantic import BaseModel

# Annotation spellings mapped to the canonical type name they resolve to.
# Anything not listed here resolves to nothing and the checker uses Unknown.
ANNOTATION_NAMES = {
    "int": "int",
    "str": "str",
    "bool": "bool",
    "float": "float",
    "None": "None",
    "Any": "Any",
    "typing.Any": "Any",
}

# Built-ins share the module scope with user code. Argument counts are not
# checked, so a single `Any` stands in for any parameter list.
BUILTIN_SIGNATURES = {
    "print": {"arg_types": ["Any"], "return_type": "None", "doc": {"summary": "Prints the values to standard output."}},
    "input": {"arg_types": ["Any"], "return_type": "str", "doc": {"summary": "Reads a line from standard input."}},
    "len": {"arg_types": ["Any"], "return_type": "int", "doc": {"summary": "Returns the number of items in a container."}},
    "repr": {"arg_types": ["Any"], "return_type": "str", "doc": {"summary": "Returns the printable representation of an object."}},
    # Primitive type names are bound to their constructors.
    "int": {"arg_types": ["Any"], "return_type": "int", "doc": {"summary": "Converts a value to an integer."}},
    "str": {"arg_types": ["Any"], "return_type": "str", "doc": {"summary": "Converts a value to a string."}},
    "float": {"arg_types": ["Any"], "return_type": "float", "doc": {"summary": "Converts a value to a floating point number."}},
    "bool": {"arg_types": ["Any"], "return_type": "bool", "doc": {"summary": "Converts a value to a boolean."}},
}

BUILTINS_FILE_PATH = "<builtins>"
STDIN_FILE_PATH = "<stdin>"

# Stages of the check pipeline, in execution order. Each can be dumped as JSON.
PIPELINE_STAGES = ("ast", "check")

BINARY_OPERATOR_MAP = {
    "Add": "+",
    "Sub": "-",
    "Mult": "*",
    "MatMult": "@",
    "Div": "/",
    "FloorDiv": "//",
    "Mod": "%",
    "Pow": "**",
    "LShift": "<<",
    "RShift": ">>",
    "BitOr": "|",
    "BitXor": "^",
    "BitAnd": "&",
}


class CheckerConfig(BaseModel):
    """Options for a single checking run."""

    # Bind every function signature of a block before walking it, so sibling
    # functions may call each other regardless of definition order.
    hoist_function_signatures: bool = False
    # When False, unresolved names silently degrade to Unknown.
    report_undefined_names: bool = True
