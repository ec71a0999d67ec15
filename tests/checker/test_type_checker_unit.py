import pytest

from pytc.config.config import CheckerConfig
from pytc.exceptions import InternalCheckerError
from pytc.parser.core.classes import UnsupportedExpression, UnsupportedStatement
from pytc.parser.utils.factory_helpers import *
from pytc.type_checker.core.checker import TypeChecker, check_module
from pytc.type_checker.core.diagnostics import DiagnosticKind
from pytc.type_checker.core.types import BOOL, FLOAT, INT, NONE, STR, UNKNOWN, FunctionType


@pytest.mark.parametrize(
    "expression, expected_type",
    [
        pytest.param(get_int(1), INT, id="int"),
        pytest.param(get_str("a"), STR, id="str"),
        pytest.param(get_bool(False), BOOL, id="bool"),
        pytest.param(get_float(1.5), FLOAT, id="float"),
        pytest.param(get_none(), NONE, id="none"),
        pytest.param(get_binop(get_int(1), "-", get_int(2)), INT, id="int_binop_any_operator"),
        pytest.param(get_binop(get_int(1), "*", get_str("a")), STR, id="str_operand"),
        pytest.param(get_binop(get_bool(True), "+", get_int(1)), UNKNOWN, id="bool_operand"),
        pytest.param(get_call("repr", [get_int(1)]), STR, id="builtin_call"),
        pytest.param(UnsupportedExpression(span=get_span(), kind="Lambda"), UNKNOWN, id="unsupported"),
    ],
)
def test_expression_inference(expression, expected_type):
    # ARRANGE
    module = get_module([get_assign(["result"], expression)])

    # ACT
    symbol_table, diagnostics = check_module(module)

    # ASSERT
    assert diagnostics == []
    assert symbol_table.lookup("result").type == expected_type


def test_function_body_is_checked_in_its_own_scope():
    # ARRANGE
    function = get_function_def(
        "scale",
        [get_param("factor", "float"), get_param("rest", "int", variadic=True)],
        "float",
        [get_ann_assign("local", "str", get_name("factor"))],
    )
    module = get_module([function, get_expr_statement(get_name("local"))])

    # ACT
    symbol_table, diagnostics = TypeChecker(module).check()

    # ASSERT
    assert [d.kind for d in diagnostics] == [DiagnosticKind.TYPE_ERROR, DiagnosticKind.UNDEFINED_NAME]
    assert "found 'float'" in diagnostics[0].message
    assert symbol_table.lookup("scale").type == FunctionType(params=(FLOAT,), returns=FLOAT)
    assert symbol_table.lookup("local") is None
    assert symbol_table.current == symbol_table.root


def test_unsupported_statements_are_skipped():
    module = get_module([UnsupportedStatement(span=get_span(), kind="While"), get_ann_assign("x", "int", get_int(1))])

    _, diagnostics = check_module(module)

    assert diagnostics == []


def test_hoisting_is_applied_inside_function_bodies():
    # ARRANGE
    helper = get_function_def("helper", [], "str", [])
    outer = get_function_def("outer", [], None, [get_ann_assign("v", "int", get_call("helper")), helper])
    module = get_module([outer])

    # ACT
    _, without_hoisting = check_module(module)
    _, with_hoisting = check_module(module, CheckerConfig(hoist_function_signatures=True))

    # ASSERT
    assert [d.kind for d in without_hoisting] == [DiagnosticKind.UNDEFINED_NAME]
    assert [d.kind for d in with_hoisting] == [DiagnosticKind.TYPE_ERROR]


def test_checker_can_be_run_again():
    checker = TypeChecker(get_module([get_expr_statement(get_name("missing"))]))

    first_table, first = checker.check()
    second_table, second = checker.check()

    assert first == second
    assert first_table is not second_table


def test_unknown_node_is_an_internal_error():
    module = get_module([])
    module.body.append(get_name("not_a_statement"))

    with pytest.raises(InternalCheckerError):
        check_module(module)
