import pytest

from saturnus.ast import (
    ArrayAccess,
    ArrayLiteral,
    Boolean,
    Bop,
    Call,
    CustomOperator,
    Identifier,
    LambdaExpr,
    MapLiteral,
    Member,
    MemberOp,
    Number,
    Operator,
    SatString,
    TupleLiteral,
    Uop,
)
from saturnus.compiler import CompilerOptions
from saturnus.lua.expressions import (
    ExpressionEmitter,
    native_operator,
    translate_identifier,
)


def emit(expr, **options):
    emitter = ExpressionEmitter(CompilerOptions(**options))
    emitter.compile_expr(expr)
    return emitter.output()


def ident(name):
    return Identifier(name)


def test_translate_identifier_maps_symbols():
    assert translate_identifier("`+`") == "__plus__"
    assert translate_identifier("`a b`") == "__a_space_b__"


def test_translate_identifier_keeps_plain_chars():
    assert translate_identifier("`abc`") == "__a_b_c__"


@pytest.mark.parametrize(
    "op, text",
    [(Operator.ADD, "+"), (Operator.NEQ, "~="), (Operator.STRCAT, ".."), (Operator.AND, "and")],
)
def test_native_operator(op, text):
    assert native_operator(op) == text


@pytest.mark.parametrize("op", [Operator.RANGE, Operator.LSHIFT_ROT, CustomOperator("<>")])
def test_non_native_operator(op):
    assert native_operator(op) is None


def test_reserved_identifier_is_renamed():
    assert emit(ident("end")) == "__end__"
    assert emit(ident("repeat")) == "__repeat__"
    assert emit(ident("foo")) == "foo"


def test_escaped_identifier():
    assert emit(Identifier("`+`", is_escaped=True)) == translate_identifier("`+`")


def test_numbers():
    assert emit(Number(42)) == "42"
    assert emit(Number(1.5)) == "1.5"
    assert emit(Number(2.0)) == "2"


def test_binary_native():
    assert emit(Bop(ident("a"), Operator.ADD, ident("b"))) == "a + b"


def test_binary_range_becomes_call():
    out = emit(Bop(ident("a"), Operator.RANGE, ident("b")))
    assert out == translate_identifier("`..`") + "(a, b)"


def test_binary_custom_operator():
    out = emit(Bop(ident("a"), CustomOperator("<>"), ident("b")))
    assert out == translate_identifier("`<>`") + "(a, b)"


def test_unary():
    assert emit(Uop(Operator.NOT, ident("x"))) == "not x"
    assert emit(Uop(CustomOperator("!"), ident("x"))) == translate_identifier("`!`") + "(x)"


def test_unary_unhandled_operator_raises():
    with pytest.raises(ValueError):
        emit(Uop(Operator.RANGE, ident("x")))


def test_call_on_member_becomes_dispatch():
    call = Call(Member(ident("obj"), MemberOp.MEMBER, ident("run")), [ident("a"), ident("b")])
    assert emit(call) == "obj:run(a, b)"
    assert call.target.op is MemberOp.MEMBER


def test_call_static_member_kept():
    call = Call(Member(ident("Obj"), MemberOp.STATIC, ident("make")), [])
    assert emit(call) == "Obj.make()"


def test_null_safe_call():
    call = Call(ident("f"), [], is_null_safe=True)
    assert emit(call) == "f ~= nil and f()"


def test_member_coalesce():
    out = emit(Member(ident("a"), MemberOp.COALESCE_MEMBER, ident("b")))
    assert out == "a ~= nil and a.b"


def test_array_access():
    assert emit(ArrayAccess(ident("t"), [Number(1), Number(2)])) == "t[1][2]"
    assert emit(ArrayAccess(ident("t"), [Number(1)], True)) == "t ~= nil and t[1]"


def test_strings():
    assert emit(SatString("hi")) == '"hi"'
    assert emit(SatString("a\nb")) == "[[a\nb]]"


def test_booleans():
    assert emit(Boolean.TRUE) == "true"
    assert emit(Boolean.FALSE) == "false"


def test_map_literal_keys():
    literal = MapLiteral(
        [(ident("a"), Number(1)), (SatString("b"), Number(2)), (Number(3), Number(4))]
    )
    assert emit(literal) == '{ a = 1, ["b"] = 2, [3] = 4 }'


def test_std_collections_prefix():
    assert emit(ArrayLiteral([Number(1)]), use_std_collections=True).startswith("std.Array ")
    assert emit(MapLiteral([]), use_std_collections=True).startswith("std.Map ")
    assert emit(TupleLiteral([Number(1)]), use_std_collections=True).startswith("std.Tuple ")


def test_array_literal():
    assert emit(ArrayLiteral([Number(1), Number(2)])) == "{ 1, 2 }"


def test_tuple_literal():
    assert emit(TupleLiteral([ident("x"), ident("y")])) == "{ __0 = x, __1 = y }"


def test_unit_interop():
    assert emit(TupleLiteral.unit()) == "nil"
    assert emit(TupleLiteral.unit(), unit_interop=False) == "std.Unit()"


def test_lambda_needs_statement_emitter():
    with pytest.raises(TypeError):
        emit(LambdaExpr([], []))


def test_non_expression_rejected():
    with pytest.raises(TypeError):
        emit(object())