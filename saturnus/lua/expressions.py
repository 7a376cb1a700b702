"""Lua code generation for Saturnus expressions."""

from __future__ import annotations

import dataclasses
import math
from decimal import Decimal

from saturnus.ast import (
    ArrayAccess,
    ArrayLiteral,
    Boolean,
    Bop,
    Call,
    CustomOperator,
    Expr,
    Identifier,
    LambdaExpr,
    MapKey,
    MapLiteral,
    Member,
    MemberOp,
    Number,
    Operator,
    SatString,
    TupleLiteral,
    Uop,
)
from saturnus.code import IndentedBuilder
from saturnus.compiler import CompilerOptions

_CHAR_NAMES = {
    " ": "space",
    "+": "plus",
    "-": "minus",
    "*": "times",
    "/": "divide",
    "^": "power",
    "?": "question",
    "¿": "reverse_question",
    "!": "exclamation",
    "¡": "reverse_exclamation",
    "&": "ampersand",
    "¬": "not",
    "%": "percent",
    "$": "dollar",
    "#": "hashbang",
    '"': "double_quote",
    "@": "at",
    "|": "pipe",
    "º": "degrees",
    "ª": "super_a",
    "·": "dot",
    ".": "stop",
    ",": "comma",
    ":": "double_dot",
    ";": "semi",
    "[": "l_bracket",
    "]": "r_bracket",
    "(": "l_brace",
    ")": "r_brace",
    "{": "l_curly",
    "}": "r_curly",
    "=": "eq",
    "<": "lt",
    ">": "gt",
    "'": "single_quote",
    "ç": "cedilla",
    "ñ": "enne",
    "\\": "backlash",
}

_RESERVED_WORDS = {
    "then": "__then__",
    "elseif": "__elseif__",
    "do": "__do__",
    "local": "__local__",
    "end": "__end__",
    "until": "__until__",
    "repeat": "__repeat__",
}

_NATIVE_OPERATORS = {
    Operator.ADD: "+",
    Operator.SUB: "-",
    Operator.MUL: "*",
    Operator.DIV: "/",
    Operator.POW: "^",
    Operator.AND: "and",
    Operator.OR: "or",
    Operator.NOT: "not",
    Operator.BAND: "&",
    Operator.BOR: "|",
    Operator.BXOR: "~",
    Operator.BNOT: "~",
    Operator.LSHIFT: "<<",
    Operator.RSHIFT: ">>",
    Operator.STRCAT: "..",
    Operator.LT: "<",
    Operator.LT_EQ: "<=",
    Operator.GT: ">",
    Operator.GT_EQ: ">=",
    Operator.EQ: "==",
    Operator.NEQ: "~=",
}

_FALLBACK_BINARY = {
    Operator.LSHIFT_ROT: "<<<",
    Operator.RSHIFT_ROT: ">>>",
    Operator.RANGE: "..",
}


def translate_identifier(value: str) -> str:
    """Turn an escaped identifier (quoted with one char on each side) into a Lua name."""
    inner = value[1:-1]
    return "__" + "_".join(_CHAR_NAMES.get(ch, ch) for ch in inner) + "__"


def native_operator(op: Operator | CustomOperator) -> str | None:
    """The Lua spelling of ``op``, or None when Lua has no such operator."""
    if isinstance(op, CustomOperator):
        return None
    return _NATIVE_OPERATORS.get(op)


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class ExpressionEmitter:
    """Writes Lua code for expressions into an indented buffer."""

    def __init__(self, options: CompilerOptions | None = None) -> None:
        self.options = options if options is not None else CompilerOptions()
        self.code = IndentedBuilder()

    def output(self) -> str:
        """Everything generated so far."""
        return self.code.build()

    def compile_expr(self, expr: Expr) -> None:
        match expr:
            case Call():
                self.compile_call(expr)
            case Number():
                self.compile_number(expr)
            case Identifier():
                self.compile_identifier(expr)
            case Bop():
                self.compile_binary(expr)
            case Member():
                self.compile_member_access(expr)
            case ArrayAccess():
                self.compile_array_access(expr)
            case SatString():
                self.compile_string(expr)
            case Boolean():
                self.compile_boolean(expr)
            case Uop():
                self.compile_unary(expr)
            case LambdaExpr():
                self._compile_lambda(expr)
            case MapLiteral():
                self.compile_map(expr)
            case ArrayLiteral():
                self.compile_array(expr)
            case TupleLiteral():
                self.compile_tuple(expr)
            case _:
                raise TypeError(f"not an expression: {expr!r}")

    def _compile_lambda(self, lambda_expr: LambdaExpr) -> None:
        raise TypeError(
            "lambda bodies hold statements and need a statement emitter"
        )

    def _write_separated(self, items, emit) -> None:
        for index, item in enumerate(items):
            if index:
                self.code.write(", ")
            emit(item)

    def compile_call(self, call: Call) -> None:
        target = call.target
        if isinstance(target, Member) and target.op is MemberOp.MEMBER:
            target = dataclasses.replace(target, op=MemberOp.DISPATCH)
        if call.is_null_safe:
            target = Bop(
                Bop(target, Operator.NEQ, TupleLiteral.unit()),
                Operator.AND,
                target,
            )
        self.compile_expr(target)
        self.code.write("(")
        self._write_separated(call.arguments, self.compile_expr)
        self.code.write(")")

    def compile_number(self, num: Number) -> None:
        value = num.value
        if isinstance(value, float):
            self.code.write(_format_float(value))
        else:
            self.code.write(int(value))

    def compile_identifier(self, ident: Identifier) -> None:
        if ident.is_escaped:
            self.code.write(translate_identifier(ident.value))
        else:
            self.code.write(_RESERVED_WORDS.get(ident.value, ident.value))

    def compile_custom_operator(
        self, value: str, left: Expr, right: Expr | None
    ) -> None:
        arguments = [left] if right is None else [left, right]
        self.compile_call(
            Call(Identifier(f"`{value}`", is_escaped=True), arguments, False)
        )

    def compile_binary(self, bop: Bop) -> None:
        native = native_operator(bop.op)
        if native is not None:
            self.compile_expr(bop.left)
            self.code.write(" ").write(native).write(" ")
            self.compile_expr(bop.right)
        elif isinstance(bop.op, CustomOperator):
            self.compile_custom_operator(bop.op.value, bop.left, bop.right)
        elif bop.op in _FALLBACK_BINARY:
            self.compile_custom_operator(_FALLBACK_BINARY[bop.op], bop.left, bop.right)
        else:
            raise ValueError(f"unhandled binary operator: {bop.op!r}")

    def compile_unary(self, uop: Uop) -> None:
        native = native_operator(uop.op)
        if native is not None:
            self.code.write(native).write(" ")
            self.compile_expr(uop.expr)
        elif isinstance(uop.op, CustomOperator):
            self.compile_custom_operator(uop.op.value, uop.expr, None)
        else:
            raise ValueError(f"unhandled unary operator: {uop.op!r}")

    def compile_member_access(self, member: Member) -> None:
        self.compile_expr(member.target)
        match member.op:
            case MemberOp.MEMBER | MemberOp.STATIC:
                self.code.write(".")
            case MemberOp.COALESCE_MEMBER:
                self.code.write(" ~= nil and ")
                self.compile_expr(member.target)
                self.code.write(".")
            case MemberOp.DISPATCH:
                self.code.write(":")
        self.compile_identifier(member.field)

    def compile_array_access(self, access: ArrayAccess) -> None:
        self.compile_expr(access.target)
        if access.is_null_safe:
            self.code.write(" ~= nil and ")
            self.compile_expr(access.target)
        for item in access.arguments:
            self.code.write("[")
            self.compile_expr(item)
            self.code.write("]")

    def compile_string(self, string: SatString) -> None:
        if "\n" in string.value:
            self.code.write("[[").write(string.value).write("]]")
        else:
            self.code.write('"').write(string.value).write('"')

    def compile_boolean(self, value: Boolean) -> None:
        self.code.write("true" if value is Boolean.TRUE else "false")

    def compile_map_key(self, key: MapKey) -> None:
        if isinstance(key, Identifier):
            self.compile_identifier(key)
            return
        self.code.write("[")
        if isinstance(key, SatString):
            self.compile_string(key)
        else:
            self.compile_expr(key)
        self.code.write("]")

    def compile_map(self, literal: MapLiteral) -> None:
        if self.options.use_std_collections:
            self.code.write("std.Map ")
        self.code.write("{ ")

        def emit(entry) -> None:
            key, value = entry
            self.compile_map_key(key)
            self.code.write(" = ")
            self.compile_expr(value)

        self._write_separated(literal.entries, emit)
        self.code.write(" }")

    def compile_array(self, literal: ArrayLiteral) -> None:
        if self.options.use_std_collections:
            self.code.write("std.Array ")
        self.code.write("{ ")
        self._write_separated(literal.values, self.compile_expr)
        self.code.write(" }")

    def compile_tuple(self, literal: TupleLiteral) -> None:
        if literal.is_unit():
            self.code.write("nil" if self.options.unit_interop else "std.Unit()")
            return
        if self.options.use_std_collections:
            self.code.write("std.Tuple ")
        self.code.write("{ ")

        def emit(item) -> None:
            index, value = item
            self.code.write(f"__{index} = ")
            self.compile_expr(value)

        self._write_separated(list(enumerate(literal.values)), emit)
        self.code.write(" }")