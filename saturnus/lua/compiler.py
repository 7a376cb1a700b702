"""Full Lua backend: classes, module setup and whole-program compilation."""

from __future__ import annotations

import re
from pathlib import Path

from saturnus.ast import (
    Assignment,
    Bop,
    Call,
    ClassDef,
    Expr,
    Fn,
    Identifier,
    IfStatement,
    LambdaExpr,
    Let,
    MapLiteral,
    Operator,
    Param,
    Return,
    Statement,
    TupleLiteral,
)
from saturnus.builders import add_member, array_access, to_expr
from saturnus.code import IndentedBuilder
from saturnus.compiler import (
    CompilerOptions,
    ModuleType,
    SaturnusIR,
    SaturnusSyntaxError,
)
from saturnus.lua.statements import StatementEmitter

_PATH_SEGMENT_SANITIZER = re.compile(r"[^A-Za-z0-9_]")
_PATH_SEGMENT_START = re.compile(r"^[^A-Za-z_]")
_MODULES = "__modules__"


def _sanitize_segment(segment: str) -> str:
    segment = _PATH_SEGMENT_SANITIZER.sub("_", segment)
    return _PATH_SEGMENT_START.sub("_", segment, count=1)


class LuaCompiler(StatementEmitter):
    """Compiles Saturnus syntax trees into Lua 5.3 source."""

    def __init__(self) -> None:
        super().__init__(CompilerOptions())
        self.module_root_expr = Identifier(_MODULES)

    def _compile_class_def(self, class_def: ClassDef) -> None:
        self.compile_class_def(class_def)

    def _write_method(self, class_name: Identifier, method: Fn) -> None:
        self.code.line().write("function ")
        self.compile_identifier(class_name)
        self.code.write("." if method.modifiers.is_static else ":")
        self.compile_identifier(method.name)
        self.code.write("(")
        self._write_params(method.arguments)
        self.code.write(")").push()
        self.compile_program(method.body)
        self.code.pop().line().write("end")

    def _index_lambda(self, name: Identifier, parent: Identifier | None) -> LambdaExpr:
        key = Identifier("key")
        raw_access = Call(Identifier("rawget"), [Identifier("self"), key], False)
        body: list[Statement] = [
            IfStatement(
                Bop(raw_access, Operator.NEQ, TupleLiteral.unit()),
                [Return(raw_access)],
            )
        ]
        if parent is not None:
            own = array_access(name, key)
            body.append(
                IfStatement(
                    Bop(own, Operator.NEQ, TupleLiteral.unit()),
                    [Return(own)],
                )
            )
            body.append(Return(array_access(parent, key)))
        else:
            body.append(Return(array_access(name, key)))
        return LambdaExpr([Param(Identifier("self")), Param(key)], body)

    def _constructor_lambda(self, fields: list[Let]) -> LambdaExpr:
        values = Identifier("values")
        body: list[Statement] = [
            IfStatement(
                Bop(values, Operator.EQ, TupleLiteral.unit()),
                [Assignment(values, MapLiteral([]))],
            )
        ]
        for field_def in fields:
            if not isinstance(field_def.name, Identifier):
                raise SaturnusSyntaxError(
                    "Fields should be declared as names, destructuring assignment "
                    "is invalid in class field position!"
                )
            init = (
                field_def.initializer
                if field_def.initializer is not None
                else TupleLiteral.unit()
            )
            slot = add_member(values, field_def.name)
            body.append(
                IfStatement(
                    Bop(slot, Operator.EQ, TupleLiteral.unit()),
                    [Assignment(slot, init)],
                )
            )
        body.append(
            Return(
                Call(
                    Identifier("setmetatable"),
                    [values, add_member(Identifier("Self"), Identifier("__meta__"))],
                    False,
                )
            )
        )
        return LambdaExpr([Param(Identifier("Self")), Param(values)], body)

    def compile_class_def(self, class_def: ClassDef) -> None:
        name = class_def.name
        methods = [f for f in class_def.fields if isinstance(f, Fn)]
        fields = [f for f in class_def.fields if isinstance(f, Let)]
        # Validate fields before anything is written.
        constructor = self._constructor_lambda(fields)

        self.process_pub_symbol(class_def.modifiers)
        self.compile_identifier(name)
        self.code.write(" = {};").line().write("do").push().line().write("local Self = ")
        self.compile_identifier(name)
        self.code.write(";").line()
        for method in methods:
            self._write_method(name, method)

        self.code.line()
        self.compile_identifier(name)
        self.code.write(".__meta__ = ")
        self.compile_map(
            MapLiteral([(Identifier("__index"), self._index_lambda(name, class_def.parent))])
        )
        self.code.write(";").line()

        metatable = MapLiteral([(Identifier("__call"), constructor)])
        self.compile_call(Call(Identifier("setmetatable"), [name, metatable], False))
        self.code.write(";").line()
        self.export_symbol(class_def.modifiers, name)
        self.code.pop().line().write("end")

    def compile_statement(self, stmt: Statement) -> None:
        if isinstance(stmt, ClassDef):
            self.code.line()
            self.compile_class_def(stmt)
            return
        super().compile_statement(stmt)

    def _mock_module(self, target: Expr) -> None:
        self.compile_statement(
            Assignment(target, Bop(to_expr(target), Operator.OR, MapLiteral([])))
        )

    def compile(
        self,
        program: list[Statement],
        options: CompilerOptions | None = None,
        location: str | Path | None = None,
    ) -> SaturnusIR:
        """Compile a whole program, namespaced under ``location`` when given."""
        self.code = IndentedBuilder()
        self.module_root_expr = Identifier(_MODULES)
        self.options = options if options is not None else CompilerOptions()
        if self.options.module_type is ModuleType.SATURNUS:
            self._mock_module(Identifier(_MODULES))
            if location is not None:
                root: Expr = self.module_root_expr
                for part in Path(location).parts:
                    root = add_member(root, Identifier(_sanitize_segment(part)))
                    self._mock_module(root)
                self.module_root_expr = root
        self.compile_program(program)
        output = self.code.build()
        self.code = IndentedBuilder()
        return SaturnusIR(output)