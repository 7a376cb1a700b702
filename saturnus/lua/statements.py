"""Lua code generation for Saturnus statements."""

from __future__ import annotations

from saturnus.ast import (
    Aliasing,
    ArrayAccess,
    ArrayLiteral,
    Assignment,
    Boolean,
    Bop,
    Break,
    Call,
    ClassDef,
    DefModifiers,
    Destructure,
    DestructureArray,
    DestructureEntry,
    DestructureMap,
    DestructureTuple,
    Expr,
    Fn,
    For,
    Identifier,
    IfStatement,
    LambdaExpr,
    Let,
    Loop,
    MapLiteral,
    Member,
    Number,
    Operator,
    Return,
    SatString,
    Skip,
    Statement,
    TupleLiteral,
    Uop,
    Use,
    While,
)
from saturnus.builders import add_member, array_access, collect_leaves, to_expr
from saturnus.compiler import (
    CompilerError,
    CompilerOptions,
    ModuleType,
    SaturnusSyntaxError,
)
from saturnus.lua.expressions import ExpressionEmitter

_EXPRESSION_TYPES = (
    Call,
    ArrayAccess,
    Bop,
    Uop,
    LambdaExpr,
    Number,
    Boolean,
    SatString,
    Identifier,
    Member,
    MapLiteral,
    ArrayLiteral,
    TupleLiteral,
)

_DESTRUCTURE_TARGET = "__destructure_target__"


class StatementEmitter(ExpressionEmitter):
    """Writes Lua code for statements, blocks and lambdas."""

    def __init__(self, options: CompilerOptions | None = None) -> None:
        super().__init__(options)
        self.module_root_expr: Expr = Identifier("__modules__")

    def compile_expr(self, expr: Expr) -> None:
        super().compile_expr(expr)

    def _compile_lambda(self, lambda_expr: LambdaExpr) -> None:
        self.compile_lambda(lambda_expr)

    def _write_params(self, params) -> None:
        self._write_separated(params, lambda param: self.compile_identifier(param.name))

    def compile_lambda(self, lambda_expr: LambdaExpr) -> None:
        self.code.write("function(")
        self._write_params(lambda_expr.params)
        self.code.write(")").push()
        self.compile_program(lambda_expr.body)
        self.code.pop().line().write("end")

    def compile_if(self, stmt: IfStatement) -> None:
        self.code.write("if ")
        self.compile_expr(stmt.condition)
        self.code.write(" then").push()
        self.compile_program(stmt.body)
        for else_if in stmt.else_if_blocks:
            self.code.pop().line().write("elseif ")
            self.compile_expr(else_if.condition)
            self.code.write(" then").push()
            self.compile_program(else_if.body)
        if stmt.else_block is not None:
            self.code.pop().line().write("else").push()
            self.compile_program(stmt.else_block)
        self.code.pop().line().write("end")

    def compile_assignment(self, stmt: Assignment) -> None:
        """Assignments are statements only; compound forms expand to a plain one."""
        if stmt.op is not None:
            right = Bop(to_expr(stmt.left), stmt.op, stmt.right)
            self.compile_assignment(Assignment(stmt.left, right, None))
            return
        match stmt.left:
            case Member():
                self.compile_member_access(stmt.left)
            case ArrayAccess():
                self.compile_array_access(stmt.left)
            case Identifier():
                self.compile_identifier(stmt.left)
            case _:
                raise TypeError(f"not an assignment target: {stmt.left!r}")
        self.code.write(" = ")
        self.compile_expr(stmt.right)
        self.code.write(";")

    def _assign_leaf(self, identifier: Identifier, value: Expr) -> None:
        self.compile_statement(Assignment(identifier, value))

    def _compile_nested(self, root: Expr, entry: DestructureEntry) -> None:
        match entry:
            case DestructureArray(items):
                self._compile_array_destructure(root, items)
            case DestructureMap(items):
                self._compile_map_destructure(root, items)
            case DestructureTuple(items):
                self._compile_tuple_destructure(root, items)
            case Aliasing():
                raise SaturnusSyntaxError(
                    "Aliasing is only valid inside map destructuring"
                )
            case _:
                raise TypeError(f"not a destructuring pattern: {entry!r}")

    def _compile_array_destructure(
        self, root: Expr, items: list[DestructureEntry]
    ) -> None:
        for index, entry in enumerate(items, start=1):
            element = array_access(root, Number(index))
            if isinstance(entry, Identifier):
                if not entry.is_void():
                    self._assign_leaf(entry, element)
            else:
                self._compile_nested(element, entry)

    def _compile_map_entry(
        self, root: Expr, entry: DestructureEntry, skip_member: bool
    ) -> None:
        match entry:
            case Identifier():
                if entry.is_void():
                    return
                value = root if skip_member else add_member(root, entry)
                self._assign_leaf(entry, value)
            case Aliasing(name, inner):
                if name.is_void():
                    return
                self._compile_map_entry(add_member(root, name), inner, True)
            case _:
                self._compile_nested(root, entry)

    def _compile_map_destructure(
        self, root: Expr, items: list[DestructureEntry]
    ) -> None:
        for entry in items:
            self._compile_map_entry(root, entry, False)

    def _compile_tuple_destructure(
        self, root: Expr, items: list[DestructureEntry]
    ) -> None:
        for index, entry in enumerate(items):
            element = add_member(root, Identifier(f"__{index}"))
            if isinstance(entry, Identifier):
                if not entry.is_void():
                    self._assign_leaf(entry, element)
            else:
                self._compile_nested(element, entry)

    def _compile_destructure_assignment_list(self, destructure: Destructure) -> None:
        root = Identifier(_DESTRUCTURE_TARGET)
        if isinstance(destructure, Identifier):
            self.code.line()
            self.compile_let(Let(destructure, root, DefModifiers()))
        else:
            self._compile_nested(root, destructure)

    def compile_let(self, stmt: Let) -> None:
        name = stmt.name
        if isinstance(name, Identifier):
            self.code.write("local ")
            self.compile_identifier(name)
            if stmt.initializer is not None:
                self.code.write(" = ")
                self.compile_expr(stmt.initializer)
            self.code.write(";")
            self.export_symbol(stmt.modifiers, name)
            return
        leaves = [leaf for leaf in collect_leaves(name) if not leaf.is_void()]
        if stmt.initializer is None:
            raise SaturnusSyntaxError(
                "Can't destructure without initializer expression."
            )
        self.code.write("local ")
        self._write_separated(leaves, self.compile_identifier)
        self.code.write(";").line().write("do").push().line().write(
            f"local {_DESTRUCTURE_TARGET} = "
        )
        self.compile_expr(stmt.initializer)
        self.code.write(";")
        self._compile_destructure_assignment_list(name)
        self.code.pop().line().write("end")
        for leaf in leaves:
            self.export_symbol(stmt.modifiers, leaf)

    def _build_loop_body(self, body: list[Statement]) -> None:
        self.compile_program(body)
        self.code.line().write("::loop_end::").pop().line().write("end")

    def _loop_optimized_for_range(self, stmt: For) -> bool:
        expr = stmt.expr
        if not (isinstance(expr, Bop) and expr.op is Operator.RANGE):
            return False
        if not isinstance(stmt.assignment, Identifier):
            return False
        self.compile_identifier(stmt.assignment)
        self.code.write(" = ")
        self.compile_expr(expr.left)
        self.code.write(", ")
        self.compile_expr(expr.right)
        self.code.write(" do").push()
        self._build_loop_body(stmt.body)
        return True

    def _loop_optimized_for_pairs_iter(self, stmt: For) -> bool:
        expr = stmt.expr
        if not isinstance(expr, Call) or expr.is_null_safe:
            return False
        target = expr.target
        if not isinstance(target, Identifier) or target.is_escaped:
            return False
        if target.value not in ("pairs", "ipairs"):
            return False
        assignment = stmt.assignment
        if not isinstance(assignment, DestructureTuple) or len(assignment.items) != 2:
            return False
        key, value = assignment.items
        if not isinstance(key, Identifier):
            return False
        self.compile_identifier(key)
        if isinstance(value, Identifier):
            self.code.write(", ")
            self.compile_identifier(value)
            self.code.write(" in ")
        else:
            self.code.write(", __destructure_value__ in ")
        self.compile_call(Call(target, list(expr.arguments), False))
        self.code.write(" do").push()
        self._build_loop_body(stmt.body)
        return True

    def compile_for(self, stmt: For) -> None:
        self.code.write("for ")
        if self._loop_optimized_for_range(stmt) or self._loop_optimized_for_pairs_iter(
            stmt
        ):
            return
        self.code.write("__destructure_value__ in ")
        self.compile_expr(stmt.expr)
        self.code.write(" do").push()
        self._compile_destructure_assignment_list(stmt.assignment)
        self._build_loop_body(stmt.body)

    def compile_while(self, stmt: While) -> None:
        self.code.write("while ")
        self.compile_expr(stmt.condition)
        self.code.write(" do").push()
        self._build_loop_body(stmt.body)

    def compile_loop(self, stmt: Loop) -> None:
        self.code.write("while true do").push()
        self._build_loop_body(stmt.body)

    def export_symbol(self, modifiers: DefModifiers, name: Identifier) -> None:
        """Publish a definition according to the module system in use."""
        match self.options.module_type:
            case ModuleType.SATURNUS:
                if modifiers.is_pub:
                    target = add_member(self.module_root_expr, name)
                    self.compile_statement(Assignment(target, name))
            case ModuleType.LOCAL_MODULE_RETURN:
                raise CompilerError(
                    "Symbol export is unavailable for the local-module-return module type"
                )
            case _:
                pass

    def process_pub_symbol(self, modifiers: DefModifiers) -> None:
        """Declare the symbol local unless it is public and exported as a global."""
        if self.options.module_type is not ModuleType.PUB_AS_GLOBAL or not modifiers.is_pub:
            self.code.write("local ")

    def compile_fn(self, fn_def: Fn) -> None:
        self.process_pub_symbol(fn_def.modifiers)
        self.code.write("function ")
        self.compile_identifier(fn_def.name)
        self.code.write("(")
        self._write_params(fn_def.arguments)
        self.code.write(")").push()
        self.compile_program(fn_def.body)
        self.code.pop().line().write("end")
        self.export_symbol(fn_def.modifiers, fn_def.name)

    def compile_return(self, stmt: Return) -> None:
        self.code.write("return ")
        self.compile_expr(stmt.value)
        self.code.write(";")

    def compile_use(self, use: Use, root: list[Identifier] | None = None) -> None:
        if use.use_tree is not None:
            prefix = [*(root or []), *use.path]
            for item in use.use_tree:
                self.compile_use(item, prefix)
            return
        if not use.path:
            raise SaturnusSyntaxError("A use statement needs at least one path segment")
        name = use.path[-1]
        initializer: Expr = Identifier("__modules__")
        for segment in [*(root or []), *use.path]:
            initializer = add_member(initializer, segment)
        self.compile_let(Let(name, initializer, DefModifiers()))
        self.code.line()

    def _compile_class_def(self, class_def: ClassDef) -> None:
        raise TypeError("class definitions need the full Lua compiler")

    def compile_statement(self, stmt: Statement) -> None:
        self.code.line()
        match stmt:
            case IfStatement():
                self.compile_if(stmt)
            case Skip():
                self.code.write("goto loop_end;")
            case Break():
                self.code.write("break;")
            case For():
                self.compile_for(stmt)
            case While():
                self.compile_while(stmt)
            case Loop():
                self.compile_loop(stmt)
            case Let():
                self.compile_let(stmt)
            case Assignment():
                self.compile_assignment(stmt)
            case ClassDef():
                self._compile_class_def(stmt)
            case Fn():
                self.compile_fn(stmt)
            case Return():
                self.compile_return(stmt)
            case Use():
                self.compile_use(stmt, None)
            case _ if isinstance(stmt, _EXPRESSION_TYPES):
                self.compile_expr(stmt)
                self.code.write(";")
            case _:
                raise TypeError(f"not a statement: {stmt!r}")

    def compile_program(self, statements: list[Statement]) -> None:
        for stmt in statements:
            self.compile_statement(stmt)