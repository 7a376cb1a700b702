"""Helpers that build and inspect syntax tree nodes."""

from __future__ import annotations

from collections.abc import Iterator

from saturnus.ast import (
    Aliasing,
    ArrayAccess,
    Destructure,
    DestructureArray,
    DestructureEntry,
    DestructureMap,
    DestructureTuple,
    Expr,
    Identifier,
    Member,
    MemberOp,
    Number,
    SatString,
)


def add_member(expr: Expr, identifier: Identifier) -> Member:
    """Plain member access ``expr.identifier``."""
    return Member(expr, MemberOp.MEMBER, identifier)


def array_access(expr: Expr, key: Expr) -> ArrayAccess:
    """Index access ``expr[key]``."""
    return ArrayAccess(expr, [key], False)


def as_expr(value: int | str) -> Number | SatString:
    """Literal expression for an integer or a string."""
    if isinstance(value, bool):
        raise TypeError("booleans have no literal conversion here")
    if isinstance(value, int):
        return Number(value)
    if isinstance(value, str):
        return SatString(value)
    raise TypeError(f"cannot turn {type(value).__name__} into an expression")


def _leaves(entry: DestructureEntry) -> Iterator[Identifier]:
    match entry:
        case Identifier():
            yield entry
        case DestructureArray(items) | DestructureMap(items) | DestructureTuple(items):
            for item in items:
                yield from _leaves(item)
        case Aliasing(entry=inner):
            yield from _leaves(inner)
        case _:
            raise TypeError(f"not a destructuring pattern: {entry!r}")


def collect_leaves(destructure: Destructure) -> list[Identifier]:
    """All names bound by a destructuring pattern, in source order."""
    return list(_leaves(destructure))


def to_expr(target: Member | ArrayAccess | Identifier) -> Expr:
    """The expression that reads an assignment target."""
    if not isinstance(target, (Member, ArrayAccess, Identifier)):
        raise TypeError(f"not an assignment target: {target!r}")
    return target