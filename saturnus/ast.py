"""Syntax tree of Saturnus programs."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class Number:
    value: int | float


@dataclass
class SatString:
    value: str


class Boolean(enum.Enum):
    TRUE = True
    FALSE = False


@dataclass
class MapLiteral:
    """Map literal; an ``Identifier`` key is a bare name, other keys are computed."""

    entries: list[tuple[MapKey, Expr]] = field(default_factory=list)


@dataclass
class ArrayLiteral:
    values: list[Expr] = field(default_factory=list)


@dataclass
class TupleLiteral:
    values: list[Expr] = field(default_factory=list)

    @staticmethod
    def unit() -> TupleLiteral:
        """The empty tuple."""
        return TupleLiteral([])

    def is_unit(self) -> bool:
        return not self.values


class Operator(enum.Enum):
    ADD = enum.auto()
    SUB = enum.auto()
    MUL = enum.auto()
    DIV = enum.auto()
    POW = enum.auto()
    AND = enum.auto()
    OR = enum.auto()
    NOT = enum.auto()
    BAND = enum.auto()
    BOR = enum.auto()
    BXOR = enum.auto()
    BNOT = enum.auto()
    LSHIFT = enum.auto()
    LSHIFT_ROT = enum.auto()
    RSHIFT = enum.auto()
    RSHIFT_ROT = enum.auto()
    STRCAT = enum.auto()
    RANGE = enum.auto()
    LT = enum.auto()
    LT_EQ = enum.auto()
    GT = enum.auto()
    GT_EQ = enum.auto()
    EQ = enum.auto()
    NEQ = enum.auto()


@dataclass(frozen=True)
class CustomOperator:
    """A user-defined operator, spelled by its symbol."""

    value: str


@dataclass
class Bop:
    left: Expr
    op: Operator | CustomOperator
    right: Expr


@dataclass
class Uop:
    op: Operator | CustomOperator
    expr: Expr


@dataclass
class Assignment:
    left: AssignmentTarget
    right: Expr
    op: Operator | CustomOperator | None = None


@dataclass
class Call:
    target: Expr
    arguments: list[Expr] = field(default_factory=list)
    is_null_safe: bool = False


@dataclass
class ArrayAccess:
    target: Expr
    arguments: list[Expr] = field(default_factory=list)
    is_null_safe: bool = False


@dataclass
class Identifier:
    value: str
    is_escaped: bool = False

    def is_void(self) -> bool:
        """True for the discard name ``_``."""
        return self.value == "_"


@dataclass
class DestructureArray:
    items: list[DestructureEntry] = field(default_factory=list)


@dataclass
class DestructureMap:
    items: list[DestructureEntry] = field(default_factory=list)


@dataclass
class DestructureTuple:
    items: list[DestructureEntry] = field(default_factory=list)


@dataclass
class Aliasing:
    """Map destructuring entry that reads ``name`` and binds it through ``entry``."""

    name: Identifier
    entry: DestructureEntry


class MemberOp(enum.Enum):
    MEMBER = enum.auto()
    COALESCE_MEMBER = enum.auto()
    STATIC = enum.auto()
    DISPATCH = enum.auto()


@dataclass
class Member:
    target: Expr
    op: MemberOp
    field: Identifier


@dataclass
class LambdaExpr:
    params: list[Param] = field(default_factory=list)
    body: list[Statement] = field(default_factory=list)


@dataclass
class Param:
    name: Identifier
    type_def: TypeDef | None = None


@dataclass
class TypeDef:
    name: Identifier
    generic_args: list[TypeDef] | None = None


@dataclass
class ElseIf:
    condition: Expr
    body: list[Statement] = field(default_factory=list)


@dataclass
class IfStatement:
    condition: Expr
    body: list[Statement] = field(default_factory=list)
    else_if_blocks: list[ElseIf] = field(default_factory=list)
    else_block: list[Statement] | None = None


@dataclass
class For:
    assignment: Destructure
    expr: Expr
    body: list[Statement] = field(default_factory=list)


@dataclass
class While:
    condition: Expr
    body: list[Statement] = field(default_factory=list)


@dataclass
class Loop:
    body: list[Statement] = field(default_factory=list)


class DefModifiers:
    """Definition modifiers packed into a single byte."""

    BITMASK_PUB: ClassVar[int] = 0x1
    BITMASK_STATIC: ClassVar[int] = 0x2
    BITMASK_PARTIAL: ClassVar[int] = 0x4

    def __init__(
        self, *, is_pub: bool = False, is_static: bool = False, is_partial: bool = False
    ) -> None:
        self._mask = 0
        self.is_pub = is_pub
        self.is_static = is_static
        self.is_partial = is_partial

    @classmethod
    def from_raw(cls, mask: int) -> DefModifiers:
        if not 0 <= mask <= 0xFF:
            raise ValueError(f"modifier mask out of range: {mask}")
        modifiers = cls()
        modifiers._mask = mask
        return modifiers

    def to_raw(self) -> int:
        return self._mask

    def _get(self, bit: int) -> bool:
        return bool(self._mask & bit)

    def _set(self, bit: int, value: bool) -> None:
        if value:
            self._mask |= bit
        else:
            self._mask &= ~bit & 0xFF

    @property
    def is_pub(self) -> bool:
        return self._get(self.BITMASK_PUB)

    @is_pub.setter
    def is_pub(self, value: bool) -> None:
        self._set(self.BITMASK_PUB, value)

    @property
    def is_static(self) -> bool:
        return self._get(self.BITMASK_STATIC)

    @is_static.setter
    def is_static(self, value: bool) -> None:
        self._set(self.BITMASK_STATIC, value)

    @property
    def is_partial(self) -> bool:
        return self._get(self.BITMASK_PARTIAL)

    @is_partial.setter
    def is_partial(self, value: bool) -> None:
        self._set(self.BITMASK_PARTIAL, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DefModifiers):
            return NotImplemented
        return self._mask == other._mask

    def __hash__(self) -> int:
        return hash(self._mask)

    def __repr__(self) -> str:
        return f"DefModifiers.from_raw({self._mask:#x})"


@dataclass
class Fn:
    name: Identifier
    modifiers: DefModifiers = field(default_factory=DefModifiers)
    arguments: list[Param] = field(default_factory=list)
    body: list[Statement] = field(default_factory=list)


@dataclass
class Let:
    name: Destructure
    initializer: Expr | None = None
    modifiers: DefModifiers = field(default_factory=DefModifiers)
    type_def: TypeDef | None = None


@dataclass
class ClassDef:
    name: Identifier
    modifiers: DefModifiers = field(default_factory=DefModifiers)
    parent: Identifier | None = None
    fields: list[ClassField] = field(default_factory=list)


@dataclass
class Return:
    value: Expr


@dataclass
class Break:
    pass


@dataclass
class Skip:
    pass


@dataclass
class Use:
    path: list[Identifier]
    use_tree: list[Use] | None = None


Expr = (
    Call
    | ArrayAccess
    | Bop
    | Uop
    | LambdaExpr
    | Number
    | Boolean
    | SatString
    | Identifier
    | Member
    | MapLiteral
    | ArrayLiteral
    | TupleLiteral
)
MapKey = Identifier | SatString | Expr
AssignmentTarget = Member | ArrayAccess | Identifier
Destructure = Identifier | DestructureArray | DestructureMap | DestructureTuple
DestructureEntry = Destructure | Aliasing
ClassField = Fn | Let
Statement = (
    Use
    | IfStatement
    | ClassDef
    | Assignment
    | Let
    | Fn
    | Loop
    | While
    | For
    | Break
    | Skip
    | Return
    | Expr
)