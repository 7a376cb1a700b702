"""Compiler errors, options and the source and output containers."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path


class CompilerError(Exception):
    """Base class of every error raised while compiling."""


class SaturnusSyntaxError(CompilerError):
    """The program is syntactically valid but semantically malformed."""

    def __init__(self, cause: str) -> None:
        self.cause = cause
        super().__init__(f"Syntax error: {cause}")


class MacroError(CompilerError):
    """Macro expansion failed."""

    def __init__(self) -> None:
        super().__init__("Macro expansion error: <not available>")


class CompilerSystemError(CompilerError):
    """A system-level failure happened during compilation."""

    def __init__(self) -> None:
        super().__init__("System error: <not available>")


class ParsingError(CompilerError):
    """The source text could not be parsed."""

    def __init__(self, cause: str) -> None:
        self.cause = cause
        super().__init__(f"Parsing error: {cause}")


class ModuleType(enum.Enum):
    """How modules and public symbols are exposed in the output."""

    SATURNUS = "saturnus"
    """Default mode, uses custom module namespacing."""
    PUB_AS_GLOBAL = "pub_as_global"
    """Top-level use is disabled, and everything is exported as a global."""
    LOCAL_MODULE_RETURN = "local_module_return"
    """Require-first modules."""
    CUSTOM = "custom"


@dataclass
class CompilerOptions:
    """Switches that control code generation."""

    use_std_collections: bool = False
    skip_loop_interop: bool = False
    unit_interop: bool = True
    module_type: ModuleType = ModuleType.SATURNUS
    override_mod_path: Path | None = None


@dataclass(frozen=True, init=False)
class SaturnusIR:
    """Compiled output, kept as bytes."""

    compiled_source: bytes

    def __init__(self, source: str | bytes) -> None:
        if isinstance(source, str):
            source = source.encode("utf-8")
        object.__setattr__(self, "compiled_source", bytes(source))

    def __str__(self) -> str:
        return self.compiled_source.decode("utf-8")


@dataclass
class SourceCode:
    """Source text together with the module location it belongs to, if any."""

    source: str
    location: Path | None = field(default=None)