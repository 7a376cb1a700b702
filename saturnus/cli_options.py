"""Command-line arguments of the compiler and their mapping to compiler options."""

from __future__ import annotations

import argparse
import enum
from pathlib import Path

from saturnus.compiler import CompilerOptions, ModuleType


class CompileTarget(enum.Enum):
    """Code backend used as the compilation result."""

    LUA = "lua"
    """Default Lua target, 5.3."""

    def ext(self) -> str:
        """File extension of the target's output."""
        return {CompileTarget.LUA: "lua"}[self]

    def __str__(self) -> str:
        return self.value


class ModSys(enum.Enum):
    """Module resolution strategy."""

    SATURNUS = "saturnus"
    NATIVE = "native"
    GLOBALS = "glboals"

    def __str__(self) -> str:
        return self.value


_MODULE_TYPES = {
    ModSys.SATURNUS: ModuleType.SATURNUS,
    ModSys.NATIVE: ModuleType.LOCAL_MODULE_RETURN,
    ModSys.GLOBALS: ModuleType.PUB_AS_GLOBAL,
}


def build_parser() -> argparse.ArgumentParser:
    """Argument parser with the compile, run and std-output commands."""
    parser = argparse.ArgumentParser(prog="saturnc")
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    commands = parser.add_subparsers(dest="command", required=True)

    compile_cmd = commands.add_parser("compile")
    compile_cmd.add_argument("-i", "--input", type=Path, required=True,
                             help="The input file to compile.")
    compile_cmd.add_argument("--only-macros", action="store_true",
                             help="Only expands macro code (currently ignored).")
    compile_cmd.add_argument("--module-resolution", type=ModSys, choices=list(ModSys),
                             default=ModSys.SATURNUS,
                             help="The module resolution strategy to use.")
    compile_cmd.add_argument("--static-is-global", action="store_true",
                             help="Makes top-level static variables global.")
    compile_cmd.add_argument("--use-std-collections", action="store_true",
                             help="Uses std library collections instead of naked ones.")
    compile_cmd.add_argument("-t", "--target", type=CompileTarget,
                             choices=list(CompileTarget), default=CompileTarget.LUA,
                             help="The code backend used as a compilation result.")
    compile_cmd.add_argument("--disable-loop-interop", action="store_true",
                             help="Disables the platform-specific loop optimizations.")
    compile_cmd.add_argument("--disable-unit-interop", action="store_true",
                             help="Treat unit as its own object instead of null.")
    compile_cmd.add_argument("-o", "--output", type=Path, default=None,
                             help="Output file; defaults to the input with the target extension.")
    compile_cmd.add_argument("--stdout", action="store_true",
                             help="Write the output source to the standard output.")
    compile_cmd.add_argument("-m", "--mod-path", type=Path, default=None,
                             help="Module path to use instead of inferring it from the input.")
    compile_cmd.add_argument("--strip-core-types", action="store_true")

    run_cmd = commands.add_parser("run")
    run_cmd.add_argument("-i", "--input", type=Path, required=True,
                         help="The input file to run.")
    run_cmd.add_argument("--dump-ir", action="store_true",
                         help="Dumps the compiled code to the console.")
    run_cmd.add_argument("-l", "--lib", type=Path, action="append", default=None,
                         help="Native extension library to load dynamically.")

    std_cmd = commands.add_parser("std-output")
    std_cmd.add_argument("-o", "--output", type=Path, default=None)
    std_cmd.add_argument("--stdout", action="store_true",
                         help="Prints the library to the standard output.")
    return parser


def options_from_args(args: argparse.Namespace) -> CompilerOptions:
    """Compiler options implied by the parsed command line."""
    if args.command != "compile":
        return CompilerOptions()
    return CompilerOptions(
        use_std_collections=args.use_std_collections,
        skip_loop_interop=args.disable_loop_interop,
        unit_interop=not args.disable_unit_interop,
        module_type=_MODULE_TYPES[args.module_resolution],
        override_mod_path=args.mod_path,
    )