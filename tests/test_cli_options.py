from pathlib import Path

import pytest

from saturnus.cli_options import CompileTarget, ModSys, build_parser, options_from_args
from saturnus.compiler import CompilerOptions, ModuleType


def parse(*argv):
    return build_parser().parse_args(list(argv))


def test_lua_target_extension():
    assert CompileTarget.LUA.ext() == "lua"


def test_compile_defaults():
    args = parse("compile", "-i", "main.st")
    assert args.input == Path("main.st")
    assert args.target is CompileTarget.LUA
    assert args.module_resolution is ModSys.SATURNUS
    assert args.output is None
    assert options_from_args(args) == CompilerOptions()


def test_compile_flags_map_to_options():
    args = parse(
        "compile", "--input", "a.st", "--use-std-collections",
        "--disable-loop-interop", "--disable-unit-interop", "--mod-path", "x/y",
    )
    options = options_from_args(args)
    assert options.use_std_collections is True
    assert options.skip_loop_interop is True
    assert options.unit_interop is False
    assert options.override_mod_path == Path("x/y")


@pytest.mark.parametrize(
    "value, expected",
    [
        ("saturnus", ModuleType.SATURNUS),
        ("native", ModuleType.LOCAL_MODULE_RETURN),
        ("glboals", ModuleType.PUB_AS_GLOBAL),
    ],
)
def test_module_resolution_mapping(value, expected):
    args = parse("compile", "-i", "a.st", "--module-resolution", value)
    assert options_from_args(args).module_type is expected


def test_unknown_module_resolution_rejected():
    with pytest.raises(SystemExit):
        parse("compile", "-i", "a.st", "--module-resolution", "bogus")


def test_compile_requires_input():
    with pytest.raises(SystemExit):
        parse("compile")


def test_run_collects_libs_and_uses_defaults():
    args = parse("run", "-i", "a.st", "--dump-ir", "-l", "one.so", "--lib", "two.so")
    assert args.lib == [Path("one.so"), Path("two.so")]
    assert args.dump_ir is True
    assert options_from_args(args) == CompilerOptions()


def test_std_output_arguments():
    args = parse("std-output", "--stdout")
    assert args.stdout is True
    assert args.output is None
    assert options_from_args(args) == CompilerOptions()


def test_command_is_required():
    with pytest.raises(SystemExit):
        parse()