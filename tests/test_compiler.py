from pathlib import Path

import pytest

from saturnus.compiler import (
    CompilerError,
    CompilerOptions,
    CompilerSystemError,
    MacroError,
    ModuleType,
    ParsingError,
    SaturnusIR,
    SaturnusSyntaxError,
    SourceCode,
)


def test_syntax_error_message():
    err = SaturnusSyntaxError("bad")
    assert str(err) == "Syntax error: bad"
    assert err.cause == "bad"


def test_parsing_error_message():
    assert str(ParsingError("oops")) == "Parsing error: oops"


def test_fixed_messages():
    assert str(MacroError()) == "Macro expansion error: <not available>"
    assert str(CompilerSystemError()) == "System error: <not available>"


@pytest.mark.parametrize(
    "err, message",
    [
        (SaturnusSyntaxError("x"), "Syntax error: x"),
        (MacroError(), "Macro expansion error: <not available>"),
        (CompilerSystemError(), "System error: <not available>"),
        (ParsingError("y"), "Parsing error: y"),
    ],
)
def test_all_errors_are_compiler_errors(err, message):
    with pytest.raises(CompilerError) as exc_info:
        raise err
    assert exc_info.value is err
    assert str(exc_info.value) == message


def test_default_options():
    opts = CompilerOptions()
    assert opts.unit_interop is True
    assert opts.use_std_collections is False
    assert opts.skip_loop_interop is False
    assert opts.module_type is ModuleType.SATURNUS
    assert opts.override_mod_path is None


def test_ir_round_trip_text():
    text = "local x = 1;\nreturn x;"
    assert str(SaturnusIR(text)) == text


def test_ir_keeps_utf8_bytes():
    ir = SaturnusIR("ñ")
    assert ir.compiled_source == "ñ".encode("utf-8")
    assert str(SaturnusIR(ir.compiled_source)) == "ñ"


def test_source_code_location():
    assert SourceCode("let a = 1;").location is None
    src = SourceCode("x", Path("foo/bar"))
    assert src.location == Path("foo/bar")
    assert src.source == "x"