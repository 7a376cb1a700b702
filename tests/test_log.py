import pytest

from saturnus.titan.log import format_log, info, paint, warn


def test_format_log_exact():
    assert format_log("info", "cyan", "hi", "titan") == (
        "\x1b[2mtitan\x1b[0m \x1b[36minfo\x1b[0m: hi"
    )


def test_paint_wraps_text():
    painted = paint("x", "red")
    assert painted.startswith("\x1b[")
    assert painted.endswith("\x1b[0m")
    assert "x" in painted


def test_unknown_colour():
    with pytest.raises(ValueError):
        format_log("info", "purple", "m")


def test_info_prints(capsys):
    info("Compiling objects...")
    out = capsys.readouterr().out
    assert out.endswith(": Compiling objects...\n")
    assert paint("info", "cyan") in out


def test_warn_prints(capsys):
    warn("careful")
    out = capsys.readouterr().out
    assert paint("warning", "yellow") in out
    assert out.endswith(": careful\n")