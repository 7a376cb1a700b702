import pytest

from saturnus.code import IndentedBuilder


def test_empty_builder_yields_empty_text():
    assert IndentedBuilder().build() == ""


def test_write_concatenates_text_forms():
    b = IndentedBuilder()
    b.write("foo").write(1)
    assert b.build() == "foo1"


def test_line_indents_to_current_level():
    b = IndentedBuilder()
    b.write("a").push().line().write("b")
    assert b.build() == "a\n  b"


def test_pop_restores_level():
    b = IndentedBuilder()
    b.push().pop().line()
    assert b.build() == "\n"
    assert b.level == 0


def test_pop_below_zero_raises():
    with pytest.raises(ValueError):
        IndentedBuilder().pop()


def test_methods_chain_on_same_builder():
    b = IndentedBuilder()
    assert b.push() is b
    assert b.write("x") is b
    assert b.line() is b


def test_custom_indent_and_nesting():
    b = IndentedBuilder(indent="\t")
    b.push().push().line()
    assert b.build() == "\n" + "\t" * 2
    assert str(b) == b.build()