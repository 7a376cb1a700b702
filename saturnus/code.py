"""Text builder that tracks the current indentation level."""

from __future__ import annotations

from typing import Any


class IndentedBuilder:
    """Accumulates generated code, indenting each new line to the current level."""

    def __init__(self, indent: str = "  ") -> None:
        self.level = 0
        self.indent = indent
        self._pieces: list[str] = []

    def push(self) -> IndentedBuilder:
        """Increase the indentation level."""
        self.level += 1
        return self

    def pop(self) -> IndentedBuilder:
        """Decrease the indentation level."""
        if self.level == 0:
            raise ValueError(
                "Uneven indentation! Trying to pop past 0 indentation level."
            )
        self.level -= 1
        return self

    def write(self, piece: Any) -> IndentedBuilder:
        """Append the text form of ``piece``."""
        self._pieces.append(str(piece))
        return self

    def line(self) -> IndentedBuilder:
        """Start a new line indented to the current level."""
        self._pieces.append("\n" + self.indent * self.level)
        return self

    def build(self) -> str:
        """Return everything written so far."""
        return "".join(self._pieces)

    def __str__(self) -> str:
        return self.build()