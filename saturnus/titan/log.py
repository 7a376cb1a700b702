"""Coloured console logging for the build tool."""

from __future__ import annotations

_RESET = "\x1b[0m"
_STYLES = {
    "dimmed": "\x1b[2m",
    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "cyan": "\x1b[36m",
}


def paint(text: str, colour: str) -> str:
    """Wrap ``text`` in the terminal escape codes of ``colour``."""
    try:
        code = _STYLES[colour]
    except KeyError:
        raise ValueError(f"unknown colour: {colour}") from None
    return f"{code}{text}{_RESET}"


def format_log(label: str, colour: str, message: str, origin: str = "titan") -> str:
    """A log line: dimmed origin, coloured label, then the message."""
    return f"{paint(origin, 'dimmed')} {paint(label, colour)}: {message}"


def info(message: str) -> None:
    print(format_log("info", "cyan", message))


def warn(message: str) -> None:
    print(format_log("warning", "yellow", message))