"""Lua 5.3 code generation for Saturnus syntax trees, with the titan build tool."""

__version__ = "0.1.0"