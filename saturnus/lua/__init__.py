"""Lua 5.3 code generation for Saturnus syntax trees."""