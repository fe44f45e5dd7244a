"""Parsing module for the schema definition language."""

from typed_schema.parsing.sdl_lexer import SDLLexer
from typed_schema.parsing.sdl_parser import SDLParser

__all__ = [
    "SDLLexer",
    "SDLParser",
]
