"""Directive parsing for polytag declarations."""

from .parser import (
    parse_impl_directive,
    parse_interface_directive,
    resolve_discriminant,
    type_name,
)
from .tokens import Span, Token, TokenKind, directive_tokens, tokenize

__all__ = [
    "Span",
    "Token",
    "TokenKind",
    "tokenize",
    "directive_tokens",
    "parse_interface_directive",
    "parse_impl_directive",
    "resolve_discriminant",
    "type_name",
]
