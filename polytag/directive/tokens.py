"""Tokenizer for directive strings."""

import ast
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..core.exceptions import GrammarError


class TokenKind(Enum):
    IDENT = "identifier"
    EQ = "`=`"
    COMMA = "`,`"
    STRING = "string literal"


@dataclass(frozen=True)
class Span:
    """Half-open character range of a token in the directive text."""

    start: int
    end: int


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    span: Span | None = None


_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<eq>=)
    |(?P<comma>,)
    |(?P<string>"(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*')
    """,
    re.VERBOSE,
)


def tokenize(text: str) -> list[Token]:
    """Split a directive string into tokens.

    Raises GrammarError on the first character that cannot start a token.
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            span = Span(pos, pos + 1)
            if text[pos] in "\"'":
                message = "unterminated string literal"
                span = Span(pos, len(text))
            else:
                message = f"unexpected character {text[pos]!r}"
            raise GrammarError(message, span=span, source=text)

        span = Span(match.start(), match.end())
        group = match.lastgroup
        if group == "ident":
            tokens.append(Token(TokenKind.IDENT, match.group(), span))
        elif group == "eq":
            tokens.append(Token(TokenKind.EQ, "=", span))
        elif group == "comma":
            tokens.append(Token(TokenKind.COMMA, ",", span))
        elif group == "string":
            try:
                value = ast.literal_eval(match.group())
            except (SyntaxError, ValueError) as e:
                raise GrammarError(
                    f"invalid string literal: {e}", span=span, source=text
                ) from e
            tokens.append(Token(TokenKind.STRING, value, span))
        pos = match.end()
    return tokens


def tokens_from_options(options: Mapping[str, Any]) -> list[Token]:
    """Convert decorator keyword options into the directive token stream.

    ``key="value"`` becomes ``key = "value"`` and ``flag=True`` becomes the
    bare flag. ``False`` and ``None`` mean the option is not given.
    """
    tokens: list[Token] = []
    for key, value in options.items():
        if value is None or value is False:
            continue
        if tokens:
            tokens.append(Token(TokenKind.COMMA, ","))
        tokens.append(Token(TokenKind.IDENT, key))
        if value is True:
            continue
        if not isinstance(value, str):
            raise GrammarError(
                f"expected string literal for `{key}`, got {type(value).__name__}"
            )
        tokens.append(Token(TokenKind.EQ, "="))
        tokens.append(Token(TokenKind.STRING, value))
    return tokens


def directive_tokens(
    directive: str | None, options: Mapping[str, Any]
) -> tuple[list[Token], str | None]:
    """Tokens for a directive string followed by keyword options."""
    tokens = tokenize(directive) if directive else []
    extra = tokens_from_options(options)
    if tokens and extra and tokens[-1].kind is not TokenKind.COMMA:
        tokens.append(Token(TokenKind.COMMA, ","))
    tokens.extend(extra)
    return tokens, directive

