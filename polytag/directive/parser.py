"""Directive parsing for interface and implementation declarations.

Interface directives::

    (empty)                                             -> External
    tag = "type"                                        -> Internal
    tag = "type", default_variant = "Circle"            -> Internal
    tag = "type", dont_write_tag                        -> Internal(write_tag=False)
    tag = "t", content = "c"                            -> Adjacent
    tag = "t", content = "c", deny_unknown_fields       -> Adjacent

Implementation directives::

    (empty)
    name = "Circle"
"""

from __future__ import annotations

import types
import typing
from typing import Annotated, Any, get_args, get_origin

from ..core.exceptions import (
    ConfigConflict,
    DeclarationError,
    GrammarError,
    MissingName,
)
from ..core.types import Adjacent, External, ImplDirective, Internal, TaggingScheme
from .tokens import Span, Token, TokenKind

VALUE_KEYS = ("tag", "content", "default_variant")
FLAG_KEYS = ("dont_write_tag", "deny_unknown_fields")
INTERFACE_KEYS = VALUE_KEYS + FLAG_KEYS
IMPL_KEYS = ("name",)


class TokenStream:
    """Cursor over directive tokens that raises spanned errors."""

    def __init__(self, tokens: list[Token], source: str | None = None):
        self.tokens = tokens
        self.source = source
        self.pos = 0

    def is_empty(self) -> bool:
        return self.pos >= len(self.tokens)

    def peek(self) -> Token | None:
        if self.is_empty():
            return None
        return self.tokens[self.pos]

    def next(self) -> Token | None:
        token = self.peek()
        if token is not None:
            self.pos += 1
        return token

    def span(self) -> Span | None:
        token = self.peek()
        if token is not None:
            return token.span
        if self.source is not None:
            return Span(len(self.source), len(self.source))
        return None

    def error(
        self,
        message: str,
        cls: type[DeclarationError] = GrammarError,
        token: Token | None = None,
    ) -> DeclarationError:
        span = token.span if token is not None else self.span()
        return cls(message, span=span, source=self.source)

    def expect(self, kind: TokenKind, after: str | None = None) -> Token:
        token = self.peek()
        if token is None or token.kind is not kind:
            found = "end of directive" if token is None else repr(token.value)
            where = f" after `{after}`" if after else ""
            raise self.error(f"expected {kind.value}{where}, found {found}")
        self.pos += 1
        return token

    def separator(self) -> None:
        """Consume the comma between items; a trailing comma is allowed."""
        if not self.is_empty():
            self.expect(TokenKind.COMMA)


def _expected(keys: tuple[str, ...]) -> str:
    return "expected one of " + ", ".join(f"`{k}`" for k in keys)


def parse_interface_directive(
    tokens: list[Token], source: str | None = None
) -> TaggingScheme:
    """Resolve interface directive tokens into a tagging scheme."""
    stream = TokenStream(tokens, source)
    if stream.is_empty():
        return External()

    values: dict[str, str] = {}
    flags: set[str] = set()
    first_token: dict[str, Token] = {}

    key = stream.next()
    while key is not None:
        if key.kind is not TokenKind.IDENT or key.value not in INTERFACE_KEYS:
            raise stream.error(_expected(INTERFACE_KEYS), token=key)
        if key.value in values or key.value in flags:
            raise stream.error(f"`{key.value}` given twice", token=key)
        first_token[key.value] = key

        if key.value in VALUE_KEYS:
            stream.expect(TokenKind.EQ, after=key.value)
            value = stream.expect(TokenKind.STRING, after=f"{key.value} =")
            values[key.value] = value.value
        else:
            nxt = stream.peek()
            if nxt is not None and nxt.kind is TokenKind.EQ:
                raise stream.error(f"`{key.value}` is a flag and takes no value")
            flags.add(key.value)
        stream.separator()
        key = stream.next()

    tag = values.get("tag")
    if tag is None:
        raise ConfigConflict("`tag` not given", span=stream.span(), source=source)
    if not tag:
        raise stream.error("`tag` must not be empty", ConfigConflict, first_token["tag"])

    default_variant = values.get("default_variant")
    content = values.get("content")
    if content is not None:
        if not content:
            raise stream.error(
                "`content` must not be empty", ConfigConflict, first_token["content"]
            )
        if content == tag:
            raise stream.error(
                "`tag` and `content` must name different fields",
                ConfigConflict,
                first_token["content"],
            )
        if "dont_write_tag" in flags:
            raise stream.error(
                "`dont_write_tag` can't be set if `content` is given",
                ConfigConflict,
                first_token["dont_write_tag"],
            )
        return Adjacent(
            tag=tag,
            content=content,
            default_variant=default_variant,
            deny_unknown_fields="deny_unknown_fields" in flags,
        )

    if "deny_unknown_fields" in flags:
        raise stream.error(
            "`deny_unknown_fields` can't be set if `content` is not given",
            ConfigConflict,
            first_token["deny_unknown_fields"],
        )
    return Internal(
        tag=tag,
        default_variant=default_variant,
        write_tag="dont_write_tag" not in flags,
    )


def parse_impl_directive(
    tokens: list[Token], source: str | None = None
) -> ImplDirective:
    """Resolve implementation directive tokens."""
    stream = TokenStream(tokens, source)
    key = stream.next()
    if key is None:
        return ImplDirective()

    if key.kind is not TokenKind.IDENT or key.value not in IMPL_KEYS:
        raise stream.error(_expected(IMPL_KEYS), token=key)
    stream.expect(TokenKind.EQ, after="name")
    name = stream.expect(TokenKind.STRING, after="name =")
    if not name.value:
        raise stream.error("`name` must not be empty", ConfigConflict, name)

    nxt = stream.peek()
    if nxt is not None and nxt.kind is TokenKind.COMMA:
        stream.next()
    token = stream.peek()
    if token is not None:
        if token.kind is TokenKind.IDENT and token.value == "name":
            raise stream.error("`name` given twice")
        raise stream.error(f"unexpected {token.value!r} after `name`")
    return ImplDirective(explicit_name=name.value)


_STRUCTURAL_ORIGINS: tuple[Any, ...] = (
    tuple,
    typing.Union,
    types.UnionType,
    typing.Literal,
    typing.Callable,
)


def type_name(tp: Any) -> str | None:
    """Innermost unqualified identifier of a type, if it has one.

    ``Annotated`` wrappers are looked through and generic arguments are
    stripped, so ``Annotated[Box[int], ...]`` names ``Box``. Tuples, unions,
    callables and other structural types have no such identifier.
    """
    while True:
        origin = get_origin(tp)
        if origin is Annotated:
            tp = get_args(tp)[0]
            continue
        if origin is None:
            break
        if (
            origin in _STRUCTURAL_ORIGINS
            or getattr(origin, "__module__", None) == "collections.abc"
        ):
            return None
        tp = origin

    if not isinstance(tp, type) or tp is tuple or tp is type(None):
        return None
    name = tp.__name__
    if not name.isidentifier():
        return None
    return name


def resolve_discriminant(directive: ImplDirective, tp: Any) -> str:
    """Discriminant for an implementation: the explicit name or the type's name."""
    if directive.explicit_name is not None:
        return directive.explicit_name
    name = type_name(tp)
    if name is None:
        raise MissingName(
            f"cannot derive a name for {tp!r}; "
            "use name=\"...\" to specify a unique name"
        )
    return name
