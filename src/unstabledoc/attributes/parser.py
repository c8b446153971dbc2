"""Meta-item parser for Rust attributes and ``#[unstable(...)]`` extraction.

Attribute strings in rustdoc JSON are free-form. Most of them are not the
marker being looked for, and some are not valid attributes at all, so every
public function here reports failure as ``None`` instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from unstabledoc.attributes.lexer import LexError, Token, tokenize


class MetaParseError(ValueError):
    """Raised internally when tokens do not form a meta item."""


@dataclass(frozen=True, slots=True)
class MetaPath:
    path: tuple[str, ...]
    leading_colon: bool = False

    def get_ident(self) -> str | None:
        """Return the single identifier of a plain one-segment path."""

        if self.leading_colon or len(self.path) != 1:
            return None
        return self.path[0]


@dataclass(frozen=True, slots=True)
class MetaList:
    path: MetaPath
    nested: tuple["NestedMeta", ...]


@dataclass(frozen=True, slots=True)
class MetaNameValue:
    path: MetaPath
    value: Token


Meta = Union[MetaPath, MetaList, MetaNameValue]
NestedMeta = Union[MetaPath, MetaList, MetaNameValue, Token]

MAX_NESTING = 64


def meta_path(meta: Meta) -> MetaPath:
    return meta if isinstance(meta, MetaPath) else meta.path


class _Cursor:
    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    def peek(self, offset: int = 0) -> Token | None:
        index = self._pos + offset
        return self._tokens[index] if index < len(self._tokens) else None

    def advance(self) -> Token:
        token = self.peek()
        if token is None:
            raise MetaParseError("Unexpected end of attribute")
        self._pos += 1
        return token

    def at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    def is_punct(self, text: str, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token is not None and token.kind == "punct" and token.text == text

    def expect_punct(self, text: str) -> None:
        if not self.is_punct(text):
            raise MetaParseError(f"Expected {text!r}")
        self._pos += 1

    def group(self) -> "_Cursor":
        """Consume a delimited group and return a cursor over its contents."""

        opener = self.advance()
        closer = {"(": ")", "[": "]", "{": "}"}.get(opener.text)
        if opener.kind != "punct" or closer is None:
            raise MetaParseError("Expected a delimited group")

        depth = 1
        start = self._pos
        while depth:
            token = self.advance()
            if token.kind != "punct":
                continue
            if token.text in ("(", "[", "{"):
                depth += 1
            elif token.text in (")", "]", "}"):
                depth -= 1
        return _Cursor(self._tokens[start : self._pos - 1])


def _parse_path(cursor: _Cursor) -> MetaPath:
    leading_colon = False
    if cursor.is_punct("::"):
        cursor.advance()
        leading_colon = True

    segments: list[str] = []
    while True:
        token = cursor.advance()
        if token.kind != "ident":
            raise MetaParseError("Expected identifier in path")
        segments.append(token.text)
        if not cursor.is_punct("::"):
            break
        cursor.advance()
    return MetaPath(tuple(segments), leading_colon=leading_colon)


def _parse_literal(cursor: _Cursor) -> Token:
    if cursor.is_punct("-"):
        number = cursor.peek(1)
        if number is None or number.literal not in ("int", "float"):
            raise MetaParseError("Expected numeric literal after '-'")
        cursor.advance()
        cursor.advance()
        return Token("literal", "-" + number.text, literal=number.literal, value="-" + str(number.value))

    token = cursor.advance()
    if token.kind != "literal":
        raise MetaParseError("Expected literal")
    return token


def _starts_literal(cursor: _Cursor) -> bool:
    token = cursor.peek()
    if token is None:
        return False
    return token.kind == "literal" or cursor.is_punct("-")


def _parse_nested(cursor: _Cursor, depth: int) -> NestedMeta:
    if _starts_literal(cursor):
        return _parse_literal(cursor)
    return _parse_meta(cursor, depth)


def _parse_meta(cursor: _Cursor, depth: int = 0) -> Meta:
    if depth > MAX_NESTING:
        raise MetaParseError(f"Meta items nested deeper than {MAX_NESTING} levels")
    path = _parse_path(cursor)

    if cursor.is_punct("("):
        inner = cursor.group()
        nested: list[NestedMeta] = []
        while not inner.at_end():
            nested.append(_parse_nested(inner, depth + 1))
            if inner.at_end():
                break
            inner.expect_punct(",")
        return MetaList(path, tuple(nested))

    if cursor.is_punct("="):
        cursor.advance()
        return MetaNameValue(path, _parse_literal(cursor))

    return path


def _parse_outer_attribute(cursor: _Cursor) -> Meta:
    cursor.expect_punct("#")
    if not cursor.is_punct("["):
        raise MetaParseError("Expected '[' after '#'")
    body = cursor.group()
    meta = _parse_meta(body)
    if not body.at_end():
        raise MetaParseError("Unexpected tokens after meta item")

    # later attributes in the same string only need to be well formed
    while not cursor.at_end():
        cursor.expect_punct("#")
        if not cursor.is_punct("["):
            raise MetaParseError("Expected '[' after '#'")
        cursor.group()
    return meta


def parse_meta(attr: str) -> Meta | None:
    """Parse ``#[meta]`` or a bare ``meta`` string; ``None`` on any failure."""

    try:
        tokens = tokenize(attr)
        cursor = _Cursor(tokens)
        if cursor.is_punct("#"):
            return _parse_outer_attribute(cursor)

        meta = _parse_meta(cursor)
        if not cursor.at_end():
            return None
        return meta
    except (LexError, MetaParseError):
        return None


def find_marker_value(attr: str, *, marker: str, key: str) -> str | None:
    """Return the first ``key = "..."`` string inside a ``marker(...)`` attribute."""

    meta = parse_meta(attr)
    if meta is None or meta_path(meta).get_ident() != marker:
        return None
    if not isinstance(meta, MetaList):
        return None

    for nested in meta.nested:
        if not isinstance(nested, MetaNameValue):
            continue
        if nested.path.get_ident() != key:
            continue
        if nested.value.literal == "str":
            return str(nested.value.value)
    return None


def parse_unstable_feature(attr: str) -> str | None:
    """Return the feature name of an ``#[unstable(feature = "...")]`` attribute."""

    return find_marker_value(attr, marker="unstable", key="feature")
