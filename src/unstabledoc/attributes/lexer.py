"""Tokenizer for Rust attribute text as emitted in rustdoc JSON ``attrs``."""

from __future__ import annotations

from dataclasses import dataclass
import re


class LexError(ValueError):
    """Raised when attribute text is not a valid Rust token stream."""


@dataclass(frozen=True, slots=True)
class Token:
    kind: str  # "ident", "lifetime", "punct" or "literal"
    text: str
    literal: str | None = None  # "str", "bytes", "cstr", "char", "byte", "int", "float" or "bool"
    value: object = None


_WHITESPACE_RE = re.compile(r"\s+")
_LINE_COMMENT_RE = re.compile(r"//[^\n]*")
_UNICODE_ESCAPE_RE = re.compile(r"\{([0-9A-Fa-f][0-9A-Fa-f_]{0,7})\}")
_RAW_STRING_START_RE = re.compile(r"(b|c)?r(#*)\"")
_STRING_RE = re.compile(r"(b|c)?\"((?:[^\"\\]|\\.)*)\"", re.DOTALL)
_CHAR_RE = re.compile(r"(b)?'((?:\\(?:x[0-9A-Fa-f]{2}|u\{[0-9A-Fa-f][0-9A-Fa-f_]{0,7}\}|.))|[^'\\\n])'")
_LIFETIME_RE = re.compile(r"'[^\W\d]\w*")
_NUMBER_RE = re.compile(
    r"0x[0-9A-Fa-f_]+(?:[iu]\w*)?"
    r"|0o[0-7_]+(?:[iu]\w*)?"
    r"|0b[01_]+(?:[iu]\w*)?"
    r"|(?P<dec>\d[\d_]*)(?P<frac>\.(?![.\w])|\.\d[\d_]*)?(?P<exp>[eE][+-]?[\d_]*\d[\d_]*)?(?:[^\W\d]\w*)?"
)
_IDENT_RE = re.compile(r"(?:r#)?[^\W\d]\w*")
_PUNCT_RE = re.compile(r"::|[#!\[\](){},=;:.<>+\-*/&|^%@?$~]")

_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    "0": "\0",
    "'": "'",
    '"': '"',
}
_STRING_KINDS = {"b": "bytes", "c": "cstr"}
_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {")", "]", "}"}


def unescape(body: str, *, ascii_only: bool = True) -> str:
    """Resolve Rust escape sequences inside a quoted literal body.

    ``\\xNN`` is limited to 7-bit values unless ``ascii_only`` is false, as
    for byte and byte-string literals.
    """

    out: list[str] = []
    index = 0
    length = len(body)
    while index < length:
        char = body[index]
        if char != "\\":
            out.append(char)
            index += 1
            continue

        if index + 1 >= length:
            raise LexError("Dangling escape at end of literal")
        marker = body[index + 1]
        if marker in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[marker])
            index += 2
        elif marker == "x":
            digits = body[index + 2 : index + 4]
            if len(digits) != 2 or not re.fullmatch(r"[0-9A-Fa-f]{2}", digits):
                raise LexError(f"Invalid hex escape: \\x{digits}")
            value = int(digits, 16)
            if ascii_only and value > 0x7F:
                raise LexError(f"Hex escape out of range: \\x{digits}")
            out.append(chr(value))
            index += 4
        elif marker == "u":
            match = _UNICODE_ESCAPE_RE.match(body[index + 2 :])
            if match is None:
                raise LexError("Invalid unicode escape")
            codepoint = int(match.group(1).replace("_", ""), 16)
            if codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
                raise LexError(f"Invalid unicode scalar value: {codepoint:#x}")
            out.append(chr(codepoint))
            index += 2 + match.end()
        elif marker == "\n":
            # line continuation swallows the newline and leading whitespace
            index += 2
            while index < length and body[index] in " \t\n\r":
                index += 1
        else:
            raise LexError(f"Unknown escape: \\{marker}")
    return "".join(out)


def _lex_raw_string(text: str, pos: int) -> tuple[Token, int] | None:
    match = _RAW_STRING_START_RE.match(text, pos)
    if match is None:
        return None
    hashes = match.group(2)
    terminator = '"' + hashes
    end = text.find(terminator, match.end())
    if end < 0:
        raise LexError("Unterminated raw string literal")
    literal = _STRING_KINDS.get(match.group(1), "str")
    value = text[match.end() : end]
    stop = end + len(terminator)
    return Token("literal", text[pos:stop], literal=literal, value=value), stop


def _skip_block_comment(text: str, pos: int) -> int | None:
    """Return the offset after a possibly nested block comment starting at ``pos``."""

    if not text.startswith("/*", pos):
        return None
    depth = 0
    index = pos
    while index < len(text):
        if text.startswith("/*", index):
            depth += 1
            index += 2
        elif text.startswith("*/", index):
            depth -= 1
            index += 2
            if depth == 0:
                return index
        else:
            index += 1
    raise LexError("Unterminated block comment")


def _lex_number(match: re.Match[str]) -> Token:
    raw = match.group(0)
    is_float = match.group("dec") is not None and (match.group("frac") or match.group("exp"))
    if is_float:
        return Token("literal", raw, literal="float", value=raw)
    return Token("literal", raw, literal="int", value=raw)


def _check_balanced(tokens: list[Token]) -> None:
    stack: list[str] = []
    for token in tokens:
        if token.kind != "punct":
            continue
        if token.text in _OPENERS:
            stack.append(_OPENERS[token.text])
        elif token.text in _CLOSERS:
            if not stack or stack.pop() != token.text:
                raise LexError(f"Unbalanced delimiter: {token.text}")
    if stack:
        raise LexError("Unclosed delimiter")


def tokenize(text: str) -> list[Token]:
    """Split ``text`` into Rust tokens with balanced delimiters."""

    tokens: list[Token] = []
    pos = 0
    length = len(text)
    while pos < length:
        skipped = _WHITESPACE_RE.match(text, pos) or _LINE_COMMENT_RE.match(text, pos)
        if skipped is not None:
            pos = skipped.end()
            continue

        comment_end = _skip_block_comment(text, pos)
        if comment_end is not None:
            pos = comment_end
            continue

        raw_string = _lex_raw_string(text, pos)
        if raw_string is not None:
            token, pos = raw_string
            tokens.append(token)
            continue

        match = _STRING_RE.match(text, pos)
        if match is not None:
            literal = _STRING_KINDS.get(match.group(1), "str")
            value = unescape(match.group(2), ascii_only=literal in ("str", "char"))
            tokens.append(Token("literal", match.group(0), literal=literal, value=value))
            pos = match.end()
            continue

        match = _CHAR_RE.match(text, pos)
        if match is not None:
            literal = "byte" if match.group(1) else "char"
            value = unescape(match.group(2), ascii_only=literal == "char")
            tokens.append(Token("literal", match.group(0), literal=literal, value=value))
            pos = match.end()
            continue

        match = _LIFETIME_RE.match(text, pos)
        if match is not None:
            tokens.append(Token("lifetime", match.group(0)))
            pos = match.end()
            continue

        match = _NUMBER_RE.match(text, pos)
        if match is not None:
            tokens.append(_lex_number(match))
            pos = match.end()
            continue

        match = _IDENT_RE.match(text, pos)
        if match is not None:
            word = match.group(0)
            if word in ("true", "false"):
                tokens.append(Token("literal", word, literal="bool", value=word == "true"))
            else:
                tokens.append(Token("ident", word))
            pos = match.end()
            continue

        match = _PUNCT_RE.match(text, pos)
        if match is not None:
            tokens.append(Token("punct", match.group(0)))
            pos = match.end()
            continue

        raise LexError(f"Unexpected character {text[pos]!r} at offset {pos}")

    _check_balanced(tokens)
    return tokens
