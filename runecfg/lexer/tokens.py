"""Lexer tokens."""

from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Final

from runecfg.text import TextRange, TextSize


class TokenKind(IntEnum):
    # -------------------------
    # Special / sentinels
    # -------------------------
    EOF = 1

    # -------------------------
    # Identifiers / literals
    # -------------------------
    IDENTIFIER = 20
    STRING = 21  # "..." or '...'
    RAW_STRING = 22  # r"..."
    INT = 23
    FLOAT = 24
    TRUE = 25
    FALSE = 26
    NULL = 27  # null / None

    # -------------------------
    # Keywords
    # -------------------------
    IF = 30
    ELSE = 31
    END = 32
    ENDIF = 33
    GATHER = 34
    AS = 35

    # -------------------------
    # Punctuation / separators
    # -------------------------
    COLON = 40  # :
    COMMA = 41  # ,
    DOT = 42  # .
    EQUAL = 43  # =
    AT = 44  # @

    LBRACKET = 60  # [
    RBRACKET = 61  # ]
    LPAREN = 62  # (
    RPAREN = 63  # )

    # -------------------------
    # Namespace markers
    # -------------------------
    ENV = 70  # $env
    SYS = 71  # $sys


KEYWORDS: Final[dict[str, TokenKind]] = {
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "end": TokenKind.END,
    "endif": TokenKind.ENDIF,
    "gather": TokenKind.GATHER,
    "as": TokenKind.AS,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "null": TokenKind.NULL,
    "None": TokenKind.NULL,
}


class TokenFlags(IntFlag):
    """Token metadata flags."""

    NONE = 0
    PRECEDING_LINE_BREAK = 1 << 0  # NEWLINE before
    WAS_QUOTED = 1 << 1
    HAS_ESCAPE = 1 << 2
    HAS_INTERPOLATION = 1 << 3  # unescaped $env./$sys. inside a quoted string


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token.

    `text` is the literal source slice; `value` is the decoded payload
    (unescaped string contents, raw pattern text, keyword or identifier name).
    `dollars` holds the offsets into `value` of `$` characters that were not
    escaped, used to split interpolated strings.
    """

    kind: TokenKind
    range: TextRange
    text: str
    value: str
    line: int
    column: int
    flags: TokenFlags = TokenFlags.NONE
    dollars: tuple[int, ...] = ()

    def has_preceding_line_break(self) -> bool:
        return bool(self.flags & TokenFlags.PRECEDING_LINE_BREAK)


def eof_token(offset: int, line: int, column: int, flags: TokenFlags = TokenFlags.NONE) -> Token:
    return Token(
        kind=TokenKind.EOF,
        range=TextRange.empty(TextSize.from_int(offset)),
        text="",
        value="",
        line=line,
        column=column,
        flags=flags,
    )
