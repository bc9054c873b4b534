"""Lexer."""

from typing import NoReturn

from runecfg.diagnostics import LexError, diagnostic_at
from runecfg.diagnostics.codes import (
    LEXER_MALFORMED_NUMBER,
    LEXER_UNEXPECTED_CHARACTER,
    LEXER_UNKNOWN_NAMESPACE,
    LEXER_UNTERMINATED_RAW_STRING,
    LEXER_UNTERMINATED_STRING,
    DiagnosticSpec,
)
from runecfg.lexer.tokens import KEYWORDS, Token, TokenFlags, TokenKind, eof_token
from runecfg.text import LineIndex, TextRange, TextSize

_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    '"': '"',
    "'": "'",
    "$": "$",
    "{": "{",
    "}": "}",
}

_PUNCTUATION: dict[str, TokenKind] = {
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
    ".": TokenKind.DOT,
    "=": TokenKind.EQUAL,
    "@": TokenKind.AT,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}

_NAMESPACES: dict[str, TokenKind] = {
    "env": TokenKind.ENV,
    "sys": TokenKind.SYS,
}


class Lexer:
    """Lexer that drops whitespace and comments and records line breaks as token flags."""

    def __init__(self, source: str, *, source_path: str | None = None) -> None:
        self._source = source
        self._source_path = source_path
        self._index = LineIndex(source)
        self._position = 0
        self._start = 0
        self._after_newline = False
        self._flags = TokenFlags.NONE
        self._value = ""
        self._dollars: list[int] = []

    @property
    def source(self) -> str:
        """Original source text."""
        return self._source

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_eof(self) -> bool:
        return self._position >= len(self._source)

    def next_token(self) -> Token:
        self._skip_trivia()
        self._start = self._position
        self._flags = TokenFlags.PRECEDING_LINE_BREAK if self._after_newline else TokenFlags.NONE
        self._value = ""
        self._dollars = []

        if self.is_eof:
            position = self._index.line_col(self._position)
            return eof_token(self._position, position.line, position.column, self._flags)

        kind = self._lex_token()
        self._after_newline = False
        text = self._source[self._start : self._position]
        position = self._index.line_col(self._start)
        return Token(
            kind=kind,
            range=TextRange.new(TextSize.from_int(self._start), TextSize.from_int(self._position)),
            text=text,
            value=self._value if kind in (TokenKind.STRING, TokenKind.RAW_STRING) else text,
            line=position.line,
            column=position.column,
            flags=self._flags,
            dollars=tuple(self._dollars),
        )

    def lex(self) -> list[Token]:
        tokens: list[Token] = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.kind == TokenKind.EOF:
                break
        return tokens

    def _lex_token(self) -> TokenKind:
        ch = self._current_char()

        if ch == "r" and self._peek_char() == '"':
            return self._lex_raw_string()

        if ch == '"' or ch == "'":
            return self._lex_string(ch)

        if ch.isdigit() or (ch == "-" and self._peek_char().isdigit()):
            return self._lex_number()

        if ch == "-":
            self._advance(1)
            self._fail(LEXER_MALFORMED_NUMBER, "Malformed number: `-` must be followed by digits.")

        if ch.isalpha() or ch == "_":
            return self._lex_identifier()

        if ch == "$":
            return self._lex_namespace()

        kind = _PUNCTUATION.get(ch)
        if kind is not None:
            self._advance(1)
            return kind

        self._advance(1)
        self._fail(LEXER_UNEXPECTED_CHARACTER, f"Unexpected character {ch!r}.")

    def _skip_trivia(self) -> None:
        while not self.is_eof:
            ch = self._current_char()
            if ch == "\n":
                self._after_newline = True
                self._advance(1)
                continue
            if ch == " " or ch == "\t" or ch == "\r":
                self._advance(1)
                continue
            if ch == "#":
                # Consume until end of line, the newline itself marks the next token.
                while not self.is_eof and self._current_char() != "\n":
                    self._advance(1)
                continue
            break

    def _lex_string(self, quote: str) -> TokenKind:
        # Consume opening quote
        self._advance(1)
        self._flags |= TokenFlags.WAS_QUOTED
        content: list[str] = []
        length = 0

        while not self.is_eof:
            ch = self._current_char()
            if ch == quote:
                self._advance(1)
                self._value = "".join(content)
                if self._dollars:
                    self._flags |= TokenFlags.HAS_INTERPOLATION
                return TokenKind.STRING
            if ch == "\\":
                self._flags |= TokenFlags.HAS_ESCAPE
                self._advance(1)
                if self.is_eof:
                    break
                escaped = self._current_char()
                content.append(_ESCAPES.get(escaped, escaped))
                length += 1
                self._advance(1)
                continue
            if ch == "\n":
                break
            if ch == "$":
                self._dollars.append(length)
            content.append(ch)
            length += 1
            self._advance(1)

        self._fail(LEXER_UNTERMINATED_STRING, f"Unterminated string literal (opened with {quote}).")

    def _lex_raw_string(self) -> TokenKind:
        # Consume `r"`
        self._advance(2)
        self._flags |= TokenFlags.WAS_QUOTED
        content: list[str] = []

        while not self.is_eof:
            ch = self._current_char()
            if ch == '"':
                self._advance(1)
                self._value = "".join(content)
                return TokenKind.RAW_STRING
            if ch == "\\":
                # Backslashes are kept verbatim for the regex engine.
                content.append(ch)
                self._advance(1)
                if self.is_eof:
                    break
                content.append(self._current_char())
                self._advance(1)
                continue
            if ch == "\n":
                break
            content.append(ch)
            self._advance(1)

        self._fail(LEXER_UNTERMINATED_RAW_STRING)

    def _lex_number(self) -> TokenKind:
        if self._current_char() == "-":
            self._advance(1)

        saw_dot = False
        while not self.is_eof:
            ch = self._current_char()
            if ch.isdigit():
                self._advance(1)
                continue
            if ch == "." and not saw_dot and self._peek_char().isdigit():
                saw_dot = True
                self._advance(1)
                continue
            break

        trailing = self._current_char()
        if trailing == "." or trailing == "_" or trailing.isalpha():
            while not self.is_eof and (self._current_char().isalnum() or self._current_char() in "._"):
                self._advance(1)
            literal = self._source[self._start : self._position]
            self._fail(LEXER_MALFORMED_NUMBER, f"Malformed number {literal!r}.")

        return TokenKind.FLOAT if saw_dot else TokenKind.INT

    def _lex_identifier(self) -> TokenKind:
        self._advance(1)
        while not self.is_eof:
            ch = self._current_char()
            if ch.isalnum() or ch == "_" or ch == "-":
                self._advance(1)
                continue
            break
        name = self._source[self._start : self._position]
        return KEYWORDS.get(name, TokenKind.IDENTIFIER)

    def _lex_namespace(self) -> TokenKind:
        self._advance(1)
        name_start = self._position
        while not self.is_eof and (self._current_char().isalnum() or self._current_char() == "_"):
            self._advance(1)
        name = self._source[name_start : self._position]
        kind = _NAMESPACES.get(name)
        if kind is None:
            self._fail(LEXER_UNKNOWN_NAMESPACE, f"Unknown namespace `${name}`.")
        return kind

    def _current_char(self) -> str:
        if self.is_eof:
            return "\0"
        return self._source[self._position]

    def _peek_char(self, ahead: int = 1) -> str:
        index = self._position + ahead
        if index >= len(self._source):
            return "\0"
        return self._source[index]

    def _advance(self, steps: int) -> None:
        self._position += steps

    def _fail(self, spec: DiagnosticSpec, message: str | None = None) -> NoReturn:
        end = max(self._position, self._start)
        raise LexError(
            diagnostic_at(
                spec,
                self._source,
                TextRange.new(TextSize.from_int(self._start), TextSize.from_int(end)),
                source_path=self._source_path,
                message=message,
                index=self._index,
            )
        )


def lex(text: str, *, source_path: str | None = None) -> list[Token]:
    """Tokenize `text`, raising `LexError` on the first malformed token."""
    return Lexer(text, source_path=source_path).lex()
