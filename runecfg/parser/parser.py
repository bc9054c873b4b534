"""Recursive-descent parser core over a lexed token list."""

from dataclasses import dataclass
from typing import NoReturn

from runecfg.diagnostics import Diagnostic, ParseError, diagnostic_at
from runecfg.diagnostics.codes import PARSER_EXPECTED_TOKEN, DiagnosticSpec
from runecfg.lexer import Token, TokenKind
from runecfg.text import LineIndex, TextRange, TextSize


@dataclass(slots=True)
class ParserProgress:
    """Detect parser stalls inside list-style loops."""

    _position: TextSize | None = None

    def has_progressed(self, parser: "Parser") -> bool:
        has_progressed = self._position is None or self._position < parser.position
        self._position = parser.position
        return has_progressed

    def assert_progressing(self, parser: "Parser") -> None:
        if not self.has_progressed(parser):
            raise RuntimeError(f"Parser stopped making progress at {parser.current.name} {parser.current_range}")


class Parser:
    """Cursor over tokens. Errors are raised immediately as `ParseError`."""

    def __init__(self, tokens: list[Token], *, source_text: str, source_path: str | None = None) -> None:
        if not tokens or tokens[-1].kind != TokenKind.EOF:
            raise ValueError("Token list must be terminated by EOF")
        self._tokens = tokens
        self._cursor = 0
        self._source_text = source_text
        self._source_path = source_path
        self._index = LineIndex(source_text)

    @property
    def source_text(self) -> str:
        return self._source_text

    @property
    def source_path(self) -> str | None:
        return self._source_path

    @property
    def current_token(self) -> Token:
        return self._tokens[self._cursor]

    @property
    def current(self) -> TokenKind:
        return self.current_token.kind

    @property
    def current_range(self) -> TextRange:
        return self.current_token.range

    @property
    def position(self) -> TextSize:
        return self.current_range.start

    @property
    def has_preceding_line_break(self) -> bool:
        return self.current_token.has_preceding_line_break()

    @property
    def previous_token(self) -> Token:
        return self._tokens[max(self._cursor - 1, 0)]

    def at(self, kind: TokenKind) -> bool:
        return self.current == kind

    def at_set(self, kinds: frozenset[TokenKind] | set[TokenKind]) -> bool:
        return self.current in kinds

    def nth_token(self, n: int) -> Token:
        index = min(self._cursor + n, len(self._tokens) - 1)
        return self._tokens[index]

    def nth(self, n: int) -> TokenKind:
        return self.nth_token(n).kind

    def bump(self) -> Token:
        token = self.current_token
        if token.kind != TokenKind.EOF:
            self._cursor += 1
        return token

    def eat(self, kind: TokenKind) -> bool:
        if self.current == kind:
            self.bump()
            return True
        return False

    def expect(self, kind: TokenKind, description: str | None = None) -> Token:
        if self.current == kind:
            return self.bump()
        wanted = description or _describe_kind(kind)
        self.error(
            PARSER_EXPECTED_TOKEN,
            message=f"Expected {wanted}, found {describe_token(self.current_token)}",
        )

    def diagnostic(
        self,
        spec: DiagnosticSpec,
        *,
        message: str | None = None,
        hint: str | None = None,
        range: TextRange | None = None,
    ) -> Diagnostic:
        return diagnostic_at(
            spec,
            self._source_text,
            range if range is not None else self.current_range,
            source_path=self._source_path,
            message=message,
            hint=hint,
            index=self._index,
        )

    def error(
        self,
        spec: DiagnosticSpec,
        *,
        message: str | None = None,
        hint: str | None = None,
        range: TextRange | None = None,
    ) -> NoReturn:
        raise ParseError(self.diagnostic(spec, message=message, hint=hint, range=range))

    def range_from(self, start: TextRange) -> TextRange:
        """Range covering `start` through the last consumed token."""
        return start.cover(self.previous_token.range)


_KIND_DESCRIPTIONS: dict[TokenKind, str] = {
    TokenKind.EOF: "end of file",
    TokenKind.IDENTIFIER: "identifier",
    TokenKind.STRING: "string",
    TokenKind.RAW_STRING: "raw string",
    TokenKind.INT: "number",
    TokenKind.FLOAT: "number",
    TokenKind.COLON: "`:`",
    TokenKind.COMMA: "`,`",
    TokenKind.DOT: "`.`",
    TokenKind.EQUAL: "`=`",
    TokenKind.AT: "`@`",
    TokenKind.LBRACKET: "`[`",
    TokenKind.RBRACKET: "`]`",
    TokenKind.LPAREN: "`(`",
    TokenKind.RPAREN: "`)`",
    TokenKind.ENV: "`$env`",
    TokenKind.SYS: "`$sys`",
}


def _describe_kind(kind: TokenKind) -> str:
    return _KIND_DESCRIPTIONS.get(kind, f"`{kind.name.lower()}`")


def describe_token(token: Token) -> str:
    match token.kind:
        case TokenKind.EOF:
            return "end of file"
        case TokenKind.STRING | TokenKind.RAW_STRING | TokenKind.INT | TokenKind.FLOAT | TokenKind.IDENTIFIER:
            return f"{_describe_kind(token.kind)} `{token.text}`"
        case _:
            return _describe_kind(token.kind)
