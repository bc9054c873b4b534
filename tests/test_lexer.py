import textwrap

import pytest

from runecfg.diagnostics import LexError
from runecfg.lexer import TokenFlags, TokenKind, lex


def kinds(text: str) -> list[TokenKind]:
    return [token.kind for token in lex(text)]


def test_global_binding_tokens() -> None:
    tokens = lex('name "rune"\n')

    assert [token.kind for token in tokens] == [TokenKind.IDENTIFIER, TokenKind.STRING, TokenKind.EOF]
    assert tokens[0].value == "name"
    assert tokens[1].text == '"rune"'
    assert tokens[1].value == "rune"
    assert tokens[1].flags & TokenFlags.WAS_QUOTED


def test_line_breaks_are_flags_not_tokens() -> None:
    tokens = lex("a 1\n  b 2\n")

    assert [token.kind for token in tokens] == [
        TokenKind.IDENTIFIER,
        TokenKind.INT,
        TokenKind.IDENTIFIER,
        TokenKind.INT,
        TokenKind.EOF,
    ]
    assert not tokens[1].has_preceding_line_break()
    assert tokens[2].has_preceding_line_break()
    assert (tokens[2].line, tokens[2].column) == (2, 3)
    assert not tokens[3].has_preceding_line_break()
    assert tokens[4].has_preceding_line_break()


def test_comments_are_discarded() -> None:
    tokens = lex("# leading comment\na 1 # trailing\n")

    assert [token.kind for token in tokens] == [TokenKind.IDENTIFIER, TokenKind.INT, TokenKind.EOF]
    assert tokens[0].has_preceding_line_break()
    assert tokens[0].line == 2


def test_keywords_and_literals() -> None:
    assert kinds("if else end endif gather as true false null None") == [
        TokenKind.IF,
        TokenKind.ELSE,
        TokenKind.END,
        TokenKind.ENDIF,
        TokenKind.GATHER,
        TokenKind.AS,
        TokenKind.TRUE,
        TokenKind.FALSE,
        TokenKind.NULL,
        TokenKind.NULL,
        TokenKind.EOF,
    ]


def test_punctuation_and_namespaces() -> None:
    assert kinds('@ : , . = [ ] ( ) $env.HOME $sys.os') == [
        TokenKind.AT,
        TokenKind.COLON,
        TokenKind.COMMA,
        TokenKind.DOT,
        TokenKind.EQUAL,
        TokenKind.LBRACKET,
        TokenKind.RBRACKET,
        TokenKind.LPAREN,
        TokenKind.RPAREN,
        TokenKind.ENV,
        TokenKind.DOT,
        TokenKind.IDENTIFIER,
        TokenKind.SYS,
        TokenKind.DOT,
        TokenKind.IDENTIFIER,
        TokenKind.EOF,
    ]


def test_kebab_case_identifier_is_one_token() -> None:
    tokens = lex("log-level_2 1")

    assert tokens[0].kind == TokenKind.IDENTIFIER
    assert tokens[0].text == "log-level_2"


def test_numbers() -> None:
    tokens = lex("a -7 b 3.14 c 42 d -0.5")

    assert [(token.kind, token.text) for token in tokens if token.kind in (TokenKind.INT, TokenKind.FLOAT)] == [
        (TokenKind.INT, "-7"),
        (TokenKind.FLOAT, "3.14"),
        (TokenKind.INT, "42"),
        (TokenKind.FLOAT, "-0.5"),
    ]


@pytest.mark.parametrize("source", ["a 1.2.3", "a 12ab", "a 1.", "a - 1"])
def test_malformed_numbers(source: str) -> None:
    with pytest.raises(LexError) as excinfo:
        lex(source)

    assert excinfo.value.code == "LEXER_MALFORMED_NUMBER"
    assert excinfo.value.kind == "lexer"


def test_string_escapes() -> None:
    tokens = lex(r'x "a\"b\n\t\\ \'q\' \$env.HOME \{\} \z"')

    assert tokens[1].value == "a\"b\n\t\\ 'q' $env.HOME {} z"
    assert tokens[1].flags & TokenFlags.HAS_ESCAPE
    assert not tokens[1].flags & TokenFlags.HAS_INTERPOLATION
    assert tokens[1].dollars == ()


def test_single_quoted_string() -> None:
    tokens = lex("""x 'say "hi"'""")

    assert tokens[1].kind == TokenKind.STRING
    assert tokens[1].value == 'say "hi"'


def test_unescaped_dollars_are_recorded() -> None:
    tokens = lex('x "home=$env.HOME"')

    assert tokens[1].flags & TokenFlags.HAS_INTERPOLATION
    assert tokens[1].dollars == (5,)


def test_raw_string_keeps_backslashes() -> None:
    tokens = lex(r'p r"^\d+\"x$"')

    assert tokens[1].kind == TokenKind.RAW_STRING
    assert tokens[1].value == r"^\d+\"x$"


def test_unterminated_string_reports_location() -> None:
    source = textwrap.dedent(
        """
        a 1
        b "oops
        """
    ).lstrip()

    with pytest.raises(LexError) as excinfo:
        lex(source)

    error = excinfo.value
    assert error.code == "LEXER_UNTERMINATED_STRING"
    assert (error.line, error.column) == (2, 3)
    assert error.line_text == 'b "oops'


def test_unterminated_raw_string() -> None:
    with pytest.raises(LexError) as excinfo:
        lex('p r"[a-z')

    assert excinfo.value.code == "LEXER_UNTERMINATED_RAW_STRING"


def test_strings_cannot_span_lines() -> None:
    with pytest.raises(LexError) as excinfo:
        lex('a "one\ntwo"')
    assert excinfo.value.code == "LEXER_UNTERMINATED_STRING"

    with pytest.raises(LexError) as excinfo:
        lex('p r"^a\nb"')
    assert excinfo.value.code == "LEXER_UNTERMINATED_RAW_STRING"


def test_unexpected_character() -> None:
    with pytest.raises(LexError) as excinfo:
        lex("a ;")

    assert excinfo.value.code == "LEXER_UNEXPECTED_CHARACTER"
    assert excinfo.value.column == 3


def test_unknown_namespace() -> None:
    with pytest.raises(LexError) as excinfo:
        lex("a $runtime.x")

    assert excinfo.value.code == "LEXER_UNKNOWN_NAMESPACE"
    assert "$runtime" in str(excinfo.value)
