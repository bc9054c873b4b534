"""High-level parse entrypoint for RUNE source text."""

from runecfg.ast import Document
from runecfg.lexer import Lexer
from runecfg.parser.grammar import parse_document
from runecfg.parser.parser import Parser


def parse_text(text: str, *, source_path: str | None = None) -> Document:
    """Lex and parse `text` into a `Document`.

    Raises `LexError` or `ParseError` on the first problem; there is no recovery.
    """
    tokens = Lexer(text, source_path=source_path).lex()
    parser = Parser(tokens, source_text=text, source_path=source_path)
    statements = parse_document(parser)
    return Document(source_path=source_path, source_text=text, statements=statements)
