"""Parser infrastructure (token cursor + recursive-descent grammar)."""

from runecfg.parser.grammar import (
    parse_array,
    parse_block_conditional,
    parse_condition,
    parse_document,
    parse_members,
    parse_object_block,
    parse_string,
    parse_value,
)
from runecfg.parser.parser import Parser, ParserProgress, describe_token
from runecfg.parser.rune import parse_text

__all__ = [
    "Parser",
    "ParserProgress",
    "describe_token",
    "parse_array",
    "parse_block_conditional",
    "parse_condition",
    "parse_document",
    "parse_members",
    "parse_object_block",
    "parse_string",
    "parse_text",
    "parse_value",
]
