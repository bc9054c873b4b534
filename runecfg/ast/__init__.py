"""Syntax tree for RUNE documents."""

from runecfg.ast.model import (
    ArrayLiteral,
    BlockConditional,
    Condition,
    ConditionOperand,
    Document,
    DottedPath,
    EnvRef,
    Equality,
    FieldBinding,
    GlobalBinding,
    IdentifierRef,
    ImportDirective,
    InlineConditional,
    InterpolatedString,
    Literal,
    LiteralScalar,
    MetadataBinding,
    ObjectBlock,
    ObjectMember,
    Presence,
    RawString,
    Statement,
    StringPart,
    SysRef,
    ValueExpr,
)

__all__ = [
    "ArrayLiteral",
    "BlockConditional",
    "Condition",
    "ConditionOperand",
    "Document",
    "DottedPath",
    "EnvRef",
    "Equality",
    "FieldBinding",
    "GlobalBinding",
    "IdentifierRef",
    "ImportDirective",
    "InlineConditional",
    "InterpolatedString",
    "Literal",
    "LiteralScalar",
    "MetadataBinding",
    "ObjectBlock",
    "ObjectMember",
    "Presence",
    "RawString",
    "Statement",
    "StringPart",
    "SysRef",
    "ValueExpr",
]
