"""Syntax tree for RUNE documents."""

from __future__ import annotations

from typing import TypeAlias

from dataclasses import dataclass

from runecfg.text import TextRange

LiteralScalar: TypeAlias = str | int | float | bool | None


# -------------------------
# Value expressions
# -------------------------


@dataclass(frozen=True, slots=True)
class Literal:
    """String, number, boolean or null literal. `null` and `None` both carry `None`."""

    value: LiteralScalar
    range: TextRange


@dataclass(frozen=True, slots=True)
class RawString:
    """Raw string `r"..."`, compiled to a pattern during evaluation."""

    pattern: str
    range: TextRange


@dataclass(frozen=True, slots=True)
class EnvRef:
    name: str
    range: TextRange


@dataclass(frozen=True, slots=True)
class SysRef:
    key: str
    range: TextRange


@dataclass(frozen=True, slots=True)
class InterpolatedString:
    """Quoted string containing `$env.NAME` or `$sys.KEY` segments."""

    parts: tuple[StringPart, ...]
    range: TextRange


@dataclass(frozen=True, slots=True)
class IdentifierRef:
    name: str
    range: TextRange


@dataclass(frozen=True, slots=True)
class DottedPath:
    """`alias.a.b` into a gathered module, or `name.a.b` into a local value."""

    segments: tuple[str, ...]
    range: TextRange

    @property
    def head(self) -> str:
        return self.segments[0]

    @property
    def tail(self) -> tuple[str, ...]:
        return self.segments[1:]

    @property
    def dotted(self) -> str:
        return ".".join(self.segments)


@dataclass(frozen=True, slots=True)
class ArrayLiteral:
    items: tuple[ValueExpr, ...]
    range: TextRange


@dataclass(frozen=True, slots=True)
class InlineConditional:
    """`if <cond> <then> else <else>`; a missing else branch yields null."""

    condition: Condition
    then_value: ValueExpr
    else_value: ValueExpr | None
    range: TextRange


# -------------------------
# Conditions
# -------------------------


@dataclass(frozen=True, slots=True)
class Equality:
    left: ConditionOperand
    right: ConditionOperand
    range: TextRange


@dataclass(frozen=True, slots=True)
class Presence:
    """Bare operand: true when it resolves to a non-null value."""

    operand: ConditionOperand
    range: TextRange


# -------------------------
# Object members
# -------------------------


@dataclass(frozen=True, slots=True)
class FieldBinding:
    name: str
    value: ValueExpr
    range: TextRange


@dataclass(frozen=True, slots=True)
class ObjectBlock:
    """`name:` ... `end`; children keep source order."""

    name: str
    children: tuple[ObjectMember, ...]
    range: TextRange


@dataclass(frozen=True, slots=True)
class BlockConditional:
    """`if <cond>:` ... [`else:` ...] `endif`."""

    condition: Condition
    then_children: tuple[ObjectMember, ...]
    else_children: tuple[ObjectMember, ...]
    range: TextRange


# -------------------------
# Top-level statements
# -------------------------


@dataclass(frozen=True, slots=True)
class GlobalBinding:
    name: str
    value: ValueExpr
    range: TextRange


@dataclass(frozen=True, slots=True)
class MetadataBinding:
    key: str
    value: ValueExpr
    range: TextRange


@dataclass(frozen=True, slots=True)
class ImportDirective:
    """`gather "path" [as alias]`.

    Without `as`, the alias is the file stem and the gathered bindings are also
    included into the gathering document.
    """

    path: str
    alias: str
    range: TextRange
    explicit_alias: bool = True


@dataclass(frozen=True, slots=True)
class Document:
    source_path: str | None
    source_text: str
    statements: tuple[Statement, ...]

    @property
    def imports(self) -> tuple[ImportDirective, ...]:
        return tuple(s for s in self.statements if isinstance(s, ImportDirective))

    @property
    def globals(self) -> tuple[GlobalBinding, ...]:
        return tuple(s for s in self.statements if isinstance(s, GlobalBinding))


StringPart: TypeAlias = str | EnvRef | SysRef
ValueExpr: TypeAlias = (
    Literal
    | RawString
    | InterpolatedString
    | IdentifierRef
    | DottedPath
    | EnvRef
    | SysRef
    | ArrayLiteral
    | InlineConditional
)
ConditionOperand: TypeAlias = Literal | InterpolatedString | IdentifierRef | DottedPath | EnvRef | SysRef
Condition: TypeAlias = Equality | Presence
ObjectMember: TypeAlias = FieldBinding | ObjectBlock | BlockConditional
Statement: TypeAlias = GlobalBinding | MetadataBinding | ObjectBlock | ImportDirective


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
