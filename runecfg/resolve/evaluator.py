"""Reference and conditional evaluation over a parsed document."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, NoReturn, TypeAlias, cast

from runecfg.ast import (
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
    InlineConditional,
    InterpolatedString,
    Literal,
    LiteralScalar,
    MetadataBinding,
    ObjectBlock,
    ObjectMember,
    Presence,
    RawString,
    StringPart,
    SysRef,
    ValueExpr,
)
from runecfg.diagnostics import (
    SourceLocation,
    TypeMismatchError,
    UnresolvedReferenceError,
    diagnostic_at,
    location_of,
)
from runecfg.diagnostics.codes import (
    RESOLVE_REFERENCE_CYCLE,
    RESOLVE_TYPE_MISMATCH,
    RESOLVE_UNKNOWN_ALIAS,
    RESOLVE_UNKNOWN_SYS_KEY,
    RESOLVE_UNRESOLVED_REFERENCE,
    DiagnosticSpec,
)
from runecfg.resolve.services import SYS_KEYS
from runecfg.resolve.session import LocationKey, Namespace, ResolvedModule
from runecfg.text import LineIndex, TextRange
from runecfg.values import (
    NULL,
    ArrayValue,
    BoolValue,
    NullValue,
    NumberValue,
    ObjectValue,
    StringValue,
    Value,
    canonical_key,
    to_text,
)

if TYPE_CHECKING:
    from runecfg.resolve.session import ResolutionSession

PendingKey: TypeAlias = tuple[Namespace, str]


class Evaluator:
    """Turns one document into a `ResolvedModule`.

    Globals and top-level items are registered up front and evaluated on first
    use, so forward references work and self-dependent values are reported as
    cycles. Only the chosen branch of a conditional is ever evaluated.
    """

    def __init__(
        self,
        document: Document,
        aliases: Mapping[str, ResolvedModule],
        session: ResolutionSession,
    ) -> None:
        self._document = document
        self._aliases = aliases
        self._session = session
        self._index = LineIndex(document.source_text)

        self._global_bindings: dict[str, GlobalBinding] = {}
        self._item_blocks: dict[str, ObjectBlock] = {}
        self._metadata_bindings: list[MetadataBinding] = []
        # Un-aliased gathers also act as includes; later ones shadow earlier ones.
        self._includes: tuple[ResolvedModule, ...] = tuple(
            aliases[canonical_key(directive.alias)]
            for directive in document.imports
            if not directive.explicit_alias
        )
        for statement in document.statements:
            match statement:
                case GlobalBinding(name=name):
                    self._global_bindings[canonical_key(name)] = statement
                case ObjectBlock(name=name):
                    self._item_blocks[canonical_key(name)] = statement
                case MetadataBinding():
                    self._metadata_bindings.append(statement)

        self._globals: dict[str, Value] = {}
        self._items: dict[str, Value] = {}
        self._pending: list[PendingKey] = []
        self._scopes: list[dict[str, Value]] = []
        self._locations: dict[LocationKey, SourceLocation] = {}

    def evaluate(self) -> ResolvedModule:
        for name, binding in self._global_bindings.items():
            self._record(Namespace.GLOBALS, (name,), binding.range)
            self._global(name, binding.range)

        metadata: dict[str, Value] = {}
        for binding in self._metadata_bindings:
            key = canonical_key(binding.key)
            metadata[key] = self._value(binding.value)
            self._record(Namespace.METADATA, (key,), binding.range)

        for name, block in self._item_blocks.items():
            self._item(name, block.range)

        own_globals = {name: self._globals[name] for name in self._global_bindings}
        own_items = {name: self._items[name] for name in self._item_blocks}
        return ResolvedModule(
            path=self._document.source_path,
            globals=MappingProxyType(self._with_includes(Namespace.GLOBALS, own_globals)),
            items=MappingProxyType(self._with_includes(Namespace.ITEMS, own_items)),
            metadata=MappingProxyType(metadata),
            locations=MappingProxyType(self._included_locations() | self._locations),
        )

    def _with_includes(self, namespace: Namespace, own: dict[str, Value]) -> dict[str, Value]:
        merged: dict[str, Value] = {}
        for module in self._includes:
            merged.update(module.globals if namespace is Namespace.GLOBALS else module.items)
        merged.update(own)
        return merged

    def _included_locations(self) -> dict[LocationKey, SourceLocation]:
        shadowed = {
            Namespace.GLOBALS: self._global_bindings.keys(),
            Namespace.ITEMS: self._item_blocks.keys(),
        }
        locations: dict[LocationKey, SourceLocation] = {}
        for module in self._includes:
            for key, location in module.locations.items():
                namespace, path = key
                if namespace in shadowed and path[0] not in shadowed[namespace]:
                    locations[key] = location
        return locations

    # -------------------------
    # Lazy top-level bindings
    # -------------------------

    def _global(self, name: str, range: TextRange) -> Value:
        if name in self._globals:
            return self._globals[name]
        binding = self._global_bindings[name]
        value = self._guarded((Namespace.GLOBALS, name), range, lambda: self._value(binding.value))
        self._globals[name] = value
        return value

    def _item(self, name: str, range: TextRange) -> Value:
        if name in self._items:
            return self._items[name]
        block = self._item_blocks[name]
        self._record(Namespace.ITEMS, (name,), block.range)
        value = self._guarded((Namespace.ITEMS, name), range, lambda: self._object(block, (name,)))
        self._items[name] = value
        return value

    def _guarded(self, key: PendingKey, range: TextRange, compute: Callable[[], Value]) -> Value:
        if key in self._pending:
            cycle = [name for _, name in self._pending[self._pending.index(key) :]]
            cycle.append(key[1])
            self._fail(
                UnresolvedReferenceError,
                RESOLVE_REFERENCE_CYCLE,
                range,
                f"Reference cycle detected: {' -> '.join(cycle)}",
            )

        # Top-level bindings never see the sibling scope of whoever referenced them.
        saved_scopes = self._scopes
        self._scopes = []
        self._pending.append(key)
        try:
            return compute()
        finally:
            self._pending.pop()
            self._scopes = saved_scopes

    # -------------------------
    # Objects
    # -------------------------

    def _object(self, block: ObjectBlock, path: tuple[str, ...]) -> ObjectValue:
        entries: dict[str, Value] = {}
        self._scopes.append(entries)
        try:
            self._members(block.children, entries, path)
        finally:
            self._scopes.pop()
        return ObjectValue(entries)

    def _members(
        self,
        children: tuple[ObjectMember, ...],
        entries: dict[str, Value],
        path: tuple[str, ...],
    ) -> None:
        for child in children:
            match child:
                case FieldBinding(name=name, value=expr):
                    key = canonical_key(name)
                    entries[key] = self._value(expr)
                    self._record(Namespace.ITEMS, (*path, key), child.range)
                case ObjectBlock(name=name):
                    key = canonical_key(name)
                    self._record(Namespace.ITEMS, (*path, key), child.range)
                    entries[key] = self._object(child, (*path, key))
                case BlockConditional(condition=condition, then_children=then_children, else_children=else_children):
                    chosen = then_children if self._condition(condition) else else_children
                    self._members(chosen, entries, path)

    # -------------------------
    # Value expressions
    # -------------------------

    def _value(self, expr: ValueExpr) -> Value:
        match expr:
            case Literal(value=scalar):
                return _literal_value(scalar)
            case RawString(pattern=pattern, range=range):
                return self._session.patterns.compile(
                    pattern,
                    source_text=self._document.source_text,
                    range=range,
                    source_path=self._document.source_path,
                )
            case InterpolatedString(parts=parts):
                return StringValue("".join(self._interpolate(part) for part in parts))
            case IdentifierRef(name=name, range=range):
                return self._lookup(name, range)
            case DottedPath():
                return cast(Value, self._resolve_path(expr, strict=True))
            case EnvRef(name=name):
                found = self._session.services.environment.lookup(name)
                return NULL if found is None else StringValue(found)
            case SysRef():
                return StringValue(self._sys(expr))
            case ArrayLiteral(items=items):
                return ArrayValue(tuple(self._value(item) for item in items))
            case InlineConditional(condition=condition, then_value=then_value, else_value=else_value):
                if self._condition(condition):
                    return self._value(then_value)
                if else_value is None:
                    return NULL
                return self._value(else_value)

    def _interpolate(self, part: StringPart) -> str:
        match part:
            case str():
                return part
            case EnvRef(name=name):
                return self._session.services.environment.lookup(name) or ""
            case SysRef():
                return self._sys(part)

    def _sys(self, ref: SysRef) -> str:
        key = canonical_key(ref.key)
        if key not in SYS_KEYS:
            self._fail(
                UnresolvedReferenceError,
                RESOLVE_UNKNOWN_SYS_KEY,
                ref.range,
                f"Unknown $sys key `{ref.key}`",
            )
        value = self._session.sys_value(key)
        if value is None:
            self._fail(
                UnresolvedReferenceError,
                RESOLVE_UNRESOLVED_REFERENCE,
                ref.range,
                f"Unable to resolve $sys.{ref.key} on this host",
            )
        return value

    # -------------------------
    # References
    # -------------------------

    def _is_local_name(self, key: str) -> bool:
        return (
            (bool(self._scopes) and key in self._scopes[-1])
            or key in self._global_bindings
            or key in self._item_blocks
            or self._included(key) is not None
        )

    def _lookup(self, name: str, range: TextRange) -> Value:
        key = canonical_key(name)
        if self._scopes and key in self._scopes[-1]:
            return self._scopes[-1][key]
        if key in self._global_bindings:
            return self._global(key, range)
        if key in self._item_blocks:
            return self._item(key, range)
        included = self._included(key)
        if included is not None:
            return included
        self._fail(
            UnresolvedReferenceError,
            RESOLVE_UNRESOLVED_REFERENCE,
            range,
            f"Unresolved reference `{name}`",
        )

    def _included(self, key: str) -> Value | None:
        for module in reversed(self._includes):
            if key in module.globals:
                return module.globals[key]
            if key in module.items:
                return module.items[key]
        return None

    def _resolve_path(self, path: DottedPath, *, strict: bool) -> Value | None:
        """Walk `alias.a.b` or `name.a.b`; missing names return None unless `strict`."""
        head = canonical_key(path.head)
        walked = [path.head]

        if head in self._aliases:
            first = path.tail[0]
            current = self._aliases[head].member(first)
            walked.append(first)
            rest = path.tail[1:]
            if current is None:
                if not strict:
                    return None
                self._fail(
                    UnresolvedReferenceError,
                    RESOLVE_UNRESOLVED_REFERENCE,
                    path.range,
                    f"Unresolved reference `{path.dotted}`: `{first}` is not defined in `{path.head}`",
                )
        elif self._is_local_name(head):
            current = self._lookup(path.head, path.range)
            rest = path.tail
        elif strict:
            self._fail(
                UnresolvedReferenceError,
                RESOLVE_UNKNOWN_ALIAS,
                path.range,
                f"Unknown import alias or name `{path.head}` in `{path.dotted}`",
            )
        else:
            return None

        for segment in rest:
            if not isinstance(current, ObjectValue) or segment not in current:
                if not strict:
                    return None
                self._fail(
                    UnresolvedReferenceError,
                    RESOLVE_UNRESOLVED_REFERENCE,
                    path.range,
                    f"Unresolved reference `{path.dotted}`: `{'.'.join(walked)}` has no key `{segment}`",
                )
            current = current.get(segment)
            walked.append(segment)
        return current

    # -------------------------
    # Conditions
    # -------------------------

    def _condition(self, condition: Condition) -> bool:
        match condition:
            case Presence(operand=operand):
                value = self._probe(operand)
                return value is not None and not isinstance(value, NullValue)
            case Equality(left=left, right=right, range=range):
                left_value = self._operand(left)
                right_value = self._operand(right)
                if isinstance(left, (EnvRef, SysRef)) or isinstance(right, (EnvRef, SysRef)):
                    return _text_equal(left_value, right_value)
                return self._values_equal(left_value, right_value, range)

    def _operand(self, operand: ConditionOperand) -> Value:
        return self._value(operand)

    def _probe(self, operand: ConditionOperand) -> Value | None:
        match operand:
            case IdentifierRef(name=name, range=range):
                if not self._is_local_name(canonical_key(name)):
                    return None
                return self._lookup(name, range)
            case DottedPath():
                return self._resolve_path(operand, strict=False)
            case _:
                return self._operand(operand)

    def _values_equal(self, left: Value, right: Value, range: TextRange) -> bool:
        match (left, right):
            case (NumberValue(value=a), NumberValue(value=b)):
                return a == b
            case (StringValue(value=a), StringValue(value=b)):
                return a == b
            case (BoolValue(value=a), BoolValue(value=b)):
                return a == b
            case (NullValue(), NullValue()):
                return True
            case (NullValue(), _) | (_, NullValue()):
                return False
            case _:
                self._fail(
                    TypeMismatchError,
                    RESOLVE_TYPE_MISMATCH,
                    range,
                    f"Cannot compare {left.kind} with {right.kind}",
                )

    # -------------------------
    # Helpers
    # -------------------------

    def _record(self, namespace: Namespace, path: tuple[str, ...], range: TextRange) -> None:
        self._locations[(namespace, path)] = location_of(
            self._document.source_text,
            range,
            source_path=self._document.source_path,
            index=self._index,
        )

    def _fail(
        self,
        error: type[UnresolvedReferenceError] | type[TypeMismatchError],
        spec: DiagnosticSpec,
        range: TextRange,
        message: str,
    ) -> NoReturn:
        raise error(
            diagnostic_at(
                spec,
                self._document.source_text,
                range,
                source_path=self._document.source_path,
                message=message,
                index=self._index,
            )
        )


def _literal_value(scalar: LiteralScalar) -> Value:
    match scalar:
        case None:
            return NULL
        case bool():
            return BoolValue(scalar)
        case int() | float():
            return NumberValue(scalar)
        case str():
            return StringValue(scalar)


def _text_equal(left: Value, right: Value) -> bool:
    # An unset variable only equals an explicit null.
    if isinstance(left, NullValue) or isinstance(right, NullValue):
        return isinstance(left, NullValue) and isinstance(right, NullValue)
    return to_text(left) == to_text(right)
