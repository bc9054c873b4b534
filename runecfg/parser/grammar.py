"""RUNE grammar routines that build the syntax tree."""

from pathlib import PurePath

from runecfg.ast import (
    ArrayLiteral,
    BlockConditional,
    Condition,
    ConditionOperand,
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
from runecfg.diagnostics.codes import (
    PARSER_EXPECTED_TOKEN,
    PARSER_EXPECTED_VALUE,
    PARSER_MALFORMED_CONDITION,
    PARSER_UNCLOSED_BLOCK,
    PARSER_UNCLOSED_CONDITIONAL,
    PARSER_UNEXPECTED_TOKEN,
)
from runecfg.lexer import Token, TokenFlags, TokenKind
from runecfg.parser.parser import Parser, ParserProgress, describe_token
from runecfg.text import TextRange

MEMBER_TERMINATORS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.END,
        TokenKind.ELSE,
        TokenKind.ENDIF,
        TokenKind.EOF,
    }
)

LITERAL_KINDS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.STRING,
        TokenKind.INT,
        TokenKind.FLOAT,
        TokenKind.TRUE,
        TokenKind.FALSE,
        TokenKind.NULL,
    }
)

_INTERPOLATION_NAMESPACES: tuple[str, ...] = ("env", "sys")


def parse_document(parser: Parser) -> tuple[Statement, ...]:
    statements: list[Statement] = []
    progress = ParserProgress()

    while not parser.at(TokenKind.EOF):
        progress.assert_progressing(parser)
        match parser.current:
            case TokenKind.AT:
                statements.append(parse_metadata(parser))
            case TokenKind.GATHER:
                statements.append(parse_gather(parser))
            case TokenKind.IDENTIFIER if parser.nth(1) == TokenKind.COLON:
                statements.append(parse_object_block(parser))
            case TokenKind.IDENTIFIER:
                name, value, range = _parse_binding(parser)
                statements.append(GlobalBinding(name=name, value=value, range=range))
            case TokenKind.ENV | TokenKind.SYS:
                parser.error(
                    PARSER_UNEXPECTED_TOKEN,
                    message="Dollar variables ($env, $sys) cannot be assigned at top level",
                    hint="Dollar variables can only be used as values.",
                )
            case TokenKind.IF:
                parser.error(
                    PARSER_UNEXPECTED_TOKEN,
                    message="Block conditionals are only allowed inside object blocks",
                )
            case _:
                parser.error(PARSER_UNEXPECTED_TOKEN, message=_unexpected_message(parser, "at top level"))

    return tuple(statements)


def parse_metadata(parser: Parser) -> MetadataBinding:
    start = parser.bump().range
    if not parser.at(TokenKind.IDENTIFIER) or parser.has_preceding_line_break:
        parser.error(
            PARSER_EXPECTED_TOKEN,
            message=f"Expected identifier after `@`, found {describe_token(parser.current_token)}",
        )
    key = parser.bump().text
    value = parse_binding_value(parser)
    return MetadataBinding(key=key, value=value, range=parser.range_from(start))


def parse_gather(parser: Parser) -> ImportDirective:
    start = parser.bump().range
    if not parser.at(TokenKind.STRING) or parser.has_preceding_line_break:
        parser.error(
            PARSER_EXPECTED_TOKEN,
            message=f"Expected string after `gather`, found {describe_token(parser.current_token)}",
            hint='Use: gather "path/to/file.rune" as alias',
        )
    path = parser.bump().value

    explicit_alias = parser.at(TokenKind.AS) and not parser.has_preceding_line_break
    if explicit_alias:
        parser.bump()
        alias = parser.expect(TokenKind.IDENTIFIER, "identifier after `as`").text
    else:
        alias = PurePath(path).stem or "imported"

    return ImportDirective(
        path=path,
        alias=alias,
        range=parser.range_from(start),
        explicit_alias=explicit_alias,
    )


def parse_object_block(parser: Parser) -> ObjectBlock:
    name_token = parser.bump()
    parser.expect(TokenKind.COLON)
    children = parse_members(parser)

    match parser.current:
        case TokenKind.END:
            parser.bump()
        case TokenKind.EOF:
            parser.error(
                PARSER_UNCLOSED_BLOCK,
                message=f"Object block `{name_token.text}` is missing its closing `end`",
                range=name_token.range,
            )
        case _:
            parser.error(
                PARSER_UNEXPECTED_TOKEN,
                message=f"`{parser.current_token.text}` without a matching `if`",
            )

    return ObjectBlock(name=name_token.text, children=children, range=parser.range_from(name_token.range))


def parse_members(parser: Parser) -> tuple[ObjectMember, ...]:
    """Parse object members up to (not including) `end`, `else`, `endif` or EOF."""
    members: list[ObjectMember] = []
    progress = ParserProgress()

    while not parser.at_set(MEMBER_TERMINATORS):
        progress.assert_progressing(parser)
        match parser.current:
            case TokenKind.IDENTIFIER if parser.nth(1) == TokenKind.COLON:
                members.append(parse_object_block(parser))
            case TokenKind.IDENTIFIER:
                name, value, range = _parse_binding(parser)
                members.append(FieldBinding(name=name, value=value, range=range))
            case TokenKind.IF:
                members.append(parse_block_conditional(parser))
            case _:
                parser.error(
                    PARSER_UNEXPECTED_TOKEN,
                    message=_unexpected_message(parser, "inside object block"),
                    hint="Expected a key, `if`, or `end`.",
                )

    return tuple(members)


def parse_block_conditional(parser: Parser) -> BlockConditional:
    if_token = parser.bump()
    condition = parse_condition(parser)
    parser.expect(TokenKind.COLON, "`:` after if condition")

    then_children = parse_members(parser)
    else_children: tuple[ObjectMember, ...] = ()

    if parser.at(TokenKind.ELSE):
        parser.bump()
        parser.expect(TokenKind.COLON, "`:` after else")
        else_children = parse_members(parser)
        if parser.at(TokenKind.ELSE):
            parser.error(PARSER_UNEXPECTED_TOKEN, message="Unexpected `else` (no matching `if`?)")

    match parser.current:
        case TokenKind.ENDIF:
            parser.bump()
        case TokenKind.END:
            parser.error(
                PARSER_UNCLOSED_CONDITIONAL,
                message="Found `end` while parsing an if-block; did you mean `endif`?",
            )
        case _:
            parser.error(PARSER_UNCLOSED_CONDITIONAL, range=if_token.range)

    return BlockConditional(
        condition=condition,
        then_children=then_children,
        else_children=else_children,
        range=parser.range_from(if_token.range),
    )


def parse_binding_value(parser: Parser) -> ValueExpr:
    """Parse a value that must start on the same line as its key."""
    if parser.at(TokenKind.EOF) or parser.has_preceding_line_break:
        key = parser.previous_token
        parser.error(
            PARSER_EXPECTED_VALUE,
            message=f"Expected a value after `{key.text}`",
            range=key.range,
        )
    return parse_value(parser)


def parse_value(parser: Parser) -> ValueExpr:
    token = parser.current_token
    match token.kind:
        case TokenKind.STRING:
            parser.bump()
            return parse_string(token)
        case TokenKind.RAW_STRING:
            parser.bump()
            return RawString(pattern=token.value, range=token.range)
        case TokenKind.INT | TokenKind.FLOAT | TokenKind.TRUE | TokenKind.FALSE | TokenKind.NULL:
            parser.bump()
            return _literal(token)
        case TokenKind.IDENTIFIER:
            return parse_reference(parser)
        case TokenKind.ENV | TokenKind.SYS:
            return parse_namespace_ref(parser)
        case TokenKind.LBRACKET:
            return parse_array(parser)
        case TokenKind.IF:
            return parse_inline_conditional(parser)
        case _:
            parser.error(
                PARSER_EXPECTED_VALUE,
                message=f"Expected a value, found {describe_token(token)}",
            )


def parse_reference(parser: Parser) -> IdentifierRef | DottedPath:
    first = parser.expect(TokenKind.IDENTIFIER)
    segments = [first.text]
    while parser.at(TokenKind.DOT) and not parser.has_preceding_line_break:
        parser.bump()
        if not parser.at(TokenKind.IDENTIFIER) or parser.has_preceding_line_break:
            parser.error(
                PARSER_EXPECTED_TOKEN,
                message=f"Expected identifier after `.`, found {describe_token(parser.current_token)}",
            )
        segments.append(parser.bump().text)

    range = parser.range_from(first.range)
    if len(segments) == 1:
        return IdentifierRef(name=first.text, range=range)
    return DottedPath(segments=tuple(segments), range=range)


def parse_namespace_ref(parser: Parser) -> EnvRef | SysRef:
    marker = parser.bump()
    namespace = "$env" if marker.kind == TokenKind.ENV else "$sys"
    if not parser.at(TokenKind.DOT) or parser.has_preceding_line_break:
        parser.error(
            PARSER_EXPECTED_TOKEN,
            message=f"Expected `.` after `{namespace}`",
            hint=f"Use {namespace}.NAME",
        )
    parser.bump()
    if not parser.at(TokenKind.IDENTIFIER) or parser.has_preceding_line_break:
        parser.error(
            PARSER_EXPECTED_TOKEN,
            message=f"Expected name after `{namespace}.`, found {describe_token(parser.current_token)}",
        )
    name = parser.bump().text
    range = parser.range_from(marker.range)
    if marker.kind == TokenKind.ENV:
        return EnvRef(name=name, range=range)
    return SysRef(key=name, range=range)


def parse_array(parser: Parser) -> ArrayLiteral:
    start = parser.bump().range
    items: list[ValueExpr] = []
    progress = ParserProgress()

    while not parser.at(TokenKind.RBRACKET):
        progress.assert_progressing(parser)
        if parser.at(TokenKind.EOF):
            parser.error(
                PARSER_EXPECTED_TOKEN,
                message="Unclosed array, expected `]`",
                range=start,
            )
        items.append(parse_value(parser))
        if parser.eat(TokenKind.COMMA):
            continue
        if not (parser.at(TokenKind.RBRACKET) or parser.has_preceding_line_break):
            parser.error(
                PARSER_EXPECTED_TOKEN,
                message=f"Expected `,` or `]` in array, found {describe_token(parser.current_token)}",
            )

    parser.bump()
    return ArrayLiteral(items=tuple(items), range=parser.range_from(start))


def parse_inline_conditional(parser: Parser) -> InlineConditional:
    start = parser.bump().range
    condition = parse_condition(parser)
    then_value = parse_value(parser)

    else_value: ValueExpr | None = None
    # `else:` belongs to an enclosing block conditional.
    if parser.at(TokenKind.ELSE) and parser.nth(1) != TokenKind.COLON:
        parser.bump()
        else_value = parse_value(parser)

    return InlineConditional(
        condition=condition,
        then_value=then_value,
        else_value=else_value,
        range=parser.range_from(start),
    )


def parse_condition(parser: Parser) -> Condition:
    start = parser.current_range
    if parser.has_preceding_line_break:
        parser.error(PARSER_MALFORMED_CONDITION, message="Expected a condition after `if`")

    parenthesized = parser.eat(TokenKind.LPAREN)
    left = parse_condition_operand(parser)

    condition: Condition
    if parser.at(TokenKind.EQUAL):
        parser.bump()
        right = parse_condition_operand(parser)
        condition = Equality(left=left, right=right, range=parser.range_from(start))
    else:
        condition = Presence(operand=left, range=parser.range_from(start))

    if parenthesized:
        parser.expect(TokenKind.RPAREN, "`)` to close condition")
    return condition


def parse_condition_operand(parser: Parser) -> ConditionOperand:
    token = parser.current_token
    match token.kind:
        case TokenKind.IDENTIFIER:
            return parse_reference(parser)
        case TokenKind.ENV | TokenKind.SYS:
            return parse_namespace_ref(parser)
        case TokenKind.STRING:
            parser.bump()
            return parse_string(token)
        case kind if kind in LITERAL_KINDS:
            parser.bump()
            return _literal(token)
        case _:
            parser.error(
                PARSER_MALFORMED_CONDITION,
                message=f"Malformed condition: unexpected {describe_token(token)}",
            )


def parse_string(token: Token) -> Literal | InterpolatedString:
    """Split `$env.NAME` / `$sys.KEY` (or `${env.NAME}`) segments out of a string token."""
    if not token.flags & TokenFlags.HAS_INTERPOLATION:
        return Literal(value=token.value, range=token.range)

    text = token.value
    parts: list[StringPart] = []
    cursor = 0
    for offset in token.dollars:
        if offset < cursor:
            continue
        matched = _match_interpolation(text, offset, token.range)
        if matched is None:
            continue
        part, end = matched
        if offset > cursor:
            parts.append(text[cursor:offset])
        parts.append(part)
        cursor = end

    if not parts:
        return Literal(value=text, range=token.range)
    if cursor < len(text):
        parts.append(text[cursor:])
    return InterpolatedString(parts=tuple(parts), range=token.range)


def _match_interpolation(text: str, offset: int, range: TextRange) -> tuple[EnvRef | SysRef, int] | None:
    braced = text.startswith("{", offset + 1)
    cursor = offset + (2 if braced else 1)

    for namespace in _INTERPOLATION_NAMESPACES:
        prefix = f"{namespace}."
        if not text.startswith(prefix, cursor):
            continue
        name_start = cursor + len(prefix)
        name_end = name_start
        while name_end < len(text) and (text[name_end].isalnum() or text[name_end] == "_"):
            name_end += 1
        if name_end == name_start:
            return None
        end = name_end
        if braced:
            if not text.startswith("}", name_end):
                return None
            end += 1
        name = text[name_start:name_end]
        if namespace == "env":
            return EnvRef(name=name, range=range), end
        return SysRef(key=name, range=range), end

    return None


def _literal(token: Token) -> Literal:
    match token.kind:
        case TokenKind.INT:
            return Literal(value=int(token.text), range=token.range)
        case TokenKind.FLOAT:
            return Literal(value=float(token.text), range=token.range)
        case TokenKind.TRUE:
            return Literal(value=True, range=token.range)
        case TokenKind.FALSE:
            return Literal(value=False, range=token.range)
        case TokenKind.NULL:
            return Literal(value=None, range=token.range)
        case _:
            return Literal(value=token.value, range=token.range)


def _parse_binding(parser: Parser) -> tuple[str, ValueExpr, TextRange]:
    name_token = parser.bump()
    if parser.at(TokenKind.EQUAL) and not parser.has_preceding_line_break:
        parser.bump()
    value = parse_binding_value(parser)
    return name_token.text, value, parser.range_from(name_token.range)


def _unexpected_message(parser: Parser, where: str) -> str:
    token = parser.current_token
    if token.kind == TokenKind.END:
        return f"Unexpected `end` {where} (no open object block)"
    if token.kind in (TokenKind.ELSE, TokenKind.ENDIF):
        return f"Unexpected `{token.text}` {where} (no matching `if`)"
    return f"Unexpected {describe_token(token)} {where}"
