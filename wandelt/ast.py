"""Syntax tree nodes for expressions, declarations and statements."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, auto
from typing import ClassVar, Optional, Union

from wandelt.tokens import Span
from wandelt.types import Type


class ResolveStatus(IntEnum):
    INVALID = 0
    UNRESOLVED = auto()
    RESOLVING = auto()
    RESOLVED = auto()


class ExpressionType(IntEnum):
    INVALID = 0
    CONSTANT = auto()
    IDENTIFIER = auto()
    CALL = auto()


class ConstantKind(IntEnum):
    INVALID = 0
    INTEGER = auto()
    FLOAT = auto()
    DOUBLE = auto()
    BOOLEAN = auto()


class DeclarationType(IntEnum):
    INVALID = 0
    PACKAGE = auto()
    VARIABLE = auto()
    FUNCTION = auto()


class StatementType(IntEnum):
    INVALID = 0
    DECLARATION = auto()
    EXPRESSION = auto()
    RETURN = auto()
    BLOCK = auto()


def _lookup(names: dict, enum_cls: type, value: object, what: str) -> str:
    try:
        return names[enum_cls(value)]
    except (KeyError, ValueError):
        raise ValueError(f"invalid {what}: {value!r}") from None


_RESOLVE_STATUS_NAMES = {
    ResolveStatus.UNRESOLVED: "Unresolved",
    ResolveStatus.RESOLVING: "Resolving",
    ResolveStatus.RESOLVED: "Resolved",
}

_EXPRESSION_TYPE_NAMES = {
    ExpressionType.CONSTANT: "ConstantExpression",
    ExpressionType.IDENTIFIER: "IdentifierExpression",
    ExpressionType.CALL: "CallExpression",
}

_CONSTANT_KIND_NAMES = {
    ConstantKind.INTEGER: "IntegerConstant",
    ConstantKind.FLOAT: "FloatConstant",
    ConstantKind.DOUBLE: "DoubleConstant",
    ConstantKind.BOOLEAN: "BooleanConstant",
}

_DECLARATION_TYPE_NAMES = {
    DeclarationType.PACKAGE: "PackageDeclaration",
    DeclarationType.VARIABLE: "VariableDeclaration",
    DeclarationType.FUNCTION: "FunctionDeclaration",
}

_STATEMENT_TYPE_NAMES = {
    StatementType.DECLARATION: "DeclarationStatement",
    StatementType.EXPRESSION: "ExpressionStatement",
    StatementType.RETURN: "ReturnStatement",
    StatementType.BLOCK: "BlockStatement",
}


def resolve_status_name(status: ResolveStatus | int) -> str:
    """Return the display name of a resolve status; ValueError if invalid."""
    return _lookup(_RESOLVE_STATUS_NAMES, ResolveStatus, status, "resolve status")


def expression_type_name(expression_type: ExpressionType | int) -> str:
    """Return the display name of an expression type; ValueError if invalid."""
    return _lookup(_EXPRESSION_TYPE_NAMES, ExpressionType, expression_type, "expression type")


def constant_kind_name(kind: ConstantKind | int) -> str:
    """Return the display name of a constant kind; ValueError if invalid."""
    return _lookup(_CONSTANT_KIND_NAMES, ConstantKind, kind, "constant kind")


def declaration_type_name(declaration_type: DeclarationType | int) -> str:
    """Return the display name of a declaration type; ValueError if invalid."""
    return _lookup(_DECLARATION_TYPE_NAMES, DeclarationType, declaration_type, "declaration type")


def statement_type_name(statement_type: StatementType | int) -> str:
    """Return the display name of a statement type; ValueError if invalid."""
    return _lookup(_STATEMENT_TYPE_NAMES, StatementType, statement_type, "statement type")


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass(kw_only=True, eq=False)
class Expression:
    """Base of all expressions, carrying span and resolution state."""

    expression_type: ClassVar[ExpressionType] = ExpressionType.INVALID

    span: Span
    resolve_status: ResolveStatus = ResolveStatus.UNRESOLVED
    resolved_type: Optional[Type] = None


@dataclass(kw_only=True, eq=False)
class ConstantExpression(Expression):
    """A literal number or boolean."""

    expression_type: ClassVar[ExpressionType] = ExpressionType.CONSTANT

    kind: ConstantKind
    value: Union[int, float, bool]


@dataclass(kw_only=True, eq=False)
class IdentifierExpression(Expression):
    """A reference to a named declaration."""

    expression_type: ClassVar[ExpressionType] = ExpressionType.IDENTIFIER

    name: str
    declaration_ref: Optional[Declaration] = None


@dataclass(kw_only=True, eq=False)
class CallExpression(Expression):
    """A call of a named function."""

    expression_type: ClassVar[ExpressionType] = ExpressionType.CALL

    function_name: str
    declaration_ref: Optional[Declaration] = None
    arguments: list[Expression] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


@dataclass(kw_only=True, eq=False)
class Declaration:
    """Base of all declarations."""

    declaration_type: ClassVar[DeclarationType] = DeclarationType.INVALID

    span: Span


@dataclass(kw_only=True, eq=False)
class PackageDeclaration(Declaration):
    """A package header, optionally marked as the entry point."""

    declaration_type: ClassVar[DeclarationType] = DeclarationType.PACKAGE

    name: str
    is_entrypoint: bool = False


@dataclass(kw_only=True, eq=False)
class VariableDeclaration(Declaration):
    """A typed variable with an initializer."""

    declaration_type: ClassVar[DeclarationType] = DeclarationType.VARIABLE

    name: str
    type: Type
    initializer: Optional[Expression] = None


@dataclass(kw_only=True, eq=False)
class FunctionDeclaration(Declaration):
    """A function with a return type, parameters and a body."""

    declaration_type: ClassVar[DeclarationType] = DeclarationType.FUNCTION

    name: str
    return_type: Type
    parameters: list[VariableDeclaration] = field(default_factory=list)
    body: Optional[BlockStatement] = None


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


@dataclass(kw_only=True, eq=False)
class Statement:
    """Base of all statements."""

    statement_type: ClassVar[StatementType] = StatementType.INVALID

    span: Span


@dataclass(kw_only=True, eq=False)
class DeclarationStatement(Statement):
    statement_type: ClassVar[StatementType] = StatementType.DECLARATION

    declaration: Declaration


@dataclass(kw_only=True, eq=False)
class ExpressionStatement(Statement):
    statement_type: ClassVar[StatementType] = StatementType.EXPRESSION

    expression: Expression


@dataclass(kw_only=True, eq=False)
class ReturnStatement(Statement):
    statement_type: ClassVar[StatementType] = StatementType.RETURN

    expression: Expression


@dataclass(kw_only=True, eq=False)
class BlockStatement(Statement):
    statement_type: ClassVar[StatementType] = StatementType.BLOCK

    statements: list[Statement] = field(default_factory=list)