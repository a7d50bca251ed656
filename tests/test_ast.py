import pytest

from wandelt.ast import (
    BlockStatement,
    CallExpression,
    ConstantExpression,
    ConstantKind,
    DeclarationStatement,
    DeclarationType,
    ExpressionStatement,
    ExpressionType,
    FunctionDeclaration,
    IdentifierExpression,
    PackageDeclaration,
    ResolveStatus,
    ReturnStatement,
    StatementType,
    VariableDeclaration,
    constant_kind_name,
    declaration_type_name,
    expression_type_name,
    resolve_status_name,
    statement_type_name,
)
from wandelt.tokens import Span
from wandelt.types import BuiltinTypeKind, get_builtin_type


@pytest.mark.parametrize(
    "status, expected",
    [
        (ResolveStatus.UNRESOLVED, "Unresolved"),
        (ResolveStatus.RESOLVING, "Resolving"),
        (ResolveStatus.RESOLVED, "Resolved"),
    ],
)
def test_resolve_status_names(status, expected):
    assert resolve_status_name(status) == expected


@pytest.mark.parametrize(
    "expression_type, expected",
    [
        (ExpressionType.CONSTANT, "ConstantExpression"),
        (ExpressionType.IDENTIFIER, "IdentifierExpression"),
        (ExpressionType.CALL, "CallExpression"),
    ],
)
def test_expression_type_names(expression_type, expected):
    assert expression_type_name(expression_type) == expected


@pytest.mark.parametrize(
    "kind, expected",
    [
        (ConstantKind.INTEGER, "IntegerConstant"),
        (ConstantKind.FLOAT, "FloatConstant"),
        (ConstantKind.DOUBLE, "DoubleConstant"),
        (ConstantKind.BOOLEAN, "BooleanConstant"),
    ],
)
def test_constant_kind_names(kind, expected):
    assert constant_kind_name(kind) == expected


@pytest.mark.parametrize(
    "declaration_type, expected",
    [
        (DeclarationType.PACKAGE, "PackageDeclaration"),
        (DeclarationType.VARIABLE, "VariableDeclaration"),
        (DeclarationType.FUNCTION, "FunctionDeclaration"),
    ],
)
def test_declaration_type_names(declaration_type, expected):
    assert declaration_type_name(declaration_type) == expected


@pytest.mark.parametrize(
    "statement_type, expected",
    [
        (StatementType.DECLARATION, "DeclarationStatement"),
        (StatementType.EXPRESSION, "ExpressionStatement"),
        (StatementType.RETURN, "ReturnStatement"),
        (StatementType.BLOCK, "BlockStatement"),
    ],
)
def test_statement_type_names(statement_type, expected):
    assert statement_type_name(statement_type) == expected


@pytest.mark.parametrize(
    "func",
    [
        resolve_status_name,
        expression_type_name,
        constant_kind_name,
        declaration_type_name,
        statement_type_name,
    ],
)
def test_invalid_value_raises(func):
    with pytest.raises(ValueError):
        func(0)
    with pytest.raises(ValueError):
        func(99)


def test_node_classes_report_their_kind_names():
    span = Span(0, 1)
    constant = ConstantExpression(span=span, kind=ConstantKind.INTEGER, value=7)
    ident = IdentifierExpression(span=span, name="x")
    call = CallExpression(span=span, function_name="f")
    assert expression_type_name(constant.expression_type) == "ConstantExpression"
    assert expression_type_name(ident.expression_type) == "IdentifierExpression"
    assert expression_type_name(call.expression_type) == "CallExpression"


def test_expression_defaults():
    call = CallExpression(span=Span(2, 5), function_name="main")
    assert call.arguments == []
    assert call.declaration_ref is None
    assert call.resolved_type is None
    assert call.resolve_status is ResolveStatus.UNRESOLVED


def test_call_arguments_are_not_shared():
    first = CallExpression(span=Span(0, 1), function_name="a")
    second = CallExpression(span=Span(0, 1), function_name="b")
    first.arguments.append(IdentifierExpression(span=Span(0, 1), name="x"))
    assert len(second.arguments) == 0


def test_build_function_tree():
    int_type = get_builtin_type(BuiltinTypeKind.INT)
    value = ConstantExpression(span=Span(30, 31), kind=ConstantKind.INTEGER, value=0)
    ret = ReturnStatement(span=Span(23, 32), expression=value)
    body = BlockStatement(span=Span(21, 34), statements=[ret])
    function = FunctionDeclaration(span=Span(0, 34), name="main", return_type=int_type, body=body)
    stmt = DeclarationStatement(span=function.span, declaration=function)

    assert stmt.statement_type is StatementType.DECLARATION
    assert stmt.declaration.declaration_type is DeclarationType.FUNCTION
    assert stmt.declaration.body.statements[0].expression.value == 0
    assert stmt.declaration.return_type is int_type
    assert function.parameters == []


def test_declarations_carry_their_fields():
    package = PackageDeclaration(span=Span(0, 25), name="main", is_entrypoint=True)
    variable = VariableDeclaration(
        span=Span(0, 10),
        name="x",
        type=get_builtin_type(BuiltinTypeKind.BOOL),
        initializer=ConstantExpression(span=Span(8, 12), kind=ConstantKind.BOOLEAN, value=True),
    )
    assert package.declaration_type is DeclarationType.PACKAGE
    assert package.is_entrypoint is True
    assert variable.declaration_type is DeclarationType.VARIABLE
    assert variable.type.is_boolean()
    assert variable.initializer.value is True


def test_expression_statement_kind():
    expr = IdentifierExpression(span=Span(0, 3), name="foo")
    stmt = ExpressionStatement(span=Span(0, 4), expression=expr)
    assert stmt.statement_type is StatementType.EXPRESSION
    assert stmt.expression.name == "foo"