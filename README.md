# wandelt

The front end of a compiler for the Wandelt language, as a Python library with no
dependencies outside the standard library.

## Modules

- `wandelt.tokens`: `TokenType`, the half-open source range `Span` (with `Span.extend`),
  `Token`, and `token_type_name`, which gives the display text of a token type.
- `wandelt.types`: the builtin types (`Type`, `BuiltinTypeKind`, `TypeFlag`, `CastKind`).
  Each type has a size, an alignment and flags. There are rules for implicit and explicit
  conversion between the types. The module also provides `get_builtin_type`,
  `try_get_builtin_type` and `get_implicit_common_type`.
- `wandelt.source_file`: `SourceFile` holds source text with a name and a path. It is
  created directly or read with `SourceFile.load`. `resolve_location` turns an offset into
  a one-based `FileLocation`, in which tabs expand to the next multiple of four columns.
  `slice` returns part of the content, and `describe` gives a short summary. The module
  also has `advance_display_offset` and `file_exists`.
- `wandelt.ast`: the syntax tree nodes. These are the expressions (`ConstantExpression`,
  `IdentifierExpression`, `CallExpression`), the declarations (`PackageDeclaration`,
  `VariableDeclaration`, `FunctionDeclaration`) and the statements (`DeclarationStatement`,
  `ExpressionStatement`, `ReturnStatement`, `BlockStatement`). It also has the enums that
  classify them and the matching `*_name` functions.
- `wandelt.diagnostics`: `Diagnostics` counts notes, warnings and errors. It writes each
  report to a stream (standard output by default), showing the source line with a caret
  underline. Long lines are clipped to the terminal width, which `terminal_width` finds.
  Inside `with diagnostics.capture():` reports are recorded as `Entry` objects instead of
  being printed. At most 64 entries are kept, and each message is cut to 255 characters.
- `wandelt.parser`: `Parser` reads a `TokenStream` and builds a `TranslationUnit`. Errors
  go through `Diagnostics`. After an error the parser skips ahead past the next `;` or `}`.
  A statement that failed appears in the unit as a plain `Statement`.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

Rendering and capturing diagnostics:

```python
from wandelt.source_file import SourceFile
from wandelt.diagnostics import Diagnostics, Severity
from wandelt.tokens import Span

source = SourceFile("int x = 1;\n", name="main.wdt")
diagnostics = Diagnostics(use_color=False)

print(diagnostics.format_at_location(Span(4, 5), source, "unused variable",
                                     Severity.WARNING, 80, False))

with diagnostics.capture():
    diagnostics.report_error(Span(8, 9), source, "something went wrong")
    entry = diagnostics.captured(0)
    print(entry.line, entry.col, entry.message)
```

Parsing a list of tokens:

```python
from wandelt.diagnostics import Diagnostics
from wandelt.parser import Parser, TokenStream
from wandelt.source_file import SourceFile
from wandelt.tokens import Span, Token, TokenType

source = SourceFile("int x = 1;", name="main.wdt")
tokens = [
    Token(TokenType.INT_KEYWORD, Span(0, 3)),
    Token(TokenType.IDENTIFIER, Span(4, 5)),
    Token(TokenType.EQUALS, Span(6, 7)),
    Token(TokenType.INTEGER, Span(8, 9)),
    Token(TokenType.SEMICOLON, Span(9, 10)),
]
diagnostics = Diagnostics()
unit = Parser(TokenStream(source, tokens), diagnostics).parse()

declaration = unit.statements[0].declaration
print(declaration.name, declaration.initializer.value)  # x 1
```

Querying the type rules:

```python
from wandelt.types import BuiltinTypeKind, get_builtin_type, get_implicit_common_type

int_type = get_builtin_type(BuiltinTypeKind.INT)
long_type = get_builtin_type(BuiltinTypeKind.LONG)
assert int_type.is_implicitly_convertible_to(long_type)
assert get_implicit_common_type(int_type, long_type) is long_type
```

## What it does not do

- There is no lexer. The parser works on tokens that you supply through a `TokenStream`.
- There is no command-line program.
- There is no name resolution, type checking or code generation beyond what is described
  above.