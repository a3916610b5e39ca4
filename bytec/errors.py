"""
Byte Compiler Errors

Structured diagnostics reported while compiling, their single formatter,
and the exception classes raised at API boundaries.
"""

from enum import Enum
from dataclasses import dataclass
from typing import List, Optional, Tuple, Any


class Category(Enum):
    """Broad class of a diagnostic."""

    LEXICAL = "lexical"
    SYNTAX = "syntax"
    RESOURCE = "resource"


class DiagnosticKind(Enum):
    """Every diagnostic the compiler can report, with its message template."""

    UNTERMINATED_STRING = (Category.LEXICAL, "unterminated string (opening quote not matched)")
    UNTERMINATED_EXPONENT = (Category.LEXICAL, "unterminated scientific notation")
    UNEXPECTED_CHARACTER = (Category.LEXICAL, "unexpected character {0}")
    INTERPOLATION_TOO_DEEP = (Category.RESOURCE, "maximum interpolation nesting of {0} exceeded by {1}")
    EXPECTED_EXPRESSION = (Category.SYNTAX, "expected an expression")
    EXPECTED_RIGHT_PAREN = (Category.SYNTAX, "expected ')' after expression")
    TOO_MANY_CONSTANTS = (Category.RESOURCE, "too many constants in one chunk (limit is {0})")
    EXPRESSION_TOO_DEEP = (Category.RESOURCE, "expression nesting too deep (limit is {0})")

    def __init__(self, category: Category, template: str):
        self.category = category
        self.template = template


class Location(Enum):
    """Where a diagnostic points, relative to the token it was raised at."""

    LEXEME = "lexeme"
    END = "end"
    NEWLINE = "newline"
    NONE = "none"


@dataclass(frozen=True)
class Diagnostic:
    """A single compile diagnostic, rendered only by format_diagnostic()."""

    kind: DiagnosticKind
    line: int
    args: Tuple[Any, ...] = ()
    location: Location = Location.NONE
    lexeme: str = ""

    @property
    def message(self) -> str:
        return self.kind.template.format(*self.args)

    def at(self, location: Location, lexeme: str = "") -> 'Diagnostic':
        """Return a copy of this diagnostic anchored at a location."""
        return Diagnostic(self.kind, self.line, self.args, location, lexeme)


def format_diagnostic(diagnostic: Diagnostic, filename: Optional[str] = None) -> str:
    """Render a diagnostic as a one-line human-readable report."""
    if diagnostic.kind.category == Category.RESOURCE:
        label = "LimitError"
    else:
        label = "SyntaxError"

    if diagnostic.location == Location.END:
        where = " at end"
    elif diagnostic.location == Location.NEWLINE:
        where = " at newline"
    elif diagnostic.location == Location.LEXEME:
        where = f" at '{diagnostic.lexeme}'"
    else:
        where = ""

    prefix = f"{filename}:{diagnostic.line}" if filename else f"[line {diagnostic.line}]"
    return f"{prefix} {label}{where}: {diagnostic.message}"


class ByteError(Exception):
    """Base exception for all Byte errors."""

    def __init__(self, message: str, line: Optional[int] = None,
                 filename: Optional[str] = None):
        self.message = message
        self.line = line
        self.filename = filename
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with location information."""
        parts = []

        if self.filename:
            parts.append(self.filename)

        if self.line is not None:
            if parts:
                parts.append(str(self.line))
            else:
                parts.append(f"line {self.line}")

        if parts:
            return f"{':'.join(parts)}: {self.message}"
        return self.message


class CompileError(ByteError):
    """Raised when a source unit fails to compile; carries every diagnostic."""

    def __init__(self, diagnostics: List[Diagnostic], filename: Optional[str] = None):
        self.diagnostics = list(diagnostics)
        lines = [format_diagnostic(d, filename) for d in self.diagnostics]
        first_line = self.diagnostics[0].line if self.diagnostics else None
        message = "\n".join(lines) if lines else "compilation failed"
        super().__init__(message, None, None)
        self.line = first_line
        self.filename = filename


class ConstantPoolOverflow(ByteError):
    """Raised by a chunk whose constant pool is already full."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"constant pool is full ({limit} entries)")


class SourceDecodeError(ByteError):
    """Raised when a source file is not valid UTF-8."""

    def __init__(self, filename: str, reason: str):
        self.reason = reason
        super().__init__(f"source is not valid UTF-8 ({reason})", filename=filename)
