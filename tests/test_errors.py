"""
Byte Diagnostics Tests
"""

import pytest
from bytec.errors import (
    ByteError, Category, CompileError, Diagnostic, DiagnosticKind, Location,
    format_diagnostic,
)


class TestDiagnosticFormatting:
    """format_diagnostic() is the only place display text is built."""

    def test_at_lexeme(self):
        diagnostic = Diagnostic(DiagnosticKind.EXPECTED_EXPRESSION, 2, (), Location.LEXEME, ")")
        assert format_diagnostic(diagnostic) == "[line 2] SyntaxError at ')': expected an expression"

    def test_at_end(self):
        diagnostic = Diagnostic(DiagnosticKind.EXPECTED_RIGHT_PAREN, 1, (), Location.END)
        assert format_diagnostic(diagnostic) == "[line 1] SyntaxError at end: expected ')' after expression"

    def test_at_newline(self):
        diagnostic = Diagnostic(DiagnosticKind.EXPECTED_EXPRESSION, 4, (), Location.NEWLINE)
        assert format_diagnostic(diagnostic) == "[line 4] SyntaxError at newline: expected an expression"

    def test_lexical_has_no_location(self):
        diagnostic = Diagnostic(DiagnosticKind.UNEXPECTED_CHARACTER, 1, ("@",))
        assert format_diagnostic(diagnostic) == "[line 1] SyntaxError: unexpected character @"

    def test_resource_label(self):
        diagnostic = Diagnostic(DiagnosticKind.TOO_MANY_CONSTANTS, 1, (256,), Location.LEXEME, "256")
        assert format_diagnostic(diagnostic) == (
            "[line 1] LimitError at '256': too many constants in one chunk (limit is 256)")

    def test_with_filename(self):
        diagnostic = Diagnostic(DiagnosticKind.UNTERMINATED_STRING, 3)
        assert format_diagnostic(diagnostic, "main.byte") == (
            "main.byte:3 SyntaxError: unterminated string (opening quote not matched)")

    def test_at_returns_anchored_copy(self):
        diagnostic = Diagnostic(DiagnosticKind.EXPECTED_EXPRESSION, 1)
        anchored = diagnostic.at(Location.LEXEME, "+")
        assert anchored.location == Location.LEXEME
        assert anchored.lexeme == "+"
        assert diagnostic.location == Location.NONE

    @pytest.mark.parametrize("kind,category", [
        (DiagnosticKind.UNTERMINATED_STRING, Category.LEXICAL),
        (DiagnosticKind.UNTERMINATED_EXPONENT, Category.LEXICAL),
        (DiagnosticKind.UNEXPECTED_CHARACTER, Category.LEXICAL),
        (DiagnosticKind.INTERPOLATION_TOO_DEEP, Category.RESOURCE),
        (DiagnosticKind.EXPECTED_EXPRESSION, Category.SYNTAX),
        (DiagnosticKind.EXPECTED_RIGHT_PAREN, Category.SYNTAX),
        (DiagnosticKind.TOO_MANY_CONSTANTS, Category.RESOURCE),
        (DiagnosticKind.EXPRESSION_TOO_DEEP, Category.RESOURCE),
    ])
    def test_categories(self, kind, category):
        assert kind.category == category


class TestExceptions:
    """Exception formatting tests."""

    def test_byte_error_plain(self):
        assert str(ByteError("boom")) == "boom"

    def test_byte_error_with_line(self):
        assert str(ByteError("boom", line=3)) == "line 3: boom"

    def test_byte_error_with_file(self):
        assert str(ByteError("boom", line=3, filename="a.byte")) == "a.byte:3: boom"

    def test_compile_error_lists_diagnostics(self):
        diagnostics = [
            Diagnostic(DiagnosticKind.UNEXPECTED_CHARACTER, 1, ("@",)),
            Diagnostic(DiagnosticKind.EXPECTED_EXPRESSION, 2, (), Location.END),
        ]
        error = CompileError(diagnostics)
        assert str(error).splitlines() == [
            "[line 1] SyntaxError: unexpected character @",
            "[line 2] SyntaxError at end: expected an expression",
        ]
        assert error.line == 1
        assert error.diagnostics == diagnostics
