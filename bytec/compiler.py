"""
Byte Compiler

Single-pass Pratt compiler: pulls tokens from the scanner one at a time and
emits bytecode straight into a chunk, with no intermediate syntax tree.
"""

import sys
from typing import Callable, List, Optional

from .tokens import Token, TokenType
from .scanner import Scanner
from .rules import Precedence, PrefixRule, InfixRule, get_rule
from .chunk import Chunk, OpCode
from .errors import (
    ConstantPoolOverflow, Diagnostic, DiagnosticKind, Location, SourceDecodeError,
    format_diagnostic,
)

DiagnosticSink = Callable[[Diagnostic], None]

# Deepest chain of nested sub-expressions (groups, operands) in one compile
MAX_EXPRESSION_DEPTH = 128


def print_diagnostic(diagnostic: Diagnostic) -> None:
    """Default sink: write the rendered diagnostic to stderr."""
    sys.stdout.flush()
    print(format_diagnostic(diagnostic), file=sys.stderr)


def read_source(path: str) -> str:
    """
    Read a UTF-8 source file.

    Raises:
        OSError: If the file cannot be opened or read
        SourceDecodeError: If the contents are not valid UTF-8
    """
    with open(path, 'rb') as f:
        data = f.read()
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise SourceDecodeError(path, e.reason) from e


def _anchor(token: Token) -> Location:
    if token.type == TokenType.EOF:
        return Location.END
    if token.type == TokenType.NEWLINE:
        return Location.NEWLINE
    if token.type == TokenType.ERROR:
        return Location.NONE
    return Location.LEXEME


class Compiler:
    """
    State for compiling one source unit into one chunk.

    Each compile gets its own Compiler, so separate compiles into separate
    chunks never share anything.

    Two flags govern diagnostics. ``had_error`` is set by the first report
    and never cleared; the chunk is only usable when it stays false.
    ``panic_mode`` is entered by the first syntax or resource error and
    silences later ones, so a single parse failure is reported once.
    Lexical errors from the scanner bypass the gate and are all reported.
    """

    def __init__(self, source: str, chunk: Chunk,
                 sink: Optional[DiagnosticSink] = None, debug: bool = False):
        """
        Initialize the compiler.

        Args:
            source: Byte source code to compile
            chunk: Chunk receiving the bytecode
            sink: Called with each reported diagnostic; None only collects them
            debug: Print the disassembly after a successful compile
        """
        self.scanner = Scanner(source)
        self.chunk = chunk
        self.sink = sink
        self.debug = debug

        self.current: Optional[Token] = None
        self.previous: Optional[Token] = None
        self.panic_mode = False
        self.had_error = False
        self.diagnostics: List[Diagnostic] = []
        self.depth = 0

    def compile(self) -> bool:
        """
        Compile one expression followed by an implicit return.

        Input after the expression is not examined.

        Returns:
            True if no diagnostic was reported
        """
        self.advance()
        self.expression()
        self.end_compiler()
        return not self.had_error

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def report(self, diagnostic: Diagnostic, lexical: bool = False) -> None:
        """Record a diagnostic and forward it to the sink, unless panicking."""
        if not lexical:
            if self.panic_mode:
                return
            self.panic_mode = True

        self.had_error = True
        self.diagnostics.append(diagnostic)
        if self.sink is not None:
            self.sink(diagnostic)

    def error_at(self, token: Token, kind: DiagnosticKind, *args) -> None:
        location = _anchor(token)
        lexeme = token.lexeme if location == Location.LEXEME else ""
        self.report(Diagnostic(kind, token.line, args).at(location, lexeme))

    def error_at_current(self, kind: DiagnosticKind, *args) -> None:
        self.error_at(self.current, kind, *args)

    def error(self, kind: DiagnosticKind, *args) -> None:
        self.error_at(self.previous, kind, *args)

    # =========================================================================
    # Token stream
    # =========================================================================

    def advance(self) -> None:
        """Shift current into previous and scan the next non-error token."""
        self.previous = self.current

        while True:
            self.current = self.scanner.scan_token()
            if self.current.type != TokenType.ERROR:
                break
            self.report(self.current.diagnostic, lexical=True)

    def consume(self, type: TokenType, kind: DiagnosticKind) -> None:
        """Consume a token of the expected kind or report kind at it."""
        if self.current.type == type:
            self.advance()
            return

        self.error_at_current(kind)

    # =========================================================================
    # Emission
    # =========================================================================

    def line(self) -> int:
        token = self.previous if self.previous is not None else self.current
        return token.line

    def emit_byte(self, byte: int, line: Optional[int] = None) -> None:
        self.chunk.write(byte, self.line() if line is None else line)

    def emit_bytes(self, byte1: int, byte2: int) -> None:
        self.emit_byte(byte1)
        self.emit_byte(byte2)

    def make_constant(self, value: float) -> int:
        """Add value to the pool, or report overflow and fall back to slot 0."""
        try:
            return self.chunk.add_constant(value)
        except ConstantPoolOverflow as e:
            self.error(DiagnosticKind.TOO_MANY_CONSTANTS, e.limit)
            return 0

    def emit_constant(self, value: float) -> None:
        self.emit_bytes(OpCode.CONSTANT, self.make_constant(value))

    def end_compiler(self) -> None:
        self.emit_byte(OpCode.RETURN)

        if self.debug and not self.had_error:
            print(self.chunk.disassemble("code"))

    # =========================================================================
    # Expressions
    # =========================================================================

    def expression(self) -> None:
        self.parse_precedence(Precedence.ASSIGNMENT)

    def parse_precedence(self, precedence: Precedence) -> None:
        """Compile an expression whose operators bind at least as tightly as precedence."""
        if self.depth >= MAX_EXPRESSION_DEPTH:
            self.error_at_current(DiagnosticKind.EXPRESSION_TOO_DEEP, MAX_EXPRESSION_DEPTH)
            return

        prefix = get_rule(self.current.type).prefix
        if prefix == PrefixRule.NONE:
            self.error_at_current(DiagnosticKind.EXPECTED_EXPRESSION)
            return

        self.depth += 1
        try:
            self.advance()
            self.run_prefix(prefix)

            while precedence <= get_rule(self.current.type).precedence:
                self.advance()
                self.run_infix(get_rule(self.previous.type).infix)
        finally:
            self.depth -= 1

    def run_prefix(self, rule: PrefixRule) -> None:
        if rule == PrefixRule.GROUPING:
            self.grouping()
        elif rule == PrefixRule.UNARY:
            self.unary()
        elif rule == PrefixRule.NUMBER:
            self.number()
        else:
            raise ValueError(f"No prefix handler for {rule.name}")

    def run_infix(self, rule: InfixRule) -> None:
        if rule == InfixRule.BINARY:
            self.binary()
        else:
            raise ValueError(f"No infix handler for {rule.name}")

    def grouping(self) -> None:
        self.expression()
        self.consume(TokenType.RIGHT_PAREN, DiagnosticKind.EXPECTED_RIGHT_PAREN)

    def unary(self) -> None:
        operator = self.previous

        # Compile the operand
        self.parse_precedence(Precedence.UNARY)

        if operator.type == TokenType.MINUS:
            self.emit_byte(OpCode.NEGATE, operator.line)

    def binary(self) -> None:
        """Compile the right operand, then the operator; left-associative."""
        operator = self.previous
        rule = get_rule(operator.type)
        self.parse_precedence(rule.precedence.next())

        if operator.type == TokenType.PLUS:
            self.emit_byte(OpCode.ADD, operator.line)
        elif operator.type == TokenType.MINUS:
            self.emit_byte(OpCode.SUBTRACT, operator.line)
        elif operator.type == TokenType.STAR:
            self.emit_byte(OpCode.MULTIPLY, operator.line)
        elif operator.type == TokenType.SLASH:
            self.emit_byte(OpCode.DIVIDE, operator.line)

    def number(self) -> None:
        # float() ignores the locale
        self.emit_constant(float(self.previous.lexeme))


def compile(source: str, chunk: Chunk,
            sink: Optional[DiagnosticSink] = print_diagnostic,
            debug: bool = False) -> bool:
    """
    Compile source into chunk.

    Args:
        source: Byte source code
        chunk: Chunk receiving the bytecode
        sink: Called with each diagnostic (default: print to stderr)
        debug: Print the disassembly after a successful compile

    Returns:
        True if compilation succeeded and the chunk may be used
    """
    return Compiler(source, chunk, sink, debug).compile()
