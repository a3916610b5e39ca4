"""
Byte Scanner

Produces tokens on demand from a read-only source string.
"""

from typing import List
from .tokens import Token, TokenType, KEYWORDS
from .errors import Diagnostic, DiagnosticKind

# Deepest run of ${...} expressions open at once inside one string literal
MAX_INTERPOLATION_NESTING = 8


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def is_alpha(c: str) -> bool:
    return ('a' <= c <= 'z') or ('A' <= c <= 'Z') or c == '_'


class Scanner:
    """
    Lexical scanner for Byte source code.

    Unlike a batch lexer, the scanner hands out one token per call to
    scan_token() so the compiler can pull tokens as it needs them. Errors
    never raise: they come back as ERROR tokens carrying a diagnostic, and
    scanning resumes after the offending text on the next call.
    """

    def __init__(self, source: str):
        """
        Initialize the scanner.

        Args:
            source: Byte source code to scan
        """
        self.source = source
        self.start = 0        # Start of current token
        self.current = 0      # Current position
        self.line = 1         # Current line number
        self.start_line = 1   # Line the current token started on
        # Quote characters of the string literals waiting on a closing '}'
        self.interpolating: List[str] = []

    def tokenize(self) -> List[Token]:
        """
        Scan the remaining source, up to and including the EOF token.

        Returns:
            List of tokens, ERROR tokens included
        """
        tokens = []
        while True:
            token = self.scan_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                return tokens

    def scan_token(self) -> Token:
        """Scan and return the next token."""
        self.skip_whitespace()

        self.start = self.current
        self.start_line = self.line

        if self.is_at_end():
            return self.make_token(TokenType.EOF)

        c = self.advance()

        if is_digit(c):
            return self.number()
        if is_alpha(c):
            return self.identifier()

        # Single-character tokens
        if c == '(':
            return self.make_token(TokenType.LEFT_PAREN)
        elif c == ')':
            return self.make_token(TokenType.RIGHT_PAREN)
        elif c == '[':
            return self.make_token(TokenType.LEFT_BRACKET)
        elif c == ']':
            return self.make_token(TokenType.RIGHT_BRACKET)
        elif c == '{':
            return self.make_token(TokenType.LEFT_BRACE)
        elif c == '}':
            if self.interpolating:
                # End of an embedded expression: resume the enclosing string
                return self.string(self.interpolating.pop())
            return self.make_token(TokenType.RIGHT_BRACE)
        elif c == ',':
            return self.make_token(TokenType.COMMA)
        elif c == ':':
            return self.make_token(TokenType.COLON)
        elif c == ';':
            return self.make_token(TokenType.SEMICOLON)
        elif c == '.':
            return self.make_token(TokenType.DOT_DOT if self.match('.') else TokenType.DOT)
        elif c == '\n':
            return self.make_token(TokenType.NEWLINE)

        # Operators with possible assignment
        elif c == '+':
            return self.make_token(TokenType.PLUS_EQUAL if self.match('=') else TokenType.PLUS)
        elif c == '-':
            return self.make_token(TokenType.MINUS_EQUAL if self.match('=') else TokenType.MINUS)
        elif c == '*':
            if self.match('*'):
                return self.make_token(
                    TokenType.STAR_STAR_EQUAL if self.match('=') else TokenType.STAR_STAR)
            return self.make_token(TokenType.STAR_EQUAL if self.match('=') else TokenType.STAR)
        elif c == '/':
            if self.match('/'):
                return self.make_token(
                    TokenType.SLASH_SLASH_EQUAL if self.match('=') else TokenType.SLASH_SLASH)
            return self.make_token(TokenType.SLASH_EQUAL if self.match('=') else TokenType.SLASH)
        elif c == '%':
            return self.make_token(TokenType.PERCENT_EQUAL if self.match('=') else TokenType.PERCENT)
        elif c == '~':
            return self.make_token(TokenType.TILDE_EQUAL if self.match('=') else TokenType.TILDE)
        elif c == '|':
            return self.make_token(TokenType.PIPE_EQUAL if self.match('=') else TokenType.PIPE)
        elif c == '&':
            return self.make_token(TokenType.AMP_EQUAL if self.match('=') else TokenType.AMP)
        elif c == '^':
            return self.make_token(TokenType.CARET_EQUAL if self.match('=') else TokenType.CARET)

        # Comparison operators
        elif c == '=':
            return self.make_token(TokenType.EQUAL_EQUAL if self.match('=') else TokenType.EQUAL)
        elif c == '!':
            return self.make_token(TokenType.BANG_EQUAL if self.match('=') else TokenType.BANG)
        elif c == '<':
            return self.make_token(TokenType.LESS_EQUAL if self.match('=') else TokenType.LESS_THAN)
        elif c == '>':
            return self.make_token(TokenType.GREATER_EQUAL if self.match('=') else TokenType.GREATER_THAN)

        # String literals
        elif c == '"' or c == "'":
            return self.string(c)

        return self.error_token(DiagnosticKind.UNEXPECTED_CHARACTER, c)

    # =========================================================================
    # Character helpers
    # =========================================================================

    def advance(self) -> str:
        """Consume and return the current character."""
        c = self.source[self.current]
        self.current += 1
        if c == '\n':
            self.line += 1
        return c

    def peek(self) -> str:
        """Return the current character without consuming it."""
        if self.is_at_end():
            return '\0'
        return self.source[self.current]

    def peek_next(self) -> str:
        """Return the character after the current one without consuming it."""
        if self.current + 1 >= len(self.source):
            return '\0'
        return self.source[self.current + 1]

    def match(self, expected: str) -> bool:
        """Consume the current character if it matches expected."""
        if self.is_at_end():
            return False
        if self.source[self.current] != expected:
            return False
        self.advance()
        return True

    def is_at_end(self) -> bool:
        """Check if we've reached the end of the source."""
        return self.current >= len(self.source)

    def make_token(self, type: TokenType) -> Token:
        return Token(type, self.start, self.current - self.start, self.start_line, self.source)

    def error_token(self, kind: DiagnosticKind, *args) -> Token:
        """Build an ERROR token whose payload is a diagnostic, not source text."""
        diagnostic = Diagnostic(kind, self.start_line, args)
        return Token(TokenType.ERROR, self.start, self.current - self.start,
                     self.start_line, self.source, diagnostic)

    def skip_whitespace(self) -> None:
        """Skip blanks and '#' line comments. Newlines are tokens."""
        while True:
            c = self.peek()
            if c in ' \r\t':
                self.advance()
            elif c == '#':
                while self.peek() != '\n' and not self.is_at_end():
                    self.advance()
            else:
                return

    # =========================================================================
    # Literals
    # =========================================================================

    def string(self, quote: str) -> Token:
        """
        Scan a string literal, or the rest of one after an embedded expression.

        Stops early with an INTERPOLATION token at an unescaped ``${``,
        remembering the quote so the matching ``}`` can resume scanning.
        """
        escaping = False

        while self.peek() != quote and not self.is_at_end():
            if self.peek() == '$' and self.peek_next() == '{' and not escaping:
                if len(self.interpolating) >= MAX_INTERPOLATION_NESTING:
                    self.current += 2
                    return self.error_token(
                        DiagnosticKind.INTERPOLATION_TOO_DEEP,
                        MAX_INTERPOLATION_NESTING,
                        len(self.interpolating) + 1 - MAX_INTERPOLATION_NESTING)
                self.interpolating.append(quote)
                self.current += 2
                return self.make_token(TokenType.INTERPOLATION)

            # \" and \\ pass through undecoded; a lone backslash escapes what follows
            if self.peek() == '\\' and self.peek_next() in (quote, '\\'):
                self.advance()
                self.advance()
                escaping = False
            else:
                escaping = self.advance() == '\\'

        if self.is_at_end():
            return self.error_token(DiagnosticKind.UNTERMINATED_STRING)

        # Consume closing quote
        self.advance()
        return self.make_token(TokenType.STRING)

    def number(self) -> Token:
        """Scan a number literal."""
        while is_digit(self.peek()):
            self.advance()

        # A '.' only belongs to the number when a digit follows it
        if self.peek() == '.' and is_digit(self.peek_next()):
            self.advance()
            while is_digit(self.peek()):
                self.advance()

        # Exponent part
        if self.match('e') or self.match('E'):
            if not self.match('+'):
                self.match('-')

            if not is_digit(self.peek()):
                return self.error_token(DiagnosticKind.UNTERMINATED_EXPONENT)

            while is_digit(self.peek()):
                self.advance()

        return self.make_token(TokenType.NUMBER)

    def identifier(self) -> Token:
        """Scan an identifier or keyword."""
        while is_alpha(self.peek()) or is_digit(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        return self.make_token(KEYWORDS.get(text, TokenType.IDENTIFIER))


def tokenize(source: str) -> List[Token]:
    """Scan a whole source string into a token list ending with EOF."""
    return Scanner(source).tokenize()
