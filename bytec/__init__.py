"""
Byte Compiler Package

Front end of the Byte bytecode compiler: scans source text and compiles
expressions straight to bytecode chunks for the Byte VM.
"""

from typing import Optional

from .tokens import Token, TokenType
from .scanner import Scanner, tokenize, MAX_INTERPOLATION_NESTING
from .rules import Precedence, PrefixRule, InfixRule, ParseRule, get_rule
from .chunk import Chunk, OpCode, MAX_CONSTANTS
from .compiler import Compiler, compile, print_diagnostic, read_source, MAX_EXPRESSION_DEPTH
from .errors import (
    ByteError, CompileError, ConstantPoolOverflow, Diagnostic, DiagnosticKind,
    SourceDecodeError, format_diagnostic,
)

__version__ = "0.1.0"
__all__ = [
    "Token",
    "TokenType",
    "Scanner",
    "tokenize",
    "Precedence",
    "PrefixRule",
    "InfixRule",
    "ParseRule",
    "get_rule",
    "Chunk",
    "OpCode",
    "Compiler",
    "compile",
    "read_source",
    "compile_source",
    "compile_file",
    "ByteError",
    "CompileError",
    "ConstantPoolOverflow",
    "SourceDecodeError",
    "Diagnostic",
    "DiagnosticKind",
    "format_diagnostic",
    "MAX_CONSTANTS",
    "MAX_INTERPOLATION_NESTING",
    "MAX_EXPRESSION_DEPTH",
]


def compile_source(source: str, filename: Optional[str] = None,
                   debug: bool = False) -> Chunk:
    """
    Compile Byte source code to a chunk.

    Args:
        source: Byte source code string
        filename: Optional filename for error messages
        debug: Print the disassembly after a successful compile

    Returns:
        Chunk ready for VM execution

    Raises:
        CompileError: If compilation fails, carrying every diagnostic
    """
    chunk = Chunk()
    compiler = Compiler(source, chunk, debug=debug)
    if not compiler.compile():
        raise CompileError(compiler.diagnostics, filename)
    return chunk


def compile_file(filepath: str, debug: bool = False) -> Chunk:
    """
    Compile a Byte source file to a chunk.

    Args:
        filepath: Path to the source file

    Returns:
        Chunk ready for VM execution

    Raises:
        SourceDecodeError: If the file is not valid UTF-8
        CompileError: If compilation fails
    """
    source = read_source(filepath)
    return compile_source(source, filename=filepath, debug=debug)
