"""Shared test fixtures and helpers."""

import sys
from pathlib import Path
from typing import List

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bytec.chunk import Chunk
from bytec.compiler import Compiler
from bytec.scanner import tokenize
from bytec.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that scans source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> List[Token]:
        return [t for t in tokenize(source) if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def compile_quiet():
    """Return a helper that compiles source, collecting diagnostics silently."""

    def _compile(source: str):
        chunk = Chunk()
        compiler = Compiler(source, chunk)
        ok = compiler.compile()
        return ok, chunk, compiler.diagnostics

    return _compile

