"""
Byte Context

The main interface for compiling Byte source into scripts for the VM.
"""

from typing import List, Optional
from dataclasses import dataclass

from ..chunk import Chunk, ChunkArrays
from ..compiler import Compiler, read_source
from ..errors import CompileError, Diagnostic


@dataclass
class Script:
    """
    A compiled Byte script.

    Contains the chunk and metadata ready for loading into the VM.
    """

    source: str
    chunk: Chunk
    filename: Optional[str] = None

    def disassemble(self) -> str:
        """Get disassembly of the chunk."""
        return self.chunk.disassemble(self.filename or "code")

    def arrays(self) -> ChunkArrays:
        """Get the numpy image of the chunk."""
        return self.chunk.to_arrays()

    def save(self, path: str) -> None:
        """Save compiled bytecode to file."""
        data = self.chunk.serialize()
        with open(path, 'wb') as f:
            f.write(data)

    @classmethod
    def load(cls, path: str) -> 'Script':
        """Load compiled bytecode from file."""
        with open(path, 'rb') as f:
            data = f.read()
        chunk = Chunk.deserialize(data)
        return cls(source="", chunk=chunk, filename=path)


class Context:
    """
    Byte compilation context.

    Every compile builds a fresh compiler and chunk, so one context can be
    used for any number of independent source units.

    Example:
        ctx = Context()
        script = ctx.compile('1 + 2 * 3')
        print(script.disassemble())
    """

    def __init__(self, debug: bool = False):
        """
        Create a new Byte context.

        Args:
            debug: Print disassembly and compile summaries
        """
        self.debug = debug

        # Diagnostics from the most recent compile
        self.diagnostics: List[Diagnostic] = []

    def compile(self, source: str, filename: Optional[str] = None) -> Script:
        """
        Compile Byte source code.

        Args:
            source: Byte source code string
            filename: Optional filename for error messages

        Returns:
            Compiled Script object

        Raises:
            CompileError: If any diagnostic was reported
        """
        chunk = Chunk()
        compiler = Compiler(source, chunk, debug=self.debug)
        ok = compiler.compile()
        self.diagnostics = compiler.diagnostics

        if not ok:
            raise CompileError(compiler.diagnostics, filename)

        if self.debug:
            print(f"Compiled {filename or '<source>'}: {len(chunk.code)} bytes, "
                  f"{len(chunk.constants)} constants")

        return Script(source=source, chunk=chunk, filename=filename)

    def compile_file(self, path: str) -> Script:
        """
        Compile Byte source file.

        Args:
            path: Path to the source file

        Returns:
            Compiled Script object

        Raises:
            SourceDecodeError: If the file is not valid UTF-8
        """
        source = read_source(path)
        return self.compile(source, filename=path)

    def load(self, path: str) -> Script:
        """Load a previously saved script."""
        script = Script.load(path)
        if self.debug:
            print(f"Loaded {path}: {len(script.chunk.code)} bytes, "
                  f"{len(script.chunk.constants)} constants")
        return script


def create_context(**kwargs) -> Context:
    """Create a new Byte context."""
    return Context(**kwargs)
