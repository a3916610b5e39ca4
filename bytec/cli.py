"""
Byte command-line driver.

With no arguments starts a REPL that compiles each line on its own; with a
source path compiles that file.
"""

import argparse
import sys
from typing import List, Optional, TextIO

from .chunk import Chunk
from .compiler import compile, read_source
from .errors import Diagnostic, SourceDecodeError, format_diagnostic

BANNER = "Byte v.0.1"
PROMPT = ">> "

# Exit codes, sysexits.h style
EX_USAGE = 64
EX_DATAERR = 65
EX_IOERR = 74


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="bytec",
        description="Byte bytecode compiler",
    )
    p.add_argument("paths", nargs="*", metavar="path", help="Source file (omit for a REPL)")
    p.add_argument("-o", "--output", help="Write the compiled chunk to this file (requires a path)")
    p.add_argument("--debug", action="store_true", help="Print the disassembly")
    return p


def repl(stdin: TextIO, stdout: TextIO, debug: bool = False) -> int:
    """Read lines until EOF or 'exit', compiling each as its own unit."""
    print(BANNER, file=stdout)

    while True:
        stdout.write(PROMPT)
        stdout.flush()

        line = stdin.readline()
        if not line:
            print(file=stdout)
            break

        if line.startswith("exit"):
            break

        if line.startswith("help"):
            print("exit - Exit the program", file=stdout)
            continue

        chunk = Chunk()
        if compile(line, chunk, debug=debug) and not debug:
            print(chunk.disassemble("repl"), file=stdout)

    return 0


def run_file(path: str, output: Optional[str] = None, debug: bool = False) -> int:
    """Compile one file. Returns an exit code."""
    try:
        source = read_source(path)
    except OSError:
        print(f'Could not open file "{path}".', file=sys.stderr)
        return EX_IOERR
    except SourceDecodeError as e:
        print(f'Could not read file "{path}": {e.message}.', file=sys.stderr)
        return EX_IOERR

    def sink(diagnostic: Diagnostic) -> None:
        print(format_diagnostic(diagnostic, path), file=sys.stderr)

    chunk = Chunk()
    if not compile(source, chunk, sink=sink, debug=debug):
        return EX_DATAERR

    if output:
        try:
            with open(output, "wb") as f:
                f.write(chunk.serialize())
        except OSError:
            print(f'Could not write file "{output}".', file=sys.stderr)
            return EX_IOERR

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns an exit code; does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if len(args.paths) > 1:
        print("Usage: bytec [path]", file=sys.stderr)
        return EX_USAGE

    if not args.paths:
        if args.output:
            print("--output requires a source path", file=sys.stderr)
            return EX_USAGE
        return repl(sys.stdin, sys.stdout, debug=args.debug)

    return run_file(args.paths[0], output=args.output, debug=args.debug)
