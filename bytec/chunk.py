"""
Byte Bytecode Chunk

Defines the instruction set and the chunk container the compiler writes
into: an append-only code array with a parallel line table, plus a
constant pool addressed by one-byte operands.
"""

from enum import IntEnum
from dataclasses import dataclass, field
from typing import List, NamedTuple
import struct

import numpy as np

from .errors import ConstantPoolOverflow

# Constant operands are a single byte
MAX_CONSTANTS = 256


class OpCode(IntEnum):
    """Byte VM opcodes."""

    CONSTANT = 0x00      # operand: constant index (u8)
    NEGATE = 0x01
    ADD = 0x02
    SUBTRACT = 0x03
    MULTIPLY = 0x04
    DIVIDE = 0x05
    RETURN = 0x06


# Instruction size information
OPCODE_SIZES = {
    OpCode.CONSTANT: 2,
    OpCode.NEGATE: 1,
    OpCode.ADD: 1,
    OpCode.SUBTRACT: 1,
    OpCode.MULTIPLY: 1,
    OpCode.DIVIDE: 1,
    OpCode.RETURN: 1,
}


class ChunkArrays(NamedTuple):
    """Flat numpy image of a chunk, as the VM loads it."""

    code: np.ndarray        # uint8
    lines: np.ndarray       # uint32, one per code byte
    constants: np.ndarray   # float64


@dataclass
class Chunk:
    """Container for compiled Byte bytecode."""

    # Magic number for file format
    MAGIC = b'BYT\x00'
    VERSION = 1

    code: bytearray = field(default_factory=bytearray)
    lines: List[int] = field(default_factory=list)   # Source line per code byte
    constants: List[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.code)

    def write(self, byte: int, line: int) -> int:
        """Append one instruction or operand byte, returning its offset."""
        offset = len(self.code)
        self.code.append(byte & 0xFF)
        self.lines.append(line)
        return offset

    def add_constant(self, value: float) -> int:
        """
        Append a value to the constant pool, returning its index.

        Values are not deduplicated.

        Raises:
            ConstantPoolOverflow: If the pool already holds MAX_CONSTANTS values
        """
        if len(self.constants) >= MAX_CONSTANTS:
            raise ConstantPoolOverflow(MAX_CONSTANTS)
        self.constants.append(value)
        return len(self.constants) - 1

    def instructions(self) -> List[OpCode]:
        """Decode the opcode sequence, skipping operands."""
        ops = []
        offset = 0
        while offset < len(self.code):
            opcode = OpCode(self.code[offset])
            ops.append(opcode)
            offset += OPCODE_SIZES[opcode]
        return ops

    def to_arrays(self) -> ChunkArrays:
        """Pack the chunk into numpy arrays for the VM."""
        return ChunkArrays(
            code=np.fromiter(self.code, dtype=np.uint8, count=len(self.code)),
            lines=np.asarray(self.lines, dtype=np.uint32),
            constants=np.asarray(self.constants, dtype=np.float64),
        )

    def serialize(self) -> bytes:
        """Serialize the chunk to binary format."""
        arrays = self.to_arrays()
        output = bytearray()

        # Header
        output.extend(self.MAGIC)
        output.extend(struct.pack('<H', self.VERSION))
        output.extend(struct.pack('<H', 0))  # Flags
        output.extend(struct.pack('<I', len(self.constants)))
        output.extend(struct.pack('<I', len(self.code)))

        output.extend(arrays.constants.astype('<f8').tobytes())
        output.extend(arrays.code.tobytes())
        output.extend(arrays.lines.astype('<u4').tobytes())

        return bytes(output)

    @classmethod
    def deserialize(cls, data: bytes) -> 'Chunk':
        """Deserialize a chunk from binary format."""
        offset = 0

        magic = data[offset:offset+4]
        if magic != cls.MAGIC:
            raise ValueError("Invalid bytecode magic number")
        offset += 4

        version = struct.unpack_from('<H', data, offset)[0]
        if version != cls.VERSION:
            raise ValueError(f"Unsupported bytecode version: {version}")
        offset += 4  # version + flags

        const_count, code_len = struct.unpack_from('<II', data, offset)
        offset += 8

        expected = offset + const_count * 8 + code_len * 5
        if len(data) != expected:
            raise ValueError(f"Truncated bytecode: expected {expected} bytes, got {len(data)}")

        constants = _read_array(data, "<f8", const_count, offset)
        offset += const_count * 8
        code = _read_array(data, "u1", code_len, offset)
        offset += code_len
        lines = _read_array(data, "<u4", code_len, offset)

        return cls(
            code=bytearray(code.tobytes()),
            lines=[int(n) for n in lines],
            constants=[float(v) for v in constants],
        )

    def disassemble(self, name: str) -> str:
        """Disassemble the chunk to a human-readable listing."""
        lines = [f"== {name} =="]

        offset = 0
        while offset < len(self.code):
            line, offset = self.disassemble_instruction(offset)
            lines.append(line)

        return "\n".join(lines)

    def disassemble_instruction(self, offset: int):
        """
        Disassemble the instruction at offset.

        Returns:
            Tuple of (listing line, offset of the next instruction)
        """
        if offset > 0 and self.lines[offset] == self.lines[offset - 1]:
            where = "   |"
        else:
            where = f"{self.lines[offset]:4d}"

        byte = self.code[offset]
        try:
            opcode = OpCode(byte)
        except ValueError:
            return f"{offset:04d} {where} <unknown opcode {byte}>", offset + 1

        if opcode == OpCode.CONSTANT:
            if offset + 1 >= len(self.code):
                return f"{offset:04d} {where} {opcode.name:16s} <missing operand>", offset + 1
            index = self.code[offset + 1]
            if index < len(self.constants):
                value = f"'{self.constants[index]:g}'"
            else:
                value = "?"
            return f"{offset:04d} {where} {opcode.name:16s} {index:4d} {value}", offset + 2

        return f"{offset:04d} {where} {opcode.name}", offset + 1


def _read_array(data: bytes, dtype: str, count: int, offset: int) -> np.ndarray:
    """Read count items of dtype from data at offset."""
    if count == 0:
        return np.empty(0, dtype=dtype)
    return np.frombuffer(data, dtype=dtype, count=count, offset=offset)
