"""Errors raised by the CHIP-8 core.

Every condition that would make the machine read or write outside its
memory, stack, register file or keypad is reported with its own exception
type. All of them are raised while validating an instruction, before any
part of the machine state is modified.
"""

from typing import Optional


class Chip8Error(Exception):
    """Base class for all CHIP-8 core errors."""


class UnsupportedOpcode(Chip8Error):
    """The instruction word does not belong to the supported instruction set."""

    def __init__(self, instruction: int, pc: Optional[int] = None):
        self.instruction = instruction
        self.pc = pc
        location = f" at 0x{pc:03X}" if pc is not None else ""
        super().__init__(f"Unsupported opcode 0x{instruction:04X}{location}")


class StackOverflow(Chip8Error):
    """A subroutine call was made with every stack slot occupied."""

    def __init__(self, depth: int):
        self.depth = depth
        super().__init__(f"Stack overflow: all {depth} entries in use")


class StackUnderflow(Chip8Error):
    """A return was made with an empty stack."""

    def __init__(self):
        super().__init__("Stack underflow: return with an empty stack")


class AddressOutOfRange(Chip8Error):
    """A memory access falls outside the 4K address space."""

    def __init__(self, address: int, limit: int):
        self.address = address
        self.limit = limit
        super().__init__(f"Address 0x{address:X} out of range (memory size 0x{limit:X})")


class IndexOutOfRange(Chip8Error, IndexError):
    """A register or key index is outside 0x0..0xF."""

    def __init__(self, kind: str, index: int, limit: int):
        self.kind = kind
        self.index = index
        self.limit = limit
        super().__init__(f"{kind} index {index} out of range 0..{limit - 1}")


class RomTooLarge(Chip8Error):
    """The program image does not fit in memory above the program start."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"ROM of {size} bytes exceeds the {limit} bytes available")
