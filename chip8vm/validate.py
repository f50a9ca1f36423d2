"""Instruction validation.

Every fault an instruction can raise is detected here, against the state it
is about to run on, so that the execution kernels never see a bad operand and
a failing step leaves the machine untouched.
"""

from typing import Optional

from chip8vm.constants import MEMORY_SIZE, NUM_KEYS
from chip8vm.decode import DecodedInstruction
from chip8vm.errors import UnsupportedOpcode, AddressOutOfRange, IndexOutOfRange
from chip8vm.stack import check_push, check_pop
from chip8vm.state import EmulatorState, RegisterIndex

SYSTEM_INSTRUCTIONS = frozenset({0x0000, 0x00E0, 0x00EE})
ALU_OPERATIONS = frozenset({0x0, 0x1, 0x2, 0x3, 0x4, 0x5, 0x6, 0x7, 0xE})
KEY_OPERATIONS = frozenset({0x9E, 0xA1})
MISC_OPERATIONS = frozenset({0x07, 0x0A, 0x15, 0x18, 0x1E, 0x29, 0x33, 0x55, 0x65})


def is_supported(instruction: DecodedInstruction) -> bool:
    """Check whether a decoded word belongs to the instruction set."""
    opcode = instruction.opcode
    if opcode == 0x0:
        return instruction.raw in SYSTEM_INSTRUCTIONS
    if opcode in (0x5, 0x9):
        return instruction.n == 0
    if opcode == 0x8:
        return instruction.n in ALU_OPERATIONS
    if opcode == 0xE:
        return instruction.nn in KEY_OPERATIONS
    if opcode == 0xF:
        return instruction.nn in MISC_OPERATIONS
    return True


def check_memory_range(start: int, length: int) -> None:
    """Raise AddressOutOfRange unless [start, start + length) lies in memory."""
    last = start + length - 1
    if start < 0 or last >= MEMORY_SIZE:
        raise AddressOutOfRange(max(start, last), MEMORY_SIZE)


def validate(state: EmulatorState, instruction: DecodedInstruction, address: Optional[int] = None) -> None:
    """Raise the matching Chip8Error if the instruction cannot run on this state."""
    if not is_supported(instruction):
        raise UnsupportedOpcode(instruction.raw, address)

    x = RegisterIndex(instruction.x)
    RegisterIndex(instruction.y)

    opcode = instruction.opcode
    if instruction.raw == 0x00EE:
        check_pop(state.stack)
    elif opcode == 0x2:
        check_push(state.stack)
    elif opcode == 0xD:
        if instruction.n:
            check_memory_range(int(state.I), instruction.n)
    elif opcode == 0xE:
        key = int(state.V[int(x)])
        if key >= NUM_KEYS:
            raise IndexOutOfRange("Key", key, NUM_KEYS)
    elif opcode == 0xF:
        if instruction.nn == 0x33:
            check_memory_range(int(state.I), 3)
        elif instruction.nn in (0x55, 0x65):
            check_memory_range(int(state.I), x + 1)
