"""Main CHIP-8 emulator execution engine."""

from typing import Optional

import jax
import jax.lax
import jax.numpy as jnp
import numpy as np
from chip8vm.state import EmulatorState
from chip8vm.decode import decode
from chip8vm.validate import validate, check_memory_range
from chip8vm.constants import PROGRAM_START, MAX_ROM_SIZE, INSTRUCTION_SIZE
from chip8vm.errors import RomTooLarge
from chip8vm.instructions.system import execute_system_instruction
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chip8vm.instructions.alu import execute_alu_operation
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import execute_misc_instruction


def _dispatch(state: EmulatorState, instruction: int) -> EmulatorState:
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.opcode,
        [
            execute_system_instruction,
            execute_jump,
            execute_call,
            execute_skip_if_equal_immediate,
            execute_skip_if_not_equal_immediate,
            execute_skip_if_equal_register,
            execute_set,
            execute_add,
            execute_alu_operation,
            execute_skip_if_not_equal_register,
            execute_set_index,
            execute_jump_with_offset,
            execute_random,
            execute_display,
            execute_skip_if_key,
            execute_misc_instruction,
        ],
        state, decoded_instruction
    )


_dispatch_jit = jax.jit(_dispatch)


def execute(state: EmulatorState, instruction: int, address: Optional[int] = None) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    The instruction is validated against ``state`` first; any Chip8Error is
    raised before the new state is built. ``address`` is only used to report
    where a faulting instruction came from.
    """
    instruction = int(instruction)
    validate(state, decode(instruction), address)
    return _dispatch_jit(state, instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def _unpack_u16(value: int) -> tuple[int, int]:
    """Unpack uint16 into two bytes."""
    return (value >> 8) & 0xFF, value & 0xFF


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    pc = int(state.pc)
    check_memory_range(pc, INSTRUCTION_SIZE)
    instruction = _pack_u16(state.memory[pc], state.memory[pc + 1])
    return state.replace(pc=jnp.astype(pc + INSTRUCTION_SIZE, jnp.uint16)), instruction


def step(state: EmulatorState) -> EmulatorState:
    """Run one fetch-decode-execute cycle."""
    address = int(state.pc)
    state, instruction = fetch(state)
    return execute(state, instruction, address)


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Count both timers down by one, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def write_instruction(state: EmulatorState, address: int, instruction: int) -> EmulatorState:
    """Store a 16-bit instruction big-endian at address."""
    check_memory_range(address, INSTRUCTION_SIZE)
    high, low = _unpack_u16(int(instruction))
    memory = state.memory.at[address:address + INSTRUCTION_SIZE].set(jnp.array([high, low], dtype=jnp.uint8))
    return state.replace(memory=memory)


def load(state: EmulatorState, rom_data: bytes) -> EmulatorState:
    """Copy a program image into memory starting at 0x200."""
    if len(rom_data) > MAX_ROM_SIZE:
        raise RomTooLarge(len(rom_data), MAX_ROM_SIZE)
    rom_array = jnp.asarray(np.frombuffer(bytes(rom_data), dtype=np.uint8))
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load(state, rom_data)
