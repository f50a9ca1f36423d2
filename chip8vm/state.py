"""CHIP-8 emulator state structures."""

import operator

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chip8vm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS,
)
from chip8vm.errors import IndexOutOfRange


@dataclass(frozen=True)
class StackState:
    """Return-address stack for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.int32))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    Display pixels are indexed ``display[x, y]`` with shape (64, 32).
    """
    rng: jax.Array
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = field(
        default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_)
    )
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))


def create_state(rng: jax.Array = jax.random.PRNGKey(0)) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(rng)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


class RegisterIndex(int):
    """Index of a V register, guaranteed to lie in 0x0..0xF."""

    def __new__(cls, value):
        index = operator.index(value)
        if not 0 <= index < NUM_REGISTERS:
            raise IndexOutOfRange("Register", index, NUM_REGISTERS)
        return super().__new__(cls, index)

    def __repr__(self) -> str:
        return f"V{int(self):X}"


def _check_byte(value) -> int:
    byte = operator.index(value)
    if not 0 <= byte <= 0xFF:
        raise ValueError(f"Register value {byte} does not fit in a byte")
    return byte


def get_register(state: EmulatorState, index) -> int:
    """Read register Vindex."""
    return int(state.V[int(RegisterIndex(index))])


def set_register(state: EmulatorState, index, value) -> EmulatorState:
    """Write a byte to register Vindex."""
    index = RegisterIndex(index)
    return state.replace(V=state.V.at[int(index)].set(jnp.asarray(_check_byte(value), dtype=jnp.uint8)))


def set_key(state: EmulatorState, index, pressed: bool) -> EmulatorState:
    """Update the pressed state of one keypad key."""
    key = operator.index(index)
    if not 0 <= key < NUM_KEYS:
        raise IndexOutOfRange("Key", key, NUM_KEYS)
    return state.replace(keypad=state.keypad.at[key].set(bool(pressed)))
