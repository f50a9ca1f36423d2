"""Host-facing CHIP-8 virtual CPU."""

import operator
import secrets
from typing import Optional

import jax
import jax.numpy as jnp
import numpy as np

from chip8vm.constants import MEMORY_SIZE, INSTRUCTION_SIZE
from chip8vm.emulator import step, tick_timers, load, load_rom
from chip8vm.errors import Chip8Error
from chip8vm.logging import MachineLogger
from chip8vm.stack import push, pop, check_push, check_pop
from chip8vm.state import EmulatorState, create_state, get_register, set_register, set_key


class Chip8:
    """A CHIP-8 machine owned by one host.

    Holds the current ``EmulatorState`` and swaps it for a new one on every
    transition. The host drives it: ``step()`` a fixed number of times per
    frame, ``tick_timers()`` once per frame, then read ``framebuffer()``.

    Args:
        seed: Seed for the random key used by CXNN. ``None`` draws one from the OS.
        logger: Logger for loads, resets and step failures.
    """

    def __init__(self, seed: Optional[int] = None, logger: Optional[MachineLogger] = None):
        self.seed = secrets.randbits(31) if seed is None else seed
        self.logger = logger or MachineLogger("Chip8", log_level="WARNING")
        self._initial_state = create_state(jax.random.PRNGKey(self.seed))
        self.state: EmulatorState = self._initial_state

    def reset(self):
        """Return to the post-construction state (font loaded, no program)."""
        self.state = self._initial_state
        self.logger.debug("Machine reset")

    def load(self, rom_data: bytes):
        """Copy a program image into memory at 0x200."""
        self.state = load(self.state, rom_data)
        self.logger.info(f"Loaded {len(rom_data)} byte program")

    def load_rom(self, filename: str):
        """Read a ROM file and load it."""
        self.state = load_rom(self.state, filename)
        self.logger.info(f"Loaded ROM {filename}")

    def step(self):
        """Run one fetch-decode-execute cycle."""
        if self.logger.is_enabled("DEBUG"):
            self.logger.log_instruction(self.pc, self.next_instruction() or 0)
        try:
            self.state = step(self.state)
        except Chip8Error as e:
            self.logger.error(f"Execution stopped at 0x{self.pc:03X}: {e}")
            raise

    def tick_timers(self):
        """Decrement the delay and sound timers toward zero."""
        self.state = tick_timers(self.state)

    def set_key(self, index: int, pressed: bool):
        """Update one keypad key from a host input event."""
        self.state = set_key(self.state, index, pressed)

    def framebuffer(self) -> np.ndarray:
        """Read-only (64, 32) boolean pixel grid indexed [x, y]."""
        pixels = np.array(self.state.display, dtype=np.bool_)
        pixels.flags.writeable = False
        return pixels

    def get_register(self, index: int) -> int:
        return get_register(self.state, index)

    def set_register(self, index: int, value: int):
        self.state = set_register(self.state, index, value)

    def push(self, address: int):
        """Push a return address, raising StackOverflow on a full stack."""
        address = operator.index(address)
        if not 0 <= address <= 0xFFFF:
            raise ValueError(f"Address {address} does not fit in 16 bits")
        check_push(self.state.stack)
        self.state = self.state.replace(stack=push(self.state.stack, jnp.asarray(address, dtype=jnp.uint16)))

    def pop(self) -> int:
        """Pop a return address, raising StackUnderflow on an empty stack."""
        check_pop(self.state.stack)
        stack, address = pop(self.state.stack)
        self.state = self.state.replace(stack=stack)
        return int(address)

    def next_instruction(self) -> Optional[int]:
        """The word at the program counter, or None if it lies outside memory."""
        pc = self.pc
        if pc + INSTRUCTION_SIZE > MEMORY_SIZE:
            return None
        return (int(self.state.memory[pc]) << 8) | int(self.state.memory[pc + 1])

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def index_register(self) -> int:
        return int(self.state.I)

    @property
    def stack_pointer(self) -> int:
        return int(self.state.stack.pointer)

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)

    @property
    def sound_active(self) -> bool:
        """True while the host should be sounding its tone."""
        return self.sound_timer > 0

    @property
    def registers(self) -> tuple[int, ...]:
        return tuple(int(v) for v in np.asarray(self.state.V))
