"""Test configuration and fixtures for CHIP-8 emulator tests."""

import io

import pytest
import jax.numpy as jnp
from chip8vm import Chip8, create_state
from chip8vm.logging import MachineLogger


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def log_stream():
    """Capture log output in memory."""
    return io.StringIO()


@pytest.fixture
def cpu(log_stream):
    """Provide a seeded machine that logs into log_stream."""
    return Chip8(seed=0, logger=MachineLogger("Test", log_level="DEBUG", stream=log_stream))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def with_registers(state, **registers):
    """Helper to set registers by name, e.g. with_registers(state, V0=5, VF=1)."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)
