"""Tests for control flow instructions (1xxx, 2xxx, 3xxx, 4xxx, 5xxx, 9xxx, Bxxx, Exxx)."""

import pytest
import jax.numpy as jnp
from chip8vm import execute, StackOverflow, IndexOutOfRange, UnsupportedOpcode
from conftest import with_registers


class TestJumps:
    """Test jump instructions."""

    def test_jump(self, fresh_state):
        """1NNN - Jump to address NNN."""
        state = execute(fresh_state, 0x1ABC)

        assert state.pc == 0xABC

    def test_jump_with_offset(self, fresh_state):
        """BNNN - Jump to NNN + V0."""
        state = with_registers(fresh_state, V0=0x10, V1=0xFF)

        state = execute(state, 0xB300)

        assert state.pc == 0x310

    def test_jump_with_offset_is_not_masked(self, fresh_state):
        """BNNN - NNN + V0 may run past 0xFFF."""
        state = with_registers(fresh_state, V0=0xFF)

        state = execute(state, 0xBFFF)

        assert state.pc == 0x10FE


class TestSubroutines:
    """Test call instruction and stack effects."""

    def test_call_pushes_return_address(self, fresh_state):
        """2NNN - Push pc then jump."""
        state = fresh_state.replace(pc=jnp.asarray(0x202, dtype=jnp.uint16))

        state = execute(state, 0x2400)

        assert state.pc == 0x400
        assert state.stack.pointer == 1
        assert state.stack.data[0] == 0x202

    def test_call_on_full_stack(self, fresh_state):
        """2NNN - Sixteen nested calls fill the stack, the seventeenth fails."""
        state = fresh_state
        for _ in range(16):
            state = execute(state, 0x2300)
        assert state.stack.pointer == 16

        with pytest.raises(StackOverflow):
            execute(state, 0x2300)


class TestSkips:
    """Test conditional skip instructions."""

    @pytest.fixture
    def skip_state(self, fresh_state):
        return with_registers(fresh_state, V0=5, V1=5, V2=6)

    def test_skip_if_equal_immediate(self, skip_state):
        """3XNN - V0 == 5 skips."""
        state = execute(skip_state, 0x3005)

        assert state.pc == 0x202

    def test_skip_if_equal_immediate_no_skip(self, skip_state):
        """3XNN - V2 != 5 does not skip."""
        state = execute(skip_state, 0x3205)

        assert state.pc == 0x200

    def test_skip_if_not_equal_immediate(self, skip_state):
        """4XNN - V2 != 5 skips."""
        assert execute(skip_state, 0x4205).pc == 0x202
        assert execute(skip_state, 0x4005).pc == 0x200

    def test_skip_if_equal_register(self, skip_state):
        """5XY0 - V0 == V1 skips, V1 == V2 does not."""
        assert execute(skip_state, 0x5010).pc == 0x202
        assert execute(skip_state, 0x5120).pc == 0x200

    def test_skip_if_not_equal_register(self, skip_state):
        """9XY0 - V1 != V2 skips, V0 != V1 does not."""
        assert execute(skip_state, 0x9120).pc == 0x202
        assert execute(skip_state, 0x9010).pc == 0x200

    @pytest.mark.parametrize("instruction", [0x5011, 0x501F, 0x9011, 0x9018])
    def test_register_skips_need_zero_low_nibble(self, skip_state, instruction):
        """5XYN/9XYN with N != 0 are not instructions."""
        with pytest.raises(UnsupportedOpcode):
            execute(skip_state, instruction)


class TestKeySkips:
    """Test keypad skip instructions."""

    def test_skip_if_key_pressed(self, fresh_state):
        """EX9E - Skip when key VX is down."""
        state = with_registers(fresh_state, V3=0xA)
        state = state.replace(keypad=state.keypad.at[0xA].set(True))

        assert execute(state, 0xE39E).pc == 0x202
        assert execute(fresh_state, 0xE39E).pc == 0x200

    def test_skip_if_key_not_pressed(self, fresh_state):
        """EXA1 - Skip when key VX is up."""
        state = with_registers(fresh_state, V3=0xA)
        pressed = state.replace(keypad=state.keypad.at[0xA].set(True))

        assert execute(state, 0xE3A1).pc == 0x202
        assert execute(pressed, 0xE3A1).pc == 0x200

    @pytest.mark.parametrize("instruction", [0xE09E, 0xE0A1])
    def test_key_index_out_of_range(self, fresh_state, instruction):
        """EX9E/EXA1 with VX > 0xF have no key to read."""
        state = with_registers(fresh_state, V0=0x10)

        with pytest.raises(IndexOutOfRange):
            execute(state, instruction)

    def test_undefined_key_operation(self, fresh_state):
        """EXNN other than 9E/A1 is rejected."""
        with pytest.raises(UnsupportedOpcode):
            execute(fresh_state, 0xE19F)
