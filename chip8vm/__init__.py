"""CHIP-8 emulator package."""

from chip8vm.state import EmulatorState, RegisterIndex, create_state, get_register, set_register, set_key
from chip8vm.emulator import execute, fetch, step, tick_timers, load, load_rom, write_instruction
from chip8vm.decode import DecodedInstruction, decode, format_instruction
from chip8vm.cpu import Chip8
from chip8vm.errors import (
    Chip8Error, UnsupportedOpcode, StackOverflow, StackUnderflow,
    AddressOutOfRange, IndexOutOfRange, RomTooLarge,
)
from chip8vm.constants import *
from chip8vm.rendering import chip8_display_to_rgb, create_color_scheme, save_frame

__all__ = [
    "EmulatorState",
    "RegisterIndex",
    "create_state",
    "get_register",
    "set_register",
    "set_key",
    "fetch",
    "execute",
    "step",
    "tick_timers",
    "load",
    "load_rom",
    "write_instruction",
    "DecodedInstruction",
    "decode",
    "format_instruction",
    "Chip8",
    "Chip8Error",
    "UnsupportedOpcode",
    "StackOverflow",
    "StackUnderflow",
    "AddressOutOfRange",
    "IndexOutOfRange",
    "RomTooLarge",
    "PROGRAM_START",
    "FONT_START",
    "MEMORY_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "chip8_display_to_rgb",
    "create_color_scheme",
    "save_frame",
]
