"""Tests for instruction decoding, validation and disassembly."""

import pytest
from chip8vm import decode, format_instruction
from chip8vm.validate import is_supported, check_memory_range
from chip8vm.errors import AddressOutOfRange


def test_decode_fields():
    d = decode(0xD12A)

    assert d.raw == 0xD12A
    assert d.opcode == 0xD
    assert d.x == 0x1
    assert d.y == 0x2
    assert d.n == 0xA
    assert d.nn == 0x2A
    assert d.nnn == 0x12A


@pytest.mark.parametrize("word", [
    0x0000, 0x00E0, 0x00EE, 0x1234, 0x2345, 0x3456, 0x4567, 0x5670,
    0x6789, 0x789A, 0x8120, 0x812E, 0x9120, 0xA123, 0xB123, 0xC1FF,
    0xD125, 0xE19E, 0xE1A1, 0xF107, 0xF10A, 0xF115, 0xF118, 0xF11E,
    0xF129, 0xF133, 0xF155, 0xF165,
])
def test_supported_words(word):
    assert is_supported(decode(word))


@pytest.mark.parametrize("word", [
    0x0123, 0x00E1, 0x5121, 0x8128, 0x812F, 0x9121, 0xE1A2, 0xF100, 0xF1FF,
])
def test_unsupported_words(word):
    assert not is_supported(decode(word))


class TestMemoryRange:

    def test_inside(self):
        check_memory_range(0x000, 1)
        check_memory_range(0xFFE, 2)

    def test_past_end(self):
        with pytest.raises(AddressOutOfRange) as excinfo:
            check_memory_range(0xFFF, 2)
        assert excinfo.value.address == 0x1000

    def test_start_past_end(self):
        with pytest.raises(AddressOutOfRange):
            check_memory_range(0x1000, 1)


class TestFormatInstruction:

    @pytest.mark.parametrize("word,text", [
        (0x0000, "NOP"),
        (0x00E0, "CLS"),
        (0x00EE, "RET"),
        (0x1228, "JP 0x228"),
        (0x2300, "CALL 0x300"),
        (0x3A05, "SE VA, 0x05"),
        (0x4B10, "SNE VB, 0x10"),
        (0x5120, "SE V1, V2"),
        (0x6C7F, "LD VC, 0x7F"),
        (0x7001, "ADD V0, 0x01"),
        (0x8124, "ADD V1, V2"),
        (0x8127, "SUBN V1, V2"),
        (0x8106, "SHR V1"),
        (0x810E, "SHL V1"),
        (0x9120, "SNE V1, V2"),
        (0xA2F0, "LD I, 0x2F0"),
        (0xB400, "JP V0, 0x400"),
        (0xC30F, "RND V3, 0x0F"),
        (0xD012, "DRW V0, V1, 2"),
        (0xE49E, "SKP V4"),
        (0xE4A1, "SKNP V4"),
        (0xF50A, "LD V5, K"),
        (0xF033, "LD B, V0"),
        (0xFF55, "LD [I], VF"),
        (0xF265, "LD V2, [I]"),
    ])
    def test_mnemonics(self, word, text):
        assert format_instruction(word) == text

    @pytest.mark.parametrize("word", [0x0123, 0x8128, 0xF0FF, 0xE000])
    def test_data_words(self, word):
        assert format_instruction(word) == f"DW 0x{word:04X}"
