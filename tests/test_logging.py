"""Tests for the console loggers."""

import io

import pytest
from chip8vm import create_state, set_register
from chip8vm.logging import ConsoleLogger, MachineLogger


def make_logger(cls=ConsoleLogger, **kwargs):
    stream = io.StringIO()
    return cls("Test", stream=stream, show_timestamps=False, **kwargs), stream


def test_message_format():
    logger, stream = make_logger()

    logger.info("hello")

    assert stream.getvalue() == "[    INFO][Test] hello\n"


def test_level_filtering():
    logger, stream = make_logger(log_level="WARNING")

    logger.debug("d")
    logger.info("i")
    logger.warning("w")
    logger.error("e")

    lines = stream.getvalue().splitlines()
    assert [line[-1] for line in lines] == ["w", "e"]


def test_set_level():
    logger, stream = make_logger(log_level="ERROR")
    assert not logger.is_enabled("INFO")

    logger.set_level("debug")

    assert logger.is_enabled("DEBUG")


def test_unknown_level():
    with pytest.raises(ValueError):
        make_logger(log_level="VERBOSE")


def test_no_colors_off_tty():
    logger, stream = make_logger(use_colors=True)

    logger.error("boom")

    assert "\033[" not in stream.getvalue()


def test_timestamps():
    stream = io.StringIO()
    logger = ConsoleLogger("Test", stream=stream)

    logger.info("tick")

    assert stream.getvalue().startswith("[")
    assert "s][    INFO][Test] tick" in stream.getvalue()


def test_log_registers():
    logger, stream = make_logger(MachineLogger, log_level="DEBUG")
    state = set_register(create_state(), 0xA, 0x3C)

    logger.log_registers(state)

    lines = stream.getvalue().splitlines()
    assert len(lines) == 5
    assert "PC=0x200 I=0x000 SP=0 DT=0 ST=0" in lines[0]
    assert lines[3].endswith("V8=00 V9=00 VA=3C VB=00")


def test_log_registers_respects_level():
    logger, stream = make_logger(MachineLogger, log_level="INFO")

    logger.log_registers(create_state(), level="DEBUG")

    assert stream.getvalue() == ""


def test_log_instruction():
    logger, stream = make_logger(MachineLogger, log_level="DEBUG")

    logger.log_instruction(0x2A4, 0xD015)

    assert stream.getvalue().strip().endswith("0x2A4: D015  DRW V0, V1, 5")
