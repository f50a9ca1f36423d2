"""Headless frame runner.

Runs a ROM for a fixed number of frames without any window, the same way
the desktop frontend paces the machine: a fixed number of instructions per
frame followed by one timer tick.
"""

from typing import Optional

from tqdm import tqdm

from chip8vm.cpu import Chip8
from chip8vm.logging import MachineLogger


def run_frame(machine: Chip8, instructions_per_frame: int) -> None:
    """Step the machine for one frame, then tick its timers once."""
    for _ in range(instructions_per_frame):
        machine.step()
    machine.tick_timers()


def run_headless(
    rom_path: str,
    frames: int = 600,
    instructions_per_frame: int = 10,
    seed: Optional[int] = None,
    progress: bool = True,
    logger: Optional[MachineLogger] = None,
) -> Chip8:
    """Load a ROM and run it for ``frames`` frames.

    Args:
        rom_path: Path to the CHIP-8 ROM file to load
        frames: Number of 60 Hz frames to emulate
        instructions_per_frame: CPU steps per frame (10 gives ~600 Hz)
        seed: Random seed for CXNN, None for a fresh one
        progress: Show a tqdm progress bar
        logger: Logger shared with the machine

    Returns:
        The machine after the last frame.

    Raises:
        Chip8Error: The program hit a fault; the run stops at that step.
    """
    if frames < 0 or instructions_per_frame < 0:
        raise ValueError("frames and instructions_per_frame must be non-negative")

    logger = logger or MachineLogger("Runner")
    machine = Chip8(seed=seed, logger=logger)
    machine.load_rom(rom_path)

    logger.info(f"Running {frames} frames at {instructions_per_frame} instructions per frame")
    for _ in tqdm(range(frames), desc="Emulating", unit="frame", disable=not progress):
        run_frame(machine, instructions_per_frame)

    logger.log_registers(machine.state, level="INFO")
    return machine
