"""Console logging utilities for the CHIP-8 machine and its hosts.

A small levelled logger with optional colours and elapsed-time prefixes,
plus a machine-aware subclass that knows how to print register dumps and
instruction traces.
"""

import sys
import time

from chip8vm.decode import format_instruction


class ConsoleLogger:
    """Flexible console logger with colours and timestamps."""

    level_order = {
        "DEBUG": 0,
        "INFO": 1,
        "WARNING": 2,
        "ERROR": 3,
        "CRITICAL": 4,
    }

    def __init__(
        self,
        name: str = "Chip8",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        self.name = name
        self.stream = stream if stream is not None else sys.stdout
        self.set_level(log_level)
        self.use_colors = (
            use_colors and hasattr(self.stream, "isatty") and self.stream.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

    def set_level(self, log_level: str):
        """Change the minimum level that gets printed."""
        level = log_level.upper()
        if level not in self.level_order:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(self.level_order)}"
            )
        self.log_level = level

    def is_enabled(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order[self.log_level]

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self.is_enabled(level):
            formatted = self._format_message(level, message)
            print(formatted, file=self.stream, flush=True)

    def debug(self, message: str):
        """Log debug message."""
        self.log("DEBUG", message)

    def info(self, message: str):
        """Log info message."""
        self.log("INFO", message)

    def warning(self, message: str):
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str):
        """Log error message."""
        self.log("ERROR", message)

    def critical(self, message: str):
        """Log critical message."""
        self.log("CRITICAL", message)


class MachineLogger(ConsoleLogger):
    """Logger that can dump CHIP-8 machine state."""

    def log_instruction(self, address: int, instruction: int):
        """Trace one fetched instruction at DEBUG level."""
        if self.is_enabled("DEBUG"):
            self.debug(f"0x{address:03X}: {int(instruction):04X}  {format_instruction(instruction)}")

    def log_registers(self, state, level: str = "DEBUG"):
        """Print PC, I, timers and the V registers, four per line."""
        if not self.is_enabled(level):
            return
        self.log(
            level,
            f"PC=0x{int(state.pc):03X} I=0x{int(state.I):03X} SP={int(state.stack.pointer)} "
            f"DT={int(state.delay_timer)} ST={int(state.sound_timer)}"
        )
        for i in range(0, 16, 4):
            parts = [f"V{j:X}={int(state.V[j]):02X}" for j in range(i, i + 4)]
            self.log(level, "  " + " ".join(parts))
