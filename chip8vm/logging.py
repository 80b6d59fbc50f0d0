"""Console logging utilities for the CHIP-8 interpreter.

This module provides a small leveled console logger and the callback hooks
through which the cycle engine reports unknown opcodes, sound timer expiry
and fatal faults.
"""

import time
import sys
from typing import Optional

from chip8vm.debug import disassemble

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConsoleLogger:
    """Flexible console logger with levels, colors and timestamps."""

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.stream = stream if stream is not None else sys.stdout
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
            else {k: "" for k in LEVELS + ("RESET",)}
        )

        self.level_order = {level: rank for rank, level in enumerate(LEVELS)}

    def is_enabled_for(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

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
        if self.is_enabled_for(level):
            formatted = self._format_message(level, message)
            print(formatted, file=self.stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


class EngineCallback:
    """Base class for cycle engine callbacks."""

    def on_cycle(self, pc: int, instruction: int):
        """Called before each fetched instruction executes."""
        pass

    def on_unknown_opcode(self, pc: int, instruction: int):
        """Called the first time a given (pc, instruction) has no handler."""
        pass

    def on_tone_stop(self):
        """Called the instant the sound timer reaches zero."""
        pass

    def on_fault(self, pc: int, error: Exception):
        """Called when a fatal fault halts the machine."""
        pass


class ConsoleCallback(EngineCallback):
    """Console logging callback."""

    def __init__(self, logger: Optional[ConsoleLogger] = None):
        self.logger = logger or ConsoleLogger()

    def on_cycle(self, pc: int, instruction: int):
        if self.logger.is_enabled_for("DEBUG"):
            self.logger.debug(f"0x{pc:03X}: {instruction:04X}  {disassemble(instruction)}")

    def on_unknown_opcode(self, pc: int, instruction: int):
        self.logger.warning(
            f"Unknown opcode 0x{instruction:04X} at 0x{pc:03X}, skipped (repeats are only counted)"
        )

    def on_tone_stop(self):
        self.logger.debug("Sound timer expired, tone stop")

    def on_fault(self, pc: int, error: Exception):
        self.logger.critical(f"Machine halted at 0x{pc:03X}: {error}")
