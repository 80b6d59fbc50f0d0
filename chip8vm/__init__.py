"""CHIP-8 interpreter package."""

from chip8vm.state import EmulatorState, StackState, create_state
from chip8vm.emulator import Chip8, execute, fetch, load_rom, load_rom_file
from chip8vm.decode import DecodedInstruction, decode
from chip8vm.config import EmulatorConfig, load_config
from chip8vm.errors import (
    Chip8Error, ConfigurationError, MachineHaltedError, RomTooLargeError,
    StackError, StackOverflowError, StackUnderflowError
)
from chip8vm.instructions import PcUpdate
from chip8vm.constants import PROGRAM_START, FONT_START, SCREEN_WIDTH, SCREEN_HEIGHT
from chip8vm.rendering import chip8_display_to_rgb, create_color_scheme

__all__ = [
    "Chip8",
    "EmulatorConfig",
    "load_config",
    "EmulatorState",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "load_rom",
    "load_rom_file",
    "DecodedInstruction",
    "decode",
    "PcUpdate",
    "Chip8Error",
    "ConfigurationError",
    "MachineHaltedError",
    "RomTooLargeError",
    "StackError",
    "StackOverflowError",
    "StackUnderflowError",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "chip8_display_to_rgb",
    "create_color_scheme",
]
