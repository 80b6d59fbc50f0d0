"""Exceptions raised by the CHIP-8 interpreter."""


class Chip8Error(Exception):
    """Base class for interpreter errors."""


class StackError(Chip8Error):
    """Malformed subroutine nesting; fatal to the session."""


class StackOverflowError(StackError):
    """CALL issued with every stack slot in use."""


class StackUnderflowError(StackError):
    """RET issued with an empty stack."""


class MachineHaltedError(Chip8Error):
    """The session was stopped by an earlier fatal fault."""


class RomTooLargeError(Chip8Error, ValueError):
    """ROM image does not fit between 0x200 and the end of memory."""


class ConfigurationError(Chip8Error, ValueError):
    """Session options were rejected before the machine was built."""
