"""CHIP-8 opcode handlers.

Every handler has the signature ``handler(state, instruction)`` and returns
``(new_state, PcUpdate)`` telling the cycle engine how to move ``pc``.
"""

from enum import IntEnum


class PcUpdate(IntEnum):
    """How the engine advances the program counter after a handler."""
    ADVANCE = 0  # next instruction word
    SKIP = 1     # skip the next instruction word
    HANDLED = 2  # handler positioned (or is holding) pc itself
