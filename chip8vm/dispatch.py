"""Two-level opcode dispatch table.

The first level is indexed by the instruction family (top nibble). Families
0x0, 0xE and 0xF are selected further by the low byte and family 0x8 by
the low nibble.
"""

from typing import Callable, Optional, Union

from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.instructions import PcUpdate
from chip8vm.instructions.system import execute_clear_screen, execute_return
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key_pressed, execute_skip_if_key_not_pressed
)
from chip8vm.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub_xy, execute_alu_shift_right, execute_alu_sub_yx, execute_alu_shift_left
)
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)

Handler = Callable[[EmulatorState, DecodedInstruction], tuple[EmulatorState, PcUpdate]]


class SubTable:
    """Second-level table keyed on one operand field of the instruction."""

    def __init__(self, selector: str, handlers: dict[int, Handler]):
        self.selector = selector
        self.handlers = handlers

    def resolve(self, instruction: DecodedInstruction) -> Optional[Handler]:
        return self.handlers.get(getattr(instruction, self.selector))


SYSTEM_TABLE = SubTable("kk", {
    0xE0: execute_clear_screen,
    0xEE: execute_return,
})

ALU_TABLE = SubTable("n", {
    0x0: execute_alu_set,
    0x1: execute_alu_or,
    0x2: execute_alu_and,
    0x3: execute_alu_xor,
    0x4: execute_alu_add,
    0x5: execute_alu_sub_xy,
    0x6: execute_alu_shift_right,
    0x7: execute_alu_sub_yx,
    0xE: execute_alu_shift_left,
})

KEY_TABLE = SubTable("kk", {
    0x9E: execute_skip_if_key_pressed,
    0xA1: execute_skip_if_key_not_pressed,
})

MISC_TABLE = SubTable("kk", {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
})

FAMILY_TABLE: tuple[Union[Handler, SubTable], ...] = (
    SYSTEM_TABLE,                           # 0x0
    execute_jump,                           # 0x1
    execute_call,                           # 0x2
    execute_skip_if_equal_immediate,        # 0x3
    execute_skip_if_not_equal_immediate,    # 0x4
    execute_skip_if_equal_register,         # 0x5
    execute_set,                            # 0x6
    execute_add,                            # 0x7
    ALU_TABLE,                              # 0x8
    execute_skip_if_not_equal_register,     # 0x9
    execute_set_index,                      # 0xA
    execute_jump_with_offset,               # 0xB
    execute_random,                         # 0xC
    execute_display,                        # 0xD
    KEY_TABLE,                              # 0xE
    MISC_TABLE,                             # 0xF
)


def resolve(instruction: DecodedInstruction) -> Optional[Handler]:
    """Return the handler for ``instruction`` or None for an unknown opcode."""
    entry = FAMILY_TABLE[instruction.opcode]
    if isinstance(entry, SubTable):
        return entry.resolve(instruction)
    return entry
