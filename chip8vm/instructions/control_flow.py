"""CHIP-8 control flow instructions."""

from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import ADDRESS_MASK
from chip8vm.instructions import PcUpdate
from chip8vm.stack import push


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, PcUpdate]:
    """1NNN - Jump to address NNN."""
    return state.set_pc(instruction.nnn), PcUpdate.HANDLED


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, PcUpdate]:
    """2NNN - Call subroutine at NNN.

    The pushed return address is the word after the CALL, so the matching
    RET resumes there without any further advance.
    """
    return_address = (int(state.pc) + 2) & ADDRESS_MASK
    state = state.replace(stack=push(state.stack, return_address))
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, PcUpdate]:
        if condition_fn(state, instruction):
            return state, PcUpdate.SKIP
        return state, PcUpdate.ADVANCE
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == inst.kk
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != inst.kk
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == int(state.V[inst.y])
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != int(state.V[inst.y])
)

execute_skip_if_key_pressed = make_skip_instruction(
    lambda state, inst: bool(state.keypad[int(state.V[inst.x]) & 0xF])
)

execute_skip_if_key_not_pressed = make_skip_instruction(
    lambda state, inst: not bool(state.keypad[int(state.V[inst.x]) & 0xF])
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, PcUpdate]:
    """BNNN - Jump to address NNN + V0.

    With ``jump_quirk`` the instruction reads as BXNN and jumps to XNN + VX.
    """
    register = instruction.x if state.jump_quirk else 0
    jump_address = (instruction.nnn + int(state.V[register])) & ADDRESS_MASK
    return state.set_pc(jump_address), PcUpdate.HANDLED
