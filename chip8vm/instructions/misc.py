"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import ADDRESS_MASK, FONT_START, FONT_GLYPH_SIZE
from chip8vm.instructions import PcUpdate


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, PcUpdate]:
    """FX07 - Set VX to delay timer value."""
    return state.set_register(instruction.x, int(state.delay_timer)), PcUpdate.ADVANCE


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, PcUpdate]:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x]), PcUpdate.ADVANCE


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, PcUpdate]:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x]), PcUpdate.ADVANCE


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, PcUpdate]:
    """FX1E - Add VX to I register."""
    new_i = (int(state.I) + int(state.V[instruction.x])) & 0xFFFF
    return state.replace(I=jnp.asarray(new_i, dtype=jnp.uint16)), PcUpdate.ADVANCE


def first_pressed_key(state: EmulatorState) -> int:
    """Index of the lowest pressed key, or -1 when the keypad is idle."""
    if not bool(jnp.any(state.keypad)):
        return -1
    return int(jnp.argmax(state.keypad))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, PcUpdate]:
    """FX0A - Wait for key press.

    With no key down the machine enters the awaiting-key state and pc is
    held on this instruction; the engine completes the load once a key
    goes down.
    """
    key = first_pressed_key(state)
    if key < 0:
        return state.replace(awaiting_key=True, key_register=instruction.x), PcUpdate.HANDLED
    return state.set_register(instruction.x, key), PcUpdate.ADVANCE


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, PcUpdate]:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + (int(state.V[instruction.x]) & 0xF) * FONT_GLYPH_SIZE
    return state.replace(I=jnp.asarray(font_address, dtype=jnp.uint16)), PcUpdate.ADVANCE


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, PcUpdate]:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])
    digits = jnp.array([value // 100, (value // 10) % 10, value % 10], dtype=jnp.uint8)
    indices = (int(state.I) + jnp.arange(3)) & ADDRESS_MASK
    return state.replace(memory=state.memory.at[indices].set(digits)), PcUpdate.ADVANCE


def _advance_index(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    if state.legacy_mode:
        return jnp.asarray((int(state.I) + instruction.x + 1) & 0xFFFF, dtype=jnp.uint16)
    return state.I


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, PcUpdate]:
    """FX55 - Store V0 through VX in memory starting at I.

    In legacy mode I is left pointing past the last byte written.
    """
    count = instruction.x + 1
    indices = (int(state.I) + jnp.arange(count)) & ADDRESS_MASK
    new_memory = state.memory.at[indices].set(state.V[:count])
    return state.replace(memory=new_memory, I=_advance_index(state, instruction)), PcUpdate.ADVANCE


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, PcUpdate]:
    """FX65 - Load V0 through VX from memory starting at I."""
    count = instruction.x + 1
    indices = (int(state.I) + jnp.arange(count)) & ADDRESS_MASK
    new_V = state.V.at[:count].set(state.memory[indices])
    return state.replace(V=new_V, I=_advance_index(state, instruction)), PcUpdate.ADVANCE
