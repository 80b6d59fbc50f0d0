"""CHIP-8 memory and register operations."""

import jax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.instructions import PcUpdate


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, PcUpdate]:
    """6XNN - Set VX = NN."""
    return state.set_register(instruction.x, instruction.kk), PcUpdate.ADVANCE


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, PcUpdate]:
    """7XNN - Add NN to VX (no carry flag)."""
    total = int(state.V[instruction.x]) + instruction.kk
    return state.set_register(instruction.x, total), PcUpdate.ADVANCE


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, PcUpdate]:
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.asarray(instruction.nnn, dtype=jnp.uint16)), PcUpdate.ADVANCE


def execute_random(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, PcUpdate]:
    """CXNN - Set VX = random & NN."""
    key, subkey = jax.random.split(state.rng)
    random_value = int(jax.random.randint(subkey, shape=(), minval=0, maxval=256))
    state = state.set_register(instruction.x, random_value & instruction.kk)
    return state.replace(rng=key), PcUpdate.ADVANCE
