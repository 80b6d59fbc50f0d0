"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import ADDRESS_MASK, FLAG_REGISTER, SCREEN_WIDTH, SCREEN_HEIGHT
from chip8vm.instructions import PcUpdate

# Bit offsets of the 8 sprite columns, MSB first
_columns = jnp.arange(8)


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, PcUpdate]:
    """DXYN - XOR an N-row sprite from memory[I] onto the display at (VX, VY).

    Both the origin and every sprite pixel wrap around the screen edges.
    VF is set to 1 when any lit pixel is switched off.
    """
    sprite_x = int(state.V[instruction.x]) % SCREEN_WIDTH
    sprite_y = int(state.V[instruction.y]) % SCREEN_HEIGHT

    rows = jnp.arange(instruction.n)
    addresses = (int(state.I) + rows) & ADDRESS_MASK
    sprite_bytes = state.memory[addresses].astype(jnp.int32)
    sprite = ((sprite_bytes[:, None] >> (7 - _columns)[None, :]) & 1).astype(jnp.bool_)

    yy = ((sprite_y + rows) % SCREEN_HEIGHT)[:, None]
    xx = ((sprite_x + _columns) % SCREEN_WIDTH)[None, :]
    current = state.display[yy, xx]
    collision = bool(jnp.any(current & sprite))

    return state.replace(
        display=state.display.at[yy, xx].set(current ^ sprite),
        V=state.V.at[FLAG_REGISTER].set(int(collision)),
        draw_flag=True,
    ), PcUpdate.ADVANCE
