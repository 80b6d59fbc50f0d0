"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chip8vm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, NUM_KEYS, NUM_REGISTERS,
    SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE
)


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    ``display`` is indexed ``[y, x]`` so that ``display.ravel()`` is the
    row-major ``y * 64 + x`` framebuffer. ``V[15]`` doubles as the flags
    register. The quirk switches are static: they select handler behaviour
    and never change during a session.
    """
    rng: jax.Array
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=jnp.bool_))
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    draw_flag: bool = False
    awaiting_key: bool = False
    key_register: int = 0
    legacy_mode: bool = field(pytree_node=False, default=False)
    shift_quirk: bool = field(pytree_node=False, default=False)
    jump_quirk: bool = field(pytree_node=False, default=False)

    def set_register(self, index: int, value: int) -> "EmulatorState":
        """Return a copy with V[index] = value (mod 256)."""
        return self.replace(V=self.V.at[index].set(value & 0xFF))

    def set_pc(self, address: int) -> "EmulatorState":
        """Return a copy with the program counter moved to ``address``."""
        return self.replace(pc=jnp.asarray(address & 0xFFFF, dtype=jnp.uint16))


def create_state(
    rng: jax.Array = None,
    legacy_mode: bool = False,
    shift_quirk: bool = False,
    jump_quirk: bool = False,
) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    state = EmulatorState(
        rng=rng,
        legacy_mode=legacy_mode,
        shift_quirk=shift_quirk,
        jump_quirk=jump_quirk,
    )
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))
