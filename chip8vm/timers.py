"""CHIP-8 delay and sound timers."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState


def tick_timers(state: EmulatorState) -> tuple[EmulatorState, bool]:
    """Apply one 60 Hz tick to both timers.

    Returns the new state and whether the sound timer just reached zero,
    which is the moment a host should stop its tone.
    """
    delay = int(state.delay_timer)
    sound = int(state.sound_timer)
    new_state = state.replace(
        delay_timer=jnp.asarray(max(delay - 1, 0), dtype=jnp.uint8),
        sound_timer=jnp.asarray(max(sound - 1, 0), dtype=jnp.uint8),
    )
    return new_state, sound == 1


def timers_idle(state: EmulatorState) -> bool:
    return int(state.delay_timer) == 0 and int(state.sound_timer) == 0
