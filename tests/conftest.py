"""Test configuration and fixtures for CHIP-8 interpreter tests."""

import io

import pytest
import jax.numpy as jnp
from chip8vm import Chip8, EmulatorConfig, create_state
from chip8vm.logging import ConsoleLogger, ConsoleCallback


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def legacy_state():
    """Provide a fresh state in legacy mode (FX55/FX65 advance I)."""
    return create_state(legacy_mode=True)


@pytest.fixture
def quirky_state():
    """Provide a fresh state with the shift and jump quirks enabled."""
    return create_state(shift_quirk=True, jump_quirk=True)


@pytest.fixture
def log_stream():
    """Captures everything the engine logs."""
    return io.StringIO()


@pytest.fixture
def machine(log_stream):
    """Provide a cycle engine logging into ``log_stream``."""
    logger = ConsoleLogger("test", log_level="DEBUG", use_colors=False, stream=log_stream)
    return Chip8(EmulatorConfig(clock_rate=600), callbacks=[ConsoleCallback(logger)], logger=logger)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def program(*words):
    """Assemble instruction words into big-endian ROM bytes."""
    return b"".join(word.to_bytes(2, "big") for word in words)
