"""Tests for control flow instructions."""

import pytest
from chip8vm import execute


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """Test 1NNN - Jump to address."""
        state = execute(fresh_state, 0x1001)
        assert state.pc == 1

    def test_jump_to_self(self, fresh_state):
        """1NNN jumping to its own address leaves pc in place."""
        state = execute(fresh_state, 0x1200)
        assert state.pc == 0x200


class TestSkipInstructions:
    """Test all skip instruction variants."""

    def test_skip_if_equal_immediate_true(self, fresh_state):
        """3XNN - Should skip when VX == NN."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0x42))

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == 0x204

    def test_skip_if_equal_immediate_false(self, fresh_state):
        """3XNN - Should not skip when VX != NN."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0x41))

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == 0x202

    def test_skip_if_not_equal_immediate_true(self, fresh_state):
        """4XNN - Should skip when VX != NN."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x10))

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == 0x204

    def test_skip_if_not_equal_immediate_false(self, fresh_state):
        """4XNN - Should not skip when VX == NN."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x20))

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == 0x202

    def test_skip_if_equal_register_true(self, fresh_state):
        """5XY0 - Should skip when VX == VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x55))
        state = state.replace(V=state.V.at[2].set(0x55))

        state = execute(state, 0x5120)  # Skip if V1 == V2
        assert state.pc == 0x204

    def test_skip_if_equal_register_false(self, fresh_state):
        """5XY0 - Should not skip when VX != VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x55))
        state = state.replace(V=state.V.at[2].set(0x44))

        state = execute(state, 0x5120)  # Skip if V1 == V2
        assert state.pc == 0x202

    def test_skip_if_not_equal_register_true(self, fresh_state):
        """9XY0 - Should skip when VX != VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[7].set(0xAA))
        state = state.replace(V=state.V.at[8].set(0xBB))

        state = execute(state, 0x9780)  # Skip if V7 != V8
        assert state.pc == 0x204

    def test_skip_if_not_equal_register_false(self, fresh_state):
        """9XY0 - Should not skip when VX == VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[7].set(0xCC))
        state = state.replace(V=state.V.at[8].set(0xCC))

        state = execute(state, 0x9780)  # Skip if V7 != V8
        assert state.pc == 0x202

    def test_skip_with_zero_values(self, fresh_state):
        """Test skip instructions with zero values."""
        # V0 == 0, should skip
        state = execute(fresh_state, 0x3000)  # Skip if V0 == 0
        assert state.pc == 0x204

    def test_skip_boundary_values(self, fresh_state):
        """Test skip instructions with boundary values."""
        state = fresh_state.replace(V=fresh_state.V.at[0].set(0xFF))

        state = execute(state, 0x30FF)  # Skip if V0 == 255
        assert state.pc == 0x204


class TestKeySkips:
    """Test EX9E / EXA1."""

    def test_skip_if_key_pressed(self, fresh_state):
        """EX9E - Skip when the key in VX is down."""
        state = execute(fresh_state, 0x6005)  # V0 = 5
        state = state.replace(keypad=state.keypad.at[5].set(True))

        state = execute(state, 0xE09E)
        assert state.pc == 0x206

    def test_no_skip_if_key_released(self, fresh_state):
        """EX9E - No skip when the key is up."""
        state = execute(fresh_state, 0x6005)  # V0 = 5

        state = execute(state, 0xE09E)
        assert state.pc == 0x204

    def test_skip_if_key_not_pressed(self, fresh_state):
        """EXA1 - Skip when the key in VX is up."""
        state = execute(fresh_state, 0x6005)  # V0 = 5

        state = execute(state, 0xE0A1)
        assert state.pc == 0x206

    def test_no_skip_if_key_not_pressed_but_down(self, fresh_state):
        """EXA1 - No skip when the key is down."""
        state = execute(fresh_state, 0x6005)  # V0 = 5
        state = state.replace(keypad=state.keypad.at[5].set(True))

        state = execute(state, 0xE0A1)
        assert state.pc == 0x204

    def test_key_index_uses_low_nibble(self, fresh_state):
        """Only the low nibble of VX selects the key."""
        state = execute(fresh_state, 0x6013)  # V0 = 0x13 -> key 3
        state = state.replace(keypad=state.keypad.at[3].set(True))

        state = execute(state, 0xE09E)
        assert state.pc == 0x206


class TestJumpWithOffset:
    """Test jump with offset with and without the quirk."""

    def test_jump_with_offset(self, fresh_state):
        """BNNN - Jump with V0 offset."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0xB250)  # Jump to 0x250 + V0
        assert state.pc == 0x260

    def test_jump_with_offset_quirk(self, quirky_state):
        """BXNN - Jump with VX offset when the jump quirk is on."""
        state = execute(quirky_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0x6230)  # V2 = 0x30
        state = execute(state, 0xB250)  # Jump to 0x250 + V2
        assert state.pc == 0x280

    def test_jump_with_offset_wraps_into_memory(self, fresh_state):
        """BNNN - Targets past 0xFFF wrap to stay inside memory."""
        state = execute(fresh_state, 0x60FF)  # V0 = 0xFF
        state = execute(state, 0xBFFF)
        assert state.pc == (0xFFF + 0xFF) & 0xFFF
