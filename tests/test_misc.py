"""Tests for miscellaneous instructions (Fxxx)."""

import pytest
from chip8vm import execute
from chip8vm.constants import FONT_START


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        """Test timer set and get operations."""
        state = fresh_state

        state = execute(state, 0x6030)  # V0 = 48
        state = execute(state, 0xF015)  # Set delay timer to V0
        assert state.delay_timer == 48

        state = execute(state, 0x6120)  # V1 = 32
        state = execute(state, 0xF118)  # Set sound timer to V1
        assert state.sound_timer == 32

        state = execute(state, 0xF207)  # V2 = delay timer
        assert state.V[2] == 48


class TestBCD:
    """Test BCD conversion."""

    @pytest.mark.parametrize("value,digits", [(156, (1, 5, 6)), (0, (0, 0, 0)), (255, (2, 5, 5)), (7, (0, 0, 7))])
    def test_misc_bcd_conversion(self, fresh_state, value, digits):
        """FX33 - Hundreds, tens and ones land at I, I+1, I+2."""
        state = execute(fresh_state, 0x6000 | value)
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xF033)

        assert tuple(int(b) for b in state.memory[0x300:0x303]) == digits
        assert state.I == 0x300


class TestFont:
    """Test font character addressing."""

    def test_font_all_characters(self, fresh_state):
        """FX29 - Each glyph is five bytes from the font base."""
        state = fresh_state

        for digit in range(16):
            state = execute(state, 0x6000 | digit)  # V0 = digit
            state = execute(state, 0xF029)  # I = font address

            assert state.I == FONT_START + digit * 5, f"Font address wrong for digit {digit:X}"


class TestIndexArithmetic:
    """Test FX1E."""

    def test_add_to_index(self, fresh_state):
        """FX1E - Add VX to I register."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xF01E)  # I += V0

        assert state.I == 0x310
        assert state.V[15] == 0

    def test_add_to_index_beyond_12_bits(self, fresh_state):
        """FX1E - I is a 16-bit register and is not masked."""
        state = execute(fresh_state, 0x60FF)  # V0 = 0xFF
        state = execute(state, 0xAF80)  # I = 0xF80
        state = execute(state, 0xF01E)

        assert state.I == 0x107F


class TestMemoryOperations:
    """Test store/load register operations."""

    def test_store_load_modern_mode(self, fresh_state):
        """FX55/FX65 leave I unchanged outside legacy mode."""
        state = fresh_state
        state = execute(state, 0x6001)  # V0 = 1
        state = execute(state, 0x6102)  # V1 = 2
        state = execute(state, 0x6203)  # V2 = 3
        state = execute(state, 0x6309)  # V3 = 9, not stored
        state = execute(state, 0xA300)  # I = 0x300

        state = execute(state, 0xF255)  # Store V0-V2
        assert state.I == 0x300
        assert [int(b) for b in state.memory[0x300:0x304]] == [1, 2, 3, 0]

        state = execute(state, 0x6000)
        state = execute(state, 0x6100)
        state = execute(state, 0x6200)

        state = execute(state, 0xF265)  # Load V0-V2
        assert [int(v) for v in state.V[:4]] == [1, 2, 3, 9]
        assert state.I == 0x300

    def test_store_load_legacy_mode(self, legacy_state):
        """FX55/FX65 advance I by X + 1 in legacy mode."""
        state = legacy_state
        state = execute(state, 0x6001)  # V0 = 1
        state = execute(state, 0x6102)  # V1 = 2
        state = execute(state, 0xA400)  # I = 0x400

        state = execute(state, 0xF155)  # Store V0-V1
        assert state.I == 0x400 + 2

        state = execute(state, 0xA400)
        state = execute(state, 0x6000)
        state = execute(state, 0x6100)

        state = execute(state, 0xF165)  # Load V0-V1
        assert state.V[0] == 1
        assert state.V[1] == 2
        assert state.I == 0x400 + 2

    def test_load_single_register(self, fresh_state):
        """F065 copies exactly one byte."""
        state = fresh_state.replace(memory=fresh_state.memory.at[0x500].set(0xAB).at[0x501].set(0xCD))
        state = execute(state, 0xA500)

        state = execute(state, 0xF065)

        assert state.V[0] == 0xAB
        assert state.V[1] == 0


class TestKeyWait:
    """Test FX0A at the instruction level."""

    def test_wait_for_key_blocking(self, fresh_state):
        """FX0A with no key down holds pc and enters the awaiting-key state."""
        state = execute(fresh_state, 0xF30A)

        assert state.pc == 0x200
        assert state.awaiting_key
        assert state.key_register == 3

    def test_wait_for_key_pressed(self, fresh_state):
        """FX0A with a key down stores it and continues."""
        state = fresh_state.replace(keypad=fresh_state.keypad.at[7].set(True))

        state = execute(state, 0xF00A)

        assert state.V[0] == 7
        assert state.pc == 0x202
        assert not state.awaiting_key

    def test_wait_for_key_lowest_index(self, fresh_state):
        """FX0A picks the lowest pressed key."""
        state = fresh_state.replace(keypad=fresh_state.keypad.at[0xC].set(True).at[0x4].set(True))

        state = execute(state, 0xF50A)

        assert state.V[5] == 4
