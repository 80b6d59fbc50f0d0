"""Main CHIP-8 emulator execution engine."""

from collections import deque
from typing import Any, Deque, Dict, Iterable, List, Optional, Set, Tuple

import jax
import jax.numpy as jnp

from chip8vm.config import EmulatorConfig
from chip8vm.constants import ADDRESS_MASK, MAX_ROM_SIZE, NUM_KEYS, PROGRAM_START, TIMER_HZ, TIMER_PERIOD
from chip8vm.debug import snapshot
from chip8vm.decode import DecodedInstruction, decode
from chip8vm.dispatch import resolve
from chip8vm.errors import MachineHaltedError, RomTooLargeError, StackError
from chip8vm.instructions import PcUpdate
from chip8vm.instructions.misc import first_pressed_key
from chip8vm.logging import ConsoleCallback, ConsoleLogger, EngineCallback
from chip8vm.state import EmulatorState, create_state
from chip8vm.timers import tick_timers, timers_idle

_PC_STEP = {PcUpdate.ADVANCE: 2, PcUpdate.SKIP: 4}

# Most recent unknown-opcode hits kept for diagnostics
UNKNOWN_OPCODE_HISTORY = 32


def fetch(state: EmulatorState) -> int:
    """Read the big-endian instruction word at pc without moving pc."""
    pc = int(state.pc) & ADDRESS_MASK
    high = int(state.memory[pc])
    low = int(state.memory[(pc + 1) & ADDRESS_MASK])
    return (high << 8) | low


def advance(state: EmulatorState, update: PcUpdate) -> EmulatorState:
    """Move pc past the executed instruction unless the handler already did."""
    if update == PcUpdate.HANDLED:
        return state
    return state.set_pc((int(state.pc) + _PC_STEP[update]) & ADDRESS_MASK)


def execute_decoded(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, bool]:
    """Run one decoded instruction located at pc.

    Returns the new state and whether a handler exists for the instruction;
    unknown instructions only advance pc.
    """
    handler = resolve(instruction)
    if handler is None:
        return advance(state, PcUpdate.ADVANCE), False
    state, update = handler(state, instruction)
    return advance(state, update), True


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction as if it were stored at pc."""
    state, _ = execute_decoded(state, decode(instruction))
    return state


def complete_key_wait(state: EmulatorState) -> EmulatorState:
    """Finish a pending FX0A once a key is down; otherwise hold pc."""
    key = first_pressed_key(state)
    if key < 0:
        return state
    state = state.set_register(state.key_register, key).replace(awaiting_key=False)
    return advance(state, PcUpdate.ADVANCE)


def load_rom(state: EmulatorState, rom_data: bytes) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    if len(rom_data) > MAX_ROM_SIZE:
        raise RomTooLargeError(
            f"ROM is {len(rom_data)} bytes, at most {MAX_ROM_SIZE} fit above 0x{PROGRAM_START:03X}"
        )
    if not rom_data:
        return state
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom_file(state: EmulatorState, filename: str) -> EmulatorState:
    """Read a ROM file and load it at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_rom(state, rom_data)


class Chip8:
    """Cycle engine owning the machine state of one emulation session.

    The host loop drives it with two calls per frame: ``step()`` repeated
    ``cycles_per_tick`` times, then ``decay_timers()``. ``run_frame()``
    bundles both.
    """

    def __init__(
        self,
        config: Optional[EmulatorConfig] = None,
        callbacks: Optional[List[EngineCallback]] = None,
        logger: Optional[ConsoleLogger] = None,
    ):
        self.config = (config or EmulatorConfig()).validate()
        self.logger = logger or ConsoleLogger("chip8vm", log_level=self.config.log_level)
        self.callbacks = callbacks if callbacks is not None else [ConsoleCallback(self.logger)]
        self.state = create_state(
            jax.random.PRNGKey(self.config.seed),
            legacy_mode=self.config.legacy_mode,
            shift_quirk=self.config.shift_quirk,
            jump_quirk=self.config.jump_quirk,
        )
        self.cycles = 0
        self.halted = False
        self.fault: Optional[StackError] = None
        self.unknown_opcodes: Deque[Tuple[int, int]] = deque(maxlen=UNKNOWN_OPCODE_HISTORY)
        self.unknown_opcode_count = 0
        self._reported_unknown: Set[Tuple[int, int]] = set()
        self._timer_accumulator = 0.0

    @property
    def cycles_per_tick(self) -> int:
        """Instructions to run between two 60 Hz timer ticks."""
        return max(1, self.config.clock_rate // TIMER_HZ)

    def load_rom(self, rom_data: bytes) -> None:
        self.state = load_rom(self.state, rom_data)
        self.logger.info(f"Loaded {len(rom_data)} bytes at 0x{PROGRAM_START:03X}")

    def load_rom_file(self, filename: str) -> None:
        self.state = load_rom_file(self.state, filename)
        self.logger.info(f"Loaded {filename}")

    def set_key(self, key: int, pressed: bool) -> None:
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"key index must be in [0, {NUM_KEYS}), got {key}")
        self.state = self.state.replace(keypad=self.state.keypad.at[key].set(pressed))

    def set_keypad(self, keys: Iterable[bool]) -> None:
        keypad = jnp.asarray(list(keys), dtype=jnp.bool_)
        if keypad.shape != (NUM_KEYS,):
            raise ValueError(f"expected {NUM_KEYS} key states, got shape {keypad.shape}")
        self.state = self.state.replace(keypad=keypad)

    def acknowledge_frame(self) -> None:
        """Clear the draw flag; called by the renderer after it repaints."""
        self.state = self.state.replace(draw_flag=False)

    def step(self) -> None:
        """Run exactly one fetch-decode-execute cycle.

        A stack fault halts the machine: the state from before the faulting
        instruction is kept, the error is re-raised, and every later call
        raises MachineHaltedError.
        """
        if self.halted:
            raise MachineHaltedError("machine halted after a fatal fault") from self.fault

        state = self.state
        if state.awaiting_key:
            self.state = complete_key_wait(state)
            self.cycles += 1
            return

        pc = int(state.pc)
        instruction = fetch(state)
        for callback in self.callbacks:
            callback.on_cycle(pc, instruction)

        try:
            new_state, known = execute_decoded(state, decode(instruction))
        except StackError as e:
            self.halted = True
            self.fault = e
            for callback in self.callbacks:
                callback.on_fault(pc, e)
            raise

        if not known:
            self._record_unknown(pc, instruction)

        self.state = new_state
        self.cycles += 1

    def _record_unknown(self, pc: int, instruction: int) -> None:
        """Count every hit, keep the latest few, report each (pc, word) once."""
        self.unknown_opcode_count += 1
        self.unknown_opcodes.append((pc, instruction))
        if (pc, instruction) in self._reported_unknown:
            return
        self._reported_unknown.add((pc, instruction))
        for callback in self.callbacks:
            callback.on_unknown_opcode(pc, instruction)

    def decay_timers(self, elapsed: float = TIMER_PERIOD) -> bool:
        """Decrement both timers once per completed 1/60 s in ``elapsed``.

        Leftover time is carried to the next call. Returns True when the
        sound timer went from nonzero to zero during this call.
        """
        if elapsed < 0:
            raise ValueError(f"elapsed time cannot be negative, got {elapsed}")
        self._timer_accumulator += elapsed
        ticks = int(self._timer_accumulator * TIMER_HZ + 1e-9)
        if ticks == 0:
            return False
        self._timer_accumulator = max(0.0, self._timer_accumulator - ticks * TIMER_PERIOD)

        tone_stopped = False
        for _ in range(ticks):
            if timers_idle(self.state):
                break
            self.state, stopped = tick_timers(self.state)
            tone_stopped = tone_stopped or stopped

        if tone_stopped:
            for callback in self.callbacks:
                callback.on_tone_stop()
        return tone_stopped

    def run_frame(self, elapsed: float = TIMER_PERIOD) -> bool:
        """Run one frame's worth of cycles, then decay the timers."""
        for _ in range(self.cycles_per_tick):
            self.step()
        return self.decay_timers(elapsed)

    def dump_state(self) -> Dict[str, Any]:
        """Snapshot of the machine plus engine bookkeeping."""
        dump = snapshot(self.state)
        dump.update(
            cycles=self.cycles,
            halted=self.halted,
            fault=str(self.fault) if self.fault else None,
            unknown_opcodes=[[pc, instruction] for pc, instruction in self.unknown_opcodes],
            unknown_opcode_count=self.unknown_opcode_count,
            clock_rate=self.config.clock_rate,
        )
        return dump
