"""Diagnostics: state snapshots and instruction disassembly."""

from typing import Any, Dict

import numpy as np

from chip8vm.decode import decode
from chip8vm.state import EmulatorState

_ALU_MNEMONICS = {
    0x0: "LD", 0x1: "OR", 0x2: "AND", 0x3: "XOR", 0x4: "ADD",
    0x5: "SUB", 0x6: "SHR", 0x7: "SUBN", 0xE: "SHL",
}

_MISC_FORMATS = {
    0x07: "LD V{x:X}, DT",
    0x0A: "LD V{x:X}, K",
    0x15: "LD DT, V{x:X}",
    0x18: "LD ST, V{x:X}",
    0x1E: "ADD I, V{x:X}",
    0x29: "LD F, V{x:X}",
    0x33: "LD B, V{x:X}",
    0x55: "LD [I], V{x:X}",
    0x65: "LD V{x:X}, [I]",
}


def disassemble(instruction: int) -> str:
    """Render an instruction word as its mnemonic, ``???`` when unknown."""
    d = decode(instruction)

    if d.opcode == 0x0:
        return {0xE0: "CLS", 0xEE: "RET"}.get(d.kk, f"??? {d.raw:04X}")
    if d.opcode == 0x1:
        return f"JP {d.nnn:03X}"
    if d.opcode == 0x2:
        return f"CALL {d.nnn:03X}"
    if d.opcode == 0x3:
        return f"SE V{d.x:X}, {d.kk:02X}"
    if d.opcode == 0x4:
        return f"SNE V{d.x:X}, {d.kk:02X}"
    if d.opcode == 0x5:
        return f"SE V{d.x:X}, V{d.y:X}"
    if d.opcode == 0x6:
        return f"LD V{d.x:X}, {d.kk:02X}"
    if d.opcode == 0x7:
        return f"ADD V{d.x:X}, {d.kk:02X}"
    if d.opcode == 0x8:
        if d.n not in _ALU_MNEMONICS:
            return f"??? {d.raw:04X}"
        return f"{_ALU_MNEMONICS[d.n]} V{d.x:X}, V{d.y:X}"
    if d.opcode == 0x9:
        return f"SNE V{d.x:X}, V{d.y:X}"
    if d.opcode == 0xA:
        return f"LD I, {d.nnn:03X}"
    if d.opcode == 0xB:
        return f"JP V0, {d.nnn:03X}"
    if d.opcode == 0xC:
        return f"RND V{d.x:X}, {d.kk:02X}"
    if d.opcode == 0xD:
        return f"DRW V{d.x:X}, V{d.y:X}, {d.n:X}"
    if d.opcode == 0xE:
        return {0x9E: f"SKP V{d.x:X}", 0xA1: f"SKNP V{d.x:X}"}.get(d.kk, f"??? {d.raw:04X}")
    if d.kk in _MISC_FORMATS:
        return _MISC_FORMATS[d.kk].format(x=d.x)
    return f"??? {d.raw:04X}"


def snapshot(state: EmulatorState) -> Dict[str, Any]:
    """Read-only copy of every machine field as plain Python values.

    The result is JSON-serialisable; the display is flattened row-major
    (``y * 64 + x``) with one 0/1 entry per pixel.
    """
    return {
        "pc": int(state.pc),
        "i_register": int(state.I),
        "registers": [int(v) for v in np.asarray(state.V)],
        "stack": [int(v) for v in np.asarray(state.stack.data)],
        "stack_pointer": int(state.stack.pointer),
        "delay_timer": int(state.delay_timer),
        "sound_timer": int(state.sound_timer),
        "keypad": [bool(k) for k in np.asarray(state.keypad)],
        "display": np.asarray(state.display, dtype=np.uint8).ravel().tolist(),
        "draw_flag": bool(state.draw_flag),
        "awaiting_key": bool(state.awaiting_key),
        "memory": np.asarray(state.memory, dtype=np.uint8).tolist(),
        "key_register": int(state.key_register),
        "legacy_mode": bool(state.legacy_mode),
        "shift_quirk": bool(state.shift_quirk),
        "jump_quirk": bool(state.jump_quirk),
    }
