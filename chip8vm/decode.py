"""Instruction word decoding.

A CHIP-8 word is read as four nibbles ``F X Y N``. Operands are named as in
the usual mnemonic tables: ``nnn`` is a 12-bit address, ``kk`` a byte
immediate and ``n`` a nibble immediate.
"""

from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Operand fields of one instruction word."""
    raw: int
    opcode: int  # F: instruction family, top nibble
    x: int       # X: first register index
    y: int       # Y: second register index
    n: int       # N: low nibble, sprite height or ALU sub-opcode
    kk: int      # low byte, immediate or 0/E/F sub-opcode
    nnn: int     # low 12 bits, address


def decode(instruction: int) -> DecodedInstruction:
    """Split a 16-bit word into its operand fields; pc is not involved."""
    word = int(instruction) & 0xFFFF
    return DecodedInstruction(
        raw=word,
        opcode=word >> 12,
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
        n=word & 0xF,
        kk=word & 0xFF,
        nnn=word & 0xFFF,
    )
