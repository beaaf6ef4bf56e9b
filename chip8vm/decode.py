"""CHIP-8 instruction decoding."""

import jax.numpy as jnp
import numpy as np
from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )


# Selector tables for the families that share a first nibble.
SYSTEM_INSTRUCTIONS = {0x00E0: "CLS", 0x00EE: "RET"}
ALU_OPERATIONS = {
    0x0: "LD", 0x1: "OR", 0x2: "AND", 0x3: "XOR", 0x4: "ADD",
    0x5: "SUB", 0x6: "SHR", 0x7: "SUBN", 0xE: "SHL",
}
KEY_OPERATIONS = {0x9E: "SKP", 0xA1: "SKNP"}
MISC_OPERATIONS = {
    0x07: "LD Vx, DT", 0x0A: "LD Vx, K", 0x15: "LD DT, Vx", 0x18: "LD ST, Vx",
    0x1E: "ADD I, Vx", 0x29: "LD F, Vx", 0x33: "LD B, Vx", 0x55: "LD [I], Vx",
    0x65: "LD Vx, [I]",
}
SIMPLE_MNEMONICS = {
    0x1: "JP", 0x2: "CALL", 0x3: "SE", 0x4: "SNE", 0x6: "LD", 0x7: "ADD",
    0xA: "LD I", 0xB: "JP V0", 0xC: "RND", 0xD: "DRW",
}


def mnemonic(instruction: int) -> str | None:
    """Name of the instruction encoded by a 16-bit word, or None if it is not one."""
    decoded = decode(instruction)
    if decoded.opcode == 0x0:
        return SYSTEM_INSTRUCTIONS.get(instruction)
    if decoded.opcode in (0x5, 0x9):
        if decoded.n != 0:
            return None
        return "SE" if decoded.opcode == 0x5 else "SNE"
    if decoded.opcode == 0x8:
        return ALU_OPERATIONS.get(decoded.n)
    if decoded.opcode == 0xE:
        return KEY_OPERATIONS.get(decoded.nn)
    if decoded.opcode == 0xF:
        return MISC_OPERATIONS.get(decoded.nn)
    return SIMPLE_MNEMONICS[decoded.opcode]


def is_valid(instruction: int) -> bool:
    """Whether a 16-bit word decodes to a supported instruction."""
    return mnemonic(instruction) is not None


def selector_index(selectors: dict, size: int) -> jnp.ndarray:
    """Table mapping each selector value to its position in ``selectors``.

    Instruction families use it to pick a ``lax.switch`` branch. Unknown
    selectors map to 0; they are rejected before execution.
    """
    table = np.zeros(size, dtype=np.int32)
    for position, selector in enumerate(selectors):
        table[selector] = position
    return jnp.asarray(table)
