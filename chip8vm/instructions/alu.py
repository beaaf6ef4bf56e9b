"""CHIP-8 ALU operations (8xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import ALU_OPERATIONS, DecodedInstruction, selector_index
from chip8vm.constants import FLAG_REGISTER


def alu_set(vx: int, vy: int, vf: int) -> tuple[int, int]:
    """8XY0 - Set: VX = VY."""
    return vy, vf


def alu_or(vx: int, vy: int, vf: int) -> tuple[int, int]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, vf


def alu_and(vx: int, vy: int, vf: int) -> tuple[int, int]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, vf


def alu_xor(vx: int, vy: int, vf: int) -> tuple[int, int]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, vf


def alu_add(vx: int, vy: int, vf: int) -> tuple[int, int]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.int32) + vy
    carry = jnp.astype(result > 255, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx: int, vy: int, vf: int) -> tuple[int, int]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when there is no borrow."""
    not_borrow = jnp.astype(vx >= vy, jnp.uint8)
    result = (vx - vy) & 0xFF
    return result, not_borrow


def alu_shift_right(vx: int, vy: int, vf: int) -> tuple[int, int]:
    """8XY6 - Shift right: VX >>= 1."""
    shifted_bit = vx & 1
    result = vx >> 1
    return result, shifted_bit


def alu_sub_yx(vx: int, vy: int, vf: int) -> tuple[int, int]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when there is no borrow."""
    not_borrow = jnp.astype(vy >= vx, jnp.uint8)
    result = (vy - vx) & 0xFF
    return result, not_borrow


def alu_shift_left(vx: int, vy: int, vf: int) -> tuple[int, int]:
    """8XYE - Shift left: VX <<= 1."""
    shifted_bit = (vx & 0x80) >> 7
    result = (vx << 1) & 0xFF
    return result, shifted_bit


ALU_INDEX = selector_index(ALU_OPERATIONS, 16)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]
    vf = state.V[FLAG_REGISTER]
    quirks = state.quirks

    def _logic(op):
        def logic(vx, vy, vf):
            result, flag = op(vx, vy, vf)
            if quirks.logic_resets_vf:
                flag = jnp.zeros((), dtype=jnp.uint8)
            return result, flag
        return logic

    def _shift(op):
        def shift(vx, vy, vf):
            if quirks.shift_uses_vy:
                vx = vy
            return op(vx, vy, vf)
        return shift

    # Same order as ALU_OPERATIONS
    result, flag = jax.lax.switch(
        ALU_INDEX[instruction.n],
        [alu_set, _logic(alu_or), _logic(alu_and), _logic(alu_xor), alu_add,
         alu_sub_xy, _shift(alu_shift_right), alu_sub_yx, _shift(alu_shift_left)],
        vx, vy, vf
    )

    new_V = state.V.at[instruction.x].set(jnp.astype(result, jnp.uint8))
    new_V = new_V.at[FLAG_REGISTER].set(jnp.astype(flag, jnp.uint8))
    return state.replace(V=new_V)
