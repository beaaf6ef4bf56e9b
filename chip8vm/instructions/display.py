"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, MEMORY_SIZE, FLAG_REGISTER

# Pre-computed sprite cell offsets: 15 rows of 8 pixels.
MAX_SPRITE_ROWS = 15
rows, cols = jnp.meshgrid(jnp.arange(MAX_SPRITE_ROWS), jnp.arange(8), indexing='ij')


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - XOR an N-row sprite from memory at I onto (VX, VY), VF = collision.

    Every pixel wraps around both screen edges independently.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32)
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32)

    addresses = (jnp.astype(state.I, jnp.int32) + rows[:, 0]) % MEMORY_SIZE
    sprite_bytes = state.memory[addresses][:, None]
    bits = ((sprite_bytes >> (7 - cols)) & 1).astype(jnp.bool_) & (rows < instruction.n)

    xs = (sprite_x + cols) % SCREEN_WIDTH
    ys = (sprite_y + rows) % SCREEN_HEIGHT
    # 8x15 cells never overlap after wrapping, so a plain scatter is exact.
    sprite = jnp.zeros_like(state.display).at[xs, ys].set(bits)

    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    )
