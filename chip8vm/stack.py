"""CHIP-8 stack operations.

Depth is checked before execution (see ``chip8vm.checks``); these helpers
assume the push or pop is legal.
"""

import jax.numpy as jnp
from chip8vm.constants import ADDRESS_MASK
from chip8vm.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack."""
    masked_address = jnp.astype(address & ADDRESS_MASK, jnp.uint16)
    new_data = stack.data.at[stack.pointer].set(masked_address)
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    new_pointer = stack.pointer - 1
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address


def depth(stack: StackState) -> int:
    """Number of return addresses currently stored."""
    return int(stack.pointer)


def frames(stack: StackState) -> list[int]:
    """Stored return addresses, oldest first."""
    return [int(address) for address in stack.data[:depth(stack)]]
