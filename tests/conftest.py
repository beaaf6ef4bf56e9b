"""Shared fixtures and helpers for the chip8vm tests."""

import jax.numpy as jnp
import pytest
from chip8vm import Chip8, Quirks, create_state


@pytest.fixture
def state():
    """Power-on state with the default quirks."""
    return create_state()


@pytest.fixture
def machine():
    """Power-on interpreter with the default quirks."""
    return Chip8()


def rom(*words):
    """Assemble 16-bit instruction words into big-endian ROM bytes."""
    return b"".join(word.to_bytes(2, "big") for word in words)


def run(*words, quirks=Quirks(), seed=0, ticks=None):
    """Load ``words`` into a new interpreter and tick once per word, or ``ticks`` times."""
    machine = Chip8(quirks=quirks, seed=seed)
    machine.load(rom(*words))
    for _ in range(len(words) if ticks is None else ticks):
        machine.tick()
    return machine


def with_registers(state, **values):
    """Return ``state`` with registers set, e.g. ``with_registers(s, V1=0x10, I=0x300)``."""
    V = state.V
    for name, value in values.items():
        if name == "I":
            state = state.replace(I=jnp.asarray(value, dtype=jnp.uint16))
        else:
            V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def poke(state, address, data):
    """Write ``data`` bytes into memory at ``address``."""
    return state.replace(
        memory=state.memory.at[address:address + len(data)].set(jnp.array(list(data), dtype=jnp.uint8))
    )


def lit(display):
    """Coordinates of every lit pixel as a set of (x, y)."""
    return {(int(x), int(y)) for x, y in jnp.argwhere(display)}
