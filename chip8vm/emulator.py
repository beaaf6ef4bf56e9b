"""Main CHIP-8 emulator execution engine."""

from collections.abc import Sequence
from numbers import Integral

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import decode
from chip8vm.constants import PROGRAM_START, MAX_ROM_SIZE, NUM_KEYS
from chip8vm.checks import check_fetch, check_instruction
from chip8vm.errors import RomTooLargeError, InvalidKeyError
from chip8vm.instructions.system import execute_system_instruction
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chip8vm.instructions.alu import execute_alu_operation
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import execute_misc_instruction


INSTRUCTION_FAMILIES = [
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_misc_instruction,
]


@jax.jit
def _dispatch(state: EmulatorState, instruction: jnp.ndarray) -> EmulatorState:
    decoded_instruction = decode(instruction)
    return jax.lax.switch(decoded_instruction.opcode, INSTRUCTION_FAMILIES, state, decoded_instruction)


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Check and execute a single instruction against ``state``.

    PC is expected to point past the instruction already, as after ``fetch``;
    errors report the current PC.

    Raises:
        DecodeError: ``instruction`` is not a supported instruction.
        BoundsError: it would touch stack or memory outside the machine.
    """
    instruction = int(instruction)
    check_instruction(state, instruction, int(state.pc))
    return _dispatch(state, instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, int]:
    """Read the big-endian word at PC and advance PC past it.

    Raises:
        BoundsError: the word at PC is not fully inside memory.
    """
    pc = check_fetch(state)
    instruction = int(_pack_u16(state.memory[pc], state.memory[pc + 1]))
    return state.replace(pc=state.pc + 2), instruction


def step(state: EmulatorState) -> tuple[EmulatorState, int]:
    """Run one checked fetch-decode-execute cycle.

    Returns the new state and the raw instruction that ran. On error the
    input state is left as it was, PC still on the offending instruction.

    Raises:
        DecodeError: unknown instruction at PC.
        BoundsError: fetch, stack or memory access out of range.
    """
    pc = int(state.pc)
    fetched, instruction = fetch(state)
    check_instruction(fetched, instruction, pc)
    return _dispatch(fetched, instruction), instruction


def decrement_timers(state: EmulatorState) -> EmulatorState:
    """Count both timers down by one, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def set_key(state: EmulatorState, index: int, pressed: bool) -> EmulatorState:
    """Record a key press or release on the 16-key pad."""
    if isinstance(index, bool) or not isinstance(index, Integral) or not 0 <= index < NUM_KEYS:
        raise InvalidKeyError(index)
    return state.replace(keypad=state.keypad.at[int(index)].set(bool(pressed)))


def load_rom(state: EmulatorState, rom: bytes | Sequence[int]) -> EmulatorState:
    """Copy ROM bytes into CHIP-8 memory starting at 0x200."""
    rom_data = bytes(rom)
    if len(rom_data) > MAX_ROM_SIZE:
        raise RomTooLargeError(len(rom_data), MAX_ROM_SIZE)
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)


def read_rom(filename: str) -> bytes:
    """Read a ROM image from disk."""
    with open(filename, 'rb') as f:
        return f.read()
