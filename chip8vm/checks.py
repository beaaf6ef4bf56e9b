"""Pre-execution checks for fatal conditions.

Instruction handlers are traced JAX functions and cannot raise, so every
condition that must stop the machine is checked here on concrete values,
before the instruction runs.
"""

from chip8vm.constants import MEMORY_SIZE, STACK_SIZE
from chip8vm.decode import DecodedInstruction, decode, is_valid
from chip8vm.errors import BoundsError, DecodeError, StackOverflowError, StackUnderflowError
from chip8vm.instructions.control_flow import jump_with_offset_target
from chip8vm.state import EmulatorState


def check_fetch(state: EmulatorState) -> int:
    """Return PC, raising if the instruction word at PC is not fully in memory."""
    pc = int(state.pc)
    if pc + 1 >= MEMORY_SIZE:
        raise BoundsError(0, pc, pc, reason="instruction fetch out of range")
    return pc


def _check_span(instruction: DecodedInstruction, start: int, length: int, pc: int) -> None:
    end = start + length - 1
    if end >= MEMORY_SIZE:
        raise BoundsError(instruction.raw, end, pc)


def check_instruction(state: EmulatorState, instruction: int, pc: int) -> DecodedInstruction:
    """Decode an instruction fetched from ``pc`` and verify it can run.

    Raises:
        DecodeError: the word is not a supported instruction.
        BoundsError: the instruction would touch memory or stack outside the machine.
    """
    if not is_valid(instruction):
        raise DecodeError(instruction, pc)
    decoded = decode(instruction)
    depth = int(state.stack.pointer)

    if decoded.opcode == 0x2 and depth >= STACK_SIZE:
        raise StackOverflowError(instruction, decoded.nnn, pc)
    if instruction == 0x00EE and depth == 0:
        raise StackUnderflowError(instruction, pc, pc)
    if decoded.opcode == 0xB:
        target = int(jump_with_offset_target(state, decoded))
        if target >= MEMORY_SIZE:
            raise BoundsError(instruction, target, pc, reason="jump target out of range")
    if decoded.opcode == 0xD:
        _check_span(decoded, int(state.I), decoded.n, pc)
    if decoded.opcode == 0xF:
        if decoded.nn == 0x33:
            _check_span(decoded, int(state.I), 3, pc)
        elif decoded.nn in (0x55, 0x65):
            _check_span(decoded, int(state.I), decoded.x + 1, pc)
    return decoded
