"""Host-facing CHIP-8 interpreter.

``Chip8`` owns one ``EmulatorState`` and exposes the operations a host shell
needs: reset, load, tick, timer decrement, key updates and display reads.
The functional core stays pure; this class adds the fault latch and logging.
"""

from collections.abc import Sequence
from typing import Optional

import jax
import jax.numpy as jnp

from chip8vm import emulator
from chip8vm.errors import Chip8Error, FaultedError, LoadError
from chip8vm.logging import ConsoleLogger
from chip8vm.quirks import Quirks
from chip8vm.stack import frames
from chip8vm.state import EmulatorState, create_state


class Chip8:
    """One independent CHIP-8 machine.

    Args:
        quirks: Instruction variants to emulate.
        seed: Seed for the random-byte instruction, used when ``rng`` is not given.
        rng: Explicit JAX PRNG key for the random-byte instruction.
        logger: Where lifecycle events and faults are reported.
    """

    def __init__(
        self,
        quirks: Quirks = Quirks(),
        seed: int = 0,
        rng: Optional[jax.Array] = None,
        logger: Optional[ConsoleLogger] = None,
    ):
        self.quirks = quirks
        self._rng = rng if rng is not None else jax.random.PRNGKey(seed)
        self.logger = logger if logger is not None else ConsoleLogger(name="chip8vm", log_level="WARNING")
        self._state = create_state(self._rng, quirks)
        self._fault: Optional[Chip8Error] = None
        self.cycles = 0

    # Lifecycle

    def reset(self) -> None:
        """Return every part of the machine to its power-on state."""
        self._state = create_state(self._rng, self.quirks)
        self._fault = None
        self.cycles = 0
        self.logger.debug("Reset to power-on state")

    def load(self, rom: bytes | Sequence[int]) -> None:
        """Copy a ROM image to 0x200.

        Raises:
            RomTooLargeError: the image does not fit; the machine is unchanged.
        """
        data = bytes(rom)
        try:
            self._state = emulator.load_rom(self._state, data)
        except LoadError as e:
            self.logger.warning(f"ROM rejected: {e}")
            raise
        self.logger.debug(f"Loaded {len(data)} byte ROM")

    def load_file(self, filename: str) -> None:
        """Read a ROM image from disk and load it."""
        self.load(emulator.read_rom(filename))

    # Execution

    def tick(self) -> int:
        """Execute exactly one instruction and return its raw opcode.

        Raises:
            DecodeError, BoundsError: the instruction cannot run; the machine
                is faulted until ``reset``.
            FaultedError: the machine already faulted.
        """
        if self._fault is not None:
            raise FaultedError(self._fault)
        try:
            self._state, instruction = emulator.step(self._state)
        except Chip8Error as e:
            self._fault = e
            self.logger.error(f"Fault after {self.cycles} cycles: {e}")
            raise
        self.cycles += 1
        return instruction

    def decrement_timers(self) -> None:
        """Count delay and sound timers down by one; call at ~60Hz."""
        self._state = emulator.decrement_timers(self._state)

    def run_frame(self, ticks: int = 10) -> None:
        """Run ``ticks`` instructions followed by one timer decrement."""
        for _ in range(ticks):
            self.tick()
        self.decrement_timers()

    # Input / output

    def set_key(self, index: int, pressed: bool) -> None:
        """Press or release key ``index`` (0x0-0xF).

        Raises:
            InvalidKeyError: ``index`` is not a key on the pad.
        """
        self._state = emulator.set_key(self._state, index, pressed)

    def read_display(self) -> jnp.ndarray:
        """Current framebuffer as an immutable (64, 32) boolean array indexed [x, y]."""
        return self._state.display

    def sound_active(self) -> bool:
        """Whether the host should be sounding the tone."""
        return bool(self._state.sound_timer > 0)

    # Introspection

    @property
    def state(self) -> EmulatorState:
        return self._state

    @property
    def faulted(self) -> bool:
        return self._fault is not None

    @property
    def fault(self) -> Optional[Chip8Error]:
        return self._fault

    @property
    def pc(self) -> int:
        return int(self._state.pc)

    @property
    def index(self) -> int:
        return int(self._state.I)

    @property
    def registers(self) -> list[int]:
        return [int(v) for v in self._state.V]

    @property
    def delay_timer(self) -> int:
        return int(self._state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self._state.sound_timer)

    @property
    def stack(self) -> list[int]:
        return frames(self._state.stack)

    @property
    def waiting_for_key(self) -> bool:
        return bool(self._state.waiting_for_key)
