"""CHIP-8 virtual machine package."""

from chip8vm.constants import *
from chip8vm.quirks import Quirks
from chip8vm.state import EmulatorState, create_state
from chip8vm.emulator import execute, load_rom, fetch, step, decrement_timers, set_key
from chip8vm.decode import DecodedInstruction, decode
from chip8vm.errors import (
    Chip8Error, LoadError, RomTooLargeError, DecodeError, BoundsError,
    StackOverflowError, StackUnderflowError, InvalidKeyError, FaultedError,
)
from chip8vm.interpreter import Chip8
from chip8vm.rendering import display_to_rgb, display_to_text, create_color_scheme

__all__ = [
    "Chip8",
    "Quirks",
    "EmulatorState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "load_rom",
    "decrement_timers",
    "set_key",
    "DecodedInstruction",
    "decode",
    "Chip8Error",
    "LoadError",
    "RomTooLargeError",
    "DecodeError",
    "BoundsError",
    "StackOverflowError",
    "StackUnderflowError",
    "InvalidKeyError",
    "FaultedError",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "MAX_ROM_SIZE",
    "KEY_LAYOUT",
    "key_for",
    "display_to_rgb",
    "display_to_text",
    "create_color_scheme",
]
