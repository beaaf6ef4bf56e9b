"""Exceptions raised by the CHIP-8 interpreter."""


class Chip8Error(Exception):
    """Base class for every interpreter error."""


class LoadError(Chip8Error):
    """A ROM could not be loaded. The interpreter state is left untouched."""


class RomTooLargeError(LoadError):
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"ROM is {size} bytes, at most {limit} bytes fit in memory")


class DecodeError(Chip8Error):
    """The fetched word is not a known instruction."""

    def __init__(self, opcode: int, pc: int):
        self.opcode = opcode
        self.pc = pc
        super().__init__(f"unknown opcode {opcode:04X} at {pc:03X}")


class BoundsError(Chip8Error):
    """Memory or stack access outside the machine's limits."""

    def __init__(self, opcode: int, address: int, pc: int, reason: str = "memory access out of range"):
        self.opcode = opcode
        self.address = address
        self.pc = pc
        super().__init__(f"{reason}: address {address:#05x} (opcode {opcode:04X} at {pc:03X})")


class StackOverflowError(BoundsError):
    def __init__(self, opcode: int, address: int, pc: int):
        super().__init__(opcode, address, pc, reason="call stack overflow")


class StackUnderflowError(BoundsError):
    def __init__(self, opcode: int, address: int, pc: int):
        super().__init__(opcode, address, pc, reason="return with empty call stack")


class InvalidKeyError(Chip8Error, ValueError):
    def __init__(self, index):
        self.index = index
        super().__init__(f"key index must be an int in 0..15, got {index!r}")


class FaultedError(Chip8Error):
    """tick() was called after a fatal error; reset() clears the fault."""

    def __init__(self, cause: Chip8Error):
        self.cause = cause
        super().__init__(f"interpreter is faulted: {cause}")
