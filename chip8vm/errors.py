"""Errors raised by the CHIP-8 core.

Every error is fatal for the run: the interpreter never patches around a
malformed program, it raises and lets the host decide how to report it.
"""

from typing import Optional


class Chip8Error(Exception):
    """Base class for every CHIP-8 failure"""


class RomIoError(Chip8Error):
    """ROM file could not be read"""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot read ROM {path!r}: {reason}")


class RomTooLargeError(Chip8Error):
    """ROM does not fit in the 0x200-0xFFF program region"""

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(f"ROM is {size} bytes, program space holds {capacity}")


class IllegalOpcodeError(Chip8Error):
    """No instruction matches the fetched opcode"""

    def __init__(self, opcode: int, category: Optional[int] = None,
                 pc: Optional[int] = None):
        self.opcode = opcode
        self.category = category
        self.pc = pc
        msg = f"illegal opcode ${opcode:04X}"
        if category is not None:
            msg += f" in category ${category:X}"
        if pc is not None:
            msg += f" at ${pc:03X}"
        super().__init__(msg)


class StackOverflowError(Chip8Error):
    """CALL with all 16 stack levels in use"""

    def __init__(self, pc: int):
        self.pc = pc
        super().__init__(f"stack overflow on CALL at ${pc:03X}")


class StackUnderflowError(Chip8Error):
    """RET with an empty stack"""

    def __init__(self, pc: int):
        self.pc = pc
        super().__init__(f"stack underflow on RET at ${pc:03X}")


class AddressOutOfBoundsError(Chip8Error):
    """Memory access outside 0x000-0xFFF"""

    def __init__(self, address: int, pc: Optional[int] = None):
        self.address = address
        self.pc = pc
        msg = f"address ${address:04X} is outside memory"
        if pc is not None:
            msg += f" (PC ${pc:03X})"
        super().__init__(msg)


class NotLoadedError(Chip8Error):
    """Execution requested before a ROM was loaded"""

    def __init__(self):
        super().__init__("ROM is not loaded")


class InvalidStepInputError(Chip8Error):
    """Single-step confirmation was neither advance nor terminate"""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"illegal step input {value!r}, expected 'n' or 'q'")
