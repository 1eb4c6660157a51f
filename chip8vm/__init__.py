"""CHIP-8 virtual machine: machine state, loader, interpreter and scheduler."""

from .errors import (
    AddressOutOfBoundsError, Chip8Error, IllegalOpcodeError,
    InvalidStepInputError, NotLoadedError, RomIoError, RomTooLargeError,
    StackOverflowError, StackUnderflowError,
)
from .interpreter import Dialect, Instruction, Interpreter, decode, disassemble
from .loader import load_rom, load_rom_file
from .scheduler import Scheduler, SystemClock
from .state import MachineState

__version__ = "0.1.0"

__all__ = [
    "AddressOutOfBoundsError", "Chip8Error", "Dialect", "IllegalOpcodeError",
    "Instruction", "Interpreter", "InvalidStepInputError", "MachineState",
    "NotLoadedError", "RomIoError", "RomTooLargeError", "Scheduler",
    "StackOverflowError", "StackUnderflowError", "SystemClock", "decode",
    "disassemble", "load_rom", "load_rom_file",
]
