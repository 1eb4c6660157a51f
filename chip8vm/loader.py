"""Copy ROM images into machine memory."""

import logging
import os

from .constants import MAX_ROM_SIZE, PROGRAM_START, TRACE
from .errors import RomIoError, RomTooLargeError
from .state import MachineState

logger = logging.getLogger(__name__)


def load_rom(state: MachineState, data: bytes) -> int:
    """Load ROM data into memory at 0x200

    Registers and display are left alone; a fresh MachineState is expected.
    """
    logger.log(TRACE, "load_rom: start")
    size = len(data)
    if size > MAX_ROM_SIZE:
        raise RomTooLargeError(size, MAX_ROM_SIZE)

    state.memory[PROGRAM_START:PROGRAM_START + size] = data
    state.rom_loaded = True

    logger.log(TRACE, "load_rom: exit")
    return size


def load_rom_file(state: MachineState, filepath) -> int:
    """Load ROM from file"""
    path = os.fspath(filepath)
    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise RomIoError(path, e.strerror or str(e)) from e

    size = load_rom(state, data)
    logger.info("Loaded ROM %s (%d bytes)", path, size)
    return size
