"""Complete machine state of the CHIP-8 virtual machine."""

from dataclasses import dataclass, field
from typing import List

import numpy as np

from .constants import (
    DISPLAY_H, DISPLAY_W, FONT_START, FONTSET, MEMORY_SIZE, NUM_REGISTERS,
    PROGRAM_START, STACK_SIZE,
)


def _memory_with_font() -> bytearray:
    memory = bytearray(MEMORY_SIZE)
    memory[FONT_START:FONT_START + len(FONTSET)] = bytes(FONTSET)
    return memory


def _hex_list(values) -> str:
    return "[" + ", ".join(f"{v:#X}" for v in values) + "]"


def frame_to_text(framebuffer: np.ndarray) -> str:
    """(height, width) boolean frame as '0'/'1' lines"""
    return "\n".join("".join("1" if px else "0" for px in row)
                     for row in framebuffer)


@dataclass
class MachineState:
    """CHIP-8 machine state container

    Owned by a single interpreter. Only the loader and the interpreter write
    to it; everything below is a read-only view.
    """
    # Memory (font preloaded at 0x000)
    memory: bytearray = field(default_factory=_memory_with_font)

    # Registers
    registers: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)  # V0-VF
    index_register: int = 0                 # I
    program_counter: int = PROGRAM_START    # PC

    # Stack
    stack: List[int] = field(default_factory=lambda: [0] * STACK_SIZE)
    stack_pointer: int = 0

    # Timers (60Hz)
    delay_timer: int = 0
    sound_timer: int = 0

    # Display (64x32), row-major
    display: np.ndarray = field(
        default_factory=lambda: np.zeros((DISPLAY_H, DISPLAY_W), dtype=bool))

    # Flags
    rom_loaded: bool = False
    redraw_pending: bool = False

    # Last fetched opcode, for diagnostics
    opcode: int = 0

    def display_snapshot(self) -> np.ndarray:
        """Read-only copy of the 64x32 pixel grid"""
        snapshot = self.display.copy()
        snapshot.flags.writeable = False
        return snapshot

    def dump_display(self) -> str:
        """Display as 32 lines of 64 '0'/'1' characters"""
        return frame_to_text(self.display)

    def dump_registers(self) -> str:
        return _hex_list(self.registers)

    def dump_stack(self) -> str:
        return _hex_list(self.stack)

    def dump_memory(self) -> str:
        return _hex_list(self.memory)

    def __str__(self) -> str:
        # memory and display are elided, they are too long for a log line
        return (
            f"MachineState(rom_loaded: {self.rom_loaded}, "
            f"opcode: {self.opcode:#06X}, V: {self.dump_registers()}, "
            f"I: {self.index_register:#X}, PC: {self.program_counter:#X}, "
            f"redraw: {self.redraw_pending}, stack: {self.dump_stack()}, "
            f"SP: {self.stack_pointer}, DT: {self.delay_timer:#X}, "
            f"ST: {self.sound_timer:#X})"
        )
