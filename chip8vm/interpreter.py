"""CHIP-8 instruction interpreter: fetch, decode, execute."""

import logging
import random
from enum import Enum
from typing import NamedTuple, Optional

from .constants import (
    DEFAULT_SEED, DISPLAY_H, DISPLAY_W, FLAG_REGISTER, MEMORY_SIZE, STACK_SIZE,
    TRACE,
)
from .errors import (
    AddressOutOfBoundsError, IllegalOpcodeError, NotLoadedError,
    StackOverflowError, StackUnderflowError,
)
from .state import MachineState

logger = logging.getLogger(__name__)


class Dialect(Enum):
    """Interpretation of the ambiguous 8XY6 / 8XYE / BNNN opcodes"""
    ORIGINAL = 'original'       # COSMAC VIP
    SUPER_CHIP = 'super-chip'   # SCHIP / CHIP-48


QUIRKS = {
    Dialect.ORIGINAL: {
        'shift_vx': False,      # 8XY6/8XYE: VX = VY, then shift
        'jump_vx': False,       # BNNN: jump to NNN + V0
    },
    Dialect.SUPER_CHIP: {
        'shift_vx': True,       # 8XY6/8XYE: shift VX in place, VY ignored
        'jump_vx': True,        # BXNN: jump to XNN + VX
    },
}


class Instruction(NamedTuple):
    """Positional fields of a 16-bit opcode"""
    opcode: int
    category: int   # bits 15-12
    x: int          # bits 11-8
    y: int          # bits 7-4
    n: int          # bits 3-0
    nn: int         # bits 7-0
    nnn: int        # bits 11-0


def decode(opcode: int) -> Instruction:
    return Instruction(
        opcode=opcode,
        category=(opcode >> 12) & 0xF,
        x=(opcode >> 8) & 0x0F,
        y=(opcode >> 4) & 0x0F,
        n=opcode & 0x000F,
        nn=opcode & 0x00FF,
        nnn=opcode & 0x0FFF,
    )


def disassemble(opcode: int, dialect: Dialect = Dialect.ORIGINAL) -> str:
    """Disassemble opcode to human-readable string

    BNNN names its offset register according to the dialect.
    """
    ins = decode(opcode)
    op, x, y, n, nn, nnn = ins.category, ins.x, ins.y, ins.n, ins.nn, ins.nnn

    if opcode == 0x00E0:
        return "CLS"
    elif opcode == 0x00EE:
        return "RET"
    elif op == 0x1:
        return f"JP ${nnn:03X}"
    elif op == 0x2:
        return f"CALL ${nnn:03X}"
    elif op == 0x3:
        return f"SE V{x:X}, ${nn:02X}"
    elif op == 0x4:
        return f"SNE V{x:X}, ${nn:02X}"
    elif op == 0x5 and n == 0:
        return f"SE V{x:X}, V{y:X}"
    elif op == 0x6:
        return f"LD V{x:X}, ${nn:02X}"
    elif op == 0x7:
        return f"ADD V{x:X}, ${nn:02X}"
    elif op == 0x8:
        ops = {0: "LD", 1: "OR", 2: "AND", 3: "XOR", 4: "ADD",
               5: "SUB", 6: "SHR", 7: "SUBN", 0xE: "SHL"}
        if n in ops:
            return f"{ops[n]} V{x:X}, V{y:X}"
    elif op == 0x9 and n == 0:
        return f"SNE V{x:X}, V{y:X}"
    elif op == 0xA:
        return f"LD I, ${nnn:03X}"
    elif op == 0xB:
        if QUIRKS[dialect]['jump_vx']:
            return f"JP V{x:X}, ${nnn:03X}"
        return f"JP V0, ${nnn:03X}"
    elif op == 0xC:
        return f"RND V{x:X}, ${nn:02X}"
    elif op == 0xD:
        return f"DRW V{x:X}, V{y:X}, {n}"

    return f"??? ${opcode:04X}"


class Interpreter:
    """CHIP-8 CPU driving a MachineState one instruction at a time

    The random source for CXNN is injected so that a fixed seed replays a
    program exactly. Any object with ``randrange`` works; by default a private
    ``random.Random`` seeded with DEFAULT_SEED is used.
    """

    def __init__(self, state: Optional[MachineState] = None,
                 rng: Optional[random.Random] = None,
                 dialect: Dialect = Dialect.ORIGINAL):
        self.state = state if state is not None else MachineState()
        self.rng = rng if rng is not None else random.Random(DEFAULT_SEED)
        self.dialect = dialect
        self.quirks = QUIRKS[dialect]

    def fetch(self) -> int:
        """Fetch the 16-bit opcode at PC (big-endian), PC is not advanced"""
        s = self.state
        pc = s.program_counter
        if pc < 0 or pc + 1 >= MEMORY_SIZE:
            raise AddressOutOfBoundsError(pc, pc=pc)
        hi = s.memory[pc]
        lo = s.memory[pc + 1]
        logger.log(TRACE, "opcode bytes fetched: %#04X %#04X", hi, lo)
        return (hi << 8) | lo

    def cycle(self) -> Instruction:
        """Execute one CPU cycle: fetch, decode, execute"""
        logger.log(TRACE, "cycle: start")
        s = self.state
        if not s.rom_loaded:
            raise NotLoadedError()

        logger.debug("before fetching: %s", s)
        opcode = self.fetch()
        s.opcode = opcode
        ins = decode(opcode)
        logger.log(TRACE, "decoded: category=%X x=%X y=%X n=%X nn=%02X nnn=%03X",
                   ins.category, ins.x, ins.y, ins.n, ins.nn, ins.nnn)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("$%03X: %04X  %s", s.program_counter, opcode,
                         disassemble(opcode, self.dialect))

        self.execute(ins)
        logger.log(TRACE, "cycle: exit")
        return ins

    def execute(self, ins: Instruction):
        """Decode and execute a single instruction

        All checks run before the first write, so a failing instruction
        leaves the state exactly as it was.
        """
        s = self.state
        V = s.registers
        pc = s.program_counter
        next_pc = pc + 2

        op, x, y, n, nn, nnn = ins.category, ins.x, ins.y, ins.n, ins.nn, ins.nnn

        # ─── 0x0NNN ───
        if op == 0x0:
            if nnn == 0x0E0:
                # 00E0: CLS - Clear display
                s.display.fill(False)
                s.redraw_pending = True

            elif nnn == 0x0EE:
                # 00EE: RET - Return from subroutine
                if s.stack_pointer == 0:
                    raise StackUnderflowError(pc)
                s.stack_pointer -= 1
                next_pc = s.stack[s.stack_pointer]

            else:
                # 0NNN machine code routines are not supported
                raise IllegalOpcodeError(ins.opcode, op, pc)

        # ─── 1NNN: JP addr ───
        elif op == 0x1:
            next_pc = nnn

        # ─── 2NNN: CALL addr ───
        elif op == 0x2:
            if s.stack_pointer >= STACK_SIZE:
                raise StackOverflowError(pc)
            s.stack[s.stack_pointer] = next_pc
            s.stack_pointer += 1
            next_pc = nnn

        # ─── 3XNN: SE Vx, byte ───
        elif op == 0x3:
            if V[x] == nn:
                next_pc += 2

        # ─── 4XNN: SNE Vx, byte ───
        elif op == 0x4:
            if V[x] != nn:
                next_pc += 2

        # ─── 5XY0: SE Vx, Vy ───
        elif op == 0x5:
            if n != 0:
                raise IllegalOpcodeError(ins.opcode, op, pc)
            if V[x] == V[y]:
                next_pc += 2

        # ─── 6XNN: LD Vx, byte ───
        elif op == 0x6:
            V[x] = nn

        # ─── 7XNN: ADD Vx, byte (VF untouched) ───
        elif op == 0x7:
            V[x] = (V[x] + nn) & 0xFF

        # ─── 8XYN: ALU operations ───
        elif op == 0x8:
            self._alu(ins, pc)

        # ─── 9XY0: SNE Vx, Vy ───
        elif op == 0x9:
            if n != 0:
                raise IllegalOpcodeError(ins.opcode, op, pc)
            if V[x] != V[y]:
                next_pc += 2

        # ─── ANNN: LD I, addr ───
        elif op == 0xA:
            s.index_register = nnn

        # ─── BNNN: JP V0, addr ───
        elif op == 0xB:
            if self.quirks['jump_vx']:
                next_pc = nnn + V[x]
            else:
                next_pc = nnn + V[0]

        # ─── CXNN: RND Vx, byte ───
        elif op == 0xC:
            V[x] = self.rng.randrange(256) & nn

        # ─── DXYN: DRW Vx, Vy, nibble ───
        elif op == 0xD:
            self._draw_sprite(V[x], V[y], n, pc)

        else:
            raise IllegalOpcodeError(ins.opcode, pc=pc)

        s.program_counter = next_pc

    def _alu(self, ins: Instruction, pc: int):
        """8XYN register arithmetic; VF is always written last"""
        V = self.state.registers
        x, y, z = ins.x, ins.y, ins.n

        if z == 0x0:
            # 8XY0: LD Vx, Vy
            V[x] = V[y]

        elif z == 0x1:
            # 8XY1: OR Vx, Vy
            V[x] |= V[y]

        elif z == 0x2:
            # 8XY2: AND Vx, Vy
            V[x] &= V[y]

        elif z == 0x3:
            # 8XY3: XOR Vx, Vy
            V[x] ^= V[y]

        elif z == 0x4:
            # 8XY4: ADD Vx, Vy (VF = carry)
            result = V[x] + V[y]
            V[x] = result & 0xFF
            V[FLAG_REGISTER] = 1 if result > 255 else 0

        elif z == 0x5:
            # 8XY5: SUB Vx, Vy (VF = Vx > Vy)
            flag = 1 if V[x] > V[y] else 0
            V[x] = (V[x] - V[y]) & 0xFF
            V[FLAG_REGISTER] = flag

        elif z == 0x6:
            # 8XY6: SHR Vx {, Vy}
            src = x if self.quirks['shift_vx'] else y
            value = V[src]
            V[x] = value >> 1
            V[FLAG_REGISTER] = value & 0x1

        elif z == 0x7:
            # 8XY7: SUBN Vx, Vy (VF = Vy > Vx)
            flag = 1 if V[y] > V[x] else 0
            V[x] = (V[y] - V[x]) & 0xFF
            V[FLAG_REGISTER] = flag

        elif z == 0xE:
            # 8XYE: SHL Vx {, Vy}
            src = x if self.quirks['shift_vx'] else y
            value = V[src]
            V[x] = (value << 1) & 0xFF
            V[FLAG_REGISTER] = (value >> 7) & 0x1

        else:
            raise IllegalOpcodeError(ins.opcode, ins.category, pc)

    def _draw_sprite(self, x: int, y: int, height: int, pc: int):
        """Draw sprite at (x, y) with given height, clipped at the edges"""
        s = self.state
        V = s.registers

        # Wrap the origin, clip the sprite
        x = x % DISPLAY_W
        y = y % DISPLAY_H
        rows = min(height, DISPLAY_H - y)

        last = s.index_register + rows - 1
        if rows > 0 and last >= MEMORY_SIZE:
            raise AddressOutOfBoundsError(last, pc=pc)

        V[FLAG_REGISTER] = 0  # Reset collision flag

        for row in range(rows):
            sprite_byte = s.memory[s.index_register + row]

            for col in range(8):
                if x + col >= DISPLAY_W:
                    break

                if sprite_byte & (0x80 >> col):
                    px = x + col
                    py = y + row

                    # XOR pixel
                    if s.display[py, px]:
                        V[FLAG_REGISTER] = 1  # Collision!

                    s.display[py, px] = not s.display[py, px]

        s.redraw_pending = True

    def update_timers(self):
        """Decrement timers (call at 60Hz)"""
        s = self.state
        if s.delay_timer > 0:
            s.delay_timer -= 1

        if s.sound_timer > 0:
            s.sound_timer -= 1
