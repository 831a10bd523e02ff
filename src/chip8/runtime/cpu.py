import logging as lg
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import chip8.common.ops as ops
from chip8.common.hwconf import (
    ROM_BASE, FONT_BASE, GLYPH_SIZE, GP_REGS, FLAG_REG, STACK_DEPTH, OPCODE_SIZE, SPRITE_WIDTH
)
from chip8.runtime.faults import StackOverflow, StackUnderflow, UnknownOpcode
from chip8.runtime.memory import Memory
from chip8.runtime.peripheral import Keypad, Timers, Display
from chip8.runtime.rng import RandomSource


class Advance(Enum):
    ''' What the step does with PC once a handler returns '''
    NEXT = 'next'       # PC += 2
    SKIP = 'skip'       # PC += 4
    JUMP = 'jump'       # handler has set PC
    REPEAT = 'repeat'   # PC unchanged, same instruction runs again


@dataclass(frozen=True)
class Instruction:
    opcode: int

    @property
    def x(self) -> int:
        return (self.opcode & 0x0F00) >> 8

    @property
    def y(self) -> int:
        return (self.opcode & 0x00F0) >> 4

    @property
    def n(self) -> int:
        return self.opcode & 0x000F

    @property
    def nn(self) -> int:
        return self.opcode & 0x00FF

    @property
    def nnn(self) -> int:
        return self.opcode & 0x0FFF


def skip_if(cond: bool) -> Advance:
    return Advance.SKIP if cond else Advance.NEXT


class CPU():
    pc: int         # Program counter
    i: int          # Address register
    sp: int         # Stack pointer
    v: list[int]    # General purpose registers, VF doubles as flag
    stack: list[int]

    def __init__(self, memory: Memory, keypad: Keypad, timers: Timers, display: Display,
                 rng: RandomSource):
        self.memory = memory
        self.keypad = keypad
        self.timers = timers
        self.display = display
        self.rng = rng

        self.pc = ROM_BASE      # Execution starts at the beginning of the program
        self.i = 0
        self.sp = 0
        self.v = [0] * GP_REGS
        self.stack = [0] * STACK_DEPTH

    # - Helpers - #

    def debug_dump(self):
        state = [f'{k}:{v:X}' for k, v in {
            'PC': self.pc,
            'I': self.i,
            'SP': self.sp,
            'DT': self.timers.delay,
            'ST': self.timers.sound
        }.items()]

        state.extend([f'V{i:X}:{self.v[i]:X}' for i in range(GP_REGS)])

        lg.debug(' '.join(state))

    def do_push(self, val: int):
        if self.sp >= STACK_DEPTH:
            raise StackOverflow(f'Stack overflow @ 0x{self.pc:03X}')

        self.stack[self.sp] = val
        self.sp += 1

    def do_pop(self) -> int:
        if self.sp == 0:
            raise StackUnderflow(f'Stack underflow @ 0x{self.pc:03X}')

        self.sp -= 1
        return self.stack[self.sp]

    def arithm_pair(self, ins: Instruction, op: Callable[[int, int], int]) -> Advance:
        self.v[ins.x] = op(self.v[ins.x], self.v[ins.y]) & 0xFF
        return Advance.NEXT

    def set_with_flag(self, x: int, val: int, flag: bool):
        # Flag is written last so it wins when X is VF
        self.v[x] = val & 0xFF
        self.v[FLAG_REG] = 1 if flag else 0

    # - System and flow - #

    def sys(self, ins: Instruction) -> Advance:
        return Advance.NEXT

    def cls(self, ins: Instruction) -> Advance:
        self.display.clear()
        return Advance.NEXT

    def ret(self, ins: Instruction) -> Advance:
        self.pc = self.do_pop()
        return Advance.JUMP

    def jp(self, ins: Instruction) -> Advance:
        self.pc = ins.nnn
        return Advance.JUMP

    def call(self, ins: Instruction) -> Advance:
        self.do_push(self.pc)
        self.pc = ins.nnn
        return Advance.JUMP

    def jpv(self, ins: Instruction) -> Advance:
        self.pc = self.v[0] + ins.nnn
        return Advance.JUMP

    def se(self, ins: Instruction) -> Advance:
        return skip_if(self.v[ins.x] == ins.nn)

    def sne(self, ins: Instruction) -> Advance:
        return skip_if(self.v[ins.x] != ins.nn)

    def ser(self, ins: Instruction) -> Advance:
        return skip_if(self.v[ins.x] == self.v[ins.y])

    def sner(self, ins: Instruction) -> Advance:
        return skip_if(self.v[ins.x] != self.v[ins.y])

    # - Registers - #

    def ld(self, ins: Instruction) -> Advance:
        self.v[ins.x] = ins.nn
        return Advance.NEXT

    def add(self, ins: Instruction) -> Advance:
        self.v[ins.x] = (self.v[ins.x] + ins.nn) & 0xFF
        return Advance.NEXT

    def mov(self, ins: Instruction) -> Advance:
        return self.arithm_pair(ins, lambda _, b: b)

    def bor(self, ins: Instruction) -> Advance:
        return self.arithm_pair(ins, lambda a, b: a | b)

    def band(self, ins: Instruction) -> Advance:
        return self.arithm_pair(ins, lambda a, b: a & b)

    def xor(self, ins: Instruction) -> Advance:
        return self.arithm_pair(ins, lambda a, b: a ^ b)

    def addr(self, ins: Instruction) -> Advance:
        total = self.v[ins.x] + self.v[ins.y]
        self.set_with_flag(ins.x, total, total > 0xFF)
        return Advance.NEXT

    def sub(self, ins: Instruction) -> Advance:
        a, b = self.v[ins.x], self.v[ins.y]
        self.set_with_flag(ins.x, a - b, a >= b)
        return Advance.NEXT

    def subn(self, ins: Instruction) -> Advance:
        a, b = self.v[ins.x], self.v[ins.y]
        self.set_with_flag(ins.x, b - a, b >= a)
        return Advance.NEXT

    def shr(self, ins: Instruction) -> Advance:
        a = self.v[ins.x]
        self.set_with_flag(ins.x, a >> 1, bool(a & 0x01))
        return Advance.NEXT

    def shl(self, ins: Instruction) -> Advance:
        a = self.v[ins.x]
        self.set_with_flag(ins.x, a << 1, bool(a & 0x80))
        return Advance.NEXT

    def rnd(self, ins: Instruction) -> Advance:
        self.v[ins.x] = self.rng.next_byte() & ins.nn
        return Advance.NEXT

    # - Address register and memory - #

    def ldi(self, ins: Instruction) -> Advance:
        self.i = ins.nnn
        return Advance.NEXT

    def addi(self, ins: Instruction) -> Advance:
        self.i = (self.i + self.v[ins.x]) & 0xFFFF
        return Advance.NEXT

    def ldf(self, ins: Instruction) -> Advance:
        self.i = FONT_BASE + self.v[ins.x] * GLYPH_SIZE
        return Advance.NEXT

    def bcd(self, ins: Instruction) -> Advance:
        val = self.v[ins.x]
        self.memory.write_block(self.i, bytes([val // 100, (val // 10) % 10, val % 10]))
        return Advance.NEXT

    def stm(self, ins: Instruction) -> Advance:
        self.memory.write_block(self.i, bytes(self.v[:ins.x + 1]))
        return Advance.NEXT

    def ldr(self, ins: Instruction) -> Advance:
        block = self.memory.read_block(self.i, ins.x + 1)
        self.v[:ins.x + 1] = list(block)
        return Advance.NEXT

    # - Display - #

    def drw(self, ins: Instruction) -> Advance:
        # Whole sprite is read up front so a fault leaves the display untouched
        sprite = self.memory.read_block(self.i, ins.n)
        x0, y0 = self.v[ins.x], self.v[ins.y]
        collision = False

        for row, bits in enumerate(sprite):
            for col in range(SPRITE_WIDTH):
                if bits & (0x80 >> col):
                    collision |= self.display.toggle(x0 + col, y0 + row)

        self.v[FLAG_REG] = 1 if collision else 0
        return Advance.NEXT

    # - Keypad - #

    def skp(self, ins: Instruction) -> Advance:
        return skip_if(self.keypad.is_pressed(self.v[ins.x]))

    def sknp(self, ins: Instruction) -> Advance:
        return skip_if(not self.keypad.is_pressed(self.v[ins.x]))

    def ldk(self, ins: Instruction) -> Advance:
        key = self.keypad.first_pressed()

        if key is None:
            return Advance.REPEAT

        self.v[ins.x] = key
        return Advance.NEXT

    # - Timers - #

    def ldvdt(self, ins: Instruction) -> Advance:
        self.v[ins.x] = self.timers.delay
        return Advance.NEXT

    def lddt(self, ins: Instruction) -> Advance:
        self.timers.delay = self.v[ins.x]
        return Advance.NEXT

    def ldst(self, ins: Instruction) -> Advance:
        self.timers.sound = self.v[ins.x]
        return Advance.NEXT

    HANDLERS = {
        ops.SYS: sys,
        ops.CLS: cls,
        ops.RET: ret,
        ops.JP: jp,
        ops.CALL: call,
        ops.SE: se,
        ops.SNE: sne,
        ops.SER: ser,
        ops.LD: ld,
        ops.ADD: add,

        ops.MOV: mov,
        ops.OR: bor,
        ops.AND: band,
        ops.XOR: xor,
        ops.ADDR: addr,
        ops.SUB: sub,
        ops.SHR: shr,
        ops.SUBN: subn,
        ops.SHL: shl,
        ops.SNER: sner,

        ops.LDI: ldi,
        ops.JPV: jpv,
        ops.RND: rnd,
        ops.DRW: drw,

        ops.SKP: skp,
        ops.SKNP: sknp,

        ops.LDVDT: ldvdt,
        ops.LDK: ldk,
        ops.LDDT: lddt,
        ops.LDST: ldst,
        ops.ADDI: addi,
        ops.LDF: ldf,
        ops.BCD: bcd,
        ops.STR: stm,
        ops.LDR: ldr,
    }

    # -- Implementation -- #

    def fetch(self) -> int:
        return self.memory.read16(self.pc)

    def execute(self, opcode: int) -> Advance:
        handler = self.HANDLERS.get(ops.pattern(opcode))

        if handler is None:
            raise UnknownOpcode(opcode, self.pc)

        advance = handler(self, Instruction(opcode))

        if advance is Advance.NEXT:
            self.pc = (self.pc + OPCODE_SIZE) & 0xFFFF
        elif advance is Advance.SKIP:
            self.pc = (self.pc + 2 * OPCODE_SIZE) & 0xFFFF

        return advance

    def exec_next(self) -> Advance:
        return self.execute(self.fetch())
