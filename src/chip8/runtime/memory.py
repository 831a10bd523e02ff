# Emulated memory: interpreter glyphs below ROM_BASE, program above

import logging as lg

from chip8.common.hwconf import MEMORY_SIZE, FONT_BASE, ROM_BASE, FONT_SPRITES
from chip8.runtime.faults import MemoryFault, RomTooLarge


class Memory:
    def __init__(self, size: int = MEMORY_SIZE):
        self.data = bytearray(size)
        self.load_font()

    def __len__(self):
        return len(self.data)

    def load_font(self):
        glyphs = bytes(b for sprite in FONT_SPRITES for b in sprite)
        self.data[FONT_BASE:FONT_BASE + len(glyphs)] = glyphs

    def check(self, addr: int, length: int = 1):
        ''' Raise unless [addr, addr + length) lies within memory '''
        if addr < 0:
            raise MemoryFault(addr)

        end = addr + length

        if end > len(self.data):
            raise MemoryFault(max(addr, len(self.data)))

    def read_block(self, addr: int, length: int) -> bytes:
        self.check(addr, length)
        return bytes(self.data[addr:addr + length])

    def write_block(self, addr: int, buf: bytes):
        self.check(addr, len(buf))
        self.data[addr:addr + len(buf)] = buf

    def read16(self, addr: int) -> int:
        hi, lo = self.read_block(addr, 2)
        return (hi << 8) | lo

    def load_rom(self, rom: bytes):
        available = len(self.data) - ROM_BASE

        if len(rom) > available:
            raise RomTooLarge(len(rom), available)

        self.data[ROM_BASE:ROM_BASE + len(rom)] = rom
        lg.debug(f'Loaded {len(rom)} bytes @ 0x{ROM_BASE:X}')
