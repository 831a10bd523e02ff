import logging as lg

from chip8.runtime.cpu import CPU, Advance
from chip8.runtime.memory import Memory
from chip8.runtime.peripheral import Key, Keypad, Timers, Display
from chip8.runtime.rng import RandomSource, DefaultRandom


class Machine:
    '''
    Owns every piece of machine state. A driver calls step() and
    tick_timers() at its own pace, feeds key events in through
    press_key()/release_key() and renders read_display().
    '''

    def __init__(self, rng: RandomSource | None = None):
        self.memory = Memory()
        self.keypad = Keypad()
        self.timers = Timers()
        self.display = Display()
        self.cpu = CPU(self.memory, self.keypad, self.timers, self.display, rng or DefaultRandom())

    def load(self, rom: bytes):
        self.memory.load_rom(rom)

    def step(self) -> Advance:
        advance = self.cpu.exec_next()

        if lg.getLogger().isEnabledFor(lg.DEBUG):
            self.cpu.debug_dump()

        return advance

    def tick_timers(self):
        self.timers.tick()

    def press_key(self, key: Key):
        self.keypad.press(key)

    def release_key(self, key: Key):
        self.keypad.release(key)

    def read_display(self) -> tuple[bool, ...]:
        return self.display.snapshot()

    @property
    def sound_active(self) -> bool:
        return self.timers.sound_active
