from enum import IntEnum

from chip8.common.hwconf import KEY_COUNT, DISPLAY_WIDTH, DISPLAY_HEIGHT


class Key(IntEnum):
    K0 = 0x0
    K1 = 0x1
    K2 = 0x2
    K3 = 0x3
    K4 = 0x4
    K5 = 0x5
    K6 = 0x6
    K7 = 0x7
    K8 = 0x8
    K9 = 0x9
    KA = 0xA
    KB = 0xB
    KC = 0xC
    KD = 0xD
    KE = 0xE
    KF = 0xF


class Keypad:
    keys: list[bool]

    def __init__(self):
        self.keys = [False] * KEY_COUNT

    def press(self, key: Key):
        self.keys[Key(key)] = True

    def release(self, key: Key):
        self.keys[Key(key)] = False

    def is_pressed(self, index: int) -> bool:
        return self.keys[index & 0xF]

    def first_pressed(self) -> int | None:
        for index, pressed in enumerate(self.keys):
            if pressed:
                return index

        return None


class Timers:
    delay: int
    sound: int

    def __init__(self):
        self.delay = 0
        self.sound = 0

    def tick(self):
        if self.delay > 0:
            self.delay -= 1

        if self.sound > 0:
            self.sound -= 1

    @property
    def sound_active(self) -> bool:
        return self.sound > 0


class Display:
    ''' Row-major monochrome framebuffer '''

    width = DISPLAY_WIDTH
    height = DISPLAY_HEIGHT

    def __init__(self):
        self.pixels = [False] * (self.width * self.height)

    def clear(self):
        self.pixels = [False] * (self.width * self.height)

    def index(self, x: int, y: int) -> int:
        return (y % self.height) * self.width + (x % self.width)

    def get(self, x: int, y: int) -> bool:
        return self.pixels[self.index(x, y)]

    def toggle(self, x: int, y: int) -> bool:
        ''' XOR one pixel, True if it went from lit to unlit '''
        i = self.index(x, y)
        was_lit = self.pixels[i]
        self.pixels[i] = not was_lit
        return was_lit

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self.pixels)
