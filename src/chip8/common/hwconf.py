# Memory layout
MEMORY_SIZE = 0x1000
FONT_BASE = 0x000
ROM_BASE = 0x200
OPCODE_SIZE = 2

# Registers
GP_REGS = 16
FLAG_REG = 0xF
STACK_DEPTH = 16

# Peripherals
KEY_COUNT = 16
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
SPRITE_WIDTH = 8

# Interpreter glyphs for hex digits 0-F, 5 bytes each
GLYPH_SIZE = 5

FONT_SPRITES = [
    [0xF0, 0x90, 0x90, 0x90, 0xF0],  # 0
    [0x20, 0x60, 0x20, 0x20, 0x70],  # 1
    [0xF0, 0x10, 0xF0, 0x80, 0xF0],  # 2
    [0xF0, 0x10, 0xF0, 0x10, 0xF0],  # 3
    [0x90, 0x90, 0xF0, 0x10, 0x10],  # 4
    [0xF0, 0x80, 0xF0, 0x10, 0xF0],  # 5
    [0xF0, 0x80, 0xF0, 0x90, 0xF0],  # 6
    [0xF0, 0x10, 0x20, 0x40, 0x40],  # 7
    [0xF0, 0x90, 0xF0, 0x90, 0xF0],  # 8
    [0xF0, 0x90, 0xF0, 0x10, 0xF0],  # 9
    [0xF0, 0x90, 0xF0, 0x90, 0x90],  # A
    [0xE0, 0x90, 0xE0, 0x90, 0xE0],  # B
    [0xF0, 0x80, 0x80, 0x80, 0xF0],  # C
    [0xE0, 0x90, 0x90, 0x90, 0xE0],  # D
    [0xF0, 0x80, 0xF0, 0x80, 0xF0],  # E
    [0xF0, 0x80, 0xF0, 0x80, 0x80],  # F
]
