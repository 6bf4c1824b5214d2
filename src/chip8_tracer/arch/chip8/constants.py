# src/chip8_tracer/arch/chip8/constants.py
"""
CHIP-8のメモリ配置と画面サイズ、フォントセットの定義。
"""

MEMORY_SIZE = 4096
PROGRAM_START_ADDRESS = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START_ADDRESS

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32

REGISTER_COUNT = 0x10
FLAG_REGISTER = 0xF
STACK_DEPTH = 16

# @intent:constant フォントグリフはメモリ先頭（0x000-0x04F）に配置されます。
FONT_BASE_ADDRESS = 0x000
FONT_GLYPH_SIZE = 5

# @intent:constant 16進数字 0-F のグリフ（各5バイト、計80バイト）。
FONT_SET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])
