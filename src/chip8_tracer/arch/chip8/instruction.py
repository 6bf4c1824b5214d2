# src/chip8_tracer/arch/chip8/instruction.py
"""
CHIP-8命令語のデコード済み表現。
"""
from dataclasses import dataclass

# @intent:responsibility 2バイトの命令語から導出される不変の命令ビューを保持します。
@dataclass(frozen=True)
class Instruction:
    """
    16ビットの命令語と、その4つのニブル（上位から1番目〜4番目）。

       Bits:  15-12     11-8      7-4       3-0
              nibble1  nibble2  nibble3  nibble4
                         x         y        n
    """
    raw: int
    nibble1: int
    nibble2: int
    nibble3: int
    nibble4: int

    @property
    def x(self) -> int:
        return self.nibble2

    @property
    def y(self) -> int:
        return self.nibble3

    @property
    def n(self) -> int:
        return self.nibble4

    @property
    def nn(self) -> int:
        return self.raw & 0x00FF

    @property
    def nnn(self) -> int:
        return self.raw & 0x0FFF

    @property
    def hex(self) -> str:
        return f"{self.raw:04X}"


# @intent:responsibility 2バイト（ビッグエンディアン）を命令に変換する純粋関数。
def decode(high: int, low: int) -> Instruction:
    """
    先頭バイトを上位バイトとして命令語を組み立て、ニブルに分解します。
    """
    high &= 0xFF
    low &= 0xFF
    return Instruction(
        raw=(high << 8) | low,
        nibble1=high >> 4,
        nibble2=high & 0x0F,
        nibble3=low >> 4,
        nibble4=low & 0x0F,
    )


# @intent:utility_function 16ビット命令語を直接デコードします（テストや逆アセンブル用）。
def decode_word(word: int) -> Instruction:
    return decode((word >> 8) & 0xFF, word & 0xFF)
