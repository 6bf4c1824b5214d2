# src/chip8_tracer/arch/chip8/framebuffer.py
"""
64x32 モノクロフレームバッファ。
"""
from chip8_tracer.arch.chip8.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from chip8_tracer.transport.devices import FrameSnapshot

# @intent:responsibility 1ビットピクセルの2次元グリッドを保持します。
# @intent:invariant ピクセルはclear()によるゼロクリアとtoggle()によるXORでのみ変更されます。
class Framebuffer:
    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT):
        self.width = width
        self.height = height
        self._pixels = bytearray(width * height)

    def clear(self) -> None:
        for index in range(len(self._pixels)):
            self._pixels[index] = 0

    def pixel(self, x: int, y: int) -> int:
        return self._pixels[y * self.width + x]

    # @intent:responsibility 指定ピクセルを反転し、点灯していたピクセルが消えた場合にTrueを返します。
    def toggle(self, x: int, y: int) -> bool:
        index = y * self.width + x
        was_on = self._pixels[index] == 1
        self._pixels[index] ^= 1
        return was_on

    def is_blank(self) -> bool:
        return not any(self._pixels)

    # @intent:responsibility 描画先に渡す読み取り専用のスナップショットを生成します。
    def snapshot(self) -> FrameSnapshot:
        w = self.width
        return tuple(tuple(self._pixels[row * w:(row + 1) * w]) for row in range(self.height))
