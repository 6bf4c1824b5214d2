# src/chip8_tracer/ui/screen_view.py
"""
64x32 フレームバッファを表示するウィジェット。
"""
from typing import Optional

from PySide6.QtWidgets import QWidget
from PySide6.QtCore import Qt, QSize, Slot
from PySide6.QtGui import QPainter, QColor, QPaintEvent

from chip8_tracer.transport.devices import FrameSnapshot
from chip8_tracer.arch.chip8.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from chip8_tracer.config.models import DisplayConfig

# @intent:responsibility フレームのスナップショットをピクセルグリッドとして描画します。
class ScreenView(QWidget):
    """
    各ピクセルを pixel_size 四方の矩形として描き、右下に pixel_gap 分の隙間を空けます。
    フレームはGUIスレッドでのみ set_frame() により差し替えられます。
    """
    def __init__(self, config: Optional[DisplayConfig] = None, parent=None):
        super().__init__(parent)
        self._config = config or DisplayConfig()
        self._on_color = QColor(self._config.on_color)
        self._off_color = QColor(self._config.off_color)
        self._frame: Optional[FrameSnapshot] = None
        self.setFixedSize(self.sizeHint())
        self.setFocusPolicy(Qt.NoFocus)

    def sizeHint(self) -> QSize:
        size = self._config.pixel_size
        return QSize(SCREEN_WIDTH * size, SCREEN_HEIGHT * size)

    @property
    def frame(self) -> Optional[FrameSnapshot]:
        return self._frame

    # @intent:responsibility 表示するフレームを差し替え、再描画を要求します。
    @Slot(object)
    def set_frame(self, frame: FrameSnapshot) -> None:
        self._frame = frame
        self.update()

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._off_color)
        if self._frame is not None:
            size = self._config.pixel_size
            cell = size - self._config.pixel_gap
            for y, row in enumerate(self._frame):
                for x, pixel in enumerate(row):
                    if pixel:
                        painter.fillRect(x * size, y * size, cell, cell, self._on_color)
        painter.end()
