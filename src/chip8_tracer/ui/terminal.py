# src/chip8_tracer/ui/terminal.py
"""
ターミナル向けの外部デバイス実装。
フレームをブロック文字でテキストストリームに描画します。
"""
import sys
import threading
from typing import Optional, TextIO

from chip8_tracer.transport.devices import DisplaySink, FrameSnapshot, ToneDevice

# カーソルを左上へ戻すANSIエスケープ
CURSOR_HOME = "\x1b[H"
CLEAR_SCREEN = "\x1b[2J"

PIXEL_ON = "██"
PIXEL_OFF = "  "


# @intent:utility_function フレームを複数行のテキストに変換します。
def frame_to_text(frame: FrameSnapshot, on: str = PIXEL_ON, off: str = PIXEL_OFF) -> str:
    return "\n".join("".join(on if pixel else off for pixel in row) for row in frame)


# @intent:responsibility ターミナルにフレームを描画するDisplaySink。
class TerminalDisplay(DisplaySink):
    """
    ansi=True の場合、毎フレーム画面左上から上書き描画します。
    ansi=False の場合はフレームを区切り線付きで追記します（ログやパイプ出力向け）。
    """
    def __init__(self, stream: Optional[TextIO] = None, ansi: bool = True):
        self._stream = stream or sys.stdout
        self._ansi = ansi
        self._open = threading.Event()
        self._open.set()
        self._started = False

    def render(self, frame: FrameSnapshot) -> None:
        text = frame_to_text(frame)
        if self._ansi:
            prefix = CURSOR_HOME if self._started else CLEAR_SCREEN + CURSOR_HOME
            self._stream.write(prefix + text + "\n")
        else:
            self._stream.write(text + "\n" + "-" * (len(frame[0]) * len(PIXEL_ON)) + "\n")
        self._stream.flush()
        self._started = True

    def is_open(self) -> bool:
        return self._open.is_set()

    def close(self) -> None:
        self._open.clear()


# @intent:responsibility 端末ベル（BEL文字）を鳴らすトーンデバイス。
class TerminalBell(ToneDevice):
    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream or sys.stdout

    def play(self) -> None:
        self._stream.write("\a")
        self._stream.flush()
