# chip8_tracer/transport/headless.py
"""
ウィンドウを持たない外部デバイス実装。

テストダブル、およびヘッドレス実行（CLIの --frontend headless）で使用されます。
"""
import threading
from typing import List, Optional

from chip8_tracer.transport.devices import DisplaySink, FrameSnapshot, ToneDevice


# @intent:responsibility 受け取ったフレームを保持するだけのディスプレイ。
class HeadlessDisplay(DisplaySink):
    """
    描画要求を記録するディスプレイ。close()で閉じた状態を模擬できます。
    """
    def __init__(self, keep_history: bool = False):
        self._open = threading.Event()
        self._open.set()
        self._keep_history = keep_history
        self.frames: List[FrameSnapshot] = []
        self.last_frame: Optional[FrameSnapshot] = None
        self.render_count = 0

    def render(self, frame: FrameSnapshot) -> None:
        self.last_frame = frame
        self.render_count += 1
        if self._keep_history:
            self.frames.append(frame)

    def is_open(self) -> bool:
        return self._open.is_set()

    def close(self) -> None:
        self._open.clear()


# @intent:responsibility 音を出さず、発火回数だけを数えるトーンデバイス。
class SilentTone(ToneDevice):
    def __init__(self):
        self.play_count = 0

    def play(self) -> None:
        self.play_count += 1
