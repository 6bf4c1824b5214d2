# chip8_tracer/runtime/stop_token.py
"""
Run Loopの停止要求を表すキャンセルトークン。
"""
import threading
from typing import Optional


# @intent:responsibility スレッド間で共有される停止要求フラグを提供します。
# @intent:rationale シグナルハンドラのグローバル状態ではなく、Run Loopに明示的に渡されるトークンとして扱います。
class StopToken:
    """
    冪等な停止要求。ループ先頭とキー待ちの中断点で参照されます。
    """
    def __init__(self):
        self._event = threading.Event()

    def request(self) -> None:
        """停止を要求します。複数回呼び出しても結果は同じです。"""
        self._event.set()

    def is_requested(self) -> bool:
        return self._event.is_set()

    # @intent:responsibility 停止要求があるか、タイムアウトするまで待機します。
    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        停止要求があればTrue、タイムアウトした場合はFalseを返します。
        Run Loopのペーシング用スリープとして使用されます。
        """
        return self._event.wait(timeout)
