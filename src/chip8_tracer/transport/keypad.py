# chip8_tracer/transport/keypad.py
"""
スレッドセーフなCHIP-8キーパッド。

GUIスレッド（キーイベント）とRun Loopスレッド（キー問い合わせ、キー待ち）の間で
キー状態を受け渡します。
"""
import logging
import threading
from collections import deque
from typing import Deque, Optional, Set

from chip8_tracer.runtime.stop_token import StopToken
from chip8_tracer.transport.devices import InputProvider

logger = logging.getLogger(__name__)

KEY_COUNT = 0x10

# @intent:constant キー待ち中に停止要求・クローズを確認する間隔（秒）。
WAIT_POLL_INTERVAL = 0.05


# @intent:responsibility 押下中のキー集合と、キー待ちへのキー押下通知を管理します。
class Keypad(InputProvider):
    """
    16キーのキーパッド状態。

    press/releaseはフロントエンドから、is_key_pressed/wait_keyはRun Loopから呼ばれます。
    queue_keyで事前に積まれたキーは、次のwait_keyで順に返されます（ヘッドレス実行用）。
    """
    def __init__(self):
        self._condition = threading.Condition()
        self._pressed: Set[int] = set()
        self._queued: Deque[int] = deque()
        self._waiters = 0
        self._closed = False

    @staticmethod
    def _check_key(key: int) -> None:
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"Key {key} is not a CHIP-8 key (0x0-0xF).")

    def press(self, key: int) -> None:
        self._check_key(key)
        with self._condition:
            self._pressed.add(key)
            # キー待ち中の押下のみ通知する。待機開始前の押下は新しい入力とみなさない。
            if self._waiters:
                self._queued.append(key)
                self._condition.notify_all()

    def release(self, key: int) -> None:
        self._check_key(key)
        with self._condition:
            self._pressed.discard(key)

    # @intent:responsibility 次のwait_keyで返すキーを予約します。
    def queue_key(self, key: int) -> None:
        self._check_key(key)
        with self._condition:
            self._queued.append(key)
            self._condition.notify_all()

    # @intent:responsibility 入力を閉じ、待機中のwait_keyをNoneで復帰させます。
    def close(self) -> None:
        with self._condition:
            self._closed = True
            self._condition.notify_all()

    @property
    def closed(self) -> bool:
        return self._closed

    def is_key_pressed(self, key: int) -> bool:
        with self._condition:
            return key in self._pressed

    def wait_key(self, stop: Optional[StopToken] = None) -> Optional[int]:
        """
        キー押下、クローズ、停止要求のいずれかまでブロックします。
        キーが得られた場合はその値、キャンセルされた場合はNoneを返します。
        """
        with self._condition:
            self._waiters += 1
            try:
                while not self._queued:
                    if self._closed or (stop is not None and stop.is_requested()):
                        logger.debug("Key wait cancelled.")
                        return None
                    self._condition.wait(WAIT_POLL_INTERVAL)
                key = self._queued.popleft()
                logger.debug("Key wait satisfied with key %X.", key)
                return key
            finally:
                self._waiters -= 1
