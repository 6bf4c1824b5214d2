# tests/transport/test_keypad.py
"""
chip8_tracer.transport.keypadモジュールの単体テスト。
"""
import threading
import time

import pytest

from chip8_tracer.runtime.stop_token import StopToken
from chip8_tracer.transport.keypad import Keypad

# @intent:test_suite キー状態の問い合わせと、キャンセル可能なキー待ちを検証します。

class TestKeypad:
    @pytest.fixture
    def keypad(self):
        return Keypad()

    def test_press_and_release(self, keypad):
        assert not keypad.is_key_pressed(0xA)
        keypad.press(0xA)
        assert keypad.is_key_pressed(0xA)
        assert not keypad.is_key_pressed(0xB)
        keypad.release(0xA)
        assert not keypad.is_key_pressed(0xA)

    @pytest.mark.parametrize("key", [-1, 0x10])
    def test_invalid_key(self, keypad, key):
        with pytest.raises(ValueError):
            keypad.press(key)
        with pytest.raises(ValueError):
            keypad.queue_key(key)

    def test_wait_key_returns_queued_keys_in_order(self, keypad):
        keypad.queue_key(0x1)
        keypad.queue_key(0xF)
        assert keypad.wait_key() == 0x1
        assert keypad.wait_key() == 0xF

    # @intent:test_case_close 予約キーを使い切った後、クローズ済みのキーパッドはNoneを返すことを検証します。
    def test_wait_key_after_close(self, keypad):
        keypad.queue_key(0x5)
        keypad.close()
        assert keypad.closed
        assert keypad.wait_key() == 0x5
        assert keypad.wait_key() is None

    def test_wait_key_cancelled_by_stop_token(self, keypad):
        stop = StopToken()
        stop.request()
        assert keypad.wait_key(stop) is None

    # @intent:test_case_press_before_wait 待機開始前に押されていたキーは新しい入力とみなさないことを検証します。
    def test_press_before_wait_is_not_queued(self, keypad):
        keypad.press(0x3)
        keypad.close()
        assert keypad.wait_key() is None

    # @intent:test_case_thread 別スレッドからのキー押下で待機が解除されることを検証します。
    def test_wait_key_woken_by_press_from_other_thread(self, keypad):
        result = []
        waiter = threading.Thread(target=lambda: result.append(keypad.wait_key()))
        waiter.start()

        # 待機開始を待ってから押下する
        deadline = time.time() + 2.0
        while keypad._waiters == 0 and time.time() < deadline:
            time.sleep(0.01)
        keypad.press(0x7)
        waiter.join(timeout=2.0)

        assert not waiter.is_alive()
        assert result == [0x7]

    def test_wait_key_woken_by_stop_request(self, keypad):
        stop = StopToken()
        result = []
        waiter = threading.Thread(target=lambda: result.append(keypad.wait_key(stop)))
        waiter.start()
        stop.request()
        waiter.join(timeout=2.0)

        assert not waiter.is_alive()
        assert result == [None]
