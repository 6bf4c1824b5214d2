# src/chip8_tracer/arch/chip8/timers.py
"""
ディレイタイマーとサウンドタイマーの減算処理。
"""
import logging
from typing import Optional

from chip8_tracer.transport.devices import ToneDevice
from chip8_tracer.arch.chip8.state import Chip8CpuState

logger = logging.getLogger(__name__)


# @intent:responsibility Run Loopの1イテレーションごとにタイマーを1ずつ減算します。
# @intent:invariant タイマーは0未満になりません。
class TimerTicker:
    """
    サウンドタイマーが非ゼロの間、ティックごとにトーンデバイスのplay()を発火します。
    """
    def __init__(self, tone: Optional[ToneDevice] = None):
        self._tone = tone

    def tick(self, state: Chip8CpuState) -> None:
        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            state.sound_timer -= 1
            if self._tone is not None:
                self._tone.play()
