# chip8_tracer/runtime/run_loop.py
"""
Run Loop

フェッチ → デコード → 実行 → タイマーティックを繰り返し、
停止条件（プログラム終端、停止要求、ディスプレイのクローズ、致命的エラー）で停止します。
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from chip8_tracer.common.errors import Chip8Error
from chip8_tracer.core.snapshot import Snapshot
from chip8_tracer.transport.devices import DisplaySink, InputProvider
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.timers import TimerTicker
from chip8_tracer.runtime.stop_token import StopToken

logger = logging.getLogger(__name__)

# @intent:constant イテレーション間のデフォルト待機時間（秒）。
DEFAULT_CYCLE_DELAY = 0.002


class RunState(Enum):
    RUNNING = "RUNNING"
    STOPPED = "STOPPED"


# @intent:responsibility Run Loopが停止した理由を定義します。
class StopReason(Enum):
    END_OF_PROGRAM = "END_OF_PROGRAM"     # PCが読み込まれたプログラムの範囲を越えた
    STOP_REQUESTED = "STOP_REQUESTED"     # StopTokenによる外部停止要求
    DISPLAY_CLOSED = "DISPLAY_CLOSED"     # ディスプレイが閉じられた
    INPUT_CANCELLED = "INPUT_CANCELLED"   # キー待ちが入力側からキャンセルされた
    FAULT = "FAULT"                       # デコード失敗や範囲外アクセス
    CYCLE_LIMIT = "CYCLE_LIMIT"           # max_cycles に到達した
    BREAKPOINT = "BREAKPOINT"             # デバッガのブレークポイントで中断した


# @intent:responsibility Run Loopの実行結果を記録します。
@dataclass(frozen=True)
class RunResult:
    reason: StopReason
    cycles: int
    error: Optional[Chip8Error] = None

    @property
    def ok(self) -> bool:
        return self.reason != StopReason.FAULT


# @intent:responsibility CPU、タイマー、外部デバイスを結び付けて命令サイクルを駆動します。
# @intent:invariant 命令の実行は常に単一スレッドで逐次的に行われます。
class RunLoop:
    """
    Running/Stopped の2状態を持つ状態機械。

    run() は致命的なエラーを例外として送出せず、RunResult(reason=FAULT) として返します。
    step() は1イテレーションを実行し、エラーをそのまま呼び出し元（デバッガなど）へ伝播します。
    """
    def __init__(
        self,
        cpu: Chip8Cpu,
        timers: Optional[TimerTicker] = None,
        display: Optional[DisplaySink] = None,
        keypad: Optional[InputProvider] = None,
        stop_token: Optional[StopToken] = None,
        cycle_delay: float = DEFAULT_CYCLE_DELAY,
        max_cycles: Optional[int] = None,
    ):
        if cycle_delay < 0:
            raise ValueError("cycle_delay must not be negative.")
        self._cpu = cpu
        self._timers = timers if timers is not None else TimerTicker()
        self._display = display
        self._keypad = keypad
        self._stop_token = stop_token if stop_token is not None else StopToken()
        self._cycle_delay = cycle_delay
        self._max_cycles = max_cycles
        self._state = RunState.RUNNING
        self._stop_reason: Optional[StopReason] = None
        self._error: Optional[Chip8Error] = None
        self._cycles = 0

    @property
    def cpu(self) -> Chip8Cpu:
        return self._cpu

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def stop_reason(self) -> Optional[StopReason]:
        return self._stop_reason

    @property
    def stop_token(self) -> StopToken:
        return self._stop_token

    @property
    def cycles(self) -> int:
        return self._cycles

    @property
    def result(self) -> Optional[RunResult]:
        if self._stop_reason is None:
            return None
        return RunResult(reason=self._stop_reason, cycles=self._cycles, error=self._error)

    # @intent:responsibility 外部から停止を要求します（冪等）。
    def stop(self) -> None:
        self._stop_token.request()

    def _halt(self, reason: StopReason, error: Optional[Chip8Error] = None) -> None:
        self._state = RunState.STOPPED
        self._stop_reason = reason
        self._error = error

    # @intent:responsibility 停止要求とディスプレイの状態を確認し、停止すべきならTrueを返します。
    def _check_stop_conditions(self) -> bool:
        if self._stop_token.is_requested():
            self._halt(StopReason.STOP_REQUESTED)
            return True
        if self._display is not None and not self._display.is_open():
            self._halt(StopReason.DISPLAY_CLOSED)
            return True
        return False

    # @intent:responsibility Fx0Aのキー待ちを解決します。キャンセルされた場合はFalseを返します。
    def _wait_for_key(self) -> bool:
        if self._keypad is None:
            logger.debug("Key wait requested without an input provider.")
            self._halt(StopReason.INPUT_CANCELLED)
            return False
        logger.debug("Waiting for key into V%X.", self._cpu.awaiting_key)
        key = self._keypad.wait_key(self._stop_token)
        if key is None:
            if self._stop_token.is_requested():
                self._halt(StopReason.STOP_REQUESTED)
            else:
                self._halt(StopReason.INPUT_CANCELLED)
            return False
        self._cpu.resolve_key_wait(key)
        return True

    # @intent:responsibility 1イテレーション（命令1つ + タイマーティック1回）を実行します。
    # @intent:post-condition 停止した場合はNoneを返します。致命的エラーは停止状態にした上で再送出します。
    def step(self) -> Optional[Snapshot]:
        """
        1命令を実行し、そのSnapshotを返します。
        停止条件を満たした場合は何も実行せずにNoneを返し、状態をSTOPPEDに遷移させます。
        """
        if self._state == RunState.STOPPED:
            return None
        if self._check_stop_conditions():
            return None

        try:
            snapshot = self._cpu.step()
        except Chip8Error as e:
            self._halt(StopReason.FAULT, e)
            raise
        if snapshot is None:
            self._halt(StopReason.END_OF_PROGRAM)
            return None

        if self._cpu.awaiting_key is not None and not self._wait_for_key():
            return snapshot

        self._timers.tick(self._cpu.get_state())
        self._cycles += 1
        return snapshot

    # @intent:responsibility 停止するまでRun Loopを実行します。
    def run(self) -> RunResult:
        logger.info("Run loop started.")
        while self._state == RunState.RUNNING:
            if self._max_cycles is not None and self._cycles >= self._max_cycles:
                self._halt(StopReason.CYCLE_LIMIT)
                break
            try:
                self.step()
            except Chip8Error as e:
                logger.error("Execution fault at PC %#05x: %s", self._cpu.get_state().pc, e)
                break
            if self._state == RunState.RUNNING and self._cycle_delay > 0:
                # 停止要求があれば待機を切り上げる
                self._stop_token.wait(self._cycle_delay)

        result = self.result
        logger.info("Run loop stopped: %s after %d cycles.", result.reason.value, result.cycles)
        return result
