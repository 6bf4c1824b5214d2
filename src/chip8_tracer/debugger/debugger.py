# chip8_tracer/debugger/debugger.py
"""
デバッガモジュール。

Run Loopの実行を1イテレーション単位で制御し、ユーザーが指定した条件（ブレークポイント）で
実行を中断させる責務を負います。
"""
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Dict, List, Optional
import time

from chip8_tracer.core.snapshot import Snapshot
from chip8_tracer.transport.bus import BusAccessType
from chip8_tracer.runtime.run_loop import RunLoop, RunState

# @intent:constant 保持する実行履歴の上限。
DEFAULT_HISTORY_SIZE = 1000

# @intent:responsibility ブレークポイントの条件タイプを定義します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # プログラムカウンタが特定のアドレスに一致
    MEMORY_READ = "MEMORY_READ"         # 特定のアドレスが読み込まれた
    MEMORY_WRITE = "MEMORY_WRITE"       # 特定のアドレスに書き込まれた
    REGISTER_VALUE = "REGISTER_VALUE"   # 特定のレジスタが特定の値になった
    REGISTER_CHANGE = "REGISTER_CHANGE" # 特定のレジスタの値が変化した

# @intent:responsibility ブレークポイントをトリガーする条件を定義します。
@dataclass(frozen=True)
class BreakpointCondition:
    """
    ブレークポイントがヒットするための条件を定義するデータクラス。
    register_name はレジスタマップのキー（"V0"-"VF", "I", "PC", "SP", "DT", "ST"）です。
    """
    condition_type: BreakpointConditionType
    value: Optional[int] = None           # PC_MATCH, REGISTER_VALUEで使用
    address: Optional[int] = None         # MEMORY_READ, MEMORY_WRITEで使用
    register_name: Optional[str] = None   # REGISTER_VALUE, REGISTER_CHANGEで使用
    enabled: bool = True                  # 有効/無効状態

# @intent:responsibility Run Loopの実行制御とブレークポイント管理を行います。
class Debugger:
    """
    Run Loopの実行を制御し、ブレークポイントの管理を行うクラス。
    step_instruction() は Run Loop の step() を呼ぶため、致命的エラーはそのまま送出されます。
    """
    def __init__(self, run_loop: RunLoop, history_size: int = DEFAULT_HISTORY_SIZE):
        self._run_loop = run_loop
        self._cpu = run_loop.cpu
        self._breakpoints: List[BreakpointCondition] = []
        self._running: bool = False
        self._previous_registers: Dict[str, int] = self._cpu.get_register_map()
        self._last_snapshot: Optional[Snapshot] = None
        # @intent:responsibility 直近の実行履歴を保持します。
        self._history: Deque[Snapshot] = deque(maxlen=history_size)

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def update_breakpoint(self, old_condition: BreakpointCondition, new_condition: BreakpointCondition) -> None:
        """
        既存のブレークポイントを更新します。
        """
        if old_condition in self._breakpoints:
            idx = self._breakpoints.index(old_condition)
            self._breakpoints[idx] = new_condition

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_history(self) -> List[Snapshot]:
        """
        現在の実行履歴を古い順に返します。
        """
        return list(self._history)

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    def _check_pc_breakpoints(self, pc: int) -> bool:
        for bp in self._breakpoints:
            if bp.enabled and bp.condition_type == BreakpointConditionType.PC_MATCH and bp.value == pc:
                return True
        return False

    def _check_other_breakpoints(self, snapshot: Snapshot, registers: Dict[str, int]) -> bool:
        """
        Snapshotと実行後のレジスタマップに基づいてPC_MATCH以外のブレークポイントをチェックします。
        """
        for bp in self._breakpoints:
            if not bp.enabled:
                continue

            if bp.condition_type == BreakpointConditionType.MEMORY_READ:
                if any(access.address == bp.address for access in snapshot.accesses(BusAccessType.READ)):
                    return True
            elif bp.condition_type == BreakpointConditionType.MEMORY_WRITE:
                if any(access.address == bp.address for access in snapshot.accesses(BusAccessType.WRITE)):
                    return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_VALUE:
                if bp.register_name in registers and registers[bp.register_name] == bp.value:
                    return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_CHANGE:
                name = bp.register_name
                if name in registers and name in self._previous_registers:
                    if registers[name] != self._previous_registers[name]:
                        return True
        return False

    def step_instruction(self) -> Optional[Snapshot]:
        """
        Run Loopを1イテレーション実行し、その結果のSnapshotを返します。
        Run Loopが停止した場合はNoneを返します。
        """
        self._previous_registers = self._cpu.get_register_map()
        snapshot = self._run_loop.step()
        if snapshot is not None:
            self._last_snapshot = snapshot
            self._history.append(snapshot)
        return snapshot

    # @intent:responsibility ブレークポイントにヒットするか、Run Loopが停止するまで実行を継続します。
    # @intent:post-condition ヒットした場合はTrueを返します。
    def run(self, max_steps: Optional[int] = None) -> bool:
        self._running = True
        steps = 0

        # 現在のPCがブレークポイント上にある場合は、まず1命令進めて同じ地点での再停止を避ける
        if self._check_pc_breakpoints(self._cpu.get_state().pc):
            if self.step_instruction() is None:
                self._running = False
                return False
            steps += 1

        while self._running and self._run_loop.state == RunState.RUNNING:
            time.sleep(0)
            if max_steps is not None and steps >= max_steps:
                break

            current_pc = self._cpu.get_state().pc
            if self._check_pc_breakpoints(current_pc):
                self._running = False
                print(f"Breakpoint hit at PC: {current_pc:#06x}")
                return True

            snapshot = self.step_instruction()
            steps += 1
            if snapshot is None:
                break

            if self._check_other_breakpoints(snapshot, self._cpu.get_register_map()):
                self._running = False
                print(f"Breakpoint hit at PC: {snapshot.state.pc:#06x}")
                return True

        self._running = False
        return False

    def stop(self) -> None:
        self._running = False
