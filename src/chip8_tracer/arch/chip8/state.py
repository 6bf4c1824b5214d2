# src/chip8_tracer/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from chip8_tracer.core.state import CpuState
from chip8_tracer.common.errors import StackOverflowError, StackUnderflowError
from chip8_tracer.arch.chip8.constants import (
    PROGRAM_START_ADDRESS, REGISTER_COUNT, FLAG_REGISTER, STACK_DEPTH
)

# @intent:responsibility CHIP-8 CPUの全てのレジスタ（V0-VF, I, PC, SP）、スタック、タイマーを保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。

    spは「次に書き込むスタックスロット」を指し、0から始まります。
    awaiting_keyはFx0A実行後、キー入力を待っているレジスタ番号です（待機していなければNone）。
    """
    pc: int = PROGRAM_START_ADDRESS
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0x000     # Index Register
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    delay_timer: int = 0
    sound_timer: int = 0
    awaiting_key: Optional[int] = None

    # @intent:accessor 桁上がり/借り/衝突フラグとして使われるVFレジスタ。
    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    # @intent:responsibility 戻りアドレスをスタックに積みます。
    # @intent:post-condition 16段を超える場合はStackOverflowErrorを送出し、状態を変更しません。
    def push(self, address: int) -> None:
        if self.sp >= STACK_DEPTH:
            raise StackOverflowError(f"Call stack overflow at depth {self.sp} (PC {self.pc:#05x}).")
        self.stack[self.sp] = address
        self.sp += 1

    # @intent:responsibility スタックから戻りアドレスを取り出します。
    def pop(self) -> int:
        if self.sp <= 0:
            raise StackUnderflowError(f"Return with an empty call stack (PC {self.pc:#05x}).")
        self.sp -= 1
        return self.stack[self.sp]
