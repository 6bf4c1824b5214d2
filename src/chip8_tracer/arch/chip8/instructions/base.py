# src/chip8_tracer/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ。
"""
import random
from dataclasses import dataclass, field
from typing import Optional

from chip8_tracer.transport.bus import Bus
from chip8_tracer.transport.devices import DisplaySink, InputProvider
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8.framebuffer import Framebuffer

# @intent:data_structure 命令実装が操作する対象（状態、メモリ、画面、外部デバイス）をまとめたもの。
@dataclass
class ExecutionContext:
    state: Chip8CpuState
    bus: Bus
    framebuffer: Framebuffer
    display: Optional[DisplaySink] = None
    keypad: Optional[InputProvider] = None
    rng: random.Random = field(default_factory=random.Random)

    # @intent:responsibility 現在のフレームバッファをディスプレイに通知します。
    def notify_display(self) -> None:
        if self.display is not None:
            self.display.render(self.framebuffer.snapshot())

    def is_key_pressed(self, key: int) -> bool:
        if self.keypad is None:
            return False
        return self.keypad.is_key_pressed(key)

# @intent:utility_function 条件が成立した場合に次の命令をスキップします。
def skip_next_if(state: Chip8CpuState, condition: bool) -> None:
    """PCはフェッチ時に既に+2されているため、さらに+2すると次の命令を飛ばす。"""
    if condition:
        state.pc += 2
