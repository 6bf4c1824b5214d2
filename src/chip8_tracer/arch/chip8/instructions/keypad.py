# src/chip8_tracer/arch/chip8/instructions/keypad.py
"""
キーパッド命令の実装。

   Bits:  15-12    11-8      7-4      3-0
            E      source  9 or A    E or 1
"""
from chip8_tracer.arch.chip8.instruction import Instruction
from .base import ExecutionContext, skip_next_if

# @intent:responsibility Ex9E - SKP Vx: Vxのキーが押されていれば次の命令をスキップします。
def execute_skp(ctx: ExecutionContext, ins: Instruction) -> None:
    skip_next_if(ctx.state, ctx.is_key_pressed(ctx.state.v[ins.x] & 0x0F))

# @intent:responsibility ExA1 - SKNP Vx: Vxのキーが押されていなければ次の命令をスキップします。
def execute_sknp(ctx: ExecutionContext, ins: Instruction) -> None:
    skip_next_if(ctx.state, not ctx.is_key_pressed(ctx.state.v[ins.x] & 0x0F))

# @intent:responsibility Fx0A - LD Vx, K: キー入力待ちを登録します。
# @intent:rationale 待機そのものはRun Loopが行い、ExecutorではブロックしないためVxへの格納は後で解決されます。
def execute_wait_key(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.awaiting_key = ins.x
