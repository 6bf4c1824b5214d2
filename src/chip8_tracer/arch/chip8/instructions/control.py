# src/chip8_tracer/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。
"""
from chip8_tracer.arch.chip8.instruction import Instruction
from .base import ExecutionContext, skip_next_if

# --- RET ---
# @intent:responsibility 00EE - RET: スタックから戻りアドレスをポップしてPCに設定します。
def execute_ret(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.pc = ctx.state.pop()

# --- JP ---
# @intent:responsibility 1nnn - JP nnn: 指定アドレスへジャンプします。
def execute_jp(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.pc = ins.nnn

# --- CALL ---
# @intent:responsibility 2nnn - CALL nnn: 戻りアドレスをスタックにプッシュしてからジャンプします。
def execute_call(ctx: ExecutionContext, ins: Instruction) -> None:
    # state.pcはフェッチ済みのため、既に次の命令を指している
    ctx.state.push(ctx.state.pc)
    ctx.state.pc = ins.nnn

# --- SE / SNE ---
# @intent:responsibility 3xnn - SE Vx, nn
def execute_se_byte(ctx: ExecutionContext, ins: Instruction) -> None:
    skip_next_if(ctx.state, ctx.state.v[ins.x] == ins.nn)

# @intent:responsibility 4xnn - SNE Vx, nn
def execute_sne_byte(ctx: ExecutionContext, ins: Instruction) -> None:
    skip_next_if(ctx.state, ctx.state.v[ins.x] != ins.nn)

# @intent:responsibility 5xy0 - SE Vx, Vy
def execute_se_reg(ctx: ExecutionContext, ins: Instruction) -> None:
    skip_next_if(ctx.state, ctx.state.v[ins.x] == ctx.state.v[ins.y])

# @intent:responsibility 9xy0 - SNE Vx, Vy
def execute_sne_reg(ctx: ExecutionContext, ins: Instruction) -> None:
    skip_next_if(ctx.state, ctx.state.v[ins.x] != ctx.state.v[ins.y])

# --- JP V0 ---
# @intent:responsibility Bnnn - JP V0, nnn: nnnにV0を加えたアドレスへジャンプします。
def execute_jp_v0(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.pc = ins.nnn + ctx.state.v[0x0]
