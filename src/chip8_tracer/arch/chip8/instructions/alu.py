# src/chip8_tracer/arch/chip8/instructions/alu.py
"""
算術論理演算命令（8xyN グループと乱数）の実装。

フラグを更新する命令は、結果を書き込んだ後にVFを設定します。
そのため x = F の場合、VFには演算結果ではなくフラグが残ります。
"""
from chip8_tracer.arch.chip8.instruction import Instruction
from .base import ExecutionContext

# @intent:responsibility 8xy0 - LD Vx, Vy
def execute_ld_reg(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.v[ins.x] = ctx.state.v[ins.y]

# @intent:responsibility 8xy1 - OR Vx, Vy
def execute_or(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.v[ins.x] |= ctx.state.v[ins.y]

# @intent:responsibility 8xy2 - AND Vx, Vy
def execute_and(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.v[ins.x] &= ctx.state.v[ins.y]

# @intent:responsibility 8xy3 - XOR Vx, Vy
def execute_xor(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.v[ins.x] ^= ctx.state.v[ins.y]

# @intent:responsibility 8xy4 - ADD Vx, Vy: 255を超えた場合 VF=1（桁上がり）。
def execute_add_reg(ctx: ExecutionContext, ins: Instruction) -> None:
    state = ctx.state
    res = state.v[ins.x] + state.v[ins.y]
    state.v[ins.x] = res & 0xFF
    state.vf = 1 if res > 0xFF else 0

# @intent:responsibility 8xy5 - SUB Vx, Vy: Vx >= Vy の場合 VF=1（借りなし）。
# @intent:invariant 比較はレジスタ番号ではなくレジスタの値で行います。
def execute_sub(ctx: ExecutionContext, ins: Instruction) -> None:
    state = ctx.state
    v1 = state.v[ins.x]
    v2 = state.v[ins.y]
    state.v[ins.x] = (v1 - v2) & 0xFF
    state.vf = 1 if v1 >= v2 else 0

# @intent:responsibility 8xy6 - SHR Vx: シフト前の最下位ビットをVFに設定します。
def execute_shr(ctx: ExecutionContext, ins: Instruction) -> None:
    state = ctx.state
    v1 = state.v[ins.x]
    state.v[ins.x] = v1 >> 1
    state.vf = v1 & 0x01

# @intent:responsibility 8xy7 - SUBN Vx, Vy: Vx = Vy - Vx、Vy >= Vx の場合 VF=1。
def execute_subn(ctx: ExecutionContext, ins: Instruction) -> None:
    state = ctx.state
    v1 = state.v[ins.x]
    v2 = state.v[ins.y]
    state.v[ins.x] = (v2 - v1) & 0xFF
    state.vf = 1 if v2 >= v1 else 0

# @intent:responsibility 8xyE - SHL Vx: シフト前の最上位ビットをVFに設定します。
def execute_shl(ctx: ExecutionContext, ins: Instruction) -> None:
    state = ctx.state
    v1 = state.v[ins.x]
    state.v[ins.x] = (v1 << 1) & 0xFF
    state.vf = (v1 >> 7) & 0x01

# --- RND ---
# @intent:responsibility Cxnn - RND Vx, nn: 0-255の乱数とnnの論理積をVxに設定します。
def execute_rnd(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.v[ins.x] = ctx.rng.randrange(0x100) & ins.nn
