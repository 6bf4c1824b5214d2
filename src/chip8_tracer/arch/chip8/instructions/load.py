# src/chip8_tracer/arch/chip8/instructions/load.py
"""
ロード/ストア命令（レジスタ、インデックス、タイマー、メモリ転送）の実装。
"""
from chip8_tracer.arch.chip8.instruction import Instruction
from chip8_tracer.arch.chip8.constants import FONT_BASE_ADDRESS, FONT_GLYPH_SIZE
from .base import ExecutionContext

# @intent:responsibility 6xnn - LD Vx, nn
def execute_ld_byte(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.v[ins.x] = ins.nn

# @intent:responsibility 7xnn - ADD Vx, nn: 8ビットで桁あふれし、VFは変更しません。
def execute_add_byte(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.v[ins.x] = (ctx.state.v[ins.x] + ins.nn) & 0xFF

# @intent:responsibility Annn - LD I, nnn
def execute_ld_i(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.i = ins.nnn

# --- Timers ---
# @intent:responsibility Fx07 - LD Vx, DT
def execute_ld_vx_dt(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.v[ins.x] = ctx.state.delay_timer

# @intent:responsibility Fx15 - LD DT, Vx
def execute_ld_dt_vx(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.delay_timer = ctx.state.v[ins.x]

# @intent:responsibility Fx18 - LD ST, Vx
def execute_ld_st_vx(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.sound_timer = ctx.state.v[ins.x]

# --- Index ---
# @intent:responsibility Fx1E - ADD I, Vx: Iは16ビットで桁あふれし、VFは変更しません。
def execute_add_i(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.i = (ctx.state.i + ctx.state.v[ins.x]) & 0xFFFF

# @intent:responsibility Fx29 - LD F, Vx: Vxの下位ニブルに対応するフォントグリフのアドレスをIに設定します。
def execute_ld_font(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.i = FONT_BASE_ADDRESS + (ctx.state.v[ins.x] & 0x0F) * FONT_GLYPH_SIZE

# --- Memory ---
# @intent:responsibility 転送範囲の末尾がマップ済みであることを書き込み前に確認します。
def _check_range(ctx: ExecutionContext, length: int) -> None:
    ctx.bus.peek(ctx.state.i + length - 1)

# @intent:responsibility Fx33 - LD B, Vx: Vxの10進3桁を上位桁から memory[I..I+2] に書き込みます。
# @intent:post-condition 範囲外の場合はメモリを変更せずにMemoryBoundsErrorとなります。
def execute_bcd(ctx: ExecutionContext, ins: Instruction) -> None:
    value = ctx.state.v[ins.x]
    _check_range(ctx, 3)
    for offset, digit in enumerate((value // 100, (value // 10) % 10, value % 10)):
        ctx.bus.write(ctx.state.i + offset, digit)

# @intent:responsibility Fx55 - LD [I], Vx: V0..Vx を memory[I..I+x] に保存します。Iは変更しません。
def execute_store_registers(ctx: ExecutionContext, ins: Instruction) -> None:
    _check_range(ctx, ins.x + 1)
    for index in range(ins.x + 1):
        ctx.bus.write(ctx.state.i + index, ctx.state.v[index])

# @intent:responsibility Fx65 - LD Vx, [I]: memory[I..I+x] を V0..Vx に読み込みます。Iは変更しません。
def execute_load_registers(ctx: ExecutionContext, ins: Instruction) -> None:
    values = [ctx.bus.read(ctx.state.i + index) for index in range(ins.x + 1)]
    ctx.state.v[:ins.x + 1] = values
