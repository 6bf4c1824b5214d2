# src/chip8_tracer/arch/chip8/instructions/display.py
"""
画面命令（画面消去、スプライト描画）の実装。
"""
from chip8_tracer.arch.chip8.instruction import Instruction
from .base import ExecutionContext

# @intent:responsibility 00E0 - CLS: フレームバッファを全てゼロにし、ディスプレイへ通知します。
def execute_cls(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.framebuffer.clear()
    ctx.notify_display()

# @intent:responsibility Dxyn - DRW Vx, Vy, n: memory[I..I+n-1] のスプライトをXOR描画します。
def execute_drw(ctx: ExecutionContext, ins: Instruction) -> None:
    """
    描画開始位置は (Vx mod 64, Vy mod 32)。折り返しは開始位置にのみ適用され、
    画面外にはみ出す行・列はクリップされます。
    点灯していたピクセルが1つでも消えた場合、描画全体の完了後に VF=1、そうでなければ VF=0。

       Sprite row:  bit7 ... bit0  ->  左端から右へ8ピクセル
    """
    state = ctx.state
    fb = ctx.framebuffer
    start_x = state.v[ins.x] % fb.width
    start_y = state.v[ins.y] % fb.height

    # スプライトデータは描画前に全行読み込む（Iが範囲外なら描画せずにMemoryBoundsError）
    sprite = [ctx.bus.read(state.i + row) for row in range(ins.n)]

    collision = False
    for row, bits in enumerate(sprite):
        target_y = start_y + row
        if target_y >= fb.height:
            break
        for col in range(8):
            target_x = start_x + col
            if target_x >= fb.width:
                break
            if bits & (0x80 >> col):
                if fb.toggle(target_x, target_y):
                    collision = True

    state.vf = 1 if collision else 0
    ctx.notify_display()
