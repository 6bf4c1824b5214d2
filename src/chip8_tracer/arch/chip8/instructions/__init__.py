# src/chip8_tracer/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from typing import Optional

from chip8_tracer.common.errors import DecodeError
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.arch.chip8.instruction import Instruction
from .base import ExecutionContext
from .maps import lookup

# @intent:responsibility デコードされたCHIP-8命令を実行します。
# @intent:post-condition 未定義の命令の場合は状態を変更せずにDecodeErrorを送出します。
def execute_instruction(ins: Instruction, ctx: ExecutionContext, address: Optional[int] = None) -> None:
    """
    デコードされたCHIP-8命令を実行し、CPUの状態を変更します。
    """
    entry = lookup(ins)
    if entry is None:
        raise DecodeError(ins.raw, address)
    _, _, executor = entry
    executor(ctx, ins)

# @intent:responsibility 命令をニーモニックとオペランドを持つOperationに変換します。
def describe_instruction(ins: Instruction) -> Operation:
    """
    未定義の命令の場合は"UNKNOWN"を返します。
    """
    entry = lookup(ins)
    if entry is None:
        return Operation(opcode_hex=ins.hex, mnemonic="UNKNOWN", operands=[f"${ins.raw:04X}"])
    mnemonic, operand_format, _ = entry
    operand_text = operand_format.format(x=ins.x, y=ins.y, n=ins.n, nn=ins.nn, nnn=ins.nnn)
    operands = operand_text.split(", ") if operand_text else []
    return Operation(opcode_hex=ins.hex, mnemonic=mnemonic, operands=operands)
