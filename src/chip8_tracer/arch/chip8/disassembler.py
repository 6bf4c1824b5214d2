# src/chip8_tracer/arch/chip8/disassembler.py
"""
CHIP-8 逆アセンブラ。
"""
from typing import List, Tuple

from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.instruction import decode
from chip8_tracer.arch.chip8.instructions import describe_instruction

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルする。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    メモリを解析し、(アドレス, HEX, ニーモニック) のリストを返す。
    全ての命令は2バイト固定長。未定義の命令語は "DW $XXXX" として表示する。
    範囲の末尾に1バイトだけ残る場合は "DB $XX" として表示する。
    """
    results = []
    end_addr = min(start_addr + length, bus.get_size())
    addr = start_addr

    while addr < end_addr:
        if addr + 1 >= end_addr:
            byte = bus.peek(addr)
            results.append((addr, f"{byte:02X}", f"DB ${byte:02X}"))
            break

        # ログを汚さないようpeekで読む
        ins = decode(bus.peek(addr), bus.peek(addr + 1))
        operation = describe_instruction(ins)
        if operation.mnemonic == "UNKNOWN":
            text = f"DW ${ins.raw:04X}"
        else:
            text = operation.text()

        results.append((addr, f"{ins.raw >> 8:02X} {ins.raw & 0xFF:02X}", text))
        addr += 2

    return results


# @intent:utility_function 逆アセンブル結果をテキストリストに整形します（CLIの --disassemble 用）。
def format_listing(lines: List[Tuple[int, str, str]]) -> str:
    return "\n".join(f"{addr:04X}  {hex_str:<5}  {text}" for addr, hex_str, text in lines)
