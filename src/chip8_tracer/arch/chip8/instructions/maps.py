# src/chip8_tracer/arch/chip8/instructions/maps.py
"""
オペコードと命令実装のマッピング定義。

ディスパッチは2段階で行います。まず nibble1（命令ファミリ）で振り分け、
ファミリ 0x0, 0x8, 0xE, 0xF についてはさらに下位ニブル/下位バイトで個別命令を選択します。
"""
from typing import Callable, Dict, Optional, Tuple

from chip8_tracer.arch.chip8.instruction import Instruction
from .base import ExecutionContext
from . import control, load, alu, display, keypad

# Execution Function Type
ExecFunc = Callable[[ExecutionContext, Instruction], None]

# Opcode Entry: (Mnemonic, Operand Format, Execution Function)
# Operand Formatは x, y, n, nn, nnn を埋め込む str.format 書式。
OpcodeEntry = Tuple[str, str, ExecFunc]

# @intent:map 0x0 ファミリ（命令語全体で一致）。
SYSTEM_MAP: Dict[int, OpcodeEntry] = {
    0x00E0: ("CLS", "", display.execute_cls),
    0x00EE: ("RET", "", control.execute_ret),
}

# @intent:map nibble1 のみで命令が確定するファミリ。
FAMILY_MAP: Dict[int, OpcodeEntry] = {
    0x1: ("JP",   "${nnn:03X}",               control.execute_jp),
    0x2: ("CALL", "${nnn:03X}",               control.execute_call),
    0x3: ("SE",   "V{x:X}, ${nn:02X}",        control.execute_se_byte),
    0x4: ("SNE",  "V{x:X}, ${nn:02X}",        control.execute_sne_byte),
    0x5: ("SE",   "V{x:X}, V{y:X}",           control.execute_se_reg),
    0x6: ("LD",   "V{x:X}, ${nn:02X}",        load.execute_ld_byte),
    0x7: ("ADD",  "V{x:X}, ${nn:02X}",        load.execute_add_byte),
    0x9: ("SNE",  "V{x:X}, V{y:X}",           control.execute_sne_reg),
    0xA: ("LD",   "I, ${nnn:03X}",            load.execute_ld_i),
    0xB: ("JP",   "V0, ${nnn:03X}",           control.execute_jp_v0),
    0xC: ("RND",  "V{x:X}, ${nn:02X}",        alu.execute_rnd),
    0xD: ("DRW",  "V{x:X}, V{y:X}, {n}",      display.execute_drw),
}

# @intent:map 0x8 ファミリ（nibble4 で選択）。
ALU_MAP: Dict[int, OpcodeEntry] = {
    0x0: ("LD",   "V{x:X}, V{y:X}", alu.execute_ld_reg),
    0x1: ("OR",   "V{x:X}, V{y:X}", alu.execute_or),
    0x2: ("AND",  "V{x:X}, V{y:X}", alu.execute_and),
    0x3: ("XOR",  "V{x:X}, V{y:X}", alu.execute_xor),
    0x4: ("ADD",  "V{x:X}, V{y:X}", alu.execute_add_reg),
    0x5: ("SUB",  "V{x:X}, V{y:X}", alu.execute_sub),
    0x6: ("SHR",  "V{x:X}",         alu.execute_shr),
    0x7: ("SUBN", "V{x:X}, V{y:X}", alu.execute_subn),
    0xE: ("SHL",  "V{x:X}",         alu.execute_shl),
}

# @intent:map 0xE ファミリ（下位バイトで選択）。
KEY_MAP: Dict[int, OpcodeEntry] = {
    0x9E: ("SKP",  "V{x:X}", keypad.execute_skp),
    0xA1: ("SKNP", "V{x:X}", keypad.execute_sknp),
}

# @intent:map 0xF ファミリ（下位バイトで選択）。
MISC_MAP: Dict[int, OpcodeEntry] = {
    0x07: ("LD",  "V{x:X}, DT",  load.execute_ld_vx_dt),
    0x0A: ("LD",  "V{x:X}, K",   keypad.execute_wait_key),
    0x15: ("LD",  "DT, V{x:X}",  load.execute_ld_dt_vx),
    0x18: ("LD",  "ST, V{x:X}",  load.execute_ld_st_vx),
    0x1E: ("ADD", "I, V{x:X}",   load.execute_add_i),
    0x29: ("LD",  "F, V{x:X}",   load.execute_ld_font),
    0x33: ("LD",  "B, V{x:X}",   load.execute_bcd),
    0x55: ("LD",  "[I], V{x:X}", load.execute_store_registers),
    0x65: ("LD",  "V{x:X}, [I]", load.execute_load_registers),
}

# @intent:responsibility 命令に対応するエントリを2段階ディスパッチで検索します。
# @intent:post-condition 一致する命令がなければNoneを返します。
def lookup(ins: Instruction) -> Optional[OpcodeEntry]:
    family = ins.nibble1
    if family == 0x0:
        return SYSTEM_MAP.get(ins.raw)
    if family == 0x8:
        return ALU_MAP.get(ins.nibble4)
    if family == 0xE:
        return KEY_MAP.get(ins.nn)
    if family == 0xF:
        return MISC_MAP.get(ins.nn)
    if family in (0x5, 0x9) and ins.nibble4 != 0x0:
        return None
    return FAMILY_MAP.get(family)
