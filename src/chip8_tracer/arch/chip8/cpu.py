# src/chip8_tracer/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。
"""
import logging
import random
from typing import Dict, List, Optional, Tuple

from chip8_tracer.common.errors import RomLoadError
from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus, RAM
from chip8_tracer.transport.devices import DisplaySink, InputProvider
from chip8_tracer.arch.chip8.constants import (
    MEMORY_SIZE, PROGRAM_START_ADDRESS, MAX_PROGRAM_SIZE, FONT_BASE_ADDRESS, FONT_SET
)
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8.framebuffer import Framebuffer
from chip8_tracer.arch.chip8.instruction import Instruction, decode
from chip8_tracer.arch.chip8.instructions import execute_instruction, describe_instruction
from chip8_tracer.arch.chip8.instructions.base import ExecutionContext

logger = logging.getLogger(__name__)


# @intent:utility_function 4KBのRAMを全アドレス空間にマップしたBusを生成します。
def create_bus() -> Bus:
    bus = Bus()
    bus.register_device(0x0000, MEMORY_SIZE - 1, RAM(MEMORY_SIZE))
    return bus


# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジックを提供する。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。

    構築時にメモリ先頭へフォントを、0x200からプログラムを読み込みます。
    プログラムが収まらない場合は何も初期化せずにRomLoadErrorを送出します。
    """
    # @intent:pre-condition programは MAX_PROGRAM_SIZE バイト以下である必要があります。
    def __init__(
        self,
        program: bytes,
        display: Optional[DisplaySink] = None,
        keypad: Optional[InputProvider] = None,
        rng: Optional[random.Random] = None,
        bus: Optional[Bus] = None,
    ):
        program = bytes(program)
        if len(program) > MAX_PROGRAM_SIZE:
            raise RomLoadError(
                f"Program of {len(program)} bytes exceeds the available {MAX_PROGRAM_SIZE} bytes."
            )
        self._program = program
        self._program_end = PROGRAM_START_ADDRESS + len(program)
        self._framebuffer = Framebuffer()
        self._display = display
        self._keypad = keypad
        self._rng = rng if rng is not None else random.Random()
        super().__init__(bus if bus is not None else create_bus())
        self._load_memory()
        self._context = self._create_context()

    def _load_memory(self) -> None:
        self._bus.load(0x0000, bytes(self._bus.get_size()))
        self._bus.load(FONT_BASE_ADDRESS, FONT_SET)
        self._bus.load(PROGRAM_START_ADDRESS, self._program)

    def _create_context(self) -> ExecutionContext:
        return ExecutionContext(
            state=self._state,
            bus=self._bus,
            framebuffer=self._framebuffer,
            display=self._display,
            keypad=self._keypad,
            rng=self._rng,
        )

    # @intent:responsibility CHIP-8の初期状態を生成する。
    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    # @intent:responsibility リセット処理。メモリを再ロードし、画面を消去する。
    def reset(self) -> None:
        super().reset()
        self._framebuffer.clear()
        self._load_memory()
        self._context = self._create_context()

    @property
    def framebuffer(self) -> Framebuffer:
        return self._framebuffer

    @property
    def program_end(self) -> int:
        """読み込まれたプログラムの終端アドレス（排他的）。"""
        return self._program_end

    # @intent:responsibility 命令フェッチ。プログラム領域を越えた場合はNoneを返す。
    # @intent:rationale 0x200未満（フォント領域など）へのジャンプは終端とはみなさず、そのまま実行します。
    def _fetch(self) -> Optional[int]:
        pc = self._state.pc
        if pc >= PROGRAM_START_ADDRESS and pc >= self._program_end:
            return None
        high = self._bus.read(pc)
        low = self._bus.read(pc + 1)
        self._state.pc = pc + 2
        return (high << 8) | low

    # @intent:responsibility 命令デコード
    def _decode(self, opcode: int) -> Instruction:
        return decode(opcode >> 8, opcode & 0xFF)

    # @intent:responsibility 命令実行
    def _execute(self, instruction: Instruction) -> None:
        address = self._state.pc - 2
        logger.debug("%#05x: %s", address, instruction.hex)
        execute_instruction(instruction, self._context, address)

    def _describe(self, instruction: Instruction) -> Operation:
        return describe_instruction(instruction)

    # @intent:accessor Fx0Aによるキー入力待ちの対象レジスタ（待機中でなければNone）。
    @property
    def awaiting_key(self) -> Optional[int]:
        return self._state.awaiting_key

    # @intent:responsibility キー入力待ちを解決し、押されたキーをVxへ格納する。
    # @intent:pre-condition キー入力待ち中である必要があります。
    def resolve_key_wait(self, key: int) -> None:
        register = self._state.awaiting_key
        if register is None:
            raise RuntimeError("No key wait is pending.")
        self._state.v[register] = key & 0x0F
        self._state.awaiting_key = None

    # @intent:responsibility レジスタマップ（UI・デバッガ表示用）を返す。
    def get_register_map(self) -> Dict[str, int]:
        state = self._state
        registers = {f"V{index:X}": value for index, value in enumerate(state.v)}
        registers.update({
            "I": state.i,
            "PC": state.pc,
            "SP": state.sp,
            "DT": state.delay_timer,
            "ST": state.sound_timer,
        })
        return registers

    # @intent:responsibility 指定範囲の逆アセンブル結果を返す。
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        from chip8_tracer.arch.chip8 import disassembler
        return disassembler.disassemble(self._bus, start_addr, length)
