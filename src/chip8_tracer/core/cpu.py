# chip8_tracer/core/cpu.py
"""
Core Layer (抽象CPU)

このモジュールは、CPUの基本的な状態管理と命令サイクルの駆動に関する抽象化を提供します。
具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
import copy
from abc import ABC, abstractmethod
from typing import Any, Optional, List, Dict, Tuple

from chip8_tracer.transport.bus import Bus
from chip8_tracer.core.snapshot import Snapshot, Operation, Metadata
from chip8_tracer.core.state import CpuState

# @intent:responsibility 抽象CPUの基本機能とインターフェースを定義します。
class AbstractCpu(ABC):
    """
    全てのCPUエミュレーションの基底となる抽象クラス。
    Busとのインターフェース、基本的な状態管理、命令サイクルの抽象化を提供します。
    """
    # @intent:pre-condition `bus`は有効なBusオブジェクトである必要があります。
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0
        # @intent:rationale Stateオブジェクトの直接操作を避けるため、protectedな命名規則を採用。
        #                  外部からのアクセスは`get_state()`メソッドを介して行う。

    # @intent:responsibility 初期状態のCpuStateオブジェクトを生成します。
    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """
        CPUの初期状態を生成して返します。
        具体的なCPUアーキテクチャはこのメソッドを実装し、
        そのアーキテクチャに特化したCpuStateのサブクラスを返すことができます。
        """
        pass

    # @intent:responsibility CPUをリセットし、初期状態に戻します。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    def get_state(self) -> CpuState:
        """
        現在のCPUの状態（レジスタ値など）を返します。
        """
        return self._state

    def get_bus(self) -> Bus:
        return self._bus

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    # @intent:responsibility メモリから次の命令をフェッチします。
    @abstractmethod
    def _fetch(self) -> Optional[int]:
        """
        現在のPCから次の命令をフェッチし、その値を返します。
        フェッチ後、PCは次の命令の先頭を指すように更新されるべきです。
        プログラムの終端に達した場合はNoneを返します。
        """
        pass

    # @intent:responsibility フェッチした命令語を構造化された命令に変換します。
    @abstractmethod
    def _decode(self, opcode: int) -> Any:
        pass

    # @intent:responsibility デコードされた命令を実行し、CPUの状態を更新します。
    @abstractmethod
    def _execute(self, instruction: Any) -> None:
        pass

    # @intent:responsibility デコードされた命令を表示用のOperationに変換します。
    @abstractmethod
    def _describe(self, instruction: Any) -> Operation:
        pass

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:rationale Template Methodパターンを採用し、共通の実行フロー（ログクリア→フェッチ→デコード→実行→Snapshot生成）を定義します。
    def step(self) -> Optional[Snapshot]:
        """
        CPUを1命令サイクル進め、その時点でのCPUとバスの状態を含むSnapshotオブジェクトを返します。
        フェッチがプログラム終端を報告した場合は何も実行せずNoneを返します。
        デコード・実行の失敗は型付き例外として呼び出し元に伝播します。
        """
        # 1. 前処理: 前サイクルまでの残存ログを破棄
        self._bus.get_and_clear_activity_log()
        initial_pc = self._state.pc

        # 2. フェッチ (PCは命令長分進む)
        opcode = self._fetch()
        if opcode is None:
            return None

        # 3. デコード
        instruction = self._decode(opcode)

        # 4. 実行
        self._execute(instruction)

        # 5. 後処理 & Snapshot生成
        return self._create_snapshot(initial_pc, self._describe(instruction))

    # @intent:responsibility スナップショットを生成します。
    def _create_snapshot(self, initial_pc: int, operation: Operation) -> Snapshot:
        bus_activity = self._bus.get_and_clear_activity_log()
        self._cycle_count += operation.cycle_count

        return Snapshot(
            # 以降の実行で変化しないよう、実行後の状態をコピーして保持する
            state=copy.deepcopy(self._state),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, symbol_info=f"{initial_pc:#06x}: {operation.text()}"),
            bus_activity=bus_activity
        )

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        現在のレジスタ値を辞書形式で返す。
        UIやデバッガがCPUの内部構造を知らなくても値を参照できるようにするために使用される。
        """
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """
        指定されたメモリ範囲を逆アセンブルし、(address, hex_bytes, mnemonic) のタプルリストを返す。
        """
        pass
