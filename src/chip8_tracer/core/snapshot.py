# chip8_tracer/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令実行後のCPUとバスの状態を記録した不変のデータ構造を定義します。
デバッガへの情報提供と、トレース時の状態記録に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from chip8_tracer.core.state import CpuState
from chip8_tracer.transport.bus import BusAccessType, BusAccess


# @intent:responsibility 実行された命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    実行された命令の詳細（HEX、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode_hex: str # 例: "A22A"
    mnemonic: str # 例: "LD"
    operands: List[str] = field(default_factory=list) # 例: ["I", "$22A"]
    cycle_count: int = 1
    length: int = 2 # 命令のバイト長

    # @intent:responsibility 表示用のアセンブリ表記を返します。
    def text(self) -> str:
        if self.operands:
            return f"{self.mnemonic} {', '.join(self.operands)}"
        return self.mnemonic

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    """
    実行に関するメタデータ（累計サイクル数、シンボル情報など）を記録するデータクラス。
    """
    cycle_count: int
    symbol_info: Optional[str] = None # 例: "0x0200: LD I, $22A"

# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    ある一時点における、CPUとバスの状態を記録した不変のデータ構造。
    stateは実行後の状態のコピーであり、以降の実行で変化しません。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)

    # @intent:responsibility 指定した種別のバスアクセスのみを返します。
    def accesses(self, access_type: BusAccessType) -> List[BusAccess]:
        return [access for access in self.bus_activity if access.access_type == access_type]
