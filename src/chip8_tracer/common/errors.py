"""
共通の例外定義を提供するモジュール。

エミュレータの各レイヤーで発生する致命的な状態を型で区別します。
Run Loopはこれらを境界で捕捉し、停止理由として呼び出し元へ返します。
"""
from typing import Optional


# @intent:responsibility 全てのエミュレータ例外の基底クラス。
class Chip8Error(Exception):
    """
    エミュレータが検出した回復不能な状態の基底例外。
    """


# @intent:responsibility ROMの読み込み失敗（読み込み不可、容量超過）を表します。
class RomLoadError(Chip8Error):
    """
    ROMが読み込めない、またはプログラム領域に収まらない場合に送出されます。
    """


# @intent:responsibility 未定義のオペコードを表します。
class DecodeError(Chip8Error):
    """
    ニブルの組み合わせがどの命令にも一致しない場合に送出されます。
    """
    def __init__(self, raw: int, address: Optional[int] = None):
        self.raw = raw
        self.address = address
        location = f" at {address:#05x}" if address is not None else ""
        super().__init__(f"Unknown opcode {raw:04X}{location}")


# @intent:responsibility 範囲外アクセスの基底クラス。デコード失敗とは区別されます。
class BoundsError(Chip8Error):
    """
    メモリやスタックの範囲外アクセスを表す例外。
    """


class MemoryBoundsError(BoundsError):
    """
    アドレス空間の外側へのメモリアクセス。
    """
    def __init__(self, address: int, size: Optional[int] = None):
        self.address = address
        self.size = size
        limit = f" (memory size {size})" if size is not None else ""
        super().__init__(f"Address {address:#06x} out of bounds{limit}.")


class StackOverflowError(BoundsError):
    """
    サブルーチン呼び出しの深さが上限を超えた場合に送出されます。
    """


class StackUnderflowError(BoundsError):
    """
    空のスタックからの復帰を試みた場合に送出されます。
    """


# @intent:responsibility 設定ファイルや設定値の不正を表します。
class ConfigError(Chip8Error):
    """
    設定ファイルの読み込み失敗、または不正な設定値。
    """
