# chip8_tracer/transport/devices.py
"""
Transport Layer (外部コラボレータ)

CPUコアが依存する外部デバイス（ディスプレイ、キーパッド、トーン）の
インターフェースを定義します。コアはこれらの能力に対して多相であり、
ヘッドレス、ターミナル、GUIの各実装を差し替えて使用できます。
"""
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from chip8_tracer.runtime.stop_token import StopToken

# @intent:data_structure 描画用のフレームバッファ読み取り専用スナップショット（行のタプル、各要素は0/1）。
FrameSnapshot = Tuple[Tuple[int, ...], ...]


# @intent:responsibility フレームバッファを受け取り描画するシンクのインターフェース。
class DisplaySink(ABC):
    """
    画面に影響する命令のたびに、フレームバッファのスナップショットを受け取ります。
    """
    @abstractmethod
    def render(self, frame: FrameSnapshot) -> None:
        pass

    # @intent:responsibility 表示先がまだ開いているかを返します。Run Loopが毎イテレーション参照します。
    @abstractmethod
    def is_open(self) -> bool:
        pass


# @intent:responsibility キー状態の問い合わせとキー入力待ちを提供するインターフェース。
class InputProvider(ABC):
    """
    16キーのCHIP-8キーパッド（0x0-0xF）への入力インターフェース。
    """
    @abstractmethod
    def is_key_pressed(self, key: int) -> bool:
        pass

    # @intent:responsibility 次のキー押下まで待機します。
    # @intent:post-condition 入力がキャンセルされた場合（ウィンドウが閉じられた、停止要求）はNoneを返します。
    @abstractmethod
    def wait_key(self, stop: Optional[StopToken] = None) -> Optional[int]:
        pass


# @intent:responsibility サウンドタイマーが非ゼロの間、ティックごとに発火されるトーンデバイス。
class ToneDevice(ABC):
    @abstractmethod
    def play(self) -> None:
        pass
