# src/chip8_tracer/ui/main_window.py
"""
メインウィンドウの実装。
ウィンドウはディスプレイ（DisplaySink）とキーパッドの入力元を兼ね、
Run Loopはバックグラウンドスレッドで実行されます。
"""
import logging
import threading
from typing import Dict, Optional

from PySide6.QtWidgets import QMainWindow, QMessageBox
from PySide6.QtGui import QCloseEvent, QKeyEvent
from PySide6.QtCore import Qt, QObject, QThread, Signal, Slot

from chip8_tracer.transport.devices import DisplaySink, FrameSnapshot
from chip8_tracer.transport.keypad import Keypad
from chip8_tracer.runtime.run_loop import RunLoop, RunResult, StopReason
from chip8_tracer.config.models import DisplayConfig, KeypadConfig
from .screen_view import ScreenView

logger = logging.getLogger(__name__)

# @intent:utility_function 設定のキー名（"1", "Q" など）をQtのキーコードに変換します。
def resolve_key_mapping(config: KeypadConfig) -> Dict[int, int]:
    """
    Qtキーコード -> CHIP-8キー の辞書を返します。解決できないキー名は警告して無視します。
    """
    mapping: Dict[int, int] = {}
    for chip8_key, name in config.mapping.items():
        qt_key = getattr(Qt.Key, f"Key_{name.upper()}", None)
        if qt_key is None:
            logger.warning("Unknown key name '%s' for CHIP-8 key %X; ignored.", name, chip8_key)
            continue
        mapping[int(qt_key)] = chip8_key
    return mapping


# @intent:responsibility Run LoopスレッドからGUIスレッドへフレームを運ぶQObject。
class FrameBridge(QObject):
    frame_ready = Signal(object)


# @intent:responsibility ウィンドウをDisplaySinkとしてRun Loopに公開するアダプタ。
# @intent:invariant スレッド間で共有されるのは不変のフレームスナップショットと開閉フラグのみです。
class WindowDisplay(DisplaySink):
    def __init__(self, bridge: FrameBridge):
        self._bridge = bridge
        self._open = threading.Event()
        self._open.set()

    def render(self, frame: FrameSnapshot) -> None:
        self._bridge.frame_ready.emit(frame)

    def is_open(self) -> bool:
        return self._open.is_set()

    def close(self) -> None:
        self._open.clear()


# @intent:responsibility Run Loopのrun()をノンブロッキングで実行します。
class EmulatorThread(QThread):
    """
    Run Loopのrun()をバックグラウンドで実行するためのスレッド。
    """
    run_finished = Signal(object)

    def __init__(self, run_loop: RunLoop):
        super().__init__()
        self.run_loop = run_loop
        self.result: Optional[RunResult] = None

    def run(self):
        self.result = self.run_loop.run()
        self.run_finished.emit(self.result)


# @intent:responsibility エミュレータのウィンドウを定義し、画面表示とキー入力を仲介します。
class Chip8Window(QMainWindow):
    """
    エミュレータのメインウィンドウクラス。
    """
    def __init__(self, display_config: Optional[DisplayConfig] = None,
                 keypad_config: Optional[KeypadConfig] = None, parent=None):
        super(Chip8Window, self).__init__(parent)
        display_config = display_config or DisplayConfig()
        self.setWindowTitle(display_config.title)

        self.screen_view = ScreenView(display_config)
        self.setCentralWidget(self.screen_view)

        self._bridge = FrameBridge(self)
        self._bridge.frame_ready.connect(self.screen_view.set_frame)
        self.display = WindowDisplay(self._bridge)
        self.keypad = Keypad()
        self._key_mapping = resolve_key_mapping(keypad_config or KeypadConfig())

        self.emulator_thread: Optional[EmulatorThread] = None

    # @intent:responsibility 実行するRun Loopを設定します。
    def attach(self, run_loop: RunLoop) -> None:
        self.emulator_thread = EmulatorThread(run_loop)
        self.emulator_thread.run_finished.connect(self._on_run_finished)

    def start(self) -> None:
        if self.emulator_thread is not None:
            self.emulator_thread.start()

    # @intent:responsibility 押されたキーをCHIP-8キーに変換してキーパッドへ渡します。
    def keyPressEvent(self, event: QKeyEvent):
        key = self._key_mapping.get(int(event.key()))
        if key is None or event.isAutoRepeat():
            super().keyPressEvent(event)
            return
        self.keypad.press(key)

    def keyReleaseEvent(self, event: QKeyEvent):
        key = self._key_mapping.get(int(event.key()))
        if key is None or event.isAutoRepeat():
            super().keyReleaseEvent(event)
            return
        self.keypad.release(key)

    # @intent:responsibility Run Loopの終了結果を表示します。致命的エラーはダイアログで通知します。
    @Slot(object)
    def _on_run_finished(self, result: RunResult):
        if result.reason == StopReason.FAULT:
            QMessageBox.critical(self, "Error", f"Emulation stopped: {result.error}")
        self.statusBar().showMessage(f"Stopped ({result.reason.value}, {result.cycles} cycles)")

    # @intent:responsibility ウィンドウが閉じられた際に、Run Loopを停止させスレッドの終了を待機します。
    def closeEvent(self, event: QCloseEvent):
        """
        ウィンドウが閉じられる際のイベントハンドラ。
        ディスプレイを閉じ、キー待ちを解除してからスレッドの完全な終了を待機します。
        """
        self.display.close()
        self.keypad.close()
        if self.emulator_thread is not None and self.emulator_thread.isRunning():
            # 終了通知のダイアログでGUIスレッドがブロックされないよう切断する
            try:
                self.emulator_thread.run_finished.disconnect(self._on_run_finished)
            except RuntimeError:
                pass
            self.emulator_thread.wait()
        event.accept()
