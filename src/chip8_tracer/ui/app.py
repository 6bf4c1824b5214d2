# src/chip8_tracer/ui/app.py
"""
Qtアプリケーションのエントリポイント。
アプリケーションを初期化し、エミュレータウィンドウを起動します。
"""
import sys
from typing import Optional

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QApplication

from chip8_tracer.config.builder import SystemBuilder
from chip8_tracer.config.models import EmulatorConfig
from chip8_tracer.runtime.run_loop import RunResult, StopReason
from chip8_tracer.runtime.stop_token import StopToken
from .main_window import Chip8Window
from .tone import QtTone

# @intent:responsibility ウィンドウを表示してRun Loopを実行し、ウィンドウが閉じられるまで待ちます。
def run_qt(config: EmulatorConfig, program: bytes, stop_token: Optional[StopToken] = None) -> RunResult:
    """
    プログラムが大きすぎる場合はウィンドウを表示する前にRomLoadErrorを送出します。
    """
    app = QApplication.instance() or QApplication(sys.argv)
    window = Chip8Window(config.display, config.keypad)
    tone = QtTone(config.tone.sound_file) if config.tone.enabled else None

    _, run_loop = SystemBuilder().build_system(
        config, program,
        display=window.display,
        keypad=window.keypad,
        tone=tone,
        stop_token=stop_token,
    )
    window.attach(run_loop)
    # ウィンドウ以外（SIGINTなど）から停止された場合もウィンドウを閉じる
    window.emulator_thread.finished.connect(window.close)
    # Pythonのシグナルハンドラ（SIGINT）が実行されるよう、定期的にインタプリタへ制御を戻す
    timer = QTimer()
    timer.timeout.connect(lambda: None)
    timer.start(200)

    window.show()
    window.start()
    app.exec()

    thread = window.emulator_thread
    thread.wait()
    if thread.result is not None:
        return thread.result
    return RunResult(reason=StopReason.DISPLAY_CLOSED, cycles=run_loop.cycles)
