# src/chip8_tracer/ui/tone.py
"""
GUI用トーンデバイス。
"""
import logging
from typing import Optional

from PySide6.QtCore import QObject, QUrl, Signal, Slot
from PySide6.QtWidgets import QApplication

from chip8_tracer.transport.devices import ToneDevice

logger = logging.getLogger(__name__)

# @intent:responsibility Run LoopスレッドからGUIスレッドへトーン要求を運ぶQObject。
class ToneBridge(QObject):
    tone_requested = Signal()

    def __init__(self, sound_file: Optional[str] = None, parent=None):
        super().__init__(parent)
        self._effect = None
        if sound_file:
            # QtMultimediaはサウンドファイル指定時のみ読み込む
            from PySide6.QtMultimedia import QSoundEffect
            self._effect = QSoundEffect(self)
            self._effect.setSource(QUrl.fromLocalFile(sound_file))
            logger.debug("Tone uses sound file %s.", sound_file)
        self.tone_requested.connect(self._play)

    # @intent:responsibility 再生中でなければ効果音を鳴らし、効果音が無ければビープを鳴らします。
    @Slot()
    def _play(self) -> None:
        if self._effect is not None:
            if not self._effect.isPlaying():
                self._effect.play()
        else:
            QApplication.beep()


# @intent:responsibility ToneDeviceの実装。play()はどのスレッドから呼ばれても即座に戻ります。
class QtTone(ToneDevice):
    def __init__(self, sound_file: Optional[str] = None):
        self.bridge = ToneBridge(sound_file)

    def play(self) -> None:
        self.bridge.tone_requested.emit()
