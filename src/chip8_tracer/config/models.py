from dataclasses import dataclass, field
from typing import Dict, Optional

FRONTENDS = ("qt", "terminal", "headless")

# @intent:constant QWERTYキーボードの左側4x4をCHIP-8キーパッドに割り当てる既定配置。
#                  1 2 3 4 / Q W E R / A S D F / Z X C V
#                  -> 1 2 3 C / 4 5 6 D / 7 8 9 E / A 0 B F
DEFAULT_KEY_MAPPING: Dict[int, str] = {
    0x1: "1", 0x2: "2", 0x3: "3", 0xC: "4",
    0x4: "Q", 0x5: "W", 0x6: "E", 0xD: "R",
    0x7: "A", 0x8: "S", 0x9: "D", 0xE: "F",
    0xA: "Z", 0x0: "X", 0xB: "C", 0xF: "V",
}

@dataclass
class DisplayConfig:
    pixel_size: int = 20
    pixel_gap: int = 1
    on_color: str = "#FFFFFF"
    off_color: str = "#000000"
    title: str = "Chip8"

@dataclass
class KeypadConfig:
    mapping: Dict[int, str] = field(default_factory=lambda: dict(DEFAULT_KEY_MAPPING))

@dataclass
class ToneConfig:
    enabled: bool = True
    sound_file: Optional[str] = None

@dataclass
class EmulatorConfig:
    frontend: str = "qt"
    cycle_delay_us: int = 2000
    max_cycles: Optional[int] = None
    seed: Optional[int] = None
    display: DisplayConfig = field(default_factory=DisplayConfig)
    keypad: KeypadConfig = field(default_factory=KeypadConfig)
    tone: ToneConfig = field(default_factory=ToneConfig)

    @property
    def cycle_delay(self) -> float:
        """イテレーション間の待機時間（秒）。"""
        return self.cycle_delay_us / 1_000_000
