import yaml
from typing import Dict, Any, Optional

from chip8_tracer.common.errors import ConfigError
from .models import EmulatorConfig, DisplayConfig, KeypadConfig, ToneConfig, FRONTENDS


class ConfigLoader:
    def load_from_file(self, path: str) -> EmulatorConfig:
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config '{path}': {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in '{path}': {e}") from e
        return self.parse(data or {})

    def parse(self, data: Dict[str, Any]) -> EmulatorConfig:
        if not isinstance(data, dict):
            raise ConfigError("Config root must be a mapping.")

        frontend = data.get("frontend", "qt")
        if frontend not in FRONTENDS:
            raise ConfigError(f"Unknown frontend '{frontend}' (expected one of {', '.join(FRONTENDS)}).")

        cycle_delay_us = self._parse_int(data.get("cycle_delay_us", 2000), "cycle_delay_us")
        if cycle_delay_us < 0:
            raise ConfigError("cycle_delay_us must not be negative.")

        max_cycles = self._parse_optional_int(data.get("max_cycles"), "max_cycles")
        if max_cycles is not None and max_cycles < 0:
            raise ConfigError("max_cycles must not be negative.")

        return EmulatorConfig(
            frontend=frontend,
            cycle_delay_us=cycle_delay_us,
            max_cycles=max_cycles,
            seed=self._parse_optional_int(data.get("seed"), "seed"),
            display=self._parse_display(self._section(data, "display")),
            keypad=self._parse_keypad(data.get("keypad")),
            tone=self._parse_tone(self._section(data, "tone")),
        )

    def _parse_display(self, data: Dict[str, Any]) -> DisplayConfig:
        defaults = DisplayConfig()
        pixel_size = self._parse_int(data.get("pixel_size", defaults.pixel_size), "display.pixel_size")
        pixel_gap = self._parse_int(data.get("pixel_gap", defaults.pixel_gap), "display.pixel_gap")
        if pixel_size <= 0 or not 0 <= pixel_gap < pixel_size:
            raise ConfigError("display.pixel_size must be positive and pixel_gap smaller than it.")
        return DisplayConfig(
            pixel_size=pixel_size,
            pixel_gap=pixel_gap,
            on_color=str(data.get("on_color", defaults.on_color)),
            off_color=str(data.get("off_color", defaults.off_color)),
            title=str(data.get("title", defaults.title)),
        )

    # @intent:responsibility キー割り当てを解析します。指定されたキーのみ既定値を上書きします。
    def _parse_keypad(self, data: Optional[Dict[Any, Any]]) -> KeypadConfig:
        config = KeypadConfig()
        if not data:
            return config
        if not isinstance(data, dict):
            raise ConfigError("keypad must be a mapping of CHIP-8 key to key name.")
        for raw_key, name in data.items():
            key = self._parse_int(raw_key, "keypad key")
            if not 0 <= key <= 0xF:
                raise ConfigError(f"Keypad key {raw_key} is outside 0x0-0xF.")
            config.mapping[key] = str(name)
        return config

    # @intent:responsibility サブセクションを取得します。省略時は空のマッピングとして扱います。
    def _section(self, data: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = data.get(name)
        if section is None:
            return {}
        if not isinstance(section, dict):
            raise ConfigError(f"{name} must be a mapping.")
        return section

    def _parse_tone(self, data: Dict[str, Any]) -> ToneConfig:
        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ConfigError(f"tone.enabled must be true or false, got {enabled!r}.")
        return ToneConfig(
            enabled=enabled,
            sound_file=data.get("sound_file"),
        )

    def _parse_optional_int(self, value: Any, name: str) -> Optional[int]:
        if value is None:
            return None
        return self._parse_int(value, name)

    def _parse_int(self, value: Any, name: str = "value") -> int:
        if isinstance(value, bool):
            raise ConfigError(f"Invalid integer for {name}: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError:
                pass
        raise ConfigError(f"Invalid integer for {name}: {value}")
