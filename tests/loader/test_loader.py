# tests/loader/test_loader.py
"""
chip8_tracer.loader.loaderモジュールの単体テスト。
ROMファイルの読み込みと、ROMパスの解決を検証します。
"""
import pytest

from chip8_tracer.common.errors import RomLoadError
from chip8_tracer.arch.chip8.constants import MAX_PROGRAM_SIZE
from chip8_tracer.loader.loader import RomLoader, ROM_ENV_VAR

# @intent:test_suite ROMローダー機能の検証。

class TestRomLoader:
    @pytest.fixture
    def loader(self):
        return RomLoader()

    def test_load_rom(self, loader, tmp_path):
        rom = tmp_path / "test.ch8"
        rom.write_bytes(bytes([0xA2, 0x2A, 0x60, 0x0C]))
        assert loader.load_rom(str(rom)) == bytes([0xA2, 0x2A, 0x60, 0x0C])

    def test_load_rom_at_capacity(self, loader, tmp_path):
        rom = tmp_path / "full.ch8"
        rom.write_bytes(bytes(MAX_PROGRAM_SIZE))
        assert len(loader.load_rom(str(rom))) == MAX_PROGRAM_SIZE

    # @intent:test_case_too_large プログラム領域に収まらないROMはエラーとなることを検証します。
    def test_load_rom_too_large(self, loader, tmp_path):
        rom = tmp_path / "big.ch8"
        rom.write_bytes(bytes(MAX_PROGRAM_SIZE + 1))
        with pytest.raises(RomLoadError, match="at most"):
            loader.load_rom(str(rom))

    def test_load_missing_rom(self, loader, tmp_path):
        with pytest.raises(RomLoadError, match="Cannot read ROM"):
            loader.load_rom(str(tmp_path / "missing.ch8"))


class TestResolvePath:
    def test_explicit_path_wins(self, monkeypatch):
        monkeypatch.setenv(ROM_ENV_VAR, "env.ch8")
        assert RomLoader.resolve_path("arg.ch8") == "arg.ch8"

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv(ROM_ENV_VAR, "env.ch8")
        assert RomLoader.resolve_path() == "env.ch8"

    def test_no_rom_given(self, monkeypatch):
        monkeypatch.delenv(ROM_ENV_VAR, raising=False)
        with pytest.raises(RomLoadError, match=ROM_ENV_VAR):
            RomLoader.resolve_path(None)
