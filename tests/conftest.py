# tests/conftest.py
"""
テスト共通の設定とフィクスチャ。
"""
import os

# UIテストはウィンドウシステムなしで実行する
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from chip8_tracer.arch.chip8.cpu import Chip8Cpu


def words_to_bytes(*words: int) -> bytes:
    return b"".join(word.to_bytes(2, "big") for word in words)


# @intent:fixture 16ビット命令語の並びからプログラムを組み立ててCPUを生成する関数を返します。
@pytest.fixture
def make_cpu():
    def _make(*words, data: bytes = b"", **kwargs) -> Chip8Cpu:
        return Chip8Cpu(words_to_bytes(*words) + data, **kwargs)
    return _make


# @intent:fixture 16ビット命令語の並びをROMファイルに書き出し、そのパスを返す関数を返します。
@pytest.fixture
def rom_file(tmp_path):
    def _write(*words: int) -> str:
        path = tmp_path / "test.ch8"
        path.write_bytes(words_to_bytes(*words))
        return str(path)
    return _write
