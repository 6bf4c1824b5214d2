# chip8_tracer/loader/loader.py
"""
ROMローダーモジュール。
CHIP-8のROMはヘッダを持たない生のバイト列であり、0x200からそのまま配置されます。
"""
import logging
import os
from typing import Optional

from chip8_tracer.common.errors import RomLoadError
from chip8_tracer.arch.chip8.constants import MAX_PROGRAM_SIZE

logger = logging.getLogger(__name__)

# @intent:constant ROMパスが指定されなかった場合に参照される環境変数。
ROM_ENV_VAR = "ROM_FILE"


class RomLoader:
    """
    ROMファイルを読み込み、プログラム領域に収まることを検証するローダー。
    """
    # @intent:responsibility ROMファイルを読み込み、バイト列として返します。
    # @intent:post-condition 読み込めない、または容量を超える場合はRomLoadErrorを送出します。
    def load_rom(self, file_path: str) -> bytes:
        try:
            with open(file_path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise RomLoadError(f"Cannot read ROM '{file_path}': {e}") from e

        if len(data) > MAX_PROGRAM_SIZE:
            raise RomLoadError(
                f"ROM '{file_path}' is {len(data)} bytes; at most {MAX_PROGRAM_SIZE} bytes fit in memory."
            )
        logger.info("Loaded ROM %s (%d bytes).", file_path, len(data))
        return data

    # @intent:responsibility コマンドライン引数、または環境変数 ROM_FILE からROMパスを決定します。
    @staticmethod
    def resolve_path(path: Optional[str] = None) -> str:
        resolved = path or os.environ.get(ROM_ENV_VAR)
        if not resolved:
            raise RomLoadError(f"No ROM given; pass a path or set {ROM_ENV_VAR}.")
        return resolved
