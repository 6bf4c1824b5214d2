# tests/test_cli.py
"""
chip8_tracer.cliモジュールの単体テスト。ヘッドレスフロントエンドで実行します。
"""
import logging
import signal

import pytest

from chip8_tracer import cli
from chip8_tracer.cli import install_interrupt_handler
from chip8_tracer.runtime.stop_token import StopToken
from chip8_tracer.common.errors import ConfigError
from chip8_tracer.loader.loader import ROM_ENV_VAR


# @intent:test_suite コマンドライン引数の解釈、終了コード、ヘッドレス実行を検証します。


@pytest.fixture(autouse=True)
def no_signal_handler(monkeypatch):
    # テストランナーのSIGINTハンドラを置き換えない
    monkeypatch.setattr(cli, "install_interrupt_handler", lambda stop_token: None)


def run_headless(*args):
    return cli.main(["--frontend", "headless", "--delay-us", "0", *args])


class TestMain:
    def test_run_to_end(self, rom_file):
        assert run_headless(rom_file(0x6001, 0x00E0)) == 0

    def test_fault_exit_code(self, rom_file):
        assert run_headless(rom_file(0x5121)) == 1

    def test_cycle_limit(self, rom_file):
        assert run_headless(rom_file(0x1200), "--max-cycles", "10") == 0

    def test_missing_rom_file(self, tmp_path):
        assert run_headless(str(tmp_path / "missing.ch8")) == 1

    def test_no_rom_given(self, monkeypatch):
        monkeypatch.delenv(ROM_ENV_VAR, raising=False)
        assert run_headless() == 1

    def test_rom_from_environment(self, rom_file, monkeypatch, capsys):
        monkeypatch.setenv(ROM_ENV_VAR, rom_file(0x00E0))
        assert cli.main(["--disassemble"]) == 0
        assert "CLS" in capsys.readouterr().out

    def test_disassemble(self, rom_file, capsys):
        assert cli.main([rom_file(0xA22A, 0xD015), "--disassemble"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "0200  A2 2A  LD I, $22A",
            "0202  D0 15  DRW V0, V1, 5",
        ]

    # @intent:test_case_breakpoint --break で指定したアドレスで停止し、レジスタが表示されることを検証します。
    def test_breakpoint_dumps_registers(self, rom_file, capsys):
        assert run_headless(rom_file(0x6001, 0x6102, 0x6203), "--break", "0x204") == 0
        out = capsys.readouterr().out
        assert "Breakpoint hit at PC: 0x0204" in out
        assert "V0=01 V1=02 V2=00" in out
        assert "PC=0204" in out

    def test_keys_feed_key_waits(self, rom_file, capsys):
        assert run_headless(rom_file(0xF30A, 0xF40A, 0x6000), "--keys", "b7", "--break", "0x206") == 0
        out = capsys.readouterr().out
        assert "V3=0B V4=07" in out

    def test_key_wait_without_keys_is_cancelled(self, rom_file):
        assert run_headless(rom_file(0xF30A)) == 0

    def test_invalid_keys(self, rom_file):
        assert run_headless(rom_file(0xF30A), "--keys", "xyz") == 1

    def test_config_file(self, rom_file, tmp_path):
        config = tmp_path / "chip8.yaml"
        config.write_text("frontend: headless\ncycle_delay_us: 0\nmax_cycles: 3\n")
        assert cli.main([rom_file(0x1200), "-c", str(config), "--break", "0x300"]) == 0

    def test_invalid_config(self, rom_file, tmp_path):
        config = tmp_path / "chip8.yaml"
        config.write_text("frontend: curses\n")
        assert cli.main([rom_file(0x00E0), "-c", str(config)]) == 1

    def test_malformed_config_section(self, rom_file, tmp_path):
        config = tmp_path / "chip8.yaml"
        config.write_text("display: 5\n")
        assert run_headless(rom_file(0x00E0), "-c", str(config)) == 1

    def test_negative_max_cycles(self, rom_file):
        assert run_headless(rom_file(0x1200), "--max-cycles", "-1") == 1


class TestHelpers:
    def test_parse_keys(self):
        assert cli.parse_keys("1aF") == [0x1, 0xA, 0xF]
        assert cli.parse_keys("") == []
        with pytest.raises(ConfigError):
            cli.parse_keys("G")

    def test_arguments_override_config(self, tmp_path):
        config = tmp_path / "chip8.yaml"
        config.write_text("frontend: terminal\ncycle_delay_us: 500\nseed: 1\n")
        args = cli.build_parser().parse_args(["-c", str(config), "--frontend", "headless", "--seed", "9"])
        resolved = cli.resolve_config(args)
        assert resolved.frontend == "headless"
        assert resolved.cycle_delay_us == 500
        assert resolved.seed == 9

    def test_negative_delay(self):
        args = cli.build_parser().parse_args(["--delay-us", "-1"])
        with pytest.raises(ConfigError):
            cli.resolve_config(args)

    def test_break_accepts_hex_and_decimal(self):
        args = cli.build_parser().parse_args(["--break", "0x200", "516"])
        assert args.breakpoints == [0x200, 0x204]

    def test_negative_max_cycles_rejected(self):
        args = cli.build_parser().parse_args(["--max-cycles", "-1"])
        with pytest.raises(ConfigError):
            cli.resolve_config(args)

    # @intent:test_case_sigint SIGINTのハンドラがStopTokenで停止を要求し、受信をログに残すことを検証します。
    def test_interrupt_handler_requests_stop(self, monkeypatch, caplog):
        handlers = {}
        monkeypatch.setattr(signal, "signal", lambda signum, handler: handlers.__setitem__(signum, handler))
        token = StopToken()

        install_interrupt_handler(token)
        assert not token.is_requested()

        with caplog.at_level(logging.INFO, logger="chip8_tracer.cli"):
            handlers[signal.SIGINT](signal.SIGINT, None)

        assert token.is_requested()
        assert f"Interrupt signal ({int(signal.SIGINT)}) received" in caplog.text
