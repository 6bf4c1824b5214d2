# src/chip8_tracer/cli.py
"""
コマンドラインのエントリポイント。

ROMと設定を読み込み、選択されたフロントエンド（qt / terminal / headless）で実行します。
終了コードは、正常停止で0、致命的エラーやROM・設定の読み込み失敗で1です。
"""
import argparse
import logging
import signal
import sys
from typing import List, Optional

from chip8_tracer.common.errors import Chip8Error, ConfigError, RomLoadError
from chip8_tracer.config.loader import ConfigLoader
from chip8_tracer.config.models import EmulatorConfig, FRONTENDS
from chip8_tracer.config.builder import SystemBuilder
from chip8_tracer.loader.loader import RomLoader, ROM_ENV_VAR
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.disassembler import format_listing
from chip8_tracer.runtime.run_loop import RunLoop, RunResult, StopReason
from chip8_tracer.runtime.stop_token import StopToken
from chip8_tracer.transport.headless import HeadlessDisplay, SilentTone
from chip8_tracer.transport.keypad import Keypad
from chip8_tracer.debugger.debugger import Debugger, BreakpointCondition, BreakpointConditionType
from chip8_tracer.ui.terminal import TerminalDisplay, TerminalBell

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chip8-tracer", description="CHIP-8 virtual CPU")
    parser.add_argument('rom', nargs='?',
        help=f"ROM file to run (defaults to ${ROM_ENV_VAR})")
    parser.add_argument('-c', '--config',
        help="YAML configuration file")
    parser.add_argument('--frontend', choices=FRONTENDS,
        help="front end to run with (overrides the config)")
    parser.add_argument('--delay-us', type=int, metavar="US",
        help="sleep between loop iterations, in microseconds")
    parser.add_argument('--max-cycles', type=int, metavar="N",
        help="stop after N loop iterations")
    parser.add_argument('--seed', type=int,
        help="seed for the RND instruction")
    parser.add_argument('--keys', default="", metavar="HEX",
        help="key presses fed to key waits in terminal/headless runs, e.g. '1A0'")
    parser.add_argument('--break', dest='breakpoints', metavar="ADDR", nargs="+", default=[],
        type=lambda x: int(x, 0),
        help="program address at which to stop and dump registers (terminal/headless)")
    parser.add_argument('--disassemble', action="store_true",
        help="print the disassembly of the ROM and exit")
    parser.add_argument('-v', '--verbose', action="store_true",
        help="enable debug logging")
    return parser


# @intent:responsibility 設定ファイルとコマンドライン引数を統合します。引数が優先されます。
def resolve_config(args: argparse.Namespace) -> EmulatorConfig:
    config = ConfigLoader().load_from_file(args.config) if args.config else EmulatorConfig()
    if args.frontend is not None:
        config.frontend = args.frontend
    if args.delay_us is not None:
        if args.delay_us < 0:
            raise ConfigError("--delay-us must not be negative.")
        config.cycle_delay_us = args.delay_us
    if args.max_cycles is not None:
        if args.max_cycles < 0:
            raise ConfigError("--max-cycles must not be negative.")
        config.max_cycles = args.max_cycles
    if args.seed is not None:
        config.seed = args.seed
    return config


def parse_keys(text: str) -> List[int]:
    try:
        return [int(char, 16) for char in text]
    except ValueError:
        raise ConfigError(f"--keys must be hex digits, got '{text}'.")


# @intent:responsibility SIGINTを受けたらStopTokenで停止を要求するハンドラを登録します。
def install_interrupt_handler(stop_token: StopToken) -> None:
    def handler(signum, frame):
        logger.info("Interrupt signal (%d) received. Bye", signum)
        stop_token.request()
    signal.signal(signal.SIGINT, handler)


def format_registers(cpu: Chip8Cpu) -> str:
    registers = cpu.get_register_map()
    v_part = " ".join(f"{name}={value:02X}" for name, value in registers.items() if name.startswith("V"))
    return (f"{v_part}\nI={registers['I']:04X} PC={registers['PC']:04X} SP={registers['SP']:X} "
            f"DT={registers['DT']:02X} ST={registers['ST']:02X}")


# @intent:responsibility ブレークポイント付きでRun Loopを実行し、ヒットした時点のレジスタを表示します。
def run_with_breakpoints(run_loop: RunLoop, addresses: List[int], max_cycles: Optional[int]) -> RunResult:
    debugger = Debugger(run_loop)
    for address in addresses:
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=address))
    try:
        hit = debugger.run(max_steps=max_cycles)
    except Chip8Error as e:
        logger.error("Execution fault at PC %#05x: %s", run_loop.cpu.get_state().pc, e)
        return run_loop.result
    if hit:
        print(format_registers(run_loop.cpu))
        return RunResult(reason=StopReason.BREAKPOINT, cycles=run_loop.cycles)
    if run_loop.result is not None:
        return run_loop.result
    return RunResult(reason=StopReason.CYCLE_LIMIT, cycles=run_loop.cycles)


def run_console(config: EmulatorConfig, program: bytes, args: argparse.Namespace,
                stop_token: StopToken) -> RunResult:
    if config.frontend == "terminal":
        display, tone = TerminalDisplay(), TerminalBell()
    else:
        display, tone = HeadlessDisplay(), SilentTone()

    # 端末からはキー入力を受け取らないため、予約したキーを使い切ったらキー待ちはキャンセルされる
    keypad = Keypad()
    for key in parse_keys(args.keys):
        keypad.queue_key(key)
    keypad.close()

    _, run_loop = SystemBuilder().build_system(
        config, program, display=display, keypad=keypad, tone=tone, stop_token=stop_token
    )
    if args.breakpoints:
        return run_with_breakpoints(run_loop, args.breakpoints, config.max_cycles)
    return run_loop.run()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format=LOG_FORMAT)

    try:
        config = resolve_config(args)
        loader = RomLoader()
        program = loader.load_rom(loader.resolve_path(args.rom))

        if args.disassemble:
            cpu = Chip8Cpu(program)
            print(format_listing(cpu.disassemble(cpu.get_state().pc, len(program))))
            return 0

        stop_token = StopToken()
        install_interrupt_handler(stop_token)

        if config.frontend == "qt":
            # GUIを使わない実行ではPySide6のウィンドウ生成を避けるため遅延importする
            from chip8_tracer.ui.app import run_qt
            result = run_qt(config, program, stop_token)
        else:
            result = run_console(config, program, args, stop_token)
    except (RomLoadError, ConfigError) as e:
        logger.error("%s", e)
        return 1

    return 1 if result.reason == StopReason.FAULT else 0


if __name__ == '__main__':
    sys.exit(main())
