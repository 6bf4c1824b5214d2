import random
from typing import Optional, Tuple

from chip8_tracer.transport.devices import DisplaySink, InputProvider, ToneDevice
from chip8_tracer.arch.chip8.cpu import Chip8Cpu, create_bus
from chip8_tracer.arch.chip8.timers import TimerTicker
from chip8_tracer.runtime.run_loop import RunLoop
from chip8_tracer.runtime.stop_token import StopToken
from .models import EmulatorConfig

# @intent:responsibility 設定（Config）とフロントエンドのデバイスから、Bus、CPU、Run Loopを生成・接続します。
class SystemBuilder:
    def build_system(
        self,
        config: EmulatorConfig,
        program: bytes,
        display: Optional[DisplaySink] = None,
        keypad: Optional[InputProvider] = None,
        tone: Optional[ToneDevice] = None,
        stop_token: Optional[StopToken] = None,
    ) -> Tuple[Chip8Cpu, RunLoop]:
        """
        プログラムを読み込んだCPUと、それを駆動するRun Loopを返します。
        プログラムが大きすぎる場合はCPU生成時にRomLoadErrorが送出されます。
        """
        # seedが無い場合は非決定的な乱数列
        rng = random.Random(config.seed)
        cpu = Chip8Cpu(program, display=display, keypad=keypad, rng=rng, bus=create_bus())

        tone_device = tone if config.tone.enabled else None
        run_loop = RunLoop(
            cpu,
            timers=TimerTicker(tone_device),
            display=display,
            keypad=keypad,
            stop_token=stop_token,
            cycle_delay=config.cycle_delay,
            max_cycles=config.max_cycles,
        )
        return cpu, run_loop
