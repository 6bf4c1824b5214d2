import random
import unittest

from chip8_tracer.common.errors import MemoryBoundsError
from chip8_tracer.arch.chip8.cpu import create_bus
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8.framebuffer import Framebuffer
from chip8_tracer.arch.chip8.instruction import decode_word
from chip8_tracer.arch.chip8.instructions import execute_instruction
from chip8_tracer.arch.chip8.instructions.base import ExecutionContext

class TestChip8LoadInstructions(unittest.TestCase):
    def setUp(self):
        self.bus = create_bus()
        self.state = Chip8CpuState()
        self.ctx = ExecutionContext(self.state, self.bus, Framebuffer(), rng=random.Random(0))

    def _execute(self, word):
        self.state.pc += 2
        execute_instruction(decode_word(word), self.ctx, self.state.pc - 2)

    def test_ld_byte(self):
        self._execute(0x6A42)
        self.assertEqual(self.state.v[0xA], 0x42)
        self.assertEqual(self.state.pc, 0x202)

    # @intent:test_case_additive_identity 6xnn の直後の 7x00 がVxを変えないことを検証します。
    def test_add_zero_is_identity(self):
        for value in (0x00, 0x01, 0x7F, 0xFF):
            self._execute(0x6300 | value)
            self._execute(0x7300)
            self.assertEqual(self.state.v[3], value)

    def test_add_byte_wraps_without_touching_vf(self):
        self.state.v[2] = 0xFF
        self.state.vf = 0x05
        self._execute(0x7202)
        self.assertEqual(self.state.v[2], 0x01)
        self.assertEqual(self.state.vf, 0x05)

    def test_ld_i(self):
        self._execute(0xA22A)
        self.assertEqual(self.state.i, 0x22A)

    def test_timers(self):
        self.state.v[1] = 0x3C
        self._execute(0xF115) # DT = V1
        self._execute(0xF118) # ST = V1
        self.assertEqual(self.state.delay_timer, 0x3C)
        self.assertEqual(self.state.sound_timer, 0x3C)
        self.state.delay_timer = 0x10
        self._execute(0xF207) # V2 = DT
        self.assertEqual(self.state.v[2], 0x10)

    def test_add_i(self):
        self.state.i = 0x0FFE
        self.state.v[5] = 0x04
        self._execute(0xF51E)
        self.assertEqual(self.state.i, 0x1002)
        self.assertEqual(self.state.vf, 0)

    def test_add_i_wraps_at_16_bits(self):
        self.state.i = 0xFFFF
        self.state.v[5] = 0x02
        self._execute(0xF51E)
        self.assertEqual(self.state.i, 0x0001)

    def test_ld_font(self):
        self.state.v[7] = 0x0A
        self._execute(0xF729)
        self.assertEqual(self.state.i, 0x0A * 5)

    def test_ld_font_uses_low_nibble(self):
        self.state.v[7] = 0x1F
        self._execute(0xF729)
        self.assertEqual(self.state.i, 0x0F * 5)

    # @intent:test_case_bcd Vx = 156 のBCD分解が (1, 5, 6) を書き込むことを検証します。
    def test_bcd(self):
        self.state.v[0] = 156
        self.state.i = 0x300
        self._execute(0xF033)
        self.assertEqual([self.bus.peek(0x300 + k) for k in range(3)], [1, 5, 6])
        self.assertEqual(self.state.i, 0x300)

    def test_bcd_small_value(self):
        self.state.v[0] = 7
        self.state.i = 0x300
        self._execute(0xF033)
        self.assertEqual([self.bus.peek(0x300 + k) for k in range(3)], [0, 0, 7])

    # @intent:test_case_bounds 範囲外にかかる書き込みは1バイトも行われないことを検証します。
    def test_bcd_out_of_bounds(self):
        self.state.v[0] = 255
        self.state.i = 0xFFE
        with self.assertRaises(MemoryBoundsError):
            self._execute(0xF033)
        self.assertEqual([self.bus.peek(0xFFE), self.bus.peek(0xFFF)], [0, 0])

    # @intent:test_case_round_trip Fx55 → V0..Vxのクリア → Fx65 で元の値が戻ることを検証します。
    def test_store_and_load_registers_round_trip(self):
        original = [0x10, 0x20, 0x30, 0x40, 0x50]
        self.state.v[:5] = original
        self.state.v[5] = 0x99
        self.state.i = 0x400

        self._execute(0xF455)
        self.assertEqual([self.bus.peek(0x400 + k) for k in range(6)], original + [0])
        self.assertEqual(self.state.i, 0x400)

        for k in range(5):
            self.state.v[k] = 0
        self._execute(0xF465)

        self.assertEqual(self.state.v[:5], original)
        self.assertEqual(self.state.v[5], 0x99)
        self.assertEqual(self.state.i, 0x400)

    def test_store_registers_out_of_bounds(self):
        self.state.v[:3] = [0x11, 0x22, 0x33]
        self.state.i = 0xFFE
        with self.assertRaises(MemoryBoundsError):
            self._execute(0xF255)
        self.assertEqual([self.bus.peek(0xFFE), self.bus.peek(0xFFF)], [0, 0])

    def test_load_registers_out_of_bounds(self):
        self.bus.load(0xFFE, bytes([0x11, 0x22]))
        self.state.i = 0xFFE
        with self.assertRaises(MemoryBoundsError):
            self._execute(0xF265)
        self.assertEqual(self.state.v[:3], [0, 0, 0])

if __name__ == '__main__':
    unittest.main()
