import random
import unittest

from chip8_tracer.transport.keypad import Keypad
from chip8_tracer.arch.chip8.cpu import create_bus
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8.framebuffer import Framebuffer
from chip8_tracer.arch.chip8.instruction import decode_word
from chip8_tracer.arch.chip8.instructions import execute_instruction
from chip8_tracer.arch.chip8.instructions.base import ExecutionContext

class TestChip8KeypadInstructions(unittest.TestCase):
    def setUp(self):
        self.keypad = Keypad()
        self.state = Chip8CpuState()
        self.ctx = ExecutionContext(
            self.state, create_bus(), Framebuffer(), keypad=self.keypad, rng=random.Random(0)
        )

    def _execute(self, word):
        self.state.pc += 2
        execute_instruction(decode_word(word), self.ctx, self.state.pc - 2)

    def test_skp(self):
        self.state.v[1] = 0xA
        self._execute(0xE19E)
        self.assertEqual(self.state.pc, 0x202)
        self.keypad.press(0xA)
        self._execute(0xE19E)
        self.assertEqual(self.state.pc, 0x206)

    def test_sknp(self):
        self.state.v[1] = 0xA
        self._execute(0xE1A1)
        self.assertEqual(self.state.pc, 0x204)
        self.keypad.press(0xA)
        self._execute(0xE1A1)
        self.assertEqual(self.state.pc, 0x206)

    def test_skp_uses_low_nibble(self):
        self.state.v[1] = 0x1A
        self.keypad.press(0xA)
        self._execute(0xE19E)
        self.assertEqual(self.state.pc, 0x204)

    def test_without_keypad_no_key_is_pressed(self):
        ctx = ExecutionContext(self.state, create_bus(), Framebuffer())
        execute_instruction(decode_word(0xE19E), ctx)
        self.assertEqual(self.state.pc, 0x200)
        execute_instruction(decode_word(0xE1A1), ctx)
        self.assertEqual(self.state.pc, 0x202)

    # @intent:test_case_key_wait Fx0Aはブロックせず、待機対象のレジスタを登録するだけであることを検証します。
    def test_wait_key_registers_pending_wait(self):
        self.state.v[5] = 0x33
        self._execute(0xF50A)
        self.assertEqual(self.state.awaiting_key, 5)
        self.assertEqual(self.state.v[5], 0x33)
        self.assertEqual(self.state.pc, 0x202)

if __name__ == '__main__':
    unittest.main()
