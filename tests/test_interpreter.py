"""Tests for the host-facing Chip8 interpreter."""

import io

import jax.numpy as jnp
import numpy as np
import pytest

from chip8vm import (
    Chip8, Quirks, MAX_ROM_SIZE, PROGRAM_START,
    RomTooLargeError, LoadError, DecodeError, BoundsError, StackOverflowError,
    StackUnderflowError, InvalidKeyError, FaultedError,
)
from chip8vm.constants import FONT_DATA
from chip8vm.logging import ConsoleLogger
from conftest import rom


class TestLifecycle:
    """reset() and load()."""

    def test_power_on_state(self, machine):
        assert machine.pc == PROGRAM_START
        assert machine.index == 0
        assert machine.registers == [0] * 16
        assert machine.stack == []
        assert machine.delay_timer == 0
        assert machine.sound_timer == 0
        assert not machine.sound_active()
        assert not machine.faulted
        assert jnp.sum(machine.read_display()) == 0
        assert jnp.array_equal(machine.state.memory[:len(FONT_DATA)], FONT_DATA)

    def test_load_copies_rom_to_program_start(self, machine):
        machine.load(b"\x12\x34\xAB")
        assert [int(b) for b in machine.state.memory[0x200:0x204]] == [0x12, 0x34, 0xAB, 0x00]

    def test_load_accepts_int_sequences(self, machine):
        machine.load([0x60, 0x07])
        machine.tick()
        assert machine.registers[0] == 7

    def test_load_consumes_iterable_once(self):
        stream = io.StringIO()
        machine = Chip8(logger=ConsoleLogger(log_level="DEBUG", stream=stream, show_timestamps=False))

        machine.load(byte for byte in (0x6A, 0x05))
        machine.tick()

        assert machine.registers[0xA] == 5
        assert "Loaded 2 byte ROM" in stream.getvalue()

    def test_load_after_reset_is_idempotent(self):
        data = bytes(range(256)) * 3
        once = Chip8()
        once.load(data)

        twice = Chip8()
        twice.load(data)
        twice.reset()
        twice.load(data)

        assert jnp.array_equal(once.state.memory, twice.state.memory)

    def test_largest_rom_fits(self, machine):
        machine.load(b"\x01" * MAX_ROM_SIZE)
        assert machine.state.memory[0xFFF] == 1

    def test_oversized_rom_is_rejected_without_changes(self, machine):
        machine.load(b"\x60\x01")
        before = machine.state.memory

        with pytest.raises(RomTooLargeError) as excinfo:
            machine.load(b"\xFF" * (MAX_ROM_SIZE + 1))

        assert isinstance(excinfo.value, LoadError)
        assert excinfo.value.size == MAX_ROM_SIZE + 1
        assert excinfo.value.limit == 3584
        assert jnp.array_equal(machine.state.memory, before)
        assert not machine.faulted

    def test_reset_clears_everything(self, machine):
        machine.load(rom(0x6A42, 0xA300, 0x2300, 0x0000) + b"\x00" * 250 + rom(0x6005, 0xF015, 0xF018, 0xD005))
        machine.run_frame(3)
        machine.set_key(3, True)
        machine.reset()

        assert machine.pc == PROGRAM_START
        assert machine.registers == [0] * 16
        assert machine.index == 0
        assert machine.stack == []
        assert not bool(machine.state.keypad.any())
        assert jnp.sum(machine.state.memory[0x200:]) == 0
        assert jnp.array_equal(machine.state.memory[:len(FONT_DATA)], FONT_DATA)


class TestExecution:
    """tick() and the end-to-end scenarios."""

    def test_tick_returns_opcode_and_advances(self, machine):
        machine.load(rom(0x6133))
        assert machine.tick() == 0x6133
        assert machine.pc == 0x202
        assert machine.cycles == 1

    def test_clear_set_index_draw_shows_zero_glyph(self, machine):
        machine.load(rom(0x00E0, 0xA000, 0xD005))

        for _ in range(3):
            machine.tick()
            assert machine.registers[0xF] == 0

        display = machine.read_display()
        for row in range(5):
            for col in range(8):
                expected = (int(FONT_DATA[row]) >> (7 - col)) & 1
                assert display[col, row] == expected
        assert jnp.sum(display) == jnp.sum(display[:8, :5])

    def test_blocking_key_wait(self, machine):
        machine.load(rom(0xF00A))

        for _ in range(5):
            machine.tick()
            assert machine.pc == 0x200
        assert machine.waiting_for_key

        machine.set_key(5, True)
        machine.tick()

        assert machine.registers[0] == 5
        assert machine.pc == 0x202
        assert not machine.waiting_for_key

    def test_call_then_return(self, machine):
        machine.load(rom(0x2204, 0x0000, 0x00EE))
        machine.tick()
        assert machine.pc == 0x204
        assert machine.stack == [0x202]
        machine.tick()
        assert machine.pc == 0x202
        assert machine.stack == []

    def test_run_frame_ticks_then_decrements(self, machine):
        machine.load(rom(0x600A, 0xF015) + rom(0x1204))  # loop forever at 0x204
        machine.run_frame(10)
        assert machine.cycles == 10
        assert machine.delay_timer == 9

    def test_quirks_reach_the_engine(self):
        machine = Chip8(quirks=Quirks.legacy())
        machine.load(rom(0x6103, 0x8016))  # V1 = 3; V0 = V1 >> 1
        machine.tick()
        machine.tick()
        assert machine.registers[0] == 1
        assert machine.registers[0xF] == 1

    def test_seeded_random_is_deterministic(self):
        program = rom(0xC0FF, 0xC1FF, 0xC2FF)
        first, second = Chip8(seed=3), Chip8(seed=3)
        for m in (first, second):
            m.load(program)
            for _ in range(3):
                m.tick()
        assert first.registers == second.registers

    def test_reset_restarts_random_sequence(self, machine):
        machine.load(rom(0xC0FF))
        machine.tick()
        value = machine.registers[0]
        machine.reset()
        machine.load(rom(0xC0FF))
        machine.tick()
        assert machine.registers[0] == value

    def test_instances_are_independent(self):
        a, b = Chip8(), Chip8()
        a.load(rom(0x6077))
        a.tick()
        a.set_key(1, True)
        assert b.registers[0] == 0
        assert b.pc == 0x200
        assert not bool(b.state.keypad[1])


class TestFaults:
    """Fatal errors halt the machine until reset()."""

    def test_unknown_opcode_faults(self, machine):
        machine.load(rom(0x6001, 0x8008))
        machine.tick()

        with pytest.raises(DecodeError) as excinfo:
            machine.tick()

        assert excinfo.value.opcode == 0x8008
        assert excinfo.value.pc == 0x202
        assert machine.faulted
        assert machine.fault is excinfo.value
        assert machine.pc == 0x202

    @pytest.mark.parametrize("word", [0x0000, 0x0123, 0x5121, 0x912F, 0xE0FF, 0xF0FF, 0x800F])
    def test_undefined_words_are_decode_errors(self, machine, word):
        machine.load(rom(word))
        with pytest.raises(DecodeError):
            machine.tick()

    def test_faulted_machine_refuses_to_tick(self, machine):
        machine.load(rom(0xFFFF))
        with pytest.raises(DecodeError):
            machine.tick()

        with pytest.raises(FaultedError) as excinfo:
            machine.tick()
        assert isinstance(excinfo.value.cause, DecodeError)

    def test_faulted_machine_keeps_timers_and_keys(self, machine):
        machine.load(rom(0x6002, 0xF015, 0xFFFF))
        machine.tick()
        machine.tick()
        with pytest.raises(DecodeError):
            machine.tick()

        machine.decrement_timers()
        machine.set_key(2, True)
        assert machine.delay_timer == 1
        assert bool(machine.state.keypad[2])

    def test_reset_clears_fault(self, machine):
        machine.load(rom(0xFFFF))
        with pytest.raises(DecodeError):
            machine.tick()
        machine.reset()
        machine.load(rom(0x6001))
        machine.tick()
        assert not machine.faulted
        assert machine.registers[0] == 1

    def test_stack_overflow(self, machine):
        machine.load(rom(0x2200))  # calls itself forever
        for _ in range(16):
            machine.tick()

        with pytest.raises(StackOverflowError) as excinfo:
            machine.tick()
        assert isinstance(excinfo.value, BoundsError)
        assert excinfo.value.opcode == 0x2200

    def test_return_with_empty_stack(self, machine):
        machine.load(rom(0x00EE))
        with pytest.raises(StackUnderflowError):
            machine.tick()

    def test_sprite_read_past_memory(self, machine):
        machine.load(rom(0xAFFE, 0xD005))
        machine.tick()
        with pytest.raises(BoundsError) as excinfo:
            machine.tick()
        assert excinfo.value.opcode == 0xD005
        assert excinfo.value.address == 0x1002
        assert excinfo.value.pc == 0x202

    def test_bcd_write_past_memory(self, machine):
        machine.load(rom(0xAFFE, 0xF033))
        machine.tick()
        with pytest.raises(BoundsError):
            machine.tick()

    @pytest.mark.parametrize("word", [0xF155, 0xF165])
    def test_register_block_past_memory(self, machine, word):
        machine.load(rom(0xAFFF, word))
        machine.tick()
        with pytest.raises(BoundsError):
            machine.tick()

    def test_index_overflow_then_access(self, machine):
        machine.load(rom(0xAFF0, 0x6020, 0xF01E, 0xF065))
        for _ in range(3):
            machine.tick()
        assert machine.index == 0x1010
        with pytest.raises(BoundsError):
            machine.tick()

    def test_jump_with_offset_past_memory(self, machine):
        machine.load(rom(0x60FF, 0xBFFF))
        machine.tick()
        with pytest.raises(BoundsError) as excinfo:
            machine.tick()
        assert excinfo.value.address == 0x10FE

    def test_fetch_past_memory(self, machine):
        machine.load(rom(0x1FFF))
        machine.tick()
        assert machine.pc == 0xFFF
        with pytest.raises(BoundsError):
            machine.tick()

    def test_fault_is_logged(self):
        stream = io.StringIO()
        machine = Chip8(logger=ConsoleLogger(log_level="ERROR", stream=stream, show_timestamps=False))
        machine.load(rom(0xFFFF))
        with pytest.raises(DecodeError):
            machine.tick()
        assert "unknown opcode FFFF at 200" in stream.getvalue()


class TestInputOutput:
    """set_key(), read_display() and sound_active()."""

    @pytest.mark.parametrize("index", [-1, 16, 255, "a", 1.0, None, True])
    def test_invalid_key_rejected(self, machine, index):
        with pytest.raises(InvalidKeyError):
            machine.set_key(index, True)
        assert not bool(machine.state.keypad.any())

    def test_invalid_key_is_value_error(self, machine):
        with pytest.raises(ValueError):
            machine.set_key(99, True)

    def test_numpy_key_index_accepted(self, machine):
        machine.set_key(np.int64(15), True)
        assert bool(machine.state.keypad[15])

    def test_key_release(self, machine):
        machine.set_key(4, True)
        machine.set_key(4, False)
        assert not bool(machine.state.keypad[4])

    def test_display_snapshot_does_not_change(self, machine):
        machine.load(rom(0xA000, 0xD005, 0x00E0))
        machine.tick()
        machine.tick()
        snapshot = machine.read_display()
        lit = int(jnp.sum(snapshot))

        machine.tick()  # CLS

        assert int(jnp.sum(snapshot)) == lit
        assert int(jnp.sum(machine.read_display())) == 0

    def test_sound_active_follows_sound_timer(self, machine):
        machine.load(rom(0x6002, 0xF018))
        machine.tick()
        assert not machine.sound_active()
        machine.tick()
        assert machine.sound_active()

        machine.decrement_timers()
        assert machine.sound_active()
        machine.decrement_timers()
        assert not machine.sound_active()
        machine.decrement_timers()
        assert machine.sound_timer == 0
