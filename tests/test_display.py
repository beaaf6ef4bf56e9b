"""Sprite drawing (DXYN)."""

import jax.numpy as jnp
import pytest
from chip8vm import execute, FONT_START
from chip8vm.constants import FONT_DATA
from conftest import lit, poke, run, with_registers


def draw(state, x, y, sprite, address=0x300):
    """Draw ``sprite`` bytes at (x, y) using V0/V1 and return the new state."""
    state = poke(state, address, sprite)
    state = with_registers(state, V0=x, V1=y, I=address)
    return execute(state, 0xD010 | len(sprite))


def glyph_pixels(digit, x=0, y=0):
    rows = FONT_DATA[digit * 5:digit * 5 + 5]
    return {(x + col, y + row) for row in range(5) for col in range(8) if int(rows[row]) >> (7 - col) & 1}


class TestDraw:

    def test_block(self, state):
        state = draw(state, 10, 5, [0xC0, 0xC0])
        assert lit(state.display) == {(10, 5), (11, 5), (10, 6), (11, 6)}
        assert state.V[15] == 0

    def test_rows_and_bits(self, state):
        state = draw(state, 10, 8, [0x80, 0x40, 0x21])
        assert lit(state.display) == {(10, 8), (11, 9), (12, 10), (17, 10)}

    def test_tallest_sprite(self, state):
        state = draw(state, 0, 0, [0x80] * 15)
        assert lit(state.display) == {(0, y) for y in range(15)}

    def test_zero_rows(self, state):
        state = execute(with_registers(state, VF=1), 0xD010)
        assert lit(state.display) == set()
        assert state.V[15] == 0

    def test_sprite_ending_at_last_byte(self, state):
        state = draw(state, 0, 0, [0xFF] * 5, address=0xFFB)
        assert len(lit(state.display)) == 40


class TestCollision:

    def test_redraw_erases_and_flags(self, state):
        state = draw(state, 20, 10, [0x80])
        assert state.V[15] == 0
        state = draw(state, 20, 10, [0x80])
        assert lit(state.display) == set()
        assert state.V[15] == 1

    def test_double_draw_restores_screen(self, state):
        state = state.replace(display=state.display.at[0, 0].set(True).at[40, 20].set(True))
        before = state.display

        state = draw(state, 8, 15, [0xF0, 0x90, 0xF0])
        assert state.V[15] == 0
        state = draw(state, 8, 15, [0xF0, 0x90, 0xF0])
        assert state.V[15] == 1
        assert jnp.array_equal(state.display, before)

    def test_single_shared_pixel(self, state):
        state = state.replace(display=state.display.at[3, 0].set(True))
        state = draw(state, 0, 0, [0xFF])
        assert state.V[15] == 1
        assert lit(state.display) == {(x, 0) for x in range(8)} - {(3, 0)}

    def test_flag_cleared_without_collision(self, state):
        state = draw(with_registers(state, VF=1), 5, 5, [0x80])
        assert state.V[15] == 0


class TestWrapping:

    @pytest.mark.parametrize("x,y,sprite,expected", [
        (60, 0, [0xFF], {(x % 64, 0) for x in range(60, 68)}),
        (0, 30, [0x80] * 3, {(0, 30), (0, 31), (0, 0)}),
        (63, 31, [0xC0, 0xC0], {(63, 31), (0, 31), (63, 0), (0, 0)}),
        (70, 37, [0x80], {(6, 5)}),
        (255, 255, [0x80], {(63, 31)}),
    ])
    def test_wrap(self, state, x, y, sprite, expected):
        assert lit(draw(state, x, y, sprite).display) == expected


class TestGlyphs:

    @pytest.mark.parametrize("digit", [0x0, 0x7, 0xA, 0xF])
    def test_glyph_through_font_address(self, digit):
        machine = run(0x6200 | digit, 0xF229, 0x6A14, 0x6B03, 0xDAB5)
        assert machine.index == FONT_START + digit * 5
        assert lit(machine.read_display()) == glyph_pixels(digit, 20, 3)
