"""Tests for the headless ROM runner."""

from chip8vm.cli import main, run
from chip8vm.config import load_config
from conftest import rom


def write_rom(tmp_path, data, name="test.ch8"):
    path = tmp_path / name
    path.write_bytes(data)
    return path


def test_run_draws_glyph(tmp_path, capsys):
    path = write_rom(tmp_path, rom(0x00E0, 0xA000, 0xD005, 0x1206))
    cfg = load_config([f"rom={path}", "frames=2", "progress=false"])

    assert run(cfg) == 0

    out = capsys.readouterr().out
    screen = [line for line in out.splitlines() if len(line) == 64 and set(line) <= {"#", "."}]
    assert len(screen) == 32
    assert screen[0].startswith("####....")
    assert screen[1].startswith("#..#....")
    assert "instructions: 20" in out


def test_run_without_rom(capsys):
    cfg = load_config(["progress=false"])
    assert run(cfg) == 2
    assert "No ROM given" in capsys.readouterr().out


def test_run_missing_file(tmp_path, capsys):
    cfg = load_config([f"rom={tmp_path / 'nope.ch8'}", "progress=false"])
    assert run(cfg) == 1
    assert "Could not load" in capsys.readouterr().out


def test_run_oversized_rom(tmp_path):
    path = write_rom(tmp_path, b"\x00" * 4000)
    cfg = load_config([f"rom={path}", "progress=false"])
    assert run(cfg) == 1


def test_run_stops_on_fault(tmp_path, capsys):
    path = write_rom(tmp_path, rom(0x6001, 0xFFFF))
    cfg = load_config([f"rom={path}", "frames=10", "progress=false", "show_display=false"])

    assert run(cfg) == 1

    out = capsys.readouterr().out
    assert "unknown opcode FFFF" in out
    assert "faulted: True" in out
    assert "frames: 0" in out


def test_main_parses_arguments(tmp_path, capsys):
    path = write_rom(tmp_path, rom(0x1200))
    code = main([f"rom={path}", "frames=1", "progress=false", "show_display=false", "log_level=WARNING"])
    assert code == 0
    assert capsys.readouterr().out == ""
