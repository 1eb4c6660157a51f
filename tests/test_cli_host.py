"""
Command line and display host tests.
"""

import argparse
import logging

import numpy as np
import pygame
import pytest

from chip8vm import cli
from chip8vm.constants import TRACE
from chip8vm.host import ConsoleHost, PygameHost
from chip8vm.scheduler import Scheduler

from conftest import FakeClock


@pytest.fixture
def rom(tmp_path):
    def write(data):
        path = tmp_path / "test.ch8"
        path.write_bytes(data)
        return str(path)
    return write


# ═══════════════════════════════════════════════
# Argument parsing
# ═══════════════════════════════════════════════

class TestParser:

    def test_defaults(self):
        args = cli.build_parser().parse_args(["-r", "game.ch8"])
        assert args.rom == "game.ch8"
        assert not args.step
        assert args.seed == cli.DEFAULT_SEED
        assert args.dialect == "original"
        assert args.clock == 500
        assert not args.window
        assert cli.log_level(args) == logging.INFO

    def test_rom_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    @pytest.mark.parametrize("flag,level", [
        ("-q", logging.WARNING),
        ("-d", logging.DEBUG),
        ("-t", TRACE),
    ])
    def test_verbosity(self, flag, level):
        args = cli.build_parser().parse_args(["-r", "x", flag])
        assert cli.log_level(args) == level

    def test_verbosity_flags_are_exclusive(self):
        with pytest.raises(SystemExit) as exc:
            cli.build_parser().parse_args(["-r", "x", "-q", "-d"])
        assert exc.value.code == 2

    def test_step_seed_dialect(self):
        args = cli.build_parser().parse_args(
            ["-r", "x", "--step", "--seed", "99", "--dialect", "super-chip"])
        assert args.step
        assert args.seed == 99
        assert args.dialect == "super-chip"

    @pytest.mark.parametrize("value", ["0", "-3", "fast"])
    def test_clock_must_be_positive_int(self, value):
        with pytest.raises(SystemExit) as exc:
            cli.build_parser().parse_args(["-r", "x", "--clock", value])
        assert exc.value.code == 2

    def test_positive_int(self):
        assert cli.positive_int("7") == 7
        with pytest.raises(argparse.ArgumentTypeError):
            cli.positive_int("0")


# ═══════════════════════════════════════════════
# main()
# ═══════════════════════════════════════════════

class TestMain:

    def test_missing_rom(self, tmp_path, caplog):
        with caplog.at_level(logging.ERROR):
            assert cli.main(["-r", str(tmp_path / "nope.ch8"), "-q"]) == 1
        assert "does not exist" in caplog.text

    def test_illegal_opcode_exits_1(self, rom, caplog):
        path = rom(b"\x60\x05\xFF\xFF")
        with caplog.at_level(logging.ERROR):
            assert cli.main(["-r", path, "-q"]) == 1
        assert "illegal opcode $FFFF" in caplog.text

    def test_oversized_rom_exits_1(self, rom):
        assert cli.main(["-r", rom(bytes(4000)), "-q"]) == 1

    def test_step_quit(self, rom, monkeypatch):
        answers = iter(["n", "q"])
        monkeypatch.setattr("builtins.input", lambda *args: next(answers))
        assert cli.main(["-r", rom(b"\x12\x00"), "-q", "--step"]) == 0

    def test_bad_step_input(self, rom, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda *args: "go")
        assert cli.main(["-r", rom(b"\x12\x00"), "-q", "-s"]) == 1

    def test_keyboard_interrupt(self, rom, monkeypatch):
        def interrupt(*args):
            raise KeyboardInterrupt
        monkeypatch.setattr("builtins.input", interrupt)
        assert cli.main(["-r", rom(b"\x12\x00"), "-q", "-s"]) == 130

    def test_closed_stdin_in_step_mode(self, rom, monkeypatch, caplog):
        def closed(*args):
            raise EOFError
        monkeypatch.setattr("builtins.input", closed)
        with caplog.at_level(logging.ERROR):
            assert cli.main(["-r", rom(b"\x12\x00"), "-q", "-s"]) == 1
        assert "illegal step input ''" in caplog.text

    def test_logs_under_module_name(self, tmp_path, caplog):
        with caplog.at_level(logging.ERROR):
            cli.main(["-r", str(tmp_path / "nope.ch8"), "-q"])
        assert [r.name for r in caplog.records] == ["chip8vm.cli"]

    def test_frames_go_to_console_host(self, rom, monkeypatch, caplog):
        monkeypatch.setattr("builtins.input", lambda *args: "q")
        with caplog.at_level(logging.INFO, logger="chip8vm"):
            assert cli.main(["-r", rom(b"\x00\xE0"), "--step"]) == 0
        assert "frame 1:" in caplog.text


# ═══════════════════════════════════════════════
# Hosts
# ═══════════════════════════════════════════════

class TestConsoleHost:

    def test_logs_grid(self, caplog):
        host = ConsoleHost()
        frame = np.zeros((32, 64), dtype=bool)
        frame[0, 63] = True
        with caplog.at_level(logging.INFO, logger="chip8vm.host"):
            host(frame)
            host(frame)
        assert host.frames == 2
        assert "0" * 63 + "1" in caplog.text
        assert "frame 2:" in caplog.text


class TestPygameHost:

    @pytest.fixture
    def host(self, monkeypatch):
        monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
        h = PygameHost(title="test", scale=2)
        yield h
        h.close()

    def test_colorize(self, host):
        frame = np.zeros((32, 64), dtype=bool)
        frame[1, 2] = True
        rgb = host.colorize(frame)
        assert rgb.shape == (64, 32, 3)
        assert tuple(rgb[2, 1]) == (0, 255, 128)
        assert tuple(rgb[0, 0]) == (15, 15, 25)

    def test_draw_and_pump(self, host):
        frame = np.ones((32, 64), dtype=bool)
        host(frame)
        assert host.frames == 1
        assert host.screen.get_size() == (128, 64)
        assert tuple(host.screen.get_at((5, 5)))[:3] == (0, 255, 128)
        assert host.pump() is False

    def test_close_stops_non_drawing_rom(self, host, make_cpu):
        sched = Scheduler(make_cpu(b"\x12\x00"), clock=FakeClock())
        cli.attach_window(sched, host)
        pygame.event.post(pygame.event.Event(pygame.QUIT))
        assert sched.run(max_cycles=100) == 1
        assert host.closed
