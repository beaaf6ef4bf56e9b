"""Headless ROM runner.

Usage::

    python -m chip8vm rom=games/pong.ch8 frames=600 quirks.preset=legacy

Runs the ROM for a fixed number of 60Hz frames without a window and prints
the final screen as text.
"""

import sys
import time
from typing import List, Optional

from omegaconf import OmegaConf

from chip8vm.config import load_config, quirks_from_config
from chip8vm.errors import Chip8Error, LoadError
from chip8vm.interpreter import Chip8
from chip8vm.logging import RunLogger, build_frame_progress_bar
from chip8vm.rendering import display_to_text


def run(cfg) -> int:
    """Run a ROM as described by ``cfg`` and return a process exit code."""
    logger = RunLogger(log_level=cfg.log_level)
    if OmegaConf.is_missing(cfg, "rom"):
        logger.error("No ROM given, pass rom=path/to/file.ch8")
        return 2

    logger.log_run_start(OmegaConf.to_container(cfg))
    machine = Chip8(quirks=quirks_from_config(cfg.quirks), seed=cfg.seed, logger=logger)

    try:
        machine.load_file(cfg.rom)
    except (OSError, LoadError) as e:
        logger.error(f"Could not load {cfg.rom}: {e}")
        return 1

    start = time.time()
    frames_run = 0
    exit_code = 0
    with build_frame_progress_bar(cfg.frames, disable=not cfg.progress) as progress:
        for _ in range(cfg.frames):
            try:
                machine.run_frame(cfg.ticks_per_frame)
            except Chip8Error:
                exit_code = 1
                break
            frames_run += 1
            progress.update(1)
    elapsed = time.time() - start

    if cfg.show_display:
        print(display_to_text(machine.read_display()))

    logger.log_run_end({
        "frames": frames_run,
        "instructions": machine.cycles,
        "seconds": elapsed,
        "pc": f"0x{machine.pc:03X}",
        "faulted": machine.faulted,
    })
    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    cfg = load_config(sys.argv[1:] if argv is None else argv)
    return run(cfg)
