"""Runner configuration.

Defaults come from the structured ``RunnerConfig``; an optional YAML file
(``config=run.yaml``) and ``key=value`` overrides are merged on top.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import List, Optional

from omegaconf import MISSING, DictConfig, OmegaConf

from chip8vm.quirks import Quirks


@dataclass
class QuirksConfig:
    preset: str = "modern"
    # None keeps the preset's value
    shift_uses_vy: Optional[bool] = None
    load_store_increments_i: Optional[bool] = None
    jump_uses_vx: Optional[bool] = None
    logic_resets_vf: Optional[bool] = None


@dataclass
class RunnerConfig:
    rom: str = MISSING
    frames: int = 600
    ticks_per_frame: int = 10
    seed: int = 0
    quirks: QuirksConfig = field(default_factory=QuirksConfig)
    log_level: str = "INFO"
    show_display: bool = True
    progress: bool = True


def load_config(argv: Optional[List[str]] = None) -> DictConfig:
    """Build the runner configuration from command line style ``key=value`` items."""
    overrides = OmegaConf.from_cli(argv if argv is not None else [])
    config_file = overrides.pop("config", None)

    cfg = OmegaConf.structured(RunnerConfig)
    if config_file is not None:
        cfg = OmegaConf.merge(cfg, OmegaConf.load(config_file))
    cfg = OmegaConf.merge(cfg, overrides)

    if cfg.frames < 0 or cfg.ticks_per_frame < 1:
        raise ValueError(
            f"frames must be >= 0 and ticks_per_frame >= 1, got {cfg.frames} and {cfg.ticks_per_frame}"
        )
    return cfg


def quirks_from_config(cfg: DictConfig) -> Quirks:
    """Resolve a quirks section into a ``Quirks`` value."""
    quirks = Quirks.preset(cfg.preset)
    overrides = {
        f.name: cfg[f.name]
        for f in dataclasses.fields(Quirks)
        if cfg.get(f.name) is not None
    }
    return dataclasses.replace(quirks, **overrides)
