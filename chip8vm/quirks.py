"""Compatibility switches for ambiguous CHIP-8 instructions.

Historical interpreters disagree on a handful of instructions and real ROMs
depend on one behaviour or the other. Each disagreement is a flag, fixed when
the emulator state is created.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Quirks:
    """Instruction variants selected at construction time.

    Attributes:
        shift_uses_vy: 8XY6/8XYE shift VY into VX instead of shifting VX in place.
        load_store_increments_i: FX55/FX65 leave I pointing past the last register.
        jump_uses_vx: BNNN behaves as BXNN and adds VX instead of V0.
        logic_resets_vf: 8XY1/8XY2/8XY3 clear VF.
    """
    shift_uses_vy: bool = False
    load_store_increments_i: bool = False
    jump_uses_vx: bool = False
    logic_resets_vf: bool = False

    @classmethod
    def modern(cls) -> "Quirks":
        """CHIP-48 style behaviour expected by most ROMs written since the 90s."""
        return cls()

    @classmethod
    def legacy(cls) -> "Quirks":
        """Original COSMAC VIP interpreter."""
        return cls(shift_uses_vy=True, load_store_increments_i=True, logic_resets_vf=True)

    @classmethod
    def schip(cls) -> "Quirks":
        """SUPER-CHIP 1.1."""
        return cls(jump_uses_vx=True)

    @classmethod
    def preset(cls, name: str) -> "Quirks":
        """Look up a preset by name ("modern", "legacy" or "schip")."""
        presets = {"modern": cls.modern, "legacy": cls.legacy, "schip": cls.schip}
        if name not in presets:
            raise ValueError(f"Unknown quirks preset '{name}'. Available: {list(presets.keys())}")
        return presets[name]()
