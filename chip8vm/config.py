"""Session configuration.

Options are declared once as a dataclass and read through OmegaConf so the
same schema serves library callers, YAML files and Hydra command-line
overrides.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from omegaconf import OmegaConf, DictConfig
from omegaconf.errors import OmegaConfBaseException

from chip8vm.errors import ConfigurationError
from chip8vm.logging import LEVELS
from chip8vm.rendering import COLOR_SCHEMES


@dataclass
class EmulatorConfig:
    """Options fixed at session start.

    Attributes:
        legacy_mode: FX55/FX65 leave I pointing past the last register copied
        clock_rate: Instructions executed per second
        shift_quirk: 8XY6/8XYE shift VY into VX instead of shifting VX
        jump_quirk: BNNN reads as BXNN and jumps to XNN + VX
        seed: Seed of the PRNG key used by CXNN
        rom_path: ROM file to load, if any
        step_mode: Wait for Enter between cycles
        cycles_to_run: Stop after this many cycles (-1 runs until closed)
        scale_factor: Window pixels per CHIP-8 pixel
        color_scheme: Name of a rendering color scheme
        dump_path: Where the application writes a state dump on request
        show_memory: Draw a memory heat map beside the display
        log_level: Console log level
    """
    legacy_mode: bool = False
    clock_rate: int = 500
    shift_quirk: bool = False
    jump_quirk: bool = False
    seed: int = 0
    rom_path: Optional[str] = None
    step_mode: bool = False
    cycles_to_run: int = -1
    scale_factor: int = 10
    color_scheme: str = "classic"
    dump_path: Optional[str] = None
    show_memory: bool = False
    log_level: str = "INFO"

    def validate(self) -> "EmulatorConfig":
        """Raise ConfigurationError unless every option is usable."""
        if self.clock_rate <= 0:
            raise ConfigurationError(f"clock_rate must be a positive integer, got {self.clock_rate}")
        if self.scale_factor <= 0:
            raise ConfigurationError(f"scale_factor must be a positive integer, got {self.scale_factor}")
        if self.cycles_to_run != -1 and self.cycles_to_run <= 0:
            raise ConfigurationError(f"cycles_to_run must be positive or -1, got {self.cycles_to_run}")
        if self.step_mode and self.cycles_to_run != -1:
            raise ConfigurationError("step_mode and cycles_to_run cannot be used together")
        if self.color_scheme not in COLOR_SCHEMES:
            raise ConfigurationError(
                f"Unknown color scheme '{self.color_scheme}'. Available: {list(COLOR_SCHEMES)}"
            )
        if self.log_level.upper() not in LEVELS:
            raise ConfigurationError(f"Unknown log level '{self.log_level}'. Available: {list(LEVELS)}")
        return self


def load_config(overrides: Optional[Mapping[str, Any] | DictConfig] = None, **kwargs) -> EmulatorConfig:
    """Merge overrides over the defaults and return a validated config."""
    schema = OmegaConf.structured(EmulatorConfig)
    try:
        merged = OmegaConf.merge(schema, overrides or {}, kwargs)
        config = OmegaConf.to_object(merged)
    except OmegaConfBaseException as e:
        raise ConfigurationError(str(e)) from e
    return config.validate()
