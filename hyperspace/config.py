"""
Hyperspace Configuration - Centralized configuration management.

Provides:
- Animation presets (calm, lively, still, ...)
- Type-safe configuration dataclasses
- Loading/saving from JSON/environment
"""

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, List, Optional


@dataclass
class AnimationConfig:
    """Point cloud and per-frame motion configuration."""

    # Fixed buffer size for the whole run
    particle_count: int = 60000

    # Easing / jitter
    ease_speed: float = 0.025  # Fraction of remaining distance covered per tick
    jitter: float = 0.02  # Per-axis jitter amplitude per tick (0 = off)

    # Breathing scale: 1 + sin(t * rate) * depth
    breathing_rate: float = 0.5
    breathing_depth: float = 0.02

    # Colouring
    sparkle_probability: float = 0.05

    # Mandelbrot rejection budget, in candidates per requested point
    mandelbrot_attempt_factor: int = 10

    # None = fresh entropy every run
    seed: Optional[int] = None

    def validate(self) -> "AnimationConfig":
        """Raise ValueError if any value is out of range."""
        if self.particle_count < 0:
            raise ValueError(f"particle_count must be non-negative, got: {self.particle_count}")
        if not 0.0 < self.ease_speed <= 1.0:
            raise ValueError(f"ease_speed must be in (0, 1], got: {self.ease_speed}")
        if self.jitter < 0.0:
            raise ValueError(f"jitter must be non-negative, got: {self.jitter}")
        if not 0.0 <= self.sparkle_probability <= 1.0:
            raise ValueError(
                f"sparkle_probability must be in [0, 1], got: {self.sparkle_probability}"
            )
        if self.mandelbrot_attempt_factor < 0:
            raise ValueError(
                f"mandelbrot_attempt_factor must be non-negative, got: {self.mandelbrot_attempt_factor}"
            )
        return self

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "AnimationConfig":
        """Create from dictionary."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})

    @classmethod
    def from_env(cls, base: Optional["AnimationConfig"] = None) -> "AnimationConfig":
        """Override ``base`` (or defaults) with HYPERSPACE_* environment variables."""
        config = cls(**asdict(base)) if base is not None else cls()
        if "HYPERSPACE_PARTICLES" in os.environ:
            config.particle_count = int(os.environ["HYPERSPACE_PARTICLES"])
        if "HYPERSPACE_SEED" in os.environ:
            config.seed = int(os.environ["HYPERSPACE_SEED"])
        if "HYPERSPACE_JITTER" in os.environ:
            config.jitter = float(os.environ["HYPERSPACE_JITTER"])
        return config


# Pre-tuned presets for different moods
PRESETS: Dict[str, AnimationConfig] = {
    "default": AnimationConfig(),
    "calm": AnimationConfig(
        ease_speed=0.012,  # Slow, drifting transitions
        jitter=0.008,
        breathing_rate=0.3,
        breathing_depth=0.03,
        sparkle_probability=0.03,
    ),
    "lively": AnimationConfig(
        ease_speed=0.06,  # Snappy transitions
        jitter=0.05,
        breathing_rate=0.9,
        breathing_depth=0.025,
        sparkle_probability=0.08,
    ),
    "still": AnimationConfig(
        jitter=0.0,  # No micro-movement, clean convergence
        breathing_depth=0.0,
    ),
    "lite": AnimationConfig(
        particle_count=15000,  # For slow machines / terminals
    ),
}


def get_preset(name: str) -> AnimationConfig:
    """Get a copy of a preset by name, returns 'default' if not found."""
    preset = PRESETS.get(name.lower(), PRESETS["default"])
    return AnimationConfig(**asdict(preset))


def list_presets() -> List[str]:
    """List available preset names."""
    return list(PRESETS.keys())


@dataclass
class DisplayConfig:
    """Terminal preview configuration."""

    width: int = 72
    height: int = 28
    fps: float = 30.0
    color: bool = True
    compact: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "DisplayConfig":
        """Create from dictionary."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass
class AppConfig:
    """Complete application configuration."""

    animation: AnimationConfig = field(default_factory=AnimationConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    # Shape selection
    initial_shape: str = "chaos"
    cycle_interval: float = 8.0  # Seconds per shape when auto-cycling (0 = off)

    def save(self, path: Path) -> None:
        """Save configuration to JSON file."""
        data = {
            "animation": self.animation.to_dict(),
            "display": asdict(self.display),
            "shapes": {
                "initial_shape": self.initial_shape,
                "cycle_interval": self.cycle_interval,
            },
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(data, f, indent=2)

    @classmethod
    def load(cls, path: Path) -> "AppConfig":
        """Load configuration from JSON file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = json.load(f)

        config = cls()

        if "animation" in data:
            config.animation = AnimationConfig.from_dict(data["animation"])

        if "display" in data:
            config.display = DisplayConfig.from_dict(data["display"])

        shapes = data.get("shapes", {})
        config.initial_shape = shapes.get("initial_shape", "chaos")
        config.cycle_interval = shapes.get("cycle_interval", 8.0)

        return config


# Default config file location
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "hyperspace" / "config.json"


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load configuration from file or return defaults."""
    if path is None:
        path = DEFAULT_CONFIG_PATH
    return AppConfig.load(path)


def save_config(config: AppConfig, path: Optional[Path] = None) -> None:
    """Save configuration to file."""
    if path is None:
        path = DEFAULT_CONFIG_PATH
    config.save(path)
