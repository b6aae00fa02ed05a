"""
Shape Registry for Hyperspace

Maps each ShapeKind to its sampler, colour palette and display metadata.
The registry order is the order the UI cycles through.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Union

import numpy as np

from .samplers import (
    sample_cat,
    sample_chaos,
    sample_fibonacci,
    sample_heart,
    sample_lissajous,
    sample_mandelbrot,
    sample_rose,
)

RGB = Tuple[float, float, float]
Sampler = Callable[[int, Optional[np.random.Generator]], np.ndarray]


class UnknownShapeError(ValueError):
    """Raised when a shape name or value is not one of the built-in shapes."""


class ShapeKind(str, Enum):
    """The seven built-in shapes."""

    CHAOS = "chaos"
    HEART = "heart"
    ROSE = "rose"
    CAT = "cat"
    LISSAJOUS = "lissajous"
    MANDELBROT = "mandelbrot"
    FIBONACCI = "fibonacci"


def _hex(rgb: RGB) -> str:
    return "#" + "".join(f"{round(max(0.0, min(1.0, c)) * 255):02x}" for c in rgb)


@dataclass(frozen=True)
class Palette:
    """Two colour endpoints that per-point colours are blended between."""

    primary: RGB
    secondary: RGB

    def hex(self) -> Tuple[str, str]:
        """Return both endpoints as '#rrggbb' strings for UI hints."""
        return _hex(self.primary), _hex(self.secondary)


@dataclass(frozen=True)
class ShapeInfo:
    """Everything the engine and UI know about one shape."""

    kind: ShapeKind
    display_name: str
    description: str
    palette: Palette
    sampler: Sampler
    rotation_speed: float = 0.05  # radians per second


# ============================================================================
# Shape Registry
# ============================================================================

SHAPES: Dict[ShapeKind, ShapeInfo] = {
    ShapeKind.CHAOS: ShapeInfo(
        kind=ShapeKind.CHAOS,
        display_name="Chaos Universe",
        description="Galactic Entropy: Spiral Dynamics",
        palette=Palette((1.0, 0.6, 0.1), (0.1, 0.4, 1.0)),  # Orange / Blue
        sampler=sample_chaos,
        rotation_speed=0.1,
    ),
    ShapeKind.HEART: ShapeInfo(
        kind=ShapeKind.HEART,
        display_name="Descartes Heart",
        description="Parametric Volumetric: (x²+9/4y²+z²-1)³...",
        palette=Palette((1.0, 0.0, 0.3), (1.0, 0.2, 0.8)),  # Crimson / Pink
        sampler=sample_heart,
    ),
    ShapeKind.ROSE: ShapeInfo(
        kind=ShapeKind.ROSE,
        display_name="Agora Rose",
        description="Spherical Harmonics: Y(l,m)",
        palette=Palette((1.0, 0.0, 1.0), (0.0, 1.0, 1.0)),  # Magenta / Cyan
        sampler=sample_rose,
    ),
    ShapeKind.CAT: ShapeInfo(
        kind=ShapeKind.CAT,
        display_name="Schrödinger Cat",
        description="Schrödinger's Superposition: |Alive⟩ + |Dead⟩",
        palette=Palette((0.6, 0.0, 1.0), (0.0, 1.0, 0.5)),  # Purple / Green
        sampler=sample_cat,
    ),
    ShapeKind.LISSAJOUS: ShapeInfo(
        kind=ShapeKind.LISSAJOUS,
        display_name="Lissajous Knot",
        description="Complex Harmonic Knot 3D",
        palette=Palette((0.0, 0.8, 1.0), (1.0, 1.0, 1.0)),  # Electric Blue / White
        sampler=sample_lissajous,
    ),
    ShapeKind.MANDELBROT: ShapeInfo(
        kind=ShapeKind.MANDELBROT,
        display_name="Mandelbrot Set",
        description="Complex Plane Extrusion Z(n+1)",
        palette=Palette((0.0, 1.0, 0.4), (1.0, 0.8, 0.1)),  # Green / Gold
        sampler=sample_mandelbrot,
    ),
    ShapeKind.FIBONACCI: ShapeInfo(
        kind=ShapeKind.FIBONACCI,
        display_name="Fibonacci Spiral",
        description="Golden Angle Dyson Sphere φ",
        palette=Palette((1.0, 0.8, 0.0), (1.0, 0.2, 0.0)),  # Gold / Red
        sampler=sample_fibonacci,
    ),
}


def _info(shape: ShapeKind) -> ShapeInfo:
    try:
        return SHAPES[ShapeKind(shape)]
    except (ValueError, KeyError, TypeError):
        raise UnknownShapeError(f"Unknown shape: {shape!r}") from None


def list_shapes() -> List[ShapeKind]:
    """List all shapes in cycling order."""
    return list(SHAPES.keys())


def describe(shape: ShapeKind) -> ShapeInfo:
    """Get display name, description and palette for a shape."""
    return _info(shape)


def palette_for(shape: ShapeKind) -> Palette:
    """Get the colour palette for a shape."""
    return _info(shape).palette


def rotation_speed_for(shape: ShapeKind) -> float:
    """Get the global rotation speed (rad/s) for a shape."""
    return _info(shape).rotation_speed


def next_shape(shape: ShapeKind) -> ShapeKind:
    """Get the shape after ``shape`` in cycling order, wrapping around."""
    order = list_shapes()
    return order[(order.index(_info(shape).kind) + 1) % len(order)]


def get_shape(name: Union[str, ShapeKind]) -> ShapeKind:
    """
    Resolve a shape from its id, enum name or display name.

    Matching is case-insensitive. Unknown names raise UnknownShapeError
    rather than falling back to a default shape.
    """
    if isinstance(name, ShapeKind):
        return name

    key = str(name).strip().lower()
    for kind, info in SHAPES.items():
        if key in (kind.value, kind.name.lower(), info.display_name.lower()):
            return kind
    raise UnknownShapeError(f"Unknown shape: {name!r}")


def sample(
    shape: ShapeKind, count: int, rng: Optional[np.random.Generator] = None
) -> np.ndarray:
    """Generate ``count`` points for ``shape`` as a (count, 3) float32 array."""
    return _info(shape).sampler(count, rng)


def list_shape_info() -> List[Dict[str, str]]:
    """List all shapes as plain dicts for UIs."""
    result = []
    for kind, info in SHAPES.items():
        primary, secondary = info.palette.hex()
        result.append(
            {
                "id": kind.value,
                "name": info.display_name,
                "description": info.description,
                "primary": primary,
                "secondary": secondary,
            }
        )
    return result
