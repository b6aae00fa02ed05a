"""
Hyperspace - Animated point cloud shapes.

Procedurally generates point clouds for seven shapes and eases a live
particle buffer between them every frame.
"""

from .animator import Animator
from .config import AnimationConfig, AppConfig, get_preset, list_presets
from .shapes import (
    Palette,
    ShapeInfo,
    ShapeKind,
    UnknownShapeError,
    describe,
    get_shape,
    list_shapes,
    next_shape,
    palette_for,
    sample,
)

__all__ = [
    "Animator",
    "AnimationConfig",
    "AppConfig",
    "Palette",
    "ShapeInfo",
    "ShapeKind",
    "UnknownShapeError",
    "describe",
    "get_shape",
    "get_preset",
    "list_presets",
    "list_shapes",
    "next_shape",
    "palette_for",
    "sample",
]
