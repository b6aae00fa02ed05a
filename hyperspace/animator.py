"""
Point Cloud Animator.

Owns the three per-particle buffers and advances them once per rendered frame:

    select_shape(shape)  -> regenerate target positions and colours
    tick(elapsed_time)   -> ease current toward target, add jitter,
                            update global rotation and breathing scale

All buffers are pre-allocated numpy arrays sized once at construction and
updated in place, so a renderer can hold on to the read-only views returned
by current_positions() / current_colors() for the whole run.

Usage:
    animator = Animator(particle_count=60000)
    animator.select_shape(ShapeKind.HEART)

    # Render loop
    animator.tick(clock.elapsed)
    if animator.positions_need_update:
        upload(animator.current_positions())
"""

import logging
import math
from dataclasses import replace
from typing import Optional

import numpy as np

from .config import AnimationConfig
from .samplers import mandelbrot_canyon
from .shapes import ShapeKind, describe, next_shape

logger = logging.getLogger(__name__)


def _read_only(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


class Animator:
    """
    Animated point cloud with a fixed particle count.

    Single writer: only select_shape() and tick() mutate the buffers, and
    both run on the caller's thread. Readers get non-writeable views.

    Attributes:
        particle_count: Number of points (fixed for the lifetime of the animator)
        config: Motion and colouring parameters
    """

    def __init__(
        self,
        particle_count: Optional[int] = None,
        config: Optional[AnimationConfig] = None,
        rng: Optional[np.random.Generator] = None,
        initial_shape: ShapeKind = ShapeKind.CHAOS,
    ):
        """
        Initialize the animator and settle it on ``initial_shape``.

        Args:
            particle_count: Overrides config.particle_count when given
            config: Animation parameters (defaults to AnimationConfig())
            rng: Random generator for sampling, colours and jitter. Defaults
                to one seeded from config.seed (fresh entropy when None).
            initial_shape: Shape the cloud starts in, already converged
        """
        config = config or AnimationConfig()
        if particle_count is not None:
            config = replace(config, particle_count=int(particle_count))
        self.config = config.validate()
        self.particle_count = self.config.particle_count
        self._rng = rng if rng is not None else np.random.default_rng(self.config.seed)

        n = self.particle_count
        self._current = np.zeros((n, 3), dtype=np.float32)
        self._target = np.zeros((n, 3), dtype=np.float32)
        self._colors = np.ones((n, 3), dtype=np.float32)
        self._scratch = np.zeros((n, 3), dtype=np.float32)

        self._shape = describe(initial_shape).kind
        self._elapsed = 0.0
        self._frame_count = 0
        self._transitions = 0
        self._rotation = 0.0
        self._scale = 1.0

        self._positions_need_update = False
        self._colors_need_update = False

        self.select_shape(initial_shape)
        np.copyto(self._current, self._target)

        logger.info(
            f"Animator ready: {n} particles, shape={self._shape.value}",
            extra={"shape": self._shape.value, "particle_count": n},
        )

    # ------------------------------------------------------------------
    # Transition controller
    # ------------------------------------------------------------------

    def select_shape(self, shape: ShapeKind) -> None:
        """
        Switch the target to a freshly generated cloud for ``shape``.

        The current positions are left alone and ease toward the new target
        over the following ticks. Selecting the same shape again produces a
        new, statistically similar cloud.

        Raises:
            UnknownShapeError: if ``shape`` is not a built-in shape
        """
        info = describe(shape)

        np.copyto(self._target, self._generate(info.kind))
        np.copyto(self._colors, self._blend_colors(info.kind))

        self._shape = info.kind
        self._transitions += 1
        self._positions_need_update = True
        self._colors_need_update = True

        logger.info(
            f"Shape changed to: {info.display_name}",
            extra={"shape": info.kind.value, "frame": self._frame_count},
        )

    def cycle_shape(self) -> ShapeKind:
        """Select the next shape in registry order and return it."""
        shape = next_shape(self._shape)
        self.select_shape(shape)
        return shape

    def _generate(self, shape: ShapeKind) -> np.ndarray:
        if shape is ShapeKind.MANDELBROT:
            return mandelbrot_canyon(
                self.particle_count,
                self._rng,
                attempt_factor=self.config.mandelbrot_attempt_factor,
            ).points
        return describe(shape).sampler(self.particle_count, self._rng)

    def _blend_colors(self, shape: ShapeKind) -> np.ndarray:
        """Per-point mix between the palette endpoints, with white sparkles."""
        palette = describe(shape).palette
        primary = np.asarray(palette.primary, dtype=np.float32)
        secondary = np.asarray(palette.secondary, dtype=np.float32)

        n = self.particle_count
        mix = self._rng.random((n, 1), dtype=np.float32)
        colors = mix * primary + (1.0 - mix) * secondary

        sparkle = self._rng.random(n) < self.config.sparkle_probability
        colors[sparkle] = 1.0

        return np.clip(colors, 0.0, 1.0)

    # ------------------------------------------------------------------
    # Frame animator
    # ------------------------------------------------------------------

    def tick(self, elapsed_time: float) -> None:
        """
        Advance one frame.

        Args:
            elapsed_time: Seconds since the host clock started. The clock
                never runs backwards: an earlier value than the last tick
                keeps the previous time.
        """
        if elapsed_time >= self._elapsed:
            self._elapsed = float(elapsed_time)

        # Ease toward target: current += (target - current) * speed
        np.subtract(self._target, self._current, out=self._scratch)
        self._scratch *= self.config.ease_speed
        self._current += self._scratch

        # Micro-movement, applied after easing
        if self.config.jitter > 0:
            self._rng.random(dtype=np.float32, out=self._scratch)
            self._scratch -= 0.5
            self._scratch *= self.config.jitter
            self._current += self._scratch

        self._rotation = self._elapsed * describe(self._shape).rotation_speed
        self._scale = 1.0 + math.sin(self._elapsed * self.config.breathing_rate) * self.config.breathing_depth

        self._frame_count += 1
        self._positions_need_update = True

    def advance(self, dt: float) -> None:
        """Tick with the clock moved forward by ``dt`` seconds."""
        self.tick(self._elapsed + dt)

    # ------------------------------------------------------------------
    # Read-only outputs
    # ------------------------------------------------------------------

    def current_positions(self) -> np.ndarray:
        """Read-only (N, 3) view of the animated positions. Clears the positions flag."""
        self._positions_need_update = False
        return _read_only(self._current)

    def current_colors(self) -> np.ndarray:
        """Read-only (N, 3) view of the RGB colours. Clears the colours flag."""
        self._colors_need_update = False
        return _read_only(self._colors)

    def target_positions(self) -> np.ndarray:
        """Read-only (N, 3) view of the positions being eased toward."""
        return _read_only(self._target)

    def world_positions(self) -> np.ndarray:
        """
        Positions with the global rotation (about +Y) and breathing scale applied.

        Returns a new array; the animated buffer is not modified.
        """
        cos_r = math.cos(self._rotation)
        sin_r = math.sin(self._rotation)
        rotation = np.array(
            [
                [cos_r, 0.0, -sin_r],
                [0.0, 1.0, 0.0],
                [sin_r, 0.0, cos_r],
            ],
            dtype=np.float32,
        )
        return (self._current @ rotation) * np.float32(self._scale)

    def mean_distance_to_target(self) -> float:
        """Mean Euclidean distance between current and target positions."""
        if self.particle_count == 0:
            return 0.0
        return float(np.linalg.norm(self._target - self._current, axis=1).mean())

    @property
    def positions_need_update(self) -> bool:
        """True when positions changed since the last current_positions() read."""
        return self._positions_need_update

    @property
    def colors_need_update(self) -> bool:
        """True when colours changed since the last current_colors() read."""
        return self._colors_need_update

    @property
    def shape(self) -> ShapeKind:
        return self._shape

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def rotation(self) -> float:
        """Global rotation about +Y in radians."""
        return self._rotation

    @property
    def scale(self) -> float:
        """Uniform breathing scale factor."""
        return self._scale

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def transitions(self) -> int:
        return self._transitions
