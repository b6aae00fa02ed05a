"""
Geometry Samplers for Hyperspace

Each sampler builds a point cloud for one shape as a (count, 3) float32 array.
Samplers are pure apart from drawing from the random generator they are given,
so a seeded ``np.random.Generator`` makes their output reproducible.
"""

import logging
import math
from typing import NamedTuple, Optional

import numpy as np

logger = logging.getLogger(__name__)

# ============================================================================
# Constants
# ============================================================================

GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))
TWO_PI = math.pi * 2.0

# Galaxy
GALAXY_ARMS = 5
GALAXY_RADIUS = 40.0
GALAXY_SPIN = 0.2
GALAXY_ARM_WIDTH = 0.5

# Rose
ROSE_PETALS = 7
ROSE_RADIUS = 15.0

# Cat
CAT_HEAD = 0
CAT_BODY = 1
CAT_TAIL = 2
CAT_HEAD_RADIUS = 7.0
CAT_HEAD_Y = 12.0
CAT_BODY_HEIGHT = 14.0
CAT_BODY_RADIUS = 8.0
CAT_TAIL_RADIUS = 1.5
CAT_SUPERPOSITION = 0.2

# Lissajous
LISSAJOUS_LOOPS = 20
LISSAJOUS_FREQUENCIES = (3, 4, 5)
LISSAJOUS_AMPLITUDE = 18.0
LISSAJOUS_TUBE = 3.0

# Mandelbrot
MANDELBROT_MAX_ITER = 60
MANDELBROT_ATTEMPT_FACTOR = 10
MANDELBROT_NOISE_EXTENT = 30.0

# Fibonacci
FIBONACCI_RADIUS = 20.0
FIBONACCI_RING = 2.0
FIBONACCI_EQUATOR = 5.0
FIBONACCI_NOISE = 0.5


# ============================================================================
# Utility Functions
# ============================================================================


def _rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def _check_count(count: int) -> int:
    count = int(count)
    if count < 0:
        raise ValueError(f"Point count must be non-negative, got: {count}")
    return count


def _stack(x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
    """Pack per-axis arrays into a contiguous (n, 3) float32 buffer."""
    return np.ascontiguousarray(np.stack([x, y, z], axis=-1), dtype=np.float32)


# ============================================================================
# 1. Chaos - spiral galaxy
# ============================================================================


def sample_chaos(count: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """
    Spiral galaxy with a dense core.

    Radius is squared-uniform so most points fall near the centre, the angular
    spread widens toward the core, and the disk flattens with distance.
    """
    count = _check_count(count)
    rng = _rng(rng)

    r = rng.random(count) ** 2 * GALAXY_RADIUS
    arm = np.floor(rng.random(count) * GALAXY_ARMS) / GALAXY_ARMS * TWO_PI
    spread = (rng.random(count) - 0.5) * GALAXY_ARM_WIDTH * (GALAXY_RADIUS / (r + 0.1))
    angle = r * GALAXY_SPIN + arm + spread

    vertical = np.maximum(0.5, (GALAXY_RADIUS - r) * 0.1)
    y = (rng.random(count) - 0.5) * vertical

    return _stack(r * np.cos(angle), y, r * np.sin(angle))


# ============================================================================
# 2. Heart - parametric volume
# ============================================================================


def sample_heart(count: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Classic 16sin^3 heart curve, filled toward the centre and given depth."""
    count = _check_count(count)
    rng = _rng(rng)

    u = rng.random(count) * TWO_PI
    hx = 16.0 * np.sin(u) ** 3
    hy = 13.0 * np.cos(u) - 5.0 * np.cos(2 * u) - 2.0 * np.cos(3 * u) - np.cos(4 * u)

    scale = np.sqrt(rng.random(count))
    thickness = 6.0 * (1.0 - np.abs(u - math.pi) / math.pi) + 2.0  # Thickest at u = pi
    z = (rng.random(count) - 0.5) * thickness

    return _stack(hx * scale, hy * scale + 5.0, z * scale)


# ============================================================================
# 3. Rose - spherical harmonic flower
# ============================================================================


def sample_rose(count: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Sphere whose radius is modulated by sin(k*theta)*sin(k*phi) petals."""
    count = _check_count(count)
    rng = _rng(rng)

    theta = rng.random(count) * TWO_PI
    phi = rng.random(count) * math.pi

    modulation = np.sin(ROSE_PETALS * theta) * np.sin(ROSE_PETALS * phi)
    r = ROSE_RADIUS * (0.8 + 0.4 * modulation)
    r = r * np.sqrt(rng.random(count))  # Bias toward the surface

    return _stack(
        r * np.sin(phi) * np.cos(theta),
        r * np.sin(phi) * np.sin(theta),
        r * np.cos(phi),
    )


# ============================================================================
# 4. Cat - head / body / tail mixture
# ============================================================================


class CatCloud(NamedTuple):
    points: np.ndarray
    parts: np.ndarray  # CAT_HEAD / CAT_BODY / CAT_TAIL per point


def cat_with_parts(
    count: int,
    rng: Optional[np.random.Generator] = None,
    superposition: float = CAT_SUPERPOSITION,
) -> CatCloud:
    """
    Build the cat cloud and report which sub-shape each point came from.

    Args:
        count: Number of points
        rng: Random generator
        superposition: Fraction of points doubled by a +/-1 offset on every
            axis after the parts are placed. 0 leaves every point inside its
            part's bounding volume.
    """
    count = _check_count(count)
    rng = _rng(rng)

    choice = rng.random(count)
    parts = np.where(choice < 0.25, CAT_HEAD, np.where(choice < 0.75, CAT_BODY, CAT_TAIL))
    parts = parts.astype(np.int8)

    x = np.zeros(count)
    y = np.zeros(count)
    z = np.zeros(count)

    # Head: solid sphere
    head = parts == CAT_HEAD
    n = int(head.sum())
    u = rng.random(n) * TWO_PI
    v = np.arccos(2.0 * rng.random(n) - 1.0)
    r = CAT_HEAD_RADIUS * np.cbrt(rng.random(n))
    hx = r * np.sin(v) * np.cos(u)
    hy = r * np.sin(v) * np.sin(u) + CAT_HEAD_Y
    hz = r * np.cos(v)
    ears = (hy > 16.0) & (np.abs(hx) > 2.0)
    hy = hy + np.where(ears, 3.0 * rng.random(n), 0.0)
    x[head], y[head], z[head] = hx, hy, hz

    # Body: tapered cylinder
    body = parts == CAT_BODY
    n = int(body.sum())
    angle = rng.random(n) * TWO_PI
    h = (rng.random(n) - 0.5) * CAT_BODY_HEIGHT
    taper = 1.0 - (h / CAT_BODY_HEIGHT + 0.5) * 0.4
    r = CAT_BODY_RADIUS * np.sqrt(rng.random(n)) * taper
    x[body], y[body], z[body] = r * np.cos(angle), h, r * np.sin(angle)

    # Tail: tube around a sine path
    tail = parts == CAT_TAIL
    n = int(tail.sum())
    t = rng.random(n) * math.pi
    tube = CAT_TAIL_RADIUS * rng.random(n)
    tube_angle = rng.random(n) * TWO_PI
    x[tail] = np.sin(t) * 8.0 + tube * np.cos(tube_angle)
    y[tail] = -6.0 + np.cos(t) * 6.0 + tube * np.sin(tube_angle)
    z[tail] = -8.0 - t * 2.0

    if superposition > 0:
        doubled = rng.random(count) < superposition
        m = int(doubled.sum())
        x[doubled] += (rng.random(m) - 0.5) * 2.0
        y[doubled] += (rng.random(m) - 0.5) * 2.0
        z[doubled] += (rng.random(m) - 0.5) * 2.0

    return CatCloud(_stack(x, y, z), parts)


def sample_cat(count: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Schrodinger's cat: head, body and tail in a slightly doubled silhouette."""
    return cat_with_parts(count, rng).points


# ============================================================================
# 5. Lissajous - 3D harmonic knot
# ============================================================================


def sample_lissajous(count: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Lissajous knot swept over 20 loops with points scattered inside a tube."""
    count = _check_count(count)
    rng = _rng(rng)

    nx, ny, nz = LISSAJOUS_FREQUENCIES
    t = np.arange(count) / max(count, 1) * TWO_PI * LISSAJOUS_LOOPS

    bx = LISSAJOUS_AMPLITUDE * np.sin(nx * t + math.pi / 2)
    by = LISSAJOUS_AMPLITUDE * np.sin(ny * t)
    bz = LISSAJOUS_AMPLITUDE * np.sin(nz * t)

    tube = LISSAJOUS_TUBE * rng.random(count)
    ang = rng.random(count) * TWO_PI
    phi = rng.random(count) * math.pi

    return _stack(
        bx + tube * np.sin(phi) * np.cos(ang),
        by + tube * np.sin(phi) * np.sin(ang),
        bz + tube * np.cos(phi),
    )


# ============================================================================
# 6. Mandelbrot - extruded canyon
# ============================================================================


def escape_iterations(cx, cy, max_iter: int = MANDELBROT_MAX_ITER) -> np.ndarray:
    """
    Escape time of z <- z^2 + c from z = 0, vectorised over c.

    Counts iterations while |z| < 2, capped at ``max_iter``.
    """
    cx = np.asarray(cx, dtype=np.float64)
    cy = np.asarray(cy, dtype=np.float64)
    zx = np.zeros_like(cx)
    zy = np.zeros_like(cy)
    iterations = np.zeros(cx.shape, dtype=np.int32)
    active = np.ones(cx.shape, dtype=bool)

    for _ in range(max_iter):
        active &= zx * zx + zy * zy < 4.0
        if not active.any():
            break
        zx_next = np.where(active, zx * zx - zy * zy + cx, zx)
        zy = np.where(active, 2.0 * zx * zy + cy, zy)
        zx = zx_next
        iterations += active

    return iterations


class MandelbrotCloud(NamedTuple):
    points: np.ndarray
    seeds: np.ndarray  # complex c per row, NaN where the row is fallback noise
    attempts: int


def mandelbrot_canyon(
    count: int,
    rng: Optional[np.random.Generator] = None,
    max_iter: int = MANDELBROT_MAX_ITER,
    attempt_factor: int = MANDELBROT_ATTEMPT_FACTOR,
) -> MandelbrotCloud:
    """
    Rejection-sample points near the Mandelbrot boundary.

    Candidates c in [-2.5, 1] x [-1.5, 1.5] are kept when 2 < escape < max_iter.
    Each kept c yields a point at height h and its mirror at -h. At most
    ``attempt_factor * count`` candidates are drawn; rows still empty after
    that are filled with uniform noise so the call always returns a full
    buffer.
    """
    count = _check_count(count)
    rng = _rng(rng)

    points = np.empty((count, 3), dtype=np.float32)
    seeds = np.full(count, np.nan, dtype=np.complex128)
    budget = max(0, int(attempt_factor)) * count
    attempts = 0
    filled = 0

    while filled < count and attempts < budget:
        batch = min(budget - attempts, max(256, (count - filled) * 4))
        cx = rng.random(batch) * 3.5 - 2.5
        cy = rng.random(batch) * 3.0 - 1.5
        iterations = escape_iterations(cx, cy, max_iter)

        accepted = np.flatnonzero((iterations > 2) & (iterations < max_iter))
        needed = (count - filled + 1) // 2
        if len(accepted) >= needed:
            accepted = accepted[:needed]
            attempts += int(accepted[-1]) + 1
        else:
            attempts += batch
        if len(accepted) == 0:
            continue

        height = iterations[accepted] / max_iter * 25.0 - 12.5
        px = cx[accepted] * 10.0 + 5.0
        pz = cy[accepted] * 10.0
        pairs = np.empty((len(accepted), 2, 3))
        pairs[:, 0] = np.stack([px, height, pz], axis=-1)
        pairs[:, 1] = np.stack([px, -height, pz], axis=-1)
        pair_seeds = np.repeat(cx[accepted] + 1j * cy[accepted], 2)

        take = min(len(accepted) * 2, count - filled)
        points[filled:filled + take] = pairs.reshape(-1, 3)[:take]
        seeds[filled:filled + take] = pair_seeds[:take]
        filled += take

    if filled < count:
        logger.debug(
            f"Mandelbrot sampler filled {filled}/{count} after {attempts} attempts, "
            f"padding with noise"
        )
        noise = (rng.random((count - filled, 3)) - 0.5) * MANDELBROT_NOISE_EXTENT
        points[filled:] = noise

    return MandelbrotCloud(points, seeds, attempts)


def sample_mandelbrot(count: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Mandelbrot escape-time canyon mirrored about the horizontal plane."""
    return mandelbrot_canyon(count, rng).points


# ============================================================================
# 7. Fibonacci - golden angle Dyson sphere
# ============================================================================


def fibonacci_radii(count: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Shell radius per index: base sphere plus ring and equator bands and noise."""
    count = _check_count(count)
    rng = _rng(rng)

    i = np.arange(count)
    r = np.full(count, FIBONACCI_RADIUS)
    r += np.where(i % 50 < 5, FIBONACCI_RING, 0.0)
    r += np.where(i % 300 < 20, FIBONACCI_EQUATOR, 0.0)
    r += (rng.random(count) - 0.5) * FIBONACCI_NOISE
    return r


def sample_fibonacci(count: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Fibonacci sphere with banded shells."""
    count = _check_count(count)
    rng = _rng(rng)

    i = np.arange(count)
    y = 1.0 - (i / max(count - 1, 1)) * 2.0  # 1 to -1
    radius_at_y = np.sqrt(np.clip(1.0 - y * y, 0.0, 1.0))
    theta = GOLDEN_ANGLE * i
    r = fibonacci_radii(count, rng)

    return _stack(np.cos(theta) * radius_at_y * r, y * r, np.sin(theta) * radius_at_y * r)
