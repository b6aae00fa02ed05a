"""
Terminal-based preview of the animated point cloud.
ANSI renderer with density shading, palette colours and a status header.
"""

import os
import shutil
import sys
import time
from typing import TYPE_CHECKING, List, Optional

import numpy as np

from .shapes import describe

if TYPE_CHECKING:
    from .animator import Animator


def is_vscode_terminal() -> bool:
    """Check if running in VS Code's integrated terminal."""
    return os.environ.get("TERM_PROGRAM") == "vscode"


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    CYAN = "\033[36m"
    MAGENTA = "\033[35m"

    # Bright foreground
    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_BLUE = "\033[94m"
    BRIGHT_MAGENTA = "\033[95m"
    BRIGHT_CYAN = "\033[96m"
    BRIGHT_WHITE = "\033[97m"

    # Cursor control
    HIDE_CURSOR = "\033[?25l"
    SHOW_CURSOR = "\033[?25h"
    CLEAR_LINE = "\033[2K"
    CLEAR_SCREEN = "\033[2J"
    HOME = "\033[H"


# Density ramp, sparse to dense
SHADES = " .:-=+*#%@"

# Reference RGB for each bright ANSI colour; cells take the nearest one
ANSI_TABLE = [
    ((1.0, 0.2, 0.2), Colors.BRIGHT_RED),
    ((0.2, 1.0, 0.2), Colors.BRIGHT_GREEN),
    ((1.0, 1.0, 0.2), Colors.BRIGHT_YELLOW),
    ((0.2, 0.4, 1.0), Colors.BRIGHT_BLUE),
    ((1.0, 0.2, 1.0), Colors.BRIGHT_MAGENTA),
    ((0.2, 1.0, 1.0), Colors.BRIGHT_CYAN),
    ((1.0, 1.0, 1.0), Colors.BRIGHT_WHITE),
]
_ANSI_RGB = np.array([rgb for rgb, _ in ANSI_TABLE], dtype=np.float32)
_ANSI_CODES = [code for _, code in ANSI_TABLE]


class FpsCounter:
    """Counts frames and publishes the rate once per second."""

    def __init__(self, clock=time.perf_counter):
        self._clock = clock
        self._last_time: Optional[float] = None
        self._frames = 0
        self.fps = 0.0

    def update(self) -> float:
        """Register one frame; returns the latest published FPS."""
        now = self._clock()
        if self._last_time is None:
            self._last_time = now
        self._frames += 1

        elapsed = now - self._last_time
        if elapsed >= 1.0:
            self.fps = self._frames / elapsed
            self._frames = 0
            self._last_time = now
        return self.fps


def rasterize(
    positions: np.ndarray,
    colors: np.ndarray,
    width: int,
    height: int,
    extent: float,
):
    """
    Project points orthographically onto a width x height character grid.

    Screen x is world x, screen up is world y; points outside +/- extent are
    dropped.

    Returns:
        (counts, mean_colors) with shapes (height, width) and (height, width, 3)
    """
    cells = width * height
    if len(positions) == 0:
        return np.zeros((height, width), dtype=np.int64), np.zeros((height, width, 3))

    col = np.floor((positions[:, 0] + extent) / (2.0 * extent) * width).astype(np.int64)
    row = np.floor((extent - positions[:, 1]) / (2.0 * extent) * height).astype(np.int64)
    inside = (col >= 0) & (col < width) & (row >= 0) & (row < height)
    index = row[inside] * width + col[inside]

    counts = np.bincount(index, minlength=cells)
    sums = np.stack(
        [np.bincount(index, weights=colors[inside, c], minlength=cells) for c in range(3)],
        axis=-1,
    )
    mean = sums / np.maximum(counts, 1)[:, None]
    return counts.reshape(height, width), mean.reshape(height, width, 3)


class TerminalPreview:
    """Full-screen ANSI preview of an Animator."""

    def __init__(
        self,
        width: Optional[int] = None,
        height: int = 28,
        extent: float = 45.0,
        color: bool = True,
        vscode_mode: Optional[bool] = None,
        stream=None,
    ):
        self._stream = stream or sys.stdout
        self._initialized = False
        self._lines_used = 0
        self._color = color

        self._vscode_mode = vscode_mode if vscode_mode is not None else is_vscode_terminal()

        if width is None:
            try:
                width = min(96, shutil.get_terminal_size().columns - 2)
            except OSError:
                width = 72
        self.width = max(16, width)
        self.height = max(8, height)
        self.extent = extent

        # Enable ANSI on Windows
        if sys.platform == "win32":
            os.system("")

    def _paint(self, text: str, code: str) -> str:
        if not self._color:
            return text
        return f"{code}{text}{Colors.RESET}"

    def render(self, animator: "Animator", fps: float = 0.0) -> List[str]:
        """Build the preview as a list of lines without writing anything."""
        info = describe(animator.shape)
        counts, mean = rasterize(
            animator.world_positions(),
            animator.current_colors(),
            self.width,
            self.height,
            self.extent,
        )

        lines = []

        # === HEADER ===
        title = self._paint("# HYPER-SPACE", Colors.BRIGHT_CYAN + Colors.BOLD)
        lines.append(f"{title} {self._paint(info.display_name, Colors.BOLD)}")
        lines.append(self._paint(info.description, Colors.MAGENTA))
        lines.append(self._paint("─" * self.width, Colors.DIM))

        # === POINT CLOUD ===
        peak = counts.max() if counts.size else 0
        if peak > 0:
            levels = np.log1p(counts) / np.log1p(peak) * (len(SHADES) - 1)
            levels = np.clip(np.ceil(levels), 0, len(SHADES) - 1).astype(np.int64)
        else:
            levels = np.zeros_like(counts)

        nearest = np.argmin(
            ((mean[:, :, None, :] - _ANSI_RGB[None, None, :, :]) ** 2).sum(axis=-1), axis=-1
        )

        for r in range(self.height):
            if not self._color:
                lines.append("".join(SHADES[level] for level in levels[r]))
                continue
            parts = []
            for c in range(self.width):
                level = levels[r, c]
                if level == 0:
                    parts.append(" ")
                else:
                    parts.append(f"{_ANSI_CODES[nearest[r, c]]}{SHADES[level]}")
            lines.append("".join(parts) + Colors.RESET)

        # === STATS ROW ===
        lines.append(self._paint("─" * self.width, Colors.DIM))
        stats = (
            f"FPS: {fps:5.1f}  Particles: {animator.particle_count:,}  "
            f"Frame: {animator.frame_count}  Δ: {animator.mean_distance_to_target():6.3f}"
        )
        lines.append(self._paint(stats, Colors.DIM))
        return lines

    def display(self, animator: "Animator", fps: float = 0.0) -> None:
        """Redraw the preview in place."""
        lines = self.render(animator, fps)

        if self._vscode_mode:
            self._stream.write(Colors.HOME)
        elif self._initialized:
            self._stream.write(f"\033[{self._lines_used}A")
        else:
            self._stream.write(Colors.HIDE_CURSOR)

        for line in lines:
            self._stream.write(f"{Colors.CLEAR_LINE}{line}\n")

        self._stream.flush()
        self._lines_used = len(lines)
        self._initialized = True

    def clear(self) -> None:
        """Clean up display."""
        if self._vscode_mode:
            self._stream.write(Colors.CLEAR_SCREEN)
            self._stream.write(Colors.HOME)
        elif self._initialized:
            for _ in range(self._lines_used):
                self._stream.write(f"{Colors.CLEAR_LINE}\n")
            self._stream.write(f"\033[{self._lines_used}A")

        self._stream.write(Colors.SHOW_CURSOR)
        self._stream.flush()


class CompactPreview:
    """Minimal single-line status for simple output."""

    def __init__(self, stream=None):
        self._stream = stream or sys.stdout

    def render(self, animator: "Animator", fps: float = 0.0) -> List[str]:
        info = describe(animator.shape)
        return [
            f"[{info.display_name}] fps={fps:5.1f} frame={animator.frame_count} "
            f"dist={animator.mean_distance_to_target():.3f}"
        ]

    def display(self, animator: "Animator", fps: float = 0.0) -> None:
        self._stream.write(f"\r{self.render(animator, fps)[0]}    ")
        self._stream.flush()

    def clear(self) -> None:
        self._stream.write("\n")
        self._stream.flush()
