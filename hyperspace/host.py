"""
Frame loop host for the animator.

Drives Animator.tick() once per frame from a monotonic clock, switches shapes
on a timer and hands each frame to a preview.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

from .animator import Animator
from .preview import FpsCounter

logger = logging.getLogger(__name__)


class AnimationHost:
    """
    Runs the render loop for an Animator.

    The loop is single-threaded: tick, optional shape switch and display all
    happen in sequence, so the preview never sees a half-updated buffer.
    """

    def __init__(
        self,
        animator: Animator,
        preview=None,
        fps: float = 30.0,
        cycle_interval: float = 0.0,
        max_frames: Optional[int] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        """
        Args:
            animator: The animator to drive
            preview: Object with display(animator, fps) and clear(), or None
            fps: Target frame rate
            cycle_interval: Seconds between automatic shape switches (0 = never)
            max_frames: Stop after this many frames (None = run until stopped)
            clock: Monotonic time source in seconds
        """
        self.animator = animator
        self.preview = preview
        self.fps = fps
        self.cycle_interval = cycle_interval
        self.max_frames = max_frames

        self._clock = clock
        self._fps_counter = FpsCounter(clock)
        self._running = False
        self._frames = 0
        self._switches = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def frames(self) -> int:
        return self._frames

    @property
    def switches(self) -> int:
        return self._switches

    def stop(self):
        """Ask the loop to exit after the current frame."""
        self._running = False

    async def run(self):
        """Run until stop() is called or max_frames is reached."""
        self._running = True
        frame_interval = 1.0 / max(1.0, float(self.fps))
        start = self._clock()
        last_switch = 0.0

        logger.info(
            f"Frame loop started at {self.fps:.0f} FPS "
            f"({self.animator.particle_count} particles, shape={self.animator.shape.value})"
        )

        try:
            while self._running:
                if self.max_frames is not None and self._frames >= self.max_frames:
                    break

                frame_start = self._clock()
                elapsed = frame_start - start

                if self.cycle_interval > 0 and elapsed - last_switch >= self.cycle_interval:
                    self.animator.cycle_shape()
                    last_switch = elapsed
                    self._switches += 1

                self.animator.tick(elapsed)
                self._frames += 1
                fps = self._fps_counter.update()

                if self.preview is not None:
                    self.preview.display(self.animator, fps)

                remaining = frame_interval - (self._clock() - frame_start)
                await asyncio.sleep(max(0.0, remaining))
        finally:
            self._running = False
            if self.preview is not None:
                self.preview.clear()
            logger.info(
                f"Frame loop stopped after {self._frames} frames, "
                f"{self._switches} shape switches",
                extra={"frame": self._frames, "fps": self._fps_counter.fps},
            )
