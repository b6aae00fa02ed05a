"""
Tests for the frame loop host and the command-line entry point.

Run with: python -m pytest hyperspace/tests/test_host.py -v
"""

import argparse
import signal

import pytest

from hyperspace import cli
from hyperspace.animator import Animator
from hyperspace.config import AnimationConfig
from hyperspace.host import AnimationHost
from hyperspace.shapes import ShapeKind


class SteppingClock:
    """Advances by a fixed step every time it is read."""

    def __init__(self, step=0.05):
        self.now = 0.0
        self.step = step

    def __call__(self):
        self.now += self.step
        return self.now


class RecordingPreview:
    def __init__(self, stop_after=None, host=None):
        self.frames = []
        self.cleared = False
        self.stop_after = stop_after
        self.host = host

    def display(self, animator, fps):
        self.frames.append((animator.frame_count, animator.shape))
        if self.stop_after is not None and len(self.frames) >= self.stop_after:
            self.host.stop()

    def clear(self):
        self.cleared = True


def make_animator(n=200):
    return Animator(config=AnimationConfig(particle_count=n, seed=11, jitter=0.0))


class TestAnimationHost:
    @pytest.mark.asyncio
    async def test_runs_max_frames(self):
        animator = make_animator()
        preview = RecordingPreview()
        host = AnimationHost(animator, preview=preview, fps=1000, max_frames=5)

        await host.run()

        assert host.frames == 5
        assert animator.frame_count == 5
        assert [frame for frame, _ in preview.frames] == [1, 2, 3, 4, 5]
        assert preview.cleared
        assert not host.running

    @pytest.mark.asyncio
    async def test_stop_ends_loop(self):
        animator = make_animator()
        preview = RecordingPreview(stop_after=3)
        host = AnimationHost(animator, preview=preview, fps=1000, clock=SteppingClock())
        preview.host = host

        await host.run()

        assert host.frames == 3
        assert preview.cleared

    @pytest.mark.asyncio
    async def test_cycles_shapes_on_interval(self):
        animator = make_animator()
        host = AnimationHost(
            animator,
            fps=1000,
            cycle_interval=1.0,
            max_frames=40,
            clock=SteppingClock(0.05),
        )

        await host.run()

        assert host.switches > 0
        assert animator.transitions == 1 + host.switches

    @pytest.mark.asyncio
    async def test_no_cycling_when_disabled(self):
        animator = make_animator()
        host = AnimationHost(animator, fps=1000, max_frames=20, clock=SteppingClock(1.0))

        await host.run()

        assert host.switches == 0
        assert animator.shape == ShapeKind.CHAOS

    @pytest.mark.asyncio
    async def test_elapsed_follows_clock(self):
        animator = make_animator()
        host = AnimationHost(animator, fps=1000, max_frames=3, clock=SteppingClock(0.5))

        await host.run()

        assert animator.elapsed > 0.0
        assert animator.rotation == pytest.approx(animator.elapsed * 0.1)

    @pytest.mark.asyncio
    async def test_zero_max_frames_runs_nothing(self):
        animator = make_animator()
        preview = RecordingPreview()
        host = AnimationHost(animator, preview=preview, fps=1000, max_frames=0)

        await host.run()

        assert host.frames == 0
        assert animator.frame_count == 0
        assert preview.frames == []
        assert preview.cleared


# ============================================================================
# CLI
# ============================================================================


@pytest.fixture
def no_signals(monkeypatch):
    """Keep main() from replacing the test runner's signal handlers."""
    monkeypatch.setattr(signal, "signal", lambda *args: None)


class TestValidators:
    def test_positive_int(self):
        assert cli.validate_positive_int("5") == 5
        with pytest.raises(argparse.ArgumentTypeError):
            cli.validate_positive_int("0")
        with pytest.raises(argparse.ArgumentTypeError):
            cli.validate_positive_int("abc")

    def test_non_negative_float(self):
        assert cli.validate_non_negative_float("0") == 0.0
        with pytest.raises(argparse.ArgumentTypeError):
            cli.validate_non_negative_float("-1")
        with pytest.raises(argparse.ArgumentTypeError):
            cli.validate_non_negative_float("nan")

    def test_shape(self):
        assert cli.validate_shape("Agora Rose") == "rose"
        with pytest.raises(argparse.ArgumentTypeError):
            cli.validate_shape("hexagon")


class TestMain:
    def test_list_shapes(self, capsys):
        assert cli.main(["--list-shapes"]) == 0
        out = capsys.readouterr().out
        assert "Available shapes:" in out
        for name in ("chaos", "Descartes Heart", "Fibonacci Spiral"):
            assert name in out

    def test_list_presets(self, capsys):
        assert cli.main(["--list-presets"]) == 0
        out = capsys.readouterr().out
        assert "calm" in out
        assert "particles=15000" in out

    def test_headless_run(self, tmp_path, no_signals):
        code = cli.main(
            [
                "--headless",
                "--frames", "3",
                "--particles", "500",
                "--fps", "1000",
                "--seed", "1",
                "--shape", "mandelbrot",
                "--config", str(tmp_path / "none.json"),
            ]
        )
        assert code == 0

    def test_compact_run(self, tmp_path, no_signals, capsys):
        code = cli.main(
            [
                "--compact",
                "--frames", "2",
                "--particles", "100",
                "--fps", "1000",
                "--config", str(tmp_path / "none.json"),
            ]
        )
        assert code == 0
        assert "[Chaos Universe]" in capsys.readouterr().out

    def test_unknown_shape_exits(self):
        with pytest.raises(SystemExit) as exc:
            cli.main(["--shape", "blob"])
        assert exc.value.code == 2

    def test_unknown_preset_exits(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            cli.main(["--preset", "frantic", "--config", str(tmp_path / "none.json")])
        assert exc.value.code == 2

    def test_bad_environment_value_exits(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("HYPERSPACE_PARTICLES", "lots")
        with pytest.raises(SystemExit) as exc:
            cli.main(["--headless", "--frames", "1", "--config", str(tmp_path / "none.json")])
        assert exc.value.code == 2
        assert "HYPERSPACE_" in capsys.readouterr().err

    def test_bad_config_shape_exits(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"shapes": {"initial_shape": "blob"}}')
        with pytest.raises(SystemExit):
            cli.main(["--headless", "--frames", "1", "--config", str(path)])
