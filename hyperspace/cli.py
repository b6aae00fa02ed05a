"""
Hyperspace CLI - Command-line interface for the point cloud animator.

Entry point:
    hyperspace    - Animate the point cloud in the terminal
"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path

# Fix Windows console encoding for unicode characters
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

logger = logging.getLogger(__name__)


def validate_positive_int(value: str) -> int:
    """Validate positive integer."""
    try:
        num = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid integer: {value}")

    if num <= 0:
        raise argparse.ArgumentTypeError(f"Value must be positive, got: {num}")
    return num


def validate_non_negative_float(value: str) -> float:
    """Validate a float >= 0."""
    try:
        num = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid number: {value}")

    if not num >= 0.0:
        raise argparse.ArgumentTypeError(f"Value must be non-negative, got: {value}")
    return num


def validate_shape(value: str) -> str:
    """Validate a shape id or display name."""
    from hyperspace.shapes import UnknownShapeError, get_shape

    try:
        return get_shape(value).value
    except UnknownShapeError:
        raise argparse.ArgumentTypeError(f"Unknown shape: {value} (see --list-shapes)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hyperspace",
        description="Hyperspace - Animated point cloud shapes in your terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hyperspace                        # Cycle through all shapes
  hyperspace --shape heart --cycle 0  # Stay on the heart
  hyperspace --preset calm          # Slow, drifting transitions
  hyperspace --particles 10000      # Fewer points for slow terminals
  hyperspace --headless --frames 300  # Benchmark without drawing
  hyperspace --list-shapes          # Show available shapes
        """,
    )

    shape_group = parser.add_argument_group("Shapes")
    shape_group.add_argument(
        "--shape",
        "-s",
        type=validate_shape,
        default=None,
        help="Initial shape (default: chaos, or from config)",
    )
    shape_group.add_argument(
        "--cycle",
        type=validate_non_negative_float,
        default=None,
        help="Seconds per shape when auto-cycling, 0 disables (default: 8)",
    )
    shape_group.add_argument(
        "--list-shapes",
        action="store_true",
        help="List available shapes and exit",
    )

    anim_group = parser.add_argument_group("Animation")
    anim_group.add_argument(
        "--particles",
        "-n",
        type=validate_positive_int,
        default=None,
        help="Particle count (default: 60000, or $HYPERSPACE_PARTICLES)",
    )
    anim_group.add_argument(
        "--preset",
        type=str,
        default=None,
        help="Animation preset (see --list-presets)",
    )
    anim_group.add_argument(
        "--list-presets",
        action="store_true",
        help="List animation presets and exit",
    )
    anim_group.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible clouds (default: fresh entropy)",
    )
    anim_group.add_argument(
        "--no-jitter",
        action="store_true",
        help="Disable per-frame micro-movement",
    )
    anim_group.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Config file (default: ~/.config/hyperspace/config.json)",
    )

    display_group = parser.add_argument_group("Display Options")
    display_group.add_argument(
        "--fps",
        type=validate_positive_int,
        default=None,
        help="Target frame rate (default: 30)",
    )
    display_group.add_argument(
        "--frames",
        type=validate_positive_int,
        default=None,
        help="Exit after this many frames",
    )
    display_group.add_argument(
        "--compact",
        action="store_true",
        help="Single-line status instead of the full preview",
    )
    display_group.add_argument(
        "--headless",
        action="store_true",
        help="Run the animation without drawing anything",
    )
    display_group.add_argument(
        "--no-color",
        action="store_true",
        help="Disable ANSI colours",
    )
    display_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def _list_shapes():
    from hyperspace.shapes import list_shape_info

    print("Available shapes:")
    for entry in list_shape_info():
        print(f"  {entry['id']:<12} {entry['name']:<18} {entry['description']}")


def _list_presets():
    from hyperspace.config import PRESETS

    print("Available presets:")
    for name, preset in PRESETS.items():
        print(
            f"  {name:<10} particles={preset.particle_count:<6} "
            f"ease={preset.ease_speed:<6} jitter={preset.jitter}"
        )


def main(argv=None) -> int:
    """
    Main entry point.

    Builds an Animator from config file, preset, environment and arguments
    (in increasing priority) and runs the frame loop.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    from hyperspace.logging_config import configure_logging

    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    # Handle list commands first
    if args.list_shapes:
        _list_shapes()
        return 0

    if args.list_presets:
        _list_presets()
        return 0

    # Import here to avoid slow startup for --help
    from hyperspace.animator import Animator
    from hyperspace.config import AnimationConfig, get_preset, list_presets, load_config
    from hyperspace.host import AnimationHost
    from hyperspace.preview import CompactPreview, TerminalPreview
    from hyperspace.shapes import get_shape

    app_config = load_config(args.config)
    animation = app_config.animation
    if args.preset:
        if args.preset.lower() not in list_presets():
            parser.error(f"Unknown preset: {args.preset} (choose from {', '.join(list_presets())})")
        animation = get_preset(args.preset)
    try:
        animation = AnimationConfig.from_env(animation)
    except ValueError as e:
        parser.error(f"Invalid HYPERSPACE_* environment value: {e}")

    if args.particles is not None:
        animation.particle_count = args.particles
    if args.seed is not None:
        animation.seed = args.seed
    if args.no_jitter:
        animation.jitter = 0.0

    try:
        animation.validate()
        initial_shape = get_shape(args.shape or app_config.initial_shape)
    except ValueError as e:
        parser.error(str(e))

    display = app_config.display
    preview = None
    if not args.headless:
        if args.compact or display.compact:
            preview = CompactPreview()
        else:
            preview = TerminalPreview(
                width=display.width,
                height=display.height,
                color=display.color and not args.no_color,
            )

    animator = Animator(config=animation, initial_shape=initial_shape)
    host = AnimationHost(
        animator,
        preview=preview,
        fps=args.fps or display.fps,
        cycle_interval=app_config.cycle_interval if args.cycle is None else args.cycle,
        max_frames=args.frames,
    )

    # Signal handlers
    def signal_handler(sig, frame):
        host.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        asyncio.run(host.run())
    except KeyboardInterrupt:
        pass

    return 0


if __name__ == "__main__":
    sys.exit(main())
