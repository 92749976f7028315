"""Command line entry point.

Renders the built-in sphere box scene, or a scene loaded from a JSON file, and
writes the result as a PNG. While rendering, the PNG is rewritten every 40
rows unless --no-progressive-save is given.

Usage:
    tinypath [options]
    python -m tinypath [options]

Example:
    tinypath --width 256 --height 256 --spp 64 --output box.png
"""

import argparse
import logging
import sys
import time
from collections.abc import Sequence

from tinypath.errors import TinyPathError
from tinypath.logging_config import setup_logging
from tinypath.runtime import ARCHES, init_runtime

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="tinypath",
        description="Render a scene of spheres with Monte Carlo path tracing.",
    )
    parser.add_argument(
        "-W",
        "--width",
        type=int,
        default=512,
        help="Image width in pixels (default: 512)",
    )
    parser.add_argument(
        "-H",
        "--height",
        type=int,
        default=512,
        help="Image height in pixels (default: 512)",
    )
    parser.add_argument(
        "-s",
        "--spp",
        type=int,
        default=8,
        help="Samples per pixel (default: 8)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=2,
        help="Maximum path depth (default: 2)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default="output.png",
        help="Output file path (default: output.png)",
    )
    parser.add_argument(
        "-p",
        "--progressive-save",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Save the image while rendering (default: on)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed (default: 0)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in sphere box)",
    )
    parser.add_argument(
        "--arch",
        choices=sorted(ARCHES),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show the result in a Matplotlib window",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


class ProgressReporter:
    """Prints "NN% complete" at every whole percent of finished pixels."""

    def __init__(self, stream=None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def __call__(self, completed: int, total: int) -> None:
        step = max(1, total // 100)
        index = completed - 1
        if index % step == 0:
            percent = index / total * 100.0
            print("%3i%% complete" % percent, file=self.stream)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.verbose:
        setup_logging("DEBUG")
    elif args.quiet:
        setup_logging("WARNING")
    else:
        setup_logging("INFO")

    try:
        init_runtime(args.arch)

        # Field-owning modules are imported after Taichi initialization
        from tinypath.core.renderer import Renderer, RenderSettings
        from tinypath.scene.manager import load_scene_file
        from tinypath.scene.sphere_box import create_sphere_box_scene

        if args.scene:
            scene, camera = load_scene_file(args.scene)
        else:
            scene, camera = create_sphere_box_scene()

        settings = RenderSettings(
            width=args.width,
            height=args.height,
            samples_per_pixel=args.spp,
            max_depth=args.max_depth,
            seed=args.seed,
            progressive_path=args.output if args.progressive_save else None,
        )
        renderer = Renderer(settings)

        print(f"Rendering {args.width}x{args.height}")
        start_time = time.perf_counter()
        image = renderer.render(
            scene,
            camera,
            on_pixel=None if args.quiet else ProgressReporter(),
        )
        renderer.save_image(args.output)
        elapsed = time.perf_counter() - start_time
        print(f"Render completed in {elapsed:.2f} seconds")
        logger.info("Saved %s", args.output)
    except (TinyPathError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.show:
        from tinypath.preview.display import show_preview

        show_preview(image, title=f"{args.output} ({args.spp} spp)")

    return 0


if __name__ == "__main__":
    sys.exit(main())
