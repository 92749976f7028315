#!/usr/bin/env python3
"""Build a scene in code, save it as JSON and render it.

The scene is the default sphere box with a third, glowing sphere between the
two center spheres. The JSON file can be rendered again with
``tinypath --scene three_spheres.json``.

Usage:
    python examples/custom_scene.py [--size SIZE] [--spp SPP] [--output OUTPUT]
"""

from __future__ import annotations

import argparse
import sys
import time


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Render the sphere box with an extra light.")
    parser.add_argument(
        "--size",
        type=int,
        default=256,
        help="Image width and height in pixels (default: 256)",
    )
    parser.add_argument(
        "--spp",
        type=int,
        default=32,
        help="Samples per pixel (default: 32)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="three_spheres.png",
        help="Output file path (default: three_spheres.png)",
    )
    return parser.parse_args()


def main() -> int:
    """Main entry point."""
    args = parse_args()

    from tinypath.logging_config import setup_logging
    from tinypath.runtime import init_runtime

    setup_logging("INFO")
    init_runtime("cpu")

    # Lazy imports to allow Taichi initialization first
    from tinypath.core.renderer import Renderer, RenderSettings
    from tinypath.materials import Emissive
    from tinypath.scene.manager import save_scene_file
    from tinypath.scene.sphere_box import SphereBoxParams, create_sphere_box_scene

    scene, camera = create_sphere_box_scene(SphereBoxParams(light_color=(0.4, 0.36, 0.28)))
    scene.add_sphere((1.0, 4.0, 14.0), 1.5, Emissive((6.0, 5.0, 3.0)))

    # The camera keeps the field of view of a 512 pixel image
    camera.view_distance = 400.0 * args.size / 512

    json_path = args.output.rsplit(".", 1)[0] + ".json"
    save_scene_file(json_path, scene, camera)
    print(f"Scene saved to: {json_path}")

    renderer = Renderer(
        RenderSettings(width=args.size, height=args.size, samples_per_pixel=args.spp, seed=1)
    )
    start_time = time.perf_counter()
    renderer.render(scene, camera)
    renderer.save_image(args.output)

    print(f"Rendered {args.size}x{args.size} at {args.spp} spp in {time.perf_counter() - start_time:.2f}s")
    print(f"Image saved to: {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
