#!/usr/bin/env python3
"""Render a scene to a PNG file.

This script renders either a built-in preset or a JSON scene description
with the multi-threaded path tracer, reports timing, and saves the result.

Usage:
    python -m examples.render_scene [options]

Options:
    --width WIDTH       Image width in pixels (default: 300)
    --height HEIGHT     Image height in pixels (default: 200)
    --rays RAYS         Samples per pixel (default: 16)
    --bounces BOUNCES   Maximum path depth (default: 4)
    --chunk SIZE        Chunk edge length in pixels (default: 32)
    --out OUTPUT        Output file path (default: output.png)
    --profile FILE      Write a cProfile dump of the render to FILE
    --fov DEGREES       Field of view in degrees (default: 115)
    --cam X,Y,Z         Camera position (default: -100,0,0)
    --look X,Y,Z        Camera look-at point (default: 0,0,0)
    --up X,Y,Z          Camera up vector (default: 0,0,1)
    --scene FILE        JSON scene description to render
    --preset NAME       Built-in scene to render (default: showcase)
    --workers N         Worker threads (default: CPU count)
    --seed N            Base random seed (default: 0)
    --quiet             Suppress progress output
    --log-level LEVEL   Logging level (default: WARNING)

Camera flags override the scene's own camera. A scene file without a camera
gets the default camera.

Example:
    python -m examples.render_scene --preset pyramid --rays 64 --out pyramid.png
"""

from __future__ import annotations

import argparse
import cProfile
import logging
import math
import sys
import time
from collections.abc import Sequence
from pathlib import Path

from pathtracer.camera.pinhole import PinholeCamera
from pathtracer.core.scheduler import ImageBuffer, RenderParams, RenderStats, render
from pathtracer.materials.material import AIR
from pathtracer.preview.export import save_png
from pathtracer.scene.loader import SceneConfig, load_scene
from pathtracer.scene.presets import (
    DEFAULT_CAMERA_LOOK_AT,
    DEFAULT_CAMERA_POSITION,
    DEFAULT_CAMERA_UP,
    DEFAULT_FOV_DEGREES,
    PRESETS,
    create_scene,
)


def parse_vector(text: str) -> tuple[float, float, float]:
    """Parse an "x,y,z" command-line vector."""
    parts = text.split(",")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"expected x,y,z but got {text!r}")
    try:
        x, y, z = (float(p) for p in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid vector {text!r}") from None
    return x, y, z


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a scene with the path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=300, help="Image width in pixels (default: 300)")
    parser.add_argument("--height", type=int, default=200, help="Image height in pixels (default: 200)")
    parser.add_argument("--rays", type=int, default=16, help="Samples per pixel (default: 16)")
    parser.add_argument("--bounces", type=int, default=4, help="Maximum path depth (default: 4)")
    parser.add_argument("--chunk", type=int, default=32, help="Chunk edge length in pixels (default: 32)")
    parser.add_argument("--out", type=str, default="output.png", help="Output file path (default: output.png)")
    parser.add_argument("--profile", type=str, default=None, help="Write a cProfile dump to this file")
    parser.add_argument("--fov", type=float, default=None, help="Field of view in degrees (default: 115)")
    parser.add_argument("--cam", type=parse_vector, default=None, help="Camera position x,y,z")
    parser.add_argument("--look", type=parse_vector, default=None, help="Camera look-at point x,y,z")
    parser.add_argument("--up", type=parse_vector, default=None, help="Camera up vector x,y,z")

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--scene", type=str, default=None, help="JSON scene description")
    source.add_argument(
        "--preset",
        type=str,
        default="showcase",
        choices=sorted(PRESETS),
        help="Built-in scene (default: showcase)",
    )

    parser.add_argument("--workers", type=int, default=None, help="Worker threads (default: CPU count)")
    parser.add_argument("--seed", type=int, default=0, help="Base random seed (default: 0)")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    return parser.parse_args(argv)


def build_scene(args: argparse.Namespace) -> tuple[SceneConfig, PinholeCamera]:
    """Load the requested scene and build its camera.

    Camera flags that were given override the corresponding field of the
    scene's camera; the image size always comes from --width and --height.
    """
    if args.scene is not None:
        config = load_scene(args.scene)
        base = config.camera
    else:
        geometries, base = create_scene(args.preset, args.width, args.height)
        config = SceneConfig(geometries=geometries, camera=base, ambient=AIR)

    if base is None:
        position, look_at, up = DEFAULT_CAMERA_POSITION, DEFAULT_CAMERA_LOOK_AT, DEFAULT_CAMERA_UP
        fov = math.radians(DEFAULT_FOV_DEGREES)
    else:
        position, look_at, up, fov = base.position, base.look_at, base.up, base.fov

    camera = PinholeCamera(
        position=args.cam if args.cam is not None else position,
        look_at=args.look if args.look is not None else look_at,
        up=args.up if args.up is not None else up,
        fov=math.radians(args.fov) if args.fov is not None else fov,
        width=args.width,
        height=args.height,
    )
    return config, camera


def render_to_file(args: argparse.Namespace) -> RenderStats:
    """Render the scene described by args and save it as a PNG.

    Returns:
        The render statistics.
    """
    config, camera = build_scene(args)
    params = RenderParams(
        samples_per_pixel=args.rays,
        max_bounces=args.bounces,
        chunk_size=args.chunk,
        seed=args.seed,
    )
    buffer = ImageBuffer(args.width, args.height)

    if not args.quiet:
        print(
            f"Rendering {args.width}x{args.height}, {args.rays} rays/pixel, "
            f"{args.bounces} bounces, {len(config.geometries)} geometries..."
        )

    def progress_callback(done: int, total: int) -> None:
        if not args.quiet:
            pct = (done / total) * 100 if total > 0 else 0
            print(f"\r  Progress: {done}/{total} chunks ({pct:.1f}%)", end="", flush=True)

    profiler = cProfile.Profile() if args.profile else None
    if profiler is not None:
        profiler.enable()
    try:
        stats = render(
            config.geometries,
            camera,
            buffer,
            params,
            workers=args.workers,
            callback=progress_callback,
            ambient=config.ambient,
        )
    finally:
        if profiler is not None:
            profiler.disable()
            profiler.dump_stats(args.profile)

    if not args.quiet:
        print()  # Newline after progress

    start = time.perf_counter()
    output_file = Path(args.out)
    save_png(buffer, output_file)

    if not args.quiet:
        print(f"Render time: {stats.elapsed:.2f}s ({stats.time_per_sample_ms:.5f} ms/sample)")
        print(f"Saved to: {output_file.absolute()} ({time.perf_counter() - start:.2f}s)")
        if args.profile:
            print(f"Profile written to: {args.profile}")
    return stats


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        render_to_file(args)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
