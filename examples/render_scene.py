#!/usr/bin/env python3
"""Render the demo scene (or a scene file) with the ray caster.

This script builds the scene, validates the render configuration, renders the
image in bands of rows with progress output, and saves it without overwriting
earlier renders.

Usage:
    python -m examples.render_scene [options]

Options:
    --width WIDTH           Image width in pixels (default: 2500)
    --height HEIGHT         Image height in pixels (default: 2500)
    --mode MODE             Color mode: static-color, normals, light (default: normals)
    --output OUTPUT         Output file path (default: image.bmp)
    --scene SCENE           JSON scene file (default: built-in demo scene)
    --rows-per-batch ROWS   Rows per progress update (default: 100)
    --legacy-sphere-roots   Pick sphere roots like the original renderer
    --no-clamp-back-lighting
                            Let lights behind a surface subtract light
    --cpu                   Force the CPU backend
    --show                  Show the result in a Matplotlib window
    --quiet                 Suppress progress output

Example:
    python -m examples.render_scene --width 500 --height 500 --mode light
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti

from src.raycast.config import ColorMode, RenderConfig

DEFAULT_OUTPUT = "image.bmp"
DEFAULT_ROWS_PER_BATCH = 100


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a scene of spheres and triangles with the ray caster.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=2500,
        help="Image width in pixels (default: 2500)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=2500,
        help="Image height in pixels (default: 2500)",
    )
    parser.add_argument(
        "--mode",
        type=str,
        default="normals",
        choices=[mode.name.lower().replace("_", "-") for mode in ColorMode],
        help="Color mode (default: normals)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=DEFAULT_OUTPUT,
        help=f"Output file path (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in demo scene)",
    )
    parser.add_argument(
        "--rows-per-batch",
        type=int,
        default=DEFAULT_ROWS_PER_BATCH,
        help=f"Rows per progress update (default: {DEFAULT_ROWS_PER_BATCH})",
    )
    parser.add_argument(
        "--legacy-sphere-roots",
        action="store_true",
        help="Select sphere roots with min(t1, t2) like the original renderer",
    )
    parser.add_argument(
        "--no-clamp-back-lighting",
        action="store_true",
        help="Do not clamp l.n, so lights behind a surface subtract light",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show the rendered image in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RenderConfig:
    """Translate parsed arguments into a RenderConfig."""
    return RenderConfig(
        width=args.width,
        height=args.height,
        color_mode=ColorMode.parse(args.mode),
        legacy_sphere_roots=args.legacy_sphere_roots,
        clamp_back_lighting=not args.no_clamp_back_lighting,
    )


def render_scene(
    config: RenderConfig,
    output_path: str = DEFAULT_OUTPUT,
    scene_path: str | None = None,
    rows_per_batch: int = DEFAULT_ROWS_PER_BATCH,
    quiet: bool = False,
    show: bool = False,
) -> Path:
    """Render a scene and save it to a fresh file.

    Args:
        config: The render configuration.
        output_path: Preferred output path. A numeric suffix is added when
            the file already exists.
        scene_path: Optional JSON scene file. None renders the demo scene.
        rows_per_batch: Number of rows to render between progress updates.
        quiet: If True, suppress progress output.
        show: If True, display the result with Matplotlib.

    Returns:
        Path to the saved image file.

    Raises:
        ValueError: If the configuration or the scene is invalid.
    """
    # Lazy imports to allow Taichi initialization first
    from src.raycast.core.raster import RasterRenderer
    from src.raycast.preview.export import unique_output_path
    from src.raycast.scene.demo import create_demo_scene
    from src.raycast.scene.manager import SceneManager

    if scene_path is None:
        scene = create_demo_scene()
    else:
        scene = SceneManager()
        scene.load_json(scene_path)

    # Validates the configuration before any rendering work
    renderer = RasterRenderer(config)

    if not quiet:
        print(
            f"Scene: {scene.get_sphere_count()} spheres, "
            f"{scene.get_triangle_count()} triangles, {scene.get_light_count()} lights"
        )
        print(
            f"Rendering {config.width}x{config.height} "
            f"({config.color_mode.name.lower()} mode)..."
        )

    start_time = time.time()

    def progress_callback(done: int, total: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (done / total) * 100 if total > 0 else 0
            rows_per_sec = done / elapsed if elapsed > 0 else 0
            print(
                f"\r  scanline: {done}/{total} "
                f"({progress_pct:.1f}%) - {rows_per_sec:.1f} rows/s",
                end="",
                flush=True,
            )

    renderer.render(rows_per_batch=rows_per_batch, callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = unique_output_path(output_path)
    renderer.save_image(str(output_file))

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if show:
        from src.raycast.preview.display import show_preview

        show_preview(renderer.get_image_numpy(), title=output_file.name)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu, default_fp=ti.f64)
        if not args.quiet:
            print("Using CPU backend")
    else:
        try:
            ti.init(arch=ti.gpu, default_fp=ti.f64)
            if not args.quiet:
                print("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu, default_fp=ti.f64)
            if not args.quiet:
                print("Using CPU backend")

    try:
        render_scene(
            build_config(args),
            output_path=args.output,
            scene_path=args.scene,
            rows_per_batch=args.rows_per_batch,
            quiet=args.quiet,
            show=args.show,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
