"""Command-line interface for shakyline."""

import logging
import sys
import time
from pathlib import Path

import click

from .pipeline import PipelineConfig, render_animation
from .utils.image import parse_color
from .utils.profiler import global_profiler
from .exceptions import InvalidParameterError


class ProgressBar:
    """Simple progress bar for CLI operations."""

    def __init__(self, total_steps: int, description: str = "Processing"):
        self.total_steps = total_steps
        self.current_step = 0
        self.description = description
        self.start_time = time.time()

    def update(self, step_name: str) -> None:
        """Update progress bar with current step."""
        self.current_step = min(self.current_step + 1, self.total_steps)
        percentage = (self.current_step / self.total_steps) * 100
        elapsed = time.time() - self.start_time

        bar_length = 30
        filled_length = int(bar_length * self.current_step // self.total_steps)
        bar = "█" * filled_length + "░" * (bar_length - filled_length)

        click.echo(
            f"\r{self.description}: [{bar}] {percentage:.1f}% - {step_name}",
            nl=False,
        )

        if self.current_step == self.total_steps:
            click.echo(f" ✓ Complete ({elapsed:.1f}s)")


def _color_option(ctx, param, value):
    try:
        return parse_color(value)
    except InvalidParameterError as e:
        raise click.BadParameter(str(e))


@click.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--sloppiness",
    default=0.1,
    help="Fraction of outline points dropped per frame (default: 0.1)",
    type=click.FloatRange(0.0, 1.0),
)
@click.option(
    "--shakiness",
    default=1,
    help="Maximum jitter in pixels (default: 1)",
    type=click.IntRange(min=0),
)
@click.option(
    "--shaky-freq",
    default=0.25,
    help="Chance that a point is jittered in a frame (default: 0.25)",
    type=click.FloatRange(min=0.0, min_open=True),
)
@click.option(
    "--frames",
    default=5,
    help="Number of animation frames (default: 5)",
    type=click.IntRange(1, 500),
)
@click.option(
    "--delay",
    default=100,
    help="Delay between frames in milliseconds (default: 100)",
    type=click.IntRange(min=0),
)
@click.option(
    "--blot-radius",
    default=1,
    help="Line thickening radius before tracing (default: 1)",
    type=click.IntRange(0, 10),
)
@click.option(
    "--background",
    default="ffffff",
    help="Background color of the input as rrggbb (default: ffffff)",
    callback=_color_option,
)
@click.option(
    "--ink",
    default="000000",
    help="Line color of the output as rrggbb (default: 000000)",
    callback=_color_option,
)
@click.option("--outline", is_flag=True, help="Draw outlines instead of filled shapes")
@click.option("--frame", default=0, help="GIF input frame number (default: 0)", type=click.IntRange(min=0))
@click.option("--seed", default=None, help="Random seed for reproducible output", type=int)
@click.option(
    "--workers",
    default=1,
    help="Threads used to generate frames (default: 1)",
    type=click.IntRange(1, 32),
)
@click.option("--force", "-f", is_flag=True, help="Overwrite OUTPUT without asking")
@click.option("--profile", is_flag=True, help="Print per-stage timing and memory usage")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def main(
    input_file: Path,
    output: Path,
    sloppiness: float,
    shakiness: int,
    shaky_freq: float,
    frames: int,
    delay: int,
    blot_radius: int,
    background: tuple,
    ink: tuple,
    outline: bool,
    frame: int,
    seed: int,
    workers: int,
    force: bool,
    profile: bool,
    verbose: bool,
) -> None:
    """Turn INPUT_FILE into a shaky hand-drawn animated GIF at OUTPUT.

    Examples:
        shakyline drawing.gif shaky.gif
        shakyline sketch.png shaky.gif --frames 8 --shakiness 2
        shakyline logo.png logo.gif --background 000000 --ink ffffff --outline
    """
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    if output.exists() and not force:
        if not click.confirm(f"Output file {output} exists. Overwrite?"):
            click.echo("Aborted.")
            return

    progress = ProgressBar(5, "Animating")

    try:
        config = PipelineConfig(
            sloppiness=sloppiness,
            shakiness=shakiness,
            shaky_freq=shaky_freq,
            frame_count=frames,
            seed=seed,
            max_workers=workers,
            blot_radius=blot_radius,
            clear_rgb=background,
            input_frame=frame,
            ink_rgb=ink,
            outline=outline,
            delay_ms=delay,
        )

        result = render_animation(input_file, output, config, progress=progress.update)

        click.echo(f"\n✅ Successfully created {output}")
        click.echo("📊 Final statistics:")
        click.echo(f"   Image: {result.width}×{result.height}")
        click.echo(f"   Shapes: {result.shape_count}")
        click.echo(f"   Frames: {result.frame_count}")
        click.echo(f"   File size: {result.output_bytes / 1024:.1f} KB")

        if verbose:
            click.echo(f"   Sloppiness: {sloppiness}")
            click.echo(f"   Shakiness: {shakiness}px at frequency {shaky_freq}")
            click.echo(f"   Seed: {seed if seed is not None else 'random'}")

        if profile:
            global_profiler.print_summary("Performance Profile")

    except Exception as e:
        click.echo(f"\n❌ Error: {e}", err=True)
        if verbose:
            import traceback

            traceback.print_exc()
        if profile:
            global_profiler.print_summary("Performance Profile (Error)")
        sys.exit(1)


if __name__ == "__main__":
    main()
