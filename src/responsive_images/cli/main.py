"""CLI entry point — click group exposing the loader and its adapters."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import click

from responsive_images.loader.options import MIMES


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _default_output_dir(image_path: Path) -> Path:
    """Return the ``responsive/`` directory next to the source image."""
    return image_path.parent / "responsive"


@click.group()
@click.version_option(package_name="responsive-images")
def cli() -> None:
    """Responsive Images — generate srcset-ready image derivatives."""


@cli.command(name="render")
@click.argument("image", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option("-s", "--size", "sizes", type=int, multiple=True, help="Target width in pixels (repeatable).")
@click.option("--min", "min_width", type=int, default=None, help="Smallest width of a generated range.")
@click.option("--max", "max_width", type=int, default=None, help="Largest width of a generated range.")
@click.option("--steps", type=int, default=None, help="Number of widths in a generated range (default 4).")
@click.option("-q", "--quality", type=int, default=None, help="JPEG/WebP quality 1-100 (default 85).")
@click.option("-b", "--background", default=None, help="Colour used to flatten transparency, e.g. '#ffffff'.")
@click.option(
    "-f",
    "--format",
    "fmt",
    default=None,
    type=click.Choice(sorted(MIMES.keys())),
    help="Output format (default: same as the source).",
)
@click.option("--placeholder", is_flag=True, default=False, help="Inline a low-resolution placeholder.")
@click.option("--placeholder-size", type=int, default=None, help="Placeholder width in pixels (default 40).")
@click.option("--disable", is_flag=True, default=False, help="Copy the source unchanged instead of resizing.")
@click.option("-n", "--name", default=None, help="Filename template (default '[hash]-[width].[ext]').")
@click.option(
    "-o",
    "--output",
    "output_dir",
    type=click.Path(file_okay=False, resolve_path=True),
    default=None,
    help="Directory for emitted files (default: 'responsive/' next to the image).",
)
@click.option("--public-path", default=None, help="URL prefix for emitted files.")
@click.option("-a", "--adapter", default=None, help="Image adapter to use (default 'pillow').")
@click.option("-Q", "--query", default="", help="Resource query overriding other options, e.g. '?sizes[]=320'.")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding config.toml and presets/.",
)
@click.option("-p", "--preset", default=None, help="Named preset from the config directory.")
@click.option("--module", "as_module", is_flag=True, default=False, help="Print a CommonJS module instead of JSON.")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity.")
def render_cmd(
    image: str,
    sizes: tuple[int, ...],
    min_width: int | None,
    max_width: int | None,
    steps: int | None,
    quality: int | None,
    background: str | None,
    fmt: str | None,
    placeholder: bool,
    placeholder_size: int | None,
    disable: bool,
    name: str | None,
    output_dir: str | None,
    public_path: str | None,
    adapter: str | None,
    query: str,
    config_dir: Path | None,
    preset: str | None,
    as_module: bool,
    verbose: int,
) -> None:
    """Render responsive derivatives of IMAGE and print their descriptor.

    Options given on the command line override config.toml and the
    preset; --size replaces any configured size list or min/max range.
    The --query string overrides everything.
    """
    from responsive_images.core.config import ConfigManager
    from responsive_images.core.events import PROGRESS, EventBus
    from responsive_images.core.exceptions import ResponsiveImagesError
    from responsive_images.loader import DirectoryEmitter, LoaderOptions, load_sync, parse_query, render_module

    _configure_logging(verbose)
    image_path = Path(image)

    cli_options: dict[str, Any] = {
        "sizes": list(sizes) or None,
        "min": min_width,
        "max": max_width,
        "steps": steps,
        "quality": quality,
        "background": background,
        "format": fmt,
        "placeholder": placeholder or None,
        "placeholder_size": placeholder_size,
        "disable": disable or None,
        "name": name,
        "public_path": public_path,
        "adapter": adapter,
    }

    bus = EventBus()
    if verbose:
        bus.subscribe(
            PROGRESS,
            lambda **kw: click.echo(f"  [{kw['current']:3d}/{kw['total']:3d}] {kw['message']}", err=True),
        )

    try:
        config = ConfigManager(config_dir=config_dir)
        config.load()
        static = config.static_options(preset)
        if cli_options["sizes"] is not None:
            for key in ("size", "min", "max", "steps"):
                static.pop(key, None)
        static.update({key: value for key, value in cli_options.items() if value is not None})
        static.setdefault("context", str(Path.cwd()))

        options = LoaderOptions.from_mapping(static, parse_query(query))
        emitter = DirectoryEmitter(Path(output_dir) if output_dir else _default_output_dir(image_path))
        descriptor = load_sync(image_path.read_bytes(), image_path, options, emitter=emitter, event_bus=bus)
    except ResponsiveImagesError as exc:
        raise click.ClickException(str(exc)) from exc

    if as_module:
        click.echo(render_module(descriptor))
    else:
        click.echo(json.dumps(descriptor.to_dict(), indent=2))


@cli.command(name="adapters")
def adapters_cmd() -> None:
    """List the available image adapters."""
    from responsive_images.core.registry import AdapterRegistry

    registry = AdapterRegistry()
    registry.discover()
    for adapter_name, adapter_cls in sorted(registry.all_adapters().items()):
        click.echo(f"{adapter_name}\t{adapter_cls.display_name}")
