"""
Click command definitions for the landscaper CLI.

This module contains the Click command group and all CLI commands
(redesign, refine, suggest, info, element-image, styles).
"""

import functools
import json
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from landscaper import (
    LANDSCAPING_STYLES,
    Config,
    Density,
    GeminiClient,
    RedesignConfiguration,
    RefinementModifications,
    __version__,
    get_element_image,
    get_element_info,
    get_replacement_suggestions,
    load_source_image,
    redesign_outdoor_space,
    refine_redesign,
    unwrap,
)
from landscaper.cli import progress
from landscaper.cli.handlers import run_with_error_handling
from landscaper.cli.utils import default_output_path, parse_replacement
from landscaper.logging_config import configure_logging


@click.group(help=f"""AI landscape redesign for photos of outdoor spaces (Gemini).

\b
Version: {__version__}
""")
@click.version_option(version=__version__, package_name="landscaper")
@click.pass_context
def cli(ctx: click.Context) -> None:
    ctx.color = True


def common_options(fn: Callable[..., None]) -> Callable[..., None]:
    """Options shared by every command that talks to the model service."""

    @click.option(
        "--api-key",
        envvar="GEMINI_API_KEY",
        help="Gemini API key (overrides GEMINI_API_KEY environment variable).",
    )
    @click.option(
        "--quiet",
        "-q",
        is_flag=True,
        help="Minimize progress messages; only print results or errors.",
    )
    @click.option(
        "--verbose",
        "-v",
        "verbose_count",
        count=True,
        help="Increase verbosity: -v also show prompts, -vv show API detail.",
    )
    @click.option(
        "--debug-api",
        is_flag=True,
        help="Log raw API request payload and response (image data truncated).",
    )
    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> None:
        verbose_count = kwargs.pop("verbose_count")
        # no -v falls back to LANDSCAPER_VERBOSITY
        configure_logging(verbose_level=min(verbose_count, 2) or None, quiet=kwargs["quiet"])
        fn(*args, **kwargs)

    return wrapper


def _make_client(api_key: str | None, debug_api: bool) -> GeminiClient:
    """Load and validate config, apply CLI overrides, and build the client."""
    config = Config.from_env()
    if api_key is not None:
        config.set_api_key(api_key)
    if debug_api:
        config.debug_api = True
    config.validate()
    return GeminiClient(config)


def _call(quiet: bool, action: str, model: str | None, fn: Callable[[], Any]) -> Any:
    if quiet:
        return fn()
    with progress.request_progress(action, model):
        return fn()


@cli.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--style",
    "-s",
    "styles",
    multiple=True,
    required=True,
    help="Style id (repeat to blend styles, order is kept). See `landscaper styles`.",
)
@click.option(
    "--structural/--no-structural",
    default=False,
    help="Allow hardscape changes and removal of people, animals and vehicles.",
)
@click.option("--climate", "-c", default="", help="Climate zone or region, e.g. 'Desert Southwest'.")
@click.option(
    "--lock-aspect/--no-lock-aspect",
    default=True,
    help="Require the output to keep the input's exact aspect ratio.",
)
@click.option(
    "--density",
    type=click.Choice([d.value for d in Density], case_sensitive=False),
    default=Density.DEFAULT.value,
    help="How full the design should be (default: balanced).",
)
@click.option("--out", "-o", type=click.Path(path_type=Path), help="Output image path.")
@click.option(
    "--catalog-out",
    type=click.Path(path_type=Path),
    help="Write the plant/feature catalog as JSON to this path.",
)
@common_options
def redesign(
    image: Path,
    styles: tuple[str, ...],
    structural: bool,
    climate: str,
    lock_aspect: bool,
    density: str,
    out: Path | None,
    catalog_out: Path | None,
    api_key: str | None,
    quiet: bool,
    debug_api: bool,
) -> None:
    """Redesign the landscape in IMAGE."""

    def do_redesign() -> None:
        client = _make_client(api_key, debug_api)
        source = load_source_image(image)
        design = RedesignConfiguration(
            styles=styles,
            allow_structural_changes=structural,
            climate_zone=climate,
            lock_aspect_ratio=lock_aspect,
            density=Density(density.lower()),
        )

        start_time = time.time()
        result = unwrap(
            _call(
                quiet,
                "Redesigning landscape",
                client.config.image_model,
                lambda: redesign_outdoor_space(client, design, source),
            )
        )
        elapsed = time.time() - start_time

        out_path = out or Path(default_output_path("redesign", result.image.extension))
        out_path.write_bytes(result.image.data)
        if catalog_out is not None:
            catalog_out.parent.mkdir(parents=True, exist_ok=True)
            catalog_out.write_text(json.dumps(result.catalog.to_dict(), indent=2), encoding="utf-8")

        if not quiet:
            progress.print_redesign_result(
                output_path=out_path,
                elapsed=elapsed,
                model_used=client.config.image_model,
                catalog=result.catalog,
                catalog_found=result.catalog_found,
                catalog_path=catalog_out,
            )
        # Path on stdout for scriptability
        click.echo(str(out_path))

    run_with_error_handling(do_redesign, quiet=quiet)


@cli.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--delete", "deletions", multiple=True, help="Element to remove (repeatable).")
@click.option(
    "--replace",
    "replacements",
    multiple=True,
    help="FROM=TO element replacement (repeatable).",
)
@click.option("--add", "additions", multiple=True, help="Element to add (repeatable).")
@click.option("--out", "-o", type=click.Path(path_type=Path), help="Output image path.")
@common_options
def refine(
    image: Path,
    deletions: tuple[str, ...],
    replacements: tuple[str, ...],
    additions: tuple[str, ...],
    out: Path | None,
    api_key: str | None,
    quiet: bool,
    debug_api: bool,
) -> None:
    """Refine an existing design IMAGE with deletions, replacements and additions."""
    modifications = RefinementModifications(
        deletions=list(deletions),
        replacements=[parse_replacement(r) for r in replacements],
        additions=list(additions),
    )

    def do_refine() -> None:
        client = _make_client(api_key, debug_api)
        source = load_source_image(image)
        if modifications.is_empty() and not quiet:
            progress.print_warning("No modifications given; the design should come back unchanged.")
        refined = unwrap(
            _call(
                quiet,
                "Refining design",
                client.config.image_model,
                lambda: refine_redesign(client, source, modifications),
            )
        )
        out_path = out or Path(default_output_path("refined", refined.extension))
        out_path.write_bytes(refined.data)
        if not quiet:
            progress.print_success(f"Refined design saved to {out_path}")
        click.echo(str(out_path))

    run_with_error_handling(do_refine, quiet=quiet)


@cli.command()
@click.argument("element")
@click.option("--style", "-s", "styles", multiple=True, required=True, help="Style id (repeatable).")
@click.option("--climate", "-c", default="", help="Climate zone or region.")
@common_options
def suggest(
    element: str,
    styles: tuple[str, ...],
    climate: str,
    api_key: str | None,
    quiet: bool,
    debug_api: bool,
) -> None:
    """Suggest up to three replacements for ELEMENT."""

    def do_suggest() -> None:
        client = _make_client(api_key, debug_api)
        suggestions = _call(
            quiet,
            "Finding replacements",
            client.config.text_model,
            lambda: get_replacement_suggestions(client, element, styles, climate),
        )
        for suggestion in suggestions:
            click.echo(suggestion)

    run_with_error_handling(do_suggest, quiet=quiet)


@cli.command()
@click.argument("element")
@common_options
def info(element: str, api_key: str | None, quiet: bool, debug_api: bool) -> None:
    """Describe ELEMENT for a homeowner's design catalog."""

    def do_info() -> None:
        client = _make_client(api_key, debug_api)
        text = unwrap(
            _call(
                quiet,
                "Describing element",
                client.config.text_model,
                lambda: get_element_info(client, element),
            )
        )
        click.echo(text)

    run_with_error_handling(do_info, quiet=quiet)


@cli.command("element-image")
@click.argument("element")
@click.option("--out", "-o", type=click.Path(path_type=Path), help="Output image path.")
@common_options
def element_image(
    element: str,
    out: Path | None,
    api_key: str | None,
    quiet: bool,
    debug_api: bool,
) -> None:
    """Generate an isolated product-style image of ELEMENT."""

    def do_element_image() -> None:
        client = _make_client(api_key, debug_api)
        image = unwrap(
            _call(
                quiet,
                "Generating element image",
                client.config.element_image_model,
                lambda: get_element_image(client, element),
            )
        )
        out_path = out or Path(default_output_path("element", image.extension))
        out_path.write_bytes(image.data)
        if not quiet:
            progress.print_success(f"Image of {element} saved to {out_path}")
        click.echo(str(out_path))

    run_with_error_handling(do_element_image, quiet=quiet)


@cli.command()
def styles() -> None:
    """List the known style ids and their display names."""
    for style_id, name in LANDSCAPING_STYLES.items():
        click.echo(f"{style_id}\t{name}")


def main() -> None:
    """Entry point for the landscaper console script."""
    cli()


__all__ = ["cli", "main", "redesign", "refine", "suggest", "info", "element_image", "styles"]
