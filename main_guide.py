"""Mini README: Entry point CLI for the museum guide.

This script exposes a Typer CLI to serve the HTTP API, import museum packs,
narrate a single item, print catalog statistics, and run the live detection
loop against a folder of frames. Settings come from ``MUSEGUIDE_``
environment variables or ``.env`` unless overridden by options.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from museguide.capture import DirectoryFrameSource
from museguide.catalog import CatalogStore, build_sample_items
from museguide.configuration import get_settings
from museguide.logging_utils import configure_root_logger
from museguide.narration import (
    Language,
    NarrationGenerator,
    StoryMode,
    build_backend,
)
from museguide.pipeline import GuidePipeline

cli = typer.Typer(help="Run and manage the museum guide.")


@cli.command()
def serve(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger()

    # Browsers cannot open 0.0.0.0 directly, so point operators at localhost.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting museum guide on {effective_host}:{effective_port}.\n"
        f"API docs at http://{browser_host}:{effective_port}/docs"
    )
    uvicorn.run(
        "museguide.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command("import-pack")
def import_pack(pack: Path = typer.Argument(..., exists=True, readable=True)) -> None:
    """Import a museum pack JSON file into the catalog."""

    settings = get_settings()
    store = CatalogStore(settings.catalog_path)
    imported = store.import_pack_file(pack)
    store.close()
    if imported == 0:
        typer.echo(f"{pack} is not a valid museum pack; nothing imported.", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Imported {imported} items.")


@cli.command()
def stats() -> None:
    """Print catalog size and categories."""

    settings = get_settings()
    store = CatalogStore(settings.catalog_path)
    summary = store.stats()
    store.close()
    typer.echo(f"{summary.count} items in {len(summary.categories)} categories")
    for category in summary.categories:
        typer.echo(f"  - {category}")


@cli.command()
def narrate(
    name: str = typer.Argument(..., help="Item name (or part of it) to narrate."),
    mode: Optional[str] = typer.Option(None, help="quick, standard, deep or kids."),
    language: Optional[str] = typer.Option(None, help="en or ar."),
    seed_samples: bool = typer.Option(True, help="Load the sample items into an empty catalog."),
) -> None:
    """Generate narration for one item and print it."""

    settings = get_settings()
    configure_root_logger()
    store = CatalogStore(settings.catalog_path)
    if seed_samples and store.stats().count == 0:
        store.bulk_upsert(build_sample_items())
    item = store.search_by_name(name)
    if item is None:
        store.close()
        typer.echo(f"No item matches '{name}'.", err=True)
        raise typer.Exit(code=1)

    try:
        story_mode = StoryMode.from_str(mode or settings.story_mode)
        story_language = Language.from_str(language or settings.language)
    except ValueError as error:
        store.close()
        raise typer.BadParameter(str(error)) from error
    generator = NarrationGenerator(build_backend(settings))
    narration = generator.generate(item, [], story_mode, story_language)
    store.close()
    typer.echo(f"{item.name} ({story_mode.value}, ~{narration.duration_seconds}s)\n")
    typer.echo(narration.text)


@cli.command()
def watch(
    frames: Path = typer.Argument(..., exists=True, file_okay=False, help="Folder of frames to replay."),
    seconds: float = typer.Option(30.0, help="How long to run the detection loop."),
) -> None:
    """Run the detection loop over a folder of frames and narrate commits."""

    settings = get_settings()
    configure_root_logger()
    pipeline = GuidePipeline.from_settings(settings, frame_source=DirectoryFrameSource(frames))
    pipeline.add_listener(
        lambda result: typer.echo(f"Identified {result.item.name} ({result.confidence:.2f})")
    )
    pipeline.start()
    try:
        time.sleep(seconds)
    except KeyboardInterrupt:
        typer.echo("Interrupted")
    finally:
        pipeline.shutdown()
    seen = ", ".join(pipeline.tracker.session_context) or "nothing"
    typer.echo(f"Seen this session: {seen}")


if __name__ == "__main__":
    cli()
