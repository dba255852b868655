"""
Reader Translation CLI.

Usage:
    reader-translation translate <image_path> [--source auto] [--target es]
    reader-translation models status <lang>
    reader-translation models download <lang> [--allow-metered]
"""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import SOURCE_LANGUAGES, TARGET_LANGUAGES, Settings, get_settings
from .logging_config import init_default_logging
from .pipeline import OverlayPipeline

console = Console()


def load_settings(**overrides) -> Settings:
    """Current settings with command-line overrides applied."""
    base = get_settings().model_dump()
    base.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**base)


def build_pipeline(settings: Settings) -> OverlayPipeline:
    return OverlayPipeline.from_settings(settings)


@click.group()
@click.version_option(version=__version__)
def cli():
    """Reader Translation CLI - recognize, identify and translate page text."""
    # stdout is reserved for results (--json)
    init_default_logging(console=False)


@cli.command()
@click.argument("image_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--source", "-s", type=click.Choice(sorted(SOURCE_LANGUAGES)), default=None,
              help="Source language (default: from settings)")
@click.option("--target", "-t", type=click.Choice(sorted(TARGET_LANGUAGES)), default=None,
              help="Target language (default: from settings)")
@click.option("--mock", is_flag=True, help="Use the offline mock recognition engines")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def translate(image_path: str, source: Optional[str], target: Optional[str], mock: bool, as_json: bool):
    """Translate the text found in a single page image."""
    settings = load_settings(
        source_language=source,
        target_language=target,
        use_mock_engines=True if mock else None,
        translation_enabled=True,
    )

    async def run():
        with build_pipeline(settings) as pipeline:
            return await pipeline.process(image_path), pipeline.last_metrics

    result, metrics = asyncio.run(run())

    if as_json:
        click.echo(json.dumps(result.model_dump() if result else None, ensure_ascii=False, indent=2))
        return

    if result is None:
        console.print("[yellow]No text found.[/yellow]")
        return

    console.print(
        f"\n[green]✓ Translated[/green] {len(result.blocks)} blocks "
        f"([cyan]{result.source_lang}[/cyan] → [cyan]{result.target_lang}[/cyan])"
    )
    if metrics:
        console.print(f"  Time: {metrics['total_duration_ms']:.2f}ms")

    table = Table(title="Overlay Blocks")
    table.add_column("#", style="dim")
    table.add_column("Rect", style="dim")
    table.add_column("Text", style="green")
    for i, block in enumerate(result.blocks):
        rect = block.rect
        text = block.text
        table.add_row(
            str(i),
            f"{rect.x},{rect.y} {rect.width}x{rect.height}",
            text[:40] + "..." if len(text) > 40 else text,
        )
    console.print(table)


@cli.group()
def models():
    """Translation model availability."""


@models.command()
@click.argument("lang")
def status(lang: str):
    """Show whether the model for LANG is available."""
    settings = load_settings()

    async def run():
        with build_pipeline(settings) as pipeline:
            return await pipeline.is_model_downloaded(lang)

    if asyncio.run(run()):
        console.print(f"[green]✓[/green] model for [cyan]{lang}[/cyan] is downloaded")
    else:
        console.print(f"[yellow]✗[/yellow] model for [cyan]{lang}[/cyan] is not downloaded")


@models.command()
@click.argument("lang")
@click.option("--allow-metered", is_flag=True, help="Allow downloads on metered networks")
def download(lang: str, allow_metered: bool):
    """Download the translation model for LANG."""
    settings = load_settings(model_download_unmetered_only=False if allow_metered else None)

    async def run():
        with build_pipeline(settings) as pipeline:
            return await pipeline.download_model(lang)

    if asyncio.run(run()):
        console.print(f"[green]✓ Model ready:[/green] {lang}")
    else:
        console.print(f"[red]✗ Model download failed:[/red] {lang}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
