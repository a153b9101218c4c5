"""
Command-line interface for the news curator.

Uses Typer to provide a CLI with options for the main configuration
settings. Supports loading .env files for API key configuration.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable

from dotenv import load_dotenv
import typer
from rich.console import Console
from rich.table import Table

from .config import load_config
from .core.types import ArticleCandidate, RegionRunResult
from .geo.gazetteer import load_gazetteer
from .input.json_parser import load_candidates
from .pipeline.runner import CurationPipeline
from .store.jsonl import JsonlArticleStore
from .utils.logging import setup_llm_logger, setup_logging

app = typer.Typer(add_completion=False)
console = Console()


@app.command()
def run(
    input: Path = typer.Option(..., "--input", "-i", exists=True, readable=True),
    store: Path | None = typer.Option(None, "--store", "-s", help="JSONL article store."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    region: str | None = typer.Option(
        None, "--region", "-r", help="Only run this region; also the default for items without a state."
    ),
    no_ai: bool = typer.Option(False, "--no-ai", help="Use keyword analysis and fallback content only."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_dir: Path | None = typer.Option(None, "--log-dir", help="Directory for log files."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
    api_key: str | None = typer.Option(None, "--api-key", help="Override provider API key (or use .env)."),
):
    """Curate a scraped candidate batch and persist the result.

    Candidates are grouped by their proposed region and every region
    cycle runs concurrently: geographic filter, deduplication, AI
    enhancement, persistence.
    """
    load_dotenv()

    cfg = load_config(str(config) if config else None)

    if api_key:
        cfg.provider.api_key = api_key
    if no_ai:
        cfg.provider.name = "none"
    if store is not None:
        cfg.store.path = str(store)
    if log_level:
        cfg.logging.level = log_level
    if log_file is not None:
        cfg.logging.file = log_file

    logger = setup_logging(cfg.logging, log_dir)
    llm_logger = setup_llm_logger(cfg.logging, log_dir)

    pipeline = CurationPipeline.from_config(
        cfg,
        JsonlArticleStore(cfg.store.path),
        logger=logger,
        llm_logger=llm_logger,
    )
    gazetteer = pipeline.resolver.gazetteer

    if region is not None:
        canonical = gazetteer.canonical(region)
        if canonical is None:
            console.print(f"[red]Unknown region:[/red] {region}")
            raise typer.Exit(code=2)
        region = canonical

    candidates = load_candidates(input, default_state=region)
    batches = group_by_region(candidates, gazetteer.canonical)
    if region is not None:
        batches = {region: batches.get(region, [])}
    if not batches:
        console.print("No candidates to process.")
        return

    results = asyncio.run(pipeline.run_regions(batches))
    console.print(_stats_table(results))

    totals = pipeline.totals
    console.print(
        "[bold]Run summary[/bold]: "
        f"cycles={totals.total_cycles}, failed={totals.failed_cycles}, "
        f"scraped={totals.total_scraped}, persisted={totals.total_persisted}, "
        f"avg_seconds={totals.average_run_seconds:.2f}"
    )
    if totals.failed_cycles:
        raise typer.Exit(code=1)


@app.command()
def regions(
    gazetteer: Path | None = typer.Option(None, "--gazetteer", "-g", exists=True, help="YAML gazetteer."),
):
    """List the regions known to the geographic filter."""
    table = Table(title="Regions")
    table.add_column("Region")
    table.add_column("Keywords", justify="right")
    table.add_column("Districts", justify="right")
    table.add_column("Landmarks", justify="right")
    table.add_column("Tone")
    for item in load_gazetteer(str(gazetteer) if gazetteer else None).regions.values():
        table.add_row(
            item.name,
            str(len(item.keywords)),
            str(len(item.districts)),
            str(len(item.landmarks)),
            item.tone,
        )
    console.print(table)


def group_by_region(
    candidates: list[ArticleCandidate], canonical: Callable[[str | None], str | None]
) -> dict[str, list[ArticleCandidate]]:
    """Group candidates by proposed region, preserving input order."""
    batches: dict[str, list[ArticleCandidate]] = {}
    for candidate in candidates:
        key = canonical(candidate.proposed_state) or candidate.proposed_state
        batches.setdefault(key, []).append(candidate)
    return batches


def _stats_table(results: list[RegionRunResult]) -> Table:
    table = Table(title="Region cycles")
    table.add_column("Region")
    table.add_column("Status")
    table.add_column("Scraped", justify="right")
    table.add_column("Geo filtered", justify="right")
    table.add_column("Unique", justify="right")
    table.add_column("Duplicates", justify="right")
    table.add_column("AI enhanced", justify="right")
    table.add_column("Persisted", justify="right")
    for result in results:
        stats = result.stats
        status = "[green]ok[/green]" if result.success else f"[red]{result.error}[/red]"
        table.add_row(
            result.region,
            status,
            str(stats.scraped),
            str(stats.geo_filtered),
            str(stats.unique),
            str(stats.duplicates_removed),
            str(stats.enhanced),
            str(stats.persisted),
        )
    return table


if __name__ == "__main__":
    app()
