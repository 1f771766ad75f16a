"""Quill CLI application using Typer."""

import asyncio
from typing import Annotated

import httpx
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from quill import __version__
from quill.config import settings
from quill.core.enhancement import (
    ArticleEnhancer,
    ArticleResult,
    BatchResult,
    EnhancementPipeline,
    ReferenceFinder,
)
from quill.core.harvesting import ArticleHarvester, HarvestResult
from quill.core.scraping import Fetcher
from quill.store import ArticleStoreClient
from quill.utils.exceptions import BootstrapError
from quill.utils.logging import configure_logging

app = typer.Typer(
    name="quill",
    help="Quill - harvest blog articles and publish AI-enhanced rewrites with citations",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        console.print(f"[bold cyan]Quill[/bold cyan] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Quill - harvest blog articles and publish AI-enhanced rewrites with citations."""
    configure_logging(log_level=settings.log_level, environment=settings.environment)


def validate_environment() -> None:
    """
    Validate configuration needed by the enhancement batch.

    Raises:
        typer.Exit: If validation fails
    """
    missing = settings.missing_enhancement_settings()
    if missing:
        console.print("\n[bold red]❌ Configuration Errors:[/bold red]")
        for name in missing:
            console.print(f"  • {name} not set")
        console.print(
            "\n[yellow]💡 Hint:[/yellow] Check your .env file or environment variables"
        )
        raise typer.Exit(code=1)


def print_article_result(index: int, total: int, result: ArticleResult) -> None:
    """Print one line of the running account."""
    title = result.title[:60]
    if result.succeeded:
        console.print(f"[{index}/{total}] [green]✅ Enhanced[/green] {title}")
    else:
        console.print(
            f"[{index}/{total}] [yellow]⚠️  Skipped[/yellow] {title} "
            f"[dim]({result.reason})[/dim]"
        )


def print_batch_summary(batch: BatchResult) -> None:
    """Print the final counts of an enhancement batch."""
    table = Table(title="Enhancement Summary", show_header=False)
    table.add_row("Total Articles", str(batch.total))
    table.add_row("Successful", f"[green]{batch.succeeded}[/green]")
    table.add_row("Skipped", f"[yellow]{batch.skipped}[/yellow]")
    for reason, count in batch.skip_reasons.most_common():
        table.add_row(f"  {reason}", str(count))
    console.print()
    console.print(table)


def print_harvest_summary(result: HarvestResult) -> None:
    """Print the final counts of a harvesting run."""
    table = Table(title="Harvest Summary", show_header=False)
    table.add_row("Listing Page", result.listing_url)
    table.add_row("Links Found", str(result.links_found))
    table.add_row("Scraped", str(result.scraped))
    table.add_row("Created", f"[green]{result.created}[/green]")
    table.add_row("Already Stored", str(result.duplicates))
    table.add_row("Failed", f"[yellow]{result.failure_count}[/yellow]")
    console.print()
    console.print(table)

    for failure in result.failures:
        console.print(f"  [dim]• {failure.url}: {failure.error}[/dim]")


@app.command()
def harvest() -> None:
    """
    Scrape the most recent listing page into original article records.

    This command will:
    1. Find the last page of the blog listing
    2. Collect up to 5 article links from it
    3. Render and extract each article
    4. Store articles whose URL is not already stored

    Examples:
        quill harvest
    """
    console.print(
        Panel.fit(
            "[bold cyan]Quill[/bold cyan] - Article Harvester\n"
            f"Version {__version__}",
            border_style="cyan",
        )
    )
    console.print(f"\n  Listing: {settings.listing_url}")
    console.print(f"  Store:   {settings.api_base_url}\n")

    async def run_harvest() -> HarvestResult:
        async with httpx.AsyncClient() as client:
            harvester = ArticleHarvester(
                store=ArticleStoreClient(client),
                fetcher=Fetcher(client),
            )
            return await harvester.run()

    try:
        result = asyncio.run(run_harvest())
    except BootstrapError as e:
        console.print("\n[bold red]❌ Cannot reach the article store:[/bold red]")
        console.print(f"  {e}")
        console.print("\n[yellow]💡 Hint:[/yellow] Start the API and check API_BASE_URL")
        raise typer.Exit(code=1) from None
    except KeyboardInterrupt:
        console.print("\n\n[yellow]⚠️  Harvest cancelled by user (Ctrl+C)[/yellow]")
        raise typer.Exit(code=130) from None

    print_harvest_summary(result)


@app.command()
def enhance(
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=1, help="Process at most N original articles"),
    ] = None,
    skip_enhanced: Annotated[
        bool | None,
        typer.Option(
            "--skip-enhanced/--no-skip-enhanced",
            help="Skip originals that already have an enhanced version",
        ),
    ] = None,
) -> None:
    """
    Enhance stored original articles with AI rewrites and citations.

    For each original article:
    1. Search for competing top-ranking articles
    2. Scrape up to two of them
    3. Rewrite the original in their style
    4. Append a references section and save the result

    Examples:
        # Enhance every original article
        quill enhance

        # Try a single article first
        quill enhance --limit 1
    """
    validate_environment()

    console.print(
        Panel.fit(
            "[bold cyan]Quill[/bold cyan] - Article Enhancement\n"
            f"Model: {settings.generation_model}",
            border_style="cyan",
        )
    )

    skip = settings.skip_already_enhanced if skip_enhanced is None else skip_enhanced

    async def run_enhancement() -> BatchResult:
        async with httpx.AsyncClient() as client:
            pipeline = EnhancementPipeline(
                store=ArticleStoreClient(client),
                reference_finder=ReferenceFinder(client),
                fetcher=Fetcher(client),
                enhancer=ArticleEnhancer(),
            )
            return await pipeline.run(
                limit=limit,
                skip_already_enhanced=skip,
                on_result=print_article_result,
            )

    try:
        batch = asyncio.run(run_enhancement())
    except BootstrapError as e:
        console.print("\n[bold red]❌ Cannot reach the article store:[/bold red]")
        console.print(f"  {e}")
        console.print(
            "\n[yellow]💡 Hint:[/yellow] Start the API and check API_BASE_URL, "
            "then run `quill harvest` first"
        )
        raise typer.Exit(code=1) from None
    except KeyboardInterrupt:
        console.print("\n\n[yellow]⚠️  Enhancement cancelled by user (Ctrl+C)[/yellow]")
        raise typer.Exit(code=130) from None

    if batch.total == 0:
        console.print("\n[yellow]No original articles to enhance.[/yellow]")
        console.print("  Run [bold]quill harvest[/bold] first.\n")
        return

    print_batch_summary(batch)


if __name__ == "__main__":
    app()
