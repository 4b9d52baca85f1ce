"""Click-based CLI for energy-projections.

Thin wrapper around library modules. Zero business logic — every operation
delegates to the price aggregator, the projection session, or the API app.
"""

from __future__ import annotations

import asyncio
import json
import logging

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run_async(coro):
    """Run an async coroutine from synchronous Click code."""
    return asyncio.run(coro)


def _load_config(ctx: click.Context):
    """Load config lazily, caching on first call."""
    if "config" not in ctx.obj:
        from energy_projections.core import load_config

        ctx.obj["config"] = load_config(config_path=ctx.obj.get("config_path"))
    return ctx.obj["config"]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _resolve_commodity(raw: str):
    """Convert a CLI argument to a CommodityKey or fail with a usage error."""
    from energy_projections.core import InvalidCommodityError, parse_commodity

    try:
        return parse_commodity(raw)
    except InvalidCommodityError as e:
        raise click.BadParameter(str(e), param_hint="COMMODITY") from e


async def _fetch_quote(config, commodity):
    """Resolve one quote with a short-lived HTTP client."""
    import httpx

    from energy_projections.prices import create_aggregator

    async with httpx.AsyncClient(
        timeout=httpx.Timeout(config.providers.request_timeout),
        follow_redirects=True,
    ) as client:
        aggregator = create_aggregator(config, client=client)
        return await aggregator.resolve(commodity)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    envvar="ENERGY_PROJECTIONS_CONFIG",
    default=None,
    help="Path to energy-projections.yml config file.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output.",
)
@click.version_option(package_name="energy-projections")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """Energy Price Projections: live energy prices and usage-driven projections."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose
    ctx.obj["console"] = console
    _configure_logging(verbose)


# ---------------------------------------------------------------------------
# prices
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("commodity")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.pass_context
def prices(ctx: click.Context, commodity: str, output_format: str) -> None:
    """Show current US and world prices for COMMODITY."""
    config = _load_config(ctx)
    key = _resolve_commodity(commodity)
    quote = _run_async(_fetch_quote(config, key))

    if output_format == "json":
        click.echo(json.dumps(quote.model_dump(mode="json"), indent=2))
        return

    from energy_projections.core import COMMODITIES
    from energy_projections.projection import format_price

    table = Table(title=COMMODITIES[key].full_name)
    table.add_column("Region", style="bold")
    table.add_column("Price", justify="right")
    table.add_column("Date")
    table.add_column("Source")

    for label, point, unit in (
        ("United States", quote.us, quote.units_us),
        ("World", quote.world, quote.units_world),
    ):
        table.add_row(label, f"${format_price(point.value)}{unit}", str(point.date), point.source)

    click.echo(f"Sources: {', '.join(quote.contributing_sources)}")
    if quote.is_fallback:
        click.echo("Using estimated data (no live source responded).")
    console.print(table)


# ---------------------------------------------------------------------------
# project
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("commodity")
@click.option(
    "--usage-change",
    "-u",
    type=float,
    required=True,
    help="Usage change in percent (negative for a decrease).",
)
@click.option(
    "--region",
    "-r",
    type=click.Choice(["us", "world"], case_sensitive=False),
    default="us",
    help="Which price slot to project.",
)
@click.pass_context
def project(ctx: click.Context, commodity: str, usage_change: float, region: str) -> None:
    """Project the price of COMMODITY after a usage change and print a summary."""
    from energy_projections.projection import ProjectionSession, render_summary

    config = _load_config(ctx)
    key = _resolve_commodity(commodity)
    quote = _run_async(_fetch_quote(config, key))

    session = ProjectionSession()
    result = session.calculate(quote, region.lower(), usage_change)
    click.echo(render_summary(result))


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--host", type=str, default=None, help="Bind address (default from config).")
@click.option("--port", "-p", type=int, default=None, help="Port number (default from config).")
@click.option("--reload", is_flag=True, default=False, help="Auto-reload on code changes.")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None, reload: bool) -> None:
    """Start the REST API server."""
    import uvicorn

    config = _load_config(ctx)
    host = host or config.api.host
    port = port or config.api.port

    console.print(f"Starting energy-projections API on [bold]{host}:{port}[/bold]")
    console.print(f"API docs: http://{host}:{port}/docs")

    uvicorn.run(
        "energy_projections.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


# ---------------------------------------------------------------------------
# status
# ---------------------------------------------------------------------------


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show provider configuration and cache settings."""
    config = _load_config(ctx)
    providers = config.providers

    def _flag(ok: bool) -> str:
        return "[green]configured[/green]" if ok else "[red]not configured[/red]"

    table = Table(title="Energy Price Projections Status")
    table.add_column("Item", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("EIA API key", _flag(providers.eia_configured))
    table.add_row("FRED API key", _flag(providers.fred_configured))
    table.add_row("Our World in Data", "no key required")
    table.add_row("Yahoo Finance", "no key required")
    table.add_section()
    table.add_row("Request timeout", f"{providers.request_timeout:g}s")
    table.add_row("Cache TTL", f"{config.cache.ttl_seconds:g}s")
    table.add_row(
        "Cache bound",
        str(config.cache.max_entries) if config.cache.max_entries else "unbounded",
    )

    console.print(table)

    if not (providers.eia_configured and providers.fred_configured):
        console.print(
            "Set EIA_API_KEY and FRED_API_KEY (or a .env file) to enable all providers.\n"
            "  EIA:  https://www.eia.gov/opendata/register.php\n"
            "  FRED: https://fred.stlouisfed.org/docs/api/api_key.html"
        )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
