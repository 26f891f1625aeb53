"""CLI for the Rent Edge deal and leverage scorer."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from the working directory
load_dotenv()

import typer
from rich.console import Console
from rich.table import Table

from . import api
from .errors import EngineUnavailable
from .models import DealScoreInput, DealScoreResult, LeverageScoreInput, LeverageScoreResult, PropertyScores
from .scoring import deal_label, leverage_label
from .snapshot import is_scorable, score_properties, score_property
from .storage import SnapshotStore, export_csv, export_json

app = typer.Typer(
    name="rent-edge",
    help="Score rental deals and renter negotiating leverage against the market",
)
console = Console()


def _get_output_dir() -> Path:
    """Default output directory for runs."""
    return Path(os.getenv("RENT_EDGE_OUTPUT", "output"))


def _get_store() -> SnapshotStore:
    """Default snapshot store."""
    return SnapshotStore(os.getenv("RENT_EDGE_DB", str(_get_output_dir() / "rent_edge.duckdb")))


def _run_id() -> str:
    """Generate run ID from timestamp."""
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


def _setup(config_path: Optional[Path], verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
    )
    api.configure(config_path or os.getenv("RENT_EDGE_CONFIG") or None)


def _read_json(path: Path) -> dict:
    if not path.exists():
        console.print(f"[red]File not found: {path}[/red]")
        raise typer.Exit(1)
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _factor_table(title: str, factors: list) -> Table:
    table = Table(title=title)
    table.add_column("Factor", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Weight", justify="right", style="dim")
    table.add_column("Contrib", justify="right")
    table.add_column("Detail", style="dim")
    for f in factors:
        table.add_row(f.name, f"{f.value:.1f}", f"{f.weight:.0%}", f"{f.contribution:.1f}", f.description)
    return table


def _print_deal(result: DealScoreResult) -> None:
    console.print(
        f"[bold]Deal Score {result.score:.0f}/100[/bold] "
        f"({deal_label(result.score)}, {result.grade.value})"
    )
    console.print(_factor_table("Deal Factors", result.factors))
    console.print(f"  {result.summary}")
    console.print(f"  [green]{result.recommendation}[/green]")


def _print_leverage(result: LeverageScoreResult) -> None:
    console.print(
        f"[bold]Leverage Score {result.score:.0f}/100[/bold] "
        f"({leverage_label(result.score)} Leverage, {result.grade.value})"
    )
    console.print(_factor_table("Leverage Factors", result.factors))
    for tip in result.negotiation_tips:
        console.print(f"  - {tip}")
    console.print(f"  [dim]{result.best_timing}[/dim]")


def _display_ranking(results: list[PropertyScores], run_id: str, limit: int = 20) -> None:
    """Display ranked properties table."""
    if not results:
        console.print("[yellow]No results to display.[/yellow]")
        return

    table = Table(title=f"Best Deals (Run {run_id})")
    table.add_column("Rank", style="dim")
    table.add_column("Property", style="cyan")
    table.add_column("City", style="dim")
    table.add_column("Deal", justify="right")
    table.add_column("Label")
    table.add_column("Leverage", justify="right")
    table.add_column("Label")
    table.add_column("Tip", style="dim")

    for i, r in enumerate(results[:limit], 1):
        name = r.property.name or r.property.property_id
        name_display = name[:30] + "..." if len(name) > 30 else name
        d, lv = r.deal, r.leverage
        table.add_row(
            str(i),
            name_display,
            r.property.city,
            f"{d.score:.0f}" if d else "-",
            deal_label(d.score) if d else "",
            f"{lv.score:.0f}" if lv else "-",
            leverage_label(lv.score) if lv else "",
            lv.negotiation_tips[0] if lv and lv.negotiation_tips else "",
        )

    console.print(table)


@app.command()
def load(
    snapshot_path: Path = typer.Argument(..., help="JSON snapshot of properties and market stats"),
) -> None:
    """Load a property/market snapshot file into the local store."""
    data_path = Path(snapshot_path)
    if not data_path.exists():
        console.print(f"[red]Snapshot not found: {data_path}[/red]")
        raise typer.Exit(1)
    store = _get_store()
    try:
        n_props, n_markets = store.load_json(data_path)
    finally:
        store.close()
    console.print(f"[green]Loaded {n_props} properties and {n_markets} market rows[/green]")


@app.command()
def score(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Override scoring config YAML"),
    limit: int = typer.Option(20, "--limit", "-n", help="Max properties to show"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine activity"),
) -> None:
    """Score every stored property, rank by Deal Score and export results."""
    _setup(config_path, verbose)
    store = _get_store()
    try:
        contexts = [store.get_property_with_market_context(pid) for pid in store.list_property_ids()]
    finally:
        store.close()
    contexts = [c for c in contexts if c is not None]
    if not contexts:
        console.print("[yellow]No properties in store. Run 'load' first.[/yellow]")
        raise typer.Exit(1)

    results = asyncio.run(score_properties(contexts))
    if api.loaded_engine() is None and any(is_scorable(c) for c in contexts):
        console.print("[red]Scoring engine unavailable; check the scoring config.[/red]")
        raise typer.Exit(1)

    ranked = sorted(
        results,
        key=lambda r: (-(r.deal.score if r.deal else -1), -(r.leverage.score if r.leverage else -1)),
    )
    run_id = _run_id()
    out_dir = _get_output_dir()
    csv_path = out_dir / f"scores_{run_id}.csv"
    json_path = out_dir / f"scores_{run_id}.json"
    export_csv(ranked, csv_path)
    export_json(ranked, json_path)

    _display_ranking(ranked, run_id, limit=limit)
    console.print(f"\n[green]Scored {len(ranked)} properties. Run ID: {run_id}[/green]")
    console.print(f"  CSV:  {csv_path}")
    console.print(f"  JSON: {json_path}")


@app.command()
def explain(
    property_id: str = typer.Argument(..., help="Stored property ID"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Override scoring config YAML"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine activity"),
) -> None:
    """Show both scores for one property with the full factor breakdown."""
    _setup(config_path, verbose)
    store = _get_store()
    try:
        ctx = store.get_property_with_market_context(property_id)
    finally:
        store.close()
    if ctx is None:
        console.print(f"[red]Property not found: {property_id}[/red]")
        raise typer.Exit(1)

    result = asyncio.run(score_property(ctx))
    console.print(f"[bold cyan]{ctx.property.name or property_id}[/bold cyan] {ctx.property.city}, {ctx.property.state}")
    if ctx.market_stats is None:
        console.print("[yellow]No market stats for this property's area.[/yellow]")
    if result.deal:
        _print_deal(result.deal)
    else:
        console.print("[dim]No rent data; Deal Score skipped.[/dim]")
    if result.leverage:
        _print_leverage(result.leverage)
    else:
        console.print("[dim]No occupancy data; Leverage Score skipped.[/dim]")


@app.command()
def deal(
    input_path: Path = typer.Argument(..., help="JSON file with DealScoreInput fields"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Override scoring config YAML"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
) -> None:
    """Score a single Deal Score input."""
    _setup(config_path, False)
    inp = DealScoreInput.from_dict(_read_json(input_path))
    try:
        result = asyncio.run(api.calculate_deal_score(inp))
    except EngineUnavailable as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _print_deal(result)


@app.command()
def leverage(
    input_path: Path = typer.Argument(..., help="JSON file with LeverageScoreInput fields"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Override scoring config YAML"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
) -> None:
    """Score a single Leverage Score input."""
    _setup(config_path, False)
    inp = LeverageScoreInput.from_dict(_read_json(input_path))
    try:
        result = asyncio.run(api.calculate_leverage_score(inp))
    except EngineUnavailable as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _print_leverage(result)


if __name__ == "__main__":
    app()
