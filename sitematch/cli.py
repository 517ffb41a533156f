"""SiteMatch CLI.

Commands:
- match: Rank catalog products for a project specification and analyze the result
- shipping: Estimate freight days between two regions
- config: Show effective scoring weights and shipping rules
"""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from sitematch.analysis.project import analyze_project
from sitematch.catalog_store import CatalogStore
from sitematch.config import get_config
from sitematch.core.logging import configure_logging
from sitematch.ingestion.catalog import CatalogValidationError, ingest_catalog
from sitematch.ingestion.specs import SpecificationError, load_specification
from sitematch.matching.orchestrator import find_matches
from sitematch.matching.shipping import estimate_shipping_days

app = typer.Typer(
    name="sitematch",
    help="SiteMatch - Construction product matching and project feasibility",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main() -> None:
    """Configure logging before any command runs."""
    config = get_config()
    configure_logging(config.log_level, config.json_logs)


@app.command()
def match(
    spec_file: Path = typer.Argument(..., help="Project specification (YAML/JSON)"),
    catalog_file: Path | None = typer.Option(
        None, "--catalog", help="Product catalog (CSV/XLSX); defaults to SITEMATCH_CATALOG"
    ),
    top: int = typer.Option(10, "--top", help="Rows to show in the results table"),
    as_json: bool = typer.Option(False, "--json", help="Print the full analysis as JSON"),
    strict: bool | None = typer.Option(
        None, "--strict/--lenient", help="Reject the catalog on any invalid row"
    ),
):
    """Match catalog products to a project and print the feasibility analysis."""
    config = get_config()
    catalog_file = catalog_file or config.catalog_path
    if catalog_file is None:
        console.print("[red]Error: no catalog given (use --catalog or SITEMATCH_CATALOG)[/red]")
        raise typer.Exit(code=1)
    if strict is None:
        strict = config.ingestion_strict

    try:
        spec = load_specification(spec_file)
        products, errors = ingest_catalog(catalog_file, strict=strict)
    except CatalogValidationError as e:
        console.print(f"[red]✗ Catalog rejected:[/red] {len(e.errors)} invalid rows")
        for err in e.errors[:5]:
            console.print(f"  {err}", style="dim")
        raise typer.Exit(code=1) from e
    except (FileNotFoundError, SpecificationError, ValueError) as e:
        console.print(f"[red]✗ Failed:[/red] {e}")
        raise typer.Exit(code=1) from e

    store = CatalogStore(products)
    matches = find_matches(store.current(), spec, config)
    analysis = analyze_project(matches, spec)

    if as_json:
        typer.echo(analysis.model_dump_json(indent=2))
        return

    console.print(f"[bold]Project:[/bold] {spec.name} ({spec.location})")
    console.print(f"Catalog: {len(products)} products loaded (snapshot v{store.version})")
    if errors:
        console.print(f"[yellow]⚠[/yellow] {len(errors)} catalog rows skipped")
        for err in errors[:5]:  # Show first 5 errors
            console.print(f"  {err}", style="dim")

    if not matches:
        console.print("[yellow]No matching products found[/yellow]")
    else:
        table = Table(title="Match Results")
        table.add_column("Product", style="cyan")
        table.add_column("Category")
        table.add_column("Score", justify="right", style="green")
        table.add_column("Delivery")
        table.add_column("Warnings", style="yellow")

        for result in matches[:top]:
            table.add_row(
                f"{result.product.product_id} {result.product.name}",
                result.product.category,
                str(result.score),
                result.estimated_delivery.isoformat(),
                "; ".join(result.warnings) or "None",
            )
        console.print(table)

    console.print("\n[bold]Summary:[/bold]")
    console.print(f"  Matches: {len(matches)}")
    console.print(f"  Estimated cost: ${analysis.estimated_total_cost:,.2f}")
    if spec.max_budget:
        console.print(f"  Budget utilization: {analysis.budget_utilization:.1f}%")
    feasible = "yes" if analysis.timeline_analysis.feasible else "no"
    console.print(f"  Timeline feasible: {feasible}")

    if analysis.risks:
        console.print("\n[bold red]Risks:[/bold red]")
        for risk in analysis.risks:
            console.print(f"  - {risk}")
        console.print("\n[bold]Recommendations:[/bold]")
        for rec in analysis.recommendations:
            console.print(f"  - {rec}")


@app.command()
def shipping(
    origin: str = typer.Argument(..., help="Origin region code"),
    destination: str = typer.Argument(..., help="Destination region code"),
):
    """Estimate shipping days between two regions."""
    days = estimate_shipping_days(origin, destination, get_config().shipping)
    console.print(
        f"[bold]Estimated shipping:[/bold] {origin.upper()} → {destination.upper()}: {days} days"
    )


@app.command(name="config")
def show_config():
    """Show effective scoring weights and shipping rules."""
    config = get_config()

    table = Table(title="Scoring Weights")
    table.add_column("Rule", style="cyan")
    table.add_column("Points", justify="right", style="green")
    for name, value in asdict(config.scoring).items():
        table.add_row(name, str(value))
    console.print(table)

    shipping_rules = config.shipping
    table = Table(title="Shipping Rules")
    table.add_column("Rule", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_row("same_region_days", str(shipping_rules.same_region_days))
    table.add_row("base_days", str(shipping_rules.base_days))
    table.add_row("remote_surcharge_days", str(shipping_rules.remote_surcharge_days))
    table.add_row("same_group_reduction_days", str(shipping_rules.same_group_reduction_days))
    table.add_row("min_days", str(shipping_rules.min_days))
    table.add_row("remote_regions", ", ".join(sorted(shipping_rules.remote_regions)))
    console.print(table)

    console.print(f"Budget cushion: {config.budget.cushion:.0%}")
    max_results = config.max_results if config.max_results is not None else "unlimited"
    console.print(f"Max results: {max_results}")


if __name__ == "__main__":
    app()
