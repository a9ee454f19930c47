"""Command-line interface for TrailRank."""

import os
from pathlib import Path
from typing import List, Optional

import typer
from rich import print
from rich.console import Console
from rich.table import Table

from trailrank import __version__
from trailrank.analysis.gear import GearAdvisor, gear_summary
from trailrank.analysis.topsis_engine import TopsisEngine
from trailrank.config import get_config
from trailrank.config.catalog_loader import CatalogLoader
from trailrank.exceptions import TrailRankError
from trailrank.processing.cost import CostEstimator
from trailrank.types import (
    BudgetLevel,
    CostInput,
    Difficulty,
    ExperienceLevel,
    GearInput,
    GearRecommendation,
    UserPreferences,
)
from trailrank.utils.logging import configure_logging, get_logger

app = typer.Typer(
    name="trailrank",
    help="Hiking route recommendations with TOPSIS multi-criteria analysis",
    add_completion=False
)

console = Console()
logger = get_logger(__name__)


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        print(f"TrailRank v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose logging"
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file"
    )
):
    """TrailRank - rank hiking routes against your preferences."""
    if config_file:
        os.environ["TRAILRANK_CONFIG_PATH"] = str(config_file)

    config = get_config()
    log_level = "DEBUG" if verbose else config.logging.level
    configure_logging(level=log_level, format_type=config.logging.format, log_file=config.logging.file)


def _print_gear(recommendation: GearRecommendation) -> None:
    table = Table(title=f"Gear ({recommendation.total_items} items)")
    table.add_column("Priority", style="cyan")
    table.add_column("Item", style="magenta")
    table.add_column("Notes")

    for priority, items in (
        ("essential", recommendation.essential),
        ("recommended", recommendation.recommended),
        ("optional", recommendation.optional),
    ):
        for item in items:
            notes = item.description + (f" ({item.quantity})" if item.quantity else "")
            table.add_row(priority, item.name, notes)

    console.print(table)

    everything = recommendation.essential + recommendation.recommended + recommendation.optional
    summary = ", ".join(f"{k}: {v}" for k, v in sorted(gear_summary(everything).items()))
    console.print(f"[dim]By category: {summary}[/dim]")


@app.command()
def rank(
    experience: ExperienceLevel = typer.Option(
        ExperienceLevel.INTERMEDIATE, "--experience", "-e", help="Hiking experience"
    ),
    fitness: int = typer.Option(5, "--fitness", min=1, max=10, help="Fitness level (1-10)"),
    budget: str = typer.Option("1m_2m", "--budget", help="Budget bucket, e.g. 500k_1m"),
    time_commitment: str = typer.Option("2_days", "--time", help="Time bucket, e.g. 3_days"),
    location: Optional[str] = typer.Option(None, "--location", "-l", help="Departure city (configured default when omitted)"),
    group_size: int = typer.Option(2, "--group-size", "-g", min=1, help="Number of hikers"),
    interests: Optional[List[str]] = typer.Option(None, "--interest", "-i", help="Interest tag (repeatable)"),
    concerns: Optional[List[str]] = typer.Option(None, "--concern", help="Concern tag (repeatable)"),
    top: int = typer.Option(5, "--top", "-n", min=1, help="Routes to display"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the full ranking as CSV"),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
    show_gear: bool = typer.Option(False, "--gear", help="Show gear for the top route"),
):
    """Rank catalog routes for your preferences."""
    preferences = UserPreferences(
        experience_level=experience,
        fitness_level=fitness,
        budget_range=budget,
        time_commitment=time_commitment,
        location=location or "",
        group_size=group_size,
        interests=frozenset(interests or []),
        concerns=frozenset(concerns or []),
    )

    try:
        engine = TopsisEngine.from_config(get_config())
        result = engine.rank(preferences)
    except TrailRankError as e:
        logger.exception("Ranking failed")
        console.print(f"[red]✗ Ranking failed: {e}[/red]")
        raise typer.Exit(1)

    if as_json:
        console.print_json(result.model_dump_json())
        return

    table = Table(title="Recommended Routes")
    table.add_column("Rank", style="cyan", justify="right")
    table.add_column("Route", style="magenta")
    table.add_column("Difficulty")
    table.add_column("Score", justify="right")
    table.add_column("Est. Cost (Rp)", justify="right")
    table.add_column("Why")

    for route in result.routes[:top]:
        table.add_row(
            str(route.rank),
            route.route_name,
            route.difficulty.value,
            f"{route.topsis_score:.3f}",
            f"{route.estimated_cost.total:,}",
            "\n".join(route.explanations),
        )

    console.print(table)

    weights = ", ".join(
        f"{f.name} {f.effective_weight:.0%}" for f in result.methodology.factors
    )
    console.print(f"[dim]Factor weights: {weights}[/dim]")

    for warning in result.warnings:
        console.print(f"[yellow]! {warning.message}[/yellow]")

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        result.to_dataframe().to_csv(output, index=False)
        console.print(f"[green]✓ Saved to: {output}[/green]")

    if show_gear and result.top_route is not None:
        gear_input = GearInput.from_route(result.top_route, preferences)
        _print_gear(GearAdvisor().recommend(gear_input))


@app.command()
def cost(
    mountain_location: str = typer.Argument(..., help="Mountain location key, e.g. lombok"),
    location: Optional[str] = typer.Option(None, "--location", "-l", help="Departure city (configured default when omitted)"),
    difficulty: Difficulty = typer.Option(Difficulty.MODERATE, "--difficulty", "-d"),
    days: int = typer.Option(1, "--days", min=1),
    group_size: int = typer.Option(2, "--group-size", "-g", min=1),
    guide: bool = typer.Option(False, "--guide", help="Hire a guide"),
    equipment: bool = typer.Option(False, "--equipment", help="Rent equipment"),
    budget_level: BudgetLevel = typer.Option(BudgetLevel.STANDARD, "--budget-level"),
):
    """Estimate the cost of a trip."""
    breakdown = CostEstimator().estimate(CostInput(
        user_location=location or get_config().engine.default_location,
        mountain_location=mountain_location,
        route_difficulty=difficulty,
        days=days,
        group_size=group_size,
        needs_guide=guide,
        needs_equipment=equipment,
        budget_level=budget_level,
    ))

    table = Table(title="Trip Cost")
    table.add_column("Category", style="cyan")
    table.add_column("Rp", style="magenta", justify="right")
    for category, amount in breakdown.model_dump().items():
        table.add_row(category, f"{amount:,}")
    console.print(table)


@app.command()
def gear(
    days: int = typer.Option(1, "--days", min=1),
    technicality: str = typer.Option("moderate", "--technicality", help="easy/moderate/hard/expert"),
    weather: str = typer.Option("variable", "--weather", help="dry/wet/cold/variable"),
    season: str = typer.Option("dry", "--season", help="dry/wet"),
    group_size: int = typer.Option(1, "--group-size", "-g", min=1),
    beginner: bool = typer.Option(False, "--beginner", help="Include beginner safety extras"),
):
    """Recommend gear for a trip."""
    try:
        gear_input = GearInput(
            days=days,
            technicality=technicality,
            weather=weather,
            season=season,
            group_size=group_size,
            has_experience=not beginner,
        )
    except ValueError as e:
        console.print(f"[red]Invalid trip parameters: {e}[/red]")
        raise typer.Exit(1)

    _print_gear(GearAdvisor().recommend(gear_input))


@app.command()
def catalog():
    """List routes and decision factors in the catalog."""
    try:
        data = CatalogLoader(get_config().catalog_path).load()
    except TrailRankError as e:
        logger.exception("Catalog load failed")
        console.print(f"[red]✗ Could not load catalog: {e}[/red]")
        raise typer.Exit(1)

    routes = Table(title="Routes")
    routes.add_column("ID", style="cyan")
    routes.add_column("Name", style="magenta")
    routes.add_column("Mountain")
    routes.add_column("Difficulty")
    routes.add_column("Distance (km)", justify="right")
    routes.add_column("Duration (h)", justify="right")
    for route in data.routes:
        mountain = data.mountain(route.mountain_id)
        routes.add_row(
            route.id,
            route.name,
            mountain.name if mountain else "?",
            route.difficulty.value,
            f"{route.distance_km:g}",
            f"{route.duration_hours:g}",
        )
    console.print(routes)

    factors = Table(title="Factors")
    factors.add_column("Factor", style="cyan")
    factors.add_column("Baseline Weight", justify="right")
    factors.add_column("Criteria")
    for factor in data.ordered_factors:
        names = [c.name for c in data.static_criteria if c.factor_id == factor.id]
        weight = data.factor_weight(factor.id)
        factors.add_row(
            factor.name,
            f"{weight:.2f}" if weight is not None else "-",
            ", ".join(names),
        )
    console.print(factors)


if __name__ == "__main__":
    app()
