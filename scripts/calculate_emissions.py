#!/usr/bin/env python3
"""
CLI script to calculate GLEC emissions for a file of transport legs.

Usage:
    # Calculate a CSV of legs with the development configuration
    python scripts/calculate_emissions.py legs.csv

    # JSON batch body, 3 decimal places, no aggregate
    python scripts/calculate_emissions.py legs.json --precision 3 --no-aggregate

    # Use another environment's configuration
    python scripts/calculate_emissions.py legs.csv --config production.toml
"""

import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from app.core.config import get_config
from app.database.base import engine_kw, get_db_url
from app.database.session_manager.db_session import Database
from app.pydantic_models.calculation import BatchCalculationResult
from app.services.activity_loader import ActivityFileError, load_batch_request
from app.services.calculators.emission_calculator import EmissionCalculationService
from app.services.calculators.registry import StrategyRegistry
from app.services.factors.database_provider import SQLAlchemyFactorProvider
from app.services.factors.provider import StaticFactorProvider
from app.utils.constants import ConfigFile

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

console = Console()


def print_header(text: str, style: str = "bold cyan"):
    """Print a formatted header using Rich Panel."""
    console.print(
        Panel(
            Text(text, justify="center", style=style),
            border_style="cyan",
            padding=(1, 2),
        )
    )


def print_results(result: BatchCalculationResult):
    """Print one row per successful leg."""
    table = Table(show_header=True, box=None, padding=(0, 2))
    table.add_column("Calculation", style="bold cyan")
    table.add_column("Mode", style="yellow")
    table.add_column("Total (kg CO2e)", justify="right", style="bold green")
    table.add_column("Direct", justify="right")
    table.add_column("Indirect", justify="right")
    table.add_column("Confidence", style="magenta")
    table.add_column("Factor", style="dim")

    for item in result.individual:
        table.add_row(
            item.metadata.calculation_id,
            item.input.activity_data.transport_mode.value,
            str(item.emissions.total),
            str(item.breakdown.direct_emissions),
            str(item.breakdown.indirect_emissions),
            item.metadata.confidence.value,
            item.input.emission_factor.id,
        )

    console.print(table)
    console.print()


def print_summary(result: BatchCalculationResult):
    """Print the batch summary, aggregate and any failed legs."""
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("Label", style="bold yellow")
    summary.add_column("Value", style="bold magenta")
    summary.add_row("Requests", str(result.summary.total_requests))
    summary.add_row("Successful", str(result.summary.successful))
    summary.add_row("Failed", str(result.summary.failed))

    if result.aggregate is not None:
        summary.add_row("Total emissions (kg CO2e)", str(result.aggregate.total_emissions))
        summary.add_row("Average intensity", str(result.aggregate.average_intensity))
        summary.add_row("Total distance (km)", str(result.aggregate.total_distance))

    console.print(summary)

    if result.errors:
        console.print()
        console.print(
            Panel(
                f"[yellow]{len(result.errors)} legs failed[/yellow]",
                border_style="yellow",
            )
        )
        for error in result.errors:
            console.print(f"  #{error.index}: [dim]{error.error}[/dim]")

    console.print()


async def run(args) -> BatchCalculationResult:
    config = get_config(args.config)
    calculation_config = config.section("emission_calculation")

    batch_request = load_batch_request(
        args.file,
        aggregate=not args.no_aggregate,
        rounding_precision=(
            args.precision
            if args.precision is not None
            else calculation_config.get("default_rounding_precision")
        ),
    )

    registry = StrategyRegistry.default(
        fuzzy_threshold=calculation_config.get("fuzzy_match_threshold", 90)
    )
    concurrency = calculation_config.get("batch_concurrency", 1)

    if config.section("factors").get("provider") == "database":
        Database.init(get_db_url(config), engine_kw=engine_kw)
        async with Database() as session:
            service = EmissionCalculationService(
                registry, SQLAlchemyFactorProvider(session), concurrency
            )
            return await service.calculate_batch(batch_request)

    provider = StaticFactorProvider.from_config(
        config.section("factors").get("catalogue", [])
    )
    service = EmissionCalculationService(registry, provider, concurrency)
    return await service.calculate_batch(batch_request)


async def main():
    """Main entry point for the calculation script."""
    parser = argparse.ArgumentParser(
        description="Calculate GLEC emissions for transport legs in a CSV or JSON file"
    )
    parser.add_argument("file", type=str, help="CSV or JSON file of transport legs")
    parser.add_argument(
        "--config",
        type=str,
        default=ConfigFile.DEVELOPMENT,
        help="Configuration file name (default: development.toml)",
    )
    parser.add_argument(
        "--precision",
        type=int,
        default=None,
        help="Decimal places for reported values",
    )
    parser.add_argument(
        "--no-aggregate",
        action="store_true",
        help="Skip the batch aggregate",
    )

    args = parser.parse_args()

    print_header("GLEC EMISSIONS CALCULATION", "bold cyan")

    try:
        with console.status("[bold cyan]Calculating emissions...", spinner="dots"):
            result = await run(args)

        print_results(result)
        print_summary(result)

    except ActivityFileError as e:
        console.print(Panel(f"[bold red]Invalid activity file[/bold red]\n\n[red]{e}[/red]"))
        sys.exit(2)

    except Exception as e:
        logger.error(f"Calculation failed: {e}", exc_info=True)
        console.print(
            Panel(
                f"[bold red]CALCULATION FAILED[/bold red]\n\n[red]{e!s}[/red]",
                border_style="bold red",
            )
        )
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
