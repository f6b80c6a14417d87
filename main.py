import sys
import asyncio
import argparse
import json
from typing import Any, Dict, List, Optional

from vexinfo.logging.setup import setup_logging
from vexinfo.config.settings import settings

setup_logging()

from loguru import logger
from pydantic import ValidationError

from vexinfo.fetchers.base_fetcher import FetchError
from vexinfo.fetchers.vexdb_fetcher import VexDBFetcher
from vexinfo.models.event import EventInfo
from vexinfo.calculation.aggregation_engine import AggregationError, aggregate_team
from vexinfo.models.summary import TeamAggregate
from vexinfo.reporting.row_builder import HEADER_ROW, build_rows, format_awards
from vexinfo.utils.misc_utils import sku_from_event_link
from vexinfo.storage.supabase_client import (
    initialize_supabase,
    save_team_summaries,
)

from rich import print
from rich.panel import Panel
from rich.table import Table

# Columns shown in the console table (the full row goes to the export)
CONSOLE_COLUMNS = [0, 1, 3, 5, 7, 11, 13, 16, 18]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Aggregate season statistics for the teams of a VEX event."
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--event", help="RobotEvents link of the event")
    source.add_argument("--teams", nargs="+", help="Team numbers, e.g. 90241B 90241A")
    parser.add_argument(
        "--season",
        default=settings.default_season,
        help="Season used with --teams (ignored with --event)",
    )
    parser.add_argument("--output", default=settings.output_file, help="JSON export path")
    parser.add_argument(
        "--no-store", action="store_true", help="Skip storing summaries in Supabase"
    )
    return parser.parse_args(argv)


async def resolve_event(fetcher: VexDBFetcher, args: argparse.Namespace) -> EventInfo:
    if args.event:
        return await fetcher.fetch_event(sku_from_event_link(args.event))
    return EventInfo(
        sku="custom",
        name="Custom team list",
        season=args.season,
        team_numbers=args.teams,
    )


async def run_aggregation_cycle(
    fetcher: VexDBFetcher, event: EventInfo
) -> List[TeamAggregate]:
    """Fetches and aggregates every team of the event, skipping teams that fail."""
    semaphore = asyncio.Semaphore(settings.max_concurrent_teams)
    logger.info(
        f"Initialize - {len(event.team_numbers)} teams "
        f"(up to {settings.max_concurrent_teams} at a time)"
    )

    async def process_team(number: str) -> Optional[TeamAggregate]:
        async with semaphore:
            try:
                raw = await fetcher.fetch_team_data(number, event.season)
                aggregate = aggregate_team(raw)
                logger.info(f"Stats computed: {aggregate.summary.number}")
                return aggregate
            except AggregationError as e:
                logger.error(f"Skipping team {number}: {e}")
            except FetchError as e:
                logger.error(f"Skipping team {number}, fetch failed: {e}")
            except (KeyError, TypeError, ValidationError) as e:
                # Malformed VexDB records; the other teams are still aggregated
                logger.exception(f"Skipping team {number}, data contract violation: {e!r}")
            return None

    results = await asyncio.gather(*(process_team(n) for n in event.team_numbers))
    # gather keeps input order, so rows follow the event's team list
    return [aggregate for aggregate in results if aggregate is not None]


def export_json(path: str, event: EventInfo, aggregates: List[TeamAggregate]) -> None:
    payload: Dict[str, Any] = {
        "event": event.model_dump(),
        "header": HEADER_ROW,
        "rows": build_rows(aggregates, include_header=False),
        "teams": [
            {
                "summary": aggregate.summary.model_dump(),
                "availability": aggregate.availability.as_dict(),
                "awards": format_awards(aggregate),
            }
            for aggregate in aggregates
        ],
    }
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=4, ensure_ascii=False)
        logger.success(f"Successfully saved team summaries to {path}")
    except IOError as e:
        logger.error(f"Failed to write team summaries to {path}: {e}")


def print_summary(event: EventInfo, aggregates: List[TeamAggregate]) -> None:
    table = Table(title=f"VexInfo.io - {event.name}")
    for index in CONSOLE_COLUMNS:
        table.add_column(HEADER_ROW[index])
    for row in build_rows(aggregates, include_header=False):
        table.add_row(*(row[index] for index in CONSOLE_COLUMNS))
    print(table)
    print(
        Panel(
            f"{len(aggregates)} of {len(event.team_numbers)} teams aggregated for "
            f"[bold]{event.name}[/bold] ({event.season})",
            title="VexInfo.io",
        )
    )


async def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the application."""
    args = parse_args(argv)
    logger.info("Starting VexInfo - Fetch, Aggregate, and Store")

    fetcher = VexDBFetcher()
    try:
        try:
            event = await resolve_event(fetcher, args)
        except (FetchError, ValueError) as e:
            logger.error(f"Could not resolve event: {e}")
            return
        aggregates = await run_aggregation_cycle(fetcher, event)
    finally:
        await fetcher.close()

    if not aggregates:
        logger.warning("No teams were aggregated.")
        return

    print_summary(event, aggregates)
    export_json(args.output, event, aggregates)

    if args.no_store:
        logger.info("Skipping Supabase storage (--no-store).")
        return

    supabase_client = await initialize_supabase()
    if not supabase_client:
        logger.info("Supabase not available; JSON export only.")
        return
    if await save_team_summaries(event, aggregates):
        logger.success("Team summaries successfully saved to Supabase.")
    else:
        logger.error("Failed to save team summaries to Supabase.")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)
