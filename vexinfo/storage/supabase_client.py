# vexinfo/storage/supabase_client.py
from typing import List, Dict, Any, Optional

from loguru import logger
from supabase import create_async_client, AsyncClient
from postgrest.exceptions import APIError

from vexinfo.config.settings import settings
from vexinfo.models.event import EventInfo
from vexinfo.models.enums import Metric
from vexinfo.models.summary import METRIC_FIELDS, TeamAggregate
from vexinfo.reporting.row_builder import build_row
from vexinfo.utils.misc_utils import generate_canonical_id

# Module-level storage for the async client instance
_async_supabase_client: Optional[AsyncClient] = None


async def initialize_supabase() -> Optional[AsyncClient]:
    """Initializes the global ASYNC Supabase client and returns it."""
    global _async_supabase_client
    if _async_supabase_client:
        logger.debug("Async Supabase client already initialized.")
        return _async_supabase_client

    if not settings.supabase_configured:
        logger.warning("Supabase URL or Key not configured; summaries will not be stored.")
        return None

    logger.debug(
        f"Attempting to initialize Async Supabase client with URL: {settings.supabase_url}"
    )
    try:
        client: AsyncClient = await create_async_client(
            settings.supabase_url, settings.supabase_key
        )
        _async_supabase_client = client
        logger.success("Async Supabase client initialized successfully.")
        return client
    except Exception as e:
        logger.exception(f"Failed to initialize Async Supabase client: {e}")
        return None


def set_supabase_client(client: Optional[AsyncClient]) -> None:
    """Replaces the module-level client (an already-built client, or None to reset)."""
    global _async_supabase_client
    _async_supabase_client = client


async def _handle_upsert(table_name: str, data: List[Dict[str, Any]]) -> bool:
    """Handles the upsert operation for a given table using the ASYNC client."""
    client = _async_supabase_client

    if not client:
        logger.error("Async Supabase client not available for upsert.")
        return False

    if not data:
        logger.debug(f"No data provided for upsert to table {table_name}. Skipping.")
        return True

    try:
        await client.table(table_name).upsert(data).execute()
        logger.success(
            f"Successfully upserted {len(data)} records to {table_name} (async)."
        )
        return True
    except APIError as e:
        logger.error(f"Error during async upsert to {table_name}: {e.message}")
        logger.debug(f"Full APIError details: {e}")
        return False
    except Exception as e:
        logger.error(
            f"An unexpected error occurred during async upsert to {table_name}: {e}"
        )
        logger.exception("Traceback:")
        return False


def summary_record(event: EventInfo, aggregate: TeamAggregate) -> Dict[str, Any]:
    """Flattens one team aggregate into a row of the summary table.

    Metrics whose collection was empty are stored as null rather than zero.
    """
    summary, availability = aggregate.summary, aggregate.availability
    record: Dict[str, Any] = {
        "summary_id": generate_canonical_id(event.sku, summary.number),
        "event_sku": event.sku,
        "season": event.season,
        "number": summary.number,
        "team_name": summary.team_name,
        "organization": summary.organization,
        "location": summary.location,
        "team_link": summary.team_link,
        "num_events": summary.num_events,
    }
    for metric in Metric:
        value = summary.metric_value(metric)
        record[METRIC_FIELDS[metric]] = value if availability[metric] else None
    record["availability"] = availability.as_dict()
    record["row_values"] = build_row(aggregate)
    return record


async def save_team_summaries(event: EventInfo, aggregates: List[TeamAggregate]) -> bool:
    """Upserts the aggregated summaries for an event into the summary table."""
    if not aggregates:
        logger.warning("No team summaries provided to save.")
        return True

    records = [summary_record(event, aggregate) for aggregate in aggregates]
    logger.info(
        f"Saving {len(records)} team summaries for {event.sku} to {settings.summary_table}"
    )
    return await _handle_upsert(settings.summary_table, records)
