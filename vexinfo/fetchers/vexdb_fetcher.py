# vexinfo/fetchers/vexdb_fetcher.py

import asyncio
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from vexinfo.config.settings import settings
from vexinfo.models.enums import Collection
from vexinfo.models.event import EventInfo
from vexinfo.models.raw import JsonRecord, RawTeamData
from .base_fetcher import BaseFetcher, FetchError

# VexDB endpoint serving each collection
COLLECTION_ENDPOINTS: Dict[Collection, str] = {
    Collection.TEAMS: "get_teams",
    Collection.RANKINGS: "get_rankings",
    Collection.EVENTS: "get_events",
    Collection.SEASON_RANKINGS: "get_season_rankings",
    Collection.AWARDS: "get_awards",
    Collection.SKILLS: "get_skills",
}


class VexDBFetcher(BaseFetcher):
    """Fetches the raw team collections from the VexDB v1 API."""

    source: str = "VexDB"

    def __init__(self, client: Optional[httpx.AsyncClient] = None, base_url: Optional[str] = None):
        super().__init__(client)
        self.base_url = (base_url or str(settings.vexdb_api_base_url)).rstrip("/")

    async def fetch_collection(self, endpoint: str, **params: Any) -> Dict[str, Any]:
        """Fetches one VexDB endpoint and returns its decoded envelope.

        VexDB wraps every response as {"status": 1, "size": n, "result": [...]};
        a status other than 1 carries an `error_text` and is raised as FetchError.
        """
        url = f"{self.base_url}/{endpoint}"
        try:
            response = await self._make_request("GET", url, params=params)
        except httpx.HTTPError as e:
            # Retries exhausted on a transport or 5xx error
            raise FetchError(f"Failed request to {self.source} {endpoint} after retries") from e

        try:
            envelope = response.json()
        except ValueError as e:
            logger.error(f"Error parsing {self.source} JSON for {endpoint}: {e}")
            logger.debug(f"Raw response content: {response.text}")
            raise FetchError(f"Invalid JSON from {endpoint}") from e

        if envelope.get("status") != 1:
            error_text = envelope.get("error_text", "unknown error")
            logger.error(f"{self.source} {endpoint} returned an error: {error_text}")
            raise FetchError(f"{endpoint} failed: {error_text}")
        return envelope

    async def _fetch_result(self, collection: Collection, **params: Any) -> List[JsonRecord]:
        envelope = await self.fetch_collection(COLLECTION_ENDPOINTS[collection], **params)
        return envelope.get("result", [])

    async def fetch_team_data(self, team_number: str, season: str) -> RawTeamData:
        """Fetches the six collections for one team concurrently."""
        logger.debug(f"Fetching collections for team {team_number} ({season})")
        by_season = {"team": team_number, "season": season}

        teams, rankings, events, season_rankings, awards, skills = await asyncio.gather(
            self._fetch_result(Collection.TEAMS, team=team_number),
            self._fetch_result(Collection.RANKINGS, **by_season),
            # The events envelope itself is kept; its size is the event count
            self.fetch_collection(COLLECTION_ENDPOINTS[Collection.EVENTS], **by_season),
            self._fetch_result(Collection.SEASON_RANKINGS, **by_season),
            self._fetch_result(Collection.AWARDS, **by_season),
            self._fetch_result(Collection.SKILLS, **by_season),
        )
        logger.info(
            f"Fetched team {team_number}: {len(rankings)} rankings, {events.get('size')} events, "
            f"{len(awards)} awards, {len(skills)} skills runs"
        )
        return RawTeamData(
            teams=teams,
            rankings=rankings,
            events=events,
            season_rankings=season_rankings,
            awards=awards,
            skills=skills,
        )

    async def fetch_event(self, sku: str) -> EventInfo:
        """Resolves an event's name, season and team list from its SKU.

        Team lists are only published about four weeks before the event starts.
        """
        events = await self._fetch_result(Collection.EVENTS, sku=sku)
        if not events:
            raise FetchError(f"No event found for SKU {sku}")
        event = events[0]

        teams = await self._fetch_result(Collection.TEAMS, sku=sku)
        event_info = EventInfo(
            sku=sku,
            name=event["name"],
            season=event["season"],
            team_numbers=[team["number"] for team in teams],
        )
        logger.info(
            f"Resolved event '{event_info.name}' ({event_info.season}) with {len(event_info.team_numbers)} teams"
        )
        return event_info
