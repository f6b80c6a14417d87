from typing import List

from pydantic import BaseModel, ConfigDict


class EventInfo(BaseModel):
    """An event resolved from its SKU, with the numbers of its registered teams."""

    model_config = ConfigDict(frozen=True)

    sku: str
    name: str
    season: str
    team_numbers: List[str] = []
