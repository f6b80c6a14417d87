from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, field_validator

JsonRecord = Dict[str, Any]


class RawTeamData(BaseModel):
    """The six VexDB collections for a single team, as returned by the API.

    Only `events` is a single object (the whole VexDB envelope, so that its
    `size` field is reachable). Every other collection is the envelope's
    `result` list and may be empty.
    """

    model_config = ConfigDict(frozen=True)

    teams: List[JsonRecord] = []
    rankings: List[JsonRecord] = []
    events: JsonRecord
    season_rankings: List[JsonRecord] = []
    awards: List[JsonRecord] = []
    skills: List[JsonRecord] = []

    @field_validator("events")
    @classmethod
    def events_must_carry_size(cls, value: JsonRecord) -> JsonRecord:
        if "size" not in value:
            raise ValueError("events collection is missing its 'size' field")
        return value
