from typing import Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .enums import Metric

VEXDB_TEAM_URL = "https://vexdb.io/teams/view/{number}"


class TeamSummary(BaseModel):
    """Season statistics for one team, reduced from its raw collections."""

    model_config = ConfigDict(frozen=True)

    # Identity
    number: str  # IE: 90241B
    team_name: str
    organization: str
    location: str

    # Rankings
    avg_opr: float = 0.0
    avg_dpr: float = 0.0
    avg_ccwm: float = 0.0
    avg_max_score: int = 0
    avg_rank: int = 0
    avg_wp: int = 0
    avg_ap: int = 0
    avg_sp: int = 0
    avg_trsp: int = 0

    # Events
    num_events: int = 0

    # Season rankings
    vrating_rank: int = 0
    vrating: float = 0.0

    # Awards, keyed by name with the VRC/VEXU suffix removed
    awards: Dict[str, int] = Field(default_factory=dict)

    # Skills
    avg_skills_auton: int = 0
    avg_skills_robot: int = 0
    avg_skills_combined: int = 0

    @computed_field  # type: ignore[misc]
    @property
    def team_link(self) -> str:
        """The team's page on VexDB."""
        return VEXDB_TEAM_URL.format(number=self.number)

    def metric_value(self, metric: Metric) -> Union[int, float, Dict[str, int]]:
        """Returns the stored value backing an availability flag."""
        return getattr(self, METRIC_FIELDS[metric])


# Summary attribute holding each flagged metric
METRIC_FIELDS: Dict[Metric, str] = {
    Metric.OPR: "avg_opr",
    Metric.DPR: "avg_dpr",
    Metric.CCWM: "avg_ccwm",
    Metric.MAX_SCORE: "avg_max_score",
    Metric.RANK: "avg_rank",
    Metric.WP: "avg_wp",
    Metric.AP: "avg_ap",
    Metric.SP: "avg_sp",
    Metric.TRSP: "avg_trsp",
    Metric.SKILLS_AUTON: "avg_skills_auton",
    Metric.SKILLS_ROBOT: "avg_skills_robot",
    Metric.SKILLS_COMBINED: "avg_skills_combined",
    Metric.VRATING_RANK: "vrating_rank",
    Metric.VRATING: "vrating",
    Metric.AWARDS: "awards",
}


class FieldAvailability(BaseModel):
    """Whether each metric's backing collection had data for a team.

    One boolean per `Metric`, so every metric has exactly one entry. Lookups
    accept either the enum member or its string value.
    """

    model_config = ConfigDict(frozen=True)

    opr: bool = True
    dpr: bool = True
    ccwm: bool = True
    max_score: bool = True
    rank: bool = True
    wp: bool = True
    ap: bool = True
    sp: bool = True
    trsp: bool = True
    skills_auton: bool = True
    skills_robot: bool = True
    skills_combined: bool = True
    vrating_rank: bool = True
    vrating: bool = True
    awards: bool = True

    def __getitem__(self, metric: Union[Metric, str]) -> bool:
        return getattr(self, Metric(metric).value)

    def as_dict(self) -> Dict[str, bool]:
        return {metric.value: self[metric] for metric in Metric}

    def unavailable(self) -> List[Metric]:
        return [metric for metric in Metric if not self[metric]]


class TeamAggregate(BaseModel):
    """A summary together with the availability flags computed alongside it."""

    model_config = ConfigDict(frozen=True)

    summary: TeamSummary
    availability: FieldAvailability
