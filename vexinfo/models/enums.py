from enum import Enum, IntEnum


class Collection(str, Enum):
    """The VexDB collections pulled for every team."""

    TEAMS = "teams"
    RANKINGS = "rankings"
    EVENTS = "events"
    SEASON_RANKINGS = "season_rankings"
    AWARDS = "awards"
    SKILLS = "skills"


class SkillsType(IntEnum):
    AUTONOMOUS = 0
    ROBOT = 1  # driver control
    COMBINED = 2


class Metric(str, Enum):
    """Metrics that carry an availability flag."""

    OPR = "opr"
    DPR = "dpr"
    CCWM = "ccwm"
    MAX_SCORE = "max_score"
    RANK = "rank"
    WP = "wp"
    AP = "ap"
    SP = "sp"
    TRSP = "trsp"
    SKILLS_AUTON = "skills_auton"
    SKILLS_ROBOT = "skills_robot"
    SKILLS_COMBINED = "skills_combined"
    VRATING_RANK = "vrating_rank"
    VRATING = "vrating"
    AWARDS = "awards"


# Metrics averaged over the rankings collection, in the order they are reduced
RANKING_METRICS = (
    Metric.OPR,
    Metric.DPR,
    Metric.CCWM,
    Metric.MAX_SCORE,
    Metric.RANK,
    Metric.WP,
    Metric.AP,
    Metric.SP,
    Metric.TRSP,
)

SKILLS_METRICS = {
    SkillsType.AUTONOMOUS: Metric.SKILLS_AUTON,
    SkillsType.ROBOT: Metric.SKILLS_ROBOT,
    SkillsType.COMBINED: Metric.SKILLS_COMBINED,
}
