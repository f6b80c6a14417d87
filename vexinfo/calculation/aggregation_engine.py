from typing import Dict, List, Tuple

from loguru import logger

from vexinfo.models.enums import Metric, SkillsType, SKILLS_METRICS
from vexinfo.models.raw import JsonRecord, RawTeamData
from vexinfo.models.summary import FieldAvailability, TeamAggregate, TeamSummary

# VexDB appends this to award names for the VRC/VEXU programs
AWARD_SUFFIX = "(VRC/VEXU)"


class AggregationError(Exception):
    """Custom exception for errors while aggregating team statistics."""

    pass


class MissingIdentityError(AggregationError):
    """Raised when the teams collection is empty and no summary can be built."""

    pass


def format_location(profile: JsonRecord) -> str:
    """Formats a team's location, leaving out the region when it is blank."""
    if profile["region"] != "":
        return f"{profile['city']}, {profile['region']}, {profile['country']}"
    return f"{profile['city']}, {profile['country']}"


def _average_real(records: List[JsonRecord], field: str) -> Tuple[float, bool]:
    if not records:
        return 0.0, False
    total = 0.0
    for record in records:
        total += record[field]
    return total / len(records), True


def _average_int(records: List[JsonRecord], field: str) -> Tuple[int, bool]:
    if not records:
        return 0, False
    total = 0
    for record in records:
        total += record[field]
    # wp arrives as a real; the sum is truncated before dividing
    return int(total) // len(records), True


def _average_skills(skills: List[JsonRecord], skills_type: SkillsType) -> Tuple[int, bool]:
    """Averages one kind of skills run.

    The sum covers only runs of `skills_type` but is divided by the number of
    all skills runs.
    """
    if not skills:
        return 0, False
    total = 0
    for run in skills:
        if run["type"] == skills_type:
            total += run["score"]
    return int(total) // len(skills), True


def count_awards(awards: List[JsonRecord]) -> Dict[str, int]:
    """Counts awards by name once the program suffix has been removed."""
    counts: Dict[str, int] = {}
    for award in awards:
        name = award["name"].replace(AWARD_SUFFIX, "")
        counts[name] = counts.get(name, 0) + 1
    return counts


def aggregate_team(raw: RawTeamData) -> TeamAggregate:
    """Reduces one team's raw collections to a summary and availability flags.

    Every reduction over an empty collection yields a zero value and a false
    flag. The only failure is an empty `teams` collection, which raises
    `MissingIdentityError`.

    Args:
        raw: The six collections fetched for the team.

    Returns:
        A TeamAggregate whose availability is private to this call.
    """
    if not raw.teams:
        raise MissingIdentityError("teams collection is empty; no identity to report")

    profile = raw.teams[0]
    flags: Dict[str, bool] = {}

    avg_opr, flags[Metric.OPR.value] = _average_real(raw.rankings, "opr")
    avg_dpr, flags[Metric.DPR.value] = _average_real(raw.rankings, "dpr")
    avg_ccwm, flags[Metric.CCWM.value] = _average_real(raw.rankings, "ccwm")
    avg_max_score, flags[Metric.MAX_SCORE.value] = _average_int(raw.rankings, "max_score")
    avg_rank, flags[Metric.RANK.value] = _average_int(raw.rankings, "rank")
    avg_wp, flags[Metric.WP.value] = _average_int(raw.rankings, "wp")
    avg_ap, flags[Metric.AP.value] = _average_int(raw.rankings, "ap")
    avg_sp, flags[Metric.SP.value] = _average_int(raw.rankings, "sp")
    avg_trsp, flags[Metric.TRSP.value] = _average_int(raw.rankings, "trsp")

    # Only the current season ranking is ever returned, so it is read, not averaged
    if raw.season_rankings:
        season = raw.season_rankings[0]
        vrating_rank, vrating = season["vrating_rank"], season["vrating"]
    else:
        vrating_rank, vrating = 0, 0.0
    flags[Metric.VRATING_RANK.value] = bool(raw.season_rankings)
    flags[Metric.VRATING.value] = bool(raw.season_rankings)

    awards = count_awards(raw.awards)
    flags[Metric.AWARDS.value] = bool(raw.awards)

    skills: Dict[SkillsType, int] = {}
    for skills_type, metric in SKILLS_METRICS.items():
        skills[skills_type], flags[metric.value] = _average_skills(raw.skills, skills_type)

    summary = TeamSummary(
        number=profile["number"],
        team_name=profile["team_name"],
        organization=profile["organisation"],
        location=format_location(profile),
        avg_opr=avg_opr,
        avg_dpr=avg_dpr,
        avg_ccwm=avg_ccwm,
        avg_max_score=avg_max_score,
        avg_rank=avg_rank,
        avg_wp=avg_wp,
        avg_ap=avg_ap,
        avg_sp=avg_sp,
        avg_trsp=avg_trsp,
        num_events=raw.events["size"],
        vrating_rank=vrating_rank,
        vrating=vrating,
        awards=awards,
        avg_skills_auton=skills[SkillsType.AUTONOMOUS],
        avg_skills_robot=skills[SkillsType.ROBOT],
        avg_skills_combined=skills[SkillsType.COMBINED],
    )
    availability = FieldAvailability(**flags)

    logger.debug(
        f"Aggregated team {summary.number}: {len(raw.rankings)} rankings, "
        f"{len(raw.skills)} skills runs, {len(raw.awards)} awards"
    )
    missing = availability.unavailable()
    if missing:
        logger.warning(
            f"Team {summary.number} has no data for: {', '.join(m.value for m in missing)}"
        )

    return TeamAggregate(summary=summary, availability=availability)
