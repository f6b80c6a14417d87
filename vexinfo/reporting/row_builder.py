# vexinfo/reporting/row_builder.py
from typing import Iterable, List

from vexinfo.models.enums import Metric
from vexinfo.models.summary import TeamAggregate, TeamSummary

NOT_FOUND = "NOT_FOUND"

HEADER_ROW: List[str] = [
    "Team",
    "Team Name",
    "Organization",
    "Location",
    "VexDB Link",
    "Average OPR",
    "Average DPR",
    "Average CCWM",
    "Average AP's",
    "Average SP's",
    "Average TRSP's",
    "Vrating Rank",
    "Vrating",
    "Average Rank",
    "Average Skills Score(Auton)",
    "Average Skills Score(Robot)",
    "Average Skills Score(Combined)",
    "Average Max Score",
    "Total Events This Season",
]

# Metric-backed columns between the identity block and the event count
METRIC_COLUMNS: List[Metric] = [
    Metric.OPR,
    Metric.DPR,
    Metric.CCWM,
    Metric.AP,
    Metric.SP,
    Metric.TRSP,
    Metric.VRATING_RANK,
    Metric.VRATING,
    Metric.RANK,
    Metric.SKILLS_AUTON,
    Metric.SKILLS_ROBOT,
    Metric.SKILLS_COMBINED,
    Metric.MAX_SCORE,
]


def build_row(aggregate: TeamAggregate) -> List[str]:
    """Renders one team as the 19 display strings of a sheet row.

    Unavailable metrics are written as NOT_FOUND whatever their stored value.
    The event count has no availability flag and is always numeric.
    """
    summary, availability = aggregate.summary, aggregate.availability
    row = [
        summary.number,
        summary.team_name,
        summary.organization,
        summary.location,
        summary.team_link,
    ]
    for metric in METRIC_COLUMNS:
        if availability[metric]:
            row.append(str(summary.metric_value(metric)))
        else:
            row.append(NOT_FOUND)
    row.append(str(summary.num_events))
    return row


def build_rows(aggregates: Iterable[TeamAggregate], include_header: bool = True) -> List[List[str]]:
    rows = [list(HEADER_ROW)] if include_header else []
    rows.extend(build_row(aggregate) for aggregate in aggregates)
    return rows


def format_awards(aggregate: TeamAggregate, separator: str = "; ") -> str:
    """One-line award summary, e.g. 'Excellence Award x2; Tournament Champions x1'."""
    if not aggregate.availability[Metric.AWARDS]:
        return NOT_FOUND
    summary: TeamSummary = aggregate.summary
    return separator.join(
        f"{name} x{count}" for name, count in sorted(summary.awards.items())
    )
