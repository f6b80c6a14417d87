"""
Pytest configuration and shared fixtures for vexinfo tests.
"""

from typing import Any, Dict, List

import pytest

from vexinfo.models.raw import RawTeamData


def make_profile(**overrides: Any) -> Dict[str, Any]:
    profile = {
        "number": "90241B",
        "team_name": "Warren WarBots II",
        "organisation": "Warren High School",
        "city": "Downey",
        "region": "California",
        "country": "United States",
    }
    profile.update(overrides)
    return profile


def make_ranking(**overrides: Any) -> Dict[str, Any]:
    ranking = {
        "opr": 10.0,
        "dpr": 5.0,
        "ccwm": 5.0,
        "max_score": 100,
        "rank": 4,
        "wp": 8.0,
        "ap": 12,
        "sp": 200,
        "trsp": 150,
    }
    ranking.update(overrides)
    return ranking


def make_raw(
    teams: List[Dict[str, Any]] = None,
    rankings: List[Dict[str, Any]] = None,
    events_size: int = 3,
    season_rankings: List[Dict[str, Any]] = None,
    awards: List[Dict[str, Any]] = None,
    skills: List[Dict[str, Any]] = None,
) -> RawTeamData:
    return RawTeamData(
        teams=[make_profile()] if teams is None else teams,
        rankings=rankings or [],
        events={"status": 1, "size": events_size, "result": []},
        season_rankings=season_rankings or [],
        awards=awards or [],
        skills=skills or [],
    )


@pytest.fixture
def full_raw() -> RawTeamData:
    """A team with data in every collection."""
    return make_raw(
        rankings=[
            make_ranking(opr=12.5, dpr=4.0, ccwm=8.5, max_score=110, rank=3, wp=10.0, ap=14, sp=210, trsp=160),
            make_ranking(opr=7.5, dpr=6.0, ccwm=1.5, max_score=95, rank=8, wp=5.5, ap=9, sp=185, trsp=141),
        ],
        events_size=2,
        season_rankings=[{"vrating_rank": 42, "vrating": 71.25}],
        awards=[
            {"name": "Excellence Award(VRC/VEXU)"},
            {"name": "Excellence Award(VRC/VEXU)"},
            {"name": "Tournament Champions"},
        ],
        skills=[
            {"type": 0, "score": 10},
            {"type": 1, "score": 20},
            {"type": 1, "score": 30},
        ],
    )


@pytest.fixture
def empty_raw() -> RawTeamData:
    """A registered team that has not competed yet."""
    return make_raw(events_size=0)
