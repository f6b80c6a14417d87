"""
Tests for the aggregation engine.
"""

import pytest
from pydantic import ValidationError

from conftest import make_profile, make_ranking, make_raw
from vexinfo.calculation.aggregation_engine import (
    AggregationError,
    MissingIdentityError,
    aggregate_team,
    count_awards,
    format_location,
)
from vexinfo.models.enums import Metric, RANKING_METRICS
from vexinfo.models.raw import RawTeamData


class TestIdentity:
    def test_identity_fields(self, full_raw):
        summary = aggregate_team(full_raw).summary
        assert summary.number == "90241B"
        assert summary.team_name == "Warren WarBots II"
        assert summary.organization == "Warren High School"
        assert summary.location == "Downey, California, United States"
        assert summary.team_link == "https://vexdb.io/teams/view/90241B"

    def test_location_with_region(self):
        profile = make_profile(city="Austin", region="TX", country="USA")
        assert format_location(profile) == "Austin, TX, USA"

    def test_location_without_region(self):
        profile = make_profile(city="Singapore", region="", country="Singapore")
        assert format_location(profile) == "Singapore, Singapore"

    def test_only_first_team_record_is_used(self):
        raw = make_raw(teams=[make_profile(number="1A"), make_profile(number="2B")])
        assert aggregate_team(raw).summary.number == "1A"

    def test_empty_teams_raises(self):
        with pytest.raises(MissingIdentityError):
            aggregate_team(make_raw(teams=[]))

    def test_missing_identity_is_an_aggregation_error(self):
        assert issubclass(MissingIdentityError, AggregationError)


class TestRankingMetrics:
    def test_real_metrics_use_real_mean(self, full_raw):
        summary = aggregate_team(full_raw).summary
        assert summary.avg_opr == pytest.approx(10.0)
        assert summary.avg_dpr == pytest.approx(5.0)
        assert summary.avg_ccwm == pytest.approx(5.0)

    def test_integer_metrics_floor_divide(self, full_raw):
        summary = aggregate_team(full_raw).summary
        assert summary.avg_max_score == 102  # 205 / 2
        assert summary.avg_rank == 5  # 11 / 2
        assert summary.avg_ap == 11  # 23 / 2
        assert summary.avg_sp == 197  # 395 / 2
        assert summary.avg_trsp == 150  # 301 / 2

    def test_wp_sum_is_truncated_before_dividing(self, full_raw):
        # 10.0 + 5.5 = 15.5 -> 15 -> 15 // 2
        assert aggregate_team(full_raw).summary.avg_wp == 7

    def test_integer_metrics_are_ints(self, full_raw):
        summary = aggregate_team(full_raw).summary
        for value in (summary.avg_max_score, summary.avg_rank, summary.avg_wp, summary.avg_trsp):
            assert isinstance(value, int)

    def test_empty_rankings_zero_and_unavailable(self, empty_raw):
        aggregate = aggregate_team(empty_raw)
        summary, availability = aggregate.summary, aggregate.availability
        assert summary.avg_opr == 0.0
        assert summary.avg_dpr == 0.0
        assert summary.avg_ccwm == 0.0
        assert summary.avg_max_score == 0
        assert summary.avg_rank == 0
        assert summary.avg_wp == 0
        assert summary.avg_ap == 0
        assert summary.avg_sp == 0
        assert summary.avg_trsp == 0
        for metric in RANKING_METRICS:
            assert availability[metric] is False
        # identity is unaffected
        assert summary.location == "Downey, California, United States"

    def test_rankings_alone_flag_exactly_the_ranking_metrics(self):
        availability = aggregate_team(make_raw(rankings=[make_ranking()])).availability
        available = [m for m in Metric if availability[m]]
        assert available == list(RANKING_METRICS)

    def test_missing_field_is_a_contract_violation(self):
        ranking = make_ranking()
        del ranking["opr"]
        with pytest.raises(KeyError):
            aggregate_team(make_raw(rankings=[ranking]))

    def test_negative_values_are_averaged_as_given(self):
        raw = make_raw(rankings=[make_ranking(ccwm=-4.0), make_ranking(ccwm=-2.0)])
        assert aggregate_team(raw).summary.avg_ccwm == pytest.approx(-3.0)


class TestEventsAndSeason:
    def test_num_events_from_size(self, full_raw):
        assert aggregate_team(full_raw).summary.num_events == 2

    def test_events_without_size_fails_validation(self):
        with pytest.raises(ValidationError):
            RawTeamData(teams=[make_profile()], events={"status": 1})

    def test_season_ranking_uses_first_record(self):
        raw = make_raw(
            season_rankings=[
                {"vrating_rank": 42, "vrating": 71.25},
                {"vrating_rank": 7, "vrating": 90.0},
            ]
        )
        aggregate = aggregate_team(raw)
        assert aggregate.summary.vrating_rank == 42
        assert aggregate.summary.vrating == pytest.approx(71.25)
        assert aggregate.availability[Metric.VRATING_RANK]
        assert aggregate.availability[Metric.VRATING]

    def test_empty_season_rankings(self, empty_raw):
        aggregate = aggregate_team(empty_raw)
        assert aggregate.summary.vrating_rank == 0
        assert aggregate.summary.vrating == 0.0
        assert not aggregate.availability[Metric.VRATING_RANK]
        assert not aggregate.availability[Metric.VRATING]


class TestAwards:
    def test_award_counts_strip_suffix(self, full_raw):
        aggregate = aggregate_team(full_raw)
        assert aggregate.summary.awards == {"Excellence Award": 2, "Tournament Champions": 1}
        assert aggregate.availability[Metric.AWARDS]

    def test_award_order_does_not_matter(self):
        names = ["Design Award(VRC/VEXU)", "Tournament Champions", "Design Award(VRC/VEXU)"]
        forward = count_awards([{"name": n} for n in names])
        backward = count_awards([{"name": n} for n in reversed(names)])
        assert forward == backward == {"Design Award": 2, "Tournament Champions": 1}

    def test_empty_awards(self, empty_raw):
        aggregate = aggregate_team(empty_raw)
        assert aggregate.summary.awards == {}
        assert not aggregate.availability[Metric.AWARDS]


class TestSkills:
    def test_skills_divide_by_total_runs(self, full_raw):
        summary = aggregate_team(full_raw).summary
        assert summary.avg_skills_auton == 3  # 10 / 3, not 10
        assert summary.avg_skills_robot == 16  # 50 / 3, not 25
        assert summary.avg_skills_combined == 0

    def test_skills_available_even_without_matching_type(self, full_raw):
        availability = aggregate_team(full_raw).availability
        assert availability[Metric.SKILLS_COMBINED]

    def test_empty_skills_all_unavailable(self, empty_raw):
        aggregate = aggregate_team(empty_raw)
        assert aggregate.summary.avg_skills_auton == 0
        assert aggregate.summary.avg_skills_robot == 0
        assert aggregate.summary.avg_skills_combined == 0
        for metric in (Metric.SKILLS_AUTON, Metric.SKILLS_ROBOT, Metric.SKILLS_COMBINED):
            assert not aggregate.availability[metric]


class TestAvailability:
    def test_full_data_everything_available(self, full_raw):
        availability = aggregate_team(full_raw).availability
        assert availability.unavailable() == []
        assert len(availability.as_dict()) == 15

    def test_empty_data_everything_unavailable(self, empty_raw):
        availability = aggregate_team(empty_raw).availability
        assert set(availability.unavailable()) == set(Metric)

    def test_flags_are_scoped_per_call(self, full_raw, empty_raw):
        empty = aggregate_team(empty_raw)
        full = aggregate_team(full_raw)
        # the second call does not leak into the first result
        assert not empty.availability[Metric.OPR]
        assert full.availability[Metric.OPR]

    def test_idempotent(self, full_raw):
        assert aggregate_team(full_raw) == aggregate_team(full_raw)
        assert aggregate_team(full_raw).model_dump() == aggregate_team(full_raw).model_dump()
