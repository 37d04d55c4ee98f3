"""
Unit tests for launch statistics aggregation.
"""
import pytest
from datetime import datetime, timedelta, timezone

from launch_stats.aggregation import (
    LaunchStatsAggregator,
    build_snapshot,
    failed_launches,
    launches_in_window,
    launches_per_year,
    outcome_distribution,
    placeholder_site_name,
    recent_activity,
    success_rate,
    successful_launches,
    summarize,
    top_launch_sites,
    total_launches,
    unknown_launches,
)
from launch_stats.models.schemas import Launch, LaunchOutcome


NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


def make_launch(id="launch-1", name="Starlink", date_utc=None, success=None):
    """Build a launch the way the API would describe it."""
    return Launch.from_api({
        "id": id,
        "name": name,
        "date_utc": date_utc,
        "success": success,
    })


@pytest.fixture
def mixed_launches():
    """10 launches: 6 successes, 3 failures, 1 unknown."""
    outcomes = [True] * 6 + [False] * 3 + [None]
    return [
        make_launch(id=f"launch-{i}", success=success)
        for i, success in enumerate(outcomes)
    ]


class TestOutcomeCounts:
    """Test cases for outcome counting and success rate."""

    def test_mixed_outcomes(self, mixed_launches):
        """Test the 6/3/1 scenario."""
        assert total_launches(mixed_launches) == 10
        assert successful_launches(mixed_launches) == 6
        assert failed_launches(mixed_launches) == 3
        assert unknown_launches(mixed_launches) == 1
        assert success_rate(mixed_launches) == 60.0

    def test_counts_partition_total(self, mixed_launches):
        """Test that successes, failures and unknowns add up to the total."""
        for size in range(len(mixed_launches) + 1):
            subset = mixed_launches[:size]
            assert (
                successful_launches(subset) + failed_launches(subset) + unknown_launches(subset)
                == total_launches(subset)
            )

    @pytest.mark.parametrize("launches", [None, []])
    def test_empty_input(self, launches):
        """Test that missing or empty lists produce zeros."""
        assert total_launches(launches) == 0
        assert successful_launches(launches) == 0
        assert failed_launches(launches) == 0
        assert unknown_launches(launches) == 0
        assert success_rate(launches) == 0

    def test_success_rate_rounds_to_one_decimal(self):
        """Test rounding of the success rate."""
        launches = [make_launch(success=True), make_launch(success=False), make_launch(success=False)]

        assert success_rate(launches) == 33.3

    def test_success_rate_all_unknown(self):
        """Test that unknown outcomes count toward the total but not successes."""
        launches = [make_launch(success=None), make_launch(success=None)]

        assert success_rate(launches) == 0.0
        assert unknown_launches(launches) == 2

    def test_success_rate_bounds(self, mixed_launches):
        """Test that the rate stays within 0 and 100."""
        all_success = [make_launch(success=True) for _ in range(3)]

        assert success_rate(all_success) == 100.0
        assert 0.0 <= success_rate(mixed_launches) <= 100.0

    def test_accepts_generators(self, mixed_launches):
        """Test that one-shot iterables are counted correctly."""
        assert success_rate(launch for launch in mixed_launches) == 60.0

    def test_summarize(self, mixed_launches):
        """Test the summary model."""
        summary = summarize(mixed_launches)

        assert summary.total_launches == 10
        assert summary.successful_launches == 6
        assert summary.failed_launches == 3
        assert summary.unknown_launches == 1
        assert summary.success_rate == 60.0


class TestRecencyWindows:
    """Test cases for recent activity windows."""

    @pytest.fixture
    def dated_launches(self):
        ages = [1, 29, 30, 31, 60, 89, 120, 364, 400]
        launches = [make_launch(id=f"l{age}", date_utc=NOW - timedelta(days=age)) for age in ages]
        launches.append(make_launch(id="undated", date_utc=None))
        return launches

    def test_window_counts(self, dated_launches):
        """Test counts for the standard windows."""
        assert launches_in_window(dated_launches, 30, NOW) == 3
        assert launches_in_window(dated_launches, 90, NOW) == 6
        assert launches_in_window(dated_launches, 365, NOW) == 8

    def test_window_boundary_is_inclusive(self):
        """Test that a launch exactly at the cutoff is counted."""
        launches = [make_launch(date_utc=NOW - timedelta(days=30))]

        assert launches_in_window(launches, 30, NOW) == 1

    def test_undated_launches_excluded(self):
        """Test that launches without a date never count."""
        launches = [make_launch(date_utc=None), make_launch(date_utc=None)]

        assert launches_in_window(launches, 365, NOW) == 0

    def test_windows_are_monotonic(self, dated_launches):
        """Test that larger windows never count fewer launches."""
        counts = [launches_in_window(dated_launches, days, NOW) for days in (30, 90, 365)]

        assert counts == sorted(counts)

    @pytest.mark.parametrize("days,expected", [(10**6, 9), (10**10, 9), (-10**6, 0)])
    def test_window_beyond_datetime_range(self, dated_launches, days, expected):
        """Test that windows reaching past the datetime range are clamped."""
        assert launches_in_window(dated_launches, days, NOW) == expected
        assert LaunchStatsAggregator(dated_launches, clock=lambda: NOW).launches_in_window(days) == expected

    def test_naive_now_is_utc(self, dated_launches):
        """Test that a naive reference time is treated as UTC."""
        naive_now = NOW.replace(tzinfo=None)

        assert launches_in_window(dated_launches, 30, naive_now) == launches_in_window(dated_launches, 30, NOW)

    def test_default_now_uses_current_time(self):
        """Test the default reference time."""
        launches = [make_launch(date_utc=datetime.now(timezone.utc) - timedelta(days=1))]

        assert launches_in_window(launches, 30) == 1

    def test_recent_activity(self, dated_launches):
        """Test the recent activity model."""
        activity = recent_activity(dated_launches, NOW)

        assert activity.last_30_days == 3
        assert activity.last_90_days == 6
        assert activity.last_365_days == 8

    def test_recent_activity_empty(self):
        """Test recent activity without launches."""
        activity = recent_activity(None, NOW)

        assert activity.last_30_days == 0
        assert activity.last_365_days == 0


class TestOutcomeDistribution:
    """Test cases for outcome chart data."""

    def test_distribution_order(self, mixed_launches):
        """Test that values follow the fixed label order."""
        distribution = outcome_distribution(mixed_launches)

        assert distribution.labels == ["Success", "Failed", "Unknown"]
        assert distribution.data == [6.0, 3.0, 1.0]
        assert all(isinstance(value, float) for value in distribution.data)

    def test_palette_matches_labels(self, mixed_launches):
        """Test that each label has a colour."""
        distribution = outcome_distribution(mixed_launches)

        assert distribution.palette == ["#00C853", "#F44336", "#FFA726"]
        assert len(distribution.palette) == len(distribution.labels)

    def test_empty_distribution(self):
        """Test outcome data for no launches."""
        assert outcome_distribution([]).data == [0.0, 0.0, 0.0]


class TestLaunchesPerYear:
    """Test cases for the per-year series."""

    def test_two_years(self):
        """Test two launches in 2020 and three in 2021."""
        launches = [
            make_launch(id="a", date_utc=datetime(2021, 3, 1, tzinfo=timezone.utc)),
            make_launch(id="b", date_utc=datetime(2020, 5, 1, tzinfo=timezone.utc)),
            make_launch(id="c", date_utc=datetime(2021, 7, 1, tzinfo=timezone.utc)),
            make_launch(id="d", date_utc=datetime(2020, 12, 1, tzinfo=timezone.utc)),
            make_launch(id="e", date_utc=datetime(2021, 12, 31, tzinfo=timezone.utc)),
        ]

        series = launches_per_year(launches)

        assert series.labels == ["2020", "2021"]
        assert series.data == [2.0, 3.0]
        assert series.name == "Launches"

    def test_undated_launches_skipped(self):
        """Test that undated launches are silently left out."""
        launches = [
            make_launch(id="a", date_utc=datetime(2019, 1, 1, tzinfo=timezone.utc)),
            make_launch(id="b", date_utc=None),
        ]

        series = launches_per_year(launches)

        assert series.labels == ["2019"]
        assert sum(series.data) == 1

    def test_year_is_taken_in_utc(self):
        """Test that an offset timestamp is grouped by its UTC year."""
        new_years_eve_local = datetime(2020, 12, 31, 20, 0, tzinfo=timezone(timedelta(hours=-5)))
        launches = [make_launch(date_utc=new_years_eve_local)]

        assert launches_per_year(launches).labels == ["2021"]

    def test_labels_ascending_and_counts_sum(self):
        """Test ordering and totals across many years."""
        years = [2015, 2010, 2022, 2010, 2018, 2022, 2022]
        launches = [
            make_launch(id=str(i), date_utc=datetime(year, 6, 1, tzinfo=timezone.utc))
            for i, year in enumerate(years)
        ]
        launches.append(make_launch(id="undated"))

        series = launches_per_year(launches)

        assert series.labels == sorted(set(series.labels))
        assert sum(series.data) == len(years)

    def test_empty(self):
        """Test the series for an empty list."""
        series = launches_per_year([])

        assert series.labels == []
        assert series.data == []


class TestTopLaunchSites:
    """Test cases for launch site ranking."""

    def test_placeholder_site_name(self):
        """Test the placeholder site heuristic."""
        assert placeholder_site_name(make_launch(id="abc", name="CRS-1")) == "abc"
        assert placeholder_site_name(make_launch(id="abc", name="")) == "Unknown Site"
        assert placeholder_site_name(make_launch(id="abc", name="   ")) == "Unknown Site"
        assert placeholder_site_name(make_launch(id=None, name="CRS-1")) == "Unknown Site"

    def test_named_launches_become_own_sites(self):
        """Test that the placeholder groups each named launch on its own."""
        launches = [make_launch(id=f"id-{i}", name=f"Mission {i}", success=True) for i in range(3)]

        sites = top_launch_sites(launches)

        assert [site.site_name for site in sites] == ["id-0", "id-1", "id-2"]
        assert all(site.launch_count == 1 for site in sites)
        assert all(site.success_rate == 100.0 for site in sites)

    def test_unnamed_launches_group_as_unknown_site(self):
        """Test that unnamed launches share the Unknown Site bucket."""
        launches = [
            make_launch(id="a", name="", success=True),
            make_launch(id="b", name="", success=False),
            make_launch(id="c", name="Named", success=True),
        ]

        sites = top_launch_sites(launches)

        assert sites[0].site_name == "Unknown Site"
        assert sites[0].launch_count == 2
        assert sites[0].success_count == 1
        assert sites[0].success_rate == 50.0

    def test_empty_id_excluded_even_from_largest_group(self):
        """Test that id-less launches are dropped before grouping."""
        launches = [make_launch(id="", name="", success=True) for _ in range(5)]
        launches += [make_launch(id="   ", name="", success=True) for _ in range(3)]
        launches.append(make_launch(id="real", name="Named", success=False))

        sites = top_launch_sites(launches)

        assert len(sites) == 1
        assert sites[0].site_name == "real"
        assert sites[0].launch_count == 1
        assert sites[0].success_count == 0

    def test_limit_and_order(self):
        """Test truncation and descending order by launch count."""
        def by_site(launch):
            return launch.name

        launches = []
        for site, count in [("A", 1), ("B", 4), ("C", 2), ("D", 4), ("E", 3), ("F", 1), ("G", 5)]:
            launches += [make_launch(id=f"{site}{i}", name=site, success=i % 2 == 0) for i in range(count)]

        sites = top_launch_sites(launches, n=5, resolve_site_name=by_site)

        assert len(sites) == 5
        assert [site.site_name for site in sites] == ["G", "B", "D", "E", "C"]
        counts = [site.launch_count for site in sites]
        assert counts == sorted(counts, reverse=True)
        assert all(site.success_count <= site.launch_count for site in sites)

    def test_ties_keep_first_seen_order(self):
        """Test that equal counts keep discovery order."""
        launches = [
            make_launch(id="z", name="Z"),
            make_launch(id="y", name="Y"),
            make_launch(id="x", name="X"),
        ]

        sites = top_launch_sites(launches, n=2)

        assert [site.site_name for site in sites] == ["z", "y"]

    def test_custom_resolver(self):
        """Test grouping with a caller supplied resolver."""
        pads = {"a": "SLC-40", "b": "LC-39A", "c": "SLC-40"}
        launches = [make_launch(id=key, success=True) for key in pads]

        sites = top_launch_sites(launches, resolve_site_name=lambda launch: pads[launch.id])

        assert sites[0].site_name == "SLC-40"
        assert sites[0].launch_count == 2
        assert sites[1].site_name == "LC-39A"

    @pytest.mark.parametrize("n", [0, -1])
    def test_non_positive_limit(self, mixed_launches, n):
        """Test that a non-positive limit returns nothing."""
        assert top_launch_sites(mixed_launches, n=n) == []

    def test_empty(self):
        """Test site ranking with no launches."""
        assert top_launch_sites([]) == []
        assert top_launch_sites(None) == []


class TestSnapshot:
    """Test cases for the combined snapshot."""

    def test_snapshot_contents(self, mixed_launches):
        """Test that the snapshot collects every view."""
        snapshot = build_snapshot(mixed_launches, now=NOW, top_sites_limit=3)

        assert snapshot.generated_at == NOW
        assert snapshot.summary.success_rate == 60.0
        assert snapshot.outcomes.data == [6.0, 3.0, 1.0]
        assert snapshot.per_year.labels == []
        assert len(snapshot.top_sites) == 3

    def test_empty_snapshot(self):
        """Test a snapshot of an empty list."""
        snapshot = build_snapshot([], now=NOW)

        assert snapshot.summary.total_launches == 0
        assert snapshot.summary.success_rate == 0
        assert snapshot.top_sites == []
        assert snapshot.per_year.labels == []


class TestLaunchStatsAggregator:
    """Test cases for the aggregator wrapper."""

    def test_properties(self, mixed_launches):
        """Test that properties match the module functions."""
        aggregator = LaunchStatsAggregator(mixed_launches, clock=lambda: NOW)

        assert aggregator.total_launches == 10
        assert aggregator.successful_launches == 6
        assert aggregator.failed_launches == 3
        assert aggregator.unknown_launches == 1
        assert aggregator.success_rate == 60.0
        assert aggregator.outcome_distribution.data == [6.0, 3.0, 1.0]
        assert aggregator.launches_per_year.labels == []
        assert len(aggregator.top_launch_sites(2)) == 2

    def test_windows_use_clock(self):
        """Test that recency properties are measured from the clock."""
        launches = [
            make_launch(id="recent", date_utc=NOW - timedelta(days=10)),
            make_launch(id="older", date_utc=NOW - timedelta(days=100)),
        ]
        aggregator = LaunchStatsAggregator(launches, clock=lambda: NOW)

        assert aggregator.launches_last_30_days == 1
        assert aggregator.launches_last_90_days == 1
        assert aggregator.launches_last_year == 2
        assert aggregator.launches_in_window(7) == 0

    def test_copy_isolates_source_list(self, mixed_launches):
        """Test that later changes to the input list do not leak in."""
        aggregator = LaunchStatsAggregator(mixed_launches)
        mixed_launches.append(make_launch(success=False))

        assert aggregator.total_launches == 10

    def test_none_input(self):
        """Test the aggregator over no data."""
        aggregator = LaunchStatsAggregator(None)

        assert aggregator.total_launches == 0
        assert aggregator.success_rate == 0
        assert aggregator.top_launch_sites() == []

    def test_snapshot_uses_resolver(self):
        """Test that the aggregator passes its resolver to the snapshot."""
        launches = [make_launch(id=str(i)) for i in range(4)]
        aggregator = LaunchStatsAggregator(launches, resolve_site_name=lambda launch: "Pad", clock=lambda: NOW)

        snapshot = aggregator.snapshot()

        assert snapshot.generated_at == NOW
        assert [site.site_name for site in snapshot.top_sites] == ["Pad"]
        assert snapshot.top_sites[0].launch_count == 4
        assert snapshot.summary.unknown_launches == 4

    def test_outcome_is_enum(self, mixed_launches):
        """Test that outcomes are modelled as variants, not booleans."""
        assert {launch.outcome for launch in mixed_launches} == {
            LaunchOutcome.SUCCESS, LaunchOutcome.FAILURE, LaunchOutcome.UNKNOWN
        }
