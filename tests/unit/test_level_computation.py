"""Level table tests. Values must match the web client's level table."""

import pytest

from joinup.gamification.level_thresholds import (
    LEVEL_THRESHOLDS,
    MAX_LEVEL,
    compute_level,
    level_progress,
)


class TestLevelComputation:

    def test_level_1_at_zero_points(self):
        info = compute_level(0)
        assert info.level == 1
        assert info.name == "Newcomer"
        assert info.next_level_points == 500

    def test_boundary_499_is_still_level_1(self):
        assert compute_level(499).level == 1

    def test_level_2_at_500(self):
        info = compute_level(500)
        assert info.level == 2
        assert info.name == "Explorer"
        assert info.next_level_points == 1000

    def test_level_5_mid_band(self):
        info = compute_level(4000)
        assert info.level == 5
        assert info.name == "Expert"

    def test_hall_of_fame_at_22000(self):
        info = compute_level(22000)
        assert info.level == 10
        assert info.name == "Hall of Fame"

    def test_max_level_saturates(self):
        """At the top level next_level_points repeats the current threshold."""
        info = compute_level(1_000_000)
        assert info.level == MAX_LEVEL
        assert info.is_max
        assert info.next_level_points == 22000
        assert info.next_level_points < 1_000_000

    def test_negative_points_treated_as_zero(self):
        assert compute_level(-50).level == 1

    @pytest.mark.parametrize("threshold", LEVEL_THRESHOLDS, ids=lambda t: t["name"])
    def test_every_threshold_maps_to_its_own_level(self, threshold):
        info = compute_level(threshold["min_points"])
        assert info.level == threshold["level"]
        assert info.name == threshold["name"]
        assert info.min_points == threshold["min_points"]

    def test_level_is_monotone_in_points(self):
        previous = 0
        for points in range(0, 25000, 37):
            level = compute_level(points).level
            assert level >= previous
            previous = level

    def test_table_has_ten_strictly_increasing_thresholds(self):
        assert len(LEVEL_THRESHOLDS) == 10
        mins = [t["min_points"] for t in LEVEL_THRESHOLDS]
        assert mins == sorted(set(mins))
        assert [t["level"] for t in LEVEL_THRESHOLDS] == list(range(1, 11))


class TestLevelProgress:

    def test_progress_midway_through_level_2(self):
        progress = level_progress(750)
        assert progress["points_into_level"] == 250
        assert progress["points_to_next_level"] == 250
        assert progress["percent"] == 50.0

    def test_progress_at_boundary(self):
        progress = level_progress(1000)
        assert progress["points_into_level"] == 0
        assert progress["points_to_next_level"] == 1000

    def test_progress_at_max_level(self):
        progress = level_progress(30000)
        assert progress["points_to_next_level"] == 0
        assert progress["percent"] == 100.0
