"""
Tests for timeline splicing, regeneration triggers and the session holder.
"""

from dataclasses import replace
from random import Random

import pytest

from growthsim import (
    DEFAULT_PARAMS,
    BranchType,
    CustomLightSource,
    GrowthPoint,
    GrowthSession,
    activation_changes_next_day,
    crosses_activation_day,
    generate_growth_points,
    observed_growth_rate,
    splice_timeline,
    truncate_after,
)

SMALL = replace(DEFAULT_PARAMS, stem_count=2, root_count=3)
LIGHT = CustomLightSource(id=1, x=0.0, y=0.0, z=6.0, intensity=120.0, start_day=3)


def straight_stem(days: int) -> list[GrowthPoint]:
    return [GrowthPoint(0.0, 0.0, 2.0 * day, day, BranchType.STEM, 0) for day in range(days + 1)]


class TestSplicing:
    def test_truncate_keeps_checkpoint_day(self) -> None:
        assert [point.day for point in truncate_after(straight_stem(5), 2)] == [0, 1, 2]

    def test_splice_replaces_suffix(self) -> None:
        new_suffix = [GrowthPoint(1.0, 1.0, 1.0, day, BranchType.STEM, 0) for day in (3, 4)]
        spliced = splice_timeline(straight_stem(5), 2, new_suffix)
        assert [point.day for point in spliced] == [0, 1, 2, 3, 4]
        assert spliced[3].x == 1.0


class TestRegenerationTriggers:
    def test_scrubbing_across_start_day(self) -> None:
        assert crosses_activation_day(2, 3, [LIGHT])
        assert crosses_activation_day(0, 9, [LIGHT])
        assert crosses_activation_day(5, 3, [LIGHT])
        assert crosses_activation_day(5, 1, [LIGHT])

    def test_scrubbing_without_crossing(self) -> None:
        assert not crosses_activation_day(0, 2, [LIGHT])
        assert not crosses_activation_day(3, 8, [LIGHT])
        assert not crosses_activation_day(6, 4, [LIGHT])
        assert not crosses_activation_day(0, 9, [])

    def test_activation_tomorrow(self) -> None:
        assert activation_changes_next_day(2, [LIGHT])
        assert not activation_changes_next_day(3, [LIGHT])
        assert not activation_changes_next_day(0, [LIGHT])


class TestObservedGrowthRate:
    def test_distance_per_day(self) -> None:
        assert observed_growth_rate(straight_stem(5), 4) == pytest.approx(2.0)

    def test_single_day_is_zero(self) -> None:
        assert observed_growth_rate(straight_stem(5), 0) == 0.0


class TestGrowthSession:
    """Tests for the interactive timeline holder."""

    def make_session(self, days: int = 10) -> GrowthSession:
        session = GrowthSession(params=SMALL, simulation_days=days, rng=Random(13))
        session.generate()
        return session

    def test_generate_fills_timeline(self) -> None:
        session = self.make_session()
        assert len(session.points) == 5 * 11
        assert session.current_day == 0

    def test_regenerating_rewinds_to_day_zero(self) -> None:
        session = self.make_session()
        session.set_day(5)
        session.generate()
        assert session.current_day == 0
        assert {point.day for point in session.visible_points()} == {0}

    def test_light_change_regenerates_future_only(self) -> None:
        session = self.make_session()
        session.set_day(4)
        prefix = truncate_after(session.points, 4)
        assert session.set_light_sources([LIGHT])
        assert truncate_after(session.points, 4) == prefix
        assert len(session.points) == 5 * 11
        assert max(point.day for point in session.points) == 10

    def test_light_change_at_last_day_does_not_regenerate(self) -> None:
        session = self.make_session()
        session.set_day(10)
        before = list(session.points)
        assert not session.set_light_sources([LIGHT])
        assert session.points == before

    def test_scrub_across_activation_regenerates(self) -> None:
        session = GrowthSession(params=SMALL, light_sources=[LIGHT], simulation_days=10, rng=Random(13))
        session.generate()
        assert not session.set_day(2)
        assert session.set_day(6)
        assert session.current_day == 6
        assert len(session.points) == 5 * 11

    def test_day_is_clamped(self) -> None:
        session = self.make_session()
        session.set_day(99)
        assert session.current_day == 10
        session.set_day(-4)
        assert session.current_day == 0

    def test_advance_plays_to_the_end(self) -> None:
        session = GrowthSession(params=SMALL, light_sources=[LIGHT], simulation_days=5, rng=Random(13))
        session.generate()
        steps = 0
        while session.advance():
            steps += 1
        assert session.current_day == 5
        assert steps == 4
        assert not session.advance()
        assert len(session.points) == 5 * 6

    def test_visible_points_and_reset(self) -> None:
        session = self.make_session()
        session.set_day(3)
        assert {point.day for point in session.visible_points()} == {0, 1, 2, 3}
        assert len(session.points_for_day(3)) == 5
        session.reset()
        assert session.current_day == 0

    def test_regenerate_past_the_end_is_empty(self) -> None:
        session = self.make_session()
        assert session.regenerate_from(10) == []
        assert len(session.points) == 5 * 11

    def test_matches_direct_generation(self) -> None:
        session = GrowthSession(params=SMALL, simulation_days=4, rng=Random(1))
        assert session.generate() == generate_growth_points(4, SMALL, [], Random(1))
