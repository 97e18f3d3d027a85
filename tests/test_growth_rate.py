"""
Tests for the environment-driven growth rate.

These tests check each environmental factor in isolation and the
guarantees around arrest and invalid arithmetic.
"""

import math
from dataclasses import replace

import pytest

from growthsim import DEFAULT_PARAMS, BranchType, calculate_growth_rate, is_growth_arrested

EARTHLIKE = replace(DEFAULT_PARAMS, microgravity=False)


class TestGrowthRateFactors:
    """Tests for individual multiplicative factors."""

    def test_stems_grow_faster_than_roots(self) -> None:
        """Base rate favours stems."""
        stem = calculate_growth_rate(EARTHLIKE, BranchType.STEM)
        root = calculate_growth_rate(EARTHLIKE, BranchType.ROOT)
        assert stem > root > 0.0

    def test_radiation_below_threshold_has_no_effect(self) -> None:
        """Radiation up to the threshold leaves the rate unchanged."""
        low = calculate_growth_rate(replace(EARTHLIKE, radiation=0.0), BranchType.STEM)
        at_threshold = calculate_growth_rate(replace(EARTHLIKE, radiation=0.5), BranchType.STEM)
        assert low == pytest.approx(at_threshold)

    def test_radiation_linear_penalty(self) -> None:
        """Radiation of 1.0 costs five percent."""
        low = calculate_growth_rate(replace(EARTHLIKE, radiation=0.2), BranchType.STEM)
        high = calculate_growth_rate(replace(EARTHLIKE, radiation=1.0), BranchType.STEM)
        assert high / low == pytest.approx(0.95)

    def test_radiation_above_stop_threshold_arrests_growth(self) -> None:
        """Above the hard stop the rate is exactly zero."""
        params = replace(EARTHLIKE, radiation=2.0)
        assert is_growth_arrested(params)
        assert calculate_growth_rate(params, BranchType.STEM) == 0.0
        assert calculate_growth_rate(params, BranchType.ROOT) == 0.0

    def test_co2_factor_is_clamped(self) -> None:
        """CO2 beyond the upper clamp gives no extra growth."""
        high = calculate_growth_rate(replace(EARTHLIKE, co2=1200.0), BranchType.STEM)
        extreme = calculate_growth_rate(replace(EARTHLIKE, co2=10000.0), BranchType.STEM)
        assert high == pytest.approx(extreme)

    def test_temperature_optimum(self) -> None:
        """Deviation from the optimum slows growth."""
        optimal = calculate_growth_rate(replace(EARTHLIKE, temp=23.0), BranchType.STEM)
        hot = calculate_growth_rate(replace(EARTHLIKE, temp=35.0), BranchType.STEM)
        cold = calculate_growth_rate(replace(EARTHLIKE, temp=11.0), BranchType.STEM)
        assert optimal > hot
        assert hot == pytest.approx(cold)

    def test_humidity_outside_band(self) -> None:
        """Dry or saturated air applies the fixed penalty."""
        comfortable = calculate_growth_rate(EARTHLIKE, BranchType.ROOT)
        dry = calculate_growth_rate(replace(EARTHLIKE, humidity=20.0), BranchType.ROOT)
        wet = calculate_growth_rate(replace(EARTHLIKE, humidity=90.0), BranchType.ROOT)
        assert dry / comfortable == pytest.approx(0.8)
        assert wet == pytest.approx(dry)

    def test_roots_less_sensitive_to_light(self) -> None:
        """Raising light intensity helps stems more than roots."""
        dim = replace(EARTHLIKE, light_intensity=100.0)
        bright = replace(EARTHLIKE, light_intensity=300.0)
        stem_gain = calculate_growth_rate(bright, BranchType.STEM) / calculate_growth_rate(dim, BranchType.STEM)
        root_gain = calculate_growth_rate(bright, BranchType.ROOT) / calculate_growth_rate(dim, BranchType.ROOT)
        assert stem_gain == pytest.approx(2.4)
        assert 1.0 < root_gain < stem_gain

    def test_microgravity_accelerates_stems_and_slows_roots(self) -> None:
        """Microgravity pushes stems and roots in opposite directions."""
        space = replace(EARTHLIKE, microgravity=True)
        assert calculate_growth_rate(space, BranchType.STEM) > calculate_growth_rate(EARTHLIKE, BranchType.STEM)
        assert calculate_growth_rate(space, BranchType.ROOT) < calculate_growth_rate(EARTHLIKE, BranchType.ROOT)


class TestGrowthRateSafety:
    """Tests for invalid inputs."""

    def test_nan_temperature_returns_neutral_rate(self) -> None:
        """NaN never leaks out of the rate model."""
        params = replace(EARTHLIKE, temp=math.nan)
        assert calculate_growth_rate(params, BranchType.STEM) == 1.0

    def test_rate_is_never_negative(self) -> None:
        """Heavy exaggeration cannot drive the root rate negative."""
        params = replace(DEFAULT_PARAMS, exaggeration_factor=1.0, radiation=1.4)
        assert calculate_growth_rate(params, BranchType.ROOT) >= 0.0
