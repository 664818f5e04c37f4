"""Tests for the 16-compartment tissue loading model."""

import math

import numpy as np
import pytest

from decoplan.buhlmann_constants import (
    HE_HALFTIME_FACTOR,
    NUM_COMPARTMENTS,
    WATER_VAPOR_PRESSURE,
    ZH_L16C_HALFTIMES,
    decay_constants,
    haldane_vec,
    schreiner_vec,
)
from decoplan.tissue_model import Compartment, DiveSegment, TissueCompartmentModel


def _haldane(p0, p_insp, half_time, t):
    return p0 + (p_insp - p0) * (1 - math.exp(-math.log(2) / half_time * t))


class TestInitialState:
    """A fresh model is air-equilibrated at the surface."""

    def test_sixteen_compartments(self):
        model = TissueCompartmentModel()
        assert len(model.compartments) == NUM_COMPARTMENTS

    def test_surface_equilibrium(self):
        model = TissueCompartmentModel()
        np.testing.assert_allclose(model.n2_pressures, 0.79)
        np.testing.assert_allclose(model.he_pressures, 0.0)

    def test_zh_l16c_coefficients(self):
        """First compartment uses the 5 min / 1.1696 / 0.5578 entry."""
        first = TissueCompartmentModel().compartments[0]
        assert first.half_time == 5.0
        assert first.a == pytest.approx(1.1696)
        assert first.b == pytest.approx(0.5578)
        last = TissueCompartmentModel().compartments[-1]
        assert last.half_time == 635.0

    def test_gradient_factors_stored(self):
        model = TissueCompartmentModel(gf_low=0.4, gf_high=0.7)
        assert model.gf_low == 0.4
        assert model.gf_high == 0.7

    def test_surface_ceiling_is_zero(self):
        assert TissueCompartmentModel().ceiling() == 0


class TestHaldaneUpdate:
    """Constant-depth update against hand-computed values."""

    def test_air_30m_20min_compartment_2(self):
        """8 min compartment: 0.79 + (3.1105 - 0.79) * (1 - 2^-2.5)."""
        model = TissueCompartmentModel()
        model.update(30.0, 20.0, 0.21, 0.0)

        p_insp = (4.0 - WATER_VAPOR_PRESSURE) * 0.79
        expected = _haldane(0.79, p_insp, 8.0, 20.0)
        assert model.n2_pressures[1] == pytest.approx(expected)
        assert model.n2_pressures[1] == pytest.approx(2.7003, abs=1e-3)

    def test_every_compartment_independent(self):
        model = TissueCompartmentModel()
        model.update(40.0, 15.0, 0.21, 0.0)

        p_insp = (5.0 - WATER_VAPOR_PRESSURE) * 0.79
        for c in model.compartments:
            assert c.n2_pressure == pytest.approx(_haldane(0.79, p_insp, c.half_time, 15.0))

    def test_helium_uses_faster_half_time(self):
        """He half-time is the N2 half-time times 0.4."""
        model = TissueCompartmentModel()
        model.update(50.0, 25.0, 0.21, 0.35)

        p_he = (6.0 - WATER_VAPOR_PRESSURE) * 0.35
        for c in model.compartments:
            expected = _haldane(0.0, p_he, c.half_time * HE_HALFTIME_FACTOR, 25.0)
            assert c.he_pressure == pytest.approx(expected)

    def test_zero_time_is_noop(self):
        model = TissueCompartmentModel()
        model.update(40.0, 0.0, 0.21, 0.0)
        np.testing.assert_allclose(model.n2_pressures, 0.79)

    def test_long_exposure_reaches_inspired(self):
        """After ~16 half-lives of the slowest compartment tissue matches inspired."""
        model = TissueCompartmentModel()
        model.update(20.0, 10000.0, 0.21, 0.0)
        p_insp = (3.0 - WATER_VAPOR_PRESSURE) * 0.79
        np.testing.assert_allclose(model.n2_pressures, p_insp, atol=1e-4)

    def test_fast_compartment_loads_faster(self):
        model = TissueCompartmentModel()
        model.update(30.0, 10.0, 0.21, 0.0)
        n2 = model.n2_pressures
        assert np.all(np.diff(n2) < 0)

    def test_offgassing_at_shallow_depth(self):
        model = TissueCompartmentModel()
        model.update(40.0, 30.0, 0.21, 0.0)
        loaded = model.n2_pressures
        model.update(3.0, 10.0, 0.21, 0.0)
        assert np.all(model.n2_pressures[:8] < loaded[:8])


class TestSchreinerUpdate:
    """Linear depth changes."""

    def test_zero_rate_equals_haldane(self):
        pt0 = np.array([0.75, 0.80, 0.85])
        k = decay_constants([4.0, 8.0, 12.5])
        np.testing.assert_allclose(
            schreiner_vec(pt0, 2.5, 0.0, 10.0, k),
            haldane_vec(pt0, 2.5, 10.0, k),
            atol=1e-10,
        )

    def test_flat_linear_update_matches_update(self):
        a = TissueCompartmentModel()
        b = TissueCompartmentModel()
        a.update(30.0, 12.0, 0.21, 0.35)
        b.update_linear(30.0, 30.0, 12.0, 0.21, 0.35)
        np.testing.assert_allclose(a.n2_pressures, b.n2_pressures, atol=1e-10)
        np.testing.assert_allclose(a.he_pressures, b.he_pressures, atol=1e-10)

    def test_descent_between_surface_and_bottom(self):
        """A 0 -> 30m descent loads more than the surface, less than the bottom."""
        surface = TissueCompartmentModel()
        bottom = TissueCompartmentModel()
        descent = TissueCompartmentModel()
        surface.update(0.0, 3.0, 0.21, 0.0)
        bottom.update(30.0, 3.0, 0.21, 0.0)
        descent.update_linear(0.0, 30.0, 3.0, 0.21, 0.0)

        assert np.all(descent.n2_pressures > surface.n2_pressures)
        assert np.all(descent.n2_pressures < bottom.n2_pressures)

    def test_zero_time_linear_is_noop(self):
        model = TissueCompartmentModel()
        model.update_linear(0.0, 30.0, 0.0, 0.21, 0.0)
        np.testing.assert_allclose(model.n2_pressures, 0.79)


class TestSegments:

    def test_run_segments_matches_manual_updates(self):
        segments = [
            DiveSegment(depth_m=0.0, end_depth_m=30.0, time_min=1.5, o2=0.21),
            DiveSegment(depth_m=30.0, time_min=20.0, o2=0.21),
            DiveSegment(depth_m=30.0, end_depth_m=5.0, time_min=2.5, o2=0.21),
            DiveSegment(depth_m=5.0, time_min=3.0, o2=0.21),
        ]
        by_segments = TissueCompartmentModel()
        by_segments.run_segments(segments)

        manual = TissueCompartmentModel()
        manual.update_linear(0.0, 30.0, 1.5, 0.21, 0.0)
        manual.update(30.0, 20.0, 0.21, 0.0)
        manual.update_linear(30.0, 5.0, 2.5, 0.21, 0.0)
        manual.update(5.0, 3.0, 0.21, 0.0)

        np.testing.assert_allclose(by_segments.n2_pressures, manual.n2_pressures)

    def test_segments_are_frozen(self):
        segment = DiveSegment(depth_m=10.0, time_min=5.0)
        with pytest.raises(Exception):  # FrozenInstanceError
            segment.depth_m = 20.0


class TestStateAccess:

    def test_pressure_arrays_are_copies(self):
        model = TissueCompartmentModel()
        n2 = model.n2_pressures
        n2[:] = 5.0
        np.testing.assert_allclose(model.n2_pressures, 0.79)

    def test_total_inert_is_sum(self):
        model = TissueCompartmentModel()
        model.update(50.0, 25.0, 0.21, 0.35)
        np.testing.assert_allclose(
            model.total_inert_pressures, model.n2_pressures + model.he_pressures
        )
        for c in model.compartments:
            assert c.total_inert_pressure == pytest.approx(c.n2_pressure + c.he_pressure)

    def test_compartment_snapshot_is_frozen(self):
        c = TissueCompartmentModel().compartments[0]
        assert isinstance(c, Compartment)
        with pytest.raises(Exception):  # FrozenInstanceError
            c.n2_pressure = 2.0

    def test_copy_is_independent(self):
        model = TissueCompartmentModel(gf_low=0.5, gf_high=0.8)
        model.update(30.0, 10.0, 0.21, 0.0)
        clone = model.copy()
        clone.update(30.0, 10.0, 0.21, 0.0)

        assert clone.gf_high == 0.8
        assert np.all(clone.n2_pressures > model.n2_pressures)

    def test_halftimes_match_table(self):
        model = TissueCompartmentModel()
        assert [c.half_time for c in model.compartments] == list(ZH_L16C_HALFTIMES)


class TestMonotonicCeiling:
    """More exposure never lowers the ceiling right after the bottom phase."""

    def test_longer_bottom_time(self):
        ceilings = []
        for minutes in range(5, 65, 5):
            model = TissueCompartmentModel()
            model.update(40.0, minutes, 0.21, 0.0)
            ceilings.append(model.ceiling())
        assert ceilings == sorted(ceilings)
        assert ceilings[-1] > 0

    def test_deeper_bottom(self):
        ceilings = []
        for depth in range(10, 65, 5):
            model = TissueCompartmentModel()
            model.update(float(depth), 20.0, 0.21, 0.0)
            ceilings.append(model.ceiling())
        assert ceilings == sorted(ceilings)

    def test_trimix_loads_at_least_as_much_as_air(self):
        """Same inert fraction, but He's shorter half-time loads faster."""
        air = TissueCompartmentModel()
        trimix = TissueCompartmentModel()
        air.update(50.0, 25.0, 0.21, 0.0)
        trimix.update(50.0, 25.0, 0.21, 0.35)

        assert np.all(trimix.total_inert_pressures > air.total_inert_pressures)
        assert trimix.ceiling() >= air.ceiling()
