"""Tests for the scoring sub-scores and composite score (deterministic)."""

import pytest
from datetime import datetime, timedelta, timezone

from rightnow.engine.scoring import energy_fit, urgency, time_fit, calculate_score
from rightnow.models.task import Capacity, EnergyLevel


class TestEnergyFit:
    """Test energy_fit() lookup table."""

    @pytest.mark.parametrize(
        "cap, energy, expected",
        [
            (Capacity.LOW, EnergyLevel.LOW, 1.0),
            (Capacity.LOW, EnergyLevel.MED, 0.7),
            (Capacity.LOW, EnergyLevel.HIGH, 0.4),
            (Capacity.MED, EnergyLevel.LOW, 1.0),
            (Capacity.MED, EnergyLevel.MED, 1.0),
            (Capacity.MED, EnergyLevel.HIGH, 0.7),
            (Capacity.HIGH, EnergyLevel.LOW, 0.4),
            (Capacity.HIGH, EnergyLevel.MED, 0.7),
            (Capacity.HIGH, EnergyLevel.HIGH, 1.0),
        ],
    )
    def test_table(self, cap, energy, expected):
        assert energy_fit(cap, energy) == expected

    def test_unknown_energy_is_a_poor_match(self):
        for cap in Capacity:
            assert energy_fit(cap, None) == 0.4

    def test_accepts_plain_strings(self):
        """Task energy is stored as a plain string value."""
        assert energy_fit("low", "high") == 0.4
        assert energy_fit("high", "high") == 1.0


class TestUrgency:
    """Test urgency() deadline curve."""

    def test_no_deadline(self, now):
        assert urgency(None, now) == 0.8

    def test_one_day_out(self, now):
        assert urgency(now + timedelta(days=1), now) == pytest.approx(1.0)

    def test_four_days_out(self, now):
        assert urgency(now + timedelta(days=4), now) == pytest.approx(0.25)

    def test_half_day_saturates(self, now):
        assert urgency(now + timedelta(hours=12), now) == pytest.approx(2.0)
        assert urgency(now + timedelta(hours=1), now) == pytest.approx(2.0)

    def test_overdue_saturates(self, now):
        assert urgency(now - timedelta(days=3), now) == pytest.approx(2.0)

    def test_far_future_approaches_zero(self, now):
        assert urgency(now + timedelta(days=365), now) < 0.01

    def test_timezone_aware_deadline(self, now):
        deadline = (now + timedelta(days=2)).replace(tzinfo=timezone.utc)
        assert urgency(deadline, now) == pytest.approx(0.5)


class TestTimeFit:
    """Test time_fit() ratio and bonus."""

    def test_no_estimate(self):
        assert time_fit(30, None) == 0.8

    def test_fits_gets_bonus(self):
        assert time_fit(30, 30) == pytest.approx(1.1)
        assert time_fit(60, 15) == pytest.approx(1.1)

    def test_does_not_fit(self):
        assert time_fit(30, 60) == pytest.approx(0.5)

    def test_zero_or_negative_available(self):
        assert time_fit(0, 30) == pytest.approx(0.0)
        assert time_fit(-10, 30) < 0


class TestCalculateScore:
    """Test calculate_score() composite weighting."""

    def test_all_defaults(self, make_task, now):
        task = make_task()
        # 1.0 + 0.8*1 + 1.0*0.8 + 0.8*0.4 + 0.6*0.8 - 0
        assert calculate_score(task, Capacity.MED, 30, now) == pytest.approx(3.4)

    def test_fully_specified(self, make_task, now):
        task = make_task(
            importance=3,
            effort=3,
            energy=EnergyLevel.HIGH,
            estimated_minutes=30,
            deadline=now + timedelta(days=1),
        )
        # 1.0 + 2.4 + 1.0 + 0.8*1.0 + 0.6*1.1 - 0.4
        assert calculate_score(task, Capacity.HIGH, 30, now) == pytest.approx(5.46)

    def test_importance_strictly_increases_score(self, make_task, now):
        low = calculate_score(make_task(importance=1), Capacity.MED, 30, now)
        mid = calculate_score(make_task(importance=2), Capacity.MED, 30, now)
        high = calculate_score(make_task(importance=3), Capacity.MED, 30, now)
        assert low < mid < high

    def test_effort_strictly_decreases_score(self, make_task, now):
        easy = calculate_score(make_task(effort=1), Capacity.MED, 30, now)
        medium = calculate_score(make_task(effort=2), Capacity.MED, 30, now)
        hard = calculate_score(make_task(effort=3), Capacity.MED, 30, now)
        assert easy > medium > hard

    def test_absent_importance_equals_one(self, make_task, now):
        assert calculate_score(make_task(), Capacity.LOW, 30, now) == pytest.approx(
            calculate_score(make_task(importance=1, effort=1), Capacity.LOW, 30, now)
        )
