"""Tests for prediction scoring."""

import json
import math

import pytest

from prime_arms.core.errors import InvalidAngleDelta
from prime_arms.core.sieve import generate_n_primes
from prime_arms.evaluation.accuracy import (
    AccuracyReport,
    PredictionComparison,
    compare_predictions,
    correctness_threshold,
    is_correct_prediction,
    score_predictions,
)
from prime_arms.pipeline.arm_pipeline import detect_arms

PRIMES_15 = [2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47]


class TestCorrectness:
    """Tests for the correctness threshold."""

    def test_absolute_floor(self):
        """Test small radii use the 0.3 floor."""
        assert correctness_threshold(1.0, 1.0) == 0.3

    def test_relative_threshold(self):
        """Test large radii use 5% of the mean radius."""
        assert correctness_threshold(10.0, 12.0) == pytest.approx(0.55)

    def test_boundary_is_exclusive(self):
        """Test a distance equal to the threshold is not correct."""
        assert not is_correct_prediction(0.3, 1.0, 1.0)
        assert is_correct_prediction(0.2999, 1.0, 1.0)

    def test_large_radius(self):
        """Test relative threshold at radius 10."""
        assert not is_correct_prediction(0.5, 10.0, 10.0)
        assert is_correct_prediction(0.49, 10.0, 10.0)


class TestScorePredictions:
    """Tests for score_predictions function."""

    def test_one_step_all_correct(self):
        """Test one-step predictions on 15 primes all land close enough."""
        arms = detect_arms(PRIMES_15, 36, prediction_count=1)
        report = score_predictions(PRIMES_15, 36, arms)

        assert report.total_predictions == 5
        assert report.correct_predictions == 5
        assert report.accuracy_percent == 100.0
        assert report.average_distance == pytest.approx(0.102)

    def test_single_arm_three_steps(self):
        """Test later predictions drift past the threshold."""
        arms = detect_arms(PRIMES_15, 36, prediction_count=3)[:1]
        assert [q.predicted_prime_value for q in arms[0].predictions] == [60.0, 89.0, 118.0]

        report = score_predictions(PRIMES_15, 36, arms)

        assert report.total_predictions == 3
        assert report.correct_predictions == 1
        assert report.accuracy_percent == pytest.approx(100 / 3)
        assert report.average_distance == pytest.approx(1.12 / 3)
        assert len(report.comparisons) == 3

    def test_too_few_primes(self, monkeypatch):
        """Test fewer than 10 primes gives an empty report without extension."""
        def fail(*args, **kwargs):
            raise AssertionError("extend_primes should not be called")

        monkeypatch.setattr("prime_arms.evaluation.accuracy.extend_primes", fail)

        primes = PRIMES_15[:9]
        arms = detect_arms(primes, 90, prediction_count=1)
        assert any(arm.predictions for arm in arms)

        assert score_predictions(primes, 90, arms) == AccuracyReport()

    def test_no_arms(self):
        """Test no arms gives an empty report."""
        report = score_predictions(PRIMES_15, 36, [])
        assert report == AccuracyReport.empty()
        assert report.accuracy_percent == 0.0

    def test_invalid_angle_delta(self):
        """Test invalid angle steps raise."""
        with pytest.raises(InvalidAngleDelta):
            score_predictions(PRIMES_15, 0, [])

    def test_counts_consistent(self):
        """Test report invariants on a larger input."""
        primes = generate_n_primes(300).tolist()
        arms = detect_arms(primes, 137.5, prediction_count=3)
        report = score_predictions(primes, 137.5, arms)

        assert report.total_predictions == sum(len(a.predictions) for a in arms)
        assert 0 <= report.correct_predictions <= report.total_predictions
        assert 0.0 <= report.accuracy_percent <= 100.0
        assert report.average_distance >= 0.0


class TestComparePredictions:
    """Tests for per-prediction comparisons."""

    def test_single_arm_three_steps(self):
        """Test each prediction is paired with the true prime at its index."""
        arms = detect_arms(PRIMES_15, 36, prediction_count=3)[:1]
        comparisons = compare_predictions(PRIMES_15, 36, arms)

        assert [c.arm_index for c in comparisons] == [0, 0, 0]
        assert [c.step_ahead for c in comparisons] == [1, 2, 3]
        assert [c.predicted_index for c in comparisons] == [20, 30, 40]
        assert [c.actual_prime for c in comparisons] == [73, 127, 179]
        assert [c.distance for c in comparisons] == pytest.approx([0.13, 0.38, 0.61])
        assert [c.correct for c in comparisons] == [True, False, False]

    def test_actual_coordinates(self):
        """Test the true point lies on the polar placement of the true prime."""
        arms = detect_arms(PRIMES_15, 36, prediction_count=1)
        for c in compare_predictions(PRIMES_15, 36, arms):
            assert c.actual_x == pytest.approx(0.01 * c.actual_prime * math.cos(c.predicted_index * math.pi / 5))
            assert c.actual_y == pytest.approx(0.01 * c.actual_prime * math.sin(c.predicted_index * math.pi / 5))
            assert c.distance == pytest.approx(math.hypot(c.predicted_x - c.actual_x, c.predicted_y - c.actual_y))

    def test_matches_report(self):
        """Test the report totals are built from the comparisons."""
        primes = generate_n_primes(200).tolist()
        arms = detect_arms(primes, 137.5, prediction_count=2)
        comparisons = compare_predictions(primes, 137.5, arms)
        report = score_predictions(primes, 137.5, arms)

        assert report.comparisons == tuple(comparisons)
        assert report.total_predictions == len(comparisons)
        assert report.correct_predictions == sum(c.correct for c in comparisons)
        assert report.average_distance == pytest.approx(
            sum(c.distance for c in comparisons) / len(comparisons)
        )

    def test_too_few_primes(self):
        """Test fewer than 10 primes gives no comparisons."""
        primes = PRIMES_15[:9]
        arms = detect_arms(primes, 90, prediction_count=1)
        assert compare_predictions(primes, 90, arms) == []

    def test_to_dict(self):
        """Test serialization of a comparison."""
        comparison = PredictionComparison(0, 1, 20, 0.6, 0.0, 73, 0.73, 0.0, 0.13, True)
        d = comparison.to_dict()
        assert d['actual_prime'] == 73
        assert d['correct'] is True
        assert json.loads(json.dumps(d)) == d


class TestAccuracyReport:
    """Tests for AccuracyReport."""

    def test_empty(self):
        """Test the empty report is all zeros."""
        report = AccuracyReport.empty()
        assert report.total_predictions == 0
        assert report.correct_predictions == 0
        assert report.average_distance == 0.0
        assert report.accuracy_percent == 0.0

    def test_to_dict(self):
        """Test serialization."""
        report = AccuracyReport(4, 1, 0.25, 25.0)
        d = report.to_dict()
        assert d['correct_predictions'] == 1
        assert d['comparisons'] == []
        assert json.loads(json.dumps(d)) == d

    def test_summary(self):
        """Test summary text."""
        summary = AccuracyReport(4, 1, 0.25, 25.0).summary()
        assert "25.00%" in summary
        assert "Predictions scored: 4" in summary
