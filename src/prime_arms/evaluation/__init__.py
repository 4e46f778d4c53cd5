"""Scoring of spiral arm predictions against ground truth."""

from prime_arms.evaluation.accuracy import (
    AccuracyReport,
    PredictionComparison,
    compare_predictions,
    correctness_threshold,
    is_correct_prediction,
    score_predictions,
)

__all__ = [
    "AccuracyReport",
    "PredictionComparison",
    "compare_predictions",
    "correctness_threshold",
    "is_correct_prediction",
    "score_predictions",
]
