"""Arm extrapolation and the end-to-end analysis pipeline."""

from prime_arms.pipeline.predictor import (
    PredictedPoint,
    VectorPrediction,
    gap_trend,
    predict_arm,
    attach_predictions,
    extrapolate_by_vector,
)
from prime_arms.pipeline.arm_pipeline import (
    ArmAnalysisConfig,
    ArmAnalysis,
    ArmAnalysisPipeline,
    detect_arms,
    analyze_arms,
    MAX_PREDICTION_COUNT,
)

__all__ = [
    # Predictor
    'PredictedPoint',
    'VectorPrediction',
    'gap_trend',
    'predict_arm',
    'attach_predictions',
    'extrapolate_by_vector',
    # Pipeline
    'ArmAnalysisConfig',
    'ArmAnalysis',
    'ArmAnalysisPipeline',
    'detect_arms',
    'analyze_arms',
    'MAX_PREDICTION_COUNT',
]
