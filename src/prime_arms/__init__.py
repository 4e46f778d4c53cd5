"""prime_arms - spiral arm detection and extrapolation for polar prime plots."""

__version__ = "0.1.0"

from prime_arms.core.sieve import generate_n_primes, extend_primes
from prime_arms.core.positions import PrimePosition, map_positions, steps_per_rotation
from prime_arms.analysis.arms import SpiralArm, get_grouping_policy
from prime_arms.pipeline.predictor import PredictedPoint, predict_arm
from prime_arms.pipeline.arm_pipeline import (
    ArmAnalysisConfig,
    ArmAnalysis,
    ArmAnalysisPipeline,
    analyze_arms,
    detect_arms,
)
from prime_arms.evaluation.accuracy import (
    AccuracyReport,
    PredictionComparison,
    compare_predictions,
    score_predictions,
)

__all__ = [
    "generate_n_primes",
    "extend_primes",
    "PrimePosition",
    "map_positions",
    "steps_per_rotation",
    "SpiralArm",
    "get_grouping_policy",
    "PredictedPoint",
    "predict_arm",
    "ArmAnalysisConfig",
    "ArmAnalysis",
    "ArmAnalysisPipeline",
    "analyze_arms",
    "detect_arms",
    "AccuracyReport",
    "PredictionComparison",
    "compare_predictions",
    "score_predictions",
]
