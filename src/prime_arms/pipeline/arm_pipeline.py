"""Spiral arm analysis pipeline.

Orchestrates the full recomputation for one set of inputs:
1. Map primes to polar positions
2. Group positions into spiral arms with the selected policy
3. Extrapolate every arm
4. Extend the primes as ground truth and score the extrapolations

Every run starts from scratch; nothing is cached between runs. Callers that
recompute often (e.g. while a parameter is being dragged) should debounce or
memoize on their side.
"""

from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Sequence

from prime_arms.analysis.arms import SpiralArm, get_grouping_policy, GROUPING_POLICIES
from prime_arms.core.errors import InvalidGroupingPolicy, PredictionCountOutOfRange
from prime_arms.core.positions import (
    ANGLE_NORMALIZATIONS,
    RADIUS_SCALE,
    AngleNormalization,
    angle_delta_radians,
    map_positions,
    steps_per_rotation,
    validate_angle_delta,
)
from prime_arms.evaluation.accuracy import (
    DEFAULT_MIN_PRIMES,
    DEFAULT_MIN_THRESHOLD,
    DEFAULT_RELATIVE_THRESHOLD,
    AccuracyReport,
    score_predictions,
)
from prime_arms.pipeline.predictor import DEFAULT_GAP_WINDOW, attach_predictions

MAX_PREDICTION_COUNT = 20


@dataclass
class ArmAnalysisConfig:
    """Parameters of an arm analysis run.

    Attributes:
        angle_delta: Angle step between consecutive primes, in degrees.
        prediction_count: Points to extrapolate per arm.
        policy: Grouping policy name ('residue', 'angular', 'heading').
        policy_options: Extra constructor options for the policy, e.g.
            ``{'tolerance': 0.1}`` or ``{'min_points': 5}``.
        normalization: How angle_delta > 360 is treated when counting steps
            per rotation ('none' or 'modulo').
        scale: Radius per unit of prime value.
        gap_window: Trailing arm points used for the gap trend.
        min_primes: Minimum known primes before predictions are scored.
        min_threshold: Absolute floor of the correctness threshold.
        relative_threshold: Fraction of mean radius used as threshold.
        max_prediction_count: Upper bound accepted for prediction_count.
    """
    angle_delta: float = 36.0
    prediction_count: int = 3
    policy: str = "residue"
    policy_options: dict[str, Any] = field(default_factory=dict)
    normalization: AngleNormalization = "none"
    scale: float = RADIUS_SCALE
    gap_window: int = DEFAULT_GAP_WINDOW
    min_primes: int = DEFAULT_MIN_PRIMES
    min_threshold: float = DEFAULT_MIN_THRESHOLD
    relative_threshold: float = DEFAULT_RELATIVE_THRESHOLD
    max_prediction_count: int = MAX_PREDICTION_COUNT

    def validate(self) -> "ArmAnalysisConfig":
        """Check all parameters, raising on the first invalid one.

        Returns:
            self, for chaining.

        Raises:
            InvalidAngleDelta: If angle_delta is invalid.
            PredictionCountOutOfRange: If prediction_count is out of bounds.
            InvalidGroupingPolicy: If the policy or its options are invalid.
            ValueError: For any other invalid parameter.
        """
        validate_angle_delta(self.angle_delta)
        steps_per_rotation(self.angle_delta, self.normalization)

        if not 1 <= self.prediction_count <= self.max_prediction_count:
            raise PredictionCountOutOfRange(
                self.prediction_count, 1, self.max_prediction_count
            )
        if self.policy not in GROUPING_POLICIES:
            raise InvalidGroupingPolicy(
                f"Unknown grouping policy {self.policy!r}; "
                f"choose from {sorted(GROUPING_POLICIES)}"
            )
        get_grouping_policy(self.policy, **self.policy_options)

        if self.normalization not in ANGLE_NORMALIZATIONS:
            raise ValueError(
                f"normalization must be one of {ANGLE_NORMALIZATIONS}, "
                f"got {self.normalization!r}"
            )
        if self.scale <= 0:
            raise ValueError(f"scale must be > 0, got {self.scale}")
        if self.gap_window < 2:
            raise ValueError(f"gap_window must be >= 2, got {self.gap_window}")
        if self.min_primes < 0:
            raise ValueError(f"min_primes must be >= 0, got {self.min_primes}")
        if self.min_threshold < 0 or self.relative_threshold < 0:
            raise ValueError("Thresholds must be >= 0")

        return self

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "ArmAnalysisConfig":
        return cls(**{k: v for k, v in d.items() if k in cls.__dataclass_fields__})

    @classmethod
    def from_json(cls, path: str | Path) -> "ArmAnalysisConfig":
        with open(path) as f:
            return cls.from_dict(json.load(f))


@dataclass(frozen=True)
class ArmAnalysis:
    """Result of one arm analysis run.

    Attributes:
        policy: Name of the grouping policy that produced the arms.
        steps_per_rotation: Index steps per full turn used for the arms.
        arms: Detected arms with their predictions.
        report: Prediction accuracy against ground truth.
        prime_count: Number of known primes analyzed.
        angle_delta: Angle step in degrees.
    """
    policy: str
    steps_per_rotation: int
    arms: tuple[SpiralArm, ...]
    report: AccuracyReport
    prime_count: int
    angle_delta: float

    @property
    def prediction_total(self) -> int:
        return sum(len(arm.predictions) for arm in self.arms)

    def summary(self) -> str:
        """Get summary string."""
        lines = [
            f"Spiral arms for {self.prime_count:,} primes "
            f"(angle_delta={self.angle_delta:g}, policy={self.policy})",
            f"  Steps per rotation: {self.steps_per_rotation}",
            f"  Arms detected: {len(self.arms)}",
            f"  Points predicted: {self.prediction_total}",
        ]
        lines.extend("  " + line for line in self.report.summary().splitlines())
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'policy': self.policy,
            'steps_per_rotation': self.steps_per_rotation,
            'prime_count': self.prime_count,
            'angle_delta': self.angle_delta,
            'report': self.report.to_dict(),
            'arms': [arm.to_dict() for arm in self.arms],
        }


def detect_arms(
    primes: Sequence[int],
    angle_delta: float,
    policy: str = "residue",
    prediction_count: int = 3,
    normalization: AngleNormalization = "none",
    scale: float = RADIUS_SCALE,
    gap_window: int = DEFAULT_GAP_WINDOW,
    **policy_options,
) -> list[SpiralArm]:
    """Map, group and extrapolate in one call.

    Args:
        primes: Ascending prime sequence.
        angle_delta: Angle step in degrees.
        policy: Grouping policy name.
        prediction_count: Points to extrapolate per arm.
        normalization: Treatment of angle_delta > 360 for steps per rotation.
        scale: Radius per unit of prime value.
        gap_window: Trailing arm points used for the gap trend.
        **policy_options: Passed to the grouping policy.

    Returns:
        Arms with predictions attached.
    """
    steps = steps_per_rotation(angle_delta, normalization)
    grouping = get_grouping_policy(policy, **policy_options)

    positions = map_positions(primes, angle_delta, scale=scale)
    arms = grouping.group(positions, steps)

    return attach_predictions(
        arms,
        steps,
        angle_delta_radians(angle_delta),
        prediction_count,
        window=gap_window,
        scale=scale,
    )


def analyze_arms(
    primes: Sequence[int],
    config: ArmAnalysisConfig | None = None,
    **overrides,
) -> ArmAnalysis:
    """Run the full analysis for one set of primes.

    Args:
        primes: Ascending prime sequence.
        config: Run parameters. Defaults to ArmAnalysisConfig().
        **overrides: Config fields to override, e.g. ``angle_delta=30``.

    Returns:
        ArmAnalysis with arms and accuracy report.
    """
    if config is None:
        config = ArmAnalysisConfig()
    if overrides:
        config = ArmAnalysisConfig.from_dict({**config.to_dict(), **overrides})
    config.validate()

    steps = steps_per_rotation(config.angle_delta, config.normalization)

    arms = detect_arms(
        primes,
        config.angle_delta,
        policy=config.policy,
        prediction_count=config.prediction_count,
        normalization=config.normalization,
        scale=config.scale,
        gap_window=config.gap_window,
        **config.policy_options,
    )

    report = score_predictions(
        primes,
        config.angle_delta,
        arms,
        min_primes=config.min_primes,
        min_threshold=config.min_threshold,
        relative_threshold=config.relative_threshold,
        scale=config.scale,
    )

    return ArmAnalysis(
        policy=config.policy,
        steps_per_rotation=steps,
        arms=tuple(arms),
        report=report,
        prime_count=len(primes),
        angle_delta=config.angle_delta,
    )


class ArmAnalysisPipeline:
    """Runs arm analyses and keeps their results for reporting.

    Attributes:
        config: Parameters shared by all runs.
        verbose: Print progress messages.
        results: Analyses produced so far, in run order.
    """

    def __init__(self, config: ArmAnalysisConfig | None = None, verbose: bool = True):
        """Initialize pipeline.

        Args:
            config: Run parameters. Validated immediately.
            verbose: Print progress messages.
        """
        self.config = (config or ArmAnalysisConfig()).validate()
        self.verbose = verbose
        self.results: list[ArmAnalysis] = []

    def run(self, primes: Sequence[int], **overrides) -> ArmAnalysis:
        """Analyze one prime sequence.

        Args:
            primes: Ascending prime sequence.
            **overrides: Config fields to override for this run only.

        Returns:
            ArmAnalysis for the run.
        """
        if self.verbose:
            print(f"Analyzing {len(primes):,} primes "
                  f"(policy={overrides.get('policy', self.config.policy)}, "
                  f"angle_delta={overrides.get('angle_delta', self.config.angle_delta)})...")

        start_time = time.time()
        analysis = analyze_arms(primes, self.config, **overrides)
        elapsed = time.time() - start_time

        if self.verbose:
            min_primes = overrides.get('min_primes', self.config.min_primes)
            if len(primes) < min_primes:
                print(f"  {len(analysis.arms)} arms; only {len(primes)} primes "
                      f"(< {min_primes}), predictions not scored")
            else:
                print(f"  {len(analysis.arms)} arms, "
                      f"{analysis.report.total_predictions} predictions scored, "
                      f"accuracy {analysis.report.accuracy_percent:.2f}% "
                      f"({elapsed:.3f}s)")

        self.results.append(analysis)
        return analysis

    def compare_policies(
        self,
        primes: Sequence[int],
        policies: Sequence[str] | None = None,
    ) -> dict[str, ArmAnalysis]:
        """Run the same primes through several grouping policies.

        Policy options from the config are only applied to the configured
        policy; the others run with their defaults.
        """
        if policies is None:
            policies = list(GROUPING_POLICIES)

        comparison = {}
        for name in policies:
            options = self.config.policy_options if name == self.config.policy else {}
            comparison[name] = self.run(primes, policy=name, policy_options=options)
        return comparison

    def generate_report(self, output_dir: str | Path | None = None) -> dict:
        """Build a report of all runs, optionally saving it as JSON.

        Args:
            output_dir: Optional directory to write arm_report.json into.

        Returns:
            Report dictionary.
        """
        report = {
            'config': self.config.to_dict(),
            'runs': [analysis.to_dict() for analysis in self.results],
        }

        if output_dir is not None:
            output_dir = Path(output_dir)
            output_dir.mkdir(parents=True, exist_ok=True)

            with open(output_dir / 'arm_report.json', 'w') as f:
                json.dump(report, f, indent=2, default=str)

            if self.verbose:
                print(f"\nReport saved to {output_dir}/")

        return report
