"""Spiral arm detection and selection."""

from prime_arms.analysis.arms import (
    SpiralArm,
    GroupingPolicy,
    ResidueClassGrouping,
    AngularToleranceGrouping,
    HeadingContinuityGrouping,
    GROUPING_POLICIES,
    get_grouping_policy,
    group_arms,
)
from prime_arms.analysis.selection import find_nearest_arm

__all__ = [
    "SpiralArm",
    "GroupingPolicy",
    "ResidueClassGrouping",
    "AngularToleranceGrouping",
    "HeadingContinuityGrouping",
    "GROUPING_POLICIES",
    "get_grouping_policy",
    "group_arms",
    "find_nearest_arm",
]
