"""Tests for spiral arm grouping and arm selection."""

import pytest

from prime_arms.analysis.arms import (
    AngularToleranceGrouping,
    HeadingContinuityGrouping,
    ResidueClassGrouping,
    SpiralArm,
    get_grouping_policy,
    group_arms,
)
from prime_arms.analysis.selection import find_nearest_arm
from prime_arms.core.errors import InvalidGroupingPolicy
from prime_arms.core.positions import PrimePosition, map_positions, steps_per_rotation
from prime_arms.core.sieve import generate_n_primes

PRIMES_15 = [2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47]


def make_point(index, x, y, prime=None):
    """Build a position at given coordinates, bypassing the polar mapping."""
    return PrimePosition(
        index=index,
        prime=prime if prime is not None else index + 2,
        angle=0.0,
        radius=(x * x + y * y) ** 0.5,
        x=x,
        y=y,
    )


class TestResidueClassGrouping:
    """Tests for residue class grouping."""

    def test_first_15_primes(self):
        """Test arms for 15 primes at 36 degrees."""
        positions = map_positions(PRIMES_15, 36)
        arms = ResidueClassGrouping().group(positions, 10)

        assert [arm.arm_index for arm in arms] == [0, 1, 2, 3, 4]
        assert arms[0].indices == [0, 10]
        assert arms[0].primes == [2, 31]
        assert arms[4].primes == [11, 47]

    def test_members_share_residue(self):
        """Test every member of an arm has the same index residue."""
        positions = map_positions(generate_n_primes(200).tolist(), 30)
        for arm in ResidueClassGrouping().group(positions, 12):
            assert len({i % 12 for i in arm.indices}) == 1
            assert arm.indices == sorted(arm.indices)

    @pytest.mark.parametrize("angle_delta", [36, 137.5, 100])
    @pytest.mark.parametrize("min_points", [1, 2, 5, 30])
    def test_complete_disjoint_cover(self, angle_delta, min_points):
        """Test arms cover each index of a large enough bucket exactly once."""
        positions = map_positions(generate_n_primes(97).tolist(), angle_delta)
        steps = steps_per_rotation(angle_delta)
        arms = ResidueClassGrouping(min_points=min_points).group(positions, steps)

        bucket_sizes = {}
        for pos in positions:
            bucket_sizes[pos.index % steps] = bucket_sizes.get(pos.index % steps, 0) + 1
        expected = sorted(
            pos.index for pos in positions
            if bucket_sizes[pos.index % steps] >= min_points
        )

        covered = [i for arm in arms for i in arm.indices]
        assert sorted(covered) == expected
        assert len(covered) == len(set(covered))
        for arm in arms:
            assert {i % steps for i in arm.indices} == {arm.arm_index}

    def test_min_points(self):
        """Test arms below min_points are dropped."""
        positions = map_positions(PRIMES_15, 36)
        assert ResidueClassGrouping(min_points=3).group(positions, 10) == []
        assert len(ResidueClassGrouping(min_points=1).group(positions, 10)) == 10

    def test_single_step_rotation(self):
        """Test steps_per_rotation of 1 gives a single arm."""
        positions = map_positions(PRIMES_15, 400)
        arms = ResidueClassGrouping().group(positions, 1)
        assert len(arms) == 1
        assert len(arms[0].points) == 15

    def test_invalid_steps(self):
        """Test steps_per_rotation < 1 raises."""
        with pytest.raises(InvalidGroupingPolicy):
            ResidueClassGrouping().group([], 0)

    def test_empty_positions(self):
        """Test no positions yields no arms."""
        assert ResidueClassGrouping().group([], 10) == []


class TestAngularToleranceGrouping:
    """Tests for angular tolerance grouping."""

    def setup_method(self):
        self.positions = map_positions(generate_n_primes(40).tolist(), 100)

    def test_clusters_by_angle(self):
        """Test points at the same absolute angle are clustered."""
        arms = AngularToleranceGrouping().group(self.positions, 4)

        assert len(arms) == 4
        assert [arm.arm_index for arm in arms] == [0, 1, 2, 3]
        assert arms[0].indices == [0, 18, 36]

    def test_differs_from_residue(self):
        """Test angular and residue policies produce different memberships."""
        steps = steps_per_rotation(100)
        residue = ResidueClassGrouping().group(self.positions, steps)
        angular = AngularToleranceGrouping().group(self.positions, steps)

        assert residue[0].indices == list(range(0, 40, 4))
        assert angular[0].indices != residue[0].indices

    def test_points_used_once(self):
        """Test no point belongs to two arms."""
        arms = AngularToleranceGrouping(min_points=1).group(self.positions, 4)
        indices = [i for arm in arms for i in arm.indices]
        assert len(indices) == len(set(indices)) == 40

    def test_sorted_by_radius(self):
        """Test arm members are ordered innermost first."""
        for arm in AngularToleranceGrouping().group(self.positions, 4):
            radii = [p.radius for p in arm.points]
            assert radii == sorted(radii)

    def test_min_points(self):
        """Test clusters below min_points are dropped."""
        assert AngularToleranceGrouping(min_points=4).group(self.positions, 4) == []

    def test_claimed_points_stay_claimed(self):
        """Test points of a dropped cluster don't seed or join later clusters."""
        angles = [0.0, 0.08, 0.16, 0.17, 0.2]
        positions = [
            PrimePosition(i, i + 2, angle, float(i + 1), float(i + 1), 0.0)
            for i, angle in enumerate(angles)
        ]
        arms = AngularToleranceGrouping(min_points=3).group(positions, 4)
        assert len(arms) == 1
        assert arms[0].indices == [2, 3, 4]
        assert arms[0].arm_index == 0

    def test_invalid_tolerance(self):
        """Test non-positive tolerance raises."""
        with pytest.raises(InvalidGroupingPolicy):
            AngularToleranceGrouping(tolerance=0)


class TestHeadingContinuityGrouping:
    """Tests for heading continuity grouping."""

    def test_straight_run(self):
        """Test points on a line form one arm, skipping a sideways point."""
        positions = [
            make_point(0, 0.0, 0.0),
            make_point(1, 1.0, 0.0),
            make_point(2, 2.0, 0.0),
            make_point(3, 2.0, 1.0),
            make_point(4, 3.0, 0.0),
        ]
        arms = HeadingContinuityGrouping().group(positions, 4)

        assert len(arms) == 1
        assert arms[0].indices == [0, 1, 2, 4]
        assert arms[0].arm_index == 0

    def test_short_run_dropped(self):
        """Test runs shorter than min_points are dropped."""
        positions = [make_point(0, 0.0, 0.0), make_point(1, 1.0, 0.0)]
        assert HeadingContinuityGrouping().group(positions, 4) == []

    def test_turn_tolerance(self):
        """Test a gentle bend is followed but a sharp one is not."""
        positions = [
            make_point(0, 0.0, 0.0),
            make_point(1, 1.0, 0.0),
            make_point(2, 2.0, 0.1),
        ]
        assert len(HeadingContinuityGrouping().group(positions, 4)) == 1
        assert HeadingContinuityGrouping(max_turn=0.05).group(positions, 4) == []

    def test_invalid_max_turn(self):
        """Test max_turn outside (0, pi) raises."""
        with pytest.raises(InvalidGroupingPolicy):
            HeadingContinuityGrouping(max_turn=0)
        with pytest.raises(InvalidGroupingPolicy):
            HeadingContinuityGrouping(max_turn=4.0)


class TestGetGroupingPolicy:
    """Tests for the policy registry."""

    def test_by_name(self):
        """Test building each policy by name."""
        assert isinstance(get_grouping_policy("residue"), ResidueClassGrouping)
        assert isinstance(get_grouping_policy("angular"), AngularToleranceGrouping)
        assert isinstance(get_grouping_policy("heading"), HeadingContinuityGrouping)

    def test_default_min_points(self):
        """Test per-policy default minimum sizes."""
        assert get_grouping_policy("residue").min_points == 2
        assert get_grouping_policy("angular").min_points == 3
        assert get_grouping_policy("heading").min_points == 3

    def test_options(self):
        """Test options are passed through and None is ignored."""
        policy = get_grouping_policy("angular", tolerance=0.2, min_points=None)
        assert policy.tolerance == 0.2
        assert policy.min_points == 3

    def test_instance_passthrough(self):
        """Test an existing policy is returned unchanged."""
        policy = ResidueClassGrouping(min_points=4)
        assert get_grouping_policy(policy) is policy

    def test_unknown_policy(self):
        """Test unknown names raise."""
        with pytest.raises(InvalidGroupingPolicy):
            get_grouping_policy("spiral")

    def test_bad_option(self):
        """Test options a policy doesn't take raise."""
        with pytest.raises(InvalidGroupingPolicy):
            get_grouping_policy("residue", tolerance=0.1)

    def test_invalid_min_points(self):
        """Test min_points < 1 raises."""
        with pytest.raises(InvalidGroupingPolicy):
            get_grouping_policy("residue", min_points=0)

    def test_group_arms(self):
        """Test the convenience function."""
        positions = map_positions(PRIMES_15, 36)
        arms = group_arms(positions, 10, policy="residue")
        assert len(arms) == 5
        assert all(isinstance(arm, SpiralArm) for arm in arms)
        assert all(arm.predictions == () for arm in arms)


class TestFindNearestArm:
    """Tests for find_nearest_arm function."""

    def setup_method(self):
        self.arms = [
            SpiralArm(0, (make_point(0, 0.0, 0.0), make_point(2, 1.0, 0.0))),
            SpiralArm(1, (make_point(1, 0.0, 5.0), make_point(3, 0.0, 6.0))),
        ]

    def test_nearest(self):
        """Test the arm owning the closest point is returned."""
        assert find_nearest_arm(self.arms, 0.9, 0.1) == 0
        assert find_nearest_arm(self.arms, 0.2, 5.8) == 1

    def test_too_far(self):
        """Test queries beyond max_distance return None."""
        assert find_nearest_arm(self.arms, 3.0, 3.0) is None
        assert find_nearest_arm(self.arms, 3.0, 3.0, max_distance=10.0) is not None

    def test_boundary_is_exclusive(self):
        """Test a point exactly at max_distance is not selected."""
        assert find_nearest_arm(self.arms, 2.0, 0.0, max_distance=1.0) is None

    def test_no_arms(self):
        """Test empty arm list."""
        assert find_nearest_arm([], 0.0, 0.0) is None
