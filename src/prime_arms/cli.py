"""Command-line interface for prime_arms."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from prime_arms.core.errors import ArmAnalysisError


def _parse_policy_options(args: argparse.Namespace, policy: str) -> dict:
    options = {}
    if args.min_points is not None:
        options['min_points'] = args.min_points
    if policy == "angular" and args.tolerance is not None:
        options['tolerance'] = args.tolerance
    if policy == "heading" and args.max_turn is not None:
        options['max_turn'] = args.max_turn
    return options


def _prime_list(text: str) -> list[int]:
    try:
        return [int(p) for p in text.split(",") if p.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected comma-separated integers, got {text!r}"
        ) from None


def cmd_arms(args: argparse.Namespace) -> int:
    """Detect spiral arms, extrapolate them and score the predictions."""
    from prime_arms.core.sieve import generate_n_primes
    from prime_arms.pipeline.arm_pipeline import ArmAnalysisConfig, ArmAnalysisPipeline
    from prime_arms.pipeline.predictor import extrapolate_by_vector

    if args.config:
        config = ArmAnalysisConfig.from_json(args.config)
    else:
        config = ArmAnalysisConfig()

    overrides = {
        'angle_delta': args.angle_delta,
        'prediction_count': args.predictions,
        'policy': args.policy,
        'normalization': args.normalization,
    }
    merged = {**config.to_dict(), **{k: v for k, v in overrides.items() if v is not None}}
    options = _parse_policy_options(args, merged["policy"])
    if merged["policy"] == config.policy:
        merged["policy_options"] = {**config.policy_options, **options}
    else:
        merged["policy_options"] = options
    config = ArmAnalysisConfig.from_dict(merged)

    print(f"Generating {args.count:,} primes")
    primes = generate_n_primes(args.count).tolist()

    pipeline = ArmAnalysisPipeline(config, verbose=args.verbose)
    analysis = pipeline.run(primes)

    print()
    print(analysis.summary())

    if analysis.arms:
        print(f"\n{'Arm':>5} {'Points':>7} {'First':>9} {'Last':>9} {'Next (predicted)':>18}")
        for arm in analysis.arms[:args.limit]:
            next_prime = arm.predictions[0].predicted_prime if arm.predictions else "-"
            print(f"{arm.arm_index:>5} {len(arm.points):>7} {arm.points[0].prime:>9} "
                  f"{arm.last_point.prime:>9} {next_prime:>18}")
        if len(analysis.arms) > args.limit:
            print(f"  ... {len(analysis.arms) - args.limit} more")

    if args.arm is not None:
        matches = [arm for arm in analysis.arms if arm.arm_index == args.arm]
        if not matches:
            print(f"\nNo arm with index {args.arm}")
            return 1
        arm = matches[0]
        print(f"\nArm {arm.arm_index}:")
        print(f"  Primes: {', '.join(str(p) for p in arm.primes)}")
        for q in arm.predictions:
            print(f"  +{q.step_ahead}: index {q.predicted_index}, "
                  f"prime ~{q.predicted_prime_value:.2f} at ({q.x:.3f}, {q.y:.3f})")
        vector = extrapolate_by_vector(arm.points)
        if vector is not None:
            print(f"  Vector extrapolation: prime ~{vector.predicted_prime} "
                  f"at ({vector.x:.3f}, {vector.y:.3f})")

    if args.output:
        pipeline.generate_report(args.output)

    if args.plot:
        from prime_arms.visualization.renderer import save_arms_figure
        save_arms_figure(analysis, args.plot)
        print(f"Saved figure to {args.plot}")

    return 0


def cmd_extend(args: argparse.Namespace) -> int:
    """Extend a known prime prefix by trial division."""
    from prime_arms.core.sieve import extend_primes

    extended = extend_primes(args.known, args.length)

    print(", ".join(str(p) for p in extended))
    return 0


def cmd_walk(args: argparse.Namespace) -> int:
    """Trace a prime walk and report its per-rotation strides."""
    from prime_arms.core.sieve import generate_n_primes
    from prime_arms.visualization.prime_walk import PrimeWalk

    print(f"Tracing prime walk: count={args.count}, angle_delta={args.angle_delta}, "
          f"start={args.start}")

    walk = PrimeWalk(generate_n_primes(args.count), args.angle_delta, scale=args.scale)
    strides = walk.rotation_strides(args.start)

    print(f"Bends per rotation: {walk.bends_per_rotation}")
    print(f"Strides measured: {len(strides)}")
    for i, stride in enumerate(strides[:args.limit]):
        print(f"  {i + 1:>4}: {stride:.3f}")

    if len(strides) > 0:
        print(f"Mean stride: {strides.mean():.3f}")

    if args.output:
        from prime_arms.visualization.renderer import save_raw_image

        output = Path(args.output)
        save_raw_image(walk.render(image_size=args.size, point_size=args.point_size), output)
        print(f"Saved to {output}")

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Spiral arm detection and extrapolation for prime spirals",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    arms_parser = subparsers.add_parser("arms", help="Detect and extrapolate spiral arms")
    arms_parser.add_argument("--count", type=int, default=500, help="Number of primes")
    arms_parser.add_argument("--angle-delta", type=float, default=None,
                             help="Angle step in degrees (default 36)")
    arms_parser.add_argument("--predictions", type=int, default=None,
                             help="Points to predict per arm (default 3)")
    arms_parser.add_argument("--policy", choices=["residue", "angular", "heading"],
                             default=None, help="Arm grouping policy (default residue)")
    arms_parser.add_argument("--min-points", type=int, default=None,
                             help="Minimum points per arm")
    arms_parser.add_argument("--tolerance", type=float, default=None,
                             help="Angular tolerance in radians (angular policy)")
    arms_parser.add_argument("--max-turn", type=float, default=None,
                             help="Maximum heading change in radians (heading policy)")
    arms_parser.add_argument("--normalization", choices=["none", "modulo"], default=None,
                             help="Treatment of angle_delta > 360")
    arms_parser.add_argument("--config", default=None, help="JSON config file")
    arms_parser.add_argument("--arm", type=int, default=None, help="Print details for one arm")
    arms_parser.add_argument("--limit", type=int, default=20, help="Arms to list")
    arms_parser.add_argument("--output", "-o", default=None, help="Output directory for report")
    arms_parser.add_argument("--plot", default=None, help="Save arm figure to this file")
    arms_parser.add_argument("--verbose", "-v", action="store_true", help="Print progress")

    extend_parser = subparsers.add_parser("extend", help="Extend a prime prefix")
    extend_parser.add_argument("--known", type=_prime_list, default="2,3,5", help="Comma-separated known primes")
    extend_parser.add_argument("--length", type=int, default=10, help="Total primes wanted")

    walk_parser = subparsers.add_parser("walk", help="Trace a prime walk")
    walk_parser.add_argument("--count", type=int, default=500, help="Number of primes")
    walk_parser.add_argument("--angle-delta", type=float, default=36.0, help="Turn per step in degrees")
    walk_parser.add_argument("--start", type=int, default=0, help="First traced vertex")
    walk_parser.add_argument("--scale", type=float, default=1.0, help="Length per unit of prime")
    walk_parser.add_argument("--limit", type=int, default=20, help="Strides to list")
    walk_parser.add_argument("--size", type=int, default=1000, help="Image size")
    walk_parser.add_argument("--point-size", type=int, default=2, help="Point radius")
    walk_parser.add_argument("--output", "-o", default=None, help="Output image file")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    commands = {
        "arms": cmd_arms,
        "extend": cmd_extend,
        "walk": cmd_walk,
    }

    try:
        return commands[args.command](args)
    except ArmAnalysisError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
