"""Quick start example for prime_arms.

Run this script to detect spiral arms on a sample of primes, compare the
grouping policies and write a few images.
"""

from pathlib import Path


def main():
    print("Prime Arms - Quick Start Demo")
    print("=" * 50)

    output_dir = Path("output")
    output_dir.mkdir(exist_ok=True)

    print("\n1. Generating the first 2,000 primes...")
    from prime_arms.core.sieve import generate_n_primes

    primes = generate_n_primes(2_000).tolist()
    print(f"   First 10: {primes[:10]}")
    print(f"   Last: {primes[-1]:,}")

    print("\n2. Detecting arms at 36 degrees per prime...")
    from prime_arms.pipeline.arm_pipeline import ArmAnalysisConfig, ArmAnalysisPipeline

    config = ArmAnalysisConfig(angle_delta=36.0, prediction_count=3)
    pipeline = ArmAnalysisPipeline(config, verbose=False)
    analysis = pipeline.run(primes)
    print("   " + analysis.summary().replace("\n", "\n   "))

    print("\n3. First arm and its continuation...")
    arm = analysis.arms[0]
    print(f"   Arm {arm.arm_index}: {arm.primes[:6]} ...")
    for q in arm.predictions:
        print(f"   +{q.step_ahead}: ~{q.predicted_prime} at index {q.predicted_index}")

    print("\n4. Comparing grouping policies...")
    print("   Policy   | Arms | Predictions | Accuracy")
    print("   " + "-" * 42)
    for name, result in pipeline.compare_policies(primes).items():
        print(f"   {name:<8} | {len(result.arms):>4} | "
              f"{result.report.total_predictions:>11} | "
              f"{result.report.accuracy_percent:>7.2f}%")

    print("\n5. Rendering...")
    from prime_arms.visualization.renderer import save_arms_figure, rasterize_arms, save_raw_image

    save_arms_figure(analysis, output_dir / "arms.png")
    print(f"   Saved to {output_dir / 'arms.png'}")

    save_raw_image(rasterize_arms(analysis, image_size=800), output_dir / "arms_raw.png")
    print(f"   Saved to {output_dir / 'arms_raw.png'}")

    print("\n6. Tracing a prime walk...")
    from prime_arms.visualization.prime_walk import PrimeWalk

    walk = PrimeWalk(primes[:500], 36.0)
    strides = walk.rotation_strides()
    print(f"   {len(strides)} strides, mean {strides.mean():.1f}")
    save_raw_image(walk.render(image_size=800), output_dir / "prime_walk.png")
    print(f"   Saved to {output_dir / 'prime_walk.png'}")

    pipeline.generate_report(output_dir)

    print("\n" + "=" * 50)
    print("Demo complete. Check the 'output' folder for images.")
    print("\nNext steps:")
    print("  - Run 'prime-arms --help' to see CLI options")
    print("  - Try 'prime-arms arms --policy angular --angle-delta 100'")
    print("  - Trace walks with 'prime-arms walk --angle-delta 30 --output walk.png'")


if __name__ == "__main__":
    main()
