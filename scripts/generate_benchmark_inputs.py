#!/usr/bin/env python3
"""
Generate benchmark input files of synthetic text at several sizes.

Words are drawn from a fixed vocabulary with a Zipf-like skew so the top-k
selection has a realistic head. A handful of very long tokens are mixed in
so that block boundaries regularly land inside a word.
"""

import random
import argparse
from pathlib import Path

# Configuration
INPUT_DIR = Path("shared") / "input"
SEED = 598

VOCABULARY = (
    "the of and to in a is that for it as was with be by on not he this are or his "
    "from at which but have an they you were her she there been one all we their "
    "map reduce chunk fold worker shuffle coordinator boundary whitespace frequency"
).split()

LONG_WORDS = [
    "supercalifragilisticexpialidocious",
    "pneumonoultramicroscopicsilicovolcanoconiosis",
    "antidisestablishmentarianism",
]

TARGETS = [
    ("words_small.txt", 64 * 1024),           # 64KB
    ("words_medium.txt", 1024 * 1024),        # ~1MB
    ("words_large.txt", 10 * 1024 * 1024),    # ~10MB
]


def generate_text(target_size: int, rng: random.Random) -> bytes:
    """
    Build roughly target_size bytes of whitespace separated words.

    Args:
        target_size: Size of the generated text in bytes
        rng: Random source, seeded by the caller for reproducible files

    Returns:
        UTF-8 encoded text, lines of 8-16 words
    """
    weights = [1.0 / (rank + 1) for rank in range(len(VOCABULARY))]
    lines = []
    size = 0
    while size < target_size:
        words = rng.choices(VOCABULARY, weights=weights, k=rng.randint(8, 16))
        if rng.random() < 0.05:
            words.insert(rng.randrange(len(words)), rng.choice(LONG_WORDS))
        line = " ".join(words) + "\n"
        lines.append(line)
        size += len(line)
    return "".join(lines).encode('utf-8')


def generate_file(output_path: Path, target_size: int, rng: random.Random) -> int:
    """Write one input file and return its actual size."""
    print(f"Generating {output_path.name} (target: {target_size / (1024*1024):.2f} MB)...")
    output_path.write_bytes(generate_text(target_size, rng))
    actual_size = output_path.stat().st_size
    print(f"  ✓ Created: {output_path.name} ({actual_size / (1024*1024):.2f} MB)")
    return actual_size


def main():
    """Generate all benchmark input files."""
    parser = argparse.ArgumentParser(description="Generate benchmark inputs")
    parser.add_argument("--output-dir", type=Path, default=INPUT_DIR,
                        help=f"Directory for the generated files (default: {INPUT_DIR})")
    parser.add_argument("--seed", type=int, default=SEED, help="Random seed")
    args = parser.parse_args()

    print("=" * 70)
    print("Generating Benchmark Input Files")
    print("=" * 70)

    args.output_dir.mkdir(parents=True, exist_ok=True)
    rng = random.Random(args.seed)

    total_size = 0
    for filename, target_size in TARGETS:
        output_path = args.output_dir / filename

        # Skip if file already exists and is approximately the right size
        if output_path.exists():
            existing_size = output_path.stat().st_size
            if abs(existing_size - target_size) < target_size * 0.1:  # Within 10%
                print(f"  ⏭️  Skipping {filename} (already exists, size: {existing_size / (1024*1024):.2f} MB)")
                total_size += existing_size
                continue

        total_size += generate_file(output_path, target_size, rng)

    print("\n" + "=" * 70)
    print(f"✓ Generation complete!")
    print(f"  Total size: {total_size / (1024*1024):.2f} MB")
    print(f"  Files created in: {args.output_dir}")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    exit(main())
