#!/usr/bin/env python3
"""
Automated benchmarking script for the word count pipeline.
Runs the pipeline in-process over several inputs and fold counts and
collects per-run metrics.
"""

import sys
import json
import csv
import argparse
from datetime import datetime
from pathlib import Path

from wordfold.config import PipelineConfig
from wordfold.errors import SourceReadError
from wordfold.coordinator.metrics import MetricsCollector
from wordfold.coordinator.pipeline import PipelineCoordinator

# Configuration
RESULTS_DIR = Path("benchmark_results")
INPUT_DIR = Path("shared") / "input"
TOP_K = 10

# Benchmark configurations
BENCHMARKS = [
    # Experiment 1: Input Size Scaling (fixed folds)
    {"name": "input_size_small", "input": "words_small.txt", "folds": 4,
     "description": "Small input (64KB), baseline"},
    {"name": "input_size_medium", "input": "words_medium.txt", "folds": 4,
     "description": "Medium input (~1MB)"},
    {"name": "input_size_large", "input": "words_large.txt", "folds": 4,
     "description": "Large input (~10MB)"},

    # Experiment 2: Fold Scaling (fixed input)
    {"name": "fold_scaling_1", "input": "words_large.txt", "folds": 1,
     "description": "1 fold"},
    {"name": "fold_scaling_2", "input": "words_large.txt", "folds": 2,
     "description": "2 folds"},
    {"name": "fold_scaling_4", "input": "words_large.txt", "folds": 4,
     "description": "4 folds"},
    {"name": "fold_scaling_8", "input": "words_large.txt", "folds": 8,
     "description": "8 folds"},
    {"name": "fold_scaling_16", "input": "words_large.txt", "folds": 16,
     "description": "16 folds"},
]


def run_benchmark(config, input_dir, collector, run_number=1):
    """
    Run a single benchmark configuration.

    Args:
        config: Entry of BENCHMARKS
        input_dir: Directory holding the benchmark inputs
        collector: MetricsCollector shared by all runs
        run_number: Repetition index, recorded in the result

    Returns:
        Result dictionary, or None if the input is missing
    """
    print(f"\n{'='*70}")
    print(f"Benchmark: {config['name']} (Run {run_number})")
    print(f"Description: {config['description']}")
    print(f"{'='*70}")

    input_path = Path(input_dir) / config['input']
    coordinator = PipelineCoordinator(
        PipelineConfig(folds=config['folds'], top_k=TOP_K),
        metrics=collector,
    )

    try:
        result = coordinator.run(input_path)
    except SourceReadError as e:
        print(f"❌ {e}")
        print(f"   Skipping this benchmark...")
        return None

    metrics = result.metrics
    duration = metrics.total_time_seconds
    input_mb = metrics.input_size_bytes / 1024 / 1024
    print(f"  ✓ {result.num_chunks} chunks, {metrics.distinct_words} distinct words in {duration:.3f}s")

    return {
        "benchmark_name": config["name"],
        "description": config["description"],
        "run_number": run_number,
        "timestamp": datetime.now().isoformat(),
        "run_id": metrics.run_id,
        "input_file": str(input_path),
        "input_size_bytes": metrics.input_size_bytes,
        "input_size_mb": round(input_mb, 2),
        "folds": config["folds"],
        "num_chunks": result.num_chunks,
        "success": result.complete,
        "total_runtime_seconds": round(duration, 4),
        "split_seconds": round(metrics.split_phase_time_seconds, 4),
        "map_seconds": round(metrics.map_phase_time_seconds, 4),
        "reduce_seconds": round(metrics.reduce_phase_time_seconds, 4),
        "throughput_mbps": round(input_mb / duration, 3) if duration > 0 else 0,
        "distinct_words": metrics.distinct_words,
        "total_words": metrics.total_words,
        "rss_mb": round(metrics.rss_bytes / 1024 / 1024, 2),
    }


def save_results(results, timestamp, results_dir=RESULTS_DIR):
    """Save results to JSON and CSV files."""
    results_dir = Path(results_dir)
    results_dir.mkdir(parents=True, exist_ok=True)

    # JSON format
    json_file = results_dir / f"benchmark_results_{timestamp}.json"
    with open(json_file, 'w') as f:
        json.dump(results, f, indent=2)
    print(f"\n✓ Results saved to: {json_file}")

    # CSV format
    csv_file = results_dir / f"benchmark_results_{timestamp}.csv"
    if results:
        fieldnames = list(results[0].keys())
        with open(csv_file, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(results)
        print(f"✓ Results saved to: {csv_file}")

    return json_file, csv_file


def print_summary(results):
    """Print a summary table of results."""
    print(f"\n{'='*70}")
    print("BENCHMARK SUMMARY")
    print(f"{'='*70}")
    print(f"{'Benchmark':<25} {'Folds':>5} {'Chunks':>7} {'Runtime':>10} {'Complete':>10}")
    print(f"{'-'*70}")

    for r in results:
        print(f"{r['benchmark_name']:<25} {r['folds']:>5} "
              f"{r['num_chunks']:>7} {r['total_runtime_seconds']:>9.3f}s "
              f"{'✓' if r['success'] else '✗':>10}")

    print(f"{'='*70}")

    successful = sum(1 for r in results if r['success'])
    print(f"Total: {len(results)} runs, {successful} complete, "
          f"{len(results) - successful} incomplete")


def main():
    """Main benchmarking workflow."""
    parser = argparse.ArgumentParser(description="Benchmark the word count pipeline")
    parser.add_argument("--runs", type=int, default=1, help="Runs per benchmark (default: 1)")
    parser.add_argument("--input-dir", type=Path, default=INPUT_DIR,
                        help=f"Directory with benchmark inputs (default: {INPUT_DIR})")
    parser.add_argument("--results-dir", type=Path, default=RESULTS_DIR,
                        help=f"Directory for results (default: {RESULTS_DIR})")
    args = parser.parse_args()

    print("="*70)
    print("Word Count Pipeline Benchmark Suite")
    print("="*70)

    runs_per_benchmark = max(1, args.runs)
    print(f"\nRunning {len(BENCHMARKS)} benchmarks × {runs_per_benchmark} runs = "
          f"{len(BENCHMARKS) * runs_per_benchmark} total runs")

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    collector = MetricsCollector()
    all_results = []

    for config in BENCHMARKS:
        for run in range(1, runs_per_benchmark + 1):
            result = run_benchmark(config, args.input_dir, collector, run_number=run)
            if result:
                all_results.append(result)

    if not all_results:
        print("\n❌ No results collected")
        print("   Generate inputs first: python scripts/generate_benchmark_inputs.py")
        return 1

    json_file, _ = save_results(all_results, timestamp, args.results_dir)
    print_summary(all_results)

    print(f"\n{'='*70}")
    print("Next steps:")
    print(f"  1. Review results: cat {json_file}")
    print(f"  2. Generate plots: python plot_results.py {json_file}")
    print(f"{'='*70}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
