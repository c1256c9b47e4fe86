#!/usr/bin/env python3
"""
Plot word count benchmark results.

Reads the JSON written by benchmark.py, averages repeated runs and draws
one figure per experiment plus a markdown summary table.

Usage:
    python plot_results.py benchmark_results/benchmark_results_<stamp>.json
"""

import json
import sys
from pathlib import Path
from collections import defaultdict

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np

PLOTS_DIR = Path("benchmark_results/plots")

INPUT_SIZE_PREFIX = 'input_size_'
FOLD_SCALING_PREFIX = 'fold_scaling_'


def load_results(json_file):
    """Load benchmark results from JSON file."""
    with open(json_file, 'r') as f:
        return json.load(f)


def aggregate_runs(results):
    """
    Collapse repeated runs of each benchmark into one summary entry

    Runs that dropped chunks are left out, their timings would not be
    comparable with complete runs.

    Returns:
        Dict of benchmark name to its averaged timings and configuration
    """
    runs_by_name = defaultdict(list)
    for run in results:
        if run['success']:
            runs_by_name[run['benchmark_name']].append(run)

    aggregated = {}
    for name, runs in runs_by_name.items():
        runtimes = np.array([run['total_runtime_seconds'] for run in runs])
        entry = {key: runs[0].get(key) for key in
                 ('description', 'folds', 'num_chunks', 'input_size_mb', 'distinct_words')}
        entry.update(
            benchmark_name=name,
            num_runs=len(runs),
            avg_runtime=float(runtimes.mean()),
            std_runtime=float(runtimes.std()),
            min_runtime=float(runtimes.min()),
            max_runtime=float(runtimes.max()),
            avg_throughput=_mean(runs, 'throughput_mbps'),
            avg_split=_mean(runs, 'split_seconds'),
            avg_map=_mean(runs, 'map_seconds'),
            avg_reduce=_mean(runs, 'reduce_seconds'),
        )
        aggregated[name] = entry

    return aggregated


def _mean(runs, key):
    return float(np.mean([run[key] for run in runs]))


def _experiment(aggregated, prefix, *keys):
    """Rows of the requested keys for one experiment, ordered by the first key."""
    return sorted(tuple(entry[key] for key in keys)
                  for name, entry in aggregated.items() if name.startswith(prefix))


def _save(fig, output_file):
    fig.tight_layout()
    fig.savefig(output_file, dpi=150, bbox_inches='tight')
    plt.close(fig)
    print(f"✓ Saved: {output_file}")


def _runtime_figure(rows, xlabel, title, **style):
    """Mean runtime with a standard deviation band for (x, mean, std) rows."""
    xs, means, stds = (np.array(column) for column in zip(*rows))
    fig, ax = plt.subplots(figsize=(10, 6))
    ax.errorbar(xs, means, yerr=stds, capsize=4, linewidth=2, markersize=7, **style)
    ax.set_xlabel(xlabel)
    ax.set_ylabel('Runtime (seconds)')
    ax.set_title(title, fontweight='bold')
    ax.grid(True, alpha=0.3)
    return fig, ax


def plot_input_size_scaling(aggregated, output_file):
    """Runtime against input size at a fixed fold count."""
    rows = _experiment(aggregated, INPUT_SIZE_PREFIX, 'input_size_mb', 'avg_runtime', 'std_runtime')
    if not rows:
        print("⚠️  No input size scaling data found")
        return

    fig, _ = _runtime_figure(rows, 'Input size (MB)', 'Runtime by input size', marker='o')
    _save(fig, output_file)


def plot_fold_scaling(aggregated, output_file):
    """Runtime against fold count on the same input."""
    rows = _experiment(aggregated, FOLD_SCALING_PREFIX, 'folds', 'avg_runtime', 'std_runtime')
    if not rows:
        print("⚠️  No fold scaling data found")
        return

    fig, ax = _runtime_figure(rows, 'Folds', 'Runtime by fold count', marker='s', color='orangered')
    ax.set_xscale('log', base=2)
    ax.set_xticks([row[0] for row in rows])
    ax.set_xticklabels([str(row[0]) for row in rows])
    _save(fig, output_file)


def plot_speedup(aggregated, output_file):
    """Speedup over the smallest fold count, next to the linear ideal."""
    rows = _experiment(aggregated, FOLD_SCALING_PREFIX, 'folds', 'avg_runtime')
    if len(rows) < 2:
        print("⚠️  Need at least two fold counts for a speedup plot")
        return

    folds, runtimes = (np.array(column, dtype=float) for column in zip(*rows))
    speedup = runtimes[0] / runtimes
    ideal = folds / folds[0]

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(folds, speedup, marker='o', linewidth=2, label='Measured')
    ax.plot(folds, ideal, linestyle='--', color='gray', label='Linear')
    ax.set_xlabel('Folds')
    ax.set_ylabel(f'Speedup over {int(folds[0])} fold(s)')
    ax.set_title('Fold speedup', fontweight='bold')
    ax.set_xticks(folds)
    ax.legend()
    ax.grid(True, alpha=0.3)
    _save(fig, output_file)


def plot_phase_breakdown(aggregated, output_file):
    """Stacked bars of split, map and reduce time per fold count."""
    rows = _experiment(aggregated, FOLD_SCALING_PREFIX, 'folds', 'avg_split', 'avg_map', 'avg_reduce')
    if not rows:
        print("⚠️  No fold scaling data found")
        return

    folds, *phases = (np.array(column) for column in zip(*rows))
    positions = np.arange(len(folds))
    labels = ('Split', 'Map + collect', 'Reduce + join')

    fig, ax = plt.subplots(figsize=(10, 6))
    bottom = np.zeros(len(folds))
    for label, seconds in zip(labels, phases):
        ax.bar(positions, seconds, bottom=bottom, label=label)
        bottom = bottom + seconds
    ax.set_xticks(positions)
    ax.set_xticklabels([str(f) for f in folds])
    ax.set_xlabel('Folds')
    ax.set_ylabel('Time (seconds)')
    ax.set_title('Time per phase', fontweight='bold')
    ax.legend()
    ax.grid(True, axis='y', alpha=0.3)
    _save(fig, output_file)


def generate_summary_table(aggregated, output_file):
    """Write one markdown row per benchmark."""
    header = ('Benchmark', 'Folds', 'Chunks', 'Input (MB)', 'Runs',
              'Mean (s)', 'Min (s)', 'Max (s)', 'MB/s', 'Distinct words')
    lines = ["# Word count benchmark summary", "",
             "| " + " | ".join(header) + " |",
             "|" + "|".join("---" for _ in header) + "|"]

    for name in sorted(aggregated):
        entry = aggregated[name]
        distinct = entry.get('distinct_words')
        cells = (
            name, entry['folds'], entry['num_chunks'], f"{entry['input_size_mb']:.2f}", entry['num_runs'],
            f"{entry['avg_runtime']:.3f}", f"{entry['min_runtime']:.3f}", f"{entry['max_runtime']:.3f}",
            f"{entry['avg_throughput']:.2f}", '-' if distinct is None else distinct,
        )
        lines.append("| " + " | ".join(str(cell) for cell in cells) + " |")

    Path(output_file).write_text('\n'.join(lines) + '\n')
    print(f"✓ Saved: {output_file}")


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    json_file = Path(sys.argv[1])
    if not json_file.exists():
        print(f"❌ File not found: {json_file}")
        sys.exit(1)

    results = load_results(json_file)
    aggregated = aggregate_runs(results)
    print(f"✓ {len(results)} runs from {json_file}, {len(aggregated)} complete benchmarks")

    PLOTS_DIR.mkdir(parents=True, exist_ok=True)
    plot_input_size_scaling(aggregated, PLOTS_DIR / "input_size_scaling.png")
    plot_fold_scaling(aggregated, PLOTS_DIR / "fold_scaling.png")
    plot_speedup(aggregated, PLOTS_DIR / "fold_speedup.png")
    plot_phase_breakdown(aggregated, PLOTS_DIR / "phase_breakdown.png")
    generate_summary_table(aggregated, PLOTS_DIR / "results_table.md")

    print(f"All plots saved to: {PLOTS_DIR}/")


if __name__ == "__main__":
    main()
