"""
Benchmark script for GEMM (Matrix Multiply) kernels.
Compares NumPy (BLAS reference), naive Numba and Strassen multiplication.
Usage: python -m strassen_lab.bench.bench_matmul [--threshold 128]
"""

import os
import time
import logging
from pathlib import Path

# Set thread limits BEFORE importing NumPy to prevent BLAS thread contention
# This ensures fair comparison and stable results
os.environ.setdefault("OMP_NUM_THREADS", "1")
os.environ.setdefault("MKL_NUM_THREADS", "1")
os.environ.setdefault("OPENBLAS_NUM_THREADS", "1")
os.environ.setdefault("NUMEXPR_NUM_THREADS", "1")

import numpy as np
import pandas as pd

from strassen_lab import config
from strassen_lab.kernels.matrix import Matrix

logger = logging.getLogger(__name__)

# Format: (M, K, N) - matrix dimensions
DEFAULT_CONFIGS = [
    (64, 128, 64),      # Small
    (128, 256, 128),    # Medium-small
    (250, 512, 512),    # Straddles power-of-two padding
    (512, 512, 512),    # Medium
    (1024, 1024, 1024), # Large
]


def _runs_for(problem_size, num_runs):
    # Very small sizes need many runs to reduce variance
    if problem_size < 1_000_000:
        return max(num_runs, 100)
    elif problem_size < 100_000_000:
        return max(num_runs, 20)
    return max(3, num_runs // 2)


def _time_kernel(fn, num_warmup, num_runs):
    for _ in range(num_warmup):
        result = fn()

    times = []
    for _ in range(num_runs):
        t_start = time.perf_counter()
        result = fn()
        t_end = time.perf_counter()
        times.append(t_end - t_start)

    return result, np.array(times)


def _row(kernel, M, K, N, times, **extra):
    flops = 2 * M * K * N
    row = {
        'kernel': kernel,
        'M': M, 'K': K, 'N': N,
        'flops': flops,
        # Use median for primary metric (more robust to outliers)
        'latency_ms': np.median(times) * 1000,
        'latency_p50_ms': np.percentile(times, 50) * 1000,
        'latency_p95_ms': np.percentile(times, 95) * 1000,
        'throughput_gflops': (flops / 1e9) / np.median(times),
    }
    row.update(extra)
    return row


def benchmark_matmul(configs, threshold, num_warmup=2, num_runs=5, seed=42):
    """
    Benchmark matrix multiplication kernels.

    Args:
        configs: List of tuples (M, K, N) representing matrix dimensions
        threshold: Strassen threshold used for the 'strassen' kernel
        num_warmup: Number of warmup runs (first one triggers JIT compilation)
        num_runs: Minimum number of timed runs
        seed: seed for the random operands

    Returns:
        DataFrame with benchmark results
    """
    results = []
    rng = np.random.default_rng(seed)

    for M, K, N in configs:
        print(f"\nBenchmarking GEMM: M={M}, K={K}, N={N}")
        actual_runs = _runs_for(M * K * N, num_runs)

        a = Matrix(M, K).fill_with_random_numbers(rng=rng)
        b = Matrix(K, N).fill_with_random_numbers(rng=rng)

        # Reference for correctness check
        C_ref = a.to_numpy() @ b.to_numpy()
        reference = Matrix(C_ref)

        kernels = [
            ('numpy', lambda: Matrix(a.to_numpy() @ b.to_numpy())),
            ('naive', lambda: a.simple_multiply(b)),
            ('strassen', lambda: a.multiply(b, threshold=threshold)),
        ]

        for name, fn in kernels:
            print(f"  Testing {name}...")
            try:
                C, times = _time_kernel(fn, num_warmup, actual_runs)
            except ValueError as e:
                logger.error("%s failed for %dx%dx%d: %s", name, M, K, N, e)
                continue

            if not C.equals(reference, epsilon=1e-6):
                max_diff = np.max(np.abs(C.to_numpy() - C_ref))
                raise AssertionError(f"{name} correctness check failed: max_diff={max_diff:.6e}")

            results.append(_row(name, M, K, N, times, threshold=threshold))
            print(f"    median={results[-1]['latency_ms']:.3f} ms")

    return pd.DataFrame(results)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description='Benchmark GEMM kernels')
    parser.add_argument('--threshold', type=int, default=128,
                        help='Strassen threshold for the benchmark (small so recursion kicks in)')
    parser.add_argument('--runs', type=int, default=5, help='Minimum timed runs per kernel')
    args = parser.parse_args()

    config.configure_logging()

    print("=" * 70)
    print("GEMM Benchmark Suite - NumPy vs naive vs Strassen")
    print("=" * 70)
    print(f"Strassen threshold: {args.threshold}")
    print("=" * 70)

    df = benchmark_matmul(DEFAULT_CONFIGS, args.threshold, num_runs=args.runs)

    # Save results
    output_dir = Path.cwd() / "results"
    output_dir.mkdir(exist_ok=True)
    output_path = output_dir / "matmul_results.csv"
    df.to_csv(output_path, index=False)
    print(f"\nResults saved to: {output_path}")

    # Print summary
    print("\n" + "=" * 60)
    print("Summary")
    print("=" * 60)
    print(df.to_string(index=False))
