"""
Profiling script for Strassen multiplication.
Uses cProfile to see where the recursion spends its time
(block copies, elementwise adds, naive leaf products).
"""

import cProfile
import pstats

import numpy as np

from strassen_lab.kernels.matrix import Matrix


def profile_strassen(size=300, threshold=32, top=15):
    """Profile one recursive multiply of two random size x size matrices."""
    print(f"Profiling Strassen matmul: {size}x{size}, threshold={threshold}...")
    rng = np.random.default_rng(42)
    a = Matrix(size, size).fill_with_random_numbers(rng=rng)
    b = Matrix(size, size).fill_with_random_numbers(rng=rng)

    # Warmup so JIT compilation stays out of the profile
    a.sub_matrix(0, 2, 0, 2).simple_multiply(b.sub_matrix(0, 2, 0, 2))

    profiler = cProfile.Profile()
    profiler.enable()
    a.multiply(b, threshold=threshold)
    profiler.disable()

    stats = pstats.Stats(profiler)
    stats.sort_stats('cumulative')
    print(f"\nTop {top} functions by cumulative time:")
    stats.print_stats(top)

    return stats


if __name__ == "__main__":
    print("=" * 60)
    print("Strassen Profiling")
    print("=" * 60)

    profile_strassen()

    print("\n" + "=" * 60)
    print("Profiling complete!")
    print("=" * 60)
