"""
Naive GEMM kernel compiled with Numba.
Standard triple loop, float64 accumulation, rows distributed across threads.
Used directly for small matrices and as the leaf case of Strassen recursion.
"""

import numpy as np
from numba import njit, prange

from strassen_lab.kernels.errors import check_inner_dimensions


@njit(parallel=True, cache=True)
def _matmul_naive_kernel(A, B):
    M, K = A.shape
    N = B.shape[1]

    C = np.zeros((M, N), dtype=np.float64)

    # Each output row is owned by exactly one thread
    for i in prange(M):
        for j in range(N):
            acc = 0.0
            for k in range(K):
                acc += A[i, k] * B[k, j]
            C[i, j] = acc

    return C


def matmul_naive(A, B):
    """
    Compute C = A @ B with the textbook triple loop.

    result[i, j] = sum_k A[i, k] * B[k, j]

    Args:
        A: array of shape (M, K)
        B: array of shape (K, N)

    Returns:
        C: numpy array of shape (M, N), dtype float64

    Raises:
        DimensionMismatchError: if A.shape[1] != B.shape[0]
    """
    check_inner_dimensions(A.shape, B.shape)

    # Force contiguous float64 so numba compiles a single specialization
    A = np.ascontiguousarray(A, dtype=np.float64)
    B = np.ascontiguousarray(B, dtype=np.float64)
    return _matmul_naive_kernel(A, B)


def verify_correctness(A, B, C_result, atol=1e-9):
    """Verify that C_result matches A @ B (reference implementation)."""
    C_ref = A @ B
    return np.allclose(C_result, C_ref, rtol=0.0, atol=atol)


if __name__ == "__main__":
    # Test with small matrices
    rng = np.random.default_rng(42)
    M, K, N = 128, 256, 64
    A = rng.random((M, K))
    B = rng.random((K, N))

    print("Running naive matmul (numba)...")
    # Warmup triggers JIT compilation
    _ = matmul_naive(A[:4, :4], B[:4, :4])

    C = matmul_naive(A, B)

    if verify_correctness(A, B, C):
        print("Correctness check passed!")
    else:
        print("Correctness check failed!")
        print(f"Max diff: {np.max(np.abs(C - A @ B)):.6e}")
