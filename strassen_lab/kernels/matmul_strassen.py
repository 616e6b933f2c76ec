"""
Strassen divide-and-conquer GEMM.

Operands are padded with zeros to a common power-of-two square, split into
quadrants, combined with seven recursive products instead of eight, merged
and cropped back to the true product shape. Below the threshold the naive
kernel takes over.

Works on strassen_lab.kernels.matrix.Matrix instances.
"""

import logging

from strassen_lab import config
from strassen_lab.kernels.errors import check_inner_dimensions

logger = logging.getLogger(__name__)


def next_power_of_two(n):
    """Smallest power of two that is >= n (n >= 1)."""
    if n < 1:
        raise ValueError(f"n must be positive, got {n}")
    return 1 << (n - 1).bit_length()


def resolve_threshold(threshold):
    if threshold is None:
        threshold = config.SIMPLE_MULTIPLICATION_THRESHOLD
    if threshold < 1:
        raise ValueError(f"Threshold must be at least 1, got {threshold}")
    return threshold


def strassen_multiply(a, b, threshold=None):
    """
    Multiply two matrices with Strassen's algorithm.

    Seven products per level:
        M1 = (A11 + A22)(B11 + B22)
        M2 = (A21 + A22) B11
        M3 = A11 (B12 - B22)
        M4 = A22 (B21 - B11)
        M5 = (A11 + A12) B22
        M6 = (A21 - A11)(B11 + B12)
        M7 = (A12 - A22)(B21 + B22)
    recombined as
        C11 = M1 + M4 - M5 + M7
        C12 = M3 + M5
        C21 = M2 + M4
        C22 = M1 - M2 + M3 + M6

    Args:
        a: Matrix of shape (M, K)
        b: Matrix of shape (K, N)
        threshold: largest dimension handled by naive multiplication;
            defaults to config.SIMPLE_MULTIPLICATION_THRESHOLD

    Returns:
        New Matrix of shape (M, N)

    Raises:
        DimensionMismatchError: if a.cols != b.rows
        ValueError: if threshold < 1
    """
    check_inner_dimensions(a.shape, b.shape)
    threshold = resolve_threshold(threshold)

    if a.rows <= threshold or a.cols <= threshold:
        return a.simple_multiply(b)

    # One common side so that quadrants of a and b line up
    size = next_power_of_two(max(a.rows, a.cols, b.cols))
    logger.debug("strassen: %dx%d @ %dx%d padded to %d",
                 a.rows, a.cols, b.rows, b.cols, size)

    a11, a12, a21, a22 = a.squarify(size).split()
    b11, b12, b21, b22 = b.squarify(size).split()

    m1 = strassen_multiply(a11.add(a22), b11.add(b22), threshold)
    m2 = strassen_multiply(a21.add(a22), b11, threshold)
    m3 = strassen_multiply(a11, b12.subtract(b22), threshold)
    m4 = strassen_multiply(a22, b21.subtract(b11), threshold)
    m5 = strassen_multiply(a11.add(a12), b22, threshold)
    m6 = strassen_multiply(a21.subtract(a11), b11.add(b12), threshold)
    m7 = strassen_multiply(a12.subtract(a22), b21.add(b22), threshold)

    c11 = m1.add(m4).subtract(m5).add(m7)
    c12 = m3.add(m5)
    c21 = m2.add(m4)
    c22 = m1.subtract(m2).add(m3).add(m6)

    merged = type(a).merge(c11, c12, c21, c22)
    return merged.unsquarify(a.rows, b.cols)
