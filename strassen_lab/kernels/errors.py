"""
Exceptions raised by the matrix kernels.
"""


class DimensionMismatchError(ValueError):
    """Operand shapes are incompatible for the requested operation."""


def check_inner_dimensions(a_shape, b_shape):
    """Raise DimensionMismatchError unless a_shape[1] == b_shape[0]."""
    if a_shape[1] != b_shape[0]:
        raise DimensionMismatchError(
            f"Dimension mismatch: A.shape[1]={a_shape[1]} != B.shape[0]={b_shape[0]}"
        )


def check_same_shape(a_shape, b_shape):
    """Raise DimensionMismatchError unless both shapes are identical."""
    if tuple(a_shape) != tuple(b_shape):
        raise DimensionMismatchError(
            f"Dimension mismatch: {a_shape[0]}x{a_shape[1]} vs {b_shape[0]}x{b_shape[1]}"
        )
