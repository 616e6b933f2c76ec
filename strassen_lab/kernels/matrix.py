"""
Dense float64 matrix with elementwise arithmetic and fast multiplication.

The backing grid is a C-contiguous numpy array owned by the instance.
Every operation that changes shape returns a new Matrix; only
fill_with_random_numbers mutates in place.
"""

import numbers

import numpy as np

from strassen_lab import config
from strassen_lab.kernels.errors import check_inner_dimensions, check_same_shape
from strassen_lab.kernels.matmul_naive import matmul_naive
from strassen_lab.kernels.matmul_strassen import next_power_of_two, strassen_multiply


class Matrix:
    """
    Rectangular row-major grid of double-precision values.

    Construct from explicit data, ``Matrix([[1, 2], [3, 4]])``, or as a
    zero-filled grid, ``Matrix(rows, cols)``.
    """

    __slots__ = ("_values",)

    def __init__(self, data, cols=None):
        if cols is not None:
            rows = data
            if not _is_positive_int(rows) or not _is_positive_int(cols):
                raise ValueError(
                    f"Matrix dimensions must be positive integers, got {rows}x{cols}"
                )
            self._values = np.zeros((rows, cols), dtype=np.float64)
            return

        try:
            values = np.array(data, dtype=np.float64)
        except ValueError as e:
            # Ragged rows and non-numeric entries both end up here
            raise ValueError(f"Invalid matrix data: {e}") from e

        if values.ndim != 2:
            raise ValueError(f"Matrix data must be two-dimensional, got ndim={values.ndim}")
        if values.shape[0] == 0 or values.shape[1] == 0:
            raise ValueError("Matrix data must contain at least one row and one column")

        self._values = np.ascontiguousarray(values)

    @classmethod
    def _wrap(cls, values):
        # Takes ownership of an array produced internally; no copy
        matrix = cls.__new__(cls)
        matrix._values = np.ascontiguousarray(values, dtype=np.float64)
        return matrix

    @property
    def rows(self):
        return self._values.shape[0]

    @property
    def cols(self):
        return self._values.shape[1]

    @property
    def shape(self):
        return self._values.shape

    def __getitem__(self, index):
        i, j = index
        return float(self._values[i, j])

    def to_list(self):
        return self._values.tolist()

    def to_numpy(self):
        """Copy of the backing grid as a float64 array."""
        return self._values.copy()

    def fill_with_random_numbers(self, lo=0.0, hi=1.0, rng=None):
        """
        Fill the matrix in place with uniform random numbers.

        Args:
            lo: lower bound (inclusive)
            hi: upper bound (exclusive)
            rng: numpy.random.Generator to draw from; a fresh unseeded
                generator is used when omitted

        Returns:
            self, to allow chaining with construction
        """
        if not lo < hi:
            raise ValueError(f"Random range must satisfy lo < hi, got [{lo}, {hi})")
        if rng is None:
            rng = np.random.default_rng()
        self._values[...] = rng.uniform(lo, hi, size=self._values.shape)
        return self

    # Elementwise operations

    def add(self, other):
        check_same_shape(self.shape, other.shape)
        return Matrix._wrap(self._values + other._values)

    def subtract(self, other):
        check_same_shape(self.shape, other.shape)
        return Matrix._wrap(self._values - other._values)

    def apply_function(self, func):
        """
        Apply a scalar function to each element.

        Args:
            func: function from float to float, assumed pure

        Returns:
            New matrix of the same shape holding func(element)
        """
        flat = [func(float(x)) for x in self._values.ravel()]
        return Matrix._wrap(np.array(flat, dtype=np.float64).reshape(self.shape))

    def transpose(self):
        return Matrix._wrap(self._values.T.copy())

    def equals(self, other, epsilon=config.EQUALITY_EPSILON):
        """True iff shapes match and every element differs by less than epsilon."""
        if self.shape != other.shape:
            return False
        return bool(np.all(np.abs(self._values - other._values) < epsilon))

    # Multiplication

    def simple_multiply(self, other):
        """Naive triple-loop product; raises DimensionMismatchError if cols != other.rows."""
        check_inner_dimensions(self.shape, other.shape)
        return Matrix._wrap(matmul_naive(self._values, other._values))

    def multiply(self, other, threshold=None):
        """
        Matrix product using Strassen's algorithm above the size threshold.

        Small matrices (either dimension of self <= threshold) go through
        simple_multiply. Larger ones are padded to a power-of-two square and
        multiplied recursively.

        Args:
            other: right-hand operand, other.rows must equal self.cols
            threshold: naive/Strassen switch point; defaults to
                config.SIMPLE_MULTIPLICATION_THRESHOLD

        Returns:
            New matrix of shape (self.rows, other.cols)

        Raises:
            DimensionMismatchError: if self.cols != other.rows
        """
        return strassen_multiply(self, other, threshold)

    # Block helpers used by the recursion

    def sub_matrix(self, start_row, end_row, start_col, end_col):
        """Copy of rows [start_row, end_row) and columns [start_col, end_col)."""
        if not (0 <= start_row < end_row <= self.rows and 0 <= start_col < end_col <= self.cols):
            raise ValueError(
                f"Invalid block [{start_row}:{end_row}, {start_col}:{end_col}] "
                f"for {self.rows}x{self.cols} matrix"
            )
        return Matrix._wrap(self._values[start_row:end_row, start_col:end_col].copy())

    def squarify(self, size=None):
        """
        Zero-pad to a size x size square.

        Args:
            size: target side; defaults to the next power of two of the
                larger dimension and must cover both dimensions

        Returns:
            New padded matrix
        """
        if size is None:
            size = next_power_of_two(max(self.rows, self.cols))
        if size < self.rows or size < self.cols:
            raise ValueError(f"Cannot squarify {self.rows}x{self.cols} matrix to side {size}")

        padded = np.zeros((size, size), dtype=np.float64)
        padded[:self.rows, :self.cols] = self._values
        return Matrix._wrap(padded)

    def unsquarify(self, rows, cols):
        """Crop back to rows x cols, discarding padding."""
        return self.sub_matrix(0, rows, 0, cols)

    def split(self):
        """
        Split a square matrix with even side into four quadrants.

        Returns:
            (top_left, top_right, bottom_left, bottom_right)
        """
        if self.rows != self.cols or self.rows % 2 != 0:
            raise ValueError(f"Only even-sided square matrices can be split, got {self.rows}x{self.cols}")

        half = self.rows // 2
        return (
            self.sub_matrix(0, half, 0, half),
            self.sub_matrix(0, half, half, self.cols),
            self.sub_matrix(half, self.rows, 0, half),
            self.sub_matrix(half, self.rows, half, self.cols),
        )

    @classmethod
    def merge(cls, top_left, top_right, bottom_left, bottom_right):
        """Inverse of split: assemble four equal square quadrants into one matrix."""
        half = top_left.rows
        for part in (top_left, top_right, bottom_left, bottom_right):
            if part.shape != (half, half):
                raise ValueError(f"Quadrants must all be {half}x{half}, got {part.rows}x{part.cols}")

        merged = np.empty((2 * half, 2 * half), dtype=np.float64)
        merged[:half, :half] = top_left._values
        merged[:half, half:] = top_right._values
        merged[half:, :half] = bottom_left._values
        merged[half:, half:] = bottom_right._values
        return cls._wrap(merged)

    # Operator sugar for the named methods

    def __add__(self, other):
        return self.add(other)

    def __sub__(self, other):
        return self.subtract(other)

    def __mul__(self, other):
        return self.multiply(other)

    __matmul__ = __mul__

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def to_text(self, separator=""):
        """
        Render as text: every row starts on a new line and its values are
        joined by separator (concatenated by default).
        """
        lines = []
        for row in self._values:
            lines.append("\n" + separator.join(repr(float(x)) for x in row))
        return "".join(lines)

    def __str__(self):
        return self.to_text()

    def __repr__(self):
        return f"Matrix(rows={self.rows}, cols={self.cols})"


def _is_positive_int(value):
    return isinstance(value, numbers.Integral) and not isinstance(value, bool) and value > 0
