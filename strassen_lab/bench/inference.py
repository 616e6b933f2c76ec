"""
Toy dense-network inference chaining the matrix kernels together.
Per layer: Weights @ nodes (Strassen/naive GEMM) -> + bias -> activation

Weights and biases are random, drawn from an injected numpy Generator.
Usage: python -m strassen_lab.bench.inference input.txt -o out.txt -s 512 -s 512
"""

import sys
import math
import time
import logging
import argparse
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from strassen_lab import config
from strassen_lab.kernels.matrix import Matrix

logger = logging.getLogger(__name__)

# exp() overflows a double beyond this
_EXP_LIMIT = 709.0


def relu(x):
    return max(0.0, x)


def sigmoid(x):
    """Logistic-style squash, 1 / (1 + e^x). Note the positive exponent."""
    if x > _EXP_LIMIT:
        return 0.0
    return 1.0 / (1.0 + math.exp(x))


@dataclass(frozen=True)
class NetworkParams:
    """Immutable description of the layer stack."""

    activation_functions: tuple
    layer_sizes: tuple
    bias_limits: tuple = config.DEFAULT_BIAS_LIMITS

    def __post_init__(self):
        if len(self.layer_sizes) == 0:
            raise ValueError("At least one layer size is required")
        if any(size <= 0 for size in self.layer_sizes):
            raise ValueError(f"Layer sizes must be positive, got {list(self.layer_sizes)}")
        if len(self.activation_functions) < len(self.layer_sizes):
            raise ValueError(
                f"{len(self.layer_sizes)} layers need as many activation functions, "
                f"got {len(self.activation_functions)}"
            )
        lo, hi = self.bias_limits
        if not lo < hi:
            raise ValueError(f"Bias limits must satisfy lo < hi, got {self.bias_limits}")

    @property
    def number_of_layers(self):
        return len(self.layer_sizes)

    @classmethod
    def default(cls, layer_sizes=config.DEFAULT_LAYER_SIZES, bias_limits=config.DEFAULT_BIAS_LIMITS):
        """ReLU on every hidden layer, sigmoid on the last one."""
        layer_sizes = tuple(layer_sizes)
        activations = (relu,) * (len(layer_sizes) - 1) + (sigmoid,)
        return cls(activations, layer_sizes, tuple(bias_limits))


def calculate_dense_layer(nodes, weights, bias, function, threshold=None):
    """
    One dense layer: function(weights @ nodes + bias).

    Args:
        nodes: column Matrix (input_size, 1)
        weights: Matrix (output_size, input_size)
        bias: column Matrix (output_size, 1)
        function: scalar activation
        threshold: Strassen threshold forwarded to Matrix.multiply

    Returns:
        Column Matrix (output_size, 1)
    """
    weighted = weights.multiply(nodes, threshold=threshold)
    return weighted.add(bias).apply_function(function)


def inference_process(input_nodes, params, rng=None, threshold=None, timings=None):
    """
    Feed input_nodes through every layer described by params.

    Args:
        input_nodes: column Matrix
        params: NetworkParams
        rng: numpy.random.Generator for weights and biases
        threshold: Strassen threshold forwarded to Matrix.multiply
        timings: optional list; per-layer latency in ms is appended to it

    Returns:
        Output column Matrix of size params.layer_sizes[-1]
    """
    if rng is None:
        rng = np.random.default_rng()

    current_layer = input_nodes
    for i in range(params.number_of_layers):
        size = params.layer_sizes[i]
        weights = Matrix(size, current_layer.rows).fill_with_random_numbers(rng=rng)
        bias = Matrix(size, 1).fill_with_random_numbers(*params.bias_limits, rng=rng)

        t_start = time.perf_counter()
        current_layer = calculate_dense_layer(
            current_layer, weights, bias, params.activation_functions[i], threshold
        )
        t_end = time.perf_counter()

        elapsed_ms = (t_end - t_start) * 1000
        if timings is not None:
            timings.append(elapsed_ms)
        logger.info("layer %d: %dx%d weights, %.3f ms", i, weights.rows, weights.cols, elapsed_ms)

    return current_layer


def read_input(path):
    """
    Read a vector from a text file.

    All whitespace-separated tokens, across every line, are concatenated
    into one column vector.

    Raises:
        ValueError: on a non-numeric token or an empty file
    """
    values = []
    with open(path) as f:
        for line_number, line in enumerate(f, start=1):
            for token in line.split():
                try:
                    values.append(float(token))
                except ValueError:
                    raise ValueError(f"{path}:{line_number}: not a number: {token!r}") from None

    if not values:
        raise ValueError(f"{path}: no values found")

    return Matrix([values]).transpose()


def write_output(matrix, path):
    Path(path).write_text(str(matrix))


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Random-weight dense network inference')
    parser.add_argument('source', type=Path, help='source filename')
    parser.add_argument('-o', '--out', type=Path, default=None,
                        help='destination filename (prints to stdout if omitted)')
    parser.add_argument('-g', '--gen', type=int, default=None,
                        help='ignore input file and generate random input vector of given size')
    parser.add_argument('-s', '--size', type=int, action='append', default=None,
                        help='size of a dense layer, repeat per layer (by default 512 and 512)')
    parser.add_argument('--seed', type=int, default=None,
                        help='seed for weights, biases and generated input')
    parser.add_argument('--threshold', type=int, default=None,
                        help='naive multiplication threshold '
                             f'(default {config.SIMPLE_MULTIPLICATION_THRESHOLD})')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='log per-layer timings')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    config.configure_logging("INFO" if args.verbose else None)

    rng = np.random.default_rng(args.seed)
    sizes = args.size if args.size else list(config.DEFAULT_LAYER_SIZES)

    try:
        params = NetworkParams.default(sizes)
        if args.gen is None:
            input_nodes = read_input(args.source)
        else:
            input_nodes = Matrix(args.gen, 1).fill_with_random_numbers(rng=rng)

        processed = inference_process(input_nodes, params, rng=rng, threshold=args.threshold)

        if args.out is None:
            print(processed)
        else:
            write_output(processed, args.out)
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
