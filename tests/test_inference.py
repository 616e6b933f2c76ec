"""
test_inference.py
~~~~~~~~~~~~~~~~~

Unit tests for the random-weight inference pipeline, vector reader and CLI.
"""

import math

import pytest
import numpy as np

from strassen_lab.kernels.matrix import Matrix
from strassen_lab.kernels.errors import DimensionMismatchError
from strassen_lab.bench.inference import (
    relu,
    sigmoid,
    NetworkParams,
    calculate_dense_layer,
    inference_process,
    read_input,
    write_output,
    main,
)


@pytest.fixture
def vector_file(tmp_path):
    path = tmp_path / "input.txt"
    path.write_text("1 2 3\n4.5   -1\n\n6\n")
    return path


@pytest.mark.unit
class TestActivations:

    def test_relu(self):
        assert relu(-2.5) == 0.0
        assert relu(0.0) == 0.0
        assert relu(3.25) == 3.25

    def test_sigmoid_uses_positive_exponent(self):
        assert sigmoid(0.0) == 0.5
        assert sigmoid(2.0) == pytest.approx(1.0 / (1.0 + math.e ** 2))
        # Decreasing, unlike the conventional logistic function
        assert sigmoid(5.0) < sigmoid(-5.0)

    def test_sigmoid_large_input_does_not_overflow(self):
        assert sigmoid(1e6) == 0.0
        assert sigmoid(-1e6) == 1.0


@pytest.mark.unit
class TestNetworkParams:

    def test_default_activations(self):
        params = NetworkParams.default()
        assert params.layer_sizes == (512, 512)
        assert params.activation_functions == (relu, sigmoid)
        assert params.bias_limits == (0.0, 10.0)
        assert params.number_of_layers == 2

    def test_default_with_more_layers(self):
        params = NetworkParams.default([8, 4, 2])
        assert params.activation_functions == (relu, relu, sigmoid)

    def test_too_few_activations(self):
        with pytest.raises(ValueError):
            NetworkParams((relu,), (4, 4))

    def test_invalid_sizes(self):
        with pytest.raises(ValueError):
            NetworkParams.default([])
        with pytest.raises(ValueError):
            NetworkParams.default([4, 0])

    def test_invalid_bias_limits(self):
        with pytest.raises(ValueError):
            NetworkParams.default([4], bias_limits=(1.0, 0.0))


@pytest.mark.unit
class TestPipeline:

    def test_dense_layer(self):
        nodes = Matrix([[1.0], [2.0]])
        weights = Matrix([[1.0, -1.0], [2.0, 0.5]])
        bias = Matrix([[0.5], [-4.0]])
        # weights @ nodes = [-1, 3]; + bias = [-0.5, -1]; relu -> [0, 0]
        assert calculate_dense_layer(nodes, weights, bias, relu) == Matrix([[0.0], [0.0]])
        assert calculate_dense_layer(nodes, weights, bias, lambda x: x) == Matrix([[-0.5], [-1.0]])

    def test_dense_layer_shape_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            calculate_dense_layer(Matrix(3, 1), Matrix(2, 2), Matrix(2, 1), relu)

    def test_output_shape(self):
        params = NetworkParams.default([16, 8, 5])
        output = inference_process(Matrix(10, 1), params, rng=np.random.default_rng(3))
        assert output.shape == (5, 1)

    def test_sigmoid_output_range(self):
        params = NetworkParams.default([16, 4])
        inputs = Matrix(10, 1).fill_with_random_numbers(rng=np.random.default_rng(0))
        output = inference_process(inputs, params, rng=np.random.default_rng(1))
        values = output.to_numpy()
        assert np.all((values >= 0.0) & (values <= 1.0))

    def test_seeded_runs_are_reproducible(self):
        params = NetworkParams.default([12, 6])
        inputs = Matrix(9, 1).fill_with_random_numbers(rng=np.random.default_rng(0))
        first = inference_process(inputs, params, rng=np.random.default_rng(11))
        second = inference_process(inputs, params, rng=np.random.default_rng(11))
        assert first.to_list() == second.to_list()

    def test_threshold_does_not_change_result(self):
        params = NetworkParams((relu, lambda x: x), (20, 7))
        inputs = Matrix(18, 1).fill_with_random_numbers(rng=np.random.default_rng(0))
        naive = inference_process(inputs, params, rng=np.random.default_rng(5))
        fast = inference_process(inputs, params, rng=np.random.default_rng(5), threshold=2)
        assert naive == fast

    def test_collects_timings(self):
        timings = []
        inference_process(Matrix(4, 1), NetworkParams.default([3, 2]),
                          rng=np.random.default_rng(0), timings=timings)
        assert len(timings) == 2
        assert all(t >= 0.0 for t in timings)


@pytest.mark.unit
class TestReadWrite:

    def test_read_input_column_vector(self, vector_file):
        m = read_input(vector_file)
        assert m.shape == (6, 1)
        assert m.to_list() == [[1.0], [2.0], [3.0], [4.5], [-1.0], [6.0]]

    def test_read_input_non_numeric(self, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text("1 2\n3 x\n")
        with pytest.raises(ValueError, match="x"):
            read_input(path)

    def test_read_input_empty(self, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("\n  \n")
        with pytest.raises(ValueError):
            read_input(path)

    def test_read_input_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            read_input(tmp_path / "missing.txt")

    def test_write_output(self, tmp_path):
        path = tmp_path / "out.txt"
        write_output(Matrix([[0.25], [1.0]]), path)
        assert path.read_text() == "\n0.25\n1.0"


@pytest.mark.unit
class TestCommandLine:

    def test_reads_file_and_writes_output(self, vector_file, tmp_path):
        out = tmp_path / "out.txt"
        code = main([str(vector_file), "-o", str(out), "-s", "4", "-s", "3", "--seed", "1"])
        assert code == 0
        lines = out.read_text().split("\n")
        assert lines[0] == ""
        assert len(lines) == 4

    def test_generated_input_printed(self, capsys):
        code = main(["unused.txt", "-g", "5", "-s", "3", "--seed", "2", "--threshold", "1"])
        assert code == 0
        printed = capsys.readouterr().out
        assert len(printed.strip().split("\n")) == 3

    def test_seed_makes_output_reproducible(self, tmp_path):
        out1, out2 = tmp_path / "a.txt", tmp_path / "b.txt"
        main(["x", "-g", "6", "-s", "4", "--seed", "9", "-o", str(out1)])
        main(["x", "-g", "6", "-s", "4", "--seed", "9", "-o", str(out2)])
        assert out1.read_text() == out2.read_text()

    def test_missing_source_fails(self, tmp_path, capsys):
        code = main([str(tmp_path / "missing.txt"), "-s", "2"])
        assert code == 1
        assert "error" in capsys.readouterr().err

    def test_malformed_source_fails(self, tmp_path, capsys):
        path = tmp_path / "bad.txt"
        path.write_text("1 two 3")
        assert main([str(path)]) == 1
