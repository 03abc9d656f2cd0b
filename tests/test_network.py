"""
Tests for Network construction, activation and backpropagation.

Run with: python -m pytest tests/test_network.py -v
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from neuronet.core.exceptions import (
    ConstructionError,
    NumericError,
    ShapeMismatchError,
    TrainingOrderError,
)
from neuronet.core.layer import Layer
from neuronet.core.network import Network, NetworkConfig, NetworkState
from neuronet.datasets import xor_truth_table


def numeric_gradients(network, inputs, target, h=1e-6):
    """Finite-difference gradient of the network error for every connection."""
    grads = []
    for connection in network.connections:
        original = connection.weight
        connection.weight = original + h
        network.activate(inputs)
        up = network.compute_error(target)
        connection.weight = original - h
        network.activate(inputs)
        down = network.compute_error(target)
        connection.weight = original
        grads.append((up - down) / (2 * h))
    return grads


def backprop_gradients(network, inputs, target):
    network.activate(inputs)
    network.backprop(target)
    network.accumulate_gradients()
    return network.gradients()


class TestConstruction:
    """Both construction modes and their failures."""

    @pytest.mark.parametrize('layers', ['2,3,1', 5, None, {2: 3}])
    def test_layers_must_be_a_list(self, layers):
        with pytest.raises(ConstructionError, match='must be a list'):
            Network(layers)

    def test_empty_layers(self):
        with pytest.raises(ConstructionError):
            Network([])

    @pytest.mark.parametrize('layers', [
        [2, 'three', 1],
        [2, None],
        [2, 1.5],
        [True, 1],
        [Layer(2), 3],
    ])
    def test_invalid_elements(self, layers):
        with pytest.raises(ConstructionError):
            Network(layers)

    @pytest.mark.parametrize('sizes', [[2, 0, 1], [-1, 2]])
    def test_non_positive_sizes(self, sizes):
        with pytest.raises(ConstructionError):
            Network(sizes)

    def test_unknown_names_are_construction_errors(self):
        with pytest.raises(ConstructionError):
            Network([2, 1], activation='nope')
        with pytest.raises(ConstructionError):
            Network([2, 1], error_function='nope')

    def test_same_layer_twice(self):
        layer = Layer(2)
        with pytest.raises(ConstructionError):
            Network([layer, layer])

    def test_sizes_mode_layout(self):
        net = Network([2, 3, 4, 1], activation='hyperbolic', output_activation='identity')

        assert len(net.layers) == 4
        assert net.input_layer.activation.name == 'identity'
        assert [layer.activation.name for layer in net.hidden_layers] == ['hyperbolic'] * 2
        assert net.output_layer.activation.name == 'identity'
        assert [layer.bias for layer in net.layers] == [True, True, True, False]
        assert net.input_size == 2
        assert net.output_size == 1
        assert len(net.connections) == 3 * 3 + 4 * 4 + 5 * 1

    def test_without_bias(self):
        net = Network([2, 3, 1], bias=False)
        assert not any(layer.bias for layer in net.layers)
        assert len(net.connections) == 2 * 3 + 3 * 1

    def test_layers_mode_connects_and_shares_one_graph(self):
        layers = [Layer(2, 'identity', bias=True), Layer(3, 'tanh', bias=True), Layer(2, 'softmax')]
        net = Network(layers, error_function='sum_squared')

        assert net.layers == layers
        assert net.layers is not layers
        assert all(layer.graph is net.graph for layer in net.layers)
        assert len(net.connections) == 3 * 3 + 4 * 2
        assert net.error_function.name == 'sum_squared'

    def test_prewired_layers_are_not_reconnected(self):
        first, second = Layer(2, 'identity'), Layer(1, 'identity')
        first.connect(second, initializer=lambda fan_in: 0.5)
        net = Network([first, second])
        assert len(net.connections) == 2
        assert net.activate([1.0, 1.0]) == [1.0]

    def test_from_config(self):
        config = NetworkConfig(sizes=[2, 4, 1], activation='hyperbolic', seed=3)
        net = Network.from_config(config)
        assert config.depth == 1
        assert config.total_params == len(net.connections) == 3 * 4 + 5 * 1
        assert net.weights() == Network([2, 4, 1], activation='hyperbolic', seed=3).weights()

    def test_single_layer_network(self):
        net = Network([3])
        assert net.input_layer is net.output_layer
        assert net.hidden_layers == []
        assert net.activate([1, 2, 3]) == [1.0, 2.0, 3.0]

    def test_seeded_weights_are_distinct_and_reproducible(self):
        first = Network([2, 4, 1], seed=42).weights()
        second = Network([2, 4, 1], seed=42).weights()
        assert first == second
        assert len(set(first)) == len(first)


class TestActivation:
    """Forward pass behaviour."""

    @pytest.mark.parametrize('sizes', [[1, 1], [2, 3, 1], [4, 5, 5, 3], [3, 2, 6], [5]])
    def test_output_length_matches_output_layer(self, sizes):
        net = Network(sizes, seed=0)
        output = net.activate(np.zeros(sizes[0]) + 0.5)
        assert len(output) == sizes[-1]
        assert net.last_output == output

    def test_activate_is_idempotent(self):
        net = Network([3, 5, 2], activation='tanh', seed=1)
        first = net.activate([0.1, -0.4, 0.9])
        second = net.activate([0.1, -0.4, 0.9])
        assert first == second

    def test_output_excludes_bias_slot(self):
        net = Network([Layer(2, 'identity'), Layer(1, 'identity', bias=True)], seed=0)
        output = net.activate([1.0, 2.0])
        assert len(output) == 1
        assert len(net.output_layer.activate()) == 2

    def test_input_shape_mismatch_leaves_state_alone(self):
        net = Network([2, 2, 1], seed=0)
        previous = net.activate([1, 0])
        with pytest.raises(ShapeMismatchError):
            net.activate([1, 0, 1])
        with pytest.raises(ShapeMismatchError):
            net.activate([])
        assert net.last_output == previous
        assert net.input_layer.outputs() == [1.0, 0.0]

    def test_never_connected_interior_layer(self):
        layers = [Layer(2, 'identity'), Layer(3, 'identity'), Layer(2, 'identity')]
        net = Network(layers, connect=False)
        assert len(net.connections) == 0
        assert net.activate([4.0, 5.0]) == [0.0, 0.0]

    def test_never_connected_logistic_layer_outputs_half(self):
        net = Network([Layer(2, 'identity'), Layer(2, 'logistic')], connect=False)
        assert net.activate([1.0, 1.0]) == [0.5, 0.5]

    def test_softmax_output_sums_to_one(self):
        net = Network([Layer(3, 'identity', bias=True), Layer(4, 'softmax')], seed=2)
        assert sum(net.activate([3.0, -1.0, 0.5])) == pytest.approx(1.0, abs=1e-9)

    def test_non_finite_output_raises(self):
        net = Network([Layer(2, 'identity'), Layer(1, 'identity')])
        for connection in net.connections:
            connection.weight = 1e308
        with pytest.raises(NumericError):
            net.activate([10.0, 10.0])


class TestTrainingStep:
    """State machine and gradient correctness."""

    def test_state_transitions(self):
        net = Network([2, 2, 1], seed=0)
        assert net.state == NetworkState.IDLE

        net.activate([0, 1])
        assert net.state == NetworkState.ACTIVATED
        error = net.compute_error([1])
        assert net.state == NetworkState.ERROR_COMPUTED
        assert error == net.last_error

        net.backprop([1])
        assert net.state == NetworkState.DELTAS_PROPAGATED
        net.accumulate_gradients()
        assert net.state == NetworkState.GRADIENTS_ACCUMULATED
        assert net.pending_gradients == 1

        net.update_weights(0.1)
        assert net.state == NetworkState.IDLE
        assert net.pending_gradients == 0

    def test_out_of_order_calls(self):
        net = Network([2, 2, 1], seed=0)
        with pytest.raises(TrainingOrderError):
            net.backprop([1])
        with pytest.raises(TrainingOrderError):
            net.compute_error([1])
        with pytest.raises(TrainingOrderError):
            net.accumulate_gradients()
        with pytest.raises(TrainingOrderError):
            net.update_weights(0.1)

        net.activate([1, 1])
        with pytest.raises(TrainingOrderError):
            net.accumulate_gradients()

        net.backprop([0])
        net.accumulate_gradients()
        with pytest.raises(TrainingOrderError):
            net.accumulate_gradients()
        with pytest.raises(TrainingOrderError):
            net.backprop([0])

    def test_target_shape_mismatch(self):
        net = Network([2, 2, 1], seed=0)
        net.activate([1, 1])
        with pytest.raises(ShapeMismatchError):
            net.backprop([1, 0])
        with pytest.raises(ShapeMismatchError):
            net.compute_error([])
        assert net.state == NetworkState.ACTIVATED

    def test_compute_error_does_not_touch_neurons(self):
        net = Network([2, 3, 1], seed=0)
        net.activate([0.5, 0.5])
        before = [(n.value, n.delta) for n in net.graph.neurons]
        assert net.compute_error([1.0]) == pytest.approx((net.last_output[0] - 1.0) ** 2)
        assert [(n.value, n.delta) for n in net.graph.neurons] == before

    @pytest.mark.parametrize('output_activation', ['logistic', 'identity', 'hyperbolic', 'tanh'])
    def test_gradients_match_finite_differences(self, output_activation):
        net = Network(
            [2, 3, 2],
            activation='hyperbolic',
            output_activation=output_activation,
            error_function='sum_squared',
            seed=4,
        )
        inputs, target = [0.3, -0.7], [0.2, 0.9]

        expected = numeric_gradients(net, inputs, target)
        actual = backprop_gradients(net, inputs, target)

        assert actual == pytest.approx(expected, abs=1e-6)

    @pytest.mark.parametrize('output', ['softmax', 'unit_sum'])
    def test_normalized_output_gradients(self, output):
        layers = [Layer(2, 'identity', bias=True), Layer(3, 'logistic', bias=True), Layer(3, output)]
        # Positive weights keep the unit sum denominator well away from zero
        net = Network(
            layers,
            error_function='sum_squared',
            initializer=lambda fan_in: np.random.uniform(0.1, 1.0),
            seed=6,
        )
        inputs, target = [0.8, 0.1], [0.0, 1.0, 0.0]

        expected = numeric_gradients(net, inputs, target)
        actual = backprop_gradients(net, inputs, target)

        assert actual == pytest.approx(expected, abs=1e-6)

    def test_update_moves_against_gradient(self):
        net = Network([2, 3, 1], seed=8)
        before = net.weights()
        grads = backprop_gradients(net, [1, 0], [1])
        net.update_weights(0.25)

        assert net.weights() == pytest.approx([w - 0.25 * g for w, g in zip(before, grads)])
        assert all(g == 0.0 for g in net.gradients())

    def test_training_step_reduces_error(self):
        net = Network([2, 3, 1], activation='hyperbolic', seed=9)
        first = net.train_step([1, 0], [1], 0.5)
        net.activate([1, 0])
        assert net.compute_error([1]) < first

    def test_mini_batch_equals_summed_single_gradients(self):
        X, y = xor_truth_table()
        lr = 0.3

        batched = Network([2, 3, 1], activation='hyperbolic', seed=7)
        initial = batched.weights()
        for inputs, target in zip(X, y):
            batched.activate(inputs)
            batched.backprop(target)
            batched.accumulate_gradients()
        assert batched.pending_gradients == 4
        batch_gradient = batched.gradients()
        batched.update_weights(lr)

        summed = np.zeros(len(initial))
        for inputs, target in zip(X, y):
            single = Network([2, 3, 1], activation='hyperbolic', seed=7)
            assert single.weights() == initial
            summed += backprop_gradients(single, inputs, target)

        assert batch_gradient == pytest.approx(list(summed), abs=1e-12)
        assert batched.weights() == pytest.approx(list(np.array(initial) - lr * summed), abs=1e-12)

    def test_update_rejects_unaccumulated_deltas(self):
        net = Network([2, 2, 1], seed=0)
        net.activate([0, 0])
        net.backprop([0])
        net.accumulate_gradients()
        before = net.weights()

        net.activate([1, 1])
        with pytest.raises(TrainingOrderError):
            net.update_weights(0.1)
        net.backprop([1])
        with pytest.raises(TrainingOrderError):
            net.update_weights(0.1)
        assert net.weights() == before

        net.accumulate_gradients()
        assert net.pending_gradients == 2
        net.update_weights(0.1)
        assert net.state == NetworkState.IDLE

    def test_failed_activation_blocks_stale_accumulation(self):
        net = Network([Layer(2, 'identity'), Layer(1, 'identity')], seed=0)
        net.activate([1.0, 1.0])
        net.backprop([0.0])
        for connection in net.connections:
            connection.weight = 1e308

        with pytest.raises(NumericError):
            net.activate([10.0, 10.0])

        assert net.state == NetworkState.IDLE
        assert net.last_output == []
        with pytest.raises(TrainingOrderError):
            net.accumulate_gradients()
        with pytest.raises(TrainingOrderError):
            net.backprop([0.0])
        assert all(g == 0.0 for g in net.gradients())

    def test_pending_gradients_survive_failed_activation(self):
        net = Network([2, 2, 1], activation='identity', seed=0)
        net.activate([1, 0])
        net.backprop([1])
        net.accumulate_gradients()
        for connection in net.connections:
            connection.weight = 1e300

        with pytest.raises(NumericError):
            net.activate([1e10, 1e10])
        net.update_weights(0.1)
        assert net.pending_gradients == 0
        assert net.state == NetworkState.IDLE

    def test_non_finite_update_changes_nothing(self):
        net = Network([2, 2, 1], seed=0)
        net.activate([1, 0])
        net.backprop([1])
        net.accumulate_gradients()
        net.connections[-1].gradient = float('inf')
        weights, gradients = net.weights(), net.gradients()

        with pytest.raises(NumericError):
            net.update_weights(0.1)

        assert net.weights() == weights
        assert net.gradients() == gradients
        assert net.pending_gradients == 1
        assert net.state == NetworkState.GRADIENTS_ACCUMULATED

    def test_repr(self):
        assert repr(Network([2, 3, 1])) == 'Network(arch=2+b→3+b→1, error=mean_squared)'
