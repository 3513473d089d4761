"""
Tests for modeleval.evaluation.log_prob_grad.
"""

import numpy as np
import pytest

from modeleval.callbacks import BufferLogger
from modeleval.core.mode import LogDensityMode
from modeleval.evaluation import log_prob, log_prob_grad
from modeleval.exceptions import NumericalError

Y = np.array([1.0, 2.0, 4.0])


def normal_gradient(mu, u, jacobian=False):
    sigma2 = np.exp(2 * u)
    d_mu = -mu / 100.0 + np.sum(Y - mu) / sigma2
    d_u = -Y.size + np.sum((Y - mu) ** 2) / sigma2
    if jacobian:
        d_u += 1.0
    return np.array([d_mu, d_u])


class TestTemplated:
    @pytest.mark.parametrize("mode", list(LogDensityMode.all()))
    def test_gradient_matches_analytic(self, normal_model, mode):
        params = np.array([0.5, 0.3])
        value, grad = log_prob_grad(normal_model, params, mode=mode)
        assert value == pytest.approx(log_prob(normal_model, params, mode=mode))
        assert np.allclose(grad, normal_gradient(0.5, 0.3, mode.jacobian))

    def test_propto_does_not_change_gradient(self, normal_model):
        params = np.array([-0.2, 0.1])
        _, full = log_prob_grad(normal_model, params, mode=LogDensityMode(False, False))
        _, propto = log_prob_grad(normal_model, params, mode=LogDensityMode(True, False))
        assert np.allclose(full, propto)

    def test_value_consistent_with_log_prob_for_quadratic(self, quadratic_model):
        params = np.array([1.0, -2.0])
        value, grad = log_prob_grad(quadratic_model, params)
        assert value == pytest.approx(-2.5)
        assert np.allclose(grad, [-1.0, 2.0])

    def test_list_input_returns_list(self, quadratic_model):
        value, grad = log_prob_grad(quadratic_model, [1.0, -2.0], params_i=[])
        assert isinstance(grad, list)
        assert grad == pytest.approx([-1.0, 2.0])

    def test_list_input_requires_params_i(self, quadratic_model):
        with pytest.raises(ValueError, match="params_i"):
            log_prob_grad(quadratic_model, [1.0, -2.0])

    def test_list_buffer_is_resized(self, quadratic_model):
        buffer = [7.0] * 5
        _, grad = log_prob_grad(quadratic_model, [1.0, 1.0], buffer, params_i=[])
        assert grad is buffer
        assert buffer == pytest.approx([-1.0, -1.0])

    def test_ndarray_buffer_overwritten_in_place(self, quadratic_model):
        buffer = np.full(2, 7.0)
        _, grad = log_prob_grad(quadratic_model, np.array([3.0, 0.0]), buffer)
        assert grad is buffer
        assert np.allclose(buffer, [-3.0, 0.0])

    def test_ndarray_buffer_wrong_shape(self, quadratic_model):
        with pytest.raises(ValueError, match="shape"):
            log_prob_grad(quadratic_model, np.zeros(2), np.zeros(3))

    def test_invalid_buffer_type(self, quadratic_model):
        with pytest.raises(TypeError):
            log_prob_grad(quadratic_model, np.zeros(2), (0.0, 0.0))

    def test_excess_parameters_ignored(self, quadratic_model):
        _, grad = log_prob_grad(quadratic_model, np.array([1.0, 1.0, 5.0]))
        assert grad.shape == (2,)
        assert np.allclose(grad, [-1.0, -1.0])

    def test_too_few_parameters(self, quadratic_model):
        with pytest.raises(ValueError):
            log_prob_grad(quadratic_model, np.array([1.0]))

    def test_model_without_parameters(self, make_quadratic):
        value, grad = log_prob_grad(make_quadratic(0), np.zeros(0))
        assert value == 0.0
        assert grad.shape == (0,)

    def test_arena_recovered_after_success(self, normal_model, arena):
        log_prob_grad(normal_model, np.array([0.5, 0.3]), arena=arena)
        assert arena.size == 0
        assert arena.recoveries == 1
        assert arena.high_water_mark > 0

    def test_error_recovers_arena_and_keeps_buffer(self, make_quadratic, arena):
        model = make_quadratic(2, fail=True)
        buffer = np.array([7.0, 8.0])
        with pytest.raises(NumericalError):
            log_prob_grad(model, np.array([1.0, 1.0]), buffer, arena=arena)
        assert arena.size == 0
        assert arena.recoveries == 1
        assert np.array_equal(buffer, [7.0, 8.0])

    def test_repeated_calls_leave_arena_empty(self, normal_model, arena):
        for mu in np.linspace(-1.0, 1.0, 5):
            log_prob_grad(normal_model, np.array([mu, 0.0]), arena=arena)
        assert arena.size == 0
        assert arena.recoveries == 5

    def test_thread_arena_used_by_default(self, normal_model):
        from modeleval.core.arena import get_arena

        before = get_arena().recoveries
        log_prob_grad(normal_model, np.array([0.5, 0.3]))
        assert get_arena().size == 0
        assert get_arena().recoveries == before + 1


class TestInterface:
    def test_rosenbrock(self, rosenbrock, point):
        value, grad = log_prob_grad(rosenbrock, point)
        assert value == pytest.approx(-6.5)
        assert np.allclose(grad, [51.0, -50.0])

    @pytest.mark.parametrize("mode", list(LogDensityMode.all()))
    def test_flags_forwarded_unchanged(self, tagged_model, mode):
        value, grad = log_prob_grad(tagged_model, [0.0, 0.0], [9.0, 9.0], mode=mode)
        assert tagged_model.grad_calls == [(mode.propto, mode.jacobian)]
        assert value == tagged_model.values[(mode.propto, mode.jacobian)]
        assert grad == [0.0, 1.0]

    def test_list_input_returns_list(self, rosenbrock):
        _, grad = log_prob_grad(rosenbrock, [0.5, 0.5])
        assert isinstance(grad, list)
        assert grad == pytest.approx([51.0, -50.0])

    def test_arena_untouched(self, rosenbrock, point, arena):
        log_prob_grad(rosenbrock, point, arena=arena)
        assert arena.recoveries == 0


class TestMessages:
    def test_logger_flushed_on_error(self, make_quadratic):
        model = make_quadratic(2, message="diagnostic\n", fail=True)
        logger = BufferLogger()
        with pytest.raises(NumericalError):
            log_prob_grad(model, np.zeros(2), logger=logger)
        assert logger.texts("info") == ["diagnostic\n"]

    def test_logger_with_interface_model(self, rosenbrock, point):
        logger = BufferLogger()
        log_prob_grad(rosenbrock, point, logger=logger)
        assert logger.messages == []
