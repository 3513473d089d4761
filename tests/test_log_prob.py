"""
Tests for modeleval.evaluation.log_prob across both model strategies.
"""

import io

import numpy as np
import pytest
from scipy import stats

from modeleval.callbacks import BufferLogger
from modeleval.core.mode import LogDensityMode
from modeleval.evaluation import log_prob, log_prob_propto
from modeleval.exceptions import NumericalError
from modeleval.models import NormalScaleModel
from modeleval.utils.tools import LOG_SQRT_TWO_PI

Y = np.array([1.0, 2.0, 4.0])


def normal_reference(mu, u, propto=False, jacobian=False):
    sigma = np.exp(u)
    logp = stats.norm.logpdf(mu, 0.0, 10.0) + stats.norm.logpdf(Y, mu, sigma).sum()
    if propto:
        logp += (Y.size + 1) * LOG_SQRT_TWO_PI + np.log(10.0)
    if jacobian:
        logp += u
    return logp


class TestTemplated:
    @pytest.mark.parametrize("mode", list(LogDensityMode.all()))
    def test_matches_reference(self, normal_model, mode):
        params = np.array([0.5, 0.3])
        value = log_prob(normal_model, params, mode=mode)
        assert value == pytest.approx(normal_reference(0.5, 0.3, mode.propto, mode.jacobian))

    def test_returns_float(self, normal_model):
        assert isinstance(log_prob(normal_model, np.array([0.0, 0.0])), float)

    def test_list_parameters_need_params_i(self, normal_model):
        with pytest.raises(ValueError, match="params_i"):
            log_prob(normal_model, [0.5, 0.3])

    def test_list_parameters_with_empty_params_i(self, normal_model):
        value = log_prob(normal_model, [0.5, 0.3], [])
        assert value == pytest.approx(normal_reference(0.5, 0.3))

    def test_propto_shortcut(self, normal_model):
        params = np.array([0.5, 0.3])
        assert log_prob_propto(normal_model, params) == pytest.approx(normal_reference(0.5, 0.3, propto=True))
        assert log_prob_propto(normal_model, params, jacobian=True) == pytest.approx(
            normal_reference(0.5, 0.3, propto=True, jacobian=True)
        )

    def test_propto_differs_from_full(self, normal_model):
        params = np.array([0.5, 0.3])
        assert log_prob(normal_model, params) != pytest.approx(log_prob_propto(normal_model, params))

    def test_excess_parameters_ignored(self, normal_model):
        value = log_prob(normal_model, np.array([0.5, 0.3, 99.0]))
        assert value == pytest.approx(normal_reference(0.5, 0.3))

    def test_too_few_parameters(self, normal_model):
        with pytest.raises(ValueError, match="at least 2"):
            log_prob(normal_model, np.array([0.5]))

    def test_arena_recovered(self, normal_model, arena):
        log_prob(normal_model, np.array([0.5, 0.3]), arena=arena)
        assert arena.size == 0
        assert arena.recoveries == 1

    def test_model_error_propagates_and_arena_recovered(self, make_quadratic, arena):
        model = make_quadratic(2, fail=True)
        with pytest.raises(NumericalError):
            log_prob(model, np.array([1.0, 1.0]), arena=arena)
        assert arena.size == 0
        assert arena.recoveries == 1


class TestInterface:
    @pytest.mark.parametrize("mode", list(LogDensityMode.all()))
    def test_rosenbrock_all_modes(self, rosenbrock, point, mode):
        assert log_prob(rosenbrock, point, mode=mode) == pytest.approx(-6.5)

    def test_dispatches_to_matching_entry_point(self, tagged_model):
        params = [0.0, 0.0]
        assert log_prob(tagged_model, params, mode=LogDensityMode(False, False)) == 1.0
        assert log_prob(tagged_model, params, mode=LogDensityMode(False, True)) == 2.0
        assert log_prob(tagged_model, params, mode=LogDensityMode(True, False)) == 3.0
        assert log_prob(tagged_model, params, mode=LogDensityMode(True, True)) == 4.0

    def test_list_parameters_without_params_i(self, rosenbrock):
        assert log_prob(rosenbrock, [0.5, 0.5]) == pytest.approx(-6.5)

    def test_does_not_touch_arena(self, rosenbrock, point, arena):
        log_prob(rosenbrock, point, arena=arena)
        assert arena.recoveries == 0
        assert arena.high_water_mark == 0

    def test_too_few_parameters(self, rosenbrock):
        with pytest.raises(ValueError):
            log_prob(rosenbrock, [0.5])


class TestMessages:
    def test_msgs_stream_receives_model_output(self):
        model = NormalScaleModel(Y, verbose=True)
        msgs = io.StringIO()
        log_prob(model, np.array([0.5, 0.0]), msgs=msgs)
        assert msgs.getvalue() == "mu = 0.5, sigma = 1.0\n"

    def test_logger_receives_one_info_message(self):
        model = NormalScaleModel(Y, verbose=True)
        logger = BufferLogger()
        log_prob(model, np.array([0.5, 0.0]), logger=logger)
        assert logger.messages == [("info", "mu = 0.5, sigma = 1.0\n")]

    def test_logger_not_called_without_output(self, normal_model):
        logger = BufferLogger()
        log_prob(normal_model, np.array([0.5, 0.0]), logger=logger)
        assert logger.messages == []

    def test_logger_flushed_once_on_error(self, make_quadratic):
        model = make_quadratic(2, message="about to fail\n", fail=True)
        logger = BufferLogger()
        with pytest.raises(NumericalError):
            log_prob(model, np.array([1.0, 1.0]), logger=logger)
        assert logger.messages == [("info", "about to fail\n")]

    def test_msgs_and_logger_are_exclusive(self, normal_model):
        with pytest.raises(ValueError, match="not both"):
            log_prob(normal_model, np.array([0.0, 0.0]), msgs=io.StringIO(), logger=BufferLogger())
