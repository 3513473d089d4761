import numpy as np
import pytest

from modeleval.core.arena import Arena
from modeleval.core.model import InterfaceModel, TemplatedModel
from modeleval.exceptions import NumericalError
from modeleval.models import NormalScaleModel, RosenbrockModel


class MetadataMixin:
    """Minimal metadata surface for test models."""

    def model_name(self):
        return type(self).__name__

    def model_compile_info(self):
        return ["test model"]

    def get_param_names(self):
        return ["theta"]

    def get_dims(self):
        return [[self.num_params_r]]

    def constrained_param_names(self, include_tparams=True, include_gqs=True):
        return [f"theta.{i}" for i in range(1, self.num_params_r + 1)]

    def unconstrained_param_names(self, include_tparams=True, include_gqs=True):
        return self.constrained_param_names(include_tparams, include_gqs)


class QuadraticModel(MetadataMixin, TemplatedModel):
    """log p(theta) = -0.5 * sum(theta^2), optionally writing or raising."""

    def __init__(self, num_params_r=2, message=None, fail=False, param_ranges_i=None):
        super().__init__(num_params_r, param_ranges_i)
        self.message = message
        self.fail = fail
        self.calls = 0

    def log_prob(self, params_r, params_i, propto, jacobian, msgs=None):
        self.calls += 1
        logp = 0.0
        for theta in params_r:
            logp = logp - 0.5 * theta * theta
        if self.message is not None and msgs is not None:
            msgs.write(self.message)
        if self.fail:
            raise NumericalError("quadratic_model: evaluation failed")
        return logp


class ModeTaggedModel(MetadataMixin, InterfaceModel):
    """Interface model whose entry points return distinct constants."""

    values = {
        (False, False): 1.0,
        (False, True): 2.0,
        (True, False): 3.0,
        (True, True): 4.0,
    }

    def __init__(self, num_params_r=2):
        super().__init__(num_params_r)
        self.grad_calls = []

    def log_prob(self, params_r, msgs=None):
        return self.values[(False, False)]

    def log_prob_jacobian(self, params_r, msgs=None):
        return self.values[(False, True)]

    def log_prob_propto(self, params_r, msgs=None):
        return self.values[(True, False)]

    def log_prob_propto_jacobian(self, params_r, msgs=None):
        return self.values[(True, True)]

    def log_prob_grad(self, params_r, gradient, propto, jacobian, msgs=None):
        self.grad_calls.append((propto, jacobian))
        gradient[:] = [float(i) for i in range(self.num_params_r)]
        return self.values[(propto, jacobian)]


@pytest.fixture
def rosenbrock():
    return RosenbrockModel(2)


@pytest.fixture
def normal_model():
    return NormalScaleModel(y=[1.0, 2.0, 4.0], prior_scale=10.0)


@pytest.fixture
def quadratic_model():
    return QuadraticModel(2)


@pytest.fixture
def tagged_model():
    return ModeTaggedModel(2)


@pytest.fixture
def arena():
    return Arena()


@pytest.fixture
def point():
    return np.array([0.5, 0.5])


@pytest.fixture
def make_quadratic():
    """Factory for QuadraticModel instances with custom behavior."""
    return QuadraticModel


@pytest.fixture
def make_tagged():
    return ModeTaggedModel
