"""
Normal observations with unknown location and scale as a templated model.

    mu ~ normal(0, prior_scale)
    y_n ~ normal(mu, sigma),  sigma > 0

Unconstrained parameters are ``(mu, log(sigma))``. With ``jacobian`` the log
derivative of ``sigma = exp(u)``, i.e. ``u``, is added. With ``propto`` the
``log(sqrt(2 pi))`` constants and the ``log(prior_scale)`` term are dropped.
"""

# Imports
from typing import Any, List, Optional, Sequence, TextIO

import numpy as np

from modeleval.core.model import IntVector, TemplatedModel
from modeleval.io.var_context import VarContext
from modeleval.utils.tools import lb_constrain, lb_free, normal_lpdf, value_of


class NormalScaleModel(TemplatedModel):
    """
    Args:
        y: Observations.
        prior_scale: Scale of the normal prior on ``mu``.
        verbose: Print the constrained parameters to the message stream on
            every evaluation.
    """

    def __init__(self, y: Sequence[float], prior_scale: float = 10.0, verbose: bool = False):
        super().__init__(num_params_r=2)
        self.y = np.asarray(y, dtype=float).reshape(-1)
        self.prior_scale = float(prior_scale)
        self.verbose = verbose

    def model_name(self) -> str:
        return "normal_scale_model"

    def model_compile_info(self) -> List[str]:
        return ["modeleval example model", f"num_obs = {self.y.size}"]

    def get_param_names(self) -> List[str]:
        return ["mu", "sigma", "variance", "y_rep"]

    def get_dims(self) -> List[List[int]]:
        return [[], [], [], [self.y.size]]

    def constrained_param_names(self, include_tparams: bool = True, include_gqs: bool = True) -> List[str]:
        names = ["mu", "sigma"]
        if include_tparams:
            names.append("variance")
        if include_gqs:
            names.extend(f"y_rep.{n}" for n in range(1, self.y.size + 1))
        return names

    def unconstrained_param_names(self, include_tparams: bool = True, include_gqs: bool = True) -> List[str]:
        return self.constrained_param_names(include_tparams, include_gqs)

    def log_prob(self, params_r: Any, params_i: IntVector, propto: bool, jacobian: bool, msgs: Optional[TextIO] = None) -> Any:
        mu = params_r[0]
        sigma, log_jacobian = lb_constrain(params_r[1], 0.0)

        if self.verbose and msgs is not None:
            msgs.write(f"mu = {value_of(mu)}, sigma = {value_of(sigma)}\n")

        logp = normal_lpdf(mu, 0.0, self.prior_scale, propto)
        logp = logp + normal_lpdf(self.y, mu, sigma, propto)
        if jacobian:
            logp = logp + log_jacobian
        return logp

    def transform_inits(self, context: VarContext, msgs: Optional[TextIO] = None) -> np.ndarray:
        mu = context.vals_r("mu")[0]
        sigma = context.vals_r("sigma")[0]
        return np.array([mu, lb_free(sigma, 0.0)], dtype=float)

    def write_array(
        self,
        rng: np.random.Generator,
        params_r: np.ndarray,
        include_tparams: bool = True,
        include_gqs: bool = True,
        msgs: Optional[TextIO] = None,
    ) -> np.ndarray:
        mu = float(params_r[0])
        sigma, _ = lb_constrain(float(params_r[1]), 0.0)
        values = [mu, float(sigma)]
        if include_tparams:
            values.append(float(sigma) ** 2)
        if include_gqs:
            values.extend(rng.normal(mu, sigma, size=self.y.size).tolist())
        return np.asarray(values, dtype=float)
