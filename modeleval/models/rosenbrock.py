"""
Rosenbrock density as a virtual-interface model.

log p(x, y) = -(alpha (y - x^2)^2 + (1 - x)^2), summed over consecutive
(x, y) pairs of the parameter vector. All four density variants are the same
function, so the specialized entry points keep their defaults.
"""

# Imports
from typing import List, Optional, TextIO, Tuple

import numpy as np

from modeleval.core.model import InterfaceModel, RealVector
from modeleval.io.var_context import VarContext


class RosenbrockModel(InterfaceModel):
    """
    Banana-shaped test density with a hand-coded gradient.

    Args:
        num_params_r: Even number of parameters, stored as a vector ``xy``.
        alpha: Curvature of the valley.
    """

    def __init__(self, num_params_r: int = 2, alpha: float = 100.0):
        if num_params_r <= 0 or num_params_r % 2:
            raise ValueError(f"num_params_r must be a positive even number, got {num_params_r}.")
        super().__init__(num_params_r)
        self.alpha = alpha

    def model_name(self) -> str:
        return "rosenbrock_model"

    def get_param_names(self) -> List[str]:
        return ["xy"]

    def get_dims(self) -> List[List[int]]:
        return [[self.num_params_r]]

    def constrained_param_names(self, include_tparams: bool = True, include_gqs: bool = True) -> List[str]:
        return [f"xy.{i}" for i in range(1, self.num_params_r + 1)]

    def unconstrained_param_names(self, include_tparams: bool = True, include_gqs: bool = True) -> List[str]:
        return [f"xy.{i}" for i in range(1, self.num_params_r + 1)]

    def _terms(self, params_r: RealVector) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        x = np.asarray(params_r[: self.num_params_r], dtype=float)
        t1 = x[1::2] - x[0::2] ** 2
        t2 = 1.0 - x[0::2]
        return x, t1, t2

    def log_prob(self, params_r: RealVector, msgs: Optional[TextIO] = None) -> float:
        _, t1, t2 = self._terms(params_r)
        return -float(np.sum(self.alpha * t1 * t1 + t2 * t2))

    def log_prob_grad(
        self,
        params_r: RealVector,
        gradient: RealVector,
        propto: bool,
        jacobian: bool,
        msgs: Optional[TextIO] = None,
    ) -> float:
        x, t1, t2 = self._terms(params_r)
        grad = np.empty(self.num_params_r)
        grad[0::2] = -(-4.0 * self.alpha * t1 * x[0::2] - 2.0 * t2)
        grad[1::2] = -(2.0 * self.alpha * t1)
        gradient[:] = grad if isinstance(gradient, np.ndarray) else grad.tolist()
        return -float(np.sum(self.alpha * t1 * t1 + t2 * t2))

    def transform_inits(self, context: VarContext, msgs: Optional[TextIO] = None) -> np.ndarray:
        xy = context.vals_r("xy")
        if len(xy) < self.num_params_r:
            raise ValueError(f"xy must have {self.num_params_r} values, got {len(xy)}.")
        return np.asarray(xy[: self.num_params_r], dtype=float)

    def write_array(
        self,
        rng: np.random.Generator,
        params_r: np.ndarray,
        include_tparams: bool = True,
        include_gqs: bool = True,
        msgs: Optional[TextIO] = None,
    ) -> np.ndarray:
        return np.array(params_r[: self.num_params_r], dtype=float)
