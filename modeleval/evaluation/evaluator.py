"""
Strategy-specific evaluators.

``TemplatedEvaluator`` and ``InterfaceEvaluator`` are the two implementations
of the ``Evaluator`` interface. Which one applies to a model is read from the
cached capability classification; constructing one against a model of the
other strategy fails immediately.
"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator, Optional, TextIO, Tuple

import numpy as np

from modeleval.callbacks.logger import Logger
from modeleval.core.arena import Arena, get_arena
from modeleval.core.capability import Capability, Strategy, capabilities_of
from modeleval.core.mode import LogDensityMode
from modeleval.core.model import IntVector, RealVector
from modeleval.defaults import DEFAULT_MODE
from modeleval.evaluation.autodiff import reverse_sweep
from modeleval.exceptions import CapabilityMismatchError
from modeleval.utils.tools import value_of


@contextmanager
def relay_messages(msgs: Optional[TextIO], logger: Optional[Logger]) -> Iterator[Optional[TextIO]]:
    """
    Yield the stream a model should write diagnostics to.

    Without a logger the caller's ``msgs`` stream (possibly None) is used as
    is. With a logger, text is captured and sent to ``logger.info`` as one
    message when the block exits, normally or by raising, unless nothing was
    written.

    Raises:
        ValueError: If both ``msgs`` and ``logger`` are given.
    """
    if logger is None:
        yield msgs
        return
    if msgs is not None:
        raise ValueError("Pass either a msgs stream or a logger, not both.")

    buffer = io.StringIO()
    try:
        yield buffer
    finally:
        if buffer.getvalue():
            logger.info(buffer)


def new_gradient(params_r: RealVector, size: int) -> RealVector:
    """Allocate a gradient buffer matching the representation of ``params_r``."""
    if isinstance(params_r, np.ndarray):
        return np.zeros(size, dtype=float)
    return [0.0] * size


def _check_params(params_r: RealVector, size: int) -> None:
    if len(params_r) < size:
        raise ValueError(f"Expected at least {size} unconstrained parameters, got {len(params_r)}.")


def _check_gradient(gradient: RealVector, size: int) -> None:
    if not isinstance(gradient, (list, np.ndarray)):
        raise TypeError(f"Gradient buffer must be a list or ndarray, got {type(gradient).__name__}.")
    if isinstance(gradient, np.ndarray) and gradient.shape != (size,):
        raise ValueError(f"Gradient buffer must have shape ({size},), got {gradient.shape}.")


def _write_gradient(gradient: RealVector, values: np.ndarray) -> None:
    if isinstance(gradient, np.ndarray):
        gradient[:] = values
    else:
        gradient[:] = values.tolist()


class Evaluator(ABC):
    """
    Computes log densities and gradients for one model.

    Args:
        model: Model to evaluate; held by reference.
        arena: Arena used by templated evaluations. Defaults to the calling
            thread's arena, looked up at each call.

    Raises:
        CapabilityMismatchError: If the model lacks the capabilities this
            evaluator relies on, i.e. it uses the other strategy.
    """

    required: Capability

    def __init__(self, model: Any, arena: Optional[Arena] = None):
        capabilities = capabilities_of(model)
        capabilities.require(self.required, CapabilityMismatchError)
        self.model = model
        self.capabilities = capabilities
        self._arena = arena

    @property
    def arena(self) -> Arena:
        return self._arena if self._arena is not None else get_arena()

    @abstractmethod
    def log_prob(
        self,
        params_r: RealVector,
        params_i: Optional[IntVector] = None,
        mode: LogDensityMode = DEFAULT_MODE,
        msgs: Optional[TextIO] = None,
    ) -> float:
        """Log density of the model under ``mode``."""

    @abstractmethod
    def log_prob_grad(
        self,
        params_r: RealVector,
        gradient: RealVector,
        params_i: Optional[IntVector] = None,
        mode: LogDensityMode = DEFAULT_MODE,
        msgs: Optional[TextIO] = None,
    ) -> float:
        """Log density under ``mode``; its gradient overwrites ``gradient``."""


class TemplatedEvaluator(Evaluator):
    """
    Evaluator for templated-density models.

    Every evaluation runs on a dual-number copy of the parameters inside an
    arena scope, so the arena is back to its previous size when the call
    returns or raises. The gradient buffer is only written after a successful
    sweep; on error it keeps its previous contents.
    """

    required = Capability.DUAL_LOG_PROB

    def _params_i(self, params_r: RealVector, params_i: Optional[IntVector]) -> IntVector:
        if params_i is not None:
            return list(params_i)
        if isinstance(params_r, np.ndarray):
            return []
        raise ValueError(
            "params_i is required with list parameters for a templated model; "
            "pass an empty list when the model has no discrete parameters."
        )

    def _dual_copy(self, arena: Arena, params_r: RealVector) -> Tuple[Any, Any]:
        size = self.model.num_params_r
        _check_params(params_r, size)
        leaf = arena.var(np.asarray(params_r[:size], dtype=float))
        if isinstance(params_r, np.ndarray):
            return leaf, leaf
        return leaf, list(leaf.unbind())

    def log_prob(self, params_r, params_i=None, mode=DEFAULT_MODE, msgs=None) -> float:
        params_i = self._params_i(params_r, params_i)
        arena = self.arena
        with arena.scope():
            _, ad_params_r = self._dual_copy(arena, params_r)
            logp = self.model.log_prob(ad_params_r, params_i, mode.propto, mode.jacobian, msgs)
            return float(value_of(logp))

    def log_prob_grad(self, params_r, gradient, params_i=None, mode=DEFAULT_MODE, msgs=None) -> float:
        params_i = self._params_i(params_r, params_i)
        _check_gradient(gradient, self.model.num_params_r)
        arena = self.arena
        with arena.scope():
            leaf, ad_params_r = self._dual_copy(arena, params_r)
            logp = self.model.log_prob(ad_params_r, params_i, mode.propto, mode.jacobian, msgs)
            value = float(value_of(logp))
            grad = reverse_sweep(logp, leaf)
        _write_gradient(gradient, grad)
        return value


class InterfaceEvaluator(Evaluator):
    """
    Evaluator for virtual-interface models.

    Densities come from the entry point matching the mode and gradients from
    the model's own ``log_prob_grad``. No arena is used.
    """

    required = Capability.SPECIALIZED_LOG_PROB | Capability.LOG_PROB_GRAD

    _entry_points = {
        LogDensityMode(propto=False, jacobian=False): "log_prob",
        LogDensityMode(propto=False, jacobian=True): "log_prob_jacobian",
        LogDensityMode(propto=True, jacobian=False): "log_prob_propto",
        LogDensityMode(propto=True, jacobian=True): "log_prob_propto_jacobian",
    }

    def log_prob(self, params_r, params_i=None, mode=DEFAULT_MODE, msgs=None) -> float:
        _check_params(params_r, self.model.num_params_r)
        entry_point = getattr(self.model, self._entry_points[mode])
        return float(entry_point(params_r, msgs))

    def log_prob_grad(self, params_r, gradient, params_i=None, mode=DEFAULT_MODE, msgs=None) -> float:
        _check_params(params_r, self.model.num_params_r)
        _check_gradient(gradient, self.model.num_params_r)
        return float(self.model.log_prob_grad(params_r, gradient, mode.propto, mode.jacobian, msgs))


_EVALUATORS = {
    Strategy.TEMPLATED: TemplatedEvaluator,
    Strategy.INTERFACE: InterfaceEvaluator,
}


def evaluator_for(model: Any, arena: Optional[Arena] = None) -> Evaluator:
    """Construct the evaluator matching the model's classified strategy."""
    return _EVALUATORS[capabilities_of(model).strategy](model, arena=arena)
