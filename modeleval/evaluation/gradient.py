"""
Gradient of the density an external optimizer or sampler works with.
"""

from __future__ import annotations

from typing import Any, Optional, TextIO, Tuple

import numpy as np

from modeleval.callbacks.logger import Logger
from modeleval.core.arena import Arena
from modeleval.core.capability import Strategy, capabilities_of
from modeleval.defaults import FUNCTIONAL_MODE
from modeleval.evaluation.autodiff import ad_gradient
from modeleval.evaluation.evaluator import InterfaceEvaluator, relay_messages
from modeleval.evaluation.functional import ModelFunctional


def gradient(
    model: Any,
    x,
    msgs: Optional[TextIO] = None,
    logger: Optional[Logger] = None,
    arena: Optional[Arena] = None,
) -> Tuple[float, np.ndarray]:
    """
    Value and gradient of the ``propto=True, jacobian=True`` log density.

    Templated models are differentiated through ``ModelFunctional``;
    virtual-interface models through their own ``log_prob_grad``.

    Returns:
        Tuple of the log density and its gradient as a 1-D ndarray.
    """
    x = np.asarray(x, dtype=float).reshape(-1)
    strategy = capabilities_of(model).strategy
    with relay_messages(msgs, logger) as stream:
        if strategy is Strategy.TEMPLATED:
            return ad_gradient(ModelFunctional(model, stream), x, arena=arena)
        grad_f = np.zeros(model.num_params_r, dtype=float)
        f = InterfaceEvaluator(model).log_prob_grad(x, grad_f, mode=FUNCTIONAL_MODE, msgs=stream)
        return f, grad_f
