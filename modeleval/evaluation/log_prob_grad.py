"""
Log-density and gradient entry point.
"""

from __future__ import annotations

from typing import Any, Optional, TextIO, Tuple

from modeleval.callbacks.logger import Logger
from modeleval.core.arena import Arena
from modeleval.core.mode import LogDensityMode
from modeleval.core.model import IntVector, RealVector
from modeleval.defaults import DEFAULT_MODE
from modeleval.evaluation.evaluator import evaluator_for, new_gradient, relay_messages


def log_prob_grad(
    model: Any,
    params_r: RealVector,
    gradient: Optional[RealVector] = None,
    params_i: Optional[IntVector] = None,
    mode: LogDensityMode = DEFAULT_MODE,
    msgs: Optional[TextIO] = None,
    logger: Optional[Logger] = None,
    arena: Optional[Arena] = None,
) -> Tuple[float, RealVector]:
    """
    Log density of ``model`` under ``mode`` and its gradient.

    Templated models are differentiated with one reverse sweep over a
    dual-number copy of ``params_r``; the arena is recovered whether the
    density returns or raises. Virtual-interface models compute their own
    gradient, receiving both mode flags unchanged.

    Args:
        model: Templated-density or virtual-interface model.
        params_r: Unconstrained parameters, a list of floats or a 1-D ndarray.
        gradient: Buffer overwritten with one partial derivative per
            parameter. A list is resized; an ndarray must have length
            ``model.num_params_r``. A new buffer of the same representation
            as ``params_r`` is allocated when omitted.
        params_i, mode, msgs, logger, arena: As for ``log_prob``.

    Returns:
        Tuple of the log density and the gradient buffer.
    """
    evaluator = evaluator_for(model, arena=arena)
    if gradient is None:
        gradient = new_gradient(params_r, model.num_params_r)
    with relay_messages(msgs, logger) as stream:
        value = evaluator.log_prob_grad(params_r, gradient, params_i, mode, stream)
    return value, gradient
