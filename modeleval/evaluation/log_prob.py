"""
Log-density entry points.
"""

from __future__ import annotations

from typing import Any, Optional, TextIO

from modeleval.callbacks.logger import Logger
from modeleval.core.arena import Arena
from modeleval.core.mode import LogDensityMode
from modeleval.core.model import IntVector, RealVector
from modeleval.defaults import DEFAULT_MODE
from modeleval.evaluation.evaluator import evaluator_for, relay_messages


def log_prob(
    model: Any,
    params_r: RealVector,
    params_i: Optional[IntVector] = None,
    mode: LogDensityMode = DEFAULT_MODE,
    msgs: Optional[TextIO] = None,
    logger: Optional[Logger] = None,
    arena: Optional[Arena] = None,
) -> float:
    """
    Log density of ``model`` at ``params_r`` under ``mode``.

    Args:
        model: Templated-density or virtual-interface model.
        params_r: Unconstrained parameters, a list of floats or a 1-D ndarray.
            Entries beyond ``model.num_params_r`` are ignored.
        params_i: Discrete parameters. Required (possibly empty) when
            ``params_r`` is a list and the model is templated.
        mode: Which of the four density variants to compute.
        msgs: Stream handed to the model for diagnostics.
        logger: Sink receiving the model's diagnostics as one info message.
            Mutually exclusive with ``msgs``.
        arena: Arena for templated evaluations; defaults to the thread's arena.

    Returns:
        The log density as a float. Exceptions raised by the model propagate
        unchanged, after pending diagnostics are flushed to ``logger``.
    """
    evaluator = evaluator_for(model, arena=arena)
    with relay_messages(msgs, logger) as stream:
        return evaluator.log_prob(params_r, params_i, mode, stream)


def log_prob_propto(
    model: Any,
    params_r: RealVector,
    params_i: Optional[IntVector] = None,
    jacobian: bool = False,
    msgs: Optional[TextIO] = None,
    logger: Optional[Logger] = None,
    arena: Optional[Arena] = None,
) -> float:
    """Log density dropping normalizing constants; see ``log_prob``."""
    return log_prob(
        model,
        params_r,
        params_i,
        mode=LogDensityMode(propto=True, jacobian=jacobian),
        msgs=msgs,
        logger=logger,
        arena=arena,
    )
