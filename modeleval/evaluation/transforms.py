"""
Conversions between constrained values and unconstrained parameters.
"""

from __future__ import annotations

from typing import Any, Optional, TextIO, Union

import numpy as np

from modeleval.callbacks.logger import Logger
from modeleval.core.capability import Capability, capabilities_of
from modeleval.core.model import RealVector
from modeleval.evaluation.evaluator import relay_messages
from modeleval.io.var_context import VarContext


def transform_inits(
    model: Any,
    context: VarContext,
    msgs: Optional[TextIO] = None,
    logger: Optional[Logger] = None,
) -> np.ndarray:
    """
    Read constrained values from ``context`` and unconstrain them.

    Returns:
        Unconstrained parameter vector of length ``model.num_params_r``.

    Raises:
        ConfigurationError: If the model does not provide ``transform_inits``.
    """
    capabilities_of(model).require(Capability.TRANSFORM_INITS)
    with relay_messages(msgs, logger) as stream:
        params_r = np.asarray(model.transform_inits(context, stream), dtype=float).reshape(-1)
    if params_r.shape != (model.num_params_r,):
        raise ValueError(
            f"{type(model).__name__}.transform_inits returned {params_r.shape[0]} values, "
            f"expected {model.num_params_r}."
        )
    return params_r


def write_array(
    model: Any,
    rng: Union[np.random.Generator, int, None],
    params_r: RealVector,
    include_tparams: bool = True,
    include_gqs: bool = True,
    msgs: Optional[TextIO] = None,
    logger: Optional[Logger] = None,
) -> RealVector:
    """
    Constrain ``params_r``, optionally appending transformed parameters and
    generated quantities.

    Args:
        rng: Random source for generated quantities: a numpy ``Generator`` or
            a seed for one.
        params_r: Unconstrained parameters (list or ndarray); entries beyond
            ``model.num_params_r`` are ignored.

    Returns:
        Values in the order of ``model.constrained_param_names(include_tparams,
        include_gqs)``, in the representation of ``params_r``.

    Raises:
        ConfigurationError: If the model does not provide ``write_array``.
    """
    capabilities_of(model).require(Capability.WRITE_ARRAY)
    size = model.num_params_r
    if len(params_r) < size:
        raise ValueError(f"Expected at least {size} unconstrained parameters, got {len(params_r)}.")
    if not isinstance(rng, np.random.Generator):
        rng = np.random.default_rng(rng)

    with relay_messages(msgs, logger) as stream:
        constrained = model.write_array(
            rng, np.asarray(params_r[:size], dtype=float), include_tparams, include_gqs, stream
        )
    constrained = np.asarray(constrained, dtype=float).reshape(-1)

    expected = len(model.constrained_param_names(include_tparams, include_gqs))
    if constrained.shape[0] != expected:
        raise ValueError(
            f"{type(model).__name__}.write_array returned {constrained.shape[0]} values, "
            f"expected {expected}."
        )
    if isinstance(params_r, np.ndarray):
        return constrained
    return constrained.tolist()
