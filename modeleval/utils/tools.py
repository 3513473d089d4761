"""
Script housing scalar-generic helpers for writing templated densities.

Every helper accepts plain floats, numpy arrays or torch tensors and returns a
result of the widest input type, so a ``TemplatedModel.log_prob`` written with
them runs unchanged on primal values and on dual numbers.
"""

# Imports
import math
from typing import Any, Tuple, Union

import numpy as np
import torch

from modeleval.exceptions import NumericalError

Scalar = Union[float, np.ndarray, torch.Tensor]

LOG_SQRT_TWO_PI = 0.5 * math.log(2.0 * math.pi)


def is_dual(x: Any) -> bool:
    """True if ``x`` is a tensor taking part in the recorded computation."""
    return isinstance(x, torch.Tensor) and x.requires_grad


def any_dual(*args: Any) -> bool:
    return any(is_dual(arg) for arg in args)


def value_of(x: Any) -> Union[float, np.ndarray]:
    """
    Strip the derivative information from ``x``.

    Returns a float for scalars and an ndarray otherwise.
    """
    if isinstance(x, torch.Tensor):
        x = x.detach().cpu().numpy()
    x = np.asarray(x, dtype=float)
    return x.item() if x.ndim == 0 else x


def _promote(*args: Any) -> Tuple[Any, ...]:
    """Convert every argument to a tensor if any of them is one."""
    tensors = [arg for arg in args if isinstance(arg, torch.Tensor)]
    if not tensors:
        return tuple(np.asarray(arg, dtype=float) for arg in args)
    like = tensors[0]
    return tuple(
        arg if isinstance(arg, torch.Tensor) else torch.as_tensor(np.asarray(arg, dtype=float), dtype=like.dtype, device=like.device)
        for arg in args
    )


def _xp(x: Any):
    return torch if isinstance(x, torch.Tensor) else np


def check_positive_finite(function: str, name: str, x: Any) -> None:
    """Raise ``NumericalError`` unless every entry of ``x`` is positive and finite."""
    values = np.atleast_1d(value_of(x))
    if not np.all(np.isfinite(values)) or np.any(values <= 0):
        raise NumericalError(f"{function}: {name} must be positive and finite, got {values.tolist()}.")


def check_finite(function: str, name: str, x: Any) -> None:
    """Raise ``NumericalError`` unless every entry of ``x`` is finite."""
    values = np.atleast_1d(value_of(x))
    if not np.all(np.isfinite(values)):
        raise NumericalError(f"{function}: {name} must be finite, got {values.tolist()}.")


def normal_lpdf(y: Scalar, mu: Scalar, sigma: Scalar, propto: bool = False) -> Scalar:
    """
    Sum of normal log densities of ``y`` given location ``mu`` and scale ``sigma``.

    Arguments broadcast against each other. With ``propto`` set, every term
    that does not depend on a dual argument is dropped: the ``log(sqrt(2 pi))``
    constant always, ``log(sigma)`` when ``sigma`` is not dual, and the whole
    density when no argument is dual.

    Raises
    ------
    NumericalError
        If ``sigma`` is not positive and finite or ``y``/``mu`` is not finite.
    """
    check_finite("normal_lpdf", "Random variable", y)
    check_finite("normal_lpdf", "Location parameter", mu)
    check_positive_finite("normal_lpdf", "Scale parameter", sigma)

    if propto and not any_dual(y, mu, sigma):
        return 0.0

    y, mu, sigma = _promote(y, mu, sigma)
    xp = _xp(y)

    z = (y - mu) / sigma
    n = z.numel() if isinstance(z, torch.Tensor) else z.size

    logp = -0.5 * xp.sum(z * z)
    if not propto:
        logp = logp - n * LOG_SQRT_TWO_PI
    if not propto or is_dual(sigma):
        logp = logp - xp.sum(xp.log(sigma) * xp.ones_like(z))
    return logp


def lb_constrain(x: Scalar, lb: float) -> Tuple[Scalar, Scalar]:
    """
    Map an unconstrained value to ``(lb, inf)``.

    Returns
    -------
    value, log_jacobian
        ``lb + exp(x)`` and the log absolute derivative of the map, ``x``.
    """
    xp = _xp(x)
    return lb + xp.exp(x), x


def lb_free(y: Scalar, lb: float) -> Scalar:
    """Inverse of ``lb_constrain``."""
    values = np.atleast_1d(value_of(y))
    if np.any(values <= lb):
        raise NumericalError(f"lb_free: value must be greater than {lb}, got {values.tolist()}.")
    xp = _xp(y)
    return xp.log(y - lb)
