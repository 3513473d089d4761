"""Default configuration values for modeleval components.

Defaults are plain module constants. Every evaluator accepts keyword arguments
that override them for a single call (``arena=``, ``logger=``, ``msgs=``).
"""

import logging

import torch

from modeleval.core.mode import LogDensityMode

DEFAULT_DTYPE: torch.dtype = torch.float64
"""Floating point type of dual-number parameter copies.

Double precision keeps templated gradients comparable to hand-coded ones.
"""

DEFAULT_DEVICE: str = "cpu"
"""Device on which dual-number parameter copies are allocated."""

DEFAULT_LOGGER_NAME: str = "modeleval"
"""Root name of the loggers created by ``ModelEvalLogger``."""

DEFAULT_LOG_LEVEL: int = logging.INFO
"""Level of the loggers created by ``ModelEvalLogger``."""

DEFAULT_MODE: LogDensityMode = LogDensityMode(propto=False, jacobian=False)
"""Mode used when a caller does not request one: full density, no Jacobian."""

FUNCTIONAL_MODE: LogDensityMode = LogDensityMode(propto=True, jacobian=True)
"""Mode used by ``ModelFunctional`` and ``gradient``."""
