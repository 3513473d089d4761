"""
modeleval: log-density and gradient evaluation for generic inference algorithms.

Models come in two shapes, ``TemplatedModel`` (differentiated here with torch
autograd) and ``InterfaceModel`` (supplying its own gradient). The functions
below dispatch on the shape, which is resolved once per model type.
"""

__version__ = "0.1.0"

from modeleval.exceptions import (
    ArenaError,
    CapabilityMismatchError,
    ConfigurationError,
    ModelEvalError,
    NumericalError,
)
from modeleval.core import (
    Arena,
    Capability,
    InterfaceModel,
    LogDensityMode,
    ModelBase,
    Strategy,
    TemplatedModel,
    capabilities_of,
    classify,
    get_arena,
    register,
)
from modeleval.callbacks import BufferLogger, Logger, LoggingLogger, StreamLogger
from modeleval.io import DictVarContext
from modeleval.evaluation import (
    ModelFunctional,
    ad_gradient,
    evaluator_for,
    gradient,
    log_prob,
    log_prob_grad,
    log_prob_propto,
    transform_inits,
    write_array,
)

__all__ = [
    "ModelEvalError",
    "ConfigurationError",
    "CapabilityMismatchError",
    "NumericalError",
    "ArenaError",
    "LogDensityMode",
    "ModelBase",
    "TemplatedModel",
    "InterfaceModel",
    "Strategy",
    "Capability",
    "classify",
    "capabilities_of",
    "register",
    "Arena",
    "get_arena",
    "Logger",
    "LoggingLogger",
    "BufferLogger",
    "StreamLogger",
    "DictVarContext",
    "ModelFunctional",
    "ad_gradient",
    "evaluator_for",
    "log_prob",
    "log_prob_propto",
    "log_prob_grad",
    "gradient",
    "transform_inits",
    "write_array",
]
