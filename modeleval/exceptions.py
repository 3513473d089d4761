"""Custom exception classes for the modeleval package.

All package-specific exceptions inherit from ``ModelEvalError`` so callers can
catch every failure raised by the evaluation layer with a single clause.
Errors raised by a model's own density function are never wrapped: they reach
the caller unchanged.
"""


class ModelEvalError(Exception):
    """Base class for all exceptions in the modeleval package."""


class ConfigurationError(ModelEvalError):
    """Raised when a model does not provide a capability that was requested.

    Also raised when a model type satisfies both or neither of the two
    evaluation strategies. This is always a fast failure: it is detected when
    the model type is classified or before any evaluation is attempted.
    """


class CapabilityMismatchError(ModelEvalError):
    """Raised when a strategy-specific code path is used with the wrong model.

    For example, wrapping a virtual-interface model in a ``ModelFunctional`` or
    constructing a ``TemplatedEvaluator`` for it. The call is never rerouted to
    the other strategy.
    """


class NumericalError(ModelEvalError, ValueError):
    """Raised by density helpers when an argument is outside its domain.

    Subclasses ``ValueError`` so that generic numeric code treating domain
    errors as ``ValueError`` keeps working.
    """


class ArenaError(ModelEvalError, RuntimeError):
    """Raised when a dual value is used after its arena has been recovered."""
