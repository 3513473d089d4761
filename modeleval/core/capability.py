"""
Capability classification of model types.

Every concrete model type is resolved exactly once into one of two evaluation
strategies plus the set of optional capabilities it provides. Evaluators read
the cached result; nothing is re-inspected per call.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from enum import Enum, Flag, auto
from typing import Any, Dict, Tuple, Type

from modeleval.core.model import InterfaceModel, TemplatedDensity, TemplatedModel, VirtualInterface
from modeleval.exceptions import ConfigurationError, ModelEvalError
from modeleval.utils.logging import ModelEvalLogger

_logger = ModelEvalLogger.get_module_logger(__name__)


class Strategy(Enum):
    """How the evaluation layer computes densities and gradients for a model."""

    TEMPLATED = "templated"
    """Generic density; gradients through reverse-mode AD in this layer."""

    INTERFACE = "interface"
    """Specialized densities; the model computes its own gradient."""


class Capability(Flag):
    """Individual operations a model type may or may not provide."""

    NONE = 0
    DUAL_LOG_PROB = auto()
    SPECIALIZED_LOG_PROB = auto()
    LOG_PROB_GRAD = auto()
    TRANSFORM_INITS = auto()
    WRITE_ARRAY = auto()


_DESCRIPTIONS = {
    Capability.DUAL_LOG_PROB: "a log_prob generic over dual numbers",
    Capability.SPECIALIZED_LOG_PROB: "specialized log_prob entry points",
    Capability.LOG_PROB_GRAD: "its own log_prob_grad",
    Capability.TRANSFORM_INITS: "transform_inits",
    Capability.WRITE_ARRAY: "write_array",
}

_PROTOCOLS = {
    Strategy.TEMPLATED: TemplatedDensity,
    Strategy.INTERFACE: VirtualInterface,
}


def _protocol_methods(protocol: type) -> Tuple[str, ...]:
    """Public method names a protocol declares."""
    return tuple(name for name, member in vars(protocol).items() if not name.startswith("_") and callable(member))


_STRATEGY_CAPABILITIES = {
    Strategy.TEMPLATED: Capability.DUAL_LOG_PROB,
    Strategy.INTERFACE: Capability.SPECIALIZED_LOG_PROB | Capability.LOG_PROB_GRAD,
}

_OPTIONAL_METHODS = {
    Capability.TRANSFORM_INITS: "transform_inits",
    Capability.WRITE_ARRAY: "write_array",
}

# Types registered by duck typing, i.e. not deriving from the base classes.
_registry: Dict[type, Strategy] = {}


@dataclass(frozen=True)
class ModelCapabilities:
    """
    Result of classifying a model type.

    Attributes:
        model_type (type): The classified type.
        strategy (Strategy): The single strategy the type satisfies.
        capabilities (Capability): Every operation the type provides.
    """

    model_type: type
    strategy: Strategy
    capabilities: Capability

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def require(self, capability: Capability, error: Type[ModelEvalError] = ConfigurationError) -> None:
        """
        Fail fast if the model type does not provide ``capability``.

        Args:
            capability: One or more flags that must all be present.
            error: Exception class to raise. Strategy-specific code paths pass
                ``CapabilityMismatchError``.

        Raises:
            ConfigurationError: Naming the missing capability, unless ``error``
                says otherwise.
        """
        missing = [flag for flag in _DESCRIPTIONS if flag in capability and flag not in self.capabilities]
        if missing:
            raise error(
                f"{self.model_type.__name__} does not provide "
                + " or ".join(f"{_DESCRIPTIONS[flag]} (capability {flag.name})" for flag in missing)
                + f"; its strategy is {self.strategy.value}."
            )


def _declared_strategies(model_type: type) -> set:
    declared = set()
    if issubclass(model_type, TemplatedModel):
        declared.add(Strategy.TEMPLATED)
    if issubclass(model_type, InterfaceModel):
        declared.add(Strategy.INTERFACE)
    for registered_type, strategy in _registry.items():
        if issubclass(model_type, registered_type):
            declared.add(strategy)
    return declared


def register(model_type: type, strategy: Strategy) -> type:
    """
    Declare the strategy of a model type that does not derive from a base class.

    Args:
        model_type: Class to register. Its subclasses inherit the registration.
        strategy: Strategy the class implements.

    Returns:
        ``model_type``, so the function can be used through ``functools.partial``
        as a class decorator.

    Raises:
        TypeError: If ``model_type`` is not a class.
        ConfigurationError: If the class lacks a method the strategy requires, or
            already satisfies a different strategy.
    """
    if not isinstance(model_type, type):
        raise TypeError(f"register expects a class, got {type(model_type).__name__}.")

    required = _protocol_methods(_PROTOCOLS[strategy])
    missing = [name for name in required if not callable(getattr(model_type, name, None))]
    if missing:
        raise ConfigurationError(
            f"Cannot register {model_type.__name__} as a {strategy.value} model: "
            f"missing {', '.join(missing)}."
        )

    conflicting = _declared_strategies(model_type) - {strategy}
    if conflicting:
        raise ConfigurationError(
            f"Cannot register {model_type.__name__} as a {strategy.value} model: "
            f"it is already a {conflicting.pop().value} model."
        )

    _registry[model_type] = strategy
    classify.cache_clear()
    return model_type


def unregister(model_type: type) -> None:
    """Remove a registration made with ``register``."""
    _registry.pop(model_type, None)
    classify.cache_clear()


@functools.lru_cache(maxsize=None)
def classify(model_type: type) -> ModelCapabilities:
    """
    Resolve the strategy and capabilities of a model type.

    Results are cached per type.

    Raises:
        ConfigurationError: If the type satisfies both strategies or neither.
    """
    declared = _declared_strategies(model_type)
    if not declared:
        raise ConfigurationError(
            f"{model_type.__name__} is neither a templated-density nor a "
            "virtual-interface model. Derive from TemplatedModel or "
            "InterfaceModel, or call register()."
        )
    if len(declared) > 1:
        raise ConfigurationError(
            f"{model_type.__name__} satisfies both the templated-density and the "
            "virtual-interface strategies; a model must satisfy exactly one."
        )

    strategy = declared.pop()
    capabilities = _STRATEGY_CAPABILITIES[strategy]
    for capability, method_name in _OPTIONAL_METHODS.items():
        if callable(getattr(model_type, method_name, None)):
            capabilities |= capability

    _logger.debug("Classified %s as %s with %s", model_type.__name__, strategy.value, capabilities)
    return ModelCapabilities(model_type=model_type, strategy=strategy, capabilities=capabilities)


def capabilities_of(model: Any) -> ModelCapabilities:
    """Classify the type of a model instance."""
    return classify(type(model))
