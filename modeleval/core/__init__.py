from modeleval.core.mode import LogDensityMode
from modeleval.core.model import (
    InterfaceModel,
    ModelBase,
    TemplatedDensity,
    TemplatedModel,
    VirtualInterface,
)
from modeleval.core.capability import (
    Capability,
    ModelCapabilities,
    Strategy,
    capabilities_of,
    classify,
    register,
    unregister,
)
from modeleval.core.arena import Arena, get_arena

__all__ = [
    "LogDensityMode",
    "ModelBase",
    "TemplatedModel",
    "InterfaceModel",
    "TemplatedDensity",
    "VirtualInterface",
    "Strategy",
    "Capability",
    "ModelCapabilities",
    "classify",
    "capabilities_of",
    "register",
    "unregister",
    "Arena",
    "get_arena",
]
