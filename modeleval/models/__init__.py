from modeleval.models.normal_scale import NormalScaleModel
from modeleval.models.rosenbrock import RosenbrockModel

__all__ = ["RosenbrockModel", "NormalScaleModel"]
