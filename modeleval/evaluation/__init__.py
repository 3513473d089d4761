from modeleval.evaluation.autodiff import ad_gradient, reverse_sweep
from modeleval.evaluation.evaluator import (
    Evaluator,
    InterfaceEvaluator,
    TemplatedEvaluator,
    evaluator_for,
    relay_messages,
)
from modeleval.evaluation.functional import ModelFunctional
from modeleval.evaluation.log_prob import log_prob, log_prob_propto
from modeleval.evaluation.log_prob_grad import log_prob_grad
from modeleval.evaluation.gradient import gradient
from modeleval.evaluation.transforms import transform_inits, write_array

__all__ = [
    "Evaluator",
    "TemplatedEvaluator",
    "InterfaceEvaluator",
    "evaluator_for",
    "relay_messages",
    "ModelFunctional",
    "ad_gradient",
    "reverse_sweep",
    "log_prob",
    "log_prob_propto",
    "log_prob_grad",
    "gradient",
    "transform_inits",
    "write_array",
]
