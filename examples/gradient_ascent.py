# Some imports
import numpy as np

from modeleval import LoggingLogger, gradient, log_prob_grad, write_array
from modeleval.core.mode import LogDensityMode
from modeleval.models import NormalScaleModel, RosenbrockModel

# Both kinds of model go through the same entry points.
# RosenbrockModel supplies its own gradient, NormalScaleModel is differentiated with torch.

rosenbrock = RosenbrockModel(2)
value, grad = log_prob_grad(rosenbrock, np.array([0.5, 0.5]))
print(f"Rosenbrock at (0.5, 0.5): log p = {value}, gradient = {grad}")

# Lets climb the normal model's posterior with plain gradient ascent
y = np.array([1.0, 2.0, 4.0, 3.5, 2.2])
model = NormalScaleModel(y, prior_scale=10.0, verbose=False)

x = np.zeros(model.num_params_r)
step = 0.05
for it in range(500):
    f, grad_f = gradient(model, x)
    x = x + step * grad_f
    if it % 100 == 0:
        print(f"iteration {it}: log p = {f:.4f}")

# Constrained values at the mode: mu, sigma, the variance and posterior predictive draws
values = write_array(model, 1234, x)
for name, v in zip(model.constrained_param_names(), values):
    print(f"{name} = {v:.4f}")

# Verbose models write diagnostics; route them to the package logger
verbose_model = NormalScaleModel(y, verbose=True)
log_prob_grad(verbose_model, x, mode=LogDensityMode(propto=True, jacobian=True), logger=LoggingLogger())
