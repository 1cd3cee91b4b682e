import math

import numpy as np

from reference_distance import Argument, Metric, ReferenceArguments


# A distance coupling a torsion angle to a bond length.
cov = np.array([[0.25, 0.02], [0.02, 0.01]])
prec = np.linalg.inv(cov)
metric = Metric.from_dense(0.5 * (prec + prec.T))

ref = ReferenceArguments("MAHALANOBIS")
ref.set_argument_names(["phi", "d"])
ref.set_reference_arguments([math.pi - 0.1, 1.5], metric.packed())

runtime = []
ref.align_against(runtime)
args = [Argument.angle("phi"), Argument("d")]

# -pi + 0.1 is only 0.2 rad away from the reference once wrapped
r, grad = ref.evaluate([-math.pi + 0.1, 1.52], args)
print("distance:", round(r, 4))
print("gradient:", np.round(grad, 4))
print("packed metric:", np.round(ref.packed_view(), 3))
