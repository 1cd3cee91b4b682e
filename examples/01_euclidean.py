import numpy as np

from reference_distance import ReferenceArguments, arguments_for


record = {"ARG": "x,y", "x": 1.0, "y": 2.0}
ref = ReferenceArguments.from_record(record, "EUCLIDEAN")

runtime = []
ref.align_against(runtime)
args = arguments_for(runtime)

for current in ([1.0, 2.0], [2.0, 2.0], [4.0, 6.0]):
    r2, grad = ref.evaluate(current, args, squared=True)
    r, _ = ref.evaluate(current, args, squared=False)
    print(f"current={current}  r^2={r2:.3f}  r={r:.3f}  grad={np.round(grad, 3)}")

print(ref.format_arguments("%8.3f"), end="")
