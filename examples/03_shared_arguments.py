import numpy as np

from reference_distance import MismatchedArguments, ReferenceArguments, arguments_for


frames = [
    ReferenceArguments.from_record({"ARG": "a,b", "a": 0.0, "b": 1.0}),
    ReferenceArguments.from_record({"ARG": "b,c", "b": 2.0, "c": 0.5}),
    ReferenceArguments.from_record({"ARG": "c,a,d", "c": 1.0, "a": 1.0, "d": 3.0}),
]

try:
    frames[1].align_against(["a", "b"])
except MismatchedArguments as e:
    print("strict alignment failed:", e)

runtime = []
for ref in frames:
    ref.align_against(runtime, allow_reorder=True)
print("shared arguments:", runtime)

args = arguments_for(runtime)
current = np.array([0.5, 1.5, 0.5, 2.0])
for ref in frames:
    grad = np.zeros(len(runtime))
    r2, _ = ref.evaluate(current, args, squared=True, out=grad)
    print(ref.names, "->", list(ref.der_index), f"r^2={r2:.3f}", np.round(grad, 3))
