import numpy as np
import pytest

from reference_distance import ArgumentTable, MismatchedArguments, ReferenceArguments


def _frame(*names: str) -> ReferenceArguments:
    ref = ReferenceArguments()
    ref.set_argument_names(names)
    return ref


def test_empty_runtime_list_is_populated_in_order():
    ref = _frame("x", "y", "z")
    runtime: list = []

    ref.align_against(runtime)

    assert runtime == ["x", "y", "z"]
    assert ref.der_index.tolist() == [0, 1, 2]


def test_strict_alignment_accepts_identical_order():
    ref = _frame("x", "y")
    runtime = ["x", "y"]
    ref.align_against(runtime, allow_reorder=False)
    assert runtime == ["x", "y"]
    assert ref.der_index.tolist() == [0, 1]


def test_strict_alignment_rejects_count_mismatch():
    ref = _frame("x", "y")
    with pytest.raises(MismatchedArguments, match="numbers of arguments"):
        ref.align_against(["x", "y", "z"])


def test_strict_alignment_rejects_reordered_names():
    ref = _frame("x", "y")
    with pytest.raises(MismatchedArguments, match="mismatched arguments"):
        ref.align_against(["y", "x"])


def test_flexible_alignment_with_reordered_names():
    ref = _frame("x", "y")
    runtime = ["y", "x"]

    ref.align_against(runtime, allow_reorder=True)

    assert runtime == ["y", "x"]
    assert ref.der_index.tolist() == [1, 0]


def test_flexible_alignment_appends_missing_names():
    ref = _frame("b", "c", "d")
    runtime = ["a", "b"]

    ref.align_against(runtime, allow_reorder=True)

    assert runtime == ["a", "b", "c", "d"]
    assert ref.der_index.tolist() == [1, 2, 3]


def test_flexible_alignment_searches_beyond_frame_length():
    # "z" lives past position len(names) in the shared vector
    ref = _frame("z")
    runtime = ["a", "b", "z"]
    ref.align_against(runtime, allow_reorder=True)
    assert runtime == ["a", "b", "z"]
    assert ref.der_index.tolist() == [2]


def test_flexible_alignment_order_gives_permuted_superset():
    def build(order):
        frames = {"A": _frame("x", "y"), "B": _frame("y", "z")}
        runtime: list = []
        for key in order:
            frames[key].align_against(runtime, allow_reorder=True)
        return frames, runtime

    frames_ab, runtime_ab = build("AB")
    frames_ba, runtime_ba = build("BA")

    assert runtime_ab == ["x", "y", "z"]
    assert runtime_ba == ["y", "z", "x"]
    assert sorted(runtime_ab) == sorted(runtime_ba)

    for frames, runtime in ((frames_ab, runtime_ab), (frames_ba, runtime_ba)):
        for ref in frames.values():
            assert [runtime[k] for k in ref.der_index] == list(ref.names)


def test_duplicate_names_warn():
    with pytest.warns(UserWarning, match="Duplicate argument names"):
        table = ArgumentTable(["x", "x"])
    runtime = ["x"]
    table.align_against(runtime, allow_reorder=True)
    assert table.der_index.tolist() == [0, 0]


def test_der_index_view_is_read_only():
    ref = _frame("x", "y")
    with pytest.raises(ValueError):
        ref.der_index[0] = 5
    assert isinstance(ref.der_index, np.ndarray)
