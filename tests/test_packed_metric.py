import numpy as np
import pytest

from reference_distance import Diagonal, Metric, ReferenceArguments, arguments_for


def test_metric_storage_is_row_major_upper_triangle():
    dense = np.array([[1.0, 2.0, 3.0], [2.0, 4.0, 5.0], [3.0, 5.0, 6.0]])
    m = Metric.from_dense(dense)

    np.testing.assert_array_equal(m.packed(), [1, 2, 3, 4, 5, 6])
    np.testing.assert_array_equal(m.dense(), dense)
    assert m.size == 3
    assert m.get(2, 0) == m.get(0, 2) == 3.0
    assert m.get(1, 1) == 4.0
    with pytest.raises(IndexError):
        m.get(0, 3)


def test_packed_length_depends_on_mode():
    assert Diagonal.packed_length(4) == 4
    assert Metric.packed_length(4) == 10
    assert Metric.packed_length(0) == 0


def test_packed_view_is_read_only():
    ref = ReferenceArguments(metric=True)
    ref.set_argument_names(["x", "y"])
    view = ref.packed_view()
    assert view.shape == (3,)
    with pytest.raises(ValueError):
        view[0] = 10.0


def test_packed_view_is_cached_until_the_model_changes():
    ref = ReferenceArguments(weighted=True)
    ref.set_argument_names(["x", "y"])
    ref.set_reference_arguments([0.0, 0.0], [1.0, 2.0])

    first = ref.packed_view()
    assert ref.packed_view() is first

    # same length, different contents
    ref.set_reference_arguments([0.0, 0.0], [3.0, 4.0])
    np.testing.assert_array_equal(ref.packed_view(), [3.0, 4.0])
    np.testing.assert_array_equal(first, [1.0, 2.0])


def test_metric_packed_view_refreshes_for_same_size_matrix():
    ref = ReferenceArguments(metric=True)
    ref.set_argument_names(["x", "y"])
    ref.set_reference_arguments([0.0, 0.0], [1.0, 0.5, 1.0])
    assert ref.packed_view()[1] == 0.5

    ref.set_reference_arguments([0.0, 0.0], [1.0, -0.5, 1.0])
    assert ref.packed_view()[1] == -0.5


@pytest.mark.parametrize("metric", [False, True])
def test_packed_view_reloads_to_an_equivalent_model(metric):
    rng = np.random.default_rng(11)
    names = ["a", "b", "c"]
    values = rng.normal(size=3)

    ref = ReferenceArguments(weighted=not metric, metric=metric)
    ref.set_argument_names(names)
    if metric:
        a = rng.normal(size=(3, 3))
        sigma = Metric.from_dense(a @ a.T + np.eye(3)).packed()
    else:
        sigma = rng.uniform(0.5, 2.0, size=3)
    ref.set_reference_arguments(values, sigma)
    ref.align_against([])

    copy = ReferenceArguments(ref.options)
    copy.set_argument_names(ref.names)
    copy.set_reference_arguments(ref.reference_values, ref.packed_view())
    copy.align_against([])

    args = arguments_for(names)
    for probe in rng.normal(size=(5, 3)):
        r0, g0 = ref.evaluate(probe, args, squared=True)
        r1, g1 = copy.evaluate(probe, args, squared=True)
        assert r1 == pytest.approx(r0)
        np.testing.assert_allclose(g1, g0)


def test_dense_matrix_is_built_once_and_read_only():
    m = Metric.from_dense([[1.0, 0.5], [0.5, 2.0]])
    dense = m.dense()
    assert m.dense() is dense
    with pytest.raises(ValueError):
        dense[0, 1] = 3.0
    r, grad = m.distance(np.array([1.0, 1.0]))
    assert r == pytest.approx(4.0)
    np.testing.assert_allclose(grad, [1.5, 2.5])
