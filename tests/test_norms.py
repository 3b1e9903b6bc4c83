"""Tests for the norm registry and vector extract metrics."""

import math

import numpy as np
import pytest
from prefmetric.extract_metric import ExtractMetric
from prefmetric.norms import (
    BUILTIN_NORM_NAMES,
    DEFAULT_NORM,
    chebyshev_norm,
    euclidean_norm,
    get_norm,
    list_norms,
    manhattan_norm,
    register_norm,
    reset_norm_registry,
    unregister_norm,
    vector_difference,
    vector_extract_metric,
)


@pytest.fixture(autouse=True)
def _clean_registry():
    reset_norm_registry()
    yield
    reset_norm_registry()


ALL_NORMS = [
    ("euclidean", euclidean_norm),
    ("manhattan", manhattan_norm),
    ("chebyshev", chebyshev_norm),
]


# ── Built-in norms ──────────────────────────────────────────────────────

class TestBuiltinNorms:

    def test_euclidean(self):
        assert euclidean_norm([3.0, 4.0]) == pytest.approx(5.0)

    def test_manhattan(self):
        assert manhattan_norm([3.0, -4.0]) == pytest.approx(7.0)

    def test_chebyshev(self):
        assert chebyshev_norm([3.0, -4.0, 1.0]) == pytest.approx(4.0)

    def test_accepts_numpy_arrays(self):
        assert euclidean_norm(np.array([1.0, 2.0, 2.0])) == pytest.approx(3.0)

    @pytest.mark.parametrize("name,fn", ALL_NORMS, ids=[n[0] for n in ALL_NORMS])
    def test_returns_python_float(self, name, fn):
        assert type(fn([1, 2])) is float

    @pytest.mark.parametrize("name,fn", ALL_NORMS, ids=[n[0] for n in ALL_NORMS])
    def test_zero_vector(self, name, fn):
        assert fn([0.0, 0.0, 0.0]) == 0.0

    @pytest.mark.parametrize("name,fn", ALL_NORMS, ids=[n[0] for n in ALL_NORMS])
    def test_empty_vector(self, name, fn):
        assert fn([]) == 0.0

    @pytest.mark.parametrize("name,fn", ALL_NORMS, ids=[n[0] for n in ALL_NORMS])
    def test_homogeneity(self, name, fn):
        v = [1.0, -2.0, 0.5]
        assert fn([-3.0 * x for x in v]) == pytest.approx(3.0 * fn(v))

    @pytest.mark.parametrize("name,fn", ALL_NORMS, ids=[n[0] for n in ALL_NORMS])
    def test_nan_rejected(self, name, fn):
        with pytest.raises(ValueError, match="finite"):
            fn([math.nan, 1.0])

    @pytest.mark.parametrize("name,fn", ALL_NORMS, ids=[n[0] for n in ALL_NORMS])
    def test_matrix_rejected(self, name, fn):
        with pytest.raises(ValueError, match="one-dimensional"):
            fn([[1.0, 2.0], [3.0, 4.0]])

    @pytest.mark.parametrize("name,fn", ALL_NORMS, ids=[n[0] for n in ALL_NORMS])
    def test_non_numeric_rejected(self, name, fn):
        with pytest.raises(TypeError, match="numbers"):
            fn(["a", "b"])

    def test_lp_ordering(self):
        v = [1.0, -2.0, 3.0]
        assert chebyshev_norm(v) <= euclidean_norm(v) <= manhattan_norm(v)


# ── Registry ────────────────────────────────────────────────────────────

class TestNormRegistry:

    def test_builtins_registered(self):
        assert set(list_norms()) >= BUILTIN_NORM_NAMES
        assert DEFAULT_NORM in BUILTIN_NORM_NAMES

    def test_get_builtin(self):
        assert get_norm("manhattan") is manhattan_norm

    def test_register_custom(self):
        register_norm("l0", lambda v: float(np.count_nonzero(v)))
        assert get_norm("l0")([0.0, 2.0, 3.0]) == 2.0

    def test_duplicate_rejected(self):
        with pytest.raises(ValueError, match="already registered"):
            register_norm("euclidean", euclidean_norm)

    def test_force_override_and_reset(self):
        register_norm("euclidean", manhattan_norm, force=True)
        assert get_norm("euclidean") is manhattan_norm
        reset_norm_registry()
        assert get_norm("euclidean") is euclidean_norm

    def test_non_callable_rejected(self):
        with pytest.raises(TypeError, match="callable"):
            register_norm("bad", 3)

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError, match="non-empty"):
            register_norm(" ", euclidean_norm)

    def test_unknown_name(self):
        with pytest.raises(KeyError, match="Available"):
            get_norm("l7")

    def test_unregister_custom(self):
        register_norm("l0", lambda v: 0.0)
        unregister_norm("l0")
        assert "l0" not in list_norms()

    def test_builtin_protected(self):
        with pytest.raises(ValueError, match="built-in"):
            unregister_norm("chebyshev")

    def test_unregister_unknown(self):
        with pytest.raises(KeyError):
            unregister_norm("l0")


# ── Vector extract metrics ──────────────────────────────────────────────

def _features(item):
    return item["features"]


class TestVectorDifference:

    def test_difference(self):
        np.testing.assert_allclose(vector_difference([3, 2], [1, 5]), [2.0, -3.0])

    def test_dimension_mismatch(self):
        with pytest.raises(ValueError, match="mismatch"):
            vector_difference([1.0, 2.0], [1.0])


class TestVectorExtractMetric:

    def test_default_norm_is_euclidean(self):
        metric = vector_extract_metric(_features)
        a = {"features": [0.0, 0.0]}
        b = {"features": [3.0, 4.0]}
        assert isinstance(metric, ExtractMetric)
        assert metric.distance(a, b) == pytest.approx(5.0)

    def test_norm_by_name(self):
        metric = vector_extract_metric(_features, norm="manhattan")
        assert metric.distance({"features": [0, 0]}, {"features": [3, 4]}) == pytest.approx(7.0)

    def test_norm_callable(self):
        metric = vector_extract_metric(_features, norm=chebyshev_norm)
        assert metric.distance({"features": [0, 0]}, {"features": [3, 4]}) == pytest.approx(4.0)

    def test_custom_registered_norm(self):
        register_norm("l0", lambda v: float(np.count_nonzero(v)))
        metric = vector_extract_metric(_features, norm="l0")
        assert metric.distance({"features": [1, 2, 3]}, {"features": [1, 0, 0]}) == 2.0

    def test_unknown_norm(self):
        with pytest.raises(KeyError):
            vector_extract_metric(_features, norm="nope")

    def test_non_callable_norm(self):
        with pytest.raises(TypeError, match="callable"):
            vector_extract_metric(_features, norm=3.0)

    def test_inherent(self):
        same_kind = lambda a, b: 0.0 if a["kind"] == b["kind"] else 10.0
        metric = vector_extract_metric(_features, inherent=same_kind)
        a = {"kind": "film", "features": [0.0]}
        b = {"kind": "show", "features": [1.0]}
        assert metric.distance(a, b) == pytest.approx(11.0)

    def test_weights(self):
        metric = vector_extract_metric(_features, norm="manhattan", weights=[1.0, 0.0])
        a = {"features": [0.0, 0.0]}
        b = {"features": [2.0, 100.0]}
        assert metric.distance(a, b) == pytest.approx(2.0)

    def test_negative_weights_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            vector_extract_metric(_features, weights=[1.0, -1.0])

    def test_weight_dimension_mismatch(self):
        metric = vector_extract_metric(_features, weights=[1.0])
        with pytest.raises(ValueError, match="Weight dimension"):
            metric.distance({"features": [1, 2]}, {"features": [3, 4]})

    def test_self_distance_is_zero(self):
        metric = vector_extract_metric(_features)
        item = {"features": [0.3, -1.7, 2.0]}
        assert metric.distance(item, item) == 0.0
