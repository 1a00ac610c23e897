import numpy as np
import pytest

from scattertransition.clustering.fuzzy_dbscan import FuzzyParams, fuzzy_cluster, fuzzy_dbscan, CATEGORY_NOISE
from scattertransition.clustering.hierarchical import (
    ClusterTargetParams,
    finite_distance,
    hierarchical_cluster,
    is_clustering_done,
)
from scattertransition.clustering.packing import check_partition, pack_points, unique_dimensions
from scattertransition.model.data import Dimension
from scattertransition.transitions.errors import EmptyClusterError


def _sorted(clusters):
    return sorted(sorted(cluster) for cluster in clusters)


def test_pack_points(data, dims):
    packed = pack_points(data, [dims["a"], dims["c"]])
    assert packed.shape == (4, 2)
    assert packed.dtype == np.float32
    np.testing.assert_allclose(packed[1], [0.05, 0.95], rtol=1e-6)


def test_unique_dimensions(view_ab, view_ac, dims):
    assert unique_dimensions([view_ab, view_ac]) == [dims["a"], dims["b"], dims["c"]]


def test_check_partition():
    check_partition([[0, 2], [1]], 3)
    with pytest.raises(EmptyClusterError):
        check_partition([[0, 1, 2], []], 3)
    with pytest.raises(ValueError):
        check_partition([[0, 1], [1, 2]], 3)


def test_fuzzy_finds_both_groups(data, dims):
    clusters = fuzzy_cluster(data, list(dims.values()), FuzzyParams(eps_min=0.1, eps_max=0.1))
    assert _sorted(clusters) == [[0, 1], [2, 3]]


def test_fuzzy_collects_noise_last(dims):
    points = [{"a": 0.0, "b": 0.0}, {"a": 0.2, "b": 0.2}, {"a": 10.0, "b": 5.0}]
    params = FuzzyParams(eps_min=0.1, eps_max=0.1, pts_min=2, pts_max=2)
    clusters = fuzzy_cluster(points, [dims["a"], dims["b"]], params)
    assert clusters == [[0, 1], [2]]


def test_fuzzy_border_membership():
    packed = np.array([[0.0], [0.01], [0.02], [0.15]], dtype=np.float32)
    params = FuzzyParams(eps_min=0.05, eps_max=0.2, pts_min=3, pts_max=3)
    result = fuzzy_dbscan(packed, params)
    assert result.n_clusters == 1
    assert result.labels.tolist() == [0, 0, 0, 0]
    assert 0.0 < result.memberships[3] < 1.0
    assert CATEGORY_NOISE not in result.categories.tolist()


def test_fuzzy_params_validation():
    with pytest.raises(ValueError):
        FuzzyParams(eps_min=0.2, eps_max=0.1)


def test_fuzzy_empty(dims):
    assert fuzzy_cluster([], [dims["a"]], FuzzyParams()) == []


@pytest.mark.parametrize("params, label", [
    (FuzzyParams(), 0),
    (FuzzyParams(pts_min=5.0, pts_max=5.0), -1),
])
def test_fuzzy_single_point(dims, params, label):
    point = [{"a": 1.0}]
    assert fuzzy_cluster(point, [dims["a"]], params) == [[0]]
    assert fuzzy_dbscan(pack_points(point, [dims["a"]]), params).labels.tolist() == [label]


def test_finite_distance_ignores_non_finite():
    a = np.array([0.0, np.nan, 3.0])
    b = np.array([0.0, 1.0, 7.0])
    assert finite_distance(a, b) == pytest.approx(4.0)


def test_hierarchical_target_count(data, dims):
    dimensions = list(dims.values())
    assert _sorted(hierarchical_cluster(data, dimensions, ClusterTargetParams(target_count=2))) == [[0, 1], [2, 3]]
    assert _sorted(hierarchical_cluster(data, dimensions, ClusterTargetParams(target_count=1))) == [[0, 1, 2, 3]]


def test_hierarchical_without_targets_keeps_singletons(data, dims):
    clusters = hierarchical_cluster(data, list(dims.values()), ClusterTargetParams())
    assert clusters == [[0], [1], [2], [3]]


def test_hierarchical_target_radius(data, dims):
    clusters = hierarchical_cluster(data, list(dims.values()), ClusterTargetParams(target_radius=0.1, target_count=2))
    assert _sorted(clusters) == [[0, 1], [2, 3]]


def test_is_clustering_done_radius():
    points = np.array([[0.0, 0.0], [0.0, 1.0]])
    params = ClusterTargetParams(target_radius=0.1)
    assert is_clustering_done(points, [[0], [1]], params)
    assert not is_clustering_done(points, [[0, 1]], params)


def test_hierarchical_single_point():
    dim = Dimension("a", (0.0, 1.0))
    assert hierarchical_cluster([{"a": 0.5}], [dim], ClusterTargetParams(target_count=1)) == [[0]]
    assert hierarchical_cluster([], [dim], ClusterTargetParams(target_count=1)) == []
