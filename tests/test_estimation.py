import math

import numpy as np
import pandas as pd
import pytest

from coexnet.analysis.estimation import (
    MOTIF_ARITY, estimate_motif_frequencies, estimate_motif_total, log_comb,
    log_max_motif_count, normalized_estimate_table
)
from coexnet.analysis.motifs import MOTIFS, MotifSampler, count_motifs
from coexnet.build.network import BinaryGraph
from coexnet.config import MotifConfig

from conftest import random_binary_matrix


@pytest.mark.parametrize('n, k', [(5, 0), (5, 2), (10, 3), (30, 4), (4, 4)])
def test_log_comb_matches_exact_binomial(n, k):
    assert log_comb(n, k) == pytest.approx(math.log(math.comb(n, k)), abs=1e-9)


def test_log_comb_out_of_range():
    assert log_comb(3, 4) == float('-inf')
    assert log_comb(3, -1) == float('-inf')


def test_log_comb_does_not_overflow_for_large_networks():
    value = log_comb(20000, 4)

    assert np.isfinite(value)
    assert value == pytest.approx(math.log(math.comb(20000, 4)), rel=1e-12)


def test_log_max_motif_count_formulas():
    assert log_max_motif_count('triangle', 10) == pytest.approx(math.log(120))
    assert log_max_motif_count('v_shape', 10) == pytest.approx(math.log(10 * 36))
    assert log_max_motif_count('three_star', 10) == pytest.approx(math.log(10 * 84))
    assert log_max_motif_count('square', 10) == pytest.approx(math.log(3 * 210))


def test_log_max_motif_count_too_few_vertices():
    assert log_max_motif_count('square', 3) == float('-inf')
    assert log_max_motif_count('triangle', 0) == float('-inf')


def test_log_max_motif_count_unknown_motif():
    with pytest.raises(ValueError):
        log_max_motif_count('pentagon', 10)


def test_full_size_samples_are_not_rescaled():
    estimate = estimate_motif_total([4, 4, 4], 'triangle', n_vertices=8, sample_size=8)

    assert estimate.log_scaling == pytest.approx(0.0)
    assert estimate.estimated_total == pytest.approx(4.0)
    assert estimate.normalized == pytest.approx(4 / 56)


def test_estimate_scales_mean_count():
    estimate = estimate_motif_total([1, 2, 3], 'square', n_vertices=100, sample_size=10)

    expected_total = 2.0 * math.comb(100, 4) / math.comb(10, 4)
    assert estimate.mean_count == pytest.approx(2.0)
    assert estimate.estimated_total == pytest.approx(expected_total, rel=1e-9)
    assert estimate.normalized == pytest.approx(expected_total / (3 * math.comb(100, 4)), rel=1e-9)


def test_estimate_handles_networks_where_binomials_overflow():
    estimate = estimate_motif_total([5], 'three_star', n_vertices=10 ** 6, sample_size=20)

    assert np.isfinite(estimate.normalized)
    assert 0 < estimate.normalized <= 1


def test_zero_counts_give_zero_estimate():
    estimate = estimate_motif_total(np.zeros(10), 'v_shape', n_vertices=50, sample_size=10)

    assert estimate.estimated_total == 0.0
    assert estimate.normalized == 0.0


def test_samples_smaller_than_motif_give_zero_estimate():
    estimate = estimate_motif_total([0, 0], 'square', n_vertices=50, sample_size=3)

    assert estimate.normalized == 0.0


def test_estimate_rejects_bad_arguments():
    with pytest.raises(ValueError):
        estimate_motif_total([1], 'pentagon', 10, 5)
    with pytest.raises(ValueError):
        estimate_motif_total([1], 'triangle', 10, 11)
    with pytest.raises(ValueError):
        estimate_motif_total([], 'triangle', 10, 5)


def _sample(matrix, sample_size=8, n_samples=200):
    config = MotifConfig(verbose=False, show_progress=False,
                         sample_size=sample_size, n_samples=n_samples)
    graph = BinaryGraph(matrix, tuple(range(matrix.shape[0])))
    return MotifSampler(config).sample(graph)


def test_complete_graph_saturates_every_closed_form_bound():
    n = 30
    matrix = np.ones((n, n), dtype=np.uint8) - np.eye(n, dtype=np.uint8)

    estimates = estimate_motif_frequencies(_sample(matrix), n, 8)

    assert estimates['triangle'].normalized == pytest.approx(1.0)
    assert estimates['three_star'].normalized == pytest.approx(1.0)
    assert estimates['square'].normalized == pytest.approx(1.0)
    assert estimates['v_shape'].normalized == 0.0


@pytest.mark.parametrize('density', [0.05, 0.2, 0.5, 0.9])
def test_normalized_estimates_stay_in_unit_interval(density):
    matrix = random_binary_matrix(100, density, seed=int(density * 100))

    estimates = estimate_motif_frequencies(_sample(matrix, sample_size=10), 100, 10)

    for estimate in estimates.values():
        assert 0.0 <= estimate.normalized <= 1.0 + 1e-9


def test_empty_graph_estimates_are_zero():
    estimates = estimate_motif_frequencies(_sample(np.zeros((20, 20), dtype=np.uint8)), 20, 8)

    assert all(estimate.normalized == 0.0 for estimate in estimates.values())


def test_estimate_close_to_true_triangle_density():
    matrix = random_binary_matrix(60, 0.3, seed=12)
    true_density = count_motifs(matrix).triangle / math.comb(60, 3)

    estimates = estimate_motif_frequencies(_sample(matrix, sample_size=20, n_samples=400), 60, 20)

    assert estimates['triangle'].normalized == pytest.approx(true_density, rel=0.15)


def test_estimate_frequencies_requires_all_motifs():
    with pytest.raises(ValueError):
        estimate_motif_frequencies(pd.DataFrame({'triangle': [1]}), 10, 5)


def test_normalized_table_layout():
    counts = pd.DataFrame({motif: [1, 2] for motif in MOTIFS})
    estimates = {
        'UC': estimate_motif_frequencies(counts, 20, 6),
        'HC': estimate_motif_frequencies(counts * 0, 20, 6),
    }

    table = normalized_estimate_table(estimates)

    assert list(table.index) == ['UC', 'HC']
    assert list(table.columns) == list(MOTIFS)
    assert (table.loc['HC'] == 0).all()
    assert (table.loc['UC'] > 0).all()


def test_motif_arity_covers_every_motif():
    assert set(MOTIF_ARITY) == set(MOTIFS)
