import numpy as np
import pandas as pd
import pytest

from coexnet.analysis.motifs import MOTIFS
from coexnet.analysis.statistics import (
    StatisticalAnalyzer, bootstrap_motif_test, mean_difference_statistic
)
from coexnet.config import MotifConfig


def _counts(n, mean, seed):
    rng = np.random.default_rng(seed)
    return pd.DataFrame({motif: rng.poisson(mean, size=n) for motif in MOTIFS})


def test_mean_difference_statistic():
    case = np.array([[2.0, 0.0, 1.0, 0.0], [4.0, 0.0, 1.0, 0.0]])
    control = np.array([[1.0, 1.0, 1.0, 0.0]])

    assert mean_difference_statistic(case, control) == pytest.approx(4.0 + 1.0)


def test_p_value_is_a_probability():
    result = bootstrap_motif_test(_counts(80, 3, 1), _counts(60, 4, 2), n_bootstrap=300, seed=5)

    assert 0.0 <= result.p_value <= 1.0
    assert result.n_bootstrap == 300
    assert result.observed_statistic > 0


def test_bootstrap_is_deterministic_for_a_seed():
    case, control = _counts(50, 2, 3), _counts(50, 2, 4)

    first = bootstrap_motif_test(case, control, n_bootstrap=250, seed=11)
    second = bootstrap_motif_test(case, control, n_bootstrap=250, seed=11)

    assert first == second


def test_identical_constant_groups_are_never_more_extreme():
    counts = pd.DataFrame({motif: [3] * 20 for motif in MOTIFS})

    result = bootstrap_motif_test(counts, counts.copy(), n_bootstrap=100)

    assert result.observed_statistic == 0.0
    assert result.p_value == 1.0


def test_mean_difference_is_case_minus_control():
    case = pd.DataFrame({motif: [4, 6] for motif in MOTIFS})
    control = pd.DataFrame({motif: [1, 1] for motif in MOTIFS})

    result = bootstrap_motif_test(case, control, n_bootstrap=10)

    assert result.mean_difference == {motif: 4.0 for motif in MOTIFS}


def test_pooled_resampling_detects_separated_groups():
    case = pd.DataFrame({motif: [10] * 50 for motif in MOTIFS})
    control = pd.DataFrame({motif: [0] * 50 for motif in MOTIFS})

    result = bootstrap_motif_test(case, control, n_bootstrap=500, resampling='pooled')

    assert result.resampling == 'pooled'
    assert result.p_value < 0.01


def test_progress_callback_sees_every_replicate():
    calls = []

    bootstrap_motif_test(_counts(10, 1, 0), _counts(10, 1, 1), n_bootstrap=25,
                         progress=lambda done, total: calls.append(done))

    assert calls == list(range(1, 26))


def test_bootstrap_rejects_bad_arguments():
    counts = _counts(10, 1, 0)

    with pytest.raises(ValueError):
        bootstrap_motif_test(counts, counts, n_bootstrap=0)
    with pytest.raises(ValueError):
        bootstrap_motif_test(counts, counts, resampling='permutation')
    with pytest.raises(ValueError):
        bootstrap_motif_test(counts[['triangle']], counts)
    with pytest.raises(ValueError):
        bootstrap_motif_test(counts.iloc[:0], counts)


def test_statistical_analyzer_summary():
    config = MotifConfig(verbose=False, show_progress=False, n_bootstrap=50)
    case = pd.DataFrame({motif: [2, 4] for motif in MOTIFS})
    control = pd.DataFrame({motif: [1, 1] for motif in MOTIFS})

    results = StatisticalAnalyzer(config).run_analysis(case, control)
    summary = results['summary']

    assert list(summary.index) == list(MOTIFS)
    assert (summary['mean-UC'] == 3.0).all()
    assert (summary['mean-HC'] == 1.0).all()
    assert (summary['mean_difference'] == 2.0).all()
    np.testing.assert_allclose(summary['log2_foldchange'], 1.0)
    assert {'median-UC', 'std_dev-HC', 'standard_error-UC'} <= set(summary.columns)
    assert results['bootstrap'].n_bootstrap == 50
