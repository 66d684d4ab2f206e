"""
Statistical comparison of motif counts between two cohorts.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

import numpy as np
import pandas as pd
from tqdm import tqdm

from ..config.motif_config import MotifConfig
from .motifs import MOTIFS

RESAMPLING_MODES = ('within', 'pooled')


@dataclass(frozen=True)
class BootstrapResult:
    """Outcome of the bootstrap two-sample motif test."""
    observed_statistic: float
    p_value: float
    n_bootstrap: int
    resampling: str
    mean_difference: Dict[str, float]


def _count_matrix(counts: pd.DataFrame, label: str) -> np.ndarray:
    missing = [m for m in MOTIFS if m not in counts.columns]
    if missing:
        raise ValueError(f"{label} counts are missing motif columns: {missing}")
    if len(counts) == 0:
        raise ValueError(f"{label} counts are empty")
    return counts[list(MOTIFS)].to_numpy(dtype=float)


def mean_difference_statistic(case: np.ndarray, control: np.ndarray) -> float:
    """Sum over motifs of the squared difference of group means."""
    diff = case.mean(axis=0) - control.mean(axis=0)
    return float(np.sum(diff ** 2))


def bootstrap_motif_test(case_counts: pd.DataFrame,
                         control_counts: pd.DataFrame,
                         n_bootstrap: int = 10000,
                         seed: int = 0,
                         resampling: str = 'within',
                         progress: Optional[Callable[[int, int], None]] = None,
                         show_progress: bool = False) -> BootstrapResult:
    """
    Bootstrap two-sample test on the joint motif count vectors of two cohorts.

    The observed statistic is the sum of squared per-motif mean differences
    (case - control). Each replicate resamples subsample rows with replacement,
    keeping the group sizes, and recomputes the statistic. The p-value is the
    fraction of replicates whose statistic is at least the observed one.

    Args:
        case_counts: Subsample motif counts of the case cohort (one column per motif)
        control_counts: Subsample motif counts of the control cohort
        n_bootstrap: Number of bootstrap replicates
        seed: Seed of the single random stream used for all replicates
        resampling: 'within' resamples each group from its own rows;
            'pooled' resamples both groups from the pooled rows
        progress: Optional callback progress(done, total)
        show_progress: Show a tqdm bar when no callback is given

    Returns:
        BootstrapResult with p_value in [0, 1]
    """
    if n_bootstrap < 1:
        raise ValueError("n_bootstrap must be at least 1")
    if resampling not in RESAMPLING_MODES:
        raise ValueError(f"resampling must be one of {RESAMPLING_MODES}, got {resampling!r}")

    case = _count_matrix(case_counts, 'Case')
    control = _count_matrix(control_counts, 'Control')
    n_case, n_control = len(case), len(control)

    observed = mean_difference_statistic(case, control)
    mean_difference = dict(zip(MOTIFS, (case.mean(axis=0) - control.mean(axis=0)).tolist()))

    rng = np.random.default_rng(seed)
    pooled = np.vstack([case, control])

    replicates = range(n_bootstrap)
    if progress is None and show_progress:
        replicates = tqdm(replicates, desc='Bootstrap', unit='replicate')

    n_extreme = 0
    for done, _ in enumerate(replicates, start=1):
        if resampling == 'within':
            case_b = case[rng.integers(0, n_case, size=n_case)]
            control_b = control[rng.integers(0, n_control, size=n_control)]
        else:
            case_b = pooled[rng.integers(0, len(pooled), size=n_case)]
            control_b = pooled[rng.integers(0, len(pooled), size=n_control)]

        if mean_difference_statistic(case_b, control_b) >= observed:
            n_extreme += 1
        if progress is not None:
            progress(done, n_bootstrap)

    return BootstrapResult(
        observed_statistic=observed,
        p_value=n_extreme / n_bootstrap,
        n_bootstrap=n_bootstrap,
        resampling=resampling,
        mean_difference=mean_difference,
    )


class StatisticalAnalyzer:
    """Compares subsample motif counts between the case and control cohorts."""

    def __init__(self, config: MotifConfig):
        self.config = config

    def run_analysis(self,
                     case_counts: pd.DataFrame,
                     control_counts: pd.DataFrame,
                     case_group: Optional[str] = None,
                     control_group: Optional[str] = None) -> Dict:
        """
        Run the group summary and the bootstrap test.

        Returns:
            Dict with 'summary' (per-motif DataFrame) and 'bootstrap' (BootstrapResult)
        """
        case_group = case_group or self.config.case_group
        control_group = control_group or self.config.control_group

        summary = self.summarize_groups(
            {case_group: case_counts, control_group: control_counts},
            case_group, control_group
        )
        bootstrap = self.run_bootstrap(case_counts, control_counts)

        return {'summary': summary, 'bootstrap': bootstrap}

    def run_bootstrap(self, case_counts: pd.DataFrame,
                      control_counts: pd.DataFrame) -> BootstrapResult:
        result = bootstrap_motif_test(
            case_counts, control_counts,
            n_bootstrap=self.config.n_bootstrap,
            seed=self.config.bootstrap_seed,
            resampling=self.config.bootstrap_resampling,
            show_progress=self.config.show_progress,
        )
        if self.config.verbose:
            print(f"Bootstrap test ({result.n_bootstrap} replicates, {result.resampling}): "
                  f"statistic = {result.observed_statistic:.4g}, p = {result.p_value:.4g}")
        return result

    def summarize_groups(self,
                         counts_by_group: Dict[str, pd.DataFrame],
                         case_group: str,
                         control_group: str) -> pd.DataFrame:
        """
        Per-motif mean, median, standard deviation and standard error per group.

        Columns are named '<stat>-<group>'; 'mean_difference' is case - control
        and 'log2_foldchange' is log2((1 + case mean) / (1 + control mean)).
        """
        long = pd.concat(
            [counts[list(MOTIFS)].melt(var_name='motif', value_name='count').assign(group=group)
             for group, counts in counts_by_group.items()],
            ignore_index=True
        )

        stats = long.groupby(['motif', 'group'])['count'].agg(
            ['mean', 'median', 'std', 'sem']
        ).reset_index()
        stats.columns = ['motif', 'group', 'mean', 'median', 'std_dev', 'standard_error']

        stats_pivot = stats.pivot_table(
            index='motif',
            values=['mean', 'median', 'std_dev', 'standard_error'],
            columns='group',
            dropna=False
        )
        stats_pivot.columns = [f'{stat}-{group}' for stat, group in stats_pivot.columns]
        stats_pivot = stats_pivot.reindex(list(MOTIFS))

        case_mean = stats_pivot[f'mean-{case_group}']
        control_mean = stats_pivot[f'mean-{control_group}']
        stats_pivot['mean_difference'] = case_mean - control_mean
        stats_pivot['log2_foldchange'] = np.log2((1 + case_mean) / (1 + control_mean))

        return stats_pivot
