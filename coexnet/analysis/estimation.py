"""
Whole-network motif frequency estimates from subsample counts.

The mean count over random induced subgraphs of size s is scaled up to a
network of N vertices by C(N, k) / C(s, k), where k is the number of vertices
of the motif, and then divided by the largest count that motif can reach on
N vertices. Both factors are evaluated in log space because C(N, k) overflows
a double for the network sizes of interest.
"""

from dataclasses import dataclass
from typing import Dict, Mapping

import numpy as np
import pandas as pd
from scipy.special import gammaln

from .motifs import MOTIFS

# Number of vertices spanned by each motif
MOTIF_ARITY = {
    'triangle': 3,
    'v_shape': 3,
    'three_star': 4,
    'square': 4,
}


@dataclass(frozen=True)
class MotifEstimate:
    """Estimated whole-network count of one motif."""
    motif: str
    mean_count: float
    log_scaling: float
    estimated_total: float
    log_max_count: float
    normalized: float


def log_comb(n: float, k: float) -> float:
    """log C(n, k) via log-gamma; -inf when k < 0 or k > n."""
    if k < 0 or k > n:
        return float('-inf')
    return float(gammaln(n + 1) - gammaln(k + 1) - gammaln(n - k + 1))


def log_max_motif_count(motif: str, n_vertices: int) -> float:
    """
    Log of the normalizing maximum count of a motif on N vertices.

    triangle: C(N,3); v_shape: N*C(N-1,2); three_star: N*C(N-1,3);
    square: 3*C(N,4).
    """
    N = n_vertices
    if N < 1:
        return float('-inf')
    if motif == 'triangle':
        return log_comb(N, 3)
    if motif == 'v_shape':
        return float(np.log(N)) + log_comb(N - 1, 2)
    if motif == 'three_star':
        return float(np.log(N)) + log_comb(N - 1, 3)
    if motif == 'square':
        return float(np.log(3)) + log_comb(N, 4)
    raise ValueError(f"Unknown motif: {motif}")


def estimate_motif_total(counts, motif: str, n_vertices: int, sample_size: int) -> MotifEstimate:
    """
    Estimate the total count of a motif in the full network.

    Args:
        counts: Per-subsample counts of the motif
        motif: Motif name
        n_vertices: Vertices of the full network (N)
        sample_size: Vertices per subsample (s)

    Returns:
        MotifEstimate; the estimate is exactly 0 when every count is 0, when
        s is smaller than the motif, or when N cannot hold the motif at all.
    """
    if motif not in MOTIF_ARITY:
        raise ValueError(f"Unknown motif: {motif}")
    if sample_size > n_vertices:
        raise ValueError(f"sample_size ({sample_size}) exceeds n_vertices ({n_vertices})")

    values = np.asarray(counts, dtype=float)
    if values.size == 0:
        raise ValueError("No subsample counts to estimate from")

    k = MOTIF_ARITY[motif]
    mean_count = float(values.mean())
    log_scaling = log_comb(n_vertices, k) - log_comb(sample_size, k) if sample_size >= k else float('nan')
    log_max = log_max_motif_count(motif, n_vertices)

    if mean_count <= 0 or sample_size < k or np.isneginf(log_max):
        estimated_total, normalized = 0.0, 0.0
    else:
        log_total = np.log(mean_count) + log_scaling
        estimated_total = float(np.exp(log_total))
        normalized = float(np.exp(log_total - log_max))

    return MotifEstimate(
        motif=motif,
        mean_count=mean_count,
        log_scaling=log_scaling,
        estimated_total=estimated_total,
        log_max_count=log_max,
        normalized=normalized,
    )


def estimate_motif_frequencies(sample_counts: pd.DataFrame, n_vertices: int,
                               sample_size: int) -> Dict[str, MotifEstimate]:
    """Estimate every motif from a subsample count table (one column per motif)."""
    missing = [m for m in MOTIFS if m not in sample_counts.columns]
    if missing:
        raise ValueError(f"Sample counts are missing motif columns: {missing}")

    return {
        motif: estimate_motif_total(sample_counts[motif].to_numpy(), motif, n_vertices, sample_size)
        for motif in MOTIFS
    }


def normalized_estimate_table(estimates_by_group: Mapping[str, Mapping[str, MotifEstimate]],
                              value: str = 'normalized') -> pd.DataFrame:
    """
    Arrange per-group estimates into a group x motif table.

    Args:
        estimates_by_group: {group: {motif: MotifEstimate}}
        value: MotifEstimate field to tabulate

    Returns:
        pd.DataFrame indexed by group with one column per motif
    """
    table = pd.DataFrame(
        {group: {motif: getattr(est, value) for motif, est in estimates.items()}
         for group, estimates in estimates_by_group.items()}
    ).T
    table = table.reindex(columns=list(MOTIFS))
    table.index.name = 'group'
    return table
