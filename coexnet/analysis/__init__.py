"""
coexnet analysis module for motif-based network comparison.

This module provides:
- Motif counting (triangles, v-shapes, 3-stars, squares) on binary graphs
- Random induced-subgraph sampling of motif counts
- Log-space U-statistic estimates of whole-network motif frequencies
- A bootstrap two-sample test between cohorts
"""

from .motifs import MOTIFS, MotifCounts, MotifSampler, count_motifs, triangles_per_vertex
from .estimation import (
    MOTIF_ARITY, MotifEstimate, log_comb, log_max_motif_count,
    estimate_motif_total, estimate_motif_frequencies, normalized_estimate_table
)
from .statistics import BootstrapResult, StatisticalAnalyzer, bootstrap_motif_test
from .core import CohortResult, MotifAnalysisEngine

__all__ = [
    'MOTIFS',
    'MOTIF_ARITY',
    'MotifCounts',
    'MotifSampler',
    'count_motifs',
    'triangles_per_vertex',
    'MotifEstimate',
    'log_comb',
    'log_max_motif_count',
    'estimate_motif_total',
    'estimate_motif_frequencies',
    'normalized_estimate_table',
    'BootstrapResult',
    'StatisticalAnalyzer',
    'bootstrap_motif_test',
    'CohortResult',
    'MotifAnalysisEngine',
]
