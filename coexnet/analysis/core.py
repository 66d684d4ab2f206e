"""
Core motif analysis engine for case/control co-expression networks.
"""

import dataclasses
import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

import numpy as np
import pandas as pd

from ..build.network import AdjacencyLike, BinaryGraph, NetworkBuilder
from ..config.motif_config import MotifConfig
from .estimation import MotifEstimate, estimate_motif_frequencies, normalized_estimate_table
from .motifs import MotifSampler
from .statistics import BootstrapResult, StatisticalAnalyzer


def _json_ready(value):
    """Replace NaN and infinite floats with None so the output is strict JSON."""
    if isinstance(value, dict):
        return {key: _json_ready(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_ready(item) for item in value]
    if isinstance(value, (float, np.floating)):
        return float(value) if np.isfinite(value) else None
    return value


@dataclass(frozen=True)
class CohortResult:
    """Binary graph, subsample counts and motif estimates of one cohort."""
    name: str
    graph: BinaryGraph
    sample_counts: pd.DataFrame
    estimates: Dict[str, MotifEstimate]


class MotifAnalysisEngine:
    """
    Main engine for comparing motif frequencies between two cohorts.

    Each cohort goes through the same three stages independently:
    1. Binarize the weighted adjacency matrix
    2. Count motifs in random induced subgraphs
    3. Scale the counts to normalized whole-network estimates
    The two cohorts are then compared with the bootstrap test.
    """

    def __init__(self, config: Optional[MotifConfig] = None):
        """Initialize analysis engine with configuration."""
        self.config = config or MotifConfig()

        self.network_builder = NetworkBuilder(self.config)
        self.sampler = MotifSampler(self.config)
        self.stats_analyzer = StatisticalAnalyzer(self.config)

    def analyze_cohort(self, adjacency: AdjacencyLike, name: str,
                       threshold: Optional[float] = None) -> CohortResult:
        """
        Binarize, sample and estimate one cohort.

        Args:
            adjacency: Weighted adjacency matrix of the cohort
            name: Cohort name
            threshold: Binarization threshold (default: config.threshold)

        Returns:
            CohortResult
        """
        if self.config.verbose:
            print(f"Analyzing cohort {name}")

        graph = self.network_builder.binarize(adjacency, threshold)
        counts = self.sampler.sample(graph, desc=f'Sampling {name}')
        estimates = estimate_motif_frequencies(counts, graph.n_vertices, self.config.sample_size)

        return CohortResult(name=name, graph=graph, sample_counts=counts, estimates=estimates)

    def compare_cohorts(self, case: CohortResult, control: CohortResult) -> Dict:
        """Group summary and bootstrap test of case vs control subsample counts."""
        return self.stats_analyzer.run_analysis(
            case.sample_counts, control.sample_counts, case.name, control.name
        )

    def run_full_analysis(self,
                          adjacencies: Dict[str, AdjacencyLike],
                          output_dir: Optional[str] = None) -> Dict:
        """
        Run the complete case/control motif comparison.

        Args:
            adjacencies: Weighted adjacency matrix per group; must contain the
                configured case_group and control_group
            output_dir: Directory for result files; nothing is written if None

        Returns:
            Dict with 'cohorts', 'normalized' (group x motif table), 'summary'
            (per-motif group statistics) and 'bootstrap' (BootstrapResult)
        """
        case_group, control_group = self.config.case_group, self.config.control_group
        missing = [g for g in (case_group, control_group) if g not in adjacencies]
        if missing:
            raise ValueError(f"No adjacency matrix for groups: {missing}")

        if self.config.verbose:
            print("=== Step 1: Motif sampling per cohort ===")
        cohorts = {
            group: self.analyze_cohort(adjacencies[group], group)
            for group in (case_group, control_group)
        }

        if self.config.verbose:
            print("\n=== Step 2: Normalized motif estimates ===")
        normalized = normalized_estimate_table(
            {group: cohort.estimates for group, cohort in cohorts.items()}
        )
        if self.config.verbose:
            print(normalized.to_string())

        if self.config.verbose:
            print("\n=== Step 3: Bootstrap comparison ===")
        comparison = self.compare_cohorts(cohorts[case_group], cohorts[control_group])

        results = {
            'cohorts': cohorts,
            'normalized': normalized,
            'summary': comparison['summary'],
            'bootstrap': comparison['bootstrap'],
        }

        if output_dir is not None:
            self.save_results(results, output_dir)

        return results

    def save_results(self, results: Dict, output_dir: str) -> None:
        """Write tables, edge lists, the JSON summary and the configuration."""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        results['normalized'].to_csv(output_dir / "normalized_motif_estimates.csv")
        results['summary'].to_csv(output_dir / "motif_statistics.csv")

        for group, cohort in results['cohorts'].items():
            cohort.sample_counts.to_csv(output_dir / f"motif_counts_{group}.csv")
            self.network_builder.save_edge_list(cohort.graph, str(output_dir / f"edges_{group}.csv"))

        self._generate_analysis_summary(results, output_dir)
        self._dump_config_to_json(output_dir)

        if self.config.verbose:
            print(f"Results saved to {output_dir}")

    def _generate_analysis_summary(self, results: Dict, output_dir: Path):
        """Generate summary report of analysis results."""
        bootstrap: BootstrapResult = results['bootstrap']
        summary = {
            'networks': {
                group: self.network_builder.get_network_statistics(cohort.graph)
                for group, cohort in results['cohorts'].items()
            },
            'estimates': {
                group: {motif: dataclasses.asdict(est) for motif, est in cohort.estimates.items()}
                for group, cohort in results['cohorts'].items()
            },
            'bootstrap': dataclasses.asdict(bootstrap),
        }

        summary_file = output_dir / "analysis_summary.json"
        with open(summary_file, 'w') as f:
            json.dump(_json_ready(summary), f, indent=2, default=str, allow_nan=False)

    def _dump_config_to_json(self, output_dir: Path):
        """Save configuration parameters next to the results."""
        config_data = {
            "workflow_info": {
                "timestamp": datetime.now().isoformat(),
            },
            "configuration": self.config.to_dict(),
        }

        with open(output_dir / "motif_config.json", 'w') as f:
            json.dump(_json_ready(config_data), f, indent=2, default=str, allow_nan=False)
