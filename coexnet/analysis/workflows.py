"""
End-to-end motif comparison workflow and CLI interface.

Usage from the command line

# Compare two weighted adjacency matrices
python -m coexnet.analysis.workflows --case uc_adjacency.csv --control hc_adjacency.csv

# Start from expression matrices (samples x genes) and a YAML config
python -m coexnet.analysis.workflows \
    --input-type expression \
    --config motif_params.yaml \
    --threshold 0.2 \
    --n-jobs 8 \
    --output results/ \
    --case uc_expression.csv --control hc_expression.csv

"""

import argparse
import sys
from typing import Dict, Optional, Union

import pandas as pd

from ..build.dataloading import read_matrix
from ..config.motif_config import MotifConfig
from .core import MotifAnalysisEngine


class MotifWorkflow:
    """High-level workflow for the case/control motif comparison."""

    def __init__(self, config: Optional[MotifConfig] = None):
        """Initialize workflow with configuration."""
        self.config = config or MotifConfig()
        self.engine = MotifAnalysisEngine(self.config)

    def load_adjacencies(self,
                         inputs: Dict[str, Union[str, pd.DataFrame]],
                         input_type: str = 'adjacency',
                         transpose: bool = False) -> Dict[str, pd.DataFrame]:
        """
        Load one weighted adjacency matrix per group.

        Args:
            inputs: File path or DataFrame per group
            input_type: 'adjacency' (genes x genes) or 'expression' (samples x genes)
            transpose: Transpose expression input given as genes x samples

        Returns:
            Dict of weighted adjacency matrices per group
        """
        if input_type not in ('adjacency', 'expression'):
            raise ValueError(f"input_type must be 'adjacency' or 'expression', got {input_type!r}")

        adjacencies = {}
        for group, source in inputs.items():
            if input_type == 'adjacency':
                adjacencies[group] = read_matrix(source)
            else:
                expression = read_matrix(source, transpose=transpose)
                adjacencies[group] = self.engine.network_builder.build_adjacency(expression)
            if self.config.verbose:
                print(f"Loaded {group}: {adjacencies[group].shape[0]} genes")

        return adjacencies

    def run(self,
            case_input: Union[str, pd.DataFrame],
            control_input: Union[str, pd.DataFrame],
            output_dir: Optional[str] = None,
            input_type: str = 'adjacency',
            transpose: bool = False) -> Dict:
        """
        Run the complete comparison and write the results.

        Returns:
            Dict with the engine results
        """
        if self.config.verbose:
            print("=== Motif Comparison Workflow ===")

        adjacencies = self.load_adjacencies(
            {self.config.case_group: case_input, self.config.control_group: control_input},
            input_type=input_type,
            transpose=transpose,
        )

        output_dir = output_dir or self.config.output_dir
        results = self.engine.run_full_analysis(adjacencies, output_dir)

        if self.config.verbose:
            print("\nMotif comparison workflow complete!")
        return results


def arg_parser(parser=None):
    if parser is None:
        parser = argparse.ArgumentParser(
            description='Compare co-expression network motif frequencies between two cohorts.'
        )

    parser.add_argument('--case', type=str, required=True, help='Case cohort input file')
    parser.add_argument('--control', type=str, required=True, help='Control cohort input file')
    parser.add_argument('--input-type', choices=['adjacency', 'expression'], default='adjacency')
    parser.add_argument('--transpose', action='store_true',
                        help='Expression files are genes x samples')
    parser.add_argument('--config', type=str, default=None, help='YAML configuration file')
    parser.add_argument('--output', type=str, default=None, help='Output directory')

    # overrides of the configuration file
    params = parser.add_argument_group('analysis parameters')
    params.add_argument('--threshold', type=float, default=None)
    params.add_argument('--soft-power', type=float, default=None)
    params.add_argument('--sample-size', type=int, default=None)
    params.add_argument('--n-samples', type=int, default=None)
    params.add_argument('--n-bootstrap', type=int, default=None)
    params.add_argument('--bootstrap-seed', type=int, default=None)
    params.add_argument('--resampling', choices=['within', 'pooled'], default=None)
    params.add_argument('--n-jobs', type=int, default=None)
    params.add_argument('--case-name', type=str, default=None)
    params.add_argument('--control-name', type=str, default=None)
    params.add_argument('--quiet', action='store_true', help='No progress output')

    return parser


def config_from_args(args) -> MotifConfig:
    config = MotifConfig.from_file(args.config)
    overrides = dict(
        threshold=args.threshold,
        soft_power=args.soft_power,
        sample_size=args.sample_size,
        n_samples=args.n_samples,
        n_bootstrap=args.n_bootstrap,
        bootstrap_seed=args.bootstrap_seed,
        bootstrap_resampling=args.resampling,
        n_jobs=args.n_jobs,
        case_group=args.case_name,
        control_group=args.control_name,
        output_dir=args.output,
    )
    if args.quiet:
        overrides.update(verbose=False, show_progress=False)
    return config.updated(**overrides)


def main(argv=None):
    args = arg_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        workflow = MotifWorkflow(config)
        results = workflow.run(args.case, args.control,
                               input_type=args.input_type, transpose=args.transpose)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    bootstrap = results['bootstrap']
    print(f"p-value: {bootstrap.p_value:.4g} ({bootstrap.n_bootstrap} bootstrap replicates)")
    return 0


if __name__ == '__main__':
    sys.exit(main())
