"""
Threshold scan workflow for choosing the binarization threshold.

The binary network depends strongly on the threshold. This scans a range of
candidate thresholds and reports, for each, the mean degree and the
scale-free topology fit so a threshold can be committed to before the motif
comparison.

Usage from the command line

python -m coexnet.build.workflows uc_adjacency.csv --output threshold_scan.csv
python -m coexnet.build.workflows --input-type expression --soft-power 8 uc_expression.csv

"""

import argparse
import sys
from typing import Optional, Sequence, Union

import pandas as pd

from ..config.network_config import NetworkConfig
from .dataloading import read_matrix
from .network import NetworkBuilder


def scan_thresholds(source: Union[str, pd.DataFrame],
                    config: Optional[NetworkConfig] = None,
                    thresholds: Optional[Sequence[float]] = None,
                    input_type: str = 'adjacency',
                    transpose: bool = False) -> pd.DataFrame:
    """
    Load one network and scan binarization thresholds.

    Args:
        source: Adjacency (genes x genes) or expression (samples x genes) data
        config: Network configuration (defaults if None)
        thresholds: Candidate thresholds (default: config.scan_thresholds)
        input_type: 'adjacency' or 'expression'
        transpose: Transpose expression input given as genes x samples

    Returns:
        pd.DataFrame: One row per threshold
    """
    config = config or NetworkConfig()
    builder = NetworkBuilder(config)

    if input_type == 'adjacency':
        adjacency = read_matrix(source)
    elif input_type == 'expression':
        adjacency = builder.build_adjacency(read_matrix(source, transpose=transpose))
    else:
        raise ValueError(f"input_type must be 'adjacency' or 'expression', got {input_type!r}")

    return builder.scan_thresholds(adjacency, thresholds)


def arg_parser(parser=None):
    if parser is None:
        parser = argparse.ArgumentParser(
            description='Scan binarization thresholds of a co-expression network.'
        )

    parser.add_argument('input', type=str, help='Adjacency or expression file')
    parser.add_argument('--input-type', choices=['adjacency', 'expression'], default='adjacency')
    parser.add_argument('--transpose', action='store_true',
                        help='Expression file is genes x samples')
    parser.add_argument('--config', type=str, default=None, help='YAML configuration file')
    parser.add_argument('--thresholds', type=float, nargs='+', default=None)
    parser.add_argument('--soft-power', type=float, default=None)
    parser.add_argument('--output', type=str, default='threshold_scan.csv')

    return parser


def main(argv=None):
    args = arg_parser().parse_args(argv)

    try:
        config = NetworkConfig.from_file(args.config).updated(soft_power=args.soft_power)
        scan = scan_thresholds(args.input, config, args.thresholds,
                               input_type=args.input_type, transpose=args.transpose)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    scan.to_csv(args.output, index=False)
    print(scan.to_string(index=False))
    print(f"Threshold scan saved to {args.output}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
