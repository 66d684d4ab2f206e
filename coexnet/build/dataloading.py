"""
Loading of labelled expression and adjacency matrices.
"""

from pathlib import Path
from typing import Union

import pandas as pd


def read_matrix(source: Union[str, pd.DataFrame], transpose: bool = False) -> pd.DataFrame:
    """
    Read a labelled matrix from a DataFrame, CSV, TSV or parquet file.

    The first CSV/TSV column is used as the row index.
    """
    if isinstance(source, pd.DataFrame):
        data = source
    elif isinstance(source, (str, Path)):
        source = str(source)
        if not Path(source).exists():
            raise FileNotFoundError(f"Input file not found: {source}")
        if source.endswith('.parquet'):
            data = pd.read_parquet(source)
        elif source.endswith('.csv'):
            data = pd.read_csv(source, index_col=0)
        elif source.endswith(('.tsv', '.txt')):
            data = pd.read_csv(source, sep='\t', index_col=0)
        else:
            raise ValueError(f"Unsupported file format: {source}")
    else:
        raise ValueError("Source must be DataFrame or file path")

    return data.T if transpose else data
