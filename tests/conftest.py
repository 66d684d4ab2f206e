import numpy as np
import pandas as pd
import pytest

from coexnet.config import MotifConfig


def random_adjacency(n_genes, seed=0, prefix='G'):
    """Symmetric weighted adjacency in [0, 1] with unit diagonal, labelled by gene."""
    rng = np.random.default_rng(seed)
    values = rng.random((n_genes, n_genes))
    values = (values + values.T) / 2
    np.fill_diagonal(values, 1.0)
    genes = [f'{prefix}{i}' for i in range(n_genes)]
    return pd.DataFrame(values, index=genes, columns=genes)


def random_binary_matrix(n, p, seed=0):
    rng = np.random.default_rng(seed)
    upper = np.triu(rng.random((n, n)) < p, k=1)
    return (upper | upper.T).astype(np.uint8)


def edges_to_matrix(n, edges):
    matrix = np.zeros((n, n), dtype=np.uint8)
    for i, j in edges:
        matrix[i, j] = matrix[j, i] = 1
    return matrix


@pytest.fixture
def quiet_config():
    return MotifConfig(verbose=False, show_progress=False,
                       sample_size=6, n_samples=50, n_bootstrap=200)


@pytest.fixture
def triangle_plus_edge():
    # vertices 1..6 of the worked example mapped to 0..5
    return edges_to_matrix(6, [(0, 1), (1, 2), (0, 2), (3, 4)])
