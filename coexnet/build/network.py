"""
Co-expression network construction and binarization.

This module turns expression data into a weighted gene-gene adjacency matrix
(correlation followed by soft thresholding), scans candidate binarization
thresholds, and thresholds the weighted matrix into an unweighted undirected
graph that the motif sampler works on.

You can use it like

from .network import NetworkBuilder

builder = NetworkBuilder(config)
adjacency = builder.build_adjacency(expression_df)
scan = builder.scan_thresholds(adjacency)
graph = builder.binarize(adjacency, threshold=0.2)
builder.save_edge_list(graph, "edges_UC.csv")

"""

from dataclasses import dataclass
from typing import Hashable, List, Optional, Sequence, Tuple, Union

import networkx as nx
import numpy as np
import pandas as pd
from scipy.stats import linregress

from ..config.network_config import NetworkConfig
from ..exceptions import AsymmetricInput, NonSquareMatrix

AdjacencyLike = Union[pd.DataFrame, np.ndarray]

# Tolerance used when checking that a weighted matrix is symmetric
SYMMETRY_ATOL = 1e-8


@dataclass(frozen=True)
class BinaryGraph:
    """
    Unweighted undirected graph over a fixed, labelled vertex set.

    The adjacency matrix is stored as a read-only symmetric 0/1 array with an
    all-zero diagonal. Vertex ``i`` carries the label ``genes[i]``.
    """

    adjacency: np.ndarray
    genes: Tuple[Hashable, ...]

    def __post_init__(self):
        values = np.asarray(self.adjacency)
        if not np.isin(values, (0, 1)).all():
            raise ValueError("Binary adjacency entries must be 0 or 1")
        matrix = np.array(values, dtype=np.uint8, copy=True)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise NonSquareMatrix(f"Binary adjacency must be square, got shape {matrix.shape}")
        if len(self.genes) != matrix.shape[0]:
            raise ValueError(f"Expected {matrix.shape[0]} gene labels, got {len(self.genes)}")
        if np.any(np.diag(matrix)):
            raise ValueError("Binary graph cannot contain self-loops")
        if not np.array_equal(matrix, matrix.T):
            raise AsymmetricInput("Binary adjacency must be symmetric")
        matrix.setflags(write=False)
        object.__setattr__(self, 'adjacency', matrix)
        object.__setattr__(self, 'genes', tuple(self.genes))

    @classmethod
    def empty(cls, genes: Sequence[Hashable]) -> 'BinaryGraph':
        n = len(genes)
        return cls(np.zeros((n, n), dtype=np.uint8), tuple(genes))

    @property
    def n_vertices(self) -> int:
        return self.adjacency.shape[0]

    @property
    def n_edges(self) -> int:
        return int(self.adjacency.sum()) // 2

    @property
    def degrees(self) -> np.ndarray:
        return self.adjacency.sum(axis=1, dtype=np.int64)

    def edges(self) -> List[Tuple[Hashable, Hashable]]:
        """Undirected edges as (source, target) gene pairs, source first in vertex order."""
        rows, cols = np.nonzero(np.triu(self.adjacency, k=1))
        return [(self.genes[i], self.genes[j]) for i, j in zip(rows, cols)]

    def subgraph(self, indices: Sequence[int]) -> 'BinaryGraph':
        """Induced subgraph on the given vertex positions."""
        idx = np.asarray(indices, dtype=np.intp)
        return BinaryGraph(self.adjacency[np.ix_(idx, idx)], tuple(self.genes[i] for i in idx))

    def to_networkx(self) -> nx.Graph:
        G = nx.Graph()
        G.add_nodes_from(self.genes)
        G.add_edges_from(self.edges())
        return G

    def to_edge_list(self) -> pd.DataFrame:
        return pd.DataFrame(self.edges(), columns=['source', 'target'])


def _as_matrix(adjacency: AdjacencyLike) -> Tuple[np.ndarray, Tuple[Hashable, ...]]:
    """Split an adjacency DataFrame/array into a float matrix and its gene labels."""
    if isinstance(adjacency, pd.DataFrame):
        if adjacency.shape[0] != adjacency.shape[1]:
            raise NonSquareMatrix(f"Adjacency matrix must be square, got shape {adjacency.shape}")
        if not adjacency.index.equals(adjacency.columns):
            raise NonSquareMatrix("Adjacency row and column labels must match")
        values = adjacency.to_numpy(dtype=float)
        genes = tuple(adjacency.index)
    else:
        values = np.asarray(adjacency, dtype=float)
        if values.ndim != 2 or values.shape[0] != values.shape[1]:
            raise NonSquareMatrix(f"Adjacency matrix must be square, got shape {values.shape}")
        genes = tuple(range(values.shape[0]))
    return values, genes


def binarize_adjacency(adjacency: AdjacencyLike, threshold: float) -> BinaryGraph:
    """
    Threshold a weighted adjacency matrix into a binary undirected graph.

    An edge (i, j), i != j, is kept iff adjacency[i, j] > threshold. The
    diagonal is ignored and missing values never produce an edge.

    Args:
        adjacency: Square symmetric weighted matrix (DataFrame indexed by gene, or array)
        threshold: Strict lower bound on the weight of a kept edge

    Returns:
        BinaryGraph over the same genes

    Raises:
        NonSquareMatrix: If the matrix is not square
        AsymmetricInput: If the matrix is not symmetric off the diagonal
    """
    values, genes = _as_matrix(adjacency)

    off_diagonal = values.copy()
    np.fill_diagonal(off_diagonal, 0.0)
    if not np.allclose(off_diagonal, off_diagonal.T, rtol=0.0, atol=SYMMETRY_ATOL, equal_nan=True):
        raise AsymmetricInput("Adjacency matrix must be symmetric")

    with np.errstate(invalid='ignore'):
        mask = off_diagonal > threshold
    np.fill_diagonal(mask, False)

    return BinaryGraph(mask.astype(np.uint8), genes)


def scale_free_fit(degrees: np.ndarray, n_breaks: int = 10) -> Tuple[float, float]:
    """
    Scale-free topology fit of a degree sequence.

    Degrees are binned into ``n_breaks`` equal-width bins; log10 of the bin
    frequency is regressed on log10 of the mean degree in the bin. Returns the
    signed R^2 (-sign(slope) * r^2, positive for a decaying power law) and the
    slope. Fewer than 3 occupied bins gives (nan, nan).
    """
    degrees = np.asarray(degrees, dtype=float)
    if degrees.size == 0 or np.all(degrees == degrees[0]):
        return float('nan'), float('nan')

    counts, edges = np.histogram(degrees, bins=n_breaks)
    bin_ids = np.clip(np.digitize(degrees, edges[1:-1]), 0, n_breaks - 1)
    occupied = counts > 0
    if occupied.sum() < 3:
        return float('nan'), float('nan')

    mean_k = np.array([degrees[bin_ids == b].mean() for b in np.flatnonzero(occupied)])
    p_k = counts[occupied] / degrees.size

    fit = linregress(np.log10(mean_k + 1e-9), np.log10(p_k + 1e-9))
    r2 = -np.sign(fit.slope) * fit.rvalue ** 2
    return float(r2), float(fit.slope)


def save_edge_list(graph: BinaryGraph, filepath: str) -> None:
    """Write one row per undirected edge with header ``source,target``."""
    graph.to_edge_list().to_csv(filepath, index=False)


def load_edge_list(filepath: str, genes: Optional[Sequence[Hashable]] = None) -> BinaryGraph:
    """
    Read a ``source,target`` edge list back into a BinaryGraph.

    Args:
        filepath: CSV written by save_edge_list
        genes: Full vertex set, including isolated genes. Defaults to the
            genes seen in the edge list, in order of first appearance.
    """
    edges = pd.read_csv(filepath)
    if list(edges.columns[:2]) != ['source', 'target']:
        raise ValueError(f"Edge list must have 'source' and 'target' columns: {filepath}")

    if genes is None:
        genes = list(pd.unique(edges[['source', 'target']].to_numpy().ravel()))
    position = {gene: i for i, gene in enumerate(genes)}

    missing = set(edges['source']).union(edges['target']) - set(position)
    if missing:
        raise ValueError(f"Edge list references {len(missing)} genes outside the vertex set")

    matrix = np.zeros((len(genes), len(genes)), dtype=np.uint8)
    src = edges['source'].map(position).to_numpy(dtype=np.intp)
    dst = edges['target'].map(position).to_numpy(dtype=np.intp)
    matrix[src, dst] = 1
    matrix[dst, src] = 1
    np.fill_diagonal(matrix, 0)
    return BinaryGraph(matrix, tuple(genes))


class NetworkBuilder:
    """Builds weighted co-expression networks and binarizes them."""

    def __init__(self, config: NetworkConfig):
        self.config = config

    def build_adjacency(self, expression: pd.DataFrame) -> pd.DataFrame:
        """
        Build a weighted adjacency matrix from expression data.

        Gene-gene correlations are soft thresholded: unsigned networks use
        |r|^power, signed networks ((1 + r) / 2)^power.

        Args:
            expression: Samples x genes expression matrix

        Returns:
            pd.DataFrame: Symmetric genes x genes adjacency with unit diagonal
        """
        data = expression.apply(pd.to_numeric, errors='coerce')

        variances = data.var(axis=0)
        keep = variances.notna() & (variances > 0)
        n_dropped = int((~keep).sum())
        if n_dropped and self.config.verbose:
            print(f"Dropping {n_dropped} genes with zero or undefined variance")
        data = data.loc[:, keep]

        if data.shape[1] == 0:
            raise ValueError("No genes with non-zero variance left to correlate")

        corr = data.corr(method=self.config.correlation_method).to_numpy()
        corr = (corr + corr.T) / 2
        if self.config.network_type == 'unsigned':
            values = np.abs(corr) ** self.config.soft_power
        else:
            values = ((1 + corr) / 2) ** self.config.soft_power
        np.fill_diagonal(values, 1.0)

        if self.config.verbose:
            print(f"Built {self.config.network_type} adjacency for {data.shape[1]} genes "
                  f"({data.shape[0]} samples, power {self.config.soft_power})")

        return pd.DataFrame(values, index=data.columns, columns=data.columns)

    def binarize(self, adjacency: AdjacencyLike, threshold: Optional[float] = None) -> BinaryGraph:
        """Binarize with the given threshold, or the configured one."""
        threshold = self.config.threshold if threshold is None else threshold
        graph = binarize_adjacency(adjacency, threshold)
        if self.config.verbose:
            print(f"Threshold {threshold}: {graph.n_vertices} genes, {graph.n_edges} edges")
        return graph

    def scan_thresholds(self, adjacency: AdjacencyLike,
                        thresholds: Optional[Sequence[float]] = None) -> pd.DataFrame:
        """
        Summarize the binary network obtained at each candidate threshold.

        Args:
            adjacency: Weighted adjacency matrix
            thresholds: Candidate thresholds (default: config.scan_thresholds)

        Returns:
            pd.DataFrame: One row per threshold with edge count, density,
            mean degree and scale-free fit (R^2 and slope)
        """
        thresholds = self.config.scan_thresholds if thresholds is None else thresholds

        rows = []
        for threshold in thresholds:
            graph = binarize_adjacency(adjacency, threshold)
            degrees = graph.degrees
            n = graph.n_vertices
            r2, slope = scale_free_fit(degrees)
            rows.append({
                'threshold': float(threshold),
                'n_edges': graph.n_edges,
                'density': graph.n_edges / (n * (n - 1) / 2) if n > 1 else 0.0,
                'mean_degree': float(degrees.mean()) if n else 0.0,
                'max_degree': int(degrees.max()) if n else 0,
                'scale_free_r2': r2,
                'slope': slope,
            })

        return pd.DataFrame(rows)

    def save_edge_list(self, graph: BinaryGraph, filepath: str) -> None:
        save_edge_list(graph, filepath)
        if self.config.verbose:
            print(f"Edge list saved to: {filepath}")

    def get_network_statistics(self, graph: BinaryGraph) -> dict:
        """Get basic network statistics."""
        network = graph.to_networkx()
        stats = {
            'num_nodes': network.number_of_nodes(),
            'num_edges': network.number_of_edges(),
            'density': nx.density(network) if network.number_of_nodes() > 1 else 0.0,
            'mean_degree': float(graph.degrees.mean()) if graph.n_vertices else 0.0,
            'num_connected_components': nx.number_connected_components(network),
        }

        if stats['num_nodes'] > 0:
            largest_cc = max(nx.connected_components(network), key=len)
            stats['largest_component_size'] = len(largest_cc)
            stats['largest_component_fraction'] = len(largest_cc) / stats['num_nodes']

        return stats
