"""
Motif counting on binary graphs and random induced-subgraph sampling.

Four undirected motifs are counted with closed forms on the adjacency matrix:
triangles (3-cliques), v-shapes (open 2-paths), 3-stars and squares (4-cycles).
The sampler draws many random induced subgraphs of a fixed size and counts the
motifs in each one; the estimation module scales these counts back up to the
whole network.
"""

import multiprocessing
import warnings
from dataclasses import dataclass, asdict
from functools import partial
from typing import Callable, Dict, Optional, Tuple, Union

import numpy as np
import pandas as pd
from tqdm import tqdm

from ..build.network import BinaryGraph
from ..config.motif_config import MotifConfig
from ..exceptions import DegenerateGraph, InvalidSampleSize, NonSquareMatrix

MOTIFS = ('triangle', 'v_shape', 'three_star', 'square')

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class MotifCounts:
    """Motif counts of a single graph."""
    triangle: int = 0
    v_shape: int = 0
    three_star: int = 0
    square: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


def _as_int_matrix(graph: Union[BinaryGraph, np.ndarray]) -> np.ndarray:
    adjacency = graph.adjacency if isinstance(graph, BinaryGraph) else np.asarray(graph)
    if adjacency.ndim != 2 or adjacency.shape[0] != adjacency.shape[1]:
        raise NonSquareMatrix(f"Adjacency matrix must be square, got shape {adjacency.shape}")
    return adjacency.astype(np.int64)


def triangles_per_vertex(graph: Union[BinaryGraph, np.ndarray]) -> np.ndarray:
    """Number of triangles through each vertex, (A^3)_vv / 2."""
    A = _as_int_matrix(graph)
    return ((A @ A) * A).sum(axis=1) // 2


def count_motifs(graph: Union[BinaryGraph, np.ndarray], strict: bool = False) -> MotifCounts:
    """
    Count triangles, v-shapes, 3-stars and 4-cycles in a binary graph.

    A graph with fewer than 3 vertices holds none of the motifs, so its
    counts are all 0.

    Args:
        graph: BinaryGraph or symmetric 0/1 matrix with zero diagonal
        strict: Raise instead of returning zero counts for fewer than 3 vertices

    Returns:
        MotifCounts with exact integer counts

    Raises:
        DegenerateGraph: If strict and the graph has fewer than 3 vertices
    """
    A = _as_int_matrix(graph)
    n = A.shape[0]
    if n < 3:
        if strict:
            raise DegenerateGraph(f"Cannot count motifs on {n} vertices")
        return MotifCounts()

    degrees = A.sum(axis=1)
    A2 = A @ A

    triangle = int(((A2 * A).sum(axis=1) // 2).sum()) // 3
    v_shape = int((degrees * (degrees - 1) // 2).sum()) - 3 * triangle
    three_star = int((degrees * (degrees - 1) * (degrees - 2) // 6).sum())

    square = 0
    if n >= 4:
        # closed 4-walks minus the ones that backtrack; every 4-cycle is walked 8 times
        closed_walks = int((A2 * A2).sum())
        square = (closed_walks - 2 * int((degrees ** 2).sum()) + int(degrees.sum())) // 8

    return MotifCounts(triangle=triangle, v_shape=v_shape,
                       three_star=three_star, square=square)


def sample_induced_motifs(adjacency: np.ndarray, sample_size: int,
                          seed: int) -> Tuple[MotifCounts, bool]:
    """
    Count motifs in one random induced subgraph.

    Vertices are drawn without replacement from a generator seeded with
    ``seed``. Returns the counts and whether the subgraph was degenerate
    (in which case the counts are all zero).
    """
    rng = np.random.default_rng(seed)
    idx = np.sort(rng.choice(adjacency.shape[0], size=sample_size, replace=False))
    return count_motifs(adjacency[np.ix_(idx, idx)]), idx.size < 3


# Adjacency matrix of the graph being sampled, set once per worker process
_worker_adjacency = None


def _init_worker(adjacency: np.ndarray) -> None:
    global _worker_adjacency
    _worker_adjacency = adjacency


def _sample_in_worker(sample_size: int, seed: int) -> Tuple[MotifCounts, bool]:
    return sample_induced_motifs(_worker_adjacency, sample_size, seed)


class MotifSampler:
    """Draws random induced subgraphs and counts motifs in each of them."""

    def __init__(self, config: MotifConfig):
        self.config = config

    def sample(self,
               graph: BinaryGraph,
               sample_size: Optional[int] = None,
               n_samples: Optional[int] = None,
               n_jobs: Optional[int] = None,
               progress: Optional[ProgressCallback] = None,
               desc: str = 'Sampling motifs') -> pd.DataFrame:
        """
        Count motifs in ``n_samples`` random induced subgraphs.

        Iteration i uses the seed ``config.seed_offset + i``, so results do not
        depend on ``n_jobs``.

        Args:
            graph: Binary graph to sample from
            sample_size: Vertices per subgraph (default: config.sample_size)
            n_samples: Number of subgraphs (default: config.n_samples)
            n_jobs: Worker processes (default: config.n_jobs)
            progress: Optional callback progress(done, total); replaces the tqdm bar
            desc: Label of the progress bar

        Returns:
            pd.DataFrame: One row per subsample (indexed by seed), one column per motif

        Raises:
            InvalidSampleSize: If sample_size is not in [1, graph.n_vertices]
        """
        sample_size = self.config.sample_size if sample_size is None else sample_size
        n_samples = self.config.n_samples if n_samples is None else n_samples
        n_jobs = self.config.n_jobs if n_jobs is None else n_jobs

        if sample_size < 1 or sample_size > graph.n_vertices:
            raise InvalidSampleSize(
                f"Cannot draw {sample_size} vertices from a graph with {graph.n_vertices} vertices"
            )
        if n_samples < 1:
            raise ValueError("n_samples must be at least 1")

        seeds = range(self.config.seed_offset, self.config.seed_offset + n_samples)
        adjacency = np.asarray(graph.adjacency)

        if n_jobs > 1:
            chunksize = max(1, n_samples // (n_jobs * 4))
            processes = min(n_jobs, multiprocessing.cpu_count())
            # the matrix goes to each worker once instead of with every chunk
            with multiprocessing.Pool(processes, initializer=_init_worker,
                                      initargs=(adjacency,)) as pool:
                worker = partial(_sample_in_worker, sample_size)
                rows = self._collect(pool.imap(worker, seeds, chunksize=chunksize),
                                     n_samples, progress, desc)
        else:
            worker = partial(sample_induced_motifs, adjacency, sample_size)
            rows = self._collect(map(worker, seeds), n_samples, progress, desc)

        counts = pd.DataFrame([c.as_dict() for c, _ in rows],
                              index=pd.Index(list(seeds), name='sample'),
                              columns=list(MOTIFS), dtype=np.int64)

        n_degenerate = sum(degenerate for _, degenerate in rows)
        if n_degenerate:
            warnings.warn(
                f"{n_degenerate} of {n_samples} subsamples had fewer than 3 vertices; "
                "their motif counts were set to 0",
                RuntimeWarning,
            )

        return counts

    def _collect(self, results, total: int, progress: Optional[ProgressCallback], desc: str):
        if progress is None and self.config.show_progress:
            results = tqdm(results, total=total, desc=desc, unit='sample')

        rows = []
        for done, row in enumerate(results, start=1):
            rows.append(row)
            if progress is not None:
                progress(done, total)
        return rows
