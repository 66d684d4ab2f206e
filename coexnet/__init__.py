"""
coexnet: motif comparison of gene co-expression networks
"""

__version__ = "0.1.0"

from . import config
from . import build
from . import analysis

from .config import BaseConfig, NetworkConfig, MotifConfig
from .exceptions import (
    CoexnetError, NonSquareMatrix, AsymmetricInput, InvalidSampleSize, DegenerateGraph
)
from .build import BinaryGraph, NetworkBuilder, binarize_adjacency
from .analysis import MotifAnalysisEngine, MotifSampler, count_motifs, bootstrap_motif_test

__all__ = [
    'BaseConfig',
    'NetworkConfig',
    'MotifConfig',
    'CoexnetError',
    'NonSquareMatrix',
    'AsymmetricInput',
    'InvalidSampleSize',
    'DegenerateGraph',
    'BinaryGraph',
    'NetworkBuilder',
    'binarize_adjacency',
    'MotifAnalysisEngine',
    'MotifSampler',
    'count_motifs',
    'bootstrap_motif_test',
    "config", "build", "analysis",
]
