"""
coexnet build module for co-expression network construction.

This module builds weighted gene co-expression networks, scans binarization
thresholds, and turns weighted networks into binary graphs for motif analysis.
"""

from .dataloading import read_matrix
from .network import (
    BinaryGraph, NetworkBuilder, binarize_adjacency, scale_free_fit,
    save_edge_list, load_edge_list
)

__all__ = [
    'BinaryGraph',
    'NetworkBuilder',
    'binarize_adjacency',
    'scale_free_fit',
    'save_edge_list',
    'load_edge_list',
    'read_matrix',
]
