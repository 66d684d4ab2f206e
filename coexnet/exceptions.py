"""
Error types raised by coexnet.

Structural problems with a full adjacency matrix or with the sampling request
are fatal. ``DegenerateGraph`` is raised for a single graph that is too small
to hold any motif; the motif sampler absorbs it per subsample.
"""


class CoexnetError(Exception):
    """Base class for all coexnet errors."""


class NonSquareMatrix(CoexnetError, ValueError):
    """Adjacency matrix is not square (or its row and column labels differ)."""


class AsymmetricInput(CoexnetError, ValueError):
    """Adjacency matrix is not symmetric."""


class InvalidSampleSize(CoexnetError, ValueError):
    """Requested subsample size cannot be drawn from the graph."""


class DegenerateGraph(CoexnetError, ValueError):
    """Graph has fewer than 3 vertices, so no motif can be counted."""
