from dataclasses import dataclass, field
from typing import List
from .base_config import BaseConfig


def _default_scan_thresholds() -> List[float]:
    return [0.05, 0.1, 0.15, 0.2, 0.25, 0.3, 0.35, 0.4, 0.45, 0.5]


@dataclass
class NetworkConfig(BaseConfig):
    """Configuration parameters for co-expression network construction."""

    # Binarization. Edges are kept where adjacency > threshold
    threshold: float = 0.1

    # Soft thresholding of the correlation matrix
    soft_power: float = 6
    network_type: str = 'unsigned'  # 'unsigned' or 'signed'
    correlation_method: str = 'pearson'  # 'pearson' or 'spearman'

    # Candidate thresholds for the mean degree / scale-free fit scan
    scan_thresholds: List[float] = field(default_factory=_default_scan_thresholds)

    def __post_init__(self):
        if self.network_type not in ('unsigned', 'signed'):
            raise ValueError(f"network_type must be 'unsigned' or 'signed', got {self.network_type!r}")
        if self.correlation_method not in ('pearson', 'spearman'):
            raise ValueError(f"correlation_method must be 'pearson' or 'spearman', got {self.correlation_method!r}")
        if self.soft_power <= 0:
            raise ValueError("soft_power must be positive")
        self.scan_thresholds = [float(t) for t in self.scan_thresholds]
