from dataclasses import dataclass
from .network_config import NetworkConfig


@dataclass
class MotifConfig(NetworkConfig):
    """Configuration parameters for motif sampling and the bootstrap test."""

    # Subsampling. Iteration i is seeded with seed_offset + i
    sample_size: int = 10
    n_samples: int = 1000
    seed_offset: int = 0
    n_jobs: int = 1

    # Bootstrap two-sample test
    n_bootstrap: int = 10000
    bootstrap_seed: int = 0
    bootstrap_resampling: str = 'within'  # 'within' or 'pooled'

    # Cohorts
    case_group: str = 'UC'
    control_group: str = 'HC'

    def __post_init__(self):
        super().__post_init__()
        if self.sample_size < 1:
            raise ValueError("sample_size must be at least 1")
        if self.n_samples < 1:
            raise ValueError("n_samples must be at least 1")
        if self.n_bootstrap < 1:
            raise ValueError("n_bootstrap must be at least 1")
        if self.n_jobs < 1:
            raise ValueError("n_jobs must be at least 1")
        if self.bootstrap_resampling not in ('within', 'pooled'):
            raise ValueError(f"bootstrap_resampling must be 'within' or 'pooled', got {self.bootstrap_resampling!r}")
        if self.case_group == self.control_group:
            raise ValueError("case_group and control_group must differ")
