"""Configuration dataclasses for coexnet workflows."""

from .base_config import BaseConfig
from .network_config import NetworkConfig
from .motif_config import MotifConfig

__all__ = ['BaseConfig', 'NetworkConfig', 'MotifConfig']
