from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Optional, Dict, Any
import yaml


@dataclass
class BaseConfig:
    """Base configuration with common parameters."""
    # Reporting
    verbose: bool = True
    show_progress: bool = True

    # Where workflows write their results
    output_dir: str = 'results'

    @classmethod
    def from_file(cls, file_path: Optional[str]):
        """
        Creates a config instance by loading parameters from a YAML file.
        Any parameters in the YAML file will override the class defaults.
        """
        # If no file is provided, return a default config instance
        if not file_path:
            return cls()

        if not Path(file_path).exists():
            raise FileNotFoundError(f"Config file not found: {file_path}")

        with open(file_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}

        # Keys that are not fields of this dataclass are ignored
        valid_fields = {f.name for f in fields(cls)}
        filtered_data = {k: v for k, v in config_data.items() if k in valid_fields}

        return cls(**filtered_data)

    def updated(self, **overrides):
        """Return a copy with the non-None overrides applied."""
        values = self.to_dict()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return type(self)(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
