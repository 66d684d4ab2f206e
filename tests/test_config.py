from pathlib import Path

import pytest
import yaml

from coexnet.config import BaseConfig, MotifConfig, NetworkConfig

REPO_CONFIG = Path(__file__).resolve().parent.parent / 'config' / 'motif_params.yaml'


def test_defaults():
    config = MotifConfig()

    assert config.sample_size == 10
    assert config.n_samples == 1000
    assert config.n_bootstrap == 10000
    assert config.seed_offset == 0
    assert (config.case_group, config.control_group) == ('UC', 'HC')


def test_from_file_overrides_defaults_and_ignores_unknown_keys(tmp_path):
    path = tmp_path / 'params.yaml'
    path.write_text(yaml.safe_dump({'threshold': 0.3, 'n_samples': 50, 'not_a_field': 1}))

    config = MotifConfig.from_file(str(path))

    assert config.threshold == 0.3
    assert config.n_samples == 50
    assert config.sample_size == 10


def test_from_file_without_path_returns_defaults():
    assert NetworkConfig.from_file(None) == NetworkConfig()


def test_from_file_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        BaseConfig.from_file(str(tmp_path / 'missing.yaml'))


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / 'empty.yaml'
    path.write_text('')

    assert MotifConfig.from_file(str(path)) == MotifConfig()


def test_repository_config_loads():
    config = MotifConfig.from_file(str(REPO_CONFIG))

    assert config.bootstrap_resampling == 'within'
    assert config.scan_thresholds[0] == 0.05


def test_updated_skips_none_overrides():
    config = MotifConfig(threshold=0.2)

    updated = config.updated(threshold=None, n_jobs=4)

    assert updated.threshold == 0.2
    assert updated.n_jobs == 4
    assert config.n_jobs == 1


@pytest.mark.parametrize('params', [
    {'sample_size': 0},
    {'n_samples': 0},
    {'n_bootstrap': 0},
    {'n_jobs': 0},
    {'bootstrap_resampling': 'permutation'},
    {'case_group': 'HC'},
    {'network_type': 'hybrid'},
    {'correlation_method': 'kendall'},
    {'soft_power': 0},
])
def test_invalid_values_are_rejected(params):
    with pytest.raises(ValueError):
        MotifConfig(**params)
