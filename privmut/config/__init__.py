"""
Configuration module - dataset inputs and finder settings
"""

from .dataset_config import DatasetConfig, get_example_dataset_config, load_dataset_config_by_name
from .finder_config import FinderConfig, DEFAULT_FINDER_CONFIG

__all__ = [
    'DatasetConfig',
    'get_example_dataset_config',
    'load_dataset_config_by_name',
    'FinderConfig',
    'DEFAULT_FINDER_CONFIG'
]
