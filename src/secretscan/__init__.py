"""
secretscan finds files that are likely to hold credentials, keys, or tokens,
judging by file name, extension, and path.
"""

from secretscan.api import ScanSettings, scan_directory
from secretscan.config import ConfigError, SecretscanConfig, find_config_file, load_config
from secretscan.scanner import ClassificationRules, ExclusionSet, TraversalError

__all__ = [
    "ClassificationRules",
    "ConfigError",
    "ExclusionSet",
    "ScanSettings",
    "SecretscanConfig",
    "TraversalError",
    "find_config_file",
    "load_config",
    "scan_directory",
]
