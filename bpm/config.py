"""
BPM Configuration

The store root and every path derived from it live in a BpmConfig which is
passed explicitly to each operation. Values can come from a YAML file and
from the BPM_STORE / BPM_CONFIG environment variables.
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from .exceptions import ConfigError

logger = logging.getLogger('BPM.config')

DEFAULT_HOME = Path(os.path.expanduser("~/.bpm"))
DEFAULT_CONFIG_FILE = DEFAULT_HOME / "config.yaml"
DEFAULT_STORE_ROOT = DEFAULT_HOME / "store"

CONFIG_ENV = "BPM_CONFIG"
STORE_ENV = "BPM_STORE"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class BpmConfig(BaseModel):
    """Store location and file layout for one BPM store"""
    store_root: Path = DEFAULT_STORE_ROOT
    manifest_name: str = "packages.mri"
    state_file: str = "installed.json"
    bins_dir: str = "bins"
    catalog_file: str = "packages.db"
    lock_timeout: float = 5.0
    progress: bool = True
    log_level: str = "INFO"

    @field_validator('store_root', mode='before')
    @classmethod
    def expand_store_root(cls, v):
        """Expand ~ in the store root"""
        if isinstance(v, str):
            v = os.path.expanduser(v)
        return v

    @field_validator('lock_timeout')
    @classmethod
    def validate_lock_timeout(cls, v):
        if v <= 0:
            raise ValueError(f"lock_timeout must be positive, got {v}")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {', '.join(LOG_LEVELS)}.")
        return v

    @classmethod
    def for_store(cls, store_root: Union[str, Path], **overrides) -> 'BpmConfig':
        """Build a config for an explicit store root"""
        return cls(store_root=store_root, **overrides)

    def manifest_path(self, repo_name: str) -> Path:
        """Path of the manifest for a repository"""
        return self.store_root / repo_name / self.manifest_name

    @property
    def state_path(self) -> Path:
        return self.store_root / self.state_file

    @property
    def lock_path(self) -> Path:
        return self.store_root / f"{self.state_file}.lock"

    @property
    def bins_path(self) -> Path:
        return self.store_root / self.bins_dir

    @property
    def catalog_path(self) -> Path:
        return self.store_root / self.catalog_file


def _read_config_file(path: Path) -> Dict[str, Any]:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_config(path: Optional[Union[str, Path]] = None,
                store_root: Optional[Union[str, Path]] = None) -> BpmConfig:
    """
    Load the BPM configuration

    The file is the explicit path, else $BPM_CONFIG, else ~/.bpm/config.yaml
    when it exists. $BPM_STORE overrides the file's store_root and an
    explicit store_root overrides both.
    """
    data: Dict[str, Any] = {}

    if path is None and os.environ.get(CONFIG_ENV):
        path = os.environ[CONFIG_ENV]

    if path is not None:
        data = _read_config_file(Path(path))
        logger.debug(f"Loaded config from {path}")
    elif DEFAULT_CONFIG_FILE.exists():
        data = _read_config_file(DEFAULT_CONFIG_FILE)
        logger.debug(f"Loaded config from {DEFAULT_CONFIG_FILE}")

    if os.environ.get(STORE_ENV):
        data['store_root'] = os.environ[STORE_ENV]
    if store_root is not None:
        data['store_root'] = store_root

    try:
        return BpmConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
