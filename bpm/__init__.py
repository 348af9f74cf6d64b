"""
BPM - Blur Package Manager

Installs packages described by local repository manifests into a store,
resolving dependencies recursively, and tracks what is installed.
"""

__version__ = "0.1.2"

from .config import BpmConfig, load_config
from .package import PackageManager

__all__ = ['__version__', 'BpmConfig', 'load_config', 'PackageManager']
