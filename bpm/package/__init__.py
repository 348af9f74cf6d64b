"""
Package management module initialization
"""
from .models import (DependencyRef, PackageVersion, Manifest, InstalledRecord, InstalledState,
                     InstallReport, RemoveReport)
from .manifest import load_manifest
from .state import InstalledStateStore
from .catalog import BinaryCatalog
from .progress import NullProgress, TqdmProgress
from .resolver import DependencyResolver
from .manager import PackageManager

__all__ = ['DependencyRef', 'PackageVersion', 'Manifest', 'InstalledRecord', 'InstalledState',
           'InstallReport', 'RemoveReport', 'load_manifest', 'InstalledStateStore', 'BinaryCatalog',
           'NullProgress', 'TqdmProgress', 'DependencyResolver', 'PackageManager']
