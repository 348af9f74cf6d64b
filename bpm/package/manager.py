"""
Package lifecycle operations: install, remove, update and list
"""

import os
import logging
from typing import List, Optional, Tuple

from ..config import BpmConfig
from ..exceptions import BinaryDeleteFailed
from .catalog import BinaryCatalog
from .models import InstalledRecord, InstallReport, RemoveReport
from .progress import NullProgress, TqdmProgress
from .resolver import DependencyResolver
from .state import InstalledStateStore

logger = logging.getLogger('BPM.package')


class PackageManager:
    """Package manager bound to one store root"""

    def __init__(self, config: BpmConfig, catalog: Optional[BinaryCatalog] = None, progress=None):
        self.config = config
        if progress is None:
            progress = TqdmProgress() if config.progress else NullProgress()
        self.store = InstalledStateStore.from_config(config)
        self.resolver = DependencyResolver(config, catalog=catalog, progress=progress)

    def install(self, repo_name: str, package: str, version: Optional[str] = None) -> InstallReport:
        """Install a package and its dependencies"""
        logger.info(f"Installing {package}" + (f" {version}" if version else "") + f" from {repo_name}")
        return self.resolver.install(repo_name, package, version)

    def remove(self, package: str) -> RemoveReport:
        """Remove a package: delete its binaries (best effort) and drop its record"""
        report = RemoveReport(package=package)

        if not self.store.load().contains(package):
            logger.info(f"Package {package} is not installed.")
            return report

        with self.store.transaction() as state:
            record = state.remove(package)
            if record is None:
                # Removed by another process since the check above
                logger.info(f"Package {package} is not installed.")
                return report

            for path in record.binaries:
                try:
                    self._delete_binary(path)
                except BinaryDeleteFailed as e:
                    logger.warning(str(e))
                    report.delete_failures.append((path, str(e.__cause__ or e)))

        report.removed = True
        report.record = record
        logger.info(f"Removed package {package}")
        return report

    def update(self, repo_name: str, package: str) -> InstallReport:
        """Remove a package, then install the latest version"""
        self.remove(package)
        return self.install(repo_name, package)

    def list_installed(self) -> List[Tuple[str, InstalledRecord]]:
        """Installed packages sorted by name"""
        return list(self.store.load())

    def _delete_binary(self, path: str) -> None:
        try:
            os.remove(path)
        except OSError as e:
            raise BinaryDeleteFailed(f"Could not delete {path}: {e}") from e
        logger.debug(f"Deleted {path}")
