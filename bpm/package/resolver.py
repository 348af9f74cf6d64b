"""
Dependency Resolution and Installation for BPM

Installs a package from a repository manifest after recursively installing
its dependencies, depth first. A package:version that is re-entered while it
is still being installed is a cycle: only that branch is cut, the rest of
the install carries on.
"""

import os
import shutil
import logging
from pathlib import Path
from typing import Optional, Set

from ..config import BpmConfig
from ..exceptions import BinaryCopyFailed, CatalogError, CycleDetected
from .catalog import BinaryCatalog
from .manifest import load_manifest
from .models import InstalledRecord, InstallReport, PackageVersion
from .progress import NullProgress
from .state import InstalledStateStore

logger = logging.getLogger('BPM.package.resolver')


class DependencyResolver:
    """Recursive installer with cycle detection"""

    def __init__(self, config: BpmConfig, catalog: Optional[BinaryCatalog] = None, progress=None):
        self.config = config
        self.store = InstalledStateStore.from_config(config)
        self.catalog = catalog if catalog is not None else BinaryCatalog(config.catalog_path)
        self.progress = progress if progress is not None else NullProgress()

    def install(self, repo_name: str, package: str, version: Optional[str] = None) -> InstallReport:
        """
        Install a package and, first, every dependency not yet installed

        Args:
            repo_name: Repository directory under the store root
            package: Package name
            version: Exact version, or None for the latest

        Returns:
            InstallReport listing installed keys, skipped dependencies,
            cycles and binary copy failures

        Raises:
            ManifestUnreadable, ManifestMalformed, PackageNotFound,
            VersionNotFound, StateCorrupt, LockTimeout
        """
        visited: Set[str] = set()
        report = InstallReport()
        self._install_node(repo_name, package, version, visited, report)
        return report

    def _install_node(self, repo_name: str, package: str, version: Optional[str],
                      visited: Set[str], report: InstallReport) -> None:
        manifest = load_manifest(self.config, repo_name)
        resolved_version, pkg = manifest.resolve(package, version)

        key = f"{package}:{resolved_version}"
        if key in visited:
            raise CycleDetected(key)
        visited.add(key)

        # Dependencies first
        for dep in pkg.dependency_refs():
            installed = self.store.load()
            if installed.contains(dep.name):
                record = installed.get(dep.name)
                if dep.version and record.version != dep.version:
                    logger.debug(f"Dependency {dep} satisfied by installed {dep.name} {record.version}")
                logger.info(f"Dependency {dep.name} already installed.")
                report.skipped.append(dep.name)
                continue

            logger.info(f"Installing dependency {dep.name}...")
            try:
                self._install_node(repo_name, dep.name, dep.version, visited, report)
            except CycleDetected as e:
                logger.warning(f"{e}, skipping that branch of {key}")
                report.cycles.append(e.key)

        installed_bins = self._install_binaries(package, pkg, report)

        with self.store.transaction() as state:
            state.insert(package, InstalledRecord(
                repo=repo_name,
                version=resolved_version,
                binaries=installed_bins
            ))

        visited.discard(key)
        report.installed.append(key)
        logger.info(f"Installed {key} from {repo_name}")

    def _install_binaries(self, package: str, pkg: PackageVersion, report: InstallReport):
        bins_dir = self.config.bins_path
        bins_dir.mkdir(parents=True, exist_ok=True)

        self.progress.begin(len(pkg.binaries), f"Installing {package}")
        installed_bins = []
        for binary in pkg.binaries:
            src = Path(pkg.path) / binary
            dest = (bins_dir / Path(binary).name).absolute()

            try:
                self._copy_binary(src, dest)
            except BinaryCopyFailed as e:
                logger.warning(str(e))
                report.copy_failures.append((str(src), str(dest), str(e.__cause__ or e)))
            else:
                self._catalog_binary(dest)

            installed_bins.append(str(dest))
            self.progress.advance(1)

        self.progress.finish(f"Installed {package} successfully!")
        return installed_bins

    def _copy_binary(self, src: Path, dest: Path) -> None:
        try:
            shutil.copy2(src, dest)
        except (OSError, shutil.Error) as e:
            raise BinaryCopyFailed(f"Could not copy {src} -> {dest}: {e}") from e
        logger.debug(f"Copied {src} -> {dest}")

    def _catalog_binary(self, dest: Path) -> None:
        try:
            with open(dest, 'rb') as f:
                data = f.read()
        except OSError as e:
            logger.warning(f"Could not read {dest} for the catalog: {e}")
            return

        try:
            self.catalog.record(os.path.basename(dest), data)
        except CatalogError as e:
            logger.warning(str(e))
