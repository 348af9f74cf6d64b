"""
BPM Package Management Data Models

Pydantic models for repository manifests and installed-state records, plus
the plain result types returned by install and remove.
"""

from typing import Dict, Iterator, List, Optional, Tuple
from dataclasses import dataclass, field
from pydantic import BaseModel, field_validator

from ..exceptions import PackageNotFound, VersionNotFound


@dataclass(frozen=True)
class DependencyRef:
    """A dependency reference: a bare name or name:version"""
    name: str
    version: Optional[str] = None

    @classmethod
    def parse(cls, text: str) -> 'DependencyRef':
        name, _, version = text.partition(':')
        return cls(name=name.strip(), version=version.strip() or None)

    def __str__(self):
        return f"{self.name}:{self.version}" if self.version else self.name


class PackageVersion(BaseModel):
    """One version of one package within a repository manifest"""
    path: str
    binaries: List[str] = []
    dependencies: List[str] = []

    @field_validator('dependencies')
    @classmethod
    def validate_dependencies(cls, v):
        """Reject empty dependency names"""
        for dep in v:
            if not DependencyRef.parse(dep).name:
                raise ValueError(f"Invalid dependency reference: {dep!r}")
        return v

    def dependency_refs(self) -> List[DependencyRef]:
        return [DependencyRef.parse(dep) for dep in self.dependencies]


class Manifest(BaseModel):
    """Packages -> versions -> PackageVersion for one repository"""
    repo: str
    packages: Dict[str, Dict[str, PackageVersion]] = {}

    def latest_version(self, package: str) -> Optional[str]:
        """Ordinal maximum of the version keys, None if there are none"""
        versions = self.packages.get(package)
        if not versions:
            return None
        return max(versions)

    def resolve(self, package: str, version: Optional[str] = None) -> Tuple[str, PackageVersion]:
        """
        Choose a concrete version of a package

        Args:
            package: Package name
            version: Exact version, or None for the latest

        Returns:
            (version, PackageVersion)

        Raises:
            PackageNotFound: package is not in this manifest
            VersionNotFound: requested version is absent, or no versions exist
        """
        versions = self.packages.get(package)
        if versions is None:
            raise PackageNotFound(package, self.repo)

        chosen = version if version is not None else self.latest_version(package)
        if chosen is None or chosen not in versions:
            raise VersionNotFound(package, chosen)

        return chosen, versions[chosen]


class InstalledRecord(BaseModel):
    """An installed package: source repo, version and installed binary paths"""
    repo: str
    version: str
    binaries: List[str] = []


class InstalledState:
    """Package name -> InstalledRecord, the whole installed-state document"""

    def __init__(self, records: Optional[Dict[str, InstalledRecord]] = None):
        self.records: Dict[str, InstalledRecord] = dict(records or {})

    def contains(self, name: str) -> bool:
        return name in self.records

    def get(self, name: str) -> Optional[InstalledRecord]:
        return self.records.get(name)

    def insert(self, name: str, record: InstalledRecord) -> None:
        """Add or overwrite the record for a package"""
        self.records[name] = record

    def remove(self, name: str) -> Optional[InstalledRecord]:
        return self.records.pop(name, None)

    def names(self) -> List[str]:
        return sorted(self.records)

    def to_dict(self) -> Dict[str, Dict]:
        return {name: self.records[name].model_dump() for name in self.names()}

    def __contains__(self, name: str) -> bool:
        return self.contains(name)

    def __iter__(self) -> Iterator[Tuple[str, InstalledRecord]]:
        for name in self.names():
            yield name, self.records[name]

    def __len__(self) -> int:
        return len(self.records)


@dataclass
class InstallReport:
    """Outcome of one top-level install call"""
    installed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    cycles: List[str] = field(default_factory=list)
    copy_failures: List[Tuple[str, str, str]] = field(default_factory=list)


@dataclass
class RemoveReport:
    """Outcome of one remove call"""
    package: str
    removed: bool = False
    record: Optional[InstalledRecord] = None
    delete_failures: List[Tuple[str, str]] = field(default_factory=list)
