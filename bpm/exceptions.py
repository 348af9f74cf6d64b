class BpmError(Exception):
    """Base exception for BPM"""
    pass

class ConfigError(BpmError):
    """Raised when the configuration file or values are invalid"""
    pass

class InvalidPackageSpec(BpmError):
    """Raised when a repo:package[:version] argument cannot be parsed"""
    pass

# Manifest related exceptions
class ManifestError(BpmError):
    """Base exception for repository manifest errors"""
    pass

class ManifestUnreadable(ManifestError):
    """Raised when a manifest file cannot be read"""
    pass

class ManifestMalformed(ManifestError):
    """Raised when a manifest does not parse into packages -> versions"""
    pass

# Package resolution related exceptions
class PackageError(BpmError):
    """Base exception for package resolution errors"""
    pass

class PackageNotFound(PackageError):
    """Raised when package is not found in a manifest"""

    def __init__(self, package: str, repo: str):
        super().__init__(f"Package {package} not found in repo {repo}")
        self.package = package
        self.repo = repo

class VersionNotFound(PackageError):
    """Raised when a version is not found for a package"""

    def __init__(self, package: str, version):
        super().__init__(f"Version {version} not found for package {package}")
        self.package = package
        self.version = version

class CycleDetected(PackageError):
    """Raised when a package:version is re-entered while still installing"""

    def __init__(self, key: str):
        super().__init__(f"Circular dependency detected at {key}")
        self.key = key

# Installed-state related exceptions
class StateError(BpmError):
    """Base exception for installed-state errors"""
    pass

class StateCorrupt(StateError):
    """Raised when the installed-state document exists but does not parse"""
    pass

class LockTimeout(StateError):
    """Raised when the store lock cannot be acquired in time"""
    pass

# Binary file related exceptions
class BinaryError(BpmError):
    """Base exception for binary file operations"""
    pass

class BinaryCopyFailed(BinaryError):
    """Raised when a binary cannot be copied into the store"""
    pass

class BinaryDeleteFailed(BinaryError):
    """Raised when an installed binary cannot be deleted"""
    pass

class CatalogError(BpmError):
    """Raised when the binary catalog cannot record a binary"""
    pass
