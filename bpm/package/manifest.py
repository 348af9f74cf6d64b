"""
Repository manifest loading

A repository is a directory under the store root holding a TOML manifest
(packages.mri) whose top-level tables are package names and whose sub-tables
are versions:

    [hello."1.0"]
    path = "/opt/builds/hello-1.0"
    binaries = ["bin/hello"]
    dependencies = ["libgreet", "libc:2.0"]
"""

import logging
import tomllib

from pydantic import ValidationError

from ..config import BpmConfig
from ..exceptions import ManifestMalformed, ManifestUnreadable
from .models import Manifest

logger = logging.getLogger('BPM.package.manifest')


def load_manifest(config: BpmConfig, repo_name: str) -> Manifest:
    """Read and parse the manifest of a repository, no caching"""
    manifest_path = config.manifest_path(repo_name)

    try:
        with open(manifest_path, 'rb') as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ManifestUnreadable(f"Failed to read manifest {manifest_path}: {e}") from e
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ManifestMalformed(f"Failed to parse TOML in {manifest_path}: {e}") from e

    try:
        manifest = Manifest(repo=repo_name, packages=data)
    except ValidationError as e:
        raise ManifestMalformed(f"Invalid manifest {manifest_path}: {e}") from e

    logger.debug(f"Loaded {len(manifest.packages)} packages from {manifest_path}")
    return manifest
