"""
Shared fixtures for BPM tests: a throwaway store with manifests and build
artifacts on disk
"""

import os
import json
import shutil
import tempfile
import unittest
from typing import Dict, List, Optional

from bpm.config import BpmConfig


def _toml_list(values: List[str]) -> str:
    return "[" + ", ".join(json.dumps(v) for v in values) + "]"


class StoreTestCase(unittest.TestCase):
    """Test case with a temporary store root and artifacts directory"""

    def setUp(self):
        """Set up test fixtures"""
        self.test_dir = tempfile.mkdtemp(prefix='bpm_test_')
        self.store_root = os.path.join(self.test_dir, 'store')
        self.artifacts = os.path.join(self.test_dir, 'artifacts')
        os.makedirs(self.store_root)
        os.makedirs(self.artifacts)
        self.config = BpmConfig.for_store(self.store_root, progress=False, lock_timeout=1.0)

    def tearDown(self):
        """Clean up test fixtures"""
        if os.path.exists(self.test_dir):
            shutil.rmtree(self.test_dir)

    def make_build(self, name: str, version: str, binaries: Optional[List[str]] = None) -> str:
        """Create a build directory holding the given binaries"""
        build_dir = os.path.join(self.artifacts, f"{name}-{version}")
        os.makedirs(build_dir, exist_ok=True)
        for binary in binaries or []:
            path = os.path.join(build_dir, binary)
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, 'wb') as f:
                f.write(f"{name} {version} {binary}".encode())
        return build_dir

    def write_manifest(self, repo: str, packages: Dict[str, Dict[str, Dict]]) -> str:
        """
        Write packages.mri for a repository

        packages maps name -> version -> {path?, binaries?, dependencies?};
        a missing path means a build directory is created for the binaries.
        """
        lines = []
        for name, versions in packages.items():
            for version, entry in versions.items():
                binaries = entry.get('binaries', [])
                path = entry.get('path') or self.make_build(name, version, binaries)
                lines.append(f"[{json.dumps(name)}.{json.dumps(version)}]")
                lines.append(f"path = {json.dumps(path)}")
                lines.append(f"binaries = {_toml_list(binaries)}")
                lines.append(f"dependencies = {_toml_list(entry.get('dependencies', []))}")
                lines.append("")

        repo_dir = os.path.join(self.store_root, repo)
        os.makedirs(repo_dir, exist_ok=True)
        manifest_path = os.path.join(repo_dir, 'packages.mri')
        with open(manifest_path, 'w', encoding='utf-8') as f:
            f.write("\n".join(lines))
        return manifest_path

    def bin_path(self, binary: str) -> str:
        return os.path.abspath(os.path.join(self.store_root, 'bins', os.path.basename(binary)))

    def read_state(self) -> Dict:
        with open(os.path.join(self.store_root, 'installed.json'), 'r') as f:
            return json.load(f)
