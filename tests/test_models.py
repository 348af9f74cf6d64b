"""
Unit tests for BPM manifest and installed-state models
"""

import unittest
import os
import sys

# Add BPM to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from pydantic import ValidationError

from bpm.exceptions import PackageNotFound, VersionNotFound
from bpm.package.models import (DependencyRef, InstalledRecord, InstalledState, Manifest,
                                PackageVersion)


class TestDependencyRef(unittest.TestCase):
    """Test dependency reference parsing"""

    def test_bare_name(self):
        ref = DependencyRef.parse("libgreet")
        self.assertEqual(ref.name, "libgreet")
        self.assertIsNone(ref.version)
        self.assertEqual(str(ref), "libgreet")

    def test_name_and_version(self):
        ref = DependencyRef.parse("libc:2.0")
        self.assertEqual(ref, DependencyRef("libc", "2.0"))
        self.assertEqual(str(ref), "libc:2.0")

    def test_empty_version_means_latest(self):
        self.assertIsNone(DependencyRef.parse("libc:").version)


class TestManifest(unittest.TestCase):
    """Test version resolution against a manifest"""

    def setUp(self):
        """Set up test fixtures"""
        self.manifest = Manifest(repo="core", packages={
            "tool": {
                "1.0": {"path": "/builds/tool-1.0", "binaries": ["tool"]},
                "2.0": {"path": "/builds/tool-2.0", "binaries": ["tool"]},
                "1.5": {"path": "/builds/tool-1.5", "binaries": ["tool"]},
            },
            "empty": {},
        })

    def test_latest_is_ordinal_maximum(self):
        version, pkg = self.manifest.resolve("tool")
        self.assertEqual(version, "2.0")
        self.assertEqual(pkg.path, "/builds/tool-2.0")

    def test_requested_version(self):
        version, pkg = self.manifest.resolve("tool", "1.5")
        self.assertEqual(version, "1.5")
        self.assertEqual(pkg.path, "/builds/tool-1.5")

    def test_versions_compare_as_strings(self):
        manifest = Manifest(repo="core", packages={
            "tool": {"9.0": {"path": "a"}, "10.0": {"path": "b"}},
        })
        self.assertEqual(manifest.latest_version("tool"), "9.0")

    def test_unknown_package(self):
        with self.assertRaises(PackageNotFound) as ctx:
            self.manifest.resolve("missing")
        self.assertEqual(ctx.exception.package, "missing")
        self.assertEqual(ctx.exception.repo, "core")

    def test_unknown_version(self):
        with self.assertRaises(VersionNotFound) as ctx:
            self.manifest.resolve("tool", "3.0")
        self.assertEqual(ctx.exception.version, "3.0")

    def test_package_without_versions(self):
        with self.assertRaises(VersionNotFound):
            self.manifest.resolve("empty")


class TestPackageVersion(unittest.TestCase):
    """Test package version entries"""

    def test_defaults(self):
        pkg = PackageVersion(path="/builds/meta")
        self.assertEqual(pkg.binaries, [])
        self.assertEqual(pkg.dependencies, [])

    def test_dependency_refs(self):
        pkg = PackageVersion(path="/x", dependencies=["a", "b:1.0"])
        self.assertEqual(pkg.dependency_refs(), [DependencyRef("a"), DependencyRef("b", "1.0")])

    def test_rejects_empty_dependency_name(self):
        with self.assertRaises(ValidationError):
            PackageVersion(path="/x", dependencies=[":1.0"])

    def test_path_required(self):
        with self.assertRaises(ValidationError):
            PackageVersion(binaries=["x"])


class TestInstalledState(unittest.TestCase):
    """Test the in-memory installed-state mapping"""

    def test_insert_overwrites(self):
        state = InstalledState()
        state.insert("tool", InstalledRecord(repo="core", version="1.0"))
        state.insert("tool", InstalledRecord(repo="core", version="2.0"))
        self.assertEqual(len(state), 1)
        self.assertEqual(state.get("tool").version, "2.0")

    def test_remove(self):
        state = InstalledState({"tool": InstalledRecord(repo="core", version="1.0")})
        record = state.remove("tool")
        self.assertEqual(record.version, "1.0")
        self.assertFalse(state.contains("tool"))
        self.assertIsNone(state.remove("tool"))

    def test_iterates_sorted(self):
        state = InstalledState()
        for name in ("zeta", "alpha", "mid"):
            state.insert(name, InstalledRecord(repo="core", version="1.0"))
        self.assertEqual([name for name, _ in state], ["alpha", "mid", "zeta"])
        self.assertIn("mid", state)
        self.assertEqual(list(state.to_dict()), ["alpha", "mid", "zeta"])


if __name__ == '__main__':
    unittest.main()
