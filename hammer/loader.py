"""
loader.py

Responsibility: Find and load every package manifest under a search root.

Manifests are files named `spec.yml`; the directory holding one is that
package's root. Files are visited in sorted path order so the package list
is deterministic.
"""

from __future__ import annotations

import os
from pathlib import Path

from hammer.manifest import ManifestError, load_manifest
from hammer.package import Package

MANIFEST_NAME = "spec.yml"


def _iter_manifests(search: Path) -> list[Path]:
    found: list[Path] = []
    for root, dirs, filenames in os.walk(search):
        dirs.sort()
        if MANIFEST_NAME in filenames:
            found.append(Path(root) / MANIFEST_NAME)
    found.sort(key=lambda p: str(p.relative_to(search)).replace(os.sep, "/"))
    return found


def load_packages(search: str | Path) -> list[Package]:
    search_dir = Path(search).resolve()
    if not search_dir.is_dir():
        raise ManifestError(f"Search directory not found: {search_dir}")

    packages: list[Package] = []
    seen: dict[str, Path] = {}
    for path in _iter_manifests(search_dir):
        package = load_manifest(path)
        if package.name in seen:
            raise ManifestError(f"Duplicate package name {package.name!r} in {seen[package.name]} and {path}")
        seen[package.name] = path
        packages.append(package)
    return packages
