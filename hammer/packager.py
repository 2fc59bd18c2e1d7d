"""
packager.py

Responsibility: Build a selection of packages into one output directory.

Packages are built one at a time, in order. A failing package is reported
and the remaining packages still build; `build()` returns whether all of
them succeeded.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from hammer.backend import Backend
from hammer.errors import BuildError
from hammer.package import BuildResult, Package

logger = logging.getLogger(__name__)


class Packager:
    def __init__(self, packages: Iterable[Package], *, backend: Backend | None = None) -> None:
        self.packages = list(packages)
        if backend is not None:
            for package in self.packages:
                package.backend = backend
        self.results: dict[str, BuildResult] = {}

    def ensure_output_dir(self, path: str | Path) -> Path:
        """
        Create the output directory (and parents) if missing.

        OSError propagates; the caller treats it as fatal.
        """
        out = Path(path).resolve()
        out.mkdir(parents=True, exist_ok=True)
        for package in self.packages:
            package.output_root = str(out)
        return out

    def build(self) -> bool:
        ok = True
        for package in self.packages:
            try:
                result = package.build()
            except BuildError as e:
                ok = False
                logger.error("%s", e)
                if e.output:
                    logger.error("%s: output:\n%s", package.name, e.output)
                continue

            self.results[package.name] = result
            if not result.workspace_reclaimed:
                logger.warning("%s: packaged, but workspace was not fully removed: %s", package.name, "; ".join(result.cleanup_errors))
        return ok
