"""
backend.py

Responsibility: Isolate the invocation of the external packaging backend (fpm).

This module must be the only place that:
- Knows the backend's executable name and fixed argument prefix
- Runs the backend subprocess and interprets its exit status

Package metadata arguments are assembled by the package itself; this module
treats them as opaque.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class PackagingError(RuntimeError):
    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output


@dataclass(frozen=True)
class Backend:
    command: str = "fpm"
    source_type: str = "dir"
    output_type: str = "rpm"

    def prefix_args(self, output_root: str | Path) -> list[str]:
        return [
            "-s", self.source_type,
            "-t", self.output_type,
            "-p", str(Path(output_root).resolve()),
        ]

    def run(self, output_root: str | Path, args: list[str], *, cwd: str | Path | None = None) -> str:
        """
        Run the backend with the fixed prefix followed by `args`.

        Returns the combined stdout/stderr. A non-zero exit raises
        PackagingError with the output attached so the caller can log it.
        """
        cmd = [self.command, *self.prefix_args(output_root), *args]
        try:
            proc = subprocess.run(
                cmd,
                cwd=None if cwd is None else str(cwd),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as e:
            raise PackagingError(f"Could not start {self.command}: {e}") from e

        logger.debug("package command exited (code=%d success=%s)", proc.returncode, proc.returncode == 0)
        if proc.returncode != 0:
            raise PackagingError("package command exited with a non-zero exit code", proc.stdout)
        return proc.stdout
