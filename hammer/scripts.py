"""
scripts.py

Responsibility: The named shell procedures attached to a package.

A script set maps hook names to script bodies (template strings):
- `build` is mandatory and runs inside the build workspace before packaging
- every other entry is a lifecycle hook handed to the packaging backend and
  must be one of `INSTALL_HOOKS`

Hook names are not checked when a manifest is parsed; the package checks
them when it assembles the backend arguments.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

BUILD_HOOK = "build"

INSTALL_HOOKS = (
    "before-install",
    "after-install",
    "before-remove",
    "after-remove",
    "before-upgrade",
    "after-upgrade",
)

SHELL = "sh"


class ScriptError(RuntimeError):
    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output


def is_install_hook(name: str) -> bool:
    return name in INSTALL_HOOKS


class Scripts(dict[str, str]):
    @property
    def build_script(self) -> str:
        try:
            return self[BUILD_HOOK]
        except KeyError:
            raise ScriptError("No `build` script defined.") from None

    def install_hooks(self) -> Iterator[tuple[str, str]]:
        """Yield `(name, body)` for every entry except the build hook, in manifest order."""
        for name, body in self.items():
            if name != BUILD_HOOK:
                yield name, body


def run_build(script: str, cwd: str | Path) -> str:
    """
    Run a rendered build script with `cwd` as working directory.

    Returns the combined stdout/stderr; raises ScriptError (carrying that
    output) on launch failure or non-zero exit.
    """
    try:
        proc = subprocess.run(
            [SHELL, "-c", script],
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except OSError as e:
        raise ScriptError(f"Could not start build script: {e}") from e

    logger.debug("build script exited with code %d", proc.returncode)
    if proc.returncode != 0:
        raise ScriptError(f"Build script exited with code {proc.returncode}", proc.stdout)
    return proc.stdout


def write_hook(script_root: str | Path, name: str, content: str) -> Path:
    loc = Path(script_root) / name
    loc.write_text(content, encoding="utf-8")
    loc.chmod(0o755)
    return loc
