"""
errors.py

Responsibility: The error type a package build raises.

Every failure is tagged at the point of detection with the package name and
the phase it happened in, so the caller can report it without knowing which
module raised the underlying error.
"""

from __future__ import annotations


class BuildError(RuntimeError):
    """A per-package build failure: `{package, phase, detail}` plus context."""

    def __init__(
        self,
        package: str,
        phase: str,
        detail: str,
        *,
        output: str = "",
        hook: str | None = None,
        index: int | None = None,
    ) -> None:
        self.package = package
        self.phase = phase
        self.detail = detail
        self.output = output
        self.hook = hook
        self.index = index
        super().__init__(str(self))

    def __str__(self) -> str:
        where = self.phase
        if self.hook is not None:
            where += f" [{self.hook}]"
        if self.index is not None:
            where += f" [target {self.index}]"
        return f"{self.package}: {where}: {self.detail}"


class InvalidScriptNameError(BuildError):
    def __init__(self, package: str, hook: str) -> None:
        super().__init__(package, "package", f"invalid script name {hook!r}", hook=hook)
