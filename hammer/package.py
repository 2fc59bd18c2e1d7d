"""
package.py

Responsibility: The unit of work, one package built from one manifest.

High-level flow of `Package.build()`:
1) Skip if the output directory already holds `{name}-{version}-{iteration}.*`
2) Create an ephemeral build workspace
3) Download every resource into it
4) Run the build script inside it
5) Render metadata and hand the workspace to the packaging backend
6) Remove the workspaces

Every failure is raised as a `BuildError` tagged with the package name and
phase. Workspaces are removed on every exit path; a removal failure after a
successful packaging run is reported on the result, not raised.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import shutil
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from hammer.backend import Backend, PackagingError
from hammer.errors import BuildError, InvalidScriptNameError
from hammer.renderer import RenderError, render
from hammer.resources import Resource, ResourceError
from hammer.scripts import ScriptError, Scripts, is_install_hook, run_build, write_hook

logger = logging.getLogger(__name__)

# Rendered when non-empty, in this order.
OPTIONAL_FIELDS = ("epoch", "license", "vendor", "description", "url")


@dataclass(frozen=True)
class Target:
    """A build-produced path (`src`) and where it is installed (`dest`)."""

    src: str
    dest: str


@dataclass(frozen=True)
class BuildResult:
    package: str
    skipped: bool = False
    conflict: str | None = None
    output: str = ""
    cleanup_errors: tuple[str, ...] = ()

    @property
    def artifact_produced(self) -> bool:
        return not self.skipped

    @property
    def workspace_reclaimed(self) -> bool:
        return not self.cleanup_errors


@dataclass
class Package:
    name: str
    version: str = ""
    iteration: str = ""
    epoch: str = ""
    license: str = ""
    vendor: str = ""
    url: str = ""
    description: str = ""
    depends: list[str] = field(default_factory=list)
    resources: list[Resource] = field(default_factory=list)
    targets: list[Target] = field(default_factory=list)
    scripts: Scripts = field(default_factory=Scripts)

    # set by the loader / packager
    root: str | None = None
    output_root: str | None = None
    backend: Backend = field(default_factory=Backend)

    # transient, owned by one build() call
    build_root: str | None = field(default=None, repr=False, compare=False)
    script_root: str | None = field(default=None, repr=False, compare=False)

    def template_context(self) -> Mapping[str, Any]:
        """Read-only snapshot of the package fields templates may reference."""
        return MappingProxyType(
            {
                "name": self.name,
                "version": self.version,
                "iteration": self.iteration,
                "epoch": self.epoch,
                "license": self.license,
                "vendor": self.vendor,
                "url": self.url,
                "description": self.description,
                "depends": tuple(self.depends),
                "root": self.root,
                "output_root": self.output_root,
                "build_root": self.build_root,
                "script_root": self.script_root,
            }
        )

    def render(self, template: str) -> str:
        return render(template, self.template_context())

    def _fail(self, phase: str, detail: object, **kwargs: Any) -> BuildError:
        return BuildError(self.name, phase, str(detail), **kwargs)

    def _workspace(self) -> str:
        if self.build_root is None:
            raise self._fail("workspace", "build directory is not set")
        return self.build_root

    def find_conflict(self) -> str | None:
        """Return the name of an existing output file for this name/version/iteration."""
        if self.output_root is None:
            raise self._fail("conflict-check", "output directory is not set")

        glob = f"{self.name}-{self.version}-{self.iteration}.*"
        try:
            entries = sorted(os.scandir(self.output_root), key=lambda e: e.name)
        except OSError as e:
            raise self._fail("conflict-check", f"could not read output directory: {e}") from e

        for entry in entries:
            if entry.is_dir():
                continue
            if fnmatch.fnmatchcase(entry.name, glob):
                return entry.name
        return None

    def build(self) -> BuildResult:
        conflict = self.find_conflict()
        if conflict is not None:
            logger.warning("%s: found conflicting output file %s - not building to avoid overwrite", self.name, conflict)
            return BuildResult(self.name, skipped=True, conflict=conflict)

        try:
            self.build_root = tempfile.mkdtemp(prefix=f"hammer-{self.name}-")
        except OSError as e:
            raise self._fail("workspace", f"could not create build directory: {e}") from e

        try:
            self._fetch_resources()
            self._run_build_script()
            output = self.package()
        finally:
            cleanup_errors = self.cleanup()

        logger.info("%s: packaged", self.name)
        return BuildResult(self.name, output=output, cleanup_errors=tuple(cleanup_errors))

    def _fetch_resources(self) -> None:
        seen: set[str] = set()
        for resource in self.resources:
            name = resource.name()
            if name in seen:
                raise self._fail("resources", f"duplicate resource name {name!r}")
            seen.add(name)

        for resource in self.resources:
            name = resource.name()
            logger.info("%s: fetching resource %s", self.name, name)
            try:
                body = resource.download(self)
            except ResourceError as e:
                raise self._fail("resources", e) from e

            dest = Path(self._workspace()) / name
            try:
                dest.write_bytes(body)
                dest.chmod(0o777)
            except OSError as e:
                raise self._fail("resources", f"could not write {name}: {e}") from e

    def _run_build_script(self) -> None:
        try:
            script = self.render(self.scripts.build_script)
        except ScriptError as e:
            raise self._fail("build", e) from e
        except RenderError as e:
            raise self._fail("render", e, hook="build") from e

        logger.info("%s: running build script", self.name)
        try:
            run_build(script, self._workspace())
        except ScriptError as e:
            raise self._fail("build", e, output=e.output) from e

    def backend_args(self) -> list[str]:
        """
        Assemble the metadata arguments for the packaging backend.

        Hook names are validated before anything is rendered or written;
        rendered hooks are written to a fresh `script_root`.
        """
        for hook, _body in self.scripts.install_hooks():
            if not is_install_hook(hook):
                raise InvalidScriptNameError(self.name, hook)

        args: list[str] = []
        for field_name in ("name", "version", "iteration"):
            args += [f"--{field_name}", self._render_field(field_name)]
        for field_name in OPTIONAL_FIELDS:
            if getattr(self, field_name):
                args += [f"--{field_name}", self._render_field(field_name)]

        for depend in self.depends:
            args += ["--depends", depend]

        try:
            self.script_root = tempfile.mkdtemp(prefix=f"hammer-scripts-{self.name}-")
        except OSError as e:
            raise self._fail("workspace", f"could not create script directory: {e}") from e

        for hook, body in self.scripts.install_hooks():
            try:
                content = self.render(body)
            except RenderError as e:
                raise self._fail("render", e, hook=hook) from e
            try:
                loc = write_hook(self.script_root, hook, content)
            except OSError as e:
                raise self._fail("package", f"could not write script: {e}", hook=hook) from e
            logger.debug("%s: wrote script %s", self.name, loc)
            args += [f"--{hook}", str(loc)]

        for i, target in enumerate(self.targets):
            try:
                src = self.render(target.src)
                dest = self.render(target.dest)
            except RenderError as e:
                raise self._fail("render", e, index=i) from e
            args.append(f"{src}={dest}")

        return args

    def _render_field(self, field_name: str) -> str:
        try:
            return self.render(getattr(self, field_name))
        except RenderError as e:
            raise self._fail("render", f"{field_name}: {e}") from e

    def package(self) -> str:
        """Run the packaging backend; return its output."""
        if self.output_root is None:
            raise self._fail("package", "output directory is not set")

        args = self.backend_args()
        logger.info("%s: packaging with %s", self.name, self.backend.command)
        try:
            return self.backend.run(self.output_root, args, cwd=self.build_root)
        except PackagingError as e:
            raise self._fail("package", e, output=e.output) from e

    def cleanup(self) -> list[str]:
        """Remove the workspaces; return (and log) what could not be removed."""
        errors: list[str] = []
        for attr in ("build_root", "script_root"):
            path = getattr(self, attr)
            if path is None:
                continue
            try:
                shutil.rmtree(path)
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning("%s: could not remove %s during cleanup: %s", self.name, attr, e)
                errors.append(f"{attr}: {e}")
            setattr(self, attr, None)
        return errors
