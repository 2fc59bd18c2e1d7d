"""
resources.py

Responsibility: Acquire the raw inputs of a package build.

Every resource exposes the same two operations:
- `name()`: the destination filename inside the build workspace
- `download(package)`: the raw bytes, or `ResourceError`

The package is passed to `download` so locations can be templates over the
package's own fields (e.g. a versioned URL). Rendering and writing the bytes
into the workspace are the package's business, not this module's.
"""

from __future__ import annotations

import posixpath
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

import requests

from hammer.renderer import RenderError

if TYPE_CHECKING:
    from hammer.package import Package


class ResourceError(RuntimeError):
    pass


class Resource(ABC):
    @abstractmethod
    def name(self) -> str:
        """Destination filename within the build workspace."""

    @abstractmethod
    def download(self, package: Package) -> bytes:
        """Return the resource contents."""


class URLResource(Resource):
    def __init__(self, url: str, name: str | None = None, *, timeout: float = 30) -> None:
        self.url = url
        self._name = name or posixpath.basename(urlsplit(url).path)
        if not self._name:
            raise ResourceError(f"Cannot derive a file name from URL {url!r}; set `name`.")
        self._timeout = timeout

    def __repr__(self) -> str:
        return f"URLResource(url={self.url!r}, name={self._name!r})"

    def name(self) -> str:
        return self._name

    def download(self, package: Package) -> bytes:
        try:
            url = package.render(self.url)
        except RenderError as e:
            raise ResourceError(f"Could not render URL for {self._name}: {e}") from e

        try:
            r = requests.get(url, timeout=self._timeout)
        except requests.RequestException as e:
            raise ResourceError(f"Download failed: GET {url}: {e}") from e
        if r.status_code >= 400:
            raise ResourceError(f"Download failed: GET {url}: HTTP {r.status_code}")
        return r.content


class LocalResource(Resource):
    """A file on disk, relative paths resolved against the manifest directory."""

    def __init__(self, path: str, name: str | None = None) -> None:
        self.path = path
        self._name = name or Path(path).name
        if not self._name:
            raise ResourceError(f"Cannot derive a file name from path {path!r}; set `name`.")

    def __repr__(self) -> str:
        return f"LocalResource(path={self.path!r}, name={self._name!r})"

    def name(self) -> str:
        return self._name

    def download(self, package: Package) -> bytes:
        try:
            path = Path(package.render(self.path))
        except RenderError as e:
            raise ResourceError(f"Could not render path for {self._name}: {e}") from e

        if not path.is_absolute() and package.root is not None:
            path = Path(package.root) / path
        try:
            return path.read_bytes()
        except OSError as e:
            raise ResourceError(f"Could not read {path}: {e}") from e


def parse_resource(descriptor: Mapping[str, Any]) -> Resource:
    """
    Build a resource from its manifest descriptor.

    Supported keys:
    - url: str (fetched over HTTP)
    - local: str (copied from disk)
    - name: str (optional destination filename)
    """
    if not isinstance(descriptor, Mapping):
        raise ResourceError("A resource must be an object/mapping.")

    name = descriptor.get("name")
    if name is not None:
        name = str(name).strip() or None

    if "url" in descriptor:
        return URLResource(str(descriptor["url"]), name)
    if "local" in descriptor:
        return LocalResource(str(descriptor["local"]), name)
    raise ResourceError(f"Unknown resource type, expected `url` or `local`: {dict(descriptor)!r}")
