"""
manifest.py

Responsibility: Load and parse a package manifest (YAML) into a `Package`.

This implementation intentionally stays conservative:
- Unknown top-level keys are ignored.
- Scalars keep the text as written (`1.10` stays `1.10`) and stay unrendered templates.
- Script hook names are NOT validated here; that happens at packaging time.

Expected keys:
- name: str (required)
- version, iteration, epoch, license, vendor, url, description: str
- depends: list of str
- resources: list of resource descriptors (see `resources.parse_resource`)
- targets: list of {src, dest}
- scripts: mapping of hook name to script body
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from hammer.package import Package, Target
from hammer.resources import Resource, ResourceError, parse_resource
from hammer.scripts import Scripts


class ManifestError(ValueError):
    pass


_STRING_FIELDS = ("version", "iteration", "epoch", "license", "vendor", "url", "description")

# Implicit types whose Python value loses the text as written (1.10 -> 1.1, 01 -> 1).
_TEXT_TAGS = frozenset(
    {
        "tag:yaml.org,2002:bool",
        "tag:yaml.org,2002:int",
        "tag:yaml.org,2002:float",
        "tag:yaml.org,2002:timestamp",
    }
)


class _ManifestLoader(yaml.SafeLoader):
    """SafeLoader that reads numbers, booleans and dates as plain strings."""


_ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _TEXT_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _list(data: dict[str, Any], key: str) -> list[Any]:
    raw = data.get(key)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ManifestError(f"`{key}` must be a list when provided.")
    return raw


def _parse_resources(data: dict[str, Any]) -> list[Resource]:
    resources: list[Resource] = []
    for i, raw in enumerate(_list(data, "resources")):
        try:
            resources.append(parse_resource(raw))
        except ResourceError as e:
            raise ManifestError(f"resources[{i}]: {e}") from e
    return resources


def _parse_targets(data: dict[str, Any]) -> list[Target]:
    targets: list[Target] = []
    for i, raw in enumerate(_list(data, "targets")):
        if not isinstance(raw, dict):
            raise ManifestError(f"targets[{i}] must be an object/mapping.")
        if raw.get("src") is None or raw.get("dest") is None:
            raise ManifestError(f"targets[{i}] must define both `src` and `dest`.")
        targets.append(Target(src=str(raw["src"]), dest=str(raw["dest"])))
    return targets


def _parse_scripts(data: dict[str, Any]) -> Scripts:
    raw = data.get("scripts") or {}
    if not isinstance(raw, dict):
        raise ManifestError("`scripts` must be an object/mapping when provided.")
    return Scripts((str(k), "" if v is None else str(v)) for k, v in raw.items())


def parse_manifest(text: str, *, root: str | Path | None = None) -> Package:
    """
    Parse manifest text into a `Package`.

    `root` is the directory the manifest came from; local resources resolve
    relative paths against it.
    """
    try:
        data = yaml.load(text, Loader=_ManifestLoader) or {}
    except yaml.YAMLError as e:
        raise ManifestError(f"Manifest is not valid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError("Manifest must be a mapping/object at the top level.")

    name = _str(data.get("name")).strip()
    if not name:
        raise ManifestError("Manifest must define `name`.")

    depends = [str(d) for d in _list(data, "depends")]

    return Package(
        name=name,
        **{key: _str(data.get(key)) for key in _STRING_FIELDS},
        depends=depends,
        resources=_parse_resources(data),
        targets=_parse_targets(data),
        scripts=_parse_scripts(data),
        root=None if root is None else str(root),
    )


def load_manifest(path: str | Path) -> Package:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Could not read manifest {path}: {e}") from e
    try:
        return parse_manifest(text, root=path.resolve().parent)
    except ManifestError as e:
        raise ManifestError(f"{path}: {e}") from e
