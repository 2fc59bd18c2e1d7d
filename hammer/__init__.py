"""
hammer package

This package builds installable packages (RPMs and friends) from YAML
manifests, delegating the final packaging step to fpm.

Key responsibilities are split across modules:
- `manifest.py` / `loader.py`: find and parse `spec.yml` manifests into packages
- `package.py`: the per-package pipeline (resources -> build script -> fpm)
- `resources.py`: acquire source inputs (HTTP download, local copy)
- `scripts.py`: the build script and lifecycle hooks
- `renderer.py`: Jinja2 rendering against a package's own fields
- `backend.py`: isolated fpm subprocess invocation
- `packager.py`: build a selection of packages into one output directory
- `cli.py`: CLI entrypoint
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
