"""
cli.py

Responsibility: CLI entrypoint for hammer.

High-level flow (single command `build`):
1) Load every manifest under the search root -> `Package` list
2) Select packages by name (all of them when no names are given)
3) Ensure the output directory exists
4) Build the selection, one package at a time

This module should orchestrate behavior but keep concerns isolated:
- Manifest discovery: `loader.py`
- Building a package: `package.py`
- Driving a selection: `packager.py`
"""

from __future__ import annotations

import argparse
import logging
import os

from hammer.backend import Backend
from hammer.loader import load_packages
from hammer.manifest import ManifestError
from hammer.package import Package
from hammer.packager import Packager

logger = logging.getLogger(__name__)


class CLIError(RuntimeError):
    pass


def _select(packages: list[Package], names: list[str]) -> list[Package]:
    if not names:
        return packages
    wanted = set(names)
    return [p for p in packages if p.name in wanted]


def build_cmd(args: argparse.Namespace) -> int:
    try:
        loaded = load_packages(args.search)
    except ManifestError as e:
        raise CLIError(f"could not load packages: {e}") from e

    packages = _select(loaded, args.packages)
    if not packages:
        raise CLIError("no packages selected")

    missing = sorted(set(args.packages) - {p.name for p in packages})
    for name in missing:
        logger.warning("no package named %s", name)

    packager = Packager(packages, backend=Backend(output_type=args.format))
    try:
        out = packager.ensure_output_dir(args.output)
    except OSError as e:
        raise CLIError(f"could not create output directory: {e}") from e
    logger.info("building %d package(s) into %s", len(packages), out)

    # Errors are already reported to the user from here
    return 0 if packager.build() else 1


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="hammer", description="hammer - build packages from YAML manifests")
    p.add_argument(
        "--log-level",
        default=os.environ.get("HAMMER_LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO, or env HAMMER_LOG_LEVEL)",
    )
    sub = p.add_subparsers(dest="command", required=True)

    b = sub.add_parser("build", help="Build packages (all of them unless names are given)")
    b.add_argument("packages", nargs="*", metavar="package", help="Names of the packages to build")
    b.add_argument(
        "--search",
        default=os.environ.get("HAMMER_SEARCH", "."),
        help="Directory searched for spec.yml manifests (default: ., or env HAMMER_SEARCH)",
    )
    b.add_argument(
        "--output",
        default=os.environ.get("HAMMER_OUTPUT", "out"),
        help="Directory packages are written to (default: out, or env HAMMER_OUTPUT)",
    )
    b.add_argument(
        "--format",
        default=os.environ.get("HAMMER_FORMAT", "rpm"),
        help="Output package type passed to fpm (default: rpm, or env HAMMER_FORMAT)",
    )

    b.set_defaults(func=build_cmd)
    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    try:
        return int(args.func(args))
    except CLIError as e:
        logger.critical("%s", e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
