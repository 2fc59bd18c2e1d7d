from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from hammer.backend import Backend, PackagingError
from hammer.package import Package
from hammer.resources import Resource, ResourceError
from hammer.scripts import INSTALL_HOOKS

# Records its arguments (one per line, calls separated by --END--) and
# touches `<out>/<name>-<version>-<iteration>.<type>` like fpm would.
FAKE_FPM = r"""#!/bin/sh
for arg in "$@"; do printf '%s\n' "$arg"; done >> "$FAKE_FPM_LOG"
echo "--END--" >> "$FAKE_FPM_LOG"
out=""; name=""; version=""; iteration=""; type=""
while [ $# -gt 0 ]; do
  case "$1" in
    -p) out="$2"; shift 2 ;;
    -t) type="$2"; shift 2 ;;
    --name) name="$2"; shift 2 ;;
    --version) version="$2"; shift 2 ;;
    --iteration) iteration="$2"; shift 2 ;;
    *) shift ;;
  esac
done
echo "Created package $out/$name-$version-$iteration.$type"
if [ "${FAKE_FPM_EXIT:-0}" != "0" ]; then exit "$FAKE_FPM_EXIT"; fi
touch "$out/$name-$version-$iteration.$type"
"""


@dataclass
class FakeFpm:
    log: Path

    def calls(self) -> list[list[str]]:
        if not self.log.exists():
            return []
        calls: list[list[str]] = []
        current: list[str] = []
        for line in self.log.read_text(encoding="utf-8").splitlines():
            if line == "--END--":
                calls.append(current)
                current = []
            else:
                current.append(line)
        return calls


@dataclass
class BackendCall:
    output_root: str
    args: list[str]
    cwd: str | None
    cwd_existed: bool
    hooks: dict[str, str]


@dataclass(frozen=True)
class RecordingBackend(Backend):
    """Captures what would be passed to fpm, including written hook contents."""

    calls: list[BackendCall] = field(default_factory=list)
    fail_with: str | None = None

    def run(self, output_root, args, *, cwd=None):
        hooks: dict[str, str] = {}
        for i, arg in enumerate(args[:-1]):
            if arg.startswith("--") and arg[2:] in INSTALL_HOOKS:
                hooks[arg[2:]] = Path(args[i + 1]).read_text(encoding="utf-8")
        self.calls.append(
            BackendCall(
                output_root=str(output_root),
                args=list(args),
                cwd=None if cwd is None else str(cwd),
                cwd_existed=cwd is not None and Path(cwd).is_dir(),
                hooks=hooks,
            )
        )
        if self.fail_with is not None:
            raise PackagingError("package command exited with a non-zero exit code", self.fail_with)
        return "ok"


class StaticResource(Resource):
    def __init__(self, name: str, body: bytes = b"", *, error: str | None = None) -> None:
        self._name = name
        self.body = body
        self.error = error
        self.workspaces: list[str | None] = []

    def name(self) -> str:
        return self._name

    def download(self, package: Package) -> bytes:
        self.workspaces.append(package.build_root)
        if self.error is not None:
            raise ResourceError(self.error)
        return self.body
