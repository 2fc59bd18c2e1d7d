import stat
from pathlib import Path

import pytest

from hammer.scripts import INSTALL_HOOKS, ScriptError, Scripts, is_install_hook, run_build, write_hook


def test_run_build_captures_stdout_and_stderr(tmp_path: Path) -> None:
    out = run_build("echo out; echo err >&2", tmp_path)
    assert "out" in out
    assert "err" in out


def test_run_build_runs_in_workspace(tmp_path: Path) -> None:
    (tmp_path / "marker").write_text("", encoding="utf-8")
    assert "marker" in run_build("ls", tmp_path)


def test_run_build_non_zero_exit_keeps_output(tmp_path: Path) -> None:
    with pytest.raises(ScriptError) as exc:
        run_build("echo boom; exit 3", tmp_path)
    assert "3" in str(exc.value)
    assert exc.value.output == "boom\n"


def test_run_build_launch_failure(tmp_path: Path) -> None:
    with pytest.raises(ScriptError):
        run_build("true", tmp_path / "missing")


def test_build_script_is_required() -> None:
    with pytest.raises(ScriptError):
        Scripts({"after-install": "true"}).build_script


def test_install_hooks_skip_build_and_keep_order() -> None:
    scripts = Scripts({"after-remove": "a", "build": "b", "before-install": "c"})
    assert list(scripts.install_hooks()) == [("after-remove", "a"), ("before-install", "c")]


def test_is_install_hook() -> None:
    for hook in INSTALL_HOOKS:
        assert is_install_hook(hook)
    assert not is_install_hook("build")
    assert not is_install_hook("bogus-hook")


def test_write_hook_is_executable(tmp_path: Path) -> None:
    loc = write_hook(tmp_path, "after-install", "systemctl daemon-reload\n")

    assert loc == tmp_path / "after-install"
    assert loc.read_text(encoding="utf-8") == "systemctl daemon-reload\n"
    assert stat.S_IMODE(loc.stat().st_mode) == 0o755
