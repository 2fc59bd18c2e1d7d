from __future__ import annotations

import os
from pathlib import Path

import pytest

from helpers import FAKE_FPM, FakeFpm, RecordingBackend


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture
def fake_fpm(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> FakeFpm:
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    fpm = bin_dir / "fpm"
    fpm.write_text(FAKE_FPM, encoding="utf-8")
    fpm.chmod(0o755)

    log = tmp_path / "fpm.log"
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    monkeypatch.setenv("FAKE_FPM_LOG", str(log))
    monkeypatch.delenv("FAKE_FPM_EXIT", raising=False)
    return FakeFpm(log)


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()
