"""Tests for the scoped temporary workspace."""

from __future__ import annotations

import os
import signal
import time
from pathlib import Path

import pytest

from magick_recipes.runtime import TempWorkspace


def test_workspace_created_and_removed(tmp_path: Path) -> None:
    with TempWorkspace(tmp_path) as ws:
        assert ws.path is not None
        assert ws.path.is_dir()
        assert ws.path.parent == tmp_path
        assert ws.path.name.startswith(f"magick_recipes_{os.getpid()}_")
        ws.file("scratch").write_bytes(b"x")
        workdir = ws.path
    assert not workdir.exists()
    assert list(tmp_path.iterdir()) == []


def test_file_naming(tmp_path: Path) -> None:
    with TempWorkspace(tmp_path) as ws:
        assert ws.file("gray").name == "gray.miff"
        assert ws.file("script", suffix="").name == "script"


def test_file_requires_active_workspace(tmp_path: Path) -> None:
    with pytest.raises(RuntimeError, match="not active"):
        TempWorkspace(tmp_path).file("gray")


def test_removed_on_exception(tmp_path: Path) -> None:
    ws = TempWorkspace(tmp_path)
    with pytest.raises(ValueError, match="boom"), ws:
        ws.file("partial").write_bytes(b"x")
        raise ValueError("boom")
    assert list(tmp_path.iterdir()) == []


def test_missing_base_dir(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="does not exist"):
        TempWorkspace(tmp_path / "nope").__enter__()


def test_cleanup_is_idempotent(tmp_path: Path) -> None:
    with TempWorkspace(tmp_path) as ws:
        ws.cleanup()
        ws.cleanup()
    ws.cleanup()
    assert list(tmp_path.iterdir()) == []


@pytest.mark.skipif(not hasattr(signal, "SIGTERM"), reason="no SIGTERM")
def test_signal_exits_with_conventional_status(tmp_path: Path) -> None:
    before = signal.getsignal(signal.SIGTERM)
    with pytest.raises(SystemExit) as exc_info, TempWorkspace(tmp_path) as ws:
        ws.file("partial").write_bytes(b"x")
        os.kill(os.getpid(), signal.SIGTERM)
        time.sleep(5)
    assert exc_info.value.code == 128 + signal.SIGTERM
    assert list(tmp_path.iterdir()) == []
    assert signal.getsignal(signal.SIGTERM) == before
