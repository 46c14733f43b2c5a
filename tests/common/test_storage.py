from __future__ import annotations

import os
from pathlib import Path  # noqa: TC003

import pytest

from dashlink.common import storage


def test_get_data_dir_prefers_explicit_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("DASHLINK_DATA_DIR", str(custom))

    result = storage.get_data_dir()

    assert result == custom.resolve()


@pytest.mark.skipif(os.name == "nt", reason="XDG paths are POSIX only")
def test_get_data_dir_uses_xdg_data_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DASHLINK_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))

    result = storage.get_data_dir()

    assert result == (tmp_path / "xdg" / storage.APP_DIR_NAME).resolve()


def test_get_session_path_creates_data_dir(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.setenv("DASHLINK_DATA_DIR", str(tmp_path / "data-dir"))

    path = storage.get_session_path()

    expected = (tmp_path / "data-dir" / storage.DEFAULT_SESSION_FILENAME).resolve()
    assert path == expected
    assert expected.parent.exists()
    assert not expected.exists()
