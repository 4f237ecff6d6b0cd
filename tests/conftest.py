"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ

import pytest

from tests.helpers.fakes import FakeSyncTool, SubprocessCapture

if typ.TYPE_CHECKING:
    from pathlib import Path

SAMPLE_TAXONOMY = """\
file_configs:
  - file_name: health
    directory: "%INSTANCE%/checks"
    monitor_tags:
      - cpu
      - memory
  - file_name: storage
    directory: shared
    monitor_tags:
      - disk
      - memory
"""


@pytest.fixture
def taxonomy_path(tmp_path: Path) -> Path:
    """Write the sample taxonomy and return its path."""
    path = tmp_path / "mdconfigs" / "sort.yaml"
    path.parent.mkdir(parents=True)
    path.write_text(SAMPLE_TAXONOMY, encoding="utf-8")
    return path


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Return an empty workspace root."""
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def fake_tool() -> FakeSyncTool:
    """Return a SyncTool double that reports local changes."""
    return FakeSyncTool()


@pytest.fixture
def subprocess_capture(monkeypatch: pytest.MonkeyPatch) -> SubprocessCapture:
    """Replace ``subprocess.run`` with a recorder returning canned results."""
    capture = SubprocessCapture()
    monkeypatch.setattr("subprocess.run", capture.run)
    return capture


@pytest.fixture
def clean_gateway_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove every ``DATAPUSHGATEWAY_*`` variable for the test."""
    for name in (
        "DATAPUSHGATEWAY_DATA_DIR",
        "DATAPUSHGATEWAY_TAXONOMY_PATH",
        "DATAPUSHGATEWAY_AUTH_FILE",
        "DATAPUSHGATEWAY_CONFIG",
        "DATAPUSHGATEWAY_SYNC_TIMEOUT_S",
        "DATAPUSHGATEWAY_HOST",
        "DATAPUSHGATEWAY_PORT",
        "DATAPUSHGATEWAY_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
