"""Unit tests for GatewayConfig."""

from __future__ import annotations

from pathlib import Path

import pytest

from datapushgateway.config import GatewayConfig

pytestmark = pytest.mark.usefixtures("clean_gateway_env")


def test_defaults() -> None:
    """Unset variables fall back to the documented defaults."""
    config = GatewayConfig.from_env()

    assert config == GatewayConfig()
    assert config.data_dir == Path("data")
    assert config.taxonomy_path == Path("mdconfigs/sort.yaml")
    assert config.auth_file is None
    assert config.config_path is None
    assert config.sync_timeout_s == 120.0


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Every setting can be supplied through the environment."""
    monkeypatch.setenv("DATAPUSHGATEWAY_DATA_DIR", "/srv/reports")
    monkeypatch.setenv("DATAPUSHGATEWAY_TAXONOMY_PATH", "/etc/dpg/sort.yaml")
    monkeypatch.setenv("DATAPUSHGATEWAY_AUTH_FILE", "/etc/dpg/auth.yaml")
    monkeypatch.setenv("DATAPUSHGATEWAY_CONFIG", "/etc/dpg/config.yaml")
    monkeypatch.setenv("DATAPUSHGATEWAY_SYNC_TIMEOUT_S", "30")

    config = GatewayConfig.from_env()

    assert config == GatewayConfig(
        data_dir=Path("/srv/reports"),
        taxonomy_path=Path("/etc/dpg/sort.yaml"),
        auth_file=Path("/etc/dpg/auth.yaml"),
        config_path=Path("/etc/dpg/config.yaml"),
        sync_timeout_s=30.0,
    )


def test_blank_values_are_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    """Whitespace-only values behave like missing ones."""
    monkeypatch.setenv("DATAPUSHGATEWAY_AUTH_FILE", "  ")
    monkeypatch.setenv("DATAPUSHGATEWAY_SYNC_TIMEOUT_S", "")

    config = GatewayConfig.from_env()

    assert config.auth_file is None
    assert config.sync_timeout_s == 120.0


@pytest.mark.parametrize(
    ("raw", "message"),
    [("soon", "must be a number"), ("0", "must be positive"), ("-5", "positive")],
)
def test_invalid_timeout(
    monkeypatch: pytest.MonkeyPatch, raw: str, message: str
) -> None:
    """Bad timeouts name the offending variable."""
    monkeypatch.setenv("DATAPUSHGATEWAY_SYNC_TIMEOUT_S", raw)

    with pytest.raises(ValueError, match=message) as excinfo:
        GatewayConfig.from_env()

    assert "DATAPUSHGATEWAY_SYNC_TIMEOUT_S" in str(excinfo.value)
