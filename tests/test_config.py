"""Tests for config/config_loader.py."""

from pathlib import Path

import pytest
import yaml

from config.config_loader import AppConfig, LedgerConfig, load_config

_FULL = {
    "ledger": {
        "network": "devnet",
        "rpc_url": "https://node.example",
        "package_id": "0xabc",
        "module": "arena",
        "request_timeout_sec": 4,
    },
    "polling": {"interval_sec": 5, "created_limit": 20, "joined_limit": 200},
    "status": {"display_sec": 2},
    "submitter": {"cli_path": "/usr/local/bin/iota", "gas_budget": 1234, "timeout_sec": 30},
    "identity_env": "MY_ADDRESS",
}


@pytest.fixture
def full_settings(settings_file) -> Path:
    return settings_file(yaml.dump(_FULL))


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("DEBATE_ARENA_PACKAGE_ID", "DEBATE_ARENA_RPC_URL", "DEBATE_ARENA_ADDRESS", "MY_ADDRESS"):
        monkeypatch.delenv(var, raising=False)


def test_load_config_returns_app_config(full_settings):
    assert isinstance(load_config(full_settings), AppConfig)


def test_load_config_values(full_settings):
    config = load_config(full_settings)
    assert config.ledger.rpc_url == "https://node.example"
    assert config.ledger.module == "arena"
    assert config.ledger.request_timeout_sec == 4.0
    assert config.polling.interval_sec == 5.0
    assert (config.polling.created_limit, config.polling.joined_limit) == (20, 200)
    assert config.status.display_sec == 2.0
    assert config.submitter.gas_budget == 1234


def test_defaults_when_sections_missing(settings_file):
    config = load_config(settings_file(yaml.dump({"ledger": {"rpc_url": "https://node.example"}})))
    assert config.polling.interval_sec == 10.0
    assert config.polling.created_limit == 50
    assert config.polling.joined_limit == 500
    assert config.status.display_sec == 3.0
    assert config.ledger.module == "contract"
    assert config.identity_env == "DEBATE_ARENA_ADDRESS"


def test_event_types(full_settings):
    config = load_config(full_settings)
    assert config.ledger.created_event_type == "0xabc::arena::DebateCreated"
    assert config.ledger.joined_event_type == "0xabc::arena::JoinedDebate"


def test_env_overrides(full_settings, monkeypatch):
    monkeypatch.setenv("DEBATE_ARENA_PACKAGE_ID", "0xenv")
    monkeypatch.setenv("DEBATE_ARENA_RPC_URL", "http://localhost:9000")
    config = load_config(full_settings)
    assert config.ledger.package_id == "0xenv"
    assert config.ledger.rpc_url == "http://localhost:9000"


def test_missing_package_id_warns(settings_file, caplog):
    load_config(settings_file(yaml.dump({"ledger": {"rpc_url": "https://node.example"}})))
    assert any("No package id" in msg for msg in caplog.messages)


def test_acting_identity_from_env(full_settings, monkeypatch):
    config = load_config(full_settings)
    assert config.acting_identity() is None
    monkeypatch.setenv("MY_ADDRESS", "  0xme ")
    assert config.acting_identity() == "0xme"


def test_non_positive_interval_rejected(settings_file):
    settings = dict(_FULL, polling={"interval_sec": 0})
    with pytest.raises(ValueError, match="interval_sec"):
        load_config(settings_file(yaml.dump(settings)))


def test_load_config_missing_file():
    with pytest.raises(FileNotFoundError):
        load_config(Path("/nonexistent/settings.yaml"))


def test_bundled_settings_load():
    config = load_config()
    assert isinstance(config.ledger, LedgerConfig)
    assert config.polling.created_limit < config.polling.joined_limit
