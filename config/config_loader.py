"""Load settings.yaml into typed dataclasses. Applies environment overrides."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"

PACKAGE_ID_ENV = "DEBATE_ARENA_PACKAGE_ID"
RPC_URL_ENV = "DEBATE_ARENA_RPC_URL"


@dataclass
class LedgerConfig:
    rpc_url: str
    package_id: str
    module: str = "contract"
    network: str = "testnet"
    request_timeout_sec: float = 10.0

    def event_type(self, name: str) -> str:
        return f"{self.package_id}::{self.module}::{name}"

    @property
    def created_event_type(self) -> str:
        return self.event_type("DebateCreated")

    @property
    def joined_event_type(self) -> str:
        return self.event_type("JoinedDebate")


@dataclass
class PollingConfig:
    interval_sec: float = 10.0
    created_limit: int = 50   # DebateCreated is low volume
    joined_limit: int = 500   # JoinedDebate grows with every vote


@dataclass
class StatusConfig:
    display_sec: float = 3.0


@dataclass
class SubmitterConfig:
    cli_path: str = "iota"
    gas_budget: int = 10_000_000
    timeout_sec: float = 60.0


@dataclass
class AppConfig:
    ledger: LedgerConfig
    polling: PollingConfig = field(default_factory=PollingConfig)
    status: StatusConfig = field(default_factory=StatusConfig)
    submitter: SubmitterConfig = field(default_factory=SubmitterConfig)
    identity_env: str = "DEBATE_ARENA_ADDRESS"

    def acting_identity(self) -> str | None:
        """Return the acting address from the environment, or None when unset."""
        address = os.environ.get(self.identity_env, "").strip()
        return address or None


def load_config(settings_path: Path = _SETTINGS_PATH) -> AppConfig:
    """Load configuration from settings.yaml.

    Raises FileNotFoundError if settings file missing.
    Environment variables DEBATE_ARENA_PACKAGE_ID and DEBATE_ARENA_RPC_URL
    override the file values. An empty package id is logged, not raised:
    event queries will simply return nothing useful.
    """
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    ledger_raw = raw["ledger"]
    ledger = LedgerConfig(
        rpc_url=os.environ.get(RPC_URL_ENV, "").strip() or str(ledger_raw["rpc_url"]),
        package_id=os.environ.get(PACKAGE_ID_ENV, "").strip() or str(ledger_raw.get("package_id") or ""),
        module=str(ledger_raw.get("module", "contract")),
        network=str(ledger_raw.get("network", "testnet")),
        request_timeout_sec=float(ledger_raw.get("request_timeout_sec", 10.0)),
    )
    if not ledger.package_id:
        logger.warning("No package id configured, set %s in .env or ledger.package_id", PACKAGE_ID_ENV)

    polling_raw = raw.get("polling", {})
    polling = PollingConfig(
        interval_sec=float(polling_raw.get("interval_sec", 10.0)),
        created_limit=int(polling_raw.get("created_limit", 50)),
        joined_limit=int(polling_raw.get("joined_limit", 500)),
    )
    if polling.interval_sec <= 0:
        raise ValueError(f"polling.interval_sec must be positive, got {polling.interval_sec}")

    status_raw = raw.get("status", {})
    status = StatusConfig(display_sec=float(status_raw.get("display_sec", 3.0)))

    submitter_raw = raw.get("submitter", {})
    submitter = SubmitterConfig(
        cli_path=str(submitter_raw.get("cli_path", "iota")),
        gas_budget=int(submitter_raw.get("gas_budget", 10_000_000)),
        timeout_sec=float(submitter_raw.get("timeout_sec", 60.0)),
    )

    config = AppConfig(
        ledger=ledger,
        polling=polling,
        status=status,
        submitter=submitter,
        identity_env=str(raw.get("identity_env", "DEBATE_ARENA_ADDRESS")),
    )
    logger.info(
        "Loaded config: network=%s, poll every %.1fs, limits created=%d joined=%d",
        ledger.network,
        polling.interval_sec,
        polling.created_limit,
        polling.joined_limit,
    )
    return config
