"""Shared pytest fixtures."""

import asyncio
from pathlib import Path

import pytest

from config.config_loader import AppConfig, LedgerConfig, PollingConfig, StatusConfig, SubmitterConfig
from src.ledger.base import LedgerClient, LedgerQueryError, ObjectNotFoundError, SubmissionError, TransactionSubmitter
from src.models import CreateDebateIntent, JoinDebateIntent, LedgerEvent, ObjectSnapshot, Receipt

PACKAGE_ID = "0xpkg"
CREATED = f"{PACKAGE_ID}::contract::DebateCreated"
JOINED = f"{PACKAGE_ID}::contract::JoinedDebate"
USER = "0xuser"
OTHER = "0xother"


def created(debate_id: str) -> LedgerEvent:
    return LedgerEvent(event_type=CREATED, payload={"debate_id": debate_id, "creator": OTHER})


def joined(debate_id: str, participant: str, side: int) -> LedgerEvent:
    return LedgerEvent(event_type=JOINED, payload={"debate_id": debate_id, "participant": participant, "side": side})


def debate_fields(topic: str = "Topic", a: int = 0, b: int = 0, total: int | None = None) -> dict:
    """Fields as a node returns them: u64 counters serialized as strings."""
    return {
        "topic": topic,
        "description": f"About {topic}",
        "side_a_count": str(a),
        "side_b_count": str(b),
        "total_participants": str(a + b if total is None else total),
    }


class MockLedger(LedgerClient):
    """In-memory ledger. Failures are injected per event type or per object id."""

    def __init__(self) -> None:
        self.events: dict[str, list[LedgerEvent]] = {CREATED: [], JOINED: []}
        self.objects: dict[str, dict] = {}
        self.failing_queries: set[str] = set()
        self.failing_objects: set[str] = set()
        self.query_calls: list[tuple[str, int]] = []
        self.object_calls: list[str] = []

    def add_debate(self, debate_id: str, **fields) -> None:
        self.events[CREATED].append(created(debate_id))
        self.objects[debate_id] = debate_fields(**fields)

    async def query_events(self, event_type: str, limit: int) -> list[LedgerEvent]:
        self.query_calls.append((event_type, limit))
        if event_type in self.failing_queries:
            raise LedgerQueryError(f"query {event_type} failed")
        return list(self.events.get(event_type, []))[:limit]

    async def get_object(self, object_id: str) -> ObjectSnapshot:
        self.object_calls.append(object_id)
        if object_id in self.failing_objects:
            raise LedgerQueryError(f"fetch {object_id} failed")
        if object_id not in self.objects:
            raise ObjectNotFoundError(object_id)
        return ObjectSnapshot(object_id=object_id, fields=dict(self.objects[object_id]))


class MockSubmitter(TransactionSubmitter):
    """Records intents; succeeds unless `error` is set. `gate` holds the call open."""

    def __init__(self) -> None:
        self.intents: list[CreateDebateIntent | JoinDebateIntent] = []
        self.error: Exception | None = None
        self.gate: asyncio.Event | None = None

    async def submit(self, intent: CreateDebateIntent | JoinDebateIntent) -> Receipt:
        self.intents.append(intent)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return Receipt(digest=f"digest-{len(self.intents)}")


@pytest.fixture
def ledger_config() -> LedgerConfig:
    return LedgerConfig(rpc_url="http://localhost:9000", package_id=PACKAGE_ID)


@pytest.fixture
def app_config(ledger_config: LedgerConfig) -> AppConfig:
    return AppConfig(
        ledger=ledger_config,
        polling=PollingConfig(interval_sec=0.05, created_limit=50, joined_limit=500),
        status=StatusConfig(display_sec=0.05),
        submitter=SubmitterConfig(cli_path="iota", gas_budget=1000, timeout_sec=5),
    )


@pytest.fixture
def mock_ledger() -> MockLedger:
    return MockLedger()


@pytest.fixture
def mock_submitter() -> MockSubmitter:
    return MockSubmitter()


@pytest.fixture
def failing_submitter() -> MockSubmitter:
    submitter = MockSubmitter()
    submitter.error = SubmissionError("insufficient gas")
    return submitter


@pytest.fixture
def settings_file(tmp_path: Path):
    """Factory writing a settings.yaml with the given text."""

    def _write(text: str) -> Path:
        path = tmp_path / "settings.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    return _write
