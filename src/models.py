"""Pure dataclasses for the Debate Arena reconciliation pipeline. No logic, no deps."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

SIDE_A = 0
SIDE_B = 1
SIDES = (SIDE_A, SIDE_B)


@dataclass(frozen=True)
class LedgerEvent:
    event_type: str
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ObjectSnapshot:
    object_id: str
    fields: dict[str, Any] = field(default_factory=dict)
    is_move_object: bool = True


@dataclass(frozen=True)
class CreationEvent:
    debate_id: str


@dataclass(frozen=True)
class JoinEvent:
    debate_id: str
    participant: str
    side: int              # 0 = side A, 1 = side B


@dataclass(frozen=True)
class Debate:
    id: str
    topic: str
    description: str
    side_a_count: int
    side_b_count: int
    total_participants: int  # sourced from the object, not side_a + side_b


@dataclass(frozen=True)
class DebateView:
    id: str
    topic: str
    description: str
    side_a_count: int
    side_b_count: int
    total_participants: int
    side_a_percent: float
    side_b_percent: float
    joined_side: int | None = None

    @property
    def has_joined(self) -> bool:
        return self.joined_side is not None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class TxState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class Receipt:
    digest: str
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TransactionStatus:
    state: TxState = TxState.IDLE
    message: str = ""
    receipt: Receipt | None = None
    error: str | None = None


@dataclass(frozen=True)
class CreateDebateIntent:
    topic: str
    description: str


@dataclass(frozen=True)
class JoinDebateIntent:
    debate_id: str
    side: int
