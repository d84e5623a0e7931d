"""Abstract ledger capabilities and the errors they raise."""

from abc import ABC, abstractmethod

from src.models import CreateDebateIntent, JoinDebateIntent, LedgerEvent, ObjectSnapshot, Receipt


class LedgerError(Exception):
    """Base class for failures reported by the ledger."""


class LedgerQueryError(LedgerError):
    """Raised when an event query or object fetch fails at the transport or RPC level."""


class ObjectNotFoundError(LedgerQueryError):
    """Raised when the requested object does not exist (or was deleted)."""

    def __init__(self, object_id: str, message: str = "object not found") -> None:
        self.object_id = object_id
        super().__init__(f"[{object_id}] {message}")


class HydrationError(LedgerError):
    """Raised when a single debate object cannot be turned into a Debate."""

    def __init__(self, debate_id: str, message: str) -> None:
        self.debate_id = debate_id
        super().__init__(f"[{debate_id}] {message}")


class SubmissionError(Exception):
    """Raised when a transaction could not be submitted or did not succeed."""


class LedgerClient(ABC):
    """Read-side capability of the ledger."""

    @abstractmethod
    async def query_events(self, event_type: str, limit: int) -> list[LedgerEvent]:
        """Return up to `limit` events of `event_type`, oldest first.

        Raises:
            LedgerQueryError: On transport or RPC failure.
        """
        ...

    @abstractmethod
    async def get_object(self, object_id: str) -> ObjectSnapshot:
        """Return the current snapshot of one object.

        Raises:
            ObjectNotFoundError: If the object does not exist.
            LedgerQueryError: On transport or RPC failure.
        """
        ...


class TransactionSubmitter(ABC):
    """Write-side capability: signs and executes a single intent."""

    @abstractmethod
    async def submit(self, intent: CreateDebateIntent | JoinDebateIntent) -> Receipt:
        """Submit an intent and wait for it to settle.

        Raises:
            SubmissionError: If the transaction failed for any reason.
        """
        ...
