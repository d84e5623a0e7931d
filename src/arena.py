"""DebateArena: the surface the presentation layer talks to."""

import logging
from collections.abc import Callable

from config.config_loader import AppConfig
from src.cycle import run_cycle
from src.ledger.base import LedgerClient, SubmissionError, TransactionSubmitter
from src.models import (
    SIDE_A,
    CreateDebateIntent,
    DebateView,
    JoinDebateIntent,
    TransactionStatus,
)
from src.poller import PollScheduler
from src.status import StatusTracker
from src.validation import validate_create, validate_join

logger = logging.getLogger(__name__)


def side_label(side: int) -> str:
    return "A" if side == SIDE_A else "B"


class DebateArena:
    """Combines the poll scheduler (reads) with the status tracker (writes).

    Writes never refresh the view directly: a successful transaction shows
    up once a later poll cycle picks up the ledger change.
    """

    def __init__(
        self,
        config: AppConfig,
        client: LedgerClient,
        submitter: TransactionSubmitter,
        acting_identity: str | None = None,
        on_view: Callable[[tuple[DebateView, ...]], None] | None = None,
        on_status: Callable[[TransactionStatus], None] | None = None,
    ) -> None:
        self._config = config
        self._client = client
        self._submitter = submitter
        self._identity = acting_identity
        if not acting_identity:
            logger.warning("No acting identity, joined sides will not be tracked")
        self._scheduler = PollScheduler(
            self._cycle,
            interval_sec=config.polling.interval_sec,
            on_cycle_complete=on_view,
        )
        self._tracker = StatusTracker(config.status.display_sec, on_change=on_status)

    @property
    def acting_identity(self) -> str | None:
        return self._identity

    @property
    def scheduler(self) -> PollScheduler:
        return self._scheduler

    async def _cycle(self) -> tuple[DebateView, ...]:
        return await run_cycle(self._client, self._config.ledger, self._config.polling, self._identity)

    async def start(self) -> None:
        await self._scheduler.start()

    async def stop(self) -> None:
        await self._scheduler.stop()
        self._tracker.close()

    async def __aenter__(self) -> "DebateArena":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    def get_view(self) -> tuple[DebateView, ...]:
        return self._scheduler.view

    def get_status(self) -> TransactionStatus:
        return self._tracker.status

    async def refresh(self) -> tuple[DebateView, ...]:
        return await self._scheduler.refresh()

    async def create_debate(self, topic: str, description: str) -> TransactionStatus:
        """Validate and submit a new debate.

        Raises:
            ValidationError: On blank/oversized fields or while another write is pending.
        """
        intent = validate_create(topic, description)
        return await self._submit(
            intent,
            pending="Creating debate...",
            succeeded="Debate created successfully!",
            failed="Failed to create debate",
        )

    async def join_debate(self, debate_id: str, side: int) -> TransactionStatus:
        """Validate and submit a join on side 0 (A) or 1 (B).

        Raises:
            ValidationError: On a bad id or side, or while another write is pending.
        """
        intent = validate_join(debate_id, side)
        label = side_label(intent.side)
        return await self._submit(
            intent,
            pending=f"Joining Side {label}...",
            succeeded=f"Joined Side {label}!",
            failed="Failed to join debate",
        )

    async def _submit(
        self,
        intent: CreateDebateIntent | JoinDebateIntent,
        pending: str,
        succeeded: str,
        failed: str,
    ) -> TransactionStatus:
        self._tracker.begin(pending)
        try:
            receipt = await self._submitter.submit(intent)
        except SubmissionError as exc:
            logger.error("%s: %s", failed, exc)
            self._tracker.fail(failed, error=str(exc))
        except Exception as exc:
            logger.error("%s (unexpected error): %s", failed, exc)
            self._tracker.fail(failed, error=f"Unexpected error: {exc}")
        else:
            logger.info("%s (%s)", succeeded, receipt.digest)
            self._tracker.succeed(succeeded, receipt=receipt)
        return self._tracker.status
