"""Optimistic transaction status: Idle -> Pending -> Succeeded|Failed -> Idle."""

import asyncio
import logging
from collections.abc import Callable

from src.models import Receipt, TransactionStatus, TxState
from src.validation import ValidationError

logger = logging.getLogger(__name__)


class StatusTracker:
    """Tracks the lifecycle of the current user-initiated write.

    Terminal states are shown for `display_sec` and then fall back to Idle.
    The reset timer is armed by the terminal state and disarmed by the next
    submission, so an old timer can never clear a newer Pending status.
    The tracker never triggers a refresh of the debate view.
    """

    def __init__(
        self,
        display_sec: float,
        on_change: Callable[[TransactionStatus], None] | None = None,
    ) -> None:
        self._display_sec = display_sec
        self._on_change = on_change
        self._status = TransactionStatus()
        self._reset_handle: asyncio.TimerHandle | None = None

    @property
    def status(self) -> TransactionStatus:
        return self._status

    @property
    def state(self) -> TxState:
        return self._status.state

    def begin(self, message: str) -> None:
        """Enter Pending.

        Raises:
            ValidationError: If a transaction is already pending.
        """
        if self._status.state is TxState.PENDING:
            raise ValidationError("A transaction is already pending")
        self._cancel_reset()
        self._set(TransactionStatus(state=TxState.PENDING, message=message))

    def succeed(self, message: str, receipt: Receipt | None = None) -> None:
        self._settle(TransactionStatus(state=TxState.SUCCEEDED, message=message, receipt=receipt))

    def fail(self, message: str, error: str | None = None) -> None:
        self._settle(TransactionStatus(state=TxState.FAILED, message=message, error=error))

    def close(self) -> None:
        """Disarm the reset timer (used on teardown)."""
        self._cancel_reset()

    def _settle(self, status: TransactionStatus) -> None:
        if self._status.state is not TxState.PENDING:
            raise RuntimeError(f"Cannot move to {status.state.value} from {self._status.state.value}")
        self._set(status)
        loop = asyncio.get_running_loop()
        self._reset_handle = loop.call_later(self._display_sec, self._reset)

    def _reset(self) -> None:
        self._reset_handle = None
        self._set(TransactionStatus())

    def _cancel_reset(self) -> None:
        if self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None

    def _set(self, status: TransactionStatus) -> None:
        previous = self._status.state
        self._status = status
        logger.debug("Transaction status %s -> %s: %s", previous.value, status.state.value, status.message)
        if self._on_change:
            try:
                self._on_change(status)
            except Exception as exc:
                logger.warning("Status listener failed: %s", exc)
