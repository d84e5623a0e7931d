"""Ledger health check: ping the node before polling starts."""

import asyncio
import logging

from src.ledger.base import LedgerClient

logger = logging.getLogger(__name__)

_TIMEOUT_SEC = 15.0


async def run_health_check(client: LedgerClient, event_type: str) -> tuple[bool, str]:
    """Query a single event of `event_type`.

    Returns:
        (ok, error_message). error_message is "" when ok is True.
    """
    try:
        await asyncio.wait_for(client.query_events(event_type, 1), timeout=_TIMEOUT_SEC)
        return True, ""
    except asyncio.TimeoutError:
        return False, f"Ledger did not answer within {_TIMEOUT_SEC}s"
    except Exception as exc:
        return False, str(exc)
