"""One reconciliation cycle: index events, hydrate objects, reconcile the view."""

import logging

from config.config_loader import LedgerConfig, PollingConfig
from src.hydrator import hydrate
from src.indexer import build_index
from src.ledger.base import LedgerClient
from src.models import DebateView
from src.reconciler import reconcile

logger = logging.getLogger(__name__)


async def run_cycle(
    client: LedgerClient,
    ledger: LedgerConfig,
    polling: PollingConfig,
    acting_identity: str | None,
) -> tuple[DebateView, ...]:
    """Run Indexer -> Hydrator -> Reconciler once.

    Args:
        client: Ledger read capability.
        ledger: Supplies the DebateCreated / JoinedDebate event types.
        polling: Supplies the per-type event limits.
        acting_identity: Address whose joins are tracked; None tracks nobody.

    Returns:
        The new view. Empty when no debate has been created yet.

    Raises:
        LedgerQueryError: If either event query fails.
    """
    created = await client.query_events(ledger.created_event_type, polling.created_limit)
    if not created:
        logger.info("No DebateCreated events found")
        return ()

    joined = await client.query_events(ledger.joined_event_type, polling.joined_limit)
    candidates, participation = build_index(created, joined, acting_identity)
    logger.debug("Candidates: %s, participation: %s", candidates, participation)

    debates = await hydrate(client, candidates)
    view = reconcile(debates, participation, candidates)

    logger.info(
        "Cycle complete: %d/%d debates, joined %d",
        len(view),
        len(candidates),
        len(participation),
    )
    return view
