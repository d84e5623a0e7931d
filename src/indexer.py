"""Event indexing: candidate debate ids and the acting user's participation."""

import logging
from collections.abc import Iterable

from src.models import SIDES, CreationEvent, JoinEvent, LedgerEvent

logger = logging.getLogger(__name__)

ParticipationIndex = dict[str, int]


def parse_creation_event(event: LedgerEvent) -> CreationEvent | None:
    """Return a CreationEvent, or None when the payload has no usable debate_id."""
    debate_id = event.payload.get("debate_id")
    if not debate_id:
        return None
    return CreationEvent(debate_id=str(debate_id))


def parse_join_event(event: LedgerEvent) -> JoinEvent | None:
    """Return a JoinEvent, or None when any required field is missing or invalid.

    The side arrives as a number or a numeric string depending on the node;
    anything other than 0 or 1 is rejected.
    """
    payload = event.payload
    debate_id = payload.get("debate_id")
    participant = payload.get("participant")
    if not debate_id or not participant:
        return None
    try:
        side = int(payload.get("side"))
    except (TypeError, ValueError):
        return None
    if side not in SIDES:
        return None
    return JoinEvent(debate_id=str(debate_id), participant=str(participant), side=side)


def index_candidates(events: Iterable[LedgerEvent]) -> list[str]:
    """Return debate ids in discovery order, first occurrence kept."""
    seen: set[str] = set()
    candidates: list[str] = []
    dropped = 0
    for event in events:
        parsed = parse_creation_event(event)
        if parsed is None:
            dropped += 1
            continue
        if parsed.debate_id in seen:
            continue
        seen.add(parsed.debate_id)
        candidates.append(parsed.debate_id)
    if dropped:
        logger.debug("Dropped %d creation events without debate_id", dropped)
    return candidates


def index_participation(events: Iterable[LedgerEvent], acting_identity: str | None) -> ParticipationIndex:
    """Map debate id -> side for the acting identity only.

    Repeated joins on the same debate resolve to the last event in query
    order. With no acting identity the index is empty.
    """
    index: ParticipationIndex = {}
    if not acting_identity:
        return index
    for event in events:
        parsed = parse_join_event(event)
        if parsed is None or parsed.participant != acting_identity:
            continue
        index[parsed.debate_id] = parsed.side
    return index


def build_index(
    creation_events: Iterable[LedgerEvent],
    join_events: Iterable[LedgerEvent],
    acting_identity: str | None,
) -> tuple[list[str], ParticipationIndex]:
    """Return (candidate ids in discovery order, participation index)."""
    return index_candidates(creation_events), index_participation(join_events, acting_identity)
