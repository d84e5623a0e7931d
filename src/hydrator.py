"""Object hydration: parallel per-id fetches with failure isolation."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import replace
from typing import Any

from src.ledger.base import HydrationError, LedgerClient, LedgerError
from src.models import Debate, ObjectSnapshot

logger = logging.getLogger(__name__)


def _int_field(fields: dict[str, Any], key: str, debate_id: str) -> int:
    """Parse a u64 counter. Move serializes these as decimal strings; missing means 0."""
    raw = fields.get(key)
    if raw is None or raw == "":
        return 0
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise HydrationError(debate_id, f"field {key!r} is not an integer: {raw!r}") from exc
    if value < 0:
        raise HydrationError(debate_id, f"field {key!r} is negative: {value}")
    return value


def _str_field(fields: dict[str, Any], key: str) -> str:
    raw = fields.get(key)
    return "" if raw is None else str(raw)


def debate_from_snapshot(snapshot: ObjectSnapshot) -> Debate:
    """Build a Debate from an object snapshot.

    Raises:
        HydrationError: If the object is not a Move object or a counter is malformed.
    """
    if not snapshot.is_move_object:
        raise HydrationError(snapshot.object_id, "not a Move object")
    fields = snapshot.fields
    return Debate(
        id=snapshot.object_id,
        topic=_str_field(fields, "topic"),
        description=_str_field(fields, "description"),
        side_a_count=_int_field(fields, "side_a_count", snapshot.object_id),
        side_b_count=_int_field(fields, "side_b_count", snapshot.object_id),
        total_participants=_int_field(fields, "total_participants", snapshot.object_id),
    )


async def _hydrate_one(client: LedgerClient, debate_id: str) -> Debate | HydrationError:
    """Fetch and parse one debate.

    Never raises: returns HydrationError on any failure.
    """
    try:
        snapshot = await client.get_object(debate_id)
        debate = debate_from_snapshot(snapshot)
        # Nodes may echo the id in normalized form; keep the one the events refer to
        if debate.id != debate_id:
            debate = replace(debate, id=debate_id)
        return debate
    except HydrationError as exc:
        logger.warning("Debate %s is malformed: %s", debate_id, exc)
        return exc
    except LedgerError as exc:
        logger.warning("Failed to fetch debate %s: %s", debate_id, exc)
        return HydrationError(debate_id, str(exc))
    except Exception as exc:
        logger.warning("Unexpected failure hydrating debate %s: %s", debate_id, exc)
        return HydrationError(debate_id, f"Unexpected error: {exc}")


async def hydrate(client: LedgerClient, candidate_ids: Sequence[str]) -> list[Debate]:
    """Fetch every candidate concurrently and return those that hydrated.

    Output order is not meaningful; the reconciler orders by discovery.
    """
    if not candidate_ids:
        return []

    results = await asyncio.gather(*(_hydrate_one(client, debate_id) for debate_id in candidate_ids))

    debates = [r for r in results if isinstance(r, Debate)]
    failed = len(results) - len(debates)
    if failed:
        logger.info("Hydrated %d/%d debates (%d failed)", len(debates), len(results), failed)
    return debates
