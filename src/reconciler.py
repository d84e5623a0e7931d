"""View reconciliation: merge hydrated debates with participation into the published view."""

from collections.abc import Iterable, Mapping, Sequence

from src.models import Debate, DebateView


def side_percentages(side_a_count: int, side_b_count: int) -> tuple[float, float]:
    """Return (side_a_percent, side_b_percent), always summing to 100.

    An empty debate is shown as an even split.
    """
    total = side_a_count + side_b_count
    side_a_percent = 100.0 * side_a_count / total if total > 0 else 50.0
    return side_a_percent, 100.0 - side_a_percent


def to_view(debate: Debate, joined_side: int | None) -> DebateView:
    side_a_percent, side_b_percent = side_percentages(debate.side_a_count, debate.side_b_count)
    return DebateView(
        id=debate.id,
        topic=debate.topic,
        description=debate.description,
        side_a_count=debate.side_a_count,
        side_b_count=debate.side_b_count,
        total_participants=debate.total_participants,
        side_a_percent=side_a_percent,
        side_b_percent=side_b_percent,
        joined_side=joined_side,
    )


def reconcile(
    debates: Iterable[Debate],
    participation: Mapping[str, int],
    discovery_order: Sequence[str],
) -> tuple[DebateView, ...]:
    """Build the ordered view.

    Args:
        debates: Hydrated debates, in any order.
        participation: debate id -> side joined by the acting identity.
        discovery_order: Candidate ids in creation-event order.

    Returns:
        Views sorted by total_participants descending; ties keep discovery
        order. Debates absent from discovery_order are ignored.
    """
    by_id = {d.id: d for d in debates}
    discovered = [by_id[debate_id] for debate_id in dict.fromkeys(discovery_order) if debate_id in by_id]
    # sorted() is stable, so equal totals stay in discovery order
    ordered = sorted(discovered, key=lambda d: d.total_participants, reverse=True)
    return tuple(to_view(d, participation.get(d.id)) for d in ordered)
