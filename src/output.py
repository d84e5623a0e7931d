"""Rich console rendering and JSON export of the debate view."""

import json
import logging
from collections.abc import Sequence

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from src.models import DebateView, TransactionStatus, TxState

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)

_STATUS_STYLES = {
    TxState.PENDING: "bold blue",
    TxState.SUCCEEDED: "bold green",
    TxState.FAILED: "bold red",
}


def _truncate(text: str, max_len: int) -> str:
    return text if len(text) <= max_len else text[: max_len - 3] + "..."


def _joined_label(view: DebateView) -> str:
    if view.joined_side is None:
        return ""
    return f"You joined Side {'A' if view.joined_side == 0 else 'B'}"


def _topic_cell(view: DebateView) -> Text:
    cell = Text(_truncate(view.topic, 60) or "(untitled)")
    if view.description:
        cell.append("\n" + _truncate(view.description, 120), style="dim not bold")
    return cell


def render_view(views: Sequence[DebateView], show_ids: bool = False) -> Table:
    """Build a table of debates in view order."""
    table = Table(title="Micro-Debate Arena", expand=True)
    table.add_column("#", justify="right", style="dim", no_wrap=True)
    table.add_column("Topic", style="bold")
    table.add_column("Side A", justify="right", style="blue")
    table.add_column("Side B", justify="right", style="magenta")
    table.add_column("Participants", justify="right")
    table.add_column("You", style="green")
    if show_ids:
        table.add_column("Debate ID", style="dim", overflow="fold")

    for position, view in enumerate(views, start=1):
        row = [
            str(position),
            _topic_cell(view),
            f"{view.side_a_count} ({view.side_a_percent:.1f}%)",
            f"{view.side_b_count} ({view.side_b_percent:.1f}%)",
            str(view.total_participants),
            _joined_label(view),
        ]
        if show_ids:
            row.append(view.id)
        table.add_row(*row)

    if not views:
        table.caption = "No debates yet. Create the first one!"
    return table


def render_status(status: TransactionStatus) -> Text:
    if status.state is TxState.IDLE:
        return Text("")
    text = Text(status.message, style=_STATUS_STYLES[status.state])
    if status.state is TxState.FAILED and status.error:
        text.append(f" ({_truncate(status.error, 120)})", style="dim")
    return text


def render_dashboard(views: Sequence[DebateView], status: TransactionStatus, show_ids: bool = False) -> Group:
    """Combine the status line and the debate table for live display."""
    return Group(render_status(status), render_view(views, show_ids=show_ids))


def print_view(views: Sequence[DebateView], show_ids: bool = False) -> None:
    console.print(render_view(views, show_ids=show_ids))


def view_to_json(views: Sequence[DebateView]) -> str:
    """Serialize the view deterministically (stable key order, no whitespace variance)."""
    return json.dumps([v.to_dict() for v in views], sort_keys=True, indent=2)
