from __future__ import annotations

from typing import Dict, Optional, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import IDLE_COLOR, PROCESS_COLORS, GanttEntry


def render_gantt(entries: Sequence[GanttEntry]) -> str:
    """
    Plain-text Gantt chart: '=' for busy ticks, '.' for idle ticks.
    """
    if not entries:
        return "(no execution)"

    line = "|"
    labels = ""
    time_marks = "0"

    for entry in entries:
        width = max(1, entry.duration)
        if entry.is_idle:
            line += "." * width
            labels += " " * width
        else:
            line += "=" * width
            labels += entry.occupant[:width].ljust(width)
        time_marks += f"{entry.end_time:>3}"

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            labels,
            time_marks,
        ]
    )


def build_rich_gantt(
    entries: Sequence[GanttEntry],
    colors: Optional[Dict[str, str]] = None,
) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.

    ``colors`` maps process id to a Rich color; ids not in it get one from the
    default palette in order of first appearance.
    """
    if not entries:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    id_to_color: Dict[str, str] = dict(colors or {})

    def occupant_color(occupant: str) -> str:
        if occupant not in id_to_color:
            idx = len(id_to_color) % len(PROCESS_COLORS)
            id_to_color[occupant] = PROCESS_COLORS[idx]
        return id_to_color[occupant]

    timeline = Text()
    labels = Text()
    time_marks = "0"

    for entry in entries:
        width = max(1, entry.duration)
        if entry.is_idle:
            timeline.append("." * width, style=f"dim {IDLE_COLOR}")
            labels.append(" " * width)
        else:
            timeline.append(" " * width, style=f"on {occupant_color(entry.occupant)}")
            labels.append(entry.occupant[:width].ljust(width), style="bold")

        time_marks += f"{entry.end_time:>3}"

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
