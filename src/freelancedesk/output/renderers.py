"""Human-readable output for each dashboard and project operation.

:func:`render_result` looks the renderer up by ``result.op``; ops without
one get a plain key-value listing.  Every renderer prints into a
StringIO-backed Console and the text is returned as a string.  Relative
times are computed against the snapshot time in ``result.meta``, never
the wall clock.
"""

from __future__ import annotations

import json as _json
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from freelancedesk.output.console import (
    create_console,
    get_output,
    style_for_insight,
    style_for_priority,
)
from freelancedesk.output.humanize import due_text, time_ago
from freelancedesk.services.result import SOURCE_FETCH

if TYPE_CHECKING:
    from rich.console import Console

    from freelancedesk.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Styled text for *result*; ANSI codes are dropped when not on a TTY."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """``--quiet`` output: one id per line, or a one-line status."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    if result.op == "project_board":
        ids = [p["id"] for lane in result.data.get("lanes", []) for p in lane.get("projects", [])]
        return "\n".join(ids)
    items = result.data.get("items")
    if isinstance(items, list):
        ids = [str(item["id"]) for item in items if isinstance(item, dict) and "id" in item]
        return "\n".join(ids)
    if "id" in result.data:
        return str(result.data["id"])

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _now(result: ServiceResult) -> datetime:
    taken_at = (result.meta or {}).get("taken_at")
    if taken_at:
        return datetime.fromisoformat(taken_at)
    return datetime.now(UTC)


def _money(value: Any) -> str:
    return f"${float(value or 0):,.2f}"


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    console.print(Text.assemble(("OK", "desk.ok"), (f"  {result.op}", "desk.op")))


def _heading(console: Console, title: str) -> None:
    console.print(Text(title, style="desk.title"))


def _field(console: Console, key: str, value: Any) -> None:
    line = Text()
    line.append(f"  {key}: ", style="desk.key")
    if key == "id" or key.endswith("_id"):
        line.append(str(value), style="desk.id")
    elif key in ("name", "title"):
        line.append(str(value), style="desk.title")
    else:
        line.append(str(value))
    console.print(line)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the telemetry span tree."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(Text(f"    {k}: {v}"))


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """One line per span, slow ones highlighted, children indented below."""
    duration = span_data.get("duration_ms", 0.0)
    timing = "bold red" if duration > 1000 else "yellow" if duration > 100 else "dim"

    line = Text(" " * indent)
    line.append(f"{duration:>8.2f}ms", style=timing)
    line.append(f"  {span_data.get('name', '?')}")
    annotations = span_data.get("annotations") or {}
    if annotations:
        line.append("  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")")
    if span_data.get("error"):
        line.append(f"  !{span_data['error']}", style="desk.error")
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _table(*columns: str) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    for column in columns:
        table.add_column(column)
    return table


def _bar(relative: float, width: int = 20) -> str:
    filled = round(max(0.0, min(relative, 100.0)) / 100 * width)
    return "█" * filled + "·" * (width - filled)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text.assemble(("ERROR", "desk.error"), (f"  {result.op}", "desk.op"), f": {msg}"))

    if err and err.detail and (verbose or err.code == SOURCE_FETCH):
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Dashboard renderers ───────────────────────────────────────────────


def _stats_lines(console: Console, data: dict[str, Any]) -> None:
    _field(console, "total_clients", data.get("total_clients", 0))
    _field(console, "active_projects", data.get("active_projects", 0))
    _field(console, "pending_invoices", data.get("pending_invoices", 0))
    _field(console, "upcoming_meetings", data.get("upcoming_meetings", 0))


def _render_stats(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _stats_lines(console, result.data)


def _activity_table(items: list[dict[str, Any]], now: datetime) -> Table:
    table = _table("When", "", "Event", "Details")
    for item in items:
        table.add_row(
            Text(time_ago(item["date"], now), style="desk.muted"),
            item.get("icon", ""),
            Text(str(item.get("title", "")), style="desk.title"),
            str(item.get("description", "")),
        )
    return table


def _render_activity(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print("No recent activity")
        return
    console.print(_activity_table(items, _now(result)))


def _task_table(items: list[dict[str, Any]], now: datetime, *, verbose: bool = False) -> Table:
    columns = ["Priority", "Task", "Details", "Due"]
    if verbose:
        columns.insert(0, "ID")
    table = _table(*columns)
    for item in items:
        priority = str(item.get("priority", "low"))
        row: list[Any] = [
            Text(priority, style=style_for_priority(priority)),
            Text(str(item.get("title", "")), style="desk.title"),
            str(item.get("description", "")),
            due_text(item["due_date"], now),
        ]
        if verbose:
            row.insert(0, Text(str(item.get("id", "")), style="desk.id"))
        table.add_row(*row)
    return table


def _render_tasks(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print("All caught up: no pending tasks")
        return
    console.print(_task_table(items, _now(result), verbose=verbose))
    console.print(f"\n{result.data.get('count', len(items))} tasks")


def _financial_lines(console: Console, data: dict[str, Any]) -> None:
    _field(console, "monthly_income", _money(data.get("monthly_income")))
    _field(console, "pending_payments", _money(data.get("pending_payments")))
    _field(console, "recurring_revenue", _money(data.get("recurring_revenue")))

    clients = data.get("revenue_by_client", [])
    if clients:
        table = _table("Client", "Invoices", "Revenue")
        for entry in clients:
            table.add_row(entry["name"], str(entry["invoices"]), _money(entry["revenue"]))
        console.print()
        console.print(table)

    platforms = data.get("revenue_by_platform", [])
    if platforms:
        table = _table("Platform", "Revenue")
        for entry in platforms:
            table.add_row(entry["platform"], _money(entry["revenue"]))
        console.print()
        console.print(table)


def _render_financial(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _financial_lines(console, result.data)


def _platform_lines(console: Console, data: dict[str, Any]) -> None:
    _field(console, "total_clients", data.get("total_clients", 0))
    _field(
        console,
        "active_clients",
        f"{data.get('active_clients', 0)} ({data.get('active_percentage', 0)}%)",
    )
    _field(
        console,
        "inactive_clients",
        f"{data.get('inactive_clients', 0)} ({data.get('inactive_percentage', 0)}%)",
    )
    _field(console, "platform_count", data.get("platform_count", 0))

    distribution = data.get("distribution", [])
    if distribution:
        table = _table("Platform", "Clients", "Share")
        for entry in distribution:
            table.add_row(entry["platform"], str(entry["count"]), f"{entry['percentage']}%")
        console.print()
        console.print(table)

    revenue = data.get("revenue", [])
    if revenue:
        table = _table("Platform", "Revenue", "Share")
        for entry in revenue:
            table.add_row(entry["platform"], _money(entry["revenue"]), f"{entry['share']}%")
        console.print()
        console.print(table)


def _render_platforms(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _platform_lines(console, result.data)


def _insight_lines(console: Console, items: list[dict[str, Any]]) -> None:
    for item in items:
        style = style_for_insight(str(item.get("type", "")))
        console.print(
            Text(f"{item.get('icon', '')} ", style=style),
            Text(str(item.get("title", "")), style="desk.title"),
            end="",
        )
        console.print()
        console.print(f"   {item.get('message', '')}")
        if item.get("action"):
            console.print(Text(f"   → {item['action']}", style="desk.muted"))


def _render_insights(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print("No insights for now")
        return
    _insight_lines(console, items)
    total = result.data.get("total", len(items))
    if total > len(items):
        console.print(Text(f"\n{len(items)} of {total} insights shown", style="desk.muted"))


def _render_agenda(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    _heading(console, f"{data.get('label', '')}: {data.get('meeting_count', 0)} meetings")
    days = data.get("days", {})
    for day in sorted(days, key=int):
        for entry in days[day]:
            when = datetime.fromisoformat(entry["date"]).astimezone(UTC)
            line = f"  {when:%a %d}  {when:%H:%M}  {entry['client']}"
            if entry.get("recurring") and entry.get("recurring_type"):
                line += f" ({entry['recurring_type']})"
            console.print(line)
            if verbose and entry.get("notes"):
                console.print(Text(f"           {entry['notes']}", style="desk.muted"))

    upcoming = data.get("upcoming", [])
    if upcoming:
        console.print()
        _heading(console, "Upcoming")
        for entry in upcoming[:5]:
            when = datetime.fromisoformat(entry["date"]).astimezone(UTC)
            console.print(f"  {when:%Y-%m-%d %H:%M}  {entry['client']}")


def _render_summary(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    now = _now(result)

    _heading(console, "Overview")
    _stats_lines(console, data.get("stats", {}))

    tasks = data.get("tasks", {}).get("items", [])
    console.print()
    _heading(console, f"Tasks ({len(tasks)})")
    if tasks:
        console.print(_task_table(tasks, now, verbose=verbose))

    console.print()
    _heading(console, "Financial")
    _financial_lines(console, data.get("financial", {}))

    console.print()
    _heading(console, "Platforms")
    _platform_lines(console, data.get("platforms", {}))

    insights = data.get("insights", {}).get("items", [])
    if insights:
        console.print()
        _heading(console, "Insights")
        _insight_lines(console, insights)

    activity = data.get("activity", {}).get("items", [])
    if activity:
        console.print()
        _heading(console, "Recent activity")
        console.print(_activity_table(activity, now))


# ── Project renderers ─────────────────────────────────────────────────


def _leaderboard(title: str, entries: list[dict[str, Any]]) -> Table:
    table = _table(title, "Projects", "Revenue", "Share")
    for entry in entries:
        table.add_row(
            entry["name"], str(entry["count"]), _money(entry["revenue"]), f"{entry['share']}%"
        )
    return table


def _render_analytics(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "total_projects", d.get("total_projects", 0))
    _field(console, "active_projects", d.get("active_projects", 0))
    _field(console, "completed_projects", d.get("completed_projects", 0))
    _field(console, "overdue_projects", d.get("overdue_projects", 0))
    _field(console, "success_rate", f"{d.get('success_rate', 0)}%")
    _field(console, "total_revenue", _money(d.get("total_revenue")))
    _field(console, "pending_revenue", _money(d.get("pending_revenue")))
    _field(console, "partial_revenue", _money(d.get("partial_revenue")))
    _field(console, "avg_duration_days", d.get("avg_duration_days", 0))

    if d.get("top_platforms"):
        console.print()
        console.print(_leaderboard("Platform", d["top_platforms"]))
    if d.get("top_clients"):
        console.print()
        console.print(_leaderboard("Client", d["top_clients"]))

    trend = d.get("monthly_revenue", [])
    if trend:
        console.print()
        _heading(console, "Monthly revenue")
        for month in trend:
            console.print(
                f"  {month['label']:<9} {_bar(month['relative'])} {_money(month['revenue'])}"
            )

    insights = d.get("insights", [])
    if insights:
        console.print()
        for item in insights:
            style = style_for_insight(str(item.get("type", "")))
            console.print(Text(str(item["title"]), style=style or "desk.title"))
            console.print(f"   {item['message']}")


def _render_board(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    for index, lane in enumerate(result.data.get("lanes", [])):
        if index:
            console.print()
        _heading(console, f"{lane['title']} ({lane['count']})")
        if not lane["projects"]:
            console.print(Text("  (empty)", style="desk.muted"))
            continue
        for project in lane["projects"]:
            line = Text("  ")
            line.append(str(project["id"]), style="desk.id")
            line.append(f"  {project['name']}  {project['client']}  {project['progress']}%")
            console.print(line)
    excluded = result.data.get("excluded", 0)
    if excluded:
        console.print(Text(f"\n{excluded} cancelled not shown", style="desk.muted"))


def _deadline(item: dict[str, Any], now: datetime) -> str:
    if item["status"] == "Active":
        return due_text(item["deadline"], now)
    return str(item["deadline"])[:10]


def _render_project_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    now = _now(result)
    table = _table(
        "ID", "Project", "Client", "Platform", "Status", "Progress", "Budget", "Payment", "Due"
    )
    for item in items:
        table.add_row(
            Text(str(item["id"]), style="desk.id"),
            Text(str(item["name"]), style="desk.title"),
            str(item["client"]),
            str(item["platform"]),
            str(item["status"]),
            f"{item['progress']}%",
            _money(item["budget"]),
            str(item["payment_status"]),
            _deadline(item, now),
        )
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} projects")


def _render_move(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "id", d["id"])
    _field(console, "name", d["name"])
    _field(console, "lane", f"{d.get('from_lane') or '-'} -> {d['to_lane']}")
    _field(console, "status", d["status"])
    _field(console, "progress", f"{d['progress']}%")
    if d.get("dry_run"):
        console.print(Text("  dry run: no update sent", style="desk.warning"))


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Key-value listing for ops without a dedicated renderer."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Dashboard
    "dashboard_stats": _render_stats,
    "dashboard_activity": _render_activity,
    "dashboard_tasks": _render_tasks,
    "dashboard_financial": _render_financial,
    "dashboard_platforms": _render_platforms,
    "dashboard_insights": _render_insights,
    "dashboard_agenda": _render_agenda,
    "dashboard_summary": _render_summary,
    # Projects
    "project_analytics": _render_analytics,
    "project_board": _render_board,
    "list_projects": _render_project_list,
    "move_project": _render_move,
}
