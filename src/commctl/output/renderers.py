"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from commctl.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from commctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    # Lists print IDs only, single entities print their ID
    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if "id" in item)
    if "id" in result.data:
        return str(result.data["id"])

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="comm.ok")
    op = Text(f"  {result.op}", style="comm.op")
    console.print(Text.assemble(label, op))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="comm.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="comm.id")
    elif key == "name":
        v = Text(str(value), style="comm.name")
    elif key == "price":
        v = Text(str(value), style="comm.price")
    elif key == "status":
        v = Text(str(value), style=style_for_status(str(value)))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations")
    if annotations:
        line += "  (" + ", ".join(f"{ak}={av}" for ak, av in annotations.items()) + ")"

    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _entity_table(items: list[dict[str, Any]], columns: tuple[str, ...]) -> Table:
    """Build a Rich Table with one row per entity dict."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    for col in columns:
        if col == "id" or col.endswith("_id"):
            table.add_column(col.replace("_", " ").title(), style="comm.id", no_wrap=True)
        elif col == "price":
            table.add_column("Price", style="comm.price", justify="right")
        else:
            table.add_column(col.replace("_", " ").title())

    for item in items:
        row: list[Text | str] = []
        for col in columns:
            value = str(item.get(col, ""))
            if col == "status":
                row.append(Text(value, style=style_for_status(value)))
            else:
                row.append(value)
        table.add_row(*row)

    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="comm.error")
    op = Text(f"  {result.op}", style="comm.op")
    console.print(Text.assemble(label, op, " — ", msg))

    if verbose and err:
        console.print(Text(f"  code: {err.code}", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Entity renderers ──────────────────────────────────────────────────

_ARTIST_COLUMNS = ("id", "name", "price", "revision_budget")
_CUSTOMER_COLUMNS = ("id", "name")
_COMMISSION_COLUMNS = (
    "id",
    "status",
    "artist_id",
    "customer_id",
    "price",
    "remaining_revisions",
)


def _render_entity(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a single artist, customer, or commission as fields."""
    _status_line(console, result)
    for key, value in result.data.items():
        if key == "artwork_url" and not value:
            continue
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


def _table_renderer(columns: tuple[str, ...], noun: str) -> Any:
    def render(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
        items = result.data.get("items", [])
        cols = (*columns, "artwork_url") if verbose and noun == "commissions" else columns
        if items:
            console.print(_entity_table(items, cols))
        console.print(f"\n{result.data.get('count', len(items))} {noun}")
        if verbose:
            _render_meta(console, result)

    return render


# ── Check renderers ───────────────────────────────────────────────────


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render check results with issues grouped by category."""
    issues = result.data.get("issues", [])
    count = result.data.get("count", len(issues))

    if count == 0:
        console.print("[comm.ok]OK[/comm.ok]  No issues found.")
    else:
        severity_styles = {"error": "comm.error", "warning": "comm.warning"}

        by_category: dict[str, list[dict[str, Any]]] = {}
        for issue in issues:
            cat = str(issue.get("category", "unknown"))
            by_category.setdefault(cat, []).append(issue)

        for cat, cat_issues in by_category.items():
            console.print(f"\n[bold]{cat}[/bold]")
            for issue in cat_issues:
                sev = str(issue.get("severity", "warning"))
                style = severity_styles.get(sev, "")
                prefix = f"[{style}]{sev}[/{style}]" if style else sev
                entity_id = issue.get("entity_id")
                eid = f" \\[{entity_id}]" if entity_id else ""
                console.print(f"  {prefix}{eid}: {issue.get('message', '')}")

        errors = sum(1 for i in issues if i.get("severity") == "error")
        console.print(f"\n{errors} errors, {count - errors} warnings")

    if verbose:
        counts = result.data.get("counts", {})
        for key, value in counts.items():
            _field(console, key, value)
        _render_meta(console, result)


def _render_rollback(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("backup_file", "restored_from"):
        if key in result.data:
            _field(console, key, result.data[key])


# ── Init renderers ───────────────────────────────────────────────────


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render init_market results with market details and file manifest."""
    _status_line(console, result)
    d = result.data
    for key in ("market_name", "currency", "path"):
        if key in d:
            _field(console, key, d[key])
    files = d.get("files_created", [])
    _field(console, "files_created", len(files))
    if verbose:
        for f in files:
            console.print(f"    {f}")
        _render_meta(console, result)


# ── Upgrade renderers ────────────────────────────────────────────────


def _render_upgrade(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render upgrade/migration results."""
    _status_line(console, result)
    d = result.data
    for key in (
        "applied_count",
        "pending_count",
        "current",
        "head",
        "backup_path",
        "message",
    ):
        if key in d:
            _field(console, key, d[key])
    if verbose and d.get("pending"):
        console.print()
        for p in d["pending"]:
            console.print(f"  {p['revision']}: {p['description']}")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Registry
    "create_artist": _render_entity,
    "read_artist": _render_entity,
    "read_artists": _table_renderer(_ARTIST_COLUMNS, "artists"),
    "create_customer": _render_entity,
    "read_customer": _render_entity,
    "read_customers": _table_renderer(_CUSTOMER_COLUMNS, "customers"),
    # Commissions
    "create_commission": _render_entity,
    "read_commission": _render_entity,
    "read_commissions": _table_renderer(_COMMISSION_COLUMNS, "commissions"),
    "accept_commission": _render_entity,
    "reject_commission": _render_entity,
    "submit_artwork": _render_entity,
    "request_revision": _render_entity,
    "approve_commission": _render_entity,
    "cancel_commission": _render_entity,
    # Check
    "check": _render_check,
    "rollback": _render_rollback,
    # Init
    "init_market": _render_init,
    # Upgrade
    "upgrade": _render_upgrade,
}
