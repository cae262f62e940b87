"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich markup) or machines
(``--json``). Each operation may register a dedicated renderer; anything
else falls back to indented key-value pairs.
"""

from __future__ import annotations

import json as _json
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rich.markup import escape

from monoboot.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from monoboot.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """How a result should be rendered."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    no_color: bool = False


def _render_generic(console: Console, data: dict[str, Any]) -> None:
    for key, value in data.items():
        if isinstance(value, (dict, list)):
            value = _json.dumps(value, separators=(",", ":"))
        console.print(f"  [mono.key]{escape(str(key))}:[/] {escape(str(value))}")


def _render_ls(console: Console, data: dict[str, Any]) -> None:
    for item in data.get("items", []):
        console.print(
            f"  [mono.name]{escape(item['name'])}[/] "
            f"[mono.version]v{escape(item['version'])}[/] "
            f"[mono.path]{escape(item['location'])}[/]"
        )
    console.print(f"  {data.get('count', 0)} packages")


def _render_graph(console: Console, data: dict[str, Any]) -> None:
    if "items" not in data:
        console.print(f"  [mono.name]{escape(data['name'])}[/] v{escape(data['version'])}")
        console.print(f"  depends on: {escape(', '.join(data['dependencies']) or '-')}")
        console.print(f"  needed by:  {escape(', '.join(data['dependents']) or '-')}")
        return
    for item in data["items"]:
        deps = ", ".join(item["dependencies"]) or "-"
        console.print(f"  [mono.name]{escape(item['name'])}[/] -> {escape(deps)}")
    console.print(f"  {data['count']} packages, {data['edges']} edges")


def _render_bootstrap(console: Console, data: dict[str, Any]) -> None:
    if "message" in data:
        console.print(f"  {escape(data['message'])}")
    for number, wave in enumerate(data.get("waves", []), start=1):
        console.print(f"  [mono.key]wave {number}:[/] {escape(', '.join(wave))}")


def _render_audit(console: Console, data: dict[str, Any]) -> None:
    console.print(
        f"  {data.get('checked', 0)} dependencies checked, "
        f"{data.get('count', 0)} mismatched"
    )
    for entry in data.get("missing", []):
        console.print(
            f"  [mono.warning]missing[/] [mono.name]{escape(entry['dependency'])}[/]"
            f" in [mono.name]{escape(entry['package'])}[/]"
        )


_RENDERERS: dict[str, Callable[[Console, dict[str, Any]], None]] = {
    "ls": _render_ls,
    "graph": _render_graph,
    "bootstrap": _render_bootstrap,
    "audit": _render_audit,
}


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)

    console = create_console(no_color=settings.no_color)
    if result.ok:
        console.print(f"[mono.ok]OK:[/] [mono.op]{result.op}[/]")
        if result.data and not settings.quiet:
            _RENDERERS.get(result.op, _render_generic)(console, result.data)
    else:
        message = result.error.message if result.error else "Unknown error"
        console.print(f"[mono.error]ERROR:[/] [mono.op]{result.op}[/] - {escape(message)}")
        if settings.verbose and result.error and result.error.detail:
            _render_generic(console, result.error.detail)
    return get_output(console).rstrip("\n")
