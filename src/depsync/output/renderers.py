"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.text import Text

from depsync.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from depsync.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    renderer = _OP_RENDERERS.get(result.op, _render_generic)
    if result.ok or renderer is _render_install:
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if result.op == "cache_path":
        return str(result.data.get("path", ""))
    if result.op == "search" and "packages" in result.data:
        return "\n".join(pkg.get("name", "") for pkg in result.data["packages"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="dep.ok")
    op = Text(f"  {result.op}", style="dep.op")
    console.print(label, op)


def _field(console: Console, key: str, value: Any) -> None:
    line = Text(f"  {key}: ", style="dep.key")
    if isinstance(value, bool):
        line.append("yes" if value else "no", style="dep.yes" if value else "dep.no")
    elif key in ("name", "backend"):
        line.append(str(value), style="dep.name")
    elif key.endswith("path"):
        line.append(str(value), style="dep.path")
    else:
        line.append(str(value))
    console.print(line)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="dep.error"),
        Text(f"  {result.op}", style="dep.op"),
        Text(" — "),
        Text(msg),
    )

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


def _render_references_list(console: Console, references: list[str]) -> None:
    if not references:
        _field(console, "references", "none")
        return
    console.print(Text(f"  references ({len(references)}):", style="dep.key"))
    for ref in references:
        console.print(Text(f"    {ref}", style="dep.path"))


# ── Renderers ─────────────────────────────────────────────────────────


def _render_install(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Install reports partial success, so flags are shown even on error."""
    if result.ok:
        _status_line(console, result)
    else:
        _render_error(result, console, verbose=verbose)
    for key in ("name", "installed", "types_installed"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_references_list(console, result.data.get("references", []))


def _render_references(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "path", d.get("path", ""))
    _field(console, "written", d.get("written", False))
    _render_references_list(console, d.get("references", []))


def _render_uninstall(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "name", result.data.get("name", ""))
    removed = result.data.get("removed", [])
    _field(console, "removed", ", ".join(removed) if removed else "nothing")


def _render_search(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    if "output" in d:
        _field(console, "backend", d.get("backend", ""))
        console.print(Text(d["output"]))
        return
    packages = d.get("packages", [])
    if not packages:
        _field(console, "matches", "none")
        return
    for pkg in packages:
        line = Text(f"  {pkg.get('name', '')}", style="dep.name")
        line.append(f" {pkg.get('version', '')}")
        if pkg.get("description"):
            line.append(f"  {pkg['description']}", style="dim")
        console.print(line)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Any] = {
    "install": _render_install,
    "uninstall": _render_uninstall,
    "references": _render_references,
    "search": _render_search,
}
