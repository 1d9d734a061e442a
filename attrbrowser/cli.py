"""
attrbrowser Command Line Interface (CLI)
========================================

This file provides the interactive terminal program you run like:

    python -m attrbrowser.cli --source data/custom_attributes.json

The REPL commands stand in for the page controls: `search` is the search box,
`effect` is the effect filter, `go`/`open`/`list`/`back`/`forward` move the
location fragment. Each command feeds the Navigator, which re-evaluates the
active view.

One-shot mode renders a single view to an HTML page and exits:

    python -m attrbrowser.cli --html out.html --fragment "#/attr/42"

The CLI DOES NOT modify the JSON document. It loads it once and works on the
in-memory records.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence
import argparse
import logging
import shlex
import sys
from .loader import DEFAULT_SOURCE, DEFAULT_TIMEOUT, DataLoadFailure, load_attributes
from .navigation import DEBOUNCE_SECONDS, DEFAULT_FRAGMENT, DETAIL, DETAIL_PREFIX, Navigator, ViewState, evaluate_view
from .indices import ALL, build_indices
from .engine import EXPORT_FORMATS, export_records
from .render import load_error_message, raw_json, render_page
from .models import AttributeRecord

logger = logging.getLogger("attrbrowser.cli")

HELP = """
Commands:
  help
  stats
  show [n]

  search <text>                    (empty text clears the search)
  effect <value>                   (example: effect "all")
  options                          (effect values and their counts)

  go "<fragment>"                  (example: go "#/attr/42")
  open <id>
  list
  back
  forward

  html "<out.html>"
  export <csv|json|xlsx> "<path>"
  report "<path.docx>" [current|full]
  quit
"""


@dataclass
class Session:
    """REPL state: the navigator plus what the report needs to cite."""
    nav: Navigator
    source: str
    # Stores state-changing commands (for reproducibility in reports)
    command_log: List[str] = field(default_factory=list)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(prog="attrbrowser", description="Browse custom attribute records.")
    ap.add_argument("--source", default=DEFAULT_SOURCE, help="Path or http(s) URL of the attributes JSON")
    ap.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="HTTP timeout in seconds")
    ap.add_argument("--debounce", type=float, default=DEBOUNCE_SECONDS, help="Search debounce delay in seconds")
    ap.add_argument("--log-level", default="WARNING",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    ap.add_argument("--html", help="Render one view to this HTML file and exit")
    ap.add_argument("--fragment", default=DEFAULT_FRAGMENT, help="Location fragment for --html")
    ap.add_argument("--query", default="", help="Search text for --html")
    ap.add_argument("--effect", default=ALL, help="Effect filter for --html")
    return ap.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the attrbrowser CLI.

    1) Load + normalize the dataset (all-or-nothing)
    2) Either render one view (--html) or start the REPL
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    try:
        records = load_attributes(args.source, timeout=args.timeout)
    except DataLoadFailure as e:
        message = load_error_message(args.source, e)
        print(message, file=sys.stderr)
        if args.html:
            write_html(args.html, error=message)
        return 1

    if args.html:
        idx = build_indices(records)
        state = evaluate_view(records, args.query, args.effect, args.fragment, idx=idx)
        write_html(args.html, state=state, options=idx.effect_options)
        print(f"Wrote {args.html}")
        return 0

    nav = Navigator(records=tuple(records), debounce_seconds=args.debounce)
    session = Session(nav=nav, source=args.source)
    nav.on_load()
    print(f"Loaded {len(records)} attributes. Type 'help' for commands.")
    try:
        repl(session)
    finally:
        nav.close()
    return 0


def repl(session: Session) -> None:
    while True:
        try:
            line = input("attr> ")
        except EOFError:
            break
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.lower() in ("quit", "exit"):
            break
        cmd0 = stripped.split()[0].lower()
        if cmd0 not in ("help", "show", "options", "stats", "html", "export", "report"):
            session.command_log.append(stripped)
        try:
            handle(session, stripped)
        except Exception as e:
            logger.debug("command failed: %s", stripped, exc_info=True)
            print(f"Error: {e}")


def handle(session: Session, line: str) -> None:
    """Handle one CLI command line."""
    nav = session.nav

    # search takes the rest of the line verbatim (quotes are part of the text)
    if line.lower() == "search" or line.lower().startswith("search "):
        nav.on_search_input(line[len("search"):].lstrip())
        nav.flush()
        _print_view(nav.current)
        return

    parts = shlex.split(line)
    cmd = parts[0].lower()

    if cmd == "help":
        print(HELP)
        return

    if cmd == "stats":
        hidden = sum(1 for r in nav.records if r.hidden)
        print(f"Attributes: {len(nav.records)} | Hidden: {hidden} | Effect types: {len(nav.effect_options) - 1}")
        c = nav.controls
        print(f"Fragment: {c.fragment} | Query: {c.query!r} | Effect: {c.effect}")
        return

    if cmd == "show":
        n = int(parts[1]) if len(parts) >= 2 else 10
        _print_view(nav.current, n)
        return

    if cmd == "effect":
        if len(parts) < 2:
            raise ValueError("usage: effect <value>")
        value = parts[1]
        if value not in nav.effect_options:
            print(f"Note: no attributes have effect type {value!r}.")
        _print_view(nav.on_effect_change(value))
        return

    if cmd == "options":
        for opt in nav.effect_options:
            count = len(nav.records) if opt == ALL else len(nav.idx.by_effect.get(opt, []))
            marker = "*" if opt == nav.controls.effect else " "
            print(f"{marker} {opt} ({count})")
        return

    if cmd == "go":
        fragment = parts[1] if len(parts) >= 2 else DEFAULT_FRAGMENT
        if not fragment.startswith("#"):
            fragment = "#" + fragment
        _print_view(nav.on_fragment_change(fragment))
        return

    if cmd == "open":
        if len(parts) < 2:
            raise ValueError("usage: open <id>")
        _print_view(nav.on_fragment_change(DETAIL_PREFIX + parts[1]))
        return

    if cmd == "list":
        _print_view(nav.on_fragment_change(DEFAULT_FRAGMENT))
        return

    if cmd == "back":
        if nav.back():
            _print_view(nav.current)
        else:
            print("Nothing to go back to.")
        return

    if cmd == "forward":
        if nav.forward():
            _print_view(nav.current)
        else:
            print("Nothing to go forward to.")
        return

    if cmd == "html":
        if len(parts) < 2:
            raise ValueError('usage: html "<out.html>"')
        write_html(parts[1], state=nav.current, options=nav.effect_options)
        print(f"Wrote {parts[1]}")
        return

    if cmd == "export":
        # export <csv|json|xlsx> "<path>"
        if len(parts) < 3:
            print('Usage: export csv "out.csv"  OR  export json "out.json"  OR  export xlsx "out.xlsx"')
            return
        fmt = parts[1].lower()
        if fmt not in EXPORT_FORMATS:
            print("Unknown export format. Use: csv, json or xlsx")
            return
        rows = _selection(nav.current)
        if not rows:
            print("Nothing to export: current selection is empty.")
            return
        export_records(rows, parts[2], fmt)
        print(f"Exported {len(rows)} attributes to {parts[2]}")
        return

    if cmd == "report":
        # report "<path.docx>" [current|full]
        from .report import generate_docx_report, ReportConfig, ReportSource
        if len(parts) < 2:
            raise ValueError('usage: report "<path.docx>" [current|full]')
        path = parts[1]
        scope = parts[2].lower() if len(parts) >= 3 else "current"
        if scope not in ("current", "full"):
            raise ValueError("report scope must be: current | full")
        if scope == "full":
            rows = list(nav.records)
            label = "Full Dataset"
        else:
            rows = _selection(nav.current)
            label = "Current Result Set"
        cfg = ReportConfig(
            source=ReportSource(source=session.source),
            command_log=session.command_log,
        )
        generate_docx_report(rows, path, config=cfg, scope_label=label)
        print(f"Report written to {path}")
        return

    print("Unknown command. Type 'help'.")


def write_html(path: str, *, state: Optional[ViewState] = None,
               options: Sequence[str] = (), error: Optional[str] = None) -> None:
    page = render_page(
        options=options,
        list_view=state.list_view if state else None,
        detail_view=state.detail_view if state else None,
        error=error,
    )
    with open(path, "w", encoding="utf-8") as f:
        f.write(page)


def _selection(state: Optional[ViewState]) -> List[AttributeRecord]:
    if state is None:
        return []
    if state.view == DETAIL:
        return [state.record] if state.record is not None else []
    return list(state.records)


def _print_view(state: Optional[ViewState], n: int = 10) -> None:
    if state is None:
        return
    if state.view == DETAIL:
        _print_detail(state.record)
        return
    print(state.list_view.count_text)
    if not state.records:
        print("No attributes match your search/filter.")
        return
    _print_rows(state.records[:n])
    if len(state.records) > n:
        print(f"... ({len(state.records)} total, showing {n})")

def _print_rows(rows):
    for r in rows:
        print(f"[{r.id}] {r.name} | {r.attribute_class or '-'} | {r.effect_type if r.effect_type is not None else 'n/a'} | {'hidden' if r.hidden else 'visible'}")

def _print_detail(r: Optional[AttributeRecord]) -> None:
    if r is None:
        print("Attribute not found")
        return
    print(r.name)
    for label, value in [
        ("ID", r.id),
        ("attribute_class", r.attribute_class),
        ("description_string", r.description_string),
        ("description_format", r.description_format),
        ("effect_type", r.effect_type),
    ]:
        print(f"  {label}: {value if value is not None else '—'}")
    print(f"  hidden: {'true' if r.hidden else 'false'}")
    print("Raw data:")
    print(raw_json(r))

if __name__ == "__main__":
    raise SystemExit(main())
