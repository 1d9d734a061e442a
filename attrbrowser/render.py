"""
View renderer
=============

Pure functions from records to HTML fragments. No I/O, no shared state: the
same input always gives the same markup.

Every interpolated value goes through `escape_html`, including link targets.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Sequence
import html
import json
from .models import AttributeRecord

PLACEHOLDER = "—"
EMPTY_LIST_MESSAGE = "No attributes match your search/filter."
NOT_FOUND_MESSAGE = "Attribute not found"

@dataclass(frozen=True)
class ListView:
    count: int
    count_text: str
    html: str

@dataclass(frozen=True)
class DetailView:
    found: bool
    html: str


def escape_html(value: Any) -> str:
    return html.escape(str(value), quote=True)

def detail_href(record_id: str) -> str:
    return f"#/attr/{record_id}"

def result_count_text(n: int) -> str:
    return f"{n} result{'' if n == 1 else 's'}"

def raw_json(record: AttributeRecord) -> str:
    """Pretty-printed source record, as shown in the detail view."""
    return json.dumps(record.raw, indent=2, ensure_ascii=False)


def _meta_line(r: AttributeRecord) -> str:
    meta = f"ID: {r.id}"
    if r.attribute_class:
        meta += f" • {r.attribute_class}"
    if r.description_format:
        meta += f" • {r.description_format}"
    return meta

def _card(r: AttributeRecord) -> str:
    effect = r.effect_type if r.effect_type is not None else "n/a"
    visibility = "hidden" if r.hidden else "visible"
    return (
        '<div class="card">'
        f'<div><div><a href="{escape_html(detail_href(r.id))}">{escape_html(r.name)}</a></div>'
        f'<div class="meta">{escape_html(_meta_line(r))}</div></div>'
        f'<div class="right"><div>{escape_html(effect)}</div><div>{visibility}</div></div>'
        '</div>'
    )

def render_list(records: Sequence[AttributeRecord]) -> ListView:
    """Result count plus one card per record (or a single placeholder card)."""
    n = len(records)
    if n == 0:
        body = f'<div class="card"><div>{escape_html(EMPTY_LIST_MESSAGE)}</div></div>'
    else:
        body = "\n".join(_card(r) for r in records)
    return ListView(count=n, count_text=result_count_text(n), html=body)


def _row(label: str, value: Optional[str]) -> str:
    shown = value if value is not None else PLACEHOLDER
    return f'<div class="detail-row"><dt>{escape_html(label)}</dt><dd>{escape_html(shown)}</dd></div>'

def render_detail(record: Optional[AttributeRecord]) -> DetailView:
    """Heading, labelled field rows and the raw JSON block for one record."""
    if record is None:
        return DetailView(found=False, html=f"<h2>{escape_html(NOT_FOUND_MESSAGE)}</h2>")

    parts = [
        f"<h2>{escape_html(record.name)}</h2>",
        "<div>",
        _row("ID", record.id),
        _row("attribute_class", record.attribute_class),
        _row("description_string", record.description_string),
        _row("description_format", record.description_format),
        _row("effect_type", record.effect_type),
        _row("hidden", "true" if record.hidden else "false"),
        '<section style="margin-top:12px">',
        "<h3>Raw data</h3>",
        f'<pre class="raw">{escape_html(raw_json(record))}</pre>',
        "</section>",
        "</div>",
    ]
    return DetailView(found=True, html="\n".join(parts))


def render_effect_options(options: Sequence[str]) -> str:
    return "".join(f'<option value="{escape_html(s)}">{escape_html(s)}</option>' for s in options)

def load_error_message(source: str, exc: BaseException) -> str:
    """Plain text for the error region when the document could not be loaded."""
    return f"Failed to load {source} — Error: {exc}"


PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>{title}</title>
<style>
.hidden {{ display: none; }}
.card {{ display: flex; justify-content: space-between; border: 1px solid #ddd; border-radius: 6px; padding: 8px 12px; margin: 6px 0; }}
.meta, .right {{ color: #666; font-size: 0.9em; }}
.right {{ text-align: right; }}
.detail-row {{ display: flex; gap: 12px; }}
.raw {{ background: #f6f6f6; padding: 8px; overflow-x: auto; }}
</style>
</head>
<body>
<div id="error" class="{error_class}">{error}</div>
<div id="list-view" class="{list_class}">
<select id="effectFilter">{options}</select>
<span id="resultCount">{count_text}</span>
<div id="list">{list_html}</div>
</div>
<div id="detail-view" class="{detail_class}">
<a href="#/">Back to list</a>
<div id="detail">{detail_html}</div>
</div>
</body>
</html>
"""

def render_page(
    *,
    title: str = "Custom attributes",
    options: Sequence[str] = (),
    list_view: Optional[ListView] = None,
    detail_view: Optional[DetailView] = None,
    error: Optional[str] = None,
) -> str:
    """Standalone HTML page around one view (or only the error region).

    `error` is plain text (see `load_error_message`).
    """
    show_detail = detail_view is not None and error is None
    show_list = list_view is not None and not show_detail and error is None
    return PAGE_TEMPLATE.format(
        title=escape_html(title),
        error_class="" if error else "hidden",
        error=escape_html(error) if error else "",
        list_class="" if show_list else "hidden",
        options=render_effect_options(options),
        count_text=escape_html(list_view.count_text) if list_view else "",
        list_html=list_view.html if list_view else "",
        detail_class="" if show_detail else "hidden",
        detail_html=detail_view.html if detail_view else "",
    )
