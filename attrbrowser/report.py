from __future__ import annotations

"""
attrbrowser report generator
----------------------------
This module generates a DOCX report from a list of AttributeRecord objects
(usually the current result set of the browser).

Design goals:
- Keep the browser usable even if report dependencies are missing (lazy imports).
- Only draw charts that say something about the result set. Example: if the
  user filtered to ONE effect type, an effect-type chart is a single bar,
  so it is skipped.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple
import os
import tempfile
from collections import Counter

from .models import AttributeRecord


# -----------------------------
# Configuration / source types
# -----------------------------

@dataclass
class ReportSource:
    """Where the attribute data came from (printed in the report)."""
    dataset_name: str = "Custom attributes"
    source: Optional[str] = None
    note: Optional[str] = "Static JSON document (id -> attribute fields)."


@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "Custom Attributes Report"
    subtitle: str = "attrbrowser (CLI)"
    source: ReportSource = field(default_factory=ReportSource)

    # How many categories to show in bar charts
    top_n: int = 10

    # How many rows to show in the preview table
    max_rows_preview: int = 25

    # Optional: list of CLI commands used to create the current result set
    command_log: Optional[List[str]] = None


FIELD_DICTIONARY = [
    ("id", "Unique attribute identifier (key in the JSON document)"),
    ("name", "Display name (\"attribute <id>\" when missing)"),
    ("attribute_class", "Attribute class tag"),
    ("description_string", "Description text"),
    ("description_format", "Description format tag"),
    ("effect_type", "Effect category (\"none\" when missing)"),
    ("hidden", "Hidden flag (\"1\" / 1 / true)"),
    ("stored_as_integer", "Stored-as-integer flag (\"1\" / 1 / true)"),
]


# -----------------------------
# Main entry point used by CLI
# -----------------------------

def generate_docx_report(
    records: Sequence[AttributeRecord],
    out_path: str,
    *,
    config: Optional[ReportConfig] = None,
    scope_label: str = "Current Result Set",
) -> str:
    """
    Generate a DOCX report + charts for a list of attribute records.

    The source JSON document is never modified; the report describes the
    in-memory selection only.
    """
    config = config or ReportConfig()

    # Lazy imports: only required when "report" is used.
    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib.\n"
            "Install with: python -m pip install matplotlib"
        ) from e

    if not records:
        raise ValueError("No attributes to report on (result set is empty).")

    # -----------------------------
    # 1) Category counts
    # -----------------------------
    c_effect = Counter(r.effect_key for r in records)
    c_class = Counter(r.attribute_class for r in records if r.attribute_class)
    hidden_count = sum(1 for r in records if r.hidden)
    integer_count = sum(1 for r in records if r.stored_as_integer)

    # -----------------------------
    # 2) Charts
    # -----------------------------
    tmpdir = tempfile.mkdtemp(prefix="attrbrowser_report_")
    # Each chart is: (title, file_path)
    chart_paths: List[Tuple[str, str]] = []

    def _bar(title: str, labels: List[str], values: List[int], filename: str) -> None:
        plt.figure()
        plt.bar(labels, values)
        plt.xticks(rotation=45, ha="right")
        plt.title(title)
        plt.ylabel("Count")
        path = os.path.join(tmpdir, filename)
        plt.tight_layout()
        plt.savefig(path, dpi=150)
        plt.close()
        chart_paths.append((title, path))

    if len(c_effect) > 1:
        top = c_effect.most_common(config.top_n)
        _bar(f"Attributes by Effect Type ({scope_label})",
             [k for k, _ in top], [v for _, v in top], "effect_types.png")

    if len(c_class) > 1:
        top = c_class.most_common(config.top_n)
        _bar(f"Top {config.top_n} Attribute Classes ({scope_label})",
             [k for k, _ in top], [v for _, v in top], "attribute_classes.png")

    if 0 < hidden_count < len(records):
        _bar(f"Hidden vs Visible ({scope_label})",
             ["visible", "hidden"], [len(records) - hidden_count, hidden_count], "visibility.png")

    # -----------------------------
    # 3) Build DOCX report
    # -----------------------------
    doc = Document()

    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)

    def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
        p = doc.add_paragraph()
        r = p.add_run(text)
        r.bold = bold
        r.italic = italic
        r.font.size = Pt(size)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def _kv(key: str, value: str) -> None:
        p = doc.add_paragraph()
        r = p.add_run(f"{key}: ")
        r.bold = True
        p.add_run(value)

    _center_title(config.title, 22, bold=True)
    _center_title(config.subtitle, 12, italic=True)

    doc.add_paragraph("")
    _kv("Dataset", config.source.dataset_name)
    _kv("Scope", scope_label)
    _kv("Attributes in scope", str(len(records)))
    _kv("Hidden", str(hidden_count))
    _kv("Stored as integer", str(integer_count))
    _kv("Distinct effect types", str(len(c_effect)))

    doc.add_paragraph("")
    doc.add_heading("Data source", level=1)
    if config.source.source:
        doc.add_paragraph(f"Loaded from: {config.source.source}")
    if config.source.note:
        doc.add_paragraph(config.source.note)

    if config.command_log:
        doc.add_paragraph("")
        doc.add_heading("Command log (reproducibility)", level=1)
        doc.add_paragraph("These commands produced this result set:")
        for line in config.command_log:
            doc.add_paragraph(line, style="List Bullet")

    doc.add_paragraph("")
    doc.add_heading("Fields (data dictionary)", level=1)
    t = doc.add_table(rows=1, cols=2)
    t.rows[0].cells[0].text = "Field"
    t.rows[0].cells[1].text = "Meaning"
    for k, v in FIELD_DICTIONARY:
        row = t.add_row().cells
        row[0].text = k
        row[1].text = v

    # How many records carry each optional field
    doc.add_paragraph("")
    doc.add_heading("Data completeness", level=1)
    t2 = doc.add_table(rows=1, cols=3)
    t2.rows[0].cells[0].text = "Field"
    t2.rows[0].cells[1].text = "Present"
    t2.rows[0].cells[2].text = "Missing"
    for name in ("attribute_class", "description_string", "description_format", "effect_type"):
        missing = sum(1 for r in records if getattr(r, name) is None)
        row = t2.add_row().cells
        row[0].text = name
        row[1].text = str(len(records) - missing)
        row[2].text = str(missing)

    if chart_paths:
        doc.add_paragraph("")
        doc.add_heading("Visualizations", level=1)
        for title, path in chart_paths:
            doc.add_paragraph(title)
            doc.add_picture(path, width=Inches(6.0))

    doc.add_paragraph("")
    doc.add_heading("Preview of first few attributes", level=1)
    preview = list(records)[:config.max_rows_preview]
    t3 = doc.add_table(rows=1, cols=5)
    h = t3.rows[0].cells
    h[0].text = "ID"
    h[1].text = "Name"
    h[2].text = "Class"
    h[3].text = "Effect"
    h[4].text = "Hidden"
    for r in preview:
        cells = t3.add_row().cells
        cells[0].text = r.id
        cells[1].text = r.name
        cells[2].text = r.attribute_class or ""
        cells[3].text = r.effect_type or ""
        cells[4].text = "true" if r.hidden else "false"

    # -----------------------------
    # Reproducibility footer
    # -----------------------------
    doc.add_paragraph("")
    doc.add_heading("Reproducibility footer", level=1)

    from . import __version__
    from datetime import datetime as _dt
    generated_at = _dt.now().isoformat(timespec="seconds")

    doc.add_paragraph(f"attrbrowser version: {__version__}")
    doc.add_paragraph(f"Report generated at: {generated_at}")
    doc.add_paragraph(f"Attributes in scope: {len(records)}")

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    return out_path
