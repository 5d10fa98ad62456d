import os
from datetime import date
from html import escape
from typing import List, Optional, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.pdfgen import canvas

from .errors import MissingScoresError
from .explain import explain_option
from .models import Criterion, Option, ScoredOption
from .scoring import resolve_range

REPORT_FOOTER = "Report generated by Decision Matrix Analyzer"

_HTML_STYLE = """
body { font-family: Arial, sans-serif; margin: 20px; }
.header { text-align: center; margin-bottom: 30px; }
.title { font-size: 24px; font-weight: bold; margin-bottom: 10px; }
.subtitle { font-size: 16px; color: #555; margin-bottom: 20px; }
.section { margin-bottom: 30px; }
.section-title { font-size: 18px; font-weight: bold; border-bottom: 1px solid #ddd; padding-bottom: 5px; margin-bottom: 15px; }
table { width: 100%; border-collapse: collapse; margin-bottom: 20px; }
th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
th { background-color: #f2f2f2; }
.recommendation { background-color: #f9f9f9; padding: 15px; border-left: 4px solid #4CAF50; margin-bottom: 20px; }
.footer { text-align: center; margin-top: 30px; font-size: 12px; color: #777; }
@media print { body { margin: 0; padding: 0; } }
"""


def safe_text(x) -> str:
    return ("" if x is None else str(x)).replace("\n", " ").strip()


def format_value(values: dict, key: str) -> str:
    """Raw value as entered; N/A only when nothing was entered."""
    v = values.get(key)
    if v is None or v == "":
        return "N/A"
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def format_weight(weight: float) -> str:
    w = float(weight)
    return f"{int(w)}%" if w.is_integer() else f"{w}%"


def recommendation_lines(criteria: Sequence[Criterion], results: Sequence[ScoredOption]) -> List[str]:
    best = results[0]
    lines = [f"{best.name} scored highest across all evaluated criteria"]

    explanation = explain_option(best, criteria)
    strong = [x["criterion"] for x in explanation["top_positive_contributors"] if x["points"] > 0]
    if strong:
        lines.append(f"Strongest contributions came from: {', '.join(strong)}")

    if len(results) > 1:
        gap = round(best.score - results[1].score, 1)
        lines.append(f"Lead over {results[1].name}: {gap} points")

    lines.append("The weighted scoring system confirms this as the optimal choice")
    lines.append("Consider verifying final decision with stakeholders if needed")
    return lines


def _require_results(results: Sequence[ScoredOption]) -> None:
    if not results:
        raise MissingScoresError()


# ----------------------------
# HTML
# ----------------------------
def render_html_report(
    decision_name: str,
    criteria: Sequence[Criterion],
    options: Sequence[Option],
    results: Sequence[ScoredOption],
    generated_on: Optional[date] = None,
) -> str:
    _require_results(results)
    day = (generated_on or date.today()).isoformat()
    name = escape(safe_text(decision_name))
    crit_heads = "".join(f"<th>{escape(c.name)}</th>" for c in criteria)

    criteria_rows = "".join(
        "<tr>"
        f"<td>{escape(c.name)}</td>"
        f"<td>{format_weight(c.weight)}</td>"
        f"<td>{c.preference_label()}</td>"
        f"<td>{escape(resolve_range(c).label())}</td>"
        "</tr>"
        for c in criteria
    )

    option_rows = "".join(
        f"<tr><td>{escape(o.name)}</td>"
        + "".join(f"<td>{escape(format_value(o.values, c.name))}</td>" for c in criteria)
        + "</tr>"
        for o in options
    )

    result_rows = "".join(
        f"<tr><td>{i}</td><td>{escape(r.name)}</td><td>{r.score} points</td>"
        + "".join(f"<td>{escape(format_value(r.values, c.name))}</td>" for c in criteria)
        + "</tr>"
        for i, r in enumerate(results, start=1)
    )

    best = results[0]
    reasons = "".join(f"<li>{escape(line)}</li>" for line in recommendation_lines(criteria, results))

    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Decision Report: {name}</title>
<style>{_HTML_STYLE}</style>
</head>
<body>
<div class="header">
  <div class="title">Decision Analysis Report</div>
  <div class="subtitle">{name}</div>
  <div>Generated on: {day}</div>
</div>
<div class="section">
  <div class="section-title">Decision Summary</div>
  <div><strong>Decision:</strong> {name}</div>
  <div><strong>Date Analyzed:</strong> {day}</div>
</div>
<div class="section">
  <div class="section-title">Criteria Weights</div>
  <table>
    <thead><tr><th>Criterion</th><th>Weight</th><th>Preference</th><th>Range</th></tr></thead>
    <tbody>{criteria_rows}</tbody>
  </table>
</div>
<div class="section">
  <div class="section-title">Options Evaluated</div>
  <table>
    <thead><tr><th>Option Name</th>{crit_heads}</tr></thead>
    <tbody>{option_rows}</tbody>
  </table>
</div>
<div class="section">
  <div class="section-title">Analysis Results</div>
  <table>
    <thead><tr><th>Rank</th><th>Option</th><th>Score</th>{crit_heads}</tr></thead>
    <tbody>{result_rows}</tbody>
  </table>
</div>
<div class="section">
  <div class="section-title">Recommendation</div>
  <div class="recommendation">
    <p><strong>Best Option:</strong> {escape(best.name)} (Score: {best.score} points)</p>
    <p><strong>Why this is the best choice:</strong></p>
    <ul>{reasons}</ul>
  </div>
</div>
<div class="footer">{REPORT_FOOTER}</div>
</body>
</html>
"""


# ----------------------------
# PDF
# ----------------------------
def write_pdf_report(
    output_path: str,
    decision_name: str,
    criteria: Sequence[Criterion],
    options: Sequence[Option],
    results: Sequence[ScoredOption],
    generated_on: Optional[date] = None,
) -> str:
    _require_results(results)
    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
    day = (generated_on or date.today()).isoformat()

    c = canvas.Canvas(output_path, pagesize=A4)
    c.setTitle(f"Decision Report: {safe_text(decision_name)}")
    width, height = A4
    y = height - 2 * cm

    def ensure_room():
        nonlocal y
        if y < 3 * cm:
            c.showPage()
            y = height - 2 * cm
            c.setFont("Helvetica", 11)

    def line(text: str, step: float = 0.55):
        nonlocal y
        for chunk in split_text(text, 95) or [""]:
            c.drawString(2 * cm, y, chunk)
            y -= step * cm
            ensure_room()

    def heading(text: str):
        nonlocal y
        y -= 0.3 * cm
        ensure_room()
        c.setFont("Helvetica-Bold", 12)
        c.drawString(2 * cm, y, text)
        y -= 0.8 * cm
        c.setFont("Helvetica", 11)

    # Header
    c.setFont("Helvetica-Bold", 18)
    c.drawString(2 * cm, y, "Decision Analysis Report")
    y -= 1.0 * cm
    c.setFont("Helvetica", 10)
    c.drawString(2 * cm, y, f"Generated on: {day}")
    y -= 1.0 * cm

    heading("Decision Summary")
    line(f"Decision: {safe_text(decision_name)}")
    line(f"Date Analyzed: {day}")

    heading("Criteria Weights")
    for crit in criteria:
        line(
            f"- {safe_text(crit.name)}: {format_weight(crit.weight)} | "
            f"{crit.preference_label()} | Range: {resolve_range(crit).label()}"
        )

    heading("Options Evaluated")
    for o in options:
        vals = ", ".join(f"{safe_text(k.name)}={format_value(o.values, k.name)}" for k in criteria)
        line(f"- {safe_text(o.name)}: {vals}")

    heading("Analysis Results")
    for i, r in enumerate(results, start=1):
        line(f"{i}. {safe_text(r.name)}: {r.score} points")

    heading("Recommendation")
    best = results[0]
    c.setFont("Helvetica-Bold", 11)
    line(f"Best Option: {safe_text(best.name)} (Score: {best.score} points)")
    c.setFont("Helvetica", 11)
    for reason in recommendation_lines(criteria, results):
        line(f"- {safe_text(reason)}")

    y -= 0.6 * cm
    ensure_room()
    c.setFont("Helvetica", 9)
    c.drawString(2 * cm, y, REPORT_FOOTER)

    c.showPage()
    c.save()
    return output_path


def split_text(text: str, max_len: int) -> List[str]:
    words = text.split()
    if not words:
        return []
    lines = []
    line = ""
    for w in words:
        if len(line) + len(w) + 1 <= max_len:
            line = (line + " " + w).strip()
        else:
            lines.append(line)
            line = w
    if line:
        lines.append(line)
    return lines
