"""
Tests for HTML and PDF report rendering.
"""
from datetime import date

import pytest

from decision_matrix.errors import MissingScoresError
from decision_matrix.models import BENEFIT, Criterion, Option
from decision_matrix.report import render_html_report, split_text, write_pdf_report
from decision_matrix.scoring import compute_scores


@pytest.fixture
def decision(cost_speed_criteria, cost_speed_options):
    results = compute_scores("Pick a vendor", cost_speed_criteria, cost_speed_options)
    return "Pick a vendor", cost_speed_criteria, cost_speed_options, results


class TestHtmlReport:

    def test_sections_and_values(self, decision):
        html = render_html_report(*decision, generated_on=date(2024, 5, 1))

        assert "<title>Decision Report: Pick a vendor</title>" in html
        assert "Generated on: 2024-05-01" in html
        assert "<td>60%</td>" in html
        assert "Lower is better" in html and "Higher is better" in html
        assert "<td>0-100</td>" in html
        assert "<td>80.0 points</td>" in html
        assert "<strong>Best Option:</strong> A (Score: 80.0 points)" in html
        assert html.index("<td>1</td><td>A</td>") < html.index("<td>2</td><td>B</td>")

    def test_recommendation_names_strongest_criterion(self, decision):
        html = render_html_report(*decision)
        assert "Strongest contributions came from: Cost, Speed" in html
        assert "Lead over B: 60.0 points" in html

    def test_escapes_user_text(self):
        criteria = [Criterion(id=1, name="<b>x</b>", weight=10, direction=BENEFIT)]
        options = [Option(id=1, name="<script>alert(1)</script>", values={"<b>x</b>": 50})]
        results = compute_scores("A & B", criteria, options)

        html = render_html_report("A & B", criteria, options, results)
        assert "<script>alert" not in html
        assert "&lt;script&gt;" in html
        assert "A &amp; B" in html

    def test_missing_values_show_na_but_zero_shows_zero(self):
        criteria = [
            Criterion(id=1, name="x", weight=10, direction=BENEFIT),
            Criterion(id=2, name="y", weight=10, direction=BENEFIT),
        ]
        options = [Option(id=1, name="o", values={"x": 0})]
        results = compute_scores("d", criteria, options)

        html = render_html_report("d", criteria, options, results)
        assert "<tr><td>o</td><td>0</td><td>N/A</td></tr>" in html
        assert "<td>N/A</td></tr>" in html

    def test_requires_results(self, cost_speed_criteria, cost_speed_options):
        with pytest.raises(MissingScoresError):
            render_html_report("d", cost_speed_criteria, cost_speed_options, [])


class TestPdfReport:

    def test_writes_pdf(self, tmp_path, decision):
        out = tmp_path / "reports" / "vendor.pdf"
        path = write_pdf_report(str(out), *decision)

        assert path == str(out)
        assert out.read_bytes().startswith(b"%PDF")

    def test_long_reports_span_pages(self, tmp_path):
        criteria = [Criterion(id=1, name="x", weight=10, direction=BENEFIT)]
        options = [Option(id=i, name=f"Option {i}", values={"x": i % 100}) for i in range(120)]
        results = compute_scores("Big one", criteria, options)

        out = tmp_path / "big.pdf"
        write_pdf_report(str(out), "Big one", criteria, options, results)
        data = out.read_bytes()
        assert data.startswith(b"%PDF")
        assert data.rstrip().endswith(b"%%EOF")

    def test_requires_results(self, tmp_path, cost_speed_criteria, cost_speed_options):
        with pytest.raises(MissingScoresError):
            write_pdf_report(str(tmp_path / "x.pdf"), "d", cost_speed_criteria, cost_speed_options, [])


def test_split_text_wraps_on_words():
    assert split_text("one two three four", 9) == ["one two", "three", "four"]
    assert split_text("   ", 10) == []
