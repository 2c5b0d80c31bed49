"""
Inspection Section Tests - PIPA Tag Lookup
tests/test_section_segmenter.py
"""

from pipa_lookup.pipelines.html_document import parse_html
from pipa_lookup.pipelines.section_segmenter import (
    extract_inspection_sections,
    find_section_table,
    parse_inspection_row,
)


def _section(heading: str, rows: str) -> str:
    return (
        '<table class="table">'
        f'<thead><tr><th colspan="4">{heading}</th></tr></thead>'
        f"<tbody>{rows}</tbody>"
        "</table>"
    )


class TestExtractInspectionSections:
    """Sections from the full report fixture."""

    def test_structure_section(self, report_html):
        sections = extract_inspection_sections(report_html)
        assert [f.label for f in sections["structure"]] == [
            "Length", "Width", "Height", "Trough Depth", "Seam Security",
        ]

    def test_field_with_badge_value_and_notes(self, report_html):
        sections = extract_inspection_sections(report_html)
        trough = next(f for f in sections["structure"] if f.label == "Trough Depth")
        assert trough.status == "Pass"
        assert trough.status_class == "green"
        assert trough.value == "0.15m"
        assert trough.notes == "10/45s 16/53"

    def test_empty_cells_are_omitted(self, report_html):
        sections = extract_inspection_sections(report_html)
        seam = next(f for f in sections["structure"] if f.label == "Seam Security")
        assert seam.to_payload() == {"label": "Seam Security", "statusClass": "green", "status": "Pass"}

    def test_section_order_and_skips(self, report_html):
        sections = extract_inspection_sections(report_html)
        assert list(sections) == ["structure", "materials", "users", "notes"]
        assert "reportDetails" not in sections
        assert "device" not in sections

    def test_non_report_page(self):
        assert extract_inspection_sections("<html><body>Not a report</body></html>") == {}


class TestSectionEdgeCases:

    def test_multi_word_heading_is_camel_cased(self):
        html = _section(
            "Area &amp; surround",
            '<tr><td><div class="label">Play Area m²:</div></td>'
            '<td><div class="detail">25</div></td><td><div class="text"></div></td></tr>',
        )
        sections = extract_inspection_sections(html)
        assert sections["areaSurround"][0].label == "Play Area m²"
        assert sections["areaSurround"][0].value == "25"

    def test_orphan_header_outside_table(self):
        html = '<div><th colspan="4">Orphan Header</th></div>' + _section(
            "Valid Section",
            '<tr><td><div class="label">Test Field:</div></td><td><div class="detail">Value</div></td></tr>',
        )
        sections = extract_inspection_sections(html)
        assert "validSection" in sections
        assert "orphanHeader" not in sections

    def test_rows_without_label_are_ignored(self):
        html = _section(
            "Materials",
            '<tr><td><div class="detail">stray</div></td></tr>'
            '<tr><td><div class="label">Fabric:</div></td><td><div class="badge badge--amber">Advisory</div></td></tr>',
        )
        fields = extract_inspection_sections(html)["materials"]
        assert len(fields) == 1
        assert fields[0].status_class == "amber"

    def test_section_without_fields_is_dropped(self):
        html = _section("Empty", "<tr><td>nothing</td></tr>")
        assert extract_inspection_sections(html) == {}

    def test_multiple_detail_cells_are_joined(self):
        row = parse_html(
            '<table><tr><td><div class="label">Anchors:</div></td>'
            '<td><div class="detail">6</div></td><td><div class="detail">front</div></td></tr></table>'
        ).select_one("tr")
        assert parse_inspection_row(row).value == "6 front"

    def test_nbsp_notes_are_ignored(self):
        row = parse_html(
            '<table><tr><td><div class="label">Blower:</div></td><td><div class="text">&nbsp;</div></td></tr></table>'
        ).select_one("tr")
        assert parse_inspection_row(row).notes is None


def test_find_section_table(report_html):
    tbody = find_section_table(parse_html(report_html), "Device")
    assert tbody is not None
    assert tbody.name == "tbody"
    assert find_section_table(parse_html(report_html), "Missing") is None
