"""
Tag Page Parser Tests - PIPA Tag Lookup
tests/test_tag_parser.py
"""

from pipa_lookup.pipelines.tag_parser import extract_annual_reports, extract_details, parse_tag_page


class TestParseTagPage:
    """Tag 40000 with a green Pass badge and two annual reports."""

    def test_pass_page(self, tag_html):
        record = parse_tag_page(tag_html, "40000")
        assert record.found is True
        assert record.tag_id == "40000"
        assert record.status == "Pass"
        assert record.status_class == "green"
        assert record.unit_reference_no == "40000"
        assert record.type == "Bounce/Slide Combo"
        assert record.current_operator == "Andy J Leisure Ltd"
        assert record.certificate_expiry_date == "03 November 2026"
        assert record.fetched_at is not None
        assert record.from_cache is None

    def test_links(self, tag_html):
        record = parse_tag_page(tag_html, "40000")
        assert record.certificate_url == "https://hub.pipa.org.uk/download/reports/certificate/abc123"
        assert record.report_url == "https://hub.pipa.org.uk/public/reports/report/abc123"
        assert record.image_url == "https://hub.pipa.org.uk/content-files/50/431119/60/image.jpg"

    def test_annual_reports_in_page_order(self, tag_html):
        reports = parse_tag_page(tag_html, "40000").annual_reports
        assert [r.report_no for r in reports] == ["431119-v1", "398211-v2"]

        first = reports[0]
        assert first.to_payload() == {
            "statusClass": "green",
            "url": "https://hub.pipa.org.uk/public/reports/report/abc123",
            "date": "04 November 2025",
            "reportNo": "431119-v1",
            "inspectionBody": "Andy J Leisure Ltd",
            "status": "Pass",
        }

    def test_entities_are_decoded(self, tag_html):
        reports = parse_tag_page(tag_html, "40000").annual_reports
        assert reports[1].inspection_body == "Inflatable Safety & Co"
        assert reports[1].status_class == "red"
        assert reports[1].status == "Fail"

    def test_page_without_badge_is_not_found(self):
        record = parse_tag_page("<html><body>Not found</body></html>", "99999")
        assert record.found is False
        assert record.to_payload() == {"found": False, "tagId": "99999"}

    def test_badge_only_page(self):
        html = '<div class="check__image-tag check__image-tag--red">Fail</div>'
        record = parse_tag_page(html, "12")
        assert record.found is True
        assert record.status_class == "red"
        assert record.unit_reference_no is None
        assert record.annual_reports == []


    def test_status_entities_are_decoded(self):
        html = '<div class="check__image-tag check__image-tag--amber"> Pass &amp; Advisory </div>'
        assert parse_tag_page(html, "12").status == "Pass & Advisory"


class TestAnnualReports:

    def test_incomplete_row_is_dropped(self):
        html = (
            '<a class="report report--green" href="https://hub.pipa.org.uk/public/reports/report/a">'
            '<div class="report__date"><div class="report__value">01 May 2024</div></div>'
            '<div class="report__number"><div class="report__value">1-v1</div></div>'
            '<div class="tag tag--small">Pass</div>'
            "</a>"
        )
        assert extract_annual_reports(html) == []

    def test_no_history(self):
        assert extract_annual_reports("<section></section>") == []


def test_details_block_missing():
    assert extract_details('<div class="check__image-tag check__image-tag--green">Pass</div>') == {}
