from datetime import datetime
from typing import List, Optional

from pipa_lookup.models.base import PipaModel
from pipa_lookup.models.report import ReportRecord


class ReportSummary(PipaModel):
    """One row of a tag's annual report history."""

    status_class: str
    url: str
    date: str
    report_no: str
    inspection_body: str
    status: str
    details: Optional[ReportRecord] = None
    details_error: Optional[str] = None

    @property
    def has_details(self) -> bool:
        return self.details is not None


class TagRecord(PipaModel):
    """Result of a tag search.

    When ``found`` is False only ``tag_id`` and ``error`` may be set.
    ``from_cache`` is owned by the lookup service, parsers never set it.
    """

    found: bool
    tag_id: Optional[str] = None
    error: Optional[str] = None

    status: Optional[str] = None
    status_class: Optional[str] = None
    unit_reference_no: Optional[str] = None
    type: Optional[str] = None
    current_operator: Optional[str] = None
    certificate_expiry_date: Optional[str] = None

    certificate_url: Optional[str] = None
    report_url: Optional[str] = None
    image_url: Optional[str] = None

    annual_reports: Optional[List[ReportSummary]] = None
    fetched_at: Optional[datetime] = None
    from_cache: Optional[bool] = None

    @classmethod
    def not_found(cls, tag_id: Optional[str] = None, error: Optional[str] = None) -> "TagRecord":
        return cls(found=False, tag_id=tag_id, error=error)

    def needs_report_details(self) -> bool:
        """Only the first report is checked; details are fetched all-or-nothing."""
        if not self.annual_reports:
            return False
        return not self.annual_reports[0].has_details
