from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from pipa_lookup.models.base import PipaModel


class Badge(PipaModel):
    status_class: str
    status: str


class InspectionField(PipaModel):
    label: str
    status_class: Optional[str] = None
    status: Optional[str] = None
    value: Optional[str] = None
    notes: Optional[str] = None


class ReportDetails(PipaModel):
    creation_date: Optional[str] = None
    inspection_date: Optional[str] = None
    place_of_inspection: Optional[str] = None
    inspector: Optional[str] = None
    structure_version: Optional[str] = None
    indoor_use_only: Optional[str] = None


class DeviceInfo(PipaModel):
    pipa_reference_number: Optional[str] = None
    tag_number: Optional[str] = None
    type: Optional[str] = None
    name: Optional[str] = None
    manufacturer: Optional[str] = None
    device_serial_number: Optional[str] = None
    date_manufactured: Optional[str] = None
    operation_manual_present: Optional[Badge] = None


class Dimensions(PipaModel):
    """Unit suffixes are kept verbatim ("5.5m")."""

    length: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None


class UserLimits(PipaModel):
    up_to_1_0m: Optional[int] = Field(None, alias="upTo1_0m")
    up_to_1_2m: Optional[int] = Field(None, alias="upTo1_2m")
    up_to_1_5m: Optional[int] = Field(None, alias="upTo1_5m")
    up_to_1_8m: Optional[int] = Field(None, alias="upTo1_8m")
    custom_max_height: Optional[str] = None


class ReportNotes(PipaModel):
    additional_notes: Optional[str] = None
    risk_assessment_notes: Optional[str] = None
    repairs_needed: Optional[str] = None
    advisory_items: Optional[str] = None


class ReportRecord(PipaModel):
    """A single inspection report page, or the reason it could not be read."""

    found: bool
    is_pdf: Optional[bool] = None
    redirect_url: Optional[str] = None
    error: Optional[str] = None

    # Intro table
    report_id: Optional[str] = None
    id: Optional[str] = None
    valid_from: Optional[str] = None
    expiry_date: Optional[str] = None
    status: Optional[str] = None
    status_class: Optional[str] = None
    inspection_body: Optional[str] = None
    tag_no: Optional[str] = None
    device_type: Optional[str] = None
    serial_number: Optional[str] = None
    image_url: Optional[str] = None

    report_details: Optional[ReportDetails] = None
    device: Optional[DeviceInfo] = None
    dimensions: Optional[Dimensions] = None
    user_limits: Optional[UserLimits] = None
    notes: Optional[ReportNotes] = None
    inspection_sections: Optional[Dict[str, List[InspectionField]]] = None
    fetched_at: Optional[datetime] = None

    @classmethod
    def not_found(cls, error: Optional[str] = None, **extra) -> "ReportRecord":
        return cls(found=False, error=error, **extra)
