from pipa_lookup.models.cache import CacheEntry
from pipa_lookup.models.report import (
    Badge,
    DeviceInfo,
    Dimensions,
    InspectionField,
    ReportDetails,
    ReportNotes,
    ReportRecord,
    UserLimits,
)
from pipa_lookup.models.tag import ReportSummary, TagRecord

__all__ = [
    "Badge",
    "CacheEntry",
    "DeviceInfo",
    "Dimensions",
    "InspectionField",
    "ReportDetails",
    "ReportNotes",
    "ReportRecord",
    "ReportSummary",
    "TagRecord",
    "UserLimits",
]
