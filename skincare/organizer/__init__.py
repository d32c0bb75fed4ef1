"""Skincare and makeup inventory: expiry tracking, PAO and backups."""

from .config import (
    AlertsConfig,
    CameraConfig,
    DisplayConfig,
    ImportConfig,
    OrganizerConfig,
    ReportConfig,
    StorageConfig,
    load_config,
)
from .datemath import (
    MonthsDays,
    add_months,
    days_between,
    format_display_date,
    format_relative_time,
    months_days_between,
    pao_expiry_date,
    time_since_opening,
)
from .expiry import (
    ExpiryStatus,
    effective_expiry,
    expiring_within,
    expiry_status,
    sort_by_expiry,
)
from .migrations import RECORD_SCHEMA_VERSION, migrate, migrate_v1_record
from .models import ProductForm
from .reconcile import ImportFormatError, MergeMode, parse_import, reconcile

__all__ = [
    "add_months",
    "days_between",
    "months_days_between",
    "pao_expiry_date",
    "time_since_opening",
    "format_relative_time",
    "format_display_date",
    "MonthsDays",
    "effective_expiry",
    "sort_by_expiry",
    "expiring_within",
    "expiry_status",
    "ExpiryStatus",
    "ProductForm",
    "MergeMode",
    "ImportFormatError",
    "parse_import",
    "reconcile",
    "migrate",
    "migrate_v1_record",
    "RECORD_SCHEMA_VERSION",
    "OrganizerConfig",
    "StorageConfig",
    "ImportConfig",
    "DisplayConfig",
    "CameraConfig",
    "ReportConfig",
    "AlertsConfig",
    "load_config",
]
