"""
Class reminder business logic - transport-agnostic.
Used by the web API routes and the optional in-process scheduler.
"""

from .config import ConfigurationError, ReminderConfig, load_reminder_config
from .data_source import DataSourceError, fetch_documents
from .enums import AttendanceStatus, ReminderWindow
from .records import (
    RecordSnapshot,
    ReminderSettings,
    ScheduleRecord,
    StudentRecord,
    build_snapshot,
    decode_value,
    parse_document,
)

__all__ = [
    # Config
    'ConfigurationError', 'ReminderConfig', 'load_reminder_config',
    # Data source
    'DataSourceError', 'fetch_documents',
    # Enums
    'AttendanceStatus', 'ReminderWindow',
    # Records
    'RecordSnapshot', 'ReminderSettings', 'ScheduleRecord', 'StudentRecord',
    'build_snapshot', 'decode_value', 'parse_document',
]
