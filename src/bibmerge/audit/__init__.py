"""Audit logging subsystem for bibmerge.

Main Components
---------------
- AuditLogger: JSONL event logger
- LogEvent: event envelope written one per line
"""

from bibmerge.audit.helpers import generate_run_id, get_environment_info
from bibmerge.audit.logger import AuditLogger
from bibmerge.audit.models import LogEvent
from bibmerge.utils import calculate_string_sha256, get_iso_timestamp

__all__ = [
    "AuditLogger",
    "LogEvent",
    "generate_run_id",
    "get_environment_info",
    "get_iso_timestamp",
    "calculate_string_sha256",
]
