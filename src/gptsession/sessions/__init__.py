# src/gptsession/sessions/__init__.py
"""
Session management for the gptsession library.

Components:
    - Session: ordered conversation history with optional auto-sync
    - read_records / append_record: JSON Lines history file helpers
"""

from .history_file import append_record, read_records
from .session import Session

__all__ = [
    "Session",
    "read_records",
    "append_record",
]
