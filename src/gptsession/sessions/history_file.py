# src/gptsession/sessions/history_file.py
"""
JSON Lines persistence for session history.

A history file holds one JSON-serialized message record per line, in
conversation order, with no enclosing array. Records are only ever
appended; the file is never rewritten.
"""

import json
import logging
import pathlib
from typing import Any, Dict, List, Union

from ..exceptions import ParseError, SessionFileNotFoundError, SessionSyncError

logger = logging.getLogger(__name__)

PathLike = Union[str, pathlib.Path]


def read_records(path: PathLike) -> List[Dict[str, Any]]:
    """
    Reads every record of a history file.

    Blank lines, including a trailing one, are skipped.

    Args:
        path: The history file to read.

    Returns:
        The records in file order.

    Raises:
        SessionFileNotFoundError: If the file does not exist.
        ParseError: If a non-blank line is not valid JSON.
    """
    history_path = pathlib.Path(path)
    try:
        content = history_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.error(f"History file not found: {history_path}")
        raise SessionFileNotFoundError(str(history_path))

    records: List[Dict[str, Any]] = []
    for line_num, line in enumerate(content.split("\n"), 1):
        if not line.strip():
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON on line {line_num} of history file {history_path}: {e}")
            raise ParseError(str(history_path), line_num, f"Invalid JSON record ({e.msg}).")

    logger.debug(f"Read {len(records)} records from {history_path}")
    return records


def append_record(path: PathLike, record: Dict[str, Any]) -> None:
    """
    Appends one record as a single line, creating the file if needed.

    Raises:
        SessionSyncError: If the record cannot be serialized or written.
    """
    history_path = pathlib.Path(path)
    try:
        line = json.dumps(record, ensure_ascii=False)
        with history_path.open(mode="a", encoding="utf-8") as f:
            f.write(line + "\n")
        logger.debug(f"Record with role '{record.get('role')}' appended to {history_path}")
    except TypeError as e:
        logger.error(f"Error serializing history record for {history_path}: {e}")
        raise SessionSyncError(str(history_path), f"Failed to serialize record: {e}.")
    except OSError as e:
        logger.error(f"Error writing history record to {history_path}: {e}")
        raise SessionSyncError(str(history_path), f"Failed to write record: {e}.")
