# src/gptsession/sessions/session.py
"""
The conversation session: an ordered, append-only log of message records.

A session stores serialized message records (plain dicts), not ``Message``
objects. It can mirror every appended record to a JSON Lines file
("auto-sync"), so a conversation survives process restarts and can be
resumed by arming auto-sync on the same path again.
"""

import logging
import pathlib
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from ..models import Message, Role
from .history_file import append_record, read_records

logger = logging.getLogger(__name__)

MessageBuilder = Callable[[Message], Any]
AppendSource = Union[Message, Dict[str, Any], Callable[["Session"], Any]]


class Session:
    """
    An ordered conversation history with optional auto-sync to disk.

    The session exclusively owns its in-memory history. The auto-sync
    file is written to but not locked; only one writer per file is
    supported.
    """

    def __init__(self, history: Optional[List[Dict[str, Any]]] = None, client: Any = None):
        """
        Initializes a session.

        Args:
            history: Records to seed the session with, e.g. from a prior
                     ``dump()``. The list is copied.
            client: The owning client, if any.
        """
        self._history: List[Dict[str, Any]] = list(history) if history else []
        self._client = client
        self._auto_sync_path: Optional[pathlib.Path] = None

    def __len__(self) -> int:
        return len(self._history)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(list(self._history))

    def __repr__(self) -> str:
        return f"Session(records={len(self._history)}, auto_sync={str(self._auto_sync_path) if self._auto_sync_path else None})"

    @property
    def auto_sync_path(self) -> Optional[pathlib.Path]:
        return self._auto_sync_path

    @property
    def auto_sync_enabled(self) -> bool:
        return self._auto_sync_path is not None

    def clone(self) -> "Session":
        """Returns a session with a copy of the history and auto-sync disarmed."""
        return Session(self._history, client=self._client)

    def dump(self) -> List[Dict[str, Any]]:
        """Returns a copy of the ordered history."""
        return list(self._history)

    def new_message(self, role: Union[str, Role] = Role.USER, builder: Optional[MessageBuilder] = None) -> Message:
        """
        Creates a message without appending it.

        Args:
            role: Role of the new message.
            builder: Optional callable run against the new message.
        """
        message = Message(role=role)
        if builder:
            builder(message)
        return message

    def enable_auto_sync(self, path: Union[str, pathlib.Path], initializer: Optional[Callable[[], Any]] = None) -> None:
        """
        Arms auto-sync on ``path``.

        If the file exists, the in-memory history is replaced by the records
        it holds and ``initializer`` is not called. Otherwise ``initializer``
        runs (typically to append a system prompt) and every append from
        then on, including those made by the initializer, is written to the
        file.

        Raises:
            ParseError: If the existing file holds a malformed line.
        """
        sync_path = pathlib.Path(path)

        if sync_path.exists():
            # Nothing is armed or replaced unless the whole file parses.
            self._history = read_records(sync_path)
            self._auto_sync_path = sync_path
            logger.info(f"Auto-sync enabled; resumed {len(self._history)} records from {sync_path}")
        else:
            logger.info(f"Auto-sync enabled; {sync_path} does not exist yet, starting a new history.")
            self._auto_sync_path = sync_path
            if initializer:
                initializer()

    def disable_auto_sync(self) -> None:
        """Stops mirroring appends to disk. Already written records stay on disk."""
        if self._auto_sync_path:
            logger.debug(f"Auto-sync to {self._auto_sync_path} disabled.")
        self._auto_sync_path = None

    def append(self, source: AppendSource) -> Dict[str, Any]:
        """
        Appends a message to the history.

        Args:
            source: A ``Message``, an already serialized record, or a callable
                    receiving this session and returning a ``Message``.

        Returns:
            The stored record.

        Raises:
            TypeError: If ``source`` does not yield a message.
            SessionSyncError: If auto-sync is armed and the write fails.
        """
        message = source(self) if callable(source) and not isinstance(source, Message) else source

        if isinstance(message, Message):
            record = message.to_dict()
        elif isinstance(message, dict):
            record = dict(message)
        else:
            raise TypeError(f"Cannot append {type(message).__name__} to a session; expected Message or dict.")

        self._history.append(record)
        self._sync(record)
        return record

    def _sync(self, record: Dict[str, Any]) -> None:
        if self._auto_sync_path is None:
            return
        append_record(self._auto_sync_path, record)

    @classmethod
    def load(cls, path: Optional[Union[str, pathlib.Path]], client: Any = None) -> "Session":
        """
        Creates a session from a history file without arming auto-sync.

        Args:
            path: The JSON Lines history file. None yields an empty session.

        Raises:
            SessionFileNotFoundError: If the file does not exist.
            ParseError: If a line is not valid JSON.
        """
        if path is None:
            return cls(client=client)
        records = read_records(path)
        logger.debug(f"Loaded session with {len(records)} records from {path}")
        return cls(records, client=client)
