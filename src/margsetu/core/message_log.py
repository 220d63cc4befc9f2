from collections import deque
from threading import Lock

from pydantic import BaseModel, ConfigDict, Field

from margsetu.models import now_millis


class LogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(default_factory=now_millis)
    sender: str | None = None
    message: str
    kind: str
    processed: bool


class MessageLog:
    """Most recent inbound messages, newest first.

    Owned by whoever creates it and handed to the components that need it. Oldest
    entries fall off once `max_entries` is reached.
    """

    def __init__(self, max_entries: int = 100):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")

        self.__entries: deque[LogEntry] = deque(maxlen=max_entries)
        self.__lock = Lock()

    @property
    def max_entries(self) -> int:
        return self.__entries.maxlen

    def add(self, entry: LogEntry):
        with self.__lock:
            self.__entries.appendleft(entry)

    def recent(self, limit: int | None = None) -> list[LogEntry]:
        with self.__lock:
            entries = list(self.__entries)
        return entries if limit is None else entries[:limit]

    def clear(self):
        with self.__lock:
            self.__entries.clear()

    def __len__(self) -> int:
        return len(self.__entries)
