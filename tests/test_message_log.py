from concurrent.futures import ThreadPoolExecutor

import pytest

from margsetu.core import LogEntry, MessageLog


def entry(n: int) -> LogEntry:
    return LogEntry(sender="+910000000000", message=f"msg {n}", kind="unrecognized", processed=False)


def test_newest_first():
    log = MessageLog(max_entries=5)
    for n in range(3):
        log.add(entry(n))

    assert [e.message for e in log.recent()] == ["msg 2", "msg 1", "msg 0"]


def test_bounded():
    log = MessageLog(max_entries=3)
    for n in range(10):
        log.add(entry(n))

    assert len(log) == 3
    assert log.max_entries == 3
    assert [e.message for e in log.recent()] == ["msg 9", "msg 8", "msg 7"]


def test_limit():
    log = MessageLog(max_entries=10)
    for n in range(5):
        log.add(entry(n))

    assert [e.message for e in log.recent(2)] == ["msg 4", "msg 3"]


def test_clear():
    log = MessageLog()
    log.add(entry(1))
    log.clear()
    assert log.recent() == []


def test_instances_are_independent():
    first, second = MessageLog(), MessageLog()
    first.add(entry(1))
    assert len(second) == 0


def test_rejects_non_positive_size():
    with pytest.raises(ValueError):
        MessageLog(max_entries=0)


def test_concurrent_writers():
    log = MessageLog(max_entries=50)
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda n: log.add(entry(n)), range(500)))

    assert len(log) == 50
