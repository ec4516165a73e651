"""Tests for NotificationStore."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from notification_service.core.settings import PaginationSettings
from notification_service.features.notifications.models import NotificationRecord
from notification_service.features.notifications.service import NotificationStore

BASE_TIME = datetime(2025, 1, 1, tzinfo=UTC)


def _record(user_id: str, index: int, *, is_read: bool = False) -> NotificationRecord:
    return NotificationRecord(
        user_id=user_id,
        type="task_assigned",
        channel="in_app",
        title=f"Notification {index}",
        body="body",
        meta={},
        is_read=is_read,
        created_at=BASE_TIME + timedelta(minutes=index),
    )


@pytest.fixture
async def seeded(db_session) -> list[NotificationRecord]:
    mine = [_record("user-1", i) for i in range(5)]
    theirs = [_record("user-2", i) for i in range(2)]
    db_session.add_all([*mine, *theirs])
    await db_session.commit()
    return mine


@pytest.fixture
def store(db_session) -> NotificationStore:
    return NotificationStore(
        db_session, pagination=PaginationSettings(default_page_size=20, max_page_size=100)
    )


async def test_list_pages_newest_first(store, seeded) -> None:
    first, page, size = await store.list("user-1", page=1, page_size=2)

    assert (page, size) == (1, 2)
    assert first.total == 5
    assert [r.title for r in first.items] == ["Notification 4", "Notification 3"]
    assert first.has_more is True

    last, _, _ = await store.list("user-1", page=3, page_size=2)
    assert [r.title for r in last.items] == ["Notification 0"]
    assert last.has_more is False


async def test_list_only_returns_own_records(store, seeded) -> None:
    result, _, _ = await store.list("user-2")

    assert result.total == 2
    assert {r.user_id for r in result.items} == {"user-2"}


@pytest.mark.parametrize(
    ("page", "page_size", "expected"),
    [
        (None, None, (1, 20)),
        (0, 0, (1, 20)),
        (-3, 5, (1, 5)),
        (2, 1000, (2, 100)),
    ],
)
async def test_list_clamps_paging(store, page, page_size, expected) -> None:
    _, effective_page, effective_size = await store.list("user-1", page, page_size)

    assert (effective_page, effective_size) == expected


async def test_page_past_the_end_is_empty(store, seeded) -> None:
    result, _, _ = await store.list("user-1", page=10, page_size=2)

    assert result.items == []
    assert result.total == 5
    assert result.has_more is False


async def test_mark_read_flips_own_record(store, seeded, db_session) -> None:
    record = await store.mark_read(seeded[0].id, "user-1")
    await db_session.commit()

    assert record is not None
    assert record.is_read is True
    assert await store.unread_count("user-1") == 4


async def test_mark_read_is_idempotent(store, seeded, db_session) -> None:
    await store.mark_read(seeded[0].id, "user-1")
    record = await store.mark_read(seeded[0].id, "user-1")

    assert record is not None
    assert record.is_read is True


async def test_mark_read_of_foreign_or_missing_record_is_none(store, seeded) -> None:
    assert await store.mark_read(seeded[0].id, "user-2") is None
    assert await store.mark_read(uuid4(), "user-1") is None
    assert await store.unread_count("user-1") == 5


async def test_mark_all_read_counts_only_unread(store, db_session) -> None:
    db_session.add_all(
        [
            _record("user-1", 0),
            _record("user-1", 1),
            _record("user-1", 2, is_read=True),
            _record("user-2", 0),
        ]
    )
    await db_session.commit()

    assert await store.mark_all_read("user-1") == 2
    await db_session.commit()

    assert await store.unread_count("user-1") == 0
    assert await store.unread_count("user-2") == 1
    assert await store.mark_all_read("user-1") == 0
