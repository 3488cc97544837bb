import pytest
from datetime import timedelta
from uuid import uuid4

from backoffice.core.errors import Forbidden, NotificationNotFound
from backoffice.models.notification import Notification, NotificationStatus, NotificationType
from backoffice.services.notification_service import NotificationDispatcher

from conftest import FIXED_NOW


class StepClock:
    """Each call is one minute after the previous one."""
    def __init__(self, start=FIXED_NOW):
        self.now = start

    def __call__(self):
        self.now += timedelta(minutes=1)
        return self.now


@pytest.fixture
def dispatcher():
    return NotificationDispatcher(clock=StepClock())


class TestListing:
    @pytest.mark.asyncio
    async def test_user_sees_own_and_broadcast(self, db, dispatcher):
        await dispatcher.create(NotificationType.SYSTEM, "For everyone", "hi")
        await dispatcher.create(NotificationType.SHIFT_UPDATE, "For alice", "shift", target_id="alice")
        await dispatcher.create(NotificationType.SHIFT_UPDATE, "For bob", "shift", target_id="bob")

        titles = [n.title for n in await dispatcher.list_for("alice")]

        assert sorted(titles) == ["For alice", "For everyone"]

    @pytest.mark.asyncio
    async def test_unread_first_then_newest(self, db, dispatcher):
        old = await dispatcher.create(NotificationType.SYSTEM, "old", "m")
        await dispatcher.create(NotificationType.SYSTEM, "middle", "m")
        read = await dispatcher.create(NotificationType.SYSTEM, "newest-read", "m")
        await dispatcher.mark_read(read.id, "alice")

        titles = [n.title for n in await dispatcher.list_for("alice")]

        assert titles == ["middle", "old", "newest-read"]
        assert old.status == NotificationStatus.UNREAD

    @pytest.mark.asyncio
    async def test_limit(self, db, dispatcher):
        for i in range(25):
            await dispatcher.create(NotificationType.SYSTEM, f"n{i}", "m")
        assert len(await dispatcher.list_for("alice")) == 20


class TestOwnership:
    @pytest.mark.asyncio
    async def test_cannot_read_someone_elses(self, db, dispatcher):
        note = await dispatcher.create(NotificationType.SHIFT_UPDATE, "t", "m", target_id="bob")
        with pytest.raises(Forbidden):
            await dispatcher.mark_read(note.id, "alice")

    @pytest.mark.asyncio
    async def test_admin_can_delete_any(self, db, dispatcher):
        note = await dispatcher.create(NotificationType.SHIFT_UPDATE, "t", "m", target_id="bob")

        with pytest.raises(Forbidden):
            await dispatcher.delete(note.id, "alice", "manager")
        await dispatcher.delete(note.id, "alice", "admin")

        assert not await Notification.exists(id=note.id)

    @pytest.mark.asyncio
    async def test_unknown_notification(self, db, dispatcher):
        with pytest.raises(NotificationNotFound):
            await dispatcher.mark_read(uuid4(), "alice")


@pytest.mark.asyncio
async def test_has_recent(db, dispatcher):
    note = await dispatcher.create(NotificationType.SYSTEM, "Brief", "m")

    assert await dispatcher.has_recent("Brief", note.created_at - timedelta(hours=24))
    assert not await dispatcher.has_recent("Brief", note.created_at + timedelta(seconds=1))
    assert not await dispatcher.has_recent("Other", note.created_at - timedelta(hours=24))
