"""Unit tests for the notification log."""
from ghostmatch.schemas import Notification, NotificationType
from ghostmatch.services.notification_center import NotificationCenter


def _notification(nid, read=False, timestamp=1_000):
    return Notification(
        id=nid,
        title=f"title {nid}",
        message=f"message {nid}",
        timestamp=timestamp,
        read=read,
        type=NotificationType.SYSTEM,
    )


class TestOrdering:
    def test_front_insert_regardless_of_timestamp(self):
        center = NotificationCenter()
        center.add_notification(_notification("new", timestamp=2_000))
        center.add_notification(_notification("old", timestamp=1_000))
        assert [n.id for n in center.get_notifications()] == ["old", "new"]

    def test_store_prepends_match_notification(self, store, user, candidate_x):
        store.add_match(candidate_x, user.id)
        ids = [n.id for n in store.get_notifications()]
        assert ids[1:] == ["welcome"]


class TestMarkAllRead:
    def test_marks_everything_read(self):
        center = NotificationCenter(
            [_notification("a"), _notification("b", read=True), _notification("c")]
        )
        assert center.unread_count() == 2

        assert center.mark_all_read() == 2
        assert all(n.read for n in center.get_notifications())

    def test_second_call_is_noop(self):
        center = NotificationCenter(
            [_notification("a"), _notification("b", read=True), _notification("c")]
        )
        center.mark_all_read()
        first = center.get_notifications()

        assert center.mark_all_read() == 0
        assert center.get_notifications() == first

    def test_store_mark_all_read_persists(self, store, gateway, user, candidate_x):
        store.add_match(candidate_x, user.id)
        assert store.unread_count() == 2

        assert store.mark_all_read() == 2
        assert store.unread_count() == 0
        assert all(n.read for n in gateway.load().bundle.notifications)

    def test_notify_stamps_current_time(self, store, clock):
        notification = store.notify(NotificationType.SYSTEM, "Heads up", "Maintenance tonight")
        assert notification.timestamp == clock.calls[-1]
        assert store.get_notifications()[0] == notification
