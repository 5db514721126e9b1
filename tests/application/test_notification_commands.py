"""Application tests for reading dashboard notifications."""

import pytest
from factories import assign_order, inbox, place_order
from protean import current_domain
from teffmarket.notification.helpers import notify
from teffmarket.notification.notification import Notification
from teffmarket.notification.reading import MarkAllNotificationsRead, MarkNotificationRead
from teffmarket.notification.repository import INBOX_LIMIT
from teffmarket.shared.errors import ForbiddenError, NotFoundError


@pytest.fixture()
def two_notifications(admin_id, merchant_x, white_teff):
    for _ in range(2):
        assign_order(place_order([(white_teff, 1.0)]), [merchant_x], "dashboard", admin_id)


class TestMarkRead:
    def test_recipient_marks_one_read(self, two_notifications, merchant_x):
        target = inbox(merchant_x)[0]
        current_domain.process(
            MarkNotificationRead(notification_id=str(target.id), reader_id=merchant_x), asynchronous=False
        )

        assert len(inbox(merchant_x, status="read")) == 1
        assert len(inbox(merchant_x, status="unread")) == 1

    def test_other_account_is_forbidden(self, two_notifications, merchant_x, merchant_y):
        target = inbox(merchant_x)[0]
        with pytest.raises(ForbiddenError):
            current_domain.process(
                MarkNotificationRead(notification_id=str(target.id), reader_id=merchant_y), asynchronous=False
            )

    def test_unknown_notification(self, merchant_x):
        with pytest.raises(NotFoundError):
            current_domain.process(
                MarkNotificationRead(notification_id="no-such-id", reader_id=merchant_x), asynchronous=False
            )


class TestMarkAllRead:
    def test_all_unread_are_marked_with_one_timestamp(self, two_notifications, merchant_x):
        updated = current_domain.process(MarkAllNotificationsRead(reader_id=merchant_x), asynchronous=False)

        read = inbox(merchant_x, status="read")
        assert updated == 2
        assert len(read) == 2
        assert len({n.read_at for n in read}) == 1

    def test_nothing_left_to_mark(self, two_notifications, merchant_x):
        current_domain.process(MarkAllNotificationsRead(reader_id=merchant_x), asynchronous=False)
        assert current_domain.process(MarkAllNotificationsRead(reader_id=merchant_x), asynchronous=False) == 0


class TestLargeInbox:
    def test_mark_all_read_reaches_every_page(self, monkeypatch, merchant_x):
        monkeypatch.setattr("teffmarket.shared.queries.PAGE_SIZE", 2)
        for index in range(5):
            notify(merchant_x, "order_assigned", "New Order Assigned", f"Order #{index}")

        updated = current_domain.process(MarkAllNotificationsRead(reader_id=merchant_x), asynchronous=False)

        assert updated == 5
        assert current_domain.repository_for(Notification).unread_for(merchant_x) == []

    def test_inbox_keeps_the_newest(self, merchant_x):
        ids = [
            notify(merchant_x, "order_assigned", "New Order Assigned", f"Order #{index}")
            for index in range(INBOX_LIMIT + 5)
        ]

        shown = [str(n.id) for n in inbox(merchant_x)]

        assert len(shown) == INBOX_LIMIT
        assert ids[-1] in shown
        assert ids[0] not in shown

    def test_get_notification_unknown_id(self):
        with pytest.raises(NotFoundError):
            current_domain.repository_for(Notification).get_notification("no-such-id")
