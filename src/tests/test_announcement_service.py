"""Tests for announcement_service: admin posting and the published feed."""

from datetime import datetime

import pytest

from shop_dashboard.models import Announcement
from shop_dashboard.services import announcement_service
from shop_dashboard.services.exceptions import (
    AnnouncementNotFound,
    PermissionDenied,
    ValidationError,
)


def _backdate(test_db, announcement_id, created_at):
    session = test_db()
    session.get(Announcement, announcement_id).created_at = created_at
    session.commit()


class TestCreateAnnouncement:
    def test_admin_posts(self, test_db, admin_user):
        announcement = announcement_service.create_announcement(
            "admin-1", " 年末年始の営業 ", "12/31は18時閉店です。"
        )

        assert announcement["title"] == "年末年始の営業"
        assert announcement["is_published"] is True

    def test_staff_cannot_post(self, test_db, staff_user):
        with pytest.raises(PermissionDenied):
            announcement_service.create_announcement("staff-1", "お知らせ", "本文")
        assert test_db().query(Announcement).count() == 0

    def test_title_and_body_are_required(self, test_db, admin_user):
        with pytest.raises(ValidationError) as exc_info:
            announcement_service.create_announcement("admin-1", "", "  ")
        assert exc_info.value.errors == [
            "Title: This field is required",
            "Body: This field is required",
        ]

    def test_title_too_long(self, test_db, admin_user):
        with pytest.raises(ValidationError):
            announcement_service.create_announcement("admin-1", "題" * 201, "本文")


class TestPublishedAnnouncements:
    def test_newest_first(self, test_db, admin_user):
        old = announcement_service.create_announcement("admin-1", "旧", "古いお知らせ")
        new = announcement_service.create_announcement("admin-1", "新", "新しいお知らせ")
        _backdate(test_db, old["id"], datetime(2024, 1, 1, 9, 0))
        _backdate(test_db, new["id"], datetime(2024, 3, 1, 9, 0))

        titles = [a["title"] for a in announcement_service.get_published_announcements()]
        assert titles == ["新", "旧"]

    def test_same_time_orders_by_newest_id(self, test_db, admin_user):
        first = announcement_service.create_announcement("admin-1", "一", "本文")
        second = announcement_service.create_announcement("admin-1", "二", "本文")
        for a in (first, second):
            _backdate(test_db, a["id"], datetime(2024, 1, 1, 9, 0))

        titles = [a["title"] for a in announcement_service.get_published_announcements()]
        assert titles == ["二", "一"]

    def test_drafts_are_hidden(self, test_db, admin_user):
        announcement_service.create_announcement("admin-1", "公開", "本文")
        announcement_service.create_announcement("admin-1", "下書き", "本文", publish=False)

        titles = [a["title"] for a in announcement_service.get_published_announcements()]
        assert titles == ["公開"]

    def test_limit(self, test_db, admin_user):
        for i in range(3):
            announcement_service.create_announcement("admin-1", f"お知らせ{i}", "本文")
        assert len(announcement_service.get_published_announcements(limit=2)) == 2

    def test_empty(self, test_db):
        assert announcement_service.get_published_announcements() == []


class TestSetPublished:
    def test_publish_a_draft(self, test_db, admin_user):
        draft = announcement_service.create_announcement("admin-1", "下書き", "本文", publish=False)

        announcement_service.set_published("admin-1", draft["id"])

        assert [a["id"] for a in announcement_service.get_published_announcements()] == [draft["id"]]

    def test_withdraw(self, test_db, admin_user):
        posted = announcement_service.create_announcement("admin-1", "公開", "本文")
        announcement_service.set_published("admin-1", posted["id"], is_published=False)
        assert announcement_service.get_published_announcements() == []

    def test_unknown_announcement(self, test_db, admin_user):
        with pytest.raises(AnnouncementNotFound):
            announcement_service.set_published("admin-1", 99)

    def test_staff_cannot_publish(self, test_db, admin_user, staff_user):
        draft = announcement_service.create_announcement("admin-1", "下書き", "本文", publish=False)
        with pytest.raises(PermissionDenied):
            announcement_service.set_published("staff-1", draft["id"])
