"""
Unit tests for the notification service layer.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from lab_recruitment.modules.notifications.models import Notification, NotificationType
from lab_recruitment.modules.notifications.service import (
    NotificationNotFoundError,
    list_notifications,
    mark_all_read,
    mark_read,
    notify,
)

SERVICE = "lab_recruitment.modules.notifications.service"


@pytest.fixture
def notification():
    notification = MagicMock(spec=Notification)
    notification.id = 3
    notification.user_id = 2
    notification.is_read = False
    return notification


class TestNotify:
    @pytest.mark.asyncio
    async def test_defers_commit_when_asked(self, mock_db, notification):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.create = AsyncMock(return_value=notification)

            await notify(
                mock_db,
                user_id=2,
                title="Application accepted",
                content="Welcome aboard.",
                type=NotificationType.APPLICATION,
                commit=False,
            )

            assert mock_repo.create.call_args.kwargs["commit"] is False


class TestMarkRead:
    @pytest.mark.asyncio
    async def test_marks_unread(self, mock_db, notification):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_for_user = AsyncMock(return_value=notification)
            mock_repo.mark_read = AsyncMock(return_value=notification)

            await mark_read(mock_db, 2, 3)

            mock_repo.get_for_user.assert_awaited_once_with(mock_db, 3, 2)
            mock_repo.mark_read.assert_awaited_once_with(mock_db, notification)

    @pytest.mark.asyncio
    async def test_already_read_is_noop(self, mock_db, notification):
        notification.is_read = True
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_for_user = AsyncMock(return_value=notification)
            mock_repo.mark_read = AsyncMock()

            assert await mark_read(mock_db, 2, 3) is notification
            mock_repo.mark_read.assert_not_called()

    @pytest.mark.asyncio
    async def test_other_users_notification_not_found(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_for_user = AsyncMock(return_value=None)

            with pytest.raises(NotificationNotFoundError) as exc_info:
                await mark_read(mock_db, 9, 3)

            assert exc_info.value.status_code == 404


class TestListing:
    @pytest.mark.asyncio
    async def test_unread_filter_forwarded(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.list_for_user = AsyncMock(return_value=([], 0))

            result = await list_notifications(mock_db, 2, page=2, size=5, unread_only=True)

            assert result == {"total": 0, "page": 2, "size": 5, "items": []}
            kwargs = mock_repo.list_for_user.call_args.kwargs
            assert kwargs["unread_only"] is True
            assert kwargs["offset"] == 5

    @pytest.mark.asyncio
    async def test_mark_all_read_returns_count(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.mark_all_read = AsyncMock(return_value=4)

            assert await mark_all_read(mock_db, 2) == 4
