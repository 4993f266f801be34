"""
Unit tests for the interview applications service layer.

These tests cover:
- Verification code requests
- Application submission with code verification
- Admin listing, updates and deletion
"""

from unittest.mock import AsyncMock, patch

import pytest

from lab_recruitment.modules.interview_applications.models import InterviewStatus
from lab_recruitment.modules.interview_applications.service import (
    ApplicationNotFoundError,
    DuplicateApplicationError,
    InvalidVerificationCodeError,
    delete_application,
    list_applications,
    request_code,
    submit_application,
    update_application,
)

SERVICE = "lab_recruitment.modules.interview_applications.service"
EMAIL = "lin.wei@example.edu"


class TestRequestCode:
    @pytest.mark.asyncio
    async def test_issues_code(self, mock_db, registry, code_sender):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=None)

            code = await request_code(mock_db, registry, "Lin.Wei@Example.edu")

            assert len(code) == 6
            code_sender.assert_awaited_once_with(EMAIL, code, 5)

    @pytest.mark.asyncio
    async def test_rejects_email_with_application(
        self, mock_db, registry, code_sender, sample_application_model
    ):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=sample_application_model)

            with pytest.raises(DuplicateApplicationError) as exc_info:
                await request_code(mock_db, registry, EMAIL)

            assert exc_info.value.status_code == 409
            code_sender.assert_not_called()


class TestSubmitApplication:
    @pytest.mark.asyncio
    async def test_submit_success(
        self,
        mock_db,
        registry,
        code_store,
        sample_application_create,
        sample_application_model,
    ):
        code = await registry.issue_code(EMAIL)
        data = sample_application_create.model_copy(update={"code": code})

        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.send_application_confirmation") as mock_email,
        ):
            mock_repo.get_by_email = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock(return_value=sample_application_model)
            mock_email.return_value = True

            result = await submit_application(mock_db, registry, data)

            assert result is sample_application_model
            assert result.status == InterviewStatus.PENDING
            mock_repo.create.assert_awaited_once_with(mock_db, data)
            mock_email.assert_awaited_once_with(to_email=EMAIL, applicant_name="Lin Wei")
            assert EMAIL not in code_store

    @pytest.mark.asyncio
    async def test_code_cannot_be_reused(
        self, mock_db, registry, sample_application_create, sample_application_model
    ):
        code = await registry.issue_code(EMAIL)
        data = sample_application_create.model_copy(update={"code": code})

        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.send_application_confirmation", return_value=True),
        ):
            mock_repo.get_by_email = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock(return_value=sample_application_model)

            await submit_application(mock_db, registry, data)

            with pytest.raises(InvalidVerificationCodeError):
                await submit_application(mock_db, registry, data)

            assert mock_repo.create.await_count == 1

    @pytest.mark.asyncio
    async def test_duplicate_checked_before_code(
        self,
        mock_db,
        registry,
        code_store,
        sample_application_create,
        sample_application_model,
    ):
        """A duplicate is rejected without consuming the outstanding code."""
        code = await registry.issue_code(EMAIL)
        data = sample_application_create.model_copy(update={"code": code})

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=sample_application_model)
            mock_repo.create = AsyncMock()

            with pytest.raises(DuplicateApplicationError):
                await submit_application(mock_db, registry, data)

            mock_repo.create.assert_not_called()
            assert EMAIL in code_store

    @pytest.mark.asyncio
    async def test_wrong_code(self, mock_db, registry, sample_application_create):
        code = await registry.issue_code(EMAIL)
        wrong = "000000" if code != "000000" else "111111"
        data = sample_application_create.model_copy(update={"code": wrong})

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock()

            with pytest.raises(InvalidVerificationCodeError) as exc_info:
                await submit_application(mock_db, registry, data)

            assert exc_info.value.status_code == 400
            mock_repo.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_expired_code(self, mock_db, registry, clock, sample_application_create):
        code = await registry.issue_code(EMAIL)
        clock.advance(minutes=6)
        data = sample_application_create.model_copy(update={"code": code})

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock()

            with pytest.raises(InvalidVerificationCodeError):
                await submit_application(mock_db, registry, data)

            mock_repo.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_confirmation_failure_does_not_fail_submission(
        self, mock_db, registry, sample_application_create, sample_application_model
    ):
        code = await registry.issue_code(EMAIL)
        data = sample_application_create.model_copy(update={"code": code})

        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.send_application_confirmation") as mock_email,
        ):
            mock_repo.get_by_email = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock(return_value=sample_application_model)
            mock_email.side_effect = ConnectionError("smtp down")

            result = await submit_application(mock_db, registry, data)

            assert result is sample_application_model


class TestListApplications:
    @pytest.mark.asyncio
    async def test_pagination_is_clamped(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.list_applications = AsyncMock(return_value=([], 0))

            result = await list_applications(mock_db, page=0, size=500)

            assert result == {"total": 0, "page": 1, "size": 100, "items": []}
            kwargs = mock_repo.list_applications.call_args.kwargs
            assert kwargs["offset"] == 0
            assert kwargs["limit"] == 100

    @pytest.mark.asyncio
    async def test_zero_size_uses_default(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.list_applications = AsyncMock(return_value=([], 0))

            result = await list_applications(mock_db, page=3, size=0)

            assert result["size"] == 10
            assert mock_repo.list_applications.call_args.kwargs["offset"] == 20

    @pytest.mark.asyncio
    async def test_filters_are_forwarded(self, mock_db, sample_application_model):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.list_applications = AsyncMock(
                return_value=([sample_application_model], 1)
            )

            result = await list_applications(
                mock_db, status=InterviewStatus.PENDING, name="  Lin  "
            )

            assert result["total"] == 1
            kwargs = mock_repo.list_applications.call_args.kwargs
            assert kwargs["status"] == InterviewStatus.PENDING
            assert kwargs["name"] == "Lin"


class TestUpdateApplication:
    @pytest.mark.asyncio
    async def test_not_found(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(ApplicationNotFoundError) as exc_info:
                await update_application(mock_db, 42, InterviewStatus.PASSED, None)

            assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_status_change_emails_applicant(self, mock_db, sample_application_model):
        async def apply_update(db, application, status, remarks):
            application.status = status
            application.admin_remarks = remarks
            return application

        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.send_application_status_update") as mock_email,
        ):
            mock_repo.get_by_id = AsyncMock(return_value=sample_application_model)
            mock_repo.update_status = AsyncMock(side_effect=apply_update)
            mock_email.return_value = True

            result = await update_application(
                mock_db, 1, InterviewStatus.INTERVIEWED, "Great interview"
            )

            assert result.status == InterviewStatus.INTERVIEWED
            mock_email.assert_awaited_once_with(
                to_email=EMAIL,
                applicant_name="Lin Wei",
                status="interviewed",
                remarks="Great interview",
            )

    @pytest.mark.asyncio
    async def test_any_status_may_follow_any_other(self, mock_db, sample_application_model):
        """Rejected applications can be moved back to pending."""
        sample_application_model.status = InterviewStatus.REJECTED

        async def apply_update(db, application, status, remarks):
            application.status = status
            return application

        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.send_application_status_update", return_value=True),
        ):
            mock_repo.get_by_id = AsyncMock(return_value=sample_application_model)
            mock_repo.update_status = AsyncMock(side_effect=apply_update)

            result = await update_application(mock_db, 1, InterviewStatus.PENDING, None)

            assert result.status == InterviewStatus.PENDING

    @pytest.mark.asyncio
    async def test_unchanged_status_sends_nothing(self, mock_db, sample_application_model):
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.send_application_status_update") as mock_email,
        ):
            mock_repo.get_by_id = AsyncMock(return_value=sample_application_model)
            mock_repo.update_status = AsyncMock(return_value=sample_application_model)

            await update_application(mock_db, 1, InterviewStatus.PENDING, "note")

            mock_email.assert_not_called()

    @pytest.mark.asyncio
    async def test_notify_disabled(self, mock_db, sample_application_model):
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.send_application_status_update") as mock_email,
        ):
            mock_repo.get_by_id = AsyncMock(return_value=sample_application_model)
            mock_repo.update_status = AsyncMock(return_value=sample_application_model)

            await update_application(mock_db, 1, InterviewStatus.PASSED, None, notify=False)

            mock_email.assert_not_called()


class TestDeleteApplication:
    @pytest.mark.asyncio
    async def test_soft_deletes(self, mock_db, sample_application_model):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_application_model)
            mock_repo.soft_delete = AsyncMock()

            await delete_application(mock_db, 1)

            mock_repo.soft_delete.assert_awaited_once_with(mock_db, sample_application_model)

    @pytest.mark.asyncio
    async def test_not_found(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(ApplicationNotFoundError):
                await delete_application(mock_db, 1)
