"""
Unit tests for the lab service layer.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from lab_recruitment.modules.labs import repository as lab_repository
from lab_recruitment.modules.labs.models import Lab, LabStatus
from lab_recruitment.modules.labs.schemas import LabCreate, LabUpdate
from lab_recruitment.modules.labs.service import (
    InvalidCapacityError,
    LabNotFoundError,
    create_lab,
    get_lab,
    list_labs,
    update_lab,
)

SERVICE = "lab_recruitment.modules.labs.service"


@pytest.fixture
def lab():
    lab = MagicMock(spec=Lab)
    lab.id = 5
    lab.name = "Robotics Lab"
    lab.status = LabStatus.ACTIVE
    lab.max_members = 10
    lab.current_members = 4
    return lab


class TestCreateLab:
    @pytest.mark.asyncio
    async def test_records_creator(self, mock_db, lab):
        data = LabCreate(name="Robotics Lab", max_members=10, tags=["ros", "cv"])
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.create = AsyncMock(return_value=lab)

            result = await create_lab(mock_db, data, created_by=1)

            assert result is lab
            kwargs = mock_repo.create.call_args.kwargs
            assert kwargs["created_by"] == 1
            assert kwargs["tags"] == ["ros", "cv"]


class TestGetLab:
    @pytest.mark.asyncio
    async def test_inactive_hidden_from_public(self, mock_db, lab):
        lab.status = LabStatus.INACTIVE
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=lab)

            with pytest.raises(LabNotFoundError):
                await get_lab(mock_db, 5, include_inactive=False)

            assert await get_lab(mock_db, 5, include_inactive=True) is lab


class TestListLabs:
    @pytest.mark.asyncio
    async def test_keyword_trimmed_and_page_clamped(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.list_labs = AsyncMock(return_value=([], 0))

            result = await list_labs(mock_db, page=-2, size=-1, keyword="  robo ")

            assert result["page"] == 1
            assert result["size"] == 10
            assert mock_repo.list_labs.call_args.kwargs["keyword"] == "robo"


class TestUpdateLab:
    @pytest.mark.asyncio
    async def test_partial_update(self, mock_db, lab):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=lab)
            mock_repo.save = AsyncMock(return_value=lab)

            result = await update_lab(mock_db, 5, LabUpdate(location="Building B, 301"))

            assert result.location == "Building B, 301"
            assert result.name == "Robotics Lab"

    @pytest.mark.asyncio
    async def test_capacity_below_members(self, mock_db, lab):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=lab)
            mock_repo.save = AsyncMock()

            with pytest.raises(InvalidCapacityError):
                await update_lab(mock_db, 5, LabUpdate(max_members=3))

            mock_repo.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_required_fields_not_cleared(self, mock_db, lab):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=lab)
            mock_repo.save = AsyncMock(return_value=lab)

            result = await update_lab(mock_db, 5, LabUpdate(name=None, description="New"))

            assert result.name == "Robotics Lab"
            assert result.description == "New"

    @pytest.mark.asyncio
    async def test_unknown_lab(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(LabNotFoundError) as exc_info:
                await update_lab(mock_db, 99, LabUpdate(name="New name"))

            assert exc_info.value.status_code == 404


class TestLabUpdateSchema:
    def test_empty_update_rejected(self):
        with pytest.raises(ValueError):
            LabUpdate()


class TestReserveSlot:
    @pytest.mark.asyncio
    async def test_slot_taken(self, mock_db):
        mock_db.execute = AsyncMock(return_value=MagicMock(rowcount=1))

        assert await lab_repository.reserve_slot(mock_db, 5) is True
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_full_lab_takes_nothing(self, mock_db):
        mock_db.execute = AsyncMock(return_value=MagicMock(rowcount=0))

        assert await lab_repository.reserve_slot(mock_db, 5) is False

    @pytest.mark.asyncio
    async def test_update_is_guarded_by_capacity(self, mock_db):
        """The increment and the capacity check happen in one statement."""
        mock_db.execute = AsyncMock(return_value=MagicMock(rowcount=1))

        await lab_repository.reserve_slot(mock_db, 5)

        statement = str(mock_db.execute.call_args.args[0])
        assert statement.startswith("UPDATE labs SET")
        assert "current_members=(labs.current_members + " in statement
        assert "labs.current_members < labs.max_members" in statement
