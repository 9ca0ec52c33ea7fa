"""Тесты для CatalogService

Покрывает:
- Валидацию при создании и обновлении услуги
- Нормализацию доступности
- Удаление услуги с отвязкой бронирований
"""

import pytest

from database.repositories import ReservationRepository
from services.catalog_service import CatalogService, default_time_ladder
from utils.exceptions import ConflictError, NotFound, ValidationError


class TestCreateService:
    """Создание услуги"""

    @pytest.mark.asyncio
    async def test_create_with_defaults(self, init_database):
        service = await CatalogService.create_service({
            "name": "  Manicure ", "duration": "1 h", "price": "2500.50",
        })

        assert service.id is not None
        assert service.name == "Manicure"
        assert service.price == 2500.5
        assert service.available_days == [1, 2, 3, 4, 5, 6]
        assert service.available_times == default_time_ladder()

    @pytest.mark.asyncio
    async def test_create_normalizes_days(self, init_database):
        service = await CatalogService.create_service({
            "name": "Brows", "duration": "30 min", "price": 900,
            "available_days": [0, 0, 3, 8, -1],
        })
        assert service.available_days == [0, 3]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fields", [
        {"duration": "1 h", "price": 10},
        {"name": "X", "price": 10},
        {"name": " ", "duration": "1 h", "price": 10},
        {"name": "X", "duration": "1 h", "price": "abc"},
        {"name": "X", "duration": "1 h", "price": "nan"},
        {"name": "X", "duration": "1 h"},
    ])
    async def test_create_validation(self, init_database, fields):
        with pytest.raises(ValidationError):
            await CatalogService.create_service(fields)
        assert await CatalogService.list_services() == []

    @pytest.mark.asyncio
    async def test_duplicate_name_conflict(self, create_service):
        await create_service()
        with pytest.raises(ConflictError):
            await create_service()


class TestUpdateService:
    """Обновление услуги"""

    @pytest.mark.asyncio
    async def test_partial_update(self, create_service):
        service = await create_service()
        updated = await CatalogService.update_service(service.id, {
            "price": "2000", "available_times": ["12:00", "10:00"],
        })

        assert updated.price == 2000.0
        assert updated.available_times == ["12:00", "10:00"]
        assert updated.name == service.name
        assert updated.available_days == service.available_days

    @pytest.mark.asyncio
    async def test_empty_lists_reset_to_defaults(self, create_service):
        service = await create_service(available_days=[0], available_times=["09:00"])
        updated = await CatalogService.update_service(service.id, {
            "available_days": [], "available_times": [],
        })

        assert updated.available_days == [1, 2, 3, 4, 5, 6]
        assert updated.available_times == default_time_ladder()

    @pytest.mark.asyncio
    async def test_empty_update_rejected(self, create_service):
        service = await create_service()
        with pytest.raises(ValidationError):
            await CatalogService.update_service(service.id, {})

    @pytest.mark.asyncio
    async def test_invalid_price_rejected(self, create_service):
        service = await create_service()
        with pytest.raises(ValidationError):
            await CatalogService.update_service(service.id, {"price": "free"})

        stored = await CatalogService.get_service(service.id)
        assert stored.price == 1500.0

    @pytest.mark.asyncio
    async def test_unknown_service(self, init_database):
        with pytest.raises(NotFound):
            await CatalogService.update_service(99999, {"name": "New"})
        with pytest.raises(NotFound):
            await CatalogService.get_service(99999)

    @pytest.mark.asyncio
    async def test_rename_to_existing_name_conflict(self, create_service):
        await create_service(name="Color")
        service = await create_service()
        with pytest.raises(ConflictError):
            await CatalogService.update_service(service.id, {"name": "Color"})

    @pytest.mark.asyncio
    async def test_rename_colliding_with_detached_slot_rolls_back(self, create_service):
        """Каскад названия не может занять слот отвязанной записи"""
        slot = {"whatsapp": "1", "date": "2030-06-10", "time": "10:00"}
        haircut = await create_service()
        await ReservationRepository.create({
            **slot, "name": "Ana", "service_id": haircut.id, "service": haircut.name,
        })
        await CatalogService.delete_service(haircut.id)

        color = await create_service(name="Color")
        attached = await ReservationRepository.create({
            **slot, "name": "Bea", "service_id": color.id, "service": color.name,
        })

        with pytest.raises(ConflictError):
            await CatalogService.update_service(color.id, {"name": "Haircut"})

        assert (await CatalogService.get_service(color.id)).name == "Color"
        assert (await ReservationRepository.get(attached.id)).service == "Color"


class TestDeleteService:
    """Удаление услуги"""

    @pytest.mark.asyncio
    async def test_delete_keeps_reservation_history(self, create_service):
        service = await create_service()
        reservation = await ReservationRepository.create({
            "name": "Ana", "whatsapp": "1", "service_id": service.id,
            "service": service.name, "date": "2030-06-10", "time": "10:00",
        })

        assert await CatalogService.delete_service(service.id) == 1

        assert await CatalogService.list_services() == []
        stored = await ReservationRepository.get(reservation.id)
        assert stored.service == "Haircut"
        assert stored.service_id is None

    @pytest.mark.asyncio
    async def test_delete_unknown(self, init_database):
        with pytest.raises(NotFound):
            await CatalogService.delete_service(99999)
