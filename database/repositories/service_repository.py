"""Репозиторий для работы с услугами"""

import json
import logging
from typing import Any, Dict, List, Optional

import aiosqlite

from database.base_repository import BaseRepository
from database.models import Service
from utils.exceptions import ConflictError, NotFound, StorageUnavailable
from utils.helpers import now_local

# Поля модели -> колонки таблицы
_COLUMNS = {
    "name": "name",
    "duration": "duration",
    "price": "price",
    "available_days": "available_days",
    "available_times": "available_times",
}
_JSON_COLUMNS = ("available_days", "available_times")


def _to_db(field_name: str, value: Any) -> Any:
    if field_name in _JSON_COLUMNS:
        return json.dumps(list(value))
    return value


class ServiceRepository(BaseRepository):
    """Репозиторий для услуг

    Валидация и нормализация полей - в CatalogService.
    """

    @staticmethod
    async def get_all_services() -> List[Service]:
        """Получить все услуги (по названию)"""
        rows = await ServiceRepository._execute_query(
            "SELECT * FROM services ORDER BY name", fetch_all=True
        )
        return [Service.from_row(row) for row in rows or []]

    @staticmethod
    async def get_service_by_id(service_id: int) -> Optional[Service]:
        """Получить услугу по ID"""
        row = await ServiceRepository._execute_query(
            "SELECT * FROM services WHERE id=?", (service_id,), fetch_one=True
        )
        return Service.from_row(row) if row else None

    @staticmethod
    async def get_service_by_name(name: str) -> Optional[Service]:
        """Получить услугу по названию"""
        row = await ServiceRepository._execute_query(
            "SELECT * FROM services WHERE name=?", (name,), fetch_one=True
        )
        return Service.from_row(row) if row else None

    @staticmethod
    async def create_service(service: Service) -> Service:
        """Создать новую услугу"""
        created_at = now_local().isoformat()
        try:
            service_id = await ServiceRepository._execute_query(
                """INSERT INTO services
                (name, duration, price, available_days, available_times, created_at)
                VALUES (?, ?, ?, ?, ?, ?)""",
                (service.name, service.duration, service.price,
                 json.dumps(service.available_days),
                 json.dumps(service.available_times), created_at),
                commit=True,
            )
        except aiosqlite.IntegrityError as e:
            logging.warning(f"Service '{service.name}' already exists: {e}")
            raise ConflictError(f"Service '{service.name}' already exists") from e

        logging.info(f"Service created: {service_id} ({service.name})")
        return await ServiceRepository.get_service_by_id(service_id)

    @staticmethod
    async def update_service(service_id: int, updates: Dict[str, Any]) -> Service:
        """Обновить поля услуги

        При смене названия оно переносится на привязанные бронирования
        (в той же транзакции).
        """
        unknown = set(updates) - set(_COLUMNS)
        if unknown:
            raise ValueError(f"Unknown service fields: {sorted(unknown)}")

        assignments = ", ".join(f"{_COLUMNS[key]}=?" for key in updates)
        params = [_to_db(key, value) for key, value in updates.items()]

        try:
            async with ServiceRepository._connect() as db:
                await db.execute("BEGIN IMMEDIATE")
                try:
                    cursor = await db.execute(
                        f"UPDATE services SET {assignments} WHERE id=?",
                        (*params, service_id),
                    )
                    if cursor.rowcount == 0:
                        await db.rollback()
                        raise NotFound(f"Service {service_id} not found")

                    if "name" in updates:
                        await db.execute(
                            "UPDATE reservations SET service=? WHERE service_id=?",
                            (updates["name"], service_id),
                        )

                    await db.commit()
                except aiosqlite.IntegrityError as e:
                    await db.rollback()
                    logging.warning(f"Integrity error updating service {service_id}: {e}")
                    raise ConflictError("Service name already in use") from e
        except aiosqlite.Error as e:
            logging.error(f"Error in update_service: {e}")
            raise StorageUnavailable() from e

        logging.info(f"Service {service_id} updated: {sorted(updates)}")
        return await ServiceRepository.get_service_by_id(service_id)

    @staticmethod
    async def delete_service(service_id: int) -> int:
        """Удалить услугу с отвязкой бронирований

        Returns:
            Количество отвязанных бронирований
        """
        try:
            async with ServiceRepository._connect() as db:
                await db.execute("BEGIN IMMEDIATE")
                cursor = await db.execute(
                    "UPDATE reservations SET service_id=NULL WHERE service_id=?",
                    (service_id,),
                )
                detached = cursor.rowcount

                cursor = await db.execute(
                    "DELETE FROM services WHERE id=?", (service_id,)
                )
                if cursor.rowcount == 0:
                    await db.rollback()
                    raise NotFound(f"Service {service_id} not found")

                await db.commit()
        except aiosqlite.Error as e:
            logging.error(f"Error in delete_service: {e}")
            raise StorageUnavailable() from e

        logging.info(f"Service {service_id} deleted, {detached} reservations detached")
        return detached
