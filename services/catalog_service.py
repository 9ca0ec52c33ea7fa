"""Сервис каталога услуг"""

import logging
import math
from typing import Any, Dict, List, Optional

from config import DEFAULT_AVAILABLE_DAYS, DEFAULT_TIME_END, DEFAULT_TIME_START
from database.models import Service
from database.repositories.service_repository import ServiceRepository
from utils.exceptions import NotFound, ValidationError

UPDATABLE_FIELDS = ("name", "duration", "price", "available_days", "available_times")


def default_time_ladder() -> List[str]:
    """Почасовые слоты 10:00 ... 20:00"""
    return [f"{hour:02d}:00" for hour in range(DEFAULT_TIME_START, DEFAULT_TIME_END + 1)]


def _as_weekday(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not number.is_integer():
        return None
    day = int(number)
    return day if 0 <= day <= 6 else None


def normalize_days(raw) -> List[int]:
    """Оставить дни 0..6 без повторов, пустой список -> Пн-Сб"""
    if not isinstance(raw, (list, tuple, set, frozenset)):
        return list(DEFAULT_AVAILABLE_DAYS)
    days: List[int] = []
    for value in raw:
        day = _as_weekday(value)
        if day is not None and day not in days:
            days.append(day)
    return days or list(DEFAULT_AVAILABLE_DAYS)


def normalize_times(raw) -> List[str]:
    """Непустой список проходит как есть, иначе почасовая сетка"""
    if not isinstance(raw, (list, tuple)):
        return default_time_ladder()
    times = [str(value).strip() for value in raw if value is not None and str(value).strip()]
    return times or default_time_ladder()


def parse_price(raw) -> float:
    """Цена как число"""
    if isinstance(raw, bool):
        raise ValidationError(f"Invalid price: {raw!r}")
    try:
        price = float(raw)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid price: {raw!r}") from e
    if math.isnan(price):
        raise ValidationError(f"Invalid price: {raw!r}")
    return price


def _required_text(fields: Dict[str, Any], key: str) -> str:
    value = fields.get(key)
    value = value.strip() if isinstance(value, str) else ""
    if not value:
        raise ValidationError(f"Missing required field: {key}")
    return value


class CatalogService:
    """Управление услугами (админ)"""

    @staticmethod
    async def list_services() -> List[Service]:
        return await ServiceRepository.get_all_services()

    @staticmethod
    async def get_service(service_id: int) -> Service:
        service = await ServiceRepository.get_service_by_id(service_id)
        if service is None:
            raise NotFound(f"Service {service_id} not found")
        return service

    @staticmethod
    async def create_service(fields: Dict[str, Any]) -> Service:
        """Создать услугу с нормализованной доступностью"""
        service = Service(
            id=None,
            name=_required_text(fields, "name"),
            duration=_required_text(fields, "duration"),
            price=parse_price(fields.get("price")),
            available_days=normalize_days(fields.get("available_days")),
            available_times=normalize_times(fields.get("available_times")),
        )
        return await ServiceRepository.create_service(service)

    @staticmethod
    async def update_service(service_id: int, fields: Dict[str, Any]) -> Service:
        """Частичное обновление услуги

        Проверяются только переданные поля. Новое название переносится
        на привязанные бронирования.
        """
        updates: Dict[str, Any] = {}

        if fields.get("name") is not None:
            updates["name"] = _required_text(fields, "name")
        if fields.get("duration") is not None:
            updates["duration"] = _required_text(fields, "duration")
        if "price" in fields and fields["price"] is not None:
            updates["price"] = parse_price(fields["price"])
        if isinstance(fields.get("available_days"), (list, tuple)):
            updates["available_days"] = normalize_days(fields["available_days"])
        if isinstance(fields.get("available_times"), (list, tuple)):
            updates["available_times"] = normalize_times(fields["available_times"])

        if not updates:
            raise ValidationError("No fields to update")

        return await ServiceRepository.update_service(service_id, updates)

    @staticmethod
    async def delete_service(service_id: int) -> int:
        """Удалить услугу, бронирования остаются без service_id"""
        detached = await ServiceRepository.delete_service(service_id)
        logging.info(f"Service {service_id} removed from catalog")
        return detached
