"""Расчет свободных слотов и жизненный цикл бронирования

Чистые функции над снимком услуг и бронирований, без обращения к БД.
"""

from datetime import date
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Union

from database.models import Reservation, ReservationStatus, Service
from services.catalog_service import normalize_days, normalize_times
from utils.datetime_utils import DateLike, format_date, parse_date, weekday_index
from utils.helpers import today_local

# Ссылка на услугу: объект, ID или название
ServiceRef = Union[Service, int, str]

ALLOWED_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    ReservationStatus.PENDING: frozenset(
        {ReservationStatus.APPROVED, ReservationStatus.REJECTED}
    ),
    ReservationStatus.APPROVED: frozenset(
        {ReservationStatus.COMPLETED, ReservationStatus.REJECTED}
    ),
    ReservationStatus.REJECTED: frozenset(),
    ReservationStatus.COMPLETED: frozenset(),
}


def _ref_parts(service_ref: ServiceRef):
    """(id, name) для сравнения с бронированием"""
    if isinstance(service_ref, Service):
        return service_ref.id, service_ref.name
    if isinstance(service_ref, int) and not isinstance(service_ref, bool):
        return service_ref, None
    return None, service_ref


def find_service(services: Iterable[Service], service_ref: ServiceRef) -> Optional[Service]:
    """Найти услугу: сначала по ID, затем по названию"""
    services = list(services)
    service_id, service_name = _ref_parts(service_ref)

    if service_id is not None:
        for service in services:
            if service.id == service_id:
                return service
    if service_name is not None:
        for service in services:
            if service.name == service_name:
                return service
    return None


def _matches_service(
    reservation: Reservation, service_id: Optional[int], service_name: Optional[str]
) -> bool:
    # Отвязанные бронирования сравниваются по снимку названия
    if reservation.service_id is not None and service_id is not None:
        return reservation.service_id == service_id
    return service_name is not None and reservation.service == service_name


def booked_times(
    reservations: Iterable[Reservation],
    date_value: DateLike,
    service_ref: ServiceRef,
    exclude_reservation_id: Optional[int] = None,
    services: Optional[Iterable[Service]] = None,
) -> Set[str]:
    """Занятое время на дату для услуги

    Слот удерживают бронирования в статусах pending и approved.

    Args:
        reservations: Все бронирования
        date_value: Дата YYYY-MM-DD
        service_ref: Услуга, ее ID или название
        exclude_reservation_id: Не учитывать это бронирование (для переноса)
        services: Каталог, чтобы дополнить ID названием и наоборот
    """
    target_date = format_date(date_value)
    service_id, service_name = _ref_parts(service_ref)

    if services is not None:
        service = find_service(services, service_ref)
        if service is not None:
            service_id, service_name = service.id, service.name

    return {
        reservation.time
        for reservation in reservations
        if reservation.holds_slot
        and reservation.date == target_date
        and reservation.id != exclude_reservation_id
        and _matches_service(reservation, service_id, service_name)
    }


def service_availability(services: Iterable[Service], service_ref: ServiceRef) -> List[str]:
    """Шаблон времени услуги (без учета даты)"""
    service = find_service(services, service_ref)
    return normalize_times(service.available_times if service else None)


def service_days(services: Iterable[Service], service_ref: ServiceRef) -> List[int]:
    """Дни недели услуги (0 = воскресенье)"""
    service = find_service(services, service_ref)
    return normalize_days(service.available_days if service else None)


def available_slots(
    reservations: Iterable[Reservation],
    services: Iterable[Service],
    date_value: DateLike,
    service_ref: ServiceRef,
    exclude_reservation_id: Optional[int] = None,
) -> List[str]:
    """Свободные слоты на дату в порядке, заданном услугой"""
    services = list(services)
    booked = booked_times(
        reservations, date_value, service_ref,
        exclude_reservation_id=exclude_reservation_id,
        services=services,
    )
    return [slot for slot in service_availability(services, service_ref) if slot not in booked]


def is_date_selectable(
    date_value: DateLike,
    allowed_days: Iterable[int],
    today: Optional[date] = None,
) -> bool:
    """Можно ли выбрать дату в календаре

    Наличие свободных слотов не проверяется.
    """
    today = today or today_local()
    if parse_date(date_value) < today:
        return False
    return weekday_index(date_value) in set(allowed_days)


def can_transition(current: str, new: str) -> bool:
    """Допустим ли переход статуса (тот же статус - допустим)"""
    if not ReservationStatus.is_valid(current) or not ReservationStatus.is_valid(new):
        return False
    if current == new:
        return True
    return new in ALLOWED_TRANSITIONS[current]
