"""Сервис аналитики"""

from collections import defaultdict
from typing import Dict, Iterable

from database.models import Reservation, ReservationStatus, Service
from database.repositories.reservation_repository import ReservationRepository
from database.repositories.service_repository import ServiceRepository
from services.availability import find_service
from utils.datetime_utils import month_range


def month_revenue(
    reservations: Iterable[Reservation],
    services: Iterable[Service],
    year: int,
    month: int,
) -> Dict[str, float]:
    """Выручка за месяц по услугам

    Учитываются только завершенные записи. Цена ищется по service_id,
    затем по названию; иначе 0.
    """
    services = list(services)
    start, end = month_range(year, month)
    revenue: Dict[str, float] = defaultdict(float)

    for reservation in reservations:
        if reservation.status != ReservationStatus.COMPLETED:
            continue
        if not start <= reservation.date < end:
            continue

        service = None
        if reservation.service_id is not None:
            service = find_service(services, reservation.service_id)
        if service is None:
            service = find_service(services, reservation.service)

        name = service.name if service else reservation.service
        revenue[name] += service.price if service else 0.0

    return dict(revenue)


class AnalyticsService:
    """Статистика для админ-панели"""

    @staticmethod
    async def get_month_revenue(year: int, month: int) -> Dict[str, float]:
        start, end = month_range(year, month)
        reservations = await ReservationRepository.list(start=start, end=end)
        services = await ServiceRepository.get_all_services()
        return month_revenue(reservations, services, year, month)

    @staticmethod
    async def get_status_counts(year: int, month: int) -> Dict[str, int]:
        """Количество записей по статусам за месяц"""
        start, end = month_range(year, month)
        reservations = await ReservationRepository.list(start=start, end=end)

        counts = {status: 0 for status in ReservationStatus.ALL}
        for reservation in reservations:
            counts[reservation.status] += 1
        return counts
