"""Сервис управления бронированием"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from database.models import Reservation, ReservationStatus, Service
from database.repositories.reservation_repository import ReservationRepository
from database.repositories.service_repository import ServiceRepository
from services import availability
from services.availability import ServiceRef
from services.notification_service import NotificationService
from utils.datetime_utils import (
    format_date,
    is_valid_date,
    is_valid_time,
    month_range,
)
from utils.exceptions import (
    ConflictError,
    InvalidTransition,
    NotFound,
    ValidationError,
)


class BookingService:
    """Бронирование: проверка слотов перед записью в журнал

    Проверка и вставка - две отдельные операции. От гонки двух
    одновременных записей защищает уникальный индекс в БД.
    """

    def __init__(self, notification_service: Optional[NotificationService] = None):
        self.notification_service = notification_service

    @classmethod
    def from_config(cls) -> "BookingService":
        """BookingService с уведомлениями по настройкам из config"""
        return cls(NotificationService.from_config())

    async def _snapshot(self, date_str: str) -> Tuple[List[Service], List[Reservation]]:
        services = await ServiceRepository.get_all_services()
        reservations = await ReservationRepository.list(date=date_str)
        return services, reservations

    async def _resolve_service(self, service_ref: ServiceRef) -> Service:
        services = await ServiceRepository.get_all_services()
        service = availability.find_service(services, service_ref)
        if service is None:
            raise NotFound(f"Service {service_ref!r} not found")
        return service

    async def get_available_slots(
        self,
        date_str: str,
        service_ref: ServiceRef,
        exclude_reservation_id: Optional[int] = None,
    ) -> List[str]:
        """Свободные слоты услуги на дату"""
        if not is_valid_date(date_str):
            raise ValidationError(f"Invalid date: {date_str!r}")
        date_str = format_date(date_str)
        services, reservations = await self._snapshot(date_str)
        return availability.available_slots(
            reservations, services, date_str, service_ref,
            exclude_reservation_id=exclude_reservation_id,
        )

    async def create_reservation(self, fields: Dict[str, Any]) -> Reservation:
        """Создание записи клиентом или админом

        Raises:
            ValidationError: поля, день недели или время не подходят услуге
            NotFound: услуга не найдена
            ConflictError: слот уже занят

        Новая запись всегда создается в статусе pending.
        """
        service_ref = fields.get("service_id") or fields.get("service")
        if not service_ref:
            raise ValidationError("Missing required field: service")

        date_str, time_str = fields.get("date"), fields.get("time")
        if not is_valid_date(date_str):
            raise ValidationError(f"Invalid date: {date_str!r}")
        if not is_valid_time(time_str):
            raise ValidationError(f"Invalid time: {time_str!r}")
        date_str = format_date(date_str)

        service = await self._resolve_service(service_ref)
        allowed_days = availability.service_days([service], service)
        if not availability.is_date_selectable(date_str, allowed_days):
            raise ValidationError(f"Date {date_str} is not available for {service.name}")
        if time_str not in availability.service_availability([service], service):
            raise ValidationError(f"Time {time_str} is not offered for {service.name}")

        free_slots = await self.get_available_slots(date_str, service)
        if time_str not in free_slots:
            logging.info(f"Slot {date_str} {time_str} not available for {service.name}")
            raise ConflictError(f"Slot {date_str} {time_str} is already taken")

        reservation = await ReservationRepository.create({
            **fields,
            "status": ReservationStatus.PENDING,
            "service_id": service.id,
            "service": service.name,
            "date": date_str,
            "time": time_str,
        })

        await self._notify_new_reservation(reservation)
        return reservation

    async def _notify_new_reservation(self, reservation: Reservation):
        """Уведомление не должно ломать создание записи"""
        if self.notification_service is None:
            return
        try:
            await self.notification_service.notify_admin_new_reservation(reservation)
        except Exception as e:
            logging.error(f"Error notifying about reservation {reservation.id}: {e}")

    async def update_status(self, reservation_id: int, status: str) -> Reservation:
        """Смена статуса админом с проверкой перехода"""
        if not ReservationStatus.is_valid(status):
            raise ValidationError(f"Unknown status: {status!r}")

        reservation = await ReservationRepository.get(reservation_id)
        if reservation is None:
            raise NotFound(f"Reservation {reservation_id} not found")

        if reservation.status == status:
            return reservation
        if not availability.can_transition(reservation.status, status):
            raise InvalidTransition(reservation.status, status)

        return await ReservationRepository.update_status(reservation_id, status)

    async def reschedule(
        self, reservation_id: int, new_date: str, new_time: str
    ) -> Reservation:
        """Перенос записи, если новый слот свободен

        Собственный слот переносимой записи не считается занятым.
        """
        if not new_date or not new_time:
            raise ValidationError("Both date and time are required")
        if not is_valid_date(new_date):
            raise ValidationError(f"Invalid date: {new_date!r}")
        if not is_valid_time(new_time):
            raise ValidationError(f"Invalid time: {new_time!r}")
        new_date = format_date(new_date)

        reservation = await ReservationRepository.get(reservation_id)
        if reservation is None:
            raise NotFound(f"Reservation {reservation_id} not found")
        if not reservation.holds_slot:
            raise ValidationError(
                f"Reservation {reservation_id} is {reservation.status} and cannot be rescheduled"
            )

        service_ref = reservation.service_id or reservation.service
        services, reservations = await self._snapshot(new_date)
        allowed_days = availability.service_days(services, service_ref)
        if not availability.is_date_selectable(new_date, allowed_days):
            raise ValidationError(f"Date {new_date} is not available for {reservation.service}")

        free_slots = availability.available_slots(
            reservations, services, new_date, service_ref,
            exclude_reservation_id=reservation_id,
        )
        if new_time not in free_slots:
            logging.info(f"Slot {new_date} {new_time} not available for reschedule")
            raise ConflictError(f"Slot {new_date} {new_time} is not available")

        return await ReservationRepository.reschedule(reservation_id, new_date, new_time)

    async def get_reservation_by_code(self, code: str) -> Reservation:
        reservation = await ReservationRepository.get_by_code(code)
        if reservation is None:
            raise NotFound(f"Reservation {code!r} not found")
        return reservation

    async def list_reservations(
        self,
        date: Optional[str] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
    ) -> List[Reservation]:
        return await ReservationRepository.list(date=date, start=start, end=end)

    async def list_month(self, year: int, month: int) -> List[Reservation]:
        """Записи за месяц (для календаря админа)"""
        start, end = month_range(year, month)
        return await ReservationRepository.list(start=start, end=end)
