"""Репозиторий бронирований (журнал)"""

import logging
from typing import Any, Dict, List, Optional

import aiosqlite

from config import RESERVATION_CODE_ATTEMPTS
from database.base_repository import BaseRepository
from database.models import Reservation, ReservationStatus
from utils.exceptions import ConflictError, NotFound, ValidationError
from utils.helpers import generate_reservation_code, now_local

REQUIRED_FIELDS = ("name", "whatsapp", "service", "date", "time")


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


class ReservationRepository(BaseRepository):
    """Хранение бронирований

    Репозиторий не проверяет занятость слота: это делает BookingService.
    Последняя защита - частичный уникальный индекс в БД.
    """

    @staticmethod
    async def create(fields: Dict[str, Any]) -> Reservation:
        """Создать бронирование

        Raises:
            ValidationError: не заполнено обязательное поле
            ConflictError: слот или код бронирования уже заняты
        """
        values = {key: _clean(fields.get(key)) for key in REQUIRED_FIELDS}
        missing = [key for key, value in values.items() if not value]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        status = fields.get("status")
        if not ReservationStatus.is_valid(status):
            status = ReservationStatus.PENDING

        supplied_code = _clean(fields.get("reservation_code"))
        attempts = 1 if supplied_code else RESERVATION_CODE_ATTEMPTS

        for attempt in range(1, attempts + 1):
            code = supplied_code or generate_reservation_code()
            try:
                reservation_id = await ReservationRepository._execute_query(
                    """INSERT INTO reservations
                    (reservation_code, name, whatsapp, service_id, service,
                     date, time, status, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (code, values["name"], values["whatsapp"],
                     fields.get("service_id"), values["service"],
                     values["date"], values["time"], status,
                     now_local().isoformat()),
                    commit=True,
                )
            except aiosqlite.IntegrityError as e:
                if "reservation_code" in str(e) and attempt < attempts:
                    logging.warning(f"Reservation code collision on {code}, regenerating")
                    continue
                logging.warning(f"Integrity error creating reservation: {e}")
                if "reservation_code" in str(e):
                    raise ConflictError(f"Reservation code {code} already exists") from e
                raise ConflictError(
                    f"Slot {values['date']} {values['time']} is already taken"
                ) from e

            logging.info(f"Reservation created: {reservation_id} ({code})")
            return await ReservationRepository.get(reservation_id)

    @staticmethod
    async def get(reservation_id: int) -> Optional[Reservation]:
        """Получить бронирование по ID"""
        row = await ReservationRepository._execute_query(
            "SELECT * FROM reservations WHERE id=?", (reservation_id,), fetch_one=True
        )
        return Reservation.from_row(row) if row else None

    @staticmethod
    async def get_by_code(code: str) -> Optional[Reservation]:
        """Получить бронирование по коду клиента (без учета регистра)"""
        row = await ReservationRepository._execute_query(
            "SELECT * FROM reservations WHERE reservation_code=?",
            (_clean(code),),
            fetch_one=True,
        )
        return Reservation.from_row(row) if row else None

    @staticmethod
    async def update_status(reservation_id: int, status: str) -> Reservation:
        """Сменить статус (другие поля не меняются)"""
        if not ReservationStatus.is_valid(status):
            raise ValidationError(f"Unknown status: {status!r}")

        if not await ReservationRepository._exists(
            "reservations", "id=?", (reservation_id,)
        ):
            raise NotFound(f"Reservation {reservation_id} not found")

        try:
            await ReservationRepository._execute_query(
                "UPDATE reservations SET status=? WHERE id=?",
                (status, reservation_id),
                commit=True,
            )
        except aiosqlite.IntegrityError as e:
            # Возврат в активный статус на уже занятый слот
            logging.warning(f"Integrity error updating status of {reservation_id}: {e}")
            raise ConflictError("Slot is already taken by another reservation") from e

        logging.info(f"Reservation {reservation_id} status -> {status}")
        return await ReservationRepository.get(reservation_id)

    @staticmethod
    async def reschedule(reservation_id: int, new_date: str, new_time: str) -> Reservation:
        """Перенести бронирование (без проверки занятости)"""
        new_date, new_time = _clean(new_date), _clean(new_time)
        if not new_date or not new_time:
            raise ValidationError("Both date and time are required")

        if not await ReservationRepository._exists(
            "reservations", "id=?", (reservation_id,)
        ):
            raise NotFound(f"Reservation {reservation_id} not found")

        try:
            await ReservationRepository._execute_query(
                "UPDATE reservations SET date=?, time=? WHERE id=?",
                (new_date, new_time, reservation_id),
                commit=True,
            )
        except aiosqlite.IntegrityError as e:
            logging.warning(f"Integrity error rescheduling {reservation_id}: {e}")
            raise ConflictError(f"Slot {new_date} {new_time} is already taken") from e

        logging.info(f"Reservation {reservation_id} rescheduled to {new_date} {new_time}")
        return await ReservationRepository.get(reservation_id)

    @staticmethod
    async def list(
        date: Optional[str] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
    ) -> List[Reservation]:
        """Список бронирований по (date, time)

        Args:
            date: Точная дата
            start: Начало диапазона (включительно)
            end: Конец диапазона (не включается)
        """
        conditions, params = [], []
        if date:
            conditions.append("date=?")
            params.append(date)
        if start:
            conditions.append("date>=?")
            params.append(start)
        if end:
            conditions.append("date<?")
            params.append(end)

        query = "SELECT * FROM reservations"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY date, time, id"

        rows = await ReservationRepository._execute_query(
            query, tuple(params), fetch_all=True
        )
        return [Reservation.from_row(row) for row in rows or []]
