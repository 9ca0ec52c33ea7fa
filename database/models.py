"""Модели данных"""

import json
from dataclasses import dataclass, field
from typing import List, Optional


class ReservationStatus:
    """Статусы бронирования"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"

    ALL = (PENDING, APPROVED, REJECTED, COMPLETED)
    # Статусы, которые удерживают слот
    ACTIVE = (PENDING, APPROVED)
    TERMINAL = (REJECTED, COMPLETED)

    @classmethod
    def is_valid(cls, status) -> bool:
        return status in cls.ALL


@dataclass
class Service:
    """Модель услуги"""
    id: Optional[int]
    name: str
    duration: str
    price: float
    available_days: List[int] = field(default_factory=list)
    available_times: List[str] = field(default_factory=list)
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "Service":
        """Создание из строки aiosqlite.Row"""
        return cls(
            id=row['id'],
            name=row['name'],
            duration=row['duration'],
            price=float(row['price']),
            available_days=json.loads(row['available_days'] or "[]"),
            available_times=json.loads(row['available_times'] or "[]"),
            created_at=row['created_at'],
        )


@dataclass
class Reservation:
    """Модель бронирования

    Поле service - снимок названия услуги на момент создания.
    service_id очищается при удалении услуги, название остается.
    """
    id: Optional[int]
    reservation_code: str
    name: str
    whatsapp: str
    service: str
    date: str
    time: str
    status: str = ReservationStatus.PENDING
    service_id: Optional[int] = None
    created_at: Optional[str] = None

    @property
    def holds_slot(self) -> bool:
        """Занимает ли запись слот"""
        return self.status in ReservationStatus.ACTIVE

    @classmethod
    def from_row(cls, row) -> "Reservation":
        """Создание из строки aiosqlite.Row"""
        return cls(
            id=row['id'],
            reservation_code=row['reservation_code'],
            name=row['name'],
            whatsapp=row['whatsapp'],
            service=row['service'],
            date=row['date'],
            time=row['time'],
            status=row['status'],
            service_id=row['service_id'],
            created_at=row['created_at'],
        )
